"""
Metric curves over a range of time-limit scalings.

The results are reloaded for the scalings 1/steps, 2/steps, ..., 1 and one
table column is collected per algorithm, giving the data behind a
"metric versus time budget" plot.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

import pandas as pd

from .config import RunParameters
from .exceptions import ConfigurationError
from .loader import load_results_file
from .report import metric_format, metrics_frame
from .statistics import METRIC_NAMES, compute_statistics

logger = logging.getLogger(__name__)


def scaling_sweep(
    params: RunParameters,
    steps: int,
    metric: str = "FE",
    display_names: Optional[Dict[str, str]] = None,
    absolute_values: bool = False,
) -> pd.DataFrame:
    """
    Collect one metric for every algorithm at increasing time scalings.

    Args:
        params: Parameter file contents (results file and selections).
        steps: Number of scalings; step ``i`` uses scaling ``i / steps``.
        metric: Table column to collect (``"FE"`` ... ``"AR"``).
        display_names: Optional algorithm display names.
        absolute_values: Count metrics as instance counts.

    Returns:
        DataFrame indexed by step (1..steps) with one column per algorithm,
        holding the values as they appear in the table, and a ``scaling``
        column.
    """
    metric = metric.upper()
    if metric not in METRIC_NAMES:
        raise ConfigurationError(f"Unknown metric {metric}; expected one of {', '.join(METRIC_NAMES)}")
    if steps < 1:
        raise ConfigurationError(f"The number of steps must be positive, got {steps}")

    rows = {}
    for step in range(1, steps + 1):
        scaling = step / steps
        table = load_results_file(params, time_limit_scaling=scaling)
        stats = compute_statistics(table, absolute_values=absolute_values)
        frame = metrics_frame(stats, table, display_names)
        row = dict(zip(frame["Heuristic"], frame[metric]))
        row["scaling"] = scaling
        rows[step] = row
        logger.debug("Sweep step %d/%d (scaling %.3f) done", step, steps, scaling)

    sweep = pd.DataFrame.from_dict(rows, orient="index")
    sweep.index.name = "step"
    return sweep[["scaling"] + [c for c in sweep.columns if c != "scaling"]]


def write_sweep_files(
    sweep: pd.DataFrame,
    directory: Union[str, Path],
    metric: str = "FE",
    absolute_values: bool = False,
) -> List[Path]:
    """
    Write one ``<algorithm>.dat`` file per algorithm with ``step value`` lines.

    Returns:
        Paths of the written files.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    fmt = metric_format(metric.upper(), absolute_values)
    written = []
    for column in sweep.columns:
        if column == "scaling":
            continue
        path = directory / f"{column}.dat"
        lines = [f"{step} {fmt.format(value)}\n" for step, value in sweep[column].items()]
        path.write_text("".join(lines))
        written.append(path)
    return written
