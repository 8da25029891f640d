"""
Ranking table output and instance extraction queries.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Dict, List, Optional, Union

import pandas as pd

from .config import open_input
from .decimal_string import ZERO
from .exceptions import ConfigurationError, DisplayNameError, UnknownAlgorithmError
from .loader import ResultsTable
from .statistics import METRIC_NAMES, PERCENTAGE_METRICS, BenchmarkStatistics, ChampionMetric

logger = logging.getLogger(__name__)

TABLE_HEADER = ("Heuristic",) + METRIC_NAMES
DEVIATION_METRICS = ("WD", "MD", "BD")

Output = Union[str, Path, IO[str]]


def ranking_order(stats: BenchmarkStatistics) -> List[int]:
    """
    Algorithm indices in table order.

    Sorted by FE descending, then MD descending, then original index.
    """
    return sorted(
        range(stats.n_algorithms),
        key=lambda h: (-stats.fe[h], -stats.md[h], h),
    )


def read_display_names(stream: IO[str]) -> Dict[str, str]:
    """
    Read ``name,displayname`` lines.

    Raises:
        DisplayNameError: On a line without a comma or a repeated name.
    """
    names = {}
    for n_line, line in enumerate(stream, start=1):
        line = line.rstrip("\r\n")
        key, sep, display = line.partition(",")
        if not sep or key in names:
            raise DisplayNameError(f"Error at line {n_line}) {line}")
        names[key] = display
    return names


def read_display_names_file(path: Union[str, Path]) -> Dict[str, str]:
    with open_input(path) as f:
        return read_display_names(f)


def _display_name(name: str, display_names: Optional[Dict[str, str]]) -> str:
    if display_names is None:
        return name
    try:
        return display_names[name]
    except KeyError:
        raise DisplayNameError(f"Algorithm {name} has no display name")


def metrics_frame(
    stats: BenchmarkStatistics,
    table: ResultsTable,
    display_names: Optional[Dict[str, str]] = None,
) -> pd.DataFrame:
    """
    Ranked summary table as numbers.

    Count metrics are percentages unless the statistics were computed with
    absolute values; deviations are percentages; AR is left as is.

    Args:
        stats: Computed statistics.
        table: The results table the statistics were computed from.
        display_names: Optional mapping from algorithm names to the names
            shown in the table. Every algorithm must be present.
    """
    rows = []
    for h in ranking_order(stats):
        row = {"Heuristic": _display_name(table.algorithms.name(h), display_names)}
        for name in PERCENTAGE_METRICS:
            value = stats.metric(name)[h]
            row[name] = value if stats.absolute_values else value * 100
        for name in DEVIATION_METRICS:
            row[name] = stats.metric(name)[h] * 100
        row["AR"] = stats.ar[h]
        rows.append(row)
    return pd.DataFrame(rows, columns=list(TABLE_HEADER))


def metric_format(name: str, absolute_values: bool = False) -> str:
    """Format string of a table column."""
    if name in PERCENTAGE_METRICS:
        return "{:.0f}" if absolute_values else "{:.1f}"
    if name in DEVIATION_METRICS:
        return "{:.2f}"
    return "{:.1f}"


def format_table(frame: pd.DataFrame, absolute_values: bool = False) -> pd.DataFrame:
    """Fixed-point string rendition of a ``metrics_frame``."""
    formatted = pd.DataFrame({"Heuristic": frame["Heuristic"]})
    for name in METRIC_NAMES:
        formatted[name] = frame[name].map(metric_format(name, absolute_values).format)
    return formatted


def write_table(
    stats: BenchmarkStatistics,
    table: ResultsTable,
    output: Output,
    display_names: Optional[Dict[str, str]] = None,
) -> pd.DataFrame:
    """
    Write the ranking table as CSV.

    Returns:
        The formatted table that was written.
    """
    formatted = format_table(metrics_frame(stats, table, display_names), stats.absolute_values)
    formatted.to_csv(output, index=False, lineterminator="\n")
    logger.info("Table with %d algorithms written to %s", len(formatted), output)
    return formatted


@dataclass
class ExtractionResult:
    """Instances selected by an extraction query."""
    accepted: List[str] = field(default_factory=list)
    rejected: int = 0

    @property
    def accepted_count(self) -> int:
        return len(self.accepted)

    def write(self, output: Output):
        """Write the accepted instance names, one per line."""
        text = "".join(f"{name}\n" for name in self.accepted)
        if isinstance(output, (str, Path)):
            Path(output).write_text(text)
        else:
            output.write(text)


def extract_difficult_instances(table: ResultsTable, level: Optional[int] = None) -> ExtractionResult:
    """
    Select the instances whose best value is found by few algorithms.

    An algorithm finds the best value of an instance when all its seeds
    report the largest value observed on that instance (never below zero).
    Instances where more than ``level`` algorithms do so are rejected.

    Args:
        table: Loaded results.
        level: Maximum number of algorithms; ``None`` or a negative value
            means half the number of algorithms.
    """
    if level is None or level < 0:
        threshold = table.n_algorithms / 2.0
    else:
        threshold = level

    result = ExtractionResult()
    for i, instance in enumerate(table.instances):
        cells = table.values[:, i, :]
        best = max([ZERO] + list(cells.ravel()))
        count = sum(
            1 for h in range(table.n_algorithms)
            if all(value == best for value in cells[:, h])
        )
        if count > threshold:
            result.rejected += 1
        else:
            result.accepted.append(instance)
    return result


def extract_champion_instances(
    stats: BenchmarkStatistics,
    table: ResultsTable,
    algorithm: str,
    metric: Union[ChampionMetric, int] = ChampionMetric.FE,
) -> ExtractionResult:
    """
    Select the instances on which an algorithm meets a metric's criterion.

    Args:
        stats: Computed statistics.
        table: The results table the statistics were computed from.
        algorithm: Algorithm name as found in the results.
        metric: FE (0), FS (1), BA (2) or EBA (3).

    Raises:
        UnknownAlgorithmError: If the algorithm is not in the results.
    """
    h = table.algorithms.get(algorithm)
    if h is None:
        raise UnknownAlgorithmError(f"Algorithm {algorithm} does not exist!")

    try:
        metric = ChampionMetric(metric)
    except ValueError:
        raise ConfigurationError(f"<metric> value must be between 0 and 3, got {metric}")

    mask = stats.criterion(metric)[:, h]
    result = ExtractionResult()
    for i, instance in enumerate(table.instances):
        if mask[i]:
            result.accepted.append(instance)
        else:
            result.rejected += 1
    return result
