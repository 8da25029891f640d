"""
Loading of raw benchmark results into a seed x instance x algorithm table.

The results file is a comma-separated table with a header line. Columns are
positional::

    timestamp, instance, algorithm, seed, time_limit, objective[, time][, history]

When the history column is present it overrides the objective and time
columns with the value reached within the (scaled) time limit. A repeated
(seed, instance, algorithm) triple overwrites the earlier record.
"""

import logging
from dataclasses import dataclass, field
from typing import IO, Dict, Iterable, Iterator, List, Optional, Tuple

import numpy as np

from .config import RunParameters, open_input, read_name_list_file
from .decimal_string import ZERO, DecimalString
from .exceptions import DecimalFormatError, MissingNamesError
from .history import value_at_time_limit

logger = logging.getLogger(__name__)

DELIMITER = ","

# Column positions in the results file
COL_INSTANCE = 1
COL_ALGORITHM = 2
COL_SEED = 3
COL_TIME_LIMIT = 4
COL_OBJECTIVE = 5
COL_TIME = 6
COL_HISTORY = 7


class NameIndex:
    """
    Bidirectional mapping between names and dense integer indices.

    Indices are handed out in first-seen order. A frozen index is built from
    a selection list and refuses new names.
    """

    def __init__(self, names: Iterable[str] = (), frozen: bool = False):
        self._index: Dict[str, int] = {}
        self._names: List[str] = []
        self.frozen = False
        for name in names:
            self.intern(name)
        self.frozen = frozen

    @classmethod
    def restricted(cls, names: Iterable[str]) -> "NameIndex":
        """Frozen index whose indices follow the declaration order of ``names``."""
        return cls(names, frozen=True)

    def intern(self, name: str) -> int:
        """Return the index of ``name``, adding it if absent."""
        idx = self._index.get(name)
        if idx is None:
            if self.frozen:
                raise KeyError(name)
            idx = len(self._names)
            self._index[name] = idx
            self._names.append(name)
        return idx

    def index(self, name: str) -> int:
        return self._index[name]

    def get(self, name: str, default: Optional[int] = None) -> Optional[int]:
        return self._index.get(name, default)

    def name(self, idx: int) -> str:
        return self._names[idx]

    @property
    def names(self) -> List[str]:
        return list(self._names)

    def __contains__(self, name) -> bool:
        return name in self._index

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __repr__(self) -> str:
        return f"NameIndex({self._names!r}, frozen={self.frozen})"


@dataclass
class LoadSummary:
    """Counters collected while reading a results file."""
    records_read: int = 0
    skipped_instances: int = 0
    skipped_algorithms: int = 0


@dataclass
class ResultsTable:
    """
    Results indexed by ``[seed][instance][algorithm]``.

    ``values`` and ``times`` hold ``DecimalString`` objects, ``numeric`` the
    same values as floats for the sum-based statistics. Cells without a
    record hold value ``"0"`` and time ``"0"``.
    """
    instances: NameIndex
    algorithms: NameIndex
    seeds: NameIndex
    values: np.ndarray
    times: np.ndarray
    numeric: np.ndarray
    summary: LoadSummary = field(default_factory=LoadSummary)

    @property
    def n_seeds(self) -> int:
        return len(self.seeds)

    @property
    def n_instances(self) -> int:
        return len(self.instances)

    @property
    def n_algorithms(self) -> int:
        return len(self.algorithms)

    def cell(self, seed: str, instance: str, algorithm: str) -> Tuple[DecimalString, DecimalString]:
        """Value and time recorded for the given seed, instance and algorithm names."""
        s = self.seeds.index(seed)
        i = self.instances.index(instance)
        h = self.algorithms.index(algorithm)
        return self.values[s, i, h], self.times[s, i, h]


def _check_all_used(index: NameIndex, used, kind: str, list_file, results_file):
    missing = [name for name in index if index.index(name) not in used]
    if missing:
        raise MissingNamesError(kind, missing, list_file=list_file, results_file=results_file)


def load_results(
    stream: IO[str],
    instance_names: Optional[Iterable[str]] = None,
    algorithm_names: Optional[Iterable[str]] = None,
    time_limit_scaling: float = 1.0,
    instance_names_file=None,
    algorithm_names_file=None,
    results_name=None,
) -> ResultsTable:
    """
    Read a results stream into a ``ResultsTable``.

    Args:
        stream: Open results file; the first line is a header and is skipped.
        instance_names: Optional instance selection. Records for other
            instances are counted and dropped, and indices follow this order.
        algorithm_names: Optional algorithm selection, same semantics.
        time_limit_scaling: Factor in (0, 1] applied to the time limit before
            looking up the history column.
        instance_names_file: Name of the instance selection file (messages only).
        algorithm_names_file: Name of the algorithm selection file (messages only).
        results_name: Name of the results file (messages only).

    Returns:
        The loaded table, with its ``LoadSummary``.

    Raises:
        MissingNamesError: If a selected name never appears in the results.
        DecimalFormatError: If a record is too short or holds a non-numeric value.
    """
    if instance_names is None:
        instances = NameIndex()
    else:
        instances = NameIndex.restricted(instance_names)
    if algorithm_names is None:
        algorithms = NameIndex()
    else:
        algorithms = NameIndex.restricted(algorithm_names)
    seeds = NameIndex()

    summary = LoadSummary()
    used_instances = set()
    used_algorithms = set()
    cells: Dict[Tuple[int, int, int], Tuple[str, str]] = {}

    stream_name = results_name or getattr(stream, "name", "<results>")
    next(stream, None)  # header

    for line_no, line in enumerate(stream, start=2):
        line = line.rstrip("\r\n")
        if not line.strip():
            continue
        summary.records_read += 1
        fields = line.split(DELIMITER)
        if len(fields) <= COL_TIME_LIMIT:
            raise DecimalFormatError(
                f"{stream_name}, line {line_no}: expected at least {COL_TIME_LIMIT + 1} columns"
            )

        instance = fields[COL_INSTANCE]
        if instances.frozen:
            inst = instances.get(instance)
            if inst is None:
                summary.skipped_instances += 1
                continue
            used_instances.add(inst)
        else:
            inst = instances.intern(instance)

        algorithm = fields[COL_ALGORITHM]
        if algorithms.frozen:
            alg = algorithms.get(algorithm)
            if alg is None:
                summary.skipped_algorithms += 1
                continue
            used_algorithms.add(alg)
        else:
            alg = algorithms.intern(algorithm)

        seed = seeds.intern(fields[COL_SEED])

        # The time limit doubles as the objective when the objective column is absent.
        try:
            limit = float(fields[COL_TIME_LIMIT]) * time_limit_scaling
        except ValueError:
            raise DecimalFormatError(
                f"{stream_name}, line {line_no}: invalid time limit {fields[COL_TIME_LIMIT]!r}"
            )
        value = fields[COL_TIME_LIMIT]
        if len(fields) > COL_OBJECTIVE:
            value = fields[COL_OBJECTIVE]
        time = fields[COL_TIME] if len(fields) > COL_TIME else "0"

        if len(fields) > COL_HISTORY and fields[COL_HISTORY].strip():
            point = value_at_time_limit(fields[COL_HISTORY], limit)
            if not point.is_terminal:
                value, time = point.value, point.time

        cells[(seed, inst, alg)] = (value, time)

    if instances.frozen:
        _check_all_used(instances, used_instances, "instances", instance_names_file, stream_name)
    if algorithms.frozen:
        _check_all_used(algorithms, used_algorithms, "algorithms", algorithm_names_file, stream_name)

    shape = (len(seeds), len(instances), len(algorithms))
    values = np.full(shape, ZERO, dtype=object)
    times = np.full(shape, ZERO, dtype=object)
    numeric = np.zeros(shape, dtype=np.float64)

    for (s, i, h), (value, time) in cells.items():
        try:
            decimal_value = DecimalString(value)
            decimal_time = DecimalString(time)
        except DecimalFormatError as e:
            raise DecimalFormatError(
                f"{stream_name}: seed {seeds.name(s)}, instance {instances.name(i)}, "
                f"algorithm {algorithms.name(h)}: {e}"
            )
        values[s, i, h] = decimal_value
        times[s, i, h] = decimal_time
        numeric[s, i, h] = float(decimal_value)

    logger.info(
        "Loaded %d records: %d seeds, %d instances, %d algorithms",
        summary.records_read, shape[0], shape[1], shape[2],
    )
    if summary.skipped_instances or summary.skipped_algorithms:
        logger.debug(
            "Skipped %d records for unselected instances and %d for unselected algorithms",
            summary.skipped_instances, summary.skipped_algorithms,
        )

    return ResultsTable(
        instances=instances,
        algorithms=algorithms,
        seeds=seeds,
        values=values,
        times=times,
        numeric=numeric,
        summary=summary,
    )


def load_results_file(
    params: RunParameters,
    time_limit_scaling: float = 1.0,
) -> ResultsTable:
    """
    Load the results named by a parameter file, applying its selections.

    Args:
        params: Parsed parameter file.
        time_limit_scaling: Factor in (0, 1] applied to the time limits.
    """
    instance_names = None
    if params.some_instances:
        instance_names = read_name_list_file(params.instance_names_file)
    algorithm_names = None
    if params.some_algorithms:
        algorithm_names = read_name_list_file(params.algorithm_names_file)

    with open_input(params.results_file) as f:
        return load_results(
            f,
            instance_names=instance_names,
            algorithm_names=algorithm_names,
            time_limit_scaling=time_limit_scaling,
            instance_names_file=params.instance_names_file,
            algorithm_names_file=params.algorithm_names_file,
            results_name=params.results_file,
        )
