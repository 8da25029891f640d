"""
Comparative statistics over a seed x instance x algorithm results table.

For every algorithm h the following metrics are computed (I is the set of
instances, S the set of seeds, x^s_{h,i} the value of h on instance i and
seed s):

- FE, first equal: share of instances where sum_s x^s_{h,i} equals the best
  sum over all algorithms.
- FS, first strict: share of instances where sum_s x^s_{h,i} is strictly
  larger than the sum of every other algorithm.
- BA, best achieved: share of instances where max_s x^s_{h,i} equals the best
  value of all algorithms and seeds.
- EBA, earliest best achieved: as BA, and the best value was also reached at
  the earliest time.
- WD, MD, BD, worst/mean/best deviation:
  1 - (sum_i f_h(i) / max_{h1,s} x^s_{h1,i}) / |I| with f the minimum, the
  mean and the maximum over seeds.
- AR, average rank of h over all instances and seeds, ties sharing the
  smallest rank.

Sums are floating point, so FE and FS compare doubles. Every other
comparison is an exact comparison of the decimal strings read from the
results file, with ties on the best value broken by the smaller time.
"""

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict

import numpy as np

from .exceptions import EmptyResultsError
from .loader import ResultsTable

logger = logging.getLogger(__name__)

METRIC_NAMES = ("FE", "FS", "BA", "EBA", "WD", "MD", "BD", "AR")
PERCENTAGE_METRICS = ("FE", "FS", "BA", "EBA")


class ChampionMetric(IntEnum):
    """Per-instance criteria behind the count metrics."""
    FE = 0
    FS = 1
    BA = 2
    EBA = 3


@dataclass
class BenchmarkStatistics:
    """
    Derived tables and summary metrics.

    Matrices are shaped ``[instance, algorithm]``, per-instance vectors
    ``[instance]`` and metric vectors ``[algorithm]``. Value tables hold the
    ``DecimalString`` objects of the results table.
    """
    n_instances: int
    n_algorithms: int
    n_seeds: int
    absolute_values: bool

    sum_by_seeds: np.ndarray
    max_by_alg_sum: np.ndarray
    max_by_alg_but_one_sum: np.ndarray
    max_by_seeds: np.ndarray
    time_max_by_seeds: np.ndarray
    min_by_seeds: np.ndarray
    max_by_alg_max: np.ndarray
    time_max_by_alg_max: np.ndarray
    max_by_alg_but_one_max: np.ndarray

    fe: np.ndarray
    fs: np.ndarray
    ba: np.ndarray
    eba: np.ndarray
    wd: np.ndarray
    md: np.ndarray
    bd: np.ndarray
    ar: np.ndarray

    # Ordinals of max_by_seeds/max_by_alg_max values and times, for exact masks
    _max_ord: np.ndarray = field(repr=False, default=None)
    _time_max_ord: np.ndarray = field(repr=False, default=None)
    _best_ord: np.ndarray = field(repr=False, default=None)
    _time_best_ord: np.ndarray = field(repr=False, default=None)

    def metric(self, name: str) -> np.ndarray:
        """Metric vector by its short name (``"FE"`` ... ``"AR"``)."""
        key = name.upper()
        if key not in METRIC_NAMES:
            raise KeyError(f"Unknown metric: {name}")
        return getattr(self, key.lower())

    def metrics(self) -> Dict[str, np.ndarray]:
        return {name: self.metric(name) for name in METRIC_NAMES}

    def criterion(self, metric: ChampionMetric) -> np.ndarray:
        """
        Boolean ``[instance, algorithm]`` matrix of the instances counted by a metric.

        FE: the algorithm's seed sum equals the best sum. FS: it is strictly
        larger than every other algorithm's sum. BA: the algorithm's best value
        equals the overall best value. EBA: BA, with the same time as well.
        """
        metric = ChampionMetric(metric)
        if metric is ChampionMetric.FE:
            return self.sum_by_seeds == self.max_by_alg_sum[:, None]
        if metric is ChampionMetric.FS:
            return self.sum_by_seeds > self.max_by_alg_but_one_sum
        best = self._max_ord == self._best_ord[:, None]
        if metric is ChampionMetric.BA:
            return best
        return best & (self._time_max_ord == self._time_best_ord[:, None])


def value_ordinals(cells: np.ndarray) -> np.ndarray:
    """
    Replace decimal strings by integers with the same order.

    Equal numbers get the same ordinal whatever their spelling. The ordering
    is the exact decimal comparison, so later integer comparisons are exact
    as well.
    """
    flat = cells.ravel()
    ranking = {value: rank for rank, value in enumerate(sorted(set(flat)))}
    return np.fromiter((ranking[v] for v in flat), dtype=np.int64, count=flat.size).reshape(cells.shape)


def _select_best(value_ord: np.ndarray, time_ord: np.ndarray, axis: int):
    """
    Index along ``axis`` of the best value, ties going to the smaller time.

    On a complete tie the first index is kept.
    """
    value_ord = np.moveaxis(value_ord, axis, 0)
    time_ord = np.moveaxis(time_ord, axis, 0)
    best = np.zeros(value_ord.shape[1:], dtype=np.int64)
    best_v = value_ord[0].copy()
    best_t = time_ord[0].copy()
    for k in range(1, value_ord.shape[0]):
        better = (value_ord[k] > best_v) | ((value_ord[k] == best_v) & (time_ord[k] < best_t))
        best = np.where(better, k, best)
        best_v = np.where(better, value_ord[k], best_v)
        best_t = np.where(better, time_ord[k], best_t)
    return best


def _select_worst(value_ord: np.ndarray, axis: int):
    value_ord = np.moveaxis(value_ord, axis, 0)
    worst = np.zeros(value_ord.shape[1:], dtype=np.int64)
    worst_v = value_ord[0].copy()
    for k in range(1, value_ord.shape[0]):
        worse = value_ord[k] < worst_v
        worst = np.where(worse, k, worst)
        worst_v = np.where(worse, value_ord[k], worst_v)
    return worst


def _take(cells: np.ndarray, index: np.ndarray, axis: int) -> np.ndarray:
    return np.take_along_axis(cells, np.expand_dims(index, axis), axis=axis).squeeze(axis)


def _max_by_alg_but_one(mat: np.ndarray) -> np.ndarray:
    """For every algorithm, the maximum of ``mat`` over the other algorithms."""
    n_instances, n_algorithms = mat.shape
    out = np.full((n_instances, n_algorithms), -np.inf)
    if n_algorithms < 2:
        return out
    for h in range(n_algorithms):
        out[:, h] = np.delete(mat, h, axis=1).max(axis=1)
    return out


def _max_by_alg_but_one_values(values: np.ndarray, value_ord: np.ndarray) -> np.ndarray:
    n_instances, n_algorithms = values.shape
    out = np.full((n_instances, n_algorithms), None, dtype=object)
    if n_algorithms < 2:
        return out
    rows = np.arange(n_instances)
    for h in range(n_algorithms):
        others = np.delete(value_ord, h, axis=1).argmax(axis=1)
        columns = np.where(others >= h, others + 1, others)
        out[:, h] = values[rows, columns]
    return out


def _deviation(numerator: np.ndarray, denominator: np.ndarray, n_instances: int) -> np.ndarray:
    # Instances whose best value is not positive do not contribute.
    valid = denominator > 0
    ratios = numerator[valid] / denominator[valid][:, None]
    return 1.0 - ratios.sum(axis=0) / n_instances


def _average_rank(value_ord: np.ndarray) -> np.ndarray:
    n_seeds, n_instances, _ = value_ord.shape
    # better[s, i, h] = number of algorithms strictly better than h
    better = (value_ord[:, :, None, :] > value_ord[:, :, :, None]).sum(axis=3)
    return (1.0 + better).sum(axis=(0, 1)) / (n_seeds * n_instances)


def _to_float(cells: np.ndarray) -> np.ndarray:
    return np.array([float(v) for v in cells.ravel()], dtype=np.float64).reshape(cells.shape)


def compute_statistics(table: ResultsTable, absolute_values: bool = False) -> BenchmarkStatistics:
    """
    Compute all derived tables and metrics of a results table.

    Args:
        table: Loaded results.
        absolute_values: Leave FE, FS, BA and EBA as instance counts instead
            of fractions of the number of instances.

    Returns:
        BenchmarkStatistics holding every intermediate table and metric.

    Raises:
        EmptyResultsError: If the table has no instance, algorithm or seed.
    """
    n_seeds, n_instances, n_algorithms = table.n_seeds, table.n_instances, table.n_algorithms
    if n_seeds == 0 or n_instances == 0 or n_algorithms == 0:
        raise EmptyResultsError(
            f"No results to analyze ({n_instances} instances, {n_algorithms} algorithms, {n_seeds} seeds)"
        )

    def scaled(counts: np.ndarray) -> np.ndarray:
        counts = counts.astype(np.float64)
        return counts if absolute_values else counts / n_instances

    # Sums over seeds
    sum_by_seeds = table.numeric.sum(axis=0)
    max_by_alg_sum = sum_by_seeds.max(axis=1)
    fe_mask = sum_by_seeds == max_by_alg_sum[:, None]
    max_by_alg_but_one_sum = _max_by_alg_but_one(sum_by_seeds)
    fs_mask = sum_by_seeds > max_by_alg_but_one_sum
    logger.debug("Sum-based tables computed")

    # Best and worst seed of each instance and algorithm
    value_ord = value_ordinals(table.values)
    time_ord = value_ordinals(table.times)

    best_seed = _select_best(value_ord, time_ord, axis=0)
    max_by_seeds = _take(table.values, best_seed, axis=0)
    time_max_by_seeds = _take(table.times, best_seed, axis=0)
    max_ord = _take(value_ord, best_seed, axis=0)
    time_max_ord = _take(time_ord, best_seed, axis=0)

    worst_seed = _select_worst(value_ord, axis=0)
    min_by_seeds = _take(table.values, worst_seed, axis=0)

    # Best algorithm of each instance, same tie rule
    best_alg = _select_best(max_ord, time_max_ord, axis=1)
    max_by_alg_max = _take(max_by_seeds, best_alg, axis=1)
    time_max_by_alg_max = _take(time_max_by_seeds, best_alg, axis=1)
    best_ord = _take(max_ord, best_alg, axis=1)
    time_best_ord = _take(time_max_ord, best_alg, axis=1)

    ba_mask = max_ord == best_ord[:, None]
    eba_mask = ba_mask & (time_max_ord == time_best_ord[:, None])
    max_by_alg_but_one_max = _max_by_alg_but_one_values(max_by_seeds, max_ord)
    logger.debug("Seed extrema computed")

    denominator = _to_float(max_by_alg_max)
    wd = _deviation(_to_float(min_by_seeds), denominator, n_instances)
    md = _deviation(sum_by_seeds / n_seeds, denominator, n_instances)
    bd = _deviation(_to_float(max_by_seeds), denominator, n_instances)
    ar = _average_rank(value_ord)

    stats = BenchmarkStatistics(
        n_instances=n_instances,
        n_algorithms=n_algorithms,
        n_seeds=n_seeds,
        absolute_values=absolute_values,
        sum_by_seeds=sum_by_seeds,
        max_by_alg_sum=max_by_alg_sum,
        max_by_alg_but_one_sum=max_by_alg_but_one_sum,
        max_by_seeds=max_by_seeds,
        time_max_by_seeds=time_max_by_seeds,
        min_by_seeds=min_by_seeds,
        max_by_alg_max=max_by_alg_max,
        time_max_by_alg_max=time_max_by_alg_max,
        max_by_alg_but_one_max=max_by_alg_but_one_max,
        fe=scaled(fe_mask.sum(axis=0)),
        fs=scaled(fs_mask.sum(axis=0)),
        ba=scaled(ba_mask.sum(axis=0)),
        eba=scaled(eba_mask.sum(axis=0)),
        wd=wd,
        md=md,
        bd=bd,
        ar=ar,
        _max_ord=max_ord,
        _time_max_ord=time_max_ord,
        _best_ord=best_ord,
        _time_best_ord=time_best_ord,
    )
    logger.info("Statistics computed for %d algorithms on %d instances", n_algorithms, n_instances)
    return stats
