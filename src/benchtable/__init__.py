"""
Benchmark table generator for optimization algorithms.

This package reads the results of several algorithms run on a set of
instances with several random seeds and compares them:
1. Values are compared exactly as decimal strings, never through floats
2. Progress histories are cut at a (scaled) time limit
3. A ranking table of FE, FS, BA, EBA, WD, MD, BD and AR is produced

The package also extracts the "difficult" instances and the instances on
which a given algorithm is champion.
"""

from .config import RunParameters, read_name_list_file, read_parameter_file
from .decimal_string import DecimalString, compare_decimal_strings
from .exceptions import (
    BenchTableError,
    ConfigurationError,
    DecimalFormatError,
    DisplayNameError,
    EmptyResultsError,
    InputFileError,
    MissingNamesError,
    UnknownAlgorithmError,
)
from .history import HistoryPoint, value_at_time_limit
from .loader import LoadSummary, NameIndex, ResultsTable, load_results, load_results_file
from .report import (
    ExtractionResult,
    extract_champion_instances,
    extract_difficult_instances,
    metrics_frame,
    ranking_order,
    read_display_names_file,
    write_table,
)
from .statistics import METRIC_NAMES, BenchmarkStatistics, ChampionMetric, compute_statistics
from .sweep import scaling_sweep, write_sweep_files

__version__ = "0.1.0"
__all__ = [
    # Decimal values and histories
    "DecimalString",
    "compare_decimal_strings",
    "HistoryPoint",
    "value_at_time_limit",
    # Configuration and loading
    "RunParameters",
    "read_parameter_file",
    "read_name_list_file",
    "NameIndex",
    "LoadSummary",
    "ResultsTable",
    "load_results",
    "load_results_file",
    # Statistics
    "METRIC_NAMES",
    "ChampionMetric",
    "BenchmarkStatistics",
    "compute_statistics",
    # Reports and extraction
    "ranking_order",
    "metrics_frame",
    "write_table",
    "read_display_names_file",
    "ExtractionResult",
    "extract_difficult_instances",
    "extract_champion_instances",
    "scaling_sweep",
    "write_sweep_files",
    # Errors
    "BenchTableError",
    "ConfigurationError",
    "InputFileError",
    "MissingNamesError",
    "DisplayNameError",
    "UnknownAlgorithmError",
    "DecimalFormatError",
    "EmptyResultsError",
]
