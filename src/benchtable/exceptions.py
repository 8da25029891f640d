"""
Custom exceptions for the benchmark table generator.
"""


class BenchTableError(Exception):
    """Base exception for benchmark table errors."""
    pass


class ConfigurationError(BenchTableError):
    """Raised when the run configuration is malformed or inconsistent."""
    pass


class InputFileError(ConfigurationError):
    """Raised when an input file does not exist or cannot be read."""
    pass


class MissingNamesError(ConfigurationError):
    """Raised when names from a selection file never appear in the results."""

    def __init__(self, kind: str, names, list_file=None, results_file=None):
        self.kind = kind
        self.names = list(names)
        self.list_file = list_file
        self.results_file = results_file
        lines = [
            f"WARNING: The following {kind} in file {list_file or '<selection>'}",
            f"         do not appear in file {results_file or '<results>'}",
            "         Execution is aborted.",
            "",
        ]
        lines.extend(self.names)
        super().__init__("\n".join(lines))


class DisplayNameError(ConfigurationError):
    """Raised when the algorithm display-name table is malformed or incomplete."""
    pass


class UnknownAlgorithmError(ConfigurationError):
    """Raised when an algorithm name is not among the loaded algorithms."""
    pass


class DecimalFormatError(BenchTableError, ValueError):
    """Raised when a value string is not a decimal number."""
    pass


class EmptyResultsError(BenchTableError):
    """Raised when statistics are requested on an empty results table."""
    pass
