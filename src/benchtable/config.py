"""
Run configuration: the parameter file and the instance/algorithm selections.

The parameter file holds, in this strict order and possibly spread over
several lines:

- the name of the results file;
- ``all_instances`` or ``some_instances`` followed by the instance list file;
- ``all_algorithms`` or ``some_algorithms`` followed by the algorithm list file;
- the name of the output file.

Selection files list one name per line. Blank lines and lines starting with
``#`` are skipped, so a name can be switched off by prefixing it with ``#``.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterable, List, Optional, Union

from .exceptions import ConfigurationError, InputFileError

logger = logging.getLogger(__name__)

ALL_INSTANCES = "all_instances"
SOME_INSTANCES = "some_instances"
ALL_ALGORITHMS = "all_algorithms"
SOME_ALGORITHMS = "some_algorithms"

DEFAULT_DISPLAY_NAMES_FILE = Path("data/Alg_names.csv")

PathLike = Union[str, Path]


@dataclass(frozen=True)
class RunParameters:
    """Contents of a parameter file."""
    results_file: Path
    output_file: Path
    instance_names_file: Optional[Path] = None
    algorithm_names_file: Optional[Path] = None

    @property
    def some_instances(self) -> bool:
        return self.instance_names_file is not None

    @property
    def some_algorithms(self) -> bool:
        return self.algorithm_names_file is not None

    def with_all_instances(self) -> "RunParameters":
        """Copy of these parameters with the instance selection dropped."""
        return RunParameters(
            results_file=self.results_file,
            output_file=self.output_file,
            instance_names_file=None,
            algorithm_names_file=self.algorithm_names_file,
        )


def open_input(path: PathLike, description: str = "File") -> IO[str]:
    """
    Open a text input file, turning OS errors into ``InputFileError``.

    Args:
        path: File to open.
        description: Label used in the error message.
    """
    try:
        return open(path, "r", newline="")
    except OSError as e:
        raise InputFileError(f"{description} {path} does not exist or cannot be read ({e.strerror})")


def parse_parameters(tokens: Iterable[str], source: str = "<parameters>") -> RunParameters:
    """
    Build ``RunParameters`` from the whitespace-separated tokens of a parameter file.

    Raises:
        ConfigurationError: If a keyword is wrong or a name is missing.
    """
    it = iter(tokens)

    def next_token(what: str) -> str:
        try:
            return next(it)
        except StopIteration:
            raise ConfigurationError(f"The {what} is missing in parameter file {source}")

    results_file = next_token("results file name")

    instance_set = next_token(f'string "{ALL_INSTANCES}" or "{SOME_INSTANCES}"')
    instance_names_file = None
    if instance_set == SOME_INSTANCES:
        instance_names_file = Path(next_token("instance list file name"))
    elif instance_set != ALL_INSTANCES:
        raise ConfigurationError(
            f'String "{ALL_INSTANCES}" or "{SOME_INSTANCES}" missing in parameter file {source}'
        )

    algorithm_set = next_token(f'string "{ALL_ALGORITHMS}" or "{SOME_ALGORITHMS}"')
    algorithm_names_file = None
    if algorithm_set == SOME_ALGORITHMS:
        algorithm_names_file = Path(next_token("algorithm list file name"))
    elif algorithm_set != ALL_ALGORITHMS:
        raise ConfigurationError(
            f'String "{ALL_ALGORITHMS}" or "{SOME_ALGORITHMS}" missing in parameter file {source}'
        )

    output_file = next_token("output file name")

    return RunParameters(
        results_file=Path(results_file),
        output_file=Path(output_file),
        instance_names_file=instance_names_file,
        algorithm_names_file=algorithm_names_file,
    )


def read_parameter_file(path: PathLike) -> RunParameters:
    """Read and validate a parameter file."""
    with open_input(path, "Parameter file") as f:
        tokens = f.read().split()
    params = parse_parameters(tokens, source=str(path))
    logger.debug("Parameters from %s: %s", path, params)
    return params


def read_name_list(stream: IO[str]) -> List[str]:
    """
    Read a selection file: one name per line, in declaration order.

    Blank lines and ``#`` comments are skipped, MS-DOS line endings are
    tolerated and repeated names are kept once.
    """
    names = []
    seen = set()
    for line in stream:
        line = line.rstrip("\n")
        cut = line.find("\r")
        if cut != -1:
            line = line[:cut]
        line = line.strip(" ")
        if not line or line.startswith("#"):
            continue
        if line not in seen:
            seen.add(line)
            names.append(line)
    return names


def read_name_list_file(path: PathLike) -> List[str]:
    """Open and read a selection file."""
    with open_input(path) as f:
        return read_name_list(f)
