#!/usr/bin/env python3
"""
Command line entry points.

``benchtable`` reads a parameter file and a results file and either writes the
ranking table, the instances on which an algorithm is champion, or the
instances whose best value few algorithms find. ``benchtable-sweep`` collects
one metric over a range of time-limit scalings.

Usage:
    benchtable -p params.txt [-s <scaling>] [-a]
    benchtable -p params.txt -d difficult.txt [-l <level>]
    benchtable -p params.txt -c <algorithm> -r champion.txt [-m <metric>]
    benchtable-sweep -p params.txt --steps 20 --metric FE --output-dir plots
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import DEFAULT_DISPLAY_NAMES_FILE, read_parameter_file
from .exceptions import BenchTableError, ConfigurationError
from .loader import LoadSummary, load_results_file
from .report import (
    extract_champion_instances,
    extract_difficult_instances,
    read_display_names_file,
    write_table,
)
from .statistics import METRIC_NAMES, ChampionMetric, compute_statistics
from .sweep import scaling_sweep, write_sweep_files

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _print_load_summary(summary: LoadSummary):
    print(f"Read {summary.records_read} records.")
    print(f"{summary.skipped_instances} where skipped because uninteresting instances")
    print(f"{summary.skipped_algorithms} where skipped because uninteresting algorithms")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="benchtable",
        description="Compare optimization algorithms over a benchmark results file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  benchtable -p params.txt                      # ranking table, percentages
  benchtable -p params.txt -s 0.5 -a            # half the time budget, counts
  benchtable -p params.txt -d hard.txt -l 1     # instances solved by <= 1 algorithm
  benchtable -p params.txt -c Alg1 -r best.txt -m 2
        """,
    )
    parser.add_argument(
        "-p", "--parameters", required=True,
        help="Parameter file (results file, instance and algorithm selections, output file)",
    )
    parser.add_argument(
        "-s", "--scaling", type=float, default=None,
        help="Scale all time limits by this factor, > 0 and <= 1 (default: 1.0)",
    )
    parser.add_argument(
        "-a", "--absolute", action="store_true",
        help="Report FE, FS, BA and EBA as instance counts rather than percentages",
    )
    parser.add_argument(
        "-d", "--difficult", metavar="FILE",
        help="Write the instances whose best value is found by at most LEVEL algorithms",
    )
    parser.add_argument(
        "-l", "--level", type=int, default=None,
        help="Difficulty level for --difficult, >= 0 (default: number of algorithms / 2)",
    )
    parser.add_argument(
        "-c", "--champion", metavar="ALGORITHM",
        help="Algorithm whose winning instances are extracted",
    )
    parser.add_argument(
        "-r", "--champion-output", metavar="FILE",
        help="File receiving the instances where ALGORITHM wins",
    )
    parser.add_argument(
        "-m", "--metric", type=int, default=None,
        help="Criterion for --champion: 0 FE, 1 FS, 2 BA, 3 EBA (default: 0)",
    )
    parser.add_argument(
        "-n", "--names", default=str(DEFAULT_DISPLAY_NAMES_FILE),
        help=f"Algorithm display names, one 'name,display' per line (default: {DEFAULT_DISPLAY_NAMES_FILE})",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log progress details",
    )
    return parser


def validate_options(args: argparse.Namespace):
    """
    Check option combinations before any file is read.

    Raises:
        ConfigurationError: On the first inconsistent option.
    """
    if args.level is not None and args.difficult is None:
        raise ConfigurationError("Option -l requires option -d <file_name>")
    if args.difficult is not None and (args.scaling is not None or args.absolute):
        raise ConfigurationError("Option -d is not compatible with options -s and -a")
    if args.champion_output is not None and args.champion is None:
        raise ConfigurationError("Option -r <file_name> requires option -c <algorithm>")
    if args.champion is not None and args.champion_output is None:
        raise ConfigurationError("Option -c <algorithm> requires option -r <file_name>")
    if args.metric is not None:
        if args.champion is None or args.champion_output is None:
            raise ConfigurationError("Option -m requires options -c <algorithm> and -r <file_name>")
        if not 0 <= args.metric <= 3:
            raise ConfigurationError("<metric> value must be between 0 and 3")
    if args.scaling is not None and not 0.0 < args.scaling <= 1.0:
        raise ConfigurationError("time scaling must be > 0 and <= 1.0")


def run(args: argparse.Namespace) -> int:
    validate_options(args)
    scaling = 1.0 if args.scaling is None else args.scaling

    params = read_parameter_file(args.parameters)
    if args.difficult is not None:
        params = params.with_all_instances()

    table = load_results_file(params, time_limit_scaling=scaling)
    _print_load_summary(table.summary)
    print("END OF INPUT")

    if args.difficult is not None:
        result = extract_difficult_instances(table, level=args.level)
        result.write(args.difficult)
        print(f"Rejected: {result.rejected}")
        print(f"Accepted: {result.accepted_count}")
        return 0

    print("START STATISTICS")
    stats = compute_statistics(table, absolute_values=args.absolute)
    if args.champion is not None:
        metric = ChampionMetric.FE if args.metric is None else args.metric
        result = extract_champion_instances(stats, table, args.champion, metric)
        result.write(args.champion_output)
        print(f"Rejected: {result.rejected}")
        print(f"Accepted: {result.accepted_count}")
    else:
        display_names = read_display_names_file(args.names)
        write_table(stats, table, params.output_file, display_names)
    print("END STATISTICS")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point of the ``benchtable`` command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        return run(args)
    except BenchTableError as e:
        print(f"*** {e}", file=sys.stderr)
        return 1


def build_sweep_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="benchtable-sweep",
        description="Collect one table column for increasing time-limit scalings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  benchtable-sweep -p params.txt --steps 20 --metric FE --output-dir plots
  benchtable-sweep -p params.txt --steps 10 --metric BD --csv bd_sweep.csv
        """,
    )
    parser.add_argument("-p", "--parameters", required=True, help="Parameter file")
    parser.add_argument("--steps", type=int, default=20, help="Number of scalings (default: 20)")
    parser.add_argument(
        "--metric", default="FE", type=str.upper, choices=METRIC_NAMES,
        help="Table column to collect (default: FE)",
    )
    parser.add_argument("-a", "--absolute", action="store_true", help="Count metrics as instance counts")
    parser.add_argument(
        "-n", "--names", default=None,
        help="Algorithm display names file (default: use the algorithm names)",
    )
    parser.add_argument("--output-dir", help="Write one <algorithm>.dat file per algorithm here")
    parser.add_argument("--csv", help="Write the whole sweep as a CSV file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress details")
    return parser


def sweep_main(argv: Optional[List[str]] = None) -> int:
    """Entry point of the ``benchtable-sweep`` command."""
    parser = build_sweep_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        params = read_parameter_file(args.parameters)
        display_names = read_display_names_file(args.names) if args.names else None
        sweep = scaling_sweep(
            params, args.steps, metric=args.metric,
            display_names=display_names, absolute_values=args.absolute,
        )
    except BenchTableError as e:
        print(f"*** {e}", file=sys.stderr)
        return 1

    if args.output_dir:
        written = write_sweep_files(sweep, args.output_dir, args.metric, args.absolute)
        print(f"Wrote {len(written)} files to {args.output_dir}")
    if args.csv:
        sweep.to_csv(args.csv, lineterminator="\n")
        print(f"Sweep saved to {args.csv}")
    if not args.output_dir and not args.csv:
        print(sweep.to_string())
    return 0


if __name__ == "__main__":
    sys.exit(main())
