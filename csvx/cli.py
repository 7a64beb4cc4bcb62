# File: csvx/cli.py
"""
csvx - Command-Line Interface
==============================

CLI built with the standard-library ``argparse`` module.

Usage examples::

    # Check data files against a schema
    python -m csvx check zoo_20170401_csvx-schema-animals.csv \\
        zoo_20170401_animals.csv zoo_20170402_animals.csv

    # Show only the first 10 errors per file, with debug logging
    python -m csvx -vv check --max-errors 10 SCHEMA INPUT...

    # Settings from a file (YAML or JSON), CLI flags still win
    python -m csvx --config csvx.yaml check SCHEMA INPUT...

    # Render a schema as Markdown
    python -m csvx pretty zoo_20170401_csvx-schema-animals.csv -o animals.md

Exit codes:
    0 — success, every input file conforms
    1 — fatal error (bad schema, bad config, unreadable schema)
    2 — at least one input file failed validation
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, NoReturn, Optional, Sequence

from csvx.errors import CsvxError
from csvx.models import CheckConfig

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("csvx")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_FATAL: int = 1
EXIT_VALIDATION_FAILED: int = 2

OK_MARK: str = "✓"
FAIL_MARK: str = "✗"


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the root csvx logger based on verbosity level.

    Args:
        verbosity: -1 = silent, 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
    datefmt: str = "%H:%M:%S"
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root_logger: logging.Logger = logging.getLogger("csvx")
    root_logger.setLevel(level)

    # Remove existing handlers to prevent duplication
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False
    root_logger.disabled = verbosity < 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from csvx import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="csvx",
        description=(
            "csvx — schema checker for CSV files.\n\n"
            "Validates data files against a csvx schema file and renders "
            "schemas as documentation."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s check zoo_20170401_csvx-schema-animals.csv zoo_20170401_animals.csv\n"
            "  %(prog)s --config csvx.yaml check SCHEMA INPUT...\n"
            "  %(prog)s pretty zoo_20170401_csvx-schema-animals.csv -o animals.md\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"csvx v{__version__}",
    )
    parser.add_argument(
        "-c", "--config",
        type=str,
        default=None,
        metavar="PATH",
        help="Settings file (YAML or JSON). CLI flags override its values.",
    )

    # --- Verbosity ---
    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress log output.",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # --- check ---
    check = subparsers.add_parser(
        "check",
        help="Check csvx files for conformance.",
        description="Check input files against a csvx schema.",
    )
    check.add_argument("schema", metavar="SCHEMA", help="Schema file to check against.")
    check.add_argument(
        "inputs",
        metavar="INPUT",
        nargs="*",
        help="Input files to check.",
    )
    check_group = check.add_argument_group("configuration overrides")
    check_group.add_argument(
        "--encoding",
        type=str,
        default=None,
        metavar="NAME",
        help="Text encoding of schema and input files (default utf-8).",
    )
    check_group.add_argument(
        "--schema-prefix",
        type=str,
        default=None,
        metavar="PREFIX",
        help="Schema-name prefix that marks a file as a schema.",
    )
    check_group.add_argument(
        "--max-errors",
        type=int,
        default=None,
        metavar="N",
        help="Show at most N errors per file (0 = all).",
    )
    check_group.add_argument(
        "--no-schema-filename-check",
        action="store_true",
        default=False,
        help="Accept a schema file whatever its name.",
    )
    check_group.add_argument(
        "--check-input-filenames",
        action="store_true",
        default=False,
        help="Fail input files whose names are not csvx filenames.",
    )
    check_group.add_argument(
        "--summary",
        action="store_true",
        default=False,
        help="Print a summary report after the per-file results.",
    )

    # --- pretty ---
    pretty = subparsers.add_parser(
        "pretty",
        help="Render a schema as Markdown.",
        description="Render a csvx schema as Markdown documentation.",
    )
    pretty.add_argument("schema", metavar="SCHEMA", help="Schema file to render.")
    pretty.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        metavar="PATH",
        help="Write to PATH instead of standard output.",
    )
    pretty.add_argument(
        "--encoding",
        type=str,
        default=None,
        metavar="NAME",
        help="Text encoding of the schema file (default utf-8).",
    )

    return parser


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


def _build_config_overrides(args: argparse.Namespace) -> Dict[str, object]:
    """Build a config override dictionary from CLI arguments."""
    overrides: Dict[str, object] = {}

    if getattr(args, "encoding", None) is not None:
        overrides["encoding"] = args.encoding

    if getattr(args, "schema_prefix", None) is not None:
        overrides["schema_prefix"] = args.schema_prefix

    if getattr(args, "max_errors", None) is not None:
        overrides["max_errors_per_file"] = args.max_errors

    if getattr(args, "no_schema_filename_check", False):
        overrides["require_schema_filename"] = False

    if getattr(args, "check_input_filenames", False):
        overrides["check_input_filenames"] = True

    return overrides


def _resolve_config(args: argparse.Namespace) -> CheckConfig:
    """Defaults, then ``--config``, then CLI flags.  Raises ValueError."""
    from csvx.checker import load_config_file

    config = CheckConfig()
    if args.config is not None:
        config = load_config_file(Path(args.config))

    overrides = _build_config_overrides(args)
    if overrides:
        try:
            config = config.merged(overrides)
        except ValueError as exc:
            raise ValueError(f"Invalid option: {exc}") from exc
    return config


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------


def _print_errors(errors: Sequence[CsvxError], limit: int) -> None:
    shown = errors if limit <= 0 else errors[:limit]
    for err in shown:
        print(f"    {err.describe()}")
    hidden = len(errors) - len(shown)
    if hidden > 0:
        print(f"    … {hidden} more error(s) not shown")


def _print_fatal(err: CsvxError) -> None:
    print(f"{FAIL_MARK} {err.describe()}", file=sys.stderr)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _run_check(args: argparse.Namespace) -> int:
    """
    Run the ``check`` command.

    Returns the appropriate exit code.
    """
    from csvx.checker import Checker, CheckReport

    try:
        config = _resolve_config(args)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Failed to load config: %s", exc)
        return EXIT_FATAL

    logger.info("Schema:  %s", args.schema)
    logger.info("Inputs:  %d file(s)", len(args.inputs))

    try:
        report: CheckReport = Checker(config).check(args.schema, args.inputs)
    except CsvxError as exc:
        _print_fatal(exc)
        return EXIT_FATAL

    print(f"{OK_MARK} {report.schema_path}")
    for outcome in report.outcomes:
        if outcome.passed:
            print(f"{OK_MARK} {outcome.path}")
            continue
        print(f"{FAIL_MARK} {outcome.path}")
        _print_errors(outcome.errors, config.max_errors_per_file)

    if args.summary:
        print(report.summary())

    return EXIT_SUCCESS if report.all_passed else EXIT_VALIDATION_FAILED


def _run_pretty(args: argparse.Namespace) -> int:
    """
    Run the ``pretty`` command.

    Returns the appropriate exit code.
    """
    from csvx.docs import render_markdown
    from csvx.parsers import parse_filename
    from csvx.schema import Schema
    from csvx.utils import write_file

    try:
        config = _resolve_config(args)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("Failed to load config: %s", exc)
        return EXIT_FATAL

    schema_path = Path(args.schema)
    try:
        schema = Schema.from_file(schema_path, encoding=config.encoding)
    except CsvxError as exc:
        _print_fatal(exc)
        return EXIT_FATAL

    text = render_markdown(
        schema,
        metadata=parse_filename(schema_path.name),
        schema_prefix=config.schema_prefix,
    )

    if args.output is None:
        sys.stdout.write(text)
        return EXIT_SUCCESS

    try:
        write_file(Path(args.output), text)
    except OSError as exc:
        logger.error("Failed to write %s: %s", args.output, exc)
        return EXIT_FATAL
    logger.info("Wrote %s", args.output)
    return EXIT_SUCCESS


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Parse *argv* and run the selected command.

    Returns the process exit code instead of exiting, for testing.
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    verbosity: int = -1 if args.quiet else args.verbose
    _setup_logging(verbosity)

    if args.command == "check":
        return _run_check(args)
    if args.command == "pretty":
        return _run_pretty(args)

    parser.print_help(sys.stdout)
    return EXIT_SUCCESS


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Console-script entry point.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    sys.exit(main(argv))


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "main",
    "cli_main",
    "EXIT_SUCCESS",
    "EXIT_FATAL",
    "EXIT_VALIDATION_FAILED",
]
