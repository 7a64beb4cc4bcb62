# File: csvx/checker.py
"""
csvx - Check Pipeline (Orchestrator)
=====================================
Connects the pieces behind ``csvx check``:

    Schema filename → Schema load → per-input validation → CheckReport

Workflow::

    1. Check the schema path is a file whose name parses and names a
       schema (``<table>_<YYYYMMDD>_csvx-schema-<name>.csv``).
    2. Load the schema (fail-fast, any problem is fatal).
    3. Validate every input file against it (collect-all per file).
    4. Return a ``CheckReport`` with per-file outcomes and timings.

Error handling strategy:
    - Schema-level problems raise ``CheckError``; the caller exits 1.
    - A data file that cannot be read or split into rows gets that one
      error as its outcome; the other inputs are still checked.
    - The report gives a clear pass/fail verdict per file.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from csvx.errors import CheckError, CheckErrorKind, CsvxError, Location, SchemaLoadError, ValidationError
from csvx.models import CheckConfig, Metadata
from csvx.parsers import parse_filename
from csvx.schema import Schema
from csvx.utils import Timer

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("csvx.checker")

PathLike = Union[str, Path]


# ---------------------------------------------------------------------------
# Check report
# ---------------------------------------------------------------------------


@dataclass(frozen=False, slots=True)
class FileOutcome:
    """Result of checking one input file."""

    path: str = ""
    errors: List[CsvxError] = field(default_factory=list)
    rows_checked: int = 0
    fatal: bool = False
    elapsed_seconds: float = 0.0

    @property
    def passed(self) -> bool:
        return not self.errors


@dataclass(frozen=False, slots=True)
class CheckReport:
    """
    Report produced by ``Checker.check()``.

    Holds the loaded schema's metadata and one ``FileOutcome`` per input,
    in the order the inputs were given.
    """

    schema_path: str = ""
    schema_metadata: Optional[Metadata] = None
    column_count: int = 0
    outcomes: List[FileOutcome] = field(default_factory=list)
    total_elapsed_seconds: float = 0.0

    @property
    def all_passed(self) -> bool:
        return all(o.passed for o in self.outcomes)

    @property
    def failed(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if not o.passed]

    @property
    def total_errors(self) -> int:
        return sum(len(o.errors) for o in self.outcomes)

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "✅ PASSED" if self.all_passed else "❌ FAILED"
        lines.append(f"{'='*60}")
        lines.append("  csvx — Check Report")
        lines.append(f"{'='*60}")
        lines.append(f"  Status:        {status}")
        lines.append(f"  Schema:        {self.schema_path}")
        lines.append(f"  Columns:       {self.column_count}")
        lines.append(f"  Files checked: {len(self.outcomes)}")
        lines.append(f"  Files failed:  {len(self.failed)}")
        lines.append(f"  Errors:        {self.total_errors}")
        lines.append(f"  Total time:    {self.total_elapsed_seconds:.3f}s")
        if self.outcomes:
            lines.append(f"{'─'*60}")
            for outcome in self.outcomes:
                icon: str = "✓" if outcome.passed else "✗"
                lines.append(
                    f"    {icon} {outcome.path:<40s} "
                    f"{outcome.rows_checked:>7d} row(s)  "
                    f"{len(outcome.errors)} error(s)"
                )
        lines.append(f"{'='*60}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Config loader helpers
# ---------------------------------------------------------------------------


def _load_json_file(path: Path) -> Dict[str, Any]:
    """Load and parse a JSON file. Raises ValueError on parse errors."""
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a JSON object at top level, got {type(data).__name__}."
        )
    return data


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML file. Raises ValueError on parse errors."""
    import yaml

    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a YAML mapping at top level, got {type(data).__name__}."
        )
    return data


def load_config_file(path: Path) -> CheckConfig:
    """
    Load a ``CheckConfig`` from a YAML or JSON file.

    Dispatches on the file extension; unknown extensions are read as YAML,
    which also accepts JSON.  Settings may sit at the top level or under a
    ``check`` key.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file can't be parsed or holds invalid settings.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    raw = _load_json_file(path) if path.suffix.lower() == ".json" else _load_yaml_file(path)
    section = raw.get("check", raw)
    if not isinstance(section, dict):
        raise ValueError(f"Expected a mapping under 'check' in {path}.")

    try:
        config = CheckConfig.model_validate(section)
    except PydanticValidationError as exc:
        raise ValueError(f"Config validation failed: {exc}") from exc

    logger.info("Loaded config from %s", path)
    return config


# ---------------------------------------------------------------------------
# Checker (orchestrator)
# ---------------------------------------------------------------------------


class Checker:
    """
    Runs the ``check`` pipeline for one schema and many inputs.

    Usage::

        checker = Checker(CheckConfig())
        report = checker.check("zoo_20170401_csvx-schema-animals.csv",
                               ["zoo_20170401_animals.csv"])
        if not report.all_passed:
            ...
    """

    def __init__(self, config: Optional[CheckConfig] = None) -> None:
        self.config: CheckConfig = config or CheckConfig()

    # -- Schema -------------------------------------------------------------

    def _schema_metadata(self, schema_path: Path) -> Optional[Metadata]:
        meta = parse_filename(schema_path.name)
        if not self.config.require_schema_filename:
            return meta

        if meta is None:
            raise CheckError(CheckErrorKind.INVALID_FILENAME, detail=schema_path.name).at(
                Location.file(str(schema_path))
            )
        if not meta.has_schema_prefix(self.config.schema_prefix):
            raise CheckError(
                CheckErrorKind.NOT_A_SCHEMA,
                detail=(
                    f"not a schema, schema name {meta.schema_name!r} must "
                    f"start with {self.config.schema_prefix!r}"
                ),
            ).at(Location.file(str(schema_path)))
        return meta

    def load_schema(self, schema_path: PathLike) -> Schema:
        """
        Check the schema file's name and load it.

        Raises:
            CheckError: for any problem with the schema; always fatal.
        """
        path = Path(schema_path)
        if not path.is_file():
            raise CheckError(CheckErrorKind.SCHEMA_NOT_A_FILE).at(Location.file(str(path)))

        self._schema_metadata(path)

        try:
            return Schema.from_file(path, encoding=self.config.encoding)
        except SchemaLoadError as exc:
            raise CheckError.from_schema_error(exc) from exc

    # -- Inputs -------------------------------------------------------------

    def check_file(self, schema: Schema, input_path: PathLike) -> FileOutcome:
        """Validate one input; never raises for problems with the input itself."""
        path = Path(input_path)
        outcome = FileOutcome(path=str(path))

        with Timer(f"validate {path.name}") as t:
            if self.config.check_input_filenames and parse_filename(path.name) is None:
                outcome.errors.append(
                    CheckError(CheckErrorKind.INVALID_FILENAME, detail=path.name).at(
                        Location.file(str(path))
                    )
                )
            else:
                try:
                    result = schema.validate_file(path, encoding=self.config.encoding)
                except ValidationError as exc:
                    logger.info("Fatal error in %s: %s", path, exc.describe())
                    outcome.errors.append(exc)
                    outcome.fatal = True
                else:
                    outcome.errors.extend(result.errors)
                    outcome.rows_checked = result.rows_checked

        outcome.elapsed_seconds = t.elapsed
        return outcome

    def check(self, schema_path: PathLike, input_paths: Sequence[PathLike]) -> CheckReport:
        """
        Load *schema_path* and validate each of *input_paths* against it.

        Raises:
            CheckError: if the schema cannot be used.
        """
        report = CheckReport(schema_path=str(schema_path))

        with Timer("check") as total:
            schema = self.load_schema(schema_path)
            report.schema_metadata = parse_filename(Path(schema_path).name)
            report.column_count = len(schema)
            logger.info("Schema %s loaded with %d column(s).", schema_path, len(schema))

            for input_path in input_paths:
                outcome = self.check_file(schema, input_path)
                logger.info(
                    "%s: %s (%d error(s))",
                    outcome.path,
                    "ok" if outcome.passed else "failed",
                    len(outcome.errors),
                )
                report.outcomes.append(outcome)

        report.total_elapsed_seconds = total.elapsed
        return report


__all__: List[str] = [
    "FileOutcome",
    "CheckReport",
    "Checker",
    "load_config_file",
]
