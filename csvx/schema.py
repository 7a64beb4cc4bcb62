# File: csvx/schema.py
"""
csvx - Schema Loading
======================
A schema is itself a CSV file with the exact header
``id,type,constraints,description`` and one row per column::

    id,type,constraints,description
    name,STRING,,"animal name"
    legs,INTEGER,NULLABLE,"number of legs"
    kind,"ENUM(MAMMAL,BIRD)",,

Loading is fail-fast: the first problem aborts the load with a single
located ``SchemaLoadError`` and no partial schema.  The resulting
``Schema`` is immutable and can validate any number of data files.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from csvx.errors import (
    ColumnConstraintsError,
    ColumnTypeError,
    Location,
    SchemaLoadError,
    SchemaLoadErrorKind,
    ValidationError,
    ValidationErrorKind,
)
from csvx.models import ColumnSpec, Value
from csvx.parsers import is_column_identifier, parse_column_type, parse_constraints
from csvx.utils import iter_records, read_text
from csvx.validators import FileValidationResult, parse_row, read_field, validate_text

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("csvx.schema")

SCHEMA_HEADER: Tuple[str, str, str, str] = ("id", "type", "constraints", "description")

PathLike = Union[str, Path]


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


class Schema(BaseModel):
    """
    Ordered column specifications.

    Column order is significant: column *n* of the schema describes field
    *n* of every data file.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    columns: Tuple[ColumnSpec, ...] = Field(default=(), description="Columns in file order.")
    source: Optional[str] = Field(default=None, description="Schema file path, if any.")

    # -- Construction -------------------------------------------------------

    @classmethod
    def from_string(cls, text: str, filename: str = "<string>") -> "Schema":
        """Parse schema *text*; *filename* is only used in error locations."""
        return parse_schema(text, filename)

    @classmethod
    def from_file(cls, path: PathLike, encoding: str = "utf-8") -> "Schema":
        """
        Read and parse the schema at *path*.

        Raises:
            SchemaLoadError: ``IO`` if the file cannot be read or decoded,
                otherwise whatever ``parse_schema`` raises.
        """
        path_s = str(path)
        try:
            text = read_text(Path(path), encoding)
        except (OSError, UnicodeDecodeError, LookupError) as exc:
            raise SchemaLoadError(SchemaLoadErrorKind.IO, detail=str(exc)).at(
                Location.file(path_s)
            ) from exc
        return parse_schema(text, path_s)

    # -- Columns ------------------------------------------------------------

    def iter_columns(self) -> Iterator[ColumnSpec]:
        return iter(self.columns)

    @property
    def column_names(self) -> List[str]:
        return [c.id for c in self.columns]

    def column_index(self, name: str) -> Optional[int]:
        """0-based position of column *name*, first match wins."""
        for idx, col in enumerate(self.columns):
            if col.id == name:
                return idx
        return None

    def __len__(self) -> int:
        return len(self.columns)

    # -- Validation ---------------------------------------------------------

    def validate_string(self, text: str, filename: str = "<string>") -> FileValidationResult:
        """Validate data file *text*; see ``csvx.validators.validate_text``."""
        return validate_text(self.columns, text, filename)

    def validate_file(self, path: PathLike, encoding: str = "utf-8") -> FileValidationResult:
        """
        Read and validate the data file at *path*.

        Raises:
            ValidationError: ``IO`` if the file cannot be read or decoded,
                ``CSV``/``ROW_LENGTH_MISMATCH`` if it cannot be split into rows.
        """
        path_s = str(path)
        try:
            text = read_text(Path(path), encoding)
        except (OSError, UnicodeDecodeError, LookupError) as exc:
            raise ValidationError(ValidationErrorKind.IO, detail=str(exc)).at(
                Location.file(path_s)
            ) from exc
        return validate_text(self.columns, text, path_s)

    # -- Row access ---------------------------------------------------------

    def parse_row(self, fields: Sequence[str]) -> List[Optional[Value]]:
        return parse_row(self.columns, fields)

    def read_field(self, fields: Sequence[str], idx: int) -> Optional[Value]:
        return read_field(self.columns, fields, idx)

    def read_field_by_name(self, fields: Sequence[str], name: str) -> Optional[Value]:
        idx = self.column_index(name)
        if idx is None:
            raise ValidationError(
                ValidationErrorKind.SCHEMA_MISMATCH,
                detail=f"schema has no column {name!r}",
            )
        return read_field(self.columns, fields, idx)

    def __repr__(self) -> str:
        return f"<Schema {len(self.columns)} columns: {', '.join(self.column_names)}>"


# ---------------------------------------------------------------------------
# SchemaParser
# ---------------------------------------------------------------------------


def _next_record(records: Iterator[List[str]], path: str, line: int) -> Optional[List[str]]:
    try:
        return next(records, None)
    except csv.Error as exc:
        raise SchemaLoadError(
            SchemaLoadErrorKind.CSV, detail=f"malformed CSV: {exc}"
        ).at(Location.file_line(path, line)) from exc


def _parse_column(fields: List[str], path: str, line: int) -> ColumnSpec:
    if len(fields) != len(SCHEMA_HEADER):
        raise SchemaLoadError(
            SchemaLoadErrorKind.CSV,
            detail=f"expected {len(SCHEMA_HEADER)} fields, found {len(fields)}",
        ).at(Location.file_line(path, line))

    ident, raw_type, raw_constraints, description = fields

    if not is_column_identifier(ident):
        raise SchemaLoadError(SchemaLoadErrorKind.BAD_IDENTIFIER, raw=ident).at(
            Location.file_line_field(path, line, 1)
        )

    try:
        column_type = parse_column_type(raw_type)
    except ColumnTypeError as exc:
        raise SchemaLoadError(SchemaLoadErrorKind.BAD_TYPE, raw=raw_type, cause=exc).at(
            Location.file_line_field(path, line, 2)
        ) from exc

    try:
        constraints = parse_constraints(raw_constraints)
    except ColumnConstraintsError as exc:
        raise SchemaLoadError(
            SchemaLoadErrorKind.BAD_CONSTRAINTS, raw=raw_constraints, cause=exc
        ).at(Location.file_line_field(path, line, 3)) from exc

    return ColumnSpec(
        id=ident,
        column_type=column_type,
        constraints=constraints,
        description=description,
    )


def parse_schema(text: str, path: str = "<string>") -> Schema:
    """
    Parse schema CSV *text* into a ``Schema``.

    Raises:
        SchemaLoadError: on the first problem found, located at the
            offending line (and field, for identifier/type/constraints).
    """
    records = iter_records(text)

    header = _next_record(records, path, 1)
    if header is None:
        raise SchemaLoadError(SchemaLoadErrorKind.MISSING_HEADER).at(
            Location.file_line(path, 1)
        )
    if tuple(header) != SCHEMA_HEADER:
        raise SchemaLoadError(SchemaLoadErrorKind.BAD_HEADER).at(
            Location.file_line(path, 1)
        )

    columns: List[ColumnSpec] = []
    line = 1
    while True:
        line += 1
        fields = _next_record(records, path, line)
        if fields is None:
            break
        columns.append(_parse_column(fields, path, line))

    logger.debug("Loaded schema %s with %d column(s).", path, len(columns))
    return Schema(columns=tuple(columns), source=None if path == "<string>" else path)


__all__: List[str] = [
    "SCHEMA_HEADER",
    "Schema",
    "parse_schema",
]
