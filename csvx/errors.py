# File: csvx/errors.py
"""
csvx - Error Model & Locations
================================
Every failure the engine reports is one of a small, closed set of kinds,
grouped into families:

    ColumnTypeError        — a type literal could not be parsed
    ColumnConstraintsError — a constraint string could not be parsed
    CellValueError         — a single cell does not conform to its column
    SchemaLoadError        — a schema file could not be loaded (fail-fast)
    ValidationError        — a data file does not conform (collect-all)
    CheckError             — the ``check`` command refused its inputs

Each family is one exception class carrying a ``kind`` enum member plus
payload.  An optional ``Location`` is attached with ``.at(location)``,
which returns the same instance, so a raised or collected error *is* an
error-at-location.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("csvx.errors")


# ---------------------------------------------------------------------------
# Location
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Location:
    """
    Where an error was found.

    One of four shapes, decided by which fields are set:
    unspecified, file, file + line, file + line + field.  Errors from
    single-row access carry only a field.
    Lines are CSV record numbers with the header as record 1.  Blank lines
    are not counted, and a quoted field spanning several physical lines
    stays one record.  Fields are 1-based.
    """

    path: Optional[str] = None
    line: Optional[int] = None
    field: Optional[int] = None

    @classmethod
    def unspecified(cls) -> "Location":
        return cls()

    @classmethod
    def file(cls, path: str) -> "Location":
        return cls(path=str(path))

    @classmethod
    def file_line(cls, path: str, line: int) -> "Location":
        return cls(path=str(path), line=line)

    @classmethod
    def file_line_field(cls, path: str, line: int, field: int) -> "Location":
        return cls(path=str(path), line=line, field=field)

    @classmethod
    def row_field(cls, field: int) -> "Location":
        return cls(field=field)

    @property
    def is_unspecified(self) -> bool:
        return self.path is None and self.field is None

    def __str__(self) -> str:
        if self.path is None:
            # field-only locations come from single-row access
            return "<unspecified>" if self.field is None else f"field {self.field}"
        if self.line is None:
            return self.path
        if self.field is None:
            return f"{self.path}:{self.line}"
        return f"{self.path}:{self.line}:{self.field}"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.path is not None:
            data["path"] = self.path
        if self.line is not None:
            data["line"] = self.line
        if self.field is not None:
            data["field"] = self.field
        return data


# ---------------------------------------------------------------------------
# Error kinds
# ---------------------------------------------------------------------------


class ColumnTypeErrorKind(str, Enum):
    UNKNOWN_TYPE = "unknown_type"
    BAD_ENUM = "bad_enum"


class ConstraintErrorKind(str, Enum):
    MALFORMED_CONSTRAINTS = "malformed_constraints"
    UNKNOWN_CONSTRAINT = "unknown_constraint"


class ValueErrorKind(str, Enum):
    NON_NULLABLE = "non_nullable"
    INVALID_BOOL = "invalid_bool"
    INVALID_INT = "invalid_int"
    INVALID_ENUM = "invalid_enum"
    INVALID_DECIMAL = "invalid_decimal"
    INVALID_DATE = "invalid_date"
    INVALID_DATETIME = "invalid_datetime"
    INVALID_TIME = "invalid_time"


class SchemaLoadErrorKind(str, Enum):
    IO = "io"
    CSV = "csv"
    MISSING_HEADER = "missing_header"
    BAD_HEADER = "bad_header"
    BAD_IDENTIFIER = "bad_identifier"
    BAD_TYPE = "bad_type"
    BAD_CONSTRAINTS = "bad_constraints"


class ValidationErrorKind(str, Enum):
    IO = "io"
    CSV = "csv"
    MISSING_HEADERS = "missing_headers"
    HEADER_MISMATCH = "header_mismatch"
    ROW_LENGTH_MISMATCH = "row_length_mismatch"
    VALUE_ERROR = "value_error"
    SCHEMA_MISMATCH = "schema_mismatch"


class CheckErrorKind(str, Enum):
    SCHEMA_NOT_A_FILE = "schema_not_a_file"
    INVALID_FILENAME = "invalid_filename"
    NOT_A_SCHEMA = "not_a_schema"
    SCHEMA_LOAD = "schema_load"


# ---------------------------------------------------------------------------
# Exception families
# ---------------------------------------------------------------------------


class CsvxError(Exception):
    """
    Base class for every error the package raises or collects.

    Subclasses set ``kind`` and implement ``_describe()``; location
    handling and serialisation live here.
    """

    kind: Enum

    def __init__(self, kind: Enum, detail: str = "") -> None:
        self.kind = kind
        self.detail: str = detail
        self.location: Location = Location.unspecified()
        super().__init__(self._describe())

    def at(self, location: Location) -> "CsvxError":
        """Attach *location* and return ``self``."""
        self.location = location
        return self

    def _describe(self) -> str:
        return self.detail or self.kind.value.replace("_", " ")

    def describe(self) -> str:
        """One-line human-readable message, prefixed with the location."""
        if self.location.is_unspecified:
            return self._describe()
        return f"{self.location}: {self._describe()}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "kind": self.kind.value,
            "message": self._describe(),
            "location": self.location.to_dict(),
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CsvxError):
            return NotImplemented
        return type(self) is type(other) and self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.kind, self.location))

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.kind.value} at {self.location}>"


class ColumnTypeError(CsvxError):
    """A type literal is not a known type, or is a malformed ``ENUM(...)``."""

    def __init__(self, kind: ColumnTypeErrorKind, raw: str) -> None:
        self.raw: str = raw
        super().__init__(kind)

    def _describe(self) -> str:
        if self.kind is ColumnTypeErrorKind.BAD_ENUM:
            return (
                f"malformed enum type {self.raw!r}, expected ENUM(A,B,...) "
                "with uppercase variants"
            )
        return f"unknown type {self.raw!r}"


class ColumnConstraintsError(CsvxError):
    """A constraint string is malformed or names an unknown constraint."""

    def __init__(self, kind: ConstraintErrorKind, raw: str) -> None:
        self.raw: str = raw
        super().__init__(kind)

    def _describe(self) -> str:
        if self.kind is ConstraintErrorKind.UNKNOWN_CONSTRAINT:
            return (
                f"unknown constraint in {self.raw!r}, "
                "allowed constraints are NULLABLE and UNIQUE"
            )
        return f"malformed constraints {self.raw!r}"


class CellValueError(CsvxError):
    """A raw cell does not conform to its column's type or nullability."""

    def __init__(
        self,
        kind: ValueErrorKind,
        raw: str = "",
        variants: Sequence[str] = (),
    ) -> None:
        self.raw: str = raw
        self.variants: List[str] = list(variants)
        super().__init__(kind)

    def _describe(self) -> str:
        k = self.kind
        if k is ValueErrorKind.NON_NULLABLE:
            return "empty value in a column that is not NULLABLE"
        if k is ValueErrorKind.INVALID_BOOL:
            return f"invalid bool {self.raw!r}, expected TRUE or FALSE"
        if k is ValueErrorKind.INVALID_INT:
            return f"invalid integer {self.raw!r}"
        if k is ValueErrorKind.INVALID_ENUM:
            return (
                f"invalid enum value {self.raw!r}, "
                f"expected one of: {', '.join(self.variants)}"
            )
        if k is ValueErrorKind.INVALID_DECIMAL:
            return f"invalid decimal {self.raw!r}, expected digits with optional .fraction"
        if k is ValueErrorKind.INVALID_DATE:
            return f"invalid date {self.raw!r}, expected YYYYMMDD"
        if k is ValueErrorKind.INVALID_DATETIME:
            return f"invalid datetime {self.raw!r}, expected YYYYMMDDHHMMSS"
        return f"invalid time {self.raw!r}, expected HHMMSS"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["raw"] = self.raw
        if self.variants:
            data["variants"] = list(self.variants)
        return data


class SchemaLoadError(CsvxError):
    """
    The schema file could not be loaded.

    ``cause`` holds the nested type/constraint error for ``BAD_TYPE`` and
    ``BAD_CONSTRAINTS``; ``raw`` holds the offending identifier for
    ``BAD_IDENTIFIER``.
    """

    def __init__(
        self,
        kind: SchemaLoadErrorKind,
        raw: str = "",
        cause: Optional[CsvxError] = None,
        detail: str = "",
    ) -> None:
        self.raw: str = raw
        self.cause: Optional[CsvxError] = cause
        super().__init__(kind, detail)

    def _describe(self) -> str:
        k = self.kind
        if k is SchemaLoadErrorKind.MISSING_HEADER:
            return "schema is empty, expected header id,type,constraints,description"
        if k is SchemaLoadErrorKind.BAD_HEADER:
            return "bad schema header, expected exactly id,type,constraints,description"
        if k is SchemaLoadErrorKind.BAD_IDENTIFIER:
            return (
                f"bad column identifier {self.raw!r}, expected lowercase "
                "letters, digits and underscores starting with a letter"
            )
        if k in (SchemaLoadErrorKind.BAD_TYPE, SchemaLoadErrorKind.BAD_CONSTRAINTS):
            return self.cause._describe() if self.cause is not None else k.value
        return self.detail or k.value

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.cause is not None:
            data["cause"] = self.cause.to_dict()
        return data


class ValidationError(CsvxError):
    """
    A data file does not conform to its schema.

    ``VALUE_ERROR`` wraps a ``CellValueError`` in ``cause``;
    ``HEADER_MISMATCH`` carries the actual header text in ``raw``.
    """

    def __init__(
        self,
        kind: ValidationErrorKind,
        raw: str = "",
        cause: Optional[CellValueError] = None,
        detail: str = "",
    ) -> None:
        self.raw: str = raw
        self.cause: Optional[CellValueError] = cause
        super().__init__(kind, detail)

    @classmethod
    def from_value_error(cls, err: CellValueError) -> "ValidationError":
        return cls(ValidationErrorKind.VALUE_ERROR, raw=err.raw, cause=err)

    def _describe(self) -> str:
        k = self.kind
        if k is ValidationErrorKind.MISSING_HEADERS:
            return self.detail or "header field count does not match the schema"
        if k is ValidationErrorKind.HEADER_MISMATCH:
            return self.detail or f"unexpected header {self.raw!r}"
        if k is ValidationErrorKind.VALUE_ERROR and self.cause is not None:
            return self.cause._describe()
        return self.detail or k.value.replace("_", " ")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.cause is not None:
            data["cause"] = self.cause.to_dict()
        return data


class CheckError(CsvxError):
    """The ``check`` command cannot proceed (fatal, exit status 1)."""

    def __init__(
        self,
        kind: CheckErrorKind,
        detail: str = "",
        cause: Optional[CsvxError] = None,
    ) -> None:
        self.cause: Optional[CsvxError] = cause
        super().__init__(kind, detail)

    @classmethod
    def from_schema_error(cls, err: SchemaLoadError) -> "CheckError":
        return cls(CheckErrorKind.SCHEMA_LOAD, cause=err).at(err.location)  # type: ignore[return-value]

    def _describe(self) -> str:
        k = self.kind
        if k is CheckErrorKind.SCHEMA_LOAD and self.cause is not None:
            return self.cause._describe()
        if k is CheckErrorKind.SCHEMA_NOT_A_FILE:
            return "schema path is not a file"
        if k is CheckErrorKind.INVALID_FILENAME:
            return (
                f"invalid csvx filename {self.detail!r}, expected "
                "<table>_<YYYYMMDD>_<schema>.csv"
            )
        if k is CheckErrorKind.NOT_A_SCHEMA:
            return self.detail or "file is not a schema, its schema name must start with 'csvx-schema-'"
        return self.detail or k.value


__all__: List[str] = [
    "Location",
    "ColumnTypeErrorKind",
    "ConstraintErrorKind",
    "ValueErrorKind",
    "SchemaLoadErrorKind",
    "ValidationErrorKind",
    "CheckErrorKind",
    "CsvxError",
    "ColumnTypeError",
    "ColumnConstraintsError",
    "CellValueError",
    "SchemaLoadError",
    "ValidationError",
    "CheckError",
]
