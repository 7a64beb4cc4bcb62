# File: csvx/models.py
"""
csvx - Core Data Models
========================
Pydantic V2 models for the schema side of csvx (column types, constraints,
column specifications, filename metadata, check configuration) and the
lightweight ``Value`` container produced when a cell is decoded.

All schema models are frozen: a schema is built once and then shared
read-only across any number of file validations.
"""

from __future__ import annotations

import datetime as dt
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("csvx.models")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SCHEMA_PREFIX: str = "csvx-schema-"

# Identifier grammars; the parsers check these first and report typed
# errors, the model fields only guard the invariant.
IDENT_PATTERN: str = r"^[a-z][a-z0-9-]*$"
IDENT_UNDERSCORE_PATTERN: str = r"^[a-z][a-z0-9_]*$"
ENUM_VARIANT_PATTERN: str = r"^[A-Z][A-Z0-9]*$"

_ENUM_VARIANT_RE: re.Pattern[str] = re.compile(ENUM_VARIANT_PATTERN)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ColumnKind(str, Enum):
    """The closed set of column types."""

    STRING = "STRING"
    BOOL = "BOOL"
    INTEGER = "INTEGER"
    ENUM = "ENUM"
    DECIMAL = "DECIMAL"
    DATE = "DATE"
    DATETIME = "DATETIME"
    TIME = "TIME"


# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_FROZEN_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    frozen=True,
    extra="forbid",
    populate_by_name=True,
)


# ---------------------------------------------------------------------------
# Column type
# ---------------------------------------------------------------------------


class ColumnType(BaseModel):
    """
    A column's type.

    ``variants`` is the ordered list of allowed tokens and is non-empty
    exactly when ``kind`` is ``ENUM``.  Order matters: a cell's decoded
    value is the ordinal of its variant, so ``ENUM(A,B)`` and ``ENUM(B,A)``
    are different types.
    """

    model_config = _FROZEN_CONFIG

    kind: ColumnKind = Field(..., description="Type family.")
    variants: Tuple[str, ...] = Field(
        default=(), description="Ordered enum variants (ENUM only)."
    )

    @field_validator("variants")
    @classmethod
    def _variant_tokens(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        for token in v:
            if not _ENUM_VARIANT_RE.match(token):
                raise ValueError(f"Invalid enum variant: {token!r}")
        return v

    @model_validator(mode="after")
    def _variants_match_kind(self) -> "ColumnType":
        if self.kind is ColumnKind.ENUM and not self.variants:
            raise ValueError("ENUM type requires at least one variant.")
        if self.kind is not ColumnKind.ENUM and self.variants:
            raise ValueError(f"{self.kind.value} type takes no variants.")
        return self

    @classmethod
    def of(cls, kind: ColumnKind) -> "ColumnType":
        return cls(kind=kind)

    @classmethod
    def enum(cls, variants: List[str]) -> "ColumnType":
        return cls(kind=ColumnKind.ENUM, variants=tuple(variants))

    @property
    def is_enum(self) -> bool:
        return self.kind is ColumnKind.ENUM

    def ordinal(self, token: str) -> Optional[int]:
        """Position of *token* among the variants, first match wins."""
        try:
            return self.variants.index(token)
        except ValueError:
            return None

    def __str__(self) -> str:
        if self.kind is ColumnKind.ENUM:
            return f"ENUM({','.join(self.variants)})"
        return self.kind.value


# ---------------------------------------------------------------------------
# Constraints
# ---------------------------------------------------------------------------


class ColumnConstraints(BaseModel):
    """Column flags.  ``unique`` is recorded but not enforced across rows."""

    model_config = _FROZEN_CONFIG

    nullable: bool = Field(default=False, description="Empty cells decode to null.")
    unique: bool = Field(default=False, description="Values should be unique.")

    def __str__(self) -> str:
        parts: List[str] = []
        if self.nullable:
            parts.append("NULLABLE")
        if self.unique:
            parts.append("UNIQUE")
        return ",".join(parts)


# ---------------------------------------------------------------------------
# Column specification
# ---------------------------------------------------------------------------


class ColumnSpec(BaseModel):
    """One row of a schema file: a named, typed, constrained column."""

    model_config = _FROZEN_CONFIG

    id: str = Field(..., pattern=IDENT_UNDERSCORE_PATTERN, description="Column name.")
    column_type: ColumnType = Field(..., description="Column type.")
    constraints: ColumnConstraints = Field(
        default_factory=ColumnConstraints, description="Column flags."
    )
    description: str = Field(default="", description="Free text, copied verbatim.")

    @property
    def nullable(self) -> bool:
        return self.constraints.nullable

    def validate_value(self, raw: str) -> Optional["Value"]:
        """Decode *raw* for this column; see ``csvx.validators.validate_value``."""
        from csvx.validators import validate_value

        return validate_value(self, raw)

    def __repr__(self) -> str:
        return f"<ColumnSpec {self.id}: {self.column_type} [{self.constraints}]>"


# ---------------------------------------------------------------------------
# Filename metadata
# ---------------------------------------------------------------------------


class Metadata(BaseModel):
    """Structured form of a ``<table>_<YYYYMMDD>_<schema>.csv`` filename."""

    model_config = _FROZEN_CONFIG

    table_name: str = Field(..., pattern=IDENT_PATTERN)
    date: dt.date
    schema_name: str = Field(..., pattern=IDENT_PATTERN)

    def has_schema_prefix(self, prefix: str = SCHEMA_PREFIX) -> bool:
        return self.schema_name.startswith(prefix)

    @property
    def is_schema(self) -> bool:
        """True when this file is itself a schema definition."""
        return self.has_schema_prefix(SCHEMA_PREFIX)

    def filename(self) -> str:
        return f"{self.table_name}_{self.date:%Y%m%d}_{self.schema_name}.csv"


# ---------------------------------------------------------------------------
# Decoded cell value
# ---------------------------------------------------------------------------

Scalar = Union[str, bool, int, dt.date, dt.datetime, dt.time]


@dataclass(frozen=True, slots=True)
class Value:
    """
    A decoded, non-null cell.

    ``data`` holds: ``str`` for STRING and DECIMAL (decimal text is kept
    verbatim), ``bool``, ``int`` for INTEGER, the variant ordinal for
    ENUM, and ``datetime.date``/``datetime``/``time`` for the calendar
    kinds.
    """

    kind: ColumnKind
    data: Scalar

    def as_str(self) -> Optional[str]:
        if self.kind in (ColumnKind.STRING, ColumnKind.DECIMAL):
            return self.data  # type: ignore[return-value]
        return None

    def as_bool(self) -> Optional[bool]:
        return self.data if self.kind is ColumnKind.BOOL else None  # type: ignore[return-value]

    def as_int(self) -> Optional[int]:
        return self.data if self.kind is ColumnKind.INTEGER else None  # type: ignore[return-value]

    def as_ordinal(self) -> Optional[int]:
        return self.data if self.kind is ColumnKind.ENUM else None  # type: ignore[return-value]

    def as_date(self) -> Optional[dt.date]:
        return self.data if self.kind is ColumnKind.DATE else None  # type: ignore[return-value]

    def as_datetime(self) -> Optional[dt.datetime]:
        return self.data if self.kind is ColumnKind.DATETIME else None  # type: ignore[return-value]

    def as_time(self) -> Optional[dt.time]:
        return self.data if self.kind is ColumnKind.TIME else None  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# Check configuration
# ---------------------------------------------------------------------------


class CheckConfig(BaseModel):
    """
    Settings for the ``check`` and ``pretty`` commands.

    Loaded from defaults, then an optional YAML/JSON file, then CLI flags.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    encoding: str = Field(default="utf-8", min_length=1, description="Text encoding of input files.")
    schema_prefix: str = Field(
        default=SCHEMA_PREFIX,
        min_length=1,
        description="Schema-name prefix that marks a file as a schema.",
    )
    require_schema_filename: bool = Field(
        default=True,
        description="Schema file name must parse and name a schema.",
    )
    check_input_filenames: bool = Field(
        default=False,
        description="Data file names must parse as csvx filenames.",
    )
    max_errors_per_file: int = Field(
        default=0, ge=0, description="Diagnostics shown per file (0 = all)."
    )

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, v: str) -> str:
        import codecs

        try:
            codecs.lookup(v)
        except LookupError as exc:
            raise ValueError(f"Unknown encoding: {v!r}") from exc
        return v

    def merged(self, overrides: Dict[str, Any]) -> "CheckConfig":
        """Return a copy with *overrides* applied and re-validated."""
        data = self.model_dump()
        data.update(overrides)
        return CheckConfig.model_validate(data)


__all__: List[str] = [
    "SCHEMA_PREFIX",
    "ColumnKind",
    "ColumnType",
    "ColumnConstraints",
    "ColumnSpec",
    "Metadata",
    "Value",
    "CheckConfig",
]
