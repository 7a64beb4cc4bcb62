# File: csvx/parsers.py
"""
csvx - Grammar Parsers
=======================
The fixed grammars of csvx, compiled once at import time, and the three
small parsers built on them:

    parse_filename      — ``zoo-nyc_20170401_animals.csv`` → ``Metadata``
    parse_column_type   — ``ENUM(A,B)`` → ``ColumnType``
    parse_constraints   — ``NULLABLE,UNIQUE`` → ``ColumnConstraints``

Regex and ``datetime`` failures never leave this module raw: filename
problems become ``None``, type and constraint problems become
``ColumnTypeError`` / ``ColumnConstraintsError``.

All patterns are applied with ``fullmatch`` and compiled with
``re.ASCII`` so ``\\d`` means ``[0-9]``.
"""

from __future__ import annotations

import datetime as dt
import logging
import re
from typing import Callable, Dict, List, Optional, TypeVar

from csvx.errors import (
    ColumnConstraintsError,
    ColumnTypeError,
    ColumnTypeErrorKind,
    ConstraintErrorKind,
)
from csvx.models import ColumnConstraints, ColumnKind, ColumnType, Metadata

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("csvx.parsers")

# ---------------------------------------------------------------------------
# Grammar constants (compiled once at module load)
# ---------------------------------------------------------------------------

IDENT_RE: re.Pattern[str] = re.compile(r"[a-z][a-z0-9-]*", re.ASCII)
IDENT_UNDERSCORE_RE: re.Pattern[str] = re.compile(r"[a-z][a-z0-9_]*", re.ASCII)

# `<table>_<YYYYMMDD>_<schema>.csv`
FILENAME_RE: re.Pattern[str] = re.compile(
    r"([a-z][a-z0-9-]*)_(\d{4})(\d{2})(\d{2})_([a-z][a-z0-9-]*)\.csv", re.ASCII
)

# Same language as `ENUM.*\(((?:[A-Z][A-Z0-9]*,?)*)\)`, written without the
# nested optional quantifier so a failing match stays linear.
ENUM_EXPR_RE: re.Pattern[str] = re.compile(
    r"ENUM.*\(((?:[A-Z][A-Z0-9]*(?:,[A-Z][A-Z0-9]*)*,?)?)\)", re.ASCII
)

# Same language as `([A-Z]+,?)*`.
CONSTRAINT_RE: re.Pattern[str] = re.compile(r"(?:[A-Z]+(?:,[A-Z]+)*,?)?", re.ASCII)

INTEGER_RE: re.Pattern[str] = re.compile(r"-?\d+", re.ASCII)
DECIMAL_RE: re.Pattern[str] = re.compile(r"\d+(?:\.\d+)?", re.ASCII)
DATE_RE: re.Pattern[str] = re.compile(r"(\d{4})(\d{2})(\d{2})", re.ASCII)
DATETIME_RE: re.Pattern[str] = re.compile(
    r"(\d{4})(\d{2})(\d{2})(\d{2})(\d{2})(\d{2})", re.ASCII
)
TIME_RE: re.Pattern[str] = re.compile(r"(\d{2})(\d{2})(\d{2})", re.ASCII)

_KEYWORD_TYPES: Dict[str, ColumnKind] = {
    "STRING": ColumnKind.STRING,
    "BOOL": ColumnKind.BOOL,
    "INTEGER": ColumnKind.INTEGER,
    "DECIMAL": ColumnKind.DECIMAL,
    "DATE": ColumnKind.DATE,
    "DATETIME": ColumnKind.DATETIME,
    "TIME": ColumnKind.TIME,
}

_CONSTRAINT_FLAGS: Dict[str, str] = {
    "NULLABLE": "nullable",
    "UNIQUE": "unique",
}

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Capture-group and calendar helpers
# ---------------------------------------------------------------------------


def cap(match: re.Match[str], idx: int, target: Callable[[str], T] = int) -> T:  # type: ignore[assignment]
    """
    Convert capture group *idx* of *match* with *target*.

    Only called on groups the grammar has already proven numeric, so a
    failure here is a bug in the grammar, not bad input.
    """
    text: Optional[str] = match.group(idx)
    if text is None:
        raise AssertionError(f"grammar group {idx} did not participate in the match")
    return target(text)


def calendar_date(year: int, month: int, day: int) -> Optional[dt.date]:
    """
    Return the date, or ``None`` if it does not exist on the calendar.

    Year 0 is rejected: the proleptic Gregorian calendar of ``datetime.date``
    starts at 0001-01-01, so ``00000101`` is not a valid DATE.
    """
    try:
        return dt.date(year, month, day)
    except ValueError:
        return None


def clock_time(hour: int, minute: int, second: int) -> Optional[dt.time]:
    """Return the 24-hour clock time, or ``None`` if out of range."""
    try:
        return dt.time(hour, minute, second)
    except ValueError:
        return None


def is_identifier(name: str) -> bool:
    """Table/schema identifier: lowercase letters, digits, hyphens."""
    return IDENT_RE.fullmatch(name) is not None


def is_column_identifier(name: str) -> bool:
    """Column identifier: lowercase letters, digits, underscores."""
    return IDENT_UNDERSCORE_RE.fullmatch(name) is not None


# ---------------------------------------------------------------------------
# FilenameParser
# ---------------------------------------------------------------------------


def parse_filename(filename: str) -> Optional[Metadata]:
    """
    Parse a bare filename into ``Metadata``.

    Returns ``None`` when the name does not follow
    ``<table>_<YYYYMMDD>_<schema>.csv`` or when the date is not a real
    calendar date (``zoo_20170230_x.csv``).
    """
    match = FILENAME_RE.fullmatch(filename)
    if match is None:
        logger.debug("Filename %r does not match the csvx grammar.", filename)
        return None

    date = calendar_date(cap(match, 2), cap(match, 3), cap(match, 4))
    if date is None:
        logger.debug("Filename %r encodes an impossible date.", filename)
        return None

    return Metadata(
        table_name=match.group(1),
        date=date,
        schema_name=match.group(5),
    )


# ---------------------------------------------------------------------------
# TypeParser
# ---------------------------------------------------------------------------


def parse_column_type(raw: str) -> ColumnType:
    """
    Parse a type literal.

    The seven keywords are matched byte-exact.  ``ENUM(A,B,...)`` yields
    an enum type with variants in declared order (not deduplicated).

    Raises:
        ColumnTypeError: ``BAD_ENUM`` for anything starting with ``ENUM``
            that fails the enum grammar, ``UNKNOWN_TYPE`` otherwise.
    """
    kind = _KEYWORD_TYPES.get(raw)
    if kind is not None:
        return ColumnType.of(kind)

    match = ENUM_EXPR_RE.fullmatch(raw)
    if match is not None:
        variants: List[str] = [v for v in match.group(1).split(",") if v]
        if variants:
            return ColumnType.enum(variants)

    if raw.startswith("ENUM"):
        raise ColumnTypeError(ColumnTypeErrorKind.BAD_ENUM, raw)
    raise ColumnTypeError(ColumnTypeErrorKind.UNKNOWN_TYPE, raw)


# ---------------------------------------------------------------------------
# ConstraintParser
# ---------------------------------------------------------------------------


def parse_constraints(raw: str) -> ColumnConstraints:
    """
    Parse a comma-separated constraint list such as ``NULLABLE,UNIQUE``.

    The empty string yields no constraints; a trailing comma is tolerated;
    order and repetition do not matter.

    Raises:
        ColumnConstraintsError: ``MALFORMED_CONSTRAINTS`` when the string
            is not comma-separated uppercase tokens, ``UNKNOWN_CONSTRAINT``
            (carrying the whole string) when a token is not recognised.
    """
    if CONSTRAINT_RE.fullmatch(raw) is None:
        raise ColumnConstraintsError(ConstraintErrorKind.MALFORMED_CONSTRAINTS, raw)

    flags: Dict[str, bool] = {}
    for token in raw.split(","):
        if not token:
            continue
        flag = _CONSTRAINT_FLAGS.get(token)
        if flag is None:
            raise ColumnConstraintsError(ConstraintErrorKind.UNKNOWN_CONSTRAINT, raw)
        flags[flag] = True

    return ColumnConstraints(**flags)


__all__: List[str] = [
    "IDENT_RE",
    "IDENT_UNDERSCORE_RE",
    "FILENAME_RE",
    "ENUM_EXPR_RE",
    "CONSTRAINT_RE",
    "INTEGER_RE",
    "DECIMAL_RE",
    "DATE_RE",
    "DATETIME_RE",
    "TIME_RE",
    "cap",
    "calendar_date",
    "clock_time",
    "is_identifier",
    "is_column_identifier",
    "parse_filename",
    "parse_column_type",
    "parse_constraints",
]
