# File: csvx/validators.py
"""
csvx - Value & File Validators
===============================
The validation engine.

``validate_value`` decodes one raw cell against one ``ColumnSpec`` and
either returns a typed ``Value`` (``None`` for an allowed empty cell) or
raises ``CellValueError``.

``validate_text`` checks a whole data file against a schema:

    1. Header field count must equal the column count, otherwise a single
       ``MISSING_HEADERS`` error is returned and nothing else is read.
    2. Header fields must equal the column ids position by position; every
       mismatch is collected and, if there are any, returned at once.
    3. Every cell of every data row is decoded.  Cell failures are
       collected and scanning continues to the end of the file.

Decoding problems below the cell level (broken quoting, a row whose
field count differs from the header) are fatal and raised, not
collected.

``parse_row`` and ``read_field`` give fail-fast access to a single,
already split row.
"""

from __future__ import annotations

import csv
import datetime as dt
import logging
from typing import Dict, Iterator, List, Optional, Sequence

from csvx.errors import (
    CellValueError,
    Location,
    ValidationError,
    ValidationErrorKind,
    ValueErrorKind,
)
from csvx.models import ColumnKind, ColumnSpec, Value
from csvx.parsers import (
    DATE_RE,
    DATETIME_RE,
    DECIMAL_RE,
    INTEGER_RE,
    TIME_RE,
    calendar_date,
    cap,
    clock_time,
)
from csvx.utils import iter_records

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("csvx.validators")

_I64_MIN: int = -(2**63)
_I64_MAX: int = 2**63 - 1


# ---------------------------------------------------------------------------
# Validation result container
# ---------------------------------------------------------------------------


class FileValidationResult:
    """
    Accumulates located ``ValidationError`` instances for one data file,
    in file-scan order.

    Truthy when there are NO errors (i.e. the file is valid).
    """

    __slots__ = ("path", "rows_checked", "_items")

    def __init__(self, path: str) -> None:
        self.path: str = path
        self.rows_checked: int = 0
        self._items: List[ValidationError] = []

    # -- Mutation -----------------------------------------------------------

    def add(self, error: ValidationError) -> None:
        self._items.append(error)

    # -- Query --------------------------------------------------------------

    @property
    def errors(self) -> List[ValidationError]:
        return list(self._items)

    @property
    def error_count(self) -> int:
        return len(self._items)

    @property
    def is_valid(self) -> bool:
        return not self._items

    def count_by_kind(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for item in self._items:
            key = item.cause.kind.value if item.cause is not None else item.kind.value
            counts[key] = counts.get(key, 0) + 1
        return counts

    def summary(self) -> str:
        if self.is_valid:
            return f"{self.path}: OK ({self.rows_checked} row(s) checked)."
        return (
            f"{self.path}: {self.error_count} error(s) in "
            f"{self.rows_checked} row(s) checked."
        )

    def format_report(self, limit: int = 0) -> str:
        """Human-readable multi-line report; *limit* caps the error lines (0 = all)."""
        lines: List[str] = [self.summary()]
        shown = self._items if limit <= 0 else self._items[:limit]
        for item in shown:
            lines.append(f"  ✗ {item.describe()}")
        hidden = len(self._items) - len(shown)
        if hidden > 0:
            lines.append(f"  … {hidden} more error(s) not shown")
        return "\n".join(lines)

    def __iter__(self) -> Iterator[ValidationError]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return self.is_valid

    def __repr__(self) -> str:
        return f"<FileValidationResult {self.summary()}>"


# ---------------------------------------------------------------------------
# ValueValidator
# ---------------------------------------------------------------------------


def validate_value(spec: ColumnSpec, raw: str) -> Optional[Value]:
    """
    Decode *raw* according to *spec*.

    Returns ``None`` for an empty cell in a NULLABLE column.

    Raises:
        CellValueError: ``NON_NULLABLE`` for an empty cell in any other
            column, or the type-specific ``INVALID_*`` kind.
    """
    if raw == "":
        if spec.constraints.nullable:
            return None
        raise CellValueError(ValueErrorKind.NON_NULLABLE)

    kind = spec.column_type.kind

    if kind is ColumnKind.STRING:
        return Value(kind, raw)

    if kind is ColumnKind.BOOL:
        if raw == "TRUE":
            return Value(kind, True)
        if raw == "FALSE":
            return Value(kind, False)
        raise CellValueError(ValueErrorKind.INVALID_BOOL, raw)

    if kind is ColumnKind.INTEGER:
        # leading zeros are accepted
        if INTEGER_RE.fullmatch(raw) is None:
            raise CellValueError(ValueErrorKind.INVALID_INT, raw)
        number = int(raw)
        if not _I64_MIN <= number <= _I64_MAX:
            raise CellValueError(ValueErrorKind.INVALID_INT, raw)
        return Value(kind, number)

    if kind is ColumnKind.ENUM:
        ordinal = spec.column_type.ordinal(raw)
        if ordinal is None:
            raise CellValueError(
                ValueErrorKind.INVALID_ENUM, raw, spec.column_type.variants
            )
        return Value(kind, ordinal)

    if kind is ColumnKind.DECIMAL:
        if DECIMAL_RE.fullmatch(raw) is None:
            raise CellValueError(ValueErrorKind.INVALID_DECIMAL, raw)
        return Value(kind, raw)

    if kind is ColumnKind.DATE:
        match = DATE_RE.fullmatch(raw)
        date = calendar_date(cap(match, 1), cap(match, 2), cap(match, 3)) if match else None
        if date is None:
            raise CellValueError(ValueErrorKind.INVALID_DATE, raw)
        return Value(kind, date)

    if kind is ColumnKind.DATETIME:
        # a bad date part is reported as a bad datetime
        match = DATETIME_RE.fullmatch(raw)
        if match is None:
            raise CellValueError(ValueErrorKind.INVALID_DATETIME, raw)
        date = calendar_date(cap(match, 1), cap(match, 2), cap(match, 3))
        clock = clock_time(cap(match, 4), cap(match, 5), cap(match, 6))
        if date is None or clock is None:
            raise CellValueError(ValueErrorKind.INVALID_DATETIME, raw)
        return Value(kind, dt.datetime.combine(date, clock))

    match = TIME_RE.fullmatch(raw)
    clock = clock_time(cap(match, 1), cap(match, 2), cap(match, 3)) if match else None
    if clock is None:
        raise CellValueError(ValueErrorKind.INVALID_TIME, raw)
    return Value(kind, clock)


# ---------------------------------------------------------------------------
# FileValidator
# ---------------------------------------------------------------------------


def _next_record(records: Iterator[List[str]], path: str, line: int) -> Optional[List[str]]:
    try:
        return next(records, None)
    except csv.Error as exc:
        raise ValidationError(
            ValidationErrorKind.CSV, detail=f"malformed CSV: {exc}"
        ).at(Location.file_line(path, line)) from exc


def validate_text(
    columns: Sequence[ColumnSpec],
    text: str,
    path: str = "<string>",
) -> FileValidationResult:
    """
    Validate the CSV *text* of one data file against *columns*.

    Returns a ``FileValidationResult`` holding every header or cell
    defect found, in scan order.

    Raises:
        ValidationError: ``CSV`` or ``ROW_LENGTH_MISMATCH`` when the text
            cannot be decoded into rows; these abort the whole file.
    """
    result = FileValidationResult(path)
    records = iter_records(text)

    header: List[str] = _next_record(records, path, 1) or []
    if len(header) != len(columns):
        result.add(
            ValidationError(
                ValidationErrorKind.MISSING_HEADERS,
                detail=(
                    f"expected {len(columns)} header field(s), "
                    f"found {len(header)}"
                ),
            ).at(Location.file_line(path, 1))
        )
        logger.debug("%s: header has %d field(s), schema has %d.", path, len(header), len(columns))
        return result

    for idx, (spec, actual) in enumerate(zip(columns, header), start=1):
        if spec.id != actual:
            result.add(
                ValidationError(
                    ValidationErrorKind.HEADER_MISMATCH,
                    raw=actual,
                    detail=f"unexpected header {actual!r}, expected {spec.id!r}",
                ).at(Location.file_line_field(path, 1, idx))
            )

    if not result.is_valid:
        return result

    line = 1
    while True:
        line += 1
        fields = _next_record(records, path, line)
        if fields is None:
            break
        if len(fields) != len(columns):
            raise ValidationError(
                ValidationErrorKind.ROW_LENGTH_MISMATCH,
                detail=f"expected {len(columns)} field(s), found {len(fields)}",
            ).at(Location.file_line(path, line))

        for idx, (spec, raw) in enumerate(zip(columns, fields), start=1):
            try:
                validate_value(spec, raw)
            except CellValueError as err:
                result.add(
                    ValidationError.from_value_error(err).at(
                        Location.file_line_field(path, line, idx)
                    )
                )
        result.rows_checked += 1

    logger.debug("%s: %s", path, result.summary())
    return result


# ---------------------------------------------------------------------------
# Single-row access
# ---------------------------------------------------------------------------


def parse_row(columns: Sequence[ColumnSpec], fields: Sequence[str]) -> List[Optional[Value]]:
    """
    Decode one already split row, stopping at the first bad cell.

    Raises:
        ValidationError: ``SCHEMA_MISMATCH`` when the field count differs
            from the column count, ``VALUE_ERROR`` (located at the 1-based
            field) for the first cell that does not decode.
    """
    if len(fields) != len(columns):
        raise ValidationError(
            ValidationErrorKind.SCHEMA_MISMATCH,
            detail=f"row has {len(fields)} field(s), schema has {len(columns)}",
        )

    values: List[Optional[Value]] = []
    for idx, (spec, raw) in enumerate(zip(columns, fields), start=1):
        try:
            values.append(validate_value(spec, raw))
        except CellValueError as err:
            raise ValidationError.from_value_error(err).at(Location.row_field(idx)) from err
    return values


def read_field(
    columns: Sequence[ColumnSpec],
    fields: Sequence[str],
    idx: int,
) -> Optional[Value]:
    """
    Decode the field at 0-based *idx* of an already split row.

    Raises:
        ValidationError: ``SCHEMA_MISMATCH`` when *idx* is outside the
            schema or the row, ``VALUE_ERROR`` when the cell does not decode.
    """
    if not 0 <= idx < len(columns) or idx >= len(fields):
        raise ValidationError(
            ValidationErrorKind.SCHEMA_MISMATCH,
            detail=f"no field {idx} in a row of {len(fields)} for a schema of {len(columns)}",
        )
    try:
        return validate_value(columns[idx], fields[idx])
    except CellValueError as err:
        raise ValidationError.from_value_error(err).at(Location.row_field(idx + 1)) from err


__all__: List[str] = [
    "FileValidationResult",
    "validate_value",
    "validate_text",
    "parse_row",
    "read_field",
]
