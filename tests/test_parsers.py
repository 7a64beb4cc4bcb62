"""
tests/test_parsers.py
Unit tests for csvx.parsers.

Tests cover:
- Filename parsing (grammar, calendar dates, schema detection)
- Type literal parsing (keywords, ENUM grammar, error kinds)
- Constraint parsing (flags, trailing commas, error kinds)
- Canonical rendering of parsed types and constraints
"""

from __future__ import annotations

import datetime as dt

import pytest

from csvx.errors import (
    ColumnConstraintsError,
    ColumnTypeError,
    ColumnTypeErrorKind,
    ConstraintErrorKind,
)
from csvx.models import ColumnConstraints, ColumnKind, ColumnType, Metadata
from csvx.parsers import (
    calendar_date,
    is_column_identifier,
    is_identifier,
    parse_column_type,
    parse_constraints,
    parse_filename,
)


# ===========================================================================
# Tests for parse_filename
# ===========================================================================


class TestParseFilename:
    """Tests for ``<table>_<YYYYMMDD>_<schema>.csv`` parsing."""

    def test_simple_name(self) -> None:
        meta = parse_filename("zoo_20170401_animals.csv")
        assert meta == Metadata(
            table_name="zoo", date=dt.date(2017, 4, 1), schema_name="animals"
        )
        assert not meta.is_schema

    def test_hyphens_and_digits(self) -> None:
        meta = parse_filename("zoo-nyc_20170401_animals-2.csv")
        assert meta is not None
        assert meta.table_name == "zoo-nyc"
        assert meta.schema_name == "animals-2"

    def test_schema_file_detected(self) -> None:
        meta = parse_filename("zoo_20170401_csvx-schema-animals.csv")
        assert meta is not None
        assert meta.is_schema
        assert meta.has_schema_prefix("csvx-schema-")

    def test_impossible_date_rejected(self) -> None:
        assert parse_filename("zoo_20170230_x.csv") is None

    def test_leap_day_accepted(self) -> None:
        meta = parse_filename("zoo_20160229_x.csv")
        assert meta is not None
        assert meta.date == dt.date(2016, 2, 29)

    @pytest.mark.parametrize(
        "name",
        [
            "Zoo_20170401_animals.csv",
            "zoo_20170401_animals.CSV",
            "zoo_2017041_animals.csv",
            "zoo_20170401_animals.csv.bak",
            "zoo_20170401_animals",
            "zoo_20170401_ani_mals.csv",
            "1zoo_20170401_animals.csv",
            "zoo_20170401_animals.csv\n",
            "",
        ],
    )
    def test_malformed_names(self, name: str) -> None:
        assert parse_filename(name) is None

    def test_filename_round_trip(self) -> None:
        name = "zoo-nyc_20170401_csvx-schema-animals.csv"
        meta = parse_filename(name)
        assert meta is not None
        assert meta.filename() == name


class TestIdentifiers:
    def test_table_identifier(self) -> None:
        assert is_identifier("zoo-nyc2")
        assert not is_identifier("zoo_nyc")
        assert not is_identifier("-zoo")

    def test_column_identifier(self) -> None:
        assert is_column_identifier("first_name")
        assert is_column_identifier("a1")
        assert not is_column_identifier("first-name")
        assert not is_column_identifier("Name")
        assert not is_column_identifier("_x")
        assert not is_column_identifier("")


class TestCalendarHelpers:
    def test_calendar_date(self) -> None:
        assert calendar_date(2016, 2, 29) == dt.date(2016, 2, 29)
        assert calendar_date(2017, 2, 29) is None

    def test_year_zero_is_not_a_date(self) -> None:
        assert calendar_date(0, 1, 1) is None
        assert calendar_date(1, 1, 1) == dt.date(1, 1, 1)


# ===========================================================================
# Tests for parse_column_type
# ===========================================================================


class TestParseColumnType:
    """Tests for type literal parsing."""

    @pytest.mark.parametrize(
        "raw, kind",
        [
            ("STRING", ColumnKind.STRING),
            ("BOOL", ColumnKind.BOOL),
            ("INTEGER", ColumnKind.INTEGER),
            ("DECIMAL", ColumnKind.DECIMAL),
            ("DATE", ColumnKind.DATE),
            ("DATETIME", ColumnKind.DATETIME),
            ("TIME", ColumnKind.TIME),
        ],
    )
    def test_keywords(self, raw: str, kind: ColumnKind) -> None:
        parsed = parse_column_type(raw)
        assert parsed.kind is kind
        assert parsed.variants == ()

    def test_enum_variants_in_order(self) -> None:
        parsed = parse_column_type("ENUM(MAMMAL,BIRD,FISH2)")
        assert parsed.is_enum
        assert parsed.variants == ("MAMMAL", "BIRD", "FISH2")

    def test_enum_order_matters(self) -> None:
        assert parse_column_type("ENUM(A,B)") != parse_column_type("ENUM(B,A)")

    def test_enum_trailing_comma_dropped(self) -> None:
        assert parse_column_type("ENUM(A,B,)").variants == ("A", "B")

    def test_enum_duplicates_kept(self) -> None:
        parsed = parse_column_type("ENUM(A,A)")
        assert parsed.variants == ("A", "A")
        assert parsed.ordinal("A") == 0

    @pytest.mark.parametrize(
        "raw",
        ["ENUM()", "ENUM(a,b)", "ENUM(A B)", "ENUM(A,,B)", "ENUM(,A)", "ENUM", "ENUM(A"],
    )
    def test_bad_enum(self, raw: str) -> None:
        with pytest.raises(ColumnTypeError) as excinfo:
            parse_column_type(raw)
        assert excinfo.value.kind is ColumnTypeErrorKind.BAD_ENUM
        assert excinfo.value.raw == raw

    @pytest.mark.parametrize("raw", ["", "string", "INT", "FLOAT", " STRING", "STRING "])
    def test_unknown_type(self, raw: str) -> None:
        with pytest.raises(ColumnTypeError) as excinfo:
            parse_column_type(raw)
        assert excinfo.value.kind is ColumnTypeErrorKind.UNKNOWN_TYPE

    def test_long_bad_enum_fails_quickly(self) -> None:
        raw = "ENUM(" + ",".join(["ABCDEFGH"] * 2000) + ",x)"
        with pytest.raises(ColumnTypeError):
            parse_column_type(raw)

    @pytest.mark.parametrize(
        "raw", ["STRING", "DATETIME", "ENUM(A)", "ENUM(MAMMAL,BIRD,FISH)"]
    )
    def test_render_then_parse_is_identity(self, raw: str) -> None:
        parsed = parse_column_type(raw)
        assert str(parsed) == raw
        assert parse_column_type(str(parsed)) == parsed

    def test_model_rejects_enum_without_variants(self) -> None:
        with pytest.raises(ValueError):
            ColumnType(kind=ColumnKind.ENUM)


# ===========================================================================
# Tests for parse_constraints
# ===========================================================================


class TestParseConstraints:
    """Tests for constraint string parsing."""

    @pytest.mark.parametrize(
        "raw, nullable, unique",
        [
            ("", False, False),
            ("NULLABLE", True, False),
            ("UNIQUE", False, True),
            ("NULLABLE,UNIQUE", True, True),
            ("UNIQUE,NULLABLE", True, True),
            ("NULLABLE,", True, False),
            ("NULLABLE,NULLABLE", True, False),
        ],
    )
    def test_valid(self, raw: str, nullable: bool, unique: bool) -> None:
        assert parse_constraints(raw) == ColumnConstraints(nullable=nullable, unique=unique)

    @pytest.mark.parametrize("raw", ["nullable", "NULLABLE UNIQUE", ",NULLABLE", "NULLABLE,,UNIQUE", "N1"])
    def test_malformed(self, raw: str) -> None:
        with pytest.raises(ColumnConstraintsError) as excinfo:
            parse_constraints(raw)
        assert excinfo.value.kind is ConstraintErrorKind.MALFORMED_CONSTRAINTS

    def test_unknown_constraint_carries_whole_string(self) -> None:
        with pytest.raises(ColumnConstraintsError) as excinfo:
            parse_constraints("NULLABLE,PRIMARY")
        assert excinfo.value.kind is ConstraintErrorKind.UNKNOWN_CONSTRAINT
        assert excinfo.value.raw == "NULLABLE,PRIMARY"

    def test_render(self) -> None:
        assert str(parse_constraints("UNIQUE,NULLABLE")) == "NULLABLE,UNIQUE"
        assert str(parse_constraints("")) == ""
