"""
tests/test_checker.py
Tests for the check pipeline (csvx.checker) and config loading.
"""

from __future__ import annotations

import json
import pathlib
from typing import Any, Callable, Dict

import pytest

from csvx.checker import Checker, CheckReport, load_config_file
from csvx.errors import (
    CheckError,
    CheckErrorKind,
    Location,
    SchemaLoadError,
    SchemaLoadErrorKind,
    ValidationErrorKind,
)
from csvx.models import CheckConfig

WriteCsv = Callable[[str, str], pathlib.Path]


# ===========================================================================
# Schema checks
# ===========================================================================


class TestSchemaChecks:
    def test_missing_schema(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "zoo_20170401_csvx-schema-animals.csv"
        with pytest.raises(CheckError) as excinfo:
            Checker().check(path, [])
        assert excinfo.value.kind is CheckErrorKind.SCHEMA_NOT_A_FILE

    def test_directory_is_not_a_file(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(CheckError) as excinfo:
            Checker().load_schema(tmp_path)
        assert excinfo.value.kind is CheckErrorKind.SCHEMA_NOT_A_FILE

    def test_invalid_schema_filename(self, write_csv: WriteCsv, schema_text: str) -> None:
        path = write_csv("animals.csv", schema_text)
        with pytest.raises(CheckError) as excinfo:
            Checker().check(path, [])
        assert excinfo.value.kind is CheckErrorKind.INVALID_FILENAME
        assert excinfo.value.location == Location.file(str(path))
        assert "animals.csv" in excinfo.value.describe()

    def test_filename_check_can_be_disabled(self, write_csv: WriteCsv, schema_text: str) -> None:
        path = write_csv("animals.csv", schema_text)
        config = CheckConfig(require_schema_filename=False)
        assert len(Checker(config).load_schema(path)) == 6

    def test_not_a_schema(self, write_csv: WriteCsv, schema_text: str) -> None:
        path = write_csv("zoo_20170401_animals.csv", schema_text)
        with pytest.raises(CheckError) as excinfo:
            Checker().check(path, [])
        assert excinfo.value.kind is CheckErrorKind.NOT_A_SCHEMA

    def test_custom_schema_prefix(self, write_csv: WriteCsv, schema_text: str) -> None:
        path = write_csv("zoo_20170401_def-animals.csv", schema_text)
        config = CheckConfig(schema_prefix="def-")
        assert len(Checker(config).load_schema(path)) == 6

    def test_broken_schema_is_fatal(self, write_csv: WriteCsv) -> None:
        path = write_csv(
            "zoo_20170401_csvx-schema-animals.csv",
            "id,type,constraints,description\nname,TEXT,,\n",
        )
        with pytest.raises(CheckError) as excinfo:
            Checker().check(path, [])
        err = excinfo.value
        assert err.kind is CheckErrorKind.SCHEMA_LOAD
        assert isinstance(err.cause, SchemaLoadError)
        assert err.cause.kind is SchemaLoadErrorKind.BAD_TYPE
        assert err.location == Location.file_line_field(str(path), 2, 2)


# ===========================================================================
# Input checks
# ===========================================================================


class TestInputChecks:
    def test_all_pass(self, schema_path: pathlib.Path, good_data_path: pathlib.Path) -> None:
        report = Checker().check(schema_path, [good_data_path])
        assert isinstance(report, CheckReport)
        assert report.all_passed
        assert report.column_count == 6
        assert report.schema_metadata is not None
        assert report.schema_metadata.table_name == "zoo"
        assert report.outcomes[0].rows_checked == 3

    def test_no_inputs_passes(self, schema_path: pathlib.Path) -> None:
        report = Checker().check(schema_path, [])
        assert report.all_passed
        assert report.outcomes == []

    def test_failures_collected_per_file(
        self,
        schema_path: pathlib.Path,
        good_data_path: pathlib.Path,
        bad_data_path: pathlib.Path,
    ) -> None:
        report = Checker().check(schema_path, [bad_data_path, good_data_path])
        assert not report.all_passed
        assert [o.passed for o in report.outcomes] == [False, True]
        assert report.total_errors == 2
        assert report.failed[0].path == str(bad_data_path)

    def test_fatal_input_does_not_stop_others(
        self,
        write_csv: WriteCsv,
        schema_path: pathlib.Path,
        good_data_path: pathlib.Path,
    ) -> None:
        ragged = write_csv("zoo_20170403_animals.csv", "name,legs,kind,weight,born,tagged\nrex\n")
        missing = schema_path.parent / "zoo_20170404_animals.csv"
        report = Checker().check(schema_path, [ragged, missing, good_data_path])
        first, second, third = report.outcomes
        assert first.fatal and first.errors[0].kind is ValidationErrorKind.ROW_LENGTH_MISMATCH
        assert second.fatal and second.errors[0].kind is ValidationErrorKind.IO
        assert third.passed

    def test_input_filename_check(self, write_csv: WriteCsv, schema_path: pathlib.Path, data_text: str) -> None:
        oddly_named = write_csv("animals.csv", data_text)
        assert Checker().check(schema_path, [oddly_named]).all_passed

        config = CheckConfig(check_input_filenames=True)
        report = Checker(config).check(schema_path, [oddly_named])
        assert not report.all_passed
        assert report.outcomes[0].errors[0].kind is CheckErrorKind.INVALID_FILENAME

    def test_summary(self, schema_path: pathlib.Path, bad_data_path: pathlib.Path) -> None:
        summary = Checker().check(schema_path, [bad_data_path]).summary()
        assert "FAILED" in summary
        assert "Files failed:  1" in summary
        assert bad_data_path.name in summary


# ===========================================================================
# Config loading
# ===========================================================================


class TestConfig:
    def test_defaults(self) -> None:
        config = CheckConfig()
        assert config.encoding == "utf-8"
        assert config.schema_prefix == "csvx-schema-"
        assert config.require_schema_filename
        assert not config.check_input_filenames
        assert config.max_errors_per_file == 0

    def test_yaml_top_level(self, write_config: Callable[..., pathlib.Path]) -> None:
        path = write_config({"encoding": "latin-1", "max_errors_per_file": 5})
        config = load_config_file(path)
        assert config.encoding == "latin-1"
        assert config.max_errors_per_file == 5

    def test_yaml_check_section(self, write_config: Callable[..., pathlib.Path]) -> None:
        path = write_config({"check": {"check_input_filenames": True}})
        assert load_config_file(path).check_input_filenames

    def test_json(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "csvx.json"
        path.write_text(json.dumps({"require_schema_filename": False}), encoding="utf-8")
        assert not load_config_file(path).require_schema_filename

    def test_empty_yaml_gives_defaults(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config_file(path) == CheckConfig()

    @pytest.mark.parametrize(
        "data",
        [
            {"colour": "blue"},
            {"encoding": "no-such-codec"},
            {"max_errors_per_file": -1},
        ],
    )
    def test_invalid_settings(self, write_config: Callable[..., pathlib.Path], data: Dict[str, Any]) -> None:
        with pytest.raises(ValueError):
            load_config_file(write_config(data))

    def test_invalid_yaml(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("check: [unclosed\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config_file(path)

    def test_missing_file(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config_file(tmp_path / "none.yaml")

    def test_merged_overrides(self) -> None:
        config = CheckConfig(encoding="latin-1").merged({"max_errors_per_file": 3})
        assert config.encoding == "latin-1"
        assert config.max_errors_per_file == 3
