"""
tests/conftest.py
Shared fixtures for the csvx test suite.

No external mocking libraries are used; real file I/O is performed
inside temporary directories managed by pytest's tmp_path fixtures.
"""

from __future__ import annotations

import pathlib
import textwrap
from typing import Any, Callable, Dict

import pytest
import yaml

from csvx.schema import Schema


# ---------------------------------------------------------------------------
# Raw text fixtures
# ---------------------------------------------------------------------------

ANIMALS_SCHEMA_TEXT: str = textwrap.dedent(
    """\
    id,type,constraints,description
    name,STRING,,"animal name"
    legs,INTEGER,NULLABLE,"number of legs"
    kind,"ENUM(MAMMAL,BIRD,FISH)",,"animal class"
    weight,DECIMAL,NULLABLE,"weight in kg"
    born,DATE,NULLABLE,
    tagged,BOOL,,"has a tracking tag"
    """
)

ANIMALS_DATA_TEXT: str = textwrap.dedent(
    """\
    name,legs,kind,weight,born,tagged
    rex,4,MAMMAL,31.5,20150601,TRUE
    tweety,2,BIRD,0.02,,FALSE
    nemo,,FISH,,20160101,FALSE
    """
)


@pytest.fixture()
def schema_text() -> str:
    return ANIMALS_SCHEMA_TEXT


@pytest.fixture()
def data_text() -> str:
    return ANIMALS_DATA_TEXT


@pytest.fixture()
def animals_schema() -> Schema:
    """The six-column animals schema, parsed from text."""
    return Schema.from_string(ANIMALS_SCHEMA_TEXT)


# ---------------------------------------------------------------------------
# File fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def write_csv(tmp_path: pathlib.Path) -> Callable[[str, str], pathlib.Path]:
    """Return a helper that writes *text* to ``tmp_path / name``."""

    def _write(name: str, text: str) -> pathlib.Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def schema_path(write_csv: Callable[[str, str], pathlib.Path]) -> pathlib.Path:
    return write_csv("zoo_20170401_csvx-schema-animals.csv", ANIMALS_SCHEMA_TEXT)


@pytest.fixture()
def good_data_path(write_csv: Callable[[str, str], pathlib.Path]) -> pathlib.Path:
    return write_csv("zoo_20170401_animals.csv", ANIMALS_DATA_TEXT)


@pytest.fixture()
def bad_data_path(write_csv: Callable[[str, str], pathlib.Path]) -> pathlib.Path:
    """Two bad cells: an invalid integer and an unknown enum variant."""
    text = ANIMALS_DATA_TEXT + "ghost,many,REPTILE,,,TRUE\n"
    return write_csv("zoo_20170402_animals.csv", text)


@pytest.fixture()
def write_config(tmp_path: pathlib.Path) -> Callable[[Dict[str, Any]], pathlib.Path]:
    """Return a helper that dumps a dict to a temporary YAML config file."""

    def _write(data: Dict[str, Any], name: str = "csvx.yaml") -> pathlib.Path:
        path = tmp_path / name
        with open(path, "w", encoding="utf-8") as fh:
            yaml.dump(data, fh, default_flow_style=False)
        return path

    return _write
