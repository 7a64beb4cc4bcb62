# File: csvx/__init__.py
"""
csvx — Schema Checker for CSV Files
====================================

A validation engine for CSV data files described by csvx schema files.
A schema is itself a CSV file (``id,type,constraints,description``) whose
rows declare the typed, constrained columns every data file must have.
Files follow the naming convention ``<table>_<YYYYMMDD>_<schema>.csv``;
schemas use a schema name starting with ``csvx-schema-``.

Architecture overview::

    ┌──────────────┐     ┌───────────────┐     ┌──────────────────┐
    │  CLI / Entry │────▶│    Checker    │────▶│      Schema      │
    │   (cli.py)   │     │ (checker.py)  │     │   (schema.py)    │
    └──────┬───────┘     └───────────────┘     └────────┬─────────┘
           │                                            │
           ▼                          ┌─────────────────┼────────────┐
    ┌──────────────┐                  ▼                 ▼            ▼
    │     docs     │           ┌──────────┐     ┌────────────┐ ┌─────────┐
    │  (docs.py)   │           │ parsers  │     │ validators │ │ models  │
    └──────────────┘           │  (.py)   │     │   (.py)    │ │  (.py)  │
                               └──────────┘     └────────────┘ └─────────┘

Usage::

    # As a library
    from csvx import Schema
    schema = Schema.from_file("zoo_20170401_csvx-schema-animals.csv")
    result = schema.validate_file("zoo_20170401_animals.csv")
    for err in result:
        print(err.describe())

    # From the command line
    python -m csvx check SCHEMA INPUT...

Public API:
    - Schema             — Loaded schema; validates files and rows
    - Checker            — Orchestrator for the ``check`` command
    - parse_filename     — Filename → Metadata (or None)
    - parse_column_type  — Type literal → ColumnType
    - parse_constraints  — Constraint string → ColumnConstraints
    - validate_value     — One raw cell → Value
    - render_markdown    — Schema → Markdown documentation
"""

from __future__ import annotations

__version__: str = "5.1.0"
__license__: str = "MIT"

from csvx.errors import (
    CellValueError,
    CheckError,
    CheckErrorKind,
    ColumnConstraintsError,
    ColumnTypeError,
    ColumnTypeErrorKind,
    ConstraintErrorKind,
    CsvxError,
    Location,
    SchemaLoadError,
    SchemaLoadErrorKind,
    ValidationError,
    ValidationErrorKind,
    ValueErrorKind,
)
from csvx.models import (
    SCHEMA_PREFIX,
    CheckConfig,
    ColumnConstraints,
    ColumnKind,
    ColumnSpec,
    ColumnType,
    Metadata,
    Value,
)
from csvx.parsers import parse_column_type, parse_constraints, parse_filename
from csvx.validators import FileValidationResult, validate_value
from csvx.schema import Schema, parse_schema
from csvx.checker import Checker, CheckReport, FileOutcome, load_config_file
from csvx.docs import render_markdown

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    # Version info
    "__version__",
    "__license__",
    # Errors
    "Location",
    "CsvxError",
    "ColumnTypeError",
    "ColumnTypeErrorKind",
    "ColumnConstraintsError",
    "ConstraintErrorKind",
    "CellValueError",
    "ValueErrorKind",
    "SchemaLoadError",
    "SchemaLoadErrorKind",
    "ValidationError",
    "ValidationErrorKind",
    "CheckError",
    "CheckErrorKind",
    # Models
    "SCHEMA_PREFIX",
    "CheckConfig",
    "ColumnConstraints",
    "ColumnKind",
    "ColumnSpec",
    "ColumnType",
    "Metadata",
    "Value",
    # Parsers
    "parse_filename",
    "parse_column_type",
    "parse_constraints",
    # Validation
    "validate_value",
    "FileValidationResult",
    "Schema",
    "parse_schema",
    # Check command
    "Checker",
    "CheckReport",
    "FileOutcome",
    "load_config_file",
    # Docs
    "render_markdown",
]
