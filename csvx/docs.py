# File: csvx/docs.py
"""
csvx - Schema Documentation (Markdown)
=======================================
Renders a loaded ``Schema`` as a Markdown document for the ``pretty``
command: a title taken from the schema's filename metadata when it has
one, a compact summary table, then one section per column.
"""

from __future__ import annotations

import logging
import textwrap
from typing import List, Optional

from csvx.models import SCHEMA_PREFIX, ColumnSpec, Metadata
from csvx.schema import Schema

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("csvx.docs")

WRAP_WIDTH: int = 78


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _escape_cell(text: str) -> str:
    """Make *text* safe inside a single Markdown table cell."""
    return " ".join(text.split()).replace("|", "\\|")


def _title(metadata: Optional[Metadata], prefix: str) -> List[str]:
    if metadata is None:
        return ["# Schema", ""]

    name = metadata.schema_name
    if name.startswith(prefix):
        name = name[len(prefix):] or name
    return [
        f"# {metadata.table_name} / {name}",
        "",
        f"*Schema date: {metadata.date.isoformat()}*",
        "",
    ]


def _summary_table(columns: List[ColumnSpec]) -> List[str]:
    lines: List[str] = [
        "| # | Column | Type | Constraints |",
        "|---|--------|------|-------------|",
    ]
    for idx, col in enumerate(columns, start=1):
        constraints = str(col.constraints) or "-"
        lines.append(
            f"| {idx} | `{col.id}` | `{_escape_cell(str(col.column_type))}` | {constraints} |"
        )
    lines.append("")
    return lines


def _column_section(idx: int, col: ColumnSpec) -> List[str]:
    lines: List[str] = [f"## {idx}. `{col.id}`", ""]
    lines.append(f"- **Type:** `{col.column_type}`")
    if col.column_type.is_enum:
        lines.append(f"- **Variants:** {', '.join(f'`{v}`' for v in col.column_type.variants)}")
    lines.append(f"- **Constraints:** {str(col.constraints) or 'none'}")
    lines.append("")

    description = col.description.strip()
    if description:
        for paragraph in description.split("\n\n"):
            lines.extend(textwrap.wrap(" ".join(paragraph.split()), width=WRAP_WIDTH))
            lines.append("")
    return lines


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def render_markdown(
    schema: Schema,
    metadata: Optional[Metadata] = None,
    schema_prefix: str = SCHEMA_PREFIX,
) -> str:
    """
    Render *schema* as Markdown.

    *metadata* is the parsed schema filename, if any; it supplies the
    title.  The result always ends with exactly one newline.
    """
    columns = list(schema.iter_columns())
    lines: List[str] = _title(metadata, schema_prefix)

    if not columns:
        lines.append("This schema defines no columns.")
        lines.append("")
    else:
        lines.extend(_summary_table(columns))
        for idx, col in enumerate(columns, start=1):
            lines.extend(_column_section(idx, col))

    logger.debug("Rendered %d column(s) as Markdown.", len(columns))
    return "\n".join(lines).rstrip("\n") + "\n"


__all__: List[str] = [
    "render_markdown",
]
