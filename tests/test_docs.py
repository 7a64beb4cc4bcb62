"""
tests/test_docs.py
Unit tests for Markdown rendering of schemas (csvx.docs).
"""

from __future__ import annotations

from csvx.docs import WRAP_WIDTH, render_markdown
from csvx.parsers import parse_filename
from csvx.schema import Schema


class TestRenderMarkdown:
    def test_title_from_metadata(self, animals_schema: Schema) -> None:
        meta = parse_filename("zoo-nyc_20170401_csvx-schema-animals.csv")
        text = render_markdown(animals_schema, meta)
        lines = text.splitlines()
        assert lines[0] == "# zoo-nyc / animals"
        assert "*Schema date: 2017-04-01*" in lines

    def test_generic_title_without_metadata(self, animals_schema: Schema) -> None:
        assert render_markdown(animals_schema).startswith("# Schema\n")

    def test_summary_table(self, animals_schema: Schema) -> None:
        text = render_markdown(animals_schema)
        assert "| 2 | `legs` | `INTEGER` | NULLABLE |" in text
        assert "| 3 | `kind` | `ENUM(MAMMAL,BIRD,FISH)` | - |" in text

    def test_column_sections(self, animals_schema: Schema) -> None:
        text = render_markdown(animals_schema)
        assert "## 1. `name`" in text
        assert "- **Variants:** `MAMMAL`, `BIRD`, `FISH`" in text
        assert "- **Constraints:** none" in text
        assert "number of legs" in text

    def test_long_description_wrapped(self) -> None:
        words = " ".join(["word"] * 60)
        schema = Schema.from_string(f'id,type,constraints,description\na,STRING,,"{words}"\n')
        body = render_markdown(schema).split("## 1. `a`", 1)[1]
        prose = [line for line in body.splitlines() if line.startswith("word")]
        assert len(prose) > 1
        assert all(len(line) <= WRAP_WIDTH for line in prose)

    def test_empty_schema(self) -> None:
        text = render_markdown(Schema.from_string("id,type,constraints,description\n"))
        assert "This schema defines no columns." in text

    def test_ends_with_single_newline(self, animals_schema: Schema) -> None:
        text = render_markdown(animals_schema)
        assert text.endswith("\n")
        assert not text.endswith("\n\n")
