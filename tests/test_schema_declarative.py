"""Tests for YAML schema documents and schema file loading."""

from pathlib import Path

import pytest

from qname.schema import (
    SchemaFileError,
    load_schema,
    read_schema_file,
    schema_from_mapping,
    schema_from_yaml,
    schema_to_mapping,
)
from qname.schema.errors import EmptyDelimiter, UnexpectedInput

SAMPLES = Path(__file__).resolve().parent.parent / "schemas"


def test_yaml_and_source_samples_describe_the_same_schema() -> None:
    from_source = read_schema_file(SAMPLES / "photos.q")
    from_yaml = read_schema_file(SAMPLES / "photos.yaml")

    assert from_source == from_yaml
    assert from_yaml.categories[0].tags == ["art", "ph", "v"]


def test_mapping_round_trip() -> None:
    schema = load_schema('schema "::" "none" [category "A" (at_most 2) ["a", "b"/"B"]]')

    mapping = schema_to_mapping(schema)

    assert mapping["delim"] == "::"
    assert mapping["categories"][0]["requirement"] == {"kind": "at_most", "count": 2}
    assert schema_from_mapping(mapping) == schema


def test_empty_placeholder_defaults_to_empty_string() -> None:
    schema = schema_from_yaml(
        "delim: '.'\ncategories:\n  - name: A\n    requirement: {kind: exactly, count: 1}\n"
        "    keywords: [a]\n"
    )

    assert schema.empty == ""


@pytest.mark.parametrize(
    "document",
    [
        "- just\n- a list\n",
        "delim: [unclosed\n",
        "delim: '-'\ncategories:\n  - name: A\n    requirement: {kind: some, count: 1}\n",
        "delim: '-'\nunknown: 1\n",
    ],
)
def test_invalid_documents_raise_schema_file_error(document: str) -> None:
    with pytest.raises(SchemaFileError):
        schema_from_yaml(document)


def test_declarative_schemas_are_validated() -> None:
    with pytest.raises(EmptyDelimiter):
        schema_from_mapping({"delim": "", "categories": []})


def test_read_schema_file_dispatches_on_suffix(tmp_path: Path) -> None:
    source = tmp_path / "schema.q"
    source.write_text('schema "-" "" [category "A" (exactly 1) ["a"]]', encoding="utf-8")
    document = tmp_path / "schema.yml"
    document.write_text('schema: "-"\n', encoding="utf-8")

    assert read_schema_file(source).tags == ["a"]
    with pytest.raises(SchemaFileError):
        read_schema_file(document)


def test_read_schema_file_reports_syntax_errors(tmp_path: Path) -> None:
    source = tmp_path / "broken.q"
    source.write_text("schema [", encoding="utf-8")

    with pytest.raises(UnexpectedInput):
        read_schema_file(source)


def test_missing_schema_file(tmp_path: Path) -> None:
    with pytest.raises(SchemaFileError):
        read_schema_file(tmp_path / "missing.q")
