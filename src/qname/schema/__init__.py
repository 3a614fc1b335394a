"""Schema language: parsing, typechecking, and validation."""

from __future__ import annotations

import logging
from pathlib import Path

from .declarative import schema_from_mapping, schema_from_yaml, schema_to_mapping
from .errors import (
    SchemaError,
    SchemaFileError,
    SchemaParseError,
    SchemaTypeCheckError,
    SchemaValidationError,
)
from .models import Category, Keyword, Requirement, Schema
from .parse import parse
from .typecheck import typecheck
from .validate import validate_schema

LOGGER = logging.getLogger(__name__)

DECLARATIVE_SUFFIXES = frozenset({".yaml", ".yml"})


def load_schema(source: str) -> Schema:
    """Parse, typecheck, and validate schema source text.

    Args:
        source: Schema definition language document.

    Returns:
        Schema: Schema ready for use by the filename codec.

    Raises:
        SchemaParseError: If the text is not syntactically valid.
        SchemaTypeCheckError: If the document has the wrong shape.
        SchemaValidationError: If the schema violates an invariant.
    """
    schema = validate_schema(typecheck(parse(source)))
    LOGGER.debug(
        "Loaded schema with %d categories and %d tags.",
        len(schema.categories),
        len(schema.tags),
    )
    return schema


def read_schema_file(path: Path) -> Schema:
    """Load a schema from disk.

    YAML files (``.yaml``/``.yml``) use the declarative form; any other file
    is read as the schema definition language.

    Args:
        path: Location of the schema file.

    Returns:
        Schema: Validated schema.

    Raises:
        SchemaFileError: If the file cannot be read.
        SchemaError: If the contents do not describe a valid schema.
    """
    path = path.expanduser()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaFileError(f"Unable to read schema file {path}: {exc}") from exc

    LOGGER.debug("Reading schema from %s", path)
    if path.suffix.lower() in DECLARATIVE_SUFFIXES:
        return schema_from_yaml(text)
    return load_schema(text)


__all__ = [
    "Category",
    "Keyword",
    "Requirement",
    "Schema",
    "SchemaError",
    "SchemaFileError",
    "SchemaParseError",
    "SchemaTypeCheckError",
    "SchemaValidationError",
    "load_schema",
    "read_schema_file",
    "parse",
    "typecheck",
    "validate_schema",
    "schema_from_mapping",
    "schema_from_yaml",
    "schema_to_mapping",
]
