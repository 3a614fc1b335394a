"""Declarative schema documents expressed as YAML mappings.

The mapping mirrors the schema models directly::

    delim: "-"
    empty: "_"
    categories:
      - name: Media
        requirement: {kind: exactly, count: 1}
        keywords: [art, {name: photo, id: ph}]
"""

from __future__ import annotations

from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from .errors import SchemaFileError
from .models import Schema
from .validate import validate_schema


def schema_from_mapping(data: Mapping[str, Any]) -> Schema:
    """Build and validate a schema from a plain mapping.

    Args:
        data: Mapping with ``delim``, optional ``empty``, and ``categories``.

    Returns:
        Schema: Validated schema.

    Raises:
        SchemaFileError: If the mapping does not describe a schema.
        SchemaValidationError: If the schema violates an invariant.
    """
    try:
        schema = Schema.model_validate(dict(data))
    except ValidationError as exc:
        raise SchemaFileError(f"Invalid schema document: {exc}") from exc
    return validate_schema(schema)


def schema_from_yaml(text: str) -> Schema:
    """Parse a YAML document and build a validated schema from it."""
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SchemaFileError(f"Failed to parse schema document: {exc}") from exc

    if not isinstance(raw, dict):
        raise SchemaFileError("Schema document must contain a mapping at the top level.")
    return schema_from_mapping(raw)


def schema_to_mapping(schema: Schema) -> dict[str, Any]:
    """Return a mapping that :func:`schema_from_mapping` accepts."""
    return schema.model_dump(mode="python")


__all__ = ["schema_from_mapping", "schema_from_yaml", "schema_to_mapping"]
