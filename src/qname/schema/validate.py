"""Cross-field schema invariants that the type checker cannot express.

Tag uniqueness and delimiter exclusion are what make generated filenames
invertible, so every schema passes through :func:`validate_schema` before use.
Checks run in a fixed order and stop at the first violation.
"""

from __future__ import annotations

from functools import reduce
from typing import FrozenSet

from .errors import (
    CategoryWithNoTags,
    DelimiterFoundInPlaceholder,
    DelimiterFoundInTag,
    DelimiterOverlapsSalt,
    DelimiterOverlapsTag,
    EmptyDelimiter,
    EmptyStringNotValidTag,
    InvalidCharacterInDelim,
    InvalidCharacterInPlaceholder,
    InvalidCharacterInTag,
    PlaceholderCollidesWithTag,
    TagsMustBeUnique,
)
from .models import Category, Schema


def is_allowed_char(char: str) -> bool:
    """Return False for NUL and the other C0 control characters."""
    return char != "\0" and ord(char) >= 32


def validate_schema(schema: Schema) -> Schema:
    """Check a schema's invariants and return it unchanged.

    Args:
        schema: Schema produced by the type checker or a declarative document.

    Returns:
        Schema: The same schema, now known to be usable by the filename codec.

    Raises:
        SchemaValidationError: The first invariant the schema violates.
    """
    from qname.filename.salt import SALT_CHARSET

    delim = schema.delim
    if not delim:
        raise EmptyDelimiter()
    for char in delim:
        if not is_allowed_char(char):
            raise InvalidCharacterInDelim(char)
        # the salt is split off at the first delimiter
        if char in SALT_CHARSET:
            raise DelimiterOverlapsSalt(char)

    if schema.empty:
        for char in schema.empty:
            if not is_allowed_char(char):
                raise InvalidCharacterInPlaceholder(char)
        if delim in schema.empty or ends_with_delimiter_prefix(schema.empty, delim):
            raise DelimiterFoundInPlaceholder(schema.empty)

    reduce(
        lambda seen, category: _check_category(schema, category, seen),
        schema.categories,
        frozenset(),
    )
    return schema


def _check_category(schema: Schema, category: Category, seen: FrozenSet[str]) -> FrozenSet[str]:
    tags = category.tags
    if not tags:
        raise CategoryWithNoTags(category.name)
    if "" in tags:
        raise EmptyStringNotValidTag(category.name)

    for tag in tags:
        if tag in seen:
            raise TagsMustBeUnique(category.name, tag)
        if schema.delim in tag:
            raise DelimiterFoundInTag(category.name, tag)
        if ends_with_delimiter_prefix(tag, schema.delim):
            raise DelimiterOverlapsTag(category.name, tag)
        for char in tag:
            if not is_allowed_char(char):
                raise InvalidCharacterInTag(char)
        if tag == schema.empty:
            raise PlaceholderCollidesWithTag(category.name, tag)
        seen = seen | {tag}
    return seen


def ends_with_delimiter_prefix(tag: str, delim: str) -> bool:
    """Return True when splitting on ``delim`` could cut into ``tag``.

    Only multi-character delimiters have proper prefixes, so a single
    character delimiter never triggers this.
    """
    return any(tag.endswith(delim[:size]) for size in range(1, len(delim)))


__all__ = ["validate_schema", "is_allowed_char", "ends_with_delimiter_prefix"]
