"""Selection state helpers."""

from __future__ import annotations

from typing import Iterable

from qname.schema.models import Schema

from .errors import StateError, UnknownTagError
from .models import CategorySelection, State, TagSelection


def to_empty_state(schema: Schema, salt: str = "") -> State:
    """Return a selection for ``schema`` with every tag unselected.

    Args:
        schema: Schema whose categories the selection mirrors.
        salt: Salt carried by the selection.

    Returns:
        State: Fresh selection owned by the caller.
    """
    return State(
        salt=salt,
        categories=[
            CategorySelection(
                category=category,
                tags=[TagSelection(keyword=keyword) for keyword in category.keywords],
            )
            for category in schema.categories
        ],
    )


def state_with_tags(schema: Schema, tags: Iterable[str], salt: str = "") -> State:
    """Return a selection for ``schema`` with ``tags`` selected.

    Raises:
        UnknownTagError: If a tag is not declared by the schema.
    """
    state = to_empty_state(schema, salt)
    for tag in tags:
        state.select(tag)
    return state


__all__ = [
    "State",
    "CategorySelection",
    "TagSelection",
    "StateError",
    "UnknownTagError",
    "to_empty_state",
    "state_with_tags",
]
