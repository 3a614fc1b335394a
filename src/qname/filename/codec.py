"""Deterministic, invertible mapping between selections and filenames.

A filename body is the salt followed by each category's selected tag ids,
all joined by the schema delimiter::

    ZQYC5T-cat-chris

A category with nothing selected contributes the schema's placeholder
instead, so category boundaries stay recoverable. Because tags are unique
across the schema and, like the salt, never contain the delimiter,
:func:`parse_filename` inverts :func:`selection_to_filename` exactly.
"""

from __future__ import annotations

import logging
from collections import deque

from qname.schema.models import Schema
from qname.schema.validate import ends_with_delimiter_prefix
from qname.state import State, to_empty_state

from .errors import RequirementMismatch, SaltContainsDelimiter, UnexpectedTag

LOGGER = logging.getLogger(__name__)


def selection_to_filename(schema: Schema, state: State) -> str:
    """Serialize a selection into an extension-free filename body.

    Selections are matched to categories by position, so ``state`` must
    come from :func:`qname.state.to_empty_state` for the same schema.

    Args:
        schema: Validated schema describing the categories.
        state: Selection to encode; it is only read.

    Returns:
        str: Salt and selected tags joined by the delimiter.

    Raises:
        SaltContainsDelimiter: If the salt could not be split off again.
        RequirementMismatch: For the first category, in schema order, whose
            selected tag count breaks its requirement.
    """
    if schema.delim in state.salt or ends_with_delimiter_prefix(state.salt, schema.delim):
        raise SaltContainsDelimiter(state.salt, schema.delim)

    parts = [state.salt]
    for category, selection in zip(schema.categories, state.categories):
        chosen = set(selection.selected_ids())
        selected = [tag for tag in category.tags if tag in chosen]
        if not category.requirement.is_satisfied_by(len(selected)):
            raise RequirementMismatch(
                category=category, expected=category.requirement, got=len(selected)
            )
        parts.extend(selected or [schema.empty])

    filename = schema.delim.join(parts)
    LOGGER.debug("Generated filename %s", filename)
    return filename


def parse_filename(schema: Schema, filename: str) -> State:
    """Recover the selection encoded in a filename body.

    The first token is taken verbatim as the salt. Each category then
    consumes, in schema order, the longest run of leading tokens that are
    among its tags in declaration order; a category that consumed nothing
    also consumes its placeholder. Repeated or reordered tags are left
    unconsumed, so only names :func:`selection_to_filename` can produce are
    accepted.

    Args:
        schema: Validated schema that generated the filename.
        filename: Filename body without an extension.

    Returns:
        State: Selection with the consumed tags selected.

    Raises:
        UnexpectedTag: If tokens remain after every category has consumed
            its run; names the first leftover token.
    """
    salt, *rest = filename.split(schema.delim)
    tokens = deque(rest)
    state = to_empty_state(schema, salt)

    for category, selection in zip(schema.categories, state.categories):
        positions = {tag: index for index, tag in enumerate(category.tags)}
        run: set[str] = set()
        last = -1
        while tokens and positions.get(tokens[0], -1) > last:
            last = positions[tokens[0]]
            run.add(tokens.popleft())
        if not run and tokens and tokens[0] == schema.empty:
            tokens.popleft()
        for entry in selection.tags:
            entry.selected = entry.keyword.id in run

    if tokens:
        raise UnexpectedTag(tokens[0])
    return state


__all__ = ["selection_to_filename", "parse_filename"]
