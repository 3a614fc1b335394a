"""Planner turning tag selections into rename operations."""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Optional

from qname.filename import UnexpectedTag, gen_salt, parse_filename, selection_to_filename
from qname.schema.models import Schema
from qname.state import State

from .models import RenameOperation

LOGGER = logging.getLogger(__name__)


def split_extension(name: str, *, keep_extension: bool = True) -> tuple[str, str]:
    """Split a file name into its filename body and extension.

    Args:
        name: File name, optionally with an extension.
        keep_extension: When False the whole name is treated as the body.

    Returns:
        tuple[str, str]: Body and extension (including the dot, or empty).
    """
    if not keep_extension:
        return name, ""
    suffix = Path(name).suffix
    if not suffix:
        return name, ""
    return name[: -len(suffix)], suffix


def read_filename(schema: Schema, name: str, *, keep_extension: bool = True) -> State:
    """Recover the tag selection encoded in a file name.

    The whole name is tried first, so names without an extension keep a last
    tag that contains a dot. Only when that fails is the extension stripped.

    Args:
        schema: Schema that generated the name.
        name: File name, with or without an extension.
        keep_extension: When False the whole name is always the filename body.

    Returns:
        State: The decoded selection.

    Raises:
        UnexpectedTag: If neither reading matches the schema.
    """
    try:
        return parse_filename(schema, name)
    except UnexpectedTag:
        body, extension = split_extension(name, keep_extension=keep_extension)
        if not extension:
            raise
        return parse_filename(schema, body)


class RenamePlanner:
    """Derive rename operations for files from tag selections."""

    def __init__(
        self,
        schema: Schema,
        *,
        rng: Optional[random.Random] = None,
        keep_extension: bool = True,
        max_salt_attempts: int = 10,
    ) -> None:
        """Initialize the planner.

        Args:
            schema: Validated schema used to encode selections.
            rng: Random source for replacement salts.
            keep_extension: Whether the original extension is carried over.
            max_salt_attempts: Salts to try before giving up on a taken name.
        """
        self.schema = schema
        self.rng = rng if rng is not None else random.Random()
        self.keep_extension = keep_extension
        self.max_salt_attempts = max_salt_attempts

    def plan(self, path: Path, state: State) -> RenameOperation:
        """Build the rename operation for ``path``.

        The selection's salt is used first. When the resulting name already
        belongs to another file a fresh salt is drawn, up to
        ``max_salt_attempts`` times; ``state`` itself is never modified.

        Args:
            path: File to rename.
            state: Tag selection for the file.

        Returns:
            RenameOperation: Planned rename.

        Raises:
            RequirementMismatch: If the selection breaks a category requirement.
            FileExistsError: If every attempted name is already taken.
        """
        _, extension = split_extension(path.name, keep_extension=self.keep_extension)
        candidate_state = state
        for attempt in range(self.max_salt_attempts):
            body = selection_to_filename(self.schema, candidate_state)
            destination = path.with_name(f"{body}{extension}")
            if destination == path or not destination.exists():
                return RenameOperation(
                    source=path,
                    destination=destination,
                    salt=candidate_state.salt,
                    tags=self._selected_tags(candidate_state),
                    salt_retries=attempt,
                )
            LOGGER.debug("Name %s is taken; drawing a new salt.", destination.name)
            candidate_state = state.model_copy(update={"salt": gen_salt(self.rng)})

        raise FileExistsError(
            f"No free name for {path} after {self.max_salt_attempts} salt attempts."
        )

    def read_selection(self, path: Path) -> State:
        """Recover the tag selection encoded in an existing file's name.

        Raises:
            UnexpectedTag: If the name was not produced by this schema.
        """
        return read_filename(self.schema, path.name, keep_extension=self.keep_extension)

    def _selected_tags(self, state: State) -> list[str]:
        return [tag for selection in state.categories for tag in selection.selected_ids()]


__all__ = ["RenamePlanner", "read_filename", "split_extension"]
