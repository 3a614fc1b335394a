"""Executor for rename operations."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .models import RenameOperation

LOGGER = logging.getLogger(__name__)


class RenameExecutor:
    """Apply rename operations without ever overwriting another file."""

    def apply(self, operation: RenameOperation, dry_run: bool = False) -> RenameOperation:
        """Rename the operation's source to its destination.

        Args:
            operation: Rename computed by the planner.
            dry_run: When true, only validate the operation.

        Returns:
            RenameOperation: The operation that was applied.

        Raises:
            FileNotFoundError: If the source file is missing.
            FileExistsError: If the destination belongs to another file.
        """
        source, destination = operation.source, operation.destination
        if not source.exists():
            raise FileNotFoundError(f"Source path is missing: {source}")
        if destination.exists() and not operation.is_noop:
            raise FileExistsError(f"Destination already exists: {destination}")

        if dry_run or operation.is_noop:
            return operation

        self._move_exclusive(source, destination)
        LOGGER.info("Renamed %s -> %s", source.name, destination.name)
        return operation

    def _move_exclusive(self, source: Path, destination: Path) -> None:
        """Move ``source`` to ``destination``, failing if the destination appears.

        The destination is claimed with a hard link, which fails when the
        name is already taken.

        Raises:
            FileExistsError: If ``destination`` exists by the time of the move.
        """
        try:
            os.link(source, destination)
        except FileExistsError:
            raise
        except OSError as exc:
            # filesystems without hard links
            LOGGER.debug("Hard link unavailable for %s (%s); renaming.", source, exc)
            if destination.exists():
                raise FileExistsError(f"Destination already exists: {destination}") from exc
            source.rename(destination)
            return
        source.unlink()


__all__ = ["RenameExecutor"]
