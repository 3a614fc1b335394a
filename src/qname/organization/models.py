"""Rename plan data models."""

from __future__ import annotations

from pathlib import Path
from typing import List

from pydantic import BaseModel, Field


class RenameOperation(BaseModel):
    """Represents renaming one file after its tag selection.

    Attributes:
        source: Original file path prior to the rename.
        destination: Target path after the rename.
        salt: Salt embedded in the destination name.
        tags: Selected tag ids, in filename order.
        salt_retries: Number of salts discarded because the name was taken.
    """

    source: Path
    destination: Path
    salt: str
    tags: List[str] = Field(default_factory=list)
    salt_retries: int = 0

    @property
    def is_noop(self) -> bool:
        return self.source == self.destination


__all__ = ["RenameOperation"]
