"""Selection state mirroring a schema's categories."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from qname.schema.models import Category, Keyword

from .errors import UnknownTagError


class TagSelection(BaseModel):
    """One keyword and whether it is currently selected."""

    keyword: Keyword
    selected: bool = False


class CategorySelection(BaseModel):
    """Selections for the keywords of a single category."""

    category: Category
    tags: List[TagSelection] = Field(default_factory=list)

    @property
    def name(self) -> str:
        return self.category.name

    def selected_ids(self) -> list[str]:
        """Return selected keyword ids in declaration order."""
        return [entry.keyword.id for entry in self.tags if entry.selected]


class State(BaseModel):
    """Mutable record of which tags are checked, plus the filename salt.

    Attributes:
        salt: Random prefix that keeps generated filenames unique.
        categories: Per-category selections in schema order.
    """

    salt: str
    categories: List[CategorySelection] = Field(default_factory=list)

    def toggle(self, tag: str) -> bool:
        """Flip the selection of ``tag`` and return its new value.

        Raises:
            UnknownTagError: If no category declares ``tag``.
        """
        entry = self._find(tag)
        entry.selected = not entry.selected
        return entry.selected

    def select(self, tag: str, selected: bool = True) -> None:
        """Set the selection of ``tag``, matched by id or keyword name.

        Raises:
            UnknownTagError: If no category declares ``tag``.
        """
        self._find(tag).selected = selected

    def selected_tags(self, category_name: str) -> list[str]:
        """Return the selected ids of one category.

        Raises:
            KeyError: If the selection has no category with that name.
        """
        for category in self.categories:
            if category.name == category_name:
                return category.selected_ids()
        raise KeyError(category_name)

    def clear(self) -> None:
        """Deselect every tag, keeping the salt."""
        for category in self.categories:
            for entry in category.tags:
                entry.selected = False

    def _find(self, tag: str) -> TagSelection:
        entries = [entry for category in self.categories for entry in category.tags]
        for entry in entries:
            if entry.keyword.id == tag:
                return entry
        for entry in entries:
            if entry.keyword.name == tag:
                return entry
        raise UnknownTagError(tag)


__all__ = ["TagSelection", "CategorySelection", "State"]
