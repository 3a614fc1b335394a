"""Schema models describing categories, keywords, and requirements."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from qname.state import State

RequirementKind = Literal["exactly", "at_least", "at_most"]

_REQUIREMENT_LABELS: dict[str, str] = {
    "exactly": "exactly",
    "at_least": "at least",
    "at_most": "at most",
}


class QnameBaseModel(BaseModel):
    """Shared configuration for immutable schema models."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class Requirement(QnameBaseModel):
    """Cardinality constraint on the number of tags selected in a category.

    Attributes:
        kind: One of ``exactly``, ``at_least`` or ``at_most``.
        count: Non-negative bound applied to the selected tag count.
    """

    kind: RequirementKind
    count: int = Field(ge=0)

    @classmethod
    def exactly(cls, count: int) -> Requirement:
        return cls(kind="exactly", count=count)

    @classmethod
    def at_least(cls, count: int) -> Requirement:
        return cls(kind="at_least", count=count)

    @classmethod
    def at_most(cls, count: int) -> Requirement:
        return cls(kind="at_most", count=count)

    def is_satisfied_by(self, selected: int) -> bool:
        """Return whether ``selected`` tags meet this requirement."""
        if self.kind == "exactly":
            return selected == self.count
        if self.kind == "at_most":
            return selected <= self.count
        return selected >= self.count

    @property
    def label(self) -> str:
        """Return a human readable form such as ``at least 1``."""
        return f"{_REQUIREMENT_LABELS[self.kind]} {self.count}"

    def __str__(self) -> str:
        return self.label


class Keyword(QnameBaseModel):
    """A selectable tag.

    Attributes:
        name: Label shown to the user.
        id: Identifier written into filenames.
    """

    name: str
    id: str


class Category(QnameBaseModel):
    """A named group of keywords sharing one requirement.

    Attributes:
        name: Display label of the category.
        requirement: Constraint on how many keywords may be selected.
        keywords: Ordered keywords; bare strings are accepted as shorthand
            for a keyword whose name and id are identical.
    """

    name: str
    requirement: Requirement
    keywords: List[Keyword] = Field(default_factory=list)

    @field_validator("keywords", mode="before")
    @classmethod
    def _expand_shorthand(cls, value: Any) -> Any:
        if not isinstance(value, (list, tuple)):
            return value
        return [{"name": item, "id": item} if isinstance(item, str) else item for item in value]

    @property
    def tags(self) -> list[str]:
        """Return keyword ids in declaration order."""
        return [keyword.id for keyword in self.keywords]


class Schema(QnameBaseModel):
    """Validated tagging schema.

    Attributes:
        delim: Separator placed between tags in generated filenames.
        empty: Placeholder written for a category without a selected tag.
        categories: Ordered categories; the order fixes filename tag order.
    """

    delim: str
    empty: str = ""
    categories: List[Category] = Field(default_factory=list)

    @property
    def tags(self) -> list[str]:
        """Return every keyword id across all categories, in order."""
        return [tag for category in self.categories for tag in category.tags]

    def parse_filename(self, filename: str) -> State:
        """Recover the selection encoded in ``filename``.

        See :func:`qname.filename.codec.parse_filename`.
        """
        from qname.filename.codec import parse_filename

        return parse_filename(self, filename)


__all__ = [
    "QnameBaseModel",
    "RequirementKind",
    "Requirement",
    "Keyword",
    "Category",
    "Schema",
]
