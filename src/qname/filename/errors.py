"""Errors raised while generating or parsing filenames."""

from __future__ import annotations

from qname.errors import QnameError
from qname.schema.models import Category, Requirement


class GenerateFilenameError(QnameError):
    """Base exception for selections that cannot be turned into a filename."""


class RequirementMismatch(GenerateFilenameError):
    """Raised when a category's selected tag count breaks its requirement.

    Attributes:
        category: Category whose requirement failed.
        expected: The requirement that was not met.
        got: Number of tags selected in the category.
    """

    def __init__(self, category: Category, expected: Requirement, got: int) -> None:
        self.category = category
        self.expected = expected
        self.got = got
        super().__init__(
            f"Category {category.name} has a tag requirement of {expected}, "
            f"but {got} tag(s) are selected."
        )


class SaltContainsDelimiter(GenerateFilenameError):
    """Raised when a salt would merge with the tags that follow it."""

    def __init__(self, salt: str, delim: str) -> None:
        self.salt = salt
        self.delim = delim
        super().__init__(f"Salt {salt!r} overlaps the delimiter {delim!r}")


class FilenameParseError(QnameError):
    """Base exception for filenames that a schema cannot read back."""


class UnexpectedTag(FilenameParseError):
    """Raised for the first filename token no category could claim."""

    def __init__(self, tag: str) -> None:
        self.tag = tag
        super().__init__(f"Unexpected tag in filename: {tag!r}")


__all__ = [
    "GenerateFilenameError",
    "RequirementMismatch",
    "SaltContainsDelimiter",
    "FilenameParseError",
    "UnexpectedTag",
]
