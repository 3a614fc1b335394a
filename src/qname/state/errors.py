"""Selection state errors."""

from qname.errors import QnameError


class StateError(QnameError):
    """Base exception for selection state operations."""


class UnknownTagError(StateError):
    """Raised when a tag is not declared by the schema behind a selection."""

    def __init__(self, tag: str) -> None:
        self.tag = tag
        super().__init__(f"Unknown tag: {tag!r}")
