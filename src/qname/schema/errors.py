"""Errors raised while loading, typechecking, and validating schemas."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from qname.errors import QnameError

if TYPE_CHECKING:
    from .typecheck import Type


class SchemaError(QnameError):
    """Base exception for schema loading failures."""


class SchemaFileError(SchemaError):
    """Raised when a schema file cannot be read or is not a valid document."""


# Parse errors -------------------------------------------------------------


class SchemaParseError(SchemaError):
    """Base exception for syntax errors in schema source text."""


class MustStartWithSchemaConstructor(SchemaParseError):
    """Raised when the document is not a function application."""

    def __init__(self) -> None:
        super().__init__('Expected "schema" constructor')


class UnexpectedInput(SchemaParseError):
    """Raised when the grammar cannot consume the whole document.

    Attributes:
        remaining: Source text starting at the first unparsable character.
        line: 1-based line of the first unparsable character.
        column: 1-based column of the first unparsable character.
    """

    def __init__(self, remaining: str, line: int = 1, column: int = 1) -> None:
        self.remaining = remaining
        self.line = line
        self.column = column
        snippet = remaining.splitlines()[0] if remaining.strip() else repr(remaining)
        super().__init__(f"Unexpected input at line {line}, column {column}: {snippet}")


# Type errors --------------------------------------------------------------


class SchemaTypeCheckError(SchemaError):
    """Base exception for well-formed documents with the wrong shape."""


class TypeMismatch(SchemaTypeCheckError):
    """Raised when a constructor argument has the wrong type."""

    def __init__(self, expected: Type, got: Type) -> None:
        self.expected = expected
        self.got = got
        super().__init__(f"Type mismatch: expected {expected} but got {got}")


class HeterogeneousList(SchemaTypeCheckError):
    """Raised when list elements do not share one type.

    Attributes:
        types: Distinct element types in order of first appearance.
    """

    def __init__(self, types: Sequence[Type]) -> None:
        self.types = list(types)
        rendered = ", ".join(str(t) for t in self.types)
        super().__init__(f"Lists must contain one type of element, found: {rendered}")


class UnknownFunction(SchemaTypeCheckError):
    """Raised for a constructor name or arity the schema language lacks."""

    def __init__(self, name: str, arg_types: Sequence[Type]) -> None:
        self.name = name
        self.arg_types = list(arg_types)
        signature = " ".join(str(t) for t in self.arg_types)
        suffix = f" {signature}" if signature else ""
        super().__init__(f"Unknown function: {name}{suffix}")


class ExpectedTopLevelSchema(SchemaTypeCheckError):
    """Raised when the document does not evaluate to a schema."""

    def __init__(self) -> None:
        super().__init__("The document must evaluate to a schema")


# Validation errors --------------------------------------------------------


class SchemaValidationError(SchemaError):
    """Base exception for schemas violating cross-field invariants."""


class EmptyDelimiter(SchemaValidationError):
    def __init__(self) -> None:
        super().__init__("The delimiter cannot be empty")


class InvalidCharacterInDelim(SchemaValidationError):
    def __init__(self, char: str) -> None:
        self.char = char
        super().__init__(f"Invalid character in delimiter: {char!r}")


class InvalidCharacterInPlaceholder(SchemaValidationError):
    def __init__(self, char: str) -> None:
        self.char = char
        super().__init__(f"Invalid character in empty-category placeholder: {char!r}")


class DelimiterOverlapsSalt(SchemaValidationError):
    """Raised when the delimiter uses a symbol that generated salts draw from."""

    def __init__(self, char: str) -> None:
        self.char = char
        super().__init__(f"The delimiter cannot contain the salt symbol {char!r}")


class DelimiterFoundInPlaceholder(SchemaValidationError):
    def __init__(self, placeholder: str) -> None:
        self.placeholder = placeholder
        super().__init__(f"The empty-category placeholder {placeholder!r} contains the delimiter")


class CategoryWithNoTags(SchemaValidationError):
    def __init__(self, category_name: str) -> None:
        self.category_name = category_name
        super().__init__(f"Category {category_name} has no tags")


class EmptyStringNotValidTag(SchemaValidationError):
    def __init__(self, category_name: str | None = None) -> None:
        self.category_name = category_name
        where = f" (category {category_name})" if category_name else ""
        super().__init__(f"The empty string is not a valid tag{where}")


class TagsMustBeUnique(SchemaValidationError):
    """Raised for a tag declared twice; names the later category."""

    def __init__(self, category_name: str, tag: str) -> None:
        self.category_name = category_name
        self.tag = tag
        super().__init__(f"Tag {tag!r} in category {category_name} is already used")


class DelimiterFoundInTag(SchemaValidationError):
    def __init__(self, category_name: str, tag: str) -> None:
        self.category_name = category_name
        self.tag = tag
        super().__init__(f"Tag {tag!r} in category {category_name} contains the delimiter")


class DelimiterOverlapsTag(SchemaValidationError):
    """Raised when a tag ends with the start of a multi-character delimiter."""

    def __init__(self, category_name: str, tag: str) -> None:
        self.category_name = category_name
        self.tag = tag
        super().__init__(
            f"Tag {tag!r} in category {category_name} ends with part of the delimiter"
        )


class InvalidCharacterInTag(SchemaValidationError):
    def __init__(self, char: str) -> None:
        self.char = char
        super().__init__(f"Invalid character in tag: {char!r}")


class PlaceholderCollidesWithTag(SchemaValidationError):
    def __init__(self, category_name: str, tag: str) -> None:
        self.category_name = category_name
        self.tag = tag
        super().__init__(
            f"Tag {tag!r} in category {category_name} is the empty-category placeholder"
        )


__all__ = [
    "SchemaError",
    "SchemaFileError",
    "SchemaParseError",
    "MustStartWithSchemaConstructor",
    "UnexpectedInput",
    "SchemaTypeCheckError",
    "TypeMismatch",
    "HeterogeneousList",
    "UnknownFunction",
    "ExpectedTopLevelSchema",
    "SchemaValidationError",
    "EmptyDelimiter",
    "InvalidCharacterInDelim",
    "DelimiterOverlapsSalt",
    "InvalidCharacterInPlaceholder",
    "DelimiterFoundInPlaceholder",
    "CategoryWithNoTags",
    "EmptyStringNotValidTag",
    "TagsMustBeUnique",
    "DelimiterFoundInTag",
    "DelimiterOverlapsTag",
    "InvalidCharacterInTag",
    "PlaceholderCollidesWithTag",
]
