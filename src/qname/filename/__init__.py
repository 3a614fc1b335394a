"""Filename generation and parsing for tag selections."""

from .codec import parse_filename, selection_to_filename
from .errors import (
    FilenameParseError,
    GenerateFilenameError,
    RequirementMismatch,
    SaltContainsDelimiter,
    UnexpectedTag,
)
from .salt import SALT_CHARSET, SALT_LENGTH, gen_salt

__all__ = [
    "selection_to_filename",
    "parse_filename",
    "gen_salt",
    "SALT_CHARSET",
    "SALT_LENGTH",
    "GenerateFilenameError",
    "RequirementMismatch",
    "SaltContainsDelimiter",
    "FilenameParseError",
    "UnexpectedTag",
]
