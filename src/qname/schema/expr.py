"""Untyped expression tree produced by the schema parser."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True, slots=True)
class FnU:
    """Function application such as ``exactly 1``."""

    name: str
    args: Tuple[ExprU, ...] = ()


@dataclass(frozen=True, slots=True)
class ListU:
    items: Tuple[ExprU, ...] = ()


@dataclass(frozen=True, slots=True)
class StringU:
    value: str


@dataclass(frozen=True, slots=True)
class NatU:
    """Natural number literal in the range 0..255."""

    value: int


@dataclass(frozen=True, slots=True)
class KeywordU:
    """A ``"name"/"id"`` pair."""

    name: str
    id: str


ExprU = Union[FnU, ListU, StringU, NatU, KeywordU]

__all__ = ["ExprU", "FnU", "ListU", "StringU", "NatU", "KeywordU"]
