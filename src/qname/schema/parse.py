"""Recursive-descent parser for the schema definition language.

The language is a tiny expression syntax built from function applications,
lists, strings, natural numbers, and ``"name"/"id"`` keyword pairs::

    schema "-" "_"
      [ category "Media" (exactly 1) ["art", "photo"/"ph", "video"/"v"]
      , category "People" (at_least 0) ["chris", "nate", "stefan"]
      ]

Function arguments have no explicit delimiter: they are collected greedily,
separated by spaces or by a newline followed by an indent of two spaces or
one tab. Alternatives are tried in order with full backtracking, so parsing
is all-or-nothing and never recovers from an error.
"""

from __future__ import annotations

import re
from typing import Callable, List, NoReturn, TypeVar

from .errors import MustStartWithSchemaConstructor, UnexpectedInput
from .expr import ExprU, FnU, KeywordU, ListU, NatU, StringU

T = TypeVar("T")

_IDENTIFIER = re.compile(r"[A-Za-z][A-Za-z_-]*")
_DIGITS = re.compile(r"[0-9]+")
_SPACE = " \t"
_LINE_SPACE = " \t\n"
_INDENTS = ("  ", "\t")
_NAT_MAX = 255


# ###############
# Public Interface
# ###############


def parse(source: str) -> FnU:
    """Parse schema source text into an untyped expression tree.

    Args:
        source: Full text of a schema document.

    Returns:
        FnU: The top-level function application, normally ``schema``.

    Raises:
        UnexpectedInput: If the grammar cannot consume the whole document.
        MustStartWithSchemaConstructor: If the document is not a function
            application.
    """
    text = strip_comments(source.replace("\r\n", "\n"))
    parser = _Parser(text)
    expr = parser.document()
    if not isinstance(expr, FnU):
        raise MustStartWithSchemaConstructor()
    return expr


def strip_comments(text: str) -> str:
    """Remove ``#`` line comments that are not inside a string literal."""
    kept: List[str] = []
    in_string = False
    in_comment = False
    for char in text:
        if in_comment:
            if char == "\n":
                in_comment = False
                kept.append(char)
            continue
        if char == '"':
            in_string = not in_string
        elif char == "#" and not in_string:
            in_comment = True
            continue
        kept.append(char)
    return "".join(kept)


# ################
# Implementation
# ################


class _NoMatch(Exception):
    """Signals that the current alternative does not match."""


class _Parser:
    """Backtracking parser over a single source string."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0
        self._furthest = 0

    def document(self) -> ExprU:
        """Parse one expression spanning the whole text."""
        self._skip(_LINE_SPACE)
        try:
            expr = self.expr()
        except _NoMatch:
            raise self._unexpected(self._furthest) from None
        end = self._pos
        self._skip(_LINE_SPACE)
        if self._pos < len(self._text):
            raise self._unexpected(max(end, self._furthest))
        return expr

    # ------------------------------------------------------------------
    # Grammar rules
    # ------------------------------------------------------------------

    def expr(self) -> ExprU:
        # keywords come before strings because both lead with a string
        return self._first_of(
            self._parens,
            self.list_literal,
            self.func,
            self.nat,
            self.keyword,
            self._string_expr,
        )

    def func(self) -> FnU:
        name = self._identifier()
        self._identifier_end()
        args = self._separated(self._line_space1, self.expr)
        return FnU(name=name, args=tuple(args))

    def list_literal(self) -> ListU:
        self._literal("[")
        items = self._first_of(self._list_items, self._empty_list_items)
        self._literal("]")
        return ListU(items=tuple(items))

    def keyword(self) -> KeywordU:
        name = self.string()
        self._literal("/")
        ident = self.string()
        return KeywordU(name=name, id=ident)

    def string(self) -> str:
        self._literal('"')
        close = self._text.find('"', self._pos)
        if close < 0:
            self._fail()
        value = self._text[self._pos : close]
        self._pos = close + 1
        return value

    def nat(self) -> NatU:
        match = _DIGITS.match(self._text, self._pos)
        if match is None or int(match.group()) > _NAT_MAX:
            self._fail()
        self._pos = match.end()
        return NatU(value=int(match.group()))

    # ------------------------------------------------------------------
    # Rule helpers
    # ------------------------------------------------------------------

    def _parens(self) -> ExprU:
        self._literal("(")
        inner = self.expr()
        self._literal(")")
        return inner

    def _string_expr(self) -> StringU:
        return StringU(value=self.string())

    def _list_items(self) -> List[ExprU]:
        return self._separated(self._comma, self._padded_expr, allow_empty=False)

    def _empty_list_items(self) -> List[ExprU]:
        self._skip(_LINE_SPACE)
        return []

    def _padded_expr(self) -> ExprU:
        self._skip(_LINE_SPACE)
        value = self.expr()
        self._skip(_LINE_SPACE)
        return value

    def _comma(self) -> None:
        self._skip(_LINE_SPACE)
        self._literal(",")
        self._skip(_LINE_SPACE)

    def _identifier(self) -> str:
        match = _IDENTIFIER.match(self._text, self._pos)
        if match is None:
            self._fail()
        self._pos = match.end()
        return match.group()

    def _identifier_end(self) -> None:
        """Require a newline plus indent, spaces, or end of input."""
        start = self._pos
        self._skip(_SPACE)
        if self._skip("\n") and self._text.startswith(_INDENTS, self._pos):
            self._skip(_SPACE)
            return
        self._pos = start
        if self._skip(_SPACE) or self._pos == len(self._text):
            return
        self._fail()

    def _line_space1(self) -> None:
        if not self._skip(_LINE_SPACE):
            self._fail()

    def _separated(
        self,
        separator: Callable[[], object],
        value: Callable[[], T],
        *,
        allow_empty: bool = True,
    ) -> List[T]:
        """Parse ``value (separator value)*``, stopping before a dangling separator."""
        start = self._pos
        try:
            items = [value()]
        except _NoMatch:
            self._pos = start
            if allow_empty:
                return []
            raise
        while True:
            before = self._pos
            try:
                separator()
                items.append(value())
            except _NoMatch:
                self._pos = before
                return items

    # ------------------------------------------------------------------
    # Character access
    # ------------------------------------------------------------------

    def _first_of(self, *rules: Callable[[], T]) -> T:
        start = self._pos
        for rule in rules:
            try:
                return rule()
            except _NoMatch:
                self._pos = start
        self._fail()

    def _literal(self, token: str) -> None:
        if not self._text.startswith(token, self._pos):
            self._fail()
        self._pos += len(token)

    def _skip(self, chars: str) -> int:
        start = self._pos
        while self._pos < len(self._text) and self._text[self._pos] in chars:
            self._pos += 1
        return self._pos - start

    def _fail(self) -> NoReturn:
        self._furthest = max(self._furthest, self._pos)
        raise _NoMatch()

    def _unexpected(self, position: int) -> UnexpectedInput:
        line = self._text.count("\n", 0, position) + 1
        column = position - (self._text.rfind("\n", 0, position) + 1) + 1
        return UnexpectedInput(self._text[position:], line=line, column=column)


__all__ = ["parse", "strip_comments"]
