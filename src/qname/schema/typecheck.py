"""Type checker folding an untyped expression tree into a ``Schema``.

The checker is a single depth-first evaluation. Every sub-expression is
reduced to a typed node, and the first error anywhere in the tree aborts the
pass. Only the root is required to reduce to a schema.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .errors import (
    ExpectedTopLevelSchema,
    HeterogeneousList,
    TypeMismatch,
    UnknownFunction,
)
from .expr import ExprU, FnU, KeywordU, ListU, NatU, StringU
from .models import Category, Keyword, Requirement, Schema


@dataclass(frozen=True, slots=True)
class Type:
    """Type descriptor reported in diagnostics.

    Attributes:
        name: Base type name such as ``string`` or ``list``.
        element: Element type for lists, ``None`` otherwise.
    """

    name: str
    element: Optional[Type] = None

    def __str__(self) -> str:
        if self.element is not None:
            return f"{self.name}[{self.element}]"
        return self.name


STRING = Type("string")
NAT = Type("nat")
KEYWORD = Type("keyword")
SCHEMA = Type("schema")
CATEGORY = Type("category")
REQUIREMENT = Type("requirement")
HOLE = Type("unknown")


def list_of(element: Type) -> Type:
    return Type("list", element)


# Typed nodes --------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SchemaT:
    schema: Schema


@dataclass(frozen=True, slots=True)
class CategoryT:
    category: Category


@dataclass(frozen=True, slots=True)
class RequirementT:
    requirement: Requirement


@dataclass(frozen=True, slots=True)
class KeywordT:
    keyword: Keyword


@dataclass(frozen=True, slots=True)
class NatT:
    value: int


@dataclass(frozen=True, slots=True)
class StringT:
    value: str


@dataclass(frozen=True, slots=True)
class ListT:
    items: Tuple[ExprT, ...]


ExprT = Union[SchemaT, CategoryT, RequirementT, KeywordT, NatT, StringT, ListT]

_REQUIREMENTS = {
    "exactly": Requirement.exactly,
    "at_least": Requirement.at_least,
    "at_most": Requirement.at_most,
}


def typecheck(expr: ExprU) -> Schema:
    """Typecheck a parsed document and build the schema it describes.

    Args:
        expr: Root of the untyped expression tree.

    Returns:
        Schema: Schema built from the document; not yet validated.

    Raises:
        SchemaTypeCheckError: If any sub-expression is ill-typed, or the
            root does not evaluate to a schema.
    """
    typed = _typecheck(expr)
    if not isinstance(typed, SchemaT):
        raise ExpectedTopLevelSchema()
    return typed.schema


def type_of(expr: ExprT) -> Type:
    """Return the type of a typed node; a list takes its first element's type."""
    if isinstance(expr, SchemaT):
        return SCHEMA
    if isinstance(expr, CategoryT):
        return CATEGORY
    if isinstance(expr, RequirementT):
        return REQUIREMENT
    if isinstance(expr, KeywordT):
        return KEYWORD
    if isinstance(expr, NatT):
        return NAT
    if isinstance(expr, StringT):
        return STRING
    if not expr.items:
        return list_of(HOLE)
    return list_of(type_of(expr.items[0]))


def _typecheck(expr: ExprU) -> ExprT:
    if isinstance(expr, NatU):
        return NatT(expr.value)
    if isinstance(expr, StringU):
        return StringT(expr.value)
    if isinstance(expr, KeywordU):
        return KeywordT(Keyword(name=expr.name, id=expr.id))
    if isinstance(expr, ListU):
        return _typecheck_list(expr)
    return _typecheck_function(expr)


def _typecheck_list(expr: ListU) -> ListT:
    items = tuple(_typecheck(item) for item in expr.items)
    types = list(dict.fromkeys(type_of(item) for item in items))
    if len(types) > 1:
        raise HeterogeneousList(types)
    return ListT(items)


def _typecheck_function(expr: FnU) -> ExprT:
    name, args = expr.name, expr.args

    if name in _REQUIREMENTS and len(args) == 1 and isinstance(args[0], NatU):
        return RequirementT(_REQUIREMENTS[name](args[0].value))

    if (
        name == "category"
        and len(args) == 3
        and isinstance(args[0], StringU)
        and isinstance(args[1], FnU)
        and isinstance(args[2], ListU)
    ):
        return _typecheck_category(args[0].value, args[1], args[2])

    if (
        name == "schema"
        and len(args) == 3
        and isinstance(args[0], StringU)
        and isinstance(args[1], StringU)
        and isinstance(args[2], ListU)
    ):
        return _typecheck_schema(args[0].value, args[1].value, args[2])

    arg_types = [type_of(_typecheck(arg)) for arg in args]
    raise UnknownFunction(name, arg_types)


def _typecheck_category(name: str, requirement: FnU, keywords: ListU) -> CategoryT:
    typed_requirement = _typecheck(requirement)
    if not isinstance(typed_requirement, RequirementT):
        raise TypeMismatch(expected=REQUIREMENT, got=type_of(typed_requirement))

    typed_keywords = _typecheck_list(_promote_bare_strings(keywords))
    _expect_list_of(typed_keywords, KEYWORD)

    category = Category(
        name=name,
        requirement=typed_requirement.requirement,
        keywords=[item.keyword for item in typed_keywords.items if isinstance(item, KeywordT)],
    )
    return CategoryT(category)


def _typecheck_schema(delim: str, empty: str, categories: ListU) -> SchemaT:
    typed_categories = _typecheck_list(categories)
    _expect_list_of(typed_categories, CATEGORY)

    schema = Schema(
        delim=delim,
        empty=empty,
        categories=[
            item.category for item in typed_categories.items if isinstance(item, CategoryT)
        ],
    )
    return SchemaT(schema)


def _expect_list_of(items: ListT, element: Type) -> None:
    """Accept a list of ``element`` or the empty list, whose type is a hole."""
    got = type_of(items)
    if got.element not in (element, HOLE):
        raise TypeMismatch(expected=list_of(element), got=got)


def _promote_bare_strings(keywords: ListU) -> ListU:
    """Treat ``"art"`` in a keyword list as the keyword ``"art"/"art"``."""
    return ListU(
        tuple(
            KeywordU(name=item.value, id=item.value) if isinstance(item, StringU) else item
            for item in keywords.items
        )
    )


__all__ = [
    "Type",
    "STRING",
    "NAT",
    "KEYWORD",
    "SCHEMA",
    "CATEGORY",
    "REQUIREMENT",
    "HOLE",
    "list_of",
    "typecheck",
    "type_of",
]
