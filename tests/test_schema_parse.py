"""Tests for the schema definition language parser."""

import pytest

from qname.schema.errors import MustStartWithSchemaConstructor, UnexpectedInput
from qname.schema.expr import FnU, KeywordU, ListU, NatU, StringU
from qname.schema.parse import parse, strip_comments

EXAMPLE = """\
schema "-" "_"
  [ category "Media" (exactly 1) ["art", "photo"/"ph", "video"/"v"]
  , category "People" (at_least 0) ["chris", "nate", "stefan"]
  ]
"""


def test_parse_full_example() -> None:
    expr = parse(EXAMPLE)

    assert expr == FnU(
        "schema",
        (
            StringU("-"),
            StringU("_"),
            ListU(
                (
                    FnU(
                        "category",
                        (
                            StringU("Media"),
                            FnU("exactly", (NatU(1),)),
                            ListU(
                                (
                                    StringU("art"),
                                    KeywordU("photo", "ph"),
                                    KeywordU("video", "v"),
                                )
                            ),
                        ),
                    ),
                    FnU(
                        "category",
                        (
                            StringU("People"),
                            FnU("at_least", (NatU(0),)),
                            ListU((StringU("chris"), StringU("nate"), StringU("stefan"))),
                        ),
                    ),
                )
            ),
        ),
    )


def test_parse_single_line_with_empty_list() -> None:
    assert parse('schema "-" "" []') == FnU(
        "schema", (StringU("-"), StringU(""), ListU(()))
    )


def test_parse_arguments_on_indented_lines() -> None:
    source = 'schema\n  "-"\n  ""\n  [ ]'

    assert parse(source) == FnU("schema", (StringU("-"), StringU(""), ListU(())))


def test_parse_tab_indented_arguments() -> None:
    source = 'schema\n\t"."\n\t"none"\n\t[]'

    assert parse(source).args[:2] == (StringU("."), StringU("none"))


def test_parse_list_allows_newlines_between_elements() -> None:
    source = 'schema "-" "" [\n  "a"\n  ,\n  "b"/"B"\n]'

    assert parse(source).args[2] == ListU((StringU("a"), KeywordU("b", "B")))


@pytest.mark.parametrize("source", ["foo 0", "foo\n  0", "foo \n  0", "foo\t0", "foo\n\t0"])
def test_function_argument_may_follow_on_indented_line(source: str) -> None:
    assert parse(source) == FnU("foo", (NatU(0),))


def test_list_elements_may_end_with_newlines() -> None:
    assert parse("schema [ 0\n, 1\n]").args[0] == ListU((NatU(0), NatU(1)))


def test_parse_ignores_comments_and_surrounding_whitespace() -> None:
    source = '\n# tags for holiday photos\n  schema "-" "" []  # no categories yet\n\n'

    assert parse(source) == FnU("schema", (StringU("-"), StringU(""), ListU(())))


def test_hash_inside_string_is_not_a_comment() -> None:
    assert parse('schema "#" "" []').args[0] == StringU("#")
    assert strip_comments('"a#b" # gone') == '"a#b" '


def test_parse_accepts_crlf_line_endings() -> None:
    source = 'schema\r\n  "-"\r\n  ""\r\n  []\r\n'

    assert parse(source).name == "schema"


def test_identifiers_allow_underscores_and_hyphens() -> None:
    expr = parse('schema "-" "" [category "A" (at-most 2) ["a"]]')

    category = expr.args[2].items[0]
    assert category.args[1] == FnU("at-most", (NatU(2),))


def test_document_must_be_a_function_application() -> None:
    with pytest.raises(MustStartWithSchemaConstructor) as excinfo:
        parse('"schema"')

    assert str(excinfo.value) == 'Expected "schema" constructor'

    with pytest.raises(MustStartWithSchemaConstructor):
        parse("[]")


@pytest.mark.parametrize("source", ["", "   \n", "(", "schema [", 'schema "-" "" ["a" "b"]'])
def test_malformed_documents_raise_unexpected_input(source: str) -> None:
    with pytest.raises(UnexpectedInput):
        parse(source)


def test_unexpected_input_reports_position_of_error() -> None:
    source = 'schema "-" ""\n  [ category "A" (exactly 1) ["a" "b"]\n  ]'

    with pytest.raises(UnexpectedInput) as excinfo:
        parse(source)

    assert excinfo.value.line == 2
    assert excinfo.value.column == 35
    assert excinfo.value.remaining.startswith('"b"]')
    assert "line 2" in str(excinfo.value)


def test_nat_literals_are_limited_to_a_byte() -> None:
    assert parse('schema "-" "" [category "A" (at_most 255) ["a"]]')

    with pytest.raises(UnexpectedInput):
        parse('schema "-" "" [category "A" (at_most 256) ["a"]]')


def test_unterminated_string_is_rejected() -> None:
    with pytest.raises(UnexpectedInput):
        parse('schema "-')
