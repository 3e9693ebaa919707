"""Test the markup scanner."""

from __future__ import annotations

import pytest

from codemorph.tokens import TokenType
from tests.conftest import assert_contents, assert_types

T = TokenType


@pytest.fixture
def html(lex):
    return lambda source: lex(source, "html")


class TestTags:
    def test_simple_element(self, html) -> None:
        tokens = html("<h1>Hello World</h1>")
        assert_contents(tokens, ["<h1", ">", "Hello", " ", "World", "</h1", ">"])
        assert_types(tokens, [T.TAG, T.TAG, T.TEXT, T.WHITESPACE, T.TEXT, T.TAG, T.TAG])

    def test_quoted_attribute(self, html) -> None:
        tokens = html('<h1 class="header-text">')
        assert_contents(tokens, ["<h1", " ", "class", "=", '"header-text"', ">"])
        assert_types(tokens, [T.TAG, T.WHITESPACE, T.ATTRIBUTE, T.OPERATOR, T.STRING, T.TAG])

    def test_single_quoted_attribute(self, html) -> None:
        tokens = html("<a title='x y'>")
        assert tokens[4].content == "'x y'"
        assert tokens[4].type == T.STRING

    def test_bare_attribute_value(self, html) -> None:
        tokens = html("<a href=foo>")
        assert_contents(tokens, ["<a", " ", "href", "=", "foo", ">"])
        assert tokens[4].type == T.STRING

    def test_boolean_attribute(self, html) -> None:
        tokens = html("<input disabled>")
        assert_types(tokens, [T.TAG, T.WHITESPACE, T.ATTRIBUTE, T.TAG])

    def test_self_closing(self, html) -> None:
        assert_contents(html("<br/>"), ["<br", "/>"])

    def test_multiline_tag(self, html) -> None:
        tokens = html('<a\n  href="x">')
        assert tokens[1].type == T.WHITESPACE
        assert tokens[1].content == "\n  "

    def test_quoted_value_may_contain_gt(self, html) -> None:
        tokens = html('<a title="1 > 0">b')
        assert tokens[4].content == '"1 > 0"'
        assert tokens[-1].content == "b"


class TestText:
    def test_whitespace_and_text(self, html) -> None:
        tokens = html("one  two\n")
        assert_contents(tokens, ["one", "  ", "two", "\n"])

    def test_lone_less_than(self, html) -> None:
        tokens = html("a < b")
        assert_contents(tokens, ["a", " ", "<", " ", "b"])
        assert tokens[2].type == T.TEXT

    def test_comment_is_text(self, html) -> None:
        tokens = html("<!-- c -->")
        assert all(t.type in (T.TEXT, T.WHITESPACE) for t in tokens)


class TestMalformed:
    def test_unterminated_tag(self, html) -> None:
        assert_contents(html("<div"), ["<div"])

    def test_unterminated_attribute_value(self, html) -> None:
        tokens = html('<div class="open>text')
        assert tokens[-1].type == T.STRING
        assert tokens[-1].content == '"open>text'

    def test_stray_characters_in_tag(self, html) -> None:
        tokens = html("<a / b>")
        assert "".join(t.content for t in tokens) == "<a / b>"
        assert tokens[2].type == T.TEXT
