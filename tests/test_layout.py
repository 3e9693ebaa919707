"""Test line grouping."""

from __future__ import annotations

from codemorph.diff import as_unchanged
from codemorph.layout import split_lines, visible_code
from codemorph.lexer import tokenize
from codemorph.tokens import DiffStatus
from tests.conftest import words


class TestSplitLines:
    def test_single_line(self) -> None:
        lines = split_lines(as_unchanged(words("a", " ", "b")))
        assert [(line.number, line.text) for line in lines] == [(1, "a b")]

    def test_numbering(self) -> None:
        lines = split_lines(as_unchanged(tokenize("a\nb\n\nc", "javascript")))
        assert [(line.number, line.text) for line in lines] == [
            (1, "a"),
            (2, "b"),
            (3, ""),
            (4, "c"),
        ]

    def test_multiline_token_is_split(self) -> None:
        tokens = as_unchanged(tokenize("/* one\ntwo */ x", "javascript"))
        lines = split_lines(tokens)
        assert [line.text for line in lines] == ["/* one", "two */ x"]
        first, second = lines[0].tokens[0], lines[1].tokens[0]
        assert first.id == second.id
        assert first.status == second.status == DiffStatus.UNCHANGED

    def test_trailing_newline_adds_no_line(self) -> None:
        lines = split_lines(as_unchanged(tokenize("a\n", "javascript")))
        assert [line.text for line in lines] == ["a"]

    def test_empty(self) -> None:
        assert split_lines([]) == []


class TestVisibleCode:
    def test_round_trip(self) -> None:
        source = "let a = 1;\nlet b = 2;\n"
        assert visible_code(as_unchanged(tokenize(source, "javascript"))) == source
