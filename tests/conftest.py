"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from codemorph.lexer import tokenize
from codemorph.tokens import (
    DiffStatus,
    DiffToken,
    Position,
    Span,
    Token,
    TokenType,
    make_token_id,
)


@pytest.fixture
def lex():
    """Return a helper that tokenizes source for a language (default javascript)."""

    def _lex(source: str, language: str = "javascript") -> list[Token]:
        return tokenize(source, language)

    return _lex


def make_tokens(*parts: tuple[TokenType, str], language: str = "test") -> list[Token]:
    """Build a token list from (type, content) pairs with realistic ids and spans."""
    tokens: list[Token] = []
    offset = 0
    for tt, content in parts:
        start = Position(1, offset + 1, offset)
        end = Position(1, offset + len(content) + 1, offset + len(content))
        token_id = make_token_id(language, offset, tt, content)
        tokens.append(Token(tt, content, token_id, Span(start, end)))
        offset += len(content)
    return tokens


def words(*contents: str) -> list[Token]:
    """Build TEXT tokens, except that whitespace-only strings become WHITESPACE."""
    return make_tokens(
        *((TokenType.WHITESPACE if c.isspace() else TokenType.TEXT, c) for c in contents)
    )


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_contents(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token contents match the expected list."""
    actual = [t.content for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def by_status(tokens: list[DiffToken], status: DiffStatus) -> list[str]:
    """Return the contents of tokens with the given status, in output order."""
    return [t.content for t in tokens if t.status == status]
