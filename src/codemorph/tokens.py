"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    TAG = "tag"  # <div, </div, >, and CSS selectors
    TEXT = "text"  # identifiers, prose, anything unclassified
    ATTRIBUTE = "attribute"  # markup attribute names, CSS property names
    STRING = "string"
    KEYWORD = "keyword"
    OPERATOR = "operator"
    PUNCTUATION = "punctuation"
    NUMBER = "number"
    COMMENT = "comment"
    WHITESPACE = "whitespace"


class DiffStatus(Enum):
    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"


# new_index carried by tokens that only exist in the old sequence
REMOVED_INDEX = -1


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexical token: exact source text, type, and stable identity."""

    type: TokenType
    content: str
    id: str
    span: Span

    @property
    def signature(self) -> tuple[TokenType, str]:
        return self.type, self.content


@dataclass(frozen=True, slots=True)
class DiffToken:
    """A token classified against a previous version of the source.

    ``UNCHANGED`` tokens carry the id of the old token they were matched to.
    ``REMOVED`` tokens carry ``new_index == REMOVED_INDEX`` and the span they
    had in the old source.
    """

    type: TokenType
    content: str
    id: str
    span: Span
    status: DiffStatus
    new_index: int
    old_index: int | None = None
    highlighted: bool = False

    @classmethod
    def from_token(
        cls,
        token: Token,
        status: DiffStatus,
        new_index: int,
        old_index: int | None = None,
        *,
        id: str | None = None,
    ) -> DiffToken:
        return cls(
            token.type,
            token.content,
            token.id if id is None else id,
            token.span,
            status,
            new_index,
            old_index,
        )

    @property
    def signature(self) -> tuple[TokenType, str]:
        return self.type, self.content


def make_token_id(language: str, offset: int, tt: TokenType, content: str) -> str:
    """Derive a token id from its language, offset, type, and content.

    The same (language, source) pair always yields the same ids, and offsets
    keep them unique within one tokenization.
    """
    fingerprint = hashlib.blake2s(content.encode("utf-8"), digest_size=4).hexdigest()
    return f"{language}:{tt.value}:{offset}:{fingerprint}"


def find_duplicate_ids(tokens: Iterable[Token | DiffToken]) -> list[str]:
    """Return ids that occur more than once, in first-repeat order."""
    seen: set[str] = set()
    duplicates: list[str] = []
    for tok in tokens:
        if tok.id in seen:
            duplicates.append(tok.id)
        else:
            seen.add(tok.id)
    return duplicates


def is_ident_start(ch: str) -> bool:
    """Return True if ch may start a script identifier."""
    return ch.isascii() and (ch.isalpha() or ch in "_$")


def is_ident_char(ch: str) -> bool:
    """Return True if ch may continue a script identifier."""
    return ch.isascii() and (ch.isalnum() or ch in "_$")


def is_css_name_char(ch: str) -> bool:
    """Return True if ch belongs to a CSS word, selector, or unit."""
    return ch.isascii() and (ch.isalnum() or ch in "_-")
