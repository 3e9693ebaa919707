"""Language tags, heuristic language detection, and incompatible pairs."""

from __future__ import annotations

import re
from enum import Enum


class Language(Enum):
    HTML = "html"
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    PYTHON = "python"
    CSS = "css"
    JSON = "json"

    @classmethod
    def from_tag(cls, tag: str) -> Language | None:
        """Return the language for a tag such as ``"css"``, or None if unknown."""
        try:
            return cls(tag.strip().lower())
        except ValueError:
            return None


# Checked in order; the first pattern that matches wins.
_RULES: tuple[tuple[re.Pattern[str], Language], ...] = (
    (re.compile(r"<[^>]+>"), Language.HTML),
    (re.compile(r"\b(?:function|const|let|var)\b|=>"), Language.JAVASCRIPT),
    (re.compile(r"\b(?:def|import|class)\b|\bif __name__\b"), Language.PYTHON),
    (re.compile(r"\{[^}]*:[^}]*\}"), Language.CSS),
    (re.compile(r"^[{\[]"), Language.JSON),
)

FALLBACK_LANGUAGE = Language.HTML


def detect_language(source: str) -> Language:
    """Guess the language of *source*. Heuristic; never fails."""
    stripped = source.strip()
    for pattern, language in _RULES:
        text = stripped if language is Language.JSON else source
        if pattern.search(text):
            return language
    return FALLBACK_LANGUAGE


def _pair(a: Language, b: Language) -> frozenset[Language]:
    return frozenset((a, b))


# Transitions between these languages are too different to diff meaningfully.
INCOMPATIBLE_PAIRS: frozenset[frozenset[Language]] = frozenset(
    {
        _pair(Language.HTML, Language.JAVASCRIPT),
        _pair(Language.HTML, Language.TYPESCRIPT),
        _pair(Language.HTML, Language.PYTHON),
        _pair(Language.PYTHON, Language.JAVASCRIPT),
    }
)


def are_incompatible(a: Language, b: Language) -> bool:
    """Return True if a transition from *a* to *b* should not be diffed."""
    return _pair(a, b) in INCOMPATIBLE_PAIRS


def resolve_language(tag: Language | str | None, source: str) -> Language | str:
    """Return the declared language, or the detected one when none is declared.

    Unknown declared tags are returned verbatim (lower-cased); the lexer
    scans them with the script scanner.
    """
    if isinstance(tag, Language):
        return tag
    if tag is None or not tag.strip():
        return detect_language(source)
    return Language.from_tag(tag) or tag.strip().lower()


def language_tag(language: Language | str) -> str:
    """Return the plain string tag for a language."""
    if isinstance(language, Language):
        return language.value
    return language.strip().lower()
