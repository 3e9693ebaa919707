"""Lexers: convert source text into a flat, lossless token stream.

Three scanners cover every language tag: markup (HTML), style sheets (CSS),
and a script scanner used for everything else. Scanners never raise; an
unterminated string or comment simply runs to the end of the input.
"""

from __future__ import annotations

from functools import lru_cache

from codemorph.languages import Language, language_tag
from codemorph.tokens import (
    Position,
    Span,
    Token,
    TokenType,
    is_css_name_char,
    is_ident_char,
    is_ident_start,
    make_token_id,
)

SCRIPT_KEYWORDS = frozenset(
    {
        "function", "const", "let", "var", "if", "else", "for", "while",
        "return", "class", "import", "export", "default", "async", "await",
        "try", "catch", "finally", "throw", "new", "this", "super", "extends",
        "static", "public", "private", "protected", "interface", "type",
        "true", "false", "null", "undefined", "typeof", "instanceof",
    }
)  # fmt: skip

OPERATORS_3 = frozenset({"===", "!==", ">>>", "<<=", ">>="})
OPERATORS_2 = frozenset(
    {
        "==", "!=", "<=", ">=", "&&", "||", "++", "--", "+=", "-=", "*=",
        "/=", "%=", "<<", ">>", "=>", "?.",
    }
)  # fmt: skip
OPERATOR_CHARS = frozenset("{}[]();,.:=+-*/%<>!&|?~^")

CSS_PROPERTIES = frozenset(
    {
        "color", "background", "background-color", "font-size", "font-family",
        "font-weight", "margin", "padding", "border", "width", "height",
        "display", "position", "top", "left", "right", "bottom", "z-index",
        "opacity", "transform", "transition", "animation", "flex", "grid",
        "justify-content", "align-items", "text-align", "line-height",
        "box-shadow", "border-radius", "overflow", "visibility", "cursor",
        "pointer-events", "user-select", "white-space", "text-decoration",
        "vertical-align", "float", "clear", "content", "list-style",
        "outline", "resize", "min-width", "max-width", "min-height", "max-height",
    }
)  # fmt: skip
CSS_PSEUDOS = frozenset(
    {
        "hover", "focus", "active", "visited", "first-child", "last-child",
        "nth-child", "before", "after", "first-line", "first-letter",
    }
)  # fmt: skip
CSS_VALUES = frozenset(
    {
        "auto", "none", "inherit", "initial", "unset", "normal", "bold",
        "italic", "underline", "center", "left", "right", "block", "inline",
        "flex", "grid", "absolute", "relative", "fixed", "static", "sticky",
        "hidden", "visible", "transparent", "solid", "dashed", "dotted",
    }
)  # fmt: skip
CSS_OPERATOR_CHARS = frozenset("{}();:,.")


class Lexer:
    """Base scanner: position tracking and token emission.

    Subclasses implement ``_lex_one``, which must consume at least one
    character per call.
    """

    def __init__(self, source: str, language: Language | str) -> None:
        self._source = source
        self._language = language_tag(language)
        self._pos = 0
        self._line = 1
        self._col = 1
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Tokenize the full source and return the token list."""
        while self._pos < len(self._source):
            before = self._pos
            self._lex_one()
            if self._pos == before:
                # A scanner rule matched without consuming; keep the stream moving.
                start = self._current_pos()
                self._advance()
                self._emit(TokenType.TEXT, start)
        return self._tokens

    def _lex_one(self) -> None:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._pos)

    def _at_end(self) -> bool:
        return self._pos >= len(self._source)

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _startswith(self, text: str) -> bool:
        return self._source.startswith(text, self._pos)

    def _advance(self, count: int = 1) -> None:
        for _ in range(count):
            if self._at_end():
                return
            ch = self._source[self._pos]
            self._pos += 1
            if ch == "\n":
                self._line += 1
                self._col = 1
            else:
                self._col += 1

    def _advance_while(self, predicate) -> None:
        while not self._at_end() and predicate(self._peek()):
            self._advance()

    def _emit(self, tt: TokenType, start: Position) -> Token:
        """Emit a token covering source[start.offset : current position]."""
        end = self._current_pos()
        content = self._source[start.offset : end.offset]
        token_id = make_token_id(self._language, start.offset, tt, content)
        tok = Token(tt, content, token_id, Span(start, end))
        self._tokens.append(tok)
        return tok

    # ------------------------------------------------------------------
    # Shared scanning rules
    # ------------------------------------------------------------------

    def _lex_ws(self) -> None:
        start = self._current_pos()
        self._advance_while(str.isspace)
        self._emit(TokenType.WHITESPACE, start)

    def _lex_line_comment(self) -> None:
        start = self._current_pos()
        self._advance_while(lambda ch: ch != "\n")
        self._emit(TokenType.COMMENT, start)

    def _lex_block_comment(self) -> None:
        start = self._current_pos()
        self._advance(2)  # /*
        while not self._at_end() and not self._startswith("*/"):
            self._advance()
        self._advance(2)  # */ (no-op at end of input)
        self._emit(TokenType.COMMENT, start)

    def _lex_string(self, quote: str) -> None:
        """Quoted string; a backslash always takes the next character with it."""
        start = self._current_pos()
        self._advance()  # opening quote
        while not self._at_end():
            ch = self._peek()
            if ch == "\\":
                self._advance(2)
                continue
            self._advance()
            if ch == quote:
                break
        self._emit(TokenType.STRING, start)

    def _lex_char(self, tt: TokenType) -> None:
        start = self._current_pos()
        self._advance()
        self._emit(tt, start)


# ----------------------------------------------------------------------
# Script languages (JavaScript, TypeScript, and the fallback for the rest)
# ----------------------------------------------------------------------


class ScriptLexer(Lexer):
    """Single-pass scanner for C-family script languages."""

    def _lex_one(self) -> None:
        ch = self._peek()

        if self._startswith("//"):
            self._lex_line_comment()
            return

        if self._startswith("/*"):
            self._lex_block_comment()
            return

        if ch in "\"'`":
            self._lex_string(ch)
            return

        if ch.isspace():
            self._lex_ws()
            return

        if ch.isascii() and ch.isdigit():
            start = self._current_pos()
            self._advance_while(lambda c: c == "." or (c.isascii() and c.isdigit()))
            self._emit(TokenType.NUMBER, start)
            return

        if ch in OPERATOR_CHARS:
            self._lex_operator()
            return

        if is_ident_start(ch):
            start = self._current_pos()
            self._advance_while(is_ident_char)
            word = self._source[start.offset : self._pos]
            tt = TokenType.KEYWORD if word in SCRIPT_KEYWORDS else TokenType.TEXT
            self._emit(tt, start)
            return

        self._lex_char(TokenType.TEXT)

    def _lex_operator(self) -> None:
        start = self._current_pos()
        if self._source[self._pos : self._pos + 3] in OPERATORS_3:
            self._advance(3)
        elif self._source[self._pos : self._pos + 2] in OPERATORS_2:
            self._advance(2)
        else:
            self._advance()
        self._emit(TokenType.OPERATOR, start)


# ----------------------------------------------------------------------
# Style sheets
# ----------------------------------------------------------------------


class StyleLexer(Lexer):
    """Scanner for CSS: classifies words through fixed lookup tables."""

    def _lex_one(self) -> None:
        ch = self._peek()

        if self._startswith("/*"):
            self._lex_block_comment()
            return

        if ch in "\"'":
            self._lex_string(ch)
            return

        if ch.isascii() and ch.isdigit():
            start = self._current_pos()
            self._advance_while(lambda c: c == "." or (c.isascii() and c.isdigit()))
            self._advance_while(lambda c: c == "%" or (c.isascii() and c.isalpha()))
            self._emit(TokenType.NUMBER, start)
            return

        if ch in "#." and is_css_name_char(self._peek(1)):
            start = self._current_pos()
            self._advance()
            self._advance_while(is_css_name_char)
            self._emit(TokenType.TAG, start)
            return

        if ch.isascii() and (ch.isalpha() or ch in "_-"):
            start = self._current_pos()
            self._advance_while(is_css_name_char)
            self._emit(self._classify_word(self._source[start.offset : self._pos]), start)
            return

        if ch in CSS_OPERATOR_CHARS:
            self._lex_char(TokenType.OPERATOR)
            return

        if ch.isspace():
            self._lex_ws()
            return

        self._lex_char(TokenType.TEXT)

    @staticmethod
    def _classify_word(word: str) -> TokenType:
        if word in CSS_PROPERTIES:
            return TokenType.ATTRIBUTE
        if word in CSS_PSEUDOS or word in CSS_VALUES:
            return TokenType.KEYWORD
        return TokenType.TEXT


# ----------------------------------------------------------------------
# Markup
# ----------------------------------------------------------------------


def _is_tag_name_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch in "-:_")


def _is_attr_name_char(ch: str) -> bool:
    return not ch.isspace() and ch not in "\"'<>=/"


class MarkupLexer(Lexer):
    """Scanner for HTML-like markup.

    Tags are split into name, whitespace, attribute name, ``=``, attribute
    value, and closing ``>`` sub-tokens; everything between tags is split
    into whitespace runs and text runs.
    """

    def _lex_one(self) -> None:
        ch = self._peek()

        if ch == "<" and self._at_tag_open():
            self._lex_tag()
            return

        if ch.isspace():
            self._lex_ws()
            return

        start = self._current_pos()
        self._advance()  # a lone '<' that does not open a tag is text
        self._advance_while(lambda c: not c.isspace() and c != "<")
        self._emit(TokenType.TEXT, start)

    def _at_tag_open(self) -> bool:
        nxt = self._peek(1)
        if nxt == "/":
            nxt = self._peek(2)
        return nxt.isascii() and nxt.isalpha()

    def _lex_tag(self) -> None:
        start = self._current_pos()
        self._advance()  # <
        if self._peek() == "/":
            self._advance()
        self._advance_while(_is_tag_name_char)
        self._emit(TokenType.TAG, start)

        while not self._at_end():
            ch = self._peek()
            if ch == ">":
                self._lex_char(TokenType.TAG)
                return
            if self._startswith("/>"):
                start = self._current_pos()
                self._advance(2)
                self._emit(TokenType.TAG, start)
                return
            if ch.isspace():
                self._lex_ws()
            elif ch == "=":
                self._lex_char(TokenType.OPERATOR)
                self._lex_attr_value()
            elif _is_attr_name_char(ch):
                start = self._current_pos()
                self._advance_while(_is_attr_name_char)
                self._emit(TokenType.ATTRIBUTE, start)
            else:
                self._lex_char(TokenType.TEXT)

    def _lex_attr_value(self) -> None:
        ch = self._peek()
        if ch in "\"'":
            start = self._current_pos()
            self._advance()
            self._advance_while(lambda c: c != ch)
            self._advance()  # closing quote (no-op at end of input)
            self._emit(TokenType.STRING, start)
        elif ch and not ch.isspace() and ch != ">":
            start = self._current_pos()
            self._advance_while(lambda c: not c.isspace() and c != ">")
            self._emit(TokenType.STRING, start)


# ----------------------------------------------------------------------
# Entry point
# ----------------------------------------------------------------------


def _lexer_for(tag: str) -> type[Lexer]:
    if tag == Language.HTML.value:
        return MarkupLexer
    if tag == Language.CSS.value:
        return StyleLexer
    return ScriptLexer


@lru_cache(maxsize=256)
def _tokenize_cached(source: str, tag: str) -> tuple[Token, ...]:
    return tuple(_lexer_for(tag)(source, tag).tokenize())


def tokenize(source: str, language: Language | str) -> list[Token]:
    """Tokenize *source* for *language*; unknown languages use the script scanner."""
    return list(_tokenize_cached(source, language_tag(language)))
