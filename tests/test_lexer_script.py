"""Test the script scanner (JavaScript, TypeScript, and fallback languages)."""

from __future__ import annotations

from codemorph.tokens import TokenType
from tests.conftest import assert_contents, assert_types

T = TokenType


class TestDeclarations:
    def test_const(self, lex) -> None:
        tokens = lex("const x = 42;")
        assert_types(
            tokens,
            [T.KEYWORD, T.WHITESPACE, T.TEXT, T.WHITESPACE, T.OPERATOR, T.WHITESPACE,
             T.NUMBER, T.OPERATOR],
        )  # fmt: skip
        assert_contents(tokens, ["const", " ", "x", " ", "=", " ", "42", ";"])

    def test_keywords(self, lex) -> None:
        tokens = lex("return this")
        assert_types(tokens, [T.KEYWORD, T.WHITESPACE, T.KEYWORD])

    def test_identifier_chars(self, lex) -> None:
        tokens = lex("$el _x a1")
        assert_contents(tokens, ["$el", " ", "_x", " ", "a1"])
        assert all(t.type in (T.TEXT, T.WHITESPACE) for t in tokens)

    def test_keyword_prefix_is_not_keyword(self, lex) -> None:
        tokens = lex("constant")
        assert_types(tokens, [T.TEXT])


class TestOperators:
    def test_three_char(self, lex) -> None:
        tokens = lex("a === b")
        assert_contents(tokens, ["a", " ", "===", " ", "b"])
        assert tokens[2].type == T.OPERATOR

    def test_two_char(self, lex) -> None:
        assert_contents(lex("x=>y"), ["x", "=>", "y"])
        assert_contents(lex("a?.b"), ["a", "?.", "b"])
        assert_contents(lex("i++"), ["i", "++"])

    def test_three_before_two(self, lex) -> None:
        assert_contents(lex(">>>="), [">>>", "="])

    def test_single(self, lex) -> None:
        tokens = lex("f(a, b)")
        assert_contents(tokens, ["f", "(", "a", ",", " ", "b", ")"])
        assert tokens[1].type == T.OPERATOR


class TestNumbers:
    def test_integer(self, lex) -> None:
        assert_types(lex("123"), [T.NUMBER])

    def test_decimal(self, lex) -> None:
        tokens = lex("3.14")
        assert_types(tokens, [T.NUMBER])
        assert tokens[0].content == "3.14"

    def test_interior_dots(self, lex) -> None:
        assert_contents(lex("1.2.3"), ["1.2.3"])


class TestComments:
    def test_line_comment(self, lex) -> None:
        tokens = lex("// hi\nx")
        assert_types(tokens, [T.COMMENT, T.WHITESPACE, T.TEXT])
        assert tokens[0].content == "// hi"

    def test_block_comment(self, lex) -> None:
        tokens = lex("/* a */b")
        assert_types(tokens, [T.COMMENT, T.TEXT])
        assert tokens[0].content == "/* a */"

    def test_unterminated_block_comment(self, lex) -> None:
        tokens = lex("x /* never closed")
        assert tokens[-1].type == T.COMMENT
        assert tokens[-1].content == "/* never closed"

    def test_division_is_operator(self, lex) -> None:
        assert_contents(lex("a/b"), ["a", "/", "b"])


class TestStrings:
    def test_double_quoted(self, lex) -> None:
        tokens = lex('"hello" + x')
        assert tokens[0].type == T.STRING
        assert tokens[0].content == '"hello"'

    def test_escaped_quote(self, lex) -> None:
        tokens = lex(r'"a\"b" + c')
        assert tokens[0].content == r'"a\"b"'
        assert_contents(tokens[1:], [" ", "+", " ", "c"])

    def test_escaped_backslash_before_quote(self, lex) -> None:
        tokens = lex(r'"a\\" + c')
        assert tokens[0].content == r'"a\\"'

    def test_single_and_backtick(self, lex) -> None:
        assert lex("'x'")[0].type == T.STRING
        tokens = lex("`a ${b}`")
        assert_types(tokens, [T.STRING])

    def test_unterminated(self, lex) -> None:
        tokens = lex("x = 'abc")
        assert tokens[-1].type == T.STRING
        assert tokens[-1].content == "'abc"

    def test_trailing_backslash(self, lex) -> None:
        tokens = lex('"abc\\')
        assert_types(tokens, [T.STRING])
        assert tokens[0].content == '"abc\\'


class TestCatchAll:
    def test_unknown_characters(self, lex) -> None:
        tokens = lex("@#")
        assert_types(tokens, [T.TEXT, T.TEXT])
        assert_contents(tokens, ["@", "#"])

    def test_non_ascii(self, lex) -> None:
        tokens = lex("é")
        assert_types(tokens, [T.TEXT])


class TestFallbackLanguages:
    def test_python_uses_script_scanner(self, lex) -> None:
        tokens = lex("x = 1", "python")
        assert_types(tokens, [T.TEXT, T.WHITESPACE, T.OPERATOR, T.WHITESPACE, T.NUMBER])

    def test_unknown_language_uses_script_scanner(self, lex) -> None:
        assert_types(lex("let a", "brainfudge"), [T.KEYWORD, T.WHITESPACE, T.TEXT])


class TestSpans:
    def test_multiline_positions(self, lex) -> None:
        tokens = lex("a\n  b")
        b = tokens[-1]
        assert b.content == "b"
        assert (b.span.start.line, b.span.start.column, b.span.start.offset) == (2, 3, 4)
        assert b.span.end.offset == 5
