"""HTML snapshot export: one ``<span>`` per token, grouped into numbered lines."""

from __future__ import annotations

from codemorph.engine import Transition
from codemorph.layout import split_lines
from codemorph.tokens import DiffStatus, DiffToken, TokenType

TOKEN_COLORS = {
    TokenType.TAG: "#ff6b6b",
    TokenType.ATTRIBUTE: "#4fc3f7",
    TokenType.STRING: "#a5d6a7",
    TokenType.OPERATOR: "#fff59d",
    TokenType.KEYWORD: "#ce93d8",
    TokenType.NUMBER: "#ffab91",
    TokenType.COMMENT: "#757575",
    TokenType.PUNCTUATION: "#ffd93d",
    TokenType.TEXT: "#ffffff",
}
DEFAULT_COLOR = "#ffffff"


def token_color(tt: TokenType) -> str:
    """Foreground colour for a token type."""
    return TOKEN_COLORS.get(tt, DEFAULT_COLOR)


def token_classes(token: DiffToken) -> str:
    """CSS classes describing a token's type, status, and highlight."""
    classes = [f"token-{token.type.value}", f"token-{token.status.value}"]
    if token.highlighted:
        classes.append("token-manually-highlighted")
    return " ".join(classes)


def render_html(
    transition: Transition,
    elapsed: float | None = None,
    *,
    line_numbers: bool = True,
) -> str:
    """Render *transition* as a standalone HTML fragment.

    With ``elapsed=None`` the final state is shown. Otherwise only tokens
    visible at *elapsed* ms are emitted, with their opacity inlined.
    """
    opacity: dict[tuple[str, DiffStatus], float] = {}
    if elapsed is None:
        tokens = [t for t in transition.tokens if t.status != DiffStatus.REMOVED]
    else:
        frame = transition.frame_at(elapsed)
        tokens = []
        for tok, state in frame.items:
            if state.visible:
                tokens.append(tok)
                opacity[tok.id, tok.status] = state.opacity

    parts: list[str] = ['<pre class="codemorph">\n']
    for line in split_lines(tokens):
        parts.append('<div class="line">')
        if line_numbers:
            parts.append(f'<span class="line-number">{line.number}</span>')
        for tok in line.tokens:
            style = f"color: {token_color(tok.type)}"
            alpha = opacity.get((tok.id, tok.status), 1.0)
            if alpha < 1.0:
                style += f"; opacity: {alpha:.2f}"
            parts.append(
                f'<span class="{token_classes(tok)}" data-id="{_escape_attr(tok.id)}"'
                f' style="{style}">{_escape_html(tok.content)}</span>'
            )
        parts.append("</div>\n")
    parts.append("</pre>\n")
    return "".join(parts)


# ---------------------------------------------------------------------------
# HTML escaping
# ---------------------------------------------------------------------------


def _escape_html(text: str) -> str:
    """Escape text for HTML body content. Also encodes non-ASCII as entities."""
    result: list[str] = []
    for ch in text:
        if ch == "&":
            result.append("&amp;")
        elif ch == "<":
            result.append("&lt;")
        elif ch == ">":
            result.append("&gt;")
        elif ord(ch) > 0x7F:
            result.append(f"&#x{ord(ch):X};")
        else:
            result.append(ch)
    return "".join(result)


def _escape_attr(text: str) -> str:
    """Escape text for HTML attribute values."""
    return _escape_html(text).replace('"', "&quot;")
