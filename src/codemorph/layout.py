"""Group a token stream into numbered display lines."""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from dataclasses import dataclass, field

from codemorph.tokens import DiffStatus, DiffToken


@dataclass(slots=True)
class Line:
    number: int
    tokens: list[DiffToken] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(t.content for t in self.tokens)


def split_lines(tokens: Sequence[DiffToken]) -> list[Line]:
    """Split tokens into lines at embedded newlines, numbering from 1.

    A token spanning several lines contributes one fragment per line; the
    fragments keep the token's id and status. Newline characters themselves
    are not kept, and a trailing empty line is not emitted.
    """
    lines: list[Line] = []
    current = Line(1)
    for tok in tokens:
        if "\n" not in tok.content:
            current.tokens.append(tok)
            continue
        parts = tok.content.split("\n")
        for i, part in enumerate(parts):
            if part:
                current.tokens.append(dataclasses.replace(tok, content=part))
            if i < len(parts) - 1:
                lines.append(current)
                current = Line(current.number + 1)
    if current.tokens:
        lines.append(current)
    return lines


def visible_code(tokens: Sequence[DiffToken]) -> str:
    """Rebuild the current source text from a classified stream."""
    return "".join(t.content for t in tokens if t.status != DiffStatus.REMOVED)
