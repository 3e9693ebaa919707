"""Manual highlight ranges: map character ranges onto tokens."""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from codemorph.diff import as_unchanged
from codemorph.tokens import DiffStatus, DiffToken, Token


class HighlightKind(Enum):
    NEW = "new"
    CHANGED = "changed"
    EMPHASIS = "emphasis"


@dataclass(frozen=True, slots=True)
class HighlightRange:
    """Half-open character range [start, end) over the current source.

    Ranges may overlap and need not be sorted. Nonsensical ranges
    (``start >= end``, out of bounds) are accepted and match nothing.
    """

    start: int
    end: int
    kind: HighlightKind = HighlightKind.EMPHASIS


def apply_highlights(
    tokens: Sequence[Token] | Sequence[DiffToken], ranges: Sequence[HighlightRange]
) -> list[DiffToken]:
    """Flag every token that overlaps any range, even partially.

    Offsets are counted over the current source, so ``REMOVED`` tokens are
    skipped: they neither advance the cursor nor get flagged. Status and id
    are never changed. Plain tokens are first presented as unchanged.
    """
    diff_tokens = [t for t in tokens if isinstance(t, DiffToken)]
    if len(diff_tokens) != len(tokens):
        diff_tokens = as_unchanged(tokens)

    result: list[DiffToken] = []
    cursor = 0
    for tok in diff_tokens:
        if tok.status == DiffStatus.REMOVED:
            result.append(dataclasses.replace(tok, highlighted=False))
            continue
        tok_start = cursor
        tok_end = cursor + len(tok.content)
        cursor = tok_end
        flagged = any(tok_start < r.end and tok_end > r.start for r in ranges)
        result.append(dataclasses.replace(tok, highlighted=flagged))
    return result


def manual_only(tokens: Sequence[DiffToken]) -> list[DiffToken]:
    """Keep only highlighted tokens, presented as entering the display."""
    return [
        dataclasses.replace(tok, status=DiffStatus.ADDED)
        for tok in tokens
        if tok.highlighted
    ]


def parse_range(text: str) -> HighlightRange:
    """Parse ``START:END`` or ``START:END:KIND`` (kind: new, changed, emphasis)."""
    parts = text.split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"invalid highlight range (expected START:END[:KIND]): {text}")
    try:
        start = int(parts[0])
        end = int(parts[1])
    except ValueError:
        raise ValueError(f"invalid highlight offsets (expected integers): {text}") from None
    kind = HighlightKind.EMPHASIS
    if len(parts) == 3:
        try:
            kind = HighlightKind(parts[2].strip().lower())
        except ValueError:
            names = ", ".join(k.value for k in HighlightKind)
            raise ValueError(f"invalid highlight kind '{parts[2]}' (expected {names})") from None
    return HighlightRange(start, end, kind)
