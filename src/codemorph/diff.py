"""Token-level diff: align two token sequences and classify each token.

This is a heuristic, perceptually tuned alignment rather than a shortest
edit script. Two passes build an order-preserving set of (old, new) matches:

1. A sequential prefix pass that walks both sequences and, on a mismatch,
   advances only the new pointer, so divergences read as insertions.
2. A residual pass that gives every unmatched new token a chance to claim an
   unused old token with the same signature (or any whitespace token for a
   whitespace token), scored by proximity to where it "should" be.
"""

from __future__ import annotations

import bisect
import dataclasses
import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from codemorph.tokens import REMOVED_INDEX, DiffStatus, DiffToken, Token, TokenType

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DiffConfig:
    """Residual-pass scoring knobs. Scores fall on a 0 to 1 + exact_bonus scale."""

    accept_threshold: float = 0.3
    exact_bonus: float = 0.2


class _Matches:
    """Order-preserving (old, new) pairs, kept sorted by new index."""

    def __init__(self) -> None:
        self._new: list[int] = []
        self._old: list[int] = []
        self.old_for_new: dict[int, int] = {}
        self.used_old: set[int] = set()

    def add(self, old_index: int, new_index: int) -> None:
        pos = bisect.bisect_left(self._new, new_index)
        self._new.insert(pos, new_index)
        self._old.insert(pos, old_index)
        self.old_for_new[new_index] = old_index
        self.used_old.add(old_index)

    def old_window(self, new_index: int, old_len: int) -> range:
        """Old indices a new token may match without crossing an existing pair."""
        pos = bisect.bisect_left(self._new, new_index)
        low = self._old[pos - 1] + 1 if pos > 0 else 0
        high = self._old[pos] if pos < len(self._old) else old_len
        return range(low, high)


def _is_candidate(old: Token, new: Token) -> bool:
    if old.signature == new.signature:
        return True
    return old.type == TokenType.WHITESPACE and new.type == TokenType.WHITESPACE


def _prefix_pass(old: Sequence[Token], new: Sequence[Token], matches: _Matches) -> None:
    old_idx = 0
    new_idx = 0
    while old_idx < len(old) and new_idx < len(new):
        if old[old_idx].signature == new[new_idx].signature:
            matches.add(old_idx, new_idx)
            old_idx += 1
        new_idx += 1


def _residual_pass(
    old: Sequence[Token], new: Sequence[Token], matches: _Matches, config: DiffConfig
) -> None:
    max_len = max(len(old), len(new))
    for new_idx, new_tok in enumerate(new):
        if new_idx in matches.old_for_new:
            continue

        expected = new_idx / len(new) * len(old)
        best_old = -1
        best_score = -1.0
        for old_idx in matches.old_window(new_idx, len(old)):
            if old_idx in matches.used_old:
                continue
            old_tok = old[old_idx]
            if not _is_candidate(old_tok, new_tok):
                continue
            score = 1 - abs(old_idx - expected) / max_len
            if old_tok.signature == new_tok.signature:
                score += config.exact_bonus
            if score > best_score:
                best_score = score
                best_old = old_idx

        if best_old != -1 and best_score > config.accept_threshold:
            matches.add(best_old, new_idx)


def _rekey_added(tokens: list[DiffToken]) -> list[DiffToken]:
    """Give added tokens whose id collides with an old-stream id a ``~n`` suffix.

    Unchanged and removed tokens carry ids from the old tokenization, added
    tokens from the new one; both use the same id space.
    """
    taken = {tok.id for tok in tokens if tok.status != DiffStatus.ADDED}
    result: list[DiffToken] = []
    for tok in tokens:
        if tok.status == DiffStatus.ADDED and tok.id in taken:
            n = 1
            while f"{tok.id}~{n}" in taken:
                n += 1
            tok = dataclasses.replace(tok, id=f"{tok.id}~{n}")
            taken.add(tok.id)
        result.append(tok)
    return result


def diff_tokens(
    old: Sequence[Token], new: Sequence[Token], config: DiffConfig | None = None
) -> list[DiffToken]:
    """Classify *new* against *old*.

    Returns new-sequence tokens in order (``UNCHANGED`` ones carry the matched
    old token's id), followed by unmatched old tokens in old order as
    ``REMOVED``. Ids are unique across the whole result.
    """
    cfg = config or DiffConfig()

    if not old:
        return [DiffToken.from_token(tok, DiffStatus.ADDED, i) for i, tok in enumerate(new)]
    if not new:
        return [
            DiffToken.from_token(tok, DiffStatus.REMOVED, REMOVED_INDEX, i)
            for i, tok in enumerate(old)
        ]

    matches = _Matches()
    _prefix_pass(old, new, matches)
    _residual_pass(old, new, matches, cfg)

    result: list[DiffToken] = []
    for new_idx, new_tok in enumerate(new):
        old_idx = matches.old_for_new.get(new_idx)
        if old_idx is None:
            result.append(DiffToken.from_token(new_tok, DiffStatus.ADDED, new_idx))
        else:
            result.append(
                DiffToken.from_token(
                    new_tok, DiffStatus.UNCHANGED, new_idx, old_idx, id=old[old_idx].id
                )
            )

    for old_idx, old_tok in enumerate(old):
        if old_idx not in matches.used_old:
            result.append(
                DiffToken.from_token(old_tok, DiffStatus.REMOVED, REMOVED_INDEX, old_idx)
            )

    result = _rekey_added(result)

    logger.debug("diff_tokens: %d old, %d new -> %s", len(old), len(new), summarize(result))
    return result


def as_unchanged(tokens: Sequence[Token | DiffToken]) -> list[DiffToken]:
    """Present *tokens* as a static, fully unchanged display.

    Diff tokens keep their highlight flag and old index.
    """
    result: list[DiffToken] = []
    for i, tok in enumerate(tokens):
        if isinstance(tok, DiffToken):
            result.append(dataclasses.replace(tok, status=DiffStatus.UNCHANGED, new_index=i))
        else:
            result.append(
                DiffToken(tok.type, tok.content, tok.id, tok.span, DiffStatus.UNCHANGED, i)
            )
    return result


def summarize(tokens: Sequence[DiffToken]) -> dict[str, int]:
    """Count tokens per status, e.g. ``{"unchanged": 7, "added": 4, "removed": 0}``."""
    counts = Counter(tok.status for tok in tokens)
    return {status.value: counts.get(status, 0) for status in DiffStatus}
