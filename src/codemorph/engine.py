"""Transition pipeline: previous code + current code -> timed token stream."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from codemorph.diff import DiffConfig, as_unchanged, diff_tokens, summarize
from codemorph.highlights import HighlightRange, apply_highlights, manual_only
from codemorph.languages import Language, are_incompatible, detect_language, resolve_language
from codemorph.layout import Line, split_lines, visible_code
from codemorph.lexer import tokenize
from codemorph.timing import Phase, Schedule, Timings, TokenState
from codemorph.tokens import DiffStatus, DiffToken

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TransitionRequest:
    """One step from a previous code state to the current one.

    ``previous_code=None`` means there is no previous state; an empty string
    is a previous state with no code in it.
    """

    current_code: str
    previous_code: str | None = None
    language: Language | str | None = None
    manual_highlights: Sequence[HighlightRange] = ()
    use_manual_highlights_only: bool = False
    is_animating: bool = False


@dataclass(frozen=True, slots=True)
class Frame:
    """The display at one instant: phase plus the state of every token."""

    phase: Phase | None
    elapsed: float
    items: list[tuple[DiffToken, TokenState]] = field(default_factory=list)

    @property
    def visible(self) -> list[DiffToken]:
        return [tok for tok, state in self.items if state.visible]


@dataclass(frozen=True, slots=True)
class Transition:
    """Classified tokens and, when animating, the schedule that reveals them."""

    tokens: list[DiffToken]
    language: Language | str
    schedule: Schedule | None = None

    @property
    def is_static(self) -> bool:
        return self.schedule is None

    @property
    def added(self) -> list[DiffToken]:
        return [t for t in self.tokens if t.status == DiffStatus.ADDED]

    def lines(self) -> list[Line]:
        return split_lines([t for t in self.tokens if t.status != DiffStatus.REMOVED])

    def visible_code(self) -> str:
        return visible_code(self.tokens)

    def frame_at(self, elapsed: float) -> Frame:
        """Token states at *elapsed* ms; a static transition shows everything."""
        if self.schedule is None:
            shown = TokenState(True, 1.0, 0.0, 0.0, "linear")
            return Frame(None, elapsed, [(t, shown) for t in self.tokens])

        items: list[tuple[DiffToken, TokenState]] = []
        rank = 0
        for tok in self.tokens:
            items.append((tok, self.schedule.token_state(tok, rank, elapsed)))
            if tok.status == DiffStatus.ADDED:
                rank += 1
        return Frame(self.schedule.reported_phase(elapsed), elapsed, items)


def should_bypass(request: TransitionRequest) -> bool:
    """Return True if the transition must be shown statically, without a diff."""
    if not request.is_animating or request.previous_code is None:
        return True
    if not request.previous_code.strip():
        # Nothing to compare against; every token enters.
        return False
    previous = detect_language(request.previous_code)
    current = detect_language(request.current_code)
    if are_incompatible(previous, current):
        logger.debug(
            "Transition: %s -> %s is incompatible, showing statically",
            previous.value,
            current.value,
        )
        return True
    return False


def build_transition(
    request: TransitionRequest,
    timings: Timings | None = None,
    diff_config: DiffConfig | None = None,
) -> Transition:
    """Tokenize, diff, highlight, and schedule one transition."""
    language = resolve_language(request.language, request.current_code)
    current_tokens = tokenize(request.current_code, language)

    if should_bypass(request):
        tokens = apply_highlights(as_unchanged(current_tokens), request.manual_highlights)
        if request.use_manual_highlights_only:
            tokens = [t for t in tokens if t.highlighted]
        return Transition(tokens, language)

    previous_tokens = tokenize(request.previous_code or "", language)
    tokens = diff_tokens(previous_tokens, current_tokens, diff_config)
    tokens = apply_highlights(tokens, request.manual_highlights)
    if request.use_manual_highlights_only:
        tokens = manual_only(tokens)

    added = sum(1 for t in tokens if t.status == DiffStatus.ADDED)
    schedule = Schedule(timings or Timings(), added)
    logger.debug("Transition: %s, %r", summarize(tokens), schedule)
    return Transition(tokens, language, schedule)
