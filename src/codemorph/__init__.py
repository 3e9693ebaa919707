"""Animate transitions between versions of a code snippet, token by token."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from codemorph.engine import Transition
    from codemorph.highlights import HighlightRange

__version__ = "0.1.0"


def transition(
    previous: str | None,
    current: str,
    language: str | None = None,
    highlights: list[HighlightRange] | None = None,
    animate: bool = True,
) -> Transition:
    """Tokenize, diff, and schedule the step from *previous* to *current*."""
    from codemorph.engine import TransitionRequest, build_transition

    request = TransitionRequest(
        current_code=current,
        previous_code=previous,
        language=language,
        manual_highlights=tuple(highlights or ()),
        is_animating=animate,
    )
    return build_transition(request)
