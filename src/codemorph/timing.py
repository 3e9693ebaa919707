"""Animation timing: phase windows, stagger, and per-token reveal state.

All durations are milliseconds. Every function here is a pure function of
elapsed time, so a caller can poll from any timer or event loop.

The phase sequence is linear::

    POSITIONING -> PAUSE -> ADDING -> COMPLETE

Removed tokens are not tracked by any phase; a renderer that wants to fade
them out does so on its own during positioning.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from codemorph.tokens import DiffStatus, DiffToken


@dataclass(frozen=True, slots=True)
class Timings:
    """Named timing constants (milliseconds) and easing curve names."""

    positioning: float = 1200.0
    pause: float = 500.0
    adding: float = 4000.0
    existing_element: float = 800.0
    new_element: float = 1200.0
    stagger: float = 150.0
    safety_buffer: float = 300.0
    existing_easing: str = "easeInOut"
    new_easing: str = "easeOut"


class Phase(Enum):
    POSITIONING = "positioning"
    PAUSE = "pause"
    ADDING = "adding"
    COMPLETE = "complete"


_DESCRIPTIONS = {
    Phase.POSITIONING: "Moving existing code to new positions...",
    Phase.PAUSE: "Pausing to let you observe the layout...",
    Phase.ADDING: "Adding new code elements one by one...",
    Phase.COMPLETE: "Animation complete!",
}


@dataclass(frozen=True, slots=True)
class PhaseWindow:
    phase: Phase
    start: float
    duration: float

    @property
    def end(self) -> float:
        return self.start + self.duration


@dataclass(frozen=True, slots=True)
class TokenState:
    """How one token should look at a given instant."""

    visible: bool
    opacity: float
    delay: float
    duration: float
    easing: str


HIDDEN = TokenState(visible=False, opacity=0.0, delay=0.0, duration=0.0, easing="linear")


class Schedule:
    """Phase timeline for one animation run with *added_count* new tokens."""

    def __init__(self, timings: Timings, added_count: int) -> None:
        self.timings = timings
        self.added_count = added_count

    def __repr__(self) -> str:
        return f"Schedule(added={self.added_count}, total={self.total_duration:g}ms)"

    @property
    def adding_start(self) -> float:
        return self.timings.positioning + self.timings.pause

    @property
    def complete_start(self) -> float:
        return self.adding_start + self.timings.adding

    @property
    def total_duration(self) -> float:
        """When the run may report completion: after the last staggered reveal ends."""
        t = self.timings
        staggered = self.adding_start + t.new_element + self.added_count * t.stagger
        return max(self.complete_start, staggered) + t.safety_buffer

    def windows(self) -> list[PhaseWindow]:
        t = self.timings
        return [
            PhaseWindow(Phase.POSITIONING, 0.0, t.positioning),
            PhaseWindow(Phase.PAUSE, t.positioning, t.pause),
            PhaseWindow(Phase.ADDING, self.adding_start, t.adding),
            PhaseWindow(Phase.COMPLETE, self.complete_start, math.inf),
        ]

    def phase_at(self, elapsed: float) -> Phase:
        if elapsed < self.timings.positioning:
            return Phase.POSITIONING
        if elapsed < self.adding_start:
            return Phase.PAUSE
        if elapsed < self.complete_start:
            return Phase.ADDING
        return Phase.COMPLETE

    def reported_phase(self, elapsed: float) -> Phase:
        """Phase to show while the run is live: COMPLETE only once it has finished.

        Between ``complete_start`` and ``total_duration`` staggered tokens may
        still be fading in, so the phase stays ADDING until then.
        """
        if self.is_finished(elapsed):
            return Phase.COMPLETE
        phase = self.phase_at(elapsed)
        return Phase.ADDING if phase == Phase.COMPLETE else phase

    def stagger_delay(self, n: int) -> float:
        """Delay of the nth added token, measured from the start of ADDING."""
        return n * self.timings.stagger

    def reveal_start(self, n: int) -> float:
        """Absolute time at which the nth added token starts to appear."""
        return self.adding_start + self.stagger_delay(n)

    def is_finished(self, elapsed: float) -> bool:
        return elapsed >= self.total_duration

    def progress(self, elapsed: float) -> float:
        """Percentage of the whole run, clamped to 0..100."""
        if self.total_duration <= 0:
            return 100.0
        return max(0.0, min(elapsed / self.total_duration * 100.0, 100.0))

    def token_state(self, token: DiffToken, added_rank: int, elapsed: float) -> TokenState:
        """State of *token* at *elapsed*; *added_rank* is its index among added tokens."""
        t = self.timings
        if token.status == DiffStatus.REMOVED:
            return HIDDEN
        if token.status == DiffStatus.UNCHANGED:
            return TokenState(True, 1.0, 0.0, t.existing_element, t.existing_easing)

        start = self.reveal_start(added_rank)
        delay = self.stagger_delay(added_rank)
        if elapsed < start:
            return TokenState(False, 0.0, delay, t.new_element, t.new_easing)
        if t.new_element <= 0:
            opacity = 1.0
        else:
            opacity = min((elapsed - start) / t.new_element, 1.0)
        return TokenState(True, opacity, delay, t.new_element, t.new_easing)


def describe(phase: Phase) -> str:
    """Human-readable caption for *phase*."""
    return _DESCRIPTIONS[phase]
