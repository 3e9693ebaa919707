"""Animation run controller: start, poll, supersede, and stop runs.

The controller owns no animation logic of its own; it records when a run
started, asks the run's ``Schedule`` which phase the elapsed time falls in,
and makes sure each run's completion callback fires exactly once, whether
the run finishes, is stopped, or is superseded by a newer run.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from codemorph.timing import Phase, Schedule

logger = logging.getLogger(__name__)


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class _Run:
    def __init__(self, run_id: int, schedule: Schedule, started_at: float) -> None:
        self.run_id = run_id
        self.schedule = schedule
        self.started_at = started_at
        self.completed = False
        self.timer: threading.Timer | None = None


class Animator:
    """Drive one animation run at a time.

    *clock* returns the current time in milliseconds (monotonic by default).
    With ``use_timer=True`` a ``threading.Timer`` also fires completion when
    the run's total duration elapses, so callers that never poll still get
    their callback; without it, completion is observed through ``poll()``.
    """

    def __init__(
        self,
        on_complete: Callable[[], None] | None = None,
        *,
        clock: Callable[[], float] | None = None,
        use_timer: bool = False,
    ) -> None:
        self._on_complete = on_complete
        self._clock = clock or _monotonic_ms
        self._use_timer = use_timer
        self._lock = threading.Lock()
        self._run: _Run | None = None
        self._next_id = 0

    @property
    def is_running(self) -> bool:
        return self._run is not None and not self._run.completed

    @property
    def schedule(self) -> Schedule | None:
        return self._run.schedule if self._run is not None else None

    def elapsed(self) -> float:
        """Milliseconds since the current run started (0.0 when idle)."""
        if self._run is None:
            return 0.0
        return self._clock() - self._run.started_at

    def start(self, schedule: Schedule) -> None:
        """Start a new run, superseding (and completing) any run in progress."""
        previous = self._run
        if previous is not None and not previous.completed:
            logger.debug("Animator: run %d superseded", previous.run_id)
            self._finish(previous)

        self._next_id += 1
        run = _Run(self._next_id, schedule, self._clock())
        self._run = run
        logger.debug("Animator: run %d started, %r", run.run_id, schedule)

        if self._use_timer:
            run.timer = threading.Timer(schedule.total_duration / 1000.0, self._finish, (run,))
            run.timer.daemon = True
            run.timer.start()

    def poll(self) -> Phase | None:
        """Return the current phase, or None when idle.

        Fires the completion callback once the run's total duration has passed.
        """
        run = self._run
        if run is None:
            return None
        elapsed = self._clock() - run.started_at
        if run.schedule.is_finished(elapsed):
            self._finish(run)
        if run.completed:
            return Phase.COMPLETE
        return run.schedule.reported_phase(elapsed)

    def stop(self, *, finalize: bool = True) -> None:
        """Stop the current run immediately.

        ``finalize=True`` leaves the controller in COMPLETE; ``finalize=False``
        discards the run and returns to idle. Either way completion fires at
        most once.
        """
        run = self._run
        if run is None:
            return
        self._finish(run)
        if not finalize:
            self._run = None
            logger.debug("Animator: run %d discarded", run.run_id)

    def _finish(self, run: _Run) -> None:
        with self._lock:
            if run.completed:
                return
            run.completed = True
        if run.timer is not None:
            run.timer.cancel()
        logger.debug("Animator: run %d complete", run.run_id)
        if self._on_complete is not None:
            self._on_complete()
