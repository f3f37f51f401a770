"""
Guided workout session runner.

A WorkoutSession walks a plan's exercises in order.  The user marks the
current exercise done, a short celebration is shown, then the runner
advances to the next exercise or finishes the workout.  Alongside, a rest
countdown can be started, paused, reset and nudged.

States:
    RUNNING      waiting for the current exercise to be marked done
    CELEBRATING  "done!" display; advances on its own after a short delay
    COMPLETE     every exercise done, plan stamped with last_played
    EXITED       user left early; nothing was saved

Exit confirmation is an overlay flag (``exit_confirming``) on top of
RUNNING/CELEBRATING and never touches the cursor or the completed set.

Timers are scheduled through an injected Scheduler.  Every handle the
session holds is cancelled on exit, on completion and on close().
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Callable

from .config import CELEBRATION_SECONDS, DEFAULT_REST_SECONDS, TICK_SECONDS
from .models import Exercise, WorkoutPlan
from .timers import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


def now_iso() -> str:
    """Current local time as an ISO timestamp (second precision)."""
    return datetime.now().isoformat(timespec="seconds")


class SessionState(str, Enum):
    RUNNING = "running"
    CELEBRATING = "celebrating"
    COMPLETE = "complete"
    EXITED = "exited"


class Countdown:
    """
    Rest countdown ticking once per ``tick_seconds``.

    Reaching zero stops the countdown and fires ``on_finished``; it never
    advances the session by itself.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        seconds: int,
        on_finished: Callable[[], None] | None = None,
        tick_seconds: float = TICK_SECONDS,
    ):
        self._scheduler = scheduler
        self._on_finished = on_finished
        self._tick_seconds = tick_seconds
        self._handle: TimerHandle | None = None
        self.initial = max(0, int(seconds))
        self.time_left = self.initial
        self.running = False

    def start(self) -> None:
        if self.running or self.time_left <= 0:
            return
        self.running = True
        self._arm()

    def pause(self) -> None:
        self.running = False
        self._disarm()

    def toggle(self) -> None:
        if self.running:
            self.pause()
        else:
            self.start()

    def reset(self, seconds: int | None = None) -> None:
        """Stop and refill the countdown (optionally with a new duration)."""
        self.pause()
        if seconds is not None:
            self.initial = max(0, int(seconds))
        self.time_left = self.initial

    def adjust(self, delta: int) -> None:
        """Add or remove seconds; clamps at zero, which stops the countdown."""
        self.time_left = max(0, self.time_left + int(delta))
        if self.time_left == 0 and self.running:
            self.pause()

    def cancel(self) -> None:
        self.pause()

    def _arm(self) -> None:
        self._handle = self._scheduler.call_later(self._tick_seconds, self._tick)

    def _disarm(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _tick(self) -> None:
        self._handle = None
        if not self.running:
            return
        self.time_left = max(0, self.time_left - 1)
        if self.time_left > 0:
            self._arm()
            return
        self.running = False
        if self._on_finished is not None:
            self._on_finished()

    @property
    def armed(self) -> bool:
        """True while a tick is scheduled."""
        return self._handle is not None


class WorkoutSession:
    """
    State machine for one guided walkthrough of a plan.

    Args:
        plan: Plan to run; must have at least one exercise
        scheduler: Source of cancellable timers
        on_complete: Called exactly once, with the plan stamped with
            ``last_played``, when the last exercise is done
        on_exit: Called when the user confirms leaving the session
        on_timer_finished: Called when the rest countdown reaches zero
        clock: Returns the current ISO timestamp
    """

    def __init__(
        self,
        plan: WorkoutPlan,
        scheduler: Scheduler,
        on_complete: Callable[[WorkoutPlan], None],
        *,
        on_exit: Callable[[], None] | None = None,
        on_timer_finished: Callable[[], None] | None = None,
        clock: Callable[[], str] = now_iso,
        celebration_seconds: float = CELEBRATION_SECONDS,
        default_rest_seconds: int = DEFAULT_REST_SECONDS,
    ):
        if not plan.exercises:
            raise ValueError(f"Plan '{plan.title}' has no exercises to run")

        self.plan = plan
        self._scheduler = scheduler
        self._on_complete = on_complete
        self._on_exit = on_exit
        self._clock = clock
        self._celebration_seconds = celebration_seconds
        self._default_rest = default_rest_seconds
        self._celebration: TimerHandle | None = None
        self._completion_written = False

        self.started_at = clock()
        self.finished_at: str | None = None
        self.state = SessionState.RUNNING
        self.active_index = 0
        self._completed: set[int] = set()
        self.exit_confirming = False
        self.countdown = Countdown(
            scheduler, self.rest_for(0), on_finished=on_timer_finished
        )

    # ------------------------------------------------------------------
    # Read-only view
    # ------------------------------------------------------------------

    @property
    def completed(self) -> frozenset[int]:
        return frozenset(self._completed)

    @property
    def total(self) -> int:
        return len(self.plan.exercises)

    @property
    def progress(self) -> float:
        """Fraction of exercises done, 0.0 to 1.0."""
        return len(self._completed) / self.total

    @property
    def current_exercise(self) -> Exercise:
        return self.plan.exercises[self.active_index]

    @property
    def next_exercise(self) -> Exercise | None:
        nxt = self.active_index + 1
        return self.plan.exercises[nxt] if nxt < self.total else None

    @property
    def is_active(self) -> bool:
        """True until the session completes or is exited."""
        return self.state in (SessionState.RUNNING, SessionState.CELEBRATING)

    @property
    def time_left(self) -> int:
        return self.countdown.time_left

    @property
    def timer_running(self) -> bool:
        return self.countdown.running

    def rest_for(self, index: int) -> int:
        """Rest seconds for the exercise at ``index`` (default when unset; 0 is kept)."""
        rest = self.plan.exercises[index].rest_time
        return rest if rest is not None else self._default_rest

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def mark_done(self) -> bool:
        """
        Mark the current exercise done.

        Ignored (returns False) when the exercise is already done, while a
        celebration is showing, behind the exit prompt, or once the session
        has ended.
        """
        if self.state is not SessionState.RUNNING or self.exit_confirming:
            return False
        if self.active_index in self._completed:
            return False

        self.state = SessionState.CELEBRATING
        self._celebration = self._scheduler.call_later(
            self._celebration_seconds, self._finish_celebration
        )
        logger.debug("Exercise %d of '%s' done", self.active_index, self.plan.title)
        return True

    def _finish_celebration(self) -> None:
        self._celebration = None
        if self.state is not SessionState.CELEBRATING:
            return

        self._completed.add(self.active_index)
        if self.active_index >= self.total - 1:
            self._complete()
            return

        self.active_index += 1
        self.countdown.reset(self.rest_for(self.active_index))
        self.state = SessionState.RUNNING

    def _complete(self) -> None:
        self.state = SessionState.COMPLETE
        self.exit_confirming = False
        self.countdown.cancel()
        if self._completion_written:
            return
        self._completion_written = True
        self.finished_at = self._clock()
        logger.info("Session of '%s' complete at %s", self.plan.title, self.finished_at)
        self._on_complete(self.plan.with_last_played(self.finished_at))

    def request_exit(self) -> bool:
        """Show the exit prompt; False once the session has ended."""
        if not self.is_active:
            return False
        self.exit_confirming = True
        return True

    def cancel_exit_request(self) -> None:
        """Dismiss the exit prompt, leaving progress and timer untouched."""
        self.exit_confirming = False

    def confirm_exit(self) -> None:
        """
        Leave the session.

        Progress is discarded and nothing is written back to the plan; only a
        fully completed session records ``last_played``.
        """
        if self.state is SessionState.EXITED:
            return
        was_complete = self.state is SessionState.COMPLETE
        self.close()
        self.exit_confirming = False
        if not was_complete:
            self._completed.clear()
            self.active_index = 0
            logger.info("Session of '%s' abandoned", self.plan.title)
        self.state = SessionState.EXITED
        if self._on_exit is not None:
            self._on_exit()

    # ------------------------------------------------------------------
    # Rest countdown
    # ------------------------------------------------------------------

    def start_timer(self) -> None:
        if self.is_active:
            self.countdown.start()

    def pause_timer(self) -> None:
        self.countdown.pause()

    def toggle_timer(self) -> None:
        if self.is_active:
            self.countdown.toggle()

    def reset_timer(self) -> None:
        self.countdown.reset(self.rest_for(self.active_index))

    def adjust_timer(self, delta: int) -> None:
        if self.is_active:
            self.countdown.adjust(delta)

    # ------------------------------------------------------------------
    # Resource lifetime
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Cancel every pending timer (celebration and countdown)."""
        if self._celebration is not None:
            self._celebration.cancel()
            self._celebration = None
        self.countdown.cancel()

    @property
    def has_pending_timers(self) -> bool:
        return self._celebration is not None or self.countdown.armed

    def __enter__(self) -> "WorkoutSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
