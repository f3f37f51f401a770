"""Periodic motivational quotes, kept quiet while a workout is running."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from .config import DEFAULT_MOTIVATION_MINUTES, MOTIVATION_FREQUENCIES_MINUTES
from .results import AiText
from .timers import Scheduler, TimerHandle

if TYPE_CHECKING:  # pragma: no cover - for type checkers only
    from ..ai.base import Coach

logger = logging.getLogger(__name__)


class MotivationPinger:
    """
    Fire a quote every ``every_minutes`` through ``notify``.

    Pings that fall due while ``session_active()`` is true are skipped (the
    schedule keeps going), so quotes never interrupt a guided session.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        coach: "Coach",
        notify: Callable[[AiText], None],
        every_minutes: int = DEFAULT_MOTIVATION_MINUTES,
        session_active: Callable[[], bool] = lambda: False,
    ):
        if every_minutes not in MOTIVATION_FREQUENCIES_MINUTES:
            raise ValueError(
                f"every_minutes must be one of {MOTIVATION_FREQUENCIES_MINUTES}, got {every_minutes}"
            )
        self._scheduler = scheduler
        self._coach = coach
        self._notify = notify
        self._session_active = session_active
        self.every_minutes = every_minutes
        self._handle: TimerHandle | None = None
        self.sent = 0
        self.skipped = 0

    @property
    def running(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        if self._handle is None:
            self._arm()

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _arm(self) -> None:
        self._handle = self._scheduler.call_later(self.every_minutes * 60, self._fire)

    def _fire(self) -> None:
        self._arm()
        if self._session_active():
            self.skipped += 1
            logger.debug("Motivation ping skipped: session in progress")
            return
        self.sent += 1
        self._notify(self._coach.quote())
