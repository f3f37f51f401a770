"""
Marker for a guided session in progress.

The session command writes it on start and removes it on every way out, so
other commands (the motivation pinger) can stay quiet during a workout even
though they run in a separate process.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Iterator

from ..core.config import ACTIVE_SESSION_KEY, ACTIVE_SESSION_MAX_HOURS
from ..core.models import WorkoutPlan
from ..core.queries import parse_timestamp
from .kv_store import KeyValueStore

logger = logging.getLogger(__name__)


@contextmanager
def mark_session_active(store: KeyValueStore, plan: WorkoutPlan, started_at: str) -> Iterator[None]:
    store.set(ACTIVE_SESSION_KEY, {"plan_id": plan.id, "started_at": started_at})
    try:
        yield
    finally:
        store.delete(ACTIVE_SESSION_KEY)


def session_in_progress(store: KeyValueStore, now: datetime | None = None) -> bool:
    """True while a marker younger than ACTIVE_SESSION_MAX_HOURS exists."""
    marker = store.get(ACTIVE_SESSION_KEY)
    if not isinstance(marker, dict):
        return False
    try:
        started = parse_timestamp(str(marker.get("started_at")))
    except ValueError:
        logger.warning("Ignoring unreadable session marker: %r", marker)
        return False
    now = now or datetime.now()
    return now - started < timedelta(hours=ACTIVE_SESSION_MAX_HOURS)
