"""
Persistent undo stacks for exercise edits.

Each stack is a JSON list of exercise snapshots (oldest first) stored under
``history/<plan id>/<exercise uid>``.  A stack that is missing or cannot be
read behaves as empty.
"""

import logging

from ..core.config import HISTORY_KEY_PREFIX
from ..core.models import Exercise
from .kv_store import KeyValueStore
from .serializers import ValidationError, dict_to_exercise, exercise_to_dict

logger = logging.getLogger(__name__)


class EditHistoryStore:
    """KeyValueStore-backed implementation of the editor's history stacks."""

    def __init__(self, store: KeyValueStore, prefix: str = HISTORY_KEY_PREFIX):
        self.store = store
        self.prefix = prefix

    def key_for(self, plan_id: str, exercise_uid: str) -> str:
        return f"{self.prefix}/{plan_id}/{exercise_uid}"

    def read(self, plan_id: str, exercise_uid: str) -> list[Exercise]:
        data = self.store.get(self.key_for(plan_id, exercise_uid), [])
        if not isinstance(data, list):
            logger.warning("Ignoring malformed edit history for %s/%s", plan_id, exercise_uid)
            return []
        try:
            return [dict_to_exercise(item) for item in data]
        except ValidationError as e:
            logger.warning("Ignoring malformed edit history for %s/%s: %s", plan_id, exercise_uid, e)
            return []

    def write(self, plan_id: str, exercise_uid: str, stack: list[Exercise]) -> None:
        key = self.key_for(plan_id, exercise_uid)
        if not stack:
            self.store.delete(key)
            return
        self.store.set(key, [exercise_to_dict(ex) for ex in stack])

    def forget_plan(self, plan_id: str) -> None:
        self.store.delete_prefix(f"{self.prefix}/{plan_id}")
