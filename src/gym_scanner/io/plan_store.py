"""
Plan collection storage.

The whole collection lives under one key of a KeyValueStore and every
mutation is a read-modify-write of the full list followed by a single
atomic save.
"""

import logging

from ..core.config import PLANS_KEY
from ..core.errors import CorruptStoreError
from ..core.models import WorkoutPlan
from ..core.queries import last_played
from .kv_store import KeyValueStore, ReadStatus
from .serializers import ValidationError, list_to_plans, plans_to_list

logger = logging.getLogger(__name__)

LoadStatus = ReadStatus


def _missing_uids(data: list[dict]) -> bool:
    return any(not ex.get("uid") for plan in data for ex in plan.get("exercises", []))


def _duplicate_ids(plans: list[WorkoutPlan]) -> list[str]:
    seen: set[str] = set()
    repeated: list[str] = []
    for plan in plans:
        if plan.id in seen and plan.id not in repeated:
            repeated.append(plan.id)
        seen.add(plan.id)
    return repeated


class PlanStore:
    """
    Manages the stored list of workout plans.

    ``load`` never fails: missing or unreadable data reads as an empty list.
    ``load_with_status`` and ``load_strict`` let the host tell "no plans yet"
    apart from "plan data is damaged".
    """

    def __init__(self, store: KeyValueStore, key: str = PLANS_KEY):
        self.store = store
        self.key = key

    def load_with_status(self) -> tuple[list[WorkoutPlan], LoadStatus]:
        """Return the plans and whether they were missing, fine or corrupt."""
        status, data = self.store.read(self.key)
        if status is not ReadStatus.OK:
            return [], status
        try:
            plans = list_to_plans(data)
        except ValidationError as e:
            logger.error("Stored plans under '%s' are invalid: %s", self.key, e)
            return [], ReadStatus.CORRUPT
        duplicates = _duplicate_ids(plans)
        if duplicates:
            logger.error("Stored plans under '%s' repeat ids: %s", self.key, ", ".join(duplicates))
            return [], ReadStatus.CORRUPT
        if _missing_uids(data):
            # uids were just assigned; save them so edit history keys stay stable
            logger.info("Assigning exercise uids to stored plans")
            self.replace_all(plans)
        return plans, ReadStatus.OK

    def load(self) -> list[WorkoutPlan]:
        """Return the stored plans, or an empty list."""
        plans, _ = self.load_with_status()
        return plans

    def load_strict(self) -> list[WorkoutPlan]:
        """
        Return the stored plans.

        Raises:
            CorruptStoreError: If plan data exists but cannot be read
        """
        plans, status = self.load_with_status()
        if status is ReadStatus.CORRUPT:
            raise CorruptStoreError(f"Plan data under '{self.key}' is damaged")
        return plans

    def replace_all(self, plans: list[WorkoutPlan]) -> None:
        """
        Overwrite the stored collection.

        Raises:
            ValueError: If two plans share an id
        """
        seen: set[str] = set()
        for plan in plans:
            if plan.id in seen:
                raise ValueError(f"Duplicate plan id: {plan.id}")
            seen.add(plan.id)
        self.store.set(self.key, plans_to_list(plans))

    def get(self, plan_id: str) -> WorkoutPlan | None:
        return next((p for p in self.load_strict() if p.id == plan_id), None)

    def upsert(self, plan: WorkoutPlan) -> bool:
        """
        Replace the plan with the same id, keeping its position.

        Returns:
            True if a plan was replaced; False (nothing written) if absent
        """
        plans = self.load_strict()
        for i, existing in enumerate(plans):
            if existing.id == plan.id:
                plans[i] = plan
                self.replace_all(plans)
                return True
        return False

    def remove(self, plan_id: str) -> bool:
        """Delete by id; returns False (nothing written) if absent."""
        plans = self.load_strict()
        kept = [p for p in plans if p.id != plan_id]
        if len(kept) == len(plans):
            return False
        self.replace_all(kept)
        return True

    def insert(self, new_plans: list[WorkoutPlan]) -> None:
        """Add a finalized batch in front of the existing plans (all or nothing)."""
        if not new_plans:
            return
        self.replace_all(list(new_plans) + self.load_strict())

    def last_played(self) -> WorkoutPlan | None:
        """The most recently completed plan, for quick resume."""
        return last_played(self.load())
