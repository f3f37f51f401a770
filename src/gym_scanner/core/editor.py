"""
Exercise editing with bounded multi-step undo.

Every change to an exercise goes through ``commit_edit``, which first saves
the pre-edit value on that exercise's history stack.  ``undo`` pops the most
recent saved value back into place.  There is no redo: undoing drops the
value it overwrites.

Stacks are keyed by (plan id, exercise uid) rather than by position, so they
keep pointing at the right exercise even if a plan's order ever changes.
The editor returns updated plans; persisting them is the caller's job.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Protocol

from .config import HISTORY_LIMIT
from .errors import NoHistory
from .models import Exercise, WorkoutPlan

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "sets", "reps", "muscle_group", "notes", "rest_time")
_INT_FIELDS = ("sets", "rest_time")
_OPTIONAL_FIELDS = ("notes", "rest_time")


class HistoryStacks(Protocol):
    """Storage for per-exercise undo stacks (oldest first)."""

    def read(self, plan_id: str, exercise_uid: str) -> list[Exercise]: ...

    def write(self, plan_id: str, exercise_uid: str, stack: list[Exercise]) -> None: ...

    def forget_plan(self, plan_id: str) -> None: ...


@dataclass
class EditDraft:
    """Mutable working copy of an exercise being edited."""

    name: str
    sets: int
    reps: str
    muscle_group: str
    notes: str | None
    rest_time: int | None
    uid: str

    @classmethod
    def from_exercise(cls, exercise: Exercise) -> "EditDraft":
        return cls(**{f.name: getattr(exercise, f.name) for f in fields(Exercise)})

    def set(self, field_name: str, value: Any) -> None:
        """
        Update one editable field.

        ``sets`` and ``rest_time`` are coerced to int; empty strings clear
        the optional fields.

        Raises:
            ValueError: If the field is not editable or the value is invalid
        """
        if field_name not in EDITABLE_FIELDS:
            raise ValueError(f"Field '{field_name}' cannot be edited")
        if field_name in _OPTIONAL_FIELDS and (value is None or value == ""):
            setattr(self, field_name, None)
            return
        if field_name in _INT_FIELDS:
            try:
                value = int(value)
            except (TypeError, ValueError) as e:
                raise ValueError(f"{field_name} must be a whole number, got {value!r}") from e
        else:
            value = str(value)
        setattr(self, field_name, value)

    def build(self) -> Exercise:
        """Return the edited exercise (validated)."""
        return Exercise(
            name=self.name,
            sets=self.sets,
            reps=self.reps,
            muscle_group=self.muscle_group,
            notes=self.notes,
            rest_time=self.rest_time,
            uid=self.uid,
        )


class ExerciseEditor:
    """
    Edit/undo engine for exercises inside plans.

    Args:
        history: Backing storage for the undo stacks
        limit: Maximum snapshots kept per exercise (oldest evicted first)
    """

    def __init__(self, history: HistoryStacks, limit: int = HISTORY_LIMIT):
        if limit < 1:
            raise ValueError("history limit must be at least 1")
        self.history = history
        self.limit = limit

    def _uid(self, plan: WorkoutPlan, index: int) -> str:
        exercise = plan.exercise_at(index)
        if not exercise.uid:
            raise ValueError(
                f"Exercise {index} of plan {plan.id} has no uid; load plans through PlanStore"
            )
        return exercise.uid

    def begin_edit(self, plan: WorkoutPlan, index: int) -> EditDraft:
        """Snapshot the exercise at ``index`` into an editable draft."""
        return EditDraft.from_exercise(plan.exercise_at(index))

    def commit_edit(
        self, plan: WorkoutPlan, index: int, draft: EditDraft | Exercise
    ) -> WorkoutPlan:
        """
        Save the edited exercise, keeping the previous value for undo.

        The draft always keeps the uid of the slot it replaces.

        Returns:
            Updated plan (the input plan is not modified)
        """
        uid = self._uid(plan, index)
        before = plan.exercises[index]
        after = draft.build() if isinstance(draft, EditDraft) else draft
        after = replace(after, uid=uid)

        stack = self.history.read(plan.id, uid)
        stack.append(before)
        if len(stack) > self.limit:
            stack = stack[-self.limit:]
        self.history.write(plan.id, uid, stack)

        logger.debug("Edited exercise %d of plan %s (history depth %d)", index, plan.id, len(stack))
        return plan.with_exercise(index, after)

    def undo(self, plan: WorkoutPlan, index: int) -> WorkoutPlan:
        """
        Restore the most recently saved version of the exercise at ``index``.

        Raises:
            NoHistory: If the exercise has no saved versions
        """
        uid = self._uid(plan, index)
        stack = self.history.read(plan.id, uid)
        if not stack:
            raise NoHistory(f"Nothing to undo for exercise {index} of plan {plan.id}")

        previous = replace(stack.pop(), uid=uid)
        self.history.write(plan.id, uid, stack)
        logger.debug("Undid exercise %d of plan %s (history depth %d)", index, plan.id, len(stack))
        return plan.with_exercise(index, previous)

    def history_depth(self, plan: WorkoutPlan, index: int) -> int:
        """Number of saved versions for the exercise at ``index`` (0 if invalid)."""
        if index < 0 or index >= len(plan.exercises) or not plan.exercises[index].uid:
            return 0
        return len(self.history.read(plan.id, plan.exercises[index].uid))

    def has_history(self, plan: WorkoutPlan, index: int) -> bool:
        """True when ``undo`` would succeed."""
        return self.history_depth(plan, index) > 0

    def forget_plan(self, plan_id: str) -> None:
        """Drop every stack of a removed plan."""
        self.history.forget_plan(plan_id)
