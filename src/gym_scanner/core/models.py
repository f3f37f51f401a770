"""
Data models for gym-scanner.

All core dataclasses representing exercises, stored workout plans and the
transient drafts produced while importing a scanned sheet.  Timestamps are
ISO strings, exactly as they are persisted.
"""

import re
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime

from .errors import IndexOutOfRange

_HEX_COLOR = re.compile(r"^#?[0-9a-fA-F]{6}$")


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return str(uuid.uuid4())


def validate_iso_date(date_str: str) -> None:
    """Validate a YYYY-MM-DD date string."""
    if not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValueError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")
    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValueError(f"Invalid date: {date_str}") from e


def validate_iso_timestamp(value: str) -> None:
    """Validate an ISO-8601 timestamp (with or without an offset)."""
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise ValueError(f"Invalid timestamp: {value}") from e


@dataclass(frozen=True)
class Exercise:
    """
    One exercise of a plan.

    Values are immutable: an edit produces a new Exercise (same uid) that
    replaces the old one in its slot, which is what lets the old value sit
    in the undo history untouched.
    """

    name: str
    sets: int
    reps: str  # free-form, e.g. "8-12", "AMRAP", "30s"
    muscle_group: str
    notes: str | None = None
    rest_time: int | None = None  # seconds
    uid: str = ""  # stable per-exercise id, keys the edit history

    def __post_init__(self) -> None:
        """Validate exercise data."""
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("name must be a non-empty string")
        if self.sets < 0:
            raise ValueError("sets must be non-negative")
        if self.rest_time is not None and self.rest_time < 0:
            raise ValueError("rest_time must be non-negative")

    def with_uid(self) -> "Exercise":
        """Return this exercise with a uid, assigning one if missing."""
        return self if self.uid else replace(self, uid=new_id())


@dataclass
class WorkoutPlan:
    """
    A named, dated list of exercises.

    The order of ``exercises`` is the order a session walks through them.
    """

    id: str
    title: str
    date_created: str  # ISO timestamp
    exercises: list[Exercise] = field(default_factory=list)
    last_played: str | None = None  # ISO timestamp, set by session completion

    def __post_init__(self) -> None:
        """Validate plan data."""
        if not self.id:
            raise ValueError("id must be non-empty")
        validate_iso_timestamp(self.date_created)
        if self.last_played is not None:
            validate_iso_timestamp(self.last_played)

    @property
    def muscle_groups(self) -> list[str]:
        """Distinct muscle groups in exercise order."""
        seen: dict[str, None] = {}
        for ex in self.exercises:
            if ex.muscle_group:
                seen.setdefault(ex.muscle_group, None)
        return list(seen)

    def exercise_at(self, index: int) -> Exercise:
        """Return the exercise at ``index``; IndexOutOfRange if invalid."""
        if index < 0 or index >= len(self.exercises):
            raise IndexOutOfRange(index, len(self.exercises))
        return self.exercises[index]

    def with_exercise(self, index: int, exercise: Exercise) -> "WorkoutPlan":
        """Return a copy with the exercise at ``index`` replaced in place."""
        self.exercise_at(index)
        exercises = list(self.exercises)
        exercises[index] = exercise
        return replace(self, exercises=exercises)

    def with_last_played(self, timestamp: str) -> "WorkoutPlan":
        """Return a copy stamped as played at ``timestamp``."""
        return replace(self, last_played=timestamp)


@dataclass
class ExtractedRoutine:
    """One routine (training day) as returned by the AI extractor."""

    routine_name: str
    exercises: list[Exercise] = field(default_factory=list)


@dataclass
class DraftRoutine:
    """
    An extracted routine awaiting confirmation of its name and date.

    Only ``routine_name`` and ``selected_date`` are editable at this stage.
    """

    id: str  # temporary, replaced on finalize
    routine_name: str
    selected_date: str  # YYYY-MM-DD
    exercises: list[Exercise] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate draft data."""
        validate_iso_date(self.selected_date)


@dataclass
class ThemeConfig:
    """Primary/secondary accent colours as hex codes."""

    primary: str
    secondary: str

    def __post_init__(self) -> None:
        """Validate colours."""
        for name in ("primary", "secondary"):
            value = getattr(self, name)
            if not isinstance(value, str) or not _HEX_COLOR.match(value):
                raise ValueError(f"{name} must be a hex colour like #10b981, got {value!r}")
            setattr(self, name, "#" + value.lstrip("#").lower())

    def as_rgb(self) -> dict[str, tuple[int, int, int]]:
        """Return the colours as RGB triples."""
        out = {}
        for name in ("primary", "secondary"):
            h = getattr(self, name).lstrip("#")
            out[name] = (int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))
        return out
