"""Shared fixtures and test doubles."""

import tempfile
from pathlib import Path

import pytest

from gym_scanner.core.errors import ExtractionFailure
from gym_scanner.core.models import Exercise, ExtractedRoutine, WorkoutPlan
from gym_scanner.core.results import Degraded, Ok
from gym_scanner.io.kv_store import MemoryStore


def make_exercise(name: str = "Squat", uid: str | None = None, **kwargs) -> Exercise:
    params = {"sets": 3, "reps": "8-12", "muscle_group": "Legs"}
    params.update(kwargs)
    if uid is None:
        uid = f"uid-{name.lower().replace(' ', '-')}"
    return Exercise(name=name, uid=uid, **params)


def make_plan(
    n_exercises: int = 3,
    plan_id: str = "plan-1",
    title: str = "Day A",
    rest_times: list[int | None] | None = None,
    **kwargs,
) -> WorkoutPlan:
    rest_times = rest_times or [None] * n_exercises
    exercises = [
        make_exercise(f"Exercise {i + 1}", rest_time=rest_times[i]) for i in range(n_exercises)
    ]
    return WorkoutPlan(
        id=plan_id,
        title=title,
        date_created=kwargs.pop("date_created", "2024-06-01T12:00:00"),
        exercises=exercises,
        **kwargs,
    )


class FakeCoach:
    """Deterministic Coach double."""

    def __init__(self, routines=None, fail: bool = False, offline: bool = False):
        self.routines = routines if routines is not None else [
            ExtractedRoutine("Day A", [make_exercise("Bench Press", uid=""), make_exercise("Row", uid="")]),
            ExtractedRoutine("Day B", [make_exercise("Squat", uid="")]),
        ]
        self.fail = fail
        self.offline = offline
        self.extract_calls = 0
        self.chat_calls: list[tuple[str, list]] = []

    def extract(self, document):
        self.extract_calls += 1
        if self.fail:
            raise ExtractionFailure("Error while analysing the workout sheet.")
        return self.routines

    def explain(self, name, muscle_group):
        if self.offline:
            return Degraded("No explanation available right now.")
        return Ok(f"How to do {name} for {muscle_group}")

    def chat(self, message, history):
        self.chat_calls.append((message, list(history)))
        if self.offline:
            return Degraded("offline")
        return Ok(f"echo: {message}")

    def quote(self):
        return Degraded("Sweat now, shine later.") if self.offline else Ok("Keep going!")


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def temp_data_dir():
    """Create a temporary data directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
