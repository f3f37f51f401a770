"""
JSON serialization for gym-scanner models.

Handles conversion between dataclasses and JSON-compatible dicts, and the
parsing of the AI extractor's free-text JSON answer.

Stored documents use snake_case keys.  The AI answer (and older exports)
use camelCase (``muscleGroup``, ``restTime``, ``dateCreated``); readers
accept both.
"""

import json
import re
from typing import Any

from ..core.models import Exercise, ExtractedRoutine, ThemeConfig, WorkoutPlan

_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)
_LEADING_INT = re.compile(r"^\s*(\d+)")


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def _pick(data: dict[str, Any], *names: str, default: Any = None) -> Any:
    """First present key among ``names`` (snake_case first, then camelCase)."""
    for name in names:
        if name in data and data[name] is not None:
            return data[name]
    return default


def coerce_int(value: Any, name: str) -> int:
    """
    Read a whole number from an int, float or a string like "90" / "90s".

    Raises:
        ValidationError: If no number can be read or it is negative
    """
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    if isinstance(value, (int, float)):
        number = int(value)
    elif isinstance(value, str) and _LEADING_INT.match(value):
        number = int(_LEADING_INT.match(value).group(1))  # type: ignore[union-attr]
    else:
        raise ValidationError(f"{name} must be a number, got {value!r}")
    if number < 0:
        raise ValidationError(f"{name} must be non-negative, got {number}")
    return number


def exercise_to_dict(exercise: Exercise) -> dict[str, Any]:
    """
    Convert Exercise to JSON-compatible dict.

    Optional fields are omitted when unset.
    """
    data: dict[str, Any] = {
        "uid": exercise.uid,
        "name": exercise.name,
        "sets": exercise.sets,
        "reps": exercise.reps,
        "muscle_group": exercise.muscle_group,
    }
    if exercise.notes is not None:
        data["notes"] = exercise.notes
    if exercise.rest_time is not None:
        data["rest_time"] = exercise.rest_time
    return data


def dict_to_exercise(data: dict[str, Any]) -> Exercise:
    """
    Convert dict to Exercise.

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Exercise must be an object, got {type(data).__name__}")

    name = _pick(data, "name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Exercise name is missing")

    reps = _pick(data, "reps", default="")
    rest = _pick(data, "rest_time", "restTime")
    notes = _pick(data, "notes")

    try:
        return Exercise(
            name=name.strip(),
            sets=coerce_int(_pick(data, "sets", default=0), "sets"),
            reps=str(reps),
            muscle_group=str(_pick(data, "muscle_group", "muscleGroup", default="")),
            notes=str(notes) if notes not in (None, "") else None,
            rest_time=coerce_int(rest, "rest_time") if rest not in (None, "") else None,
            uid=str(_pick(data, "uid", default="")),
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


def plan_to_dict(plan: WorkoutPlan) -> dict[str, Any]:
    """Convert WorkoutPlan to JSON-compatible dict."""
    data: dict[str, Any] = {
        "id": plan.id,
        "title": plan.title,
        "date_created": plan.date_created,
        "exercises": [exercise_to_dict(ex) for ex in plan.exercises],
    }
    if plan.last_played is not None:
        data["last_played"] = plan.last_played
    return data


def dict_to_plan(data: dict[str, Any]) -> WorkoutPlan:
    """
    Convert dict to WorkoutPlan.

    Exercises stored without a uid (older data) get one here; PlanStore
    writes it back on the next save.

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Plan must be an object, got {type(data).__name__}")
    for required in ("id", "title"):
        if not data.get(required):
            raise ValidationError(f"Plan is missing '{required}'")

    date_created = _pick(data, "date_created", "dateCreated")
    if not isinstance(date_created, str):
        raise ValidationError(f"Plan {data['id']} is missing its creation date")

    raw_exercises = data.get("exercises", [])
    if not isinstance(raw_exercises, list):
        raise ValidationError(f"Plan {data['id']} exercises must be a list")

    try:
        return WorkoutPlan(
            id=str(data["id"]),
            title=str(data["title"]),
            date_created=date_created,
            exercises=[dict_to_exercise(ex).with_uid() for ex in raw_exercises],
            last_played=_pick(data, "last_played", "lastPlayed"),
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


def plans_to_list(plans: list[WorkoutPlan]) -> list[dict[str, Any]]:
    return [plan_to_dict(p) for p in plans]


def list_to_plans(data: Any) -> list[WorkoutPlan]:
    """
    Convert a stored collection to plans.

    Raises:
        ValidationError: If the document is not a list or any plan is invalid
    """
    if not isinstance(data, list):
        raise ValidationError(f"Plan collection must be a list, got {type(data).__name__}")
    return [dict_to_plan(item) for item in data]


def theme_to_dict(theme: ThemeConfig) -> dict[str, str]:
    return {"primary": theme.primary, "secondary": theme.secondary}


def dict_to_theme(data: Any) -> ThemeConfig:
    """
    Convert dict to ThemeConfig.

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Theme must be an object")
    try:
        return ThemeConfig(primary=data.get("primary"), secondary=data.get("secondary"))
    except ValueError as e:
        raise ValidationError(str(e)) from e


def strip_code_fences(text: str) -> str:
    """Remove markdown ``` / ```json fences around a model answer."""
    return _FENCE.sub("", text).strip()


def parse_extracted_routines(text: str) -> list[ExtractedRoutine]:
    """
    Parse the extractor's answer into routines.

    Accepts a JSON array of ``{routineName, exercises}`` objects, optionally
    wrapped in markdown fences.  A single object, or an object holding the
    array under ``routines``, is accepted too.  Exercises that cannot be read
    make the whole answer invalid.

    Raises:
        ValidationError: If the answer is not valid JSON or has no routines
    """
    try:
        data = json.loads(strip_code_fences(text))
    except json.JSONDecodeError as e:
        raise ValidationError(f"Answer is not valid JSON: {e}") from e

    if isinstance(data, dict):
        data = data.get("routines", [data])
    if not isinstance(data, list) or not data:
        raise ValidationError("Answer contains no routines")

    routines = []
    for i, item in enumerate(data, 1):
        if not isinstance(item, dict):
            raise ValidationError(f"Routine {i} must be an object")
        exercises = item.get("exercises")
        if not isinstance(exercises, list):
            raise ValidationError(f"Routine {i} has no exercise list")
        name = _pick(item, "routine_name", "routineName", "title", default="")
        routines.append(
            ExtractedRoutine(
                routine_name=str(name).strip() or f"Workout {i}",
                exercises=[dict_to_exercise(ex) for ex in exercises],
            )
        )
    return routines
