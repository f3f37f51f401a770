"""
Read-only projections over the plan collection.

Search, filter and sort for the plan list, per-day grouping for the
calendar, and the "quick resume" pick of the most recently played plan.
"""

from calendar import monthrange
from datetime import date, datetime
from typing import Literal

from .models import Exercise, WorkoutPlan

SortOption = Literal["date-desc", "date-asc", "name-asc", "exercises-desc"]
SORT_OPTIONS: tuple[str, ...] = ("date-desc", "date-asc", "name-asc", "exercises-desc")
ALL_MUSCLES = "All"


def parse_timestamp(value: str) -> datetime:
    """Parse a stored ISO timestamp, dropping any timezone."""
    return datetime.fromisoformat(value.replace("Z", "+00:00")).replace(tzinfo=None)


def plan_day(plan: WorkoutPlan) -> date:
    """Calendar day a plan is scheduled for."""
    return parse_timestamp(plan.date_created).date()


def muscle_groups(plans: list[WorkoutPlan]) -> list[str]:
    """Sorted distinct muscle groups across all plans."""
    groups = {ex.muscle_group for p in plans for ex in p.exercises if ex.muscle_group}
    return sorted(groups)


def filter_plans(
    plans: list[WorkoutPlan],
    query: str = "",
    muscle_group: str | None = None,
    exercise: str = "",
) -> list[WorkoutPlan]:
    """
    Filter plans.

    Args:
        plans: Plans to filter
        query: Case-insensitive match on the title or any exercise name
        muscle_group: Keep plans training this group (None/"All" = any)
        exercise: Case-insensitive match on exercise names only

    Returns:
        Matching plans in their original order
    """
    q = query.strip().lower()
    ex_q = exercise.strip().lower()
    mg = None if muscle_group in (None, "", ALL_MUSCLES) else muscle_group.lower()

    result = []
    for plan in plans:
        names = [ex.name.lower() for ex in plan.exercises]
        if q and q not in plan.title.lower() and not any(q in n for n in names):
            continue
        if mg and not any(ex.muscle_group.lower() == mg for ex in plan.exercises):
            continue
        if ex_q and not any(ex_q in n for n in names):
            continue
        result.append(plan)
    return result


def sort_plans(plans: list[WorkoutPlan], option: str = "date-desc") -> list[WorkoutPlan]:
    """Return plans sorted by one of SORT_OPTIONS."""
    if option == "date-desc":
        return sorted(plans, key=lambda p: parse_timestamp(p.date_created), reverse=True)
    if option == "date-asc":
        return sorted(plans, key=lambda p: parse_timestamp(p.date_created))
    if option == "name-asc":
        return sorted(plans, key=lambda p: p.title.lower())
    if option == "exercises-desc":
        return sorted(plans, key=lambda p: len(p.exercises), reverse=True)
    raise ValueError(f"Unknown sort option '{option}'. Use one of {SORT_OPTIONS}")


def last_played(plans: list[WorkoutPlan]) -> WorkoutPlan | None:
    """The plan with the most recent ``last_played``, if any was played."""
    played = [p for p in plans if p.last_played]
    if not played:
        return None
    return max(played, key=lambda p: parse_timestamp(p.last_played))  # type: ignore[arg-type]


def plans_on(plans: list[WorkoutPlan], day: date) -> list[WorkoutPlan]:
    """Plans scheduled on ``day``."""
    return [p for p in plans if plan_day(p) == day]


def plans_by_day(plans: list[WorkoutPlan], year: int, month: int) -> dict[int, list[WorkoutPlan]]:
    """
    Group one month's plans by day of month.

    Every day of the month is present as a key, days without plans map to
    an empty list.
    """
    days = {d: [] for d in range(1, monthrange(year, month)[1] + 1)}
    for plan in plans:
        day = plan_day(plan)
        if day.year == year and day.month == month:
            days[day.day].append(plan)
    return days


def search_exercises(plan: WorkoutPlan, query: str) -> list[tuple[int, Exercise]]:
    """
    Exercises of a plan matching ``query`` by name or muscle group.

    Indices are positions in the full plan, so they can be handed to the
    editor even when the list is filtered.
    """
    q = query.strip().lower()
    return [
        (i, ex)
        for i, ex in enumerate(plan.exercises)
        if not q or q in ex.name.lower() or q in ex.muscle_group.lower()
    ]
