"""Plan commands: list, show, delete, calendar, edit, undo."""

from datetime import date
from typing import Annotated, Optional

import typer

from ...core.errors import NoHistory
from ...core.queries import SORT_OPTIONS, filter_plans, search_exercises, sort_plans
from .. import views
from ..app import AppContext, DataDirOption, app, exercise_index, get_context, load_plans_or_exit, resolve_plan


def _undo_depths(ctx: AppContext, plan) -> dict[int, int]:
    return {i: ctx.editor.history_depth(plan, i) for i in range(len(plan.exercises))}


@app.command("list")
def list_plans(
    search: Annotated[
        str, typer.Option("--search", "-s", help="Match title or exercise names")
    ] = "",
    muscle: Annotated[
        Optional[str], typer.Option("--muscle", "-m", help="Only plans training this muscle group")
    ] = None,
    exercise: Annotated[
        str, typer.Option("--exercise", "-x", help="Only plans containing this exercise")
    ] = "",
    sort: Annotated[
        str, typer.Option("--sort", help=f"One of: {', '.join(SORT_OPTIONS)}")
    ] = "date-desc",
    data_dir: DataDirOption = None,
) -> None:
    """
    List stored workout plans.

    The # column is the number other commands accept in place of an id.
    """
    ctx = get_context(data_dir)
    plans = load_plans_or_exit(ctx)

    if sort not in SORT_OPTIONS:
        views.print_error(f"Unknown sort '{sort}'. Use one of: {', '.join(SORT_OPTIONS)}")
        raise typer.Exit(1)

    if not search and ctx.plans.last_played() is not None:
        views.print_quick_resume(ctx.plans.last_played())  # type: ignore[arg-type]

    numbers = {p.id: i for i, p in enumerate(plans, 1)}
    shown = sort_plans(filter_plans(plans, search, muscle, exercise), sort)
    views.print_plans(shown, [numbers[p.id] for p in shown])


@app.command("show")
def show_plan(
    plan_ref: Annotated[str, typer.Argument(help="Plan # (from 'list') or id prefix")],
    search: Annotated[
        str, typer.Option("--search", "-s", help="Only exercises matching name or muscle group")
    ] = "",
    data_dir: DataDirOption = None,
) -> None:
    """Show the exercises of a plan."""
    ctx = get_context(data_dir)
    plan = resolve_plan(load_plans_or_exit(ctx), plan_ref)
    views.print_plan_detail(plan, search_exercises(plan, search), _undo_depths(ctx, plan))


@app.command("delete")
def delete_plan(
    plan_ref: Annotated[str, typer.Argument(help="Plan # (from 'list') or id prefix")],
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Delete without confirmation")
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """Delete a plan and its edit history."""
    ctx = get_context(data_dir)
    plan = resolve_plan(load_plans_or_exit(ctx), plan_ref)

    views.console.print(f"Plan to delete: [bold]{plan.title}[/bold] ({len(plan.exercises)} exercises)")
    if not force and not views.confirm_action("Delete this plan permanently?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    ctx.plans.remove(plan.id)
    ctx.editor.forget_plan(plan.id)
    views.print_success(f"Deleted '{plan.title}'")


@app.command("calendar")
def calendar(
    month: Annotated[
        Optional[str], typer.Option("--month", help="Month to show (YYYY-MM, default: this month)")
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Show plans on a month calendar."""
    ctx = get_context(data_dir)
    plans = load_plans_or_exit(ctx)

    if month is None:
        today = date.today()
        year, mon = today.year, today.month
    else:
        try:
            year_s, mon_s = month.split("-")
            year, mon = int(year_s), int(mon_s)
            date(year, mon, 1)
        except ValueError:
            views.print_error(f"Invalid month '{month}'. Expected YYYY-MM")
            raise typer.Exit(1)

    views.print_calendar(plans, year, mon)


@app.command("edit")
def edit_exercise(
    plan_ref: Annotated[str, typer.Argument(help="Plan # (from 'list') or id prefix")],
    number: Annotated[int, typer.Argument(help="Exercise # within the plan")],
    name: Annotated[Optional[str], typer.Option("--name", help="Exercise name")] = None,
    sets: Annotated[Optional[int], typer.Option("--sets", help="Number of sets")] = None,
    reps: Annotated[Optional[str], typer.Option("--reps", help="Reps, e.g. 8-12")] = None,
    muscle: Annotated[Optional[str], typer.Option("--muscle", help="Muscle group")] = None,
    notes: Annotated[Optional[str], typer.Option("--notes", help="Notes ('' clears)")] = None,
    rest: Annotated[Optional[int], typer.Option("--rest", help="Rest seconds (0 = no rest)")] = None,
    clear_rest: Annotated[
        bool, typer.Option("--clear-rest", help="Unset the rest time (sessions use the default)")
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Edit one exercise of a plan.

    Run without field options for interactive entry.  The previous version
    is kept so it can be restored with 'undo' (up to 5 versions).
    """
    if clear_rest and rest is not None:
        views.print_error("Use either --rest or --clear-rest, not both")
        raise typer.Exit(1)

    ctx = get_context(data_dir)
    plan = resolve_plan(load_plans_or_exit(ctx), plan_ref)
    index = exercise_index(plan, number)
    draft = ctx.editor.begin_edit(plan, index)

    changes = {
        "name": name,
        "sets": sets,
        "reps": reps,
        "muscle_group": muscle,
        "notes": notes,
        "rest_time": "" if clear_rest else rest,
    }
    changes = {k: v for k, v in changes.items() if v is not None}

    if not changes:
        # ── Interactive prompts, Enter keeps the current value ──────────────
        for field_name, label in (
            ("name", "Name"),
            ("sets", "Sets"),
            ("reps", "Reps"),
            ("muscle_group", "Muscle group"),
            ("notes", "Notes"),
            ("rest_time", "Rest seconds"),
        ):
            current = getattr(draft, field_name)
            while True:
                raw = views.console.input(f"{label} [{current if current is not None else ''}]: ").strip()
                if not raw:
                    break
                try:
                    draft.set(field_name, raw)
                    break
                except ValueError as e:
                    views.print_error(str(e))
    else:
        try:
            for field_name, value in changes.items():
                draft.set(field_name, value)
        except ValueError as e:
            views.print_error(str(e))
            raise typer.Exit(1)

    try:
        edited = draft.build()
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if edited == plan.exercises[index]:
        views.print_info("No changes.")
        return

    updated = ctx.editor.commit_edit(plan, index, edited)
    ctx.plans.upsert(updated)
    views.print_success(f"Updated exercise {number}: {edited.name}")
    views.print_plan_detail(updated, [(index, edited)], {index: ctx.editor.history_depth(updated, index)})


@app.command("undo")
def undo_exercise(
    plan_ref: Annotated[str, typer.Argument(help="Plan # (from 'list') or id prefix")],
    number: Annotated[int, typer.Argument(help="Exercise # within the plan")],
    data_dir: DataDirOption = None,
) -> None:
    """Restore the previous version of an edited exercise."""
    ctx = get_context(data_dir)
    plan = resolve_plan(load_plans_or_exit(ctx), plan_ref)
    index = exercise_index(plan, number)

    if not ctx.editor.has_history(plan, index):
        views.print_info(f"Nothing to undo for exercise {number}.")
        raise typer.Exit(0)

    try:
        updated = ctx.editor.undo(plan, index)
    except NoHistory as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    ctx.plans.upsert(updated)
    restored = updated.exercises[index]
    views.print_success(f"Restored exercise {number}: {restored.name}")
    views.print_plan_detail(updated, [(index, restored)], {index: ctx.editor.history_depth(updated, index)})
