"""Import command: scan a workout sheet into one or more plans."""

from datetime import date
from pathlib import Path
from typing import Annotated, Optional

import typer

from ...core.errors import ExtractionFailure, ValidationFailure
from ...core.importer import ImportSession
from ...io.documents import read_document
from .. import views
from ..app import AppContext, DataDirOption, app, get_context, load_plans_or_exit, make_coach


def _review_drafts(session: ImportSession) -> bool:
    """
    Let the user rename and re-date drafts.

    Returns:
        True to save, False to cancel
    """
    while True:
        drafts = session.drafts or []
        views.console.print()
        views.print_drafts(drafts)
        raw = views.console.input(
            "Routine # to rename/re-date, Enter to save all, 'c' to cancel: "
        ).strip().lower()
        if not raw:
            return True
        if raw in ("c", "cancel"):
            return False
        try:
            number = int(raw)
        except ValueError:
            views.print_error("Enter a number")
            continue
        if number < 1 or number > len(drafts):
            views.print_error(f"Enter a number between 1 and {len(drafts)}")
            continue

        draft = drafts[number - 1]
        name = views.console.input(f"  Name [{draft.routine_name}]: ").strip()
        if name:
            session.update(draft.id, "routine_name", name)
        while True:
            day = views.console.input(f"  Date [{draft.selected_date}]: ").strip()
            if not day:
                break
            try:
                session.update(draft.id, "selected_date", day)
                break
            except ValueError as e:
                views.print_error(str(e))


def _save(ctx: AppContext, session: ImportSession) -> None:
    plans = session.finalize()
    ctx.plans.insert(plans)
    views.print_success(f"Saved {len(plans)} plan(s)")
    if len(plans) == 1:
        views.print_plan_detail(plans[0])
    else:
        views.print_plans(plans)


@app.command("import")
def import_sheet(
    file: Annotated[Path, typer.Argument(help="Photo or PDF of a workout sheet (JPG, PNG, WEBP, PDF; max 20 MB)")],
    on_date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Schedule every routine on this date (YYYY-MM-DD, default: today)"),
    ] = None,
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="Save routines without reviewing them")
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Scan a workout sheet with the AI coach and save its routines as plans.

    A sheet split into several days becomes one plan per day.  Each routine
    can be renamed and scheduled before saving.
    """
    ctx = get_context(data_dir)
    load_plans_or_exit(ctx)

    try:
        document = read_document(file)
    except ValidationFailure as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    session = ImportSession()
    token = session.begin()
    coach = make_coach(ctx.settings)
    try:
        with views.console.status(f"Analysing {document.filename}..."):
            extracted = coach.extract(document)
    except ExtractionFailure as e:
        session.fail(token)
        views.print_error(str(e))
        views.print_info("Try again with the same file or a clearer photo.")
        raise typer.Exit(1)

    session.accept(token, extracted, today=date.today())

    if on_date is not None:
        try:
            for draft in list(session.drafts or []):
                session.update(draft.id, "selected_date", on_date)
        except ValueError as e:
            views.print_error(str(e))
            raise typer.Exit(1)

    if not yes and not _review_drafts(session):
        session.cancel()
        views.print_info("Import cancelled; nothing was saved.")
        raise typer.Exit(0)

    _save(ctx, session)
