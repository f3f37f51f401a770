"""
CLI entry point using Typer.

Provides commands for workout plan management:
- import: Scan a workout sheet into plans
- list / show / calendar: Browse stored plans
- edit / undo: Change an exercise, with multi-step undo
- session: Run a guided, timed workout
- explain / chat / quote / motivate: AI coach
- theme: Accent colours
- delete: Remove a plan
"""

from typing import Annotated

import typer

from . import views
from .app import app, configure_logging
from .commands import coach, importing, plans, session, theme  # noqa: F401  (registers commands)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging")
    ] = False,
) -> None:
    """
    Workout sheet scanner and session runner. Run without a command for interactive mode.
    """
    configure_logging(verbose)

    if ctx.invoked_subcommand is not None:
        return  # sub-command handles it

    # ── Interactive main menu ───────────────────────────────────────────────
    views.console.print()
    views.console.print("[bold cyan]gym-scanner[/bold cyan]: workout sheets & guided sessions")
    views.console.print()

    menu = {
        "1": ("list", "Show my plans"),
        "2": ("session", "Start a workout"),
        "3": ("resume", "Repeat the last workout"),
        "4": ("import", "Scan a workout sheet"),
        "5": ("calendar", "Calendar"),
        "6": ("quote", "Motivational quote"),
        "t": ("theme", "Theme colours"),
        "0": ("quit", "Quit"),
    }

    for key, (_, desc) in menu.items():
        views.console.print(f"  \\[{key}] {desc}")

    views.console.print()
    choice = views.console.input("Choose [1]: ").strip() or "1"

    if choice == "0":
        raise typer.Exit(0)

    chosen = menu.get(choice, (None,))[0]
    if chosen is None:
        views.print_error(f"Unknown choice: {choice}")
        raise typer.Exit(1)

    if chosen == "list":
        ctx.invoke(plans.list_plans)
    elif chosen == "session":
        ctx.invoke(plans.list_plans)
        ref = views.console.input("Plan #: ").strip()
        if ref:
            ctx.invoke(session.session_command, plan_ref=ref)
    elif chosen == "resume":
        ctx.invoke(session.session_command, resume=True)
    elif chosen == "import":
        path = views.console.input("File to scan: ").strip()
        if path:
            ctx.invoke(importing.import_sheet, file=path)
    elif chosen == "calendar":
        ctx.invoke(plans.calendar)
    elif chosen == "quote":
        ctx.invoke(coach.quote)
    elif chosen == "theme":
        ctx.invoke(theme.theme)


if __name__ == "__main__":
    app()
