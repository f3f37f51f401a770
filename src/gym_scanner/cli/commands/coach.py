"""AI coach commands: explain, chat, quote, motivate."""

import time
from typing import Annotated

import typer

from ...ai.base import ChatMessage
from ...core.config import MOTIVATION_FREQUENCIES_MINUTES
from ...core.motivation import MotivationPinger
from ...core.results import AiText
from ...core.timers import WallClockScheduler
from ...io.session_marker import session_in_progress
from .. import views
from ..app import DataDirOption, app, exercise_index, get_context, load_plans_or_exit, make_coach, resolve_plan


@app.command("explain")
def explain(
    plan_ref: Annotated[str, typer.Argument(help="Plan # (from 'list') or id prefix")],
    number: Annotated[int, typer.Argument(help="Exercise # within the plan")],
    data_dir: DataDirOption = None,
) -> None:
    """Ask the AI coach how to perform an exercise."""
    ctx = get_context(data_dir)
    plan = resolve_plan(load_plans_or_exit(ctx), plan_ref)
    ex = plan.exercises[exercise_index(plan, number)]

    coach = make_coach(ctx.settings)
    with views.console.status(f"Asking the coach about {ex.name}..."):
        result = coach.explain(ex.name, ex.muscle_group)
    views.print_ai_text(result, title=ex.name)


@app.command("chat")
def chat(data_dir: DataDirOption = None) -> None:
    """Chat with the AI coach (empty line or Ctrl-C to stop)."""
    ctx = get_context(data_dir)
    coach = make_coach(ctx.settings)
    history: list[ChatMessage] = []

    views.print_info("Ask the coach anything. Empty line to quit.")
    while True:
        try:
            message = views.console.input("[bold]You:[/bold] ").strip()
        except (KeyboardInterrupt, EOFError):
            views.console.print()
            break
        if not message:
            break
        with views.console.status("Thinking..."):
            reply = coach.chat(message, history)
        views.print_ai_text(reply)
        if not reply.degraded:
            history += [ChatMessage("user", message), ChatMessage("model", reply.text)]


@app.command("quote")
def quote(data_dir: DataDirOption = None) -> None:
    """Print a motivational quote."""
    ctx = get_context(data_dir)
    views.print_ai_text(make_coach(ctx.settings).quote(), title="Motivation")


@app.command("motivate")
def motivate(
    every: Annotated[
        int,
        typer.Option("--every", "-n", help=f"Minutes between quotes: {', '.join(map(str, MOTIVATION_FREQUENCIES_MINUTES))}"),
    ] = 0,
    data_dir: DataDirOption = None,
) -> None:
    """
    Keep running and print a motivational quote every few minutes (Ctrl-C to stop).

    Quotes are held back while a guided session is running.
    """
    ctx = get_context(data_dir)
    minutes = every or ctx.settings.motivation.every_minutes
    scheduler = WallClockScheduler()

    def notify(result: AiText) -> None:
        views.console.bell()
        views.print_ai_text(result, title="Motivation")

    try:
        pinger = MotivationPinger(
            scheduler,
            make_coach(ctx.settings),
            notify,
            every_minutes=minutes,
            session_active=lambda: session_in_progress(ctx.store),
        )
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_info(f"A quote every {minutes} minutes. Ctrl-C to stop.")
    pinger.start()
    try:
        while True:
            time.sleep(1)
            scheduler.catch_up()
    except KeyboardInterrupt:
        pinger.stop()
        views.print_info(f"Stopped after {pinger.sent} quote(s), {pinger.skipped} held back during workouts.")
