"""Session command: run a guided, timed workout in the terminal."""

import time
from typing import Annotated, Optional

import typer
from rich.live import Live

from ...ai.base import Coach
from ...core.models import WorkoutPlan
from ...core.session import SessionState, WorkoutSession
from ...core.timers import WallClockScheduler
from ...io.session_marker import mark_session_active
from .. import views
from ..app import AppContext, DataDirOption, app, get_context, load_plans_or_exit, make_coach, resolve_plan

POLL_SECONDS = 0.1


def _confirm_exit(session: WorkoutSession) -> None:
    """Ask before leaving; Ctrl-C at the prompt also leaves."""
    if not session.request_exit():
        return
    try:
        leave = views.confirm_action("Leave the workout? Progress will not be saved.")
    except (KeyboardInterrupt, EOFError):
        views.console.print()
        leave = True
    if leave:
        session.confirm_exit()
    else:
        session.cancel_exit_request()


def _wait_celebration(session: WorkoutSession, scheduler: WallClockScheduler) -> None:
    """Let the celebration run out; Ctrl-C asks to leave the workout."""
    views.console.print(views.session_panel(session))
    while session.state is SessionState.CELEBRATING:
        try:
            time.sleep(POLL_SECONDS)
            scheduler.catch_up()
        except KeyboardInterrupt:
            views.console.print()
            _confirm_exit(session)


def _watch_timer(session: WorkoutSession, scheduler: WallClockScheduler) -> None:
    """Show a live countdown until it ends; Ctrl-C asks to leave the workout."""
    session.start_timer()
    try:
        with Live(views.session_panel(session), console=views.console, transient=True) as live:
            while session.timer_running:
                time.sleep(POLL_SECONDS)
                scheduler.catch_up()
                live.update(views.session_panel(session))
    except KeyboardInterrupt:
        _confirm_exit(session)


def _handle_key(
    raw: str,
    session: WorkoutSession,
    scheduler: WallClockScheduler,
    ctx: AppContext,
    coach: Coach | None,
) -> Coach | None:
    """Apply one input line; returns the coach (built on first use)."""
    cfg = ctx.settings.session
    if raw in ("", "d", "done"):
        if session.mark_done():
            _wait_celebration(session, scheduler)
        else:
            views.print_info("This exercise is already done.")
    elif raw == "t":
        session.toggle_timer()
    elif raw == "w":
        _watch_timer(session, scheduler)
    elif raw == "r":
        session.reset_timer()
    elif raw in ("+", "-"):
        step = cfg.timer_step_seconds
        session.adjust_timer(step if raw == "+" else -step)
    elif raw == "e":
        if coach is None:
            coach = make_coach(ctx.settings)
        ex = session.current_exercise
        with views.console.status(f"Asking the coach about {ex.name}..."):
            result = coach.explain(ex.name, ex.muscle_group)
        views.print_ai_text(result, title=ex.name)
    elif raw in ("q", "quit", "exit"):
        _confirm_exit(session)
    elif raw in ("?", "h", "help"):
        views.print_session_help(cfg.timer_step_seconds)
    else:
        views.print_error(f"Unknown command '{raw}' (? for help)")
    return coach


def run_session(ctx: AppContext, plan: WorkoutPlan, coach: Coach | None = None) -> WorkoutSession:
    """
    Drive a WorkoutSession from terminal input until it completes or is left.

    Ctrl-C and end-of-input are routed to the exit prompt rather than
    aborting, so a session is never dropped silently.
    """
    cfg = ctx.settings.session
    scheduler = WallClockScheduler()

    def on_timer_finished() -> None:
        views.console.bell()
        views.print_info("Rest is over, back to work!")

    session = WorkoutSession(
        plan,
        scheduler,
        on_complete=ctx.plans.upsert,
        on_timer_finished=on_timer_finished,
        celebration_seconds=cfg.celebration_seconds,
        default_rest_seconds=cfg.default_rest_seconds,
    )

    with session, mark_session_active(ctx.store, plan, session.started_at):
        views.print_session_help(cfg.timer_step_seconds)
        while session.is_active:
            scheduler.catch_up()
            views.console.print(views.session_panel(session))
            try:
                raw = views.console.input("> ").strip().lower()
            except (KeyboardInterrupt, EOFError):
                views.console.print()
                raw = "q"
            scheduler.catch_up()

            try:
                coach = _handle_key(raw, session, scheduler, ctx, coach)
            except KeyboardInterrupt:
                views.console.print()
                _confirm_exit(session)

        if session.state is SessionState.COMPLETE:
            views.print_session_complete(session)
            session.confirm_exit()
        else:
            views.print_info("Workout left; progress was not saved.")

    return session


@app.command("session")
def session_command(
    plan_ref: Annotated[
        Optional[str], typer.Argument(help="Plan # (from 'list') or id prefix")
    ] = None,
    resume: Annotated[
        bool, typer.Option("--resume", "-r", help="Run the most recently played plan")
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Run a guided workout.

    Mark each exercise done to move on; a rest timer is available for every
    exercise.  Finishing the last exercise records the plan as played.
    """
    ctx = get_context(data_dir)
    plans = load_plans_or_exit(ctx)

    if resume:
        plan = ctx.plans.last_played()
        if plan is None:
            views.print_error("No plan has been played yet.")
            raise typer.Exit(1)
    elif plan_ref is not None:
        plan = resolve_plan(plans, plan_ref)
    else:
        views.print_error("Give a plan # / id, or use --resume.")
        raise typer.Exit(1)

    if not plan.exercises:
        views.print_error(f"'{plan.title}' has no exercises.")
        raise typer.Exit(1)

    run_session(ctx, plan)
