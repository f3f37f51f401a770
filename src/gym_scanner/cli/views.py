"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of plans, drafts and sessions.
"""

from datetime import date

from rich.console import Console, Group
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from ..core.models import DraftRoutine, Exercise, ThemeConfig, WorkoutPlan
from ..core.queries import parse_timestamp, plans_by_day
from ..core.results import AiText
from ..core.session import SessionState, WorkoutSession

console = Console()
err_console = Console(stderr=True)


def _fmt_day(timestamp: str) -> str:
    return parse_timestamp(timestamp).strftime("%a %d %b %Y")


def _fmt_rest(seconds: int | None) -> str:
    return f"{seconds}s" if seconds is not None else "-"


def fmt_clock(seconds: int) -> str:
    """Format seconds as M:SS."""
    return f"{seconds // 60}:{seconds % 60:02d}"


def format_plan_table(plans: list[WorkoutPlan], numbers: list[int] | None = None) -> Table:
    """
    Create a table of plans.

    Args:
        plans: Plans to show
        numbers: 1-based list numbers to display (defaults to 1..n)

    Returns:
        Rich Table object
    """
    table = Table(title="Workout Plans", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title")
    table.add_column("Date")
    table.add_column("Exercises", justify="right")
    table.add_column("Muscle groups", style="dim")
    table.add_column("Last played")
    table.add_column("Id", style="dim")

    numbers = numbers or list(range(1, len(plans) + 1))
    for num, plan in zip(numbers, plans):
        table.add_row(
            str(num),
            plan.title,
            _fmt_day(plan.date_created),
            str(len(plan.exercises)),
            ", ".join(plan.muscle_groups[:4]),
            _fmt_day(plan.last_played) if plan.last_played else "-",
            plan.id[:8],
        )
    return table


def format_exercise_table(
    exercises: list[tuple[int, Exercise]], undo_depths: dict[int, int] | None = None
) -> Table:
    """Create a table of (index, exercise) pairs, numbered from 1."""
    undo_depths = undo_depths or {}
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Exercise")
    table.add_column("Sets", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Rest", justify="right")
    table.add_column("Muscle group")
    table.add_column("Notes", style="dim")
    table.add_column("Undo", justify="right", style="yellow")

    for index, ex in exercises:
        depth = undo_depths.get(index, 0)
        table.add_row(
            str(index + 1),
            ex.name,
            str(ex.sets),
            ex.reps,
            _fmt_rest(ex.rest_time),
            ex.muscle_group,
            ex.notes or "",
            str(depth) if depth else "",
        )
    return table


def print_plans(plans: list[WorkoutPlan], numbers: list[int] | None = None) -> None:
    if not plans:
        console.print("[dim]No plans found.[/dim]")
        return
    console.print(format_plan_table(plans, numbers))


def print_plan_detail(
    plan: WorkoutPlan,
    exercises: list[tuple[int, Exercise]] | None = None,
    undo_depths: dict[int, int] | None = None,
) -> None:
    """Print a plan header and its exercises."""
    console.print()
    console.print(f"[bold]{plan.title}[/bold]  [dim]{_fmt_day(plan.date_created)}[/dim]")
    if plan.last_played:
        console.print(f"[dim]Last played: {_fmt_day(plan.last_played)}[/dim]")
    if exercises is None:
        exercises = list(enumerate(plan.exercises))
    console.print(format_exercise_table(exercises, undo_depths))


def print_quick_resume(plan: WorkoutPlan) -> None:
    console.print(
        Panel(
            f"[bold]{plan.title}[/bold]\nLast: {_fmt_day(plan.last_played or plan.date_created)}\n"
            f"[dim]Run 'gym-scanner session --resume' to go again[/dim]",
            title="Quick workout",
            border_style="green",
        )
    )


def print_drafts(drafts: list[DraftRoutine]) -> None:
    """Print drafts awaiting confirmation."""
    table = Table(title="Routines found", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Name")
    table.add_column("Date")
    table.add_column("Exercises", justify="right")
    table.add_column("First exercises", style="dim")
    for i, d in enumerate(drafts, 1):
        table.add_row(
            str(i),
            d.routine_name,
            d.selected_date,
            str(len(d.exercises)),
            ", ".join(ex.name for ex in d.exercises[:3]),
        )
    console.print(table)


def print_calendar(plans: list[WorkoutPlan], year: int, month: int) -> None:
    """Print a month grid with the plans scheduled on each day."""
    days = plans_by_day(plans, year, month)
    first = date(year, month, 1)
    table = Table(
        title=first.strftime("%B %Y"), show_header=True, header_style="bold cyan", show_lines=True
    )
    for name in ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"):
        table.add_column(name, width=12)

    cells: list[str] = [""] * first.weekday()
    today = date.today()
    for day, day_plans in days.items():
        label = f"[bold green]{day}[/bold green]" if date(year, month, day) == today else str(day)
        lines = [label] + [f"[cyan]{p.title[:11]}[/cyan]" for p in day_plans]
        cells.append("\n".join(lines))
    while len(cells) % 7:
        cells.append("")
    for week in range(0, len(cells), 7):
        table.add_row(*cells[week:week + 7])
    console.print(table)


def session_panel(session: WorkoutSession) -> Panel:
    """Render the current state of a guided session."""
    ex = session.current_exercise
    done = session.active_index in session.completed

    header = Text.assemble(
        (f"Exercise {session.active_index + 1}/{session.total}  ", "dim"),
        (f"{len(session.completed)} done", "green"),
    )
    body = Text.assemble(
        (f"{ex.name}\n", "bold"),
        (f"{ex.sets} sets × {ex.reps}", ""),
        (f"   {ex.muscle_group}" if ex.muscle_group else "", "dim"),
    )
    if ex.notes:
        body.append(f"\nNote: {ex.notes}", style="italic yellow")

    timer_style = "bold green" if session.timer_running else ("bold red" if session.time_left == 0 else "bold")
    timer = Text.assemble(
        ("Rest ", "dim"),
        (fmt_clock(session.time_left), timer_style),
        ("  running" if session.timer_running else "  paused", "dim"),
    )

    parts: list = [header, ProgressBar(total=1.0, completed=session.progress, width=40), body, timer]
    if session.state is SessionState.CELEBRATING:
        parts.append(Text("✔ Great job!", style="bold green"))
    elif done:
        parts.append(Text("Completed", style="green"))
    nxt = session.next_exercise
    if nxt is not None:
        parts.append(Text(f"Next: {nxt.name}", style="dim"))

    return Panel(Group(*parts), title=session.plan.title, border_style="cyan")


def print_session_help(step: int) -> None:
    console.print(
        "[dim]Enter/d done · t start/pause timer · w watch timer · r reset · "
        f"+/- {step}s · e explain · q quit[/dim]"
    )


def print_session_complete(session: WorkoutSession) -> None:
    console.print(
        Panel(
            f"[bold green]Workout complete![/bold green]\n{session.total} exercises done.",
            title=session.plan.title,
            border_style="green",
        )
    )


def print_ai_text(result: AiText, title: str = "Coach") -> None:
    """Print AI output, flagging fallback text."""
    style = "yellow" if result.degraded else "cyan"
    subtitle = "offline fallback" if result.degraded else None
    console.print(Panel(result.text, title=title, subtitle=subtitle, border_style=style))


def print_theme(theme: ThemeConfig) -> None:
    rgb = theme.as_rgb()
    for name in ("primary", "secondary"):
        value = getattr(theme, name)
        r, g, b = rgb[name]
        console.print(f"  {name:<10} [on {value}]      [/on {value}]  {value}  ({r} {g} {b})")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓ {message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
