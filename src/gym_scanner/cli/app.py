"""Shared Typer app object, shared option types, and store utilities."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.logging import RichHandler

from ..ai.base import Coach
from ..ai.gemini import GeminiCoach
from ..core.config_loader import Settings, load_settings
from ..core.editor import ExerciseEditor
from ..core.errors import CorruptStoreError
from ..core.models import WorkoutPlan
from ..io.edit_history import EditHistoryStore
from ..io.kv_store import JsonFileStore
from ..io.plan_store import PlanStore
from . import views

# Shared --data-dir option type used across all commands
DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", "-D", help="Data directory (default: $GYM_SCANNER_HOME or ~/.gym-scanner)"),
]

app = typer.Typer(
    name="gym-scanner",
    help="Scan workout sheets, keep your plans, and run guided timed sessions.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def configure_logging(verbose: bool = False) -> None:
    """Route log records through Rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=views.err_console, show_path=verbose)],
        force=True,
    )


@dataclass
class AppContext:
    """Everything a command needs, built from one data directory."""

    settings: Settings
    store: JsonFileStore
    plans: PlanStore
    editor: ExerciseEditor


def get_context(data_dir: Path | None) -> AppContext:
    """Build stores and the editor for ``data_dir`` (or the default)."""
    settings = load_settings(data_dir)
    store = JsonFileStore(settings.data_dir)
    return AppContext(
        settings=settings,
        store=store,
        plans=PlanStore(store),
        editor=ExerciseEditor(EditHistoryStore(store), limit=settings.history_limit),
    )


def make_coach(settings: Settings) -> Coach:
    """Build the AI coach from settings."""
    return GeminiCoach(
        api_key=settings.ai.api_key,
        model_name=settings.ai.model_name,
        extraction_temperature=settings.ai.extraction_temperature,
        chat_temperature=settings.ai.chat_temperature,
    )


def load_plans_or_exit(ctx: AppContext) -> list[WorkoutPlan]:
    """Load plans, exiting with an error if the stored data is damaged."""
    try:
        return ctx.plans.load_strict()
    except CorruptStoreError:
        views.print_error(
            f"Plan data in {ctx.store.path_for(ctx.plans.key)} is damaged and was not loaded."
        )
        views.print_info("Fix or move the file aside; nothing has been overwritten.")
        raise typer.Exit(1)


def resolve_plan(plans: list[WorkoutPlan], ref: str) -> WorkoutPlan:
    """
    Find a plan by list number (1-based) or by id / id prefix.

    Exits with an error when nothing (or more than one plan) matches.
    """
    if ref.isdigit() and len(ref) < 6:
        number = int(ref)
        if 1 <= number <= len(plans):
            return plans[number - 1]
        views.print_error(f"Plan # must be between 1 and {len(plans)}" if plans else "No plans yet.")
        raise typer.Exit(1)

    matches = [p for p in plans if p.id == ref] or [p for p in plans if p.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        views.print_error(f"No plan matches '{ref}'")
    else:
        views.print_error(f"'{ref}' matches {len(matches)} plans; give more of the id")
    raise typer.Exit(1)


def exercise_index(plan: WorkoutPlan, number: int) -> int:
    """Convert a 1-based exercise number to an index, exiting if invalid."""
    if number < 1 or number > len(plan.exercises):
        views.print_error(
            f"Exercise # must be between 1 and {len(plan.exercises)} for '{plan.title}'"
        )
        raise typer.Exit(1)
    return number - 1
