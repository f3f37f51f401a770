"""
Domain logic for gym-scanner.

Models, the exercise edit/undo engine, the guided session state machine and
the import reconciler.  Nothing in here touches files or the network.
"""

from .editor import EditDraft, ExerciseEditor
from .importer import ImportSession, finalize, to_drafts, update_draft, validate_upload
from .models import DraftRoutine, Exercise, ExtractedRoutine, ThemeConfig, WorkoutPlan
from .session import SessionState, WorkoutSession

__all__ = [
    "DraftRoutine",
    "EditDraft",
    "Exercise",
    "ExerciseEditor",
    "ExtractedRoutine",
    "ImportSession",
    "SessionState",
    "ThemeConfig",
    "WorkoutPlan",
    "WorkoutSession",
    "finalize",
    "to_drafts",
    "update_draft",
    "validate_upload",
]
