"""
Configuration constants for gym-scanner.

All adjustable defaults are centralized here.  Values that users may tune
without touching code are also exposed through settings.yaml (see
config_loader.py); the constants below are the fallbacks.
"""

from typing import Final

# =============================================================================
# EDIT HISTORY
# =============================================================================

HISTORY_LIMIT: Final[int] = 5  # Prior snapshots kept per exercise
HISTORY_KEY_PREFIX: Final[str] = "history"

# =============================================================================
# SESSION RUNNER
# =============================================================================

DEFAULT_REST_SECONDS: Final[int] = 60  # Countdown when an exercise has no rest_time
CELEBRATION_SECONDS: Final[float] = 1.5  # "Done!" display before advancing
TICK_SECONDS: Final[float] = 1.0
TIMER_STEP_SECONDS: Final[int] = 15  # +/- adjustment on the rest timer

# =============================================================================
# IMPORT / UPLOAD
# =============================================================================

MAX_UPLOAD_BYTES: Final[int] = 20 * 1024 * 1024
ACCEPTED_MIME_TYPES: Final[tuple[str, ...]] = (
    "image/jpeg",
    "image/png",
    "image/webp",
    "application/pdf",
)
# Finalized plans are stamped at noon so a bare date never shifts a day
# when the timestamp is parsed in another timezone.
NEUTRAL_TIME_OF_DAY: Final[str] = "12:00:00"

# =============================================================================
# STORAGE KEYS
# =============================================================================

PLANS_KEY: Final[str] = "workouts"
THEME_KEY: Final[str] = "theme"
ACTIVE_SESSION_KEY: Final[str] = "active_session"  # present while a guided session runs
ACTIVE_SESSION_MAX_HOURS: Final[int] = 4  # older markers are left over from a crash

DEFAULT_THEME: Final[dict[str, str]] = {
    "primary": "#10b981",
    "secondary": "#3b82f6",
}

# =============================================================================
# AI COLLABORATOR
# =============================================================================

DEFAULT_MODEL_NAME: Final[str] = "gemini-1.5-flash"
API_KEY_ENV_VARS: Final[tuple[str, ...]] = ("GEMINI_API_KEY", "GOOGLE_API_KEY")

EXPLANATION_UNAVAILABLE: Final[str] = "No explanation available right now."
CHAT_UNAVAILABLE: Final[str] = "Could not reach the AI coach. Try again in a moment."

FALLBACK_QUOTES: Final[tuple[str, ...]] = (
    "Never give up! Every rep counts.",
    "Pain is temporary, glory is forever.",
    "Sweat now, shine later.",
    "Your only limit is you.",
    "Discipline is doing what you hate as if you loved it.",
)

# =============================================================================
# MOTIVATION PINGS
# =============================================================================

MOTIVATION_FREQUENCIES_MINUTES: Final[tuple[int, ...]] = (15, 30, 60)
DEFAULT_MOTIVATION_MINUTES: Final[int] = 30
