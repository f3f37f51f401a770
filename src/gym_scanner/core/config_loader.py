"""
YAML → typed settings loader.

Loads defaults from settings.yaml (bundled with the package) and optionally
merges user overrides from <data dir>/settings.yaml.

Usage:
    from gym_scanner.core.config_loader import load_settings
    settings = load_settings()
    settings.session.default_rest_seconds

If the bundled YAML cannot be parsed, the Python defaults from config.py are
used (no crash).  If the user override file has parse errors, a warning is
logged and the file is ignored.
"""

from __future__ import annotations

import importlib.resources
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .config import (
    API_KEY_ENV_VARS,
    CELEBRATION_SECONDS,
    DEFAULT_MODEL_NAME,
    DEFAULT_MOTIVATION_MINUTES,
    DEFAULT_REST_SECONDS,
    HISTORY_LIMIT,
    TIMER_STEP_SECONDS,
)

logger = logging.getLogger(__name__)

DATA_DIR_ENV_VAR = "GYM_SCANNER_HOME"

# ---------------------------------------------------------------------------
# Typed settings
# ---------------------------------------------------------------------------


@dataclass
class AiSettings:
    model_name: str = DEFAULT_MODEL_NAME
    extraction_temperature: float = 0.2
    chat_temperature: float = 0.7
    api_key: str | None = None


@dataclass
class SessionSettings:
    default_rest_seconds: int = DEFAULT_REST_SECONDS
    celebration_seconds: float = CELEBRATION_SECONDS
    timer_step_seconds: int = TIMER_STEP_SECONDS


@dataclass
class MotivationSettings:
    every_minutes: int = DEFAULT_MOTIVATION_MINUTES


@dataclass
class Settings:
    data_dir: Path
    ai: AiSettings = field(default_factory=AiSettings)
    session: SessionSettings = field(default_factory=SessionSettings)
    history_limit: int = HISTORY_LIMIT
    motivation: MotivationSettings = field(default_factory=MotivationSettings)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; return {} on any error."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", path, e)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    value = raw.get(name, {})
    return value if isinstance(value, dict) else {}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_data_dir() -> Path:
    """Return $GYM_SCANNER_HOME or ~/.gym-scanner."""
    override = os.environ.get(DATA_DIR_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".gym-scanner"


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled settings.yaml, or None if not found."""
    ref = importlib.resources.files("gym_scanner").joinpath("settings.yaml")
    path = Path(str(ref))
    return path if path.exists() else None


def get_api_key() -> str | None:
    """First non-empty API key from the environment."""
    for name in API_KEY_ENV_VARS:
        value = os.environ.get(name)
        if value:
            return value
    return None


def load_raw_config(data_dir: Path | None = None) -> dict[str, Any]:
    """
    Load and merge raw configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/gym_scanner/settings.yaml
    2. User override at <data dir>/settings.yaml
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        config = _deep_merge(config, _load_yaml_file(bundled))

    user = (data_dir or get_data_dir()) / "settings.yaml"
    if user.exists():
        config = _deep_merge(config, _load_yaml_file(user))

    return config


def load_settings(data_dir: Path | None = None) -> Settings:
    """Build typed Settings from YAML sources and the environment."""
    data_dir = data_dir or get_data_dir()
    raw = load_raw_config(data_dir)

    ai = _section(raw, "ai")
    session = _section(raw, "session")
    editor = _section(raw, "editor")
    motivation = _section(raw, "motivation")

    return Settings(
        data_dir=data_dir,
        ai=AiSettings(
            model_name=str(ai.get("model_name", DEFAULT_MODEL_NAME)),
            extraction_temperature=float(ai.get("extraction_temperature", 0.2)),
            chat_temperature=float(ai.get("chat_temperature", 0.7)),
            api_key=get_api_key(),
        ),
        session=SessionSettings(
            default_rest_seconds=int(session.get("default_rest_seconds", DEFAULT_REST_SECONDS)),
            celebration_seconds=float(session.get("celebration_seconds", CELEBRATION_SECONDS)),
            timer_step_seconds=int(session.get("timer_step_seconds", TIMER_STEP_SECONDS)),
        ),
        history_limit=int(editor.get("history_limit", HISTORY_LIMIT)),
        motivation=MotivationSettings(
            every_minutes=int(motivation.get("every_minutes", DEFAULT_MOTIVATION_MINUTES)),
        ),
    )
