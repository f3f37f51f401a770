"""Theme colour preferences."""

import logging

from ..core.config import DEFAULT_THEME, THEME_KEY
from ..core.models import ThemeConfig
from .kv_store import KeyValueStore
from .serializers import ValidationError, dict_to_theme, theme_to_dict

logger = logging.getLogger(__name__)


def default_theme() -> ThemeConfig:
    return ThemeConfig(**DEFAULT_THEME)


def load_theme(store: KeyValueStore) -> ThemeConfig:
    """Stored theme, or the default when missing or invalid."""
    data = store.get(THEME_KEY)
    if data is None:
        return default_theme()
    try:
        return dict_to_theme(data)
    except ValidationError as e:
        logger.warning("Ignoring invalid stored theme: %s", e)
        return default_theme()


def save_theme(store: KeyValueStore, theme: ThemeConfig) -> None:
    store.set(THEME_KEY, theme_to_dict(theme))


def reset_theme(store: KeyValueStore) -> ThemeConfig:
    theme = default_theme()
    save_theme(store, theme)
    return theme
