"""
Persisted user preferences.
"""
import json
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from .resource_loader import get_config_path

logger = logging.getLogger(__name__)

MAX_RECENT_FILES = 10


class Theme(Enum):
    LIGHT = "light"
    DARK = "dark"


class ScrollMode(Enum):
    PAGE = "page"
    SMOOTH = "smooth"


class SelectionMode(Enum):
    HAND = "hand"  # drag pans the page
    TEXT_SELECT = "text_select"  # drag selects text


@dataclass
class AppConfig:
    """User preferences kept between sessions."""
    recent_files: List[str] = field(default_factory=list)
    default_zoom: float = 1.0
    theme: Theme = Theme.DARK
    language: str = "en"
    scroll_mode: ScrollMode = ScrollMode.PAGE
    selection_mode: SelectionMode = SelectionMode.HAND

    def add_recent_file(self, path: str) -> None:
        """Put ``path`` at the front of the recent files list."""
        if path in self.recent_files:
            self.recent_files.remove(path)
        self.recent_files.insert(0, path)
        del self.recent_files[MAX_RECENT_FILES:]

    def to_dict(self):
        """Convert config to dictionary for JSON serialization."""
        return {
            'recent_files': list(self.recent_files),
            'default_zoom': self.default_zoom,
            'theme': self.theme.value,
            'language': self.language,
            'scroll_mode': self.scroll_mode.value,
            'selection_mode': self.selection_mode.value,
        }

    @staticmethod
    def from_dict(data):
        """Create config from dictionary; unknown or bad values fall back to defaults."""
        defaults = AppConfig()
        config = AppConfig()

        recent = data.get('recent_files', [])
        if isinstance(recent, list):
            config.recent_files = [p for p in recent if isinstance(p, str)][:MAX_RECENT_FILES]

        try:
            config.default_zoom = float(data.get('default_zoom', defaults.default_zoom))
        except (TypeError, ValueError):
            logger.warning(f"Ignoring invalid default_zoom: {data.get('default_zoom')!r}")

        config.language = str(data.get('language', defaults.language))

        for name, enum_type in (
            ('theme', Theme),
            ('scroll_mode', ScrollMode),
            ('selection_mode', SelectionMode),
        ):
            if name not in data:
                continue
            try:
                setattr(config, name, enum_type(data[name]))
            except ValueError:
                logger.warning(f"Ignoring invalid {name}: {data[name]!r}")

        return config


class ConfigStore:
    """Loads and saves AppConfig as JSON."""

    def __init__(self, path: Optional[Path] = None):
        self._path = Path(path) if path is not None else None

    @property
    def path(self) -> Path:
        if self._path is None:
            self._path = get_config_path()
        return self._path

    def load(self) -> AppConfig:
        """
        Load the saved config.

        Returns:
            The saved config, or defaults if none exists or it is unreadable
        """
        if not self.path.exists():
            return AppConfig()

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load config from {self.path}: {e}")
            return AppConfig()

        if not isinstance(data, dict):
            logger.warning(f"Config file {self.path} is not a JSON object")
            return AppConfig()

        return AppConfig.from_dict(data)

    def save(self, config: AppConfig) -> bool:
        """
        Save config to disk.

        Returns:
            True if save was successful, False otherwise
        """
        try:
            os.makedirs(self.path.parent, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(config.to_dict(), f, indent=2)
            return True
        except OSError as e:
            logger.error(f"Failed to save config to {self.path}: {e}")
            return False
