"""
Per-platform locations for user settings.
"""
import os
import sys
from pathlib import Path

APP_NAME = "LingPDF"
CONFIG_FILE_NAME = "config.json"


def get_config_dir(app_name: str = APP_NAME) -> Path:
    """
    Get the directory holding the settings file, creating it if needed.

    Windows uses %APPDATA%, macOS ~/Library/Preferences and everything else
    $XDG_CONFIG_HOME (default ~/.config).
    """
    if os.name == 'nt':
        base = Path(os.environ.get('APPDATA', Path.home()))
    elif sys.platform == 'darwin':
        base = Path.home() / "Library" / "Preferences"
    else:
        base = Path(os.environ.get('XDG_CONFIG_HOME') or Path.home() / ".config")

    config_dir = base / app_name
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_path(app_name: str = APP_NAME) -> Path:
    """Path of the JSON settings file."""
    return get_config_dir(app_name) / CONFIG_FILE_NAME
