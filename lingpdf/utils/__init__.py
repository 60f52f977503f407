"""
Utility functions and helpers.
"""
from .config import (
    MAX_RECENT_FILES,
    AppConfig,
    ConfigStore,
    ScrollMode,
    SelectionMode,
    Theme,
)
from .log import configure_logging
from .resource_loader import APP_NAME, get_config_dir, get_config_path

__all__ = [
    # Configuration
    'AppConfig',
    'ConfigStore',
    'Theme',
    'ScrollMode',
    'SelectionMode',
    'MAX_RECENT_FILES',

    # Paths
    'APP_NAME',
    'get_config_dir',
    'get_config_path',

    # Logging
    'configure_logging',
]
