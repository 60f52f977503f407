"""
Open-document tabs and their registry.
"""

from .models import DEFAULT_ZOOM, Tab
from .tab_manager import TabManager, TabMutation

__all__ = ["Tab", "TabManager", "TabMutation", "DEFAULT_ZOOM"]
