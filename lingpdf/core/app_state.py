"""
Application state: preferences plus the open tabs.
"""

import logging
import threading
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Union

from lingpdf.core.document import PDFDocument, PdfError
from lingpdf.core.tabs import DEFAULT_ZOOM, Tab, TabManager, TabMutation
from lingpdf.utils.config import AppConfig, ConfigStore, ScrollMode, SelectionMode, Theme

logger = logging.getLogger(__name__)

MIN_ZOOM = 0.5
MAX_ZOOM = 3.0
ZOOM_STEP = 0.1

FIT_WIDTH_TARGET = 800.0
FIT_PAGE_TARGET_WIDTH = 600.0
FIT_PAGE_TARGET_HEIGHT = 800.0

# Layout constants; must match the presentation layer
TOOLBAR_HEIGHT = 32.0
STATUS_BAR_HEIGHT = 20.0
SIDEBAR_WIDTH = 200.0
VIEWPORT_PADDING = 40.0


def clamp_zoom(zoom: float) -> float:
    return max(MIN_ZOOM, min(MAX_ZOOM, zoom))


class AppState:
    """
    Holds user preferences and the tab registry.

    View operations act on the active tab. Any change of page, zoom or
    rotation clears the tab's selection in the same update, so stale
    highlights are never visible over a new rendering.
    """

    def __init__(self, config_store: Optional[ConfigStore] = None,
                 tabs: Optional[TabManager] = None):
        self.config_store = config_store if config_store is not None else ConfigStore()
        self.tabs = tabs if tabs is not None else TabManager()
        self._config_lock = threading.Lock()
        self._config = self.config_store.load()

    # ------------------------------------------------------------------
    # Tabs
    # ------------------------------------------------------------------

    def open_file_new_tab(self, path: Union[str, Path]) -> int:
        """
        Open a PDF in a new, active tab.

        Args:
            path: Path to the PDF file

        Returns:
            Id of the new tab

        Raises:
            PdfError: The document could not be opened; no tab is created
        """
        path = Path(path)
        doc = PDFDocument.open(path)

        try:
            outline = tuple(doc.get_outline())
        except Exception as e:
            logger.warning(f"Failed to read outline of {path}: {e}")
            outline = None

        zoom = clamp_zoom(self.get_config().default_zoom)
        tab_id = self.tabs.create(path)

        def attach(tab: Tab):
            tab.doc = doc
            tab.page_count = doc.page_count
            tab.current_page = 0
            tab.outline_items = outline
            tab.zoom = zoom

        self.tabs.update(tab_id, attach)

        with self._config_lock:
            self._config.add_recent_file(str(path))
            self.config_store.save(self._config)

        return tab_id

    def close_tab(self, tab_id: int) -> None:
        """Close a tab and release its document."""
        tab = self.tabs.get(tab_id)
        self.tabs.close(tab_id)
        if tab is not None and tab.doc is not None:
            tab.doc.close()

    def set_active_tab(self, tab_id: int) -> None:
        self.tabs.set_active(tab_id)

    def get_active_tab_id(self) -> Optional[int]:
        return self.tabs.get_active()

    def get_active_tab(self) -> Optional[Tab]:
        """Snapshot of the active tab, if any."""
        tab_id = self.tabs.get_active()
        if tab_id is None:
            return None
        return self.tabs.get(tab_id)

    def update_active_tab(self, mutation: TabMutation) -> bool:
        """Apply a mutation to the active tab. Returns False if none is active."""
        tab_id = self.tabs.get_active()
        if tab_id is None:
            return False
        return self.tabs.update(tab_id, mutation)

    def get_all_tabs(self) -> List[Tab]:
        return self.tabs.list_tabs()

    def _update_view(self, tab_id: Optional[int], mutation: TabMutation) -> bool:
        """Mutate page/zoom/rotation of a tab and drop its selection."""
        if tab_id is None:
            return False

        def apply(tab: Tab):
            mutation(tab)
            tab.clear_selection()

        return self.tabs.update(tab_id, apply)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def navigate_to_page(self, page: int) -> bool:
        """Go to a 0-based page; out-of-range pages are ignored."""
        def go(tab: Tab):
            if 0 <= page < tab.page_count:
                tab.current_page = page

        return self._update_view(self.tabs.get_active(), go)

    def next_page(self) -> bool:
        def go(tab: Tab):
            if tab.current_page < tab.page_count - 1:
                tab.current_page += 1

        return self._update_view(self.tabs.get_active(), go)

    def prev_page(self) -> bool:
        def go(tab: Tab):
            if tab.current_page > 0:
                tab.current_page -= 1

        return self._update_view(self.tabs.get_active(), go)

    def first_page(self) -> bool:
        def go(tab: Tab):
            tab.current_page = 0

        return self._update_view(self.tabs.get_active(), go)

    def last_page(self) -> bool:
        def go(tab: Tab):
            tab.current_page = max(tab.page_count - 1, 0)

        return self._update_view(self.tabs.get_active(), go)

    # ------------------------------------------------------------------
    # Zoom
    # ------------------------------------------------------------------

    def set_zoom(self, zoom: float) -> bool:
        def apply(tab: Tab):
            tab.zoom = clamp_zoom(zoom)

        return self._update_view(self.tabs.get_active(), apply)

    def zoom_in(self) -> bool:
        def apply(tab: Tab):
            tab.zoom = round(clamp_zoom(tab.zoom + ZOOM_STEP), 2)

        return self._update_view(self.tabs.get_active(), apply)

    def zoom_out(self) -> bool:
        def apply(tab: Tab):
            tab.zoom = round(clamp_zoom(tab.zoom - ZOOM_STEP), 2)

        return self._update_view(self.tabs.get_active(), apply)

    def reset_zoom(self) -> bool:
        return self.set_zoom(DEFAULT_ZOOM)

    def _active_page_size(self):
        """Return (tab_id, width, height) of the active page, or None."""
        tab = self.get_active_tab()
        if tab is None or tab.doc is None:
            return None
        try:
            width, height = tab.doc.get_page_size(tab.current_page)
        except PdfError as e:
            logger.error(f"Failed to read page size: {e}")
            return None
        return tab.id, width, height

    def _fit(self, compute_zoom) -> bool:
        page = self._active_page_size()
        if page is None:
            return False
        tab_id, width, height = page
        zoom = clamp_zoom(compute_zoom(width, height))

        def apply(tab: Tab):
            tab.zoom = zoom

        return self._update_view(tab_id, apply)

    def fit_width(self) -> bool:
        """Zoom so the page is FIT_WIDTH_TARGET pixels wide."""
        return self._fit(lambda w, h: FIT_WIDTH_TARGET / w)

    def fit_page(self) -> bool:
        """Zoom so the whole page fits the FIT_PAGE_TARGET box."""
        return self._fit(
            lambda w, h: min(FIT_PAGE_TARGET_WIDTH / w, FIT_PAGE_TARGET_HEIGHT / h)
        )

    def fit_to_viewport(self, viewport_width: float, viewport_height: float,
                        sidebar_visible: bool = False) -> bool:
        """
        Zoom so the page fits the content area of the window.

        Args:
            viewport_width: Window width in pixels
            viewport_height: Window height in pixels
            sidebar_visible: Whether the outline sidebar takes up width
        """
        available_width = viewport_width - (SIDEBAR_WIDTH if sidebar_visible else 0.0)
        available_height = viewport_height - TOOLBAR_HEIGHT - STATUS_BAR_HEIGHT
        target_width = available_width - VIEWPORT_PADDING
        target_height = available_height - VIEWPORT_PADDING

        return self._fit(lambda w, h: min(target_width / w, target_height / h))

    # ------------------------------------------------------------------
    # Rotation
    # ------------------------------------------------------------------

    def rotate_clockwise(self) -> bool:
        def apply(tab: Tab):
            tab.rotation = (tab.rotation + 90) % 360

        return self._update_view(self.tabs.get_active(), apply)

    def rotate_counter_clockwise(self) -> bool:
        def apply(tab: Tab):
            tab.rotation = (tab.rotation - 90) % 360

        return self._update_view(self.tabs.get_active(), apply)

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------

    def get_config(self) -> AppConfig:
        """Copy of the current preferences."""
        with self._config_lock:
            return replace(self._config, recent_files=list(self._config.recent_files))

    def _change_config(self, change) -> None:
        with self._config_lock:
            change(self._config)
            self.config_store.save(self._config)

    def get_theme(self) -> Theme:
        return self.get_config().theme

    def set_theme(self, theme: Theme) -> None:
        def change(config: AppConfig):
            config.theme = theme

        self._change_config(change)

    def toggle_theme(self) -> Theme:
        result = []

        def change(config: AppConfig):
            config.theme = Theme.LIGHT if config.theme == Theme.DARK else Theme.DARK
            result.append(config.theme)

        self._change_config(change)
        return result[0]

    def get_language(self) -> str:
        return self.get_config().language

    def set_language(self, language: str) -> None:
        def change(config: AppConfig):
            config.language = language

        self._change_config(change)

    def get_scroll_mode(self) -> ScrollMode:
        return self.get_config().scroll_mode

    def set_scroll_mode(self, scroll_mode: ScrollMode) -> None:
        def change(config: AppConfig):
            config.scroll_mode = scroll_mode

        self._change_config(change)

    def get_selection_mode(self) -> SelectionMode:
        return self.get_config().selection_mode

    def set_selection_mode(self, selection_mode: SelectionMode) -> None:
        def change(config: AppConfig):
            config.selection_mode = selection_mode

        self._change_config(change)

    def toggle_selection_mode(self) -> SelectionMode:
        result = []

        def change(config: AppConfig):
            if config.selection_mode == SelectionMode.HAND:
                config.selection_mode = SelectionMode.TEXT_SELECT
            else:
                config.selection_mode = SelectionMode.HAND
            result.append(config.selection_mode)

        self._change_config(change)
        return result[0]

    def get_recent_files(self) -> List[str]:
        return self.get_config().recent_files

    def remove_from_recent(self, path: str) -> None:
        def change(config: AppConfig):
            config.recent_files = [p for p in config.recent_files if p != path]

        self._change_config(change)
