"""
Controller connecting user gestures to the application state.
"""

import logging
from pathlib import Path
from typing import Optional, Set, Union

import pyperclip
from PyQt5.QtCore import QObject, pyqtSignal
from PyQt5.QtGui import QImage
from PyQt5.QtWidgets import QFileDialog

from lingpdf.core.app_state import AppState
from lingpdf.core.document import DPI_SCALE, PdfError
from lingpdf.core.page import OutlineItem, RenderedPage
from lingpdf.core.selection import calculate_text_selection
from lingpdf.core.tabs import Tab
from lingpdf.utils.config import SelectionMode

from .page_worker import PageLoadResult, PageLoadWorker, load_page

logger = logging.getLogger(__name__)


def rendered_to_qimage(rendered: RenderedPage) -> QImage:
    """Convert raw RGB pixels to a QImage that owns its buffer."""
    img = QImage(
        rendered.samples, rendered.width, rendered.height, rendered.stride,
        QImage.Format_RGB888
    )
    return img.copy()


class SessionController(QObject):
    """
    Reacts to user actions on the open documents.

    Document engine calls happen outside the tab registry lock; their results
    are written back with a single atomic update. Results that arrive for a
    closed tab, or for a view that changed in the meantime, are dropped.
    """

    # Signals
    tabs_changed = pyqtSignal()
    page_rendered = pyqtSignal(int)  # tab_id
    selection_changed = pyqtSignal(int)  # tab_id
    open_failed = pyqtSignal(str, str)  # path, message
    theme_changed = pyqtSignal(object)  # Theme
    selection_mode_changed = pyqtSignal(object)  # SelectionMode

    def __init__(self, state: Optional[AppState] = None, parent=None):
        super().__init__(parent)

        self.state = state if state is not None else AppState()
        self.show_sidebar: bool = False
        self.is_selecting: bool = False

        # Running workers, kept alive until they finish
        self._workers: Set[PageLoadWorker] = set()

    # ------------------------------------------------------------------
    # Tabs
    # ------------------------------------------------------------------

    def open_file_in_new_tab(self, path: Union[str, Path]) -> Optional[int]:
        """
        Open a PDF in a new tab and render its first page.

        Returns:
            The new tab id, or None if the file could not be opened
        """
        try:
            tab_id = self.state.open_file_new_tab(path)
        except PdfError as e:
            logger.error(f"Failed to open PDF: {e}")
            self.open_failed.emit(str(path), str(e))
            return None

        self.show_sidebar = True
        self.render_current_tab_page(tab_id)
        self.tabs_changed.emit()
        return tab_id

    def open_file_dialog(self, parent=None) -> Optional[int]:
        """Ask for a PDF and open it. Cancelling the dialog does nothing."""
        file_path, _ = QFileDialog.getOpenFileName(
            parent, "Open PDF", "", "PDF Files (*.pdf)"
        )
        if not file_path:
            return None
        return self.open_file_in_new_tab(file_path)

    def close_tab(self, tab_id: int) -> None:
        self.state.close_tab(tab_id)
        self.tabs_changed.emit()

    def close_active_tab(self) -> None:
        tab_id = self.state.get_active_tab_id()
        if tab_id is not None:
            self.close_tab(tab_id)

    def switch_tab(self, tab_id: int) -> None:
        self.state.set_active_tab(tab_id)
        if self.state.get_active_tab_id() == tab_id:
            self.render_current_tab_page(tab_id)
        self.tabs_changed.emit()

    # ------------------------------------------------------------------
    # Navigation, zoom, rotation
    # ------------------------------------------------------------------

    def _refresh_active(self, changed: bool) -> None:
        if not changed:
            return
        tab_id = self.state.get_active_tab_id()
        if tab_id is not None:
            self.render_current_tab_page(tab_id)

    def next_page(self):
        self._refresh_active(self.state.next_page())

    def prev_page(self):
        self._refresh_active(self.state.prev_page())

    def first_page(self):
        self._refresh_active(self.state.first_page())

    def last_page(self):
        self._refresh_active(self.state.last_page())

    def go_to_page(self, page: int):
        """Jump to a 0-based page."""
        self._refresh_active(self.state.navigate_to_page(page))

    def go_to_outline_item(self, item: OutlineItem):
        self.go_to_page(item.page)

    def zoom_in(self):
        self._refresh_active(self.state.zoom_in())

    def zoom_out(self):
        self._refresh_active(self.state.zoom_out())

    def reset_zoom(self):
        self._refresh_active(self.state.reset_zoom())

    def fit_width(self):
        self._refresh_active(self.state.fit_width())

    def fit_page(self):
        self._refresh_active(self.state.fit_page())

    def fit_to_viewport(self, viewport_width: float, viewport_height: float):
        self._refresh_active(
            self.state.fit_to_viewport(viewport_width, viewport_height, self.show_sidebar)
        )

    def rotate_clockwise(self):
        self._refresh_active(self.state.rotate_clockwise())

    def rotate_counter_clockwise(self):
        self._refresh_active(self.state.rotate_counter_clockwise())

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------

    def toggle_sidebar(self):
        self.show_sidebar = not self.show_sidebar

    def toggle_theme(self):
        self.theme_changed.emit(self.state.toggle_theme())

    def toggle_selection_mode(self):
        mode = self.state.toggle_selection_mode()
        if mode == SelectionMode.HAND:
            self.clear_selection()
        self.selection_mode_changed.emit(mode)

    # ------------------------------------------------------------------
    # Page loading
    # ------------------------------------------------------------------

    def _clear_tab_selection(self, tab_id: int) -> None:
        self.is_selecting = False
        if self.state.tabs.update(tab_id, Tab.clear_selection):
            self.selection_changed.emit(tab_id)

    def render_current_tab_page(self, tab_id: int) -> bool:
        """
        Load text and pixels for the tab's current page, zoom and rotation.

        Returns:
            True if the result was stored on the tab
        """
        tab = self.state.tabs.get(tab_id)
        if tab is None or tab.doc is None:
            return False

        self._clear_tab_selection(tab_id)
        result = load_page(tab.doc, tab.current_page, tab.zoom, tab.rotation)
        return self._apply_page_load(tab_id, result)

    def render_in_background(self, tab_id: int) -> Optional[PageLoadWorker]:
        """
        Same as render_current_tab_page, but on a worker thread.

        Returns:
            The started worker, or None if the tab has no document
        """
        tab = self.state.tabs.get(tab_id)
        if tab is None or tab.doc is None:
            return None

        self._clear_tab_selection(tab_id)

        worker = PageLoadWorker(tab_id, tab.doc, tab.current_page, tab.zoom, tab.rotation)
        worker.page_loaded.connect(self._on_page_loaded)
        worker.error.connect(self._on_page_load_failed)
        worker.finished.connect(lambda w=worker: self._workers.discard(w))
        self._workers.add(worker)
        worker.start()
        return worker

    def _on_page_loaded(self, tab_id: int, result: PageLoadResult) -> None:
        self._apply_page_load(tab_id, result)

    def _on_page_load_failed(self, tab_id: int, message: str) -> None:
        logger.error(f"Failed to load page for tab {tab_id}: {message}")

    def _apply_page_load(self, tab_id: int, result: PageLoadResult) -> bool:
        image = None
        dimensions = None
        if result.rendered is not None:
            image = rendered_to_qimage(result.rendered)
            dimensions = (
                int(result.rendered.width / DPI_SCALE),
                int(result.rendered.height / DPI_SCALE),
            )

        applied = []

        def store(tab: Tab):
            if not result.matches(tab.current_page, tab.zoom, tab.rotation):
                return
            tab.page_text = result.page_text
            tab.page_size = result.page_size
            tab.page_image = image
            tab.page_dimensions = dimensions
            applied.append(True)

        if not self.state.tabs.update(tab_id, store):
            logger.debug(f"Tab {tab_id} closed before its page loaded; dropping result")
            return False
        if not applied:
            logger.debug(f"View of tab {tab_id} changed while loading; dropping result")
            return False

        self.page_rendered.emit(tab_id)
        return True

    # ------------------------------------------------------------------
    # Text selection
    # ------------------------------------------------------------------

    def begin_selection(self, x: float, y: float) -> bool:
        """
        Start a drag at image coordinates (x, y).

        Only active in text-select mode.
        """
        if self.state.get_selection_mode() != SelectionMode.TEXT_SELECT:
            return False

        tab_id = self.state.get_active_tab_id()
        if tab_id is None:
            return False

        def start(tab: Tab):
            tab.clear_selection()
            tab.selection_start = (x, y)
            tab.selection_end = (x, y)

        if not self.state.tabs.update(tab_id, start):
            return False

        self.is_selecting = True
        self.selection_changed.emit(tab_id)
        return True

    def update_selection(self, x: float, y: float) -> bool:
        """
        Extend the drag to image coordinates (x, y) and recompute the selection.

        Returns:
            True if the selection was recomputed
        """
        if not self.is_selecting:
            return False

        tab_id = self.state.get_active_tab_id()
        tab = self.state.tabs.get(tab_id) if tab_id is not None else None
        if tab is None or tab.selection_start is None:
            return False

        page_text = tab.page_text
        if page_text is None or tab.page_dimensions is None or tab.page_size is None:
            # Nothing to select against yet
            self.state.tabs.update(tab_id, lambda t: setattr(t, "selection_end", (x, y)))
            return False

        pdf_width, pdf_height = tab.page_size
        page_width, page_height = tab.page_dimensions
        selected_text, regions = calculate_text_selection(
            page_text,
            pdf_width,
            pdf_height,
            page_width,
            page_height,
            tab.selection_start,
            (x, y),
        )

        stored = []

        def store(t: Tab):
            # Drop the result if the page was re-rendered meanwhile
            if t.page_text is not page_text or t.selection_start is None:
                return
            t.selection_end = (x, y)
            t.selected_text = selected_text
            t.selection_regions = regions
            stored.append(True)

        self.state.tabs.update(tab_id, store)
        if not stored:
            return False

        self.selection_changed.emit(tab_id)
        return True

    def finish_selection(self) -> None:
        """End the drag and copy the selected text."""
        if not self.is_selecting:
            return
        self.is_selecting = False
        self.copy_selected_text()

    def copy_selected_text(self) -> bool:
        """
        Copy the active tab's selected text to the clipboard.

        Returns:
            True if text was copied
        """
        tab = self.state.get_active_tab()
        if tab is None or not tab.selected_text:
            return False

        try:
            pyperclip.copy(tab.selected_text)
        except pyperclip.PyperclipException as e:
            logger.warning(f"Failed to copy selection to clipboard: {e}")
            return False
        return True

    def clear_selection(self) -> None:
        tab_id = self.state.get_active_tab_id()
        if tab_id is not None:
            self._clear_tab_selection(tab_id)
