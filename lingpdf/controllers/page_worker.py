"""
Page loading (text extraction + rendering), inline or on a worker thread.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from PyQt5.QtCore import QThread, pyqtSignal

from lingpdf.core.document import PDFDocument, PdfError
from lingpdf.core.page import PageText, RenderedPage, rotate_page_text

logger = logging.getLogger(__name__)


@dataclass
class PageLoadResult:
    """Everything produced by loading one page at one zoom and rotation."""
    page: int
    zoom: float
    rotation: int
    page_text: Optional[PageText] = None
    page_size: Optional[Tuple[float, float]] = None
    rendered: Optional[RenderedPage] = None

    def matches(self, page: int, zoom: float, rotation: int) -> bool:
        """Whether this result is for the given view."""
        return (self.page, self.zoom, self.rotation) == (page, zoom, rotation)


def load_page(doc: PDFDocument, page: int, zoom: float, rotation: int) -> PageLoadResult:
    """
    Extract text and render a page. Engine failures are logged and leave the
    corresponding field empty.

    Text and page size are returned in the rotated view space so they line up
    with the rendered image.
    """
    result = PageLoadResult(page=page, zoom=zoom, rotation=rotation)

    try:
        page_text = doc.extract_page_text(page)
        width, height = doc.get_page_size(page)
        result.page_text, width, height = rotate_page_text(page_text, width, height, rotation)
        result.page_size = (width, height)
    except PdfError as e:
        logger.error(f"Failed to extract text from page {page}: {e}")

    try:
        result.rendered = doc.render_page(page, zoom, rotation)
    except PdfError as e:
        logger.error(f"Failed to render page {page}: {e}")

    return result


class PageLoadWorker(QThread):
    """Worker thread for loading a page without freezing the UI.

    Holds only the tab id; the receiver resolves it when the result arrives.
    """

    # Signals
    page_loaded = pyqtSignal(int, object)  # tab_id, PageLoadResult
    error = pyqtSignal(int, str)  # tab_id, message

    def __init__(self, tab_id: int, doc: PDFDocument, page: int, zoom: float,
                 rotation: int, parent=None):
        super().__init__(parent)
        self.tab_id = tab_id
        self._doc = doc
        self._page = page
        self._zoom = zoom
        self._rotation = rotation

    def run(self):
        """Load the page in the background thread."""
        try:
            result = load_page(self._doc, self._page, self._zoom, self._rotation)
        except Exception as e:
            self.error.emit(self.tab_id, str(e))
            return
        self.page_loaded.emit(self.tab_id, result)
