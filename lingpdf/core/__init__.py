"""
Core business logic for LingPDF.
"""

from .app_state import MAX_ZOOM, MIN_ZOOM, ZOOM_STEP, AppState, clamp_zoom
from .document import PDFDocument, PdfError
from .page import OutlineItem, PageText, SelectionRegion, TextChar
from .selection import calculate_text_selection
from .tabs import Tab, TabManager

__all__ = [
    "AppState",
    "MIN_ZOOM",
    "MAX_ZOOM",
    "ZOOM_STEP",
    "clamp_zoom",
    "PDFDocument",
    "PdfError",
    "TextChar",
    "PageText",
    "SelectionRegion",
    "OutlineItem",
    "calculate_text_selection",
    "Tab",
    "TabManager",
]
