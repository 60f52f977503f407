import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Tuple

from lingpdf.core.page.models import OutlineItem, PageText, SelectionRegion

DEFAULT_ZOOM = 1.0


@dataclass
class Tab:
    """View state of one open document."""

    id: int
    path: Path
    doc: Any = None  # PDFDocument once opened
    page_count: int = 0
    current_page: int = 0
    zoom: float = DEFAULT_ZOOM
    rotation: int = 0
    outline_items: Optional[Tuple[OutlineItem, ...]] = None

    # Cached render of current_page
    page_image: Any = None  # QImage at render resolution
    page_dimensions: Optional[Tuple[int, int]] = None  # display pixels
    page_size: Optional[Tuple[float, float]] = None  # points, in rotated view space
    page_text: Optional[PageText] = None  # characters in rotated view space

    # Text selection state
    selection_start: Optional[Tuple[float, float]] = None
    selection_end: Optional[Tuple[float, float]] = None
    selected_text: str = ""
    selection_regions: List[SelectionRegion] = field(default_factory=list)

    @property
    def file_name(self) -> str:
        """Display name of the tab."""
        return self.path.name or "Untitled"

    @property
    def is_loaded(self) -> bool:
        return self.doc is not None

    @property
    def has_selection(self) -> bool:
        return bool(self.selected_text) or bool(self.selection_regions)

    def clear_selection(self) -> None:
        """Drop the drag points, text and highlight rectangles."""
        self.selection_start = None
        self.selection_end = None
        self.selected_text = ""
        self.selection_regions = []

    def snapshot(self) -> "Tab":
        """
        Return a copy that shares nothing mutable with this tab.

        Geometry, outline and page text are immutable; the document handle
        and rendered image are read-only after creation and stay shared.
        """
        clone = copy.copy(self)
        clone.selection_regions = list(self.selection_regions)
        return clone
