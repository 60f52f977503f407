"""
PDF document reading and rendering functionality.
"""

import logging
import re
import threading
from pathlib import Path
from typing import List, Tuple, Union

import fitz  # PyMuPDF

from lingpdf.core.page.models import OutlineItem, PageText, RenderedPage
from lingpdf.core.page.text_layer import extract_page_text

from .errors import InvalidPageError, PasswordProtectedError, PdfOpenError, PdfRenderError

logger = logging.getLogger(__name__)

# Render resolution multiplier on top of the view zoom
DPI_SCALE = 2.0


class PDFDocument:
    """
    An opened PDF file.

    Read-only after open. Calls into PyMuPDF are serialized by a per-document
    lock so the same document can be used from a worker thread.
    """

    def __init__(self, path: Path, doc: fitz.Document):
        self.path = path
        self._doc = doc
        self._lock = threading.Lock()
        self.page_count: int = doc.page_count

    @classmethod
    def open(cls, path: Union[str, Path]) -> "PDFDocument":
        """
        Open a PDF file.

        Args:
            path: Path to the PDF file

        Returns:
            The opened document

        Raises:
            PdfOpenError: The file is missing or is not a readable PDF
            PasswordProtectedError: The PDF needs a password
        """
        path = Path(path)
        if not path.is_file():
            raise PdfOpenError(f"File not found: {path}")

        try:
            doc = fitz.open(str(path))
        except Exception as e:
            raise PdfOpenError(f"Failed to open PDF: {e}") from e

        if not doc.is_pdf:
            doc.close()
            raise PdfOpenError(f"Not a PDF file: {path}")

        if doc.needs_pass:
            doc.close()
            raise PasswordProtectedError(f"PDF is password protected: {path}")

        logger.info(f"Opened {path} ({doc.page_count} pages)")
        return cls(path, doc)

    @property
    def file_name(self) -> str:
        return self.path.name

    @property
    def is_closed(self) -> bool:
        return self._doc.is_closed

    def close(self) -> None:
        """Close the underlying PyMuPDF document."""
        with self._lock:
            if not self._doc.is_closed:
                self._doc.close()

    def _check_page(self, page_num: int) -> None:
        if not (0 <= page_num < self.page_count):
            raise InvalidPageError(page_num, self.page_count)

    def get_page_size(self, page_num: int) -> Tuple[float, float]:
        """
        Get the size of a page in points.

        Args:
            page_num: 0-based index of the page

        Returns:
            Tuple of (width, height) in points
        """
        self._check_page(page_num)
        with self._lock:
            rect = self._doc.load_page(page_num).rect
        return rect.width, rect.height

    def render_page(self, page_num: int, zoom: float, rotation: int = 0) -> RenderedPage:
        """
        Render a page to RGB pixels.

        Args:
            page_num: 0-based index of the page
            zoom: View zoom factor; pixels are produced at zoom * DPI_SCALE
            rotation: Clockwise view rotation in degrees

        Returns:
            RenderedPage with the pixel buffer and its size
        """
        self._check_page(page_num)
        scale = zoom * DPI_SCALE
        mat = fitz.Matrix(scale, scale).prerotate(rotation % 360)

        try:
            with self._lock:
                pix = self._doc.load_page(page_num).get_pixmap(matrix=mat, alpha=False)
        except Exception as e:
            raise PdfRenderError(f"Failed to render page {page_num}: {e}") from e

        return RenderedPage(
            samples=bytes(pix.samples), width=pix.width, height=pix.height, stride=pix.stride
        )

    def extract_page_text(self, page_num: int) -> PageText:
        """
        Extract characters with their positions from a page.

        Args:
            page_num: 0-based index of the page

        Returns:
            PageText for the page
        """
        self._check_page(page_num)
        try:
            with self._lock:
                return extract_page_text(self._doc.load_page(page_num))
        except Exception as e:
            raise PdfRenderError(f"Failed to extract text from page {page_num}: {e}") from e

    def extract_text_in_rect(
        self, page_num: int, x: float, y: float, width: float, height: float
    ) -> str:
        """
        Extract plain text inside a rectangle.

        Args:
            page_num: 0-based index of the page
            x, y: Top-left corner in points
            width, height: Rectangle size in points

        Returns:
            Text inside the rectangle
        """
        self._check_page(page_num)
        clip = fitz.Rect(x, y, x + width, y + height)
        try:
            with self._lock:
                return self._doc.load_page(page_num).get_text("text", clip=clip)
        except Exception as e:
            raise PdfRenderError(f"Failed to extract text from page {page_num}: {e}") from e

    def get_outline(self) -> List[OutlineItem]:
        """
        Get the document outline (bookmarks) as a tree.

        Returns:
            Top-level outline items; each owns its children
        """
        with self._lock:
            raw_toc = self._doc.get_toc(simple=True)
        return build_outline(raw_toc, self.page_count)

    def __repr__(self) -> str:
        return f"PDFDocument(path={str(self.path)!r}, pages={self.page_count})"


def clean_outline_title(title: str, page_num: int) -> str:
    """
    Clean a TOC title string.

    Args:
        title: Raw title from TOC
        page_num: 1-based page number for the fallback title

    Returns:
        Cleaned title string
    """
    if not title:
        return f"Section {page_num}"

    # Remove surrogates left over from bad encodings
    cleaned_title = re.sub(r"[\ud800-\udfff]+", "", title)

    cleaned_title = cleaned_title.replace("\r", "")
    cleaned_title = cleaned_title.replace("\n", " ")
    cleaned_title = cleaned_title.replace("\t", " ")
    cleaned_title = re.sub(r"[\x00-\x1f\x7f-\x9f]", "", cleaned_title)
    cleaned_title = re.sub(r"\s+", " ", cleaned_title).strip()

    return cleaned_title or f"Section {page_num}"


def build_outline(raw_toc: List[list], page_count: int) -> List[OutlineItem]:
    """
    Turn PyMuPDF's flat ``[level, title, page]`` TOC into a tree.

    Pages are converted to 0-based and clamped into the document; entries
    without a target page point at the first page.
    """
    # Each stack frame: (level, title, page, children)
    root: list = []
    stack = [(0, None, 0, root)]

    for entry in raw_toc:
        if len(entry) < 3:
            continue
        level, title, page_num = entry[:3]
        page = page_num - 1 if page_num >= 1 else 0
        if page_count:
            page = min(page, page_count - 1)

        while len(stack) > 1 and stack[-1][0] >= level:
            _pop_outline_frame(stack)

        stack.append((level, clean_outline_title(title, page + 1), page, []))

    while len(stack) > 1:
        _pop_outline_frame(stack)

    return root


def _pop_outline_frame(stack: list) -> None:
    _, title, page, children = stack.pop()
    stack[-1][3].append(OutlineItem(title=title, page=page, children=tuple(children)))
