"""
Character-level text extraction and page geometry transforms.
"""

import logging
from typing import List, Tuple

import fitz

from .models import PageText, TextChar

logger = logging.getLogger(__name__)


def extract_page_text(page: fitz.Page) -> PageText:
    """
    Extract every glyph on a page as a TextChar.

    Boxes are converted from PyMuPDF's top-left origin to bottom-referenced,
    y-up document points in the page's displayed (rotated) space.

    Args:
        page: Loaded PyMuPDF page

    Returns:
        PageText with characters in extraction order
    """
    flags = fitz.TEXT_PRESERVE_WHITESPACE | fitz.TEXT_PRESERVE_LIGATURES
    text_dict = page.get_text("rawdict", flags=flags)

    page_height = page.rect.height
    rotation_matrix = page.rotation_matrix if page.rotation else None

    chars: List[TextChar] = []
    lines: List[str] = []

    for block_data in text_dict.get("blocks", []):
        # Skip image blocks
        if block_data.get("type") != 0:
            continue

        for line_data in block_data.get("lines", []):
            line_text = []
            for span_data in line_data.get("spans", []):
                font_size = span_data.get("size", 0.0)

                for char_data in span_data.get("chars", []):
                    c = char_data.get("c", "")
                    if not c:
                        continue

                    rect = fitz.Rect(char_data.get("bbox", (0, 0, 0, 0)))
                    if rotation_matrix is not None:
                        rect = rect * rotation_matrix

                    chars.append(
                        TextChar(
                            char=c,
                            x=rect.x0,
                            y=page_height - rect.y1,
                            width=rect.width,
                            height=rect.height,
                            font_size=font_size,
                        )
                    )
                    line_text.append(c)

            if line_text:
                lines.append("".join(line_text))

    return PageText(chars=tuple(chars), text="\n".join(lines))


def _rotate_box(
    box: Tuple[float, float, float, float],
    width: float,
    height: float,
    rotation: int,
) -> Tuple[float, float, float, float]:
    """Rotate a top-left-origin box clockwise inside a width x height page."""
    x0, y0, x1, y1 = box
    if rotation == 90:
        return (height - y1, x0, height - y0, x1)
    if rotation == 180:
        return (width - x1, height - y1, width - x0, height - y0)
    if rotation == 270:
        return (y0, width - x1, y1, width - x0)
    return box


def rotate_page_text(
    page_text: PageText, doc_width: float, doc_height: float, rotation: int
) -> Tuple[PageText, float, float]:
    """
    Map page characters into a page rotated clockwise by ``rotation``.

    Args:
        page_text: Characters in unrotated document points
        doc_width: Unrotated page width in points
        doc_height: Unrotated page height in points
        rotation: 0, 90, 180 or 270 (other values are reduced mod 360)

    Returns:
        Tuple of (rotated page text, rotated width, rotated height)
    """
    rotation = rotation % 360
    if rotation not in (90, 180, 270):
        if rotation != 0:
            logger.warning(f"Unsupported rotation {rotation}, leaving text unrotated")
        return page_text, doc_width, doc_height

    if rotation == 180:
        new_width, new_height = doc_width, doc_height
    else:
        new_width, new_height = doc_height, doc_width

    rotated = []
    for c in page_text.chars:
        top = doc_height - (c.y + c.height)
        bottom = doc_height - c.y
        x0, y0, x1, y1 = _rotate_box(
            (c.x, top, c.x + c.width, bottom), doc_width, doc_height, rotation
        )
        rotated.append(
            TextChar(
                char=c.char,
                x=x0,
                y=new_height - y1,
                width=x1 - x0,
                height=y1 - y0,
                font_size=c.font_size,
            )
        )

    return PageText(chars=tuple(rotated), text=page_text.text), new_width, new_height
