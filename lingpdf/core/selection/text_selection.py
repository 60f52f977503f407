"""
Drag-rectangle text selection over a rendered page.

Characters come in document points (y up, bottom-referenced); the drag and the
resulting highlight rectangles are in image pixels (y down).
"""

import math
from typing import List, Sequence, Tuple

from lingpdf.core.page.models import PageText, SelectionRegion, TextChar

# Max vertical distance (image pixels) between a glyph and a line's anchor
LINE_TOLERANCE = 5.0

# Glyphs ending further than this past the right image edge are layout artifacts
EDGE_SLACK = 10.0

Point = Tuple[float, float]


def _ordered(value: float) -> Tuple[bool, float]:
    """Sort key that places unorderable values last."""
    if math.isnan(value):
        return (True, 0.0)
    return (False, value)


def _group_lines(
    chars: Sequence[TextChar], pdf_height: float, scale_y: float
) -> List[List[TextChar]]:
    """
    Greedily split characters into visual lines.

    A glyph joins the most recent line when its screen y is within
    LINE_TOLERANCE of that line's first glyph. Assumes extraction order is
    close to reading order.
    """
    lines: List[List[TextChar]] = []
    anchor_y = 0.0

    for c in chars:
        screen_y = (pdf_height - c.y) / scale_y
        if lines and abs(screen_y - anchor_y) < LINE_TOLERANCE:
            lines[-1].append(c)
            continue
        lines.append([c])
        anchor_y = screen_y

    # Top to bottom, then left to right inside each line
    lines.sort(key=lambda line: _ordered((pdf_height - line[0].y) / scale_y))
    for line in lines:
        line.sort(key=lambda c: _ordered(c.x))

    return lines


def _line_bounds(
    line: List[TextChar], pdf_height: float, scale_y: float
) -> Tuple[float, float]:
    """Return (top, height) of a line in image pixels."""
    first = line[0]
    height = first.height / scale_y
    bottom = (pdf_height - first.y) / scale_y
    return bottom - height, height


def _chars_for_line(
    line: List[TextChar],
    line_idx: int,
    num_lines: int,
    scale_x: float,
    page_width: float,
    screen_min_x: float,
    screen_max_x: float,
) -> List[TextChar]:
    """
    Pick the glyphs of a hit line that belong to the selection.

    Single line: glyphs intersecting the drag horizontally.
    First of several: from the drag start to the end of the line.
    Last of several: from the start of the line to the drag end.
    Lines in between: everything.
    """
    valid = []
    for c in line:
        char_x = c.x / scale_x
        char_end_x = (c.x + c.width) / scale_x
        if char_x < page_width and 0 <= char_end_x <= page_width + EDGE_SLACK:
            valid.append(c)

    if num_lines == 1:
        return [
            c
            for c in valid
            if (c.x + c.width) / scale_x >= screen_min_x and c.x / scale_x <= screen_max_x
        ]
    if line_idx == 0:
        return [c for c in valid if (c.x + c.width) / scale_x >= screen_min_x]
    if line_idx == num_lines - 1:
        return [c for c in valid if c.x / scale_x <= screen_max_x]
    return valid


def calculate_text_selection(
    page_text: PageText,
    pdf_width: float,
    pdf_height: float,
    page_width: int,
    page_height: int,
    start: Point,
    end: Point,
) -> Tuple[str, List[SelectionRegion]]:
    """
    Compute the text and highlight rectangles selected by a drag.

    Args:
        page_text: Characters of the page in document points
        pdf_width: Page width in points
        pdf_height: Page height in points
        page_width: Displayed image width in pixels
        page_height: Displayed image height in pixels
        start: Drag start (x, y) relative to the image
        end: Drag end (x, y) relative to the image

    Returns:
        Tuple of (selected text, one region per selected line)
    """
    if not page_text.chars:
        return "", []
    if page_width <= 0 or page_height <= 0 or pdf_width <= 0 or pdf_height <= 0:
        return "", []

    screen_min_x = min(start[0], end[0])
    screen_max_x = max(start[0], end[0])
    screen_min_y = min(start[1], end[1])
    screen_max_y = max(start[1], end[1])

    scale_x = pdf_width / page_width
    scale_y = pdf_height / page_height

    selected_lines = []
    for line in _group_lines(page_text.chars, pdf_height, scale_y):
        top, height = _line_bounds(line, pdf_height, scale_y)
        if top + height >= screen_min_y and top <= screen_max_y:
            selected_lines.append(line)

    num_lines = len(selected_lines)
    text_parts: List[str] = []
    regions: List[SelectionRegion] = []

    for line_idx, line in enumerate(selected_lines):
        chars = _chars_for_line(
            line,
            line_idx,
            num_lines,
            scale_x,
            page_width,
            screen_min_x,
            screen_max_x,
        )
        if not chars:
            continue

        chars.sort(key=lambda c: _ordered(c.x))
        text_parts.append("".join(c.char for c in chars))

        top, height = _line_bounds(line, pdf_height, scale_y)
        min_x = max(0.0, min(c.x / scale_x for c in chars))
        max_x = min(float(page_width), max((c.x + c.width) / scale_x for c in chars))
        width = max_x - min_x

        if width > 0:
            regions.append(SelectionRegion(x=min_x, y=top, width=width, height=height))

    return "\n".join(text_parts), regions
