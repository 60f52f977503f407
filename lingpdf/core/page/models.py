from dataclasses import dataclass, field
from typing import Tuple

# ==============================================================================
# Text Layer Objects
# ==============================================================================


@dataclass(frozen=True)
class TextChar:
    """A single glyph with its box in document points.

    ``y`` is the bottom edge of the glyph, measured upward from the bottom
    of the page.
    """

    char: str
    x: float
    y: float
    width: float
    height: float
    font_size: float = 0.0

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class PageText:
    """Characters extracted from one page, in extraction order."""

    chars: Tuple[TextChar, ...] = ()
    text: str = ""

    def __len__(self) -> int:
        return len(self.chars)


# ==============================================================================
# Selection Objects
# ==============================================================================


@dataclass(frozen=True)
class SelectionRegion:
    """Highlight rectangle in image pixels (top-left origin, y down)."""

    x: float
    y: float
    width: float
    height: float

    def to_tuple(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)


# ==============================================================================
# Document Objects
# ==============================================================================


@dataclass(frozen=True)
class OutlineItem:
    """A bookmark entry; owns its children."""

    title: str
    page: int  # 0-based page index
    children: Tuple["OutlineItem", ...] = ()

    def walk(self):
        """Yield this item and all descendants depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class RenderedPage:
    """Raw RGB pixels of a rasterized page."""

    samples: bytes = field(repr=False)
    width: int
    height: int
    stride: int
