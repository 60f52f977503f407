"""
Page geometry and text layer for PDF documents.
"""

from .models import OutlineItem, PageText, RenderedPage, SelectionRegion, TextChar
from .text_layer import extract_page_text, rotate_page_text

__all__ = [
    "TextChar",
    "PageText",
    "SelectionRegion",
    "OutlineItem",
    "RenderedPage",
    "extract_page_text",
    "rotate_page_text",
]
