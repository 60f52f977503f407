"""
Text selection for rendered PDF pages.
"""

from .text_selection import EDGE_SLACK, LINE_TOLERANCE, calculate_text_selection

__all__ = ["calculate_text_selection", "LINE_TOLERANCE", "EDGE_SLACK"]
