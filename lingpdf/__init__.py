"""
LingPDF - multi-document PDF session manager with text selection.
"""

__version__ = "0.1.0"
