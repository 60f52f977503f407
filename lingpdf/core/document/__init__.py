"""
PDF document handling.
"""
from .errors import (
    InvalidPageError,
    PasswordProtectedError,
    PdfError,
    PdfOpenError,
    PdfRenderError,
)
from .pdf_reader import DPI_SCALE, PDFDocument, build_outline, clean_outline_title

__all__ = [
    'PDFDocument',
    'DPI_SCALE',
    'build_outline',
    'clean_outline_title',
    'PdfError',
    'PdfOpenError',
    'PdfRenderError',
    'PasswordProtectedError',
    'InvalidPageError',
]
