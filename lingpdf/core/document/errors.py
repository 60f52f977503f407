"""
Errors raised by the PDF document wrapper.
"""


class PdfError(Exception):
    """Base class for document engine failures."""


class PdfOpenError(PdfError):
    """The file could not be opened as a PDF."""


class PasswordProtectedError(PdfOpenError):
    """The PDF is encrypted and needs a password."""


class PdfRenderError(PdfError):
    """A page could not be rendered or its text extracted."""


class InvalidPageError(PdfError):
    """A page index is outside the document."""

    def __init__(self, page: int, page_count: int):
        super().__init__(f"Invalid page number: {page} (document has {page_count} pages)")
        self.page = page
        self.page_count = page_count
