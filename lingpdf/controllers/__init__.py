"""
Controllers connecting user actions to the core session state.
"""
from .page_worker import PageLoadResult, PageLoadWorker, load_page
from .session_controller import SessionController, rendered_to_qimage

__all__ = [
    'SessionController',
    'PageLoadWorker',
    'PageLoadResult',
    'load_page',
    'rendered_to_qimage',
]
