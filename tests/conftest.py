from pathlib import Path

import fitz
import pytest
from PyQt5.QtCore import QCoreApplication

from lingpdf.controllers import SessionController
from lingpdf.core.app_state import AppState
from lingpdf.utils.config import ConfigStore


def make_pdf(path: Path, pages, width: float = 600, height: float = 800, toc=None) -> Path:
    """Write a PDF; each page is a list of (x, baseline_y, text) tuples."""
    doc = fitz.open()
    for lines in pages:
        page = doc.new_page(width=width, height=height)
        for x, y, text in lines:
            page.insert_text((x, y), text, fontsize=12, fontname="helv")
    if toc:
        doc.set_toc(toc)
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture
def config_store(tmp_path):
    return ConfigStore(tmp_path / "config" / "config.json")


@pytest.fixture
def state(config_store):
    return AppState(config_store=config_store)


@pytest.fixture
def controller(qapp, state):
    return SessionController(state)


@pytest.fixture
def sample_pdf(tmp_path):
    return make_pdf(
        tmp_path / "sample.pdf",
        [
            [(72, 100, "Hello world"), (72, 130, "Second line")],
            [(72, 100, "Page two")],
            [(72, 100, "Page three")],
        ],
        toc=[[1, "Chapter 1", 1], [2, "Section 1.1", 2], [1, "Chapter 2", 3]],
    )
