from __future__ import annotations

from typing import Iterable, Tuple

import fitz
import pytest
from PyQt5.QtCore import QCoreApplication

PAGE_WIDTH = 612
PAGE_HEIGHT = 792

# (x, baseline y in top-left page coordinates, text, font size)
TextSpec = Tuple[float, float, str, float]


def make_pdf(
    texts: Iterable[TextSpec] = (),
    width: float = PAGE_WIDTH,
    height: float = PAGE_HEIGHT,
    pages: int = 1,
    rotation: int = 0,
) -> bytes:
    """Build a PDF in memory with text drawn on page 1."""
    doc = fitz.open()
    for _ in range(pages):
        doc.new_page(width=width, height=height)
    page = doc[0]
    for x, y, text, size in texts:
        page.insert_text((x, y), text, fontsize=size, fontname="helv")
    if rotation:
        page.set_rotation(rotation)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """Signals and QThread objects need a core application instance."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def hello_pdf() -> bytes:
    """'Hello' at 12pt with its baseline at PDF user y=700."""
    return make_pdf([(50, PAGE_HEIGHT - 700, "Hello", 12)])


@pytest.fixture
def rotated_hello_pdf() -> bytes:
    """The hello page shown rotated 90 degrees clockwise."""
    return make_pdf([(50, PAGE_HEIGHT - 700, "Hello", 12)], rotation=90)


@pytest.fixture
def two_line_pdf() -> bytes:
    return make_pdf(
        [
            (72, 100, "First line", 14),
            (72, 200, "Second line", 14),
        ]
    )


@pytest.fixture
def blank_pdf() -> bytes:
    return make_pdf()


@pytest.fixture
def pdf_factory():
    return make_pdf
