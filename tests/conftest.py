from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator, Sequence

import fitz
import pytest

from rasterize_pdf import ConversionSession

MARKER_COLOURS = [(1, 0, 0), (0, 1, 0), (0, 0, 1), (1, 1, 0), (0, 1, 1)]


def build_pdf(sizes: Sequence[tuple[float, float]], markers: bool = True) -> bytes:
    """PDF with one page per ``(width, height)``; each page is filled with a marker colour."""
    doc = fitz.open()
    for index, (width, height) in enumerate(sizes):
        page = doc.new_page(width=width, height=height)
        if markers:
            colour = MARKER_COLOURS[index % len(MARKER_COLOURS)]
            page.draw_rect(page.rect, color=colour, fill=colour)
        page.insert_text((5, 20), f"Page {index + 1}", fontsize=10)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture()
def pdf_factory() -> Callable[..., bytes]:
    return build_pdf


@pytest.fixture()
def three_page_pdf() -> bytes:
    return build_pdf([(200, 100)] * 3)


@pytest.fixture()
def three_page_pdf_path(tmp_path: Path, three_page_pdf: bytes) -> Path:
    path = tmp_path / "report.pdf"
    path.write_bytes(three_page_pdf)
    return path


@pytest.fixture()
def session(three_page_pdf: bytes) -> Iterator[ConversionSession]:
    s = ConversionSession(quality="low")
    s.load(three_page_pdf, name="report.pdf")
    yield s
    if not s.processing:
        s.close()
