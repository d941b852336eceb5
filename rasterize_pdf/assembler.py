"""Rebuild an image-only PDF from raster pages.

Every raster gets its own output page of a fixed size. The image is scaled to
the largest size that fits the page without cropping or distortion and then
centred on it.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import NamedTuple, Sequence

import fitz  # PyMuPDF import

from .exceptions import EmptyInputError, InvalidStateError
from .rasterizer import RasterPage
from .session import ConversionSession, Status

LOGGER = logging.getLogger("rasterize_pdf.assembler")


class PageSize(NamedTuple):
    """Output page size in points (1 point == 1/72 inch)."""

    width: float
    height: float

    @property
    def aspect(self) -> float:
        return self.width / self.height


class Placement(NamedTuple):
    x: float
    y: float
    width: float
    height: float

    @property
    def rect(self) -> fitz.Rect:
        return fitz.Rect(self.x, self.y, self.x + self.width, self.y + self.height)


def page_size_for(name: str) -> PageSize:
    """Resolve a paper name such as ``"a4"`` or ``"letter-l"`` to a :class:`PageSize`."""
    width, height = fitz.paper_size(name)
    if width <= 0 or height <= 0:
        raise ValueError(f"Unknown paper size: {name!r}")
    return PageSize(float(width), float(height))


DEFAULT_PAGE_SIZE = page_size_for("a4")


def aspect_fit(image_aspect: float, page_width: float, page_height: float) -> Placement:
    """Largest centred rectangle of ratio ``image_aspect`` inside the page."""
    if image_aspect <= 0 or page_width <= 0 or page_height <= 0:
        raise ValueError("Aspect ratio and page dimensions must be positive")

    page_aspect = page_width / page_height
    if image_aspect > page_aspect:
        width = page_width
        height = page_width / image_aspect
    else:
        height = page_height
        width = page_height * image_aspect

    return Placement((page_width - width) / 2, (page_height - height) / 2, width, height)


@dataclass(frozen=True)
class OutputPage:
    raster: RasterPage
    placement: Placement


@dataclass(frozen=True)
class OutputDocument:
    """Placed raster pages, ready to be written as a PDF."""

    pages: tuple[OutputPage, ...]
    page_size: PageSize

    def __len__(self) -> int:
        return len(self.pages)

    def _build(self) -> fitz.Document:
        out_doc = fitz.open()
        for out in self.pages:
            out_page = out_doc.new_page(width=self.page_size.width, height=self.page_size.height)
            out_page.insert_image(out.placement.rect, stream=out.raster.data, keep_proportion=False)
        out_doc.set_metadata({"producer": "rasterize-pdf", "creator": "rasterize-pdf"})
        return out_doc

    def to_bytes(self) -> bytes:
        out_doc = self._build()
        try:
            # Fresh PDF with no incremental updates.
            return out_doc.tobytes(deflate=True, garbage=4, clean=True)
        finally:
            out_doc.close()

    def save(self, path: str | os.PathLike[str]) -> None:
        out_doc = self._build()
        try:
            out_doc.save(str(path), deflate=True, garbage=4, clean=True)
        finally:
            out_doc.close()
        LOGGER.info("Wrote %d pages to %s", len(self.pages), path)


def assemble(pages: Sequence[RasterPage], page_size: PageSize = DEFAULT_PAGE_SIZE) -> OutputDocument:
    """Place each raster on its own ``page_size`` page, keeping input order."""
    if not pages:
        raise EmptyInputError("Cannot assemble a document from zero pages")

    page_size = PageSize(*page_size)
    placed = []
    for raster in pages:
        placement = aspect_fit(raster.aspect, page_size.width, page_size.height)
        placed.append(OutputPage(raster, placement))
    LOGGER.debug("Placed %d rasters on %.0fx%.0f pt pages", len(placed), *page_size)
    return OutputDocument(tuple(placed), page_size)


def export_session(
    session: ConversionSession, page_size: PageSize = DEFAULT_PAGE_SIZE
) -> tuple[str, bytes]:
    """Build the image-only PDF for a session: ``(file name, PDF bytes)``."""
    if session.status is not Status.COMPLETED:
        raise InvalidStateError(
            f"Cannot export a session in state {session.status.value!r}; a completed run is required"
        )
    document = assemble(session.pages, page_size)
    data = document.to_bytes()
    name = session.output_name()
    LOGGER.info("Exported %s (%d pages, %d bytes)", name, len(document), len(data))
    return name, data
