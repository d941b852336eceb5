"""Page rasterization.

Opens a source PDF with PyMuPDF and turns each page into a JPEG image whose
pixel size is the page's intrinsic size (in points) times the quality scale.
Visually the image matches the page, but it carries no text or vector data.
"""

from __future__ import annotations

import io
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import fitz  # PyMuPDF import
from PIL import Image  # Pillow import

from .exceptions import RenderError, UnsupportedInputError
from .quality import QualityProfile

LOGGER = logging.getLogger("rasterize_pdf.rasterizer")

SourceInput = Union[bytes, bytearray, str, "os.PathLike[str]"]


@dataclass(frozen=True)
class RasterPage:
    """One encoded page image. ``page_number`` is 1-indexed like the source."""

    data: bytes
    width: int
    height: int
    page_number: int
    encoding: str = "JPEG"

    @property
    def index(self) -> int:
        return self.page_number - 1

    @property
    def aspect(self) -> float:
        return self.width / self.height

    @classmethod
    def from_image(cls, img: Image.Image, page_number: int, quality: int) -> "RasterPage":
        if img.mode != "RGB":
            img = img.convert("RGB")
        buf = io.BytesIO()
        img.save(buf, format="JPEG", quality=quality, optimize=True)
        return cls(buf.getvalue(), img.width, img.height, page_number)

    @classmethod
    def from_bytes(cls, data: bytes, page_number: int) -> "RasterPage":
        """Wrap already-encoded JPEG bytes, reading the pixel size with Pillow."""
        with Image.open(io.BytesIO(data)) as img:
            if img.format != "JPEG":
                raise ValueError(f"Expected JPEG data, got {img.format}")
            width, height = img.size
        return cls(bytes(data), width, height, page_number)


class SourceDocument:
    """An opened source PDF. Read-only for the rest of the pipeline."""

    def __init__(self, doc: fitz.Document, name: str | None = None) -> None:
        self._doc = doc
        self.name = name

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    @property
    def closed(self) -> bool:
        return self._doc.is_closed

    def page_size(self, page_number: int) -> tuple[float, float]:
        """Intrinsic (rotation-aware) page size in points.

        Falls back to the page's crop box from the page tree when the page
        itself cannot be loaded.
        """
        try:
            rect = self.load_page(page_number).rect
        except RenderError:
            raise
        except Exception as exc:
            LOGGER.debug("Page %d did not load, reading its crop box: %s", page_number, exc)
            try:
                rect = self._doc.page_cropbox(page_number - 1)
            except Exception as box_exc:
                raise RenderError(page_number, f"page size unavailable: {box_exc}") from box_exc
        return rect.width, rect.height

    def load_page(self, page_number: int) -> fitz.Page:
        if not 1 <= page_number <= self.page_count:
            raise RenderError(
                page_number, f"page out of range (document has {self.page_count} pages)"
            )
        return self._doc.load_page(page_number - 1)

    def close(self) -> None:
        if not self._doc.is_closed:
            self._doc.close()

    def __enter__(self) -> "SourceDocument":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"SourceDocument(name={self.name!r}, pages={self.page_count})"


def open_source(data: SourceInput, name: str | None = None) -> SourceDocument:
    """Open a PDF from bytes or a path.

    Raises:
        FileNotFoundError: if a path is given and does not exist.
        UnsupportedInputError: if the input is not a readable, unencrypted PDF
            with at least one page.
    """
    if isinstance(data, (bytes, bytearray)):
        if not data:
            raise UnsupportedInputError("Input is empty")
        opener = {"stream": bytes(data), "filetype": "pdf"}
    else:
        in_path = Path(data)
        if not in_path.exists():
            raise FileNotFoundError(f"Input PDF not found: {in_path}")
        opener = {"filename": str(in_path), "filetype": "pdf"}
        if name is None:
            name = in_path.name

    try:
        doc = fitz.open(**opener)
    except Exception as exc:
        raise UnsupportedInputError(f"Not a valid PDF document: {exc}") from exc

    if doc.needs_pass:
        doc.close()
        raise UnsupportedInputError("PDF is password protected")
    if doc.page_count == 0:
        doc.close()
        raise UnsupportedInputError("PDF has no pages")

    LOGGER.info("Opened %s (%d pages)", name or "<stream>", doc.page_count)
    return SourceDocument(doc, name=name)


def scaled_size(width: float, height: float, scale: float) -> tuple[int, int]:
    """Pixel size of a ``width`` x ``height`` point page at ``scale`` (half-up rounding)."""
    return max(1, int(width * scale + 0.5)), max(1, int(height * scale + 0.5))


def rasterize(source: SourceDocument, page_number: int, profile: QualityProfile) -> RasterPage:
    """Render page ``page_number`` (1-indexed) of ``source`` as a JPEG raster."""
    try:
        page = source.load_page(page_number)
    except RenderError:
        raise
    except Exception as exc:
        raise RenderError(page_number, str(exc)) from exc
    rect = page.rect
    if rect.is_empty:
        raise RenderError(page_number, "page has an empty media box")

    target_w, target_h = scaled_size(rect.width, rect.height, profile.scale)
    # Per-axis zoom so the pixmap lands exactly on the rounded target size.
    mat = fitz.Matrix(target_w / rect.width, target_h / rect.height)

    try:
        pix = page.get_pixmap(matrix=mat, alpha=False)  # RGB
        img = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
        if img.size != (target_w, target_h):
            img = img.resize((target_w, target_h), resample=Image.Resampling.BILINEAR)
        raster = RasterPage.from_image(img, page_number, profile.jpeg_quality)
    except Exception as exc:
        raise RenderError(page_number, str(exc)) from exc

    LOGGER.debug(
        "Rendered page %d at %dx%d (%d bytes)", page_number, raster.width, raster.height, len(raster.data)
    )
    return raster


def blank_page(width: float, height: float, page_number: int, profile: QualityProfile) -> RasterPage:
    """White placeholder raster for a ``width`` x ``height`` point page."""
    size = scaled_size(width, height, profile.scale)
    img = Image.new("RGB", size, (255, 255, 255))
    return RasterPage.from_image(img, page_number, profile.jpeg_quality)
