"""rasterize_pdf

Converts normally formatted PDFs into image-only ones by rendering every page
to an image and putting a new PDF together.

Visually, the output PDF looks like the input, but it contains no text or
formatting data.

Quick start::

    from rasterize_pdf import ConversionSession, convert, export_session

    session = ConversionSession(quality="medium")
    session.load("report.pdf")
    for snapshot in convert(session):
        print(f"{snapshot.progress:.0f}%")
    name, data = export_session(session)
"""

from .assembler import (
    DEFAULT_PAGE_SIZE,
    OutputDocument,
    OutputPage,
    PageSize,
    Placement,
    aspect_fit,
    assemble,
    export_session,
    page_size_for,
)
from .exceptions import (
    ConversionCancelledError,
    EmptyInputError,
    InvalidStateError,
    RasterizePDFError,
    RenderError,
    UnsupportedInputError,
)
from .orchestrator import ConversionStream, convert, convert_all
from .quality import DEFAULT_QUALITY, QUALITY_PROFILES, QualityProfile, get_profile
from .rasterizer import RasterPage, SourceDocument, open_source, rasterize, scaled_size
from .session import ConversionSession, ProgressSnapshot, Status, output_name

__version__ = "1.0.0"

__all__ = [
    "ConversionSession",
    "ProgressSnapshot",
    "Status",
    "output_name",
    "convert",
    "ConversionStream",
    "convert_all",
    "QualityProfile",
    "QUALITY_PROFILES",
    "DEFAULT_QUALITY",
    "get_profile",
    "RasterPage",
    "SourceDocument",
    "open_source",
    "rasterize",
    "scaled_size",
    "assemble",
    "aspect_fit",
    "export_session",
    "page_size_for",
    "OutputDocument",
    "OutputPage",
    "PageSize",
    "Placement",
    "DEFAULT_PAGE_SIZE",
    "RasterizePDFError",
    "UnsupportedInputError",
    "RenderError",
    "EmptyInputError",
    "InvalidStateError",
    "ConversionCancelledError",
    "__version__",
]
