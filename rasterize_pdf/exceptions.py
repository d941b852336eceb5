"""Exception types raised by :mod:`rasterize_pdf`."""

from __future__ import annotations


class RasterizePDFError(Exception):
    """Base exception for all rasterize_pdf errors."""


class UnsupportedInputError(RasterizePDFError):
    """Raised when the supplied file is not a usable PDF."""


class RenderError(RasterizePDFError):
    """Raised when a single page cannot be rasterized."""

    def __init__(self, page_number: int, reason: str = "") -> None:
        self.page_number = page_number
        self.reason = reason
        message = f"Failed to render page {page_number}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class EmptyInputError(RasterizePDFError):
    """Raised when assembly is attempted without any raster pages."""


class InvalidStateError(RasterizePDFError):
    """Raised when an operation is not allowed in the session's current state."""


class ConversionCancelledError(RasterizePDFError):
    """Raised (or reported) when a run is stopped between pages."""
