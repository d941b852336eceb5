"""In-memory state of one conversion session.

A session holds the loaded source, the pages rendered so far, progress and
lifecycle status. Only the orchestrator changes run state; callers read it
through :meth:`ConversionSession.snapshot` or the snapshots yielded by
:func:`rasterize_pdf.orchestrator.convert`.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from .exceptions import InvalidStateError
from .quality import DEFAULT_QUALITY, QualityProfile, get_profile
from .rasterizer import RasterPage, SourceDocument, SourceInput, open_source

LOGGER = logging.getLogger("rasterize_pdf.session")

OUTPUT_SUFFIX = "_image-only.pdf"
FALLBACK_OUTPUT_NAME = "converted" + OUTPUT_SUFFIX


class Status(enum.Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


@dataclass(frozen=True)
class ProgressSnapshot:
    """Immutable view of a session at one point of a run."""

    status: Status
    progress: float
    pages_so_far: int
    total_pages: int
    page_number: Optional[int] = None
    error: Optional[BaseException] = None
    failed_pages: tuple[int, ...] = ()

    @property
    def done(self) -> bool:
        return self.status in (Status.COMPLETED, Status.ERROR)


def output_name(source_name: str | None) -> str:
    """Name for the image-only copy of ``source_name``."""
    if not source_name:
        return FALLBACK_OUTPUT_NAME
    if source_name.lower().endswith(".pdf"):
        return source_name[:-4] + OUTPUT_SUFFIX
    return source_name + OUTPUT_SUFFIX


class ConversionSession:
    """Current source, accumulated raster pages, progress and status."""

    def __init__(self, quality: str | QualityProfile = DEFAULT_QUALITY) -> None:
        self._profile = get_profile(quality)
        self.source: SourceDocument | None = None
        self.source_name: str | None = None
        self._pages: list[RasterPage] = []
        self._failed_pages: list[int] = []
        self.total_pages = 0
        self.progress = 0.0
        self.status = Status.IDLE
        self.error: BaseException | None = None

    @property
    def pages(self) -> tuple[RasterPage, ...]:
        return tuple(self._pages)

    @property
    def failed_pages(self) -> tuple[int, ...]:
        return tuple(self._failed_pages)

    @property
    def processing(self) -> bool:
        return self.status is Status.PROCESSING

    @property
    def profile(self) -> QualityProfile:
        return self._profile

    @property
    def quality(self) -> str:
        return self._profile.name

    @quality.setter
    def quality(self, value: str | QualityProfile) -> None:
        self._require_not_processing("change quality")
        self._profile = get_profile(value)

    def _require_not_processing(self, action: str) -> None:
        if self.processing:
            raise InvalidStateError(f"Cannot {action} while a conversion is running")

    def load(self, data: SourceInput, name: str | None = None) -> SourceDocument:
        """Replace the current source and return the session to ``IDLE``."""
        self._require_not_processing("load a new document")
        source = open_source(data, name=name)
        self._drop_source()
        self.source = source
        self.source_name = source.name
        self.total_pages = source.page_count
        self._clear_run()
        return source

    def reset(self) -> None:
        """Return to ``IDLE`` keeping the current source, if any."""
        self._require_not_processing("reset the session")
        self._clear_run()

    def close(self) -> None:
        self._require_not_processing("close the session")
        self._drop_source()

    def output_name(self) -> str:
        return output_name(self.source_name)

    def snapshot(self, page_number: int | None = None) -> ProgressSnapshot:
        return ProgressSnapshot(
            status=self.status,
            progress=self.progress,
            pages_so_far=len(self._pages),
            total_pages=self.total_pages,
            page_number=page_number,
            error=self.error,
            failed_pages=self.failed_pages,
        )

    def _clear_run(self) -> None:
        self._pages = []
        self._failed_pages = []
        self.progress = 0.0
        self.status = Status.IDLE
        self.error = None

    def _drop_source(self) -> None:
        if self.source is not None:
            self.source.close()
        self.source = None

    # Run-state mutators, called by the orchestrator only.

    def _begin_run(self) -> None:
        if self.source is None:
            raise InvalidStateError("No document loaded")
        self._require_not_processing("start a conversion")
        self._clear_run()
        self.total_pages = self.source.page_count
        self.status = Status.PROCESSING

    def _add_page(self, raster: RasterPage, placeholder: bool = False) -> None:
        if len(self._pages) >= self.total_pages:
            raise InvalidStateError("More pages than the source document has")
        self._pages.append(raster)
        if placeholder:
            self._failed_pages.append(raster.page_number)
        self.progress = max(self.progress, 100 * len(self._pages) / self.total_pages)

    def _finish(self, error: BaseException | None = None) -> None:
        if error is None:
            self.status = Status.COMPLETED
            # The source is not reused after a successful run.
            self._drop_source()
        else:
            self.status = Status.ERROR
            self.error = error

    def __repr__(self) -> str:
        return (
            f"ConversionSession(source={self.source_name!r}, status={self.status.value}, "
            f"pages={len(self._pages)}/{self.total_pages}, quality={self.quality!r})"
        )
