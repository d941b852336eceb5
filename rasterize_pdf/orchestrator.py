"""Drive the rasterizer across every page of a session's source.

Pages are rendered one at a time, in order. After each page the caller gets a
:class:`~rasterize_pdf.session.ProgressSnapshot` before the next page starts,
so a progress display stays live and at most one page surface is held in
memory.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Iterator, Optional

from .exceptions import ConversionCancelledError, RenderError
from .quality import QualityProfile
from .rasterizer import RasterPage, SourceDocument, blank_page, rasterize
from .session import ConversionSession, ProgressSnapshot, Status

LOGGER = logging.getLogger("rasterize_pdf.orchestrator")

Rasterizer = Callable[[SourceDocument, int, QualityProfile], RasterPage]
ProgressCallback = Callable[[ProgressSnapshot], None]

ABORT = "abort"
PLACEHOLDER = "placeholder"
PAGE_ERROR_POLICIES = (ABORT, PLACEHOLDER)


class ConversionStream:
    """Snapshot iterator for one run.

    Closing the stream, or dropping it, before the terminal snapshot ends the
    run with :class:`ConversionCancelledError`, even if it was never iterated.
    """

    def __init__(self, session: ConversionSession, snapshots: Iterator[ProgressSnapshot]) -> None:
        self._session = session
        self._snapshots = snapshots
        self._finished = False

    def __iter__(self) -> "ConversionStream":
        return self

    def __next__(self) -> ProgressSnapshot:
        if self._finished:
            raise StopIteration
        try:
            snapshot = next(self._snapshots)
        except BaseException:
            # The run has already left PROCESSING.
            self._finished = True
            raise
        if snapshot.done:
            self._finished = True
        return snapshot

    def close(self) -> None:
        if self._finished:
            return
        self._finished = True
        self._snapshots.close()
        if self._session.processing:
            # Closed before the first page started.
            LOGGER.warning("Conversion closed before it started")
            self._session._finish(ConversionCancelledError("Conversion stopped by the caller"))

    def __del__(self) -> None:
        self.close()


def convert(
    session: ConversionSession,
    *,
    cancel: Optional[threading.Event] = None,
    on_page_error: str = ABORT,
    rasterizer: Rasterizer = rasterize,
) -> "ConversionStream":
    """Start a run on ``session`` and return its snapshot stream.

    The session enters ``PROCESSING`` before this function returns, so a
    second call on the same session raises
    :class:`~rasterize_pdf.exceptions.InvalidStateError` straight away.

    One ``PROCESSING`` snapshot is yielded per page, then a final
    ``COMPLETED`` or ``ERROR`` snapshot. With ``on_page_error="abort"`` a
    :class:`RenderError` ends the run; with ``"placeholder"`` the page is
    replaced by a blank raster and the run continues. ``cancel`` is checked
    between pages only; closing the returned iterator early has the same effect.
    """
    if on_page_error not in PAGE_ERROR_POLICIES:
        raise ValueError(
            f"Unknown page error policy {on_page_error!r}. "
            f"Expected one of: {', '.join(PAGE_ERROR_POLICIES)}"
        )
    session._begin_run()
    LOGGER.info(
        "Converting %s: %d pages at %s quality",
        session.source_name or "<stream>",
        session.total_pages,
        session.quality,
    )
    return ConversionStream(session, _run(session, session.profile, cancel, on_page_error, rasterizer))


def _placeholder_size(
    session: ConversionSession, source: SourceDocument, page_number: int, profile: QualityProfile
) -> tuple[float, float]:
    try:
        return source.page_size(page_number)
    except RenderError:
        if not session.pages:
            raise
    # Same size as the previous page, back in points.
    last = session.pages[-1]
    return last.width / profile.scale, last.height / profile.scale


def _run(
    session: ConversionSession,
    profile: QualityProfile,
    cancel: Optional[threading.Event],
    on_page_error: str,
    rasterizer: Rasterizer,
) -> Iterator[ProgressSnapshot]:
    source = session.source
    total = session.total_pages
    try:
        for page_number in range(1, total + 1):
            if cancel is not None and cancel.is_set():
                raise ConversionCancelledError(f"Cancelled before page {page_number} of {total}")

            try:
                raster = rasterizer(source, page_number, profile)
            except RenderError as exc:
                if on_page_error == ABORT:
                    raise
                LOGGER.warning("Page %d replaced by a blank placeholder: %s", page_number, exc)
                width, height = _placeholder_size(session, source, page_number, profile)
                session._add_page(blank_page(width, height, page_number, profile), placeholder=True)
            else:
                session._add_page(raster)

            LOGGER.debug("Page %d/%d done (%.1f%%)", page_number, total, session.progress)
            yield session.snapshot(page_number)
    except (GeneratorExit, KeyboardInterrupt):
        LOGGER.warning("Conversion abandoned after %d of %d pages", len(session.pages), total)
        session._finish(ConversionCancelledError("Conversion stopped by the caller"))
        raise
    except ConversionCancelledError as exc:
        LOGGER.warning("%s", exc)
        session._finish(exc)
    except RenderError as exc:
        LOGGER.error("Conversion aborted: %s", exc)
        session._finish(exc)
    except Exception as exc:
        session._finish(exc)
        raise
    else:
        session._finish()
        LOGGER.info("Converted %d pages", len(session.pages))
    yield session.snapshot()


def convert_all(
    session: ConversionSession,
    progress_callback: Optional[ProgressCallback] = None,
    **kwargs,
) -> ProgressSnapshot:
    """Run :func:`convert` to the end, reporting each snapshot to ``progress_callback``.

    Returns the terminal snapshot. If the run ended in ``ERROR`` the run's
    error is raised instead.
    """
    last = None
    for snapshot in convert(session, **kwargs):
        if progress_callback is not None:
            progress_callback(snapshot)
        last = snapshot
    if last.status is Status.ERROR:
        raise last.error
    return last
