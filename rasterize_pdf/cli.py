"""Command-line front end: rasterize a PDF into an image-only PDF."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .assembler import DEFAULT_PAGE_SIZE, export_session, page_size_for
from .exceptions import RasterizePDFError
from .orchestrator import PAGE_ERROR_POLICIES, convert_all
from .quality import DEFAULT_QUALITY, QUALITY_PROFILES
from .session import ConversionSession, ProgressSnapshot, Status


def _default_out_path(in_path: Path, session: ConversionSession) -> Path:
    return in_path.parent / session.output_name()


def _print_progress(snapshot: ProgressSnapshot) -> None:
    if snapshot.status is Status.PROCESSING:
        print(
            f"Page {snapshot.page_number}/{snapshot.total_pages} ({snapshot.progress:.0f}%)",
            file=sys.stderr,
        )


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rasterize-pdf",
        description="Rasterize a PDF into an image-only PDF.",
    )
    parser.add_argument("input", help="Path to input PDF")
    parser.add_argument(
        "--out",
        help="Output PDF path (default: <input>_image-only.pdf)",
        default=None,
    )
    parser.add_argument(
        "--quality",
        choices=list(QUALITY_PROFILES),
        default=DEFAULT_QUALITY,
        help=f"Render quality tier. Default: {DEFAULT_QUALITY}",
    )
    parser.add_argument(
        "--page-size",
        default=None,
        help="Output paper size, e.g. a4, letter, a4-l. Default: a4",
    )
    parser.add_argument(
        "--on-page-error",
        choices=PAGE_ERROR_POLICIES,
        default=PAGE_ERROR_POLICIES[0],
        help="Abort the run, or substitute a blank page, when a page fails to render. Default: abort",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log more detail (-vv for per-page debug output).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        page_size = page_size_for(args.page_size) if args.page_size else DEFAULT_PAGE_SIZE
    except ValueError as exc:
        parser.error(str(exc))

    in_path = Path(args.input).expanduser().resolve()
    session = ConversionSession(quality=args.quality)
    try:
        session.load(in_path)
        out_path = Path(args.out).expanduser().resolve() if args.out else _default_out_path(in_path, session)
        convert_all(session, _print_progress, on_page_error=args.on_page_error)
        _, data = export_session(session, page_size)
    except (RasterizePDFError, FileNotFoundError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        session.close()

    out_path.write_bytes(data)
    if session.failed_pages:
        pages = ", ".join(str(n) for n in session.failed_pages)
        print(f"Blank placeholders used for pages: {pages}", file=sys.stderr)
    print(f"Wrote: {out_path}")
    return 0


def run() -> None:
    try:
        raise SystemExit(main(sys.argv[1:]))
    except KeyboardInterrupt:
        raise SystemExit(130)
