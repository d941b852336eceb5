from __future__ import annotations

from pathlib import Path

import fitz
import pytest

from rasterize_pdf.cli import main


def test_cli_writes_image_only_pdf(three_page_pdf_path: Path, capsys) -> None:
    assert main([str(three_page_pdf_path), "--quality", "low"]) == 0

    out = three_page_pdf_path.resolve().with_name("report_image-only.pdf")
    assert out.exists()
    with fitz.open(str(out)) as doc:
        assert doc.page_count == 3
        assert all(page.get_text().strip() == "" for page in doc)

    captured = capsys.readouterr()
    assert f"Wrote: {out}" in captured.out
    assert "Page 3/3 (100%)" in captured.err


def test_cli_custom_output(three_page_pdf_path: Path, tmp_path: Path) -> None:
    out = tmp_path / "nested.pdf"
    assert main([str(three_page_pdf_path), "--out", str(out), "--page-size", "letter"]) == 0
    with fitz.open(str(out)) as doc:
        assert doc[0].rect.width == pytest.approx(612)


def test_cli_rejects_non_pdf(tmp_path: Path, capsys) -> None:
    bogus = tmp_path / "notes.pdf"
    bogus.write_text("not a pdf")
    assert main([str(bogus)]) == 1
    assert "Error:" in capsys.readouterr().err
    assert not (tmp_path / "notes_image-only.pdf").exists()


def test_cli_missing_input(tmp_path: Path) -> None:
    assert main([str(tmp_path / "missing.pdf")]) == 1


def test_cli_unknown_page_size(three_page_pdf_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main([str(three_page_pdf_path), "--page-size", "napkin"])
    assert excinfo.value.code == 2
