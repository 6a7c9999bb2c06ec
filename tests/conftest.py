"""Pytest marker auto-assignment by folder and shared document fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import fitz
import pytest

from pdfdesk import logger
from pdfdesk.fonts import FontSet, PdfFont
from pdfdesk.settings import Settings
from pdfdesk.typing.models import SourceFile

if TYPE_CHECKING:
    from collections.abc import Callable


def _mark_tests_by_directory(
    config: pytest.Config,
    items: list[pytest.Item],
    marker: str,
) -> None:
    """Mark collected tests located under tests/<marker>/."""
    target_dir = (Path(config.rootpath) / "tests" / marker).resolve()

    for item in items:
        try:
            path = Path(str(item.fspath)).resolve()
        except Exception:
            logger.warning(f"Could not resolve path for test item {item.name!s}; skipping {marker!s} marker")
            continue

        if path == target_dir or target_dir in path.parents:
            item.add_marker(getattr(pytest.mark, marker))


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Apply directory-based markers to test items."""
    _mark_tests_by_directory(config, items, "unit")
    _mark_tests_by_directory(config, items, "integration")
    _mark_tests_by_directory(config, items, "end2end")


def build_pdf(sizes: list[tuple[float, float]], *, metadata: dict[str, str] | None = None) -> bytes:
    """Build a PDF whose pages have the given sizes and a 'Page N' label each."""
    doc = fitz.open()
    for number, (width, height) in enumerate(sizes, start=1):
        page = doc.new_page(width=width, height=height)
        page.insert_text((10, 30), f"Page {number}", fontsize=10)
    if metadata:
        doc.set_metadata(metadata)
    data = doc.tobytes()
    doc.close()
    return data


def page_sizes(data: bytes) -> list[tuple[float, float]]:
    """Return (width, height) of every page of a PDF."""
    with fitz.open(stream=data, filetype="pdf") as doc:
        return [(round(page.rect.width, 2), round(page.rect.height, 2)) for page in doc]


@pytest.fixture
def sizes_of() -> Callable[[bytes], list[tuple[float, float]]]:
    return page_sizes


@pytest.fixture
def pdf_factory() -> Callable[..., SourceFile]:
    def _factory(sizes: list[tuple[float, float]], *, name: str = "doc.pdf", **kwargs: object) -> SourceFile:
        return SourceFile(name=name, data=build_pdf(sizes, **kwargs), media_type="application/pdf")

    return _factory


@pytest.fixture
def three_pages(pdf_factory: Callable[..., SourceFile]) -> SourceFile:
    """Pages 1..3 are 200, 210 and 220 points wide so order is observable."""
    return pdf_factory([(200, 300), (210, 300), (220, 300)])


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        output_prefix="Test",
        output_dir=str(tmp_path / "out"),
        font_dir=str(tmp_path / "fonts"),
        font_base_url=None,
        builtin_font_fallback=True,
        redaction_preview_scale=1.0,
    )


@pytest.fixture
def builtin_fonts() -> FontSet:
    return FontSet(regular=PdfFont.builtin("helv"), bold=PdfFont.builtin("hebo"))
