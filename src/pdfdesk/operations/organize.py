"""Merge, split and reorder whole documents."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pdfdesk import logger
from pdfdesk.exceptions import UserInputError
from pdfdesk.operations._common import copy_into_new, processing_errors, require_pdf, require_ranges
from pdfdesk.output import pdf_export
from pdfdesk.pdf_document import PdfDocument
from pdfdesk.processing.ranges import resolve_interval, resolve_page_order
from pdfdesk.settings import get_settings
from pdfdesk.typing.enums import OutputKind

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pdfdesk.settings import Settings
    from pdfdesk.typing.models import ExportedFile, SourceFile


def merge_pdfs(sources: Sequence[SourceFile], *, settings: Settings | None = None) -> ExportedFile:
    """Concatenate every page of every input, in input order.

    Raises:
        UserInputError: If fewer than two PDFs are given.
    """
    if len(sources) < 2:  # noqa: PLR2004
        raise UserInputError(message="Select at least 2 PDFs.")
    config = settings or get_settings()

    with processing_errors("Error merging.", operation="merge"), PdfDocument.create() as out:
        for source in sources:
            with PdfDocument.load(source.data) as document:
                out.copy_pages(document, document.get_page_indices())
        page_count = out.get_page_count()
        data = out.save()

    logger.info("PDFs merged", extra={"inputs": len(sources), "pages": page_count})
    return pdf_export(data, config.output_prefix, OutputKind.MERGED)


def split_pdf(
    source: SourceFile | None,
    ranges: str | None,
    *,
    settings: Settings | None = None,
) -> list[ExportedFile]:
    """Write one PDF per range, named after the clamped page span.

    Ranges that select no page once clamped to the document are skipped.

    Args:
        source (SourceFile | None): Input PDF.
        ranges (str | None): Range text such as ``"1-3,5"``.
        settings (Settings | None): Runtime settings.

    Raises:
        UserInputError: If no range parses, or no range selects any page.

    Returns:
        list[ExportedFile]: One file per non-empty range, in range order.
    """
    pdf = require_pdf(source)
    spec = require_ranges(ranges)
    config = settings or get_settings()

    exports: list[ExportedFile] = []
    with processing_errors("Error splitting.", operation="split"), PdfDocument.load(pdf.data) as document:
        total = document.get_page_count()
        for interval in spec.intervals:
            indices = resolve_interval(interval, total)
            if not indices:
                logger.warning(
                    "Skipping range outside the document",
                    extra={"lo": interval.lo, "hi": interval.hi, "pages": total},
                )
                continue
            span = f"{indices[0] + 1}-{indices[-1] + 1}"
            exports.append(
                pdf_export(copy_into_new(document, indices), config.output_prefix, OutputKind.SPLIT, detail=span),
            )

    if not exports:
        raise UserInputError(message="No pages in the given ranges.")
    logger.info("PDF split", extra={"parts": len(exports)})
    return exports


def reorder_pages(
    source: SourceFile | None,
    order: Sequence[int],
    *,
    settings: Settings | None = None,
) -> ExportedFile:
    """Rebuild a PDF with pages in `order` (1-based, clamped; empty keeps the original order)."""
    pdf = require_pdf(source)
    config = settings or get_settings()

    with processing_errors("Error exporting.", operation="reorder"), PdfDocument.load(pdf.data) as document:
        indices = resolve_page_order(order, document.get_page_count())
        data = copy_into_new(document, indices)

    logger.info("Pages reordered", extra={"pages": len(indices)})
    return pdf_export(data, config.output_prefix, OutputKind.REORDERED)
