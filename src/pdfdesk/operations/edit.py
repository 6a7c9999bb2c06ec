"""Page-level edits: delete, extract, rotate, page numbers, watermark."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pdfdesk import logger
from pdfdesk.exceptions import UserInputError
from pdfdesk.fonts import load_fonts
from pdfdesk.operations._common import (
    INVALID_RANGES,
    copy_into_new,
    processing_errors,
    require_pdf,
    require_ranges,
)
from pdfdesk.output import pdf_export
from pdfdesk.pdf_document import PdfDocument
from pdfdesk.processing.ranges import parse_ranges, resolve_index_set, resolve_ranges
from pdfdesk.settings import get_settings
from pdfdesk.typing.enums import NumberPosition, OutputKind

if TYPE_CHECKING:
    from pdfdesk.fonts import FontSet
    from pdfdesk.settings import Settings
    from pdfdesk.typing.models import ExportedFile, PageSize, SourceFile
    from pdfdesk.typing.protocol import Color

ALLOWED_ROTATIONS = (90, 180, 270)
PAGE_NUMBER_SIZE = 10.0
WATERMARK_COLOR: Color = (0.2, 0.2, 0.2)
MIN_WATERMARK_SIZE = 16


def delete_pages(
    source: SourceFile | None,
    ranges: str | None,
    *,
    settings: Settings | None = None,
) -> ExportedFile:
    """Drop the pages selected by `ranges`.

    Raises:
        UserInputError: If no page is selected or every page would be deleted.
    """
    pdf = require_pdf(source)
    spec = require_ranges(ranges)
    config = settings or get_settings()

    with processing_errors("Error deleting.", operation="delete"), PdfDocument.load(pdf.data) as document:
        doomed = resolve_index_set(spec, document.get_page_count())
        if not doomed:
            raise UserInputError(message=INVALID_RANGES)
        keep = [index for index in document.get_page_indices() if index not in doomed]
        if not keep:
            raise UserInputError(message="Cannot delete every page.")
        data = copy_into_new(document, keep)

    logger.info("Pages deleted", extra={"deleted": len(doomed), "kept": len(keep)})
    return pdf_export(data, config.output_prefix, OutputKind.DELETED)


def extract_pages(
    source: SourceFile | None,
    ranges: str | None,
    *,
    settings: Settings | None = None,
) -> ExportedFile:
    """Copy the selected pages, in range order, into a new PDF.

    A page listed by several ranges is copied once per range.

    Raises:
        UserInputError: If the ranges select no page.
    """
    pdf = require_pdf(source)
    spec = require_ranges(ranges)
    config = settings or get_settings()

    with processing_errors("Error extracting.", operation="extract"), PdfDocument.load(pdf.data) as document:
        indices = resolve_ranges(spec, document.get_page_count())
        if not indices:
            raise UserInputError(message=INVALID_RANGES)
        data = copy_into_new(document, indices)

    logger.info("Pages extracted", extra={"pages": len(indices)})
    return pdf_export(data, config.output_prefix, OutputKind.EXTRACT)


def rotate_pages(
    source: SourceFile | None,
    ranges: str | None,
    angle: int,
    *,
    settings: Settings | None = None,
) -> ExportedFile:
    """Set the rotation of the selected pages to `angle` degrees.

    Raises:
        UserInputError: If the angle is not 90/180/270 or no range parses.
    """
    pdf = require_pdf(source)
    spec = parse_ranges(ranges)
    if angle not in ALLOWED_ROTATIONS or not spec:
        raise UserInputError(message="Angle 90/180/270 + valid ranges.")
    config = settings or get_settings()

    with processing_errors("Error rotating.", operation="rotate"), PdfDocument.load(pdf.data) as document:
        targets = resolve_index_set(spec, document.get_page_count())
        with PdfDocument.create() as out:
            for index, page in enumerate(out.copy_pages(document, document.get_page_indices())):
                if index in targets:
                    page.set_rotation(angle)
            data = out.save()

    logger.info("Pages rotated", extra={"pages": len(targets), "angle": angle})
    return pdf_export(data, config.output_prefix, OutputKind.ROTATED)


def page_number_origin(
    position: NumberPosition,
    page_size: PageSize,
    text_width: float,
    *,
    margin: float,
    size: float = PAGE_NUMBER_SIZE,
) -> tuple[float, float]:
    """Return the baseline origin of a page-number label.

    Args:
        position (NumberPosition): Label anchor.
        page_size (PageSize): Page size in points.
        text_width (float): Measured label width.
        margin (float): Distance from the page edges.
        size (float): Font size, used to keep top labels inside the page.

    Returns:
        tuple[float, float]: ``(x, y)`` in page space.
    """
    if position in {NumberPosition.BOTTOM_LEFT, NumberPosition.TOP_LEFT}:
        x = margin
    elif position in {NumberPosition.BOTTOM_CENTER, NumberPosition.TOP_CENTER}:
        x = (page_size.width - text_width) / 2
    else:
        x = page_size.width - text_width - margin

    if position in {NumberPosition.TOP_LEFT, NumberPosition.TOP_CENTER, NumberPosition.TOP_RIGHT}:
        y = page_size.height - size - margin
    else:
        y = margin
    return x, y


def add_page_numbers(
    source: SourceFile | None,
    *,
    position: NumberPosition = NumberPosition.BOTTOM_RIGHT,
    margin: float = 24.0,
    settings: Settings | None = None,
    fonts: FontSet | None = None,
) -> ExportedFile:
    """Stamp ``"i / n"`` on every page."""
    pdf = require_pdf(source)
    config = settings or get_settings()

    with processing_errors("Error numbering.", operation="number"), PdfDocument.load(pdf.data) as document:
        font = (fonts or load_fonts(config)).regular
        with PdfDocument.create() as out:
            pages = out.copy_pages(document, document.get_page_indices())
            for number, page in enumerate(pages, start=1):
                label = f"{number} / {len(pages)}"
                label_width = font.width_of_text_at_size(label, PAGE_NUMBER_SIZE)
                x, y = page_number_origin(position, page.get_size(), label_width, margin=margin)
                page.draw_text(label, x=x, y=y, size=PAGE_NUMBER_SIZE, font=font)
            data = out.save()

    logger.info("Page numbers added", extra={"pages": len(pages), "position": position.value})
    return pdf_export(data, config.output_prefix, OutputKind.NUMBERED)


def add_watermark(  # noqa: PLR0913
    source: SourceFile | None,
    *,
    text: str | None = None,
    size: int = 64,
    angle: float = 45.0,
    opacity: float = 0.15,
    settings: Settings | None = None,
    fonts: FontSet | None = None,
) -> ExportedFile:
    """Draw upper-cased bold text across the middle of every page.

    Args:
        source (SourceFile | None): Input PDF.
        text (str | None): Watermark text, "CONFIDENTIAL" when empty.
        size (int): Font size, at least 16.
        angle (float): Counter-clockwise rotation around the text origin.
        opacity (float): Fill opacity, clamped to ``[0, 1]``.
        settings (Settings | None): Runtime settings.
        fonts (FontSet | None): Preloaded fonts.

    Returns:
        ExportedFile: The watermarked PDF.
    """
    pdf = require_pdf(source)
    config = settings or get_settings()
    label = (text or "CONFIDENTIAL").upper()
    font_size = max(MIN_WATERMARK_SIZE, size)
    alpha = max(0.0, min(1.0, opacity))

    with processing_errors("Error watermarking.", operation="watermark"), PdfDocument.load(pdf.data) as document:
        font = (fonts or load_fonts(config)).bold
        label_width = font.width_of_text_at_size(label, font_size)
        with PdfDocument.create() as out:
            for page in out.copy_pages(document, document.get_page_indices()):
                page_size = page.get_size()
                page.draw_text(
                    label,
                    x=(page_size.width - label_width) / 2,
                    y=page_size.height / 2,
                    size=font_size,
                    font=font,
                    color=WATERMARK_COLOR,
                    opacity=alpha,
                    rotate=angle,
                )
            data = out.save()

    logger.info("Watermark added", extra={"text": label, "size": font_size, "opacity": alpha})
    return pdf_export(data, config.output_prefix, OutputKind.WATERMARK)
