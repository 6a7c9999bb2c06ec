"""Rasterizing conversions: PDF to page images, and compression by rasterizing."""

from __future__ import annotations

import io
import zipfile
from typing import TYPE_CHECKING

from pdfdesk import logger
from pdfdesk.operations._common import processing_errors, require_pdf
from pdfdesk.output import ZIP_MEDIA_TYPE, build_output_name, pdf_export
from pdfdesk.pdf_document import PdfDocument, PdfRenderer
from pdfdesk.settings import get_settings
from pdfdesk.typing.enums import ImageFormat, OutputKind
from pdfdesk.typing.models import ExportedFile, PageRect, PageSize

if TYPE_CHECKING:
    from pdfdesk.settings import Settings
    from pdfdesk.typing.models import SourceFile

# Pages are rendered at twice the requested scale so scale 1 stays crisp on screen.
BASE_ZOOM = 2.0
MIN_JPEG_QUALITY = 0.3
MAX_JPEG_QUALITY = 0.95


def clamp_quality(quality: float) -> float:
    return min(MAX_JPEG_QUALITY, max(MIN_JPEG_QUALITY, quality))


def pdf_to_images(
    source: SourceFile | None,
    *,
    image_format: ImageFormat = ImageFormat.PNG,
    scale: float = 1.0,
    settings: Settings | None = None,
) -> ExportedFile:
    """Render every page into a ZIP of ``page_NNN.png|jpg`` files.

    Args:
        source (SourceFile | None): Input PDF.
        image_format (ImageFormat): Encoding of each page image.
        scale (float): User scale; pages render at ``2 * scale``.
        settings (Settings | None): Runtime settings.

    Returns:
        ExportedFile: The ZIP archive.
    """
    pdf = require_pdf(source)
    config = settings or get_settings()

    with processing_errors("Error exporting images.", operation="pdf2img"), PdfDocument.load(pdf.data) as document:
        renderer = PdfRenderer(document)
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for page_number in range(1, document.get_page_count() + 1):
                surface = renderer.render_encoded(page_number, BASE_ZOOM * scale, image_format)
                archive.writestr(f"page_{page_number:03d}.{image_format.extension}", surface.data or b"")
        page_count = document.get_page_count()

    logger.info("Pages exported as images", extra={"pages": page_count, "format": image_format.value})
    return ExportedFile(
        filename=build_output_name(config.output_prefix, OutputKind.PAGES, "zip"),
        media_type=ZIP_MEDIA_TYPE,
        data=buffer.getvalue(),
    )


def compress_pdf(
    source: SourceFile | None,
    *,
    scale: float = 1.0,
    quality: float = 0.8,
    image_format: ImageFormat = ImageFormat.JPEG,
    settings: Settings | None = None,
) -> ExportedFile:
    """Rebuild a PDF from page images.

    Text becomes pixels; each output page is as large (in points) as its
    image is in pixels.

    Args:
        source (SourceFile | None): Input PDF.
        scale (float): User scale; pages render at ``2 * scale``.
        quality (float): JPEG quality in ``[0.3, 0.95]`` (clamped).
        image_format (ImageFormat): Page image encoding.
        settings (Settings | None): Runtime settings.

    Returns:
        ExportedFile: The rasterized PDF.
    """
    pdf = require_pdf(source)
    config = settings or get_settings()
    jpeg_quality = round(clamp_quality(quality) * 100)

    with processing_errors("Error compressing.", operation="compress"), PdfDocument.load(pdf.data) as document:
        renderer = PdfRenderer(document)
        with PdfDocument.create() as out:
            for page_number in range(1, document.get_page_count() + 1):
                surface = renderer.render_encoded(
                    page_number,
                    BASE_ZOOM * scale,
                    image_format,
                    jpeg_quality=jpeg_quality,
                )
                page = out.add_page(PageSize(width=surface.width, height=surface.height))
                page.draw_image(
                    surface.data or b"",
                    PageRect(x=0, y=0, width=surface.width, height=surface.height),
                )
            data = out.save()

    logger.info(
        "PDF compressed",
        extra={"input_bytes": len(pdf.data), "output_bytes": len(data), "quality": jpeg_quality},
    )
    return pdf_export(data, config.output_prefix, OutputKind.COMPRESSED)
