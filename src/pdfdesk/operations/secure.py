"""Metadata stripping and box redaction."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pdfdesk import logger
from pdfdesk.exceptions import SessionStateError
from pdfdesk.operations._common import processing_errors, require_pdf
from pdfdesk.output import pdf_export
from pdfdesk.pdf_document import PdfDocument, PdfRenderer
from pdfdesk.processing.redaction import RedactionSession
from pdfdesk.settings import get_settings
from pdfdesk.typing.enums import OutputKind, SessionState

if TYPE_CHECKING:
    from pdfdesk.settings import Settings
    from pdfdesk.typing.models import ExportedFile, RasterRect, RenderedSurface, SourceFile
    from pdfdesk.typing.protocol import Color

REDACTION_COLOR: Color = (0.0, 0.0, 0.0)


def strip_metadata(source: SourceFile | None, *, settings: Settings | None = None) -> ExportedFile:
    """Copy every page into a fresh document without info or XMP metadata."""
    pdf = require_pdf(source)
    config = settings or get_settings()

    with processing_errors("Error cleaning.", operation="strip"), PdfDocument.load(pdf.data) as document:
        with PdfDocument.create() as out:
            out.copy_pages(document, document.get_page_indices())
            out.clear_metadata()
            data = out.save()
        page_count = document.get_page_count()

    logger.info("Metadata stripped", extra={"pages": page_count})
    return pdf_export(data, config.output_prefix, OutputKind.CLEAN)


class RedactionWorkspace:
    """Interactive redaction over one loaded PDF.

    Pages are previewed at `preview_scale`; boxes are drawn in preview pixels
    and mapped onto each page when exporting. The exported boxes only cover
    content visually: the text underneath is still present in the file.
    """

    def __init__(self, *, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.session = RedactionSession()
        self._source: bytes | None = None
        self._document: PdfDocument | None = None

    @property
    def is_loaded(self) -> bool:
        return self.session.state is SessionState.LOADED

    def open(self, source: SourceFile | None) -> RenderedSurface:
        """Load a PDF, reset all boxes and render page 1.

        Raises:
            UserInputError: If no PDF is given.
            OperationError: If the PDF cannot be read.
        """
        pdf = require_pdf(source)
        document = PdfDocument.load(pdf.data)
        self.close()
        self._source = pdf.data
        self._document = document
        self.session.load(document.get_page_count())
        return self.render_current()

    def close(self) -> None:
        if self._document is not None:
            self._document.close()
            self._document = None

    def render_current(self, scale: float | None = None) -> RenderedSurface:
        """Render the current page and record its surface size.

        Args:
            scale (float | None): Preview zoom; `Settings.redaction_preview_scale` when omitted.

        Raises:
            SessionStateError: If no document is loaded.

        Returns:
            RenderedSurface: The rendered page.
        """
        if self._document is None:
            raise SessionStateError
        zoom = scale or self.settings.redaction_preview_scale
        surface = PdfRenderer(self._document).render(self.session.current_page, zoom)
        self.session.record_render(surface.page_number, surface.width, surface.height)
        return surface

    def previous_page(self) -> RenderedSurface:
        self.session.previous_page()
        return self.render_current()

    def next_page(self) -> RenderedSurface:
        self.session.next_page()
        return self.render_current()

    def go_to(self, page_number: int, *, scale: float | None = None) -> RenderedSurface:
        self.session.go_to(page_number)
        return self.render_current(scale)

    def draw(self, start: tuple[float, float], end: tuple[float, float]) -> RasterRect:
        """Record a pointer drag on the current page."""
        return self.session.add_drag(start, end)

    def clear(self) -> None:
        self.session.clear_page()

    def export(self) -> ExportedFile:
        """Paint every box onto a copy of the document.

        The session stays open so more boxes can be drawn and exported again.

        Raises:
            SessionStateError: If no document is loaded.

        Returns:
            ExportedFile: The redacted PDF.
        """
        if self._source is None or not self.is_loaded:
            raise SessionStateError

        with processing_errors("Error applying redactions.", operation="redact"), PdfDocument.load(
            self._source,
        ) as document:
            with PdfDocument.create() as out:
                pages = out.copy_pages(document, document.get_page_indices())
                plan = self.session.plan_export(lambda page_number: pages[page_number - 1].get_size())
                for page_number, rects in plan.items():
                    for rect in rects:
                        pages[page_number - 1].draw_rectangle(rect, color=REDACTION_COLOR)
                data = out.save()

        logger.info(
            "Redactions applied",
            extra={"pages": len(plan), "boxes": sum(len(rects) for rects in plan.values())},
        )
        return pdf_export(data, self.settings.output_prefix, OutputKind.REDACTED)
