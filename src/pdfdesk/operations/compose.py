"""Build new PDFs from notes, text files and images."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from pdfdesk import logger
from pdfdesk.exceptions import UserInputError
from pdfdesk.fonts import load_fonts
from pdfdesk.operations._common import processing_errors
from pdfdesk.output import pdf_export
from pdfdesk.pdf_document import A4, PdfDocument, image_size
from pdfdesk.processing.layout import draw_wrapped_line, wrap_unicode
from pdfdesk.settings import get_settings
from pdfdesk.typing.enums import OutputKind
from pdfdesk.typing.models import PageRect

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pdfdesk.fonts import FontSet, PdfFont
    from pdfdesk.pdf_document import PdfPage
    from pdfdesk.settings import Settings
    from pdfdesk.typing.models import ExportedFile, SourceFile
    from pdfdesk.typing.protocol import Color

MARGIN = 50.0
BOTTOM_LIMIT = 60.0
BODY_SIZE = 12.0
BODY_LEADING = 16.0
PARAGRAPH_GAP = 18.0
TITLE_COLOR: Color = (0.1, 0.1, 0.1)
BODY_COLOR: Color = (0.2, 0.2, 0.2)
IMAGE_MARGIN = 30.0

_PARAGRAPH_BREAK = re.compile(r"\n{2,}")
_MARKDOWN_HEADING = re.compile(r"^#.*$", re.MULTILINE)
_MARKDOWN_BOLD = re.compile(r"\*\*(.*?)\*\*")


class TextFlow:
    """Flow headings and paragraphs down A4 pages, adding pages as needed."""

    def __init__(self, document: PdfDocument, fonts: FontSet) -> None:
        self.document = document
        self.fonts = fonts
        self.page: PdfPage | None = None
        self.cursor = 0.0

    @property
    def text_width(self) -> float:
        return A4.width - 2 * MARGIN

    def new_section(self) -> None:
        """Start a fresh page with the cursor just below the top margin."""
        self.page = self.document.add_page(A4)
        self.cursor = A4.height - MARGIN - 20

    def _continue_on_new_page(self) -> PdfPage:
        self.page = self.document.add_page(A4)
        self.cursor = A4.height - MARGIN
        return self.page

    def heading(self, text: str, *, size: float, gap: float, font: PdfFont | None = None) -> None:
        page = self.page or self._continue_on_new_page()
        page.draw_text(text, x=MARGIN, y=self.cursor, size=size, font=font or self.fonts.bold, color=TITLE_COLOR)
        self.cursor -= gap

    def paragraph(self, text: str) -> None:
        """Wrap and draw one paragraph, breaking pages below the bottom limit.

        Baselines follow the flow cursor, which restarts on each new page.
        """
        fonts = self.fonts
        lines = wrap_unicode(text, fonts.regular, fonts.symbol, BODY_SIZE, self.text_width, leading=BODY_LEADING)
        page = self.page or self._continue_on_new_page()
        for line in lines:
            if self.cursor < BOTTOM_LIMIT:
                page = self._continue_on_new_page()
            draw_wrapped_line(page, line, x=MARGIN, y=self.cursor, size=BODY_SIZE, color=BODY_COLOR)
            self.cursor -= BODY_LEADING

        self.cursor -= PARAGRAPH_GAP


def split_paragraphs(text: str) -> list[str]:
    """Split on blank lines and join the remaining single newlines with spaces."""
    return [" ".join(block.split("\n")) for block in _PARAGRAPH_BREAK.split(text)]


def strip_markdown(block: str) -> str:
    """Drop heading lines and bold markers from a markdown block."""
    return _MARKDOWN_BOLD.sub(r"\1", _MARKDOWN_HEADING.sub("", block))


def create_note_pdf(
    text: str,
    *,
    title: str | None = None,
    settings: Settings | None = None,
    fonts: FontSet | None = None,
) -> ExportedFile:
    """Typeset a note with a bold title.

    Args:
        text (str): Note body; blank lines separate paragraphs.
        title (str | None): Title line, "My Note" when empty.
        settings (Settings | None): Runtime settings.
        fonts (FontSet | None): Preloaded fonts.

    Raises:
        UserInputError: If the note is empty.

    Returns:
        ExportedFile: The note PDF.
    """
    body = text.strip()
    if not body:
        raise UserInputError(message="Type something first.")
    config = settings or get_settings()

    with processing_errors("Error creating PDF.", operation="note"):
        font_set = fonts or load_fonts(config)
        with PdfDocument.create() as document:
            flow = TextFlow(document, font_set)
            flow.new_section()
            flow.heading(title or "My Note", size=18, gap=28)
            for paragraph in split_paragraphs(body):
                flow.paragraph(paragraph)
            data = document.save()
            page_count = document.get_page_count()

    logger.info("Note exported", extra={"pages": page_count})
    return pdf_export(data, config.output_prefix, OutputKind.NOTE)


def text_files_to_pdf(
    files: Sequence[SourceFile],
    *,
    settings: Settings | None = None,
    fonts: FontSet | None = None,
) -> ExportedFile:
    """Typeset .txt/.md files, one section per file headed by its name.

    Raises:
        UserInputError: If no file is given.
    """
    if not files:
        raise UserInputError(message="Choose .txt or .md files.")
    config = settings or get_settings()

    with processing_errors("Error creating PDF.", operation="text"):
        font_set = fonts or load_fonts(config)
        with PdfDocument.create() as document:
            flow = TextFlow(document, font_set)
            for source in files:
                text = source.data.decode("utf-8", errors="replace").replace("\r\n", "\n")
                flow.new_section()
                flow.heading(source.name, size=16, gap=24)
                for block in _PARAGRAPH_BREAK.split(text):
                    flow.paragraph(" ".join(strip_markdown(block).split("\n")))
            data = document.save()

    logger.info("Text files exported", extra={"files": len(files)})
    return pdf_export(data, config.output_prefix, OutputKind.TEXT)


def _is_supported_image(data: bytes) -> bool:
    return data.startswith((b"\x89PNG\r\n\x1a\n", b"\xff\xd8\xff"))


def fit_image(width: float, height: float, *, page: PageRect | None = None) -> PageRect:
    """Scale an image to fit A4 minus a margin and center it.

    Args:
        width (float): Image width in pixels.
        height (float): Image height in pixels.
        page (PageRect | None): Page area; A4 when omitted.

    Returns:
        PageRect: Placement in page space.
    """
    area = page or PageRect(x=0, y=0, width=A4.width, height=A4.height)
    ratio = min((area.width - 2 * IMAGE_MARGIN) / width, (area.height - 2 * IMAGE_MARGIN) / height)
    fitted_w = width * ratio
    fitted_h = height * ratio
    return PageRect(
        x=(area.width - fitted_w) / 2,
        y=(area.height - fitted_h) / 2,
        width=fitted_w,
        height=fitted_h,
    )


def images_to_pdf(images: Sequence[SourceFile], *, settings: Settings | None = None) -> ExportedFile:
    """Place each PNG/JPEG image centered on its own A4 page.

    Raises:
        UserInputError: If no image is given or an image is not PNG/JPEG.
    """
    if not images:
        raise UserInputError(message="Choose images.")
    unsupported = [image.name for image in images if not _is_supported_image(image.data)]
    if unsupported:
        raise UserInputError(message=f"Only PNG and JPEG images are supported: {', '.join(unsupported)}")
    config = settings or get_settings()

    with processing_errors("Error creating PDF.", operation="images"), PdfDocument.create() as document:
        for image in images:
            width, height = image_size(image.data)
            page = document.add_page(A4)
            page.draw_image(image.data, fit_image(width, height))
        data = document.save()

    logger.info("Images exported", extra={"images": len(images)})
    return pdf_export(data, config.output_prefix, OutputKind.IMAGES)
