"""PyMuPDF adapters for the page, document and raster render capabilities.

PyMuPDF addresses pages from the top-left corner with y pointing down. The
adapters accept bottom-left page coordinates and flip them on the way in, so
callers only ever deal with one page coordinate system.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Self

import fitz

from pdfdesk.exceptions import OperationError
from pdfdesk.typing.enums import ImageFormat
from pdfdesk.typing.models import PageRect, PageSize, RenderedSurface

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    from pdfdesk.fonts import PdfFont
    from pdfdesk.typing.protocol import Color

A4 = PageSize(width=595.28, height=841.89)


class PdfPage:
    """Drawable page backed by a `fitz.Page`."""

    def __init__(self, page: fitz.Page) -> None:
        self.page = page

    def get_size(self) -> PageSize:
        rect = self.page.rect
        return PageSize(width=rect.width, height=rect.height)

    def _to_fitz_point(self, x: float, y: float) -> fitz.Point:
        return fitz.Point(x, self.page.rect.height - y)

    def draw_text(  # noqa: PLR0913
        self,
        text: str,
        *,
        x: float,
        y: float,
        size: float,
        font: PdfFont,
        color: Color = (0.0, 0.0, 0.0),
        opacity: float = 1.0,
        rotate: float = 0.0,
    ) -> None:
        """Draw `text` with its baseline origin at (`x`, `y`).

        Args:
            text: Text to draw.
            x: Baseline origin, points from the left edge.
            y: Baseline origin, points from the bottom edge.
            size: Font size in points.
            font: Font used to draw.
            color: RGB fill, components in ``[0, 1]``.
            opacity: Fill opacity in ``[0, 1]``.
            rotate: Counter-clockwise rotation in degrees around the origin.
        """
        if not text:
            return
        origin = self._to_fitz_point(x, y) * self.page.derotation_matrix
        page_rotation = self.page.rotation

        # TextWriter works on the unrotated page; text is turned back by the page rotation.
        if page_rotation:
            self.page.set_rotation(0)
        try:
            writer = fitz.TextWriter(self.page.rect)
            writer.append(origin, text, font=font.font, fontsize=size)
            writer.write_text(
                self.page,
                color=color,
                opacity=opacity,
                morph=(origin, fitz.Matrix(rotate + page_rotation)),
            )
        finally:
            if page_rotation:
                self.page.set_rotation(page_rotation)

    def draw_rectangle(self, rect: PageRect, *, color: Color = (0.0, 0.0, 0.0)) -> None:
        """Paint an opaque filled rectangle given in bottom-left coordinates."""
        height = self.page.rect.height
        target = fitz.Rect(rect.x, height - rect.y - rect.height, rect.x + rect.width, height - rect.y)
        self.page.draw_rect(target * self.page.derotation_matrix, color=None, fill=color, width=0, overlay=True)

    def draw_image(self, data: bytes, rect: PageRect) -> None:
        """Place an encoded image inside `rect`."""
        height = self.page.rect.height
        target = fitz.Rect(rect.x, height - rect.y - rect.height, rect.x + rect.width, height - rect.y)
        self.page.insert_image(target * self.page.derotation_matrix, stream=data, keep_proportion=False)

    def set_rotation(self, degrees: int) -> None:
        self.page.set_rotation(degrees)


class PdfDocument:
    """Paginated document backed by a `fitz.Document`.

    Use as a context manager so the underlying document is closed.
    """

    def __init__(self, doc: fitz.Document) -> None:
        self.doc = doc

    @classmethod
    def create(cls) -> PdfDocument:
        return cls(fitz.open())

    @classmethod
    def load(cls, data: bytes) -> PdfDocument:
        """Open a PDF from bytes.

        Raises:
            OperationError: If the bytes are not a readable PDF.
        """
        try:
            return cls(fitz.open(stream=data, filetype="pdf"))
        except Exception as exc:
            raise OperationError(message="Could not read the PDF.") from exc

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self.doc.close()

    def get_page_count(self) -> int:
        return self.doc.page_count

    def get_page_indices(self) -> list[int]:
        return list(range(self.doc.page_count))

    def get_page(self, index: int) -> PdfPage:
        """Return the page at zero-based `index`."""
        return PdfPage(self.doc.load_page(index))

    def pages(self) -> list[PdfPage]:
        return [self.get_page(index) for index in self.get_page_indices()]

    def copy_pages(self, source: PdfDocument, indices: Sequence[int]) -> list[PdfPage]:
        """Append copies of `source` pages in the given order.

        The same source page may appear several times in `indices`.

        Args:
            source (PdfDocument): Document to copy from.
            indices (Sequence[int]): Zero-based source indices.

        Returns:
            list[PdfPage]: The appended pages, in order.
        """
        first_new = self.doc.page_count
        for index in indices:
            self.doc.insert_pdf(source.doc, from_page=index, to_page=index)
        return [self.get_page(index) for index in range(first_new, self.doc.page_count)]

    def add_page(self, size: PageSize = A4) -> PdfPage:
        return PdfPage(self.doc.new_page(width=size.width, height=size.height))

    def clear_metadata(self) -> None:
        """Remove document info and XMP metadata."""
        self.doc.set_metadata({})
        self.doc.del_xml_metadata()

    def save(self) -> bytes:
        """Serialize the document, dropping unused objects."""
        return self.doc.tobytes(garbage=3, deflate=True)


class PdfRenderer:
    """Render pages of an open document to pixel surfaces."""

    def __init__(self, document: PdfDocument) -> None:
        self.document = document

    def _pixmap(self, page_number: int, scale: float) -> fitz.Pixmap:
        page = self.document.doc.load_page(page_number - 1)
        return page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)

    def render(self, page_number: int, scale: float) -> RenderedSurface:
        """Render a 1-based page without encoding it."""
        pix = self._pixmap(page_number, scale)
        return RenderedSurface(page_number=page_number, width=pix.width, height=pix.height, scale=scale)

    def render_encoded(
        self,
        page_number: int,
        scale: float,
        image_format: ImageFormat,
        *,
        jpeg_quality: int = 92,
    ) -> RenderedSurface:
        """Render a 1-based page and encode it as PNG or JPEG."""
        pix = self._pixmap(page_number, scale)
        if image_format is ImageFormat.JPEG:
            data = pix.tobytes(output="jpeg", jpg_quality=jpeg_quality)
        else:
            data = pix.tobytes(output="png")
        return RenderedSurface(
            page_number=page_number,
            width=pix.width,
            height=pix.height,
            scale=scale,
            mime_type=image_format.mime_type,
            data=data,
        )


def image_size(data: bytes) -> tuple[int, int]:
    """Return the pixel size of an encoded image.

    Raises:
        OperationError: If the bytes are not a supported image.
    """
    try:
        pix = fitz.Pixmap(data)
    except Exception as exc:
        raise OperationError(message="Unsupported image.") from exc
    return pix.width, pix.height
