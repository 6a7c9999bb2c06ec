"""Capability interfaces consumed by the layout, range and redaction core."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pdfdesk.typing.models.geometry import PageRect, PageSize, RenderedSurface

Color = tuple[float, float, float]


@runtime_checkable
class MeasuredFont(Protocol):
    """Font handle able to measure text and report glyph coverage."""

    def width_of_text_at_size(self, text: str, size: float) -> float:
        """Return the advance width of `text` at `size` points.

        Args:
            text: Text measured as one unit.
            size: Font size in points.

        Returns:
            float: Width in points.
        """

    def has_glyph_for_unicode(self, codepoint: int) -> bool:
        """Return whether the font can render `codepoint`.

        Args:
            codepoint: Unicode scalar value.

        Returns:
            bool: True when a glyph exists.
        """


@runtime_checkable
class PageSurface(Protocol):
    """Drawable page in bottom-left origin coordinates."""

    def get_size(self) -> PageSize:
        """Return the native page size."""

    def draw_text(
        self,
        text: str,
        *,
        x: float,
        y: float,
        size: float,
        font: MeasuredFont,
        color: Color = (0.0, 0.0, 0.0),
        opacity: float = 1.0,
        rotate: float = 0.0,
    ) -> None:
        """Draw `text` with its baseline starting at (`x`, `y`)."""

    def draw_rectangle(self, rect: PageRect, *, color: Color = (0.0, 0.0, 0.0)) -> None:
        """Paint an opaque filled rectangle."""

    def set_rotation(self, degrees: int) -> None:
        """Set the absolute page rotation."""


@runtime_checkable
class DocumentHandle(Protocol):
    """Paginated document able to copy pages from another document."""

    def get_page_count(self) -> int:
        """Return the number of pages."""

    def get_page_indices(self) -> list[int]:
        """Return zero-based page indices in document order."""

    def copy_pages(self, source: DocumentHandle, indices: Sequence[int]) -> list[PageSurface]:
        """Append copies of `source` pages in the given order and return them."""

    def add_page(self, size: PageSize) -> PageSurface:
        """Append a blank page."""


@runtime_checkable
class RasterRenderer(Protocol):
    """Renders a page to a pixel surface."""

    def render(self, page_number: int, scale: float) -> RenderedSurface:
        """Render the 1-based page at `scale` pixels per point."""
