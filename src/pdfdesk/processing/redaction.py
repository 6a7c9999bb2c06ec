"""Redaction session state and raster-to-page coordinate mapping.

Boxes are drawn on a rendered preview whose pixel size depends on the zoom
used at the time. Each page remembers the surface size it was last rendered
at, so boxes drawn at one zoom still land correctly after the preview has been
redrawn at another.

Redaction here is visual: an opaque rectangle is painted over the page
content. Text and images underneath stay in the content stream and can still
be extracted from the exported file.
"""

from __future__ import annotations

import math
import threading
from typing import TYPE_CHECKING

from pdfdesk import logger
from pdfdesk.exceptions import SessionStateError
from pdfdesk.typing.enums import SessionState
from pdfdesk.typing.models import PageRect, PageSize, RasterRect, RenderObservation

if TYPE_CHECKING:
    from collections.abc import Callable


def map_annotation(
    rect: RasterRect,
    observation: RenderObservation,
    page_size: PageSize,
) -> PageRect | None:
    """Convert a raster rectangle into page space.

    The vertical flip uses the rectangle's bottom edge (``y + h``) because the
    raster y axis points down while the page y axis points up.

    Args:
        rect (RasterRect): Rectangle in surface pixels.
        observation (RenderObservation): Surface size the rectangle was drawn on.
        page_size (PageSize): Native page size in points.

    Returns:
        PageRect | None: Rectangle in points, or None when the surface is empty
            or any value is not finite.
    """
    surface = (observation.width, observation.height)
    if not all(math.isfinite(side) and side > 0 for side in surface):
        return None
    scale_x = page_size.width / observation.width
    scale_y = page_size.height / observation.height

    raw = (
        rect.x * scale_x,
        (observation.height - rect.y - rect.h) * scale_y,
        rect.w * scale_x,
        rect.h * scale_y,
    )
    if not all(math.isfinite(value) for value in raw):
        return None
    x, y, width, height = (max(0.0, value) for value in raw)
    return PageRect(x=x, y=y, width=width, height=height)


class RedactionSession:
    """Per-document annotation state driven by navigation and pointer input."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = SessionState.EMPTY
        self._page_count = 0
        self._current_page = 0
        self._annotations: dict[int, list[RasterRect]] = {}
        self._observations: dict[int, RenderObservation] = {}
        self._active_surface: RenderObservation | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def page_count(self) -> int:
        return self._page_count

    @property
    def current_page(self) -> int:
        """1-based page currently shown, 0 while empty."""
        return self._current_page

    def load(self, page_count: int) -> None:
        """Start a fresh session for a document with `page_count` pages.

        Args:
            page_count (int): Number of pages in the loaded document.

        Raises:
            SessionStateError: If the document has no pages.
        """
        if page_count < 1:
            raise SessionStateError(message="The PDF has no pages.")
        with self._lock:
            self._state = SessionState.LOADED
            self._page_count = page_count
            self._current_page = 1
            self._annotations = {}
            self._observations = {}
            self._active_surface = None

    def _require_loaded(self) -> None:
        if self._state is not SessionState.LOADED:
            raise SessionStateError

    def go_to(self, page_number: int) -> int:
        """Jump to a page, clamped into range; no-op while empty."""
        if self._state is SessionState.LOADED:
            self._current_page = min(self._page_count, max(1, page_number))
        return self._current_page

    def previous_page(self) -> int:
        return self.go_to(self._current_page - 1)

    def next_page(self) -> int:
        return self.go_to(self._current_page + 1)

    def record_render(self, page_number: int, width: float, height: float) -> RenderObservation:
        """Remember the surface size a page was just rendered at.

        Args:
            page_number (int): 1-based page that was rendered.
            width (float): Surface width in pixels.
            height (float): Surface height in pixels.

        Returns:
            RenderObservation: Stored observation.
        """
        self._require_loaded()
        observation = RenderObservation(width=width, height=height)
        with self._lock:
            self._observations[page_number] = observation
            self._active_surface = observation
        return observation

    def add_annotation(self, rect: RasterRect) -> None:
        """Append a rectangle to the current page.

        Raises:
            SessionStateError: If no document is loaded.
        """
        self._require_loaded()
        with self._lock:
            self._annotations.setdefault(self._current_page, []).append(rect)

    def add_drag(self, start: tuple[float, float], end: tuple[float, float]) -> RasterRect:
        """Record a completed pointer drag on the current page."""
        rect = RasterRect.from_drag(start, end)
        self.add_annotation(rect)
        return rect

    def clear_page(self) -> None:
        """Drop every rectangle drawn on the current page."""
        self._require_loaded()
        with self._lock:
            self._annotations[self._current_page] = []

    def annotations_for(self, page_number: int) -> list[RasterRect]:
        with self._lock:
            return list(self._annotations.get(page_number, []))

    def observation_for(self, page_number: int) -> RenderObservation:
        """Return the surface size to map a page's rectangles from.

        Pages never rendered fall back to the active surface, floored at 1x1.
        """
        with self._lock:
            observation = self._observations.get(page_number)
            active = self._active_surface
        if observation is not None:
            return observation
        width = active.width if active else 1.0
        height = active.height if active else 1.0
        return RenderObservation(width=max(1.0, width), height=max(1.0, height))

    def snapshot(self) -> dict[int, list[RasterRect]]:
        """Copy the annotation map so export is isolated from further drawing."""
        with self._lock:
            return {page: list(rects) for page, rects in self._annotations.items() if rects}

    def plan_export(self, page_size_for: Callable[[int], PageSize]) -> dict[int, list[PageRect]]:
        """Map every annotated page's rectangles into page space.

        Args:
            page_size_for (Callable[[int], PageSize]): Native size lookup by 1-based page.

        Returns:
            dict[int, list[PageRect]]: Rectangles to paint, keyed by 1-based page.
        """
        self._require_loaded()
        plan: dict[int, list[PageRect]] = {}
        for page_number, rects in sorted(self.snapshot().items()):
            if not 1 <= page_number <= self._page_count:
                continue
            observation = self.observation_for(page_number)
            page_size = page_size_for(page_number)
            mapped: list[PageRect] = []
            for rect in rects:
                page_rect = map_annotation(rect, observation, page_size)
                if page_rect is None:
                    logger.warning(
                        "Skipping non-finite redaction box",
                        extra={"page_number": page_number, "rect": rect.model_dump()},
                    )
                    continue
                mapped.append(page_rect)
            if mapped:
                plan[page_number] = mapped
        return plan
