"""Geometry models for the raster preview and the vector page.

Two coordinate systems coexist and are kept as distinct types:

* `RasterRect` lives on a rendered surface: origin top-left, y grows downward,
  units are pixels of that surface.
* `PageRect` lives on the PDF page: origin bottom-left, y grows upward,
  units are points.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PageSize(BaseModel):
    """Native vector size of a page in points."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    width: float
    height: float


class RenderObservation(BaseModel):
    """Surface size recorded the last time a page was rendered."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    width: float
    height: float


class RasterRect(BaseModel):
    """Rectangle on a raster surface (top-left origin, y down)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    x: float
    y: float
    w: float
    h: float

    @classmethod
    def from_drag(cls, start: tuple[float, float], end: tuple[float, float]) -> RasterRect:
        """Normalize a pointer drag into a rectangle with non-negative extents.

        Args:
            start: Pointer position where the drag began.
            end: Pointer position where the drag ended.

        Returns:
            RasterRect: Rectangle anchored at the upper-left drag corner.
        """
        return cls(
            x=min(start[0], end[0]),
            y=min(start[1], end[1]),
            w=abs(start[0] - end[0]),
            h=abs(start[1] - end[1]),
        )


class PageRect(BaseModel):
    """Rectangle in page space (bottom-left origin, y up)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    x: float = Field(ge=0)
    y: float = Field(ge=0)
    width: float = Field(ge=0)
    height: float = Field(ge=0)


class RenderedSurface(BaseModel):
    """Raster rendering of one page."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    page_number: int = Field(ge=1)
    width: int = Field(ge=1)
    height: int = Field(ge=1)
    scale: float = Field(gt=0)
    mime_type: str | None = None
    data: bytes | None = Field(default=None, repr=False)
