"""Core domain model exports."""

from pdfdesk.typing.models.documents import ExportedFile, SourceFile
from pdfdesk.typing.models.geometry import (
    PageRect,
    PageSize,
    RasterRect,
    RenderedSurface,
    RenderObservation,
)
from pdfdesk.typing.models.layout import GlyphRun, WrappedLine
from pdfdesk.typing.models.ranges import PageInterval, RangeSpec

__all__ = [
    "ExportedFile",
    "GlyphRun",
    "PageInterval",
    "PageRect",
    "PageSize",
    "RangeSpec",
    "RasterRect",
    "RenderObservation",
    "RenderedSurface",
    "SourceFile",
    "WrappedLine",
]
