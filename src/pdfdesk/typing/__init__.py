"""Typing-centric domain modules."""

from pdfdesk.typing.enums import ImageFormat, NumberPosition, OutputKind, SessionState
from pdfdesk.typing.models import (
    ExportedFile,
    GlyphRun,
    PageInterval,
    PageRect,
    PageSize,
    RangeSpec,
    RasterRect,
    RenderedSurface,
    RenderObservation,
    SourceFile,
    WrappedLine,
)
from pdfdesk.typing.protocol import Color, DocumentHandle, MeasuredFont, PageSurface, RasterRenderer

__all__ = [
    "Color",
    "DocumentHandle",
    "ExportedFile",
    "GlyphRun",
    "ImageFormat",
    "MeasuredFont",
    "NumberPosition",
    "OutputKind",
    "PageInterval",
    "PageRect",
    "PageSize",
    "PageSurface",
    "RangeSpec",
    "RasterRect",
    "RasterRenderer",
    "RenderObservation",
    "RenderedSurface",
    "SessionState",
    "SourceFile",
    "WrappedLine",
]
