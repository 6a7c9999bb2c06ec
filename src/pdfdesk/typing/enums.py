"""Project enums."""

from __future__ import annotations

from enum import StrEnum


class _EnumMixin(StrEnum):
    """Shared conversion helpers for user-facing enums."""

    @classmethod
    def from_str(cls, value: str) -> _EnumMixin:
        """Parse enum from string.

        Args:
            value: Raw string value.

        Raises:
            ValueError: If the value is not supported.

        Returns:
            _EnumMixin: Parsed enum value.
        """
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            message = f"Unsupported {cls.__name__} value '{value}'. Expected one of: {supported}"
            raise ValueError(message) from exc

    def to_str(self) -> str:
        """Return string representation.

        Returns:
            str: Enum string value.
        """
        return self.value


class ImageFormat(_EnumMixin):
    """Raster encodings supported for exported page images."""

    PNG = "png"
    JPEG = "jpeg"

    @property
    def extension(self) -> str:
        """File extension used for this format."""
        return "jpg" if self is ImageFormat.JPEG else "png"

    @property
    def mime_type(self) -> str:
        """MIME type used for this format."""
        return f"image/{self.value}"


class NumberPosition(_EnumMixin):
    """Anchor of the page-number label (vertical edge + horizontal alignment)."""

    BOTTOM_RIGHT = "br"
    BOTTOM_CENTER = "bc"
    BOTTOM_LEFT = "bl"
    TOP_RIGHT = "tr"
    TOP_CENTER = "tc"
    TOP_LEFT = "tl"


class SessionState(_EnumMixin):
    """Lifecycle of a redaction session."""

    EMPTY = "empty"
    LOADED = "loaded"


class OutputKind(_EnumMixin):
    """Feature that produced an exported file; drives the file name label."""

    NOTE = "note"
    TEXT = "text"
    IMAGES = "images"
    PAGES = "pages"
    COMPRESSED = "compressed"
    MERGED = "merged"
    SPLIT = "split"
    REORDERED = "reordered"
    DELETED = "deleted"
    EXTRACT = "extract"
    ROTATED = "rotated"
    NUMBERED = "numbered"
    WATERMARK = "watermark"
    CLEAN = "clean"
    REDACTED = "redacted"

    @property
    def label(self) -> str:
        """Capitalized label embedded in output file names."""
        return self.value.capitalize()
