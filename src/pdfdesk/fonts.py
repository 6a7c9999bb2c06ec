"""Font handles and font loading.

Three faces are used: a regular text face, a bold face for titles and
watermarks, and an optional symbol face used for code points the regular face
lacks. Font files are looked up in `Settings.font_dir` first and downloaded
from `Settings.font_base_url` otherwise.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING

import fitz
import httpx

from pdfdesk import logger
from pdfdesk.async_runner import gather_ordered, run_async
from pdfdesk.exceptions import FontLoadError
from pdfdesk.settings import Settings, build_httpx_client_kwargs, get_settings

if TYPE_CHECKING:
    from collections.abc import Sequence

REGULAR_FONT_FILE = "NotoSans-Regular.ttf"
BOLD_FONT_FILE = "NotoSans-Bold.ttf"
SYMBOL_FONT_FILES = ("symbola.ttf", "NotoSansSymbols2-Regular.ttf")

_BUILTIN_BY_FILE = {
    REGULAR_FONT_FILE: "helv",
    BOLD_FONT_FILE: "hebo",
}


class GlyphFont:
    """Base font handle; covers every code point unless a subclass says otherwise."""

    name: str = "font"

    def width_of_text_at_size(self, text: str, size: float) -> float:
        """Return the advance width of `text` at `size` points."""
        raise NotImplementedError

    def has_glyph_for_unicode(self, codepoint: int) -> bool:  # noqa: ARG002
        """Return whether the font can render `codepoint`."""
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class PdfFont(GlyphFont):
    """PyMuPDF font usable both for measuring and for drawing."""

    def __init__(self, font: fitz.Font, *, name: str | None = None) -> None:
        self.font = font
        self.name = name or font.name

    @classmethod
    def from_bytes(cls, data: bytes, *, name: str) -> PdfFont:
        """Build a font from TrueType/OpenType bytes."""
        return cls(fitz.Font(fontbuffer=data), name=name)

    @classmethod
    def builtin(cls, fontname: str) -> PdfFont:
        """Build one of PyMuPDF's base-14 fonts, e.g. ``"helv"``."""
        return cls(fitz.Font(fontname), name=fontname)

    def width_of_text_at_size(self, text: str, size: float) -> float:
        return float(self.font.text_length(text, fontsize=size))

    def has_glyph_for_unicode(self, codepoint: int) -> bool:
        return self.font.has_glyph(codepoint) != 0


class FontSet:
    """Regular, bold and symbol faces for one operation."""

    def __init__(self, regular: PdfFont, bold: PdfFont, symbol: PdfFont | None = None) -> None:
        self.regular = regular
        self.bold = bold
        self.symbol = symbol or regular

    @property
    def has_symbol_face(self) -> bool:
        return self.symbol is not self.regular


class FontLoader:
    """Resolve font bytes from disk or HTTP and cache them for the process."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._cache: dict[str, bytes] = {}

    def _read_local(self, filename: str) -> bytes | None:
        path = Path(self.settings.font_dir) / filename
        if not path.is_file():
            return None
        return path.read_bytes()

    async def _fetch_remote(self, filename: str) -> bytes:
        """Download one font file.

        Raises:
            FontLoadError: If no base URL is configured or the download fails.
        """
        base_url = self.settings.font_base_url
        if not base_url:
            raise FontLoadError(font_name=filename, message="Font not found locally")

        url = f"{base_url}{filename}"
        try:
            async with httpx.AsyncClient(**build_httpx_client_kwargs(self.settings, target_url=url)) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise FontLoadError(font_name=filename, message="Font fetch failed") from exc
        return response.content

    async def _load_bytes(self, filename: str) -> bytes:
        cached = self._cache.get(filename)
        if cached is not None:
            return cached
        data = self._read_local(filename)
        if data is None:
            data = await self._fetch_remote(filename)
        self._cache[filename] = data
        return data

    async def _load_many(self, filenames: Sequence[str]) -> list[bytes | BaseException]:
        return await gather_ordered(*(self._load_bytes(name) for name in filenames))

    async def _load_first(self, filenames: Sequence[str]) -> tuple[str, bytes] | None:
        for filename in filenames:
            try:
                return filename, await self._load_bytes(filename)
            except (FontLoadError, OSError):
                continue
        return None

    def _required_face(self, filename: str, result: bytes | BaseException) -> PdfFont:
        if not isinstance(result, BaseException):
            return PdfFont.from_bytes(result, name=Path(filename).stem)

        builtin = _BUILTIN_BY_FILE.get(filename)
        if self.settings.builtin_font_fallback and builtin:
            logger.warning(
                "Using built-in font instead of missing file",
                extra={"font_file": filename, "builtin": builtin, "reason": str(result)},
            )
            return PdfFont.builtin(builtin)
        if isinstance(result, FontLoadError):
            raise result
        raise FontLoadError(font_name=filename) from result

    def load(self) -> FontSet:
        """Load the regular, bold and symbol faces.

        Raises:
            FontLoadError: If a regular or bold face cannot be loaded and the
                built-in fallback is disabled.

        Returns:
            FontSet: Loaded faces; the symbol face falls back to the regular one.
        """

        async def _load_all() -> tuple[list[bytes | BaseException], tuple[str, bytes] | None]:
            required = await self._load_many((REGULAR_FONT_FILE, BOLD_FONT_FILE))
            symbol = await self._load_first(SYMBOL_FONT_FILES)
            return required, symbol

        (regular_bytes, bold_bytes), symbol = run_async(_load_all(), thread_name="pdfdesk-fonts")
        regular = self._required_face(REGULAR_FONT_FILE, regular_bytes)
        bold = self._required_face(BOLD_FONT_FILE, bold_bytes)

        symbol_font: PdfFont | None = None
        if symbol is None:
            logger.warning("Symbol font unavailable, using regular face for fallback glyphs")
        else:
            symbol_font = PdfFont.from_bytes(symbol[1], name=Path(symbol[0]).stem)
        return FontSet(regular=regular, bold=bold, symbol=symbol_font)


@lru_cache(maxsize=1)
def _default_loader() -> FontLoader:
    return FontLoader(get_settings())


def load_fonts(settings: Settings | None = None) -> FontSet:
    """Return a `FontSet`; without explicit settings, font bytes are reused across calls."""
    loader = FontLoader(settings) if settings is not None else _default_loader()
    return loader.load()
