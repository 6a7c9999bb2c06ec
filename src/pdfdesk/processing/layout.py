"""Greedy line layout with per-run font fallback.

Text is consumed one Unicode code point at a time. Each code point goes to
the primary font when it has a glyph, else to the fallback font when that one
has it, else to the primary font anyway. A line is always set in a single
font: when the font changes, the current line is emitted and the next one
starts under the new font.

Widths are only ever measured on whole lines under their own font, never by
summing single characters, so kerning inside a line is accounted for.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pdfdesk.typing.models import GlyphRun, WrappedLine

if TYPE_CHECKING:
    from pdfdesk.typing.protocol import Color, MeasuredFont, PageSurface


def select_font(codepoint: int, primary: MeasuredFont, fallback: MeasuredFont) -> MeasuredFont:
    """Return the font used for one code point.

    Args:
        codepoint (int): Unicode scalar value.
        primary (MeasuredFont): Preferred font.
        fallback (MeasuredFont): Symbol/emoji font.

    Returns:
        MeasuredFont: `primary` unless only `fallback` covers the code point.
    """
    if primary.has_glyph_for_unicode(codepoint):
        return primary
    if fallback.has_glyph_for_unicode(codepoint):
        return fallback
    return primary


class _LineBuilder:
    """Mutable state for the line currently being filled."""

    def __init__(self, *, size: float, leading: float, start_y: float) -> None:
        self.size = size
        self.leading = leading
        self.cursor = start_y
        self.buffer = ""
        self.buffer_start = 0
        self.buffer_font: MeasuredFont | None = None
        self.lines: list[WrappedLine] = []

    def emit_line(self) -> None:
        """Emit the buffer at the cursor and move the cursor down."""
        if not self.buffer or self.buffer_font is None:
            return
        run = GlyphRun(
            start=self.buffer_start,
            text=self.buffer,
            font=self.buffer_font,
            x=0.0,
            width=self.buffer_font.width_of_text_at_size(self.buffer, self.size),
        )
        y = self.cursor
        self.cursor -= self.leading
        self.lines.append(WrappedLine(runs=(run,), y=y, advance=self.cursor))
        self.buffer = ""

    def open_line(self, char: str, offset: int, font: MeasuredFont) -> None:
        self.buffer = char
        self.buffer_start = offset
        self.buffer_font = font


def wrap_unicode(  # noqa: PLR0913
    text: str,
    primary: MeasuredFont,
    fallback: MeasuredFont,
    size: float,
    max_width: float,
    *,
    leading: float,
    start_y: float = 0.0,
) -> list[WrappedLine]:
    """Wrap one paragraph into single-font lines of at most `max_width`.

    A font switch always ends the current line. A single code point wider
    than `max_width` is placed alone on its own line. Missing glyphs never
    raise; they are laid out with the primary font.

    Args:
        text (str): Paragraph text; newlines are treated like any character.
        primary (MeasuredFont): Preferred font.
        fallback (MeasuredFont): Font for code points the primary lacks.
        size (float): Font size in points.
        max_width (float): Available width in points.
        leading (float): Baseline-to-baseline distance.
        start_y (float): Baseline of the first line; later lines go down.

    Returns:
        list[WrappedLine]: Lines top to bottom, one run each.
    """
    builder = _LineBuilder(size=size, leading=leading, start_y=start_y)

    for offset, char in enumerate(text):
        font = select_font(ord(char), primary, fallback)

        if builder.buffer and font is not builder.buffer_font:
            builder.emit_line()

        if not builder.buffer:
            builder.open_line(char, offset, font)
            continue

        candidate = builder.buffer + char
        if font.width_of_text_at_size(candidate, size) > max_width:
            builder.emit_line()
            builder.open_line(char, offset, font)
        else:
            builder.buffer = candidate

    builder.emit_line()
    return builder.lines


def wrap_words(text: str, font: MeasuredFont, size: float, max_width: float) -> list[str]:
    """Wrap whitespace-delimited words with a single font.

    Args:
        text (str): Plain text.
        font (MeasuredFont): Font used for every word.
        size (float): Font size in points.
        max_width (float): Available width in points.

    Returns:
        list[str]: Lines; an over-wide word sits alone on its line.
    """
    lines: list[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if current and font.width_of_text_at_size(candidate, size) > max_width:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines


def draw_wrapped_line(
    page: PageSurface,
    line: WrappedLine,
    *,
    x: float,
    y: float,
    size: float,
    color: Color,
) -> None:
    """Draw every run of `line` with its baseline at `y`."""
    for run in line.runs:
        page.draw_text(run.text, x=x + run.x, y=y, size=size, font=run.font, color=color)


def draw_wrapped_lines(
    page: PageSurface,
    lines: list[WrappedLine],
    *,
    x: float,
    size: float,
    color: Color,
) -> float | None:
    """Draw lines at the baselines computed during layout.

    Returns:
        float | None: Cursor after the last line, or None when nothing was drawn.
    """
    for line in lines:
        draw_wrapped_line(page, line, x=x, y=line.y, size=size, color=color)
    return lines[-1].advance if lines else None
