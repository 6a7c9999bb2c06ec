"""Range, layout and redaction algorithms shared by every document operation."""

from pdfdesk.processing.layout import draw_wrapped_lines, select_font, wrap_unicode, wrap_words
from pdfdesk.processing.ranges import (
    parse_ranges,
    resolve_index_set,
    resolve_page_order,
    resolve_ranges,
)
from pdfdesk.processing.redaction import RedactionSession, map_annotation

__all__ = [
    "RedactionSession",
    "draw_wrapped_lines",
    "map_annotation",
    "parse_ranges",
    "resolve_index_set",
    "resolve_page_order",
    "resolve_ranges",
    "select_font",
    "wrap_unicode",
    "wrap_words",
]
