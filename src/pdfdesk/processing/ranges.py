"""Page-range parsing and resolution.

Range text such as ``"1-3, 7, 10-12"`` is parsed best-effort into a
`RangeSpec`; invalid tokens are dropped. Clamping against the real page count
happens later in `resolve_ranges` because the count is not known at parse
time.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from pdfdesk.typing.models import PageInterval, RangeSpec

if TYPE_CHECKING:
    from collections.abc import Iterable

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _parse_int(raw: str) -> int | None:
    """Read the leading integer of `raw`, ignoring trailing garbage.

    Args:
        raw (str): Token side, e.g. ``"3"`` or ``"3a"``.

    Returns:
        int | None: Parsed integer, or None when no digits lead the text.
    """
    match = _LEADING_INT.match(raw)
    return int(match.group(1)) if match else None


def parse_token(token: str) -> PageInterval | None:
    """Parse one comma-separated token.

    Args:
        token (str): Trimmed, non-empty token.

    Returns:
        PageInterval | None: Interval, or None when the token is unusable.
    """
    if "-" in token:
        parts = token.split("-")
        lo = _parse_int(parts[0])
        hi = _parse_int(parts[1])
        if lo is None or hi is None:
            return None
        return PageInterval(lo=lo, hi=hi)

    page = _parse_int(token)
    if page is None:
        return None
    return PageInterval(lo=page, hi=page)


def parse_ranges(text: str | None) -> RangeSpec:
    """Parse free-form range text.

    Args:
        text (str | None): Comma-separated pages and ``lo-hi`` ranges.

    Returns:
        RangeSpec: Surviving intervals in input order (possibly empty).
    """
    tokens = (token.strip() for token in (text or "").split(","))
    parsed = (parse_token(token) for token in tokens if token)
    return RangeSpec(intervals=tuple(interval for interval in parsed if interval is not None))


def _clamp(interval: PageInterval, total_pages: int) -> range:
    start = max(1, interval.lo)
    end = min(total_pages, interval.hi)
    return range(start - 1, end)


def resolve_ranges(spec: RangeSpec, total_pages: int) -> list[int]:
    """Clamp parsed ranges against a page count into zero-based indices.

    Intervals are expanded in input order and indices are not de-duplicated,
    so ``"1-2,2"`` yields ``[0, 1, 1]``.

    Args:
        spec (RangeSpec): Parsed ranges.
        total_pages (int): Number of pages in the target document.

    Returns:
        list[int]: Zero-based page indices.
    """
    indices: list[int] = []
    for interval in spec.intervals:
        indices.extend(_clamp(interval, total_pages))
    return indices


def resolve_interval(interval: PageInterval, total_pages: int) -> list[int]:
    """Clamp a single interval, used when each interval produces its own output."""
    return list(_clamp(interval, total_pages))


def resolve_index_set(spec: RangeSpec, total_pages: int) -> frozenset[int]:
    """Clamp parsed ranges into a membership set of zero-based indices."""
    return frozenset(resolve_ranges(spec, total_pages))


def resolve_page_order(order: Iterable[int], total_pages: int) -> list[int]:
    """Clamp an explicit 1-based page order into zero-based indices.

    Args:
        order (Iterable[int]): Desired 1-based page order.
        total_pages (int): Number of pages in the target document.

    Returns:
        list[int]: Zero-based indices; identity order when `order` is empty.
    """
    if total_pages <= 0:
        return []
    clamped = [min(total_pages, max(1, page)) - 1 for page in order]
    return clamped or list(range(total_pages))
