from __future__ import annotations

import pytest

from pdfdesk.processing.ranges import (
    parse_ranges,
    parse_token,
    resolve_index_set,
    resolve_interval,
    resolve_page_order,
    resolve_ranges,
)
from pdfdesk.typing.models import PageInterval, RangeSpec


def test_parse_ranges_keeps_input_order_and_singletons() -> None:
    spec = parse_ranges(" 7, 2-4 ,,1")

    assert spec.intervals == (
        PageInterval(lo=7, hi=7),
        PageInterval(lo=2, hi=4),
        PageInterval(lo=1, hi=1),
    )


@pytest.mark.parametrize("text", ["", None, " , ,", "abc", "x-9", "-3", "4-"])
def test_parse_ranges_drops_unusable_tokens(text: str | None) -> None:
    assert parse_ranges(text) == RangeSpec()
    assert not parse_ranges(text)


def test_parse_token_reads_leading_digits_like_a_lenient_integer_parser() -> None:
    assert parse_token("3a") == PageInterval(lo=3, hi=3)
    assert parse_token("2x-5y") == PageInterval(lo=2, hi=5)
    assert parse_token("a3") is None


def test_parse_token_only_reads_first_two_hyphen_parts() -> None:
    assert parse_token("1-2-3") == PageInterval(lo=1, hi=2)


def test_reversed_interval_is_accepted_at_parse_time() -> None:
    assert parse_ranges("5-2").intervals == (PageInterval(lo=5, hi=2),)


def test_resolve_ranges_expands_in_order() -> None:
    assert resolve_ranges(parse_ranges("2-4,7"), 10) == [1, 2, 3, 6]


def test_resolve_ranges_reversed_interval_is_empty() -> None:
    assert resolve_ranges(parse_ranges("5-2"), 10) == []


def test_resolve_ranges_ignores_garbage_tokens() -> None:
    assert resolve_ranges(parse_ranges("abc,3,x-9"), 10) == [2]


def test_resolve_ranges_clamps_to_document() -> None:
    assert resolve_ranges(parse_ranges("0-2,9-20,40"), 10) == [0, 1, 8, 9]


def test_resolve_ranges_keeps_duplicates_across_intervals() -> None:
    assert resolve_ranges(parse_ranges("1-2,2,1"), 5) == [0, 1, 1, 0]


def test_resolve_ranges_with_empty_document() -> None:
    assert resolve_ranges(parse_ranges("1-3"), 0) == []


def test_resolve_index_set_has_membership_semantics() -> None:
    assert resolve_index_set(parse_ranges("1-2,2,5"), 3) == frozenset({0, 1})


def test_resolve_interval_single_interval() -> None:
    assert resolve_interval(PageInterval(lo=3, hi=8), 5) == [2, 3, 4]


def test_resolve_page_order_clamps_and_defaults_to_identity() -> None:
    assert resolve_page_order([3, 1, 2], 3) == [2, 0, 1]
    assert resolve_page_order([9, 0, -4], 3) == [2, 0, 0]
    assert resolve_page_order([], 3) == [0, 1, 2]
    assert resolve_page_order([1], 0) == []
