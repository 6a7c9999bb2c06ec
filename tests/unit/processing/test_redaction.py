from __future__ import annotations

import math

import pytest

from pdfdesk.exceptions import SessionStateError
from pdfdesk.processing.redaction import RedactionSession, map_annotation
from pdfdesk.typing.enums import SessionState
from pdfdesk.typing.models import PageRect, PageSize, RasterRect, RenderObservation

PAGE = PageSize(width=200, height=300)


def _size_for(_page_number: int) -> PageSize:
    return PAGE


def test_map_annotation_flips_y_and_scales_axes_independently() -> None:
    rect = RasterRect(x=20, y=40, w=60, h=80)

    mapped = map_annotation(rect, RenderObservation(width=400, height=600), PAGE)

    assert mapped == PageRect(x=10, y=240, width=30, height=40)


def test_map_annotation_scales_up_onto_a_larger_page() -> None:
    rect = RasterRect(x=10, y=20, w=30, h=40)

    mapped = map_annotation(rect, RenderObservation(width=200, height=300), PageSize(width=400, height=600))

    assert mapped == PageRect(x=20, y=480, width=60, height=80)


def test_map_annotation_with_distorted_preview() -> None:
    rect = RasterRect(x=10, y=0, w=10, h=30)

    mapped = map_annotation(rect, RenderObservation(width=100, height=600), PAGE)

    assert mapped == PageRect(x=20, y=285, width=20, height=15)


def test_map_annotation_clamps_negative_values_to_zero() -> None:
    rect = RasterRect(x=-10, y=590, w=20, h=40)

    mapped = map_annotation(rect, RenderObservation(width=400, height=600), PAGE)

    assert mapped is not None
    assert mapped.x == 0
    assert mapped.y == 0
    assert mapped.width == 10
    assert mapped.height == 20


@pytest.mark.parametrize("bad", [math.inf, -math.inf, math.nan])
def test_map_annotation_rejects_non_finite_values(bad: float) -> None:
    rect = RasterRect(x=bad, y=0, w=10, h=10)

    assert map_annotation(rect, RenderObservation(width=400, height=600), PAGE) is None


@pytest.mark.parametrize(
    ("width", "height"),
    [(0, 0), (0, 300), (200, -1), (math.inf, 300), (200, math.nan)],
)
def test_map_annotation_skips_degenerate_surfaces(width: float, height: float) -> None:
    rect = RasterRect(x=1, y=1, w=1, h=1)

    assert map_annotation(rect, RenderObservation(width=width, height=height), PAGE) is None


def test_from_drag_normalizes_direction() -> None:
    assert RasterRect.from_drag((40, 60), (10, 20)) == RasterRect(x=10, y=20, w=30, h=40)


def test_session_starts_empty_and_ignores_navigation() -> None:
    session = RedactionSession()

    assert session.state is SessionState.EMPTY
    assert session.next_page() == 0
    assert session.previous_page() == 0


def test_session_rejects_drawing_before_load() -> None:
    session = RedactionSession()

    with pytest.raises(SessionStateError, match="Load a PDF first"):
        session.add_drag((0, 0), (10, 10))


def test_session_rejects_document_without_pages() -> None:
    with pytest.raises(SessionStateError, match="no pages"):
        RedactionSession().load(0)


def test_navigation_clamps_at_bounds() -> None:
    session = RedactionSession()
    session.load(3)

    assert session.state is SessionState.LOADED
    assert session.current_page == 1
    assert session.previous_page() == 1
    assert session.next_page() == 2
    assert session.next_page() == 3
    assert session.next_page() == 3
    assert session.go_to(-5) == 1


def test_annotations_are_kept_per_page_and_clear_only_touches_current_page() -> None:
    session = RedactionSession()
    session.load(2)
    session.add_drag((0, 0), (10, 10))
    session.next_page()
    session.add_drag((5, 5), (15, 25))

    session.clear_page()

    assert session.annotations_for(1) == [RasterRect(x=0, y=0, w=10, h=10)]
    assert session.annotations_for(2) == []


def test_reload_discards_previous_annotations() -> None:
    session = RedactionSession()
    session.load(2)
    session.add_drag((0, 0), (10, 10))

    session.load(4)

    assert session.snapshot() == {}
    assert session.page_count == 4
    assert session.current_page == 1


def test_boxes_drawn_at_different_zooms_map_to_the_same_page_region() -> None:
    session = RedactionSession()
    session.load(2)
    session.record_render(1, 200, 300)
    session.add_drag((10, 20), (40, 60))
    session.next_page()
    session.record_render(2, 400, 600)
    session.add_drag((20, 40), (80, 120))

    plan = session.plan_export(_size_for)

    assert plan[1] == plan[2] == [PageRect(x=10, y=240, width=30, height=40)]


def test_observation_is_remembered_per_page_after_rerender_elsewhere() -> None:
    session = RedactionSession()
    session.load(2)
    session.record_render(1, 400, 600)
    session.add_drag((20, 40), (80, 120))
    session.next_page()
    session.record_render(2, 100, 150)

    plan = session.plan_export(_size_for)

    assert plan == {1: [PageRect(x=10, y=240, width=30, height=40)]}


def test_unrendered_page_falls_back_to_active_surface() -> None:
    session = RedactionSession()
    session.load(2)
    session.record_render(1, 400, 600)

    assert session.observation_for(2) == RenderObservation(width=400, height=600)


def test_fallback_surface_is_floored_at_one_pixel() -> None:
    session = RedactionSession()
    session.load(1)

    assert session.observation_for(1) == RenderObservation(width=1, height=1)


def test_plan_export_skips_non_finite_boxes() -> None:
    session = RedactionSession()
    session.load(1)
    session.record_render(1, 200, 300)
    session.add_annotation(RasterRect(x=math.nan, y=0, w=1, h=1))
    session.add_annotation(RasterRect(x=0, y=0, w=200, h=300))

    plan = session.plan_export(_size_for)

    assert plan == {1: [PageRect(x=0, y=0, width=200, height=300)]}


def test_plan_export_skips_pages_recorded_with_a_zero_size_surface() -> None:
    session = RedactionSession()
    session.load(2)
    session.record_render(1, 0, 0)
    session.add_annotation(RasterRect(x=1, y=1, w=1, h=1))
    session.record_render(2, 200, 300)
    session.next_page()
    session.add_annotation(RasterRect(x=0, y=0, w=200, h=300))

    plan = session.plan_export(_size_for)

    assert plan == {2: [PageRect(x=0, y=0, width=200, height=300)]}


def test_snapshot_is_isolated_from_later_drawing() -> None:
    session = RedactionSession()
    session.load(1)
    session.add_drag((0, 0), (1, 1))

    snapshot = session.snapshot()
    session.add_drag((2, 2), (3, 3))

    assert len(snapshot[1]) == 1
    assert len(session.annotations_for(1)) == 2
