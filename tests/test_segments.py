from __future__ import annotations

import math
import random

import pytest

from polytri.errors import DegenerateInputError
from polytri.generators import square_with_hole
from polytri.geometry import Point
from polytri.segments import (Segment, build_segments, is_left_of, random_ordering,
                              signed_area, validate_contours)

UNIT_SQUARE = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]


def test_build_segments_links_each_contour_cyclically() -> None:
    segments, ids = build_segments(square_with_hole())
    assert len(segments) == 8
    assert ids == list(range(8))
    # outer contour 0..3, hole 4..7
    assert [s.next for s in segments] == [1, 2, 3, 0, 5, 6, 7, 4]
    assert [s.prev for s in segments] == [3, 0, 1, 2, 7, 4, 5, 6]
    for i, s in enumerate(segments):
        assert s.v1 == segments[s.next].v0
        assert not s.is_inserted


def test_segment_direction_properties() -> None:
    up = Segment(v0=Point(0.0, 0.0), v1=Point(0.0, 1.0), prev=0, next=0)
    down = Segment(v0=Point(0.0, 1.0), v1=Point(0.0, 0.0), prev=0, next=0)
    assert up.upward and not down.upward
    assert up.lower == down.lower == Point(0.0, 0.0)
    assert up.upper == down.upper == Point(0.0, 1.0)


def test_is_left_of() -> None:
    up = Segment(v0=Point(0.0, 0.0), v1=Point(0.0, 1.0), prev=0, next=0)
    down = Segment(v0=Point(0.0, 1.0), v1=Point(0.0, 0.0), prev=0, next=0)
    for s in (up, down):
        assert is_left_of(s, Point(-1.0, 0.5))
        assert not is_left_of(s, Point(1.0, 0.5))
    horizontal = Segment(v0=Point(0.0, 0.0), v1=Point(2.0, 0.0), prev=0, next=0)
    assert is_left_of(horizontal, Point(-1.0, 0.0))
    assert not is_left_of(horizontal, Point(3.0, 0.0))


def test_signed_area() -> None:
    assert signed_area(UNIT_SQUARE) == pytest.approx(1.0)
    assert signed_area(UNIT_SQUARE[::-1]) == pytest.approx(-1.0)


def test_validate_accepts_correct_winding() -> None:
    orders = validate_contours(square_with_hole())
    assert orders == [[0, 1, 2, 3], [0, 1, 2, 3]]


@pytest.mark.parametrize(
    "contours, message",
    [
        ([], "no contours"),
        ([[(0.0, 0.0), (1.0, 0.0)]], "at least 3"),
        ([[(0.0, 0.0), (1.0, 0.0), (math.nan, 1.0)]], "non-finite"),
        ([[(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 0.0), (0.0, 1.0)]], "repeated"),
        ([[(0.0, 0.0), (1.0, 0.0), (2.0, 0.0)]], "zero area"),
        ([UNIT_SQUARE[::-1]], "counter-clockwise"),
    ],
)
def test_validate_rejects(contours, message) -> None:
    with pytest.raises(DegenerateInputError, match=message):
        validate_contours(contours)


def test_validate_rejects_counter_clockwise_hole() -> None:
    outer, hole = square_with_hole()
    with pytest.raises(DegenerateInputError) as exc:
        validate_contours([outer, hole[::-1]])
    assert exc.value.contour == 1
    assert "contour 1" in str(exc.value)


def test_zero_length_segment_is_rejected() -> None:
    contour = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (1.0, 1.0 + 1e-9)]
    with pytest.raises(DegenerateInputError, match="zero-length"):
        validate_contours([contour])


def test_fix_winding_reverses_order() -> None:
    outer, hole = square_with_hole()
    orders = validate_contours([outer[::-1], hole], fix_winding=True)
    assert orders[0] == [3, 2, 1, 0]
    assert orders[1] == [0, 1, 2, 3]

    segments, ids = build_segments([outer[::-1], hole], orders)
    assert ids[:4] == [3, 2, 1, 0]
    assert signed_area([s.v0 for s in segments[:4]]) > 0


def test_random_ordering_is_a_reproducible_permutation() -> None:
    a = random_ordering(50, random.Random(7))
    b = random_ordering(50, random.Random(7))
    assert a == b
    assert sorted(a) == list(range(50))
