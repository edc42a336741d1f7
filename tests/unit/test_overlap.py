"""Tests for overlap resolution between candidates."""

import pytest

from photo_extractor.exceptions import ProcessingError
from photo_extractor.processors import rects_overlap, resolve_overlaps
from photo_extractor.types import Candidate, RotatedRect


def box(x1, y1, x2, y2) -> RotatedRect:
    """Axis-aligned rectangle from its corners."""
    return RotatedRect(((x1 + x2) / 2, (y1 + y2) / 2), (x2 - x1, y2 - y1), 0.0)


def candidate(x1, y1, x2, y2, area=None) -> Candidate:
    if area is None:
        area = (x2 - x1) * (y2 - y1)
    return Candidate(rect=box(x1, y1, x2, y2), area=float(area))


class TestRectsOverlap:
    """Tests for rects_overlap."""

    def test_disjoint(self):
        assert not rects_overlap(box(0, 0, 10, 10), box(20, 0, 30, 10))

    def test_shared_edge_is_not_overlap(self):
        assert not rects_overlap(box(0, 0, 10, 10), box(10, 0, 20, 10))

    def test_shared_corner_is_not_overlap(self):
        assert not rects_overlap(box(0, 0, 10, 10), box(10, 10, 20, 20))

    def test_partial(self):
        assert rects_overlap(box(0, 0, 10, 10), box(5, 5, 15, 15))

    def test_nested(self):
        assert rects_overlap(box(0, 0, 100, 100), box(40, 40, 60, 60))

    def test_rotated_uses_bounding_box(self):
        # Diamond whose bounding box reaches into the other square's corner
        diamond = RotatedRect((0.0, 0.0), (20.0, 20.0), 45.0)
        assert rects_overlap(diamond, box(12, 12, 30, 30))
        assert not rects_overlap(diamond, box(15, 15, 30, 30))


class TestResolveOverlaps:
    """Tests for resolve_overlaps."""

    def test_empty(self):
        assert resolve_overlaps([]) == []

    def test_nested_keeps_outer(self):
        outer = candidate(0, 0, 100, 100)
        inner = candidate(40, 40, 60, 60)

        assert resolve_overlaps([inner, outer]) == [outer]

    def test_disjoint_sorted_by_area(self):
        small = candidate(200, 0, 220, 20)
        large = candidate(0, 0, 100, 100)

        assert resolve_overlaps([small, large]) == [large, small]

    def test_partial_overlap_keeps_larger(self):
        large = candidate(0, 0, 100, 100)
        small = candidate(90, 90, 150, 150)

        assert resolve_overlaps([small, large]) == [large]

    def test_only_checks_against_accepted(self):
        a = candidate(0, 0, 100, 100)
        b = candidate(90, 0, 160, 60)
        c = candidate(150, 0, 200, 40)

        # b overlaps a and is dropped, so c (overlapping only b) survives
        assert resolve_overlaps([c, b, a]) == [a, c]

    def test_identical_boxes_keep_larger_area(self):
        smaller = candidate(0, 0, 50, 50, area=2000)
        larger = candidate(0, 0, 50, 50, area=2500)

        for order in ([smaller, larger], [larger, smaller]):
            result = resolve_overlaps(order)
            assert len(result) == 1
            assert result[0] is larger

    def test_equal_area_keeps_input_order(self):
        first = candidate(0, 0, 50, 50, area=2500)
        second = candidate(25, 25, 75, 75, area=2500)

        result = resolve_overlaps([first, second])
        assert len(result) == 1
        assert result[0] is first

    def test_survivors_never_overlap(self):
        candidates = [
            candidate(x, y, x + w, y + w)
            for x, y, w in [(0, 0, 50), (30, 30, 60), (100, 0, 40), (120, 20, 10), (0, 100, 80)]
        ]
        result = resolve_overlaps(candidates)

        for i, a in enumerate(result):
            for b in result[i + 1:]:
                assert not rects_overlap(a.rect, b.rect)
        assert [c.area for c in result] == sorted((c.area for c in result), reverse=True)

    @pytest.mark.parametrize("area", [float("nan"), float("inf")])
    def test_non_finite_area(self, area):
        with pytest.raises(ProcessingError) as exc_info:
            resolve_overlaps([candidate(0, 0, 10, 10), candidate(20, 20, 30, 30, area=area)])
        assert exc_info.value.stage == "overlap"
