"""Tests for contour extraction."""

import cv2
import numpy as np
import pytest

from photo_extractor.config import DetectionConfig
from photo_extractor.processors import ContourProcessor, find_candidates


@pytest.fixture
def square_mask() -> np.ndarray:
    """Filled square whose outer contour has an area of exactly 99 * 99."""
    mask = np.zeros((200, 200), dtype=np.uint8)
    cv2.rectangle(mask, (10, 10), (109, 109), 255, -1)
    return mask


class TestFindCandidates:
    """Tests for find_candidates."""

    def test_area_at_threshold_kept(self, square_mask):
        candidates = find_candidates(square_mask, 9801)

        assert len(candidates) == 1
        assert candidates[0].area == pytest.approx(9801)

    def test_area_below_threshold_rejected(self, square_mask):
        assert find_candidates(square_mask, 9802) == []

    def test_rectangle_geometry(self, square_mask):
        rect = find_candidates(square_mask, 0)[0].rect

        assert rect.center == pytest.approx((59.5, 59.5))
        assert sorted(rect.size) == pytest.approx([99, 99])

    def test_thin_line_rejected(self):
        mask = np.zeros((100, 300), dtype=np.uint8)
        cv2.line(mask, (10, 50), (250, 50), 255, 1)

        assert find_candidates(mask, 0) == []

    def test_only_outer_contours(self):
        mask = np.zeros((300, 300), dtype=np.uint8)
        cv2.rectangle(mask, (20, 20), (280, 280), 255, 6)
        cv2.rectangle(mask, (100, 100), (200, 200), 255, 6)

        candidates = find_candidates(mask, 1000)

        assert len(candidates) == 1
        assert candidates[0].area > 250 * 250

    def test_color_mask_accepted(self, square_mask):
        color = cv2.cvtColor(square_mask, cv2.COLOR_GRAY2BGR)
        assert len(find_candidates(color, 9801)) == 1

    def test_empty_mask(self):
        assert find_candidates(np.zeros((50, 50), dtype=np.uint8), 0) == []


class TestContourProcessor:
    """Tests for ContourProcessor."""

    def test_uses_configured_min_area(self, square_mask):
        processor = ContourProcessor(DetectionConfig(min_area=9802))
        assert processor.process(square_mask) == []

    def test_explicit_min_area_overrides_config(self, square_mask):
        processor = ContourProcessor(DetectionConfig(min_area=9802))
        assert len(processor.process(square_mask, min_area=100)) == 1
