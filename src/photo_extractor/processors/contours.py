"""Contour extraction: edge mask to rotated-rectangle photo candidates."""

import logging
from typing import List
import cv2
import numpy as np
from .base import BaseProcessor
from ..types import Candidate, RotatedRect

logger = logging.getLogger(__name__)


class ContourProcessor(BaseProcessor):
    """Processor turning an edge mask into photo candidates."""

    name = "contours"

    def process(self, image: np.ndarray, min_area: float = None, **kwargs) -> List[Candidate]:
        """Find photo candidates in a binary edge mask.

        Args:
            image: Single-channel edge mask
            min_area: Minimum contour area; defaults to the configured value

        Returns:
            List of candidates in contour order
        """
        self.validate_image(image)
        self.clear_debug_images()

        if min_area is None:
            min_area = self.get_config_value("min_area", 20000.0)

        return find_candidates(image, min_area)


def find_candidates(mask: np.ndarray, min_area: float) -> List[Candidate]:
    """Reduce the outer contours of a mask to rotated rectangles.

    Only external contours are considered, so a photo's interior never yields
    a nested candidate. A contour is kept when its area is at least
    ``min_area`` and its minimum-area rectangle is wider and taller than one
    pixel.

    Args:
        mask: Binary mask with outlines in 255
        min_area: Noise floor separating real photos from scan artifacts

    Returns:
        List of Candidate objects
    """
    if mask.ndim == 3:
        mask = cv2.cvtColor(mask, cv2.COLOR_BGR2GRAY)

    contours, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)

    candidates = []
    for contour in contours:
        area = float(cv2.contourArea(contour))
        if area < min_area:
            continue

        rect = RotatedRect.from_cv(cv2.minAreaRect(contour))
        if rect.is_degenerate():
            logger.debug(f"Discarding degenerate rectangle {rect.size} (area={area:.0f})")
            continue

        candidates.append(Candidate(rect=rect, area=area))

    logger.debug(f"{len(candidates)} of {len(contours)} contours kept as candidates")
    return candidates
