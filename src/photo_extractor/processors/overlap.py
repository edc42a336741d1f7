"""Overlap resolution between photo candidates."""

import logging
import math
from typing import List, Sequence

from ..exceptions import ProcessingError
from ..types import Candidate, RotatedRect

logger = logging.getLogger(__name__)


def rects_overlap(a: RotatedRect, b: RotatedRect) -> bool:
    """Check whether the axis-aligned bounding boxes of two rectangles overlap.

    Boxes that only touch along an edge or a corner do not overlap: the
    intersection must be strictly positive in both dimensions.
    """
    ax1, ay1, ax2, ay2 = a.bounding_box()
    bx1, by1, bx2, by2 = b.bounding_box()

    intersect_w = max(0.0, min(ax2, bx2) - max(ax1, bx1))
    intersect_h = max(0.0, min(ay2, by2) - max(ay1, by1))

    return intersect_w > 0.0 and intersect_h > 0.0


def resolve_overlaps(candidates: Sequence[Candidate]) -> List[Candidate]:
    """Keep the largest candidate wherever candidates overlap.

    Candidates are visited by contour area, largest first, and accepted only
    if their bounding box does not overlap one already accepted. This covers
    both nested detections and partial overlaps. Candidates with equal area
    keep their input order.

    Args:
        candidates: Candidates to filter

    Returns:
        Accepted candidates, largest area first

    Raises:
        ProcessingError: If a candidate area is NaN or infinite
    """
    for candidate in candidates:
        if not math.isfinite(candidate.area):
            raise ProcessingError(
                f"Candidate area is not finite: {candidate.area}", stage="overlap"
            )

    ranked = sorted(candidates, key=lambda c: c.area, reverse=True)

    kept: List[Candidate] = []
    for candidate in ranked:
        if any(rects_overlap(k.rect, candidate.rect) for k in kept):
            logger.debug(f"Dropping overlapping candidate (area={candidate.area:.0f})")
            continue
        kept.append(candidate)

    return kept
