"""Visualization utilities for debugging photo detection."""

from typing import Sequence, Tuple
import cv2
import numpy as np
from ..types import Candidate


def draw_candidates(
    image: np.ndarray,
    candidates: Sequence[Candidate],
    survivors: Sequence[Candidate] = (),
    kept_color: Tuple[int, int, int] = (0, 255, 0),
    dropped_color: Tuple[int, int, int] = (0, 0, 255),
    line_thickness: int = 2,
) -> np.ndarray:
    """Draw candidate rectangles on a copy of the image.

    Args:
        image: Base image for visualization (BGR or grayscale)
        candidates: All candidates found by contour extraction
        survivors: Candidates that survived overlap resolution
        kept_color: Color for survivors (B, G, R)
        dropped_color: Color for rejected candidates (B, G, R)
        line_thickness: Thickness of drawn outlines

    Returns:
        BGR image with numbered outlines; survivors are numbered in output order
    """
    if len(image.shape) == 2:
        vis_image = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    else:
        vis_image = image.copy()

    survivor_ids = {id(c) for c in survivors}

    for candidate in candidates:
        if id(candidate) in survivor_ids:
            continue
        box = np.intp(np.round(candidate.rect.points()))
        cv2.drawContours(vis_image, [box], -1, dropped_color, line_thickness)

    for index, candidate in enumerate(survivors, start=1):
        box = np.intp(np.round(candidate.rect.points()))
        cv2.drawContours(vis_image, [box], -1, kept_color, line_thickness)
        cx, cy = candidate.rect.center
        cv2.putText(vis_image, str(index), (int(cx), int(cy)),
                    cv2.FONT_HERSHEY_SIMPLEX, 1.0, kept_color, 2)

    return vis_image
