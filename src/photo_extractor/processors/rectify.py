"""Perspective rectification of detected photo rectangles."""

import math
from typing import Tuple, Union
import cv2
import numpy as np
from .base import BaseProcessor
from ..exceptions import ProcessingError, ValidationError
from ..types import RotatedRect


class RectifyProcessor(BaseProcessor):
    """Processor cutting an upright crop out of an image for one rectangle."""

    name = "rectify"

    def process(self, image: np.ndarray, rect: RotatedRect = None, **kwargs) -> np.ndarray:
        """Rectify the region of ``image`` covered by ``rect``.

        Args:
            image: Source image the rectangle coordinates refer to
            rect: Rotated rectangle to extract

        Returns:
            np.ndarray: Axis-aligned crop
        """
        self.validate_image(image)
        if rect is None:
            raise ValidationError(f"{self.name}: a rectangle is required")
        return warp_photo(image, rect)


def order_points(pts: Union[np.ndarray, list]) -> np.ndarray:
    """
    Order 4 points as Top-Left, Top-Right, Bottom-Right, Bottom-Left.

    The corners are first put in cyclic order by their angle around the
    centroid (clockwise on screen, since the image y axis points down), then
    rotated so that the corner with the smallest x + y comes first. Ties on
    x + y, as for a rectangle tilted by exactly 45 degrees, go to the upper
    corner. The result is always a simple quadrilateral, whatever the
    rotation.

    Args:
        pts: Four [x, y] points in any order, shape (4, 2)

    Returns:
        Ordered float32 array of shape (4, 2)

    Raises:
        ValueError: If input does not contain exactly 4 points
    """
    pts = np.asarray(pts, dtype=np.float32)
    if pts.shape != (4, 2):
        raise ValueError(
            f"Expected exactly 4 points with shape (4, 2), got shape {pts.shape}"
        )

    center = pts.mean(axis=0)
    angles = np.arctan2(pts[:, 1] - center[1], pts[:, 0] - center[0])
    cyclic = pts[np.argsort(angles, kind="stable")]

    # Smallest x + y, then smallest y
    start = np.lexsort((cyclic[:, 1], cyclic.sum(axis=1)))[0]

    return np.roll(cyclic, -start, axis=0).astype(np.float32)


def target_size(ordered: np.ndarray) -> Tuple[int, int]:
    """Output (width, height) for ordered corners; never below 1 pixel.

    Lengths are rounded half up, so a 10.5 pixel side gives 11 pixels.
    """
    tl, tr, br, bl = ordered

    width_top = np.linalg.norm(tr - tl)
    width_bottom = np.linalg.norm(br - bl)
    max_width = int(math.floor(max(width_top, width_bottom) + 0.5))

    height_left = np.linalg.norm(bl - tl)
    height_right = np.linalg.norm(br - tr)
    max_height = int(math.floor(max(height_left, height_right) + 0.5))

    return max(max_width, 1), max(max_height, 1)


def warp_photo(image: np.ndarray, rect: RotatedRect) -> np.ndarray:
    """Warp the quadrilateral of ``rect`` into an upright, tightly cropped image.

    Samples falling outside ``image`` take the nearest edge pixel
    (replicated border) and resampling is bicubic.

    Args:
        image: Source image in the same frame as ``rect``
        rect: Rectangle to rectify

    Returns:
        np.ndarray: Rectified crop of size target_size(...)

    Raises:
        ProcessingError: If the rectangle corners are not finite
    """
    ordered = order_points(rect.points())
    if not np.all(np.isfinite(ordered)):
        raise ProcessingError(f"Rectangle has non-finite corners: {rect}", stage="rectify")

    max_width, max_height = target_size(ordered)

    # A one-pixel side would collapse the destination quad
    right = max(max_width - 1, 1)
    bottom = max(max_height - 1, 1)
    dst = np.array([
        [0, 0],
        [right, 0],
        [right, bottom],
        [0, bottom],
    ], dtype=np.float32)

    matrix = cv2.getPerspectiveTransform(ordered, dst, cv2.DECOMP_LU)

    return cv2.warpPerspective(
        image,
        matrix,
        (max_width, max_height),
        flags=cv2.INTER_CUBIC,
        borderMode=cv2.BORDER_REPLICATE,
    )
