"""Geometry and result types shared by the detection stages."""

from dataclasses import dataclass
from typing import Tuple

import cv2
import numpy as np


BoundingBox = Tuple[float, float, float, float]


@dataclass(frozen=True)
class RotatedRect:
    """Rotated rectangle in image coordinates.

    Mirrors OpenCV's ``((cx, cy), (w, h), angle)`` box so it can be handed
    straight back to ``cv2.boxPoints``.
    """

    center: Tuple[float, float]
    size: Tuple[float, float]
    angle: float

    @classmethod
    def from_cv(cls, box) -> "RotatedRect":
        """Build from the tuple returned by ``cv2.minAreaRect``."""
        (cx, cy), (w, h), angle = box
        return cls((float(cx), float(cy)), (float(w), float(h)), float(angle))

    def to_cv(self) -> Tuple[Tuple[float, float], Tuple[float, float], float]:
        """Return the OpenCV tuple form."""
        return (self.center, self.size, self.angle)

    @property
    def width(self) -> float:
        return self.size[0]

    @property
    def height(self) -> float:
        return self.size[1]

    def points(self) -> np.ndarray:
        """Four corner points as a (4, 2) float32 array."""
        return cv2.boxPoints(self.to_cv()).astype(np.float32)

    def bounding_box(self) -> BoundingBox:
        """Axis-aligned (min_x, min_y, max_x, max_y) of the corners."""
        pts = self.points()
        return (
            float(pts[:, 0].min()),
            float(pts[:, 1].min()),
            float(pts[:, 0].max()),
            float(pts[:, 1].max()),
        )

    def is_degenerate(self) -> bool:
        """True when either extent is at most one pixel."""
        return self.size[0] <= 1.0 or self.size[1] <= 1.0


@dataclass(frozen=True)
class Candidate:
    """Rotated rectangle plus the measured area of the contour it came from."""

    rect: RotatedRect
    area: float


@dataclass
class DetectedPhoto:
    """One rectified photo cut out of a scan."""

    image: np.ndarray
    rect: RotatedRect
    area: float

    @property
    def pixel_count(self) -> int:
        """Number of pixels (height x width) in the rectified crop."""
        return int(self.image.shape[0] * self.image.shape[1])

    @property
    def shape(self) -> Tuple[int, ...]:
        return self.image.shape
