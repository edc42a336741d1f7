"""Photo detection: from a decoded scan to ordered, rectified photos."""

import logging
from typing import Dict, List, Optional

import cv2
import numpy as np

from .config.models import DetectionConfig
from .exceptions import ProcessingError, ValidationError
from .processors import (
    ContourProcessor,
    EdgeMaskProcessor,
    RectifyProcessor,
    draw_candidates,
    pad_image,
    resolve_overlaps,
)
from .types import DetectedPhoto

logger = logging.getLogger(__name__)


class PhotoDetector:
    """Locate and rectify the photos on one scanned sheet at a time.

    The detector keeps no state between images apart from the debug images
    of the most recent call, so one instance per worker is enough.
    """

    def __init__(self, config: Optional[DetectionConfig] = None, save_debug_images: bool = False):
        """Initialize the detector.

        Args:
            config: Detection parameters (defaults if None)
            save_debug_images: Keep intermediate images of the last call
        """
        self.config = config or DetectionConfig()
        self.save_debug = save_debug_images
        self.edge_processor = EdgeMaskProcessor(self.config, save_debug_images)
        self.contour_processor = ContourProcessor(self.config, save_debug_images)
        self.rectify_processor = RectifyProcessor(self.config, save_debug_images)
        self.debug_images: Dict[str, np.ndarray] = {}

    def detect(self, image: np.ndarray) -> List[DetectedPhoto]:
        """Detect every photo on a scanned sheet.

        Args:
            image: Decoded color image

        Returns:
            Rectified photos, largest pixel count first

        Raises:
            ProcessingError: If the input is not a usable image or any stage
                fails; no partial result is returned
        """
        self.debug_images = {}
        self.edge_processor.clear_debug_images()
        self._run_stage("preprocess", self.edge_processor.validate_image, image)

        padded = self._run_stage("pad", pad_image, image, self.config.pad)
        mask = self._run_stage("preprocess", self.edge_processor.process, padded)
        candidates = self._run_stage(
            "contours", self.contour_processor.process, mask, min_area=self.config.min_area
        )
        survivors = resolve_overlaps(candidates)

        logger.debug(
            f"Candidates: {len(candidates)} found, {len(survivors)} after overlap resolution"
        )

        photos = []
        for candidate in survivors:
            # Coordinates refer to the padded frame, so warp from it directly
            warped = self._run_stage(
                "rectify", self.rectify_processor.process, padded, rect=candidate.rect
            )
            photos.append(DetectedPhoto(image=warped, rect=candidate.rect, area=candidate.area))

        photos.sort(key=lambda p: p.pixel_count, reverse=True)

        if self.save_debug:
            self.debug_images.update(self.edge_processor.get_debug_images())
            by_rect = {id(c.rect): c for c in survivors}
            ordered = [by_rect[id(p.rect)] for p in photos]
            self.debug_images['07_candidates'] = draw_candidates(padded, candidates, ordered)

        return photos

    def get_debug_images(self) -> Dict[str, np.ndarray]:
        """Debug images of the most recent ``detect`` call."""
        return self.debug_images

    @staticmethod
    def _run_stage(stage: str, func, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except cv2.error as e:
            raise ProcessingError(f"OpenCV failure during {stage}: {e}", stage=stage) from e
        except ValidationError as e:
            raise ProcessingError(f"Invalid input for {stage}: {e}", stage=stage) from e


def detect_photos(
    image: np.ndarray,
    min_area: float = 20000.0,
    pad: int = 12,
    canny_low: float = 50.0,
    canny_high: float = 150.0,
) -> List[DetectedPhoto]:
    """Detect and rectify photos with the default edge-mask parameters.

    Args:
        image: Decoded color image
        min_area: Minimum contour area for a photo
        pad: Replicated border added before detection (clamped to >= 0)
        canny_low: Canny low threshold
        canny_high: Canny high threshold; derived from ``canny_low`` if not above it

    Returns:
        Rectified photos, largest pixel count first
    """
    config = DetectionConfig(
        min_area=min_area,
        pad=pad,
        canny_low=canny_low,
        canny_high=canny_high,
    )
    return PhotoDetector(config).detect(image)
