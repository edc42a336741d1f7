"""Edge-mask preprocessing: turns a scanned sheet into photo outlines."""

from typing import Tuple
import cv2
import numpy as np
from .base import BaseProcessor


class EdgeMaskProcessor(BaseProcessor):
    """Processor producing the binary edge mask used for contour search."""

    name = "preprocess"

    def process(self, image: np.ndarray, **kwargs) -> np.ndarray:
        """Build the edge mask for an image using the configured parameters.

        Args:
            image: Input color (BGR) or grayscale image
            **kwargs: Overrides for any ``build_edge_mask`` parameter

        Returns:
            np.ndarray: Single-channel 0/255 mask with the image's height and width
        """
        self.validate_image(image)

        # Clear previous debug images
        self.clear_debug_images()

        params = {
            "canny_low": self.get_config_value("canny_low", 50.0),
            "canny_high": self.get_config_value("canny_high", 150.0),
            "blur_kernel_size": self.get_config_value("blur_kernel_size", 5),
            "adaptive_block_size": self.get_config_value("adaptive_block_size", 25),
            "adaptive_c": self.get_config_value("adaptive_c", 10.0),
            "dilate_kernel_size": self.get_config_value("dilate_kernel_size", 5),
            "dilate_iterations": self.get_config_value("dilate_iterations", 2),
        }
        params.update(kwargs)

        return build_edge_mask(image, processor=self, **params)


def resolve_canny_thresholds(low: float, high: float) -> Tuple[float, float]:
    """Return an ascending (low, high) pair for the Canny detector.

    When ``high`` is not above ``low`` it is derived as ``max(3 * low, low + 1)``.
    """
    low = float(low)
    high = float(high)
    if high <= low:
        high = max(low * 3.0, low + 1.0)
    return low, high


def pad_image(image: np.ndarray, pad: int) -> np.ndarray:
    """Add a replicated border of ``pad`` pixels on every side.

    Args:
        image: Input image
        pad: Border width; negative values are treated as 0

    Returns:
        New padded image (a copy when ``pad`` is 0)
    """
    pad = max(0, int(pad))
    if pad == 0:
        return image.copy()
    return cv2.copyMakeBorder(image, pad, pad, pad, pad, cv2.BORDER_REPLICATE)


def build_edge_mask(
    image: np.ndarray,
    canny_low: float = 50.0,
    canny_high: float = 150.0,
    blur_kernel_size: int = 5,
    adaptive_block_size: int = 25,
    adaptive_c: float = 10.0,
    dilate_kernel_size: int = 5,
    dilate_iterations: int = 2,
    processor=None,
) -> np.ndarray:
    """Convert a scanned sheet into a binary mask of candidate photo outlines.

    The steps are: grayscale, Gaussian blur, adaptive Gaussian threshold
    (robust to light and dark scanner backgrounds alike), inversion, Canny
    edge detection and rectangular dilation to close small gaps in the
    outlines.

    Args:
        image: Input image (BGR or grayscale)
        canny_low: Canny low threshold
        canny_high: Canny high threshold; derived from ``canny_low`` if not above it
        blur_kernel_size: Gaussian blur kernel size (odd)
        adaptive_block_size: Adaptive threshold neighbourhood size (odd)
        adaptive_c: Constant subtracted from the local weighted mean
        dilate_kernel_size: Side of the rectangular dilation kernel
        dilate_iterations: Number of dilation passes
        processor: Optional processor instance for debug saving

    Returns:
        np.ndarray: Binary mask (0 or 255), same height and width as the input
    """
    # Convert to grayscale if needed
    if len(image.shape) == 3:
        gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    else:
        gray = image.copy()

    if processor:
        processor.save_debug_image('01_grayscale', gray)

    blurred = cv2.GaussianBlur(gray, (blur_kernel_size, blur_kernel_size), 0)

    if processor:
        processor.save_debug_image('02_gaussian_blur', blurred)

    binary = cv2.adaptiveThreshold(
        blurred,
        255,
        cv2.ADAPTIVE_THRESH_GAUSSIAN_C,
        cv2.THRESH_BINARY,
        adaptive_block_size,
        adaptive_c
    )

    if processor:
        processor.save_debug_image('03_adaptive_threshold', binary)

    # Background becomes 0, photo outlines 255
    inverted = cv2.bitwise_not(binary)

    if processor:
        processor.save_debug_image('04_inverted', inverted)

    low, high = resolve_canny_thresholds(canny_low, canny_high)
    edges = cv2.Canny(inverted, low, high, apertureSize=3, L2gradient=False)

    if processor:
        processor.save_debug_image('05_canny_edges', edges)

    if dilate_iterations > 0:
        kernel = cv2.getStructuringElement(
            cv2.MORPH_RECT, (dilate_kernel_size, dilate_kernel_size)
        )
        edges = cv2.dilate(edges, kernel, iterations=dilate_iterations)

    if processor:
        processor.save_debug_image('06_dilated_edges', edges)

    return edges
