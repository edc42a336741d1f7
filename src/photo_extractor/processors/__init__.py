"""Photo Extractor Processors Module.

This module provides the image processing stages of photo detection.
Each processor handles one step from scanned sheet to rectified crop.
"""

# Base processor
from .base import BaseProcessor

# Image I/O
from .image_io import (
    load_image,
    save_image,
    get_image_files,
    is_image_file,
)

# Edge mask
from .preprocess import (
    EdgeMaskProcessor,
    build_edge_mask,
    pad_image,
    resolve_canny_thresholds,
)

# Contour extraction
from .contours import (
    ContourProcessor,
    find_candidates,
)

# Overlap resolution
from .overlap import (
    rects_overlap,
    resolve_overlaps,
)

# Rectification
from .rectify import (
    RectifyProcessor,
    order_points,
    target_size,
    warp_photo,
)

# Visualization
from .visualization import draw_candidates

__all__ = [
    # Base
    "BaseProcessor",

    # Image I/O
    "load_image",
    "save_image",
    "get_image_files",
    "is_image_file",

    # Edge mask
    "EdgeMaskProcessor",
    "build_edge_mask",
    "pad_image",
    "resolve_canny_thresholds",

    # Contour extraction
    "ContourProcessor",
    "find_candidates",

    # Overlap resolution
    "rects_overlap",
    "resolve_overlaps",

    # Rectification
    "RectifyProcessor",
    "order_points",
    "target_size",
    "warp_photo",

    # Visualization
    "draw_candidates",
]
