"""Photo extractor: cut individual photos out of scanned sheets.

Each scan is searched for photo-shaped regions, overlapping detections are
resolved in favor of the largest, and every surviving region is rectified
into an upright crop.
"""

__version__ = "1.0.0"

from .config import Config, DetectionConfig, load_config
from .detector import PhotoDetector, detect_photos
from .exceptions import (
    PhotoExtractorError,
    ConfigurationError,
    ProcessingError,
    ImageLoadError,
    ImageSaveError,
    ValidationError,
    DirectoryError,
)
from .pipeline import BatchSummary, ImageResult, PhotoExtractionPipeline
from .types import Candidate, DetectedPhoto, RotatedRect

__all__ = [
    "__version__",
    "Config",
    "DetectionConfig",
    "load_config",
    "PhotoDetector",
    "detect_photos",
    "PhotoExtractionPipeline",
    "ImageResult",
    "BatchSummary",
    "Candidate",
    "DetectedPhoto",
    "RotatedRect",
    "PhotoExtractorError",
    "ConfigurationError",
    "ProcessingError",
    "ImageLoadError",
    "ImageSaveError",
    "ValidationError",
    "DirectoryError",
]
