"""
Custom exceptions for the photo extraction pipeline.

Provides a hierarchy of exceptions for the errors that can occur while
loading scans, detecting photos and writing the rectified crops.
"""

from typing import Optional, Any


class PhotoExtractorError(Exception):
    """Base exception for all photo extractor errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} (Details: {details_str})"
        return self.message


class ConfigurationError(PhotoExtractorError):
    """Raised when there are configuration-related errors."""
    pass


class ProcessingError(PhotoExtractorError):
    """Raised when an image processing stage fails."""

    def __init__(self, message: str, processor: Optional[str] = None,
                 image_path: Optional[str] = None, stage: Optional[str] = None,
                 **kwargs: Any) -> None:
        details = kwargs
        if processor:
            details["processor"] = processor
        if image_path:
            details["image_path"] = image_path
        if stage:
            details["stage"] = stage
        self.stage = stage
        super().__init__(message, details)


class ImageLoadError(ProcessingError):
    """Raised when an image cannot be loaded or is invalid."""
    pass


class ImageSaveError(ProcessingError):
    """Raised when a cropped photo cannot be saved."""
    pass


class ValidationError(PhotoExtractorError):
    """Raised when input validation fails."""
    pass


class DirectoryError(PhotoExtractorError):
    """Raised when directory operations fail."""
    pass
