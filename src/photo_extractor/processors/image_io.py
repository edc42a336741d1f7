"""Image I/O utilities for loading scans and saving cropped photos."""

import os
from pathlib import Path
from typing import Iterable, List, Optional

import cv2
import numpy as np

from ..config.models import DEFAULT_EXTENSIONS
from ..exceptions import DirectoryError, ImageLoadError, ImageSaveError


def load_image(image_path: Path) -> np.ndarray:
    """Load image from file as a 3-channel BGR array.

    Args:
        image_path: Path to the image file

    Returns:
        numpy array containing the image

    Raises:
        ImageLoadError: If image cannot be read or decoded
    """
    image = cv2.imread(str(image_path), cv2.IMREAD_COLOR)
    if image is None or image.size == 0:
        raise ImageLoadError(
            f"Could not read image {image_path}", image_path=str(image_path)
        )
    return image


def save_image(image: np.ndarray, output_path: Path, jpeg_quality: int = 95) -> None:
    """Save image to file.

    Args:
        image: Image array to save
        output_path: Path where to save the image
        jpeg_quality: Quality used when the suffix is .jpg/.jpeg

    Raises:
        ImageSaveError: If image is empty or cannot be written
    """
    if image is None or image.size == 0:
        raise ImageSaveError(
            f"Cannot save empty image to {output_path}", image_path=str(output_path)
        )

    params = []
    if output_path.suffix.lower() in (".jpg", ".jpeg"):
        params = [cv2.IMWRITE_JPEG_QUALITY, int(jpeg_quality)]

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        written = cv2.imwrite(str(output_path), image, params)
    except (OSError, cv2.error) as e:
        raise ImageSaveError(
            f"Failed to save cropped photo to {output_path}: {e}",
            image_path=str(output_path)
        ) from e

    if not written:
        raise ImageSaveError(
            f"Failed to save cropped photo to {output_path}", image_path=str(output_path)
        )


def is_image_file(path: Path, extensions: Optional[Iterable[str]] = None) -> bool:
    """Check whether a path has one of the supported image extensions."""
    allowed = {ext.lower().lstrip('.') for ext in (extensions or DEFAULT_EXTENSIONS)}
    return path.suffix.lower().lstrip('.') in allowed


def get_image_files(
    directory: Path,
    extensions: Optional[Iterable[str]] = None,
    recursive: bool = True,
    follow_links: bool = True,
) -> List[Path]:
    """Get all image files from directory.

    Args:
        directory: Directory to search for images
        extensions: Allowed extensions (case-insensitive, with or without dot)
        recursive: Whether to descend into subdirectories
        follow_links: Whether to follow symlinked directories when recursing

    Returns:
        List of paths to image files, sorted

    Raises:
        DirectoryError: If the directory does not exist
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise DirectoryError(f"Input directory does not exist: {directory}")

    image_files = []
    if recursive:
        for root, _dirs, files in os.walk(directory, followlinks=follow_links):
            for name in files:
                path = Path(root) / name
                if path.is_file() and is_image_file(path, extensions):
                    image_files.append(path)
    else:
        image_files = [
            path for path in directory.iterdir()
            if path.is_file() and is_image_file(path, extensions)
        ]

    return sorted(image_files)
