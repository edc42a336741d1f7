"""
Pytest configuration and shared fixtures for photo extractor tests.

Provides synthetic scans, temporary directories and configuration for all
test modules.
"""

import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Dict, Generator, Sequence, Tuple
import numpy as np
import cv2

from photo_extractor.config import Config, get_default_config
from photo_extractor.utils.logging_utils import setup_logging

RectSpec = Tuple[Tuple[float, float], Tuple[float, float], float]


def draw_scan(
    width: int,
    height: int,
    rects: Sequence[RectSpec],
    background: int = 0,
    foreground: int = 255,
) -> np.ndarray:
    """Create a synthetic scan with filled rotated rectangles as photos."""
    image = np.full((height, width, 3), background, dtype=np.uint8)
    for rect in rects:
        box = np.intp(np.round(cv2.boxPoints(rect)))
        cv2.fillPoly(image, [box], (foreground, foreground, foreground))
    return image


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def single_photo_scan() -> np.ndarray:
    """600x500 dark scan holding one 300x200 photo rotated by 15 degrees."""
    return draw_scan(600, 500, [((300, 250), (300, 200), 15)])


@pytest.fixture
def two_photo_scan() -> np.ndarray:
    """900x500 dark scan holding two well separated photos of different size."""
    return draw_scan(900, 500, [
        ((220, 250), (300, 200), 10),
        ((680, 250), (200, 150), -8),
    ])


@pytest.fixture
def blank_scan() -> np.ndarray:
    """Uniform scan without any photo."""
    return np.full((300, 400, 3), 40, dtype=np.uint8)


@pytest.fixture
def sample_config(temp_dir: Path) -> Config:
    """Configuration reading from and writing to a temporary tree."""
    config = get_default_config()
    config.input.input_dir = str(temp_dir / "input")
    config.output.output_dir = str(temp_dir / "output")
    config.logging.use_rich = False
    return config


@pytest.fixture
def scan_files(temp_dir: Path, single_photo_scan: np.ndarray,
               two_photo_scan: np.ndarray, blank_scan: np.ndarray) -> Dict[str, Path]:
    """Write synthetic scans into ``temp_dir/input``, one in a subdirectory."""
    input_dir = temp_dir / "input"
    nested = input_dir / "album"
    nested.mkdir(parents=True)

    files = {
        "single": input_dir / "single.png",
        "blank": input_dir / "blank.jpg",
        "double": nested / "double.png",
    }
    cv2.imwrite(str(files["single"]), single_photo_scan)
    cv2.imwrite(str(files["blank"]), blank_scan)
    cv2.imwrite(str(files["double"]), two_photo_scan)

    (input_dir / "notes.txt").write_text("not an image", encoding="utf-8")
    return files


@pytest.fixture(autouse=True)
def setup_test_logging():
    """Setup logging for tests."""
    setup_logging(
        level="WARNING",  # Only show warnings and errors in tests
        use_rich=False,
        format_style="minimal"
    )


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests (deselect with '-m \"not unit\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


def pytest_collection_modifyitems(config, items):
    """Add markers based on test location and name."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)

        if "slow" in item.name.lower():
            item.add_marker(pytest.mark.slow)
