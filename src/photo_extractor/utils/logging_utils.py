"""
Logging setup for the photo extractor.

Console output goes through rich by default, or through a plain stderr
handler. An optional log file always records DEBUG detail so a quiet
console run can still be diagnosed afterwards.
"""

import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Optional, Union, Generator

import cv2
from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)

# Which optional record fields each console style shows
_STYLE_FIELDS = {
    "minimal": (False, False),
    "simple": (True, False),
    "detailed": (True, True),
}

# Python level ceiling -> OpenCV log level (0=SILENT ... 5=DEBUG)
_OPENCV_LEVELS = (
    (logging.DEBUG, 5),
    (logging.INFO, 4),
    (logging.WARNING, 3),
    (logging.ERROR, 2),
)


class ExtractorFormatter(logging.Formatter):
    """Plain-text formatter: time, optional logger name, level, optional function."""

    def __init__(self, include_module: bool = True, include_function: bool = False):
        self.include_module = include_module
        self.include_function = include_function

        fields = ["%(asctime)s"]
        if include_module:
            fields.append("%(name)s")
        fields.append("%(levelname)s")
        if include_function:
            fields.append("%(funcName)s")
        fields.append("%(message)s")

        super().__init__(" - ".join(fields), datefmt="%Y-%m-%d %H:%M:%S")


def _console_handler(use_rich: bool, format_style: str) -> logging.Handler:
    if use_rich:
        handler = RichHandler(
            console=console,
            show_time=format_style != "minimal",
            show_path=format_style == "detailed",
            markup=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        return handler

    include_module, include_function = _STYLE_FIELDS.get(format_style, (True, True))
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ExtractorFormatter(include_module, include_function))
    return handler


def setup_logging(
    level: Union[str, int] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    use_rich: bool = True,
    format_style: str = "simple"
) -> logging.Logger:
    """
    Configure the root logger, replacing any handlers installed earlier.

    Args:
        level: Console level, as a name or a number
        log_file: File that additionally receives every DEBUG record
        use_rich: Render console records with rich
        format_style: 'minimal', 'simple' or 'detailed'

    Returns:
        The root logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    # The root level must let DEBUG through when a file wants it
    root_logger.setLevel(logging.DEBUG if log_file else level)

    console_handler = _console_handler(use_rich, format_style)
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setFormatter(ExtractorFormatter(include_module=True, include_function=True))
        file_handler.setLevel(logging.DEBUG)
        root_logger.addHandler(file_handler)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, normally called with ``__name__``."""
    return logging.getLogger(name)


@contextmanager
def log_processing_stats(
    operation: str,
    logger: Optional[logging.Logger] = None,
    level: int = logging.INFO
) -> Generator[Dict[str, Any], None, None]:
    """
    Time a batch operation and log its counters when it finishes.

    The caller increments ``files_processed``, ``files_failed`` and
    ``photos_written`` in the yielded dict; ``duration`` and
    ``success_rate`` are filled in on exit.

    Args:
        operation: Name used in the start and end messages
        logger: Logger to report to (root logger if None)
        level: Level of the start and end messages
    """
    logger = logger or logging.getLogger()
    started = time.perf_counter()
    stats: Dict[str, Any] = {
        "operation": operation,
        "files_processed": 0,
        "files_failed": 0,
        "photos_written": 0,
    }

    logger.log(level, f"Starting {operation}")
    try:
        yield stats
    except Exception as e:
        logger.error(f"Failed {operation} after {time.perf_counter() - started:.2f}s: {e}")
        raise

    attempted = stats["files_processed"] + stats["files_failed"]
    stats["duration"] = time.perf_counter() - started
    stats["success_rate"] = stats["files_processed"] / attempted if attempted else 0

    logger.log(
        level,
        f"Completed {operation}: {stats['files_processed']} ok, "
        f"{stats['files_failed']} failed, {stats['photos_written']} photo(s) "
        f"in {stats['duration']:.2f}s ({stats['success_rate'] * 100:.1f}% success)"
    )


def configure_opencv_logging(level: int = logging.WARNING) -> None:
    """Keep OpenCV's own log output in step with the Python log level."""
    for ceiling, cv_level in _OPENCV_LEVELS:
        if level <= ceiling:
            cv2.setLogLevel(cv_level)
            return
    cv2.setLogLevel(1)
