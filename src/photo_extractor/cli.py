"""Command-line interface for the photo extractor.

Usage:
    photo-extractor INPUT_DIR OUTPUT_DIR [options]

Example:
    photo-extractor scans/ photos/ --min-area 30000 --parallel --workers 4
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import Config, load_config, load_config_from_dict
from .exceptions import ConfigurationError, DirectoryError
from .pipeline import PhotoExtractionPipeline
from .utils import configure_opencv_logging, get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="photo-extractor",
        description="Extract individual photos from scanned sheets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("input_dir", help="Directory with scanned images (searched recursively)")
    parser.add_argument("output_dir", help="Directory for the cropped photos")

    detection = parser.add_argument_group("detection")
    detection.add_argument(
        "--min-area",
        type=float,
        default=None,
        help="Minimum contour area for a photo (default: 20000)",
    )
    detection.add_argument(
        "--pad",
        type=int,
        default=None,
        help="Replicated border added before detection (default: 12)",
    )
    detection.add_argument(
        "--canny-low",
        type=float,
        default=None,
        help="Canny low threshold (default: 50)",
    )
    detection.add_argument(
        "--canny-high",
        type=float,
        default=None,
        help="Canny high threshold; derived from --canny-low when not above it (default: 150)",
    )

    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Configuration file (JSON, YAML or TOML)",
    )
    parser.add_argument(
        "--parallel", action="store_true", help="Process images in worker processes"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of worker processes (default: CPU count - 1)",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Save intermediate detection images"
    )
    parser.add_argument(
        "--debug-dir",
        default=None,
        help="Directory for debug images (default: OUTPUT_DIR/debug)",
    )
    parser.add_argument(
        "--jpeg-quality",
        type=int,
        default=None,
        help="JPEG quality of written photos (default: 95)",
    )
    parser.add_argument(
        "--summary",
        default=None,
        help="Write a JSON processing summary to this path",
    )
    parser.add_argument("--log-file", default=None, help="Also log to this file")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"%(prog)s {__version__}"
    )

    return parser


def build_config(args: argparse.Namespace) -> Config:
    """Merge the optional config file with command-line overrides.

    Raises:
        ConfigurationError: If the file or the merged values are invalid
    """
    base = load_config(args.config) if args.config else Config()
    data = base.model_dump(mode="json")

    data["input"]["input_dir"] = args.input_dir
    data["output"]["output_dir"] = args.output_dir

    overrides = {
        ("detection", "min_area"): args.min_area,
        ("detection", "pad"): args.pad,
        ("detection", "canny_low"): args.canny_low,
        ("detection", "canny_high"): args.canny_high,
        ("output", "jpeg_quality"): args.jpeg_quality,
        ("processing", "max_workers"): args.workers,
        ("processing", "debug_dir"): args.debug_dir,
        ("processing", "summary_file"): args.summary,
        ("logging", "log_file"): args.log_file,
    }
    for (section, key), value in overrides.items():
        if value is not None:
            data[section][key] = value

    if args.parallel:
        data["processing"]["parallel"] = True
    if args.debug:
        data["processing"]["save_debug_images"] = True
    if args.verbose:
        data["logging"]["level"] = "DEBUG"

    return load_config_from_dict(data)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Returns:
        0 when the batch ran (even if some images failed), 1 on
        configuration or input directory errors
    """
    args = build_parser().parse_args(argv)

    try:
        config = build_config(args)
    except ConfigurationError as e:
        setup_logging(level="ERROR", use_rich=False, format_style="minimal")
        logger.error(f"Invalid configuration: {e}")
        return 1

    log_cfg = config.logging
    setup_logging(
        level=log_cfg.level,
        log_file=log_cfg.log_file,
        use_rich=log_cfg.use_rich,
        format_style=log_cfg.format_style,
    )
    configure_opencv_logging(logging.getLevelName(log_cfg.level))

    pipeline = PhotoExtractionPipeline(config)

    try:
        summary = pipeline.process_directory()
    except DirectoryError as e:
        logger.error(str(e))
        return 1

    logger.info(
        f"Processed {summary.total} image(s): {len(summary.successful)} ok, "
        f"{len(summary.failed)} failed, {summary.photos_written} photo(s) written"
    )

    if config.processing.summary_file:
        pipeline.save_summary(summary)

    return 0


if __name__ == "__main__":
    from multiprocessing import freeze_support
    freeze_support()

    sys.exit(main())
