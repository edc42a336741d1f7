"""Batch pipeline: scan directories, extract photos, write crops."""

import json
import logging
import traceback
from dataclasses import dataclass, field
from multiprocessing import Pool, cpu_count
from pathlib import Path
from typing import Any, Dict, List, Optional

from tqdm import tqdm

from .config.models import Config
from .detector import PhotoDetector
from .exceptions import ImageSaveError, PhotoExtractorError
from .processors import get_image_files, load_image, save_image
from .utils import log_processing_stats

logger = logging.getLogger(__name__)


@dataclass
class ImageResult:
    """Outcome of processing one scanned image."""

    image_path: Path
    outputs: List[Path] = field(default_factory=list)
    photos_found: int = 0
    write_errors: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None and not self.write_errors

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'image': str(self.image_path),
            'photos_found': self.photos_found,
            'outputs': [str(p) for p in self.outputs],
        }
        if self.write_errors:
            data['write_errors'] = list(self.write_errors)
        if self.error:
            data['error'] = self.error
        return data


@dataclass
class BatchSummary:
    """Aggregated results of a batch run."""

    successful: List[Dict[str, Any]] = field(default_factory=list)
    failed: List[Dict[str, Any]] = field(default_factory=list)
    photos_written: int = 0

    @property
    def total(self) -> int:
        return len(self.successful) + len(self.failed)

    @property
    def success_rate(self) -> float:
        return len(self.successful) / self.total * 100 if self.total > 0 else 0.0

    def add(self, result: ImageResult) -> None:
        self.photos_written += len(result.outputs)
        if result.success:
            self.successful.append(result.to_dict())
        else:
            self.failed.append(result.to_dict())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'successful': self.successful,
            'failed': self.failed,
            'total': self.total,
            'success_count': len(self.successful),
            'failed_count': len(self.failed),
            'photos_written': self.photos_written,
            'success_rate': f"{self.success_rate:.1f}%",
        }


def process_single_image_wrapper(image_path: Path, config: Config) -> ImageResult:
    """Process one image in a worker process.

    A fresh pipeline is built per task so workers share nothing.
    """
    try:
        return PhotoExtractionPipeline(config).process_image(image_path)
    except Exception as e:
        error_msg = f"Error processing {image_path}: {e}\n{traceback.format_exc()}"
        return ImageResult(image_path=Path(image_path), error=error_msg)


class PhotoExtractionPipeline:
    """Extract every photo from every scan in a directory tree."""

    def __init__(self, config: Optional[Config] = None, show_progress: bool = True):
        """Initialize the pipeline.

        Args:
            config: Full configuration (defaults if None)
            show_progress: Whether to show a progress bar for batches
        """
        self.config = config or Config()
        self.show_progress = show_progress
        self.detector = PhotoDetector(
            self.config.detection,
            save_debug_images=self.config.processing.save_debug_images,
        )

    @property
    def output_dir(self) -> Path:
        return Path(self.config.output.output_dir)

    @property
    def debug_dir(self) -> Path:
        if self.config.processing.debug_dir:
            return Path(self.config.processing.debug_dir)
        return self.output_dir / "debug"

    def output_path_for(self, image_path: Path, index: int) -> Path:
        """Destination of the ``index``-th crop (1-based) of ``image_path``."""
        output_cfg = self.config.output
        filename = output_cfg.filename_template.format(
            stem=image_path.stem, index=index, ext=output_cfg.image_format
        )

        target_dir = self.output_dir
        if output_cfg.mirror_input_tree:
            try:
                relative = image_path.parent.resolve().relative_to(
                    Path(self.config.input.input_dir).resolve()
                )
                target_dir = target_dir / relative
            except ValueError:
                pass  # not under the input root, write flat

        return target_dir / filename

    def process_image(self, image_path: Path) -> ImageResult:
        """Load one scan, detect its photos and write them out.

        A crop that cannot be written is recorded and the remaining crops
        are still written. Load and detection failures are recorded in the
        result, never raised.

        Args:
            image_path: Path of the scanned image

        Returns:
            ImageResult for this image
        """
        image_path = Path(image_path)
        result = ImageResult(image_path=image_path)

        try:
            image = load_image(image_path)
            photos = self.detector.detect(image)
        except PhotoExtractorError as e:
            logger.error(f"Failed to process {image_path.name}: {e}")
            result.error = str(e)
            return result

        result.photos_found = len(photos)
        if not photos:
            logger.info(f"No photos found in {image_path.name}")

        for index, photo in enumerate(photos, start=1):
            output_path = self.output_path_for(image_path, index)
            try:
                save_image(photo.image, output_path, self.config.output.jpeg_quality)
            except ImageSaveError as e:
                logger.error(str(e))
                result.write_errors.append(str(e))
                continue
            result.outputs.append(output_path)
            logger.debug(f"Saved {output_path} ({photo.shape[1]}x{photo.shape[0]})")

        if self.config.processing.save_debug_images:
            self._save_debug_images(image_path)

        if photos:
            logger.info(f"Saved {len(result.outputs)} cropped photo(s) from {image_path.name}")
        return result

    def _save_debug_images(self, image_path: Path) -> None:
        debug_dir = self.debug_dir / image_path.stem
        for name, image in self.detector.get_debug_images().items():
            try:
                save_image(image, debug_dir / f"{name}.png")
            except ImageSaveError as e:
                logger.warning(f"Could not save debug image: {e}")

    def process_batch(self, input_images: List[Path], parallel: Optional[bool] = None) -> BatchSummary:
        """Process a batch of images.

        Args:
            input_images: List of image paths to process
            parallel: Use worker processes (defaults to the configured value)

        Returns:
            BatchSummary with per-image results
        """
        summary = BatchSummary()
        if not input_images:
            return summary

        if parallel is None:
            parallel = self.config.processing.parallel

        with log_processing_stats("photo extraction", logger) as stats:
            if parallel and len(input_images) > 1:
                results = self._process_parallel(input_images)
            else:
                results = self._process_sequential(input_images)

            for result in results:
                summary.add(result)
                if result.success:
                    stats["files_processed"] += 1
                else:
                    stats["files_failed"] += 1
                stats["photos_written"] += len(result.outputs)

        for failed in summary.failed:
            logger.warning(f"Failed: {Path(failed['image']).name}")

        return summary

    def _process_parallel(self, input_images: List[Path]):
        max_workers = self.config.processing.max_workers or max(1, cpu_count() - 1)
        workers = min(max_workers, len(input_images))
        logger.info(f"Processing {len(input_images)} images using {workers} workers")

        tasks = [(path, self.config) for path in input_images]
        with Pool(processes=workers) as pool:
            with tqdm(total=len(input_images), desc="Extracting photos", unit="img",
                      disable=not self.show_progress) as pbar:
                for result in pool.starmap(process_single_image_wrapper, tasks):
                    pbar.update(1)
                    yield result

    def _process_sequential(self, input_images: List[Path]):
        logger.info(f"Processing {len(input_images)} images sequentially")

        for image_path in tqdm(input_images, desc="Extracting photos", unit="img",
                               disable=not self.show_progress):
            try:
                yield self.process_image(image_path)
            except Exception as e:
                logger.exception(f"Unexpected error processing {image_path}")
                yield ImageResult(image_path=Path(image_path), error=f"Error: {e}")

    def process_directory(self, input_dir: Optional[Path] = None,
                          parallel: Optional[bool] = None) -> BatchSummary:
        """Process all images under a directory.

        Args:
            input_dir: Input directory (defaults to the configured one)
            parallel: Use worker processes (defaults to the configured value)

        Returns:
            BatchSummary for the run

        Raises:
            DirectoryError: If the input directory does not exist
        """
        input_cfg = self.config.input
        input_dir = Path(input_dir or input_cfg.input_dir)

        image_files = get_image_files(
            input_dir,
            input_cfg.extensions,
            recursive=input_cfg.recursive,
            follow_links=input_cfg.follow_links,
        )

        if not image_files:
            logger.warning(f"No images found in {input_dir}")
            return BatchSummary()

        logger.info(f"Found {len(image_files)} images to process")
        return self.process_batch(image_files, parallel=parallel)

    def save_summary(self, summary: BatchSummary, output_path: Optional[Path] = None) -> Path:
        """Save the batch summary as JSON.

        Args:
            summary: Summary to save
            output_path: Destination (default: configured summary file, else
                output_dir/processing_summary.json)

        Returns:
            Path the summary was written to
        """
        if output_path is None:
            configured = self.config.processing.summary_file
            output_path = Path(configured) if configured else self.output_dir / "processing_summary.json"
        output_path = Path(output_path)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(summary.to_dict(), f, indent=2)

        logger.info(f"Summary saved to: {output_path}")
        return output_path
