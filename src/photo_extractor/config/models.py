"""
Pydantic models for photo extractor configuration.

Defines configuration schemas with validation, defaults, and
documentation for detection, input discovery, output writing and logging.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


DEFAULT_EXTENSIONS = ["jpg", "jpeg", "png", "bmp", "tif", "tiff"]


class LogLevel(str, Enum):
    """Supported logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ImageFormat(str, Enum):
    """Output encodings for cropped photos."""
    JPG = "jpg"
    PNG = "png"


class DetectionConfig(BaseModel):
    """Configuration for photo detection and edge extraction."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    min_area: float = Field(
        default=20000.0,
        ge=0.0,
        description="Minimum contour area (pixels) to consider as a photo"
    )
    pad: int = Field(
        default=12,
        description="Replicated border (pixels) added before detection to catch edge-touching photos"
    )
    canny_low: float = Field(
        default=50.0,
        ge=0.0,
        description="Canny low threshold (raise to be less sensitive)"
    )
    canny_high: float = Field(
        default=150.0,
        ge=0.0,
        description="Canny high threshold; derived from the low threshold when not above it"
    )
    blur_kernel_size: int = Field(
        default=5,
        ge=1,
        description="Gaussian blur kernel size (must be odd)"
    )
    adaptive_block_size: int = Field(
        default=25,
        ge=3,
        description="Neighbourhood size for the adaptive threshold (must be odd)"
    )
    adaptive_c: float = Field(
        default=10.0,
        description="Constant subtracted from the local weighted mean"
    )
    dilate_kernel_size: int = Field(
        default=5,
        ge=1,
        description="Size of the rectangular dilation kernel"
    )
    dilate_iterations: int = Field(
        default=2,
        ge=0,
        description="Number of dilation passes over the edge map"
    )

    @field_validator('pad')
    @classmethod
    def clamp_pad(cls, v):
        """Negative padding means no padding."""
        return max(0, v)

    @field_validator('blur_kernel_size', 'adaptive_block_size')
    @classmethod
    def validate_odd_kernel_size(cls, v):
        """Ensure kernel size is odd."""
        if v % 2 == 0:
            raise ValueError("Kernel size must be odd")
        return v


class InputConfig(BaseModel):
    """Configuration for locating scanned images."""

    model_config = ConfigDict(extra="forbid")

    input_dir: str = Field(
        default="input",
        description="Directory containing scanned sheets"
    )
    extensions: List[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS),
        description="File extensions treated as images (case-insensitive)"
    )
    recursive: bool = Field(
        default=True,
        description="Walk subdirectories of the input directory"
    )
    follow_links: bool = Field(
        default=True,
        description="Follow symbolic links while walking"
    )

    @field_validator('input_dir')
    @classmethod
    def validate_directory_path(cls, v):
        """Validate directory path format."""
        if not v or not isinstance(v, str):
            raise ValueError("Directory path must be a non-empty string")
        return v.replace('\\', '/')

    @field_validator('extensions')
    @classmethod
    def normalize_extensions(cls, v):
        """Store extensions lower-case without the leading dot."""
        normalized = [ext.lower().lstrip('.') for ext in v if ext and ext.strip('.')]
        if not normalized:
            raise ValueError("At least one image extension is required")
        return normalized


class OutputConfig(BaseModel):
    """Configuration for writing cropped photos."""

    model_config = ConfigDict(extra="forbid", use_enum_values=True, validate_default=True)

    output_dir: str = Field(
        default="output",
        description="Directory where cropped photos are written"
    )
    filename_template: str = Field(
        default="{stem}_{index}.{ext}",
        description="Output filename; {stem}, {index} (from 1) and {ext} are substituted"
    )
    image_format: ImageFormat = Field(
        default=ImageFormat.JPG,
        description="Encoding of the written crops"
    )
    jpeg_quality: int = Field(
        default=95,
        ge=1,
        le=100,
        description="JPEG quality for written crops"
    )
    mirror_input_tree: bool = Field(
        default=False,
        description="Write crops into subdirectories mirroring the input tree"
    )

    @field_validator('output_dir')
    @classmethod
    def validate_directory_path(cls, v):
        """Validate directory path format."""
        if not v or not isinstance(v, str):
            raise ValueError("Directory path must be a non-empty string")
        return v.replace('\\', '/')

    @field_validator('filename_template')
    @classmethod
    def validate_template(cls, v):
        """Template must number the crops."""
        if "{index}" not in v:
            raise ValueError("filename_template must contain '{index}'")
        return v


class ProcessingConfig(BaseModel):
    """Configuration for batch execution."""

    model_config = ConfigDict(extra="forbid")

    parallel: bool = Field(
        default=False,
        description="Process images in worker processes"
    )
    max_workers: Optional[int] = Field(
        default=None,
        gt=0,
        description="Worker process count (default: CPU count - 1)"
    )
    save_debug_images: bool = Field(
        default=False,
        description="Save intermediate masks and candidate overlays"
    )
    debug_dir: Optional[str] = Field(
        default=None,
        description="Directory for debug images (default: <output_dir>/debug)"
    )
    summary_file: Optional[str] = Field(
        default=None,
        description="Optional JSON file receiving the batch summary"
    )


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    model_config = ConfigDict(extra="forbid", use_enum_values=True, validate_default=True)

    level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Base logging level"
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional log file path"
    )
    use_rich: bool = Field(
        default=True,
        description="Whether to use rich console output"
    )
    format_style: str = Field(
        default="simple",
        pattern="^(simple|detailed|minimal)$",
        description="Logging format style"
    )


class Config(BaseModel):
    """Main configuration model for the photo extractor."""

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        use_enum_values=True,
    )

    detection: DetectionConfig = Field(
        default_factory=DetectionConfig,
        description="Detection configuration"
    )
    input: InputConfig = Field(
        default_factory=InputConfig,
        description="Input discovery configuration"
    )
    output: OutputConfig = Field(
        default_factory=OutputConfig,
        description="Output configuration"
    )
    processing: ProcessingConfig = Field(
        default_factory=ProcessingConfig,
        description="Batch processing configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration"
    )

    version: str = Field(
        default="1.0",
        description="Configuration version"
    )
    description: Optional[str] = Field(
        default=None,
        description="Configuration description"
    )

    @model_validator(mode="after")
    def validate_directories(self):
        """Input and output must not be the same directory."""
        if self.input.input_dir.rstrip('/') == self.output.output_dir.rstrip('/'):
            raise ValueError("output_dir must differ from input_dir")
        return self
