"""
Configuration system with Pydantic models and validation.

Provides configuration management with type safety, validation,
and support for JSON, YAML and TOML configuration files.
"""

from .models import (
    Config,
    DetectionConfig,
    InputConfig,
    OutputConfig,
    ProcessingConfig,
    LoggingConfig,
    ImageFormat,
    LogLevel,
)
from .loader import (
    load_config,
    load_config_from_dict,
    save_config,
    get_default_config,
    validate_config_file,
)

__all__ = [
    # Configuration models
    "Config",
    "DetectionConfig",
    "InputConfig",
    "OutputConfig",
    "ProcessingConfig",
    "LoggingConfig",
    "ImageFormat",
    "LogLevel",
    # Configuration loading
    "load_config",
    "load_config_from_dict",
    "save_config",
    "get_default_config",
    "validate_config_file",
]
