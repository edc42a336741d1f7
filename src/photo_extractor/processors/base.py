"""Common base for the detection stages."""

from typing import Any, Dict, Optional
import numpy as np
from abc import ABC, abstractmethod

from ..exceptions import ValidationError


class BaseProcessor(ABC):
    """One detection stage: reads parameters from a config object and can
    keep named intermediate images of its last run for inspection."""

    name = "base"

    def __init__(self, config: Optional[Any] = None, save_debug_images: bool = False):
        self.config = config
        self.save_debug = save_debug_images
        self.debug_images: Dict[str, np.ndarray] = {}

    def get_config_value(self, key: str, default: Any) -> Any:
        """Attribute ``key`` of the config, or ``default`` without a config."""
        if self.config is None:
            return default
        return getattr(self.config, key, default)

    @abstractmethod
    def process(self, image: np.ndarray, **kwargs) -> Any:
        """Run the stage on one image."""

    def validate_image(self, image: np.ndarray) -> None:
        """Reject anything that is not a non-empty 2-D or 3-D array.

        Raises:
            ValidationError: Naming this stage and the problem
        """
        if image is None:
            raise ValidationError(f"{self.name}: image is None")
        if not isinstance(image, np.ndarray):
            raise ValidationError(f"{self.name}: expected numpy array, got {type(image).__name__}")
        if image.size == 0:
            raise ValidationError(f"{self.name}: image is empty")
        if image.ndim not in (2, 3):
            raise ValidationError(f"{self.name}: expected 2-D or 3-D image, got shape {image.shape}")

    def save_debug_image(self, name: str, image: np.ndarray) -> None:
        """Keep ``image`` under ``name`` when debug images are enabled."""
        if self.save_debug:
            self.debug_images[name] = image

    def get_debug_images(self) -> Dict[str, np.ndarray]:
        return self.debug_images

    def clear_debug_images(self) -> None:
        self.debug_images = {}
