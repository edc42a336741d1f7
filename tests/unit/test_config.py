"""Tests for configuration models and loading."""

import json

import pydantic
import pytest
import yaml

from photo_extractor.config import (
    Config,
    DetectionConfig,
    InputConfig,
    OutputConfig,
    get_default_config,
    load_config,
    load_config_from_dict,
    save_config,
    validate_config_file,
)
from photo_extractor.exceptions import ConfigurationError


class TestModels:
    """Tests for the pydantic configuration models."""

    def test_detection_defaults(self):
        config = DetectionConfig()

        assert config.min_area == 20000
        assert config.pad == 12
        assert config.canny_low == 50
        assert config.canny_high == 150

    def test_negative_pad_clamped(self):
        assert DetectionConfig(pad=-7).pad == 0

    def test_even_kernel_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            DetectionConfig(blur_kernel_size=4)

    def test_negative_min_area_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            DetectionConfig(min_area=-1)

    def test_assignment_validated(self):
        config = DetectionConfig()
        with pytest.raises(pydantic.ValidationError):
            config.adaptive_block_size = 24

    def test_extensions_normalized(self):
        config = InputConfig(extensions=[".JPG", "Png", "tif"])
        assert config.extensions == ["jpg", "png", "tif"]

    def test_template_needs_index(self):
        with pytest.raises(pydantic.ValidationError):
            OutputConfig(filename_template="{stem}.{ext}")

    def test_image_format_is_plain_string(self):
        assert OutputConfig().image_format == "jpg"
        assert OutputConfig(image_format="png").image_format == "png"

    def test_default_config(self):
        config = get_default_config()

        assert isinstance(config, Config)
        assert config.output.jpeg_quality == 95
        assert config.processing.parallel is False
        assert config.logging.level == "INFO"


class TestLoadConfigFromDict:
    """Tests for load_config_from_dict."""

    def test_partial_sections(self):
        config = load_config_from_dict({"detection": {"min_area": 5000, "pad": 0}})

        assert config.detection.min_area == 5000
        assert config.detection.pad == 0
        assert config.detection.canny_high == 150

    def test_invalid_value_reports_location(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config_from_dict({"output": {"jpeg_quality": 0}})
        assert "output -> jpeg_quality" in str(exc_info.value)

    def test_unknown_section_rejected(self):
        with pytest.raises(ConfigurationError):
            load_config_from_dict({"ocr": {}})

    @pytest.mark.parametrize("section", ["detection", "input", "output", "processing", "logging"])
    def test_unknown_key_in_section_rejected(self, section):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config_from_dict({section: {"min_aera": 5000}})
        assert f"{section} -> min_aera" in str(exc_info.value)

    def test_same_input_and_output_rejected(self):
        with pytest.raises(ConfigurationError):
            load_config_from_dict({
                "input": {"input_dir": "scans"},
                "output": {"output_dir": "scans/"},
            })

    def test_non_mapping_rejected(self):
        with pytest.raises(ConfigurationError):
            load_config_from_dict(["detection"])


class TestLoadConfig:
    """Tests for loading configuration files."""

    def test_json(self, temp_dir):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"detection": {"min_area": 1234}}), encoding="utf-8")

        assert load_config(path).detection.min_area == 1234

    def test_yaml(self, temp_dir):
        path = temp_dir / "config.yaml"
        path.write_text(yaml.safe_dump({"processing": {"parallel": True, "max_workers": 2}}),
                        encoding="utf-8")

        config = load_config(path)
        assert config.processing.parallel is True
        assert config.processing.max_workers == 2

    def test_toml(self, temp_dir):
        path = temp_dir / "config.toml"
        path.write_text("[detection]\ncanny_low = 30.0\ncanny_high = 90.0\n", encoding="utf-8")

        config = load_config(path)
        assert config.detection.canny_low == 30
        assert config.detection.canny_high == 90

    def test_auto_detect(self, temp_dir):
        path = temp_dir / "settings.conf"
        path.write_text("output:\n  image_format: png\n", encoding="utf-8")

        assert load_config(path).output.image_format == "png"

    def test_env_substitution(self, temp_dir, monkeypatch):
        monkeypatch.setenv("PHOTO_MIN_AREA", "4321")
        path = temp_dir / "config.yaml"
        path.write_text(
            "detection:\n  min_area: ${MIN_AREA}\n  pad: ${PAD:3}\n", encoding="utf-8"
        )

        config = load_config(path)
        assert config.detection.min_area == 4321
        assert config.detection.pad == 3

    def test_missing_file(self, temp_dir):
        with pytest.raises(ConfigurationError):
            load_config(temp_dir / "missing.yaml")

    def test_invalid_json(self, temp_dir):
        path = temp_dir / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_config(path)

    @pytest.mark.parametrize("name", ["saved.json", "saved.yaml"])
    def test_save_and_validate(self, temp_dir, name):
        config = load_config_from_dict({"detection": {"min_area": 777}})
        path = temp_dir / name

        save_config(config, path)

        assert validate_config_file(path)
        assert load_config(path).detection.min_area == 777

    def test_save_unsupported_format(self, temp_dir):
        with pytest.raises(ConfigurationError):
            save_config(get_default_config(), temp_dir / "config.ini")
