"""
Reading and writing photo extractor configuration files.

JSON, YAML and TOML are read (the format follows the file suffix, with
content sniffing for anything else); JSON and YAML can be written back.
String values may reference environment variables as ``${NAME}`` or
``${NAME:fallback}``.
"""

import json
import os
import re
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import yaml
from pydantic import ValidationError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from .models import Config
from ..exceptions import ConfigurationError

PathLike = Union[str, Path]

ENV_PREFIX = "PHOTO_"

_ENV_REFERENCE = re.compile(r'\$\{([^}]+)\}')


def load_config(config_path: PathLike) -> Config:
    """
    Read, expand and validate a configuration file.

    Args:
        config_path: JSON, YAML or TOML file

    Returns:
        Validated configuration

    Raises:
        ConfigurationError: If the file is missing, unparsable or invalid
    """
    path = Path(config_path)
    if not path.is_file():
        raise ConfigurationError(f"Configuration file not found: {path}")

    reader = _READERS.get(path.suffix.lower(), _read_any)
    try:
        raw = reader(path.read_text(encoding='utf-8'))
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration {path}: {e}") from e
    except (json.JSONDecodeError, yaml.YAMLError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Malformed configuration {path}: {e}") from e

    if raw is None:
        raw = {}
    return load_config_from_dict(_expand_env(raw))


def load_config_from_dict(config_data: Dict[str, Any]) -> Config:
    """
    Validate a configuration mapping.

    Every pydantic error is reported on its own line as
    ``section -> field: message``.

    Raises:
        ConfigurationError: If the mapping does not describe a valid Config
    """
    if not isinstance(config_data, dict):
        raise ConfigurationError(
            f"Configuration must be a mapping, got {type(config_data).__name__}"
        )

    try:
        return Config(**config_data)
    except ValidationError as e:
        problems = [
            f"{' -> '.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        raise ConfigurationError(
            "Configuration validation failed:\n" + "\n".join(problems)
        ) from e


def save_config(config: Config, output_path: PathLike, format_type: Optional[str] = None) -> None:
    """
    Write a configuration as JSON or YAML.

    Args:
        config: Configuration to write
        output_path: Destination file
        format_type: 'json', 'yaml' or 'yml'; taken from the suffix if None

    Raises:
        ConfigurationError: If the format is unsupported or writing fails
    """
    path = Path(output_path)
    format_type = (format_type or path.suffix.lstrip('.')).lower()

    writer = _WRITERS.get(format_type)
    if writer is None:
        raise ConfigurationError(f"Unsupported format: {format_type}")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(writer(config.model_dump(mode="json")), encoding='utf-8')
    except OSError as e:
        raise ConfigurationError(f"Error saving configuration to {path}: {e}") from e


def get_default_config() -> Config:
    """Configuration with every default value."""
    return Config()


def validate_config_file(config_path: PathLike) -> bool:
    """
    Check a configuration file without using it.

    Returns:
        True when the file loads

    Raises:
        ConfigurationError: If it does not
    """
    load_config(config_path)
    return True


def _read_json(text: str) -> Any:
    return json.loads(text)


def _read_yaml(text: str) -> Any:
    return yaml.safe_load(text)


def _read_toml(text: str) -> Any:
    return tomllib.loads(text)


def _read_any(text: str) -> Any:
    """Sniff the format of a file with an unknown suffix."""
    stripped = text.strip()
    if stripped.startswith('{'):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            pass

    try:
        data = yaml.safe_load(stripped)
    except yaml.YAMLError:
        data = None
    if isinstance(data, dict):
        return data

    try:
        return tomllib.loads(stripped)
    except tomllib.TOMLDecodeError:
        raise ConfigurationError("Unable to detect configuration format") from None


_READERS: Dict[str, Callable[[str], Any]] = {
    '.json': _read_json,
    '.yaml': _read_yaml,
    '.yml': _read_yaml,
    '.toml': _read_toml,
}

_WRITERS: Dict[str, Callable[[Dict[str, Any]], str]] = {
    'json': lambda data: json.dumps(data, indent=2, ensure_ascii=False),
    'yaml': lambda data: yaml.safe_dump(data, default_flow_style=False, allow_unicode=True, indent=2),
    'yml': lambda data: yaml.safe_dump(data, default_flow_style=False, allow_unicode=True, indent=2),
}


def _expand_env(data: Any, prefix: str = ENV_PREFIX) -> Any:
    """Replace environment references in every string of a nested structure."""
    if isinstance(data, dict):
        return {key: _expand_env(value, prefix) for key, value in data.items()}
    if isinstance(data, list):
        return [_expand_env(item, prefix) for item in data]
    if isinstance(data, str):
        return _ENV_REFERENCE.sub(lambda m: _resolve_reference(m, prefix), data)
    return data


def _resolve_reference(match: "re.Match[str]", prefix: str) -> str:
    """Value for one ``${NAME[:fallback]}``; ``PHOTO_NAME`` wins over ``NAME``.

    Unset references without a fallback are left as written.
    """
    name, sep, fallback = match.group(1).partition(':')
    for candidate in (f"{prefix}{name}", name):
        if candidate in os.environ:
            return os.environ[candidate]
    return fallback if sep else match.group(0)
