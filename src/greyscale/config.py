"""Configuration loading."""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from .codec import DEFAULT_CODEC
from .errors import ConfigError

CONFIG_ENV_VAR = "GREYSCALE_CONFIG"
CODEC_ENV_VAR = "GREYSCALE_CODEC"


@dataclass
class GreyscaleConfig:
    """Settings for a conversion run."""

    codec: str = DEFAULT_CODEC

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GreyscaleConfig":
        """Create GreyscaleConfig from YAML dict."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

        codec = data.get("codec", DEFAULT_CODEC)
        if not isinstance(codec, str):
            raise ConfigError("'codec' must be a string")
        return cls(codec=codec)

    @classmethod
    def from_yaml(cls, path: Path) -> "GreyscaleConfig":
        """Load configuration from a YAML file.

        An empty file yields the defaults.
        """
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigError(f"Could not read config file '{path}': {e.strerror}", path) from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file '{path}'.", path) from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file '{path}' must contain a mapping.", path)
        try:
            return cls.from_dict(data)
        except ConfigError as e:
            raise ConfigError(f"{e} (in '{path}')", path) from e


def load_config() -> GreyscaleConfig:
    """Load the effective configuration.

    A config file is only read when ``GREYSCALE_CONFIG`` names one, and that
    file must exist. ``GREYSCALE_CODEC`` overrides the codec either way.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = Path(env_path)
        if not path.exists():
            raise ConfigError(f"Config file '{path}' from {CONFIG_ENV_VAR} does not exist.", path)
        config = GreyscaleConfig.from_yaml(path)
    else:
        config = GreyscaleConfig()

    codec_override = os.environ.get(CODEC_ENV_VAR)
    if codec_override:
        config.codec = codec_override
    return config
