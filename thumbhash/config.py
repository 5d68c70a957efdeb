"""Configuration loaded from thumbhash.toml.

Example file:

    [decode]
    base_size = 32
    saturation_boost = 1.25

    [image]
    max_side = 100

    [pool]
    enabled = true
    max_arenas = 4
    initial_bytes = 1048576

Every table and key is optional; missing values take the defaults above.
"""

from __future__ import annotations

import logging
import os
from typing import Any, cast

from pydantic import BaseModel, Field

# TOML loading for Python 3.11+ and older
try:
    import tomllib  # type: ignore[import-not-found, unused-ignore]
except ImportError:
    import tomli as tomllib  # type: ignore[import-not-found, no-redef, unused-ignore]

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "THUMBHASH_CONFIG"
CONFIG_FILENAME = "thumbhash.toml"


class DecodeOptions(BaseModel):
    """Options of the decode path.

    Attributes:
        base_size: Longer side of the placeholder in pixels
        saturation_boost: Chroma scale multiplier
    """

    model_config = {"extra": "forbid"}

    base_size: int = Field(default=32, ge=1)
    saturation_boost: float = Field(default=1.25, gt=0.0)


class ImageOptions(BaseModel):
    """Options of the image file layer.

    Attributes:
        max_side: Images are downscaled so their longer side is at most this
    """

    model_config = {"extra": "forbid"}

    max_side: int = Field(default=100, ge=1)


class PoolOptions(BaseModel):
    """Scratch arena pool options."""

    model_config = {"extra": "forbid"}

    enabled: bool = True
    max_arenas: int = Field(default=4, ge=0)
    initial_bytes: int = Field(default=1 << 20, gt=0)
    max_retained_bytes: int = Field(default=1 << 24, gt=0)


class Settings(BaseModel):
    """All configuration tables."""

    model_config = {"extra": "forbid"}

    decode: DecodeOptions = Field(default_factory=DecodeOptions)
    image: ImageOptions = Field(default_factory=ImageOptions)
    pool: PoolOptions = Field(default_factory=PoolOptions)


def _resolve_config_path(config_path: str | None) -> str | None:
    """Resolve configuration path from env, explicit path, or defaults."""
    env_config = os.environ.get(CONFIG_ENV_VAR)
    if env_config:
        return env_config
    if config_path:
        return config_path
    candidates = [
        CONFIG_FILENAME,
        os.path.expanduser(f"~/{CONFIG_FILENAME}"),
    ]
    for candidate in candidates:
        if os.path.exists(candidate):
            return candidate
    return None


def load_settings(config_path: str | None = None) -> Settings:
    """Load settings, falling back to defaults when no file is found.

    Raises:
        FileNotFoundError: If an explicitly named config file does not exist
        pydantic.ValidationError: If the file holds unknown or invalid values
    """
    resolved_path = _resolve_config_path(config_path)
    if resolved_path is None:
        return Settings()
    if not os.path.exists(resolved_path):
        raise FileNotFoundError(
            f"Config file not found at {resolved_path}. "
            f"Set {CONFIG_ENV_VAR} or create {CONFIG_FILENAME}"
        )
    with open(resolved_path, "rb") as f:
        config = cast(dict[str, Any], tomllib.load(f))
    logger.debug("loaded configuration from %s", resolved_path)
    return Settings.model_validate(config)
