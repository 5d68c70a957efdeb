"""Image file I/O using Pillow."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


def load_image(path: str | Path, max_side: int | None = None) -> np.ndarray:
    """Load an image file as an (H, W, 4) RGBA uint8 array.

    Args:
        path: Image file path
        max_side: Downscale so the longer side is at most this many pixels

    Raises:
        ValueError: If the file cannot be read as an image
    """
    try:
        with Image.open(path) as img:
            rgba = img.convert("RGBA")
    except (OSError, Image.DecompressionBombError) as e:
        raise ValueError(f"Could not load image from {path}: {e}") from e

    if max_side is not None and max(rgba.size) > max_side:
        original = rgba.size
        rgba.thumbnail((max_side, max_side), Image.Resampling.BOX)
        logger.debug("downscaled %s from %s to %s", path, original, rgba.size)

    return np.asarray(rgba, dtype=np.uint8)


def save_image(image: np.ndarray, path: str | Path) -> None:
    """Save an (H, W, 4) RGBA array as PNG."""
    Image.fromarray(np.ascontiguousarray(image, dtype=np.uint8)).save(path, format="PNG")
