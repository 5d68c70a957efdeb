"""High-level API for hash encoding and decoding.

Provides encode() and decode() functions that run the complete pipeline
inside a World backed by an arena from the shared pool.
"""

from __future__ import annotations

import logging
from typing import Any, cast

import numpy as np

from thumbhash.components.hash import HashBytes, HashHeader
from thumbhash.components.image import ReconRGBA
from thumbhash.config import DecodeOptions, PoolOptions
from thumbhash.core.pool import ArenaPool
from thumbhash.core.serialization import deserialize_hash, deserialize_header
from thumbhash.core.world import World
from thumbhash.systems.color import ColorConvert
from thumbhash.systems.pack import PackHash
from thumbhash.systems.quantize import Quantize
from thumbhash.systems import transform
from thumbhash.systems.transform import CosineTransform

logger = logging.getLogger(__name__)

# Slack for dtype alignment between arena allocations
_ALIGNMENT_SLACK = 64

# uint8 RGBA plus four float64 planes
_BYTES_PER_PIXEL = 4 + 4 * 8

_pool = ArenaPool()


def configure_pool(options: PoolOptions) -> ArenaPool:
    """Replace the shared arena pool used by encode() and decode()."""
    global _pool
    _pool = ArenaPool(
        max_arenas=options.max_arenas,
        initial_bytes=options.initial_bytes,
        enabled=options.enabled,
        max_retained_bytes=options.max_retained_bytes,
    )
    return _pool


def get_pool() -> ArenaPool:
    """Return the shared arena pool."""
    return _pool


def _as_pixel_array(pixels: Any, width: int, height: int) -> np.ndarray:
    """Normalize any RGBA buffer to an (H, W, 4) uint8 array."""
    if width < 1 or height < 1:
        raise ValueError(f"Image must be at least 1x1, got {width}x{height}")

    if isinstance(pixels, (bytes, bytearray, memoryview)):
        arr = np.frombuffer(pixels, dtype=np.uint8)
    else:
        arr = np.asarray(pixels)

    expected = width * height * 4
    if arr.size != expected:
        raise ValueError(
            f"Expected {expected} values for a {width}x{height} RGBA image, got {arr.size}"
        )
    if arr.dtype != np.uint8:
        if not np.issubdtype(arr.dtype, np.integer):
            raise ValueError(f"Expected integer pixel values, got {arr.dtype}")
        if arr.min() < 0 or arr.max() > 255:
            raise ValueError("Pixel values must be within [0, 255]")
        arr = arr.astype(np.uint8)

    return arr.reshape(height, width, 4)


def encode(
    pixels: Any,
    width: int,
    height: int,
    pool: ArenaPool | None = None,
) -> bytes:
    """Compute the hash of an RGBA pixel buffer.

    Args:
        pixels: width*height*4 RGBA bytes, row-major; bytes-like, sequence or
            array of shape (H, W, 4)
        width: Image width in pixels
        height: Image height in pixels
        pool: Arena pool to borrow scratch memory from (shared pool if None)

    Returns:
        Hash bytes

    Raises:
        ValueError: If the buffer does not match the dimensions

    Example:
        >>> img = np.full((16, 24, 4), 255, dtype=np.uint8)
        >>> hash_bytes = encode(img, 24, 16)
    """
    image = _as_pixel_array(pixels, width, height)
    arena_bytes = width * height * _BYTES_PER_PIXEL + _ALIGNMENT_SLACK

    with (pool or _pool).checkout(arena_bytes) as arena:
        world = World(arena=arena)
        try:
            entity = world.spawn_image(image)
            packed: HashBytes = (
                world.pipe(entity)
                .to(ColorConvert(mode="encode"))
                .to(CosineTransform(mode="encode"))
                .to(Quantize(mode="encode"))
                .to(PackHash(mode="encode"))
                .out(HashBytes)
            )
            logger.debug("encoded %dx%d image to %d bytes", width, height, len(packed.data))
            return packed.data
        finally:
            world.clear()


def encode_image(image: np.ndarray, pool: ArenaPool | None = None) -> bytes:
    """Compute the hash of an (H, W, 4) uint8 array."""
    if image.ndim != 3 or image.shape[2] != 4:
        raise ValueError(f"Expected shape (H, W, 4), got {image.shape}")
    return encode(image, image.shape[1], image.shape[0], pool=pool)


def decode(
    data: bytes,
    base_size: int = transform.DEFAULT_BASE_SIZE,
    saturation_boost: float = 1.25,
    options: DecodeOptions | None = None,
    pool: ArenaPool | None = None,
) -> tuple[np.ndarray, int, int]:
    """Rebuild the placeholder image of a hash.

    Args:
        data: Hash bytes
        base_size: Longer side of the placeholder
        saturation_boost: Chroma scale multiplier
        options: Decode options; overrides base_size and saturation_boost
        pool: Arena pool to borrow scratch memory from (shared pool if None)

    Returns:
        (pixels, width, height) with pixels an (height, width, 4) uint8 array

    Raises:
        InvalidHash: If data is not a well-formed hash
        ValueError: If an option is out of range

    Example:
        >>> pixels, w, h = decode(hash_bytes, base_size=64)
    """
    if options is None:
        options = DecodeOptions(base_size=base_size, saturation_boost=saturation_boost)

    # Validate before borrowing memory; the arena is sized for the actual placeholder
    fields = deserialize_hash(bytes(data))
    out_width, out_height = transform.size_for(fields.lx, fields.ly, options.base_size)
    arena_bytes = out_width * out_height * _BYTES_PER_PIXEL + _ALIGNMENT_SLACK

    with (pool or _pool).checkout(arena_bytes) as arena:
        world = World(arena=arena)
        try:
            entity = world.new_entity()
            world.add_component(entity, HashBytes(data=bytes(data)))

            recon: ReconRGBA = (
                world.pipe(entity)
                .to(PackHash(mode="decode"))
                .to(Quantize(mode="decode", saturation_boost=options.saturation_boost))
                .to(CosineTransform(mode="decode", base_size=options.base_size))
                .to(ColorConvert(mode="decode"))
                .out(ReconRGBA)
            )

            # Copy out before the arena goes back to the pool
            pixels = cast(np.ndarray, world.arena.view(recon.pix).copy())
        finally:
            world.clear()

    height, width = pixels.shape[:2]
    return pixels, width, height


def decode_header(data: bytes) -> HashHeader:
    """Read the header fields of a hash without decoding the coefficients.

    Raises:
        InvalidHash: If data is too short to hold the header
    """
    return deserialize_header(bytes(data))


def size_for(
    header: HashHeader | bytes,
    base_size: int = transform.DEFAULT_BASE_SIZE,
) -> tuple[int, int]:
    """Placeholder (width, height) for a hash or its header."""
    if not isinstance(header, HashHeader):
        header = decode_header(header)
    return transform.size_for(header.lx, header.ly, base_size)
