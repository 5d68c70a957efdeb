#!/usr/bin/env python3
"""Quickstart example using the high-level encode/decode API.

This example demonstrates the simplest way to use the library:
- Load an image (or generate a gradient one)
- Hash it with encode_image()
- Inspect the header with decode_header()
- Rebuild the placeholder with decode() and save it as PNG
"""

from __future__ import annotations

import argparse
import base64
from pathlib import Path

import numpy as np

from thumbhash import decode, decode_header, encode_image
from thumbhash.image_io import load_image, save_image


def _gradient(width: int, height: int) -> np.ndarray:
    y, x = np.mgrid[0:height, 0:width]
    image = np.empty((height, width, 4), dtype=np.uint8)
    image[..., 0] = (255 * x / max(width - 1, 1)).astype(np.uint8)
    image[..., 1] = (255 * y / max(height - 1, 1)).astype(np.uint8)
    image[..., 2] = 96
    image[..., 3] = 255
    return image


def main() -> None:
    parser = argparse.ArgumentParser(description="Quickstart API example")
    parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="Input image path (a gradient is generated if omitted)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("placeholder.png"),
        help="Output path for the placeholder",
    )
    parser.add_argument(
        "--size",
        type=int,
        default=32,
        help="Longer side of the placeholder",
    )
    args = parser.parse_args()

    if args.input is not None and args.input.exists():
        image = load_image(args.input, max_side=100)
        print(f"Loaded image: {args.input} ({image.shape[1]}x{image.shape[0]})")
    else:
        print("No input image given; generating a gradient instead")
        image = _gradient(80, 60)

    hash_bytes = encode_image(image)
    print(f"Hash: {base64.b64encode(hash_bytes).decode('ascii')} ({len(hash_bytes)} bytes)")

    header = decode_header(hash_bytes)
    print(
        f"Header: alpha={header.has_alpha} landscape={header.is_landscape} "
        f"luminance grid={header.lx}x{header.ly}"
    )

    pixels, width, height = decode(hash_bytes, base_size=args.size)
    save_image(pixels, args.output)
    print(f"Placeholder ({width}x{height}) saved to: {args.output}")


if __name__ == "__main__":
    main()
