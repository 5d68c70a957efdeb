"""Command line utilities for the thumbhash placeholder library.

Usage:
    thumbhash encode-image photo.jpg
    thumbhash decode-image placeholder.png 1QcSHQRnh493V4dIh4eXh1h4kJUI --size 64
    thumbhash image-to-raw-data photo.jpg -o photo.rgba
"""

from __future__ import annotations

import argparse
import base64
import binascii
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from thumbhash.api import configure_pool, decode, encode_image
from thumbhash.config import DecodeOptions, Settings, load_settings
from thumbhash.image_io import load_image, save_image

logger = logging.getLogger(__name__)

# Largest placeholder side the CLI will render
MAX_BASE_SIZE = 1024


class CommandError(Exception):
    """Failure reported to the user with exit status 1."""


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid image size {value!r}") from None
    if number < 1 or number > MAX_BASE_SIZE:
        raise argparse.ArgumentTypeError(
            f"invalid image size {value!r} (must be 1..{MAX_BASE_SIZE})"
        )
    return number


def cmd_encode_image(args: argparse.Namespace, settings: Settings) -> None:
    """Print the base64 hash of an image file."""
    image = load_image(args.path, max_side=settings.image.max_side)
    hash_bytes = encode_image(image)
    print(base64.b64encode(hash_bytes).decode("ascii"))


def cmd_decode_image(args: argparse.Namespace, settings: Settings) -> None:
    """Write the placeholder of a base64 hash to a PNG file."""
    try:
        hash_bytes = base64.b64decode(args.hash, validate=True)
    except binascii.Error as e:
        raise CommandError(f"cannot decode base64-encoded hash: {e}") from e

    overrides = settings.decode.model_dump()
    if args.size is not None:
        overrides["base_size"] = args.size
    if args.saturation_boost is not None:
        overrides["saturation_boost"] = args.saturation_boost
    options = DecodeOptions(**overrides)
    if options.base_size > MAX_BASE_SIZE:
        raise CommandError(
            f"base size {options.base_size} exceeds the maximum of {MAX_BASE_SIZE}"
        )

    try:
        pixels, width, height = decode(hash_bytes, options=options)
    except ValueError as e:
        raise CommandError(f"cannot decode image: {e}") from e

    save_image(pixels, args.path)
    logger.info("wrote %dx%d placeholder to %s", width, height, args.path)


def cmd_image_to_raw_data(args: argparse.Namespace, settings: Settings) -> None:
    """Dump the RGBA bytes of an image file."""
    path = Path(args.path)
    output = Path(args.output) if args.output else path.with_suffix(".data")

    image = load_image(path)
    output.write_bytes(image.tobytes())
    logger.info(
        "wrote %d bytes (%dx%d RGBA) to %s",
        image.nbytes, image.shape[1], image.shape[0], output,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="thumbhash",
        description="utilities for the thumbhash image placeholder library",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to thumbhash.toml (auto-detected if omitted)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print debug messages",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("encode-image", help="compute the hash of an image file")
    p.add_argument("path", help="the path of the image to encode")
    p.set_defaults(func=cmd_encode_image)

    p = sub.add_parser("decode-image", help="decode an image from a hash")
    p.add_argument("path", help="the path of the PNG file to write")
    p.add_argument("hash", help="the base64-encoded hash")
    p.add_argument(
        "-s", "--size",
        type=_positive_int,
        default=None,
        help="the base size of the decoded image",
    )
    p.add_argument(
        "--saturation-boost",
        type=float,
        default=None,
        help="chroma boost applied while decoding",
    )
    p.set_defaults(func=cmd_decode_image)

    p = sub.add_parser("image-to-raw-data", help="convert an image to a raw data file")
    p.add_argument("path", help="the path of the image to decode")
    p.add_argument("-o", "--output", default=None, help="the path to write decoded data to")
    p.set_defaults(func=cmd_image_to_raw_data)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings(args.config)
        configure_pool(settings.pool)
        args.func(args, settings)
    except (CommandError, FileNotFoundError, ValidationError, ValueError) as e:
        print(f"thumbhash: error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
