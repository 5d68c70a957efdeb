"""ThumbHash image placeholders with an ECS pipeline.

A hash is a 20-30 byte fingerprint of an image from which a blurry
low-resolution placeholder can be rebuilt. The codec runs as a chain of
systems over components stored in a World:
- ColorConvert: RGBA <-> LPQA channel planes
- CosineTransform: planes <-> DCT coefficients over triangular grids
- Quantize: coefficients <-> fixed-width integers
- PackHash: integers <-> bytes

Quick Start:
    >>> from thumbhash import encode, decode
    >>> import numpy as np
    >>>
    >>> img = np.random.randint(0, 256, (48, 64, 4), dtype=np.uint8)
    >>> hash_bytes = encode(img, 64, 48)
    >>> pixels, width, height = decode(hash_bytes)
"""

__version__ = "0.1.0"

from thumbhash.api import decode, decode_header, encode, encode_image, size_for
from thumbhash.config import DecodeOptions
from thumbhash.core.serialization import InvalidHash

__all__ = [
    "__version__",
    "DecodeOptions",
    "InvalidHash",
    "decode",
    "decode_header",
    "encode",
    "encode_image",
    "size_for",
]
