"""Codec stages."""

from thumbhash.systems.color import ColorConvert
from thumbhash.systems.pack import PackHash
from thumbhash.systems.quantize import Quantize
from thumbhash.systems.transform import CosineTransform

__all__ = [
    "ColorConvert",
    "CosineTransform",
    "PackHash",
    "Quantize",
]
