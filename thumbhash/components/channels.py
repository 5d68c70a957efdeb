"""Decorrelated color channels: LPQA."""

from pydantic import Field

from thumbhash.components.image import Component
from thumbhash.core.arena import TensorRef


class LPQA(Component):
    """Luminance, yellow-blue, red-green and alpha planes.

    On the encode side the planes have the source image size; on the decode
    side they have the placeholder size.

    Attributes:
        l: TensorRef to luminance plane (H, W) float64
        p: TensorRef to yellow-blue plane (H, W) float64
        q: TensorRef to red-green plane (H, W) float64
        a: TensorRef to alpha plane (H, W) float64
        has_alpha: Whether any source pixel is not fully opaque
        is_landscape: Whether the source is wider than tall
        lx: Horizontal luminance term count
        ly: Vertical luminance term count
    """

    l: TensorRef
    p: TensorRef
    q: TensorRef
    a: TensorRef
    has_alpha: bool
    is_landscape: bool
    lx: int = Field(ge=1)
    ly: int = Field(ge=1)
