"""Color conversion between RGBA and the LPQA channel basis.

Forward: each pixel's color is first pulled towards the alpha-weighted
average color in proportion to its transparency, so fully transparent
pixels do not drag the chroma towards black. Then:

    L = (R + G + B) / 3
    P = (R + G) / 2 - B
    Q = R - G
    A = alpha

Inverse:

    B = L - 2/3 P
    R = (3L - B + Q) / 2
    G = R - Q

with color premultiplied by the clamped alpha on output.
"""

from __future__ import annotations

import numpy as np

from thumbhash.components.channels import LPQA
from thumbhash.components.image import RGBA, ReconRGBA
from thumbhash.core.grid import luminance_dims
from thumbhash.core.system import System
from thumbhash.core.world import World


def average_color(pixels: np.ndarray) -> tuple[np.ndarray, float]:
    """Alpha-weighted average of R, G, B in [0, 1] and the total alpha mass.

    The average stays at zero when every pixel is fully transparent.
    """
    data = pixels.astype(np.float64)
    alpha = data[..., 3] / 255.0
    mass = float(alpha.sum())
    avg = (alpha[..., None] / 255.0 * data[..., :3]).sum(axis=(0, 1))
    if mass > 0.0:
        avg = avg / mass
    return avg, mass


def rgba_to_lpqa(
    pixels: np.ndarray,
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, bool]:
    """Split an (H, W, 4) uint8 buffer into L, P, Q, A planes.

    Returns:
        (l, p, q, a, has_alpha)
    """
    avg, mass = average_color(pixels)
    has_alpha = mass < pixels.shape[0] * pixels.shape[1]

    data = pixels.astype(np.float64)
    alpha = data[..., 3] / 255.0
    rgb = avg * (1.0 - alpha[..., None]) + alpha[..., None] / 255.0 * data[..., :3]
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]

    l = (r + g + b) / 3.0
    p = (r + g) / 2.0 - b
    q = r - g
    return l, p, q, alpha, has_alpha


def lpqa_to_rgba(
    l: np.ndarray, p: np.ndarray, q: np.ndarray, a: np.ndarray
) -> np.ndarray:
    """Merge L, P, Q, A planes into an (H, W, 4) uint8 buffer.

    Values are clamped before conversion so out-of-range reconstructions
    never wrap around.
    """
    b = l - 2.0 / 3.0 * p
    r = (3.0 * l - b + q) / 2.0
    g = r - q

    alpha = np.clip(a, 0.0, 1.0)
    out = np.empty(l.shape + (4,), dtype=np.uint8)
    for i, channel in enumerate((r, g, b)):
        out[..., i] = (np.clip(channel, 0.0, 1.0) * 255.0 * alpha).astype(np.uint8)
    out[..., 3] = np.floor(alpha * 255.0 + 0.5).astype(np.uint8)
    return out


class ColorConvert(System):
    """RGBA <-> LPQA conversion.

    Modes:
    - 'encode'/'forward': RGBA -> LPQA
    - 'decode'/'inverse': LPQA -> ReconRGBA
    """

    def required_components(self) -> list[type]:
        """Return required input components."""
        return [RGBA] if self.is_forward else [LPQA]

    def produced_components(self) -> list[type]:
        """Return produced output components."""
        return [LPQA] if self.is_forward else [ReconRGBA]

    def run(self, world: World, eids: list[int]) -> None:
        """Convert the color basis of each entity."""
        if self.is_forward:
            self._forward(world, eids)
        else:
            self._inverse(world, eids)

    def _forward(self, world: World, eids: list[int]) -> None:
        for eid in eids:
            rgba = world.get_component(eid, RGBA)
            pixels = world.arena.view(rgba.pix)
            height, width = pixels.shape[:2]

            planes = rgba_to_lpqa(pixels)
            refs = [world.arena.copy_tensor(plane) for plane in planes[:4]]
            has_alpha = planes[4]
            lx, ly = luminance_dims(width, height, has_alpha)

            world.add_component(
                eid,
                LPQA(
                    l=refs[0],
                    p=refs[1],
                    q=refs[2],
                    a=refs[3],
                    has_alpha=has_alpha,
                    is_landscape=width > height,
                    lx=lx,
                    ly=ly,
                ),
            )

    def _inverse(self, world: World, eids: list[int]) -> None:
        for eid in eids:
            lpqa = world.get_component(eid, LPQA)
            pixels = lpqa_to_rgba(
                world.arena.view(lpqa.l),
                world.arena.view(lpqa.p),
                world.arena.view(lpqa.q),
                world.arena.view(lpqa.a),
            )
            world.add_component(eid, ReconRGBA(pix=world.arena.copy_tensor(pixels)))
