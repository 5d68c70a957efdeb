"""Cosine transform over triangular coefficient grids.

Forward, per channel of an image of size (w, h) and a grid (nx, ny):

    F(cx, cy) = 1/(w h) * sum_x sum_y c(x, y) cos(pi/w cx (x + 0.5)) cos(pi/h cy (y + 0.5))

F(0, 0) is the DC term. The AC terms are the (cx, cy) pairs of the
triangular set, visited by increasing cy then cx.

Inverse, at each output pixel:

    c(x, y) = DC + sum over AC terms of 2 F(cx, cy) fx[cx] fy[cy]
"""

from __future__ import annotations

import logging

import numpy as np

from thumbhash.components.channels import LPQA
from thumbhash.components.hash import ChannelSpectrum, Spectrum
from thumbhash.core.grid import (
    ALPHA_GRID,
    CHROMA_GRID,
    MIN_LUMA_GRID,
    iround,
    triangular_indices,
)
from thumbhash.core.system import Mode, System
from thumbhash.core.world import World

logger = logging.getLogger(__name__)

DEFAULT_BASE_SIZE = 32


def encode_channel(channel: np.ndarray, nx: int, ny: int) -> tuple[float, list[float], float]:
    """Project a (H, W) plane onto the cosine terms of an (nx, ny) grid.

    Returns:
        (dc, ac, scale) where scale is the largest AC magnitude, or 0 when
        there are no AC terms
    """
    height, width = channel.shape
    fx = np.cos(np.pi / width * np.arange(nx)[None, :] * (np.arange(width)[:, None] + 0.5))
    fy = np.cos(np.pi / height * np.arange(ny)[None, :] * (np.arange(height)[:, None] + 0.5))

    # (ny, nx) table of every term of the rectangular grid
    coeffs = fy.T @ channel @ fx / (width * height)

    dc = float(coeffs[0, 0])
    ac = [float(coeffs[cy, cx]) for cx, cy in triangular_indices(nx, ny)]
    scale = max((abs(f) for f in ac), default=0.0)
    return dc, ac, scale


def decode_basis(size: int, count: int) -> np.ndarray:
    """(size, count) table of cos(pi/size * (x + 0.5) * c)."""
    return np.cos(np.pi / size * (np.arange(size)[:, None] + 0.5) * np.arange(count)[None, :])


def decode_channel(
    dc: float,
    ac: list[float],
    nx: int,
    ny: int,
    fx: np.ndarray,
    fy: np.ndarray,
) -> np.ndarray:
    """Evaluate a channel on the pixel grid spanned by fx (W, >=nx) and fy (H, >=ny)."""
    terms = triangular_indices(nx, ny)
    if len(ac) != len(terms):
        raise ValueError(f"expected {len(terms)} AC terms for grid ({nx}, {ny}), got {len(ac)}")

    plane = np.full((fy.shape[0], fx.shape[0]), dc, dtype=np.float64)
    if terms:
        cxs = [cx for cx, _ in terms]
        cys = [cy for _, cy in terms]
        weights = np.asarray(ac, dtype=np.float64)
        plane += (fy[:, cys] * 2.0 * weights) @ fx[:, cxs].T
    return plane


def size_for(lx: int, ly: int, base_size: int = DEFAULT_BASE_SIZE) -> tuple[int, int]:
    """Placeholder (width, height) keeping the lx:ly aspect ratio.

    The longer side is ``base_size``.
    """
    if base_size < 1:
        raise ValueError(f"base_size must be positive, got {base_size}")
    ratio = lx / ly
    if ratio > 1.0:
        return base_size, iround(base_size / ratio)
    return iround(base_size * ratio), base_size


class CosineTransform(System):
    """Cosine transform between LPQA planes and coefficient sets.

    Modes:
    - 'encode'/'forward': LPQA -> Spectrum
    - 'decode'/'inverse': Spectrum -> LPQA, at the placeholder size

    Attributes:
        base_size: Longer side of the reconstructed planes (inverse only)
    """

    def __init__(self, mode: Mode = "forward", base_size: int = DEFAULT_BASE_SIZE) -> None:
        super().__init__(mode=mode)
        if base_size < 1:
            raise ValueError(f"base_size must be positive, got {base_size}")
        self.base_size = base_size

    def required_components(self) -> list[type]:
        """Return required input components."""
        return [LPQA] if self.is_forward else [Spectrum]

    def produced_components(self) -> list[type]:
        """Return produced output components."""
        return [Spectrum] if self.is_forward else [LPQA]

    def run(self, world: World, eids: list[int]) -> None:
        """Apply the forward or inverse transform to entities."""
        if self.is_forward:
            self._forward(world, eids)
        else:
            self._inverse(world, eids)

    def _forward(self, world: World, eids: list[int]) -> None:
        for eid in eids:
            lpqa = world.get_component(eid, LPQA)
            lx, ly = max(lpqa.lx, MIN_LUMA_GRID), max(lpqa.ly, MIN_LUMA_GRID)

            def spectrum(ref, nx: int, ny: int) -> ChannelSpectrum:
                dc, ac, scale = encode_channel(world.arena.view(ref), nx, ny)
                return ChannelSpectrum(dc=dc, ac=ac, scale=scale)

            result = Spectrum(
                l=spectrum(lpqa.l, lx, ly),
                p=spectrum(lpqa.p, *CHROMA_GRID),
                q=spectrum(lpqa.q, *CHROMA_GRID),
                a=spectrum(lpqa.a, *ALPHA_GRID) if lpqa.has_alpha else None,
                has_alpha=lpqa.has_alpha,
                is_landscape=lpqa.is_landscape,
                lx=lpqa.lx,
                ly=lpqa.ly,
            )
            logger.debug(
                "entity %d: luminance grid %dx%d, %d AC terms",
                eid, lx, ly, len(result.l.ac),
            )
            world.add_component(eid, result)

    def _inverse(self, world: World, eids: list[int]) -> None:
        for eid in eids:
            spectrum = world.get_component(eid, Spectrum)
            lx, ly = spectrum.luma_grid
            width, height = size_for(lx, ly, self.base_size)

            min_terms = ALPHA_GRID[0] if spectrum.has_alpha else CHROMA_GRID[0]
            fx = decode_basis(width, max(lx, min_terms))
            fy = decode_basis(height, max(ly, min_terms))

            l = decode_channel(spectrum.l.dc, spectrum.l.ac, lx, ly, fx, fy)
            p = decode_channel(spectrum.p.dc, spectrum.p.ac, *CHROMA_GRID, fx, fy)
            q = decode_channel(spectrum.q.dc, spectrum.q.ac, *CHROMA_GRID, fx, fy)
            if spectrum.a is not None:
                a = decode_channel(spectrum.a.dc, spectrum.a.ac, *ALPHA_GRID, fx, fy)
            else:
                a = np.ones((height, width), dtype=np.float64)

            world.add_component(
                eid,
                LPQA(
                    l=world.arena.copy_tensor(l),
                    p=world.arena.copy_tensor(p),
                    q=world.arena.copy_tensor(q),
                    a=world.arena.copy_tensor(a),
                    has_alpha=spectrum.has_alpha,
                    is_landscape=spectrum.is_landscape,
                    lx=spectrum.lx,
                    ly=spectrum.ly,
                ),
            )
