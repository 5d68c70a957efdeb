"""Frequency grids and the triangular coefficient set.

A grid (nx, ny) bounds the cosine terms kept for a channel. Terms are
visited by increasing row cy, then column cx, skipping the DC term (0, 0),
and a term is kept iff ``cx * ny < nx * (ny - cy)``.
"""

from __future__ import annotations

import math
from functools import lru_cache

CHROMA_GRID = (3, 3)
ALPHA_GRID = (5, 5)

# Longer luminance axis, and the fixed opposite axis on decode
LUMA_LIMIT = 7
LUMA_LIMIT_ALPHA = 5

MIN_LUMA_GRID = 3


def iround(x: float) -> int:
    """Round half away from zero."""
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def luma_limit(has_alpha: bool) -> int:
    return LUMA_LIMIT_ALPHA if has_alpha else LUMA_LIMIT


@lru_cache(maxsize=64)
def triangular_indices(nx: int, ny: int) -> tuple[tuple[int, int], ...]:
    """AC terms (cx, cy) of a grid, in visit order."""
    if nx < 1 or ny < 1:
        raise ValueError(f"grid dimensions must be positive, got ({nx}, {ny})")
    terms = []
    for cy in range(ny):
        cx = 1 if cy == 0 else 0
        while cx * ny < nx * (ny - cy):
            terms.append((cx, cy))
            cx += 1
    return tuple(terms)


def coefficient_count(nx: int, ny: int) -> int:
    """Number of AC terms of a grid."""
    return len(triangular_indices(nx, ny))


def luminance_dims(width: int, height: int, has_alpha: bool) -> tuple[int, int]:
    """Lx, Ly for an image, before the minimum-of-3 transform clamp."""
    limit = luma_limit(has_alpha)
    longest = max(width, height)
    lx = max(1, iround(limit * width / longest))
    ly = max(1, iround(limit * height / longest))
    return lx, ly
