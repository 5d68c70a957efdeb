"""Hash components: Spectrum, HashHeader, HashFields, HashBytes.

A hash exists in three forms during a call:
- Spectrum: floating point DC, AC and scale per channel
- HashFields: the same values quantized to the integers stored on the wire
- HashBytes: the packed byte string
"""

from __future__ import annotations

from pydantic import Field, field_validator, model_validator

from thumbhash.components.image import Component
from thumbhash.core.grid import (
    ALPHA_GRID,
    CHROMA_GRID,
    MIN_LUMA_GRID,
    coefficient_count,
    luma_limit,
)


class ChannelSpectrum(Component):
    """Cosine coefficients of one channel.

    Attributes:
        dc: Zero-frequency term
        ac: AC terms in triangular visit order
        scale: Largest AC magnitude (0 when there are no AC terms)
    """

    dc: float
    ac: list[float] = Field(default_factory=list)
    scale: float = Field(default=0.0, ge=0.0)


class Spectrum(Component):
    """Coefficient sets of all channels plus the header flags.

    Attributes:
        l: Luminance coefficients over the (lx, ly) grid
        p: Yellow-blue coefficients over the 3x3 grid
        q: Red-green coefficients over the 3x3 grid
        a: Alpha coefficients over the 5x5 grid, None without alpha
        has_alpha: Whether the alpha channel is present
        is_landscape: Whether the image is wider than tall
        lx: Horizontal luminance term count
        ly: Vertical luminance term count
    """

    l: ChannelSpectrum
    p: ChannelSpectrum
    q: ChannelSpectrum
    a: ChannelSpectrum | None = None
    has_alpha: bool
    is_landscape: bool
    lx: int = Field(ge=1)
    ly: int = Field(ge=1)

    @property
    def luma_grid(self) -> tuple[int, int]:
        """Luminance grid actually used by the transform."""
        return max(self.lx, MIN_LUMA_GRID), max(self.ly, MIN_LUMA_GRID)


class HashHeader(Component):
    """Integer header fields exactly as stored on the wire."""

    l_dc: int = Field(ge=0, le=63)
    p_dc: int = Field(ge=0, le=63)
    q_dc: int = Field(ge=0, le=63)
    l_scale: int = Field(ge=0, le=31)
    has_alpha: bool
    l_count: int = Field(ge=0, le=7)
    p_scale: int = Field(ge=0, le=63)
    q_scale: int = Field(ge=0, le=63)
    is_landscape: bool
    a_dc: int = Field(default=15, ge=0, le=15)
    a_scale: int = Field(default=0, ge=0, le=15)

    @property
    def lx(self) -> int:
        if self.is_landscape:
            return luma_limit(self.has_alpha)
        return max(MIN_LUMA_GRID, self.l_count)

    @property
    def ly(self) -> int:
        if self.is_landscape:
            return max(MIN_LUMA_GRID, self.l_count)
        return luma_limit(self.has_alpha)

    @property
    def nibble_count(self) -> int:
        """Number of AC nibbles following the header."""
        count = coefficient_count(self.lx, self.ly) + 2 * coefficient_count(*CHROMA_GRID)
        if self.has_alpha:
            count += coefficient_count(*ALPHA_GRID)
        return count


class HashFields(HashHeader):
    """Header plus the AC nibbles of every channel (L, P, Q, then A)."""

    ac: list[int] = Field(default_factory=list)

    @field_validator("ac")
    @classmethod
    def _check_nibbles(cls, value: list[int]) -> list[int]:
        for n in value:
            if not 0 <= n <= 15:
                raise ValueError(f"AC nibble out of range: {n}")
        return value

    @model_validator(mode="after")
    def _check_count(self) -> HashFields:
        if len(self.ac) != self.nibble_count:
            raise ValueError(
                f"expected {self.nibble_count} AC nibbles, got {len(self.ac)}"
            )
        return self


class HashBytes(Component):
    """Packed hash.

    Attributes:
        data: Serialized hash bytes
    """

    data: bytes
