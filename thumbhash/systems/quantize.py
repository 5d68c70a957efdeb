"""Quantization between coefficient sets and wire integers.

Forward mode maps floating point DC, scale and AC values to the fixed
bit widths of the hash format; inverse mode maps them back.

AC values are first normalized by the channel scale to [0, 1]
(ac' = 0.5 + 0.5 ac / scale) and stored as nibbles round(15 ac').
On the way back nibble n becomes (n / 7.5 - 1) * scale. The two chroma
channels have their scale multiplied by a saturation boost, since
quantization tends to produce dull images.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from thumbhash.components.hash import ChannelSpectrum, HashFields, Spectrum
from thumbhash.core.grid import (
    ALPHA_GRID,
    CHROMA_GRID,
    coefficient_count,
    iround,
)
from thumbhash.core.system import Mode, System

if TYPE_CHECKING:
    from thumbhash.core.world import World

DEFAULT_SATURATION_BOOST = 1.25


def quantize(value: float, nbits: int) -> int:
    """Round to the nearest integer and clamp into an unsigned nbits field."""
    return min(max(iround(value), 0), (1 << nbits) - 1)


def normalize_ac(ac: list[float], scale: float) -> list[float]:
    """Map AC values into [0, 1]; left untouched when scale is 0."""
    if scale > 0.0:
        return [0.5 + 0.5 / scale * f for f in ac]
    return list(ac)


def dequantize_ac(nibbles: list[int], scale: float) -> list[float]:
    """Turn AC nibbles back into coefficient values."""
    return [(n / 7.5 - 1.0) * scale for n in nibbles]


class Quantize(System):
    """Quantize coefficient sets to hash fields.

    Forward mode: Spectrum → HashFields
    Inverse mode: HashFields → Spectrum (dequantization)

    Attributes:
        saturation_boost: Chroma scale multiplier applied on dequantization
    """

    def __init__(
        self,
        mode: Mode = "forward",
        saturation_boost: float = DEFAULT_SATURATION_BOOST,
    ) -> None:
        super().__init__(mode=mode)
        if saturation_boost <= 0.0:
            raise ValueError(f"saturation_boost must be positive, got {saturation_boost}")
        self.saturation_boost = saturation_boost

    def required_components(self) -> list[type]:
        """Return required component types based on mode."""
        return [Spectrum] if self.is_forward else [HashFields]

    def produced_components(self) -> list[type]:
        """Return produced component types based on mode."""
        return [HashFields] if self.is_forward else [Spectrum]

    def run(self, world: World, eids: list[int]) -> None:
        """Execute quantization or dequantization on entities."""
        for eid in eids:
            if self.is_forward:
                spectrum = world.get_component(eid, Spectrum)
                world.add_component(eid, quantize_spectrum(spectrum))
            else:
                fields = world.get_component(eid, HashFields)
                world.add_component(
                    eid, dequantize_fields(fields, self.saturation_boost)
                )


def quantize_spectrum(spectrum: Spectrum) -> HashFields:
    """Forward quantization of every field of a hash."""
    channels = [spectrum.l, spectrum.p, spectrum.q]
    if spectrum.a is not None:
        channels.append(spectrum.a)

    ac = [
        quantize(15.0 * f, 4)
        for channel in channels
        for f in normalize_ac(channel.ac, channel.scale)
    ]

    fields = dict(
        l_dc=quantize(63.0 * spectrum.l.dc, 6),
        p_dc=quantize(31.5 + 31.5 * spectrum.p.dc, 6),
        q_dc=quantize(31.5 + 31.5 * spectrum.q.dc, 6),
        l_scale=quantize(31.0 * spectrum.l.scale, 5),
        has_alpha=spectrum.has_alpha,
        l_count=spectrum.ly if spectrum.is_landscape else spectrum.lx,
        p_scale=quantize(63.0 * spectrum.p.scale, 6),
        q_scale=quantize(63.0 * spectrum.q.scale, 6),
        is_landscape=spectrum.is_landscape,
    )
    if spectrum.a is not None:
        fields.update(
            a_dc=quantize(15.0 * spectrum.a.dc, 4),
            a_scale=quantize(15.0 * spectrum.a.scale, 4),
        )
    return HashFields(**fields, ac=ac)


def dequantize_fields(
    fields: HashFields, saturation_boost: float = DEFAULT_SATURATION_BOOST
) -> Spectrum:
    """Inverse quantization of every field of a hash."""
    l_scale = fields.l_scale / 31.0
    p_scale = fields.p_scale / 63.0
    q_scale = fields.q_scale / 63.0

    counts = [
        coefficient_count(fields.lx, fields.ly),
        coefficient_count(*CHROMA_GRID),
        coefficient_count(*CHROMA_GRID),
    ]
    if fields.has_alpha:
        counts.append(coefficient_count(*ALPHA_GRID))

    chunks = []
    start = 0
    for count in counts:
        chunks.append(fields.ac[start:start + count])
        start += count

    alpha = None
    if fields.has_alpha:
        a_scale = fields.a_scale / 15.0
        alpha = ChannelSpectrum(
            dc=fields.a_dc / 15.0,
            ac=dequantize_ac(chunks[3], a_scale),
            scale=a_scale,
        )

    return Spectrum(
        l=ChannelSpectrum(
            dc=fields.l_dc / 63.0,
            ac=dequantize_ac(chunks[0], l_scale),
            scale=l_scale,
        ),
        p=ChannelSpectrum(
            dc=fields.p_dc / 31.5 - 1.0,
            ac=dequantize_ac(chunks[1], p_scale * saturation_boost),
            scale=p_scale,
        ),
        q=ChannelSpectrum(
            dc=fields.q_dc / 31.5 - 1.0,
            ac=dequantize_ac(chunks[2], q_scale * saturation_boost),
            scale=q_scale,
        ),
        a=alpha,
        has_alpha=fields.has_alpha,
        is_landscape=fields.is_landscape,
        lx=fields.lx,
        ly=fields.ly,
    )
