"""Tests for component validation."""

import numpy as np
import pytest
from pydantic import ValidationError

from thumbhash.components.channels import LPQA
from thumbhash.components.hash import (
    ChannelSpectrum,
    HashBytes,
    HashFields,
    HashHeader,
    Spectrum,
)
from thumbhash.components.image import RGBA, ReconRGBA
from thumbhash.core.arena import Arena

HEADER = dict(
    l_dc=21,
    p_dc=31,
    q_dc=32,
    l_scale=4,
    has_alpha=False,
    l_count=5,
    p_scale=3,
    q_scale=2,
    is_landscape=False,
)


class TestImageComponents:
    """Tests for RGBA and ReconRGBA."""

    def test_rgba_holds_ref(self) -> None:
        """Test RGBA wraps a TensorRef."""
        arena = Arena(size_bytes=1024)
        ref = arena.alloc_tensor((2, 2, 4), np.uint8)

        assert RGBA(pix=ref).pix is ref
        assert ReconRGBA(pix=ref).pix is ref

    def test_rgba_rejects_non_ref(self) -> None:
        """Test that a raw array is not a valid pixel handle."""
        with pytest.raises(ValidationError):
            RGBA(pix=np.zeros((2, 2, 4), dtype=np.uint8))


class TestLPQA:
    """Tests for the LPQA component."""

    def test_grid_dims_positive(self) -> None:
        """Test that lx and ly must be at least 1."""
        arena = Arena(size_bytes=1024)
        ref = arena.alloc_tensor((2, 2), np.float64)
        planes = dict(l=ref, p=ref, q=ref, a=ref, has_alpha=False, is_landscape=False)

        assert LPQA(**planes, lx=1, ly=1).lx == 1
        with pytest.raises(ValidationError):
            LPQA(**planes, lx=0, ly=1)


class TestSpectrum:
    """Tests for ChannelSpectrum and Spectrum."""

    def test_channel_defaults(self) -> None:
        """Test that a DC-only channel has no AC terms and zero scale."""
        channel = ChannelSpectrum(dc=0.5)
        assert channel.ac == []
        assert channel.scale == 0.0

    def test_negative_scale(self) -> None:
        """Test that scale cannot be negative."""
        with pytest.raises(ValidationError):
            ChannelSpectrum(dc=0.0, scale=-0.1)

    def test_luma_grid_minimum(self) -> None:
        """Test that the transform grid is at least 3 on both axes."""
        channel = ChannelSpectrum(dc=0.0)
        spectrum = Spectrum(
            l=channel, p=channel, q=channel,
            has_alpha=False, is_landscape=True, lx=7, ly=1,
        )
        assert spectrum.a is None
        assert spectrum.luma_grid == (7, 3)


class TestHashHeader:
    """Tests for HashHeader derived values."""

    def test_portrait_dims(self) -> None:
        """Test lx/ly of a portrait hash without alpha."""
        header = HashHeader(**HEADER)
        assert (header.lx, header.ly) == (5, 7)
        assert header.nibble_count == 22 + 5 + 5

    def test_landscape_dims(self) -> None:
        """Test lx/ly of a landscape hash."""
        header = HashHeader(**{**HEADER, "is_landscape": True, "l_count": 2})
        assert (header.lx, header.ly) == (7, 3)

    def test_alpha_dims(self) -> None:
        """Test that alpha limits the luminance axis to 5 and adds 14 nibbles."""
        header = HashHeader(**{**HEADER, "has_alpha": True, "a_dc": 11, "a_scale": 3})
        assert (header.lx, header.ly) == (5, 5)
        assert header.nibble_count == 14 + 5 + 5 + 14

    def test_alpha_defaults(self) -> None:
        """Test that opaque hashes report a full alpha DC."""
        header = HashHeader(**HEADER)
        assert header.a_dc == 15
        assert header.a_scale == 0

    @pytest.mark.parametrize(
        "field, value",
        [("l_dc", 64), ("l_scale", 32), ("l_count", 8), ("p_scale", -1), ("a_dc", 16)],
    )
    def test_field_ranges(self, field: str, value: int) -> None:
        """Test that fields are bounded by their bit widths."""
        with pytest.raises(ValidationError):
            HashHeader(**{**HEADER, field: value})


class TestHashFields:
    """Tests for HashFields nibble validation."""

    def test_valid(self) -> None:
        """Test a field set with the right number of nibbles."""
        fields = HashFields(**HEADER, ac=[7] * 32)
        assert len(fields.ac) == fields.nibble_count

    def test_wrong_count(self) -> None:
        """Test that the nibble count must match the header."""
        with pytest.raises(ValidationError, match="expected 32 AC nibbles"):
            HashFields(**HEADER, ac=[7] * 31)

    def test_nibble_range(self) -> None:
        """Test that nibbles must fit in 4 bits."""
        with pytest.raises(ValidationError, match="AC nibble out of range"):
            HashFields(**HEADER, ac=[16] + [0] * 31)

    def test_hash_bytes(self) -> None:
        """Test HashBytes stores raw bytes."""
        assert HashBytes(data=b"\x01\x02").data == b"\x01\x02"
