"""Tests for the cosine transform."""

from __future__ import annotations

import numpy as np
import pytest

from thumbhash.components.channels import LPQA
from thumbhash.components.hash import ChannelSpectrum, Spectrum
from thumbhash.core.grid import coefficient_count
from thumbhash.core.world import World
from thumbhash.systems.transform import (
    CosineTransform,
    decode_basis,
    decode_channel,
    encode_channel,
    size_for,
)


def _cos_plane(width, height, cx):
    x = np.arange(width) + 0.5
    row = np.cos(np.pi / width * cx * x)
    return np.tile(row, (height, 1))


class TestEncodeChannel:
    """Test the forward projection."""

    def test_constant_plane(self):
        """Test that a flat plane is all DC."""
        dc, ac, scale = encode_channel(np.full((6, 8), 0.25), 3, 3)
        assert dc == pytest.approx(0.25)
        assert len(ac) == 5
        assert scale == pytest.approx(0.0, abs=1e-12)

    def test_single_frequency(self):
        """Test that a pure horizontal cosine lands in term (1, 0)."""
        dc, ac, scale = encode_channel(_cos_plane(8, 8, 1), 3, 3)
        assert dc == pytest.approx(0.0, abs=1e-12)
        assert ac[0] == pytest.approx(0.5)
        np.testing.assert_allclose(ac[1:], 0.0, atol=1e-12)
        assert scale == pytest.approx(0.5)

    def test_scale_is_max_magnitude(self):
        """Test that scale tracks the largest AC magnitude, sign ignored."""
        dc, ac, scale = encode_channel(-_cos_plane(8, 4, 2), 3, 3)
        assert ac[1] == pytest.approx(-0.5)
        assert scale == pytest.approx(0.5)

    def test_term_count(self):
        """Test the number of terms per grid."""
        _, ac, _ = encode_channel(np.zeros((10, 10)), 5, 7)
        assert len(ac) == coefficient_count(5, 7)

    def test_single_pixel(self):
        """Test a 1x1 plane."""
        dc, ac, _ = encode_channel(np.full((1, 1), 0.75), 7, 7)
        assert dc == pytest.approx(0.75)
        assert len(ac) == 27


class TestDecodeChannel:
    """Test the inverse evaluation."""

    def test_dc_only(self):
        """Test that zero AC terms give a flat plane."""
        fx, fy = decode_basis(6, 3), decode_basis(4, 3)
        plane = decode_channel(0.4, [0.0] * 5, 3, 3, fx, fy)
        assert plane.shape == (4, 6)
        np.testing.assert_allclose(plane, 0.4)

    def test_inverse_of_forward(self):
        """Test that a single cosine term is reconstructed exactly."""
        original = _cos_plane(8, 8, 1) * 0.3 + 0.5
        dc, ac, _ = encode_channel(original, 3, 3)
        plane = decode_channel(dc, ac, 3, 3, decode_basis(8, 3), decode_basis(8, 3))
        np.testing.assert_allclose(plane, original, atol=1e-12)

    def test_wrong_term_count(self):
        """Test that the AC list must match the grid."""
        fx = decode_basis(4, 3)
        with pytest.raises(ValueError, match="expected 5 AC terms"):
            decode_channel(0.0, [0.0] * 4, 3, 3, fx, fx)

    def test_basis_shape(self):
        """Test the basis table layout."""
        basis = decode_basis(10, 5)
        assert basis.shape == (10, 5)
        np.testing.assert_allclose(basis[:, 0], 1.0)


class TestSizeFor:
    """Test placeholder sizing."""

    @pytest.mark.parametrize(
        "lx, ly, base, size",
        [
            (5, 7, 32, (23, 32)),
            (7, 5, 32, (32, 23)),
            (7, 7, 32, (32, 32)),
            (7, 3, 32, (32, 14)),
            (5, 7, 64, (46, 64)),
            (5, 5, 1, (1, 1)),
        ],
    )
    def test_sizes(self, lx, ly, base, size):
        """Test that the longer side equals the base size."""
        assert size_for(lx, ly, base) == size

    def test_invalid_base(self):
        """Test that a zero base size is rejected."""
        with pytest.raises(ValueError, match="base_size must be positive"):
            size_for(5, 7, 0)


class TestCosineTransform:
    """Test CosineTransform system."""

    def test_init_invalid_base_size(self):
        """Test initialization with invalid base size."""
        with pytest.raises(ValueError, match="base_size must be positive"):
            CosineTransform(mode="inverse", base_size=0)

    def test_required_components(self):
        """Test dependencies per mode."""
        assert CosineTransform(mode="forward").required_components() == [LPQA]
        assert CosineTransform(mode="inverse").required_components() == [Spectrum]

    def _lpqa(self, world, shape, has_alpha, lx, ly):
        eid = world.new_entity()
        plane = world.arena.copy_tensor(np.full(shape, 0.5))
        world.add_component(
            eid,
            LPQA(
                l=plane, p=plane, q=plane, a=plane,
                has_alpha=has_alpha, is_landscape=shape[1] > shape[0], lx=lx, ly=ly,
            ),
        )
        return eid

    def test_forward_clamps_luma_grid(self):
        """Test that the luminance grid is widened to at least 3."""
        world = World()
        eid = self._lpqa(world, (1, 50), False, 7, 1)

        CosineTransform(mode="forward").run(world, [eid])

        spectrum = world.get_component(eid, Spectrum)
        assert (spectrum.lx, spectrum.ly) == (7, 1)
        assert len(spectrum.l.ac) == coefficient_count(7, 3)
        assert len(spectrum.p.ac) == 5
        assert spectrum.a is None

    def test_forward_alpha(self):
        """Test that alpha gets a 5x5 grid."""
        world = World()
        eid = self._lpqa(world, (20, 20), True, 5, 5)

        CosineTransform(mode="forward").run(world, [eid])

        spectrum = world.get_component(eid, Spectrum)
        assert spectrum.a is not None
        assert len(spectrum.a.ac) == 14

    def test_inverse_size_and_opaque_alpha(self):
        """Test the decoded planes have placeholder size and opaque alpha."""
        world = World()
        eid = world.new_entity()
        channel = ChannelSpectrum(dc=0.5, ac=[0.0] * 5)
        world.add_component(
            eid,
            Spectrum(
                l=ChannelSpectrum(dc=0.5, ac=[0.0] * 22),
                p=channel,
                q=channel,
                has_alpha=False,
                is_landscape=False,
                lx=5,
                ly=7,
            ),
        )

        CosineTransform(mode="inverse", base_size=64).run(world, [eid])

        lpqa = world.get_component(eid, LPQA)
        assert world.arena.view(lpqa.l).shape == (64, 46)
        np.testing.assert_allclose(world.arena.view(lpqa.a), 1.0)
