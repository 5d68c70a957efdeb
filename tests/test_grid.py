"""Tests for rounding and triangular coefficient grids."""

import pytest

from thumbhash.core.grid import (
    coefficient_count,
    iround,
    luminance_dims,
    triangular_indices,
)


class TestIround:
    """Tests for round half away from zero."""

    @pytest.mark.parametrize(
        "value, expected",
        [(0.5, 1), (1.5, 2), (2.5, 3), (-0.5, -1), (-2.5, -3), (2.49, 2), (0.0, 0)],
    )
    def test_values(self, value: float, expected: int) -> None:
        """Test halves round away from zero."""
        assert iround(value) == expected


class TestTriangularIndices:
    """Tests for the triangular term set."""

    def test_chroma_grid(self) -> None:
        """Test the 3x3 grid order and membership."""
        assert triangular_indices(3, 3) == ((1, 0), (2, 0), (0, 1), (1, 1), (0, 2))

    @pytest.mark.parametrize(
        "nx, ny, count",
        [(3, 3, 5), (5, 5, 14), (7, 7, 27), (5, 7, 22), (7, 3, 14), (3, 7, 14), (7, 5, 22)],
    )
    def test_counts(self, nx: int, ny: int, count: int) -> None:
        """Test the number of AC terms for every grid the format uses."""
        assert coefficient_count(nx, ny) == count

    def test_excludes_dc(self) -> None:
        """Test that (0, 0) is never part of the set."""
        assert (0, 0) not in triangular_indices(7, 7)

    def test_single_term_grid(self) -> None:
        """Test that a 1x1 grid has no AC terms."""
        assert triangular_indices(1, 1) == ()

    def test_invalid_grid(self) -> None:
        """Test that empty grids are rejected."""
        with pytest.raises(ValueError, match="grid dimensions must be positive"):
            triangular_indices(0, 3)


class TestLuminanceDims:
    """Tests for luminance grid sizing."""

    @pytest.mark.parametrize(
        "width, height, has_alpha, dims",
        [
            (100, 100, False, (7, 7)),
            (100, 75, False, (7, 5)),
            (75, 100, False, (5, 7)),
            (100, 100, True, (5, 5)),
            (100, 1, False, (7, 1)),
            (1, 1, False, (7, 7)),
        ],
    )
    def test_dims(
        self, width: int, height: int, has_alpha: bool, dims: tuple[int, int]
    ) -> None:
        """Test the longer side maps to the limit and the shorter scales."""
        assert luminance_dims(width, height, has_alpha) == dims
