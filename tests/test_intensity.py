"""Tests for intensity normalization and raster layout."""

import numpy as np
import pytest

from cascadeprop import ChannelCountError, extract_intensity
from cascadeprop.propagation.intensity import normalize_intensity


class TestNormalizeIntensity:
    """Tests for per-channel normalization."""

    @pytest.mark.parametrize("nor", [0.5, 1.0, 2.0])
    def test_zero_field(self, nor):
        """Test that a uniformly zero field maps to zeros for any nor > 0."""
        out = normalize_intensity(np.zeros((4, 5), dtype=np.complex128), nor)
        assert out.dtype == np.uint8
        assert not out.any()

    def test_flat_field(self):
        """Test that a constant nonzero field is degenerate as well."""
        out = normalize_intensity(np.full((3, 3), 2 - 1j), 1.0)
        assert not out.any()

    def test_extremes(self):
        """Test that min maps to 0 and max maps to 255 with nor = 1."""
        field = np.array([[0, 1 + 1j, 2], [0.5, 1j, 3j]])
        out = normalize_intensity(field, 1.0)
        assert out[0, 0] == 0
        assert out[1, 2] == 255

    def test_rounding(self):
        """Test that the midpoint rounds half up."""
        # |U|² = 0, 2, 4 -> 0, 127.5, 255
        field = np.array([[0, 1 + 1j, 2]])
        np.testing.assert_array_equal(normalize_intensity(field, 1.0), [[0, 128, 255]])

    def test_nor_below_one_clips(self):
        """Test that values above nor * max saturate at 255."""
        # |U|² = 0, 1, 4 with scaled max 2 -> 0, 127.5, 255 (clipped)
        field = np.array([[0, 1, 2]], dtype=np.complex128)
        np.testing.assert_array_equal(normalize_intensity(field, 0.5), [[0, 128, 255]])

    def test_nor_above_one_dims(self):
        """Test that nor > 1 keeps the maximum below 255."""
        field = np.array([[0, 2]], dtype=np.complex128)
        np.testing.assert_array_equal(normalize_intensity(field, 2.0), [[0, 128]])

    def test_scaled_max_below_min(self):
        """Test that nor small enough to push max under min gives zeros."""
        field = np.array([[1, 2]], dtype=np.complex128)
        assert not normalize_intensity(field, 0.1).any()


class TestExtractIntensity:
    """Tests for extract_intensity."""

    @pytest.mark.parametrize("num_colors", [0, 2, 4])
    def test_invalid_channel_count(self, num_colors):
        """Test that only 1 or 3 channels are accepted."""
        fields = [np.ones((2, 2), dtype=np.complex128)] * num_colors
        with pytest.raises(ChannelCountError):
            extract_intensity(fields, 1.0)

    def test_single_channel_rotation(self):
        """Test that the raster is rotated by 180 degrees."""
        rng = np.random.default_rng(0)
        field = rng.standard_normal((3, 4)) + 1j * rng.standard_normal((3, 4))
        raster = extract_intensity([field], 1.0)

        assert raster.shape == (3, 4, 1)
        assert raster.dtype == np.uint8
        expected = normalize_intensity(field, 1.0)
        for row in range(3):
            for col in range(4):
                assert raster[3 - 1 - row, 4 - 1 - col, 0] == expected[row, col]

    def test_three_channel_remap(self):
        """Test rotation and channel reversal for three channels."""
        rng = np.random.default_rng(1)
        fields = [rng.standard_normal((2, 5)) + 1j * rng.standard_normal((2, 5)) for _ in range(3)]
        raster = extract_intensity(fields, 0.9)

        assert raster.shape == (2, 5, 3)
        for c in range(3):
            expected = normalize_intensity(fields[c], 0.9)
            for row in range(2):
                for col in range(5):
                    assert raster[1 - row, 4 - col, 2 - c] == expected[row, col]

    def test_extreme_mapping_after_remap(self):
        """Test that max lands on 255 and min on 0 at their remapped positions."""
        field = np.zeros((3, 3), dtype=np.complex128)
        field[0, 1] = 4.0
        field[2, 2] = 1.0
        raster = extract_intensity([field], 1.0)
        assert raster[2, 1, 0] == 255
        assert raster[0, 0, 0] == 16  # 1/16 of full scale
        assert raster[1, 1, 0] == 0

    def test_channels_normalized_independently(self):
        """Test that each channel is scaled by its own extremes."""
        bright = np.array([[0, 100]], dtype=np.complex128)
        dim = np.array([[0, 1]], dtype=np.complex128)
        zero = np.zeros((1, 2), dtype=np.complex128)
        raster = extract_intensity([bright, dim, zero], 1.0)
        # Channel order is reversed: raster[..., 2] is channel 0
        np.testing.assert_array_equal(raster[0, :, 2], [255, 0])
        np.testing.assert_array_equal(raster[0, :, 1], [255, 0])
        np.testing.assert_array_equal(raster[0, :, 0], [0, 0])

    def test_bytes_are_channel_last(self):
        """Test that tobytes() interleaves channels per pixel."""
        fields = [np.array([[0, 1]], dtype=np.complex128)] * 3
        raster = extract_intensity(fields, 1.0)
        assert raster.tobytes() == bytes([255, 255, 255, 0, 0, 0])
