"""Tests for bitmap and container readers/writers."""

import numpy as np
import pytest
from PIL import Image

from cascadeprop import (
    Container,
    NpzContainerCodec,
    SaveError,
    SourceLoadError,
    read_image,
    write_image,
)
from cascadeprop.io.image import load_image_fields, raster_to_fields


class TestRasterToFields:
    """Tests for the stored-layout to SLM field conversion."""

    def test_flips_rows_and_reverses_channels(self):
        """Test fields[C-1-c][ny-1-row, col] == raster[row, col, c]."""
        raster = np.arange(2 * 3 * 3, dtype=np.uint8).reshape(2, 3, 3)
        fields = raster_to_fields(raster, nx=3, ny=2)

        assert len(fields) == 3
        for c in range(3):
            assert fields[c].dtype == np.complex128
            assert not fields[c].imag.any()
        for row in range(2):
            for col in range(3):
                for c in range(3):
                    assert fields[2 - c][1 - row, col] == raster[row, col, c]

    def test_shape_mismatch(self):
        """Test that a raster of the wrong size raises SourceLoadError."""
        raster = np.zeros((4, 4, 1), dtype=np.uint8)
        with pytest.raises(SourceLoadError):
            raster_to_fields(raster, nx=8, ny=4)


class TestReadImage:
    """Tests for reading bitmaps."""

    def test_color_image_fields_are_top_down_rgb(self, tmp_path):
        """Test that loaded fields match the image as displayed, in RGB order."""
        rgb = np.zeros((2, 3, 3), dtype=np.uint8)
        rgb[0, 0] = (10, 20, 30)
        rgb[1, 2] = (40, 50, 60)
        path = tmp_path / "slm.bmp"
        Image.fromarray(rgb).save(path)

        fields = load_image_fields(path, num_colors=3, nx=3, ny=2)
        for c in range(3):
            np.testing.assert_array_equal(fields[c].real, rgb[:, :, c])

    def test_stored_layout(self, tmp_path):
        """Test that read_image returns rows bottom-up in BGR order."""
        rgb = np.zeros((2, 2, 3), dtype=np.uint8)
        rgb[0, 1] = (1, 2, 3)
        path = tmp_path / "slm.bmp"
        Image.fromarray(rgb).save(path)

        raster = read_image(path, num_colors=3)
        np.testing.assert_array_equal(raster[1, 1], (3, 2, 1))

    def test_grayscale(self, tmp_path):
        """Test single-channel loading."""
        gray = np.array([[0, 64], [128, 255]], dtype=np.uint8)
        path = tmp_path / "slm.bmp"
        Image.fromarray(gray).save(path)

        fields = load_image_fields(path, num_colors=1, nx=2, ny=2)
        assert len(fields) == 1
        np.testing.assert_array_equal(fields[0].real, gray)

    def test_unsupported_extension(self, tmp_path):
        """Test that non-bitmap extensions are rejected."""
        path = tmp_path / "slm.png"
        Image.fromarray(np.zeros((2, 2), dtype=np.uint8)).save(path)
        with pytest.raises(SourceLoadError, match="Unsupported"):
            read_image(path, num_colors=1)

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises SourceLoadError."""
        with pytest.raises(SourceLoadError, match="not found"):
            read_image(tmp_path / "missing.bmp", num_colors=1)

    def test_corrupt_file(self, tmp_path):
        """Test that undecodable data raises SourceLoadError."""
        path = tmp_path / "slm.bmp"
        path.write_bytes(b"not a bitmap")
        with pytest.raises(SourceLoadError):
            read_image(path, num_colors=1)

    def test_two_channels_unsupported(self, tmp_path):
        """Test that bitmaps cannot provide two channels."""
        path = tmp_path / "slm.bmp"
        Image.fromarray(np.zeros((2, 2), dtype=np.uint8)).save(path)
        with pytest.raises(SourceLoadError):
            read_image(path, num_colors=2)

    def test_resolution_mismatch(self, tmp_path):
        """Test that the bitmap size must match the configured resolution."""
        path = tmp_path / "slm.bmp"
        Image.fromarray(np.zeros((2, 2), dtype=np.uint8)).save(path)
        with pytest.raises(SourceLoadError):
            load_image_fields(path, num_colors=1, nx=4, ny=4)


class TestWriteImage:
    """Tests for writing bitmaps."""

    @pytest.mark.parametrize("num_colors, bits", [(1, 8), (3, 24)])
    def test_round_trip(self, tmp_path, num_colors, bits):
        """Test that a written raster reads back unchanged."""
        rng = np.random.default_rng(0)
        raster = rng.integers(0, 256, size=(5, 7, num_colors), dtype=np.uint8)
        path = tmp_path / "retina.bmp"

        write_image(path, raster, bits_per_pixel=bits)
        np.testing.assert_array_equal(read_image(path, num_colors), raster)

    def test_bit_depth_mismatch(self, tmp_path):
        """Test that bits_per_pixel must match the channel count."""
        raster = np.zeros((2, 2, 3), dtype=np.uint8)
        with pytest.raises(SaveError, match="Bit depth"):
            write_image(tmp_path / "retina.bmp", raster, bits_per_pixel=8)

    def test_unwritable_path(self, tmp_path):
        """Test that I/O failures surface as SaveError."""
        raster = np.zeros((2, 2, 1), dtype=np.uint8)
        with pytest.raises(SaveError):
            write_image(tmp_path / "missing" / "retina.bmp", raster, bits_per_pixel=8)


class TestNpzContainerCodec:
    """Tests for the .ohc container codec."""

    def make_container(self, num_colors=3):
        rng = np.random.default_rng(0)
        fields = rng.standard_normal((num_colors, 4, 6)) + 1j * rng.standard_normal((num_colors, 4, 6))
        return Container(
            fields=fields,
            wavelengths=(639e-9, 532e-9, 473e-9)[:num_colors],
            pixel_pitch=(8e-6, 8e-6),
            resolution=(6, 4),
        )

    def test_round_trip(self, tmp_path):
        """Test that fields and metadata survive a save/load cycle."""
        codec = NpzContainerCodec()
        container = self.make_container()
        path = tmp_path / "field.ohc"

        codec.save(path, container)
        restored = codec.load(path)

        assert path.exists()
        np.testing.assert_array_equal(restored.fields, container.fields)
        assert restored.wavelengths == container.wavelengths
        assert restored.pixel_pitch == container.pixel_pitch
        assert restored.resolution == container.resolution
        assert restored.num_colors == 3

    def test_container_validates_shape(self):
        """Test that fields must agree with the resolution."""
        with pytest.raises(ValueError):
            Container(
                fields=np.zeros((1, 4, 4), dtype=np.complex128),
                wavelengths=(532e-9,),
                pixel_pitch=(8e-6, 8e-6),
                resolution=(8, 4),
            )

    def test_wrong_extension(self, tmp_path):
        """Test that the container extension is enforced."""
        codec = NpzContainerCodec()
        with pytest.raises(SaveError):
            codec.save(tmp_path / "field.npz", self.make_container())
        with pytest.raises(SourceLoadError):
            codec.load(tmp_path / "field.npz")

    def test_missing_file(self, tmp_path):
        """Test that a missing container raises SourceLoadError."""
        with pytest.raises(SourceLoadError, match="not found"):
            NpzContainerCodec().load(tmp_path / "missing.ohc")

    def test_malformed_file(self, tmp_path):
        """Test that a non-container file raises SourceLoadError."""
        path = tmp_path / "field.ohc"
        path.write_bytes(b"garbage bytes")
        with pytest.raises(SourceLoadError):
            NpzContainerCodec().load(path)

    def test_missing_array(self, tmp_path):
        """Test that an archive without metadata raises SourceLoadError."""
        path = tmp_path / "field.ohc"
        with open(path, "wb") as f:
            np.savez(f, fields=np.zeros((1, 2, 2), dtype=np.complex128))
        with pytest.raises(SourceLoadError):
            NpzContainerCodec().load(path)
