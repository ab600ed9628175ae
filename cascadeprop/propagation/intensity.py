"""Conversion of complex wavefields into displayable 8-bit intensity."""

from typing import Sequence

import numpy as np

from ..core.errors import ChannelCountError

__all__ = ["normalize_intensity", "extract_intensity"]


def normalize_intensity(field: np.ndarray, nor: float) -> np.ndarray:
    """Map the squared magnitude of one channel onto 0..255.

    The intensity |U|² is rescaled linearly from [min, nor * max] to
    [0, 1], clipped, and rounded to the nearest byte. A flat field, or
    one where nor * max <= min, maps to all zeros.

    Args:
        field: Complex field, shape (ny, nx).
        nor: Normalization factor applied to the maximum intensity.

    Returns:
        uint8 array of shape (ny, nx), in the field's own orientation.
    """
    intensity = field.real**2 + field.imag**2
    min_intensity = intensity.min()
    max_intensity = intensity.max() * nor

    if max_intensity <= min_intensity:
        return np.zeros(intensity.shape, dtype=np.uint8)

    normalized = (intensity - min_intensity) / (max_intensity - min_intensity)
    normalized = np.clip(normalized, 0.0, 1.0)
    return np.floor(normalized * 255.0 + 0.5).astype(np.uint8)


def extract_intensity(fields: Sequence[np.ndarray], nor: float) -> np.ndarray:
    """Build an interleaved 8-bit intensity raster from per-channel fields.

    Each channel is normalized independently. The raster is laid out the
    way bitmap writers store pixels: the grid is rotated by 180 degrees
    and channel order is reversed, so

        raster[ny - 1 - row, nx - 1 - col, C - 1 - c] = byte(c, row, col)

    Args:
        fields: One complex field per channel, each of shape (ny, nx).
        nor: Normalization factor.

    Returns:
        uint8 array of shape (ny, nx, C). raster.tobytes() gives the
        channel-last byte buffer.

    Raises:
        ChannelCountError: If the number of channels is not 1 or 3.

    Example:
        >>> raster = extract_intensity(store.get_all(Plane.RETINA), nor=1.0)
        >>> write_image("retina.bmp", raster, bits_per_pixel=24)
    """
    num_colors = len(fields)
    if num_colors not in (1, 3):
        raise ChannelCountError(
            f"Intensity extraction needs 1 or 3 color channels, got {num_colors}"
        )

    channels = np.stack([normalize_intensity(field, nor) for field in fields], axis=-1)
    return np.ascontiguousarray(channels[::-1, ::-1, ::-1])
