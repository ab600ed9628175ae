"""Bitmap reading and writing.

Rasters exchanged with this module use the byte layout of a bitmap file:
rows stored bottom-up and color channels in BGR order, shape (ny, nx, C).
raster_to_fields() undoes that layout when building SLM fields, and
extract_intensity() produces it for the writer.
"""

import logging
from pathlib import Path
from typing import List, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..core.errors import SaveError, SourceLoadError

__all__ = [
    "SUPPORTED_IMAGE_EXTENSIONS",
    "read_image",
    "raster_to_fields",
    "load_image_fields",
    "write_image",
]

logger = logging.getLogger(__name__)

SUPPORTED_IMAGE_EXTENSIONS = (".bmp",)

_MODES = {1: "L", 3: "RGB"}


def _check_extension(path: Path, error: type) -> None:
    if path.suffix.lower() not in SUPPORTED_IMAGE_EXTENSIONS:
        raise error(
            f"Unsupported image format {path.suffix!r}, expected one of "
            f"{SUPPORTED_IMAGE_EXTENSIONS}"
        )


def read_image(path: Union[str, Path], num_colors: int) -> np.ndarray:
    """Read a bitmap as a stored-layout raster.

    Args:
        path: Path to a .bmp file.
        num_colors: Number of channels to decode (1 or 3).

    Returns:
        uint8 array of shape (ny, nx, num_colors), rows bottom-up, BGR.

    Raises:
        SourceLoadError: If the file is missing, has an unsupported
            extension, cannot be decoded, or num_colors is not 1 or 3.
    """
    path = Path(path)
    _check_extension(path, SourceLoadError)
    if num_colors not in _MODES:
        raise SourceLoadError(f"Bitmaps with {num_colors} color channels are not supported")
    if not path.is_file():
        raise SourceLoadError(f"Input file not found: {str(path)!r}")

    try:
        with Image.open(path) as img:
            pixels = np.asarray(img.convert(_MODES[num_colors]), dtype=np.uint8)
    except (OSError, UnidentifiedImageError, ValueError) as exc:
        raise SourceLoadError(f"Failed to decode {str(path)!r}: {exc}") from exc

    if pixels.ndim == 2:
        pixels = pixels[:, :, np.newaxis]

    # Top-down RGB -> bottom-up BGR
    return np.ascontiguousarray(pixels[::-1, :, ::-1])


def raster_to_fields(raster: np.ndarray, nx: int, ny: int) -> List[np.ndarray]:
    """Convert a stored-layout raster into complex SLM fields.

    Channels are reversed (BGR to RGB) and rows flipped, so that

        fields[C - 1 - c][ny - 1 - row, col] = raster[row, col, c]

    with zero imaginary part.

    Raises:
        SourceLoadError: If the raster does not have shape (ny, nx, C).
    """
    if raster.ndim != 3 or raster.shape[:2] != (ny, nx):
        raise SourceLoadError(
            f"Raster shape {raster.shape} does not match resolution {nx}x{ny}"
        )

    rgb = raster[::-1, :, ::-1]
    return [rgb[:, :, c].astype(np.complex128) for c in range(rgb.shape[2])]


def load_image_fields(
    path: Union[str, Path], num_colors: int, nx: int, ny: int
) -> List[np.ndarray]:
    """Read a bitmap and return one complex SLM field per channel."""
    raster = read_image(path, num_colors)
    fields = raster_to_fields(raster, nx, ny)
    logger.debug("Loaded %d channel(s) of %dx%d from %s", len(fields), nx, ny, path)
    return fields


def write_image(path: Union[str, Path], raster: np.ndarray, bits_per_pixel: int) -> None:
    """Write a stored-layout raster to a bitmap file.

    Args:
        path: Output path with a .bmp extension.
        raster: uint8 array of shape (ny, nx, C), rows bottom-up, BGR.
        bits_per_pixel: Must equal 8 * C (8 for gray, 24 for color).

    Raises:
        SaveError: On a bit depth mismatch, unsupported extension or
            write failure.
    """
    path = Path(path)
    _check_extension(path, SaveError)

    num_colors = raster.shape[2] if raster.ndim == 3 else 1
    if num_colors not in _MODES:
        raise SaveError(f"Cannot write a bitmap with {num_colors} color channels")
    if bits_per_pixel != 8 * num_colors:
        raise SaveError(
            f"Bit depth {bits_per_pixel} does not match {num_colors} channel(s) of 8 bits"
        )

    # Bottom-up BGR -> top-down RGB
    pixels = raster.reshape(raster.shape[0], raster.shape[1], num_colors)[::-1, :, ::-1]
    if num_colors == 1:
        pixels = pixels[:, :, 0]

    try:
        Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8)).save(path)
    except (OSError, ValueError) as exc:
        raise SaveError(f"Failed to write {str(path)!r}: {exc}") from exc

    logger.debug("Wrote %d-bit image to %s", bits_per_pixel, path)
