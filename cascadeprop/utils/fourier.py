"""Spectral transforms and Fourier-plane coordinate utilities."""

from abc import ABC, abstractmethod
from typing import Optional, Tuple

import numpy as np
import scipy.fft

__all__ = [
    "SpectralTransform",
    "NumpyFFT",
    "ScipyFFT",
    "centered_coords",
    "centered_meshgrid",
    "fourier_plane_spacing",
]


class SpectralTransform(ABC):
    """Abstract forward 2D discrete Fourier transform.

    Implementations compute the unnormalized forward DFT of a 2D complex
    array and return a new array of the same shape. DC stays at index
    (0, 0); no shifting is applied.

    Example:
        ```python
        transform = NumpyFFT()
        spectrum = transform.forward(field)
        ```
    """

    @abstractmethod
    def forward(self, field: np.ndarray) -> np.ndarray:
        """Compute the forward DFT.

        Args:
            field: Complex array of shape (ny, nx).

        Returns:
            Complex128 array of shape (ny, nx). The input is not modified.
        """
        pass


class NumpyFFT(SpectralTransform):
    """Forward DFT backed by numpy.fft."""

    def forward(self, field: np.ndarray) -> np.ndarray:
        return np.fft.fft2(field, axes=(-2, -1)).astype(np.complex128, copy=False)


class ScipyFFT(SpectralTransform):
    """Forward DFT backed by scipy.fft.

    Args:
        workers: Number of threads scipy.fft may use inside a single
            transform. None uses scipy's default (one thread).
    """

    def __init__(self, workers: Optional[int] = None) -> None:
        self.workers = workers

    def forward(self, field: np.ndarray) -> np.ndarray:
        spectrum = scipy.fft.fft2(field, axes=(-2, -1), norm="backward", workers=self.workers)
        return spectrum.astype(np.complex128, copy=False)


def centered_coords(n: int, spacing: float = 1.0) -> np.ndarray:
    """Sample coordinates centered on the middle of the grid.

    Index i maps to (i - (n - 1) / 2) * spacing, so the grid is symmetric
    about zero for both even and odd n.

    Example:
        ```python
        centered_coords(4, spacing=0.5)
        # Returns: [-0.75, -0.25,  0.25,  0.75]
        ```
    """
    return (np.arange(n, dtype=np.float64) - (n - 1) * 0.5) * spacing


def centered_meshgrid(
    ny: int, nx: int, spacing: float | Tuple[float, float] = 1.0
) -> Tuple[np.ndarray, np.ndarray]:
    """Return (Y, X) centered coordinate grids of shape (ny, nx).

    Args:
        ny: Number of rows.
        nx: Number of columns.
        spacing: Scalar for isotropic sampling, or (dy, dx).
    """
    if isinstance(spacing, (int, float)):
        dy = dx = float(spacing)
    else:
        dy, dx = spacing

    y = centered_coords(ny, dy)
    x = centered_coords(nx, dx)
    Y, X = np.meshgrid(y, x, indexing="ij")
    return Y, X


def fourier_plane_spacing(wavelength: float, focal_length: float, pitch: float, n: int) -> float:
    """Sample spacing in the focal plane of a lens after a DFT.

    A DFT of n samples at pitch p, formed by a lens of focal length f,
    samples the focal plane at wavelength * f / (p * n).
    """
    return wavelength * focal_length / (pitch * n)
