"""Fourier utilities and spectral transform backends."""

from .fourier import (
    SpectralTransform,
    NumpyFFT,
    ScipyFFT,
    centered_coords,
    centered_meshgrid,
    fourier_plane_spacing,
)

# Note: the PyTorch backend requires PyTorch, import explicitly:
#   from cascadeprop.utils.torch_fft import TorchFFT

__all__ = [
    # Transforms
    "SpectralTransform",
    "NumpyFFT",
    "ScipyFFT",
    # Coordinates
    "centered_coords",
    "centered_meshgrid",
    "fourier_plane_spacing",
]
