"""Pupil-plane geometry and quadratic-phase transfer factors."""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from ..core.config import PropagationConfig
from ..utils.fourier import centered_meshgrid, fourier_plane_spacing

__all__ = [
    "PupilGeometry",
    "make_pupil_geometry",
    "aperture_mask",
    "chirp",
    "lens_transfer",
    "eye_transfer",
    "retina_transfer",
]


@dataclass(frozen=True)
class PupilGeometry:
    """Precomputed pupil-plane coordinates for one wavelength channel.

    Created once per channel via make_pupil_geometry() and shared by
    both propagation stages.

    Attributes:
        wavelength: Channel wavelength (m).
        k: Wavenumber 2π / wavelength (rad/m).
        dx: Pupil-plane sample spacing along columns (m).
        dy: Pupil-plane sample spacing along rows (m).
        X: 2D array of centered column coordinates (m).
        Y: 2D array of centered row coordinates (m).
        r2: 2D array of squared radial distance X² + Y² (m²).
    """

    wavelength: float
    k: float
    dx: float
    dy: float
    X: np.ndarray
    Y: np.ndarray
    r2: np.ndarray

    @property
    def shape(self) -> Tuple[int, int]:
        """Return (ny, nx) shape."""
        return self.r2.shape


def make_pupil_geometry(config: PropagationConfig, wavelength: float) -> PupilGeometry:
    """Compute pupil-plane geometry for one channel.

    The forward DFT of the SLM field, formed by the field lens, samples
    the pupil plane at dx1 = λ f / (p nx). Both axes use this spacing
    since the SLM pitch is isotropic.

    Args:
        config: Validated propagation configuration.
        wavelength: Wavelength of the channel (m).

    Returns:
        PupilGeometry with coordinates of shape (ny, nx).
    """
    spacing = fourier_plane_spacing(
        wavelength, config.field_lens_focal_length, config.pixel_pitch_x, config.nx
    )
    Y, X = centered_meshgrid(config.ny, config.nx, spacing=spacing)

    return PupilGeometry(
        wavelength=wavelength,
        k=2.0 * np.pi / wavelength,
        dx=spacing,
        dy=spacing,
        X=X,
        Y=Y,
        r2=X**2 + Y**2,
    )


def aperture_mask(geom: PupilGeometry, pupil_diameter: float) -> np.ndarray:
    """Boolean mask of pupil samples that are blocked.

    A sample is blocked when it lies on or outside the circular stop,
    sqrt(X² + Y²) >= D / 2, or when its row index is >= ny // 2 - 1.
    The second condition cuts away the lower part of the grid on top of
    the circular stop. It is kept as-is pending review of its intent.
    When ny // 2 - 1 is negative no row is cut.

    Returns:
        Boolean array of shape (ny, nx), True where the field is zeroed.
    """
    ny, nx = geom.shape
    blocked = np.sqrt(geom.r2) >= pupil_diameter / 2

    row_cutoff = ny // 2 - 1
    if row_cutoff >= 0:
        rows = np.arange(ny)[:, np.newaxis]
        blocked = blocked | (rows >= row_cutoff)

    return blocked


def chirp(geom: PupilGeometry, distance: float) -> np.ndarray:
    """Quadratic phase exp(i k / (2 d) (X² + Y²)).

    A negative distance gives the converging phase of a thin lens.
    """
    return np.exp(1j * geom.k / (2.0 * distance) * geom.r2)


def lens_transfer(geom: PupilGeometry, focal_length: float) -> np.ndarray:
    """Field lens factor exp(i k / (2f) r²) / (i λ f)."""
    return chirp(geom, focal_length) / (1j * geom.wavelength * focal_length)


def eye_transfer(geom: PupilGeometry, eye_focal_length: float) -> np.ndarray:
    """Eye lens factor exp(-i k / (2 f_eye) r²)."""
    return chirp(geom, -eye_focal_length)


def retina_transfer(geom: PupilGeometry, dist_pupil_to_retina: float) -> np.ndarray:
    """Pupil to retina propagation factor exp(i k / (2 d_pr) r²)."""
    return chirp(geom, dist_pupil_to_retina)
