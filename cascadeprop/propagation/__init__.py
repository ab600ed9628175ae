"""Wavefield propagation through the field lens, pupil and eye."""

from .transfer import (
    PupilGeometry,
    make_pupil_geometry,
    aperture_mask,
    chirp,
    lens_transfer,
    eye_transfer,
    retina_transfer,
)
from .engine import PropagationEngine, slm_to_pupil, pupil_to_retina
from .intensity import normalize_intensity, extract_intensity

__all__ = [
    # Geometry and transfer factors
    "PupilGeometry",
    "make_pupil_geometry",
    "aperture_mask",
    "chirp",
    "lens_transfer",
    "eye_transfer",
    "retina_transfer",
    # Stages
    "PropagationEngine",
    "slm_to_pupil",
    "pupil_to_retina",
    # Intensity
    "normalize_intensity",
    "extract_intensity",
]
