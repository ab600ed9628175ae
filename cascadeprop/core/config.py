"""Propagation configuration data structure."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .errors import ConfigError

__all__ = ["SourceKind", "PropagationConfig"]


def _positive(value: float) -> bool:
    """True for finite values greater than zero (False for NaN and inf)."""
    return math.isfinite(value) and value > 0


class SourceKind(Enum):
    """Where the SLM wavefield comes from."""

    IMAGE = "IMG"
    CONTAINER = "OHC"


@dataclass(frozen=True)
class PropagationConfig:
    """Immutable parameters of the display-to-retina optical system.

    All physical dimensions are in meters.

    Attributes:
        num_colors: Number of wavelength channels (1 to 3).
        wavelengths: One wavelength per channel, ordered R, G, B.
        pixel_pitch_x: SLM pixel pitch along columns.
        pixel_pitch_y: SLM pixel pitch along rows. Must equal pixel_pitch_x.
        nx: Number of SLM pixels along columns.
        ny: Number of SLM pixels along rows.
        field_lens_focal_length: Focal length of the field lens (f).
        dist_reconstruction_plane_to_pupil: Object distance to the pupil (d_op).
        dist_pupil_to_retina: Distance from pupil to retina (d_pr).
        pupil_diameter: Diameter of the circular aperture stop.
        nor: Normalization factor applied to the intensity maximum.
        source_kind: Whether the SLM field comes from a bitmap or a container.
        source_path: Path of the SLM source file.

    Example:
        ```python
        config = PropagationConfig(
            num_colors=1, wavelengths=(532e-9,),
            pixel_pitch_x=8e-6, pixel_pitch_y=8e-6, nx=1920, ny=1080,
            field_lens_focal_length=0.2,
            dist_reconstruction_plane_to_pupil=0.05,
            dist_pupil_to_retina=0.024,
            pupil_diameter=0.004, nor=1.0,
        )
        print(config.eye_focal_length)
        ```
    """

    num_colors: int
    wavelengths: Tuple[float, ...]
    pixel_pitch_x: float
    pixel_pitch_y: float
    nx: int
    ny: int
    field_lens_focal_length: float
    dist_reconstruction_plane_to_pupil: float
    dist_pupil_to_retina: float
    pupil_diameter: float
    nor: float
    source_kind: SourceKind = SourceKind.IMAGE
    source_path: str = ""

    def __post_init__(self) -> None:
        """Validate optical parameters."""
        object.__setattr__(self, "wavelengths", tuple(float(w) for w in self.wavelengths))

        if not 1 <= self.num_colors <= 3:
            raise ConfigError(f"NumColors must be between 1 and 3, got {self.num_colors}")
        if len(self.wavelengths) != self.num_colors:
            raise ConfigError(
                f"Expected {self.num_colors} wavelengths, got {len(self.wavelengths)}"
            )
        if not all(_positive(w) for w in self.wavelengths):
            raise ConfigError(f"Wavelengths must be positive, got {self.wavelengths}")
        if self.pixel_pitch_x != self.pixel_pitch_y:
            raise ConfigError(
                "Pixel pitches must be equal for both axes, got "
                f"{self.pixel_pitch_x} and {self.pixel_pitch_y}"
            )
        if not _positive(self.pixel_pitch_x):
            raise ConfigError(f"Pixel pitch must be positive, got {self.pixel_pitch_x}")
        if self.nx < 1 or self.ny < 1:
            raise ConfigError(f"Resolution must be positive, got ({self.nx}, {self.ny})")
        if not _positive(self.field_lens_focal_length):
            raise ConfigError(
                f"Field lens focal length must be positive, got {self.field_lens_focal_length}"
            )
        if not _positive(self.dist_pupil_to_retina):
            raise ConfigError(
                f"Pupil to retina distance must be positive, got {self.dist_pupil_to_retina}"
            )
        if not _positive(self.pupil_diameter):
            raise ConfigError(f"Pupil diameter must be positive, got {self.pupil_diameter}")
        if not math.isfinite(self.nor):
            raise ConfigError(f"Normalization factor must be finite, got {self.nor}")

        f_eye = self.eye_focal_length
        if not math.isfinite(f_eye) or f_eye == 0:
            raise ConfigError(f"Eye focal length is degenerate ({f_eye})")

    @property
    def resolution(self) -> Tuple[int, int]:
        """Return (nx, ny)."""
        return self.nx, self.ny

    @property
    def pixel_pitch(self) -> float:
        """Shared SLM pixel pitch."""
        return self.pixel_pitch_x

    @property
    def eye_focal_length(self) -> float:
        """Effective focal length of the eye, (f - d_op) d_pr / (f - d_op + d_pr)."""
        f = self.field_lens_focal_length
        d_op = self.dist_reconstruction_plane_to_pupil
        d_pr = self.dist_pupil_to_retina
        denom = f - d_op + d_pr
        if denom == 0:
            return math.inf
        return (f - d_op) * d_pr / denom
