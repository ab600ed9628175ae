"""cascadeprop - Display-to-retina wavefield propagation.

Simulates how the light field emitted by a spatial light modulator (SLM)
propagates through a field lens, the pupil of the eye and onto the retina
using scalar Fresnel diffraction.

The library is organized into four modules:

- **core**: Configuration, wavefield storage and error kinds
- **propagation**: Transfer factors, the two-stage engine and intensity extraction
- **io**: XML configuration, bitmap and wavefield container readers/writers
- **utils**: Spectral transforms and Fourier-plane coordinates

Example:
    >>> import numpy as np
    >>> from cascadeprop import CascadedPropagation, PropagationConfig
    >>>
    >>> config = PropagationConfig(
    ...     num_colors=1,
    ...     wavelengths=(532e-9,),
    ...     pixel_pitch_x=8e-6, pixel_pitch_y=8e-6,
    ...     nx=1920, ny=1080,
    ...     field_lens_focal_length=0.2,
    ...     dist_reconstruction_plane_to_pupil=0.05,
    ...     dist_pupil_to_retina=0.024,
    ...     pupil_diameter=0.004,
    ...     nor=1.0,
    ...     source_path="hologram.bmp",
    ... )
    >>> sim = CascadedPropagation(config)
    >>> sim.propagate()
    >>> sim.save("retina.bmp", bits_per_pixel=8)
"""

__version__ = "0.1.0"

# =============================================================================
# Core - Configuration, storage and errors
# =============================================================================
from .core import (
    PropagationConfig,
    SourceKind,
    Plane,
    WavefieldStore,
    CascadePropError,
    ConfigError,
    SourceLoadError,
    NotReadyError,
    ChannelCountError,
    OutOfRangeError,
    AllocationError,
    SaveError,
)

# =============================================================================
# Propagation - Engine and intensity extraction
# =============================================================================
from .propagation import (
    PupilGeometry,
    make_pupil_geometry,
    aperture_mask,
    PropagationEngine,
    slm_to_pupil,
    pupil_to_retina,
    extract_intensity,
)

# =============================================================================
# IO and utils
# =============================================================================
from .io import (
    read_config,
    read_image,
    write_image,
    Container,
    ContainerCodec,
    NpzContainerCodec,
)
from .utils import SpectralTransform, NumpyFFT, ScipyFFT

from .simulator import State, CascadedPropagation

# Note: the PyTorch transform requires PyTorch, import explicitly:
#   from cascadeprop.utils.torch_fft import TorchFFT

__all__ = [
    # Version
    "__version__",
    # Core
    "PropagationConfig",
    "SourceKind",
    "Plane",
    "WavefieldStore",
    # Errors
    "CascadePropError",
    "ConfigError",
    "SourceLoadError",
    "NotReadyError",
    "ChannelCountError",
    "OutOfRangeError",
    "AllocationError",
    "SaveError",
    # Propagation
    "PupilGeometry",
    "make_pupil_geometry",
    "aperture_mask",
    "PropagationEngine",
    "slm_to_pupil",
    "pupil_to_retina",
    "extract_intensity",
    # IO
    "read_config",
    "read_image",
    "write_image",
    "Container",
    "ContainerCodec",
    "NpzContainerCodec",
    # Transforms
    "SpectralTransform",
    "NumpyFFT",
    "ScipyFFT",
    # Lifecycle
    "State",
    "CascadedPropagation",
]
