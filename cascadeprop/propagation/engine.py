"""Two-stage SLM → pupil → retina propagation.

Stage A (SLM to pupil):
    U_p = FFT{U_slm} * exp(i k r² / 2f) / (i λ f) * A(r) * exp(-i k r² / 2f_eye)

Stage B (pupil to retina):
    U_r = FFT{U_p * exp(i k r² / 2d_pr)}

where r² = X1² + Y1² on the pupil grid sampled at dx1 = λ f / (p nx),
A is the aperture stop and f_eye = (f - d_op) d_pr / (f - d_op + d_pr).

Each stage computes every channel into private scratch arrays and commits
them to the wavefield store only when all channels succeeded, so a failed
stage leaves previously committed planes untouched.
"""

import logging
import time
from typing import List, Optional

import numpy as np

from ..core.config import PropagationConfig
from ..core.errors import AllocationError, NotReadyError
from ..core.wavefield import Plane, WavefieldStore
from ..utils.fourier import NumpyFFT, SpectralTransform
from .transfer import (
    PupilGeometry,
    aperture_mask,
    eye_transfer,
    lens_transfer,
    make_pupil_geometry,
    retina_transfer,
)

__all__ = ["PropagationEngine", "slm_to_pupil", "pupil_to_retina"]

logger = logging.getLogger(__name__)


def slm_to_pupil(
    slm: np.ndarray,
    geom: PupilGeometry,
    config: PropagationConfig,
    transform: SpectralTransform,
) -> np.ndarray:
    """Propagate one SLM channel to the pupil plane.

    Args:
        slm: Complex SLM field, shape (ny, nx).
        geom: Pupil geometry for the channel's wavelength.
        config: Propagation configuration.
        transform: Forward spectral transform.

    Returns:
        New complex pupil field, shape (ny, nx). Blocked samples are
        exactly zero.
    """
    field = transform.forward(slm)
    field = field * lens_transfer(geom, config.field_lens_focal_length)
    field = field * eye_transfer(geom, config.eye_focal_length)

    blocked = aperture_mask(geom, config.pupil_diameter)
    return np.where(blocked, 0.0 + 0.0j, field)


def pupil_to_retina(
    pupil: np.ndarray,
    geom: PupilGeometry,
    config: PropagationConfig,
    transform: SpectralTransform,
) -> np.ndarray:
    """Propagate one pupil channel to the retina plane.

    Returns:
        New complex retina field, shape (ny, nx). The input is not modified.
    """
    field = pupil * retina_transfer(geom, config.dist_pupil_to_retina)
    return transform.forward(field)


class PropagationEngine:
    """Runs both propagation stages over a wavefield store.

    The engine exclusively owns its store while it runs; it reads the SLM
    plane and writes the pupil and retina planes.

    Args:
        config: Validated propagation configuration.
        store: Wavefield store allocated for config.
        transform: Forward spectral transform. Defaults to NumpyFFT().

    Example:
        ```python
        engine = PropagationEngine(config, store)
        engine.propagate()
        retina = store.get(Plane.RETINA, 0)
        ```
    """

    def __init__(
        self,
        config: PropagationConfig,
        store: WavefieldStore,
        transform: Optional[SpectralTransform] = None,
    ) -> None:
        self.config = config
        self.store = store
        self.transform = transform if transform is not None else NumpyFFT()
        self._geometries: List[PupilGeometry] = []

    def _check_ready(self) -> None:
        if not self.store.is_allocated:
            raise NotReadyError("Wavefield store is not allocated")
        if not self.store.is_populated(Plane.SLM):
            raise NotReadyError("SLM wavefield has not been loaded")

    def geometry(self, channel: int) -> PupilGeometry:
        """Pupil geometry of a channel, computed once and cached."""
        if not self._geometries:
            self._geometries = [
                make_pupil_geometry(self.config, wl) for wl in self.config.wavelengths
            ]
        return self._geometries[channel]

    def propagate_slm_to_pupil(self) -> None:
        """Stage A: fill the pupil plane from the SLM plane.

        Raises:
            NotReadyError: If the store is not allocated or SLM is empty.
            AllocationError: If the scratch arrays cannot be allocated.
        """
        self._check_ready()
        start = time.perf_counter()

        try:
            scratch = [
                slm_to_pupil(
                    self.store.get(Plane.SLM, channel),
                    self.geometry(channel),
                    self.config,
                    self.transform,
                )
                for channel in range(self.store.num_colors)
            ]
        except MemoryError as exc:
            raise AllocationError(f"Out of memory during SLM to pupil propagation: {exc}") from exc
        self.store.commit(Plane.PUPIL, scratch)

        logger.info("SLM to pupil propagation took %.5f s", time.perf_counter() - start)

    def propagate_pupil_to_retina(self) -> None:
        """Stage B: fill the retina plane from the pupil plane.

        Raises:
            NotReadyError: If the store is not allocated or SLM is empty.
            AllocationError: If the scratch arrays cannot be allocated.
        """
        self._check_ready()
        start = time.perf_counter()

        try:
            scratch = [
                pupil_to_retina(
                    self.store.get(Plane.PUPIL, channel),
                    self.geometry(channel),
                    self.config,
                    self.transform,
                )
                for channel in range(self.store.num_colors)
            ]
        except MemoryError as exc:
            raise AllocationError(f"Out of memory during pupil to retina propagation: {exc}") from exc
        self.store.commit(Plane.RETINA, scratch)

        logger.info("Pupil to retina propagation took %.5f s", time.perf_counter() - start)

    def propagate(self) -> None:
        """Run stage A then stage B. Stage B is skipped if stage A raises."""
        self.propagate_slm_to_pupil()
        self.propagate_pupil_to_retina()
