"""Lifecycle of a display-to-retina simulation.

A CascadedPropagation moves through three states:

    UNCONFIGURED --configure()--> CONFIGURED --propagate()--> PROPAGATED

configure() accepts a configuration (or XML path), loads the SLM source
and allocates the wavefield store. Only a PROPAGATED simulation can
produce intensity images or save its retina field. Configuring again, or
calling release(), discards the previous store.
"""

import logging
from dataclasses import replace
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

import numpy as np

from .core.config import PropagationConfig, SourceKind
from .core.errors import CascadePropError, NotReadyError, SourceLoadError
from .core.wavefield import Plane, WavefieldStore
from .io.config import read_config
from .io.container import Container, ContainerCodec, NpzContainerCodec
from .io.image import load_image_fields, write_image
from .propagation.engine import PropagationEngine
from .propagation.intensity import extract_intensity
from .utils.fourier import NumpyFFT, SpectralTransform

__all__ = ["State", "CascadedPropagation"]

logger = logging.getLogger(__name__)


class State(Enum):
    """Lifecycle states of a simulation."""

    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"
    PROPAGATED = "propagated"


class CascadedPropagation:
    """Propagates an SLM wavefield through field lens, pupil and eye.

    Args:
        config: Optional configuration (or path to an XML file) passed to
            configure() right away.
        transform: Forward spectral transform. Defaults to NumpyFFT().
        codec: Container reader/writer. Defaults to NpzContainerCodec().

    Example:
        ```python
        sim = CascadedPropagation("eye.xml")
        sim.propagate()
        sim.save("retina.bmp", bits_per_pixel=24)
        ```
    """

    def __init__(
        self,
        config: Union[PropagationConfig, str, Path, None] = None,
        transform: Optional[SpectralTransform] = None,
        codec: Optional[ContainerCodec] = None,
    ) -> None:
        self.transform = transform if transform is not None else NumpyFFT()
        self.codec = codec if codec is not None else NpzContainerCodec()
        self.store = WavefieldStore()
        self._config: Optional[PropagationConfig] = None
        self._engine: Optional[PropagationEngine] = None
        self._state = State.UNCONFIGURED

        if config is not None:
            self.configure(config)

    @property
    def state(self) -> State:
        return self._state

    @property
    def config(self) -> PropagationConfig:
        if self._config is None:
            raise NotReadyError("Simulation is not configured")
        return self._config

    @property
    def num_colors(self) -> int:
        return self.config.num_colors

    def _set_state(self, state: State) -> None:
        logger.debug("State %s -> %s", self._state.value, state.value)
        self._state = state

    def _require(self, *states: State) -> None:
        if self._state not in states:
            raise NotReadyError(
                f"Operation requires state {' or '.join(s.value for s in states)}, "
                f"current state is {self._state.value}"
            )

    # ------------------------------------------------------------------
    # Configuration and source loading
    # ------------------------------------------------------------------

    def configure(self, config: Union[PropagationConfig, str, Path]) -> None:
        """Load a configuration and its SLM source.

        Any previous store is released first. On failure the simulation
        stays UNCONFIGURED with no store.

        Args:
            config: A PropagationConfig, or the path of an XML file.

        Raises:
            ConfigError: If the configuration is invalid.
            SourceLoadError: If the SLM source cannot be loaded.
            AllocationError: If the wavefield buffers cannot be allocated.
        """
        self.release()

        try:
            if not isinstance(config, PropagationConfig):
                config = read_config(config)
            config, slm_fields = self._load_source(config)

            self.store.allocate(config.num_colors, config.nx, config.ny)
            self.store.commit(Plane.SLM, slm_fields)
        except CascadePropError:
            logger.error("Failed to configure simulation", exc_info=True)
            self.release()
            raise

        self._config = config
        self._engine = PropagationEngine(config, self.store, self.transform)
        self._set_state(State.CONFIGURED)

    def _load_source(self, config: PropagationConfig):
        if config.source_kind is SourceKind.IMAGE:
            fields = load_image_fields(config.source_path, config.num_colors, config.nx, config.ny)
            return config, fields

        container = self.codec.load(config.source_path)
        if container.resolution != config.resolution:
            raise SourceLoadError(
                f"Container resolution {container.resolution} does not match "
                f"configured resolution {config.resolution}"
            )
        if container.num_colors != config.num_colors:
            logger.info(
                "Container holds %d channel(s), overriding configured %d",
                container.num_colors, config.num_colors,
            )
            config = replace(
                config,
                num_colors=container.num_colors,
                wavelengths=container.wavelengths,
            )
        return config, list(container.fields)

    # ------------------------------------------------------------------
    # Propagation
    # ------------------------------------------------------------------

    def propagate(self) -> None:
        """Propagate SLM to pupil, then pupil to retina.

        On failure the simulation drops back to CONFIGURED, so a retina
        field left over from an earlier run can no longer be exported.

        Raises:
            NotReadyError: If the simulation is not configured.
            AllocationError: If the scratch arrays cannot be allocated.
        """
        self._require(State.CONFIGURED, State.PROPAGATED)

        for stage, plane in (
            (self._engine.propagate_slm_to_pupil, "pupil"),
            (self._engine.propagate_pupil_to_retina, "retina"),
        ):
            try:
                stage()
            except Exception:
                logger.error("Failed to propagate to %s plane", plane, exc_info=True)
                if self._state is not State.CONFIGURED:
                    self._set_state(State.CONFIGURED)
                raise

        self._set_state(State.PROPAGATED)

    # ------------------------------------------------------------------
    # Field access
    # ------------------------------------------------------------------

    def slm_field(self, channel: int) -> np.ndarray:
        return self.store.get(Plane.SLM, channel)

    def pupil_field(self, channel: int) -> np.ndarray:
        return self.store.get(Plane.PUPIL, channel)

    def retina_field(self, channel: int) -> np.ndarray:
        return self.store.get(Plane.RETINA, channel)

    def retina_fields(self) -> List[np.ndarray]:
        """Every retina channel, in channel order."""
        return self.store.get_all(Plane.RETINA)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def intensity(self) -> np.ndarray:
        """8-bit retina intensity raster of shape (ny, nx, C).

        Raises:
            NotReadyError: If propagate() has not succeeded.
            ChannelCountError: If the simulation has 2 color channels.
        """
        self._require(State.PROPAGATED)
        return extract_intensity(self.retina_fields(), self.config.nor)

    def save(self, path: Union[str, Path], bits_per_pixel: int = 24) -> None:
        """Write the retina intensity as a bitmap.

        Raises:
            NotReadyError: If propagate() has not succeeded.
            SaveError: If the image cannot be written.
        """
        raster = self.intensity()
        write_image(path, raster, bits_per_pixel)
        logger.info("Saved retina image to %s", path)

    def save_container(self, path: Union[str, Path]) -> None:
        """Write the retina wavefield with its metadata.

        Raises:
            NotReadyError: If propagate() has not succeeded.
            SaveError: If the container cannot be written.
        """
        self._require(State.PROPAGATED)
        config = self.config
        container = Container(
            fields=np.stack(self.retina_fields()),
            wavelengths=config.wavelengths,
            pixel_pitch=(config.pixel_pitch_x, config.pixel_pitch_y),
            resolution=config.resolution,
        )
        self.codec.save(path, container)
        logger.info("Saved retina container to %s", path)

    def release(self) -> None:
        """Free the wavefield store and return to UNCONFIGURED."""
        self.store.release()
        self._config = None
        self._engine = None
        if self._state is not State.UNCONFIGURED:
            self._set_state(State.UNCONFIGURED)
