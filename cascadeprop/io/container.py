"""Persistence of complex wavefields with their physical metadata."""

import logging
import zipfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple, Union

import numpy as np

from ..core.errors import SaveError, SourceLoadError

__all__ = ["Container", "ContainerCodec", "NpzContainerCodec"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    """Complex wavefields plus the metadata needed to interpret them.

    Attributes:
        fields: Complex array of shape (num_colors, ny, nx).
        wavelengths: One wavelength per channel (m).
        pixel_pitch: (pitch_x, pitch_y) in meters.
        resolution: (nx, ny).
    """

    fields: np.ndarray
    wavelengths: Tuple[float, ...]
    pixel_pitch: Tuple[float, float]
    resolution: Tuple[int, int]

    def __post_init__(self) -> None:
        """Validate that fields and metadata agree."""
        if self.fields.ndim != 3:
            raise ValueError(f"Fields must have shape (C, ny, nx), got {self.fields.shape}")
        nx, ny = self.resolution
        if self.fields.shape[1:] != (ny, nx):
            raise ValueError(
                f"Fields shape {self.fields.shape} does not match resolution {nx}x{ny}"
            )
        if len(self.wavelengths) != self.fields.shape[0]:
            raise ValueError(
                f"{len(self.wavelengths)} wavelength(s) for {self.fields.shape[0]} channel(s)"
            )

    @property
    def num_colors(self) -> int:
        return self.fields.shape[0]


class ContainerCodec(ABC):
    """Abstract reader/writer for wavefield containers.

    Example:
        ```python
        codec = NpzContainerCodec()
        codec.save("retina.ohc", container)
        restored = codec.load("retina.ohc")
        ```
    """

    @abstractmethod
    def load(self, path: Union[str, Path]) -> Container:
        """Read a container.

        Raises:
            SourceLoadError: If the file is missing or malformed.
        """
        pass

    @abstractmethod
    def save(self, path: Union[str, Path], container: Container) -> None:
        """Write a container.

        Raises:
            SaveError: If the file cannot be written.
        """
        pass


class NpzContainerCodec(ContainerCodec):
    """Container stored as an uncompressed NumPy .npz archive.

    The archive holds the arrays "fields" (complex128, C x ny x nx),
    "wavelengths", "pixel_pitch" and "resolution". It is written through
    a file handle so the requested extension (".ohc" by default) is kept.

    Args:
        extension: Required file extension, including the dot.
    """

    def __init__(self, extension: str = ".ohc") -> None:
        self.extension = extension

    def _check_extension(self, path: Path, error: type) -> None:
        if path.suffix.lower() != self.extension:
            raise error(f"Container file must have a {self.extension} extension, got {path.name!r}")

    def load(self, path: Union[str, Path]) -> Container:
        path = Path(path)
        self._check_extension(path, SourceLoadError)
        if not path.is_file():
            raise SourceLoadError(f"Container file not found: {str(path)!r}")

        try:
            with np.load(path, allow_pickle=False) as archive:
                container = Container(
                    fields=archive["fields"].astype(np.complex128),
                    wavelengths=tuple(float(w) for w in archive["wavelengths"]),
                    pixel_pitch=tuple(float(p) for p in archive["pixel_pitch"]),
                    resolution=tuple(int(n) for n in archive["resolution"]),
                )
        except (OSError, EOFError, KeyError, ValueError, zipfile.BadZipFile) as exc:
            raise SourceLoadError(f"Malformed container {str(path)!r}: {exc}") from exc

        logger.debug(
            "Loaded container %s: %d channel(s), %dx%d",
            path, container.num_colors, *container.resolution,
        )
        return container

    def save(self, path: Union[str, Path], container: Container) -> None:
        path = Path(path)
        self._check_extension(path, SaveError)

        try:
            with open(path, "wb") as f:
                np.savez(
                    f,
                    fields=np.asarray(container.fields, dtype=np.complex128),
                    wavelengths=np.asarray(container.wavelengths, dtype=np.float64),
                    pixel_pitch=np.asarray(container.pixel_pitch, dtype=np.float64),
                    resolution=np.asarray(container.resolution, dtype=np.int64),
                )
        except OSError as exc:
            raise SaveError(f"Failed to write container {str(path)!r}: {exc}") from exc

        logger.debug("Wrote container %s", path)
