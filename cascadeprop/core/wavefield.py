"""Per-channel storage of the SLM, pupil and retina wavefields."""

from enum import Enum
from typing import Dict, List, Sequence, Tuple

import numpy as np

from .errors import AllocationError, NotReadyError, OutOfRangeError

__all__ = ["Plane", "WavefieldStore"]


class Plane(Enum):
    """Wavefield planes along the optical path."""

    SLM = "slm"
    PUPIL = "pupil"
    RETINA = "retina"


class WavefieldStore:
    """Owns one complex field per plane and color channel.

    Every field is a C-ordered complex128 array of shape (ny, nx), so
    sample (row, col) sits at flat index row * nx + col. All planes of a
    store share the same shape and channel count.

    Example:
        ```python
        store = WavefieldStore()
        store.allocate(num_colors=3, nx=1920, ny=1080)
        slm_red = store.get(Plane.SLM, 0)
        store.release()
        ```
    """

    def __init__(self) -> None:
        self._fields: Dict[Plane, List[np.ndarray]] = {}
        self._populated: Dict[Plane, bool] = {}
        self._shape: Tuple[int, int] = (0, 0)

    @property
    def is_allocated(self) -> bool:
        return bool(self._fields)

    @property
    def num_colors(self) -> int:
        if not self._fields:
            return 0
        return len(self._fields[Plane.SLM])

    @property
    def shape(self) -> Tuple[int, int]:
        """Return (ny, nx) of every field, (0, 0) when empty."""
        return self._shape

    def allocate(self, num_colors: int, nx: int, ny: int) -> None:
        """Allocate zeroed fields for every plane and channel.

        Any previously held buffers are dropped first.

        Raises:
            AllocationError: If the buffers cannot be allocated.
        """
        self.release()
        try:
            fields = {
                plane: [np.zeros((ny, nx), dtype=np.complex128) for _ in range(num_colors)]
                for plane in Plane
            }
        except (MemoryError, ValueError) as exc:
            raise AllocationError(
                f"Cannot allocate {num_colors} x {ny} x {nx} wavefields: {exc}"
            ) from exc

        self._fields = fields
        self._populated = {plane: False for plane in Plane}
        self._shape = (ny, nx)

    def get(self, plane: Plane, channel: int) -> np.ndarray:
        """Return the field of one plane and channel.

        Raises:
            NotReadyError: If the store is not allocated.
            OutOfRangeError: If channel is not a configured channel index.
        """
        if not self._fields:
            raise NotReadyError("Wavefield store is not allocated")
        if not 0 <= channel < self.num_colors:
            raise OutOfRangeError(
                f"Channel {channel} out of range for {self.num_colors} color(s)"
            )
        return self._fields[plane][channel]

    def get_all(self, plane: Plane) -> List[np.ndarray]:
        """Return every channel of a plane, in channel order."""
        if not self._fields:
            raise NotReadyError("Wavefield store is not allocated")
        return list(self._fields[plane])

    def commit(self, plane: Plane, fields: Sequence[np.ndarray]) -> None:
        """Replace all channels of a plane at once and mark it populated.

        The fields are copied into the store's own buffers; nothing is
        written unless every field has the expected shape.
        """
        if not self._fields:
            raise NotReadyError("Wavefield store is not allocated")
        if len(fields) != self.num_colors:
            raise OutOfRangeError(
                f"Expected {self.num_colors} channel(s), got {len(fields)}"
            )
        for field in fields:
            if field.shape != self._shape:
                raise ValueError(
                    f"Field shape {field.shape} does not match store shape {self._shape}"
                )

        for target, field in zip(self._fields[plane], fields):
            np.copyto(target, field)
        self._populated[plane] = True

    def is_populated(self, plane: Plane) -> bool:
        return self._populated.get(plane, False)

    def release(self) -> None:
        """Drop all buffers. Safe to call on an empty store."""
        self._fields = {}
        self._populated = {}
        self._shape = (0, 0)
