"""Core data structures: configuration, wavefield storage and error kinds."""

from .config import PropagationConfig, SourceKind
from .errors import (
    AllocationError,
    CascadePropError,
    ChannelCountError,
    ConfigError,
    NotReadyError,
    OutOfRangeError,
    SaveError,
    SourceLoadError,
)
from .wavefield import Plane, WavefieldStore

__all__ = [
    # Configuration
    "PropagationConfig",
    "SourceKind",
    # Storage
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
]
