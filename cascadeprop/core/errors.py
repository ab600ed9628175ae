"""Error kinds raised by the propagation pipeline."""

__all__ = [
    "CascadePropError",
    "ConfigError",
    "SourceLoadError",
    "NotReadyError",
    "ChannelCountError",
    "OutOfRangeError",
    "AllocationError",
    "SaveError",
]


class CascadePropError(RuntimeError):
    """Base class for every error raised by cascadeprop."""
    pass


class ConfigError(CascadePropError):
    """Raised when a configuration is missing, malformed or inconsistent."""
    pass


class SourceLoadError(CascadePropError):
    """Raised when the SLM source (bitmap or container) cannot be loaded."""
    pass


class NotReadyError(CascadePropError):
    """Raised when an operation is attempted before its prerequisite state."""
    pass


class ChannelCountError(CascadePropError):
    """Raised when intensity extraction gets a channel count other than 1 or 3."""
    pass


class OutOfRangeError(CascadePropError, IndexError):
    """Raised when a channel index exceeds the configured channel count."""
    pass


class AllocationError(CascadePropError, MemoryError):
    """Raised when wavefield buffers cannot be allocated."""
    pass


class SaveError(CascadePropError):
    """Raised when an output image or container cannot be written."""
    pass
