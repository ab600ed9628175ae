"""Readers and writers for configuration, bitmaps and wavefield containers."""

from .config import read_config, parse_config
from .image import (
    SUPPORTED_IMAGE_EXTENSIONS,
    read_image,
    raster_to_fields,
    load_image_fields,
    write_image,
)
from .container import Container, ContainerCodec, NpzContainerCodec

__all__ = [
    # Configuration
    "read_config",
    "parse_config",
    # Bitmaps
    "SUPPORTED_IMAGE_EXTENSIONS",
    "read_image",
    "raster_to_fields",
    "load_image_fields",
    "write_image",
    # Containers
    "Container",
    "ContainerCodec",
    "NpzContainerCodec",
]
