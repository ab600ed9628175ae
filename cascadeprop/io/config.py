"""XML configuration reader.

Expected layout (element names are case sensitive)::

    <CascadedPropagation>
        <SourceType>IMG</SourceType>
        <NumColors>3</NumColors>
        <WavelengthR>6.39e-7</WavelengthR>
        <WavelengthG>5.32e-7</WavelengthG>
        <WavelengthB>4.73e-7</WavelengthB>
        <PixelPitchHor>8e-6</PixelPitchHor>
        <PixelPitchVer>8e-6</PixelPitchVer>
        <ResolutionHor>1920</ResolutionHor>
        <ResolutionVer>1080</ResolutionVer>
        <FieldLensFocalLength>0.2</FieldLensFocalLength>
        <DistReconstructionPlaneToPupil>0.05</DistReconstructionPlaneToPupil>
        <DistPupilToRetina>0.024</DistPupilToRetina>
        <PupilDiameter>0.004</PupilDiameter>
        <Nor>1.0</Nor>
        <HologramPath>hologram.bmp</HologramPath>
    </CascadedPropagation>
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Callable, TypeVar, Union

from ..core.config import PropagationConfig, SourceKind
from ..core.errors import ConfigError

__all__ = ["read_config", "parse_config"]

logger = logging.getLogger(__name__)

T = TypeVar("T")

_WAVELENGTH_TAGS = ("WavelengthR", "WavelengthG", "WavelengthB")


def _text(root: ET.Element, tag: str) -> str:
    node = root.find(tag)
    if node is None or node.text is None or not node.text.strip():
        raise ConfigError(f"Missing required field <{tag}>")
    return node.text.strip()


def _parse(root: ET.Element, tag: str, convert: Callable[[str], T]) -> T:
    text = _text(root, tag)
    try:
        return convert(text)
    except ValueError as exc:
        raise ConfigError(f"Cannot parse <{tag}> value {text!r}") from exc


def _unsigned(text: str) -> int:
    value = int(text)
    if value < 0:
        raise ValueError(f"{value} is negative")
    return value


def parse_config(root: ET.Element, base_dir: Union[str, Path] = ".") -> PropagationConfig:
    """Build a configuration from a parsed XML element.

    Args:
        root: Element whose children hold the configuration fields.
        base_dir: Directory against which a relative HologramPath is resolved.

    Returns:
        Validated PropagationConfig.

    Raises:
        ConfigError: If a field is missing, unparsable or invalid.
    """
    source_type = _text(root, "SourceType")
    try:
        source_kind = SourceKind(source_type)
    except ValueError as exc:
        raise ConfigError(f"Unknown SourceType {source_type!r}, expected IMG or OHC") from exc

    num_colors = _parse(root, "NumColors", _unsigned)
    if not 1 <= num_colors <= 3:
        raise ConfigError(f"NumColors must be between 1 and 3, got {num_colors}")

    wavelengths = tuple(_parse(root, tag, float) for tag in _WAVELENGTH_TAGS[:num_colors])

    source_path = Path(_text(root, "HologramPath"))
    if not source_path.is_absolute():
        source_path = Path(base_dir) / source_path

    return PropagationConfig(
        num_colors=num_colors,
        wavelengths=wavelengths,
        pixel_pitch_x=_parse(root, "PixelPitchHor", float),
        pixel_pitch_y=_parse(root, "PixelPitchVer", float),
        nx=_parse(root, "ResolutionHor", _unsigned),
        ny=_parse(root, "ResolutionVer", _unsigned),
        field_lens_focal_length=_parse(root, "FieldLensFocalLength", float),
        dist_reconstruction_plane_to_pupil=_parse(root, "DistReconstructionPlaneToPupil", float),
        dist_pupil_to_retina=_parse(root, "DistPupilToRetina", float),
        pupil_diameter=_parse(root, "PupilDiameter", float),
        nor=_parse(root, "Nor", float),
        source_kind=source_kind,
        source_path=str(source_path),
    )


def read_config(path: Union[str, Path]) -> PropagationConfig:
    """Read and validate an XML configuration file.

    Raises:
        ConfigError: If the file is not a readable .xml file or any field
            is missing, unparsable or invalid.
    """
    path = Path(path)
    if path.suffix.lower() != ".xml":
        raise ConfigError(f"Configuration file must have a .xml extension, got {path.name!r}")

    try:
        tree = ET.parse(path)
    except (OSError, ET.ParseError) as exc:
        raise ConfigError(f"Failed to load configuration {str(path)!r}: {exc}") from exc

    config = parse_config(tree.getroot(), base_dir=path.parent)
    logger.debug("Loaded configuration from %s: %s", path, config)
    return config
