"""Supported data formats."""

from enum import Enum
from pathlib import Path
from typing import Optional

from .errors import UnsupportedFormatError

AUTO = "auto"


class ConversionFormat(str, Enum):
    """Data formats known to the converter."""

    JSON = "json"
    YAML = "yaml"
    XML = "xml"
    TOML = "toml"
    UNKNOWN = "unknown"


SUPPORTED_FORMATS = (
    ConversionFormat.JSON,
    ConversionFormat.YAML,
    ConversionFormat.XML,
    ConversionFormat.TOML,
)

EXTENSIONS = {
    ".json": ConversionFormat.JSON,
    ".yaml": ConversionFormat.YAML,
    ".yml": ConversionFormat.YAML,
    ".xml": ConversionFormat.XML,
    ".toml": ConversionFormat.TOML,
}


def resolve_format(name: str, direction: str) -> ConversionFormat:
    """
    Resolve a format name to one of the supported formats.

    Args:
        name: Format name (case-insensitive)
        direction: "input" or "output", used in the error

    Returns:
        Matching ConversionFormat

    Raises:
        UnsupportedFormatError: If the name is not a supported format
    """
    normalized = str(getattr(name, "value", name)).strip().lower()
    for fmt in SUPPORTED_FORMATS:
        if fmt.value == normalized:
            return fmt
    raise UnsupportedFormatError(direction, normalized)


def format_from_extension(filepath: Path) -> Optional[ConversionFormat]:
    """Guess a format from a file extension."""
    return EXTENSIONS.get(Path(filepath).suffix.lower())
