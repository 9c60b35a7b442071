"""Format Converter - Convert between JSON, YAML, XML, and TOML formats."""

from .converter import ConversionResult, FormatConverter, convert
from .detector import detect_format
from .errors import ConversionError, ErrorKind
from .formats import AUTO, ConversionFormat
from .validators import validate

__all__ = [
    "AUTO",
    "ConversionError",
    "ConversionFormat",
    "ConversionResult",
    "ErrorKind",
    "FormatConverter",
    "convert",
    "detect_format",
    "validate",
]
