"""Conversion error taxonomy.

Every failure of a conversion call is one of these. The converter never
raises them to its caller; they travel inside a ``ConversionResult``.
"""

from enum import Enum
from typing import Optional


def _name(format) -> str:
    return getattr(format, "value", format)


class ErrorKind(str, Enum):
    """Classes of conversion failure."""

    EMPTY_INPUT = "empty_input"
    UNKNOWN_FORMAT = "unknown_format"
    VALIDATION_FAILED = "validation_failed"
    PARSE_FAILED = "parse_failed"
    UNSUPPORTED_FORMAT = "unsupported_format"
    QUERY_FAILED = "query_failed"
    SERIALIZATION_FAILED = "serialization_failed"
    VERIFICATION_FAILED = "verification_failed"


class ConversionError(Exception):
    """Base class for conversion failures."""

    kind: ErrorKind

    def __init__(self, message: str, format: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.format = _name(format)

    def __str__(self) -> str:
        return self.message


class EmptyInputError(ConversionError):
    kind = ErrorKind.EMPTY_INPUT

    def __init__(self):
        super().__init__("No input data")


class UnknownFormatError(ConversionError):
    kind = ErrorKind.UNKNOWN_FORMAT

    def __init__(self):
        super().__init__("Cannot detect input format. Please select format manually.")


class ValidationFailedError(ConversionError):
    kind = ErrorKind.VALIDATION_FAILED

    def __init__(self, format: str, reason: str):
        super().__init__(f"Validation Error ({_name(format).upper()}): {reason}", format)
        self.reason = reason


class ParseFailedError(ConversionError):
    kind = ErrorKind.PARSE_FAILED

    def __init__(self, format: str, reason: str):
        super().__init__(f"Failed to parse {_name(format)}: {reason}", format)
        self.reason = reason


class UnsupportedFormatError(ConversionError):
    kind = ErrorKind.UNSUPPORTED_FORMAT

    def __init__(self, direction: str, format: str):
        super().__init__(f"Unsupported {direction} format: {_name(format)}", format)
        self.direction = direction


class QueryFailedError(ConversionError):
    kind = ErrorKind.QUERY_FAILED

    def __init__(self, query: str, reason: str):
        super().__init__(f"Query failed ({query}): {reason}")
        self.query = query
        self.reason = reason


class SerializationFailedError(ConversionError):
    kind = ErrorKind.SERIALIZATION_FAILED

    def __init__(self, format: str, reason: str):
        super().__init__(f"Failed to convert to {_name(format)}: {reason}", format)
        self.reason = reason


class VerificationFailedError(ConversionError):
    kind = ErrorKind.VERIFICATION_FAILED

    def __init__(self, format: str, reason: str):
        super().__init__(f"Output is not valid {_name(format).upper()}: {reason}", format)
        self.reason = reason
