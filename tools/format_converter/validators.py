"""Structural validators.

Fast, permissive sanity checks run before parsing. They reject obviously
malformed input with a readable message; passing one does not guarantee
the parser will accept the document.
"""

import re
from typing import List, Optional, Pattern, Tuple

from shared.logger import get_logger

from .formats import ConversionFormat
from .parsers import parse_json, parse_xml_document

logger = get_logger(__name__)

# Matched against the raw line
YAML_VALID_LINES = [
    re.compile(r"^[\w-]+:\s*\S"),  # key: value
    re.compile(r"^[\w-]+:\s*$"),  # key:
    re.compile(r"^-\s+\S"),  # - item
    re.compile(r"^-\s*$"),  # -
    re.compile(r"^\s+[\w-]+:\s*\S"),
    re.compile(r"^\s+[\w-]+:\s*$"),
    re.compile(r"^\s+-\s+\S"),
    re.compile(r"^\s+-\s*$"),
    re.compile(r'^\s*"(?:[^"\\]|\\.)*"\s*:(\s|$)'),  # "quoted key": value
]

# Matched against the stripped line
TOML_VALID_LINES = [
    re.compile(r"^[\w.-]+\s*=\s*([\"'\d\[\{+-]|true\b|false\b)", re.IGNORECASE),
    re.compile(r"^\[\[\s*[\w.-]+\s*\]\]"),
    re.compile(r"^\[\s*[\w.-]+\s*\]"),
    re.compile(r"^\".*\"\s*=\s*.*"),
    re.compile(r"^'.*'\s*=\s*.*"),
]


def _first_invalid_line(
    text: str, patterns: List[Pattern], strip: bool
) -> Optional[Tuple[int, str]]:
    """Find the first content line matching none of the patterns."""
    for number, line in enumerate(text.split("\n"), 1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        candidate = stripped if strip else line
        if not any(p.match(candidate) for p in patterns):
            return number, stripped

    return None


def validate_yaml(text: str) -> Tuple[bool, Optional[str]]:
    """Check every content line has a YAML key or list shape."""
    invalid = _first_invalid_line(text, YAML_VALID_LINES, strip=False)
    if invalid:
        number, line = invalid
        return (False, f"Invalid YAML structure at line {number}: {line}")
    return (True, None)


def validate_toml(text: str) -> Tuple[bool, Optional[str]]:
    """Check every content line is an assignment or a table header."""
    invalid = _first_invalid_line(text, TOML_VALID_LINES, strip=True)
    if invalid:
        number, line = invalid
        return (False, f"Invalid TOML structure at line {number}: {line}")
    return (True, None)


def validate_json(text: str) -> Tuple[bool, Optional[str]]:
    try:
        parse_json(text)
    except ValueError as e:
        return (False, str(e))
    return (True, None)


def validate_xml(text: str) -> Tuple[bool, Optional[str]]:
    if not text.startswith("<"):
        return (False, "Invalid XML: Must start with <?xml or a tag")
    try:
        parse_xml_document(text)
    except ValueError as e:
        return (False, str(e))
    return (True, None)


VALIDATORS = {
    ConversionFormat.JSON: validate_json,
    ConversionFormat.YAML: validate_yaml,
    ConversionFormat.XML: validate_xml,
    ConversionFormat.TOML: validate_toml,
}


def validate(text: str, format: str) -> Tuple[bool, Optional[str]]:
    """
    Validate text against a format's structural rules.

    Args:
        text: Input text
        format: Format name or ConversionFormat

    Returns:
        Tuple of (is_valid, error_message)
    """
    data = text.strip()
    if not data:
        return (False, "No input data")

    try:
        fmt = ConversionFormat(format.lower())
    except ValueError:
        return (False, f"Unsupported format: {format}")

    if fmt == ConversionFormat.UNKNOWN:
        return (False, "Unknown format")

    is_valid, message = VALIDATORS[fmt](data)
    if not is_valid:
        logger.debug(f"{fmt.value} validation failed: {message}")
    return (is_valid, message)
