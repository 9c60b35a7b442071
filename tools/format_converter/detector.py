"""Heuristic format detection.

Detection is a best guess. Callers can always name the input format
explicitly instead.
"""

import re
from typing import Tuple

from shared.logger import get_logger

from .formats import ConversionFormat
from .parsers import parse_json, parse_xml_document

logger = get_logger(__name__)

# Matched against the raw line, indentation included
YAML_LINE_PATTERNS = [
    re.compile(r"^[\w-]+:\s*\S"),
    re.compile(r"^-\s+\S"),
    re.compile(r"^\s+\w+:\s*\S"),
]

# Matched against the stripped line
TOML_LINE_PATTERNS = [
    re.compile(r"^\w+\s*=\s*[\"'\d\[\{]"),
    re.compile(r"^\[\[[\w.]+\]\]"),
    re.compile(r"^\[[\w.]+\]"),
]

# Minimum share of lines that must score for YAML or TOML
SCORE_THRESHOLD = 0.2


def score_lines(text: str) -> Tuple[int, int]:
    """
    Count lines that look like YAML and lines that look like TOML.

    Blank and comment lines are skipped. A line may score for both.

    Args:
        text: Input text

    Returns:
        Tuple of (yaml_score, toml_score)
    """
    yaml_score = 0
    toml_score = 0

    for line in text.split("\n"):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        if any(p.match(line) for p in YAML_LINE_PATTERNS):
            yaml_score += 1
        if any(p.match(stripped) for p in TOML_LINE_PATTERNS):
            toml_score += 1

    return yaml_score, toml_score


def detect_format(text: str) -> ConversionFormat:
    """
    Guess the format of raw text.

    Args:
        text: Input text

    Returns:
        Detected format, or ConversionFormat.UNKNOWN
    """
    trimmed = text.strip()
    if not trimmed:
        return ConversionFormat.UNKNOWN

    if (trimmed.startswith("{") and trimmed.endswith("}")) or (
        trimmed.startswith("[") and trimmed.endswith("]")
    ):
        try:
            parse_json(trimmed)
            return ConversionFormat.JSON
        except (ValueError, RecursionError) as e:
            logger.debug(f"Looks like JSON but does not parse: {e}")

    if trimmed.startswith("<?xml") or (trimmed.startswith("<") and "</" in trimmed):
        try:
            parse_xml_document(trimmed)
            return ConversionFormat.XML
        except (ValueError, RecursionError) as e:
            logger.debug(f"Looks like XML but is not well-formed: {e}")

    yaml_score, toml_score = score_lines(trimmed)
    threshold = len(trimmed.split("\n")) * SCORE_THRESHOLD
    logger.debug(f"Detection scores: yaml={yaml_score} toml={toml_score} threshold={threshold}")

    if yaml_score > toml_score and yaml_score > threshold:
        return ConversionFormat.YAML
    if toml_score > yaml_score and toml_score > threshold:
        return ConversionFormat.TOML

    return ConversionFormat.UNKNOWN
