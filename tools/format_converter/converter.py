"""Conversion orchestration.

A conversion runs detect -> validate -> parse -> serialize, or a
same-format reprint when source and target match. Failures come back as
a ``ConversionResult`` carrying a ``ConversionError``; nothing is raised
to the caller.
"""

import json
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

import jmespath
import toml
import yaml
from jmespath.exceptions import JMESPathError

from shared.logger import get_logger

from .detector import detect_format
from .errors import (
    ConversionError,
    EmptyInputError,
    ParseFailedError,
    QueryFailedError,
    SerializationFailedError,
    UnknownFormatError,
    ValidationFailedError,
    VerificationFailedError,
)
from .formats import AUTO, ConversionFormat, format_from_extension, resolve_format
from .parsers import parse, parse_json, parse_xml_document
from .serializers import serialize_json, serialize_toml, serialize_xml, serialize_yaml, xml_document
from .validators import validate
from .value import Value, to_value

logger = get_logger(__name__)

FormatName = Union[ConversionFormat, str]


@dataclass
class ConversionResult:
    """Outcome of a single conversion call."""

    output: Optional[str] = None
    from_format: Optional[ConversionFormat] = None
    to_format: Optional[ConversionFormat] = None
    error: Optional[ConversionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class FormatConverter:
    """
    Convert text between JSON, YAML, XML and TOML.

    The converter holds formatting options only. Each call builds and
    discards its own value tree, so one instance can serve any number of
    calls.
    """

    def __init__(self, indent: int = 2, xml_root: str = "data", verify_output: bool = False):
        """
        Initialize format converter.

        Args:
            indent: Indentation level for JSON, YAML and XML output
            xml_root: Root element name for XML output
            verify_output: Re-parse output with a reference parser
        """
        self.indent = indent
        self.xml_root = xml_root
        self.verify_output = verify_output
        logger.debug(f"Initialized FormatConverter (indent={indent}, xml_root={xml_root})")

    def convert(
        self,
        text: str,
        from_format: FormatName = AUTO,
        to_format: FormatName = ConversionFormat.JSON,
        query: Optional[str] = None,
        minify: bool = False,
    ) -> ConversionResult:
        """
        Convert text from one format to another.

        Args:
            text: Input text
            from_format: Input format, or "auto" to detect it
            to_format: Output format
            query: JMESPath expression applied before serializing
            minify: Compact output (JSON and XML)

        Returns:
            ConversionResult with either output or error set
        """
        result = ConversionResult()
        data = text.strip()

        try:
            if not data:
                raise EmptyInputError()

            result.to_format = resolve_format(to_format, "output")
            result.from_format = self._resolve_source(data, from_format)
            self._validate(data, result.from_format)

            if result.from_format == result.to_format and query is None:
                logger.debug(f"Reprinting {result.from_format.value}")
                output = self.reprint(data, result.from_format, minify=minify)
            else:
                value = self.parse(data, result.from_format)
                if query is not None:
                    value = self.query(value, query)
                output = self.serialize(value, result.to_format, minify=minify)

            if self.verify_output:
                self.verify(output, result.to_format)

            result.output = output

        except ConversionError as e:
            logger.warning(f"Conversion failed ({e.kind.value}): {e}")
            result.error = e

        return result

    def _resolve_source(self, text: str, from_format: FormatName) -> ConversionFormat:
        name = getattr(from_format, "value", from_format)
        if str(name).strip().lower() != AUTO:
            return resolve_format(name, "input")

        detected = detect_format(text)
        if detected == ConversionFormat.UNKNOWN:
            raise UnknownFormatError()

        logger.info(f"Auto-detected format: {detected.value}")
        return detected

    def _validate(self, text: str, format: ConversionFormat) -> None:
        is_valid, message = validate(text, format)
        if not is_valid:
            raise ValidationFailedError(format, message or "invalid input")

    def parse(self, text: str, format: ConversionFormat) -> Value:
        """
        Parse text into a value.

        Raises:
            ParseFailedError: If parsing fails
        """
        try:
            return parse(text, format)
        except (ValueError, TypeError, RecursionError) as e:
            logger.error(f"Failed to parse {format.value}: {e}")
            raise ParseFailedError(format, str(e)) from e

    def reprint(self, text: str, format: ConversionFormat, minify: bool = False) -> str:
        """
        Reformat text without changing its format.

        JSON is pretty-printed and XML re-serialized. YAML and TOML pass
        through unchanged.

        Raises:
            ParseFailedError: If the text cannot be parsed
        """
        try:
            if format == ConversionFormat.JSON:
                return serialize_json(parse_json(text), indent=self.indent, minify=minify)
            if format == ConversionFormat.XML:
                return xml_document(parse_xml_document(text))
            return text
        except (ValueError, RecursionError) as e:
            logger.error(f"Failed to reprint {format.value}: {e}")
            raise ParseFailedError(format, str(e)) from e

    def query(self, value: Value, expression: str) -> Value:
        """
        Query a value using JMESPath.

        Raises:
            QueryFailedError: If the expression is invalid or cannot be applied
        """
        try:
            return to_value(jmespath.search(expression, value))
        except (JMESPathError, TypeError, RecursionError) as e:
            logger.error(f"Query failed: {e}")
            raise QueryFailedError(expression, str(e)) from e

    def serialize(self, value: Value, format: ConversionFormat, minify: bool = False) -> str:
        """
        Render a value in the given format.

        Raises:
            SerializationFailedError: If the value cannot be rendered
        """
        try:
            if format == ConversionFormat.JSON:
                return serialize_json(value, indent=self.indent, minify=minify)
            elif format == ConversionFormat.YAML:
                return serialize_yaml(value, indent=self.indent)
            elif format == ConversionFormat.XML:
                return serialize_xml(value, root=self.xml_root, indent=self.indent, minify=minify)
            elif format == ConversionFormat.TOML:
                return serialize_toml(value)
            else:
                raise ValueError(f"Unsupported format: {format}")

        except (ValueError, TypeError, RecursionError) as e:
            logger.error(f"Failed to convert to {format.value}: {e}")
            raise SerializationFailedError(format, str(e)) from e

    def verify(self, output: str, format: ConversionFormat) -> None:
        """
        Check output is syntactically valid using the reference parser.

        Raises:
            VerificationFailedError: If the reference parser rejects the output
        """
        try:
            if format == ConversionFormat.JSON:
                json.loads(output)
            elif format == ConversionFormat.YAML:
                yaml.safe_load(output)
            elif format == ConversionFormat.XML:
                ET.fromstring(output)
            elif format == ConversionFormat.TOML:
                toml.loads(output)

        except (ValueError, RecursionError, yaml.YAMLError, ET.ParseError) as e:
            logger.error(f"Output failed {format.value} verification: {e}")
            raise VerificationFailedError(format, str(e)) from e

    def load_file(
        self, filepath: Path, format: Optional[FormatName] = None
    ) -> Tuple[str, FormatName]:
        """
        Load text from file and work out its format.

        Args:
            filepath: Path to file
            format: Explicit format (extension, then content detection if None)

        Returns:
            Tuple of (text, format or "auto")

        Raises:
            FileNotFoundError: If the file does not exist
        """
        if not filepath.exists():
            raise FileNotFoundError(f"File not found: {filepath}")

        if format is None:
            format = format_from_extension(filepath) or AUTO

        logger.info(f"Loading {filepath} ({getattr(format, 'value', format)})")

        with open(filepath, "r", encoding="utf-8") as f:
            return (f.read(), format)


def convert(
    text: str,
    from_format: FormatName = AUTO,
    to_format: FormatName = ConversionFormat.JSON,
    indent: int = 2,
    minify: bool = False,
    xml_root: str = "data",
    query: Optional[str] = None,
    verify_output: bool = False,
) -> ConversionResult:
    """
    Convert text between formats with a one-off converter.

    See FormatConverter.convert.
    """
    converter = FormatConverter(indent=indent, xml_root=xml_root, verify_output=verify_output)
    return converter.convert(text, from_format, to_format, query=query, minify=minify)
