"""Parsers turning JSON, YAML, XML and TOML text into values.

The YAML and TOML parsers are deliberately small: single document, no
anchors, multi-line scalars, date-times or multi-line strings. Every parser
raises ``ValueError`` on input it cannot turn into a complete value.
"""

import json
import math
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from shared.logger import get_logger

from .formats import ConversionFormat
from .value import Value, coerce_scalar, parse_number, unquote

logger = get_logger(__name__)

ATTRIBUTES_KEY = "@attributes"
TEXT_KEY = "#text"

# "key": value, with a double-quoted key
QUOTED_KEY_RE = re.compile(r'^("(?:[^"\\]|\\.)*")\s*:(?:\s+(.*))?$')

_ARRAY_TABLE_RE = re.compile(r"^\[\[\s*([^\[\]]+?)\s*\]\]")
_TABLE_RE = re.compile(r"^\[\s*([^\[\]]+?)\s*\]")


def _json_number(text: str) -> float:
    number = float(text)
    if not math.isfinite(number):
        raise ValueError(f"Number out of range: {text}")
    return number


def _json_constant(name: str) -> Value:
    raise ValueError(f"Invalid JSON literal: {name}")


def parse_json(text: str) -> Value:
    """
    Parse JSON text. Integers are read as floats.

    Raises:
        ValueError: On malformed JSON, NaN/Infinity literals, numbers that
            overflow a float, or nesting beyond the recursion limit
    """
    try:
        return json.loads(
            text,
            parse_int=_json_number,
            parse_float=_json_number,
            parse_constant=_json_constant,
        )
    except RecursionError as e:
        raise ValueError("JSON document is nested too deeply") from e


# YAML


@dataclass
class _Frame:
    """Open container on the YAML indentation stack."""

    container: Any
    indent: int


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


def _is_sequence_item(trimmed: str) -> bool:
    return trimmed == "-" or trimmed.startswith("- ")


def _next_content_line(lines: List[str], index: int) -> Optional[str]:
    """Find the next non-blank, non-comment line after index."""
    for line in lines[index + 1 :]:
        trimmed = line.strip()
        if trimmed and not trimmed.startswith("#"):
            return line
    return None


def _split_entry(text: str) -> Optional[Tuple[str, str]]:
    """Split ``key: value`` or ``key:`` into key and raw value, or None."""
    match = QUOTED_KEY_RE.match(text)
    if match:
        return unquote(match.group(1)), (match.group(2) or "").strip()
    if ": " in text:
        key, raw = text.split(": ", 1)
        return key.strip(), raw.strip()
    if text.endswith(":"):
        return text[:-1].strip(), ""
    return None


def _sequence_for(stack: List[_Frame], line_no: int) -> List[Value]:
    """
    Find the sequence a ``- item`` line appends to.

    Inside a mapping, the most recently assigned key becomes a sequence,
    wrapping its previous value as the first element.
    """
    frame = stack[-1]
    container = frame.container

    if isinstance(container, list):
        return container

    if not container:
        if len(stack) == 1:
            # Document starts with a sequence item
            frame.container = []
            return frame.container
        raise ValueError(f"Line {line_no}: sequence item has no parent key")

    key = next(reversed(container))
    if not isinstance(container[key], list):
        container[key] = [container[key]]
    return container[key]


def parse_yaml(text: str) -> Value:
    """
    Parse a simplified, indentation-driven YAML document.

    Args:
        text: YAML text

    Returns:
        Parsed value (a mapping, or a sequence if the document starts with one)

    Raises:
        ValueError: If a line cannot be placed in the document
    """
    lines = text.split("\n")
    stack = [_Frame({}, -1)]

    for index, line in enumerate(lines):
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue

        line_no = index + 1
        indent = _indent_of(line)

        while len(stack) > 1 and indent <= stack[-1].indent:
            stack.pop()

        if _is_sequence_item(trimmed):
            sequence = _sequence_for(stack, line_no)
            item_text = trimmed[1:].strip()

            if not item_text:
                following = _next_content_line(lines, index)
                if following is not None and _indent_of(following) > indent:
                    child = [] if _is_sequence_item(following.strip()) else {}
                    sequence.append(child)
                    stack.append(_Frame(child, indent))
                else:
                    sequence.append(None)
                continue

            entry = _split_entry(item_text)
            if entry is None or (
                unquote(item_text) is not None and not QUOTED_KEY_RE.match(item_text)
            ):
                sequence.append(coerce_scalar(item_text))
            elif not entry[1]:
                # "- key:" opens a mapping whose first key holds a nested block
                key_column = indent + trimmed.index(item_text)
                following = _next_content_line(lines, index)
                child = [] if following is not None and _is_sequence_item(following.strip()) else {}
                item = {entry[0]: child}
                sequence.append(item)
                stack.append(_Frame(item, indent))
                stack.append(_Frame(child, key_column))
            else:
                item = {entry[0]: coerce_scalar(entry[1])}
                sequence.append(item)
                stack.append(_Frame(item, indent))
            continue

        entry = _split_entry(trimmed)
        if entry is None:
            raise ValueError(f"Line {line_no}: expected 'key: value' or '- item': {trimmed}")

        container = stack[-1].container
        if not isinstance(container, dict):
            raise ValueError(f"Line {line_no}: mapping entry inside a sequence: {trimmed}")

        key, raw = entry

        if raw:
            container[key] = coerce_scalar(raw)
            continue

        following = _next_content_line(lines, index)
        if following is not None and _is_sequence_item(following.strip()):
            container[key] = []
        else:
            container[key] = {}
        stack.append(_Frame(container[key], indent))

    return stack[0].container


# XML


def parse_xml_document(text: str) -> ET.Element:
    """
    Parse XML text into an element tree, checking well-formedness.

    Raises:
        ValueError: If the document is not well-formed
    """
    try:
        return ET.fromstring(text)
    except ET.ParseError as e:
        raise ValueError(f"Invalid XML structure: {e}") from e


def _xml_node(element: ET.Element) -> Value:
    node: Dict[str, Value] = {}

    if element.attrib:
        node[ATTRIBUTES_KEY] = dict(element.attrib)

    text = (element.text or "").strip()
    if text:
        node[TEXT_KEY] = text

    has_children = False
    for child in element:
        has_children = True
        value = _xml_node(child)

        if child.tag not in node:
            node[child.tag] = value
        elif isinstance(node[child.tag], list):
            node[child.tag].append(value)
        else:
            node[child.tag] = [node[child.tag], value]

        tail = (child.tail or "").strip()
        if tail:
            node[TEXT_KEY] = tail

    # Leaf elements collapse to their text
    if not has_children and TEXT_KEY in node:
        return node[TEXT_KEY]

    return node


def parse_xml(text: str) -> Value:
    """
    Parse XML text into a value keyed by the root element's tag.

    Attributes are kept under ``@attributes`` and text content under
    ``#text``. Repeated child tags become sequences.

    Args:
        text: XML text

    Returns:
        Single-entry mapping of root tag to its converted element
    """
    root = parse_xml_document(text)
    try:
        return {root.tag: _xml_node(root)}
    except RecursionError as e:
        raise ValueError("XML document is nested too deeply") from e


# TOML


def _key_path(key: str) -> List[str]:
    """Split a possibly dotted or quoted key into path segments."""
    key = key.strip()
    unquoted = unquote(key)
    if unquoted is not None:
        return [unquoted]
    return [part.strip() for part in key.split(".")]


def _walk_tables(table: Dict[str, Value], path: List[str], line_no: int) -> Dict[str, Value]:
    """Walk a table path, creating missing tables along the way."""
    for part in path:
        existing = table.get(part)
        if existing is None:
            table[part] = {}
            table = table[part]
        elif isinstance(existing, dict):
            table = existing
        elif isinstance(existing, list) and existing and isinstance(existing[-1], dict):
            # Paths through an array of tables address its latest table
            table = existing[-1]
        else:
            raise ValueError(f"Line {line_no}: '{part}' is not a table")
    return table


def _toml_array_item(item: str) -> Value:
    number = parse_number(item)
    if number is not None:
        return number
    unquoted = unquote(item)
    return unquoted if unquoted is not None else item


def parse_toml_value(text: str) -> Value:
    """
    Parse the value side of a TOML assignment.

    Args:
        text: Raw value text

    Returns:
        String, number, boolean, list, inline table or the raw text
    """
    text = text.strip()

    unquoted = unquote(text)
    if unquoted is not None:
        return unquoted

    number = parse_number(text)
    if number is not None:
        return number

    if text.lower() in ("true", "false"):
        return text.lower() == "true"

    if text.startswith("[") and text.endswith("]"):
        items = [item.strip() for item in text[1:-1].split(",")]
        return [_toml_array_item(item) for item in items if item]

    if text.startswith("{") and text.endswith("}"):
        table: Dict[str, Value] = {}
        for pair in text[1:-1].split(","):
            pair = pair.strip()
            if not pair:
                continue
            if "=" not in pair:
                raise ValueError(f"Malformed inline table entry: {pair}")
            key, raw = pair.split("=", 1)
            table[_key_path(key)[-1]] = coerce_scalar(raw)
        return table

    return text


def parse_toml(text: str) -> Value:
    """
    Parse a simplified, line-driven TOML document.

    Args:
        text: TOML text

    Returns:
        Root mapping

    Raises:
        ValueError: On malformed headers, stray lines or conflicting keys
    """
    result: Dict[str, Value] = {}
    current = result

    for index, raw_line in enumerate(text.split("\n")):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        line_no = index + 1

        if line.startswith("["):
            match = _ARRAY_TABLE_RE.match(line)
            if match:
                path = _key_path(match.group(1))
                parent = _walk_tables(result, path[:-1], line_no)
                tables = parent.setdefault(path[-1], [])
                if not isinstance(tables, list):
                    raise ValueError(f"Line {line_no}: '{path[-1]}' is not an array of tables")
                current = {}
                tables.append(current)
                continue

            match = _TABLE_RE.match(line)
            if not match:
                raise ValueError(f"Line {line_no}: malformed table header: {line}")
            current = _walk_tables(result, _key_path(match.group(1)), line_no)
            continue

        if "=" not in line:
            raise ValueError(f"Line {line_no}: expected 'key = value': {line}")

        key, raw = line.split("=", 1)
        path = _key_path(key)
        target = _walk_tables(current, path[:-1], line_no)
        target[path[-1]] = parse_toml_value(raw)

    return result


PARSERS: Dict[ConversionFormat, Callable[[str], Value]] = {
    ConversionFormat.JSON: parse_json,
    ConversionFormat.YAML: parse_yaml,
    ConversionFormat.XML: parse_xml,
    ConversionFormat.TOML: parse_toml,
}


def parse(text: str, format: ConversionFormat) -> Value:
    """
    Parse text in the given format.

    Args:
        text: Input text
        format: Input format

    Returns:
        Parsed value

    Raises:
        ValueError: If the format is unsupported or parsing fails
    """
    parser = PARSERS.get(format)
    if parser is None:
        raise ValueError(f"Unsupported format: {format}")

    logger.debug(f"Parsing {format.value} ({len(text)} chars)")
    return parser(text)
