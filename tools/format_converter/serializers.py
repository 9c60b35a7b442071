"""Serializers rendering values as JSON, YAML, XML and TOML text.

Every emitter dispatches on ``kind_of``, so a value outside the model
fails loudly instead of being dropped.
"""

import json
import re
import xml.etree.ElementTree as ET
from typing import Any, List, Tuple

from .parsers import ATTRIBUTES_KEY, TEXT_KEY
from .value import (
    Value,
    ValueKind,
    coerce_scalar,
    is_container,
    kind_of,
    normalize_number,
    scalar_text,
)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

_BARE_KEY_RE = re.compile(r"^[A-Za-z0-9_-]+$")
_BARE_YAML_KEY_RE = re.compile(r"^[\w-]+$")


def _json_ready(value: Value) -> Any:
    kind = kind_of(value)
    if kind == ValueKind.NUMBER:
        return normalize_number(value)
    if kind == ValueKind.SEQUENCE:
        return [_json_ready(item) for item in value]
    if kind == ValueKind.MAPPING:
        return {key: _json_ready(item) for key, item in value.items()}
    return value


def serialize_json(value: Value, indent: int = 2, minify: bool = False) -> str:
    """
    Render a value as JSON.

    Args:
        value: Value to render
        indent: Indentation level
        minify: Remove all optional whitespace

    Returns:
        JSON text

    Raises:
        ValueError: If the value holds NaN or an infinite number
    """
    data = _json_ready(value)
    if minify:
        return json.dumps(data, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    return json.dumps(data, indent=indent, ensure_ascii=False, allow_nan=False)


# YAML


def _needs_yaml_quotes(text: str, in_sequence: bool) -> bool:
    if not text or "\n" in text or "\r" in text or text.startswith("#"):
        return True
    # "- a: b" and "- a:" would read back as mappings
    if in_sequence and (": " in text or text.endswith(":")):
        return True
    # Strings that would read back as another type or get trimmed
    return coerce_scalar(text) != text


def _yaml_scalar(value: Value, in_sequence: bool = False) -> str:
    text = scalar_text(value)
    if kind_of(value) == ValueKind.STRING and _needs_yaml_quotes(text, in_sequence):
        return json.dumps(text, ensure_ascii=False)
    return text


def _yaml_key(key: str) -> str:
    if _BARE_YAML_KEY_RE.match(key):
        return key
    return json.dumps(key, ensure_ascii=False)


def _emit_yaml(value: Value, level: int, unit: str, lines: List[str]) -> None:
    pad = unit * level
    kind = kind_of(value)

    if kind == ValueKind.MAPPING:
        for key, item in value.items():
            name = _yaml_key(key)
            item_kind = kind_of(item)
            if item_kind == ValueKind.SEQUENCE:
                # Sequences sit at the same indent as their key
                lines.append(f"{pad}{name}:")
                _emit_yaml(item, level, unit, lines)
            elif item_kind == ValueKind.MAPPING:
                lines.append(f"{pad}{name}:")
                _emit_yaml(item, level + 1, unit, lines)
            else:
                lines.append(f"{pad}{name}: {_yaml_scalar(item)}")

    elif kind == ValueKind.SEQUENCE:
        for item in value:
            if is_container(item):
                lines.append(f"{pad}-")
                _emit_yaml(item, level + 1, unit, lines)
            else:
                lines.append(f"{pad}- {_yaml_scalar(item, in_sequence=True)}")

    else:
        lines.append(f"{pad}{_yaml_scalar(value)}")


def serialize_yaml(value: Value, indent: int = 2) -> str:
    """
    Render a value as block-style YAML.

    Strings are written bare unless they would read back as a number,
    boolean or different text; other scalars use their literal form.

    Args:
        value: Value to render
        indent: Spaces per nesting level

    Returns:
        YAML text
    """
    lines: List[str] = []
    _emit_yaml(value, 0, " " * max(indent, 1), lines)
    return "".join(f"{line}\n" for line in lines)


# XML


def _append_text(element: ET.Element, text: str) -> None:
    if len(element):
        last = element[-1]
        last.tail = (last.tail or "") + text
    else:
        element.text = (element.text or "") + text


def _append_child(parent: ET.Element, tag: str, value: Value) -> None:
    if kind_of(value) == ValueKind.SEQUENCE:
        # Each item repeats the tag
        for item in value:
            _append_child(parent, tag, item)
        return

    child = ET.SubElement(parent, tag)
    _fill_element(child, value)


def _fill_element(element: ET.Element, value: Value) -> None:
    kind = kind_of(value)

    if kind == ValueKind.MAPPING:
        for key, item in value.items():
            if key == ATTRIBUTES_KEY:
                # Attributes are not written back
                continue
            if key == TEXT_KEY:
                _append_text(element, scalar_text(item))
            else:
                _append_child(element, key, item)

    elif kind == ValueKind.SEQUENCE:
        for item in value:
            _append_child(element, "item", item)

    else:
        _append_text(element, scalar_text(value))


def serialize_xml(value: Value, root: str = "data", indent: int = 2, minify: bool = False) -> str:
    """
    Render a value as an XML document.

    Args:
        value: Value to render
        root: Root element name
        indent: Spaces per nesting level
        minify: Write the document on one line

    Returns:
        XML text with declaration
    """
    element = ET.Element(root)
    _fill_element(element, value)

    if not minify and indent > 0:
        ET.indent(element, space=" " * indent)

    return xml_document(element)


def xml_document(element: ET.Element) -> str:
    """Serialize an element tree as a document with declaration."""
    return f"{XML_DECLARATION}\n{ET.tostring(element, encoding='unicode')}"


# TOML


def _toml_key(key: str) -> str:
    if _BARE_KEY_RE.match(key):
        return key
    return json.dumps(key, ensure_ascii=False)


def _toml_inline(value: Value) -> str:
    kind = kind_of(value)
    if kind == ValueKind.STRING:
        return json.dumps(value, ensure_ascii=False)
    if kind == ValueKind.SEQUENCE:
        return "[" + ", ".join(_toml_inline(item) for item in value) + "]"
    if kind == ValueKind.MAPPING:
        pairs = ", ".join(f"{_toml_key(k)} = {_toml_inline(v)}" for k, v in value.items())
        return "{" + pairs + "}"
    return scalar_text(value)


def _is_table_array(value: Value) -> bool:
    return (
        kind_of(value) == ValueKind.SEQUENCE
        and len(value) > 0
        and all(kind_of(item) == ValueKind.MAPPING for item in value)
    )


def _emit_toml_table(table: dict, prefix: str, lines: List[str]) -> None:
    nested: List[Tuple[str, Value]] = []

    for key, item in table.items():
        if kind_of(item) == ValueKind.MAPPING or _is_table_array(item):
            nested.append((key, item))
        else:
            lines.append(f"{_toml_key(key)} = {_toml_inline(item)}")

    # Sub-tables come after plain keys so keys stay in their own table
    for key, item in nested:
        path = f"{prefix}.{_toml_key(key)}" if prefix else _toml_key(key)
        if kind_of(item) == ValueKind.MAPPING:
            lines.extend(["", f"[{path}]"])
            _emit_toml_table(item, path, lines)
        else:
            for entry in item:
                lines.extend(["", f"[[{path}]]"])
                _emit_toml_table(entry, path, lines)


def serialize_toml(value: Value) -> str:
    """
    Render a mapping as TOML.

    Nested mappings become ``[table]`` sections, sequences of mappings become
    ``[[array-table]]`` blocks and other sequences become inline arrays.

    Args:
        value: Root mapping

    Returns:
        TOML text

    Raises:
        ValueError: If the value is not a mapping
    """
    if kind_of(value) != ValueKind.MAPPING:
        raise ValueError("TOML document root must be a table")

    lines: List[str] = []
    _emit_toml_table(value, "", lines)
    text = "\n".join(lines).strip("\n")
    return f"{text}\n" if text else ""
