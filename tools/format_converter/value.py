"""Intermediate value model shared by all parsers and serializers.

A value is plain Python data: ``None``, ``bool``, ``float``, ``str``,
``list`` or ``dict``. Dicts keep insertion order, which keeps
re-serialization deterministic. Numbers are always floats.
"""

import json
import re
from enum import Enum
from typing import Any, Dict, List, Optional, Union

Value = Union[None, bool, float, str, List["Value"], Dict[str, "Value"]]

_NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")

# A double-quoted string with no unescaped quote inside
DOUBLE_QUOTED_RE = re.compile(r'^"(?:[^"\\]|\\.)*"$')


class ValueKind(str, Enum):
    """Variants of the value model."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def kind_of(value: Any) -> ValueKind:
    """
    Classify a value.

    Args:
        value: Value to classify

    Returns:
        ValueKind of the value

    Raises:
        TypeError: If the value is not part of the model
    """
    if value is None:
        return ValueKind.NULL
    # bool before number, bool is an int subclass
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, list):
        return ValueKind.SEQUENCE
    if isinstance(value, dict):
        return ValueKind.MAPPING
    raise TypeError(f"Unsupported value type: {type(value).__name__}")


def is_container(value: Any) -> bool:
    """Check if value is a sequence or mapping."""
    return kind_of(value) in (ValueKind.SEQUENCE, ValueKind.MAPPING)


def to_value(data: Any) -> Value:
    """
    Normalize JSON-like Python data into the value model.

    Ints become floats, tuples become lists and mapping keys become strings.

    Args:
        data: Data to normalize

    Returns:
        Normalized value
    """
    if isinstance(data, tuple):
        data = list(data)

    kind = kind_of(data)
    if kind == ValueKind.NUMBER:
        return float(data)
    if kind == ValueKind.SEQUENCE:
        return [to_value(item) for item in data]
    if kind == ValueKind.MAPPING:
        return {str(key): to_value(item) for key, item in data.items()}
    return data


def parse_number(text: str) -> Optional[float]:
    """Parse text as a number if the whole trimmed text is numeric."""
    text = text.strip()
    if not _NUMBER_RE.match(text):
        return None
    return float(text)


def normalize_number(number: float) -> Union[int, float]:
    """Return integral numbers as int, everything else as float."""
    number = float(number)
    if number.is_integer() and abs(number) < 1e16:
        return int(number)
    return number


def format_number(number: float) -> str:
    """Format a number, dropping the fraction of integral values."""
    return repr(normalize_number(number))


def scalar_text(value: Value) -> str:
    """
    Literal text of a scalar value.

    Args:
        value: Scalar value

    Returns:
        "null", "true"/"false", the formatted number or the string itself

    Raises:
        TypeError: If the value is a sequence or mapping
    """
    kind = kind_of(value)
    if kind == ValueKind.NULL:
        return "null"
    if kind == ValueKind.BOOL:
        return "true" if value else "false"
    if kind == ValueKind.NUMBER:
        return format_number(value)
    if kind == ValueKind.STRING:
        return value
    raise TypeError(f"Not a scalar: {kind.value}")


def unquote(text: str) -> Optional[str]:
    """
    Strip matching single or double quotes, or return None if not quoted.

    Backslash escapes in a well-formed double-quoted string are decoded
    (``"a\\"b"`` gives ``a"b``). Anything else keeps its inner text as is.
    """
    if len(text) < 2 or text[0] != text[-1] or text[0] not in ("'", '"'):
        return None

    if text[0] == '"' and DOUBLE_QUOTED_RE.match(text):
        try:
            return json.loads(text)
        except ValueError:
            pass

    return text[1:-1]


def coerce_scalar(text: str) -> Value:
    """
    Coerce scalar text to a value.

    Precedence: quoted string, number, case-insensitive boolean, plain text.

    Args:
        text: Scalar text

    Returns:
        Coerced value
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

    return text
