"""JSON decoding and encoding for declaration documents."""

from typing import Any

import orjson

MAX_DOCUMENT_DEPTH = 64


class JSONParseError(Exception):
    """JSON parsing failed."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


def loads_object(text: str | bytes) -> dict[str, Any]:
    """
    Decode a JSON object.

    Args:
        text: JSON text

    Returns:
        Parsed dictionary

    Raises:
        JSONParseError: If the text is not valid JSON or not an object
    """
    try:
        result = orjson.loads(text)
    except orjson.JSONDecodeError as e:
        raise JSONParseError(f"Invalid JSON: {e}", e) from e

    if not isinstance(result, dict):
        raise JSONParseError(f"Expected object, got {type(result).__name__}")
    return result


def safe_json_dumps(obj: Any, indent: bool = False) -> str:
    """Encode to JSON, falling back to str() for values orjson can't handle."""
    option = orjson.OPT_NON_STR_KEYS
    if indent:
        option |= orjson.OPT_INDENT_2
    return orjson.dumps(obj, default=str, option=option).decode("utf-8")


def validate_json_depth(obj: Any, max_depth: int = MAX_DOCUMENT_DEPTH, current_depth: int = 0) -> None:
    """
    Validate nesting depth to keep recursive walks bounded.

    Raises:
        JSONParseError: If depth exceeds limit
    """
    if current_depth > max_depth:
        raise JSONParseError(f"JSON nesting depth {current_depth} exceeds maximum {max_depth}")

    if isinstance(obj, dict):
        for value in obj.values():
            validate_json_depth(value, max_depth, current_depth + 1)
    elif isinstance(obj, list):
        for item in obj:
            validate_json_depth(item, max_depth, current_depth + 1)
