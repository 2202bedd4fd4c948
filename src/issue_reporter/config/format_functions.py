"""
Formatting helpers for rendering report values into Jira wiki markup.
"""

import json
from typing import Any

# Image references that clients send when no screenshot exists
_EMPTY_IMAGE_REFERENCES = ("", "None", "null")


def truncate_text(text: str, max_length: int = 32000) -> str:
    """
    Truncate text to specified length to avoid JIRA field limits.

    Args:
        text: Text to truncate
        max_length: Maximum allowed length

    Returns:
        Truncated text
    """
    if not text:
        return ""

    if len(text) <= max_length:
        return text

    return text[:max_length-3] + "..."


def to_pretty_json(value: Any) -> str:
    """
    Render a value as indented JSON, falling back to its string form.

    Serialization failures (unsupported types, circular references,
    nesting too deep to encode) are soft: the caller still gets a
    readable representation.

    Args:
        value: Value to render

    Returns:
        Rendered text
    """
    try:
        return json.dumps(value, indent=2, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(value)
    except RecursionError:
        # str() recurses just as deep
        return f"<{type(value).__name__} nested too deeply to render>"


def to_compact_json(value: Any) -> str:
    """Render a value as single-line JSON, or "" if it cannot be serialized."""
    try:
        return json.dumps(value, ensure_ascii=False, separators=(',', ':'))
    except (TypeError, ValueError, RecursionError):
        return ""


def is_valid_image_reference(image_reference: Any) -> bool:
    """Check whether an image reference points at something real."""
    return isinstance(image_reference, str) and image_reference not in _EMPTY_IMAGE_REFERENCES


def preview(value: Any, limit: int = 100) -> str:
    """Short single-value preview used in log lines."""
    text = str(value)
    if len(text) > limit:
        return text[:limit] + "..."
    return text
