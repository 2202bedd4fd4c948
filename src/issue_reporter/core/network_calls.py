"""
Parsing of the failedNetworkCalls form field.

The field arrives serialized by different client layers: plain JSON,
form-escaped JSON wrapped in quotes, or JSON that was stringified twice.
Each parser strategy handles one of those forms; strategies are tried in
order and the first success wins. New forms are supported by appending
a strategy to PARSE_STRATEGIES.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

from .report import NetworkCall
from ..utils.logger import get_logger


@dataclass
class NetworkCallParseResult:
    calls: List[NetworkCall] = field(default_factory=list)
    ok: bool = True
    strategy: Optional[str] = None
    raw: str = ""
    error: Optional[str] = None


def _decode_calls(text: str) -> List[NetworkCall]:
    """
    Decode a JSON array of network calls.

    Raises:
        ValueError: if the text is not a JSON array of network call objects
    """
    data = json.loads(text)
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError(f"expected a JSON array, got {type(data).__name__}")
    return [NetworkCall.from_dict(item) for item in data]


def parse_direct(text: str) -> List[NetworkCall]:
    return _decode_calls(text)


def unescape_quoted(text: str) -> str:
    """Strip one layer of surrounding quotes and undo form escaping."""
    cleaned = text.strip()
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in ('"', "'"):
        cleaned = cleaned[1:-1]
    cleaned = cleaned.replace('\\"', '"')
    return cleaned.replace('\\\\', '\\')


def parse_unescaped(text: str) -> List[NetworkCall]:
    return _decode_calls(unescape_quoted(text))


def parse_double_encoded(text: str) -> List[NetworkCall]:
    decoded = json.loads(text)
    if not isinstance(decoded, str):
        raise ValueError("not a JSON-encoded string")
    return _decode_calls(decoded)


PARSE_STRATEGIES: List[Tuple[str, Callable[[str], List[NetworkCall]]]] = [
    ('direct', parse_direct),
    ('unescaped', parse_unescaped),
    ('double_encoded', parse_double_encoded),
]


class NetworkCallParser:
    """Turns a serialized failedNetworkCalls value into NetworkCall objects."""

    def __init__(self, strategies: Optional[List[Tuple[str, Callable[[str], List[NetworkCall]]]]] = None):
        self.strategies = list(strategies) if strategies is not None else list(PARSE_STRATEGIES)
        self.logger = get_logger()

    def parse(self, raw: Optional[str]) -> NetworkCallParseResult:
        """
        Parse the raw field.

        Never raises: when every strategy fails the result carries an empty
        list, ok=False and the raw string so the caller can keep it as an
        opaque diagnostic field.

        Args:
            raw: Serialized network calls (may be None or empty)

        Returns:
            NetworkCallParseResult
        """
        if not raw:
            return NetworkCallParseResult(raw=raw or "")

        for name, strategy in self.strategies:
            try:
                calls = strategy(raw)
            except (ValueError, TypeError, AttributeError, RecursionError):
                continue
            return NetworkCallParseResult(calls=calls, strategy=name, raw=raw)

        self.logger.warning(f"Failed to parse network calls. Input sample (first 100 chars): {raw[:100]}")
        return NetworkCallParseResult(
            ok=False,
            raw=raw,
            error="could not parse network calls after multiple attempts",
        )


def parse_generic_json(raw: str) -> Tuple[bool, Any]:
    """Last-resort decode of the raw field as arbitrary JSON."""
    try:
        return True, json.loads(raw)
    except (ValueError, RecursionError):
        return False, None
