"""Utility functions."""

import json
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

_DECODER = json.JSONDecoder()


@dataclass(frozen=True)
class Parsed:
    value: Any


@dataclass(frozen=True)
class NoMatch:
    pass


@dataclass(frozen=True)
class Invalid:
    reason: str


JsonLocation = Union[Parsed, NoMatch, Invalid]


def locate_json(
    text: str,
    expected: type,
    accept: Optional[Callable[[Any], bool]] = None,
) -> JsonLocation:
    """
    Find the first JSON value of the expected type (list or dict) embedded in model text.

    Models wrap the payload in prose or ```json fences, so every opening
    bracket is tried in order and the first one that decodes to a complete
    value (and passes `accept`, if given) wins. Citation markers such as
    "[1]" decode as arrays too, hence the hook.

    Returns:
        Parsed(value): a value was decoded
        NoMatch(): the text holds no opening bracket at all
        Invalid(reason): brackets exist but none starts a valid value
    """
    if not text:
        return NoMatch()

    opener = "[" if expected is list else "{"
    start = text.find(opener)
    if start == -1:
        return NoMatch()

    reason = "No valid JSON found in model response"
    while start != -1:
        try:
            value, _ = _DECODER.raw_decode(text, start)
        except json.JSONDecodeError as e:
            reason = f"Invalid JSON at offset {start}: {e.msg}"
        else:
            if accept is None or accept(value):
                return Parsed(value)
            reason = f"Unexpected JSON shape at offset {start}"
        start = text.find(opener, start + 1)

    return Invalid(reason)
