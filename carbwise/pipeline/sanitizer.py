import re
from typing import Any

from carbwise.errors import InvalidArgument

MIN_INPUT_LENGTH = 2
MAX_INPUT_LENGTH = 100

_CONTROL_WHITESPACE = re.compile(r"[\n\r\t]")
_WHITESPACE_RUN = re.compile(r"\s+")


def sanitize_input(raw: str) -> str:
    """
    Normalize user text into a prompt-safe payload.

    Newlines and tabs become spaces, NUL bytes are dropped, the typographic
    apostrophe (U+2019, as typed by iOS keyboards) becomes ASCII, and
    whitespace runs collapse to a single space.
    """
    text = raw.strip()
    text = _CONTROL_WHITESPACE.sub(" ", text)
    text = text.replace("\0", "")
    text = text.replace("\u2019", "'")
    text = _WHITESPACE_RUN.sub(" ", text)
    return text.strip()


def validate_input(raw: Any, field_name: str = "input") -> str:
    """Reject missing/non-string/out-of-range input, return the sanitized text."""
    if not raw or not isinstance(raw, str):
        raise InvalidArgument(f"{field_name} is required")

    trimmed = raw.strip()
    if not MIN_INPUT_LENGTH <= len(trimmed) <= MAX_INPUT_LENGTH:
        raise InvalidArgument(
            f"{field_name} must be {MIN_INPUT_LENGTH}-{MAX_INPUT_LENGTH} characters"
        )

    sanitized = sanitize_input(trimmed)
    # Stripping NULs and collapsing whitespace can shrink the text below the minimum.
    if len(sanitized) < MIN_INPUT_LENGTH:
        raise InvalidArgument(
            f"{field_name} must be {MIN_INPUT_LENGTH}-{MAX_INPUT_LENGTH} characters"
        )
    return sanitized
