import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from carbwise.errors import ParseError
from carbwise.pipeline.models import FoodItem, LookupResult
from carbwise.prompts import LookupMode
from carbwise.utils import Invalid, NoMatch, locate_json

logger = logging.getLogger(__name__)


def _message_content(body: Dict[str, Any]) -> str:
    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        raise ParseError("Invalid API response: no choices")
    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str):
        raise ParseError("Invalid API response: no message content")
    return content.strip()


def _citations(body: Dict[str, Any]) -> Tuple[str, ...]:
    """Root-level citation strings in upstream order; non-string entries are not citations and are dropped."""
    citations = body.get("citations")
    if not isinstance(citations, list):
        return ()
    return tuple(c for c in citations if isinstance(c, str))


def _is_item_list(value: Any) -> bool:
    return all(isinstance(obj, dict) for obj in value)


def _food_item(obj: Any) -> FoodItem:
    """Validate one model-authored object into a FoodItem."""
    if not isinstance(obj, dict):
        raise ParseError("Could not parse food data: item is not an object")

    name = obj.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ParseError("Could not parse food data: missing name")

    carbs = obj.get("carbs")
    # bool is an int subclass; "carbs": true is not a number of grams.
    if isinstance(carbs, bool) or not isinstance(carbs, (int, float)):
        raise ParseError(f"Could not parse food data: carbs for {name!r} is not a number")
    try:
        grams = float(carbs)
    except OverflowError:
        raise ParseError(f"Could not parse food data: carbs for {name!r} out of range") from None
    if not math.isfinite(grams) or grams < 0:
        raise ParseError(f"Could not parse food data: carbs for {name!r} out of range")

    details: Optional[str] = obj.get("details")
    if not isinstance(details, str) or not details.strip():
        details = None

    return FoodItem(name=name.strip(), carbs=grams, details=details)


def extract(body: Dict[str, Any], mode: LookupMode) -> LookupResult:
    """
    Turn a raw chat-completion body into a validated LookupResult.

    Multi mode expects a JSON array of items (an empty array is a valid,
    empty result); single mode expects one JSON object.
    """
    content = _message_content(body)
    logger.debug("[EXTRACT] Raw model content: %s", content)

    expected = list if mode is LookupMode.MULTI else dict
    located = locate_json(
        content,
        expected,
        accept=_is_item_list if mode is LookupMode.MULTI else None,
    )

    if isinstance(located, NoMatch):
        logger.warning("[EXTRACT] No JSON %s in model reply", expected.__name__)
        raise ParseError("Could not parse food items" if mode is LookupMode.MULTI else None)
    if isinstance(located, Invalid):
        logger.warning("[EXTRACT] Unparseable JSON in model reply: %s", located.reason)
        raise ParseError(f"Could not parse food data: {located.reason}")

    value = located.value
    if mode is LookupMode.MULTI:
        raw_items: List[Any] = value
        items = tuple(_food_item(obj) for obj in raw_items)
    else:
        items = (_food_item(value),)

    citations = _citations(body)
    logger.info(
        "[EXTRACT] Parsed %s item(s), %s citation(s)",
        len(items),
        len(citations),
    )
    return LookupResult(items=items, citations=citations)
