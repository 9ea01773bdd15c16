"""Prompts for the Perplexity chat-completion models."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List

from carbwise.config import PERPLEXITY_MODEL_MULTI, PERPLEXITY_MODEL_SINGLE


class LookupMode(str, Enum):
    SINGLE = "single"
    MULTI = "multi"


SOURCING_RULES = (
    "IMPORTANT: Always use official nutrition data from the restaurant or manufacturer website when available. "
    "For branded/restaurant items (McDonald's, Chick-fil-A, etc.), use the exact values from their published nutrition information. "
    "For generic foods, use USDA FoodData Central values. "
    "Never estimate or average - use the most authoritative source available. "
    "Include the serving size in the details. "
)

SINGLE_SYSTEM_PROMPT = (
    "You are a precise nutrition assistant. The user will name a food item. "
    'Respond with ONLY a JSON object with "name" (short descriptive name), "carbs" (number of carb grams as a number), '
    'and "details" (cite the specific source used e.g. restaurant website, USDA database, nutrition label, and include the serving size). '
    + SOURCING_RULES
    + 'Example: {"name":"Big Mac","carbs":45,"details":"Per McDonald\'s official nutrition information, a Big Mac contains 45g of carbs (standard serving)."} '
    "Return ONLY the JSON object, no other text."
)

MULTI_SYSTEM_PROMPT = (
    "You are a precise nutrition assistant. The user will describe one or more food items. "
    "Identify each distinct food item and respond with ONLY a JSON array. "
    'Each element must have "name" (short descriptive name), "carbs" (number of carb grams), '
    'and "details" (cite the specific source used e.g. restaurant website, USDA database, nutrition label). '
    + SOURCING_RULES
    + 'Example: [{"name":"Big Mac","carbs":45,"details":"Per McDonald\'s official nutrition information, a Big Mac contains 45g of carbs (standard serving)."}] '
    "Return ONLY the JSON array, no other text."
)

TEMPERATURE = 0.0

MAX_TOKENS = {
    LookupMode.SINGLE: 300,
    LookupMode.MULTI: 600,
}


@dataclass(frozen=True)
class PromptMessages:
    system: str
    user: str
    mode: LookupMode

    @property
    def model(self) -> str:
        return PERPLEXITY_MODEL_MULTI if self.mode is LookupMode.MULTI else PERPLEXITY_MODEL_SINGLE

    @property
    def max_tokens(self) -> int:
        return MAX_TOKENS[self.mode]

    @property
    def temperature(self) -> float:
        return TEMPERATURE

    def as_messages(self) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]


def build_prompt(text: str, mode: LookupMode) -> PromptMessages:
    """Compose the system/user pair for already-sanitized text."""
    system = MULTI_SYSTEM_PROMPT if mode is LookupMode.MULTI else SINGLE_SYSTEM_PROMPT
    return PromptMessages(system=system, user=text, mode=mode)
