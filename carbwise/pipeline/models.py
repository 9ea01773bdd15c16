from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class FoodItem:
    name: str
    carbs: float
    details: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "carbs": self.carbs, "details": self.details}


@dataclass(frozen=True)
class LookupResult:
    """
    Validated outcome of one lookup.

    Multi-item lookups may hold zero or more items; single-item lookups hold
    exactly one, exposed through `item`.
    """

    items: Tuple[FoodItem, ...] = ()
    citations: Tuple[str, ...] = ()

    @property
    def item(self) -> FoodItem:
        if len(self.items) != 1:
            raise ValueError(f"Expected exactly one item, got {len(self.items)}")
        return self.items[0]

    @property
    def total_carbs(self) -> float:
        return sum(item.carbs for item in self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "citations": list(self.citations),
        }

    def to_single_dict(self) -> Dict[str, Any]:
        payload = self.item.to_dict()
        payload["citations"] = list(self.citations)
        return payload
