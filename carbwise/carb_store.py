"""
In-process carb tally.

Receives one add_food() call per accepted FoodItem and keeps the running
total, the last logged food and a log of entries. Nothing is persisted;
a restart starts from zero.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)


class CarbStore:
    def __init__(self, daily_carb_goal: Optional[float] = None):
        self._lock = threading.Lock()
        self._daily_carb_goal = daily_carb_goal
        self._total_carbs = 0.0
        self._last_food_name = ""
        self._last_food_carbs = 0.0
        self._logged_items: List[Dict[str, Any]] = []

    def add_food(
        self,
        name: str,
        carbs: float,
        details: Optional[str] = None,
        citations: Sequence[str] = (),
    ) -> None:
        entry: Dict[str, Any] = {
            "name": name,
            "carbs": carbs,
            "logged_at": datetime.now(timezone.utc).isoformat(),
        }
        if details:
            entry["details"] = details
        if citations:
            entry["citations"] = list(citations)

        with self._lock:
            self._total_carbs += carbs
            self._last_food_name = name
            self._last_food_carbs = carbs
            self._logged_items.append(entry)
            total = self._total_carbs

        logger.info("Logged %s (%.1fg), running total %.1fg", name, carbs, total)

    def total_carbs(self) -> float:
        with self._lock:
            return self._total_carbs

    def last_food(self) -> Dict[str, Any]:
        with self._lock:
            return {"name": self._last_food_name, "carbs": self._last_food_carbs}

    def daily_carb_goal(self) -> Optional[float]:
        goal = self._daily_carb_goal
        return goal if goal is not None and goal > 0 else None

    def remaining_carbs(self) -> Optional[float]:
        goal = self.daily_carb_goal()
        if goal is None:
            return None
        return max(goal - self.total_carbs(), 0.0)

    def logged_items(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [dict(item) for item in self._logged_items]

    def reset(self) -> None:
        with self._lock:
            self._total_carbs = 0.0
            self._last_food_name = ""
            self._last_food_carbs = 0.0
            self._logged_items.clear()
        logger.info("Carb tally reset")

    def snapshot(self) -> Dict[str, Any]:
        return {
            "total_carbs": self.total_carbs(),
            "last_food": self.last_food(),
            "daily_carb_goal": self.daily_carb_goal(),
            "remaining_carbs": self.remaining_carbs(),
            "logged_items": self.logged_items(),
        }
