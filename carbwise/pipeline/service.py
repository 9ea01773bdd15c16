import asyncio
import logging
import time
from typing import Any, Optional, Protocol, Sequence

from carbwise import config
from carbwise.errors import CarbLookupError, InternalError
from carbwise.pipeline.extractor import extract
from carbwise.pipeline.models import LookupResult
from carbwise.pipeline.sanitizer import validate_input
from carbwise.pipeline.transport import TransportClient
from carbwise.prompts import LookupMode, build_prompt

logger = logging.getLogger(__name__)


class FoodReporter(Protocol):
    def add_food(
        self,
        name: str,
        carbs: float,
        details: Optional[str] = None,
        citations: Sequence[str] = (),
    ) -> None:
        ...


class LookupService:
    """
    Carb lookup pipeline:

    raw input
      ↓
    validate + sanitize (no network on failure)
      ↓
    build prompt (single object / multi array)
      ↓
    transport (retry + backoff on 5xx / network)
      ↓
    extract + validate JSON
      ↓
    report each item (optional)
    """

    def __init__(
        self,
        transport: Optional[TransportClient] = None,
        reporter: Optional[FoodReporter] = None,
        timeout_seconds: Optional[float] = config.LOOKUP_TIMEOUT_SECONDS,
    ):
        self.transport = transport or TransportClient()
        self.reporter = reporter
        self.timeout_seconds = timeout_seconds

    async def lookup(self, raw_input: Any, mode: LookupMode = LookupMode.MULTI) -> LookupResult:
        field_name = "foodItem" if mode is LookupMode.SINGLE else "input"
        text = validate_input(raw_input, field_name)

        t0 = time.perf_counter()
        logger.info("[LOOKUP] Starting %s lookup (%s chars)", mode.value, len(text))
        try:
            result = await asyncio.wait_for(self._run(text, mode), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            logger.error("[LOOKUP] Timed out after %.1fs", time.perf_counter() - t0)
            raise InternalError("Lookup timed out. Try again later.") from e
        except CarbLookupError as e:
            logger.warning("[LOOKUP] %s lookup failed: %s (%s)", mode.value, e, e.code)
            raise

        logger.info(
            "[LOOKUP] Completed in %sms, %s item(s), %.1fg carbs",
            round((time.perf_counter() - t0) * 1000, 2),
            len(result.items),
            result.total_carbs,
        )

        if self.reporter is not None:
            for item in result.items:
                self.reporter.add_food(item.name, item.carbs, item.details, result.citations)
        return result

    async def _run(self, text: str, mode: LookupMode) -> LookupResult:
        prompt = build_prompt(text, mode)
        body = await self.transport.send(prompt)
        return extract(body, mode)

    async def lookup_single(self, food_item: Any) -> LookupResult:
        return await self.lookup(food_item, LookupMode.SINGLE)

    async def lookup_multiple(self, text: Any) -> LookupResult:
        return await self.lookup(text, LookupMode.MULTI)
