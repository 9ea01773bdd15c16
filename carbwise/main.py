"""Main FastAPI application."""

import logging
import sys
from typing import Any, Dict

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from carbwise.carb_store import CarbStore
from carbwise.config import ALLOW_ALL_ORIGINS, CORS_ORIGINS, DAILY_CARB_GOAL
from carbwise.errors import CarbLookupError
from carbwise.pipeline import LookupMode, LookupService

logging.basicConfig(
    level=logging.INFO,
    stream=sys.stdout,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

logger = logging.getLogger(__name__)

# -----------------------------------
# Инициализация приложения
# -----------------------------------

app = FastAPI(title="CarbWise", description="Carbohydrate lookup for food descriptions")

carb_store = CarbStore(daily_carb_goal=DAILY_CARB_GOAL)
lookup_service = LookupService(reporter=carb_store)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    # Browsers reject credentialed requests against a wildcard origin.
    allow_credentials=not ALLOW_ALL_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _http_error(error: CarbLookupError) -> HTTPException:
    return HTTPException(error.http_status, error.to_dict())


async def _run_lookup(raw_input: Any, mode: LookupMode):
    try:
        return await lookup_service.lookup(raw_input, mode)
    except CarbLookupError as e:
        raise _http_error(e)
    except Exception:
        logger.exception("Unexpected error in %s lookup", mode.value)
        raise HTTPException(500, {"error": "internal", "message": "Something went wrong. Try again."})


# -----------------------------------
# Тех. эндпоинты
# -----------------------------------

@app.get("/health")
def health():
    return {"status": "ok"}


# -----------------------------------
# /lookup: один продукт (legacy getCarbCount)
# -----------------------------------

@app.post("/lookup")
async def lookup_single(payload: Dict[str, Any] = Body(...)):
    result = await _run_lookup(payload.get("foodItem"), LookupMode.SINGLE)
    return result.to_single_dict()


# -----------------------------------
# /lookup/multiple: свободный текст, несколько продуктов
# -----------------------------------

@app.post("/lookup/multiple")
async def lookup_multiple(payload: Dict[str, Any] = Body(...)):
    result = await _run_lookup(payload.get("input"), LookupMode.MULTI)
    return result.to_dict()


# -----------------------------------
# /totals: накопленный итог
# -----------------------------------

@app.get("/totals")
def totals():
    return carb_store.snapshot()


@app.delete("/totals")
def reset_totals():
    carb_store.reset()
    return carb_store.snapshot()
