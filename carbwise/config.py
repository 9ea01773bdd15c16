import os
from typing import Optional


def _parse_cors_origins(raw: str) -> list[str]:
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]


def _parse_optional_float(raw: Optional[str]) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    return float(raw)


CORS_ORIGINS = _parse_cors_origins(os.getenv("CORS_ORIGINS", "*"))
ALLOW_ALL_ORIGINS = CORS_ORIGINS == ["*"]

# -----------------------------------
# Perplexity / upstream configuration
# -----------------------------------

# PERPLEXITY_API_URL: base URL of the chat-completion API (the client appends /chat/completions)
PERPLEXITY_API_URL = os.getenv("PERPLEXITY_API_URL", "https://api.perplexity.ai")

# PERPLEXITY_MODEL_SINGLE: model for one-item lookups (legacy getCarbCount flow)
PERPLEXITY_MODEL_SINGLE = os.getenv("PERPLEXITY_MODEL_SINGLE", "sonar")

# PERPLEXITY_MODEL_MULTI: model for free-text, multi-item lookups
PERPLEXITY_MODEL_MULTI = os.getenv("PERPLEXITY_MODEL_MULTI", "sonar-pro")

# -----------------------------------
# Timeouts / retries
# -----------------------------------

# SINGLE_TIMEOUT_SECONDS: per-attempt HTTP timeout for interactive single-item callers
SINGLE_TIMEOUT_SECONDS = float(os.getenv("SINGLE_TIMEOUT_SECONDS", "30"))

# MULTI_TIMEOUT_SECONDS: per-attempt HTTP timeout for the multi-item caller
MULTI_TIMEOUT_SECONDS = float(os.getenv("MULTI_TIMEOUT_SECONDS", "60"))

# LOOKUP_TIMEOUT_SECONDS: overall budget for one lookup, retries and backoff included
LOOKUP_TIMEOUT_SECONDS = float(os.getenv("LOOKUP_TIMEOUT_SECONDS", "60"))

# MAX_ATTEMPTS: total attempts per call (first try included) for 5xx / network failures
MAX_ATTEMPTS = int(os.getenv("MAX_ATTEMPTS", "3"))

# BACKOFF_SECONDS: linear backoff unit, the delay after attempt N is N * BACKOFF_SECONDS
BACKOFF_SECONDS = float(os.getenv("BACKOFF_SECONDS", "1.0"))

# -----------------------------------
# Tally
# -----------------------------------

# DAILY_CARB_GOAL: optional daily carbohydrate goal in grams (unset or <= 0 = no goal)
DAILY_CARB_GOAL = _parse_optional_float(os.getenv("DAILY_CARB_GOAL"))


def get_api_key() -> Optional[str]:
    """
    Read PERPLEXITY_API_KEY at call time.

    Kept out of the module-level constants so a key rotated into the
    environment (or removed from it) is seen by the next lookup.
    """
    key = os.getenv("PERPLEXITY_API_KEY")
    if key is None:
        return None
    return key.strip()
