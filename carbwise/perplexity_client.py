import logging
from functools import lru_cache

from openai import AsyncOpenAI

from carbwise.config import PERPLEXITY_API_URL

logger = logging.getLogger(__name__)


@lru_cache
def get_perplexity_client(api_key: str, base_url: str = PERPLEXITY_API_URL) -> AsyncOpenAI:
    # Retries are owned by TransportClient; the SDK must make exactly one request per call.
    logger.info("Initializing Perplexity client for %s", base_url)
    return AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0)
