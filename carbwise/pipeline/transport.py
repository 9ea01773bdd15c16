"""Chat-completion transport with status classification and linear backoff."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import openai
from openai import AsyncOpenAI

from carbwise import config
from carbwise.errors import (
    AuthError,
    ConfigurationError,
    InternalError,
    ParseError,
    RateLimitError,
    ServerError,
    TransportError,
)
from carbwise.perplexity_client import get_perplexity_client
from carbwise.prompts import LookupMode, PromptMessages

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


class _Transient(Exception):
    """Internal marker: the attempt failed in a way worth retrying."""

    def __init__(self, final_error: Exception):
        super().__init__(str(final_error))
        self.final_error = final_error


class TransportClient:
    """
    Sends a prompt to the completion endpoint and returns the raw JSON body.

    Retry policy:
      - 401 -> AuthError, 429 -> RateLimitError, other 4xx -> TransportError; never retried
      - 5xx and network failures are retried up to `max_attempts` total attempts,
        sleeping attempt * backoff_seconds between them
      - exhausted 5xx -> ServerError, exhausted network failure -> InternalError
    """

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        api_key: Optional[str] = None,
        max_attempts: int = config.MAX_ATTEMPTS,
        backoff_seconds: float = config.BACKOFF_SECONDS,
        sleep: Sleep = asyncio.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._client = client
        self._api_key = api_key
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds
        self._sleep = sleep

    def _get_client(self) -> AsyncOpenAI:
        if self._client is not None:
            return self._client
        api_key = self._api_key if self._api_key is not None else config.get_api_key()
        if not api_key:
            raise ConfigurationError()
        return get_perplexity_client(api_key, config.PERPLEXITY_API_URL)

    @staticmethod
    def _timeout_for(mode: LookupMode) -> float:
        if mode is LookupMode.MULTI:
            return config.MULTI_TIMEOUT_SECONDS
        return config.SINGLE_TIMEOUT_SECONDS

    def backoff_delay(self, attempt: int) -> float:
        return attempt * self.backoff_seconds

    async def send(self, prompt: PromptMessages) -> Dict[str, Any]:
        client = self._get_client()
        messages = prompt.as_messages()
        timeout = self._timeout_for(prompt.mode)

        for attempt in range(1, self.max_attempts + 1):
            logger.info(
                "[TRANSPORT] Attempt %s/%s model=%s mode=%s",
                attempt,
                self.max_attempts,
                prompt.model,
                prompt.mode.value,
            )
            try:
                return await self._attempt(client, prompt, messages, timeout)
            except _Transient as transient:
                if attempt >= self.max_attempts:
                    logger.error(
                        "[TRANSPORT] Giving up after %s attempts: %s",
                        attempt,
                        transient.final_error,
                    )
                    raise transient.final_error from transient.__cause__
                delay = self.backoff_delay(attempt)
                logger.warning(
                    "[TRANSPORT] Attempt %s failed (%s), retrying in %.1fs",
                    attempt,
                    transient,
                    delay,
                )
                await self._sleep(delay)

        # Unreachable: the loop either returns or raises on the last attempt.
        raise InternalError("Retry loop exited without a result")

    async def _attempt(
        self,
        client: AsyncOpenAI,
        prompt: PromptMessages,
        messages: list,
        timeout: float,
    ) -> Dict[str, Any]:
        try:
            raw = await client.chat.completions.with_raw_response.create(
                model=prompt.model,
                messages=messages,
                max_tokens=prompt.max_tokens,
                temperature=prompt.temperature,
                timeout=timeout,
            )
        except openai.AuthenticationError as e:
            logger.error("[TRANSPORT] Upstream rejected credentials (401)")
            raise AuthError() from e
        except openai.RateLimitError as e:
            logger.warning("[TRANSPORT] Upstream rate limit hit (429)")
            raise RateLimitError() from e
        except openai.InternalServerError as e:
            raise _Transient(ServerError(f"Server error ({e.status_code}). Try again later.")) from e
        except openai.APIStatusError as e:
            logger.error("[TRANSPORT] Upstream returned status %s", e.status_code)
            raise TransportError(status_code=e.status_code) from e
        except openai.APIConnectionError as e:
            raise _Transient(InternalError(f"Network error: {e}")) from e

        try:
            body = raw.http_response.json()
        except ValueError as e:
            raise ParseError("Could not parse API response.") from e

        if not isinstance(body, dict):
            raise ParseError("Could not parse API response.")
        return body
