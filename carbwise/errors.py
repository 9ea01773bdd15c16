"""Error taxonomy surfaced by the carb lookup pipeline."""

from typing import Optional


class CarbLookupError(Exception):
    """
    Base class for every failure the lookup pipeline reports.

    Attributes:
        code: stable, callable-style error code (e.g. "resource-exhausted")
        http_status: status the web layer answers with
        user_message: short human message for UI / voice callers
    """

    code = "internal"
    http_status = 500
    user_message = "Something went wrong. Try again."
    retryable = False

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.user_message)

    def to_dict(self) -> dict:
        return {"error": self.code, "message": str(self)}


class InvalidArgument(CarbLookupError):
    code = "invalid-argument"
    http_status = 400
    user_message = "input must be 2-100 characters"


class ConfigurationError(CarbLookupError):
    code = "failed-precondition"
    http_status = 503
    user_message = "API key not configured."


class AuthError(CarbLookupError):
    code = "unauthenticated"
    http_status = 502
    user_message = "Invalid API key."


class RateLimitError(CarbLookupError):
    code = "resource-exhausted"
    http_status = 429
    user_message = "Rate limit exceeded. Try again shortly."
    retryable = True


class ServerError(CarbLookupError):
    code = "unavailable"
    http_status = 503
    user_message = "Server error. Try again later."
    retryable = True


class TransportError(CarbLookupError):
    code = "internal"
    http_status = 502
    user_message = "API request failed."

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        if message is None and status_code is not None:
            message = f"API request failed ({status_code})"
        super().__init__(message)
        self.status_code = status_code


class InternalError(TransportError):
    """Network failure (timeout, reset) on the final attempt, or the overall budget ran out."""

    code = "internal"
    http_status = 504
    user_message = "Could not reach the nutrition service. Try again later."
    retryable = True


class ParseError(CarbLookupError):
    code = "internal"
    http_status = 502
    user_message = "Could not parse food data."
