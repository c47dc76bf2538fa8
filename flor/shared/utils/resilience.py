# 📄 File: flor/shared/utils/resilience.py

# 🧭 Purpose (Layman Explanation):
# Helps Flor cope with slow or flaky AI services: it gives up on calls that take too long,
# tries again after short pauses, and turns technical errors into friendly messages.

# 🧪 Purpose (Technical Summary):
# Error taxonomy (ErrorType / ErrorInfo / TypedError), error classification, a cancelling
# timeout wrapper around asyncio.wait_for and an exponential-backoff retry helper built on
# tenacity's AsyncRetrying.

# 🔗 Dependencies:
# - tenacity: Retry loop and backoff strategy
# - aiohttp: Connection error types for classification
# - flor.shared.core.exceptions: Typed application errors

# 🔄 Connected Modules / Calls From:
# Used by: flor.modules.ai_assistant.domain.ai_plant_service (identification and
# care generation calls), API error responses for AI endpoints

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, TypeVar

import aiohttp
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from flor.shared.core.exceptions import APITimeoutError, ExternalAPIError, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorType(str, Enum):
    """Categories used to decide retry behaviour and user-facing text."""
    NETWORK = "network"
    TIMEOUT = "timeout"
    INVALID_FILE = "invalid_file"
    API_ERROR = "api_error"
    VALIDATION = "validation"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


_RETRYABLE = {
    ErrorType.NETWORK: True,
    ErrorType.TIMEOUT: True,
    ErrorType.INVALID_FILE: False,
    ErrorType.API_ERROR: True,
    ErrorType.VALIDATION: False,
    ErrorType.CANCELLED: False,
    ErrorType.UNKNOWN: True,
}

_FIXED_USER_MESSAGES = {
    ErrorType.NETWORK: "Network connection failed. Please check your internet and try again.",
    ErrorType.TIMEOUT: "The request took too long. Please try again.",
    ErrorType.CANCELLED: "Operation cancelled.",
    ErrorType.UNKNOWN: "An unexpected error occurred. Please try again.",
}


class TypedError(Exception):
    """Exception that carries its own ErrorType."""

    def __init__(self, message: str, error_type: ErrorType = ErrorType.UNKNOWN):
        super().__init__(message)
        self.message = message
        self.type = error_type


@dataclass(frozen=True)
class ErrorInfo:
    type: ErrorType
    message: str
    can_retry: bool
    user_message: str


def _info(error_type: ErrorType, message: str) -> ErrorInfo:
    return ErrorInfo(
        type=error_type,
        message=message,
        can_retry=_RETRYABLE[error_type],
        user_message=_FIXED_USER_MESSAGES.get(error_type, message),
    )


def _message_of(error: BaseException) -> str:
    message = getattr(error, "message", None)
    if isinstance(message, str):
        return message
    return str(error)


def _classify_by_type(error: BaseException) -> Optional[ErrorType]:
    if isinstance(error, TypedError):
        return error.type
    if isinstance(error, ValidationError):
        return ErrorType.VALIDATION
    if isinstance(error, (APITimeoutError, asyncio.TimeoutError)):
        return ErrorType.TIMEOUT
    if isinstance(error, ExternalAPIError):
        return ErrorType.API_ERROR
    if isinstance(error, aiohttp.ClientConnectionError):
        return ErrorType.NETWORK
    if isinstance(error, asyncio.CancelledError):
        return ErrorType.CANCELLED
    return None


def _classify_by_message(message: str) -> ErrorType:
    text = message.lower()
    # Order matters: the first matching rule wins
    if "network" in text or "fetch" in text:
        return ErrorType.NETWORK
    if "timeout" in text or "took too long" in text:
        return ErrorType.TIMEOUT
    if "file" in text or "invalid" in text:
        return ErrorType.INVALID_FILE
    if "api" in text or "server" in text:
        return ErrorType.API_ERROR
    if "cancel" in text:
        return ErrorType.CANCELLED
    return ErrorType.UNKNOWN


def parse_error(error: BaseException) -> ErrorInfo:
    """
    Classify an error into an ErrorInfo.

    Typed exceptions are classified by type. Anything else falls back to
    keyword matching on the lower-cased message.
    """
    message = _message_of(error)
    error_type = _classify_by_type(error)
    if error_type is None:
        error_type = _classify_by_message(message)
    return _info(error_type, message)


def is_retryable(error: BaseException) -> bool:
    return parse_error(error).can_retry


def is_network_error(error: BaseException) -> bool:
    """Network and timeout failures both count as connectivity problems."""
    return parse_error(error).type in (ErrorType.NETWORK, ErrorType.TIMEOUT)


async def with_timeout(
    awaitable: Awaitable[T],
    timeout_seconds: float,
    message: str = "Request took too long",
) -> T:
    """
    Await ``awaitable`` for at most ``timeout_seconds``.

    The wrapped task is cancelled when the deadline passes and a
    TypedError of type TIMEOUT is raised instead.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_seconds)
    except asyncio.TimeoutError:
        logger.warning(f"Operation exceeded {timeout_seconds}s timeout: {message}")
        raise TypedError(message, ErrorType.TIMEOUT) from None


async def with_retry(
    fn: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 10.0,
    backoff_multiplier: float = 2.0,
    sleep: Optional[Callable[[float], Awaitable[None]]] = None,
) -> T:
    """
    Call ``fn`` until it succeeds, retrying retryable failures.

    Makes at most ``max_retries + 1`` attempts. The pause before retry n is
    ``min(initial_delay * backoff_multiplier ** (n - 1), max_delay)`` seconds.
    Non-retryable errors propagate immediately; after the last attempt the
    last error propagates unchanged.
    ``sleep`` replaces asyncio.sleep for the pauses.
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_retries + 1),
        wait=wait_exponential(multiplier=initial_delay, exp_base=backoff_multiplier, max=max_delay),
        retry=retry_if_exception(is_retryable),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
        sleep=sleep or asyncio.sleep,
    )
    async for attempt in retrying:
        with attempt:
            result = await fn()
    return result
