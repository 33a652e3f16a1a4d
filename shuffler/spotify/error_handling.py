"""
Retry and error translation for Web API calls.

``api_error_handler`` wraps every ``SpotifyAPI`` method: rate limits, 5xx
responses and network failures are retried with exponential backoff, and
whatever is left is raised as one of the exceptions in ``exceptions.py``.
"""

import logging
import time
from functools import wraps
from typing import Callable, Optional

import spotipy

from requests.exceptions import RequestException

from .exceptions import (
    SpotifyError,
    SpotifyAPIError,
    SpotifyRateLimitError,
    SpotifyNotFoundError,
    SpotifyTokenExpiredError,
)

logger = logging.getLogger(__name__)

# Retry configuration
MAX_RETRIES = 3
BASE_DELAY = 1  # seconds
MAX_DELAY = 16  # seconds
DEFAULT_RETRY_AFTER = 5  # seconds, when a 429 carries no Retry-After header

SERVER_ERROR_STATUSES = (500, 502, 503, 504)


def _calculate_backoff_delay(attempt: int, base_delay: float = BASE_DELAY) -> float:
    """
    Calculate the exponential backoff delay for a retry.

    Args:
        attempt: The current retry attempt (0-indexed).
        base_delay: Base delay in seconds.

    Returns:
        Delay in seconds, capped at MAX_DELAY.
    """
    return min(base_delay * (2**attempt), MAX_DELAY)


def _classify_error(exception: Exception) -> str:
    """
    Classify an exception into an error category.

    Returns one of: 'not_found', 'token_expired',
    'rate_limited', 'server_error', 'network_error',
    'client_error', 'unexpected'.
    """
    if isinstance(exception, spotipy.SpotifyException):
        if exception.http_status == 404:
            return "not_found"
        elif exception.http_status == 401:
            return "token_expired"
        elif exception.http_status == 429:
            return "rate_limited"
        elif exception.http_status in SERVER_ERROR_STATUSES:
            return "server_error"
        return "client_error"
    elif isinstance(exception, RequestException):
        return "network_error"
    return "unexpected"


def _should_retry(error_category: str) -> bool:
    """Determine if an error category is retryable."""
    return error_category in ("rate_limited", "server_error", "network_error")


def _retry_after(exception: Exception) -> Optional[int]:
    """Read the Retry-After header of a 429 response, if any."""
    headers = getattr(exception, "headers", None)
    if not headers:
        return None
    try:
        return int(headers.get("Retry-After"))
    except (TypeError, ValueError):
        return None


def _get_retry_delay(exception: Exception, error_category: str, attempt: int) -> float:
    """
    Calculate retry delay based on error type and attempt.

    Rate limits honour the Retry-After header; everything else backs off
    exponentially.
    """
    if error_category == "rate_limited":
        retry_after = _retry_after(exception) or DEFAULT_RETRY_AFTER
        return max(retry_after, _calculate_backoff_delay(attempt))
    return _calculate_backoff_delay(attempt)


def _raise_final_error(exception: Exception, error_category: str, func_name: str) -> None:
    """
    Raise the matching project exception once retries are exhausted or the
    error is not retryable.
    """
    msg = getattr(exception, "msg", None) or str(exception)
    status = getattr(exception, "http_status", None)

    if error_category == "not_found":
        raise SpotifyNotFoundError(f"Resource not found: {msg}") from exception
    elif error_category == "token_expired":
        raise SpotifyTokenExpiredError(f"Token expired or invalid: {msg}") from exception
    elif error_category == "rate_limited":
        raise SpotifyRateLimitError(
            f"Rate limited after {MAX_RETRIES + 1} attempts: {msg}",
            retry_after=_retry_after(exception),
        ) from exception
    elif error_category == "server_error":
        logger.error(
            "Spotify API error in %s after %d attempts: %s",
            func_name, MAX_RETRIES + 1, exception,
        )
        raise SpotifyAPIError(
            f"API error after retries: {msg}", http_status=status
        ) from exception
    elif error_category == "network_error":
        logger.error(
            "Network error in %s after %d attempts: %s",
            func_name, MAX_RETRIES + 1, exception,
            exc_info=True,
        )
        raise SpotifyAPIError(f"Network error after retries: {exception}") from exception
    elif error_category == "client_error":
        logger.error("Spotify API error in %s: %s", func_name, exception)
        raise SpotifyAPIError(f"API error: {msg}", http_status=status) from exception

    logger.error("Unexpected error in %s: %s", func_name, exception, exc_info=True)
    raise SpotifyAPIError(f"Unexpected error: {exception}") from exception


def api_error_handler(func: Callable) -> Callable:
    """
    Decorator for handling Spotify API errors with automatic retry.

    Catches spotipy and requests exceptions and converts them to our
    exception types. Exceptions that already belong to the Spotify layer
    (for example a failed token refresh) pass through untouched.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        for attempt in range(MAX_RETRIES + 1):
            try:
                return func(*args, **kwargs)
            except SpotifyError:
                raise
            except Exception as e:
                category = _classify_error(e)

                if not _should_retry(category) or attempt >= MAX_RETRIES:
                    _raise_final_error(e, category, func.__name__)

                delay = _get_retry_delay(e, category, attempt)
                logger.warning(
                    "%s in %s, attempt %d/%d. Retrying in %ss",
                    category, func.__name__,
                    attempt + 1, MAX_RETRIES + 1,
                    delay,
                )
                time.sleep(delay)

    return wrapper
