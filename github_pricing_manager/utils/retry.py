"""Retry decorator for GitHub API rate limits.

Every adapter call that fans out across an organization goes through this
decorator, so a long propagation run waits out rate limits instead of
failing the remaining repositories.
"""

import asyncio
import functools
import inspect
import time
from typing import Any, Callable, TypeVar

import structlog
from githubkit.exception import PrimaryRateLimitExceeded, RequestFailed, SecondaryRateLimitExceeded

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _wait_time_from_headers(headers: Any, fallback: float) -> float:
    """Derive the wait time from retry-after or x-ratelimit-reset headers."""
    retry_after = headers.get("retry-after")
    if retry_after:
        try:
            return float(retry_after)
        except ValueError:
            logger.warning("Invalid retry-after header value", retry_after=retry_after)
            return fallback

    rate_limit_reset = headers.get("x-ratelimit-reset")
    if rate_limit_reset:
        try:
            remaining = int(rate_limit_reset) - int(time.time())
        except ValueError:
            logger.warning("Invalid x-ratelimit-reset header value", rate_limit_reset=rate_limit_reset)
            return fallback
        if remaining > 0:
            return float(remaining + 1)
    return fallback


def _is_rate_limited(exc: RequestFailed) -> bool:
    status_code = exc.response.status_code
    if status_code == 429:
        return True
    # A plain 403 is a permission error unless GitHub reports an exhausted quota
    headers = exc.response.headers
    return status_code == 403 and (headers.get("x-ratelimit-remaining") == "0" or bool(headers.get("retry-after")))


def retry_on_rate_limit(
    max_retries: int = 10,
    initial_delay: float = 10.0,
    max_delay: float = 300.0,
    exponential_base: float = 2.0,
) -> Callable[[F], F]:
    """Retry an async GitHub call while it is being rate limited.

    Handles githubkit's primary and secondary rate limit exceptions, 429
    responses, and 403 responses that report an exhausted quota. The wait
    honours retry-after and x-ratelimit-reset, falling back to exponential
    backoff, and is capped at ``max_delay``. Any other error propagates
    immediately.

    Args:
        max_retries: Maximum number of retry attempts.
        initial_delay: Initial backoff delay in seconds.
        max_delay: Upper bound of any single wait in seconds.
        exponential_base: Backoff growth factor between attempts.

    Example:
        @retry_on_rate_limit()
        async def list_labels(self) -> list[Label]:
            ...
    """

    def decorator(func: F) -> F:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"Function {func.__name__} decorated with @retry_on_rate_limit must be async.")

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = initial_delay
            for attempt in range(max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except (PrimaryRateLimitExceeded, SecondaryRateLimitExceeded) as e:
                    if attempt == max_retries:
                        logger.error("Max retries reached for GitHub rate limit error", function=func.__name__, attempt=attempt + 1)
                        raise
                    retry_after = getattr(e, "retry_after", None)
                    wait_time = retry_after.total_seconds() if retry_after else delay
                    rate_limit_type = "primary" if isinstance(e, PrimaryRateLimitExceeded) else "secondary"
                except RequestFailed as e:
                    if not _is_rate_limited(e):
                        raise
                    if attempt == max_retries:
                        logger.error(
                            "Max retries reached for rate limit error",
                            function=func.__name__,
                            attempt=attempt + 1,
                            status_code=e.response.status_code,
                        )
                        raise
                    wait_time = _wait_time_from_headers(e.response.headers, delay)
                    rate_limit_type = "response"

                wait_time = min(wait_time, max_delay)
                logger.warning(
                    "GitHub rate limit hit, retrying",
                    function=func.__name__,
                    rate_limit_type=rate_limit_type,
                    attempt=attempt + 1,
                    max_retries=max_retries,
                    wait_time=wait_time,
                )
                await asyncio.sleep(wait_time)
                delay = min(delay * exponential_base, max_delay)

        return wrapper  # type: ignore

    return decorator
