"""
Rate-Limited GitHub Fetcher.

Wraps a single GET against the GitHub REST API with a bounded retry loop that
understands GitHub's rate-limit and "still computing" answers:

- 403 with an ``X-RateLimit-Reset`` less than a minute away: sleep until the
  reset (plus one second) and retry
- 202: GitHub is preparing the result, sleep two seconds and retry
- 404 and every other failure status end the request immediately

Retries are driven by tenacity; the sleep and clock functions are injectable
so the loop can be exercised without waiting.
"""

import asyncio
import time
from typing import Awaitable, Callable, Dict, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
)

from config import logger
from miners.errors import (
    RateLimitExceeded,
    RemoteAPIError,
    RepositoryNotFound,
    RetriesExhausted,
)


class RetryableResponse(Exception):
    """Raised inside an attempt when GitHub asked us to come back later."""

    def __init__(self, status: int, delay: float):
        self.status = status
        self.delay = delay
        super().__init__(f"HTTP {status}, retrying in {delay:.1f}s")


def _wait_for_retry(retry_state: RetryCallState) -> float:
    """Use the delay GitHub asked for instead of a fixed backoff curve."""
    exception = retry_state.outcome.exception()
    if isinstance(exception, RetryableResponse):
        return exception.delay
    return 0


class RateLimitedFetcher:
    """
    Issue GitHub API requests with rate-limit aware retries.

    Attributes:
        client (httpx.AsyncClient): Shared HTTP client
        max_attempts (int): Attempts per request, including the first one
    """

    MAX_RESET_WAIT_SECONDS = 60
    RESET_GRACE_SECONDS = 1
    COMPUTING_WAIT_SECONDS = 2

    def __init__(
        self,
        client: httpx.AsyncClient,
        max_attempts: int = 3,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the fetcher.

        Args:
            client (httpx.AsyncClient): HTTP client used for every attempt
            max_attempts (int): Retry budget per request
            sleep (Callable): Coroutine function used to wait between attempts
            clock (Callable): Returns the current Unix time in seconds
        """
        self.client = client
        self.max_attempts = max_attempts
        self._sleep = sleep
        self._clock = clock

    def _check_response(self, url: str, response: httpx.Response) -> None:
        """Raise the error matching a non-success response, or RetryableResponse."""
        status = response.status_code

        if status == 403:
            reset_header = response.headers.get("X-RateLimit-Reset")
            reset_at = None
            if reset_header:
                try:
                    reset_at = int(float(reset_header))
                except ValueError:
                    reset_at = None
            if reset_at is not None:
                wait_time = reset_at - self._clock()
                if 0 < wait_time < self.MAX_RESET_WAIT_SECONDS:
                    raise RetryableResponse(
                        status, wait_time + self.RESET_GRACE_SECONDS
                    )
            logger.critical(
                {
                    "message": "GitHub API rate limit exhausted",
                    "url": url,
                    "reset_time": reset_at,
                }
            )
            raise RateLimitExceeded(reset_at)

        if status == 202:
            raise RetryableResponse(status, self.COMPUTING_WAIT_SECONDS)

        if status == 404:
            raise RepositoryNotFound(url)

        if not response.is_success:
            raise RemoteAPIError(status)

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exception = retry_state.outcome.exception()
        logger.warning(
            {
                "message": "GitHub request deferred, retrying",
                "attempt": retry_state.attempt_number,
                "status": getattr(exception, "status", None),
                "wait_seconds": round(getattr(exception, "delay", 0), 1),
            }
        )

    async def fetch(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        """
        GET ``url`` until it succeeds or the retry budget is spent.

        Args:
            url (str): Absolute API URL
            headers (Optional[Dict[str, str]]): Request headers
            params (Optional[Dict[str, str]]): Query parameters

        Returns:
            httpx.Response: The first successful response

        Raises:
            RateLimitExceeded: 403 without a usable reset hint
            RepositoryNotFound: 404
            RemoteAPIError: Any other failure status or a transport error
            RetriesExhausted: Every attempt was deferred by GitHub
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=_wait_for_retry,
            retry=retry_if_exception_type(RetryableResponse),
            before_sleep=self._log_retry,
            sleep=self._sleep,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    try:
                        response = await self.client.get(
                            url, headers=headers, params=params
                        )
                    except httpx.TransportError as e:
                        raise RemoteAPIError(None, str(e)) from e
                    self._check_response(url, response)
        except RetryError as e:
            logger.error(
                {
                    "message": "GitHub request retries exhausted",
                    "url": url,
                    "attempts": self.max_attempts,
                }
            )
            raise RetriesExhausted(url, self.max_attempts) from e

        return response
