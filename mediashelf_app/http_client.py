"""
================================================================================
MediaShelf - Resilient HTTP Client
================================================================================
Async request executor shared by every catalog provider.

Features:
  - Per-attempt timeout (cancels the in-flight call)
  - Retry on transient statuses (429, 5xx) and network errors
  - Exponential or linear backoff
  - One shared connection pool per http_session() block
  - Non-retryable error responses are handed back untouched so callers
    can branch on specific client errors

Usage:
    executor = RequestExecutor()
    data = await executor.execute_json(
        "https://api.example.com/search",
        params={"q": "dune"},
        policy=RetryPolicy(max_retries=3, exponential_backoff=False)
    )
================================================================================
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, replace
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, FrozenSet, Optional

import httpx

logger = logging.getLogger(__name__)


DEFAULT_RETRYABLE_STATUSES = frozenset({429, 500, 502, 503, 504})

# Client shared by every request issued inside an http_session() block
_session_client: ContextVar[Optional[httpx.AsyncClient]] = ContextVar('http_session_client', default=None)


@asynccontextmanager
async def http_session() -> AsyncIterator[httpx.AsyncClient]:
    """
    Share one AsyncClient (one connection pool) across all requests made
    by the current task and the tasks it spawns.

    Nested blocks reuse the outer client.

    Usage:
        async with http_session():
            await asyncio.gather(*page_requests)
    """
    current = _session_client.get()
    if current is not None:
        yield current
        return

    async with httpx.AsyncClient() as client:
        token = _session_client.set(client)
        try:
            yield client
        finally:
            _session_client.reset(token)


class RequestError(Exception):
    """Final response was not a success (or its body was not JSON)."""

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"HTTP {status}: {body}")


class RetriesExhaustedError(Exception):
    """Every attempt ended with a retryable status."""

    def __init__(self, attempts: int, status: int):
        self.attempts = attempts
        self.status = status
        super().__init__(f"Request failed after {attempts} attempts. Status: {status}")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Retry configuration for one call site.

    Delays are in seconds:
      - exponential: 2 ** attempt * base_delay
      - linear:      base_delay * attempt
    """
    max_retries: int = 3
    base_delay: float = 1.0
    timeout: float = 10.0
    retryable_statuses: FrozenSet[int] = field(default=DEFAULT_RETRYABLE_STATUSES)
    exponential_backoff: bool = True

    def delay_for(self, attempt: int) -> float:
        if self.exponential_backoff:
            return (2 ** attempt) * self.base_delay
        return self.base_delay * attempt

    def is_retryable(self, status: int) -> bool:
        return status in self.retryable_statuses


DEFAULT_POLICY = RetryPolicy()


class RequestExecutor:
    """
    Executes HTTP requests with timeout, retry and backoff.

    Knows nothing about providers. Requests go through, in order: the
    injected client, the client of the enclosing http_session(), or a
    short-lived client opened for the call. The executor itself holds no
    loop-bound state, so it can be driven from any event loop.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        default_policy: RetryPolicy = DEFAULT_POLICY,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self._client = client
        self.default_policy = default_policy
        self._sleep = sleep

    async def close(self):
        """Close the injected HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def execute(
        self,
        url: str,
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        policy: Optional[RetryPolicy] = None
    ) -> httpx.Response:
        """
        Execute a request with retry logic.

        Args:
            url: Full URL
            method: HTTP method
            params: Query string parameters
            headers: Extra request headers
            timeout: Per-attempt timeout override (seconds)
            policy: Retry policy (executor default if None)

        Returns:
            The first 2xx response, or the first non-retryable error response

        Raises:
            RetriesExhaustedError: Final attempt returned a retryable status
            httpx.RequestError / asyncio.TimeoutError: Final attempt failed
                at the network level (re-raised as is)
        """
        policy = policy or self.default_policy
        if timeout is not None:
            policy = replace(policy, timeout=timeout)

        attempt = 1
        while attempt <= policy.max_retries:
            try:
                response = await asyncio.wait_for(
                    self._send(method, url, params, headers, policy.timeout),
                    timeout=policy.timeout
                )
            except (httpx.RequestError, asyncio.TimeoutError) as e:
                if isinstance(e, asyncio.TimeoutError):
                    logger.error(f"Request timeout on attempt {attempt}/{policy.max_retries}")
                else:
                    logger.error(
                        f"Network error on attempt {attempt}/{policy.max_retries}: {e}"
                    )

                if attempt >= policy.max_retries:
                    raise

                delay = policy.delay_for(attempt)
                logger.warning(f"Retrying in {delay:.2f}s...")
                await self._sleep(delay)
                attempt += 1
                continue

            if response.is_success:
                if attempt > 1:
                    logger.info(f"Request succeeded on attempt {attempt}")
                return response

            if not policy.is_retryable(response.status_code):
                return response

            if attempt >= policy.max_retries:
                raise RetriesExhaustedError(attempt, response.status_code)

            delay = policy.delay_for(attempt)
            logger.warning(
                f"Request failed with status {response.status_code}, retrying in "
                f"{delay:.2f}s... (attempt {attempt}/{policy.max_retries})"
            )
            await self._sleep(delay)
            attempt += 1

        # max_retries < 1
        raise ValueError(f"Invalid retry policy: max_retries={policy.max_retries}")

    async def execute_json(
        self,
        url: str,
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        policy: Optional[RetryPolicy] = None
    ) -> Any:
        """
        Execute a request and parse the JSON body.

        Raises:
            RequestError: Final response was not 2xx, or the body is not JSON
        """
        merged_headers = {'Accept': 'application/json'}
        if headers:
            merged_headers.update(headers)

        response = await self.execute(
            url,
            method=method,
            params=params,
            headers=merged_headers,
            timeout=timeout,
            policy=policy
        )

        if not response.is_success:
            raise RequestError(response.status_code, response.text or 'Unknown error')

        try:
            return response.json()
        except ValueError:
            raise RequestError(response.status_code, response.text[:200])

    async def _send(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]],
        headers: Optional[Dict[str, str]],
        timeout: float
    ) -> httpx.Response:
        # httpx applies its own 5s default unless told otherwise
        client = self._client or _session_client.get()
        if client is not None:
            return await client.request(method, url, params=params, headers=headers, timeout=timeout)

        async with httpx.AsyncClient(timeout=timeout) as client:
            return await client.request(method, url, params=params, headers=headers, timeout=timeout)

    def __repr__(self):
        return f"<RequestExecutor(policy={self.default_policy})>"
