"""Base HTTP client for the Search Console API."""

import asyncio

import httpx
from loguru import logger
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from settings import API_BASE_URL, API_TIMEOUT

# 429 is the per-site quota; it clears after a short backoff
RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


def _is_retryable_error(exc: BaseException) -> bool:
    """Network errors, quota rejections and 5xx responses."""
    if isinstance(exc, (httpx.ReadError, httpx.ConnectError, httpx.TimeoutException)):
        return True
    return isinstance(exc, httpx.HTTPStatusError) and exc.response.status_code in RETRYABLE_STATUS


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    logger.warning("Search Console request failed (attempt {}): {!r}", state.attempt_number, exc)


class BaseClient:
    """Authenticated async client with bounded concurrency and exponential backoff.

    Use as an async context manager; the underlying connection pool lives only
    inside the `async with` block.
    """

    def __init__(
        self,
        access_token: str,
        max_concurrent: int = 8,
        transport: httpx.AsyncBaseTransport | None = None,
        base_url: str = API_BASE_URL,
        timeout: float = API_TIMEOUT,
    ):
        self._client: httpx.AsyncClient | None = None
        self._token = access_token
        self._transport = transport
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._sem = asyncio.Semaphore(max_concurrent)
        self._request_count = 0
        logger.info("{}: max_concurrent={}", self.__class__.__name__, max_concurrent)

    @property
    def request_count(self) -> int:
        return self._request_count

    async def __aenter__(self):
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            headers={"Authorization": f"Bearer {self._token}"},
            limits=httpx.Limits(max_connections=50, max_keepalive_connections=10),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *_):
        logger.info("Search Console requests made: {}", self._request_count)
        if self._client:
            await self._client.aclose()
            self._client = None

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=30),
        retry=retry_if_exception(_is_retryable_error),
        before_sleep=_log_retry,
        reraise=True,
    )
    async def _post(self, path: str, body: dict) -> dict:
        """POST a JSON body and return the decoded response."""
        if self._client is None:
            raise RuntimeError(f"{self.__class__.__name__} used outside 'async with'")
        async with self._sem:
            self._request_count += 1
            resp = await self._client.post(f"/{path}", json=body)
            resp.raise_for_status()
            return resp.json()
