"""JSON-over-HTTP base client for third-party data providers.

Transient transport failures (timeouts, refused connections) are retried with
exponential backoff. An HTTP error status is reported at once: providers
signal quota exhaustion through the status or the body, and retrying would
only spend more of the quota.
"""

import logging
from typing import Any, Self

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)

RETRYABLE = (httpx.TimeoutException, httpx.ConnectError)


class HTTPClientError(Exception):
    """Provider request failed after retries, or answered with an error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class HTTPClient:
    """Provider client sharing one connection pool per instance.

    Subclasses pass their base URL and call ``get_json`` with a path:

        class QuoteClient(HTTPClient):
            def latest(self, symbol: str) -> dict:
                return self.get_json("/quote", params={"symbol": symbol})

    Use as a context manager (or call ``close``) to release the pool.
    """

    def __init__(self, base_url: str = "", timeout: float = 30.0, user_agent: str = "folio"):
        self.base_url = base_url
        self.timeout = timeout
        self.user_agent = user_agent
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent, "Accept": "application/json"},
            )
        return self._client

    def close(self) -> None:
        if self._client is None:
            return
        self._client.close()
        self._client = None

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @retry(
        retry=retry_if_exception_type(RETRYABLE),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    def _fetch(self, path: str, params: dict | None) -> httpx.Response:
        response = self.client.get(path, params=params)
        response.raise_for_status()
        return response

    def get_json(self, path: str, params: dict | None = None) -> Any:
        """GET ``path`` and decode the JSON body.

        Raises:
            HTTPClientError: Error status, undecodable body, or transport
                failure that outlasted the retries
        """
        try:
            response = self._fetch(path, params)
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.warning(f"{self.base_url}{path} answered {status_code}: {e.response.text[:200]}")
            raise HTTPClientError(
                f"HTTP {status_code}: {e.response.reason_phrase}", status_code
            ) from e
        except RETRYABLE as e:
            logger.warning(f"{self.base_url}{path} unreachable after retries: {e!r}")
            raise HTTPClientError(f"Provider unreachable: {path}") from e

        try:
            return response.json()
        except ValueError as e:
            raise HTTPClientError(f"Invalid JSON from {path}", response.status_code) from e
