"""Shared async HTTP client with retry logic for JSON APIs."""

import asyncio
from typing import Any

import httpx
import structlog

from weatherism.config import Settings, get_settings

logger = structlog.get_logger(__name__)


class ApiRequestError(Exception):
    """A JSON API call failed.

    ``error_type`` is one of: not_found, client_error, rate_limited,
    server_error, timeout, network, invalid_response.
    """

    def __init__(self, error_type: str, detail: str = "", status_code: int | None = None):
        super().__init__(f"{error_type}: {detail}" if detail else error_type)
        self.error_type = error_type
        self.detail = detail
        self.status_code = status_code


class JsonApiClient:
    """Lazily created ``httpx.AsyncClient`` with retry on 429, 5xx and timeouts."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.settings.http_timeout_seconds),
                headers={
                    "User-Agent": self.settings.user_agent,
                    "Accept": "application/json",
                },
            )
            logger.debug(
                "http_client_created",
                timeout_seconds=self.settings.http_timeout_seconds,
                user_agent=self.settings.user_agent,
            )
        return self._client

    async def close(self):
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def get_json(self, url: str, params: dict[str, Any]) -> Any:
        """GET a JSON document with retry logic.

        Args:
            url: Absolute endpoint URL
            params: Query parameters

        Returns:
            Decoded JSON body

        Raises:
            ApiRequestError: when the request ultimately fails
        """
        max_retries = max(1, self.settings.http_max_retries)
        client = await self._get_client()
        last_error: ApiRequestError | None = None

        for attempt in range(max_retries):
            try:
                response = await client.get(url, params=params)
            except httpx.TimeoutException as e:
                last_error = ApiRequestError("timeout", str(e))
                wait_time = 2 ** attempt
                logger.warning(
                    "api_timeout",
                    url=url,
                    attempt=attempt,
                    wait_seconds=wait_time,
                )
                if attempt < max_retries - 1:
                    await asyncio.sleep(wait_time)
                continue
            except httpx.HTTPError as e:
                logger.error(
                    "api_network_error",
                    url=url,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise ApiRequestError("network", str(e)) from e

            if response.status_code == 404:
                logger.debug("api_not_found", url=url)
                raise ApiRequestError("not_found", status_code=404)

            if response.status_code == 429 or response.status_code >= 500:
                error_type = "rate_limited" if response.status_code == 429 else "server_error"
                last_error = ApiRequestError(error_type, status_code=response.status_code)
                wait_time = 2 ** attempt
                logger.warning(
                    "api_retryable_status",
                    url=url,
                    status_code=response.status_code,
                    attempt=attempt,
                    wait_seconds=wait_time,
                )
                if attempt < max_retries - 1:
                    await asyncio.sleep(wait_time)
                continue

            # Don't retry on other client errors (4xx)
            if response.status_code >= 400:
                logger.error("api_client_error", url=url, status_code=response.status_code)
                raise ApiRequestError(
                    "client_error", response.text[:200], status_code=response.status_code
                )

            try:
                return response.json()
            except ValueError as e:
                logger.error("api_invalid_json", url=url, error=str(e))
                raise ApiRequestError("invalid_response", str(e)) from e

        logger.error(
            "api_failed_after_retries",
            url=url,
            max_retries=max_retries,
            last_error=str(last_error) if last_error else None,
        )
        raise last_error or ApiRequestError("server_error")
