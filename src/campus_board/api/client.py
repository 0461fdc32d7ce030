"""
HTTP client for the campus community API.

This module provides an async client for the campus API endpoints, including
error handling, retry logic and unwrapping of the ``{success, data, error}``
response envelope.
"""

import asyncio
from typing import Any, Dict, Optional
from urllib.parse import urljoin

import httpx
from loguru import logger

from ..config import get_settings


class APIError(Exception):
    """Custom exception for API errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ResponseFormatError(APIError):
    """The server accepted a request but its reply could not be read."""


def _error_message(response: httpx.Response) -> str:
    """Prefer the server's ``error`` field over the raw body."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP {response.status_code}: {response.text}"


class CampusAPIClient:
    """
    Async HTTP client for the campus community API.

    Transport errors, 429 and 5xx responses are retried with exponential
    backoff. Other client errors fail immediately. Every failure is raised as
    ``APIError``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_delay: Optional[float] = None,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: Base URL for the campus API
            timeout: Request timeout in seconds
            max_retries: Retry attempts after the first failed request
            retry_delay: Initial backoff in seconds
            token: Optional bearer token
            transport: Optional httpx transport, mainly for tests
        """
        settings = get_settings()
        self.base_url = base_url or settings.api_base_url
        self.timeout = timeout or settings.api_timeout
        self.max_retries = settings.api_max_retries if max_retries is None else max_retries
        self.retry_delay = settings.api_retry_delay if retry_delay is None else retry_delay
        token = token or settings.api_token

        # Ensure base URL ends with /
        if not self.base_url.endswith('/'):
            self.base_url += '/'

        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self.client = httpx.AsyncClient(
            headers=headers,
            timeout=httpx.Timeout(self.timeout),
            transport=transport,
        )

        logger.info(f"Initialized CampusAPIClient with base_url: {self.base_url}")

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Make an HTTP request with retry logic and return the envelope payload.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path relative to the base URL
            params: Query parameters
            json_data: JSON request body

        Returns:
            The ``data`` member of the response envelope, or the whole body
            when the server does not wrap its responses

        Raises:
            APIError: If the request fails after all retries
        """
        url = urljoin(self.base_url, endpoint)
        backoff = self.retry_delay

        for attempt in range(self.max_retries + 1):
            retries_left = attempt < self.max_retries
            try:
                logger.debug(f"Making {method} request to {url} (attempt {attempt + 1})")
                response = await self.client.request(method, url, params=params, json=json_data)
            except httpx.HTTPError as e:
                if retries_left:
                    logger.warning(f"Request failed, retrying in {backoff:.2f}s: {str(e)}")
                    await asyncio.sleep(backoff)
                    backoff *= 2
                    continue
                raise APIError(f"Request failed after {self.max_retries} retries: {str(e)}")

            if 200 <= response.status_code < 300:
                logger.debug(f"Request successful: {method} {url}")
                return self._unwrap(response)

            if response.status_code == 429 or response.status_code >= 500:
                if retries_left:
                    logger.warning(
                        f"Server answered {response.status_code}, retrying in {backoff:.2f}s "
                        f"({attempt + 1}/{self.max_retries})"
                    )
                    await asyncio.sleep(backoff)
                    backoff *= 2
                    continue

            raise APIError(_error_message(response), response.status_code)

        raise APIError(f"Request failed after {self.max_retries} retries")

    @staticmethod
    def _unwrap(response: httpx.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return None

        try:
            body = response.json()
        except ValueError as e:
            raise ResponseFormatError(f"Failed to parse response: {str(e)}", response.status_code)

        if isinstance(body, dict) and "success" in body:
            if not body["success"]:
                raise APIError(str(body.get("error") or "Request was not successful"), response.status_code)
            return body.get("data")
        return body

    async def health_check(self) -> Dict[str, Any]:
        """
        Check API health status.

        Returns:
            Dict[str, Any]: Health status information

        Raises:
            APIError: If request fails
        """
        try:
            data = await self.request("GET", "health")
        except APIError as e:
            raise APIError(f"Health check failed: {e.message}", e.status_code)
        return data if isinstance(data, dict) else {"status": data}
