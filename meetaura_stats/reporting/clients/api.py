"""
API Client for the Piwik reporting API
"""

import httpx
from typing import Optional, Dict, Any
import logging

from meetaura_stats.errors import FetchError

logger = logging.getLogger(__name__)


class PiwikClient:
    """
    Client for the Piwik ``module=API`` endpoint.
    Every request carries the site, token, period and date given at construction.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        id_site: int,
        period: str = "day",
        date: str = "today",
        timeout: Optional[float] = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the API client.

        Args:
            base_url: Piwik API entry point, e.g. https://stats.example.com/index.php
            token: token_auth used for every request
            id_site: Piwik site id
            period: Reporting period
            date: Reporting date
            timeout: Request timeout in seconds, None disables it
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url
        self.token = token
        self.id_site = id_site
        self.period = period
        self.date = date
        self.timeout = timeout
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def __aenter__(self):
        """Async context manager entry"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()

    async def close(self):
        """Close the HTTP client"""
        await self._client.aclose()

    def _base_params(self) -> Dict[str, Any]:
        return {
            "module": "API",
            "token_auth": self.token,
            "idSite": self.id_site,
            "format": "JSON",
            "period": self.period,
            "date": self.date,
        }

    def build_params(self, method: str, parameters: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Query parameters for one API call; all of ``parameters`` are kept."""
        params = self._base_params()
        params["method"] = method
        if parameters:
            params.update(parameters)
        return params

    async def call(self, method: str, parameters: Optional[Dict[str, Any]] = None) -> Any:
        """
        Call a reporting API method.

        Args:
            method: Piwik method name, e.g. UserId.getUsers
            parameters: Extra query parameters for the method

        Returns:
            Parsed JSON body

        Raises:
            FetchError: On transport errors, error statuses, non-JSON bodies
                or a Piwik error envelope
        """
        params = self.build_params(method, parameters)
        logger.debug(f"GET {self.base_url} method={method} parameters={parameters or {}}")

        try:
            response = await self._client.get(self.base_url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"{method} returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(f"{method} request failed: {e!r}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise FetchError(f"{method} returned a non-JSON body") from e

        if isinstance(body, dict) and body.get("result") == "error":
            raise FetchError(f"{method}: {body.get('message', 'unknown Piwik error')}")

        return body
