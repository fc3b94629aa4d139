from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from src.app.domain.errors import RemoteFetchFailure

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_BASE_URL = "https://www.themealdb.com/api/json/v1/1"
DEFAULT_TIMEOUT_SECONDS = 10.0
SEARCH_PATH = "/search.php"


class CatalogClient:
    """
    Read-only client for the remote recipe catalog (TheMealDB JSON API).

    The underlying ``httpx.AsyncClient`` can be injected, which is how tests
    plug in an ``httpx.MockTransport``.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_CATALOG_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._http = http_client
        self._owns_client = http_client is None

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self.timeout_seconds)
        return self._http

    async def fetch_recipes(self, query: str = "") -> list[dict[str, Any]]:
        """
        Search the catalog by meal name; an empty query lists everything.

        Returns:
            Raw remote-schema records, ``[]`` when nothing matches

        Raises:
            RemoteFetchFailure: network error, non-2xx status or bad payload
        """
        url = f"{self.base_url}{SEARCH_PATH}"
        try:
            response = await self._client().get(url, params={"s": query})
        except httpx.TimeoutException as exc:
            raise RemoteFetchFailure(url, f"timeout after {self.timeout_seconds}s") from exc
        except httpx.HTTPError as exc:
            raise RemoteFetchFailure(url, str(exc) or exc.__class__.__name__) from exc

        if not response.is_success:
            raise RemoteFetchFailure(
                url,
                f"HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise RemoteFetchFailure(url, "response is not JSON") from exc

        if not isinstance(payload, dict):
            raise RemoteFetchFailure(url, "unexpected payload shape")

        meals = payload.get("meals") or []
        if not isinstance(meals, list):
            raise RemoteFetchFailure(url, "'meals' is not a list")

        logger.info("Catalog returned %d meals for query=%r", len(meals), query)
        return meals

    async def aclose(self) -> None:
        if self._http is not None and self._owns_client:
            await self._http.aclose()
            self._http = None
