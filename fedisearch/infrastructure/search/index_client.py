"""Thin client for an Elasticsearch/OpenSearch-compatible _search API.

All HTTP calls use httpx.AsyncClient so they do not block the event loop.
Every failure (transport error, timeout, error status, unreadable body) is
raised as BackendConnectivityError.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from fedisearch.core.config import Settings
from fedisearch.domain.exceptions import BackendConnectivityError

logger = logging.getLogger(__name__)


class SearchIndexClient:
    """Posts query bodies to {base_url}/{index_name}/_search."""

    def __init__(
        self,
        base_url: str,
        index_name: str,
        timeout_seconds: float,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.index_name = index_name
        self.timeout_seconds = timeout_seconds
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"ApiKey {api_key}"
        self._owns_client = client is None
        self._http = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=httpx.Timeout(timeout_seconds),
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> SearchIndexClient:
        api_key = (
            settings.search_index_api_key.get_secret_value()
            if settings.search_index_api_key
            else None
        )
        return cls(
            base_url=settings.search_index_url,
            index_name=settings.search_index_name,
            timeout_seconds=settings.search_index_timeout_seconds,
            api_key=api_key,
        )

    async def search(self, body: dict[str, Any]) -> list[dict[str, Any]]:
        """Run a search and return the raw hits (hits.hits).

        Raises:
            BackendConnectivityError: The index could not answer the query.
        """
        try:
            resp = await self._http.post(f"/{self.index_name}/_search", json=body)
        except httpx.TimeoutException as e:
            raise BackendConnectivityError(
                f"Search index timed out after {self.timeout_seconds}s"
            ) from e
        except httpx.HTTPError as e:
            raise BackendConnectivityError(f"Search index unreachable: {e}") from e
        if resp.status_code >= 400:
            raise BackendConnectivityError(
                f"Search index returned HTTP {resp.status_code}",
                status_code=resp.status_code,
            )
        try:
            return list(resp.json()["hits"]["hits"])
        except (ValueError, KeyError, TypeError) as e:
            raise BackendConnectivityError(f"Unreadable search index response: {e}") from e

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._http.aclose()
