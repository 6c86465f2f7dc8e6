from __future__ import annotations

import logging
from typing import Any

import httpx

from .config import LeaderboardAPIConfig
from .exceptions import UpstreamFetchError

logger = logging.getLogger(__name__)

ENVELOPE_KEYS = ("data", "items")


def extract_array(payload: Any) -> list[Any]:
    """Pull the list of records out of whatever envelope the upstream returned.

    Checked in order: a bare list, ``data``, ``items``, then the first
    list-valued top-level field. Anything else yields an empty list.
    """
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return []

    for key in ENVELOPE_KEYS:
        if isinstance(payload.get(key), list):
            return payload[key]

    for value in payload.values():
        if isinstance(value, list):
            return value
    return []


class LeaderboardClient:
    def __init__(
        self,
        config: LeaderboardAPIConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or LeaderboardAPIConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        logger.info(f"Initialized LeaderboardClient (base_url={self.config.base_url})")

    async def __aenter__(self) -> LeaderboardClient:
        limits = httpx.Limits(
            max_connections=self.config.max_connections,
            max_keepalive_connections=self.config.max_keepalive_connections,
        )
        self._client = httpx.AsyncClient(
            timeout=self.config.timeout_seconds,
            limits=limits,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type | None,
        exc_val: Exception | None,
        exc_tb: Any,
    ) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("Closed LeaderboardClient")

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError(
                "LeaderboardClient must be used as async context manager"
            )
        return self._client

    def page_params(self, timeframe_key: str, page: int) -> dict[str, Any]:
        return {
            "timeframe": timeframe_key,
            "sortBy": self.config.sort_by,
            "page": page,
        }

    async def fetch_page(self, timeframe_key: str, page: int) -> Any:
        """Fetch one raw leaderboard page.

        Raises:
            UpstreamFetchError: transport failure, non-2xx status or a body
                that is not JSON.
        """
        url = self.config.base_url
        params = self.page_params(timeframe_key, page)

        try:
            response = await self.client.get(url, params=params)
        except httpx.RequestError as e:
            raise UpstreamFetchError(
                f"Fetch failed for {timeframe_key} page {page}: {e!r}", url=url
            ) from e

        if not response.is_success:
            raise UpstreamFetchError(
                f"Fetch failed {response.status_code} {response.url}",
                status_code=response.status_code,
                url=str(response.url),
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamFetchError(
                f"Invalid JSON from {response.url}: {e}",
                status_code=response.status_code,
                url=str(response.url),
            ) from e
