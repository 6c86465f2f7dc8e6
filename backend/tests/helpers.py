"""Fakes shared by the test modules: upstream pages, a controllable clock."""

from typing import Any

import httpx

from mindshare.services.leaderboard.exceptions import UpstreamFetchError


def make_rows(count: int, start_rank: int = 1, prefix: str = "user", base_ms: float = 1000.0):
    """Upstream-shaped rows with explicit rank and descending mindshare."""
    return [
        {
            "rank": start_rank + i,
            "username": f"{prefix}{start_rank + i}",
            "mindshare": base_ms - (start_rank + i),
        }
        for i in range(count)
    ]


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFetcher:
    """In-memory page source keyed by (timeframe, page).

    Missing pages come back as an empty list. A page mapped to an exception
    instance raises it.
    """

    def __init__(self, pages: dict[tuple[str, int], Any] | None = None):
        self.pages = pages or {}
        self.calls: list[tuple[str, int]] = []

    async def fetch_page(self, timeframe_key: str, page: int) -> Any:
        self.calls.append((timeframe_key, page))
        payload = self.pages.get((timeframe_key, page), [])
        if isinstance(payload, Exception):
            raise payload
        return payload

    def pages_requested(self, timeframe_key: str) -> list[int]:
        return [page for key, page in self.calls if key == timeframe_key]


def upstream_error(status_code: int = 500) -> UpstreamFetchError:
    return UpstreamFetchError(f"Fetch failed {status_code}", status_code=status_code)


def mock_upstream(pages: dict[tuple[str, int], Any], requests: list[httpx.Request] | None = None):
    """httpx.MockTransport serving pages by timeframe/page query params."""

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        key = (request.url.params["timeframe"], int(request.url.params["page"]))
        payload = pages.get(key, {"data": []})
        if isinstance(payload, int):
            return httpx.Response(payload, json={"error": "upstream"})
        return httpx.Response(200, json=payload)

    return httpx.MockTransport(handler)


