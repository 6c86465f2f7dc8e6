"""Per-timeframe pagination over the upstream leaderboard."""

import logging
from typing import Any, Literal, Protocol

import logfire
from pydantic import BaseModel

from mindshare.normalizer import DEFAULT_PAGE_SIZE_HINT, EntryNormalizer, NormalizationStats
from mindshare.services.leaderboard.client import extract_array
from mindshare.services.leaderboard.exceptions import UpstreamFetchError
from mindshare.services.leaderboard.models import LeaderboardEntry
from mindshare.storage.cache import SnapshotCache

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGES = 20

StopReason = Literal["empty_page", "fetch_error", "max_pages"]


class PageFetcher(Protocol):
    async def fetch_page(self, timeframe_key: str, page: int) -> Any: ...


class PaginationReport(BaseModel):
    """What one pagination walk saw, for data-quality logging."""

    timeframe_key: str
    pages_fetched: int = 0
    records_seen: int = 0
    entries_kept: int = 0
    dropped_records: int = 0
    heuristic_matches: int = 0
    synthetic_ranks: int = 0
    stop_reason: StopReason = "max_pages"
    truncated_at_page: int | None = None


class TimeframeAggregator:
    def __init__(
        self,
        fetcher: PageFetcher,
        cache: SnapshotCache,
        normalizer: EntryNormalizer | None = None,
        max_pages: int = DEFAULT_MAX_PAGES,
        page_size_hint: int = DEFAULT_PAGE_SIZE_HINT,
    ):
        self.fetcher = fetcher
        self.cache = cache
        self.normalizer = normalizer or EntryNormalizer()
        self.max_pages = max_pages
        self.page_size_hint = page_size_hint
        self.last_reports: dict[str, PaginationReport] = {}

    async def fetch_all_pages(
        self,
        timeframe_key: str,
        max_pages: int | None = None,
        page_size_hint: int | None = None,
    ) -> list[LeaderboardEntry]:
        """Return every entry for a timeframe, from cache when fresh.

        Pages are requested one at a time and the walk stops at the first
        empty page, the first failed page, or max_pages. Whatever was
        collected by then is cached and returned; a failed page never
        discards earlier pages.
        """
        cached = self.cache.get(timeframe_key)
        if cached is not None:
            logger.debug(f"Cache hit for {timeframe_key} ({len(cached)} entries)")
            return cached

        if max_pages is None:
            max_pages = self.max_pages
        if page_size_hint is None:
            page_size_hint = self.page_size_hint

        entries: list[LeaderboardEntry] = []
        report = PaginationReport(timeframe_key=timeframe_key)
        stats = NormalizationStats()

        with logfire.span("leaderboard.fetch_all_pages", timeframe=timeframe_key):
            for page in range(1, max_pages + 1):
                try:
                    payload = await self.fetcher.fetch_page(timeframe_key, page)
                except UpstreamFetchError as e:
                    logger.warning(f"fetch page error ({timeframe_key} page {page}): {e}")
                    report.stop_reason = "fetch_error"
                    report.truncated_at_page = page
                    break

                records = extract_array(payload)
                if not records:
                    report.stop_reason = "empty_page"
                    break

                report.pages_fetched += 1
                report.records_seen += len(records)

                for index, record in enumerate(records):
                    entry = self.normalizer.normalize(
                        record, page, index, page_size_hint, stats=stats
                    )
                    if entry is not None and entry.username:
                        entries.append(entry)

        report.entries_kept = len(entries)
        report.dropped_records = report.records_seen - report.entries_kept
        report.heuristic_matches = stats.heuristic_total
        report.synthetic_ranks = stats.synthetic_ranks
        self._log_report(report)
        self.last_reports[timeframe_key] = report

        self.cache.set(timeframe_key, entries)
        return entries

    def _log_report(self, report: PaginationReport) -> None:
        summary = (
            f"{report.timeframe_key}: {report.entries_kept} entries from "
            f"{report.pages_fetched} pages, dropped={report.dropped_records}, "
            f"heuristic_matches={report.heuristic_matches}, "
            f"stop={report.stop_reason}"
        )
        if report.stop_reason == "fetch_error":
            logger.warning(f"Truncated at page {report.truncated_at_page} - {summary}")
        else:
            logger.info(summary)
