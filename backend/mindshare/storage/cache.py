"""TTL-bounded snapshot store, one entry list per timeframe."""

import logging
import time
from typing import Callable

from cachetools import TTLCache

from mindshare.services.leaderboard.models import LeaderboardEntry

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300
DEFAULT_MAX_SNAPSHOTS = 64


def snapshot_key(timeframe_key: str) -> str:
    return f"tf:{timeframe_key}"


class SnapshotCache:
    """Last fully paginated entry list per timeframe.

    Entries expire ttl_seconds after they are set and are never invalidated
    by hand. The timer is injectable so expiry can be driven by a fake clock.
    Concurrent writers for the same key simply overwrite each other.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        maxsize: int = DEFAULT_MAX_SNAPSHOTS,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._store: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl_seconds, timer=timer)

    def get(self, timeframe_key: str) -> list[LeaderboardEntry] | None:
        return self._store.get(snapshot_key(timeframe_key))

    def set(self, timeframe_key: str, entries: list[LeaderboardEntry]) -> None:
        self._store[snapshot_key(timeframe_key)] = entries
        logger.debug(
            f"Cached {len(entries)} entries for {timeframe_key} "
            f"(ttl={self.ttl_seconds}s)"
        )
