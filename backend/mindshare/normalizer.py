"""Map arbitrary upstream leaderboard records onto LeaderboardEntry.

The upstream does not publish a stable record schema. Fields are resolved in
two steps:

1. FIELD_MAPPINGS, a versioned table of exact key names seen in known
   upstream shapes. The first usable key wins.
2. A substring heuristic over the record's keys in their existing order.
   Every heuristic match is counted and logged at debug level, so a rising
   heuristic count is the signal that the upstream schema drifted.

Records without a rank get a synthetic one from their page position.
"""

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict

from mindshare.services.leaderboard.models import LeaderboardEntry

logger = logging.getLogger(__name__)

USERNAME_HINTS = ("username", "user", "handle", "twitter", "name", "creator")
MINDSHARE_HINTS = ("mindshare", "score", "ms", "value", "points")
RANK_HINTS = ("rank", "position")

DEFAULT_PAGE_SIZE_HINT = 100


class FieldMapping(BaseModel):
    """Exact key names for one known upstream record shape."""

    model_config = ConfigDict(frozen=True)

    version: str
    username_keys: tuple[str, ...] = ()
    mindshare_keys: tuple[str, ...] = ()
    rank_keys: tuple[str, ...] = ()


FIELD_MAPPINGS: tuple[FieldMapping, ...] = (
    FieldMapping(
        version="2",
        username_keys=("username", "twitterUsername", "twitter_username"),
        mindshare_keys=("mindshare", "mindshareScore", "mindshare_score"),
        rank_keys=("rank",),
    ),
    FieldMapping(
        version="1",
        username_keys=("handle", "screen_name", "creator"),
        mindshare_keys=("score", "points"),
        rank_keys=("position",),
    ),
)


@dataclass
class NormalizationStats:
    records: int = 0
    skipped_non_objects: int = 0
    synthetic_ranks: int = 0
    heuristic_hits: Counter = field(default_factory=Counter)

    @property
    def heuristic_total(self) -> int:
        return sum(self.heuristic_hits.values())


def parse_number(value: Any) -> float | None:
    """Return value as a finite float, or None when it is not numeric."""
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str) and value.strip():
            number = float(value.strip())
        else:
            return None
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def clean_username(value: Any) -> str | None:
    """Trim and drop a single leading '@'. Empty results become None."""
    if value is None:
        return None
    username = str(value).strip()
    if username.startswith("@"):
        username = username[1:]
    return username or None


def synthetic_rank(page_index: int, index_in_page: int, page_size_hint: int) -> int:
    return (page_index - 1) * page_size_hint + index_in_page + 1


def _hinted_keys(record: dict[str, Any], hints: tuple[str, ...]) -> list[Any]:
    return [key for key in record if any(hint in str(key).lower() for hint in hints)]


class EntryNormalizer:
    def __init__(self, mappings: tuple[FieldMapping, ...] = FIELD_MAPPINGS):
        self.mappings = mappings

    def normalize(
        self,
        record: Any,
        page_index: int,
        index_in_page: int,
        page_size_hint: int = DEFAULT_PAGE_SIZE_HINT,
        stats: NormalizationStats | None = None,
    ) -> LeaderboardEntry | None:
        """Build a LeaderboardEntry from one raw record.

        Returns None only when record is not a JSON object. The username may
        still be None; callers decide whether to keep such entries. Field
        resolution is tallied into stats when one is passed.
        """
        if stats is None:
            stats = NormalizationStats()

        if not isinstance(record, dict):
            stats.skipped_non_objects += 1
            return None

        stats.records += 1

        username = self._resolve_username(record, stats)
        mindshare = self._resolve_number(record, "mindshare", MINDSHARE_HINTS, stats)
        rank = self._resolve_number(record, "rank", RANK_HINTS, stats)

        if rank is None:
            stats.synthetic_ranks += 1
            rank = synthetic_rank(page_index, index_in_page, page_size_hint)
        elif rank.is_integer():
            rank = int(rank)

        return LeaderboardEntry(
            rank=rank,
            username=username,
            mindshare=mindshare,
            raw=record,
        )

    def _mapped_keys(self, field_name: str) -> list[str]:
        keys: list[str] = []
        for mapping in self.mappings:
            for key in getattr(mapping, f"{field_name}_keys"):
                if key not in keys:
                    keys.append(key)
        return keys

    def _note_heuristic(
        self, field_name: str, key: Any, stats: NormalizationStats
    ) -> None:
        stats.heuristic_hits[field_name] += 1
        logger.debug(f"Heuristic {field_name} match on key {key!r}")

    def _resolve_username(
        self, record: dict[str, Any], stats: NormalizationStats
    ) -> str | None:
        for key in self._mapped_keys("username"):
            if key in record:
                username = clean_username(record[key])
                if username:
                    return username

        candidates = _hinted_keys(record, USERNAME_HINTS)
        if candidates:
            # First hinted key wins even when its value is unusable.
            self._note_heuristic("username", candidates[0], stats)
            return clean_username(record[candidates[0]])

        for value in record.values():
            if isinstance(value, str) and value.startswith("@"):
                self._note_heuristic("username", value, stats)
                return clean_username(value)
        return None

    def _resolve_number(
        self,
        record: dict[str, Any],
        field_name: str,
        hints: tuple[str, ...],
        stats: NormalizationStats,
    ) -> float | None:
        for key in self._mapped_keys(field_name):
            if key in record:
                number = parse_number(record[key])
                if number is not None:
                    return number

        for key in _hinted_keys(record, hints):
            number = parse_number(record[key])
            if number is not None:
                self._note_heuristic(field_name, key, stats)
                return number
        return None
