from .client import LeaderboardClient, extract_array
from .config import LeaderboardAPIConfig
from .exceptions import LeaderboardAPIError, UpstreamFetchError
from .models import (
    TIMEFRAMES,
    CheckResponse,
    CheckResult,
    LeaderboardEntry,
    Timeframe,
)

__all__ = [
    "LeaderboardClient",
    "extract_array",
    "LeaderboardAPIConfig",
    "LeaderboardAPIError",
    "UpstreamFetchError",
    "TIMEFRAMES",
    "CheckResponse",
    "CheckResult",
    "LeaderboardEntry",
    "Timeframe",
]
