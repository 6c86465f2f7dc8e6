"""Fan a username check out over every timeframe."""

import asyncio
import logging

import logfire

from mindshare.aggregator import TimeframeAggregator
from mindshare.exceptions import ValidationError
from mindshare.ranking import RankGapCalculator
from mindshare.services.leaderboard.models import TIMEFRAMES, CheckResponse, Timeframe

logger = logging.getLogger(__name__)


def normalize_query(raw_username: str | None) -> str:
    """Trim, drop one leading '@' and lowercase a queried username."""
    username = (raw_username or "").strip()
    if not username:
        raise ValidationError("missing username")
    if username.startswith("@"):
        username = username[1:]
    return username.lower()


class RankChecker:
    def __init__(
        self,
        aggregator: TimeframeAggregator,
        calculator: RankGapCalculator | None = None,
        timeframes: tuple[Timeframe, ...] = TIMEFRAMES,
    ):
        self.aggregator = aggregator
        self.calculator = calculator or RankGapCalculator()
        self.timeframes = timeframes

    async def check(self, raw_username: str | None) -> CheckResponse:
        username = normalize_query(raw_username)

        with logfire.span("mindshare.check", username=username):
            snapshots = await asyncio.gather(
                *(self.aggregator.fetch_all_pages(tf.key) for tf in self.timeframes)
            )

            response = CheckResponse(username=username)
            for timeframe, entries in zip(self.timeframes, snapshots):
                response.results[timeframe.key] = self.calculator.evaluate(
                    entries, username, label=timeframe.label
                )

        found_in = [key for key, result in response.results.items() if result.found]
        logger.info(f"Checked {username}: found in {found_in or 'no timeframes'}")
        return response
