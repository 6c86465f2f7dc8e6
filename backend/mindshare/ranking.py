"""Rank and mindshare gap against the rank-100 threshold."""

from mindshare.services.leaderboard.models import CheckResult, LeaderboardEntry

THRESHOLD_RANK = 100


def find_user(
    entries: list[LeaderboardEntry], username_lower: str
) -> LeaderboardEntry | None:
    return next((entry for entry in entries if entry.matches(username_lower)), None)


def find_threshold_entry(
    entries: list[LeaderboardEntry], threshold: int = THRESHOLD_RANK
) -> LeaderboardEntry | None:
    """Pick the entry that stands at the threshold rank.

    An explicit rank wins. Otherwise fall back to the threshold-th entry by
    mindshare (descending), then by rank (ascending), when enough entries
    exist for either.
    """
    explicit = next((entry for entry in entries if entry.rank == threshold), None)
    if explicit is not None:
        return explicit

    with_mindshare = [entry for entry in entries if entry.mindshare is not None]
    if len(with_mindshare) >= threshold:
        with_mindshare.sort(key=lambda entry: entry.mindshare, reverse=True)
        return with_mindshare[threshold - 1]

    if len(entries) >= threshold:
        return sorted(entries, key=lambda entry: entry.rank)[threshold - 1]

    return None


class RankGapCalculator:
    def __init__(self, threshold: int = THRESHOLD_RANK):
        self.threshold = threshold

    def evaluate(
        self,
        entries: list[LeaderboardEntry],
        target_username_lower: str,
        label: str = "",
    ) -> CheckResult:
        you = find_user(entries, target_username_lower)
        rank100 = find_threshold_entry(entries, self.threshold)
        rank100_mindshare = rank100.mindshare if rank100 is not None else None

        if you is None:
            return CheckResult(
                label=label,
                total_fetched=len(entries),
                found=False,
                rank100_mindshare=rank100_mindshare,
            )

        needed = None
        if rank100_mindshare is not None and you.mindshare is not None:
            needed = max(0.0, rank100_mindshare - you.mindshare)

        return CheckResult(
            label=label,
            total_fetched=len(entries),
            found=True,
            rank=you.rank,
            mindshare=you.mindshare,
            rank100_mindshare=rank100_mindshare,
            needed_mindshare=needed,
        )
