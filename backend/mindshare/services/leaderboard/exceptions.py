"""Custom exceptions for the upstream leaderboard API."""


class LeaderboardAPIError(Exception):
    """Base exception for leaderboard API errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class UpstreamFetchError(LeaderboardAPIError):
    """A page request failed (transport error, bad status or unreadable body)."""

    pass
