from pydantic import BaseModel


class LeaderboardAPIConfig(BaseModel):
    """Configuration for the upstream leaderboard API client."""

    base_url: str = "https://leaderboard-bice-mu.vercel.app/api/zama"
    sort_by: str = "mindshare"
    timeout_seconds: float = 15.0
    max_connections: int = 20
    max_keepalive_connections: int = 10
