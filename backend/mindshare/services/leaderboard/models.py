from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_serializer


class Timeframe(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    label: str


TIMEFRAMES: tuple[Timeframe, ...] = (
    Timeframe(key="24h", label="Last 24 hours"),
    Timeframe(key="7d", label="Last 7 days"),
    Timeframe(key="month", label="Last 30 days"),
)


class LeaderboardEntry(BaseModel):
    """One canonical leaderboard row, regardless of the upstream record shape."""

    rank: int | float
    username: str | None = None
    mindshare: float | None = None
    raw: dict[str, Any] = Field(default_factory=dict, repr=False)

    def matches(self, username_lower: str) -> bool:
        return self.username is not None and self.username.lower() == username_lower


class CheckResult(BaseModel):
    """Where a user stands on one timeframe, relative to rank 100."""

    model_config = ConfigDict(populate_by_name=True)

    label: str = ""
    total_fetched: int = Field(alias="totalFetched")
    found: bool
    rank: int | float | None = None
    mindshare: float | None = None
    rank100_mindshare: float | None = None
    needed_mindshare: float | None = None

    @model_serializer(mode="wrap")
    def _omit_user_fields_when_missing(self, handler: Any) -> dict[str, Any]:
        data = handler(self)
        if not self.found:
            for name in ("rank", "mindshare", "needed_mindshare"):
                data.pop(name, None)
        return data


class CheckResponse(BaseModel):
    username: str
    results: dict[str, CheckResult] = Field(default_factory=dict)

    def to_api(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
