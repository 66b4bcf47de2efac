from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

LeagueFilter = Literal["all", "local", "nba"]


class RequestModel(BaseModel):
    """Base for request bodies: unknown fields are rejected, strings trimmed."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Store datetimes as naive UTC."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def league_or_none(league: Optional[str]) -> Optional[str]:
    """Translate the ``all`` filter into "no filter"."""
    return None if league in (None, "all") else league
