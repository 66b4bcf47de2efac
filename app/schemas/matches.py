from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from app.models import MatchStatus
from app.schemas.common import RequestModel, to_naive_utc


class MatchCreate(RequestModel):
    """Request to schedule a match between two existing teams."""
    home_team_id: str = Field(..., min_length=1)
    away_team_id: str = Field(..., min_length=1)
    match_date: datetime
    access_code: Optional[str] = Field(None, min_length=1, max_length=50)

    @field_validator("match_date")
    @classmethod
    def normalize_match_date(cls, value: datetime) -> datetime:
        return to_naive_utc(value)


class MatchUpdate(RequestModel):
    """Partial match update: lifecycle status, scores and (while scheduled) date."""
    status: Optional[MatchStatus] = None
    home_score: Optional[int] = Field(None, ge=0)
    away_score: Optional[int] = Field(None, ge=0)
    match_date: Optional[datetime] = None

    @field_validator("match_date")
    @classmethod
    def normalize_match_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)


class AccessCodeCheck(RequestModel):
    """Live-entry access code submitted by a scorer."""
    code: Optional[str] = None
