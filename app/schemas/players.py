from typing import Optional

from pydantic import Field

from app.models import Position
from app.schemas.common import RequestModel


class PlayerCreate(RequestModel):
    """Request to create a local player."""
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    team_id: str = Field(..., min_length=1)
    jersey_number: Optional[int] = Field(None, ge=0, le=99)
    position: Optional[Position] = None
    age: Optional[int] = Field(None, ge=0, le=120)
    photo_url: Optional[str] = Field(None, max_length=500)


class PlayerUpdate(RequestModel):
    """
    Partial player update.

    ``jersey_number``, ``position``, ``age`` and ``photo_url`` accept null to
    clear the value; names and team cannot be cleared.
    """
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    team_id: Optional[str] = Field(None, min_length=1)
    jersey_number: Optional[int] = Field(None, ge=0, le=99)
    position: Optional[Position] = None
    age: Optional[int] = Field(None, ge=0, le=120)
    photo_url: Optional[str] = Field(None, max_length=500)
