from typing import Optional

from pydantic import Field

from app.schemas.common import RequestModel


class TeamCreate(RequestModel):
    """Request to create a local team."""
    name: str = Field(..., min_length=1, max_length=255)
    logo_url: Optional[str] = Field(None, max_length=500)


class TeamUpdate(RequestModel):
    """Partial team update; ``logo_url: null`` clears the logo."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    logo_url: Optional[str] = Field(None, max_length=500)
