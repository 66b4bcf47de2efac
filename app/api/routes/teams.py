"""Team routes."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.responses import ok
from app.core.database import get_db
from app.schemas.common import LeagueFilter, league_or_none
from app.schemas.teams import TeamCreate, TeamUpdate
from app.services.roster_service import RosterService
from app.services.serializers import team_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/teams", tags=["teams"])


def get_roster_service(db: Session = Depends(get_db)) -> RosterService:
    return RosterService(db)


@router.get("")
def list_teams(
    league: Optional[LeagueFilter] = Query(None, description="local, nba or all"),
    service: RosterService = Depends(get_roster_service),
):
    teams = service.list_teams(league=league_or_none(league))
    return ok([team_to_dict(team) for team in teams], meta={"total": len(teams)})


@router.post("", status_code=status.HTTP_201_CREATED)
def create_team(payload: TeamCreate, service: RosterService = Depends(get_roster_service)):
    return ok(team_to_dict(service.create_team(payload)))


@router.get("/{team_id}")
def get_team(team_id: str, service: RosterService = Depends(get_roster_service)):
    return ok(team_to_dict(service.get_team(team_id)))


@router.put("/{team_id}")
def update_team(team_id: str, payload: TeamUpdate, service: RosterService = Depends(get_roster_service)):
    return ok(team_to_dict(service.update_team(team_id, payload)))


@router.delete("/{team_id}")
def delete_team(team_id: str, service: RosterService = Depends(get_roster_service)):
    service.delete_team(team_id)
    return ok({"id": team_id})
