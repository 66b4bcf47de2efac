"""
Player routes.

NBA players are listed and readable here but only the sync process may
change them.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.responses import ok
from app.core.database import get_db
from app.schemas.common import LeagueFilter, league_or_none
from app.schemas.players import PlayerCreate, PlayerUpdate
from app.services.roster_service import RosterService
from app.services.serializers import player_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/players", tags=["players"])


def get_roster_service(db: Session = Depends(get_db)) -> RosterService:
    return RosterService(db)


@router.get("")
def list_players(
    league: Optional[LeagueFilter] = Query(None, description="local, nba or all"),
    team_id: Optional[str] = Query(None, description="Only players of this team"),
    service: RosterService = Depends(get_roster_service),
):
    players = service.list_players(league=league_or_none(league), team_id=team_id)
    return ok([player_to_dict(player) for player in players], meta={"total": len(players)})


@router.post("", status_code=status.HTTP_201_CREATED)
def create_player(payload: PlayerCreate, service: RosterService = Depends(get_roster_service)):
    return ok(player_to_dict(service.create_player(payload)))


@router.get("/{player_id}")
def get_player(player_id: str, service: RosterService = Depends(get_roster_service)):
    return ok(player_to_dict(service.get_player(player_id)))


@router.put("/{player_id}")
def update_player(player_id: str, payload: PlayerUpdate, service: RosterService = Depends(get_roster_service)):
    return ok(player_to_dict(service.update_player(player_id, payload)))


@router.delete("/{player_id}")
def delete_player(player_id: str, service: RosterService = Depends(get_roster_service)):
    service.delete_player(player_id)
    return ok({"id": player_id})
