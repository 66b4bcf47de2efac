"""Player season report and weekly league report."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.responses import ok
from app.core.database import get_db
from app.schemas.common import LeagueFilter, league_or_none
from app.services.ranking_service import RankingService

router = APIRouter(prefix="/reports", tags=["reports"])


def get_ranking_service(db: Session = Depends(get_db)) -> RankingService:
    return RankingService(db)


@router.get("/player/{player_id}")
def player_report(player_id: str, service: RankingService = Depends(get_ranking_service)):
    return ok(service.player_report(player_id))


@router.get("/weekly")
def weekly_report(
    league: LeagueFilter = Query("all"),
    service: RankingService = Depends(get_ranking_service),
):
    """Top five per category and the matches of the current Sunday-Saturday week."""
    return ok(service.weekly_report(league=league_or_none(league)))
