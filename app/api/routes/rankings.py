"""
Player rankings.

GET /rankings?category=points&league=all&limit=10
"""
from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.responses import ok
from app.core.database import get_db
from app.schemas.common import LeagueFilter, league_or_none
from app.services.ranking_service import RankingService

router = APIRouter(prefix="/rankings", tags=["rankings"])

RankingCategory = Literal["points", "rebounds", "assists", "steals", "blocks", "global"]


def get_ranking_service(db: Session = Depends(get_db)) -> RankingService:
    return RankingService(db)


@router.get("")
def get_rankings(
    category: RankingCategory = Query("points"),
    league: LeagueFilter = Query("all"),
    limit: int = Query(10, ge=1, le=100),
    service: RankingService = Depends(get_ranking_service),
):
    rows = service.compute_rankings(category=category, league=league_or_none(league), limit=limit)
    return ok(rows, meta={"category": category, "league": league, "limit": limit, "total": len(rows)})
