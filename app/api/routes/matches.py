"""
Match routes: CRUD, lifecycle updates, box-score entry and access-code check.

POST /matches/{id}/stats accepts two body shapes told apart by ``action``:

    {"player_id": "...", "points": 12, "assists": 3}                     # set
    {"action": "increment", "player_id": "...", "stat": "points", "value": 2}
"""
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.responses import ok
from app.core.database import get_db
from app.models import MatchStatus
from app.schemas.common import LeagueFilter, league_or_none, to_naive_utc
from app.schemas.matches import AccessCodeCheck, MatchCreate
from app.services.box_score_service import BoxScoreService
from app.services.match_service import MatchService
from app.services.serializers import match_to_dict, stats_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/matches", tags=["matches"])


def get_match_service(db: Session = Depends(get_db)) -> MatchService:
    return MatchService(db)


def get_box_score_service(db: Session = Depends(get_db)) -> BoxScoreService:
    return BoxScoreService(db)


@router.get("")
def list_matches(
    league: Optional[LeagueFilter] = Query(None, description="local, nba or all"),
    status_filter: Optional[MatchStatus] = Query(None, alias="status"),
    team_id: Optional[str] = Query(None, description="Home or away team"),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    service: MatchService = Depends(get_match_service),
):
    matches = service.list_matches(
        league=league_or_none(league),
        status=status_filter.value if status_filter else None,
        team_id=team_id,
        date_from=to_naive_utc(date_from),
        date_to=to_naive_utc(date_to),
        limit=limit,
    )
    return ok([match_to_dict(match) for match in matches], meta={"total": len(matches), "limit": limit})


@router.post("", status_code=status.HTTP_201_CREATED)
def create_match(payload: MatchCreate, service: MatchService = Depends(get_match_service)):
    return ok(match_to_dict(service.create_match(payload)))


@router.get("/{match_id}")
def get_match(
    match_id: str,
    service: MatchService = Depends(get_match_service),
    box_scores: BoxScoreService = Depends(get_box_score_service),
):
    """Match with every box-score row."""
    data = match_to_dict(service.get_match(match_id))
    data["stats"] = [stats_to_dict(row) for row in box_scores.list_for_match(match_id)]
    return ok(data)


@router.put("/{match_id}")
def update_match(
    match_id: str,
    body: dict = Body(...),
    service: MatchService = Depends(get_match_service),
):
    """Score, status or (while scheduled) date change; see MatchUpdate for the fields."""
    return ok(match_to_dict(service.update_match(match_id, body)))


@router.delete("/{match_id}")
def delete_match(match_id: str, service: MatchService = Depends(get_match_service)):
    service.delete_match(match_id)
    return ok({"id": match_id})


@router.get("/{match_id}/stats")
def list_match_stats(match_id: str, box_scores: BoxScoreService = Depends(get_box_score_service)):
    rows = box_scores.list_for_match(match_id)
    return ok([stats_to_dict(row) for row in rows], meta={"total": len(rows)})


@router.post("/{match_id}/stats")
def record_match_stats(
    match_id: str,
    body: dict = Body(...),
    box_scores: BoxScoreService = Depends(get_box_score_service),
):
    """Upsert a player's box score, or apply a clamped increment to one counter."""
    return ok(stats_to_dict(box_scores.record(match_id, body)))


@router.post("/{match_id}/verify")
def verify_access_code(
    match_id: str,
    payload: AccessCodeCheck,
    service: MatchService = Depends(get_match_service),
):
    match = service.verify_access_code(match_id, payload.code)
    return ok({"match_id": match.id, "verified": True})
