"""NBA sync routes.

Manual triggers for the balldontlie import:

- POST /nba/sync                          full run (teams, games, box scores)
- POST /nba/sync/teams                    franchises only
- POST /nba/sync/games?lookback_days=7    games in the lookback window
- POST /nba/sync/games/{game_id}/stats    box scores of one synced game

All of them require ``NBA_API_KEY``.
"""
import logging
from typing import Dict, Iterator, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.api.responses import ok
from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import UpstreamError, ValidationError
from app.core.rate_limit import SYNC_LIMIT, limiter
from app.services.sync.adapters.balldontlie_adapter import BallDontLieClient
from app.services.sync.orchestrator import NbaSyncOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/nba/sync", tags=["sync"])


def get_orchestrator(db: Session = Depends(get_db)) -> Iterator[NbaSyncOrchestrator]:
    """Dependency to get a sync orchestrator with its own API client."""
    if not settings.NBA_API_KEY:
        raise ValidationError("NBA_API_KEY is not configured")
    client = BallDontLieClient()
    try:
        yield NbaSyncOrchestrator(db, client=client)
    finally:
        client.close()


def step_response(step: str, result: Dict) -> Dict:
    if not result["success"]:
        raise UpstreamError(f"NBA sync step '{step}' failed: {result['error']}")
    return ok(result)


@router.post("")
@limiter.limit(SYNC_LIMIT)
def trigger_full_sync(
    request: Request,
    lookback_days: Optional[int] = Query(None, ge=0, le=30, description="Days to look back"),
    orchestrator: NbaSyncOrchestrator = Depends(get_orchestrator),
):
    """
    Run every sync step.

    Failed steps are reported in ``data.steps`` without stopping the others.
    """
    result = orchestrator.sync_all(lookback_days=lookback_days)
    return {"success": result["success"], "data": result}


@router.post("/teams")
@limiter.limit(SYNC_LIMIT)
def trigger_team_sync(request: Request, orchestrator: NbaSyncOrchestrator = Depends(get_orchestrator)):
    return step_response("teams", orchestrator.sync_teams())


@router.post("/games")
@limiter.limit(SYNC_LIMIT)
def trigger_game_sync(
    request: Request,
    lookback_days: Optional[int] = Query(None, ge=0, le=30, description="Days to look back"),
    orchestrator: NbaSyncOrchestrator = Depends(get_orchestrator),
):
    return step_response("games", orchestrator.sync_games(lookback_days=lookback_days))


@router.post("/games/{game_id}/stats")
@limiter.limit(SYNC_LIMIT)
def trigger_game_stats_sync(
    request: Request,
    game_id: int,
    orchestrator: NbaSyncOrchestrator = Depends(get_orchestrator),
):
    return step_response("stats", orchestrator.sync_game_stats(game_id))
