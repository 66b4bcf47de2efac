"""Dashboard counters."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.responses import ok
from app.core.database import get_db
from app.services.ranking_service import RankingService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("")
def dashboard(db: Session = Depends(get_db)):
    return ok(RankingService(db).dashboard_summary())
