"""Box-score rows addressed by id."""
from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from app.api.responses import ok
from app.core.database import get_db
from app.services.box_score_service import BoxScoreService
from app.services.serializers import stats_to_dict

router = APIRouter(prefix="/stats", tags=["stats"])


def get_box_score_service(db: Session = Depends(get_db)) -> BoxScoreService:
    return BoxScoreService(db)


@router.get("/{stats_id}")
def get_stats(stats_id: str, box_scores: BoxScoreService = Depends(get_box_score_service)):
    return ok(stats_to_dict(box_scores.get_stats(stats_id), include_match=True))


@router.put("/{stats_id}")
def update_stats(
    stats_id: str,
    body: dict = Body(...),
    box_scores: BoxScoreService = Depends(get_box_score_service),
):
    return ok(stats_to_dict(box_scores.update(stats_id, body)))


@router.delete("/{stats_id}")
def delete_stats(stats_id: str, box_scores: BoxScoreService = Depends(get_box_score_service)):
    box_scores.delete(stats_id)
    return ok({"id": stats_id})
