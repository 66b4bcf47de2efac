"""
Match management and lifecycle guard.

Lifecycle::

    scheduled ──> in_progress ──> completed

Transitions are explicit user actions. ``completed`` is terminal; setting it
again is accepted as a no-op. Skipping ``in_progress`` or moving backwards is
rejected. NBA-league matches belong to the sync process and are read-only here.
"""
import logging
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core import metrics
from app.core.exceptions import AccessDeniedError, ValidationError
from app.models import League, Match, MatchStatus
from app.repositories import MatchRepository, TeamRepository
from app.schemas.matches import MatchCreate, MatchUpdate
from app.services.guards import ensure_local

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    MatchStatus.SCHEDULED.value: {MatchStatus.SCHEDULED.value, MatchStatus.IN_PROGRESS.value},
    MatchStatus.IN_PROGRESS.value: {MatchStatus.IN_PROGRESS.value, MatchStatus.COMPLETED.value},
    MatchStatus.COMPLETED.value: {MatchStatus.COMPLETED.value},
}


def check_transition(current: str, requested: str) -> None:
    """Raise ValidationError unless ``current -> requested`` is a modeled transition."""
    if requested in ALLOWED_TRANSITIONS.get(current, set()):
        return
    if current == MatchStatus.COMPLETED.value:
        raise ValidationError("Cannot reopen a completed match")
    raise ValidationError(f"Invalid status transition: {current} -> {requested}")


class MatchService:
    """Match CRUD plus the score/status mutation rules."""

    def __init__(self, db: Session):
        self.db = db
        self.matches = MatchRepository(db)
        self.teams = TeamRepository(db)

    def list_matches(
        self,
        league: Optional[str] = None,
        status: Optional[str] = None,
        team_id: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        limit: int = 50,
    ) -> List[Match]:
        return self.matches.search(
            league=league, status=status, team_id=team_id,
            date_from=date_from, date_to=date_to, limit=limit,
        )

    def get_match(self, match_id: str) -> Match:
        return self.matches.get_or_404(match_id)

    def create_match(self, payload: MatchCreate) -> Match:
        if payload.home_team_id == payload.away_team_id:
            raise ValidationError("Home and away teams must be different")

        home_team = self.teams.get_or_404(payload.home_team_id)
        away_team = self.teams.get_or_404(payload.away_team_id)

        # a match involving any local team is locally owned
        if League.LOCAL.value in (home_team.league, away_team.league):
            league = League.LOCAL.value
        else:
            league = League.NBA.value

        match = self.matches.create(
            id=f"local-match-{uuid.uuid4()}",
            home_team_id=home_team.id,
            away_team_id=away_team.id,
            match_date=payload.match_date,
            status=MatchStatus.SCHEDULED.value,
            home_score=0,
            away_score=0,
            league=league,
            access_code=payload.access_code,
        )
        self.matches.save()
        logger.info(f"Scheduled match {match.id}: {home_team.name} vs {away_team.name}")
        return self.matches.refresh(match)

    def update_match(self, match_id: str, body: dict) -> Match:
        """
        Apply a partial score/status/date update.

        The body is validated only after the match is found and known to be
        local, so NBA matches answer 403 whatever was sent.

        Raises:
            NotFoundError: unknown match
            OwnershipError: NBA-league match
            ValidationError: invalid transition, score or date change, or empty payload
            pydantic.ValidationError: malformed body
        """
        match = self.matches.get_or_404(match_id)
        ensure_local(match, "NBA matches cannot be modified")
        payload = MatchUpdate.model_validate(body)

        updates = payload.model_dump(exclude_unset=True, exclude_none=True)
        if not updates:
            raise ValidationError("No changes provided")

        current = match.status
        requested = updates.get("status")
        if requested is not None:
            requested = requested.value
            check_transition(current, requested)
            updates["status"] = requested

        if current == MatchStatus.COMPLETED.value:
            for score_field in ("home_score", "away_score"):
                if score_field in updates and updates[score_field] != getattr(match, score_field):
                    raise ValidationError("Cannot modify the score of a completed match")

        if "match_date" in updates and current != MatchStatus.SCHEDULED.value:
            raise ValidationError("Match date can only be changed while the match is scheduled")

        self.matches.update(match, **updates)
        self.matches.save()

        if requested is not None and requested != current:
            metrics.record_match_transition(current, requested)
            logger.info(
                f"Match {match_id} status {current} -> {requested}",
                extra={"match_id": match_id, "from_status": current, "to_status": requested},
            )
        return self.matches.refresh(match)

    def delete_match(self, match_id: str) -> None:
        match = self.matches.get_or_404(match_id)
        ensure_local(match, "NBA matches cannot be deleted")
        self.matches.delete(match)
        self.matches.save()
        logger.info(f"Deleted match {match_id}")

    def verify_access_code(self, match_id: str, code: Optional[str]) -> Match:
        """
        Check a scorer's live-entry code.

        A match without an access code rejects every code.
        """
        if not code:
            raise ValidationError("Access code is required")
        match = self.matches.get_or_404(match_id)
        if match.access_code is None or code != match.access_code:
            logger.warning(f"Rejected access code for match {match_id}")
            raise AccessDeniedError("Invalid access code")
        return match
