"""
Guard clauses shared by the mutation services.
"""
from app.core.exceptions import OwnershipError, ValidationError
from app.models import League, MatchStatus


def ensure_local(entity, message: str) -> None:
    """NBA-league rows are owned by the sync process and cannot be edited locally."""
    if entity.league == League.NBA.value:
        raise OwnershipError(message)


def ensure_match_open(match) -> None:
    """Completed matches are frozen for box-score edits."""
    if match.status == MatchStatus.COMPLETED.value:
        raise ValidationError("Cannot modify a completed match")
