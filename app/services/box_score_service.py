"""
Box-score mutations.

One PlayerStats row exists per (player, match). Rows are created on the first
stat action for a pair and updated in place afterwards; ``increment`` applies
a signed delta clamped at zero, for live "+2 / -1" scoring controls.

Every mutation is rejected for NBA-league matches (owned by the sync) and for
completed matches.
"""
import logging
from datetime import datetime
from typing import List

from sqlalchemy.orm import Session

from app.core import metrics
from app.core.exceptions import NotFoundError, ValidationError
from app.models import COUNTING_STATS, Match, Player, PlayerStats
from app.repositories import MatchRepository, PlayerRepository, PlayerStatsRepository
from app.schemas.stats import (
    StatIncrement,
    StatIncrementUpdate,
    match_stat_mutation_adapter,
    stat_row_mutation_adapter,
)
from app.services.guards import ensure_local, ensure_match_open

logger = logging.getLogger(__name__)


def stats_row_id(match_id: str, player_id: str) -> str:
    return f"local-stat-{match_id}-{player_id}"


def apply_increment(current: int, delta: int) -> int:
    """New counter value after a signed delta, never below zero."""
    return max(0, (current or 0) + delta)


class BoxScoreService:
    """Upsert, increment, edit and delete per-player match statistics."""

    def __init__(self, db: Session):
        self.db = db
        self.stats = PlayerStatsRepository(db)
        self.matches = MatchRepository(db)
        self.players = PlayerRepository(db)

    def list_for_match(self, match_id: str) -> List[PlayerStats]:
        self.matches.get_or_404(match_id)
        return self.stats.find_by_match(match_id)

    def get_stats(self, stats_id: str) -> PlayerStats:
        stats = self.stats.find_with_relations(stats_id)
        if stats is None:
            raise NotFoundError.for_entity(self.stats.entity_name, stats_id)
        return stats

    def _editable_match(self, match_id: str) -> Match:
        match = self.matches.get_or_404(match_id)
        ensure_local(match, "NBA match statistics cannot be modified")
        ensure_match_open(match)
        return match

    def _eligible_player(self, match: Match, player_id: str) -> Player:
        player = self.players.get_or_404(player_id)
        if player.team_id not in match.team_ids:
            raise ValidationError("Player does not belong to either team of this match")
        return player

    def _row_for(self, match: Match, player: Player) -> PlayerStats:
        """Existing row for the pair, or a new zeroed one."""
        row = self.stats.find_for_player_in_match(player.id, match.id)
        if row is not None:
            return row
        defaults = {field: 0 for field in COUNTING_STATS}
        defaults["minutes_played"] = 0.0
        row = self.stats.create(
            id=stats_row_id(match.id, player.id),
            player_id=player.id,
            match_id=match.id,
            updated_at=datetime.utcnow(),
            **defaults,
        )
        logger.debug(f"Created box score row {row.id}")
        return row

    def record(self, match_id: str, body: dict) -> PlayerStats:
        """
        Apply a box-score mutation posted for a match.

        Order of checks: player_id present, match exists, match is local and
        open, then the body fields, then the player's eligibility.

        Raises:
            NotFoundError: unknown match or player
            OwnershipError: NBA-league match
            ValidationError: missing player_id, completed match, player not on either team
            pydantic.ValidationError: malformed body
        """
        if not body.get("player_id"):
            raise ValidationError("player_id is required")
        match = self._editable_match(match_id)
        payload = match_stat_mutation_adapter.validate_python(body)
        player = self._eligible_player(match, payload.player_id)
        row = self._row_for(match, player)

        if isinstance(payload, StatIncrement):
            self._increment(row, payload.stat, payload.value)
            kind = "increment"
        else:
            self.stats.update(row, **payload.supplied_stats())
            kind = "upsert"

        self.stats.save()
        metrics.record_stat_mutation(kind)
        logger.info(
            f"Box score {kind} for player {player.id} in match {match.id}",
            extra={"match_id": match.id, "player_id": player.id, "kind": kind},
        )
        return self.stats.refresh(row)

    def update(self, stats_id: str, body: dict) -> PlayerStats:
        """Edit an existing row by id (field set or increment); the body is checked after the row's match."""
        row = self.stats.get_or_404(stats_id)
        self._editable_match(row.match_id)
        payload = stat_row_mutation_adapter.validate_python(body)

        if isinstance(payload, StatIncrementUpdate):
            self._increment(row, payload.stat, payload.value)
            kind = "increment"
        else:
            changes = payload.supplied_stats()
            if not changes:
                raise ValidationError("No changes provided")
            self.stats.update(row, **changes)
            kind = "update"

        self.stats.save()
        metrics.record_stat_mutation(kind)
        return self.stats.refresh(row)

    def delete(self, stats_id: str) -> None:
        row = self.stats.get_or_404(stats_id)
        self._editable_match(row.match_id)
        self.stats.delete(row)
        self.stats.save()
        metrics.record_stat_mutation("delete")
        logger.info(f"Deleted box score row {stats_id}")

    def _increment(self, row: PlayerStats, stat: str, delta: int) -> None:
        new_value = apply_increment(getattr(row, stat), delta)
        self.stats.update(row, **{stat: new_value})
