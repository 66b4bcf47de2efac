"""
PlayerStats Repository.

Box-score rows plus the grouped aggregation used by rankings.

Usage:
    repo = PlayerStatsRepository(db)
    row = repo.find_for_player_in_match(player_id, match_id)
    groups = repo.aggregate_by_player(league="local")
"""
from typing import Optional, List, Iterable

from sqlalchemy import func
from sqlalchemy.orm import joinedload

from app.models import Player, Match, PlayerStats
from app.repositories.base import BaseRepository

# Columns summed and averaged per player for rankings
AGGREGATED_STATS = (
    "points",
    "offensive_rebounds",
    "defensive_rebounds",
    "assists",
    "steals",
    "blocks",
)


class PlayerStatsRepository(BaseRepository[PlayerStats]):
    """Repository for per-player-per-match statistics."""

    entity_name = "Stats"

    def __init__(self, db):
        super().__init__(PlayerStats, db)

    def find_with_relations(self, stats_id: str) -> Optional[PlayerStats]:
        return (
            self.query()
            .options(joinedload(PlayerStats.player), joinedload(PlayerStats.match))
            .filter(PlayerStats.id == stats_id)
            .first()
        )

    def find_for_player_in_match(self, player_id: str, match_id: str) -> Optional[PlayerStats]:
        return self.where_first(PlayerStats.player_id == player_id, PlayerStats.match_id == match_id)

    def find_by_match(self, match_id: str) -> List[PlayerStats]:
        """Box score of a match with players loaded, ordered by player last name."""
        return (
            self.query()
            .join(PlayerStats.player)
            .options(joinedload(PlayerStats.player))
            .filter(PlayerStats.match_id == match_id)
            .order_by(Player.last_name, Player.first_name)
            .all()
        )

    def find_for_player_report(self, player_id: str, statuses: Iterable[str]) -> List[PlayerStats]:
        """A player's rows in matches with the given statuses, by match date ascending."""
        return (
            self.query()
            .join(PlayerStats.match)
            .options(
                joinedload(PlayerStats.match).joinedload(Match.home_team),
                joinedload(PlayerStats.match).joinedload(Match.away_team),
            )
            .filter(PlayerStats.player_id == player_id, Match.status.in_(list(statuses)))
            .order_by(Match.match_date)
            .all()
        )

    def aggregate_by_player(self, league: Optional[str] = None) -> List[dict]:
        """
        Group stats rows by player.

        Args:
            league: Restrict to players of this league (None for all leagues)

        Returns:
            One dict per player with ``player_id``, ``games_played``,
            ``sum_<stat>`` and ``avg_<stat>`` for each aggregated stat
        """
        columns = [PlayerStats.player_id, func.count(PlayerStats.id).label("games_played")]
        for stat in AGGREGATED_STATS:
            column = getattr(PlayerStats, stat)
            columns.append(func.sum(column).label(f"sum_{stat}"))
            columns.append(func.avg(column).label(f"avg_{stat}"))

        query = self.db.query(*columns)
        if league:
            query = query.join(Player, Player.id == PlayerStats.player_id).filter(Player.league == league)

        rows = query.group_by(PlayerStats.player_id).all()
        return [dict(row._mapping) for row in rows]
