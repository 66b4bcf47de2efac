"""
Player Repository.

Usage:
    repo = PlayerRepository(db)
    roster = repo.find_filtered(team_id=team.id)
    players = repo.find_by_ids_with_team(player_ids)
"""
from typing import Optional, List, Dict

from sqlalchemy.orm import joinedload

from app.models import Player
from app.repositories.base import BaseRepository


class PlayerRepository(BaseRepository[Player]):
    """Repository for player data access."""

    entity_name = "Player"

    def __init__(self, db):
        super().__init__(Player, db)

    def find_filtered(
        self,
        league: Optional[str] = None,
        team_id: Optional[str] = None
    ) -> List[Player]:
        """Players ordered by last name, optionally filtered by league and team."""
        query = self.query().options(joinedload(Player.team))
        if league:
            query = query.filter(Player.league == league)
        if team_id:
            query = query.filter(Player.team_id == team_id)
        return query.order_by(Player.last_name, Player.first_name).all()

    def find_by_ids_with_team(self, player_ids: List[str]) -> Dict[str, Player]:
        """
        Batch lookup of players with their teams.

        Returns:
            Mapping of player id to player (missing ids are simply absent)
        """
        if not player_ids:
            return {}
        players = (
            self.query()
            .options(joinedload(Player.team))
            .filter(Player.id.in_(player_ids))
            .all()
        )
        return {player.id: player for player in players}
