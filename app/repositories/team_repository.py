"""
Team Repository.

Usage:
    repo = TeamRepository(db)
    team = repo.get_or_404(team_id)
    local_teams = repo.find_by_league("local")
"""
from typing import Optional, List

from app.models import Team
from app.repositories.base import BaseRepository


class TeamRepository(BaseRepository[Team]):
    """Repository for team data access."""

    entity_name = "Team"

    def __init__(self, db):
        super().__init__(Team, db)

    def find_by_league(self, league: Optional[str] = None) -> List[Team]:
        """Teams ordered by name; ``None`` returns every league."""
        query = self.query()
        if league:
            query = query.filter(Team.league == league)
        return query.order_by(Team.name).all()

    def find_by_nba_team_id(self, nba_team_id: int) -> Optional[Team]:
        return self.where_first(Team.nba_team_id == nba_team_id)
