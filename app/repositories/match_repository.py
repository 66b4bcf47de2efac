"""
Match Repository.

Usage:
    repo = MatchRepository(db)
    live = repo.search(status="in_progress")
    week = repo.find_between(week_start, week_end)
"""
from datetime import datetime
from typing import Optional, List

from sqlalchemy import or_, desc
from sqlalchemy.orm import joinedload

from app.models import Match
from app.repositories.base import BaseRepository


class MatchRepository(BaseRepository[Match]):
    """Repository for match data access."""

    entity_name = "Match"

    def __init__(self, db):
        super().__init__(Match, db)

    def _with_teams(self):
        return self.query().options(joinedload(Match.home_team), joinedload(Match.away_team))

    def search(
        self,
        league: Optional[str] = None,
        status: Optional[str] = None,
        team_id: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        limit: int = 50
    ) -> List[Match]:
        """Matches, most recent first; ``team_id`` matches either side."""
        query = self._with_teams()
        if league:
            query = query.filter(Match.league == league)
        if status:
            query = query.filter(Match.status == status)
        if team_id:
            query = query.filter(or_(Match.home_team_id == team_id, Match.away_team_id == team_id))
        if date_from:
            query = query.filter(Match.match_date >= date_from)
        if date_to:
            query = query.filter(Match.match_date <= date_to)
        return query.order_by(desc(Match.match_date)).limit(limit).all()

    def find_between(self, start: datetime, end: datetime, league: Optional[str] = None) -> List[Match]:
        """Matches within [start, end], oldest first."""
        criteria = [Match.league == league] if league else []
        return self.in_date_range("match_date", start, end, *criteria)

    def find_by_nba_game_id(self, nba_game_id: int) -> Optional[Match]:
        return self.where_first(Match.nba_game_id == nba_game_id)

    def count_by_status(self, status: str) -> int:
        return self.count(Match.status == status)
