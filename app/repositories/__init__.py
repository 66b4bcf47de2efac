"""
Repository layer for data access.

Usage:
    from app.repositories import MatchRepository
    from app.core.database import SessionLocal

    db = SessionLocal()
    match = MatchRepository(db).get_or_404(match_id)
    db.close()
"""

from app.repositories.base import BaseRepository
from app.repositories.team_repository import TeamRepository
from app.repositories.player_repository import PlayerRepository
from app.repositories.match_repository import MatchRepository
from app.repositories.player_stats_repository import PlayerStatsRepository

__all__ = [
    "BaseRepository",
    "TeamRepository",
    "PlayerRepository",
    "MatchRepository",
    "PlayerStatsRepository",
]
