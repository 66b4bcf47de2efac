"""
Models Module

Usage:
    from app.models import Team, Player, Match, PlayerStats

    # NBA-owned matches only
    db.query(Match).filter(Match.league == League.NBA.value).all()
"""
from app.models.models import (
    Base,
    League,
    MatchStatus,
    Position,
    COUNTING_STATS,
    STAT_FIELDS,
    Team,
    Player,
    Match,
    PlayerStats,
)

__all__ = [
    "Base",
    "League",
    "MatchStatus",
    "Position",
    "COUNTING_STATS",
    "STAT_FIELDS",
    "Team",
    "Player",
    "Match",
    "PlayerStats",
]
