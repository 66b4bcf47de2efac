"""
Database models for the basketball stats API.

Teams, players and matches carry a league tag: ``local`` rows are managed
through the API, ``nba`` rows are owned by the balldontlie sync and are
read-only to local editing endpoints.
"""
import enum
from datetime import datetime

from sqlalchemy import (
    Column, String, Float, Integer, DateTime, ForeignKey, Index, UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import relationship, declarative_base

Base = declarative_base()


class League(str, enum.Enum):
    LOCAL = "local"
    NBA = "nba"


class MatchStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Position(str, enum.Enum):
    PG = "PG"
    SG = "SG"
    SF = "SF"
    PF = "PF"
    C = "C"


# Box-score fields stored as integer counts
COUNTING_STATS = (
    "points",
    "offensive_rebounds",
    "defensive_rebounds",
    "assists",
    "steals",
    "blocks",
    "turnovers",
    "personal_fouls",
    "field_goals_made",
    "field_goals_attempted",
    "three_pointers_made",
    "three_pointers_attempted",
    "free_throws_made",
    "free_throws_attempted",
)

STAT_FIELDS = COUNTING_STATS + ("minutes_played",)


class Team(Base):
    """Team, either created locally or imported from the NBA API."""
    __tablename__ = "teams"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False, index=True)
    logo_url = Column(String(500), nullable=True)
    league = Column(String(10), nullable=False, index=True, default=League.LOCAL.value)
    nba_team_id = Column(Integer, unique=True, nullable=True)  # balldontlie team id
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    players = relationship("Player", back_populates="team", cascade="all, delete-orphan")
    home_matches = relationship(
        "Match", foreign_keys="Match.home_team_id", back_populates="home_team", cascade="all, delete-orphan"
    )
    away_matches = relationship(
        "Match", foreign_keys="Match.away_team_id", back_populates="away_team", cascade="all, delete-orphan"
    )


class Player(Base):
    """Player on exactly one team."""
    __tablename__ = "players"

    id = Column(String(64), primary_key=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False, index=True)
    jersey_number = Column(Integer, nullable=True)  # 0-99
    position = Column(String(2), nullable=True)  # PG, SG, SF, PF, C
    team_id = Column(String(64), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    league = Column(String(10), nullable=False, index=True, default=League.LOCAL.value)
    age = Column(Integer, nullable=True)  # 0-120
    photo_url = Column(String(500), nullable=True)
    nba_player_id = Column(Integer, unique=True, nullable=True)  # balldontlie player id
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    team = relationship("Team", back_populates="players")
    stats = relationship("PlayerStats", back_populates="player", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("jersey_number IS NULL OR (jersey_number >= 0 AND jersey_number <= 99)",
                        name="ck_players_jersey_number"),
        CheckConstraint("age IS NULL OR (age >= 0 AND age <= 120)", name="ck_players_age"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Match(Base):
    """Match between two different teams."""
    __tablename__ = "matches"

    id = Column(String(64), primary_key=True)
    home_team_id = Column(String(64), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    away_team_id = Column(String(64), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    match_date = Column(DateTime, nullable=False, index=True)
    status = Column(String(20), nullable=False, index=True, default=MatchStatus.SCHEDULED.value)
    home_score = Column(Integer, nullable=False, default=0)
    away_score = Column(Integer, nullable=False, default=0)
    league = Column(String(10), nullable=False, index=True, default=League.LOCAL.value)
    nba_game_id = Column(Integer, unique=True, nullable=True)  # balldontlie game id
    access_code = Column(String(50), nullable=True)  # gates live stat entry
    sheet_url = Column(String(500), nullable=True)  # uploaded match sheet image
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    home_team = relationship("Team", foreign_keys=[home_team_id], back_populates="home_matches")
    away_team = relationship("Team", foreign_keys=[away_team_id], back_populates="away_matches")
    player_stats = relationship("PlayerStats", back_populates="match", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("home_team_id <> away_team_id", name="ck_matches_distinct_teams"),
        Index("ix_matches_league_date", "league", "match_date"),
    )

    @property
    def team_ids(self) -> tuple:
        return (self.home_team_id, self.away_team_id)


class PlayerStats(Base):
    """Box score of one player in one match."""
    __tablename__ = "player_stats"

    id = Column(String(160), primary_key=True)
    player_id = Column(String(64), ForeignKey("players.id", ondelete="CASCADE"), nullable=False, index=True)
    match_id = Column(String(64), ForeignKey("matches.id", ondelete="CASCADE"), nullable=False, index=True)

    points = Column(Integer, nullable=False, default=0)
    offensive_rebounds = Column(Integer, nullable=False, default=0)
    defensive_rebounds = Column(Integer, nullable=False, default=0)
    assists = Column(Integer, nullable=False, default=0)
    steals = Column(Integer, nullable=False, default=0)
    blocks = Column(Integer, nullable=False, default=0)
    turnovers = Column(Integer, nullable=False, default=0)
    personal_fouls = Column(Integer, nullable=False, default=0)
    minutes_played = Column(Float, nullable=False, default=0.0)
    field_goals_made = Column(Integer, nullable=False, default=0)
    field_goals_attempted = Column(Integer, nullable=False, default=0)
    three_pointers_made = Column(Integer, nullable=False, default=0)
    three_pointers_attempted = Column(Integer, nullable=False, default=0)
    free_throws_made = Column(Integer, nullable=False, default=0)
    free_throws_attempted = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    player = relationship("Player", back_populates="stats")
    match = relationship("Match", back_populates="player_stats")

    __table_args__ = (
        UniqueConstraint("player_id", "match_id", name="uq_player_stats_player_match"),
    )

    @property
    def total_rebounds(self) -> int:
        return (self.offensive_rebounds or 0) + (self.defensive_rebounds or 0)
