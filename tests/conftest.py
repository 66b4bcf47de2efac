"""Shared pytest fixtures for basketball-stats-api tests."""
import os
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Generator

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Fresh in-memory database per test.

    StaticPool keeps a single connection so the TestClient and the test body
    see the same data.
    """
    from app.models import Base

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestSessionLocal()

    yield session

    session.close()
    engine.dispose()


@pytest.fixture(scope="function")
def test_client(db_session: Session) -> Generator[TestClient, None, None]:
    """FastAPI TestClient bound to the test session."""
    from app.main import app
    from app.core.database import get_db

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app)

    yield client

    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA
# =============================================================================

def make_team(session: Session, team_id: str, name: str, league: str = "local", nba_team_id=None):
    from app.models import Team

    team = Team(id=team_id, name=name, league=league, nba_team_id=nba_team_id)
    session.add(team)
    return team


def make_player(session: Session, player_id: str, first_name: str, last_name: str, team, **kwargs):
    from app.models import Player

    player = Player(
        id=player_id,
        first_name=first_name,
        last_name=last_name,
        team_id=team.id,
        league=team.league,
        **kwargs
    )
    session.add(player)
    return player


def make_match(session: Session, match_id: str, home, away, status: str = "scheduled", match_date=None, **kwargs):
    from app.models import Match

    match = Match(
        id=match_id,
        home_team_id=home.id,
        away_team_id=away.id,
        match_date=match_date or datetime(2025, 1, 15, 19, 0),
        status=status,
        league="nba" if home.league == "nba" and away.league == "nba" else "local",
        **kwargs
    )
    session.add(match)
    return match


def make_stats(session: Session, match, player, **stats):
    from app.models import PlayerStats

    row = PlayerStats(
        id=f"local-stat-{match.id}-{player.id}",
        player_id=player.id,
        match_id=match.id,
        **stats
    )
    session.add(row)
    return row


@pytest.fixture
def local_teams(db_session: Session):
    """Two local teams: Hawks (home) and Owls (away)."""
    hawks = make_team(db_session, "local-team-hawks", "Hawks")
    owls = make_team(db_session, "local-team-owls", "Owls")
    db_session.commit()
    return hawks, owls


@pytest.fixture
def local_players(db_session: Session, local_teams):
    """One player per local team plus a player on a third team."""
    hawks, owls = local_teams
    outsiders = make_team(db_session, "local-team-outsiders", "Outsiders")
    ana = make_player(db_session, "local-player-ana", "Ana", "Alvarez", hawks, jersey_number=7, position="PG")
    ben = make_player(db_session, "local-player-ben", "Ben", "Brooks", owls, jersey_number=23, position="C")
    cal = make_player(db_session, "local-player-cal", "Cal", "Cruz", outsiders)
    db_session.commit()
    return ana, ben, cal


@pytest.fixture
def scheduled_match(db_session: Session, local_teams):
    hawks, owls = local_teams
    match = make_match(db_session, "local-match-1", hawks, owls, access_code="HOOPS")
    db_session.commit()
    return match


@pytest.fixture
def nba_data(db_session: Session):
    """A synced NBA game with one player per side and a box score row."""
    celtics = make_team(db_session, "nba-2", "Boston Celtics", league="nba", nba_team_id=2)
    lakers = make_team(db_session, "nba-14", "Los Angeles Lakers", league="nba", nba_team_id=14)
    tatum = make_player(db_session, "nba-player-434", "Jayson", "Tatum", celtics, nba_player_id=434)
    james = make_player(db_session, "nba-player-237", "LeBron", "James", lakers, nba_player_id=237)
    game = make_match(
        db_session, "nba-game-1001", celtics, lakers,
        status="completed", nba_game_id=1001,
        match_date=datetime.utcnow() - timedelta(days=1),
        home_score=110, away_score=104,
    )
    from app.models import PlayerStats
    db_session.add(PlayerStats(id="nba-stat-1001-434", player_id=tatum.id, match_id=game.id, points=31))
    db_session.commit()
    return {"teams": (celtics, lakers), "players": (tatum, james), "match": game}
