"""Sync orchestrator for importing NBA data from balldontlie.

Steps run serially and on demand:

1. teams  - every franchise
2. games  - games in the lookback window (embedded teams upserted too)
3. stats  - player box scores per game (embedded teams/players upserted too)

Every write is an upsert keyed by the deterministic ids in ``mapper`` so
running a step twice converges on the same rows. NBA rows are owned by this
process: stats are overwritten even for completed matches.

Each step returns a result dict::

    {'success': True, 'processed': <rows>, 'duration_ms': <ms>}
    {'success': False, 'error': <message>, 'duration_ms': <ms>}

A failed step never aborts its siblings in ``sync_all``.
"""
import logging
import time
from datetime import date, datetime, time as dt_time, timedelta
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core import metrics
from app.core.config import settings
from app.core.exceptions import NotFoundError
from app.models import League, Match, MatchStatus
from app.repositories import (
    MatchRepository,
    PlayerRepository,
    PlayerStatsRepository,
    TeamRepository,
)
from app.services.sync import mapper
from app.services.sync.adapters.balldontlie_adapter import BallDontLieClient

logger = logging.getLogger(__name__)


class UpstreamUnavailable(Exception):
    """The API returned nothing usable for a step."""


class NbaSyncOrchestrator:
    """
    Coordinates the balldontlie import.

    Args:
        db: SQLAlchemy database session
        client: balldontlie client (a default one is built from settings)
    """

    def __init__(self, db: Session, client: Optional[BallDontLieClient] = None):
        self.db = db
        self.client = client or BallDontLieClient()
        self.teams = TeamRepository(db)
        self.players = PlayerRepository(db)
        self.matches = MatchRepository(db)
        self.stats = PlayerStatsRepository(db)

    # ========================================================================
    # STEP RUNNER
    # ========================================================================

    def _run_step(self, step: str, work: Callable[[], int]) -> Dict[str, Any]:
        start = time.perf_counter()
        try:
            processed = work()
            self.db.commit()
        except UpstreamUnavailable as e:
            self.db.rollback()
            return self._failed(step, str(e), start)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"NBA sync step '{step}' failed to write: {e}", exc_info=True)
            return self._failed(step, "database error", start)

        duration_ms = int((time.perf_counter() - start) * 1000)
        metrics.record_sync_step(step, True)
        logger.info(
            f"NBA sync step '{step}' processed {processed} records ({duration_ms}ms)",
            extra={"step": step, "processed": processed, "duration_ms": duration_ms},
        )
        return {"success": True, "processed": processed, "duration_ms": duration_ms}

    @staticmethod
    def _failed(step: str, error: str, start: float) -> Dict[str, Any]:
        duration_ms = int((time.perf_counter() - start) * 1000)
        metrics.record_sync_step(step, False)
        logger.warning(f"NBA sync step '{step}' failed: {error}", extra={"step": step})
        return {"success": False, "error": error, "duration_ms": duration_ms}

    # ========================================================================
    # UPSERTS
    # ========================================================================

    def _upsert_team(self, team: Dict[str, Any]) -> None:
        self.teams.upsert(mapper.team_row_id(team["id"]), **mapper.map_team(team))

    def _ensure_team(self, nba_team_id: int) -> None:
        """Placeholder row for a team only known by id."""
        if self.teams.find_by_id(mapper.team_row_id(nba_team_id)) is None:
            self._upsert_team({"id": nba_team_id})

    def _upsert_player(self, player: Dict[str, Any], nba_team_id: int) -> str:
        row_id = mapper.player_row_id(player["id"])
        self.players.upsert(row_id, **mapper.map_player(player, nba_team_id))
        return row_id

    # ========================================================================
    # STEPS
    # ========================================================================

    def sync_teams(self) -> Dict[str, Any]:
        """Upsert every NBA franchise."""
        def work() -> int:
            teams = self.client.fetch_teams()
            if teams is None:
                raise UpstreamUnavailable("could not fetch teams")
            for team in teams:
                self._upsert_team(team)
            metrics.record_sync_records("team", len(teams))
            return len(teams)

        return self._run_step("teams", work)

    def sync_games(self, lookback_days: Optional[int] = None, today: Optional[date] = None) -> Dict[str, Any]:
        """Upsert games from ``today - lookback_days`` through ``today``."""
        if lookback_days is None:
            lookback_days = settings.NBA_SYNC_LOOKBACK_DAYS
        end_date = today or datetime.utcnow().date()
        start_date = end_date - timedelta(days=lookback_days)

        def work() -> int:
            games = self.client.fetch_games(start_date, end_date)
            if games is None:
                raise UpstreamUnavailable("could not fetch games")
            for game in games:
                self._upsert_game(game)
            metrics.record_sync_records("match", len(games))
            return len(games)

        return self._run_step("games", work)

    def _upsert_game(self, game: Dict[str, Any]) -> None:
        for side in ("home_team", "visitor_team"):
            if isinstance(game.get(side), dict):
                self._upsert_team(game[side])
            elif game.get(f"{side}_id"):
                self._ensure_team(game[f"{side}_id"])
        self.matches.upsert(mapper.match_row_id(game["id"]), **mapper.map_game(game))

    def sync_game_stats(self, nba_game_id: int) -> Dict[str, Any]:
        """
        Overwrite the box scores of one synced game.

        Raises:
            NotFoundError: the game has not been synced yet
        """
        match = self.matches.find_by_nba_game_id(nba_game_id)
        if match is None:
            raise NotFoundError(f"NBA game {nba_game_id} has not been synced")

        def work() -> int:
            lines = self.client.fetch_game_stats(nba_game_id)
            if lines is None:
                raise UpstreamUnavailable(f"could not fetch stats for game {nba_game_id}")
            processed = sum(1 for line in lines if self._upsert_stat_line(match, line))
            metrics.record_sync_records("player_stats", processed)
            return processed

        return self._run_step("stats", work)

    def _upsert_stat_line(self, match: Match, line: Dict[str, Any]) -> bool:
        player = line.get("player")
        team = line.get("team")
        nba_team_id = (team or {}).get("id") or (player or {}).get("team_id")
        if not player or not nba_team_id:
            logger.debug(f"Skipping stat line without player or team for game {match.nba_game_id}")
            return False

        if isinstance(team, dict):
            self._upsert_team(team)
        else:
            self._ensure_team(nba_team_id)
        player_id = self._upsert_player(player, nba_team_id)

        self.stats.upsert(
            mapper.stats_row_id(match.nba_game_id, player["id"]),
            player_id=player_id,
            match_id=match.id,
            **mapper.map_stat_line(line),
        )
        return True

    def _completed_games_in_window(self, lookback_days: int, today: date) -> List[Match]:
        start = datetime.combine(today - timedelta(days=lookback_days), dt_time.min)
        end = datetime.combine(today, dt_time.max)
        return [
            match
            for match in self.matches.find_between(start, end, league=League.NBA.value)
            if match.status == MatchStatus.COMPLETED.value and match.nba_game_id is not None
        ]

    def sync_all(self, lookback_days: Optional[int] = None, today: Optional[date] = None) -> Dict[str, Any]:
        """Teams, games, then box scores for every completed game in the window."""
        if lookback_days is None:
            lookback_days = settings.NBA_SYNC_LOOKBACK_DAYS
        today = today or datetime.utcnow().date()
        start = time.perf_counter()
        logger.info(f"Starting full NBA sync (lookback {lookback_days} days)")

        teams_result = self.sync_teams()
        games_result = self.sync_games(lookback_days=lookback_days, today=today)

        game_results = {}
        for match in self._completed_games_in_window(lookback_days, today):
            game_results[str(match.nba_game_id)] = self.sync_game_stats(match.nba_game_id)

        stats_result = {
            "success": all(r["success"] for r in game_results.values()),
            "games": len(game_results),
            "processed": sum(r.get("processed", 0) for r in game_results.values()),
            "failed_games": [game_id for game_id, r in game_results.items() if not r["success"]],
        }

        steps = {"teams": teams_result, "games": games_result, "stats": stats_result}
        duration_ms = int((time.perf_counter() - start) * 1000)
        success = all(step["success"] for step in steps.values())
        logger.info(
            f"Full NBA sync finished ({'ok' if success else 'with failures'}, {duration_ms}ms)",
            extra={"success": success, "duration_ms": duration_ms},
        )
        return {"success": success, "steps": steps, "duration_ms": duration_ms}
