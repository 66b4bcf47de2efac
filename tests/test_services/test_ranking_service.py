"""Tests for the aggregation & ranking engine and its formulas.

Test Strategy:
1. Pure helpers (build_ranking_row, rank_rows, week_bounds, formulas)
2. RankingService against an in-memory database
"""
import sys
from datetime import datetime
from pathlib import Path

import pytest
from sqlalchemy.orm import Session

sys.path.insert(0, str(Path(__file__).parent.parent))
from conftest import make_match, make_player, make_stats, make_team

from app.core.exceptions import NotFoundError, ValidationError
from app.services.match_service import check_transition
from app.services.ranking_service import (
    RankingService,
    build_ranking_row,
    rank_rows,
    week_bounds,
)
from app.services.stat_formulas import compute_global_score, percentage, round1


def aggregate(player_id: str, **averages) -> dict:
    row = {"player_id": player_id, "games_played": 1}
    for key, value in averages.items():
        row[f"avg_{key}"] = value
        row[f"sum_{key}"] = value
    return row


class TestFormulas:
    """Rounding, percentages and the global score."""

    def test_round_half_up(self):
        assert round1(0.25) == 0.3
        assert round1(18.45) == 18.5
        assert round1(None) == 0.0

    def test_percentage(self):
        assert percentage(1, 3) == 33
        assert percentage(2, 3) == 67
        assert percentage(5, 0) == 0

    def test_global_score_at_benchmarks(self):
        assert compute_global_score(30, 15, 10, 3, 3) == 100.0

    def test_global_score_is_not_clamped(self):
        assert compute_global_score(60, 15, 10, 3, 3) == 120.0

    @pytest.mark.parametrize("index", range(5))
    def test_global_score_monotonic(self, index):
        base = [10.0, 5.0, 3.0, 1.0, 1.0]
        bumped = list(base)
        bumped[index] += 0.5
        assert compute_global_score(*bumped) > compute_global_score(*base)


class TestRankingHelpers:
    """build_ranking_row and rank_rows without a database."""

    def test_rebound_average_is_sum_of_parts(self):
        row = build_ranking_row(
            aggregate("p1", points=10, offensive_rebounds=2.4, defensive_rebounds=5.3),
            player=None,
        )
        assert row["avg_rebounds"] == 7.7
        assert row["total_rebounds"] == 7

    def test_unresolved_player_keeps_row(self):
        row = build_ranking_row(aggregate("ghost", points=12), player=None)
        assert row["id"] == "ghost"
        assert row["first_name"] == ""
        assert row["team_name"] == ""

    def test_limit_and_contiguous_ranks(self):
        rows = [{"id": f"p{i}", "avg_points": float(i)} for i in range(8)]
        ranked = rank_rows(rows, "points", limit=3)
        assert [r["id"] for r in ranked] == ["p7", "p6", "p5"]
        assert [r["rank"] for r in ranked] == [1, 2, 3]

    def test_ties_broken_by_player_id(self):
        rows = [
            {"id": "b", "global_score": 50.0},
            {"id": "c", "global_score": 70.0},
            {"id": "a", "global_score": 50.0},
        ]
        ranked = rank_rows(rows, "global", limit=10)
        assert [r["id"] for r in ranked] == ["c", "a", "b"]

    def test_week_bounds_sunday_to_saturday(self):
        # Wednesday 2025-01-15
        start, end = week_bounds(datetime(2025, 1, 15, 13, 30))
        assert start == datetime(2025, 1, 12)
        assert end == datetime(2025, 1, 18, 23, 59, 59, 999000)

    def test_week_bounds_on_sunday(self):
        start, _ = week_bounds(datetime(2025, 1, 12, 8, 0))
        assert start == datetime(2025, 1, 12)


class TestMatchTransitions:
    """Allowed lifecycle moves."""

    @pytest.mark.parametrize("current,requested", [
        ("scheduled", "scheduled"),
        ("scheduled", "in_progress"),
        ("in_progress", "in_progress"),
        ("in_progress", "completed"),
        ("completed", "completed"),
    ])
    def test_allowed(self, current, requested):
        check_transition(current, requested)

    @pytest.mark.parametrize("current,requested", [
        ("scheduled", "completed"),
        ("in_progress", "scheduled"),
        ("completed", "scheduled"),
        ("completed", "in_progress"),
    ])
    def test_rejected(self, current, requested):
        with pytest.raises(ValidationError):
            check_transition(current, requested)


class TestRankingService:
    """RankingService against the database."""

    @pytest.fixture
    def league(self, db_session: Session):
        home = make_team(db_session, "local-team-a", "Aces")
        away = make_team(db_session, "local-team-b", "Bulls")
        nba_home = make_team(db_session, "nba-1", "Atlanta Hawks", league="nba", nba_team_id=1)
        nba_away = make_team(db_session, "nba-2", "Boston Celtics", league="nba", nba_team_id=2)
        scorer = make_player(db_session, "local-player-1", "Lia", "Shooter", home)
        big = make_player(db_session, "local-player-2", "Max", "Center", away)
        bench = make_player(db_session, "local-player-3", "Noa", "Bench", away)
        nba_star = make_player(db_session, "nba-player-9", "Star", "Guard", nba_home, nba_player_id=9)

        first = make_match(db_session, "local-match-1", home, away, status="completed",
                           match_date=datetime(2025, 1, 5, 19, 0))
        second = make_match(db_session, "local-match-2", home, away, status="in_progress",
                            match_date=datetime(2025, 1, 12, 19, 0))
        future = make_match(db_session, "local-match-3", home, away, status="scheduled",
                            match_date=datetime(2025, 1, 19, 19, 0))
        nba_game = make_match(db_session, "nba-game-5", nba_home, nba_away, status="completed", nba_game_id=5)

        make_stats(db_session, first, scorer, points=20, offensive_rebounds=1, defensive_rebounds=3,
                   field_goals_made=8, field_goals_attempted=16, three_pointers_made=1,
                   three_pointers_attempted=3, free_throws_made=3, free_throws_attempted=4,
                   turnovers=2, minutes_played=30.0)
        make_stats(db_session, second, scorer, points=25, offensive_rebounds=0, defensive_rebounds=2,
                   field_goals_made=10, field_goals_attempted=18, three_pointers_made=2,
                   three_pointers_attempted=5, free_throws_made=3, free_throws_attempted=3,
                   turnovers=1, minutes_played=32.5)
        make_stats(db_session, future, scorer, points=99)
        make_stats(db_session, first, big, points=8, offensive_rebounds=6, defensive_rebounds=9, blocks=4)
        make_stats(db_session, nba_game, nba_star, points=40)
        db_session.commit()
        return {"scorer": scorer, "big": big, "bench": bench, "nba_star": nba_star}

    def test_players_without_rows_never_appear(self, db_session: Session, league):
        rows = RankingService(db_session).compute_rankings(limit=100)
        ids = {row["id"] for row in rows}
        assert league["bench"].id not in ids
        assert ids == {"local-player-1", "local-player-2", "nba-player-9"}

    def test_league_filter(self, db_session: Session, league):
        rows = RankingService(db_session).compute_rankings(category="points", league="local")
        assert [row["id"] for row in rows] == ["local-player-1", "local-player-2"]
        assert rows[0]["games_played"] == 3
        assert rows[0]["team_name"] == "Aces"

    def test_rebounds_category(self, db_session: Session, league):
        rows = RankingService(db_session).compute_rankings(category="rebounds", league="local")
        assert rows[0]["id"] == "local-player-2"
        assert rows[0]["avg_rebounds"] == 15.0

    def test_player_report(self, db_session: Session, league):
        report = RankingService(db_session).player_report("local-player-1")
        summary = report["summary"]

        # the scheduled match is excluded
        assert summary["games_played"] == 2
        assert summary["totals"]["points"] == 45
        assert summary["totals"]["rebounds"] == 6
        assert summary["averages"]["points"] == 22.5
        assert summary["averages"]["minutes"] == 31.3
        assert summary["percentages"] == {"fg": 53, "p3": 38, "ft": 86}
        assert [h["points"] for h in report["history"]] == [20, 25]
        assert report["history"][0]["opponent"] == "Bulls"

    def test_player_report_opponent_for_away_side(self, db_session: Session, league):
        report = RankingService(db_session).player_report("local-player-2")
        assert [h["opponent"] for h in report["history"]] == ["Aces"]

    def test_player_report_after_transfer(self, db_session: Session, league):
        new_team = make_team(db_session, "local-team-c", "Comets")
        league["scorer"].team_id = new_team.id
        db_session.commit()

        report = RankingService(db_session).player_report("local-player-1")
        # old matches name no opponent instead of the player's former team
        assert [h["opponent"] for h in report["history"]] == [None, None]
        assert report["summary"]["games_played"] == 2

    def test_player_report_without_games(self, db_session: Session, league):
        report = RankingService(db_session).player_report("local-player-3")
        assert report["summary"]["games_played"] == 0
        assert report["summary"]["averages"]["points"] == 0
        assert report["summary"]["percentages"]["fg"] == 0
        assert report["history"] == []

    def test_player_report_unknown_player(self, db_session: Session):
        with pytest.raises(NotFoundError):
            RankingService(db_session).player_report("local-player-ghost")

    def test_weekly_report_window(self, db_session: Session, league):
        report = RankingService(db_session).weekly_report(league="local", now=datetime(2025, 1, 14, 10, 0))
        assert report["week_start"] == "2025-01-12T00:00:00"
        assert [m["id"] for m in report["matches"]] == ["local-match-2"]
        assert report["rankings"]["top_scorers"][0]["id"] == "local-player-1"
        assert len(report["rankings"]["top_blockers"]) <= 5

    def test_dashboard_summary(self, db_session: Session, league):
        summary = RankingService(db_session).dashboard_summary()
        assert summary["total_teams"] == 4
        assert summary["total_players"] == 4
        assert summary["total_matches"] == 2
        assert summary["matches_in_progress"] == 1
        assert [m["id"] for m in summary["recent_matches"]] == ["local-match-3", "local-match-2", "local-match-1"]
