"""Unit tests for the balldontlie field mapper."""
from datetime import datetime

import pytest

from app.services.sync import mapper


class TestParsers:
    """Minutes, jersey numbers, positions and statuses."""

    @pytest.mark.parametrize("raw,expected", [
        ("32:30", 32.5),
        ("07:06", 7.1),
        ("35", 35.0),
        ("35.5", 35.0),
        (28, 28.0),
        ("", 0.0),
        ("DNP", 0.0),
        (None, 0.0),
    ])
    def test_parse_minutes(self, raw, expected):
        assert mapper.parse_minutes(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw,expected", [("0", 0), ("23", 23), ("", None), (None, None), ("100", None), ("A1", None)])
    def test_parse_jersey(self, raw, expected):
        assert mapper.parse_jersey(raw) == expected

    @pytest.mark.parametrize("code,expected", [
        ("G", "PG"), ("F", "SF"), ("C", "C"), ("G-F", "SG"),
        ("F-G", "SF"), ("F-C", "PF"), ("C-F", "C"), ("", None), ("X", None),
    ])
    def test_map_position(self, code, expected):
        assert mapper.map_position(code) == expected

    @pytest.mark.parametrize("game,expected", [
        ({"status": "Final", "period": 4}, "completed"),
        ({"status": "3rd Qtr", "period": 3}, "in_progress"),
        ({"status": "2025-01-15T00:00:00Z", "period": 0}, "scheduled"),
    ])
    def test_map_game_status(self, game, expected):
        assert mapper.map_game_status(game) == expected


class TestEntityMappers:
    """One mapping per entity, with deterministic ids."""

    def test_map_game(self):
        game = {
            "id": 1001,
            "date": "2025-01-15",
            "datetime": "2025-01-16T00:30:00.000Z",
            "status": "Final",
            "period": 4,
            "home_team": {"id": 2, "full_name": "Boston Celtics"},
            "visitor_team": {"id": 14, "full_name": "Los Angeles Lakers"},
            "home_team_score": 110,
            "visitor_team_score": 104,
        }
        row = mapper.map_game(game)
        assert row["home_team_id"] == "nba-2"
        assert row["away_team_id"] == "nba-14"
        assert row["match_date"] == datetime(2025, 1, 16, 0, 30)
        assert row["status"] == "completed"
        assert (row["home_score"], row["away_score"]) == (110, 104)
        assert row["league"] == "nba"

    def test_map_game_date_only(self):
        row = mapper.map_game({"id": 1, "date": "2025-01-15", "home_team_id": 1, "visitor_team_id": 2})
        assert row["match_date"] == datetime(2025, 1, 15)
        assert row["status"] == "scheduled"

    def test_map_player(self):
        row = mapper.map_player(
            {"id": 434, "first_name": "Jayson", "last_name": "Tatum", "position": "F", "jersey_number": "0"},
            nba_team_id=2,
        )
        assert row == {
            "first_name": "Jayson",
            "last_name": "Tatum",
            "jersey_number": 0,
            "position": "SF",
            "team_id": "nba-2",
            "league": "nba",
            "nba_player_id": 434,
        }

    def test_map_stat_line(self):
        row = mapper.map_stat_line({
            "min": "36:00", "pts": 31, "oreb": 1, "dreb": 8, "ast": 5, "stl": 2, "blk": None,
            "turnover": 3, "pf": 2, "fgm": 11, "fga": 22, "fg3m": 4, "fg3a": 9, "ftm": 5, "fta": 6,
        })
        assert row["points"] == 31
        assert row["blocks"] == 0
        assert row["minutes_played"] == 36.0
        assert row["three_pointers_attempted"] == 9

    def test_row_ids(self):
        assert mapper.team_row_id(2) == "nba-2"
        assert mapper.player_row_id(434) == "nba-player-434"
        assert mapper.match_row_id(1001) == "nba-game-1001"
        assert mapper.stats_row_id(1001, 434) == "nba-stat-1001-434"
