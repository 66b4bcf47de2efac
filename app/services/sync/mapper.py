"""Field mapping from balldontlie payloads to local rows.

One mapping function per entity, shared by first import and re-sync so the
upsert path is a single idempotent merge keyed by the deterministic ids below:

- team:   nba-<team id>
- player: nba-player-<player id>
- match:  nba-game-<game id>
- stats:  nba-stat-<game id>-<player id>
"""
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from app.models import League, MatchStatus

# balldontlie position codes -> local positions
POSITION_MAP = {
    "G": "PG",
    "F": "SF",
    "C": "C",
    "G-F": "SG",
    "F-G": "SF",
    "F-C": "PF",
    "C-F": "C",
}

LEADING_INT = re.compile(r"(\d+)")

# balldontlie stat keys -> PlayerStats columns
STAT_KEY_MAP = {
    "pts": "points",
    "oreb": "offensive_rebounds",
    "dreb": "defensive_rebounds",
    "ast": "assists",
    "stl": "steals",
    "blk": "blocks",
    "turnover": "turnovers",
    "pf": "personal_fouls",
    "fgm": "field_goals_made",
    "fga": "field_goals_attempted",
    "fg3m": "three_pointers_made",
    "fg3a": "three_pointers_attempted",
    "ftm": "free_throws_made",
    "fta": "free_throws_attempted",
}


def team_row_id(nba_team_id: int) -> str:
    return f"nba-{nba_team_id}"


def player_row_id(nba_player_id: int) -> str:
    return f"nba-player-{nba_player_id}"


def match_row_id(nba_game_id: int) -> str:
    return f"nba-game-{nba_game_id}"


def stats_row_id(nba_game_id: int, nba_player_id: int) -> str:
    return f"nba-stat-{nba_game_id}-{nba_player_id}"


def parse_minutes(value: Any) -> float:
    """
    Minutes played as a float.

    "MM:SS" -> MM + SS/60, otherwise the leading whole number ("35.5" -> 35),
    anything else -> 0.
    """
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)

    text = str(value).strip()
    if ":" in text:
        minutes, _, seconds = text.partition(":")
        try:
            return int(minutes) + int(seconds) / 60
        except ValueError:
            return 0.0
    leading = LEADING_INT.match(text)
    return float(leading.group(1)) if leading else 0.0


def parse_jersey(value: Any) -> Optional[int]:
    """Jersey number as an int in 0-99, otherwise None."""
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return number if 0 <= number <= 99 else None


def map_position(code: Optional[str]) -> Optional[str]:
    if not code:
        return None
    return POSITION_MAP.get(code.strip().upper())


def map_game_status(game: Dict[str, Any]) -> str:
    """'Final' -> completed, a started period -> in_progress, else scheduled."""
    if game.get("status") == "Final":
        return MatchStatus.COMPLETED.value
    if (game.get("period") or 0) > 0:
        return MatchStatus.IN_PROGRESS.value
    return MatchStatus.SCHEDULED.value


def parse_game_date(game: Dict[str, Any]) -> datetime:
    """Tip-off time (or game date at midnight) as naive UTC."""
    raw = game.get("datetime") or game.get("date")
    parsed = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def map_team(team: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "name": team.get("full_name") or team.get("name") or f"NBA team {team['id']}",
        "league": League.NBA.value,
        "nba_team_id": team["id"],
    }


def map_game(game: Dict[str, Any]) -> Dict[str, Any]:
    home_id = game.get("home_team_id") or game["home_team"]["id"]
    visitor_id = game.get("visitor_team_id") or game["visitor_team"]["id"]
    return {
        "home_team_id": team_row_id(home_id),
        "away_team_id": team_row_id(visitor_id),
        "match_date": parse_game_date(game),
        "status": map_game_status(game),
        "home_score": game.get("home_team_score") or 0,
        "away_score": game.get("visitor_team_score") or 0,
        "league": League.NBA.value,
        "nba_game_id": game["id"],
    }


def map_player(player: Dict[str, Any], nba_team_id: int) -> Dict[str, Any]:
    return {
        "first_name": player.get("first_name") or "",
        "last_name": player.get("last_name") or "",
        "jersey_number": parse_jersey(player.get("jersey_number")),
        "position": map_position(player.get("position")),
        "team_id": team_row_id(nba_team_id),
        "league": League.NBA.value,
        "nba_player_id": player["id"],
    }


def map_stat_line(stat: Dict[str, Any]) -> Dict[str, Any]:
    row = {column: int(stat.get(key) or 0) for key, column in STAT_KEY_MAP.items()}
    row["minutes_played"] = parse_minutes(stat.get("min"))
    return row
