"""
Model to JSON-ready dict conversion shared by routes and services.
"""
from datetime import datetime
from typing import Optional

from app.models import Team, Player, Match, PlayerStats, STAT_FIELDS
from app.services.stat_formulas import compute_rating, total_rebounds


def iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def team_ref(team: Optional[Team]) -> Optional[dict]:
    """Short team reference embedded in matches."""
    if team is None:
        return None
    return {"id": team.id, "name": team.name, "logo_url": team.logo_url}


def team_to_dict(team: Team) -> dict:
    return {
        "id": team.id,
        "name": team.name,
        "logo_url": team.logo_url,
        "league": team.league,
        "nba_team_id": team.nba_team_id,
        "created_at": iso(team.created_at),
    }


def player_summary(player: Optional[Player]) -> Optional[dict]:
    """Player fields shown next to a box score."""
    if player is None:
        return None
    return {
        "id": player.id,
        "first_name": player.first_name,
        "last_name": player.last_name,
        "jersey_number": player.jersey_number,
        "position": player.position,
        "team_id": player.team_id,
        "age": player.age,
    }


def player_to_dict(player: Player, include_team: bool = True) -> dict:
    data = {
        "id": player.id,
        "first_name": player.first_name,
        "last_name": player.last_name,
        "jersey_number": player.jersey_number,
        "position": player.position,
        "team_id": player.team_id,
        "league": player.league,
        "age": player.age,
        "photo_url": player.photo_url,
        "nba_player_id": player.nba_player_id,
        "created_at": iso(player.created_at),
    }
    if include_team:
        data["team"] = team_to_dict(player.team) if player.team else None
    return data


def match_to_dict(match: Match) -> dict:
    """Match with both team references resolved."""
    return {
        "id": match.id,
        "home_team_id": match.home_team_id,
        "away_team_id": match.away_team_id,
        "match_date": iso(match.match_date),
        "status": match.status,
        "home_score": match.home_score,
        "away_score": match.away_score,
        "league": match.league,
        "nba_game_id": match.nba_game_id,
        "has_access_code": bool(match.access_code),
        "sheet_url": match.sheet_url,
        "created_at": iso(match.created_at),
        "updated_at": iso(match.updated_at),
        "home_team": team_ref(match.home_team),
        "away_team": team_ref(match.away_team),
    }


def stats_to_dict(stats: PlayerStats, include_player: bool = True, include_match: bool = False) -> dict:
    """Box-score row with derived ``total_rebounds`` and ``rating``."""
    data = {
        "id": stats.id,
        "player_id": stats.player_id,
        "match_id": stats.match_id,
    }
    for field in STAT_FIELDS:
        data[field] = getattr(stats, field)
    data["total_rebounds"] = total_rebounds(stats)
    data["rating"] = compute_rating(stats)
    data["updated_at"] = iso(stats.updated_at)

    if include_player:
        data["player"] = player_summary(stats.player)
    if include_match:
        data["match"] = match_to_dict(stats.match) if stats.match else None
    return data
