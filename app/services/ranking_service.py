"""
Aggregation & ranking engine.

Rankings group every box-score row by player (optionally restricted to one
league), compute totals and per-game averages, derive the global score and
sort by the requested category. Players without rows never appear.

Ranking categories map to sort keys:

    points   -> avg_points        rebounds -> avg_rebounds
    assists  -> avg_assists       steals   -> avg_steals
    blocks   -> avg_blocks        global   -> global_score

Ties are broken by player id (ascending) so results are reproducible.

Also here: the per-player report, the weekly report and the dashboard summary.
"""
import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.models import League, Match, MatchStatus, Player, Team
from app.repositories import (
    MatchRepository,
    PlayerRepository,
    PlayerStatsRepository,
    TeamRepository,
)
from app.services.serializers import iso, match_to_dict, player_to_dict
from app.services.stat_formulas import (
    compute_global_score,
    percentage,
    round1,
    total_rebounds,
)

logger = logging.getLogger(__name__)

CATEGORY_SORT_KEYS = {
    "points": "avg_points",
    "rebounds": "avg_rebounds",
    "assists": "avg_assists",
    "steals": "avg_steals",
    "blocks": "avg_blocks",
    "global": "global_score",
}

# Weekly report sections, in category order
WEEKLY_SECTIONS = {
    "points": "top_scorers",
    "rebounds": "top_rebounders",
    "assists": "top_assisters",
    "steals": "top_stealers",
    "blocks": "top_blockers",
}

REPORT_STATUSES = (MatchStatus.COMPLETED.value, MatchStatus.IN_PROGRESS.value)


def build_ranking_row(aggregate: dict, player: Optional[Player]) -> dict:
    """
    Turn one grouped aggregate into a ranking row.

    ``player`` may be None when the id no longer resolves; identity fields then
    default to empty strings so the list length stays stable.
    """
    team = player.team if player is not None else None

    avg_points = round1(aggregate.get("avg_points"))
    avg_rebounds = round1((aggregate.get("avg_offensive_rebounds") or 0) + (aggregate.get("avg_defensive_rebounds") or 0))
    avg_assists = round1(aggregate.get("avg_assists"))
    avg_steals = round1(aggregate.get("avg_steals"))
    avg_blocks = round1(aggregate.get("avg_blocks"))

    return {
        "id": aggregate["player_id"],
        "first_name": player.first_name if player else "",
        "last_name": player.last_name if player else "",
        "jersey_number": player.jersey_number if player else None,
        "position": player.position if player else None,
        "team_name": team.name if team else "",
        "team_logo": team.logo_url if team else None,
        "league": player.league if player else League.LOCAL.value,
        "games_played": int(aggregate.get("games_played") or 0),
        "total_points": int(aggregate.get("sum_points") or 0),
        "total_rebounds": int((aggregate.get("sum_offensive_rebounds") or 0) + (aggregate.get("sum_defensive_rebounds") or 0)),
        "total_assists": int(aggregate.get("sum_assists") or 0),
        "total_steals": int(aggregate.get("sum_steals") or 0),
        "total_blocks": int(aggregate.get("sum_blocks") or 0),
        "avg_points": avg_points,
        "avg_rebounds": avg_rebounds,
        "avg_assists": avg_assists,
        "avg_steals": avg_steals,
        "avg_blocks": avg_blocks,
        "global_score": compute_global_score(avg_points, avg_rebounds, avg_assists, avg_steals, avg_blocks),
    }


def rank_rows(rows: List[dict], category: str, limit: int) -> List[dict]:
    """Sort descending by the category key (ties by id), truncate, number ranks from 1."""
    sort_key = CATEGORY_SORT_KEYS[category]
    ordered = sorted(rows, key=lambda row: row["id"])
    ordered.sort(key=lambda row: row[sort_key] or 0, reverse=True)
    return [dict(row, rank=position) for position, row in enumerate(ordered[:limit], start=1)]


def opponent_of(match: Match, team_id: Optional[str]) -> Optional[Team]:
    """
    The side facing ``team_id`` in a match.

    Stat rows do not record which team a player suited up for, so the
    player's current team is used. After a transfer, matches played for a
    former team involve neither side as "own" and yield None rather than a
    wrong opponent.
    """
    if team_id == match.home_team_id:
        return match.away_team
    if team_id == match.away_team_id:
        return match.home_team
    return None

def week_bounds(now: datetime) -> tuple:
    """Sunday 00:00 through Saturday 23:59:59.999 of the week containing ``now``."""
    days_since_sunday = (now.weekday() + 1) % 7
    week_start = (now - timedelta(days=days_since_sunday)).replace(hour=0, minute=0, second=0, microsecond=0)
    week_end = week_start + timedelta(days=6, hours=23, minutes=59, seconds=59, microseconds=999000)
    return week_start, week_end


class RankingService:
    """Read-side statistics: rankings, reports and dashboard counts."""

    def __init__(self, db: Session):
        self.db = db
        self.stats = PlayerStatsRepository(db)
        self.players = PlayerRepository(db)
        self.matches = MatchRepository(db)
        self.teams = TeamRepository(db)

    def compute_rankings(self, category: str = "points", league: Optional[str] = None, limit: int = 10) -> List[dict]:
        """
        Ranked players for a category.

        Args:
            category: One of CATEGORY_SORT_KEYS
            league: "local", "nba" or None for both
            limit: Maximum rows returned
        """
        aggregates = self.stats.aggregate_by_player(league=league)
        players = self.players.find_by_ids_with_team([a["player_id"] for a in aggregates])
        rows = [build_ranking_row(a, players.get(a["player_id"])) for a in aggregates]
        ranked = rank_rows(rows, category, limit)
        logger.debug(
            f"Ranked {len(ranked)} of {len(rows)} players by {category}",
            extra={"category": category, "league": league or "all"},
        )
        return ranked

    def player_report(self, player_id: str) -> dict:
        """
        Season report for one player over completed and in-progress matches.

        Returns:
            {player, summary: {games_played, totals, averages, percentages}, history}
        """
        player = self.players.get_or_404(player_id)
        rows = self.stats.find_for_player_report(player_id, REPORT_STATUSES)
        games = len(rows)

        totals = {
            "points": 0, "rebounds": 0, "assists": 0, "steals": 0, "blocks": 0, "turnovers": 0,
            "fgm": 0, "fga": 0, "pm3": 0, "pa3": 0, "ftm": 0, "fta": 0, "minutes": 0.0,
        }
        history = []
        for row in rows:
            totals["points"] += row.points
            totals["rebounds"] += total_rebounds(row)
            totals["assists"] += row.assists
            totals["steals"] += row.steals
            totals["blocks"] += row.blocks
            totals["turnovers"] += row.turnovers
            totals["fgm"] += row.field_goals_made
            totals["fga"] += row.field_goals_attempted
            totals["pm3"] += row.three_pointers_made
            totals["pa3"] += row.three_pointers_attempted
            totals["ftm"] += row.free_throws_made
            totals["fta"] += row.free_throws_attempted
            totals["minutes"] += float(row.minutes_played or 0)

            match = row.match
            opponent = opponent_of(match, player.team_id)
            history.append({
                "date": iso(match.match_date),
                "points": row.points,
                "opponent": opponent.name if opponent else None,
            })
        totals["minutes"] = round1(totals["minutes"])

        averaged = ("points", "rebounds", "assists", "steals", "blocks", "turnovers", "minutes")
        averages = {key: round1(totals[key] / games) if games else 0 for key in averaged}

        return {
            "player": player_to_dict(player),
            "summary": {
                "games_played": games,
                "totals": totals,
                "averages": averages,
                "percentages": {
                    "fg": percentage(totals["fgm"], totals["fga"]),
                    "p3": percentage(totals["pm3"], totals["pa3"]),
                    "ft": percentage(totals["ftm"], totals["fta"]),
                },
            },
            "history": history,
        }

    def weekly_report(self, league: Optional[str] = None, now: Optional[datetime] = None) -> dict:
        """Top five per category plus the matches of the current Sunday-Saturday week."""
        now = now or datetime.utcnow()
        week_start, week_end = week_bounds(now)

        rankings = {
            section: self.compute_rankings(category=category, league=league, limit=5)
            for category, section in WEEKLY_SECTIONS.items()
        }
        matches = self.matches.find_between(week_start, week_end, league=league)

        return {
            "generated_at": iso(now),
            "week_start": iso(week_start),
            "week_end": iso(week_end),
            "total_matches": len(matches),
            "rankings": rankings,
            "matches": [match_to_dict(match) for match in reversed(matches)],
        }

    def dashboard_summary(self) -> Dict:
        """Entity counts and the five most recent local matches."""
        return {
            "total_players": self.players.count(),
            "total_teams": self.teams.count(),
            "total_matches": self.matches.count_by_status(MatchStatus.COMPLETED.value),
            "matches_in_progress": self.matches.count_by_status(MatchStatus.IN_PROGRESS.value),
            "recent_matches": [
                match_to_dict(match)
                for match in self.matches.search(league=League.LOCAL.value, limit=5)
            ],
        }
