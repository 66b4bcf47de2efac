"""
Box-score formulas shared by the stats, ranking and report services.

Rating (one player, one match)::

    (points + total_rebounds + assists + steals + blocks)
    - (missed FG + missed 3PT + missed FT + turnovers + personal_fouls)

Global score (per-game averages normalised against 30 pts, 15 reb, 10 ast,
3 stl, 3 blk, each weighted 20)::

    (pts/30)*20 + (reb/15)*20 + (ast/10)*20 + (stl/3)*20 + (blk/3)*20

The global score is not clamped; beating every benchmark yields more than 100.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

# (benchmark, weight) per averaged category
GLOBAL_SCORE_BENCHMARKS = {
    "avg_points": (30.0, 20.0),
    "avg_rebounds": (15.0, 20.0),
    "avg_assists": (10.0, 20.0),
    "avg_steals": (3.0, 20.0),
    "avg_blocks": (3.0, 20.0),
}


def round1(value: Optional[float]) -> float:
    """Round half away from zero to one decimal place."""
    if value is None:
        return 0.0
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def percentage(made: int, attempted: int) -> int:
    """Whole-number shooting percentage; 0 when nothing was attempted."""
    if not attempted:
        return 0
    return int(Decimal(100 * made / attempted).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def total_rebounds(stats) -> int:
    return (stats.offensive_rebounds or 0) + (stats.defensive_rebounds or 0)


def compute_rating(stats) -> int:
    """Rating of a single box score (see module docstring)."""
    positive = (
        (stats.points or 0)
        + total_rebounds(stats)
        + (stats.assists or 0)
        + (stats.steals or 0)
        + (stats.blocks or 0)
    )
    missed = (
        ((stats.field_goals_attempted or 0) - (stats.field_goals_made or 0))
        + ((stats.three_pointers_attempted or 0) - (stats.three_pointers_made or 0))
        + ((stats.free_throws_attempted or 0) - (stats.free_throws_made or 0))
    )
    negative = missed + (stats.turnovers or 0) + (stats.personal_fouls or 0)
    return positive - negative


def compute_global_score(
    avg_points: float,
    avg_rebounds: float,
    avg_assists: float,
    avg_steals: float,
    avg_blocks: float,
) -> float:
    """Composite score over the five per-game averages, one decimal."""
    averages = {
        "avg_points": avg_points,
        "avg_rebounds": avg_rebounds,
        "avg_assists": avg_assists,
        "avg_steals": avg_steals,
        "avg_blocks": avg_blocks,
    }
    score = sum(
        (averages[key] / benchmark) * weight
        for key, (benchmark, weight) in GLOBAL_SCORE_BENCHMARKS.items()
    )
    return round1(score)
