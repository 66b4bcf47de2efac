"""
Box-score mutation bodies.

Two shapes are accepted, told apart by ``action``:

- set (default): ``{"player_id": ..., "points": 12, "assists": 3}``
- increment: ``{"action": "increment", "player_id": ..., "stat": "points", "value": 2}``

On ``/stats/{id}`` the row is already identified, so ``player_id`` is omitted.
"""
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import Discriminator, Field, Tag, TypeAdapter

from app.schemas.common import RequestModel

IncrementableStat = Literal[
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
]


class StatFields(RequestModel):
    """Every box-score field, all optional and non-negative."""
    points: Optional[int] = Field(None, ge=0)
    offensive_rebounds: Optional[int] = Field(None, ge=0)
    defensive_rebounds: Optional[int] = Field(None, ge=0)
    assists: Optional[int] = Field(None, ge=0)
    steals: Optional[int] = Field(None, ge=0)
    blocks: Optional[int] = Field(None, ge=0)
    turnovers: Optional[int] = Field(None, ge=0)
    personal_fouls: Optional[int] = Field(None, ge=0)
    minutes_played: Optional[float] = Field(None, ge=0)
    field_goals_made: Optional[int] = Field(None, ge=0)
    field_goals_attempted: Optional[int] = Field(None, ge=0)
    three_pointers_made: Optional[int] = Field(None, ge=0)
    three_pointers_attempted: Optional[int] = Field(None, ge=0)
    free_throws_made: Optional[int] = Field(None, ge=0)
    free_throws_attempted: Optional[int] = Field(None, ge=0)

    def supplied_stats(self) -> dict:
        """Stat fields present in the request body with a value."""
        return {
            name: value
            for name, value in self.model_dump(exclude_unset=True, exclude_none=True).items()
            if name in StatFields.model_fields
        }


class StatsUpdate(StatFields):
    action: Literal["set"] = "set"


class StatsUpsert(StatsUpdate):
    player_id: str = Field(..., min_length=1)


class StatIncrementUpdate(RequestModel):
    action: Literal["increment"]
    stat: IncrementableStat
    value: int


class StatIncrement(StatIncrementUpdate):
    player_id: str = Field(..., min_length=1)


def _action_of(value: Any) -> str:
    if isinstance(value, dict):
        return value.get("action", "set")
    return getattr(value, "action", "set")


# POST /matches/{id}/stats
MatchStatMutation = Annotated[
    Union[Annotated[StatsUpsert, Tag("set")], Annotated[StatIncrement, Tag("increment")]],
    Discriminator(_action_of),
]

# PUT /stats/{id}
StatRowMutation = Annotated[
    Union[Annotated[StatsUpdate, Tag("set")], Annotated[StatIncrementUpdate, Tag("increment")]],
    Discriminator(_action_of),
]

match_stat_mutation_adapter = TypeAdapter(MatchStatMutation)
stat_row_mutation_adapter = TypeAdapter(StatRowMutation)
