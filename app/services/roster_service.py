"""
Team and player management.

Local teams and players are created and edited through the API; NBA-league
rows come from the balldontlie sync and are rejected here with an
OwnershipError.
"""
import logging
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import OwnershipError, ValidationError
from app.models import League, Player, Team
from app.repositories import PlayerRepository, TeamRepository
from app.schemas.players import PlayerCreate, PlayerUpdate
from app.schemas.teams import TeamCreate, TeamUpdate
from app.services.guards import ensure_local

logger = logging.getLogger(__name__)

# Player fields that may be set back to null
NULLABLE_PLAYER_FIELDS = {"jersey_number", "position", "age", "photo_url"}


class RosterService:
    """CRUD for teams and players with league-ownership checks."""

    def __init__(self, db: Session):
        self.db = db
        self.teams = TeamRepository(db)
        self.players = PlayerRepository(db)

    # ========================================================================
    # Teams
    # ========================================================================

    def list_teams(self, league: Optional[str] = None) -> List[Team]:
        return self.teams.find_by_league(league)

    def get_team(self, team_id: str) -> Team:
        return self.teams.get_or_404(team_id)

    def create_team(self, payload: TeamCreate) -> Team:
        team = self.teams.create(
            id=f"local-team-{uuid.uuid4()}",
            name=payload.name,
            logo_url=payload.logo_url or None,
            league=League.LOCAL.value,
        )
        self.teams.save()
        logger.info(f"Created team {team.id} ({team.name})")
        return self.teams.refresh(team)

    def update_team(self, team_id: str, payload: TeamUpdate) -> Team:
        team = self.teams.get_or_404(team_id)
        ensure_local(team, "NBA teams cannot be modified")

        updates = payload.model_dump(exclude_unset=True)
        if not updates:
            raise ValidationError("No changes provided")
        if "name" in updates and not updates["name"]:
            raise ValidationError("Team name is invalid")
        if "logo_url" in updates:
            updates["logo_url"] = updates["logo_url"] or None

        self.teams.update(team, **updates)
        self.teams.save()
        return self.teams.refresh(team)

    def delete_team(self, team_id: str) -> None:
        """Delete a local team with its players, matches and their box scores."""
        team = self.teams.get_or_404(team_id)
        ensure_local(team, "NBA teams cannot be deleted")
        self.teams.delete(team)
        self.teams.save()
        logger.info(f"Deleted team {team_id}")

    # ========================================================================
    # Players
    # ========================================================================

    def list_players(self, league: Optional[str] = None, team_id: Optional[str] = None) -> List[Player]:
        return self.players.find_filtered(league=league, team_id=team_id)

    def get_player(self, player_id: str) -> Player:
        return self.players.get_or_404(player_id)

    def _local_team(self, team_id: str) -> Team:
        team = self.teams.get_or_404(team_id)
        if team.league == League.NBA.value:
            raise OwnershipError("Players cannot be added to an NBA team")
        return team

    def create_player(self, payload: PlayerCreate) -> Player:
        team = self._local_team(payload.team_id)
        player = self.players.create(
            id=f"local-player-{uuid.uuid4()}",
            first_name=payload.first_name,
            last_name=payload.last_name,
            jersey_number=payload.jersey_number,
            position=payload.position.value if payload.position else None,
            team_id=team.id,
            age=payload.age,
            photo_url=payload.photo_url,
            league=League.LOCAL.value,
        )
        self.players.save()
        logger.info(f"Created player {player.id} on team {team.id}")
        return self.players.refresh(player)

    def update_player(self, player_id: str, payload: PlayerUpdate) -> Player:
        player = self.players.get_or_404(player_id)
        ensure_local(player, "NBA players cannot be modified")

        updates = payload.model_dump(exclude_unset=True)
        if not updates:
            raise ValidationError("No changes provided")

        for field, value in updates.items():
            if value is None and field not in NULLABLE_PLAYER_FIELDS:
                raise ValidationError(f"{field} cannot be null")

        if "team_id" in updates:
            self._local_team(updates["team_id"])
        if updates.get("position") is not None:
            updates["position"] = updates["position"].value

        self.players.update(player, **updates)
        self.players.save()
        return self.players.refresh(player)

    def delete_player(self, player_id: str) -> None:
        player = self.players.get_or_404(player_id)
        ensure_local(player, "NBA players cannot be deleted")
        self.players.delete(player)
        self.players.save()
        logger.info(f"Deleted player {player_id}")
