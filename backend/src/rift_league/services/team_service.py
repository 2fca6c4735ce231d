"""Fantasy team registry and roster mutations."""

import logging
import uuid
from typing import Optional

import pandas as pd

from rift_league.models.team import FantasyTeam, RosterSlot
from rift_league.repositories.document_store import FANTASY_TEAMS, DocumentStore
from rift_league.services.aggregate_locks import AggregateLocks, team_key
from rift_league.services.player_service import PlayerService

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "Position",
    "Player Name",
    "Team",
    "Region",
    "Kills",
    "Deaths",
    "Assists",
    "CS",
    "Vision Score",
    "Fantasy Points",
]


class TeamService:
    """In-memory team registry persisted to the ``fantasy_teams`` collection."""

    def __init__(
        self,
        store: DocumentStore,
        player_service: PlayerService,
        locks: Optional[AggregateLocks] = None,
    ):
        self._store = store
        self.player_service = player_service
        self.locks = locks or AggregateLocks()
        self._teams: dict[str, FantasyTeam] = {}

    def load(self) -> int:
        self._teams = {
            doc["id"]: FantasyTeam.from_dict(doc) for doc in self._store.find_all(FANTASY_TEAMS)
        }
        logger.info(f"Loaded {len(self._teams)} fantasy teams")
        return len(self._teams)

    def save_team(self, team: FantasyTeam) -> None:
        self._teams[team.id] = team
        self._store.save(FANTASY_TEAMS, team.to_dict())

    def create_team(
        self,
        name: str,
        owner: str,
        user_id: Optional[str] = None,
        league_id: Optional[str] = None,
    ) -> FantasyTeam:
        team = FantasyTeam(
            id=f"team_{uuid.uuid4().hex[:12]}",
            name=name,
            owner=owner,
            user_id=user_id,
            league_id=league_id,
        )
        self.save_team(team)
        logger.info(f"Created team {team.id} ({name}) for user {user_id}")
        return team

    def delete_team(self, team_id: str) -> bool:
        self._teams.pop(team_id, None)
        return self._store.delete(FANTASY_TEAMS, team_id)

    def get_team(self, team_id: str) -> Optional[FantasyTeam]:
        return self._teams.get(team_id)

    def get_teams_by_user(self, user_id: str) -> list[FantasyTeam]:
        return [t for t in self._teams.values() if t.user_id == user_id]

    def get_teams_by_league(self, league_id: str) -> list[FantasyTeam]:
        return [t for t in self._teams.values() if t.league_id == league_id]

    def add_player_to_team(self, team_id: str, player_id: str, slot: RosterSlot | str) -> bool:
        """Place a player on a team's roster and persist on success."""
        team = self._teams.get(team_id)
        player = self.player_service.get_player(player_id)
        if team is None or player is None:
            return False

        with self.locks.hold(team_key(team_id)):
            if not team.add_player(player, slot):
                return False
            self.save_team(team)
        return True

    def remove_player_from_team(self, team_id: str, player_id: str) -> bool:
        team = self._teams.get(team_id)
        if team is None:
            return False

        with self.locks.hold(team_key(team_id)):
            if not team.remove_player(player_id):
                return False
            self.save_team(team)
        return True

    def export_team_csv(self, team_id: str) -> Optional[str]:
        """CSV of the team's active players with their season stats."""
        team = self._teams.get(team_id)
        if team is None:
            return None

        rows = []
        for slot, player_id in team.roster.active_player_ids():
            player = self.player_service.get_player(player_id)
            if player is None:
                continue
            rows.append([
                slot.value,
                player.name,
                player.team,
                player.region,
                player.stats.kills,
                player.stats.deaths,
                player.stats.assists,
                player.stats.cs,
                player.stats.vision_score,
                round(player.fantasy_points, 2),
            ])

        return pd.DataFrame(rows, columns=EXPORT_COLUMNS).to_csv(index=False)
