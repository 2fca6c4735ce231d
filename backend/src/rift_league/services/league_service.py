"""League business logic: creation, membership, draft, scheduling, scoring."""

import logging
from typing import Optional

from rift_league.models.league import (
    DEFAULT_MAX_TEAMS,
    DEFAULT_WEEKS_PER_SEASON,
    DraftStatus,
    League,
    Matchup,
    Standing,
)
from rift_league.models.team import FantasyTeam
from rift_league.repositories.document_store import LEAGUES, DocumentStore
from rift_league.services.aggregate_locks import AggregateLocks, league_key, team_key
from rift_league.services.player_service import PlayerService
from rift_league.services.team_service import TeamService
from rift_league.utils.region_normalizer import DEFAULT_REGIONS

logger = logging.getLogger(__name__)


class LeagueService:
    """In-memory league registry persisted to the ``leagues`` collection.

    Collaborators are passed in explicitly; team and player lookups made
    while scoring go through ``team_service`` and ``player_service``.
    """

    def __init__(
        self,
        store: DocumentStore,
        team_service: TeamService,
        player_service: PlayerService,
        locks: Optional[AggregateLocks] = None,
    ):
        self._store = store
        self.team_service = team_service
        self.player_service = player_service
        self.locks = locks or team_service.locks
        self._leagues: dict[str, League] = {}

    def load(self) -> int:
        """Load stored leagues and re-derive each player pool."""
        self._leagues = {}
        for doc in self._store.find_all(LEAGUES):
            league = League.from_dict(doc)
            # Teams that point at this league but are missing from its list
            for team in self.team_service.get_teams_by_league(league.id):
                if team.id not in league.teams and not league.is_full:
                    league.teams.append(team.id)
            self._refresh_pool(league)
            self._leagues[league.id] = league
        logger.info(f"Loaded {len(self._leagues)} leagues")
        return len(self._leagues)

    def save_league(self, league: League) -> None:
        self._leagues[league.id] = league
        self._store.save(LEAGUES, league.to_dict())

    def _refresh_pool(self, league: League) -> int:
        return league.initialize_player_pool(
            self.player_service.get_players_for_regions(league.regions)
        )

    def create_league(
        self,
        name: str,
        max_teams: int = DEFAULT_MAX_TEAMS,
        creator_id: Optional[str] = None,
        description: str = "",
        is_public: bool = True,
        regions: Optional[list[str]] = None,
    ) -> League:
        league = League(
            name=name,
            max_teams=max_teams,
            creator_id=creator_id,
            description=description,
            is_public=is_public,
            regions=list(regions or DEFAULT_REGIONS),
        )
        self._refresh_pool(league)
        self.save_league(league)
        logger.info(f"Created league {league.id} ({name}), creator {creator_id}")
        return league

    def delete_league(self, league_id: str) -> bool:
        league = self._leagues.pop(league_id, None)
        if league is None:
            return False
        for team in self.team_service.get_teams_by_league(league_id):
            self.team_service.delete_team(team.id)
        return self._store.delete(LEAGUES, league_id)

    # -- Lookups -----------------------------------------------------------

    def get_league(self, league_id: str) -> Optional[League]:
        return self._leagues.get(league_id)

    def get_all_leagues(self) -> list[League]:
        return list(self._leagues.values())

    def get_league_by_name(self, name: str) -> Optional[League]:
        return next((lg for lg in self._leagues.values() if lg.name == name), None)

    def get_leagues_by_user(self, user_id: str) -> list[League]:
        if not user_id:
            return []
        return [lg for lg in self._leagues.values() if lg.is_member(user_id)]

    def get_league_by_team_id(self, team_id: str) -> Optional[League]:
        return next((lg for lg in self._leagues.values() if team_id in lg.teams), None)

    def get_league_teams(self, league_id: str) -> list[FantasyTeam]:
        league = self._leagues.get(league_id)
        if league is None:
            return []
        teams = (self.team_service.get_team(tid) for tid in league.teams)
        return [t for t in teams if t is not None]

    # -- Membership --------------------------------------------------------

    def is_member_of_league(self, league_id: str, user_id: str) -> bool:
        league = self._leagues.get(league_id)
        return league is not None and league.is_member(user_id)

    def add_team_to_league(self, league_id: str, team_id: str) -> bool:
        """Attach an existing unattached team; its owner becomes a member."""
        league = self._leagues.get(league_id)
        team = self.team_service.get_team(team_id)
        if league is None or team is None or team.league_id:
            return False
        with self.locks.hold(league_key(league_id), team_key(team_id)):
            if not league.add_team(team):
                return False
            league.add_member(team.user_id)
            self.team_service.save_team(team)
            self.save_league(league)
        return True

    def remove_team_from_league(self, league_id: str, team_id: str) -> bool:
        """Detach a team from a league, keeping the team and its roster.

        The team's owner stops being a member unless they created the league.
        """
        league = self._leagues.get(league_id)
        if league is None:
            return False
        team = self.team_service.get_team(team_id)
        with self.locks.hold(league_key(league_id), team_key(team_id)):
            if not league.remove_team(team_id):
                return False
            if team is not None:
                team.league_id = None
                if team.user_id != league.creator_id:
                    league.remove_member(team.user_id)
                self.team_service.save_team(team)
            self.save_league(league)
        logger.info(f"Removed team {team_id} from league {league_id}")
        return True

    def join_league(self, league_id: str, user_id: str, owner: str, team_name: str) -> FantasyTeam:
        """Create a team for ``user_id`` in a league and make them a member.

        Raises:
            LookupError: If the league does not exist
            ValueError: If the league is full or the user already has a team in it
        """
        league = self._leagues.get(league_id)
        if league is None:
            raise LookupError(f"League {league_id} not found")

        with self.locks.hold(league_key(league_id)):
            if league.is_full:
                raise ValueError(f"League is full ({len(league.teams)}/{league.max_teams})")
            if any(t.user_id == user_id for t in self.get_league_teams(league_id)):
                raise ValueError("You already have a team in this league")

            league.add_member(user_id)
            team = self.team_service.create_team(team_name, owner, user_id, league_id)
            league.add_team(team)
            self.team_service.save_team(team)
            self.save_league(league)

        logger.info(f"User {user_id} joined league {league_id} with team {team.id}")
        return team

    # -- Draft -------------------------------------------------------------

    def drafted_player_ids(self, league_id: str) -> set[str]:
        """Every player id sitting on any roster in the league, bench included."""
        return {
            player_id
            for team in self.get_league_teams(league_id)
            for player_id in team.roster.player_ids()
        }

    def draft_player(self, league_id: str, team_id: str, player_id: str, slot: str) -> FantasyTeam:
        """Put a pool player on a league team's roster, once per league.

        Raises:
            LookupError: If the league, the team (within the league) or the player does not exist
            ValueError: If the player is outside the pool, already drafted, or
                does not fit ``slot``
        """
        league = self._leagues.get(league_id)
        if league is None:
            raise LookupError(f"League {league_id} not found")
        team = self.team_service.get_team(team_id)
        if team is None or team_id not in league.teams:
            raise LookupError(f"Team {team_id} is not in league {league_id}")
        player = self.player_service.get_player(player_id)
        if player is None:
            raise LookupError(f"Player {player_id} not found")

        with self.locks.hold(league_key(league_id), team_key(team_id)):
            if player_id not in league.player_pool:
                raise ValueError(f"{player.name} is not in this league's player pool")
            if player_id in self.drafted_player_ids(league_id):
                raise ValueError(f"{player.name} has already been drafted")
            if not team.add_player(player, slot):
                raise ValueError(f"Cannot add {player.name} to {slot} position")
            self.team_service.save_team(team)

        logger.info(f"Team {team_id} drafted {player_id} into {slot} in league {league_id}")
        return team

    def get_draft_status(self, league_id: str) -> Optional[DraftStatus]:
        league = self._leagues.get(league_id)
        if league is None:
            return None
        with self.locks.hold(league_key(league_id)):
            drafted = self.drafted_player_ids(league_id)
            return DraftStatus(
                available_player_ids=[pid for pid in league.player_pool if pid not in drafted],
                picks_by_team={
                    team.id: len(team.roster.active_player_ids())
                    for team in self.get_league_teams(league_id)
                },
            )

    # -- Schedule, scores, standings --------------------------------------

    def generate_schedule(self, league_id: str, weeks: int = DEFAULT_WEEKS_PER_SEASON) -> bool:
        league = self._leagues.get(league_id)
        if league is None:
            return False
        with self.locks.hold(league_key(league_id)):
            if not league.generate_schedule(weeks):
                return False
            self.save_league(league)
        return True

    def get_week_matchups(self, league_id: str, week: int) -> list[Matchup]:
        league = self._leagues.get(league_id)
        return league.get_week_matchups(week) if league else []

    def calculate_week_scores(self, league_id: str, week: int) -> bool:
        league = self._leagues.get(league_id)
        if league is None:
            return False

        with self.locks.hold(league_key(league_id), *(team_key(t) for t in league.teams)):
            if not league.calculate_week_scores(
                week, self.team_service.get_team, self.player_service.get_player
            ):
                return False
            self._persist_scores(league)
        return True

    def recalculate_completed_weeks(self, league_id: str) -> int:
        """Re-score every completed week after player stats changed.

        Returns:
            Number of weeks recalculated
        """
        league = self._leagues.get(league_id)
        if league is None:
            return 0

        weeks = [
            week_idx + 1
            for week_idx, matchups in enumerate(league.schedule)
            if matchups and all(m.completed for m in matchups)
        ]
        with self.locks.hold(league_key(league_id), *(team_key(t) for t in league.teams)):
            for week in weeks:
                league.calculate_week_scores(
                    week, self.team_service.get_team, self.player_service.get_player
                )
            league.update_standings(self.team_service.get_team)
            self._persist_scores(league)
        return len(weeks)

    def _persist_scores(self, league: League) -> None:
        for team in self.get_league_teams(league.id):
            self.team_service.save_team(team)
        self.save_league(league)

    def update_standings(self, league_id: str) -> list[Standing]:
        league = self._leagues.get(league_id)
        if league is None:
            return []
        with self.locks.hold(league_key(league_id)):
            standings = league.update_standings(self.team_service.get_team)
            self.save_league(league)
        return standings

    def advance_week(self, league_id: str) -> Optional[int]:
        league = self._leagues.get(league_id)
        if league is None:
            return None
        with self.locks.hold(league_key(league_id)):
            week = league.advance_week()
            if week > 1:
                league.update_standings(self.team_service.get_team)
            self.save_league(league)
        return week

    def refresh_player_pool(self, league_id: str) -> Optional[int]:
        league = self._leagues.get(league_id)
        if league is None:
            return None
        with self.locks.hold(league_key(league_id)):
            size = self._refresh_pool(league)
            self.save_league(league)
        return size
