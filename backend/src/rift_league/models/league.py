"""League model: membership, round-robin schedule, weekly scoring, standings."""

import logging
import uuid
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Mapping, Optional

from rift_league.models.player import Player
from rift_league.models.team import REQUIRED_POSITIONS, FantasyTeam
from rift_league.utils.region_normalizer import DEFAULT_REGIONS, player_in_any_region

logger = logging.getLogger(__name__)

DEFAULT_WEEKS_PER_SEASON = 9
DEFAULT_MAX_TEAMS = 10

TeamLookup = Callable[[str], Optional[FantasyTeam]]
PlayerLookup = Callable[[str], Optional[Player]]


@dataclass
class Matchup:
    """One head-to-head pairing in a given week."""

    id: str  # "week{w}_match{i}", both 1-based
    week: int
    home_team: str
    away_team: str
    home_score: float = 0.0
    away_score: float = 0.0
    completed: bool = False


@dataclass
class Standing:
    """A team's record within the league."""

    team_id: str
    wins: int = 0
    losses: int = 0
    total_points: float = 0.0


@dataclass
class DraftStatus:
    """Who is still available in a league's pool and how far each team has drafted."""

    available_player_ids: list[str]
    # team id -> filled scoring slots (positions and FLEX, bench excluded)
    picks_by_team: dict[str, int]

    @property
    def is_complete(self) -> bool:
        """Done once the pool is exhausted or every team has filled each position."""
        if not self.available_player_ids:
            return True
        return bool(self.picks_by_team) and all(
            picks >= len(REQUIRED_POSITIONS) for picks in self.picks_by_team.values()
        )


def build_round_robin(team_ids: list[str], weeks: int) -> list[list[Matchup]]:
    """Circle-method pairings for ``weeks`` weeks.

    The first team stays fixed while the rest rotate right by one slot each
    week; slot ``i`` meets slot ``N-1-i``. Past N-1 weeks the pairings
    repeat. ``team_ids`` must have an even length.
    """
    rotation = list(team_ids)
    half = len(rotation) // 2
    schedule: list[list[Matchup]] = []

    for week_idx in range(weeks):
        week = week_idx + 1
        schedule.append([
            Matchup(
                id=f"week{week}_match{i + 1}",
                week=week,
                home_team=rotation[i],
                away_team=rotation[len(rotation) - 1 - i],
            )
            for i in range(half)
        ])
        # Keep first fixed, move last into second position
        rotation = [rotation[0], rotation[-1], *rotation[1:-1]]

    return schedule


@dataclass
class League:
    """A fantasy league: its teams, members, schedule and standings."""

    name: str
    max_teams: int = DEFAULT_MAX_TEAMS
    id: str = field(default_factory=lambda: f"league_{uuid.uuid4().hex[:12]}")
    teams: list[str] = field(default_factory=list)
    schedule: list[list[Matchup]] = field(default_factory=list)
    current_week: int = 0
    standings: list[Standing] = field(default_factory=list)
    player_pool: list[str] = field(default_factory=list)
    member_ids: list[str] = field(default_factory=list)
    creator_id: Optional[str] = None
    description: str = ""
    is_public: bool = True
    regions: list[str] = field(default_factory=lambda: list(DEFAULT_REGIONS))

    def __post_init__(self):
        if self.creator_id:
            self.add_member(self.creator_id)

    # -- Teams and members -------------------------------------------------

    @property
    def is_full(self) -> bool:
        return len(self.teams) >= self.max_teams

    def add_team(self, team: FantasyTeam) -> bool:
        """Add a team unless it is already present or the league is full."""
        if team.id in self.teams:
            logger.info(f"Team {team.id} is already in league {self.id}")
            return False
        if self.is_full:
            logger.info(
                f"Cannot add team {team.id} to league {self.id}: full "
                f"({len(self.teams)}/{self.max_teams})"
            )
            return False

        self.teams.append(team.id)
        team.league_id = self.id
        return True

    def remove_team(self, team_id: str) -> bool:
        if team_id not in self.teams:
            return False
        self.teams.remove(team_id)
        self.update_standings()
        return True

    def add_member(self, user_id: Optional[str]) -> bool:
        if not user_id or user_id in self.member_ids:
            return False
        self.member_ids.append(user_id)
        return True

    def remove_member(self, user_id: Optional[str]) -> bool:
        if not user_id or user_id not in self.member_ids:
            return False
        self.member_ids.remove(user_id)
        return True

    def is_member(self, user_id: Optional[str]) -> bool:
        return bool(user_id) and user_id in self.member_ids

    # -- Player pool -------------------------------------------------------

    def initialize_player_pool(self, players: list[Player]) -> int:
        """Rebuild the pool from every player belonging to the league's regions.

        Returns:
            Number of players in the pool
        """
        pool: list[str] = []
        seen: set[str] = set()
        for player in players:
            if player.id in seen:
                continue
            if player_in_any_region(player.region, player.home_league, self.regions):
                pool.append(player.id)
                seen.add(player.id)

        self.player_pool = pool
        logger.info(f"League {self.id}: {len(pool)} players for regions {', '.join(self.regions)}")
        return len(pool)

    # -- Schedule and scoring ----------------------------------------------

    def generate_schedule(self, weeks_per_season: int = DEFAULT_WEEKS_PER_SEASON) -> bool:
        """Generate a round-robin schedule; needs an even number (>= 2) of teams.

        On failure the existing schedule is left untouched.
        """
        if len(self.teams) < 2 or len(self.teams) % 2 != 0:
            logger.warning(
                f"League {self.id}: need an even number of teams to schedule, have {len(self.teams)}"
            )
            return False

        self.schedule = build_round_robin(self.teams, weeks_per_season)
        return True

    def get_week_matchups(self, week: int) -> list[Matchup]:
        if week < 1 or week > len(self.schedule):
            return []
        return self.schedule[week - 1]

    def calculate_week_scores(
        self,
        week: int,
        team_lookup: TeamLookup,
        player_lookup: PlayerLookup,
    ) -> bool:
        """Score every matchup in ``week`` from the teams' active players."""
        if week < 1 or week > len(self.schedule):
            logger.warning(f"League {self.id}: invalid week {week}")
            return False

        for matchup in self.schedule[week - 1]:
            matchup.home_score = self._team_week_points(matchup.home_team, week, team_lookup, player_lookup)
            matchup.away_score = self._team_week_points(matchup.away_team, week, team_lookup, player_lookup)
            matchup.completed = True

        self.current_week = max(self.current_week, week)
        self.update_standings(team_lookup)
        return True

    @staticmethod
    def _team_week_points(
        team_id: str, week: int, team_lookup: TeamLookup, player_lookup: PlayerLookup
    ) -> float:
        team = team_lookup(team_id)
        if team is None:
            logger.warning(f"Team {team_id} not found while scoring week {week}")
            return 0.0
        return team.calculate_weekly_points(week, player_lookup)

    def update_standings(self, team_lookup: Optional[TeamLookup] = None) -> list[Standing]:
        """Tally wins/losses over completed matchups and sort the table.

        Order is wins descending, then total points descending. Tied
        matchups count for neither side.
        """
        records = {team_id: Standing(team_id=team_id) for team_id in self.teams}

        for weekly_matchups in self.schedule:
            for matchup in weekly_matchups:
                if not matchup.completed:
                    continue
                home = records.get(matchup.home_team)
                away = records.get(matchup.away_team)
                if matchup.home_score > matchup.away_score:
                    if home:
                        home.wins += 1
                    if away:
                        away.losses += 1
                elif matchup.away_score > matchup.home_score:
                    if away:
                        away.wins += 1
                    if home:
                        home.losses += 1

        if team_lookup is not None:
            for standing in records.values():
                team = team_lookup(standing.team_id)
                if team:
                    standing.total_points = team.total_points
                    team.wins = standing.wins
                    team.losses = standing.losses
        else:
            # Keep the last known points when teams are not available
            previous = {s.team_id: s.total_points for s in self.standings}
            for standing in records.values():
                standing.total_points = previous.get(standing.team_id, 0.0)

        self.standings = sorted(
            records.values(), key=lambda s: (s.wins, s.total_points), reverse=True
        )
        return self.standings

    def advance_week(self) -> int:
        self.current_week += 1
        return self.current_week

    # -- Persistence -------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "max_teams": self.max_teams,
            "teams": list(self.teams),
            "schedule": [[asdict(m) for m in week] for week in self.schedule],
            "current_week": self.current_week,
            "standings": [asdict(s) for s in self.standings],
            "player_pool": list(self.player_pool),
            "member_ids": list(self.member_ids),
            "creator_id": self.creator_id,
            "description": self.description,
            "is_public": self.is_public,
            "regions": list(self.regions),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "League":
        league = cls(
            id=data["id"],
            name=data["name"],
            max_teams=data.get("max_teams", DEFAULT_MAX_TEAMS),
            teams=list(data.get("teams") or []),
            schedule=[[Matchup(**m) for m in week] for week in data.get("schedule") or []],
            current_week=data.get("current_week", 0),
            standings=[Standing(**s) for s in data.get("standings") or []],
            player_pool=list(data.get("player_pool") or []),
            member_ids=[m for m in data.get("member_ids") or [] if m],
            description=data.get("description", ""),
            is_public=data.get("is_public", True),
            regions=list(data.get("regions") or DEFAULT_REGIONS),
        )
        # Assigned after construction so a stored member list is not reordered
        league.creator_id = data.get("creator_id")
        return league
