"""Professional player model and fantasy scoring."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional


class Position(str, Enum):
    """Professional roles a player can be listed under."""

    TOP = "TOP"
    JUNGLE = "JUNGLE"
    MID = "MID"
    ADC = "ADC"
    SUPPORT = "SUPPORT"
    NONE = "NONE"  # Substitutes / staff without a fixed role


# Points awarded per unit of each per-game stat
SCORING_WEIGHTS: dict[str, float] = {
    "kills": 3,
    "deaths": -1,
    "assists": 1.5,
    "cs": 0.02,
    "baron_kills": 2,
    "dragon_kills": 1,
    "turret_kills": 2,
}

STAT_FIELDS = (
    "kills",
    "deaths",
    "assists",
    "cs",
    "vision_score",
    "baron_kills",
    "dragon_kills",
    "turret_kills",
)


@dataclass
class PlayerStats:
    """Cumulative stats across every game a player has been credited with."""

    kills: float = 0
    deaths: float = 0
    assists: float = 0
    cs: float = 0
    vision_score: float = 0
    baron_kills: float = 0
    dragon_kills: float = 0
    turret_kills: float = 0
    games_played: int = 0


@dataclass
class Player:
    """A professional player available for fantasy rosters."""

    id: str
    name: str
    role: Position
    team: str  # Professional team name
    region: str
    home_league: Optional[str] = None
    stats: PlayerStats = field(default_factory=PlayerStats)
    fantasy_points: float = 0.0
    # Week number -> points earned that week
    weekly_points: dict[int, float] = field(default_factory=dict)
    image_url: Optional[str] = None

    def calculate_fantasy_points(self, game_stats: Mapping[str, Any]) -> float:
        """Score a single game and add it to the running fantasy total.

        Missing stat categories count as zero.
        """
        points = sum(
            (game_stats.get(stat) or 0) * weight
            for stat, weight in SCORING_WEIGHTS.items()
        )
        self.fantasy_points += points
        return points

    def update_stats(self, game_stats: Mapping[str, Any]) -> float:
        """Apply one game's stat line.

        Increments every cumulative counter by the per-game delta, counts the
        game, scores it, and credits the points to ``game_stats["week"]``
        when a week is given.

        Returns:
            Fantasy points earned for the game
        """
        for stat in STAT_FIELDS:
            current = getattr(self.stats, stat)
            setattr(self.stats, stat, current + (game_stats.get(stat) or 0))
        self.stats.games_played += 1

        points = self.calculate_fantasy_points(game_stats)

        week = game_stats.get("week")
        if week:
            week = int(week)
            self.weekly_points[week] = self.weekly_points.get(week, 0) + points

        return points

    def average_fantasy_points(self) -> float:
        """Average fantasy points per game played."""
        if self.stats.games_played == 0:
            return 0.0
        return self.fantasy_points / self.stats.games_played

    def to_dict(self) -> dict:
        data = asdict(self)
        data["role"] = self.role.value
        # JSON object keys must be strings
        data["weekly_points"] = {str(w): p for w, p in self.weekly_points.items()}
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Player":
        stats = data.get("stats") or {}
        return cls(
            id=data["id"],
            name=data["name"],
            role=Position(data.get("role") or Position.NONE.value),
            team=data.get("team", ""),
            region=data.get("region", ""),
            home_league=data.get("home_league"),
            stats=PlayerStats(**{k: v for k, v in stats.items() if k in PlayerStats.__dataclass_fields__}),
            fantasy_points=data.get("fantasy_points", 0.0),
            weekly_points={int(w): p for w, p in (data.get("weekly_points") or {}).items()},
            image_url=data.get("image_url"),
        )
