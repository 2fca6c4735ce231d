"""Fantasy team and roster models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from rift_league.models.player import Player, Position


class RosterSlot(str, Enum):
    """Named roster slots: one per required position, FLEX, and BENCH."""

    TOP = "TOP"
    JUNGLE = "JUNGLE"
    MID = "MID"
    ADC = "ADC"
    SUPPORT = "SUPPORT"
    FLEX = "FLEX"  # Any role
    BENCH = "BENCH"  # Non-scoring, capped at BENCH_LIMIT


REQUIRED_POSITIONS: tuple[Position, ...] = (
    Position.TOP,
    Position.JUNGLE,
    Position.MID,
    Position.ADC,
    Position.SUPPORT,
)
BENCH_LIMIT = 3


def _parse_slot(slot: RosterSlot | str) -> Optional[RosterSlot]:
    if isinstance(slot, RosterSlot):
        return slot
    try:
        return RosterSlot(slot)
    except ValueError:
        return None


@dataclass
class Roster:
    """Player ids held in each roster slot."""

    starters: dict[Position, Optional[str]] = field(
        default_factory=lambda: {p: None for p in REQUIRED_POSITIONS}
    )
    flex: Optional[str] = None
    bench: list[str] = field(default_factory=list)

    def add_player(self, player: Player, slot: RosterSlot | str) -> bool:
        """Place ``player`` into ``slot``.

        BENCH appends unless the bench is full, FLEX accepts any role, and a
        positional slot only accepts a player whose role is exactly that
        position. A player already on the roster is rejected. Nothing changes
        when False is returned.
        """
        slot = _parse_slot(slot)
        if slot is None or player.id in self.player_ids():
            return False

        if slot is RosterSlot.BENCH:
            if len(self.bench) >= BENCH_LIMIT:
                return False
            self.bench.append(player.id)
            return True

        if slot is RosterSlot.FLEX:
            self.flex = player.id
            return True

        if player.role.value != slot.value:
            return False
        self.starters[Position(slot.value)] = player.id
        return True

    def remove_player(self, player_id: str) -> bool:
        """Clear the first slot holding ``player_id``: positions, FLEX, then bench."""
        for position in REQUIRED_POSITIONS:
            if self.starters.get(position) == player_id:
                self.starters[position] = None
                return True

        if self.flex == player_id:
            self.flex = None
            return True

        if player_id in self.bench:
            self.bench.remove(player_id)
            return True

        return False

    def assign(self, slot: RosterSlot | str, player_id: str) -> bool:
        """Put a player id into a slot without a role check (trade execution)."""
        slot = _parse_slot(slot)
        if slot is None:
            return False
        if slot is RosterSlot.BENCH:
            if len(self.bench) >= BENCH_LIMIT:
                return False
            self.bench.append(player_id)
        elif slot is RosterSlot.FLEX:
            self.flex = player_id
        else:
            self.starters[Position(slot.value)] = player_id
        return True

    def holds(self, player_id: str, slot: RosterSlot | str) -> bool:
        """Whether ``player_id`` currently sits in ``slot``."""
        slot = _parse_slot(slot)
        if slot is None:
            return False
        if slot is RosterSlot.BENCH:
            return player_id in self.bench
        if slot is RosterSlot.FLEX:
            return self.flex == player_id
        return self.starters.get(Position(slot.value)) == player_id

    def active_player_ids(self) -> list[tuple[RosterSlot, str]]:
        """(slot, player id) for every filled scoring slot, bench excluded."""
        active = [
            (RosterSlot(position.value), player_id)
            for position, player_id in self.starters.items()
            if player_id
        ]
        if self.flex:
            active.append((RosterSlot.FLEX, self.flex))
        return active

    def player_ids(self) -> list[str]:
        return [pid for _, pid in self.active_player_ids()] + list(self.bench)

    def is_complete(self) -> bool:
        return all(self.starters.get(p) for p in REQUIRED_POSITIONS)

    def to_dict(self) -> dict:
        data: dict[str, Any] = {p.value: self.starters.get(p) for p in REQUIRED_POSITIONS}
        data[RosterSlot.FLEX.value] = self.flex
        data[RosterSlot.BENCH.value] = list(self.bench)
        return data

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Roster":
        data = data or {}
        return cls(
            starters={p: data.get(p.value) for p in REQUIRED_POSITIONS},
            flex=data.get(RosterSlot.FLEX.value),
            bench=list(data.get(RosterSlot.BENCH.value) or [])[:BENCH_LIMIT],
        )


@dataclass
class FantasyTeam:
    """A user's fantasy roster within one league."""

    id: str
    name: str
    owner: str  # Display name of the owning user
    user_id: Optional[str] = None
    league_id: Optional[str] = None
    roster: Roster = field(default_factory=Roster)
    total_points: float = 0.0
    weekly_points: dict[int, float] = field(default_factory=dict)
    wins: int = 0
    losses: int = 0

    def add_player(self, player: Player, slot: RosterSlot | str) -> bool:
        return self.roster.add_player(player, slot)

    def remove_player(self, player_id: str) -> bool:
        return self.roster.remove_player(player_id)

    def is_valid(self) -> bool:
        """A team is valid once every required position is filled."""
        return self.roster.is_complete()

    def calculate_weekly_points(
        self, week: int, player_lookup: Callable[[str], Optional[Player]]
    ) -> float:
        """Sum the current fantasy points of every active player for ``week``.

        The week's entry is overwritten rather than added to, and the season
        total is rebuilt from the weekly map.
        """
        weekly_total = 0.0
        for _, player_id in self.roster.active_player_ids():
            player = player_lookup(player_id)
            if player:
                weekly_total += player.fantasy_points

        self.weekly_points[week] = weekly_total
        self.total_points = sum(self.weekly_points.values())
        return weekly_total

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "owner": self.owner,
            "user_id": self.user_id,
            "league_id": self.league_id,
            "roster": self.roster.to_dict(),
            "total_points": self.total_points,
            "weekly_points": {str(w): p for w, p in self.weekly_points.items()},
            "wins": self.wins,
            "losses": self.losses,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FantasyTeam":
        return cls(
            id=data["id"],
            name=data["name"],
            owner=data.get("owner") or "unknown",
            user_id=data.get("user_id"),
            league_id=data.get("league_id"),
            roster=Roster.from_dict(data.get("roster")),
            total_points=data.get("total_points", 0.0),
            weekly_points={int(w): p for w, p in (data.get("weekly_points") or {}).items()},
            wins=data.get("wins", 0),
            losses=data.get("losses", 0),
        )
