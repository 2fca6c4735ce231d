"""Data models for the fantasy league."""

from rift_league.models.player import Player, PlayerStats, Position, SCORING_WEIGHTS
from rift_league.models.team import (
    BENCH_LIMIT,
    REQUIRED_POSITIONS,
    FantasyTeam,
    Roster,
    RosterSlot,
)
from rift_league.models.league import DraftStatus, League, Matchup, Standing, build_round_robin
from rift_league.models.trade import Trade, TradePlayer, TradeStatus
from rift_league.models.user import User

__all__ = [
    "Player",
    "PlayerStats",
    "Position",
    "SCORING_WEIGHTS",
    "BENCH_LIMIT",
    "REQUIRED_POSITIONS",
    "FantasyTeam",
    "Roster",
    "RosterSlot",
    "DraftStatus",
    "League",
    "Matchup",
    "Standing",
    "build_round_robin",
    "Trade",
    "TradePlayer",
    "TradeStatus",
    "User",
]
