"""Business logic services."""

from rift_league.services.aggregate_locks import AggregateLocks
from rift_league.services.player_service import PlayerService, VersionedViewCache
from rift_league.services.team_service import TeamService
from rift_league.services.league_service import LeagueService
from rift_league.services.trade_service import TradeService
from rift_league.services.user_service import UserService
from rift_league.services.stats_provider_client import (
    StatsProviderClient,
    StatsProviderError,
)
from rift_league.services.stats_updater import StatsUpdater

__all__ = [
    "AggregateLocks",
    "PlayerService",
    "VersionedViewCache",
    "TeamService",
    "LeagueService",
    "TradeService",
    "UserService",
    "StatsProviderClient",
    "StatsProviderError",
    "StatsUpdater",
]
