"""Periodic refresh of player stats from the stats provider."""

import asyncio
import logging
from typing import Optional

from rift_league.services.league_service import LeagueService
from rift_league.services.player_service import PlayerService
from rift_league.services.stats_provider_client import StatsProviderClient, StatsProviderError

logger = logging.getLogger(__name__)


class StatsUpdater:
    """Pulls recent match stats for every pooled player and re-scores leagues.

    A cycle that starts while another is still running is skipped.
    """

    def __init__(
        self,
        client: StatsProviderClient,
        player_service: PlayerService,
        league_service: LeagueService,
        interval_seconds: float = 1800,
        matches_per_update: int = 5,
    ):
        self.client = client
        self.player_service = player_service
        self.league_service = league_service
        self.interval_seconds = interval_seconds
        self.matches_per_update = matches_per_update
        self._is_updating = False
        self._task: Optional[asyncio.Task] = None

    @property
    def is_updating(self) -> bool:
        return self._is_updating

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def update_league(self, league_id: str) -> Optional[int]:
        """Refresh stats for one league's pool, then re-score completed weeks.

        Returns:
            Number of players updated, or None if the league does not exist

        Raises:
            StatsProviderError: If the provider fails
        """
        league = self.league_service.get_league(league_id)
        if league is None:
            return None

        updated = 0
        for player_id in list(league.player_pool):
            player = self.player_service.get_player(player_id)
            if player is None:
                continue

            stats = await self.client.get_player_game_stats(
                player.name, player.home_league or player.region, self.matches_per_update
            )
            if not stats or not stats.get("games_played"):
                continue

            self.player_service.update_player_stats(player.id, stats)
            updated += 1

        weeks = self.league_service.recalculate_completed_weeks(league_id)
        logger.info(f"League {league_id}: updated {updated} players, re-scored {weeks} weeks")
        return updated

    async def run_cycle(self) -> bool:
        """Update every league once. Returns False if a cycle was already running."""
        if self._is_updating:
            logger.info("Update already in progress, skipping")
            return False

        self._is_updating = True
        logger.info("Updating player stats from the stats provider...")
        try:
            for league in self.league_service.get_all_leagues():
                try:
                    await self.update_league(league.id)
                except StatsProviderError as e:
                    logger.error(f"Stats update failed for league {league.id}: {e}")
            logger.info("Stats update completed")
        finally:
            self._is_updating = False
        return True

    async def _run_forever(self):
        while True:
            await self.run_cycle()
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> None:
        if self.is_running:
            logger.info("Stats updater is already running")
            return
        logger.info(f"Starting automatic stats updates every {self.interval_seconds / 60:.0f} minutes")
        self._task = asyncio.create_task(self._run_forever())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Stopped automatic stats updates")
