"""HTTP client for the third-party match statistics provider.

Responses are cached per ``region:endpoint:params`` for a configurable TTL
and every network call waits a fixed delay first to stay under the
provider's rate limits.
"""

import asyncio
import json
import logging
import time
from typing import Any, Optional
from urllib.parse import quote

import httpx

from rift_league.utils.region_normalizer import normalize_region, region_variants

logger = logging.getLogger(__name__)


class StatsProviderError(Exception):
    """Raised when the stats provider is unreachable or answers with an error."""

    @property
    def status_code(self) -> Optional[int]:
        """HTTP status of the failed response, or None for transport failures."""
        cause = self.__cause__
        if isinstance(cause, httpx.HTTPStatusError):
            return cause.response.status_code
        return None

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


# Provider platform hosts
REGION_HOSTS = {
    "NORTH_AMERICA": "na1.api.riotgames.com",
    "EUROPE": "euw1.api.riotgames.com",
    "KOREA": "kr.api.riotgames.com",
    "BRAZIL": "br1.api.riotgames.com",
}

# League region group -> provider platform
_PLATFORM_FOR_GROUP = {
    "AMERICAS": "NORTH_AMERICA",
    "EMEA": "EUROPE",
    "KOREA": "KOREA",
}


def platform_for_region(region: Optional[str]) -> str:
    """Map a player's region or league code to a provider platform.

    CBLOL players are hosted on the Brazilian platform; anything unknown
    falls back to Europe.
    """
    normalized = normalize_region(region)
    if normalized in REGION_HOSTS:
        return normalized
    if normalized == "CBLOL":
        return "BRAZIL"
    for group, platform in _PLATFORM_FOR_GROUP.items():
        if normalized in region_variants(group):
            return platform
    return "EUROPE"


class StatsProviderClient:
    """Read-only client for summoner, match and live-game endpoints."""

    def __init__(
        self,
        api_key: str,
        request_delay_seconds: float = 0.5,
        cache_ttl_seconds: float = 3600,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the stats provider client.

        Args:
            api_key: Provider API key, sent as ``X-Riot-Token``
            request_delay_seconds: Pause before every network call
            cache_ttl_seconds: How long a cached response stays valid
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.api_key = api_key
        self.request_delay_seconds = request_delay_seconds
        self.cache_ttl_seconds = cache_ttl_seconds
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        # cache key -> (expires_at, payload)
        self._cache: dict[str, tuple[float, Any]] = {}

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                headers={
                    "X-Riot-Token": self.api_key,
                    "Accept-Language": "en-US,en;q=0.9",
                },
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def request(self, endpoint: str, region: str, params: Optional[dict] = None) -> Any:
        """GET ``endpoint`` on the platform host for ``region``.

        Raises:
            StatsProviderError: On transport failure or a non-2xx response
        """
        params = params or {}
        cache_key = f"{region}:{endpoint}:{json.dumps(params, sort_keys=True)}"
        cached = self._cache.get(cache_key)
        if cached is not None:
            expires_at, payload = cached
            if time.monotonic() < expires_at:
                logger.debug(f"Using cached data for {endpoint}")
                return payload
            del self._cache[cache_key]

        host = REGION_HOSTS.get(region)
        if host is None:
            raise StatsProviderError(f"Unknown provider region: {region}")

        await asyncio.sleep(self.request_delay_seconds)

        url = f"https://{host}/{endpoint}"
        try:
            client = await self._get_client()
            logger.info(f"Fetching {url}")
            response = await client.get(url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Stats provider error for {endpoint}: {e.response.status_code}")
            raise StatsProviderError(
                f"Stats provider returned {e.response.status_code} for {endpoint}"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Stats provider request to {endpoint} failed: {e}")
            raise StatsProviderError(f"Stats provider request failed: {e}") from e

        self._cache[cache_key] = (time.monotonic() + self.cache_ttl_seconds, payload)
        return payload

    async def get_summoner_by_name(self, summoner_name: str, region: str) -> dict:
        return await self.request(
            f"lol/summoner/v4/summoners/by-name/{quote(summoner_name)}", region
        )

    async def get_match_list(self, puuid: str, region: str, count: int = 20) -> list[str]:
        return await self.request(
            f"lol/match/v5/matches/by-puuid/{puuid}/ids", region, {"count": count}
        )

    async def get_match_details(self, match_id: str, region: str) -> dict:
        return await self.request(f"lol/match/v5/matches/{match_id}", region)

    async def get_current_game(self, summoner_id: str, region: str) -> Optional[dict]:
        """Live game for a summoner, or None when they are not in one."""
        try:
            return await self.request(
                f"lol/spectator/v4/active-games/by-summoner/{summoner_id}", region
            )
        except StatsProviderError as e:
            if e.not_found:
                return None
            raise

    async def get_player_stats(self, puuid: str, region: str, count: int = 10) -> dict:
        """Sum a player's stat lines over their last ``count`` matches."""
        stats = {
            "kills": 0,
            "deaths": 0,
            "assists": 0,
            "cs": 0,
            "vision_score": 0,
            "baron_kills": 0,
            "dragon_kills": 0,
            "turret_kills": 0,
            "games_played": 0,
        }

        for match_id in await self.get_match_list(puuid, region, count):
            match = await self.get_match_details(match_id, region)
            participants = (match.get("info") or {}).get("participants", [])
            participant = next((p for p in participants if p.get("puuid") == puuid), None)
            if participant is None:
                continue

            stats["kills"] += participant.get("kills", 0)
            stats["deaths"] += participant.get("deaths", 0)
            stats["assists"] += participant.get("assists", 0)
            stats["cs"] += participant.get("totalMinionsKilled", 0) + participant.get(
                "neutralMinionsKilled", 0
            )
            stats["vision_score"] += participant.get("visionScore", 0)
            stats["baron_kills"] += participant.get("baronKills", 0)
            stats["dragon_kills"] += participant.get("dragonKills", 0)
            stats["turret_kills"] += participant.get("turretKills", 0)
            stats["games_played"] += 1

        return stats

    async def get_player_game_stats(self, player_name: str, player_region: str, count: int = 5) -> Optional[dict]:
        """Recent aggregated stats for a professional player.

        Returns None when the player has no summoner record or is currently
        in a live game.
        """
        region = platform_for_region(player_region)
        try:
            summoner = await self.get_summoner_by_name(player_name, region)
        except StatsProviderError as e:
            if e.not_found:
                logger.warning(f"No summoner record for {player_name} on {region}, skipping")
                return None
            raise
        if not summoner or not summoner.get("puuid"):
            return None

        if summoner.get("id") and await self.get_current_game(summoner["id"], region):
            logger.info(f"{player_name} is currently in a game, skipping")
            return None

        return await self.get_player_stats(summoner["puuid"], region, count)
