"""Player registry: lookups, imports and stat updates."""

import logging
from typing import Any, Callable, Iterable, Mapping, Optional

from rift_league.models.player import Player, Position
from rift_league.repositories.document_store import PLAYERS, DocumentStore
from rift_league.utils.region_normalizer import normalize_region, player_in_any_region, player_in_region
from rift_league.utils.role_normalizer import normalize_role

logger = logging.getLogger(__name__)


class VersionedViewCache:
    """Derived views over a collection, dropped together when it changes.

    Every mutation bumps ``version``; a lookup made under a newer version
    than the cached views discards all of them at once.
    """

    def __init__(self):
        self.version = 0
        self._views_version = 0
        self._views: dict[tuple, Any] = {}

    def bump(self) -> None:
        self.version += 1

    def get_or_build(self, key: tuple, build: Callable[[], Any]) -> Any:
        if self._views_version != self.version:
            self._views = {}
            self._views_version = self.version
        if key not in self._views:
            self._views[key] = build()
        return self._views[key]


_CAMEL_CASE_STATS = {
    "visionScore": "vision_score",
    "baronKills": "baron_kills",
    "dragonKills": "dragon_kills",
    "turretKills": "turret_kills",
    "gamesPlayed": "games_played",
}


def player_from_record(record: Mapping[str, Any]) -> Player:
    """Build a Player from an import record in any of the known spellings.

    Accepts ``role`` or ``position`` for the role, ``home_league`` or
    ``homeLeague`` for the home league, and camelCase stat names. Unknown
    roles become NONE.
    """
    role = normalize_role(record.get("role") or record.get("position"))
    data = dict(record)
    data["stats"] = {
        _CAMEL_CASE_STATS.get(k, k): v for k, v in (record.get("stats") or {}).items()
    }
    data["role"] = role or Position.NONE.value
    data["home_league"] = record.get("home_league") or record.get("homeLeague")
    data["image_url"] = record.get("image_url") or record.get("imageUrl")
    data["fantasy_points"] = record.get("fantasy_points") or record.get("fantasyPoints") or 0.0
    return Player.from_dict(data)


class PlayerService:
    """In-memory player registry persisted to the ``players`` collection."""

    def __init__(self, store: DocumentStore):
        self._store = store
        self._players: dict[str, Player] = {}
        self._cache = VersionedViewCache()

    def load(self) -> int:
        """Load every stored player, replacing the in-memory registry."""
        self._players = {
            doc["id"]: Player.from_dict(doc) for doc in self._store.find_all(PLAYERS)
        }
        self._cache.bump()
        logger.info(f"Loaded {len(self._players)} players")
        return len(self._players)

    def import_players(self, records: Iterable[Mapping[str, Any]]) -> int:
        """Create or replace players from raw records and persist them."""
        players = [player_from_record(r) for r in records]
        for player in players:
            self._players[player.id] = player
        self._store.save_many(PLAYERS, (p.to_dict() for p in players))
        self._cache.bump()
        logger.info(f"Imported {len(players)} players")
        return len(players)

    def save_player(self, player: Player) -> None:
        self._players[player.id] = player
        self._store.save(PLAYERS, player.to_dict())
        self._cache.bump()

    @property
    def version(self) -> int:
        return self._cache.version

    def get_all_players(self) -> list[Player]:
        return self._cache.get_or_build(("all",), lambda: list(self._players.values()))

    def get_player(self, player_id: str) -> Optional[Player]:
        return self._players.get(player_id)

    def get_players_by_region(self, region: str) -> list[Player]:
        """Players whose region or home league matches ``region`` or an alias."""
        normalized = normalize_region(region)
        if not normalized:
            logger.warning("No region specified for player lookup")
            return []

        return self._cache.get_or_build(
            ("region", normalized),
            lambda: [
                p for p in self._players.values()
                if player_in_region(p.region, p.home_league, normalized)
            ],
        )

    def get_players_for_regions(self, regions: Iterable[str]) -> list[Player]:
        """Players belonging to any of ``regions``, each listed once."""
        regions = tuple(normalize_region(r) for r in regions)
        return self._cache.get_or_build(
            ("regions", regions),
            lambda: [
                p for p in self._players.values()
                if player_in_any_region(p.region, p.home_league, regions)
            ],
        )

    def get_players_by_position(self, position: str) -> list[Player]:
        normalized = normalize_role(position) or position.strip().upper()
        return self._cache.get_or_build(
            ("position", normalized),
            lambda: [p for p in self._players.values() if p.role.value == normalized],
        )

    def update_player_stats(self, player_id: str, game_stats: Mapping[str, Any]) -> Optional[float]:
        """Apply one game's stats to a player and persist.

        Returns:
            Points earned for the game, or None if the player does not exist
        """
        player = self._players.get(player_id)
        if player is None:
            return None

        points = player.update_stats(game_stats)
        self.save_player(player)
        return points
