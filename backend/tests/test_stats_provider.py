"""Tests for the stats provider client and the background stats updater."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from rift_league.repositories.document_store import DocumentStore
from rift_league.services.league_service import LeagueService
from rift_league.services.player_service import PlayerService
from rift_league.services.stats_provider_client import (
    StatsProviderClient,
    StatsProviderError,
    platform_for_region,
)
from rift_league.services.stats_updater import StatsUpdater
from rift_league.services.team_service import TeamService

pytestmark = pytest.mark.anyio

PUUID = "puuid-fudge"


def provider_handler(request: httpx.Request) -> httpx.Response:
    """Fake provider: one summoner with two matches, not in a live game."""
    path = request.url.path
    if "summoners/by-name" in path:
        return httpx.Response(200, json={"id": "sum-1", "puuid": PUUID, "name": "Fudge"})
    if "active-games" in path:
        return httpx.Response(404, json={"status": {"message": "Data not found"}})
    if path.endswith("/ids"):
        return httpx.Response(200, json=["NA1_1", "NA1_2"])
    if "/matches/" in path:
        participant = {
            "puuid": PUUID,
            "kills": 3,
            "deaths": 1,
            "assists": 4,
            "totalMinionsKilled": 200,
            "neutralMinionsKilled": 20,
            "visionScore": 15,
            "baronKills": 1,
            "dragonKills": 0,
            "turretKills": 2,
        }
        other = {**participant, "puuid": "someone-else", "kills": 99}
        return httpx.Response(200, json={"info": {"participants": [other, participant]}})
    return httpx.Response(500)


def handler_without(summoner_name: str):
    """Fake provider where ``summoner_name`` has no summoner record."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith(f"/by-name/{summoner_name}"):
            return httpx.Response(404, json={"status": {"message": "Data not found"}})
        return provider_handler(request)

    return handler


def make_client(handler=provider_handler) -> StatsProviderClient:
    return StatsProviderClient(
        "test-key",
        request_delay_seconds=0,
        transport=httpx.MockTransport(handler),
    )


class TestStatsProviderClient:
    async def test_sends_api_key_and_params(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=["m1"])

        client = make_client(handler)
        assert await client.get_match_list(PUUID, "NORTH_AMERICA", count=5) == ["m1"]
        await client.close()

        assert seen[0].headers["X-Riot-Token"] == "test-key"
        assert seen[0].url.host == "na1.api.riotgames.com"
        assert seen[0].url.params["count"] == "5"

    async def test_responses_are_cached(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"puuid": PUUID})

        client = make_client(handler)
        await client.get_summoner_by_name("Fudge", "NORTH_AMERICA")
        await client.get_summoner_by_name("Fudge", "NORTH_AMERICA")
        await client.get_summoner_by_name("Fudge", "EUROPE")
        await client.close()

        assert len(calls) == 2

    async def test_expired_cache_refetches(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={})

        client = StatsProviderClient(
            "k", request_delay_seconds=0, cache_ttl_seconds=0, transport=httpx.MockTransport(handler)
        )
        await client.get_match_details("m1", "KOREA")
        await client.get_match_details("m1", "KOREA")
        await client.close()

        assert len(calls) == 2

    async def test_error_status_raises(self):
        client = make_client(lambda request: httpx.Response(403, json={}))
        with pytest.raises(StatsProviderError, match="403"):
            await client.get_match_details("m1", "EUROPE")
        await client.close()

    async def test_transport_failure_raises(self):
        def handler(request):
            raise httpx.ConnectError("boom", request=request)

        client = make_client(handler)
        with pytest.raises(StatsProviderError):
            await client.get_match_details("m1", "EUROPE")
        await client.close()

    async def test_unknown_region_raises(self):
        client = make_client()
        with pytest.raises(StatsProviderError, match="Unknown provider region"):
            await client.request("lol/status", "MOON")

    async def test_not_in_game_returns_none(self):
        client = make_client()
        assert await client.get_current_game("sum-1", "NORTH_AMERICA") is None
        await client.close()

    async def test_unknown_summoner_returns_none(self):
        client = make_client(handler_without("Ghost"))
        assert await client.get_player_game_stats("Ghost", "LCS") is None
        await client.close()

    async def test_error_status_is_exposed(self):
        client = make_client(lambda request: httpx.Response(403))
        with pytest.raises(StatsProviderError) as exc_info:
            await client.get_summoner_by_name("Fudge", "NORTH_AMERICA")
        await client.close()
        assert exc_info.value.status_code == 403
        assert not exc_info.value.not_found

    async def test_player_stats_aggregates_matches(self):
        client = make_client()
        stats = await client.get_player_stats(PUUID, "NORTH_AMERICA", count=2)
        await client.close()

        assert stats["kills"] == 6
        assert stats["cs"] == 440
        assert stats["vision_score"] == 30
        assert stats["baron_kills"] == 2
        assert stats["turret_kills"] == 4
        assert stats["games_played"] == 2

    async def test_delay_before_each_network_call(self, monkeypatch):
        sleep = AsyncMock()
        monkeypatch.setattr("rift_league.services.stats_provider_client.asyncio.sleep", sleep)
        client = StatsProviderClient("k", request_delay_seconds=0.5, transport=httpx.MockTransport(provider_handler))

        await client.get_match_list(PUUID, "NORTH_AMERICA")
        await client.get_match_list(PUUID, "NORTH_AMERICA")
        await client.close()

        sleep.assert_awaited_once_with(0.5)


@pytest.mark.parametrize(
    "region,platform",
    [
        ("NORTH", "NORTH_AMERICA"),
        ("LCS", "NORTH_AMERICA"),
        ("SOUTH", "EUROPE"),
        ("LEC", "EUROPE"),
        ("LCK", "KOREA"),
        ("CBLOL", "BRAZIL"),
        (None, "EUROPE"),
    ],
)
def test_platform_for_region(region, platform):
    assert platform_for_region(region) == platform


@pytest.fixture
def league_setup():
    store = DocumentStore(":memory:")
    players = PlayerService(store)
    players.import_players([
        {"id": "top_na", "name": "Fudge", "role": "TOP", "team": "Cloud9", "region": "NORTH"},
        {"id": "mid_na", "name": "Jojopyun", "role": "MID", "team": "Cloud9", "region": "AMERICAS"},
    ])
    teams = TeamService(store, players)
    leagues = LeagueService(store, teams, players)
    league = leagues.create_league("Live", max_teams=2, regions=["AMERICAS"])
    yield players, teams, leagues, league
    store.close()


class TestStatsUpdater:
    async def test_update_league_applies_stats_and_rescores(self, league_setup):
        players, teams, leagues, league = league_setup
        home = leagues.join_league(league.id, "u1", "a", "Home")
        leagues.join_league(league.id, "u2", "b", "Away")
        teams.add_player_to_team(home.id, "top_na", "TOP")
        leagues.generate_schedule(league.id, 1)
        leagues.calculate_week_scores(league.id, 1)

        updater = StatsUpdater(make_client(), players, leagues)
        updated = await updater.update_league(league.id)
        await updater.client.close()

        assert updated == 2
        fudge = players.get_player("top_na")
        assert fudge.stats.kills == 6
        assert fudge.stats.games_played == 1
        assert home.weekly_points[1] == pytest.approx(fudge.fantasy_points)
        assert league.standings[0].team_id == home.id

    async def test_player_without_summoner_does_not_stop_the_league(self, league_setup):
        players, teams, leagues, league = league_setup
        home = leagues.join_league(league.id, "u1", "a", "Home")
        leagues.join_league(league.id, "u2", "b", "Away")
        teams.add_player_to_team(home.id, "top_na", "TOP")
        leagues.generate_schedule(league.id, 1)
        leagues.calculate_week_scores(league.id, 1)

        # Jojopyun comes first in the pool walk and has no account
        league.player_pool = ["mid_na", "top_na"]
        updater = StatsUpdater(make_client(handler_without("Jojopyun")), players, leagues)
        updated = await updater.update_league(league.id)
        await updater.client.close()

        assert updated == 1
        assert players.get_player("mid_na").stats.games_played == 0
        assert players.get_player("top_na").stats.kills == 6
        assert home.weekly_points[1] == pytest.approx(players.get_player("top_na").fantasy_points)

    async def test_players_without_games_are_skipped(self, league_setup):
        players, _, leagues, league = league_setup
        client = MagicMock()
        client.get_player_game_stats = AsyncMock(return_value=None)

        updater = StatsUpdater(client, players, leagues)
        assert await updater.update_league(league.id) == 0
        assert client.get_player_game_stats.await_count == 2

    async def test_unknown_league(self, league_setup):
        players, _, leagues, _ = league_setup
        updater = StatsUpdater(MagicMock(), players, leagues)
        assert await updater.update_league("league_missing") is None

    async def test_provider_error_propagates_from_update_league(self, league_setup):
        players, _, leagues, league = league_setup
        client = MagicMock()
        client.get_player_game_stats = AsyncMock(side_effect=StatsProviderError("down"))

        updater = StatsUpdater(client, players, leagues)
        with pytest.raises(StatsProviderError):
            await updater.update_league(league.id)

    async def test_run_cycle_logs_provider_errors(self, league_setup):
        players, _, leagues, _ = league_setup
        client = MagicMock()
        client.get_player_game_stats = AsyncMock(side_effect=StatsProviderError("down"))

        updater = StatsUpdater(client, players, leagues)
        assert await updater.run_cycle()
        assert not updater.is_updating

    async def test_cycle_skipped_while_one_is_running(self, league_setup):
        players, _, leagues, _ = league_setup
        client = MagicMock()
        client.get_player_game_stats = AsyncMock(return_value=None)
        updater = StatsUpdater(client, players, leagues)

        updater._is_updating = True
        assert not await updater.run_cycle()
        client.get_player_game_stats.assert_not_awaited()

    async def test_start_and_stop(self, league_setup):
        players, _, leagues, _ = league_setup
        client = MagicMock()
        client.get_player_game_stats = AsyncMock(return_value=None)
        updater = StatsUpdater(client, players, leagues, interval_seconds=3600)

        updater.start()
        assert updater.is_running
        await updater.stop()
        assert not updater.is_running
