"""Tests for roster slot rules and weekly team points."""

import pytest

from rift_league.models.player import Player, Position
from rift_league.models.team import BENCH_LIMIT, FantasyTeam, Roster, RosterSlot


def make_player(player_id: str, role: Position, points: float = 0.0) -> Player:
    return Player(
        id=player_id,
        name=player_id.title(),
        role=role,
        team="Team",
        region="AMERICAS",
        fantasy_points=points,
    )


@pytest.fixture
def team():
    return FantasyTeam(id="team_1", name="Baron Stealers", owner="alice", user_id="u1")


class TestAddPlayer:
    def test_positional_slot_requires_matching_role(self, team):
        top = make_player("top1", Position.TOP)
        assert team.add_player(top, RosterSlot.TOP)
        assert team.roster.starters[Position.TOP] == "top1"

    def test_positional_slot_rejects_other_role(self, team):
        mid = make_player("mid1", Position.MID)
        assert not team.add_player(mid, RosterSlot.TOP)
        assert team.roster.starters[Position.TOP] is None

    def test_flex_accepts_any_role(self, team):
        support = make_player("sup1", Position.SUPPORT)
        assert team.add_player(support, "FLEX")
        assert team.roster.flex == "sup1"

    def test_player_already_on_roster_is_rejected(self, team):
        top = make_player("top1", Position.TOP)
        assert team.add_player(top, RosterSlot.TOP)

        assert not team.add_player(top, RosterSlot.BENCH)
        assert not team.add_player(top, RosterSlot.FLEX)
        assert team.roster.player_ids() == ["top1"]

    def test_unknown_slot_fails(self, team):
        assert not team.add_player(make_player("x", Position.TOP), "COACH")

    def test_full_bench_rejects_and_is_unchanged(self, team):
        for i in range(BENCH_LIMIT):
            assert team.add_player(make_player(f"b{i}", Position.ADC), RosterSlot.BENCH)
        before = list(team.roster.bench)

        assert not team.add_player(make_player("extra", Position.ADC), RosterSlot.BENCH)
        assert not team.add_player(make_player("extra", Position.ADC), RosterSlot.BENCH)
        assert team.roster.bench == before


class TestRemovePlayer:
    def test_removes_from_position_flex_or_bench(self, team):
        team.add_player(make_player("top1", Position.TOP), RosterSlot.TOP)
        team.add_player(make_player("mid1", Position.MID), RosterSlot.FLEX)
        team.add_player(make_player("adc1", Position.ADC), RosterSlot.BENCH)

        assert team.remove_player("top1")
        assert team.remove_player("mid1")
        assert team.remove_player("adc1")
        assert team.roster.player_ids() == []

    def test_missing_player_returns_false(self, team):
        assert not team.remove_player("nobody")


def test_team_valid_only_when_required_positions_filled(team):
    roles = [Position.TOP, Position.JUNGLE, Position.MID, Position.ADC, Position.SUPPORT]
    for role in roles[:-1]:
        team.add_player(make_player(role.value.lower(), role), role.value)
    assert not team.is_valid()

    team.add_player(make_player("support", Position.SUPPORT), RosterSlot.SUPPORT)
    assert team.is_valid()


class TestCalculateWeeklyPoints:
    def test_sums_active_players_excluding_bench(self, team):
        players = {
            "top1": make_player("top1", Position.TOP, 10),
            "mid1": make_player("mid1", Position.MID, 5.5),
            "bench1": make_player("bench1", Position.ADC, 100),
        }
        team.add_player(players["top1"], RosterSlot.TOP)
        team.add_player(players["mid1"], RosterSlot.FLEX)
        team.add_player(players["bench1"], RosterSlot.BENCH)

        assert team.calculate_weekly_points(1, players.get) == pytest.approx(15.5)
        assert team.weekly_points[1] == pytest.approx(15.5)
        assert team.total_points == pytest.approx(15.5)

    def test_recalculation_overwrites_the_week(self, team):
        player = make_player("top1", Position.TOP, 10)
        team.add_player(player, RosterSlot.TOP)

        team.calculate_weekly_points(1, {"top1": player}.get)
        team.calculate_weekly_points(1, {"top1": player}.get)
        team.calculate_weekly_points(2, {"top1": player}.get)

        assert team.weekly_points == {1: 10, 2: 10}
        assert team.total_points == pytest.approx(20)

    def test_unknown_players_are_skipped(self, team):
        team.add_player(make_player("ghost", Position.TOP, 10), RosterSlot.TOP)
        assert team.calculate_weekly_points(1, lambda _: None) == 0


def test_roster_dict_round_trip():
    roster = Roster()
    roster.assign(RosterSlot.JUNGLE, "jg1")
    roster.assign(RosterSlot.FLEX, "flex1")
    roster.assign(RosterSlot.BENCH, "b1")

    data = roster.to_dict()
    assert data["JUNGLE"] == "jg1"
    assert data["FLEX"] == "flex1"
    assert data["BENCH"] == ["b1"]
    assert Roster.from_dict(data) == roster
