"""Tests for league scheduling, weekly scoring and standings."""

import pytest

from rift_league.models.league import DraftStatus, League, Matchup, Standing, build_round_robin
from rift_league.models.player import Player, Position
from rift_league.models.team import FantasyTeam, RosterSlot


def pairings(week: list[Matchup]) -> list[tuple[str, str]]:
    return [(m.home_team, m.away_team) for m in week]


def make_league(team_count: int, max_teams: int = 10) -> tuple[League, dict[str, FantasyTeam]]:
    league = League(name="Test League", max_teams=max_teams, id="league_test")
    teams = {}
    for i in range(team_count):
        team = FantasyTeam(id=f"T{i}", name=f"Team {i}", owner=f"user{i}", user_id=f"u{i}")
        assert league.add_team(team)
        teams[team.id] = team
    return league, teams


class TestGenerateSchedule:
    def test_four_team_rotation(self):
        league, _ = make_league(4)
        assert league.generate_schedule(3)

        assert len(league.schedule) == 3
        assert pairings(league.schedule[0]) == [("T0", "T3"), ("T1", "T2")]
        assert pairings(league.schedule[1]) == [("T0", "T2"), ("T3", "T1")]
        assert pairings(league.schedule[2]) == [("T0", "T1"), ("T2", "T3")]

    def test_matchup_ids_and_weeks(self):
        league, _ = make_league(4)
        league.generate_schedule(2)
        week2 = league.schedule[1]
        assert [m.id for m in week2] == ["week2_match1", "week2_match2"]
        assert all(m.week == 2 and not m.completed for m in week2)

    def test_pairings_repeat_after_full_cycle(self):
        league, _ = make_league(4)
        league.generate_schedule(4)
        assert pairings(league.schedule[3]) == pairings(league.schedule[0])

    def test_odd_team_count_fails_and_keeps_schedule(self):
        league, _ = make_league(4)
        league.generate_schedule(3)
        before = [pairings(w) for w in league.schedule]

        league.add_team(FantasyTeam(id="T4", name="Team 4", owner="user4"))
        assert not league.generate_schedule(3)
        assert [pairings(w) for w in league.schedule] == before

    def test_fewer_than_two_teams_fails(self):
        league, _ = make_league(0)
        assert not league.generate_schedule()
        assert league.schedule == []

    def test_regeneration_is_deterministic(self):
        league, _ = make_league(6)
        league.generate_schedule(9)
        first = [pairings(w) for w in league.schedule]
        league.generate_schedule(9)
        assert [pairings(w) for w in league.schedule] == first

    def test_every_team_plays_once_per_week(self):
        teams = [f"T{i}" for i in range(8)]
        for week in build_round_robin(teams, 7):
            played = [t for m in week for t in (m.home_team, m.away_team)]
            assert sorted(played) == sorted(teams)


class TestMembership:
    def test_add_team_sets_league_id(self):
        league, teams = make_league(1)
        assert teams["T0"].league_id == league.id

    def test_join_when_full_fails_without_mutation(self):
        league, _ = make_league(2, max_teams=2)
        extra = FantasyTeam(id="T9", name="Late", owner="late")

        assert league.is_full
        assert not league.add_team(extra)
        assert league.teams == ["T0", "T1"]
        assert extra.league_id is None

    def test_duplicate_team_rejected(self):
        league, teams = make_league(1)
        assert not league.add_team(teams["T0"])
        assert league.teams == ["T0"]

    def test_creator_is_member(self):
        league = League(name="Mine", creator_id="u_creator")
        assert league.is_member("u_creator")
        assert not league.add_member("u_creator")


class TestWeekScores:
    @pytest.fixture
    def scored_league(self):
        league, teams = make_league(4)
        players = {}
        for i, team in enumerate(teams.values()):
            player = Player(
                id=f"p{i}",
                name=f"P{i}",
                role=Position.TOP,
                team="Pro",
                region="AMERICAS",
                fantasy_points=10.0 * (i + 1),
            )
            players[player.id] = player
            team.add_player(player, RosterSlot.TOP)
        league.generate_schedule(3)
        return league, teams, players

    def test_scores_and_completes_week(self, scored_league):
        league, teams, players = scored_league
        assert league.calculate_week_scores(1, teams.get, players.get)

        home_vs_away = [(m.home_score, m.away_score, m.completed) for m in league.schedule[0]]
        # T0(10) vs T3(40), T1(20) vs T2(30)
        assert home_vs_away == [(10.0, 40.0, True), (20.0, 30.0, True)]
        assert league.current_week == 1

    def test_invalid_week_rejected(self, scored_league):
        league, teams, players = scored_league
        assert not league.calculate_week_scores(0, teams.get, players.get)
        assert not league.calculate_week_scores(4, teams.get, players.get)

    def test_standings_sorted_by_wins_then_points(self, scored_league):
        league, teams, players = scored_league
        league.calculate_week_scores(1, teams.get, players.get)

        order = [s.team_id for s in league.standings]
        assert order[:2] == ["T3", "T2"]
        assert league.standings[0].wins == 1
        assert teams["T0"].losses == 1

    def test_tie_counts_for_neither(self):
        league, _ = make_league(2)
        league.generate_schedule(1)
        matchup = league.schedule[0][0]
        matchup.home_score = matchup.away_score = 12.0
        matchup.completed = True

        standings = league.update_standings()
        assert all(s.wins == 0 and s.losses == 0 for s in standings)


def test_update_standings_orders_by_points_on_equal_wins():
    league, teams = make_league(2)
    league.standings = [Standing("T0", total_points=5.0), Standing("T1", total_points=50.0)]
    standings = league.update_standings()
    assert [s.team_id for s in standings] == ["T1", "T0"]


def test_player_pool_uses_region_aliases():
    league = League(name="NA", regions=["AMERICAS"])
    players = [
        Player(id="a", name="A", role=Position.TOP, team="C9", region="NORTH"),
        Player(id="b", name="B", role=Position.TOP, team="G2", region="EMEA"),
        Player(id="c", name="C", role=Position.TOP, team="TL", region="", home_league="LCS"),
        Player(id="a", name="A", role=Position.TOP, team="C9", region="NORTH"),
    ]
    assert league.initialize_player_pool(players) == 2
    assert league.player_pool == ["a", "c"]


def test_league_dict_round_trip():
    league, teams = make_league(2)
    league.creator_id = "u0"
    league.generate_schedule(2)
    restored = League.from_dict(league.to_dict())

    assert restored.id == league.id
    assert restored.teams == league.teams
    assert [pairings(w) for w in restored.schedule] == [pairings(w) for w in league.schedule]
    assert restored.creator_id == "u0"


@pytest.mark.parametrize(
    "available,picks,complete",
    [
        ([], {}, True),
        (["p1"], {}, False),
        (["p1"], {"T0": 5, "T1": 5}, True),
        (["p1"], {"T0": 5, "T1": 4}, False),
        ([], {"T0": 0}, True),
    ],
)
def test_draft_completion(available, picks, complete):
    assert DraftStatus(available, picks).is_complete is complete
