from __future__ import annotations

from fantasy_sdk.services.yahoo.parsers import (
    parse_draft_results,
    parse_leagues,
    parse_players,
    parse_roster,
    parse_scoreboard,
    parse_stat_categories,
    parse_standings,
    parse_stats,
    parse_teams,
    parse_transactions,
    parse_user_guid,
)
from tests.factories import (
    league_payload_node,
    league_teams_payload,
    player_node,
    players_payload,
    roster_payload,
    team_node,
    user_leagues_payload,
)


class TestLeagues:
    def test_users_games_leagues(self):
        payload = user_leagues_payload("454", [
            league_payload_node("454.l.111", "Alpha"),
            league_payload_node("454.l.222", "Beta", num_teams=12),
        ])
        leagues = parse_leagues(payload, game_key="nba")

        assert [lg.yahoo_league_id for lg in leagues] == ["111", "222"]
        assert leagues[0].yahoo_game_key == "454"
        assert leagues[0].league_key == "454.l.111"
        assert leagues[0].season_year == 2024
        assert leagues[0].current_week == 5
        assert leagues[1].num_teams == 12

    def test_empty_payload(self):
        assert parse_leagues({}) == []

    def test_user_guid(self):
        assert parse_user_guid(user_leagues_payload("454", [])) == "GUID123"
        assert parse_user_guid({"fantasy_content": {}}) is None


class TestTeams:
    def test_flattens_fragments_and_standings(self):
        payload = league_teams_payload("454.l.1", [
            team_node("454.l.1.t.1", "Ballers", manager="ann", wins=7, losses=3, rank=2),
            team_node("454.l.1.t.2", "Dunkers"),
        ])
        teams = parse_teams(payload)

        assert len(teams) == 2
        t = teams[0]
        assert (t.yahoo_team_id, t.yahoo_team_key, t.team_name) == ("1", "454.l.1.t.1", "Ballers")
        assert t.manager_name == "ann"
        assert (t.wins, t.losses, t.ties, t.rank) == (7, 3, 0, 2)
        assert t.points_for == 100.5

    def test_duplicate_keys_are_dropped(self):
        node = team_node("454.l.1.t.1", "Ballers")
        assert len(parse_teams(league_teams_payload("454.l.1", [node, node]))) == 1


class TestRoster:
    def test_starting_flag_from_selected_slot(self):
        payload = roster_payload("454.l.1.t.1", [
            player_node("454.p.1", "Guard One", ["PG", "SG"], selected="PG"),
            player_node("454.p.2", "Bench Guy", ["C"], selected="BN"),
            player_node("454.p.3", "Hurt Guy", ["SF"], selected="IL+"),
            player_node("454.p.4", "Util Guy", ["PF"], selected="util"),
            player_node("454.p.5", "Nowhere", ["PF"]),
        ])
        roster = parse_roster(payload)

        by_key = {r.player_key: r for r in roster}
        assert by_key["454.p.1"].is_starting is True
        assert by_key["454.p.1"].position == "PG"
        assert by_key["454.p.1"].eligible_positions == ["PG", "SG"]
        assert by_key["454.p.2"].is_starting is False
        assert by_key["454.p.3"].is_starting is False
        assert by_key["454.p.4"].selected_position == "UTIL"
        assert by_key["454.p.4"].is_starting is True
        assert by_key["454.p.5"].is_starting is False

    def test_player_fields(self):
        roster = parse_roster(roster_payload("454.l.1.t.1", [player_node("454.p.9", "Jane Doe", ["C"], selected="C", team_abbr="BOS")]))
        entry = roster[0]
        assert entry.player_id == "9"
        assert entry.full_name == "Jane Doe"
        assert entry.editorial_team_abbr == "BOS"


class TestPlayersAndStats:
    def test_player_stats_block(self):
        payload = players_payload("454.l.1", [player_node("454.p.7", "Stat Guy", ["SG"], stats={0: 10, 12: 250, 9004003: "90/200"})])
        players = parse_players(payload)

        assert len(players) == 1
        stats = players[0].player_stats
        assert stats.coverage_type == "season"
        assert stats.season == 2024
        assert {s.stat_id: s.value for s in stats.stats} == {0: "10", 12: "250", 9004003: "90/200"}

    def test_parse_stats_skips_garbage(self):
        stats = parse_stats([{"stat": {"stat_id": "5", "value": ".481"}}, {"stat": {"value": "1"}}, "junk"])
        assert [(s.stat_id, s.value) for s in stats] == [(5, ".481")]


class TestStandings:
    def test_standings_teams(self):
        payload = {"fantasy_content": {"league": [
            {"league_key": "454.l.1"},
            {"standings": [{"teams": {
                "0": team_node("454.l.1.t.1", "Ballers", wins=5, losses=1, rank=1),
                "count": 1,
            }}]},
        ]}}
        standings = parse_standings(payload)

        assert len(standings.teams) == 1
        st = standings.teams[0]
        assert st.name == "Ballers"
        assert st.team_standings.rank == 1
        assert st.team_standings.outcome_totals.wins == 5
        assert st.team_standings.outcome_totals.percentage == 0.5
        assert st.manager_nickname == "mgr"


class TestScoreboard:
    def _team(self, key, name, total):
        node = team_node(key, name)
        node["team"].append({"team_points": {"coverage_type": "week", "week": "3", "total": total}})
        return node

    def test_matchups_and_winner(self):
        payload = {"fantasy_content": {"league": [
            {"league_key": "454.l.1"},
            {"scoreboard": {"week": "3", "0": {"matchups": {
                "0": {"matchup": {
                    "week": "3",
                    "status": "postevent",
                    "is_playoffs": "0",
                    "winner_team_key": "454.l.1.t.2",
                    "0": {"teams": {
                        "0": self._team("454.l.1.t.1", "A", "88.5"),
                        "1": self._team("454.l.1.t.2", "B", "91"),
                        "count": 2,
                    }},
                }},
                "count": 1,
            }}}},
        ]}}
        matchups = parse_scoreboard(payload)

        assert len(matchups) == 1
        m = matchups[0]
        assert m.week == 3
        assert m.status == "postevent"
        assert m.is_playoffs is False
        assert [t.points for t in m.teams] == [88.5, 91.0]
        assert [t.is_winner for t in m.teams] == [False, True]


class TestDraftTransactionsSettings:
    def test_draft_results(self):
        payload = {"fantasy_content": {"league": [
            {"league_key": "454.l.1"},
            {"draft_results": {
                "0": {"draft_result": {"pick": 1, "round": 1, "team_key": "454.l.1.t.1", "player_key": "454.p.5"}},
                "1": {"draft_result": {"pick": "2", "round": "1", "team_key": "454.l.1.t.2", "player_key": "454.p.6"}},
                "count": 2,
            }},
        ]}}
        picks = parse_draft_results(payload)
        assert [(d.pick, d.round, d.player_key) for d in picks] == [(1, 1, "454.p.5"), (2, 1, "454.p.6")]

    def test_transactions(self):
        payload = {"fantasy_content": {"league": [
            {"league_key": "454.l.1"},
            {"transactions": {
                "0": {"transaction": [
                    {"transaction_key": "454.l.1.tr.9", "transaction_id": "9", "type": "add/drop",
                     "status": "successful", "timestamp": "1700000000", "faab_bid": "12"},
                    {"players": {
                        "0": {"player": [
                            [{"player_key": "454.p.1"}, {"player_id": "1"}, {"name": {"full": "In Guy"}}],
                            {"transaction_data": [{"type": "add", "source_type": "freeagents",
                                                   "destination_type": "team", "destination_team_key": "454.l.1.t.1"}]},
                        ]},
                        "count": 1,
                    }},
                ]},
                "count": 1,
            }},
        ]}}
        txs = parse_transactions(payload)

        assert len(txs) == 1
        tx = txs[0]
        assert (tx.type, tx.timestamp, tx.faab_bid) == ("add/drop", 1700000000, 12)
        assert tx.players[0].name.full == "In Guy"
        assert tx.players[0].transaction_data.destination_team_key == "454.l.1.t.1"

    def test_unparseable_numbers_fall_back_to_zero(self):
        payload = {"fantasy_content": {"league": [
            {"league_key": "454.l.1"},
            {"draft_results": {
                "0": {"draft_result": {"pick": "inf", "round": "n/a", "team_key": "454.l.1.t.1", "player_key": "454.p.5"}},
                "count": 1,
            }},
        ]}}
        (pick,) = parse_draft_results(payload)
        assert (pick.pick, pick.round) == (0, 0)

    def test_stat_categories(self):
        payload = {"fantasy_content": {"league": [
            {"league_key": "454.l.1"},
            {"settings": [{"stat_categories": {"stats": [
                {"stat": {"stat_id": 12, "name": "Points Scored", "display_name": "PTS", "sort_order": "1", "position_type": "P"}},
                {"stat": {"stat_id": 19, "name": "Turnovers", "display_name": "TO", "sort_order": "0", "position_type": "P"}},
            ]}}]},
        ]}}
        cats = parse_stat_categories(payload)
        assert [(c.stat_id, c.display_name, c.sort_order) for c in cats] == [(12, "PTS", 1), (19, "TO", 0)]
