from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from fantasy_sdk.db.models import FantasyLeague, FantasyRoster
from fantasy_sdk.repositories import LeagueRepository, PlayerRepository, RosterRepository, TeamRepository
from fantasy_sdk.schemas.team import RosterEntry
from fantasy_sdk.schemas.valuation import SeasonAverages
from tests.factories import add_league, add_player, add_roster, add_team


class TestLeagueRepository:
    def test_create_and_lookup(self, db):
        repo = LeagueRepository(db)
        league = repo.create(FantasyLeague(yahoo_league_id="777", yahoo_game_key="454", league_name="L"))

        assert league.id is not None
        assert repo.get(league.id) is league
        assert repo.get_by_yahoo_id("777") is league
        assert repo.get_by_yahoo_id("nope") is None

    def test_yahoo_id_is_unique(self, db):
        add_league(db, "1")
        with pytest.raises(IntegrityError):
            add_league(db, "1")

    def test_get_all_newest_first(self, db):
        a = add_league(db, "1")
        b = add_league(db, "2")
        assert [lg.id for lg in LeagueRepository(db).get_all()] == [b.id, a.id]

    def test_update_sync_time_and_delete(self, db):
        league = add_league(db)
        repo = LeagueRepository(db)
        assert league.last_synced_at is None
        repo.update_sync_time(league.id)
        assert league.last_synced_at is not None

        assert repo.delete(league.id) is True
        assert repo.get(league.id) is None
        assert repo.delete(league.id) is False


class TestTeamRepository:
    def test_by_league_orders_unranked_last(self, db):
        league = add_league(db)
        t0 = add_team(db, league, "1", "Unranked", rank=0)
        t2 = add_team(db, league, "2", "Second", rank=2)
        t1 = add_team(db, league, "3", "First", rank=1)

        assert [t.id for t in TeamRepository(db).get_by_league(league.id)] == [t1.id, t2.id, t0.id]

    def test_user_team_and_key_lookup(self, db):
        league = add_league(db)
        add_team(db, league, "1", "Them")
        mine = add_team(db, league, "2", "Mine", is_user_team=True)
        repo = TeamRepository(db)

        assert repo.get_user_team(league.id) is mine
        assert repo.get_by_key(league.id, mine.yahoo_team_key) is mine
        assert repo.get_by_key(league.id, "missing") is None

    def test_update(self, db):
        league = add_league(db)
        team = add_team(db, league, "1", "Old")
        team.team_name = "New"
        TeamRepository(db).update(team)
        assert TeamRepository(db).get(team.id).team_name == "New"


class TestRosterRepository:
    def test_starters_first_then_position(self, db):
        league = add_league(db)
        team = add_team(db, league, "1", "T")
        bench = add_roster(db, team, add_player(db, "454.p.1", "Bench", "C"), starting=False)
        sg = add_roster(db, team, add_player(db, "454.p.2", "Shooter", "SG"))
        c = add_roster(db, team, add_player(db, "454.p.3", "Center", "C"))

        assert [r.id for r in RosterRepository(db).get_by_team(team.id)] == [c.id, sg.id, bench.id]

    def test_delete_by_team(self, db):
        league = add_league(db)
        team = add_team(db, league, "1", "T")
        add_roster(db, team, add_player(db, "454.p.1", "A"))
        add_roster(db, team, add_player(db, "454.p.2", "B"))
        repo = RosterRepository(db)

        assert repo.delete_by_team(team.id) == 2
        assert repo.get_by_team(team.id) == []

    def test_player_must_exist(self, db):
        league = add_league(db)
        team = add_team(db, league, "1", "T")
        with pytest.raises(IntegrityError):
            RosterRepository(db).create(FantasyRoster(team_id=team.id, player_id=9999))

    def test_player_id_by_yahoo_key(self, db):
        p = add_player(db, "454.p.42", "X")
        assert RosterRepository(db).get_player_id_by_yahoo_key("454.p.42") == p.id
        assert RosterRepository(db).get_player_id_by_yahoo_key("454.p.0") is None


class TestPlayerRepository:
    def test_upsert_from_roster(self, db):
        repo = PlayerRepository(db)
        entry = RosterEntry(
            player_id="5", player_key="454.p.5", full_name="Five", position="PG",
            eligible_positions=["PG", "SG"], selected_position="PG", is_starting=True,
        )
        first = repo.upsert_from_roster(entry)
        assert (first.primary_position, first.eligible_positions) == ("PG", "PG,SG")

        entry.full_name = "Five Renamed"
        second = repo.upsert_from_roster(entry)
        assert second.id == first.id
        assert repo.get_by_yahoo_key("454.p.5").full_name == "Five Renamed"

    def test_upsert_season_stats(self, db):
        p = add_player(db, "454.p.1", "A")
        repo = PlayerRepository(db)
        repo.upsert_season_stats("2024-25", SeasonAverages(player_id=p.id, points_per_game=20), games_played=10)
        row = repo.upsert_season_stats("2024-25", SeasonAverages(player_id=p.id, points_per_game=22), games_played=11)

        assert row.points_per_game == 22
        assert row.games_played == 11
