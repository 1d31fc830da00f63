from __future__ import annotations

import math

import pytest

from fantasy_sdk.core.errors import NotFoundError
from fantasy_sdk.db.models import TeamAnalysisRecord
from fantasy_sdk.schemas.analysis import TeamCategoryTotals
from fantasy_sdk.services.analysis import (
    analyze_all_teams,
    analyze_position_needs,
    analyze_team,
    calculate_z_score,
    get_team_analysis,
)
from tests.factories import add_league, add_player, add_projection, add_roster, add_team


def test_z_score_uses_population_std():
    assert calculate_z_score(70, [30, 50, 70]) == pytest.approx(math.sqrt(1.5))
    assert calculate_z_score(50, [30, 50, 70]) == 0.0
    assert calculate_z_score(5, [5, 5, 5]) == 0.0
    assert calculate_z_score(5, []) == 0.0


class TestAnalyzeTeam:
    def test_weak_and_strong_ordering(self):
        mine = TeamCategoryTotals(pts=120, reb=50, ast=10, to=20)
        other = TeamCategoryTotals(pts=100, reb=40, ast=30, to=10)
        result = analyze_team(1, mine, [mine, other])

        assert result.category_scores["PTS"] == pytest.approx(1.0)
        assert result.category_scores["AST"] == pytest.approx(-1.0)
        # more turnovers is worse
        assert result.category_scores["TO"] == pytest.approx(-1.0)
        assert [c.category for c in result.weak_categories] == ["AST", "TO", "STL"]
        assert [c.category for c in result.strong_categories] == ["PTS", "REB", "3PM"]

    def test_lone_team_is_average_everywhere(self):
        totals = TeamCategoryTotals(pts=100)
        result = analyze_team(1, totals, [totals])
        assert set(result.category_scores.values()) == {0.0}
        assert len(result.weak_categories) == 3
        assert len(result.strong_categories) == 3


def test_position_needs_count_starters_only(db):
    league = add_league(db)
    team = add_team(db, league, "1", "Needy")
    for i, pos in enumerate(["PG", "PG", "SG", "SG", "C", "C", "SF"]):
        add_roster(db, team, add_player(db, f"454.p.{i}", f"Starter {i}", pos))
    for i, pos in enumerate(["PF", "PF"], start=100):
        add_roster(db, team, add_player(db, f"454.p.{i}", f"Bench {i}", pos), starting=False)

    assert analyze_position_needs(db, team.id) == ["SF", "PF"]


class TestAnalyzeAllTeams:
    def seed(self, db):
        league = add_league(db)
        a = add_team(db, league, "1", "Scorers")
        b = add_team(db, league, "2", "Passers")
        scorer = add_player(db, "454.p.1", "Scorer", "SG")
        passer = add_player(db, "454.p.2", "Passer", "PG")
        add_roster(db, a, scorer)
        add_roster(db, b, passer)
        add_projection(db, league, scorer, 40.0, pts=30, reb=6, ast=2, to=3, tpm=4)
        add_projection(db, league, passer, 38.0, pts=15, reb=4, ast=11, to=2, tpm=1)
        return league, a, b

    def test_persists_and_reads_back(self, db):
        league, a, b = self.seed(db)
        results = analyze_all_teams(db, league.id)

        assert [r.team_id for r in results] == [a.id, b.id]
        scorers = results[0]
        assert scorers.category_scores["PTS"] == pytest.approx(1.0)
        assert scorers.category_scores["TO"] == pytest.approx(-1.0)
        assert "PTS" in [c.category for c in scorers.strong_categories]
        assert "AST" in [c.category for c in scorers.weak_categories]
        assert scorers.position_needs == ["PG", "SG", "SF", "PF", "C"]

        rec = db.get(TeamAnalysisRecord, a.id)
        assert rec.pts_zscore == pytest.approx(1.0)
        assert rec.needs_sg is True
        assert get_team_analysis(db, a.id) == scorers

    def test_rerun_updates_in_place(self, db):
        league, a, b = self.seed(db)
        analyze_all_teams(db, league.id)
        analyze_all_teams(db, league.id)
        assert db.query(TeamAnalysisRecord).count() == 2

    def test_unknown_league(self, db):
        with pytest.raises(NotFoundError):
            analyze_all_teams(db, 404)

    def test_missing_analysis_is_none(self, db):
        league, a, _ = self.seed(db)
        assert get_team_analysis(db, a.id) is None
