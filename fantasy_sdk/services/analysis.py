# fantasy_sdk/services/analysis.py
from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from fantasy_sdk.core.errors import NotFoundError
from fantasy_sdk.db.models import FantasyRoster, PlayerRecord, TeamAnalysisRecord
from fantasy_sdk.repositories import LeagueRepository, TeamRepository
from fantasy_sdk.schemas.analysis import CategoryScore, TeamAnalysis, TeamCategoryTotals
from fantasy_sdk.services.evaluation import get_team_category_totals

logger = logging.getLogger(__name__)

# label -> (TeamCategoryTotals attribute, team_analysis column); ordering is the tie-break
CATEGORIES: Dict[str, tuple] = {
    "PTS": ("pts", "pts_zscore"),
    "REB": ("reb", "reb_zscore"),
    "AST": ("ast", "ast_zscore"),
    "STL": ("stl", "stl_zscore"),
    "BLK": ("blk", "blk_zscore"),
    "TO": ("to", "to_zscore"),
    "FG%": ("fg_pct", "fg_pct_zscore"),
    "FT%": ("ft_pct", "ft_pct_zscore"),
    "3PM": ("tpm", "tpm_zscore"),
}
POSITIONS = ("PG", "SG", "SF", "PF", "C")
MIN_STARTERS_PER_POSITION = 2


def calculate_z_score(value: float, all_values: Sequence[float]) -> float:
    """(value - mean) / population std; 0 for an empty list or zero spread."""
    if not all_values:
        return 0.0
    mean = sum(all_values) / len(all_values)
    std = math.sqrt(sum((v - mean) ** 2 for v in all_values) / len(all_values))
    if std == 0:
        return 0.0
    return (value - mean) / std


def analyze_team(team_id: int, totals: TeamCategoryTotals, league_totals: Sequence[TeamCategoryTotals]) -> TeamAnalysis:
    """
    Z-score every category of ``totals`` against the league (``league_totals`` includes this team).
    Turnovers are negated so a higher score is always better.
    """
    scores: Dict[str, float] = {}
    for label, (attr, _) in CATEGORIES.items():
        z = calculate_z_score(getattr(totals, attr), [getattr(t, attr) for t in league_totals])
        scores[label] = -z if label == "TO" else z

    ranked = sorted(
        (CategoryScore(category=k, z_score=v) for k, v in scores.items()),
        key=lambda c: c.z_score,
    )
    return TeamAnalysis(
        team_id=team_id,
        category_scores=scores,
        weak_categories=ranked[:3],
        strong_categories=sorted(ranked[-3:], key=lambda c: c.z_score, reverse=True),
    )


def analyze_position_needs(db: Session, team_id: int) -> List[str]:
    rows = db.execute(
        select(PlayerRecord.primary_position, func.count())
        .join(FantasyRoster, FantasyRoster.player_id == PlayerRecord.id)
        .where(FantasyRoster.team_id == team_id, FantasyRoster.is_starting.is_(True))
        .group_by(PlayerRecord.primary_position)
    ).all()
    counts = {pos: n for pos, n in rows if pos}
    return [pos for pos in POSITIONS if counts.get(pos, 0) < MIN_STARTERS_PER_POSITION]


def save_team_analysis(db: Session, analysis: TeamAnalysis) -> TeamAnalysisRecord:
    rec = db.get(TeamAnalysisRecord, analysis.team_id)
    if rec is None:
        rec = TeamAnalysisRecord(team_id=analysis.team_id)
        db.add(rec)

    for label, (_, column) in CATEGORIES.items():
        setattr(rec, column, analysis.category_scores.get(label, 0.0))

    weak = [c.category for c in analysis.weak_categories] + ["", "", ""]
    strong = [c.category for c in analysis.strong_categories] + ["", "", ""]
    rec.weakest_cat_1, rec.weakest_cat_2, rec.weakest_cat_3 = weak[:3]
    rec.strongest_cat_1, rec.strongest_cat_2, rec.strongest_cat_3 = strong[:3]

    needs = set(analysis.position_needs)
    rec.needs_pg = "PG" in needs
    rec.needs_sg = "SG" in needs
    rec.needs_sf = "SF" in needs
    rec.needs_pf = "PF" in needs
    rec.needs_c = "C" in needs
    db.flush()
    return rec


def analyze_all_teams(db: Session, league_id: int) -> List[TeamAnalysis]:
    if LeagueRepository(db).get(league_id) is None:
        raise NotFoundError(f"league {league_id} not found")

    teams = TeamRepository(db).get_by_league(league_id)
    totals = {t.id: get_team_category_totals(db, league_id, t.id) for t in teams}
    league_totals = list(totals.values())

    results = []
    for team in teams:
        analysis = analyze_team(team.id, totals[team.id], league_totals)
        analysis.position_needs = analyze_position_needs(db, team.id)
        save_team_analysis(db, analysis)
        results.append(analysis)

    logger.info("Analyzed %d teams for league %s", len(results), league_id)
    return results


def _from_record(rec: TeamAnalysisRecord) -> TeamAnalysis:
    scores = {label: getattr(rec, column) for label, (_, column) in CATEGORIES.items()}

    def picks(names: Sequence[str]) -> List[CategoryScore]:
        return [CategoryScore(category=n, z_score=scores.get(n, 0.0)) for n in names if n]

    flags = {"PG": rec.needs_pg, "SG": rec.needs_sg, "SF": rec.needs_sf, "PF": rec.needs_pf, "C": rec.needs_c}
    return TeamAnalysis(
        team_id=rec.team_id,
        category_scores=scores,
        weak_categories=picks([rec.weakest_cat_1, rec.weakest_cat_2, rec.weakest_cat_3]),
        strong_categories=picks([rec.strongest_cat_1, rec.strongest_cat_2, rec.strongest_cat_3]),
        position_needs=[pos for pos in POSITIONS if flags[pos]],
    )


def get_team_analysis(db: Session, team_id: int) -> Optional[TeamAnalysis]:
    """Stored analysis for a team, or None when the league hasn't been analyzed yet."""
    rec = db.get(TeamAnalysisRecord, team_id)
    return _from_record(rec) if rec is not None else None
