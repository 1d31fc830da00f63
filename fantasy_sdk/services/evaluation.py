# fantasy_sdk/services/evaluation.py
"""
Trade evaluation.

Given the players each side gives up, score how balanced the trade is (fairness on summed
FPG) and what it does to each team's starting-roster category totals.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Sequence, Tuple

from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session

from fantasy_sdk.db.models import FantasyRoster, PlayerProjectionRecord, PlayerRecord
from fantasy_sdk.schemas.analysis import TeamCategoryTotals
from fantasy_sdk.schemas.trade import CategoryChange, TradeEvaluation, TradeImpact
from fantasy_sdk.schemas.valuation import PlayerProjection

logger = logging.getLogger(__name__)

FAIRNESS_THRESHOLD = 75.0
NEUTRAL_POSITION_IMPACT = "Neutral position impact"

# (label, TeamCategoryTotals / PlayerProjection attribute); the counting stats a trade moves
TRADED_CATEGORIES: Tuple[Tuple[str, str], ...] = (
    ("PTS", "pts"),
    ("REB", "reb"),
    ("AST", "ast"),
    ("STL", "stl"),
    ("BLK", "blk"),
    ("TO", "to"),
    ("3PM", "tpm"),
)


def sum_fpg(players: Sequence[PlayerProjection]) -> float:
    return sum(p.fpg for p in players)


def calculate_fairness_score(
    team_a_players: Sequence[PlayerProjection],
    team_b_players: Sequence[PlayerProjection],
) -> float:
    """100 - |A - B| / mean(A, B) * 100, clamped to [0, 100]. Two empty sides are perfectly fair."""
    a = sum_fpg(team_a_players)
    b = sum_fpg(team_b_players)
    if a == 0 and b == 0:
        return 100.0

    avg = (a + b) / 2.0
    if avg == 0:
        return 0.0

    score = 100.0 - abs(a - b) / avg * 100.0
    return max(0.0, min(100.0, score))


def get_player_projections(db: Session, league_id: int, player_ids: Sequence[int]) -> List[PlayerProjection]:
    if not player_ids:
        return []
    pp = PlayerProjectionRecord
    rows = db.execute(
        select(
            pp.player_id,
            pp.fpg,
            pp.proj_pts,
            pp.proj_reb,
            pp.proj_ast,
            pp.proj_stl,
            pp.proj_blk,
            pp.proj_to,
            pp.proj_fg_pct,
            pp.proj_ft_pct,
            pp.proj_3pm,
            func.coalesce(PlayerRecord.primary_position, "F"),
        )
        .join(PlayerRecord, PlayerRecord.id == pp.player_id)
        .where(pp.league_id == league_id, pp.player_id.in_(list(player_ids)))
        .order_by(pp.player_id)
    ).all()
    return [
        PlayerProjection(
            player_id=r[0],
            fpg=r[1],
            pts=r[2],
            reb=r[3],
            ast=r[4],
            stl=r[5],
            blk=r[6],
            to=r[7],
            fg_pct=r[8],
            ft_pct=r[9],
            tpm=r[10],
            position=r[11] or "F",
        )
        for r in rows
    ]


def get_team_category_totals(db: Session, league_id: int, team_id: int) -> TeamCategoryTotals:
    """Starting-roster totals from the league's projections (counting stats summed, FG%/FT% averaged)."""
    pp = PlayerProjectionRecord
    row = db.execute(
        select(
            func.coalesce(func.sum(pp.proj_pts), 0),
            func.coalesce(func.sum(pp.proj_reb), 0),
            func.coalesce(func.sum(pp.proj_ast), 0),
            func.coalesce(func.sum(pp.proj_stl), 0),
            func.coalesce(func.sum(pp.proj_blk), 0),
            func.coalesce(func.sum(pp.proj_to), 0),
            func.coalesce(func.avg(pp.proj_fg_pct), 0),
            func.coalesce(func.avg(pp.proj_ft_pct), 0),
            func.coalesce(func.sum(pp.proj_3pm), 0),
        )
        .select_from(FantasyRoster)
        .join(pp, and_(pp.player_id == FantasyRoster.player_id, pp.league_id == league_id))
        .where(FantasyRoster.team_id == team_id, FantasyRoster.is_starting.is_(True))
    ).one()
    return TeamCategoryTotals(
        pts=row[0], reb=row[1], ast=row[2], stl=row[3], blk=row[4],
        to=row[5], fg_pct=row[6], ft_pct=row[7], tpm=row[8],
    )


def simulate_trade(
    current: TeamCategoryTotals,
    players_in: Sequence[PlayerProjection],
    players_out: Sequence[PlayerProjection],
) -> TeamCategoryTotals:
    """Counting categories only; the percentage averages are left as they were."""
    after = current.model_copy()
    for _, attr in TRADED_CATEGORIES:
        delta = sum(getattr(p, attr) for p in players_in) - sum(getattr(p, attr) for p in players_out)
        setattr(after, attr, getattr(current, attr) + delta)
    return after


def calculate_category_changes(before: TeamCategoryTotals, after: TeamCategoryTotals) -> List[CategoryChange]:
    changes = []
    for label, attr in TRADED_CATEGORIES:
        b, a = getattr(before, attr), getattr(after, attr)
        change = a - b
        changes.append(CategoryChange(
            category=label,
            change=change,
            percent_change=change / b * 100.0 if b != 0 else 0.0,
        ))
    return changes


def split_changes(changes: Sequence[CategoryChange]) -> Tuple[List[CategoryChange], List[CategoryChange]]:
    """(improvements, declines). Fewer turnovers is an improvement; zero changes are neither."""
    improvements, declines = [], []
    for c in changes:
        signed = -c.change if c.category == "TO" else c.change
        if signed > 0:
            improvements.append(c)
        elif signed < 0:
            declines.append(c)
    return improvements, declines


def _position_counts(players: Sequence[PlayerProjection]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for p in players:
        counts[p.position] = counts.get(p.position, 0) + 1
    return counts


def analyze_position_impact(
    players_in: Sequence[PlayerProjection],
    players_out: Sequence[PlayerProjection],
) -> str:
    """A gap (losing more at a position than coming back) wins over a filled need."""
    ins = _position_counts(players_in)
    outs = _position_counts(players_out)

    for pos, n_out in outs.items():
        if ins.get(pos, 0) < n_out:
            return f"Creates {pos} gap"
    for pos, n_in in ins.items():
        if n_in > outs.get(pos, 0):
            return f"Fills {pos} need"
    return NEUTRAL_POSITION_IMPACT


def calculate_net_benefit(
    value_change: float,
    improvements: Sequence[CategoryChange],
    declines: Sequence[CategoryChange],
) -> float:
    benefit = value_change
    benefit += sum(abs(c.change) * 0.5 for c in improvements)
    benefit -= sum(abs(c.change) * 0.5 for c in declines)
    return benefit


def calculate_team_impact(
    db: Session,
    league_id: int,
    team_id: int,
    players_in: Sequence[PlayerProjection],
    players_out: Sequence[PlayerProjection],
) -> TradeImpact:
    before = get_team_category_totals(db, league_id, team_id)
    after = simulate_trade(before, players_in, players_out)
    improvements, declines = split_changes(calculate_category_changes(before, after))
    value_change = sum_fpg(players_in) - sum_fpg(players_out)

    return TradeImpact(
        team_id=team_id,
        value_change=value_change,
        category_improvements=improvements,
        category_declines=declines,
        position_impact=analyze_position_impact(players_in, players_out),
        net_benefit=calculate_net_benefit(value_change, improvements, declines),
    )


def generate_recommendation(evaluation: TradeEvaluation) -> str:
    a = evaluation.team_a_impact.net_benefit
    b = evaluation.team_b_impact.net_benefit
    if not evaluation.is_fair:
        return "Trade is imbalanced. Value difference too large."
    if a > 2 and b > 2:
        return "Strong mutual benefit. Both teams improve."
    if a > 0 and b > 0:
        return "Fair trade with mutual benefit."
    if a < 0 or b < 0:
        return "One team may not benefit sufficiently."
    return "Even trade with minimal impact."


def evaluate_trade(
    db: Session,
    league_id: int,
    team_a_id: int,
    team_a_gives: Sequence[int],
    team_b_id: int,
    team_b_gives: Sequence[int],
) -> TradeEvaluation:
    """
    Score a trade where team A sends ``team_a_gives`` to team B and receives ``team_b_gives``.
    Player ids without a projection in the league are ignored.
    """
    a_out = get_player_projections(db, league_id, team_a_gives)
    b_out = get_player_projections(db, league_id, team_b_gives)

    fairness = calculate_fairness_score(a_out, b_out)
    evaluation = TradeEvaluation(
        team_a_impact=calculate_team_impact(db, league_id, team_a_id, players_in=b_out, players_out=a_out),
        team_b_impact=calculate_team_impact(db, league_id, team_b_id, players_in=a_out, players_out=b_out),
        fairness_score=fairness,
        is_fair=fairness >= FAIRNESS_THRESHOLD,
    )
    evaluation.recommendation = generate_recommendation(evaluation)

    logger.debug(
        "Evaluated trade league=%s %s%s <-> %s%s fairness=%.1f",
        league_id, team_a_id, list(team_a_gives), team_b_id, list(team_b_gives), fairness,
    )
    return evaluation
