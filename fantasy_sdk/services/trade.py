# fantasy_sdk/services/trade.py
"""
Trade suggestions and stored proposals.

Suggestions pair a team with every other team whose category profile complements it,
then look for 1-for-1 swaps of starters with similar FPG that evaluate as fair.
"""
from __future__ import annotations

import json
import logging
from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from fantasy_sdk.core.errors import NotFoundError
from fantasy_sdk.db.models import FantasyRoster, PlayerProjectionRecord, PlayerRecord, TradeProposalRecord
from fantasy_sdk.repositories import TeamRepository
from fantasy_sdk.schemas.analysis import TeamAnalysis
from fantasy_sdk.schemas.trade import TradeImpact, TradePlayer, TradeProposal, TradeSuggestion
from fantasy_sdk.services.analysis import get_team_analysis
from fantasy_sdk.services.evaluation import NEUTRAL_POSITION_IMPACT, evaluate_trade

logger = logging.getLogger(__name__)

MIN_COMPLEMENTARY_SCORE = 2
MAX_FPG_DIFF_PCT = 15.0
DEFAULT_SUGGESTION_LIMIT = 10


def calculate_complementary_score(team_a: TeamAnalysis, team_b: TeamAnalysis) -> int:
    """Categories where B is weak and A strong, plus categories where B is strong and A weak."""
    a_weak = {c.category for c in team_a.weak_categories}
    a_strong = {c.category for c in team_a.strong_categories}

    score = sum(1 for c in team_b.weak_categories if c.category in a_strong)
    score += sum(1 for c in team_b.strong_categories if c.category in a_weak)
    return score


def is_good_fit(player_a: TradePlayer, player_b: TradePlayer) -> bool:
    """FPG within 15% of the pair's mean (inclusive). Two zero-value players never fit."""
    avg = (player_a.fpg + player_b.fpg) / 2.0
    if avg == 0:
        return False
    # multiplied out so 43 vs 37 lands exactly on 15%
    return abs(player_a.fpg - player_b.fpg) * 100.0 <= MAX_FPG_DIFF_PCT * abs(avg)


def format_benefit(impact: TradeImpact) -> str:
    """e.g. "Improves: PTS (+3.0), REB (+1.5) | Fills C need"."""
    if not impact.category_improvements:
        return "No significant benefit"

    parts = [f"{c.category} (+{c.change:.1f})" for c in impact.category_improvements[:3]]
    text = "Improves: " + ", ".join(parts)
    if impact.position_impact and impact.position_impact != NEUTRAL_POSITION_IMPACT:
        text += f" | {impact.position_impact}"
    return text


def get_starters_with_projections(db: Session, league_id: int, team_id: int) -> List[TradePlayer]:
    rows = db.execute(
        select(
            PlayerRecord.id,
            PlayerRecord.full_name,
            func.coalesce(PlayerRecord.primary_position, "F"),
            PlayerProjectionRecord.fpg,
        )
        .select_from(FantasyRoster)
        .join(PlayerRecord, PlayerRecord.id == FantasyRoster.player_id)
        .join(
            PlayerProjectionRecord,
            (PlayerProjectionRecord.player_id == PlayerRecord.id) & (PlayerProjectionRecord.league_id == league_id),
        )
        .where(FantasyRoster.team_id == team_id, FantasyRoster.is_starting.is_(True))
        .order_by(FantasyRoster.id)
    ).all()
    return [TradePlayer(player_id=r[0], player_name=r[1], position=r[2] or "F", fpg=r[3]) for r in rows]


def find_trades_with_team(
    db: Session,
    league_id: int,
    team_a_id: int,
    team_a_name: str,
    team_b_id: int,
    team_b_name: str,
) -> List[TradeSuggestion]:
    team_a_players = get_starters_with_projections(db, league_id, team_a_id)
    team_b_players = get_starters_with_projections(db, league_id, team_b_id)

    out = []
    for pa in team_a_players:
        for pb in team_b_players:
            if not is_good_fit(pa, pb):
                continue
            evaluation = evaluate_trade(db, league_id, team_a_id, [pa.player_id], team_b_id, [pb.player_id])
            if not evaluation.is_fair:
                continue
            out.append(TradeSuggestion(
                league_id=league_id,
                team_a_id=team_a_id,
                team_a_name=team_a_name,
                team_a_gives=[pa],
                team_b_id=team_b_id,
                team_b_name=team_b_name,
                team_b_gives=[pb],
                fairness_score=evaluation.fairness_score,
                team_a_benefit=format_benefit(evaluation.team_a_impact),
                team_b_benefit=format_benefit(evaluation.team_b_impact),
                recommendation=evaluation.recommendation,
            ))
    return out


def generate_suggestions(db: Session, team_id: int, limit: int = DEFAULT_SUGGESTION_LIMIT) -> List[TradeSuggestion]:
    """
    Fair 1-for-1 trades between ``team_id`` and complementary teams, best fairness first.
    Requires ``analyze_all_teams`` and valuations to have run for the league; other teams
    without a stored analysis are skipped.
    """
    teams = TeamRepository(db)
    team = teams.get(team_id)
    if team is None:
        raise NotFoundError(f"team {team_id} not found")

    mine = get_team_analysis(db, team_id)
    if mine is None:
        raise NotFoundError(f"no analysis for team {team_id}; run the league analysis first")

    suggestions: List[TradeSuggestion] = []
    for other in teams.get_by_league(team.league_id):
        if other.id == team_id:
            continue
        theirs = get_team_analysis(db, other.id)
        if theirs is None:
            logger.debug("Skipping team %s: not analyzed", other.id)
            continue
        score = calculate_complementary_score(mine, theirs)
        if score < MIN_COMPLEMENTARY_SCORE:
            continue
        suggestions.extend(
            find_trades_with_team(db, team.league_id, team.id, team.team_name, other.id, other.team_name)
        )

    # stable: equal fairness keeps team/roster order
    suggestions.sort(key=lambda s: s.fairness_score, reverse=True)
    logger.info("Found %d trade suggestions for team %s", len(suggestions), team_id)
    return suggestions[:limit]


def save_proposal(db: Session, proposal: TradeProposal) -> TradeProposalRecord:
    rec = TradeProposalRecord(
        league_id=proposal.league_id,
        team_a_id=proposal.team_a_id,
        team_b_id=proposal.team_b_id,
        trade_details=json.dumps({
            "team_a_gives": list(proposal.team_a_gives),
            "team_b_gives": list(proposal.team_b_gives),
        }),
        fairness_score=proposal.fairness_score,
        team_a_value_change=proposal.team_a_value_change,
        team_b_value_change=proposal.team_b_value_change,
        team_a_benefits=proposal.team_a_benefits,
        team_b_benefits=proposal.team_b_benefits,
        source=proposal.source,
        status=proposal.status,
    )
    db.add(rec)
    db.flush()
    logger.info("Saved %s trade proposal %s (teams %s/%s)", rec.source, rec.id, rec.team_a_id, rec.team_b_id)
    return rec


def _players_from_details(details: Optional[str], side: str) -> List[TradePlayer]:
    try:
        ids = json.loads(details or "{}").get(side, [])
    except ValueError:
        logger.warning("Unreadable trade details: %r", details)
        return []
    return [TradePlayer(player_id=int(pid)) for pid in ids]


def get_proposals_by_team(db: Session, team_id: int) -> List[TradeSuggestion]:
    """Proposals where the team is either side, excluding rejected ones, newest first."""
    rows = db.scalars(
        select(TradeProposalRecord)
        .where(
            or_(TradeProposalRecord.team_a_id == team_id, TradeProposalRecord.team_b_id == team_id),
            TradeProposalRecord.status != "rejected",
        )
        .order_by(TradeProposalRecord.suggested_at.desc(), TradeProposalRecord.id.desc())
    ).all()
    return [
        TradeSuggestion(
            id=r.id,
            league_id=r.league_id,
            team_a_id=r.team_a_id,
            team_a_gives=_players_from_details(r.trade_details, "team_a_gives"),
            team_b_id=r.team_b_id,
            team_b_gives=_players_from_details(r.trade_details, "team_b_gives"),
            fairness_score=r.fairness_score,
            team_a_benefit=r.team_a_benefits,
            team_b_benefit=r.team_b_benefits,
        )
        for r in rows
    ]
