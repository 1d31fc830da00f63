# fantasy_sdk/api/routes_trade.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fantasy_sdk.api.deps import to_http_error
from fantasy_sdk.core.errors import FantasySDKError, NotFoundError
from fantasy_sdk.db.session import get_db
from fantasy_sdk.repositories import LeagueRepository, TeamRepository
from fantasy_sdk.schemas.analysis import TeamAnalysis
from fantasy_sdk.schemas.trade import TradeEvaluateRequest, TradeEvaluation, TradeProposal, TradeSuggestion
from fantasy_sdk.services.analysis import get_team_analysis
from fantasy_sdk.services.evaluation import evaluate_trade
from fantasy_sdk.services.trade import (
    DEFAULT_SUGGESTION_LIMIT,
    format_benefit,
    generate_suggestions,
    get_proposals_by_team,
    save_proposal,
)

router = APIRouter(tags=["trades"])


@router.post("/trades/evaluate", response_model=TradeEvaluation)
def evaluate(body: TradeEvaluateRequest, db: Session = Depends(get_db)):
    """Score a trade; with ``save`` it is also stored as a user proposal."""
    if LeagueRepository(db).get(body.league_id) is None:
        raise to_http_error(NotFoundError(f"league {body.league_id} not found"))
    teams = TeamRepository(db)
    for team_id in (body.team_a_id, body.team_b_id):
        team = teams.get(team_id)
        if team is None or team.league_id != body.league_id:
            raise to_http_error(NotFoundError(f"team {team_id} not found in league {body.league_id}"))

    evaluation = evaluate_trade(
        db, body.league_id, body.team_a_id, body.team_a_gives, body.team_b_id, body.team_b_gives
    )
    if body.save:
        save_proposal(db, TradeProposal(
            league_id=body.league_id,
            team_a_id=body.team_a_id,
            team_b_id=body.team_b_id,
            team_a_gives=body.team_a_gives,
            team_b_gives=body.team_b_gives,
            fairness_score=evaluation.fairness_score,
            team_a_value_change=evaluation.team_a_impact.value_change,
            team_b_value_change=evaluation.team_b_impact.value_change,
            team_a_benefits=format_benefit(evaluation.team_a_impact),
            team_b_benefits=format_benefit(evaluation.team_b_impact),
        ))
    return evaluation


@router.get("/teams/{team_id}/analysis", response_model=TeamAnalysis)
def team_analysis(team_id: int, db: Session = Depends(get_db)):
    result = get_team_analysis(db, team_id)
    if result is None:
        raise to_http_error(NotFoundError(f"no analysis for team {team_id}"))
    return result


@router.get("/teams/{team_id}/trade-suggestions", response_model=List[TradeSuggestion])
def trade_suggestions(
    team_id: int,
    limit: int = Query(DEFAULT_SUGGESTION_LIMIT, ge=1, le=100),
    db: Session = Depends(get_db),
):
    try:
        return generate_suggestions(db, team_id, limit)
    except FantasySDKError as exc:
        raise to_http_error(exc)


@router.get("/teams/{team_id}/proposals", response_model=List[TradeSuggestion])
def team_proposals(team_id: int, db: Session = Depends(get_db)):
    if TeamRepository(db).get(team_id) is None:
        raise to_http_error(NotFoundError(f"team {team_id} not found"))
    return get_proposals_by_team(db, team_id)
