# fantasy_sdk/api/routes_league.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fantasy_sdk.api.deps import get_yahoo_client, to_http_error
from fantasy_sdk.core.errors import FantasySDKError, NotFoundError
from fantasy_sdk.db.session import get_db
from fantasy_sdk.repositories import LeagueRepository
from fantasy_sdk.schemas.analysis import TeamAnalysis
from fantasy_sdk.schemas.league import LeagueImportRequest, LeagueRecordOut
from fantasy_sdk.schemas.team import TeamRecordOut
from fantasy_sdk.schemas.valuation import PlayerProjectionOut
from fantasy_sdk.services import analysis, leagues, valuation
from fantasy_sdk.services.yahoo import YahooClient

router = APIRouter(prefix="/leagues", tags=["leagues"])


def _require_league(db: Session, league_id: int) -> None:
    if LeagueRepository(db).get(league_id) is None:
        raise to_http_error(NotFoundError(f"league {league_id} not found"))


@router.get("", response_model=List[LeagueRecordOut])
def list_leagues(db: Session = Depends(get_db)):
    """All imported leagues, newest first."""
    return leagues.get_user_leagues(db)


@router.post("/import", response_model=LeagueRecordOut, status_code=201)
def import_league(
    body: LeagueImportRequest,
    db: Session = Depends(get_db),
    client: YahooClient = Depends(get_yahoo_client),
):
    try:
        return leagues.import_league(db, client, body.yahoo_league_id, body.user_team_id, body.game_key)
    except FantasySDKError as exc:
        raise to_http_error(exc)


@router.get("/{league_id}/teams", response_model=List[TeamRecordOut])
def league_teams(league_id: int, db: Session = Depends(get_db)):
    _require_league(db, league_id)
    return leagues.get_league_teams(db, league_id)


@router.post("/{league_id}/sync")
def sync_league(
    league_id: int,
    stats: bool = Query(False, description="Also pull season stats for rostered players"),
    db: Session = Depends(get_db),
    client: YahooClient = Depends(get_yahoo_client),
):
    try:
        teams = leagues.sync_teams_and_rosters(db, client, league_id)
        players = leagues.sync_player_stats(db, client, league_id) if stats else 0
    except FantasySDKError as exc:
        raise to_http_error(exc)
    return {"league_id": league_id, "teams_synced": teams, "player_stats_synced": players}


@router.post("/{league_id}/valuations", response_model=List[PlayerProjectionOut])
def run_valuations(
    league_id: int,
    season: Optional[str] = Query(None, description='Stats season label, e.g. "2024-25"'),
    db: Session = Depends(get_db),
):
    try:
        valuation.calculate_all_player_values(db, league_id, season)
    except FantasySDKError as exc:
        raise to_http_error(exc)
    return valuation.get_league_projections(db, league_id)


@router.get("/{league_id}/valuations", response_model=List[PlayerProjectionOut])
def league_valuations(
    league_id: int,
    limit: Optional[int] = Query(None, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    _require_league(db, league_id)
    return valuation.get_league_projections(db, league_id, limit)


@router.post("/{league_id}/analysis", response_model=List[TeamAnalysis])
def run_analysis(league_id: int, db: Session = Depends(get_db)):
    try:
        return analysis.analyze_all_teams(db, league_id)
    except FantasySDKError as exc:
        raise to_http_error(exc)
