# fantasy_sdk/services/valuation.py
"""
Player valuation for a league.

FPG (fantasy points per game) is the league-weighted sum of a player's per-game line.
Every active player gets a z-score against the whole pool (population std), a positional
scarcity multiplier, and an overall rank. Results replace the league's projection rows.
"""
from __future__ import annotations

import json
import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import and_, delete, func, select
from sqlalchemy.orm import Session

from fantasy_sdk.core.errors import NotFoundError
from fantasy_sdk.db.models import PlayerProjectionRecord, PlayerRecord, PlayerSeasonStats
from fantasy_sdk.repositories import LeagueRepository
from fantasy_sdk.schemas.valuation import CategoryProjections, PlayerValue, SeasonAverages
from fantasy_sdk.services.leagues import season_label

logger = logging.getLogger(__name__)

# Positions not listed here count as 1.0
SCARCITY_MULTIPLIERS: Dict[str, float] = {
    "PG": 1.0,
    "SG": 1.0,
    "SF": 1.1,
    "PF": 1.1,
    "C": 1.3,
}
DEFAULT_POSITION = "F"


def calculate_player_value(stats: SeasonAverages, scoring: Dict[str, float]) -> PlayerValue:
    """Missing scoring weights count as 0."""
    w = lambda cat: float(scoring.get(cat, 0.0) or 0.0)  # noqa: E731
    fpg = (
        stats.points_per_game * w("PTS")
        + stats.rebounds_per_game * w("REB")
        + stats.assists_per_game * w("AST")
        + stats.steals_per_game * w("STL")
        + stats.blocks_per_game * w("BLK")
        + stats.turnovers_per_game * w("TO")
        + stats.three_pointers_made * w("3PM")
    )
    return PlayerValue(
        player_id=stats.player_id,
        position=stats.primary_position or DEFAULT_POSITION,
        fpg=fpg,
        projections=CategoryProjections(
            pts=stats.points_per_game,
            reb=stats.rebounds_per_game,
            ast=stats.assists_per_game,
            stl=stats.steals_per_game,
            blk=stats.blocks_per_game,
            to=stats.turnovers_per_game,
            fg_pct=stats.field_goal_percentage,
            ft_pct=stats.free_throw_percentage,
            tpm=stats.three_pointers_made,
        ),
    )


def calculate_stats(values: Sequence[float]) -> Tuple[float, float]:
    """(mean, population standard deviation); (0, 0) for an empty input."""
    if not values:
        return 0.0, 0.0
    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return mean, math.sqrt(variance)


def calculate_z_scores(players: List[PlayerValue]) -> None:
    mean, std = calculate_stats([p.fpg for p in players])
    for p in players:
        p.z_score = (p.fpg - mean) / std if std > 0 else 0.0


def scarcity_multiplier(position: Optional[str]) -> float:
    return SCARCITY_MULTIPLIERS.get((position or DEFAULT_POSITION).upper(), 1.0)


def apply_position_scarcity(players: List[PlayerValue]) -> None:
    for p in players:
        p.scarcity_multiplier = scarcity_multiplier(p.position)


def rank_players(players: List[PlayerValue]) -> None:
    """Rank = 1 + number of players with a strictly higher FPG (ties share a rank)."""
    fpgs = [p.fpg for p in players]
    for p in players:
        p.overall_rank = 1 + sum(1 for other in fpgs if other > p.fpg)


def load_scoring_settings(raw: Optional[str]) -> Dict[str, float]:
    try:
        data = json.loads(raw or "{}")
    except ValueError as exc:
        raise ValueError(f"invalid scoring settings: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("scoring settings must be a JSON object")
    return {str(k): float(v) for k, v in data.items()}


def get_active_players_with_stats(db: Session, season: str) -> List[SeasonAverages]:
    """Every active player; players without a season row get zeros."""
    s = PlayerSeasonStats
    rows = db.execute(
        select(
            PlayerRecord.id,
            func.coalesce(PlayerRecord.primary_position, DEFAULT_POSITION),
            func.coalesce(s.points_per_game, 0),
            func.coalesce(s.rebounds_per_game, 0),
            func.coalesce(s.assists_per_game, 0),
            func.coalesce(s.steals_per_game, 0),
            func.coalesce(s.blocks_per_game, 0),
            func.coalesce(s.turnovers_per_game, 0),
            func.coalesce(s.field_goal_percentage, 0),
            func.coalesce(s.free_throw_percentage, 0),
            func.coalesce(s.three_pointers_made, 0),
        )
        .outerjoin(s, and_(s.player_id == PlayerRecord.id, s.season == season))
        .where(PlayerRecord.is_active.is_(True))
        .order_by(PlayerRecord.id)
    ).all()
    return [
        SeasonAverages(
            player_id=r[0],
            primary_position=r[1] or DEFAULT_POSITION,
            points_per_game=r[2],
            rebounds_per_game=r[3],
            assists_per_game=r[4],
            steals_per_game=r[5],
            blocks_per_game=r[6],
            turnovers_per_game=r[7],
            field_goal_percentage=r[8],
            free_throw_percentage=r[9],
            three_pointers_made=r[10],
        )
        for r in rows
    ]


def save_player_projections(db: Session, league_id: int, players: List[PlayerValue]) -> None:
    """Replace all projection rows of the league; commit/rollback is the caller's session scope."""
    db.execute(delete(PlayerProjectionRecord).where(PlayerProjectionRecord.league_id == league_id))
    db.add_all([
        PlayerProjectionRecord(
            player_id=p.player_id,
            league_id=league_id,
            fpg=p.fpg,
            proj_pts=p.projections.pts,
            proj_reb=p.projections.reb,
            proj_ast=p.projections.ast,
            proj_stl=p.projections.stl,
            proj_blk=p.projections.blk,
            proj_to=p.projections.to,
            proj_fg_pct=p.projections.fg_pct,
            proj_ft_pct=p.projections.ft_pct,
            proj_3pm=p.projections.tpm,
            z_score=p.z_score,
            overall_rank=p.overall_rank,
            scarcity_multiplier=p.scarcity_multiplier,
        )
        for p in players
    ])
    db.flush()


def calculate_all_player_values(db: Session, league_id: int, season: Optional[str] = None) -> List[PlayerValue]:
    league = LeagueRepository(db).get(league_id)
    if league is None:
        raise NotFoundError(f"league {league_id} not found")

    scoring = load_scoring_settings(league.scoring_settings)
    season = season or season_label(league.season_year)

    values = []
    for stats in get_active_players_with_stats(db, season):
        value = calculate_player_value(stats, scoring)
        value.league_id = league_id
        values.append(value)

    calculate_z_scores(values)
    apply_position_scarcity(values)
    rank_players(values)
    save_player_projections(db, league_id, values)

    logger.info("Valued %d players for league %s (season %s)", len(values), league_id, season)
    return values


def get_league_projections(db: Session, league_id: int, limit: Optional[int] = None) -> List[PlayerProjectionRecord]:
    q = (
        select(PlayerProjectionRecord)
        .where(PlayerProjectionRecord.league_id == league_id)
        .order_by(PlayerProjectionRecord.overall_rank, PlayerProjectionRecord.player_id)
    )
    if limit:
        q = q.limit(limit)
    return list(db.scalars(q))
