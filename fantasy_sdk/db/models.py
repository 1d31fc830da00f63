from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    # naive UTC; SQLite drops tzinfo on the way back anyway
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    pass


class OAuthToken(Base):
    __tablename__ = "oauth_tokens"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(128), index=True)

    access_token: Mapped[str] = mapped_column(Text)
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    expires_in: Mapped[int | None] = mapped_column(Integer, nullable=True)
    token_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    scope: Mapped[str | None] = mapped_column(Text, nullable=True)
    raw: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class ApiCacheEntry(Base):
    __tablename__ = "yahoo_api_cache"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    cache_key: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    cache_value: Mapped[str] = mapped_column(Text)
    expires_at: Mapped[datetime] = mapped_column(DateTime, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class FantasyLeague(Base):
    __tablename__ = "fantasy_leagues"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    yahoo_league_id: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    yahoo_game_key: Mapped[str] = mapped_column(String(16))
    league_name: Mapped[str] = mapped_column(String(255))
    season_year: Mapped[int] = mapped_column(Integer, default=0)
    scoring_type: Mapped[str] = mapped_column(String(32), default="")
    scoring_settings: Mapped[str] = mapped_column(Text, default="{}")  # JSON {category: weight}
    num_teams: Mapped[int] = mapped_column(Integer, default=0)
    current_week: Mapped[int] = mapped_column(Integer, default=0)
    start_week: Mapped[int] = mapped_column(Integer, default=0)
    end_week: Mapped[int] = mapped_column(Integer, default=0)
    last_synced_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


class FantasyTeam(Base):
    __tablename__ = "fantasy_teams"
    __table_args__ = (UniqueConstraint("league_id", "yahoo_team_key"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    league_id: Mapped[int] = mapped_column(ForeignKey("fantasy_leagues.id", ondelete="CASCADE"), index=True)
    yahoo_team_id: Mapped[str] = mapped_column(String(16))
    yahoo_team_key: Mapped[str] = mapped_column(String(64))
    team_name: Mapped[str] = mapped_column(String(255))
    manager_name: Mapped[str] = mapped_column(String(255), default="")
    is_user_team: Mapped[bool] = mapped_column(Boolean, default=False)
    wins: Mapped[int] = mapped_column(Integer, default=0)
    losses: Mapped[int] = mapped_column(Integer, default=0)
    ties: Mapped[int] = mapped_column(Integer, default=0)
    rank: Mapped[int] = mapped_column(Integer, default=0)
    points_for: Mapped[float] = mapped_column(Float, default=0.0)
    points_against: Mapped[float] = mapped_column(Float, default=0.0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


class PlayerRecord(Base):
    __tablename__ = "players"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    yahoo_player_key: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    yahoo_player_id: Mapped[str] = mapped_column(String(32), default="")
    full_name: Mapped[str] = mapped_column(String(255), default="")
    primary_position: Mapped[str | None] = mapped_column(String(8), nullable=True)
    eligible_positions: Mapped[str] = mapped_column(String(128), default="")  # comma-separated
    editorial_team_abbr: Mapped[str | None] = mapped_column(String(16), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


class PlayerSeasonStats(Base):
    __tablename__ = "player_season_stats"
    __table_args__ = (UniqueConstraint("player_id", "season"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id", ondelete="CASCADE"), index=True)
    season: Mapped[str] = mapped_column(String(16))
    games_played: Mapped[int] = mapped_column(Integer, default=0)
    points_per_game: Mapped[float] = mapped_column(Float, default=0.0)
    rebounds_per_game: Mapped[float] = mapped_column(Float, default=0.0)
    assists_per_game: Mapped[float] = mapped_column(Float, default=0.0)
    steals_per_game: Mapped[float] = mapped_column(Float, default=0.0)
    blocks_per_game: Mapped[float] = mapped_column(Float, default=0.0)
    turnovers_per_game: Mapped[float] = mapped_column(Float, default=0.0)
    field_goal_percentage: Mapped[float] = mapped_column(Float, default=0.0)
    free_throw_percentage: Mapped[float] = mapped_column(Float, default=0.0)
    three_pointers_made: Mapped[float] = mapped_column(Float, default=0.0)  # per game


class FantasyRoster(Base):
    __tablename__ = "fantasy_rosters"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    team_id: Mapped[int] = mapped_column(ForeignKey("fantasy_teams.id", ondelete="CASCADE"), index=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), index=True)
    roster_position: Mapped[str] = mapped_column(String(8), default="")
    selected_position: Mapped[str] = mapped_column(String(8), default="")
    is_starting: Mapped[bool] = mapped_column(Boolean, default=False)
    acquisition_type: Mapped[str | None] = mapped_column(String(16), nullable=True)
    acquisition_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    added_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


class PlayerProjectionRecord(Base):
    __tablename__ = "player_projections"
    __table_args__ = (UniqueConstraint("player_id", "league_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id", ondelete="CASCADE"), index=True)
    league_id: Mapped[int] = mapped_column(ForeignKey("fantasy_leagues.id", ondelete="CASCADE"), index=True)
    fpg: Mapped[float] = mapped_column(Float, default=0.0)
    proj_pts: Mapped[float] = mapped_column(Float, default=0.0)
    proj_reb: Mapped[float] = mapped_column(Float, default=0.0)
    proj_ast: Mapped[float] = mapped_column(Float, default=0.0)
    proj_stl: Mapped[float] = mapped_column(Float, default=0.0)
    proj_blk: Mapped[float] = mapped_column(Float, default=0.0)
    proj_to: Mapped[float] = mapped_column(Float, default=0.0)
    proj_fg_pct: Mapped[float] = mapped_column(Float, default=0.0)
    proj_ft_pct: Mapped[float] = mapped_column(Float, default=0.0)
    proj_3pm: Mapped[float] = mapped_column(Float, default=0.0)
    z_score: Mapped[float] = mapped_column(Float, default=0.0)
    overall_rank: Mapped[int] = mapped_column(Integer, default=0)
    scarcity_multiplier: Mapped[float] = mapped_column(Float, default=1.0)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


class TeamAnalysisRecord(Base):
    __tablename__ = "team_analysis"
    team_id: Mapped[int] = mapped_column(ForeignKey("fantasy_teams.id", ondelete="CASCADE"), primary_key=True)
    pts_zscore: Mapped[float] = mapped_column(Float, default=0.0)
    reb_zscore: Mapped[float] = mapped_column(Float, default=0.0)
    ast_zscore: Mapped[float] = mapped_column(Float, default=0.0)
    stl_zscore: Mapped[float] = mapped_column(Float, default=0.0)
    blk_zscore: Mapped[float] = mapped_column(Float, default=0.0)
    to_zscore: Mapped[float] = mapped_column(Float, default=0.0)
    fg_pct_zscore: Mapped[float] = mapped_column(Float, default=0.0)
    ft_pct_zscore: Mapped[float] = mapped_column(Float, default=0.0)
    tpm_zscore: Mapped[float] = mapped_column(Float, default=0.0)
    weakest_cat_1: Mapped[str] = mapped_column(String(8), default="")
    weakest_cat_2: Mapped[str] = mapped_column(String(8), default="")
    weakest_cat_3: Mapped[str] = mapped_column(String(8), default="")
    strongest_cat_1: Mapped[str] = mapped_column(String(8), default="")
    strongest_cat_2: Mapped[str] = mapped_column(String(8), default="")
    strongest_cat_3: Mapped[str] = mapped_column(String(8), default="")
    needs_pg: Mapped[bool] = mapped_column(Boolean, default=False)
    needs_sg: Mapped[bool] = mapped_column(Boolean, default=False)
    needs_sf: Mapped[bool] = mapped_column(Boolean, default=False)
    needs_pf: Mapped[bool] = mapped_column(Boolean, default=False)
    needs_c: Mapped[bool] = mapped_column(Boolean, default=False)
    analyzed_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


class TradeProposalRecord(Base):
    __tablename__ = "trade_proposals"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    league_id: Mapped[int] = mapped_column(ForeignKey("fantasy_leagues.id", ondelete="CASCADE"), index=True)
    team_a_id: Mapped[int] = mapped_column(ForeignKey("fantasy_teams.id", ondelete="CASCADE"), index=True)
    team_b_id: Mapped[int] = mapped_column(ForeignKey("fantasy_teams.id", ondelete="CASCADE"), index=True)
    trade_details: Mapped[str] = mapped_column(Text)  # JSON {"team_a_gives": [...], "team_b_gives": [...]}
    fairness_score: Mapped[float] = mapped_column(Float, default=0.0)
    team_a_value_change: Mapped[float] = mapped_column(Float, default=0.0)
    team_b_value_change: Mapped[float] = mapped_column(Float, default=0.0)
    team_a_benefits: Mapped[str] = mapped_column(Text, default="")
    team_b_benefits: Mapped[str] = mapped_column(Text, default="")
    source: Mapped[str] = mapped_column(String(32), default="user")
    status: Mapped[str] = mapped_column(String(32), default="pending")
    suggested_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class SyncHistory(Base):
    __tablename__ = "sync_history"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    league_id: Mapped[int] = mapped_column(ForeignKey("fantasy_leagues.id", ondelete="CASCADE"), index=True)
    sync_type: Mapped[str] = mapped_column(String(16), default="full")
    sync_status: Mapped[str] = mapped_column(String(16), default="success")
    items_synced: Mapped[int] = mapped_column(Integer, default=0)
    completed_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
