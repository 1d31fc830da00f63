from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from fantasy_sdk.db.models import PlayerRecord, PlayerSeasonStats
from fantasy_sdk.schemas.team import RosterEntry
from fantasy_sdk.schemas.valuation import SeasonAverages


class PlayerRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, player_id: int) -> Optional[PlayerRecord]:
        return self.db.get(PlayerRecord, player_id)

    def get_by_yahoo_key(self, yahoo_player_key: str) -> Optional[PlayerRecord]:
        return self.db.scalar(select(PlayerRecord).where(PlayerRecord.yahoo_player_key == yahoo_player_key))

    def upsert_from_roster(self, entry: RosterEntry) -> PlayerRecord:
        """Insert or refresh the ``players`` row behind a Yahoo roster entry."""
        rec = self.get_by_yahoo_key(entry.player_key)
        if rec is None:
            rec = PlayerRecord(yahoo_player_key=entry.player_key)
            self.db.add(rec)
        rec.yahoo_player_id = entry.player_id
        rec.full_name = entry.full_name or rec.full_name or ""
        rec.primary_position = entry.position or rec.primary_position
        rec.eligible_positions = ",".join(entry.eligible_positions)
        rec.editorial_team_abbr = entry.editorial_team_abbr
        rec.is_active = True
        self.db.flush()
        return rec

    def upsert_season_stats(self, season: str, averages: SeasonAverages, games_played: int = 0) -> PlayerSeasonStats:
        row = self.db.scalar(
            select(PlayerSeasonStats).where(
                PlayerSeasonStats.player_id == averages.player_id,
                PlayerSeasonStats.season == season,
            )
        )
        if row is None:
            row = PlayerSeasonStats(player_id=averages.player_id, season=season)
            self.db.add(row)
        row.games_played = games_played
        row.points_per_game = averages.points_per_game
        row.rebounds_per_game = averages.rebounds_per_game
        row.assists_per_game = averages.assists_per_game
        row.steals_per_game = averages.steals_per_game
        row.blocks_per_game = averages.blocks_per_game
        row.turnovers_per_game = averages.turnovers_per_game
        row.field_goal_percentage = averages.field_goal_percentage
        row.free_throw_percentage = averages.free_throw_percentage
        row.three_pointers_made = averages.three_pointers_made
        self.db.flush()
        return row
