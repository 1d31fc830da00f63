from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from fantasy_sdk.db.models import FantasyRoster, PlayerRecord


class RosterRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, entry: FantasyRoster) -> FantasyRoster:
        self.db.add(entry)
        self.db.flush()
        return entry

    def get_by_team(self, team_id: int) -> List[FantasyRoster]:
        """Starters first, then by roster position."""
        return list(self.db.scalars(
            select(FantasyRoster)
            .where(FantasyRoster.team_id == team_id)
            .order_by(FantasyRoster.is_starting.desc(), FantasyRoster.roster_position, FantasyRoster.id)
        ))

    def delete_by_team(self, team_id: int) -> int:
        result = self.db.execute(delete(FantasyRoster).where(FantasyRoster.team_id == team_id))
        return result.rowcount or 0

    def get_player_id_by_yahoo_key(self, yahoo_player_key: str) -> Optional[int]:
        return self.db.scalar(select(PlayerRecord.id).where(PlayerRecord.yahoo_player_key == yahoo_player_key))
