from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from fantasy_sdk.db.models import FantasyLeague, utcnow


class LeagueRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, league: FantasyLeague) -> FantasyLeague:
        self.db.add(league)
        self.db.flush()
        return league

    def get(self, league_id: int) -> Optional[FantasyLeague]:
        return self.db.get(FantasyLeague, league_id)

    def get_by_yahoo_id(self, yahoo_league_id: str) -> Optional[FantasyLeague]:
        return self.db.scalar(select(FantasyLeague).where(FantasyLeague.yahoo_league_id == yahoo_league_id))

    def get_all(self) -> List[FantasyLeague]:
        """Newest first."""
        return list(self.db.scalars(
            select(FantasyLeague).order_by(FantasyLeague.created_at.desc(), FantasyLeague.id.desc())
        ))

    def update_sync_time(self, league_id: int) -> None:
        league = self.get(league_id)
        if league is not None:
            league.last_synced_at = utcnow()
            self.db.flush()

    def delete(self, league_id: int) -> bool:
        league = self.get(league_id)
        if league is None:
            return False
        self.db.delete(league)
        self.db.flush()
        return True
