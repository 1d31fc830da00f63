# fantasy_sdk/services/yahoo/stats.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from fantasy_sdk.core.errors import StatNotFoundError
from fantasy_sdk.schemas.player import Stat

# NBA stat ids
STAT_GAMES_PLAYED = 0
STAT_GAMES_STARTED = 1
STAT_MINUTES_PLAYED = 2
STAT_FGA = 3
STAT_FGM = 4
STAT_FG_PCT = 5
STAT_FTA = 6
STAT_FTM = 7
STAT_FT_PCT = 8
STAT_3PA = 9
STAT_3PM = 10
STAT_3P_PCT = 11
STAT_POINTS = 12
STAT_OFFENSIVE_REBOUNDS = 13
STAT_DEFENSIVE_REBOUNDS = 14
STAT_REBOUNDS = 15
STAT_ASSISTS = 16
STAT_STEALS = 17
STAT_BLOCKS = 18
STAT_TURNOVERS = 19
STAT_ASSIST_TURNOVER_RATIO = 20
STAT_PERSONAL_FOULS = 21

# Display-only compound ids ("made/attempted") some leagues expose
STAT_FGM_FGA = 9004003
STAT_FTM_FTA = 9007006

_COMPOUND_SOURCES = {
    STAT_FGM: (STAT_FGM, STAT_FGM_FGA),
    STAT_FTM: (STAT_FTM, STAT_FTM_FTA),
    STAT_3PM: (STAT_3PM,),
}


class StatHelper:
    """Typed lookups over a Yahoo stat list."""

    def __init__(self, stats: List[Stat]):
        self.stats = list(stats)

    def get_by_id(self, stat_id: int) -> Optional[str]:
        for stat in self.stats:
            if stat.stat_id == stat_id:
                return stat.value
        return None

    def get_float_by_id(self, stat_id: int) -> float:
        value = self.get_by_id(stat_id)
        if value is None:
            raise StatNotFoundError(stat_id)
        return float(value)

    def get_int_by_id(self, stat_id: int) -> int:
        value = self.get_by_id(stat_id)
        if value is None:
            raise StatNotFoundError(stat_id)
        return int(value)

    def get_all(self) -> List[Stat]:
        return self.stats

    def parse_compound(self, made_stat_id: int) -> Optional[Tuple[int, int]]:
        """Read "7/15" style values for a made-stat (or its compound id). None if absent/malformed."""
        for sid in _COMPOUND_SOURCES.get(made_stat_id, (made_stat_id,)):
            value = self.get_by_id(sid)
            if value is None or "/" not in value:
                continue
            made, _, attempted = value.partition("/")
            try:
                return int(made.strip()), int(attempted.strip())
            except ValueError:
                continue
        return None

    def _made_attempted(self, made_id: int, attempted_id: int, attempts_optional: bool = False) -> Tuple[int, int]:
        compound = self.parse_compound(made_id)
        try:
            made = self.get_int_by_id(made_id)
        except (StatNotFoundError, ValueError):
            if compound is None:
                raise
            return compound
        try:
            attempted = self.get_int_by_id(attempted_id)
        except (StatNotFoundError, ValueError):
            if compound is not None:
                return made, compound[1]
            if attempts_optional:
                return made, 0
            raise
        return made, attempted

    def get_fgm_fga(self) -> Tuple[int, int]:
        return self._made_attempted(STAT_FGM, STAT_FGA)

    def get_ftm_fta(self) -> Tuple[int, int]:
        return self._made_attempted(STAT_FTM, STAT_FTA)

    def get_3pm_3pa(self) -> Tuple[int, int]:
        # 3PA is not tracked by every league
        return self._made_attempted(STAT_3PM, STAT_3PA, attempts_optional=True)

    def get_shooting_stats(self) -> Tuple[int, int, int, int, int, int]:
        """(fgm, fga, ftm, fta, 3pm, 3pa); raises StatNotFoundError when FG/FT data is missing."""
        fgm, fga = self.get_fgm_fga()
        ftm, fta = self.get_ftm_fta()
        tpm, tpa = self.get_3pm_3pa()
        return fgm, fga, ftm, fta, tpm, tpa


@dataclass
class NBAStats:
    games_played: int = 0
    fgm: int = 0
    fga: int = 0
    fg_percent: float = 0.0
    ftm: int = 0
    fta: int = 0
    ft_percent: float = 0.0
    three_points_made: int = 0
    three_points_attempted: int = 0
    three_p_percent: float = 0.0
    points: int = 0
    rebounds: int = 0
    offensive_rebounds: int = 0
    assists: int = 0
    steals: int = 0
    blocks: int = 0
    turnovers: int = 0

    def calculate_fg_percent(self) -> float:
        return self.fgm / self.fga if self.fga else 0.0

    def calculate_ft_percent(self) -> float:
        return self.ftm / self.fta if self.fta else 0.0

    def calculate_3p_percent(self) -> float:
        return self.three_points_made / self.three_points_attempted if self.three_points_attempted else 0.0

    def true_shooting_percent(self) -> float:
        tsa = self.fga + 0.44 * self.fta
        if tsa == 0:
            return 0.0
        return self.points / (2.0 * tsa)

    def effective_fg_percent(self) -> float:
        if self.fga == 0:
            return 0.0
        return (self.fgm + 0.5 * self.three_points_made) / self.fga


def _int_or_none(sh: StatHelper, stat_id: int) -> Optional[int]:
    try:
        return sh.get_int_by_id(stat_id)
    except (StatNotFoundError, ValueError):
        return None


def _float_or_none(sh: StatHelper, stat_id: int) -> Optional[float]:
    try:
        return sh.get_float_by_id(stat_id)
    except (StatNotFoundError, ValueError):
        return None


def parse_nba_stats(stats: List[Stat]) -> NBAStats:
    """
    Collect the NBA box-score stats from a Yahoo stat list. Missing or "-" values stay 0.
    Made/attempted pairs fall back to compound "made/attempted" values, and FG%/FT%/3P%
    are derived from them when Yahoo sends no percentage.
    """
    sh = StatHelper(stats)
    out = NBAStats()

    for made_id, attempted_id, made_attr, attempted_attr in (
        (STAT_FGM, STAT_FGA, "fgm", "fga"),
        (STAT_FTM, STAT_FTA, "ftm", "fta"),
        (STAT_3PM, STAT_3PA, "three_points_made", "three_points_attempted"),
    ):
        compound = sh.parse_compound(made_id)
        made = _int_or_none(sh, made_id)
        attempted = _int_or_none(sh, attempted_id)
        if made is None and compound is not None:
            made = compound[0]
        if attempted is None and compound is not None:
            attempted = compound[1]
        setattr(out, made_attr, made or 0)
        setattr(out, attempted_attr, attempted or 0)

    out.games_played = _int_or_none(sh, STAT_GAMES_PLAYED) or 0
    out.fg_percent = _float_or_none(sh, STAT_FG_PCT) or 0.0
    out.ft_percent = _float_or_none(sh, STAT_FT_PCT) or 0.0
    out.three_p_percent = _float_or_none(sh, STAT_3P_PCT) or 0.0
    out.points = _int_or_none(sh, STAT_POINTS) or 0
    out.rebounds = _int_or_none(sh, STAT_REBOUNDS) or 0
    out.offensive_rebounds = _int_or_none(sh, STAT_OFFENSIVE_REBOUNDS) or 0
    out.assists = _int_or_none(sh, STAT_ASSISTS) or 0
    out.steals = _int_or_none(sh, STAT_STEALS) or 0
    out.blocks = _int_or_none(sh, STAT_BLOCKS) or 0
    out.turnovers = _int_or_none(sh, STAT_TURNOVERS) or 0

    if out.fg_percent == 0 and out.fga > 0:
        out.fg_percent = out.calculate_fg_percent()
    if out.ft_percent == 0 and out.fta > 0:
        out.ft_percent = out.calculate_ft_percent()
    if out.three_p_percent == 0 and out.three_points_attempted > 0:
        out.three_p_percent = out.calculate_3p_percent()
    return out
