# fantasy_sdk/services/leagues.py
from __future__ import annotations

import json
import logging
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from fantasy_sdk.core.errors import AlreadyExistsError, NotFoundError, YahooAPIError
from fantasy_sdk.db.models import FantasyLeague, FantasyRoster, FantasyTeam, PlayerRecord, SyncHistory
from fantasy_sdk.repositories import LeagueRepository, PlayerRepository, RosterRepository, TeamRepository
from fantasy_sdk.schemas.team import Team
from fantasy_sdk.schemas.valuation import SeasonAverages
from fantasy_sdk.services.yahoo import YahooClient, get_league_teams as fetch_league_teams
from fantasy_sdk.services.yahoo import get_player_stats, get_team_roster, get_user_leagues as fetch_user_leagues
from fantasy_sdk.services.yahoo.stats import NBAStats, parse_nba_stats

logger = logging.getLogger(__name__)

DEFAULT_SCORING_SETTINGS: Dict[str, float] = {
    "PTS": 1.0,
    "REB": 1.2,
    "AST": 1.5,
    "STL": 3.0,
    "BLK": 3.0,
    "TO": -1.0,
    "3PM": 1.0,
}


def league_key(league: FantasyLeague) -> str:
    return f"{league.yahoo_game_key}.l.{league.yahoo_league_id}"


def season_label(season_year: int) -> str:
    """2024 -> "2024-25" (the label season stats are stored under)."""
    return f"{season_year}-{(season_year + 1) % 100:02d}"


def import_league(
    db: Session,
    client: YahooClient,
    yahoo_league_id: str,
    user_team_id: str,
    game_key: str = "nba",
) -> FantasyLeague:
    """
    Mirror one of the logged-in user's Yahoo leagues locally, then sync its teams and rosters.
    ``user_team_id`` is the Yahoo team id (or team key) that belongs to the user.
    """
    leagues = LeagueRepository(db)
    if leagues.get_by_yahoo_id(yahoo_league_id) is not None:
        raise AlreadyExistsError("league already imported")

    target = next(
        (lg for lg in fetch_user_leagues(client, game_key) if lg.yahoo_league_id == yahoo_league_id),
        None,
    )
    if target is None:
        raise NotFoundError(f"league {yahoo_league_id} not found in user's leagues")

    league = leagues.create(FantasyLeague(
        yahoo_league_id=target.yahoo_league_id,
        yahoo_game_key=target.yahoo_game_key or game_key,
        league_name=target.league_name,
        season_year=target.season_year,
        scoring_type=target.scoring_type,
        scoring_settings=json.dumps(DEFAULT_SCORING_SETTINGS),
        num_teams=target.num_teams,
        current_week=target.current_week,
        start_week=target.start_week,
        end_week=target.end_week,
    ))
    logger.info("Imported league %s (%s) as id=%s", league.league_name, league_key(league), league.id)

    sync_teams_and_rosters(db, client, league.id, user_team_id)
    return league


def _is_user_team(team: Team, user_team_id: Optional[str]) -> bool:
    return bool(user_team_id) and user_team_id in (team.yahoo_team_id, team.yahoo_team_key)


def sync_teams_and_rosters(
    db: Session,
    client: YahooClient,
    league_id: int,
    user_team_id: Optional[str] = None,
) -> int:
    """
    Refresh every team of the league and replace each team's roster. Players are upserted so
    roster rows always reference an existing player. Returns the number of teams synced.
    Without ``user_team_id`` the stored user-team flags are kept. Stored teams Yahoo no longer
    returns are left untouched (their analyses and proposals still point at them) and logged.
    """
    league = LeagueRepository(db).get(league_id)
    if league is None:
        raise NotFoundError(f"league {league_id} not found")

    teams_repo = TeamRepository(db)
    rosters = RosterRepository(db)
    players = PlayerRepository(db)
    lk = league_key(league)

    yahoo_teams = fetch_league_teams(client, lk)
    for yt in yahoo_teams:
        team = teams_repo.get_by_key(league.id, yt.yahoo_team_key)
        if team is None:
            team = teams_repo.create(FantasyTeam(
                league_id=league.id,
                yahoo_team_id=yt.yahoo_team_id,
                yahoo_team_key=yt.yahoo_team_key,
                team_name=yt.team_name,
                is_user_team=_is_user_team(yt, user_team_id),
            ))
        elif user_team_id:
            team.is_user_team = _is_user_team(yt, user_team_id)

        team.team_name = yt.team_name
        team.manager_name = yt.manager_name
        team.wins, team.losses, team.ties = yt.wins, yt.losses, yt.ties
        team.rank = yt.rank
        team.points_for, team.points_against = yt.points_for, yt.points_against
        teams_repo.update(team)

        roster = get_team_roster(client, yt.yahoo_team_key)
        rosters.delete_by_team(team.id)
        for entry in roster:
            player = players.upsert_from_roster(entry)
            rosters.create(FantasyRoster(
                team_id=team.id,
                player_id=player.id,
                roster_position=entry.position,
                selected_position=entry.selected_position,
                is_starting=entry.is_starting,
            ))
        logger.debug("Synced team %s with %d roster entries", yt.team_name, len(roster))

    seen = {yt.yahoo_team_key for yt in yahoo_teams}
    stale = [t for t in teams_repo.get_by_league(league.id) if t.yahoo_team_key not in seen]
    for team in stale:
        logger.warning("Team %s (%s) is no longer in league %s; keeping its stored rows", team.team_name, team.yahoo_team_key, lk)

    LeagueRepository(db).update_sync_time(league.id)
    db.add(SyncHistory(
        league_id=league.id,
        sync_type="full",
        sync_status="success",
        items_synced=len(yahoo_teams),
    ))
    db.flush()
    logger.info("Synced %d teams for league %s", len(yahoo_teams), lk)
    return len(yahoo_teams)


def _per_game(nba: NBAStats, player_id: int) -> SeasonAverages:
    gp = nba.games_played

    def avg(total: int) -> float:
        return total / gp if gp else 0.0

    return SeasonAverages(
        player_id=player_id,
        points_per_game=avg(nba.points),
        rebounds_per_game=avg(nba.rebounds),
        assists_per_game=avg(nba.assists),
        steals_per_game=avg(nba.steals),
        blocks_per_game=avg(nba.blocks),
        turnovers_per_game=avg(nba.turnovers),
        field_goal_percentage=nba.fg_percent,
        free_throw_percentage=nba.ft_percent,
        three_pointers_made=avg(nba.three_points_made),
    )


def sync_player_stats(
    db: Session,
    client: YahooClient,
    league_id: int,
    season: Optional[str] = None,
) -> int:
    """
    Pull season totals for every rostered player of the league and store per-game averages
    in ``player_season_stats``. Players Yahoo has no stats for are skipped. Returns rows written.
    """
    league = LeagueRepository(db).get(league_id)
    if league is None:
        raise NotFoundError(f"league {league_id} not found")
    season = season or season_label(league.season_year)
    lk = league_key(league)
    players = PlayerRepository(db)

    rostered = db.execute(
        select(PlayerRecord.id, PlayerRecord.yahoo_player_key)
        .join(FantasyRoster, FantasyRoster.player_id == PlayerRecord.id)
        .join(FantasyTeam, FantasyTeam.id == FantasyRoster.team_id)
        .where(FantasyTeam.league_id == league.id)
        .distinct()
    ).all()

    written = 0
    for player_id, player_key in rostered:
        try:
            player = get_player_stats(client, lk, player_key)
        except YahooAPIError as exc:
            logger.warning("Skipping stats for %s: %s", player_key, exc)
            continue
        if player is None or player.player_stats is None:
            logger.debug("No stats for %s", player_key)
            continue
        nba = parse_nba_stats(player.player_stats.stats)
        players.upsert_season_stats(season, _per_game(nba, player_id), games_played=nba.games_played)
        written += 1

    logger.info("Stored %s season stats for %d/%d players of league %s", season, written, len(rostered), lk)
    return written


def get_user_leagues(db: Session) -> List[FantasyLeague]:
    return LeagueRepository(db).get_all()


def get_league_teams(db: Session, league_id: int) -> List[FantasyTeam]:
    return TeamRepository(db).get_by_league(league_id)
