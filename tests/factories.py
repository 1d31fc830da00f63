"""Fakes, Yahoo payload builders and row seeders shared by the test modules."""
from __future__ import annotations

import json
from typing import Any, List, Optional

from fantasy_sdk.db.models import (
    FantasyLeague,
    FantasyRoster,
    FantasyTeam,
    PlayerProjectionRecord,
    PlayerRecord,
)


# ---------------- fake HTTP ----------------

class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, text: Optional[str] = None, url: str = "http://fake"):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else (json.dumps(body) if body is not None else "")
        self.url = url

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("no JSON body")
        return self._body


class FakeSession:
    """Stands in for requests.Session; hands out queued responses and records calls."""

    def __init__(self, get_responses: Optional[List[FakeResponse]] = None, post_responses: Optional[List[FakeResponse]] = None):
        self.get_responses = list(get_responses or [])
        self.post_responses = list(post_responses or [])
        self.get_calls: List[dict] = []
        self.post_calls: List[dict] = []

    def get(self, url, headers=None, params=None, timeout=None):
        self.get_calls.append({"url": url, "headers": headers, "params": params})
        return self.get_responses.pop(0)

    def post(self, url, data=None, auth=None, timeout=None):
        self.post_calls.append({"url": url, "data": data, "auth": auth})
        return self.post_responses.pop(0)


class RoutedClient:
    """Minimal YahooClient double: maps request paths to canned payloads."""

    def __init__(self, routes: dict):
        self.routes = routes
        self.paths: List[str] = []
        self.cache_enabled = False

    def get(self, path: str, params=None) -> dict:
        self.paths.append(path)
        payload = self.routes.get(path)
        if isinstance(payload, Exception):
            raise payload
        if payload is None:
            raise AssertionError(f"unexpected path {path}")
        return payload

    def cached(self, key, ttl, fetch, loader):
        return fetch()


# ---------------- Yahoo payload builders ----------------

def league_payload_node(league_key: str, name: str, season: int = 2024, num_teams: int = 2) -> dict:
    league_id = league_key.split(".l.")[1]
    return {"league": [{
        "league_key": league_key,
        "league_id": league_id,
        "name": name,
        "season": str(season),
        "scoring_type": "head",
        "num_teams": num_teams,
        "current_week": "5",
        "start_week": "1",
        "end_week": "20",
    }]}


def user_leagues_payload(game_key: str, leagues: List[dict]) -> dict:
    numbered = {str(i): node for i, node in enumerate(leagues)}
    numbered["count"] = len(leagues)
    return {"fantasy_content": {"users": {
        "0": {"user": [
            {"guid": "GUID123"},
            {"games": {
                "0": {"game": [{"game_key": game_key, "code": "nba"}, {"leagues": numbered}]},
                "count": 1,
            }},
        ]},
        "count": 1,
    }}}


def team_node(team_key: str, name: str, manager: str = "mgr", wins: int = 0, losses: int = 0, rank: int = 0) -> dict:
    team_id = team_key.rsplit(".t.", 1)[1]
    return {"team": [[
        {"team_key": team_key},
        {"team_id": team_id},
        {"name": name},
        [],
        {"managers": [{"manager": {"manager_id": team_id, "nickname": manager, "guid": f"G{team_id}"}}]},
        {"team_standings": {
            "rank": rank,
            "outcome_totals": {"wins": str(wins), "losses": str(losses), "ties": "0", "percentage": ".500"},
            "points_for": "100.5",
            "points_against": "90",
        }},
    ]]}


def league_teams_payload(league_key: str, teams: List[dict]) -> dict:
    numbered = {str(i): t for i, t in enumerate(teams)}
    numbered["count"] = len(teams)
    return {"fantasy_content": {"league": [{"league_key": league_key}, {"teams": numbered}]}}


def player_node(
    player_key: str,
    full_name: str,
    positions: List[str],
    selected: Optional[str] = None,
    stats: Optional[dict] = None,
    team_abbr: str = "LAL",
) -> dict:
    player_id = player_key.split(".p.")[1]
    core = [
        {"player_key": player_key},
        {"player_id": player_id},
        {"name": {"full": full_name, "first": full_name.split()[0], "last": full_name.split()[-1]}},
        {"editorial_team_abbr": team_abbr},
        {"display_position": ",".join(positions)},
        {"eligible_positions": [{"position": p} for p in positions]},
    ]
    parts: List[Any] = [core]
    if selected is not None:
        parts.append({"selected_position": [{"coverage_type": "date"}, {"position": selected}]})
    if stats is not None:
        parts.append({"player_stats": {
            "coverage_type": "season",
            "season": "2024",
            "stats": [{"stat": {"stat_id": str(k), "value": str(v)}} for k, v in stats.items()],
        }})
    return {"player": parts}


def roster_payload(team_key: str, players: List[dict]) -> dict:
    numbered = {str(i): p for i, p in enumerate(players)}
    numbered["count"] = len(players)
    return {"fantasy_content": {"team": [
        [{"team_key": team_key}],
        {"roster": {"coverage_type": "date", "0": {"players": numbered}}},
    ]}}


def players_payload(league_key: str, players: List[dict]) -> dict:
    numbered = {str(i): p for i, p in enumerate(players)}
    numbered["count"] = len(players)
    return {"fantasy_content": {"league": [{"league_key": league_key}, {"players": numbered}]}}


# ---------------- canned league ----------------

LK = "454.l.12345"
T1 = f"{LK}.t.1"
T2 = f"{LK}.t.2"


def yahoo_routes(roster_t1=None, roster_t2=None) -> dict:
    return {
        "users;use_login=1/games;game_keys=nba/leagues": user_leagues_payload("454", [
            league_payload_node(LK, "Hoops League", season=2024),
        ]),
        f"league/{LK}/teams": league_teams_payload(LK, [
            team_node(T1, "Mine", manager="me", wins=3, losses=1, rank=1),
            team_node(T2, "Theirs", manager="you", wins=1, losses=3, rank=2),
        ]),
        f"team/{T1}/roster": roster_t1 or roster_payload(T1, [
            player_node("454.p.1", "Point Guard", ["PG"], selected="PG"),
            player_node("454.p.2", "Bench Center", ["C"], selected="BN"),
        ]),
        f"team/{T2}/roster": roster_t2 or roster_payload(T2, [
            player_node("454.p.3", "Wing", ["SF", "PF"], selected="SF"),
        ]),
    }


# ---------------- seeded league ----------------

def add_league(db, yahoo_league_id: str = "12345", season_year: int = 2024, scoring: Optional[dict] = None) -> FantasyLeague:
    league = FantasyLeague(
        yahoo_league_id=yahoo_league_id,
        yahoo_game_key="454",
        league_name="Test League",
        season_year=season_year,
        scoring_type="head",
        scoring_settings=json.dumps(scoring or {"PTS": 1.0, "REB": 1.2, "AST": 1.5, "STL": 3.0, "BLK": 3.0, "TO": -1.0, "3PM": 1.0}),
        num_teams=2,
    )
    db.add(league)
    db.flush()
    return league


def add_team(db, league: FantasyLeague, team_id: str, name: str, rank: int = 0, is_user_team: bool = False) -> FantasyTeam:
    team = FantasyTeam(
        league_id=league.id,
        yahoo_team_id=team_id,
        yahoo_team_key=f"454.l.{league.yahoo_league_id}.t.{team_id}",
        team_name=name,
        rank=rank,
        is_user_team=is_user_team,
    )
    db.add(team)
    db.flush()
    return team


def add_player(db, key: str, name: str, position: str = "PG") -> PlayerRecord:
    p = PlayerRecord(yahoo_player_key=key, yahoo_player_id=key.split(".")[-1], full_name=name, primary_position=position)
    db.add(p)
    db.flush()
    return p


def add_roster(db, team: FantasyTeam, player: PlayerRecord, starting: bool = True) -> FantasyRoster:
    r = FantasyRoster(
        team_id=team.id,
        player_id=player.id,
        roster_position=player.primary_position or "",
        selected_position=(player.primary_position or "") if starting else "BN",
        is_starting=starting,
    )
    db.add(r)
    db.flush()
    return r


def add_projection(db, league: FantasyLeague, player: PlayerRecord, fpg: float, **cats: float) -> PlayerProjectionRecord:
    rec = PlayerProjectionRecord(
        player_id=player.id,
        league_id=league.id,
        fpg=fpg,
        proj_pts=cats.get("pts", 0.0),
        proj_reb=cats.get("reb", 0.0),
        proj_ast=cats.get("ast", 0.0),
        proj_stl=cats.get("stl", 0.0),
        proj_blk=cats.get("blk", 0.0),
        proj_to=cats.get("to", 0.0),
        proj_fg_pct=cats.get("fg_pct", 0.0),
        proj_ft_pct=cats.get("ft_pct", 0.0),
        proj_3pm=cats.get("tpm", 0.0),
    )
    db.add(rec)
    db.flush()
    return rec
