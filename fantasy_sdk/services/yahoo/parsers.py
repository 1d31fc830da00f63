from __future__ import annotations
from typing import Any, Iterator, List, Optional

from fantasy_sdk.schemas.league import DraftResult, League, StatCategory
from fantasy_sdk.schemas.matchup import Matchup, MatchupTeam, TeamPoints
from fantasy_sdk.schemas.player import (
    Ownership,
    PercentOwned,
    Player,
    PlayerName,
    PlayerPoints,
    PlayerStats,
    SelectedPosition,
    Stat,
)
from fantasy_sdk.schemas.team import (
    Manager,
    OutcomeTotals,
    RosterEntry,
    Standings,
    StandingsTeam,
    Streak,
    Team,
    TeamStandings,
)
from fantasy_sdk.schemas.transaction import Transaction, TransactionData, TransactionPlayer

# Lineup slots that do not count toward the active lineup
BENCH_SLOTS = frozenset({"BN", "IL", "IL+", "IR", "NA"})

# ---------------- Small utils ----------------
def _get(d: Any, *keys) -> Any:
    cur = d
    for k in keys:
        if isinstance(cur, dict) and k in cur:
            cur = cur[k]
        else:
            return None
    return cur

def _as_list(x: Any) -> List:
    if x is None:
        return []
    if isinstance(x, list):
        return x
    return [x]

def _maybe_int(v: Any) -> Optional[int]:
    try:
        if v is None or isinstance(v, bool):
            return None
        s = str(v).strip()
        return int(float(s)) if s != "" else None
    except (TypeError, ValueError, OverflowError):
        return None

def _maybe_float(v: Any) -> Optional[float]:
    try:
        if v is None or isinstance(v, bool):
            return None
        s = str(v).strip()
        return float(s) if s != "" else None
    except (TypeError, ValueError):
        return None

def _int(v: Any) -> int:
    return _maybe_int(v) or 0

def _float(v: Any) -> float:
    return _maybe_float(v) or 0.0

def _str(v: Any) -> str:
    return "" if v is None else str(v)

def _opt_str(v: Any) -> Optional[str]:
    s = _str(v).strip()
    return s or None

def _flag(v: Any) -> bool:
    # Yahoo sends "1"/"0", 1/0 or true/false
    if isinstance(v, bool):
        return v
    return _str(v).strip().lower() in ("1", "true", "yes")

def _flatten(node: Any) -> dict:
    """
    Yahoo packs objects as a LIST of small dicts (plus [] gaps and nested core lists).
    Squash any of that into one flat dict; later fragments win.
    """
    if isinstance(node, dict):
        return node
    agg: dict = {}
    if isinstance(node, list):
        for part in node:
            if isinstance(part, dict):
                agg.update(part)
            elif isinstance(part, list):
                agg.update(_flatten(part))
    return agg

def _numbered(node: Any, child: str) -> Iterator[Any]:
    """Yield ``node["0"][child], node["1"][child], ...`` (or list items carrying ``child``)."""
    if isinstance(node, dict):
        for k in sorted((kk for kk in node.keys() if str(kk).isdigit()), key=lambda x: int(x)):
            v = node.get(k)
            if isinstance(v, dict) and child in v:
                yield v[child]
    elif isinstance(node, list):
        for item in node:
            if isinstance(item, dict) and child in item:
                yield item[child]

def _find_key(node: Any, key: str) -> Any:
    """Depth-first search for the first value stored under ``key``."""
    if isinstance(node, dict):
        if key in node:
            return node[key]
        for v in node.values():
            found = _find_key(v, key)
            if found is not None:
                return found
    elif isinstance(node, list):
        for item in node:
            found = _find_key(item, key)
            if found is not None:
                return found
    return None

def _content(payload: Any) -> dict:
    fc = _get(payload, "fantasy_content")
    return fc if isinstance(fc, dict) else {}

def _resource_sections(payload: dict, resource: str) -> tuple[dict, dict]:
    """
    ``league``/``team`` come as ``[ {fields...}, {sub-resource...} ]``.
    Returns (fields, merged sub-resources).
    """
    node = _content(payload).get(resource)
    if isinstance(node, list) and node:
        return _flatten(node[0]), _flatten(node[1:])
    if isinstance(node, dict):
        return node, node
    return {}, {}

def _name_of(obj: dict) -> str:
    nm = obj.get("name")
    if isinstance(nm, str):
        return nm
    if isinstance(nm, dict):
        return _str(nm.get("full"))
    return ""

def _managers(obj: dict) -> List[Manager]:
    out: List[Manager] = []
    for m in list(_numbered(obj.get("managers"), "manager")):
        if not isinstance(m, dict):
            continue
        out.append(Manager(
            manager_id=_str(m.get("manager_id")),
            nickname=_str(m.get("nickname")),
            guid=_str(m.get("guid")),
            is_commissioner=_flag(m.get("is_commissioner")),
            is_current_login=_flag(m.get("is_current_login")),
            email=_opt_str(m.get("email")),
            image_url=_opt_str(m.get("image_url")),
        ))
    return out

def _positions(raw: Any) -> List[str]:
    positions: List[str] = []
    for pr in _as_list(raw):
        if isinstance(pr, dict) and "position" in pr:
            positions.append(str(pr["position"]))
        elif isinstance(pr, str):
            positions.append(pr)
    return positions

# ---------------- Users ----------------
def parse_user_guid(payload: dict) -> Optional[str]:
    users = _content(payload).get("users")
    for user in _numbered(users, "user"):
        guid = _flatten(user).get("guid")
        if guid:
            return str(guid)
    return None

# ---------------- Leagues ----------------
def _league_from_flat(L: dict, game_key: Optional[str]) -> Optional[League]:
    league_id = L.get("league_id")
    league_key = _str(L.get("league_key"))
    if league_id is None and ".l." in league_key:
        league_id = league_key.split(".l.", 1)[1]
    if league_id is None:
        return None
    gk = league_key.split(".l.", 1)[0] if ".l." in league_key else _str(game_key)
    return League(
        yahoo_league_id=str(league_id),
        yahoo_game_key=gk,
        league_key=league_key or f"{gk}.l.{league_id}",
        league_name=_name_of(L),
        season_year=_int(L.get("season")),
        scoring_type=_str(L.get("scoring_type")),
        num_teams=_int(L.get("num_teams")),
        current_week=_int(L.get("current_week")),
        start_week=_int(L.get("start_week")),
        end_week=_int(L.get("end_week")),
    )

def parse_leagues(payload: dict, game_key: Optional[str] = None) -> List[League]:
    """Leagues nested under users→games (or top-level ``leagues``), every numeric index."""
    fc = _content(payload)
    leagues_nodes: List[Any] = []

    if "leagues" in fc:
        leagues_nodes.append(fc["leagues"])

    for user in _numbered(fc.get("users"), "user"):
        games = _flatten(user).get("games")
        for game in _numbered(games, "game"):
            for g in _as_list(game):
                if isinstance(g, dict) and "leagues" in g:
                    leagues_nodes.append(g["leagues"])

    out: List[League] = []
    for node in leagues_nodes:
        for league in _numbered(node, "league"):
            parsed = _league_from_flat(_flatten(league), game_key)
            if parsed is not None:
                out.append(parsed)
    return out

# ---------------- Teams ----------------
def _team_from_flat(t: dict) -> Team:
    standings = t.get("team_standings") if isinstance(t.get("team_standings"), dict) else {}
    ot = standings.get("outcome_totals") if isinstance(standings.get("outcome_totals"), dict) else {}
    managers = _managers(t)
    return Team(
        yahoo_team_id=_str(t.get("team_id")),
        yahoo_team_key=_str(t.get("team_key")),
        team_name=_name_of(t),
        manager_name=managers[0].nickname if managers else "",
        wins=_int(ot.get("wins")),
        losses=_int(ot.get("losses")),
        ties=_int(ot.get("ties")),
        rank=_int(standings.get("rank")),
        points_for=_float(standings.get("points_for")),
        points_against=_float(standings.get("points_against")),
    )

def parse_teams(payload: dict) -> List[Team]:
    _, sections = _resource_sections(payload, "league")
    teams_node = sections.get("teams") or _find_key(_content(payload), "teams")
    out: List[Team] = []
    seen: set[str] = set()
    for node in _numbered(teams_node, "team"):
        team = _team_from_flat(_flatten(node))
        if not team.yahoo_team_key or team.yahoo_team_key in seen:
            continue
        seen.add(team.yahoo_team_key)
        out.append(team)
    return out

# ---------------- Stats / players ----------------
def parse_stats(node: Any) -> List[Stat]:
    """Accepts a ``player_stats``/``team_stats`` object or its bare ``stats`` list."""
    if isinstance(node, dict) and "stats" in node:
        node = node["stats"]
    out: List[Stat] = []
    for item in _as_list(node):
        s = item.get("stat") if isinstance(item, dict) and "stat" in item else item
        if not isinstance(s, dict):
            continue
        sid = _maybe_int(s.get("stat_id"))
        if sid is None:
            continue
        out.append(Stat(stat_id=sid, value=_str(s.get("value"))))
    return out

def _selected_position(raw: Any) -> Optional[SelectedPosition]:
    sp = _flatten(raw)
    if not sp:
        return None
    return SelectedPosition(
        position=_str(sp.get("position")),
        coverage_type=_opt_str(sp.get("coverage_type")),
        date=_opt_str(sp.get("date")),
        week=_maybe_int(sp.get("week")),
        is_flex_position=_flag(sp.get("is_flex_position")),
    )

def parse_player(node: Any) -> Optional[Player]:
    p = _flatten(node)
    if not p.get("player_key"):
        return None

    nm = p.get("name") if isinstance(p.get("name"), dict) else {"full": _str(p.get("name"))}
    stats_node = p.get("player_stats")
    points_node = p.get("player_points")
    own_node = p.get("ownership")
    pct_node = _flatten(p.get("percent_owned")) if p.get("percent_owned") is not None else None
    headshot = p.get("headshot") if isinstance(p.get("headshot"), dict) else {}

    return Player(
        player_key=_str(p.get("player_key")),
        player_id=_str(p.get("player_id")),
        name=PlayerName(
            full=_str(nm.get("full")),
            first=_str(nm.get("first")),
            last=_str(nm.get("last")),
            ascii_first=_str(nm.get("ascii_first")),
            ascii_last=_str(nm.get("ascii_last")),
        ),
        editorial_team_key=_str(p.get("editorial_team_key")),
        editorial_team_full_name=_str(p.get("editorial_team_full_name")),
        editorial_team_abbr=_str(p.get("editorial_team_abbr")),
        display_position=_str(p.get("display_position")),
        eligible_positions=_positions(p.get("eligible_positions")),
        selected_position=_selected_position(p.get("selected_position")),
        player_stats=PlayerStats(
            coverage_type=_str(stats_node.get("coverage_type")),
            week=_maybe_int(stats_node.get("week")),
            date=_opt_str(stats_node.get("date")),
            season=_maybe_int(stats_node.get("season")),
            stats=parse_stats(stats_node),
        ) if isinstance(stats_node, dict) else None,
        player_points=PlayerPoints(
            coverage_type=_str(points_node.get("coverage_type")),
            week=_maybe_int(points_node.get("week")),
            season=_maybe_int(points_node.get("season")),
            total=_float(points_node.get("total")),
        ) if isinstance(points_node, dict) else None,
        ownership=Ownership(
            ownership_type=_str(own_node.get("ownership_type")),
            owner_team_key=_opt_str(own_node.get("owner_team_key")),
            owner_team_name=_opt_str(own_node.get("owner_team_name")),
        ) if isinstance(own_node, dict) else None,
        percent_owned=PercentOwned(
            coverage_type=_str(pct_node.get("coverage_type")),
            week=_maybe_int(pct_node.get("week")),
            value=_float(pct_node.get("value")),
            delta=_maybe_float(pct_node.get("delta")),
        ) if pct_node else None,
        status=_opt_str(p.get("status")),
        status_full=_opt_str(p.get("status_full")),
        injury_note=_opt_str(p.get("injury_note")),
        uniform_number=_opt_str(p.get("uniform_number")),
        image_url=_opt_str(p.get("image_url")),
        headshot={str(k): str(v) for k, v in headshot.items() if v is not None},
    )

def parse_players(payload: dict) -> List[Player]:
    players_node = _find_key(_content(payload), "players")
    out: List[Player] = []
    for node in _numbered(players_node, "player"):
        player = parse_player(node)
        if player is not None:
            out.append(player)
    return out

# ---------------- Roster ----------------
def parse_roster(payload: dict) -> List[RosterEntry]:
    roster = _find_key(_content(payload), "roster")
    players_node = _get(roster, "0", "players") if isinstance(roster, dict) else None
    if players_node is None:
        players_node = _find_key(roster, "players")

    out: List[RosterEntry] = []
    for node in _numbered(players_node, "player"):
        player = parse_player(node)
        if player is None:
            continue
        slot = (player.selected_position.position if player.selected_position else "").upper()
        out.append(RosterEntry(
            player_id=player.player_id,
            player_key=player.player_key,
            full_name=player.name.full,
            position=player.eligible_positions[0] if player.eligible_positions else "",
            eligible_positions=player.eligible_positions,
            selected_position=slot,
            is_starting=bool(slot) and slot not in BENCH_SLOTS,
            editorial_team_abbr=player.editorial_team_abbr or None,
            status=player.status,
        ))
    return out

# ---------------- Standings ----------------
def _team_standings(raw: Any) -> TeamStandings:
    ts = raw if isinstance(raw, dict) else {}
    ot = ts.get("outcome_totals") if isinstance(ts.get("outcome_totals"), dict) else {}
    streak = ts.get("streak") if isinstance(ts.get("streak"), dict) else None
    return TeamStandings(
        rank=_int(ts.get("rank")),
        playoff_seed=_int(ts.get("playoff_seed")),
        outcome_totals=OutcomeTotals(
            wins=_int(ot.get("wins")),
            losses=_int(ot.get("losses")),
            ties=_int(ot.get("ties")),
            percentage=_float(ot.get("percentage")),
        ),
        points_for=_float(ts.get("points_for")),
        points_against=_float(ts.get("points_against")),
        games_back=_opt_str(ts.get("games_back")),
        streak=Streak(type=_str(streak.get("type")), value=_int(streak.get("value"))) if streak else None,
    )

def parse_standings(payload: dict) -> Standings:
    _, sections = _resource_sections(payload, "league")
    standings = _flatten(sections.get("standings"))
    teams_node = standings.get("teams") or _find_key(_content(payload), "teams")

    teams: List[StandingsTeam] = []
    for node in _numbered(teams_node, "team"):
        t = _flatten(node)
        if not t.get("team_key"):
            continue
        managers = _managers(t)
        teams.append(StandingsTeam(
            team_key=_str(t.get("team_key")),
            team_id=_str(t.get("team_id")),
            name=_name_of(t),
            team_standings=_team_standings(t.get("team_standings")),
            manager_nickname=managers[0].nickname if managers else None,
            managers=managers,
        ))
    return Standings(teams=teams)

# ---------------- Scoreboard ----------------
def _team_points(raw: Any) -> TeamPoints:
    tp = _flatten(raw)
    return TeamPoints(
        coverage_type=_str(tp.get("coverage_type")),
        week=_maybe_int(tp.get("week")),
        total=_float(tp.get("total")),
    )

def parse_scoreboard(payload: dict) -> List[Matchup]:
    _, sections = _resource_sections(payload, "league")
    scoreboard = sections.get("scoreboard") or _find_key(_content(payload), "scoreboard")
    scoreboard = _flatten(scoreboard)
    matchups_node = scoreboard.get("matchups") or _get(scoreboard, "0", "matchups")
    board_week = _int(scoreboard.get("week"))

    out: List[Matchup] = []
    for node in _numbered(matchups_node, "matchup"):
        m = _flatten(node)
        winner = _opt_str(m.get("winner_team_key"))
        teams_node = m.get("teams") or _get(m, "0", "teams")

        teams: List[MatchupTeam] = []
        for tnode in _numbered(teams_node, "team"):
            t = _flatten(tnode)
            if not t.get("team_key"):
                continue
            points = _team_points(t.get("team_points"))
            projected = _team_points(t.get("team_projected_points"))
            teams.append(MatchupTeam(
                team_key=_str(t.get("team_key")),
                team_id=_str(t.get("team_id")),
                name=_name_of(t),
                points=points.total,
                projected_points=projected.total,
                is_winner=bool(winner) and winner == t.get("team_key"),
                win_probability=_maybe_float(t.get("win_probability")),
                stats=parse_stats(t.get("team_stats")),
                team_points=points,
                team_projected_points=projected,
            ))

        out.append(Matchup(
            week=_int(m.get("week")) or board_week,
            week_start=_str(m.get("week_start")),
            week_end=_str(m.get("week_end")),
            status=_str(m.get("status")),
            is_playoffs=_flag(m.get("is_playoffs")),
            is_consolation=_flag(m.get("is_consolation")),
            is_tied=_flag(m.get("is_tied")),
            winner_team_key=winner,
            teams=teams,
        ))
    return out

# ---------------- Draft ----------------
def parse_draft_results(payload: dict) -> List[DraftResult]:
    node = _find_key(_content(payload), "draft_results")
    out: List[DraftResult] = []
    for dr in _numbered(node, "draft_result"):
        d = _flatten(dr)
        out.append(DraftResult(
            pick=_int(d.get("pick")),
            round=_int(d.get("round")),
            team_key=_str(d.get("team_key")),
            player_key=_str(d.get("player_key")),
        ))
    return out

# ---------------- Transactions ----------------
def _transaction_player(node: Any) -> Optional[TransactionPlayer]:
    p = _flatten(node)
    if not p.get("player_key"):
        return None
    nm = p.get("name") if isinstance(p.get("name"), dict) else {}
    td = _flatten(p.get("transaction_data"))
    return TransactionPlayer(
        player_key=_str(p.get("player_key")),
        player_id=_str(p.get("player_id")),
        name=PlayerName(
            full=_str(nm.get("full")),
            first=_str(nm.get("first")),
            last=_str(nm.get("last")),
            ascii_first=_str(nm.get("ascii_first")),
            ascii_last=_str(nm.get("ascii_last")),
        ),
        transaction_data=TransactionData(
            type=_str(td.get("type")),
            source_type=_str(td.get("source_type")),
            source_team_key=_opt_str(td.get("source_team_key")),
            source_team_name=_opt_str(td.get("source_team_name")),
            destination_type=_str(td.get("destination_type")),
            destination_team_key=_opt_str(td.get("destination_team_key")),
            destination_team_name=_opt_str(td.get("destination_team_name")),
        ),
    )

def parse_transactions(payload: dict) -> List[Transaction]:
    node = _find_key(_content(payload), "transactions")
    out: List[Transaction] = []
    for tnode in _numbered(node, "transaction"):
        t = _flatten(tnode)
        if not t.get("transaction_key"):
            continue
        players = [
            tp for tp in (_transaction_player(p) for p in _numbered(t.get("players"), "player"))
            if tp is not None
        ]
        out.append(Transaction(
            transaction_key=_str(t.get("transaction_key")),
            transaction_id=_str(t.get("transaction_id")),
            type=_str(t.get("type")),
            status=_str(t.get("status")),
            timestamp=_int(t.get("timestamp")),
            faab_bid=_maybe_int(t.get("faab_bid")),
            players=players,
        ))
    return out

# ---------------- Settings ----------------
def parse_stat_categories(payload: dict) -> List[StatCategory]:
    _, sections = _resource_sections(payload, "league")
    league_settings = _flatten(sections.get("settings"))
    stats = _get(league_settings, "stat_categories", "stats")
    if stats is None:
        stats = _get(_find_key(_content(payload), "stat_categories"), "stats")

    out: List[StatCategory] = []
    for item in _as_list(stats):
        s = item.get("stat") if isinstance(item, dict) and "stat" in item else item
        if not isinstance(s, dict) or _maybe_int(s.get("stat_id")) is None:
            continue
        out.append(StatCategory(
            stat_id=_int(s.get("stat_id")),
            name=_str(s.get("name")),
            display_name=_str(s.get("display_name")),
            sort_order=_int(s.get("sort_order")),
            position_type=_str(s.get("position_type")),
        ))
    return out

