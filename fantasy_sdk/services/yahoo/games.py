"""Yahoo game ids per sport and season (e.g. NBA 2024-25 = 454)."""
from __future__ import annotations

from typing import Dict

# season = the year the season starts
GAME_IDS: Dict[str, Dict[int, int]] = {
    "nfl": {2019: 390, 2020: 399, 2021: 406, 2022: 414, 2023: 423, 2024: 449, 2025: 461},
    "mlb": {2019: 388, 2020: 398, 2021: 404, 2022: 412, 2023: 422, 2024: 431, 2025: 458},
    "nba": {2019: 395, 2020: 402, 2021: 410, 2022: 418, 2023: 428, 2024: 454, 2025: 466},
    "nhl": {2019: 396, 2020: 403, 2021: 411, 2022: 419, 2023: 427, 2024: 453, 2025: 465},
}


def get_game_id(game_code: str, season: int) -> int:
    seasons = GAME_IDS.get((game_code or "").strip().lower())
    if seasons is None:
        raise ValueError(f"unknown game code {game_code!r} (expected one of {', '.join(GAME_IDS)})")
    try:
        return seasons[int(season)]
    except KeyError:
        raise ValueError(f"no {game_code} game id for season {season}") from None


def get_game_key(game_code: str, season: int) -> str:
    return str(get_game_id(game_code, season))
