from __future__ import annotations

import pytest

from fantasy_sdk.services.yahoo.games import get_game_id, get_game_key


class TestGameIds:
    @pytest.mark.parametrize(
        "code,season,expected",
        [
            ("mlb", 2024, 431),
            ("nfl", 2024, 449),
            ("nba", 2024, 454),
            ("nhl", 2024, 453),
            ("nfl", 2023, 423),
            ("NBA", 2025, 466),
        ],
    )
    def test_known_games(self, code, season, expected):
        assert get_game_id(code, season) == expected

    def test_game_key_is_string(self):
        assert get_game_key("nba", 2024) == "454"

    @pytest.mark.parametrize("code,season", [("soccer", 2024), ("nba", 1999)])
    def test_unknown_raises(self, code, season):
        with pytest.raises(ValueError):
            get_game_id(code, season)
