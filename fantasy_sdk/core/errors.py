# fantasy_sdk/core/errors.py
from __future__ import annotations

from typing import Optional


class FantasySDKError(Exception):
    """Base class for everything this package raises on purpose."""


class ConfigurationError(FantasySDKError):
    pass


class YahooAPIError(FantasySDKError):
    """Non-2xx (or undecodable) response from the Yahoo Fantasy API."""

    def __init__(self, status_code: Optional[int], url: str, body: str = ""):
        self.status_code = status_code
        self.url = url
        self.body = (body or "")[:2000]  # keep it sane
        super().__init__(f"Yahoo error {status_code} on {url} :: {self.body or '<no-body>'}")


class TokenRefreshError(FantasySDKError):
    pass


class NotFoundError(FantasySDKError):
    pass


class AlreadyExistsError(FantasySDKError):
    pass


class StatNotFoundError(FantasySDKError, KeyError):
    def __init__(self, stat_id: int):
        self.stat_id = stat_id
        super().__init__(f"stat ID {stat_id} not found")

    def __str__(self) -> str:
        return f"stat ID {self.stat_id} not found"
