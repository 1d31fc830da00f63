# fantasy_sdk/api/deps.py
from __future__ import annotations

from fastapi import Depends, Header, HTTPException, Query

from fantasy_sdk.core.errors import (
    AlreadyExistsError,
    ConfigurationError,
    FantasySDKError,
    NotFoundError,
    TokenRefreshError,
    YahooAPIError,
)
from fantasy_sdk.db.engine import SessionLocal
from fantasy_sdk.services.yahoo import YahooClient


def get_optional_user_id(
    user_id: str | None = Query(None, description="Yahoo GUID"),
    x_user_id: str | None = Header(None, alias="X-User-Id"),
) -> str | None:
    return (user_id or x_user_id or "").strip() or None


def get_user_id(uid: str | None = Depends(get_optional_user_id)) -> str:
    if not uid:
        raise HTTPException(
            status_code=400,
            detail="user_id is required (use ?user_id=<GUID> or header X-User-Id: <GUID>).",
        )
    return uid


def get_yahoo_client(uid: str | None = Depends(get_optional_user_id)) -> YahooClient:
    """Client for the calling user; falls back to the env tokens when no user is given."""
    return YahooClient.from_settings(SessionLocal, uid)


def to_http_error(exc: FantasySDKError) -> HTTPException:
    """Map a package error onto the status code a route should answer with."""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, AlreadyExistsError):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, YahooAPIError):
        return HTTPException(status_code=502, detail=str(exc))
    if isinstance(exc, (ConfigurationError, TokenRefreshError)):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))
