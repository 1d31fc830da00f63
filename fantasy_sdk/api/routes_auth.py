# fantasy_sdk/api/routes_auth.py
from __future__ import annotations

import logging
import secrets

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse
from oauthlib.oauth2.rfc6749.errors import OAuth2Error
from sqlalchemy.orm import Session

from fantasy_sdk.api.deps import get_user_id, to_http_error
from fantasy_sdk.core.config import settings
from fantasy_sdk.core.errors import ConfigurationError, FantasySDKError
from fantasy_sdk.db.session import get_db
from fantasy_sdk.services.yahoo import YahooClient
from fantasy_sdk.services.yahoo.oauth import exchange_token, get_authorization_url, get_latest_token, persist_token
from fantasy_sdk.services.yahoo.parsers import parse_user_guid

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

STATE_COOKIE = "oauth_state"


def _redirect_uri() -> str:
    uri = (settings.YAHOO_REDIRECT_URI or "").strip()
    if not uri:
        raise HTTPException(500, "YAHOO_REDIRECT_URI missing")
    return uri


def _resolve_guid(token: dict) -> str:
    """Yahoo usually returns the GUID with the token; otherwise ask the users resource."""
    guid = token.get("xoauth_yahoo_guid")
    if guid:
        return str(guid)
    client = YahooClient(access_token=token["access_token"], refresh_token=token.get("refresh_token"))
    guid = parse_user_guid(client.get("users;use_login=1"))
    if not guid:
        raise HTTPException(502, "Could not determine Yahoo user GUID")
    return guid


@router.get("/login")
def auth_login(request: Request, debug: bool = False):
    redirect_uri = _redirect_uri()
    # tokens are only ever stored encrypted
    if not settings.ENCRYPTION_KEY:
        raise to_http_error(ConfigurationError("ENCRYPTION_KEY is not set; cannot store OAuth tokens."))
    state = secrets.token_urlsafe(24)
    try:
        authorize_url = get_authorization_url(state, redirect_uri)
    except FantasySDKError as exc:
        raise to_http_error(exc)

    if debug:
        return JSONResponse({"authorize_url": authorize_url, "redirect_uri": redirect_uri, "state": state})

    resp = RedirectResponse(authorize_url, status_code=302)
    resp.set_cookie(
        key=STATE_COOKIE,
        value=state,
        httponly=True,
        secure=(request.url.scheme == "https"),
        max_age=600,
        samesite="lax",
        path="/",
    )
    return resp


@router.get("/callback")
def auth_callback(request: Request, code: str, state: str, db: Session = Depends(get_db)):
    cookie_state = request.cookies.get(STATE_COOKIE)
    if not cookie_state or cookie_state != state:
        raise HTTPException(400, "Invalid or missing OAuth state")

    try:
        token = exchange_token(code, _redirect_uri())
    except OAuth2Error as exc:
        raise HTTPException(status_code=400, detail=f"Token exchange failed: {exc.description or exc}")
    except FantasySDKError as exc:
        raise to_http_error(exc)

    try:
        guid = _resolve_guid(token)
    except FantasySDKError as exc:
        raise to_http_error(exc)

    try:
        persist_token(db, guid, token)
    except FantasySDKError as exc:
        raise to_http_error(exc)
    logger.info("Stored Yahoo token for user %s", guid)

    resp = JSONResponse({"user_id": guid, "expires_in": token.get("expires_in")})
    resp.delete_cookie(STATE_COOKIE, path="/")
    return resp


@router.get("/status")
def auth_status(user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    rec = get_latest_token(db, user_id)
    return {
        "user_id": user_id,
        "has_token": rec is not None,
        "stored_at": rec.created_at if rec else None,
    }
