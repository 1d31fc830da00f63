from __future__ import annotations

import json
import logging
from typing import Callable, Optional

import requests
from requests_oauthlib import OAuth2Session
from sqlalchemy import select
from sqlalchemy.orm import Session

from fantasy_sdk.core.config import settings
from fantasy_sdk.core.crypto import decrypt_value, encrypt_value
from fantasy_sdk.core.errors import ConfigurationError, TokenRefreshError
from fantasy_sdk.db.models import OAuthToken
from fantasy_sdk.db.session import session_scope

logger = logging.getLogger(__name__)

# Read-only scope (write usually requires extra approval)
AUTH_SCOPE = ["fspt-r"]


# ---- OAuth helpers ----
def build_oauth(token: dict | None = None, redirect_uri: str | None = None) -> OAuth2Session:
    if not settings.YAHOO_CLIENT_ID:
        raise ConfigurationError("YAHOO_CLIENT_ID is not set.")
    return OAuth2Session(
        client_id=settings.YAHOO_CLIENT_ID,
        redirect_uri=(redirect_uri or settings.YAHOO_REDIRECT_URI or "oob").strip(),
        scope=AUTH_SCOPE,
        token=token,
    )


def get_authorization_url(state: str, redirect_uri: str | None = None) -> str:
    oauth = build_oauth(redirect_uri=redirect_uri)
    url, _ = oauth.authorization_url(settings.YAHOO_AUTH_URL, state=state)
    return url


def exchange_token(code: str, redirect_uri: str | None = None) -> dict:
    """
    Exchange the Yahoo auth code for an access/refresh token.
    NOTE: No DB writes here. Persist after you know the user's GUID.
    """
    oauth = build_oauth(redirect_uri=redirect_uri)
    token = oauth.fetch_token(
        token_url=settings.YAHOO_TOKEN_URL,
        code=code,
        include_client_id=True,
        client_secret=settings.YAHOO_CLIENT_SECRET,
        auth=(settings.YAHOO_CLIENT_ID, settings.YAHOO_CLIENT_SECRET),
    )
    # token: {"access_token","refresh_token","expires_in","token_type","xoauth_yahoo_guid",...}
    return dict(token)


def request_refresh(
    refresh_token: str,
    *,
    client_id: Optional[str] = None,
    client_secret: Optional[str] = None,
    token_url: Optional[str] = None,
    http: Optional[requests.Session] = None,
    timeout: float = 30.0,
) -> dict:
    """Run the refresh_token grant (HTTP basic auth) and return Yahoo's token JSON."""
    if not refresh_token:
        raise TokenRefreshError("Yahoo token expired and no refresh_token is available.")

    data = {"grant_type": "refresh_token", "refresh_token": refresh_token}
    if settings.YAHOO_REDIRECT_URI:
        data["redirect_uri"] = settings.YAHOO_REDIRECT_URI

    poster = http.post if http is not None else requests.post
    try:
        r = poster(
            token_url or settings.YAHOO_TOKEN_URL,
            data=data,
            auth=(client_id or settings.YAHOO_CLIENT_ID, client_secret or settings.YAHOO_CLIENT_SECRET),
            timeout=timeout,
        )
    except requests.RequestException as exc:
        raise TokenRefreshError(f"Yahoo refresh request failed: {exc}") from exc

    if r.status_code != 200:
        raise TokenRefreshError(f"Yahoo refresh failed: {r.status_code} {r.text[:2000]}")
    try:
        token = r.json()
    except ValueError as exc:
        raise TokenRefreshError("Yahoo refresh returned a non-JSON body") from exc
    if not isinstance(token, dict) or not token.get("access_token"):
        raise TokenRefreshError("Yahoo refresh response has no access_token")
    return token


# ---- persistence ----
def persist_token(db: Session, user_id: str, token: dict) -> OAuthToken:
    rec = OAuthToken(
        user_id=user_id,
        access_token=encrypt_value(token.get("access_token", "")),
        refresh_token=encrypt_value(token.get("refresh_token")) if token.get("refresh_token") else None,
        expires_in=token.get("expires_in"),
        token_type=token.get("token_type"),
        scope=token.get("scope") if isinstance(token.get("scope"), str) else None,
        raw=encrypt_value(json.dumps(token)),
    )
    db.add(rec)
    db.flush()
    return rec


def get_latest_token(db: Session, user_id: str) -> Optional[OAuthToken]:
    return db.scalar(
        select(OAuthToken)
        .where(OAuthToken.user_id == user_id)
        .order_by(OAuthToken.id.desc())
        .limit(1)
    )


def token_as_dict(rec: OAuthToken) -> dict:
    return {
        "access_token": decrypt_value(rec.access_token),
        "refresh_token": decrypt_value(rec.refresh_token),
        "expires_in": rec.expires_in,
        "token_type": rec.token_type,
    }


class DatabaseTokenStore:
    """Keeps one user's Yahoo tokens in ``oauth_tokens`` (Fernet-encrypted)."""

    def __init__(self, session_factory: Callable[[], Session], user_id: str):
        self.session_factory = session_factory
        self.user_id = user_id

    def load(self) -> Optional[dict]:
        with session_scope(self.session_factory) as db:
            rec = get_latest_token(db, self.user_id)
            return token_as_dict(rec) if rec else None

    def save(self, token: dict) -> None:
        with session_scope(self.session_factory) as db:
            persist_token(db, self.user_id, token)
        logger.debug("Stored refreshed Yahoo token for user %s", self.user_id)
