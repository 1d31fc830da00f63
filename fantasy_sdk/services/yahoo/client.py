from __future__ import annotations

import logging
import threading
from datetime import timedelta
from typing import Any, Callable, Dict, Optional, Protocol, TypeVar

import requests
from sqlalchemy.orm import Session

from fantasy_sdk.core.config import settings
from fantasy_sdk.core.errors import ConfigurationError, YahooAPIError
from fantasy_sdk.services.cache import APICache
from fantasy_sdk.services.yahoo.oauth import DatabaseTokenStore, request_refresh

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TokenStore(Protocol):
    def load(self) -> Optional[dict]: ...
    def save(self, token: dict) -> None: ...


class YahooClient:
    """
    Thin GET client for the Fantasy v2 API.

    The access/refresh token pair is the only mutable state. A 401 triggers one
    refresh (serialized behind ``_token_lock``) and one retry of the request.
    """

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        access_token: Optional[str] = None,
        refresh_token: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        token_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        cache: Optional[APICache] = None,
        cache_enabled: bool = False,
        token_store: Optional[TokenStore] = None,
    ):
        self.client_id = client_id or settings.YAHOO_CLIENT_ID
        self.client_secret = client_secret or settings.YAHOO_CLIENT_SECRET
        self.access_token = access_token
        self.refresh_token = refresh_token
        self.base_url = (base_url or settings.YAHOO_API_BASE).rstrip("/")
        self.token_url = token_url or settings.YAHOO_TOKEN_URL
        self.timeout = timeout or settings.YAHOO_HTTP_TIMEOUT
        self.session = session or requests.Session()
        self.cache = cache
        self.cache_enabled = cache_enabled and cache is not None
        self.token_store = token_store
        self._token_lock = threading.Lock()

    @classmethod
    def from_settings(
        cls,
        session_factory: Optional[Callable[[], Session]] = None,
        user_id: Optional[str] = None,
        **kwargs: Any,
    ) -> "YahooClient":
        """
        Build a client from env settings. With a ``session_factory`` the SQL cache is
        available, and with a ``user_id`` too the latest stored token for that user wins
        over the env tokens (refreshes get written back).
        """
        access = settings.YAHOO_ACCESS_TOKEN
        refresh = settings.YAHOO_REFRESH_TOKEN
        cache = None
        store = None
        if session_factory is not None:
            cache = APICache(session_factory)
            if user_id:
                store = DatabaseTokenStore(session_factory, user_id)
                stored = store.load()
                if stored:
                    access = stored.get("access_token") or access
                    refresh = stored.get("refresh_token") or refresh
        return cls(
            access_token=access,
            refresh_token=refresh,
            cache=cache,
            cache_enabled=settings.YAHOO_ENABLE_CACHE,
            token_store=store,
            **kwargs,
        )

    # ---------- HTTP ----------

    def _headers(self, access_token: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {access_token}", "Accept": "application/json"}

    def _send(self, url: str, params: dict, access_token: str) -> requests.Response:
        try:
            return self.session.get(url, headers=self._headers(access_token), params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise YahooAPIError(None, url, f"request failed: {exc}") from exc

    def get(self, path: str, params: Optional[dict] = None) -> dict:
        """
        GET ``{base}/{path}?format=json`` and return the decoded body.
        e.g. path="league/454.l.12345/standings"
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        q = dict(params or {})
        q.setdefault("format", "json")

        token = self.access_token
        if not token:
            raise ConfigurationError(
                "Yahoo access token not configured. Set YAHOO_ACCESS_TOKEN or complete /auth/login first."
            )

        resp = self._send(url, q, token)
        if resp.status_code == 401:
            logger.info("Yahoo returned 401 for %s; refreshing access token", path)
            token = self.refresh_access_token(stale_token=token)
            resp = self._send(url, q, token)

        if not resp.ok:
            raise YahooAPIError(resp.status_code, resp.url, resp.text)
        try:
            return resp.json()
        except ValueError as exc:
            raise YahooAPIError(resp.status_code, resp.url, resp.text) from exc

    def refresh_access_token(self, stale_token: Optional[str] = None) -> str:
        """
        Swap the refresh token for a new access token and return it.

        If ``stale_token`` is given and another thread already replaced it while we
        waited on the lock, the current token is returned without a second refresh.
        """
        with self._token_lock:
            if stale_token is not None and self.access_token and self.access_token != stale_token:
                logger.debug("Access token already refreshed by another caller")
                return self.access_token

            token = request_refresh(
                self.refresh_token or "",
                client_id=self.client_id,
                client_secret=self.client_secret,
                token_url=self.token_url,
                http=self.session,
                timeout=self.timeout,
            )
            self.access_token = token["access_token"]
            # Yahoo may omit refresh_token; keep the old one then
            if token.get("refresh_token"):
                self.refresh_token = token["refresh_token"]
            logger.info("Refreshed Yahoo access token (expires in %s seconds)", token.get("expires_in"))

            if self.token_store is not None:
                self.token_store.save({**token, "refresh_token": self.refresh_token})
            return self.access_token

    # ---------- cache-aside ----------

    def cached(self, key: str, ttl: timedelta, fetch: Callable[[], T], loader: Callable[[Any], T]) -> T:
        """Return ``loader(cached_json)`` on a hit, else ``fetch()`` and store the result."""
        if not self.cache_enabled:
            return fetch()

        hit = self.cache.get(key)
        if hit is not None:
            try:
                return loader(hit)
            except (TypeError, ValueError) as exc:
                logger.warning("Ignoring unreadable cache entry %s: %s", key, exc)

        value = fetch()
        self.cache.set(key, value, ttl)
        return value
