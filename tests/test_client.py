from __future__ import annotations

import threading
from datetime import timedelta

import pytest
import requests

from fantasy_sdk.core.errors import ConfigurationError, TokenRefreshError, YahooAPIError
from fantasy_sdk.services.cache import APICache
from fantasy_sdk.services.yahoo.client import YahooClient
from tests.factories import FakeResponse, FakeSession


def make_client(session, **kwargs) -> YahooClient:
    kwargs.setdefault("access_token", "old-access")
    kwargs.setdefault("refresh_token", "old-refresh")
    return YahooClient(
        client_id="cid",
        client_secret="secret",
        base_url="https://api.example/fantasy/v2/",
        token_url="https://login.example/get_token",
        session=session,
        **kwargs,
    )


class MemoryTokenStore:
    def __init__(self):
        self.saved = []

    def load(self):
        return None

    def save(self, token):
        self.saved.append(token)


class TestGet:
    def test_builds_url_headers_and_format(self):
        s = FakeSession([FakeResponse(200, {"fantasy_content": {}})])
        client = make_client(s)

        assert client.get("/league/454.l.1/standings") == {"fantasy_content": {}}
        call = s.get_calls[0]
        assert call["url"] == "https://api.example/fantasy/v2/league/454.l.1/standings"
        assert call["params"]["format"] == "json"
        assert call["headers"]["Authorization"] == "Bearer old-access"
        assert call["headers"]["Accept"] == "application/json"

    def test_missing_token_is_configuration_error(self):
        client = make_client(FakeSession(), access_token=None)
        with pytest.raises(ConfigurationError):
            client.get("league/x")

    def test_non_2xx_raises_api_error_with_status(self):
        s = FakeSession([FakeResponse(500, text="boom", url="u")])
        with pytest.raises(YahooAPIError) as exc:
            make_client(s).get("league/x")
        assert exc.value.status_code == 500
        assert "boom" in exc.value.body

    def test_non_json_body_raises_api_error(self):
        s = FakeSession([FakeResponse(200, body=None, text="<html>")])
        with pytest.raises(YahooAPIError):
            make_client(s).get("league/x")

    def test_transport_error_is_wrapped(self):
        class Exploding(FakeSession):
            def get(self, *a, **kw):
                raise requests.ConnectionError("down")

        with pytest.raises(YahooAPIError) as exc:
            make_client(Exploding()).get("league/x")
        assert exc.value.status_code is None


class TestRefreshOn401:
    def test_refreshes_once_and_retries(self):
        s = FakeSession(
            get_responses=[FakeResponse(401, text="expired"), FakeResponse(200, {"ok": 1})],
            post_responses=[FakeResponse(200, {"access_token": "new-access", "refresh_token": "new-refresh", "expires_in": 3600})],
        )
        store = MemoryTokenStore()
        client = make_client(s, token_store=store)

        assert client.get("league/x") == {"ok": 1}
        assert len(s.post_calls) == 1
        post = s.post_calls[0]
        assert post["data"]["grant_type"] == "refresh_token"
        assert post["data"]["refresh_token"] == "old-refresh"
        assert post["auth"] == ("cid", "secret")
        assert s.get_calls[1]["headers"]["Authorization"] == "Bearer new-access"
        assert client.access_token == "new-access"
        assert client.refresh_token == "new-refresh"
        assert store.saved[0]["access_token"] == "new-access"

    def test_second_401_is_not_retried_again(self):
        s = FakeSession(
            get_responses=[FakeResponse(401, text="a"), FakeResponse(401, text="b")],
            post_responses=[FakeResponse(200, {"access_token": "new-access"})],
        )
        with pytest.raises(YahooAPIError) as exc:
            make_client(s).get("league/x")
        assert exc.value.status_code == 401
        assert len(s.post_calls) == 1

    def test_keeps_refresh_token_when_response_omits_it(self):
        s = FakeSession(post_responses=[FakeResponse(200, {"access_token": "new-access"})])
        client = make_client(s)
        client.refresh_access_token()
        assert client.refresh_token == "old-refresh"

    def test_refresh_failure_raises(self):
        s = FakeSession(
            get_responses=[FakeResponse(401, text="expired")],
            post_responses=[FakeResponse(400, text="invalid_grant")],
        )
        with pytest.raises(TokenRefreshError):
            make_client(s).get("league/x")

    def test_no_refresh_token_raises(self):
        client = make_client(FakeSession(), refresh_token=None)
        with pytest.raises(TokenRefreshError):
            client.refresh_access_token()

    def test_stale_token_skips_second_refresh(self):
        s = FakeSession(post_responses=[FakeResponse(200, {"access_token": "new-access"})])
        client = make_client(s)
        client.refresh_access_token(stale_token="old-access")
        # a second caller that saw the same stale token must not refresh again
        assert client.refresh_access_token(stale_token="old-access") == "new-access"
        assert len(s.post_calls) == 1

    def test_concurrent_401s_refresh_once(self):
        barrier = threading.Barrier(4)

        class ConcurrentSession(FakeSession):
            def get(self, url, headers=None, params=None, timeout=None):
                if headers["Authorization"] == "Bearer old-access":
                    barrier.wait(timeout=5)
                    return FakeResponse(401, text="expired")
                return FakeResponse(200, {"ok": 1})

            def post(self, url, data=None, auth=None, timeout=None):
                self.post_calls.append(data)
                return FakeResponse(200, {"access_token": "new-access"})

        s = ConcurrentSession()
        client = make_client(s)
        results, errors = [], []

        def worker():
            try:
                results.append(client.get("league/x"))
            except Exception as exc:  # surfaced through the assertion below
                errors.append(exc)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        assert results == [{"ok": 1}] * 4
        assert len(s.post_calls) == 1


class TestCached:
    def test_disabled_cache_always_fetches(self):
        client = make_client(FakeSession())
        calls = []
        assert client.cached("k", timedelta(hours=1), lambda: calls.append(1) or [1], list) == [1]
        assert client.cached("k", timedelta(hours=1), lambda: calls.append(1) or [1], list) == [1]
        assert len(calls) == 2

    def test_hit_skips_fetch(self, session_factory):
        client = make_client(FakeSession(), cache=APICache(session_factory), cache_enabled=True)
        calls = []

        def fetch():
            calls.append(1)
            return {"a": 1}

        assert client.cached("k", timedelta(hours=1), fetch, dict) == {"a": 1}
        assert client.cached("k", timedelta(hours=1), fetch, dict) == {"a": 1}
        assert len(calls) == 1

    def test_unreadable_entry_is_refetched(self, session_factory):
        cache = APICache(session_factory)
        cache.set("k", "not-a-number", timedelta(hours=1))
        client = make_client(FakeSession(), cache=cache, cache_enabled=True)

        assert client.cached("k", timedelta(hours=1), lambda: 7, int) == 7
        assert cache.get("k") == 7


class TestFromSettings:
    def test_stored_token_wins_over_env(self, session_factory, encryption_key, monkeypatch):
        from fantasy_sdk.core.config import settings
        from fantasy_sdk.services.yahoo.oauth import DatabaseTokenStore

        monkeypatch.setattr(settings, "YAHOO_ACCESS_TOKEN", "env-access")
        monkeypatch.setattr(settings, "YAHOO_REFRESH_TOKEN", "env-refresh")
        DatabaseTokenStore(session_factory, "guid-1").save({"access_token": "db-access", "refresh_token": "db-refresh"})

        client = YahooClient.from_settings(session_factory, "guid-1")
        assert client.access_token == "db-access"
        assert client.refresh_token == "db-refresh"
        assert client.token_store is not None

    def test_env_tokens_without_user(self, session_factory, monkeypatch):
        from fantasy_sdk.core.config import settings

        monkeypatch.setattr(settings, "YAHOO_ACCESS_TOKEN", "env-access")
        client = YahooClient.from_settings(session_factory)
        assert client.access_token == "env-access"
        assert client.token_store is None
