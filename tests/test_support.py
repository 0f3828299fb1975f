"""
Tests for the supporting pieces: timestamp formatting, the session store,
request references, the session cookie and the probe endpoints.
"""

import time
from datetime import datetime, timezone

import pytest

from postboard.exceptions import StoreError, UnauthenticatedError
from postboard.formatting import format_timestamp
from postboard.middleware.request_id import resolve_request_id
from postboard.sessions import Session, SessionStore


# ══════════════════════════════════════════════════════════════════════════
# Timestamp Formatting
# ══════════════════════════════════════════════════════════════════════════

class TestFormatTimestamp:

    def test_winter_afternoon(self, sample_times):
        assert format_timestamp(sample_times["winter"]) == "Jan 5, 2024, 03:07 PM"

    def test_summer_noon_uses_daylight_time(self, sample_times):
        assert format_timestamp(sample_times["summer"]) == "Jul 4, 2024, 12:30 PM"

    def test_midnight_is_twelve_am(self, sample_times):
        assert format_timestamp(sample_times["midnight"]) == "Mar 1, 2024, 12:05 AM"

    def test_naive_is_treated_as_utc(self):
        assert format_timestamp(datetime(2024, 1, 5, 22, 7)) == "Jan 5, 2024, 03:07 PM"

    def test_explicit_zone(self, sample_times):
        assert format_timestamp(sample_times["winter"], "UTC") == "Jan 5, 2024, 10:07 PM"

    def test_crosses_year_boundary(self):
        value = datetime(2024, 1, 1, 3, 0, tzinfo=timezone.utc)
        assert format_timestamp(value) == "Dec 31, 2023, 08:00 PM"

    def test_none(self):
        assert format_timestamp(None) == ""


# ══════════════════════════════════════════════════════════════════════════
# Session Store
# ══════════════════════════════════════════════════════════════════════════

class TestSessionStore:

    @pytest.mark.asyncio
    async def test_create_and_get(self):
        store = SessionStore()
        session = await store.create("alice")

        assert session.is_authenticated
        assert session.session_id
        assert await store.get(session.session_id) is session

    @pytest.mark.asyncio
    async def test_tokens_are_unique(self):
        store = SessionStore()
        first = await store.create("alice")
        second = await store.create("alice")
        assert first.session_id != second.session_id
        assert len(store) == 2

    @pytest.mark.asyncio
    async def test_unknown_token(self):
        assert await SessionStore().get("nope") is None

    @pytest.mark.asyncio
    async def test_expired_session_is_dropped(self):
        store = SessionStore(max_age=60)
        session = await store.create("alice")
        session.created_at = time.time() - 120

        assert await store.get(session.session_id) is None
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_destroy(self):
        store = SessionStore()
        session = await store.create("alice")
        await store.destroy(session.session_id)
        assert await store.get(session.session_id) is None

    @pytest.mark.asyncio
    async def test_destroy_twice_raises(self):
        store = SessionStore()
        session = await store.create("alice")
        await store.destroy(session.session_id)
        with pytest.raises(StoreError) as exc_info:
            await store.destroy(session.session_id)
        assert exc_info.value.message == "Unable to log out"

    def test_anonymous_require_raises(self):
        with pytest.raises(UnauthenticatedError) as exc_info:
            Session().require(message="User not logged in")
        assert exc_info.value.message == "User not logged in"


class TestSessionCookie:

    @pytest.mark.asyncio
    async def test_cookie_is_http_only(self, test_client):
        await test_client.post("/register", data={"username": "alice", "password": "pw1"})
        response = await test_client.post("/login", data={"username": "alice", "password": "pw1"})
        set_cookie = response.headers["set-cookie"].lower()
        assert "httponly" in set_cookie
        assert "samesite=lax" in set_cookie

    @pytest.mark.asyncio
    async def test_unknown_token_is_anonymous(self, test_client):
        test_client.cookies.set("postboard_session", "forged")
        response = await test_client.get("/profile")
        assert "You are not logged in." in response.text


# ══════════════════════════════════════════════════════════════════════════
# Probes & Middleware
# ══════════════════════════════════════════════════════════════════════════

class TestProbes:

    @pytest.mark.asyncio
    async def test_welcome(self, test_client):
        response = await test_client.get("/welcome")
        assert response.status_code == 200
        assert response.json() == {"status": "success", "message": "Welcome!"}

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/welcome", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/welcome")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_upload_form(self, test_client):
        response = await test_client.get("/upload")
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_malformed_request_id_replaced(self, test_client):
        response = await test_client.get("/welcome", headers={"X-Request-ID": "<script>" * 10})
        reference = response.headers["X-Request-ID"]
        assert len(reference) == 8
        assert "<" not in reference

    @pytest.mark.asyncio
    async def test_error_page_shows_reference(self, test_client):
        response = await test_client.get("/post/999", headers={"X-Request-ID": "req-42"})
        assert "Reference: req-42" in response.text

    @pytest.mark.asyncio
    async def test_profile_error_page_shows_reference(self, test_client):
        response = await test_client.get("/user/nobody")
        assert f"Reference: {response.headers['X-Request-ID']}" in response.text


class TestResolveRequestId:

    @pytest.mark.parametrize("incoming", ["abc123", "lb-7f3e.2_a", "x" * 64])
    def test_well_formed_ids_kept(self, incoming):
        assert resolve_request_id(incoming) == incoming

    @pytest.mark.parametrize("incoming", [None, "", "x" * 65, "has space", "line\nbreak", "abc\n"])
    def test_other_ids_replaced(self, incoming):
        reference = resolve_request_id(incoming)
        assert reference != incoming
        assert len(reference) == 8
        int(reference, 16)
