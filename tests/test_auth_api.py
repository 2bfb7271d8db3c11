# =============================================================================
# QUOTE API - AUTH API TESTS
# =============================================================================
# File: tests/test_auth_api.py
# Description: Integration tests for registration, login and user endpoints
# =============================================================================

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

from quote_api.core.security import JWTManager


class TestRegistration:
    """Test suite for POST /api/register."""

    @pytest.mark.asyncio
    async def test_register_success(self, client: AsyncClient, settings, alice):
        """Token decodes to the stored id, email and name."""
        response = await client.post("/api/register", json=alice)

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Account created successfully"
        assert data["user"]["name"] == "Alice"
        assert data["user"]["email"] == "a@x.com"

        payload = JWTManager(settings).decode_token(data["token"])
        assert payload.id == data["user"]["id"]
        assert payload.email == "a@x.com"
        assert payload.name == "Alice"

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, client: AsyncClient, alice):
        first = await client.post("/api/register", json=alice)
        second = await client.post("/api/register", json=alice)

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["error_code"] == "USER_EXISTS"

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_registration(self, client: AsyncClient, alice):
        """At most one of several simultaneous registrations succeeds."""
        responses = await asyncio.gather(
            *(client.post("/api/register", json=alice) for _ in range(5))
        )

        codes = sorted(r.status_code for r in responses)
        assert codes == [201, 409, 409, 409, 409]

        users = (await client.get("/api/users")).json()["users"]
        assert [u["email"] for u in users] == ["a@x.com"]

    @pytest.mark.asyncio
    async def test_email_is_case_sensitive(self, client: AsyncClient, alice):
        await client.post("/api/register", json=alice)
        upper = dict(alice, email="A@X.com")

        response = await client.post("/api/register", json=upper)

        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_register_short_password(self, client: AsyncClient):
        response = await client.post(
            "/api/register",
            json={"name": "Bob", "email": "b@x.com", "password": "12345"},
        )

        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "VALIDATION_ERROR"
        assert data["message"] == "Password must be at least 6 characters"

    @pytest.mark.asyncio
    async def test_password_whitespace_counts_toward_length(self, client: AsyncClient):
        response = await client.post(
            "/api/register",
            json={"name": "Bob", "email": "b@x.com", "password": "abc   "},
        )

        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_long_password_accepted(self, client: AsyncClient):
        password = "p" * 500
        registered = await client.post(
            "/api/register",
            json={"name": "Bob", "email": "b@x.com", "password": password},
        )
        login = await client.post(
            "/api/login", json={"email": "b@x.com", "password": password}
        )

        assert registered.status_code == 201
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_register_missing_fields(self, client: AsyncClient):
        response = await client.post("/api/register", json={"email": "b@x.com"})

        assert response.status_code == 400
        fields = {e["field"] for e in response.json()["details"]["errors"]}
        assert {"name", "password"} <= fields

    @pytest.mark.asyncio
    async def test_register_hostile_input_is_stored_verbatim(self, client: AsyncClient):
        hostile = {
            "name": "Robert'); DROP TABLE users;--",
            "email": "bobby'--@x.com",
            "password": "secret1",
        }

        registered = await client.post("/api/register", json=hostile)
        login = await client.post(
            "/api/login",
            json={"email": hostile["email"], "password": "secret1"},
        )

        assert registered.status_code == 201
        assert login.status_code == 200
        assert login.json()["user"]["name"] == hostile["name"]


class TestLogin:
    """Test suite for POST /api/login."""

    @pytest.mark.asyncio
    async def test_alice_scenario(self, client: AsyncClient, settings, alice):
        """Register, re-register, bad login, good login."""
        registered = await client.post("/api/register", json=alice)
        assert registered.status_code == 201

        again = await client.post("/api/register", json=alice)
        assert again.status_code == 409

        bad = await client.post("/api/login", json={"email": "a@x.com", "password": "wrong"})
        assert bad.status_code == 401

        good = await client.post("/api/login", json={"email": "a@x.com", "password": "secret1"})
        assert good.status_code == 200
        assert good.json()["message"] == "Login successful"

        payload = JWTManager(settings).decode_token(good.json()["token"])
        assert payload.id == registered.json()["user"]["id"]

    @pytest.mark.asyncio
    async def test_unknown_email_and_wrong_password_match(self, client: AsyncClient, alice):
        await client.post("/api/register", json=alice)

        wrong_password = await client.post(
            "/api/login", json={"email": "a@x.com", "password": "nope-nope"}
        )
        unknown_email = await client.post(
            "/api/login", json={"email": "nobody@x.com", "password": "nope-nope"}
        )

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()

    @pytest.mark.asyncio
    async def test_password_is_not_trimmed(self, client: AsyncClient):
        """Surrounding whitespace is part of the stored password."""
        await client.post(
            "/api/register",
            json={"name": "Bob", "email": "b@x.com", "password": "  secret1  "},
        )

        trimmed = await client.post(
            "/api/login", json={"email": "b@x.com", "password": "secret1"}
        )
        verbatim = await client.post(
            "/api/login", json={"email": "b@x.com", "password": "  secret1  "}
        )

        assert trimmed.status_code == 401
        assert verbatim.status_code == 200

    @pytest.mark.asyncio
    async def test_login_missing_fields(self, client: AsyncClient):
        response = await client.post("/api/login", json={"email": "a@x.com"})

        assert response.status_code == 400


class TestUserEndpoints:
    """Test suite for GET /api/user and GET /api/users."""

    @pytest.mark.asyncio
    async def test_profile(self, client: AsyncClient, auth_headers):
        response = await client.get("/api/user", headers=auth_headers)

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["email"] == "a@x.com"
        assert user["created_at"]
        assert "password" not in user

    @pytest.mark.asyncio
    async def test_profile_without_token(self, client: AsyncClient):
        response = await client.get("/api/user")

        assert response.status_code == 401
        assert response.json()["error_code"] == "TOKEN_MISSING"

    @pytest.mark.asyncio
    async def test_profile_with_garbage_token(self, client: AsyncClient):
        response = await client.get(
            "/api/user", headers={"Authorization": "Bearer not.a.token"}
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_profile_of_unknown_user(self, client: AsyncClient, settings):
        token = JWTManager(settings).create_token(user_id=999, email="g@x.com", name="Ghost")

        response = await client.get("/api/user", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_list_users_hides_passwords(self, client: AsyncClient, alice):
        await client.post("/api/register", json=alice)
        await client.post(
            "/api/register",
            json={"name": "Bob", "email": "b@x.com", "password": "secret2"},
        )

        users = (await client.get("/api/users")).json()["users"]

        assert [u["name"] for u in users] == ["Alice", "Bob"]
        assert all("password" not in u for u in users)


class TestTokenLifetime:
    """A token issued at T is accepted before T+7d and rejected after."""

    @pytest.mark.asyncio
    async def test_token_within_lifetime(self, client: AsyncClient, settings, alice):
        user = (await client.post("/api/register", json=alice)).json()["user"]
        issued = datetime.now(timezone.utc) - timedelta(days=6, hours=23)
        token = JWTManager(settings).create_token(
            user_id=user["id"], email=user["email"], name=user["name"], issued_at=issued
        )

        response = await client.get("/api/user", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_token_past_lifetime(self, client: AsyncClient, settings, alice):
        user = (await client.post("/api/register", json=alice)).json()["user"]
        issued = datetime.now(timezone.utc) - timedelta(days=7, minutes=1)
        token = JWTManager(settings).create_token(
            user_id=user["id"], email=user["email"], name=user["name"], issued_at=issued
        )

        response = await client.get("/api/user", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 403
        assert response.json()["error_code"] == "TOKEN_EXPIRED"
