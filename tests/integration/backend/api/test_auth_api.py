"""
Integration Tests for Session API.

Login with an identity token, the current-user endpoint, and logout.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from jose import jwt

from notecode.backend.core.config import get_settings
from notecode.backend.core.utils import utc_now


def make_identity_token(
    sub: str | None = "idp-user-9",
    secret: str | None = None,
    audience: str = "notecode-login",
    expires_in: timedelta = timedelta(minutes=5),
    **claims,
) -> str:
    payload = {"aud": audience, "exp": utc_now() + expires_in, **claims}
    if sub is not None:
        payload["sub"] = sub
    return jwt.encode(payload, secret or get_settings().identity_secret, algorithm="HS256")


class TestLogin:
    """Tests for POST /api/v1/auth/login."""

    async def test_login_creates_user_and_session(self, client: AsyncClient, api):
        token = make_identity_token(
            email="linus@example.com",
            first_name="Linus",
            profile_image_url="https://img.example.com/l.png",
        )

        response = await client.post("/api/v1/auth/login", json={"id_token": token})

        data = api.assert_success(response)
        session = data["data"]
        assert session["token_type"] == "bearer"
        assert session["access_token"]
        assert session["user"]["id"] == "idp-user-9"
        assert session["user"]["email"] == "linus@example.com"
        assert session["user"]["first_name"] == "Linus"

    async def test_login_sets_http_only_cookie(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/auth/login",
            json={"id_token": make_identity_token()},
        )

        assert response.status_code == 200
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith("access_token=")
        assert "httponly" in set_cookie.lower()
        assert "samesite=lax" in set_cookie.lower()

    async def test_access_token_authenticates_requests(self, client: AsyncClient, api):
        login = await client.post(
            "/api/v1/auth/login",
            json={"id_token": make_identity_token(email="a@example.com")},
        )
        access_token = login.json()["data"]["access_token"]

        response = await client.get(
            "/api/v1/auth/user",
            headers={"Authorization": f"Bearer {access_token}"},
        )

        data = api.assert_success(response)
        assert data["data"]["id"] == "idp-user-9"
        assert data["data"]["email"] == "a@example.com"

    async def test_repeat_login_updates_profile(self, client: AsyncClient, api):
        await client.post(
            "/api/v1/auth/login",
            json={"id_token": make_identity_token(email="old@example.com")},
        )
        first = await client.get(
            "/api/v1/auth/user",
            headers={"Authorization": f"Bearer {_bearer_for('idp-user-9')}"},
        )

        response = await client.post(
            "/api/v1/auth/login",
            json={"id_token": make_identity_token(email="new@example.com")},
        )

        data = api.assert_success(response)
        assert data["data"]["user"]["email"] == "new@example.com"
        assert data["data"]["user"]["created_at"] == first.json()["data"]["created_at"]

    @pytest.mark.parametrize(
        "token_kwargs",
        [
            {"secret": "not-the-identity-secret"},
            {"audience": "someone-else"},
            {"expires_in": timedelta(minutes=-1)},
            {"sub": None},
        ],
        ids=["wrong-secret", "wrong-audience", "expired", "no-subject"],
    )
    async def test_bad_identity_token_is_401(
        self, client: AsyncClient, api, token_kwargs,
    ):
        token = make_identity_token(**token_kwargs)

        response = await client.post("/api/v1/auth/login", json={"id_token": token})

        api.assert_error(response, 401, "AUTH_UNAUTHORIZED")

    @pytest.mark.parametrize(
        "claims",
        [
            {"email": "x" * 400 + "@example.com"},
            {"first_name": 123},
            {"sub": "u" * 300},
        ],
        ids=["email-too-long", "non-string-name", "subject-too-long"],
    )
    async def test_malformed_profile_claims_are_401(
        self, client: AsyncClient, api, claims,
    ):
        token = make_identity_token(**claims)

        response = await client.post("/api/v1/auth/login", json={"id_token": token})

        api.assert_error(response, 401, "AUTH_UNAUTHORIZED")

    async def test_access_token_is_not_an_identity_token(
        self, client: AsyncClient, api, owner,
    ):
        response = await client.post(
            "/api/v1/auth/login",
            json={"id_token": _bearer_for(owner.id)},
        )

        api.assert_error(response, 401, "AUTH_UNAUTHORIZED")

    async def test_missing_id_token_is_422(self, client: AsyncClient, api):
        response = await client.post("/api/v1/auth/login", json={})

        api.assert_validation_error(response, field="id_token")


class TestCurrentUser:
    """Tests for GET /api/v1/auth/user."""

    async def test_returns_profile(self, client: AsyncClient, api, auth_headers):
        response = await client.get("/api/v1/auth/user", headers=auth_headers)

        data = api.assert_success(response)
        assert data["data"]["id"] == "user-1"
        assert data["data"]["email"] == "ada@example.com"

    async def test_without_session_is_401(self, client: AsyncClient, api):
        response = await client.get("/api/v1/auth/user")

        api.assert_error(response, 401, "AUTH_UNAUTHORIZED")

    async def test_expired_access_token_is_401(self, client: AsyncClient, api, owner):
        from notecode.backend.core.security import create_access_token

        token = create_access_token(owner.id, expires_delta=timedelta(seconds=-1))
        response = await client.get(
            "/api/v1/auth/user",
            headers={"Authorization": f"Bearer {token}"},
        )

        api.assert_error(response, 401, "AUTH_UNAUTHORIZED")


class TestLogout:
    """Tests for POST /api/v1/auth/logout."""

    async def test_logout_clears_cookie(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/logout")

        assert response.status_code == 204
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith("access_token=")
        assert "max-age=0" in set_cookie.lower()


def _bearer_for(user_id: str) -> str:
    from notecode.backend.core.security import create_access_token

    return create_access_token(user_id)
