"""Integration tests for authentication endpoints."""
import re

import pytest
from httpx import AsyncClient

from petpal.models.user import User


TEST_PASSWORD = "Secret1!"


async def login(client: AsyncClient, username: str, password: str):
    return await client.post(
        "/api/auth/jwt/login",
        data={"username": username, "password": password},
    )


def mailed_code(message) -> str:
    """Pull the temporary password code out of a mailed message."""
    match = re.search(r"^Code: (\S+)$", message.get_content(), re.MULTILINE)
    assert match is not None
    return match.group(1)


async def bearer(client: AsyncClient, username: str, password: str) -> dict:
    response = await login(client, username, password)
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


class TestRegistration:
    """Test POST /api/auth/register."""

    @pytest.mark.asyncio
    async def test_register_success(self, unauthenticated_client: AsyncClient):
        response = await unauthenticated_client.post(
            "/api/auth/register",
            json={"username": "carol", "email": "carol@example.com", "password": "Secret1!"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "carol"
        assert data["email"] == "carol@example.com"
        assert "password" not in data
        assert "hashed_password" not in data

    @pytest.mark.asyncio
    async def test_register_duplicate_username(
        self, unauthenticated_client: AsyncClient, test_user: User
    ):
        response = await unauthenticated_client.post(
            "/api/auth/register",
            json={"username": "alice", "email": "new@example.com", "password": "Secret1!"},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "REGISTER_USER_ALREADY_EXISTS"

    @pytest.mark.asyncio
    async def test_register_duplicate_email(
        self, unauthenticated_client: AsyncClient, test_user: User
    ):
        response = await unauthenticated_client.post(
            "/api/auth/register",
            json={"username": "alice2", "email": "alice@example.com", "password": "Secret1!"},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "REGISTER_USER_ALREADY_EXISTS"

    @pytest.mark.asyncio
    async def test_register_weak_password(self, unauthenticated_client: AsyncClient):
        response = await unauthenticated_client.post(
            "/api/auth/register",
            json={"username": "carol", "email": "carol@example.com", "password": "password"},
        )

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["code"] == "REGISTER_INVALID_PASSWORD"
        assert "at least 7 characters" in detail["reason"]

    @pytest.mark.asyncio
    async def test_register_blank_username(self, unauthenticated_client: AsyncClient):
        response = await unauthenticated_client.post(
            "/api/auth/register",
            json={"username": "   ", "email": "carol@example.com", "password": "Secret1!"},
        )

        assert response.status_code == 422


class TestLogin:
    """Test POST /api/auth/jwt/login and GET /api/auth/users/me."""

    @pytest.mark.asyncio
    async def test_login_and_me(self, unauthenticated_client: AsyncClient, test_user: User):
        headers = await bearer(unauthenticated_client, "alice", TEST_PASSWORD)

        response = await unauthenticated_client.get("/api/auth/users/me", headers=headers)

        assert response.status_code == 200
        assert response.json()["username"] == "alice"

    @pytest.mark.asyncio
    async def test_login_trims_username(self, unauthenticated_client: AsyncClient, test_user: User):
        response = await login(unauthenticated_client, " alice ", TEST_PASSWORD)

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_user_look_alike(
        self, unauthenticated_client: AsyncClient, test_user: User
    ):
        wrong_password = await login(unauthenticated_client, "alice", "Wrong1!x")
        unknown_user = await login(unauthenticated_client, "nobody", TEST_PASSWORD)

        assert wrong_password.status_code == unknown_user.status_code == 400
        assert wrong_password.json() == unknown_user.json()
        assert wrong_password.json()["detail"] == "LOGIN_BAD_CREDENTIALS"

    @pytest.mark.asyncio
    async def test_me_requires_token(self, unauthenticated_client: AsyncClient):
        response = await unauthenticated_client.get("/api/auth/users/me")

        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"


class TestTempPassword:
    """Test POST /api/auth/temp-password and /temp-password/confirm."""

    @pytest.mark.asyncio
    async def test_same_response_for_known_and_unknown_email(
        self, unauthenticated_client: AsyncClient, test_user: User, outbox
    ):
        known = await unauthenticated_client.post(
            "/api/auth/temp-password", json={"email": "alice@example.com"}
        )
        unknown = await unauthenticated_client.post(
            "/api/auth/temp-password", json={"email": "nobody@example.com"}
        )

        assert known.status_code == unknown.status_code == 200
        assert known.json() == unknown.json()
        assert [message["To"] for message in outbox] == ["alice@example.com"]

    @pytest.mark.asyncio
    async def test_old_password_works_until_code_redeemed(
        self, unauthenticated_client: AsyncClient, test_user: User, outbox
    ):
        await unauthenticated_client.post(
            "/api/auth/temp-password", json={"email": "alice@example.com"}
        )

        assert (await login(unauthenticated_client, "alice", TEST_PASSWORD)).status_code == 200

        response = await unauthenticated_client.post(
            "/api/auth/temp-password/confirm", json={"token": mailed_code(outbox[0])}
        )

        assert response.status_code == 200
        temp_password = response.json()["temp_password"]
        assert (await login(unauthenticated_client, "alice", temp_password)).status_code == 200
        assert (await login(unauthenticated_client, "alice", TEST_PASSWORD)).status_code == 400

    @pytest.mark.asyncio
    async def test_code_cannot_be_reused(
        self, unauthenticated_client: AsyncClient, test_user: User, outbox
    ):
        await unauthenticated_client.post(
            "/api/auth/temp-password", json={"email": "alice@example.com"}
        )
        payload = {"token": mailed_code(outbox[0])}

        first = await unauthenticated_client.post("/api/auth/temp-password/confirm", json=payload)
        second = await unauthenticated_client.post("/api/auth/temp-password/confirm", json=payload)

        assert first.status_code == 200
        assert second.status_code == 400
        assert second.json()["detail"] == "RESET_PASSWORD_BAD_TOKEN"

    @pytest.mark.asyncio
    async def test_bad_code(self, unauthenticated_client: AsyncClient):
        response = await unauthenticated_client.post(
            "/api/auth/temp-password/confirm", json={"token": "not-a-code"}
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "BAD_REQUEST"

    @pytest.mark.asyncio
    async def test_invalid_email(self, unauthenticated_client: AsyncClient):
        response = await unauthenticated_client.post(
            "/api/auth/temp-password", json={"email": "not-an-email"}
        )

        assert response.status_code == 422


class TestChangePassword:
    """Test POST /api/auth/change-password."""

    @pytest.mark.asyncio
    async def test_change_password(self, unauthenticated_client: AsyncClient, test_user: User):
        headers = await bearer(unauthenticated_client, "alice", TEST_PASSWORD)

        response = await unauthenticated_client.post(
            "/api/auth/change-password",
            json={"password": "NewPass2#", "confirm_password": "NewPass2#"},
            headers=headers,
        )

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert (await login(unauthenticated_client, "alice", "NewPass2#")).status_code == 200
        assert (await login(unauthenticated_client, "alice", TEST_PASSWORD)).status_code == 400

    @pytest.mark.asyncio
    async def test_confirmation_mismatch(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/auth/change-password",
            json={"password": "NewPass2#", "confirm_password": "NewPass3#"},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_weak_password(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/auth/change-password",
            json={"password": "weakpass", "confirm_password": "weakpass"},
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "BAD_REQUEST"
        assert "at least 7 characters" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_requires_login(self, unauthenticated_client: AsyncClient):
        response = await unauthenticated_client.post(
            "/api/auth/change-password",
            json={"password": "NewPass2#", "confirm_password": "NewPass2#"},
        )

        assert response.status_code == 401
