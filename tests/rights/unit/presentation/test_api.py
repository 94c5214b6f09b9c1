"""Tests for the FastAPI glue: token extraction, error mapping, lifespan."""

import asyncio
from typing import Annotated
from unittest.mock import Mock

import pytest
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.testclient import TestClient
from pydantic import BaseModel

from rights.presentation.api import create_app
from rights.presentation.api.dependencies import (
    CurrentUser,
    OptionalUser,
    SessionToken,
    extract_session_token,
    get_auth_gateway,
    get_request_context,
)
from rights_config import Settings
from rights_identity import AuthGateway, EmailService, RequestContext

API_SETTINGS = {
    "bcrypt_rounds": 4,
    "session_cleanup_interval_seconds": 60,
    "smtp_enabled": False,
}


class LoginRequest(BaseModel):
    identifier: str
    password: str


@pytest.fixture
def app(user_store):
    app = create_app(
        user_store,
        settings=Settings(_env_file=None, **API_SETTINGS),
        email_service=Mock(spec=EmailService),
    )

    @app.post("/login")
    async def login(
        body: LoginRequest,
        gateway: Annotated[AuthGateway, Depends(get_auth_gateway)],
        context: Annotated[RequestContext, Depends(get_request_context)],
    ) -> dict:
        result = await gateway.login_with_password(
            body.identifier,
            body.password,
            context,
        )
        return {"token": result.token, "user_id": result.user.id}

    @app.post("/logout")
    async def logout(
        token: SessionToken,
        gateway: Annotated[AuthGateway, Depends(get_auth_gateway)],
    ) -> dict:
        return {"destroyed": await gateway.logout(token)}

    @app.get("/me")
    async def me(user: CurrentUser) -> dict:
        return {"id": user.id, "username": user.username}

    @app.get("/maybe")
    async def maybe(user: OptionalUser) -> dict:
        return {"id": user.id if user else None}

    return app


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


def _login(client: TestClient) -> str:
    response = client.post(
        "/login",
        json={"identifier": "alice", "password": "correct-password"},
    )
    assert response.status_code == 200
    return response.json()["token"]


class TestTokenExtraction:
    def test_cookie(self, client):
        token = _login(client)

        response = client.get("/me", headers={"Cookie": f"session_token={token}"})

        assert response.status_code == 200
        assert response.json() == {"id": 1, "username": "alice"}

    def test_custom_header(self, client):
        token = _login(client)

        response = client.get("/me", headers={"X-Session-Token": token})

        assert response.status_code == 200

    def test_bearer(self, client):
        token = _login(client)

        response = client.get("/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200

    def test_cookie_wins_over_header(self, client):
        token = _login(client)

        response = client.get(
            "/me",
            headers={
                "Cookie": f"session_token={token}",
                "X-Session-Token": "stale",
            },
        )

        assert response.status_code == 200

    def test_session_records_client(self, app, client):
        token = _login(client)

        session = asyncio.run(app.state.session_store.get_session(token))

        assert session.wallet_type == "password"
        assert session.ip_address == "testclient"
        assert session.user_agent == "testclient"


class TestErrorMapping:
    def test_missing_token_is_401(self, client):
        response = client.get("/me")

        assert response.status_code == 401
        assert response.json() == {
            "detail": "Authentication required",
            "code": "UNAUTHENTICATED",
        }
        assert response.headers["WWW-Authenticate"] == "Session"

    def test_unknown_token_is_401(self, client):
        response = client.get("/me", headers={"X-Session-Token": "f" * 64})

        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHENTICATED"

    def test_bad_password_is_401(self, client):
        response = client.post(
            "/login",
            json={"identifier": "alice", "password": "wrong"},
        )

        assert response.status_code == 401
        assert response.json() == {
            "detail": "Invalid credentials",
            "code": "INVALID_CREDENTIALS",
        }

    def test_banned_user_is_403(self, client, user_store):
        token = _login(client)
        user_store.stored(1).is_banned = True

        response = client.get("/me", headers={"X-Session-Token": token})

        assert response.status_code == 403
        assert response.json()["code"] == "ACCOUNT_SUSPENDED"

    def test_logout_then_401(self, client):
        token = _login(client)
        headers = {"X-Session-Token": token}

        assert client.post("/logout", headers=headers).json() == {"destroyed": True}
        assert client.post("/logout", headers=headers).json() == {"destroyed": False}
        assert client.get("/me", headers=headers).status_code == 401


class TestOptionalUser:
    def test_anonymous(self, client):
        response = client.get("/maybe")

        assert response.status_code == 200
        assert response.json() == {"id": None}

    def test_authenticated(self, client):
        token = _login(client)

        response = client.get("/maybe", headers={"X-Session-Token": token})

        assert response.json() == {"id": 1}


class TestLifespan:
    def test_health_reports_sessions(self, client):
        _login(client)
        _login(client)

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "version": "1.0.0",
            "sessions": 2,
            "active_users": 1,
        }

    def test_sweeper_runs_for_app_lifetime(self, app):
        sweeper = app.state.session_sweeper
        assert not sweeper.running

        with TestClient(app):
            assert sweeper.running

        assert not sweeper.running


def _request(*headers: tuple[str, str]) -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/",
            "headers": [(k.lower().encode(), v.encode()) for k, v in headers],
        },
    )


class TestExtractSessionToken:
    """All token sources are normalized identically."""

    @pytest.fixture
    def settings(self) -> Settings:
        return Settings(_env_file=None)

    @pytest.mark.parametrize(
        ("headers", "credentials"),
        [
            ((("Cookie", 'session_token=" tok123 "'),), None),
            ((("X-Session-Token", " tok123 "),), None),
            ((), HTTPAuthorizationCredentials(scheme="Bearer", credentials=" tok123 ")),
        ],
        ids=["cookie", "header", "bearer"],
    )
    def test_whitespace_is_trimmed_for_every_source(self, settings, headers, credentials):
        token = extract_session_token(_request(*headers), settings, credentials)

        assert token == "tok123"

    def test_blank_cookie_falls_through_to_header(self, settings):
        request = _request(
            ("Cookie", 'session_token="   "'),
            ("X-Session-Token", "tok123"),
        )

        assert extract_session_token(request, settings, None) == "tok123"

    def test_nothing_presented(self, settings):
        assert extract_session_token(_request(), settings, None) is None
