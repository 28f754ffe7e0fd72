"""Tests for the Spotify token exchange and authorization helpers."""

import base64
import logging
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from modules.spotify.auth import REQUIRED_SCOPES, TokenExchange, build_authorize_url
from modules.spotify.exceptions import RefreshTokenInvalidError, TokenExchangeError
from tests.conftest import FakeSpotify


async def _get_token(fake: FakeSpotify, credentials) -> str:
    async with httpx.AsyncClient(transport=fake.transport) as http:
        return await TokenExchange(credentials, http).get_access_token()


class TestGetAccessToken:
    @pytest.mark.asyncio
    async def test_returns_access_token(self, credentials):
        fake = FakeSpotify().token()
        assert await _get_token(fake, credentials) == "tok1"

    @pytest.mark.asyncio
    async def test_request_shape(self, credentials):
        """Should POST a refresh_token grant with Basic client auth."""
        fake = FakeSpotify().token()
        await _get_token(fake, credentials)

        request = fake.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://accounts.spotify.com/api/token"
        expected = base64.b64encode(b"client-id:client-secret").decode()
        assert request.headers["Authorization"] == f"Basic {expected}"
        form = parse_qs(request.content.decode())
        assert form == {"grant_type": ["refresh_token"], "refresh_token": ["refresh-token"]}

    @pytest.mark.asyncio
    async def test_invalid_grant_is_refresh_token_invalid(self, credentials):
        fake = FakeSpotify().token(400, {"error": "invalid_grant", "error_description": "Invalid refresh token"})
        with pytest.raises(RefreshTokenInvalidError) as exc_info:
            await _get_token(fake, credentials)
        assert exc_info.value.description == "Invalid refresh token"
        assert exc_info.value.code == "REFRESH_TOKEN_INVALID"

    @pytest.mark.asyncio
    async def test_description_mentioning_refresh_token(self, credentials):
        fake = FakeSpotify().token(400, {"error": "invalid_request", "error_description": "refresh_token must be supplied"})
        with pytest.raises(RefreshTokenInvalidError):
            await _get_token(fake, credentials)

    @pytest.mark.asyncio
    async def test_other_400_is_generic_error(self, credentials):
        fake = FakeSpotify().token(400, {"error": "invalid_client", "error_description": "Invalid client"})
        with pytest.raises(TokenExchangeError) as exc_info:
            await _get_token(fake, credentials)
        assert not isinstance(exc_info.value, RefreshTokenInvalidError)
        assert exc_info.value.status_code == 400
        assert "Invalid client" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_server_error_without_body(self, credentials):
        fake = FakeSpotify().add("POST", "/api/token", status=503)
        with pytest.raises(TokenExchangeError) as exc_info:
            await _get_token(fake, credentials)
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_missing_access_token(self, credentials):
        fake = FakeSpotify().token(body={"token_type": "Bearer"})
        with pytest.raises(TokenExchangeError):
            await _get_token(fake, credentials)

    @pytest.mark.asyncio
    async def test_transport_error(self, credentials):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            with pytest.raises(TokenExchangeError):
                await TokenExchange(credentials, http).get_access_token()

    @pytest.mark.asyncio
    async def test_rotated_refresh_token_is_logged_not_leaked(self, credentials, caplog):
        """A new refresh token is noted in the logs without its value."""
        fake = FakeSpotify().token(body={"access_token": "tok1", "refresh_token": "rotated-secret"})
        with caplog.at_level(logging.WARNING, logger="modules.spotify.auth"):
            assert await _get_token(fake, credentials) == "tok1"
        assert "new refresh token" in caplog.text
        assert "rotated-secret" not in caplog.text
        assert "tok1" not in caplog.text


class TestAuthorizationCode:
    @pytest.mark.asyncio
    async def test_exchange_authorization_code(self, credentials):
        fake = FakeSpotify().token(body={"access_token": "tok1", "refresh_token": "rt"})
        async with httpx.AsyncClient(transport=fake.transport) as http:
            tokens = await TokenExchange(credentials, http).exchange_authorization_code(
                "code-123", "http://127.0.0.1:8888/callback"
            )
        assert tokens["refresh_token"] == "rt"
        form = parse_qs(fake.requests[0].content.decode())
        assert form["grant_type"] == ["authorization_code"]
        assert form["code"] == ["code-123"]
        assert form["redirect_uri"] == ["http://127.0.0.1:8888/callback"]

    @pytest.mark.asyncio
    async def test_rejected_authorization_code_is_not_refresh_token_error(self, credentials):
        """invalid_grant on the code exchange refers to the code, not the refresh token."""
        fake = FakeSpotify().token(400, {"error": "invalid_grant", "error_description": "Invalid authorization code"})
        async with httpx.AsyncClient(transport=fake.transport) as http:
            with pytest.raises(TokenExchangeError) as exc_info:
                await TokenExchange(credentials, http).exchange_authorization_code(
                    "bad", "http://127.0.0.1:8888/callback"
                )
        assert not isinstance(exc_info.value, RefreshTokenInvalidError)
        assert exc_info.value.code == "TOKEN_EXCHANGE_FAILED"
        assert exc_info.value.error == "invalid_grant"
        assert "Invalid authorization code" in exc_info.value.message
        assert "get_refresh_token.py" not in exc_info.value.message

    def test_build_authorize_url(self):
        url = build_authorize_url("client-id", "http://127.0.0.1:8888/callback", state="abc")
        parsed = urlparse(url)
        query = parse_qs(parsed.query)
        assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == "https://accounts.spotify.com/authorize"
        assert query["client_id"] == ["client-id"]
        assert query["response_type"] == ["code"]
        assert query["state"] == ["abc"]
        assert query["scope"] == [" ".join(REQUIRED_SCOPES)]

    def test_scopes_cover_activity_endpoints(self):
        for scope in ("user-top-read", "user-read-recently-played", "user-read-currently-playing"):
            assert scope in REQUIRED_SCOPES
