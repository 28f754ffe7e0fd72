"""
Spotify accounts service: token exchange and authorization helpers.

The proxy only ever uses the refresh-token grant. The authorization-code
grant and the authorize URL builder exist for get_refresh_token.py, which
is run once by the profile owner to obtain the refresh token.
"""

import logging
from typing import Any, Optional
from urllib.parse import urlencode

import httpx

from .exceptions import RefreshTokenInvalidError, TokenExchangeError
from .models import SpotifyCredentials

logger = logging.getLogger(__name__)

SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"
SPOTIFY_AUTHORIZE_URL = "https://accounts.spotify.com/authorize"

# Scopes needed by /me, /me/top/*, /me/player/recently-played and
# /me/player/currently-playing
REQUIRED_SCOPES = (
    "user-read-private",
    "user-top-read",
    "user-read-recently-played",
    "user-read-currently-playing",
)


def build_authorize_url(
    client_id: str,
    redirect_uri: str,
    scopes: tuple[str, ...] = REQUIRED_SCOPES,
    state: Optional[str] = None,
    authorize_url: str = SPOTIFY_AUTHORIZE_URL,
) -> str:
    """Build the consent URL the profile owner opens in a browser."""
    params = {
        "client_id": client_id,
        "response_type": "code",
        "redirect_uri": redirect_uri,
        "scope": " ".join(scopes),
        "show_dialog": "true",
    }
    if state:
        params["state"] = state
    return f"{authorize_url}?{urlencode(params)}"


def _is_refresh_token_rejection(error: str, description: str) -> bool:
    text = description.lower()
    return (
        error == "invalid_grant"
        or "refresh token" in text
        or "refresh_token" in text
    )


class TokenExchange:
    """
    Exchanges credentials for access tokens.

    Access tokens are never cached or logged; each call hits the
    accounts service.
    """

    def __init__(
        self,
        credentials: SpotifyCredentials,
        http: httpx.AsyncClient,
        token_url: str = SPOTIFY_TOKEN_URL,
    ):
        self._credentials = credentials
        self._http = http
        self._token_url = token_url

    async def _post(self, form: dict[str, str]) -> dict[str, Any]:
        """POST a grant with HTTP Basic client authentication."""
        try:
            response = await self._http.post(
                self._token_url,
                data=form,
                auth=httpx.BasicAuth(
                    self._credentials.client_id, self._credentials.client_secret
                ),
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except httpx.HTTPError as e:
            raise TokenExchangeError(
                f"Failed to reach Spotify accounts service: {e}"
            ) from e

        if not response.is_success:
            try:
                body = response.json()
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {}
            error = str(body.get("error") or "")
            description = str(body.get("error_description") or error or "Unknown error")

            raise TokenExchangeError(
                f"Spotify token request failed: {response.status_code} "
                f"{response.reason_phrase}. {description}",
                status_code=response.status_code,
                description=description,
                error=error or None,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise TokenExchangeError(
                "Token response was not valid JSON",
                status_code=response.status_code,
            ) from e
        if not isinstance(data, dict) or not data.get("access_token"):
            raise TokenExchangeError(
                "Token response did not include an access token",
                status_code=response.status_code,
            )
        return data

    async def get_access_token(self) -> str:
        """
        Exchange the refresh token for a short-lived access token.

        Raises:
            RefreshTokenInvalidError: Refresh token expired, revoked or unknown
            TokenExchangeError: Any other failure
        """
        try:
            data = await self._post(
                {
                    "grant_type": "refresh_token",
                    "refresh_token": self._credentials.refresh_token,
                }
            )
        except TokenExchangeError as e:
            if e.status_code == 400 and _is_refresh_token_rejection(
                e.error or "", e.description or ""
            ):
                raise RefreshTokenInvalidError(e.description) from e
            raise

        # There is nowhere to persist a rotated refresh token
        if data.get("refresh_token"):
            logger.warning(
                "Spotify returned a new refresh token; update SPOTIFY_REFRESH_TOKEN "
                "if the current one stops working"
            )

        return data["access_token"]

    async def exchange_authorization_code(
        self, code: str, redirect_uri: str
    ) -> dict[str, Any]:
        """
        Exchange an authorization code for access and refresh tokens.

        Returns:
            The raw token response (access_token, refresh_token, scope, ...)
        """
        return await self._post(
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": redirect_uri,
            }
        )
