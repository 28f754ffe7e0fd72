"""
Spotify Web API client.

Issues bearer-authenticated GET requests and classifies failures.
No retries are attempted here; a failed call surfaces immediately.
"""

import logging
from typing import Any, Optional

import httpx

from .exceptions import (
    MissingScopesError,
    RateLimitedError,
    TokenExpiredError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

SPOTIFY_API_URL = "https://api.spotify.com/v1"


def _error_message(response: httpx.Response) -> str:
    """Extract error.message from a Web API error body, else the reason phrase."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
    return response.reason_phrase or "Unknown error"


class SpotifyClient:
    """
    Thin wrapper over the Spotify Web API.

    The httpx client is owned by the caller so that one connection pool
    serves every call of a single invocation and is closed afterwards.
    """

    def __init__(self, http: httpx.AsyncClient, base_url: str = SPOTIFY_API_URL):
        self._http = http
        self._base_url = base_url.rstrip("/")

    async def call(
        self,
        endpoint: str,
        access_token: str,
        params: Optional[dict[str, Any]] = None,
    ) -> Optional[Any]:
        """
        GET an endpoint and return its decoded JSON body.

        Args:
            endpoint: Path below the API base, e.g. "/me/top/tracks"
            access_token: Bearer token from the token exchange
            params: Optional query parameters

        Returns:
            Decoded JSON, or None for a 204 / empty body

        Raises:
            TokenExpiredError: 401
            MissingScopesError: 403
            RateLimitedError: 429, with the Retry-After value
            UpstreamError: any other failure, including transport errors
        """
        try:
            response = await self._http.get(
                f"{self._base_url}{endpoint}",
                params=params,
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Content-Type": "application/json",
                },
            )
        except httpx.HTTPError as e:
            raise UpstreamError(str(e) or e.__class__.__name__) from e

        status = response.status_code
        if status == 204:
            return None
        if response.is_success:
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as e:
                raise UpstreamError("Invalid JSON in response body", status) from e

        if status == 401:
            raise TokenExpiredError()
        if status == 403:
            raise MissingScopesError()
        if status == 429:
            raise RateLimitedError(response.headers.get("Retry-After"))

        message = _error_message(response)
        logger.debug("Spotify GET %s failed with %s: %s", endpoint, status, message)
        raise UpstreamError(message, status)
