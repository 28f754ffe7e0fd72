"""
Spotify module exceptions.

These exceptions are raised by the token exchange, the Web API client and
the aggregator. The response layer maps them onto the JSON payloads every
hosting platform returns.
"""

from typing import Optional

from shared.exceptions import ExternalServiceError

SPOTIFY_SERVICE = "spotify"


class SpotifyError(ExternalServiceError):
    """Base exception for Spotify-related errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message, service=SPOTIFY_SERVICE, code=code, details=details)


class NotConfiguredError(SpotifyError):
    """Raised when one or more Spotify credentials are missing."""

    def __init__(
        self,
        message: str = (
            "Spotify is not configured. Set SPOTIFY_CLIENT_ID, "
            "SPOTIFY_CLIENT_SECRET and SPOTIFY_REFRESH_TOKEN."
        ),
    ):
        super().__init__(message, code="NOT_CONFIGURED")


class TokenExchangeError(SpotifyError):
    """Raised when the accounts service rejects a token request."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        description: Optional[str] = None,
        code: str = "TOKEN_EXCHANGE_FAILED",
        error: Optional[str] = None,
    ):
        super().__init__(
            message,
            code=code,
            details={"status_code": status_code, "description": description},
        )
        self.status_code = status_code
        self.description = description
        self.error = error


class RefreshTokenInvalidError(TokenExchangeError):
    """Raised when the refresh token is expired, revoked or unknown."""

    def __init__(self, description: Optional[str] = None):
        super().__init__(
            "Spotify refresh token is invalid or expired. "
            "Run get_refresh_token.py to obtain a new one.",
            status_code=400,
            description=description,
            code="REFRESH_TOKEN_INVALID",
        )


class TokenExpiredError(SpotifyError):
    """Raised on a 401 from the Web API."""

    def __init__(self, message: str = "Access token expired or invalid"):
        super().__init__(message, code="TOKEN_EXPIRED")


class MissingScopesError(SpotifyError):
    """Raised on a 403 from the Web API."""

    def __init__(
        self,
        message: str = "Missing required scopes. Please re-authorize with all required scopes.",
    ):
        super().__init__(message, code="MISSING_SCOPES")


class RateLimitedError(SpotifyError):
    """Raised on a 429 from the Web API."""

    def __init__(self, retry_after: Optional[str] = None):
        self.retry_after = retry_after or "unknown"
        super().__init__(
            f"Rate limit exceeded. Retry after {self.retry_after} seconds.",
            code="RATE_LIMITED",
            details={"retry_after": self.retry_after},
        )


class UpstreamError(SpotifyError):
    """Raised for any other failed Web API call.

    status_code is None when the request never got a response.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        if status_code is None:
            text = f"Spotify API unreachable: {message}"
        else:
            text = f"Spotify API error ({status_code}): {message}"
        super().__init__(
            text,
            code="UPSTREAM_ERROR",
            details={"status_code": status_code},
        )
        self.status_code = status_code


class CurrentlyPlayingProbeError(SpotifyError):
    """Raised inside the currently-playing probe. Never leaves the aggregator."""

    def __init__(self, cause: Exception):
        super().__init__(
            f"Currently playing probe failed: {cause}",
            code="PROBE_FAILED",
        )
        self.cause = cause
