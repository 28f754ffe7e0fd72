"""
Spotify listening activity module.

Exchanges the owner's refresh token for an access token, aggregates
profile, top items, recently played and currently playing data, and
normalizes it into the shapes the profile site renders.

Public API:
- IActivityService: Interface for the aggregator
- AggregatedActivity, NotConfiguredActivity, Track, Artist, UserProfile
- resolve_activity: Platform-neutral response resolution
- Spotify exceptions: TokenExchangeError, RateLimitedError, etc.
"""

from .interfaces import IActivityService
from .models import (
    ActivityPayload,
    AggregatedActivity,
    Artist,
    ErrorPayload,
    NotConfiguredActivity,
    SpotifyCredentials,
    Track,
    UserProfile,
)
from .exceptions import (
    SpotifyError,
    NotConfiguredError,
    TokenExchangeError,
    RefreshTokenInvalidError,
    TokenExpiredError,
    MissingScopesError,
    RateLimitedError,
    UpstreamError,
    CurrentlyPlayingProbeError,
)
from .responses import ActivityResult, resolve_activity

__all__ = [
    # Interface
    "IActivityService",
    # Models
    "ActivityPayload",
    "AggregatedActivity",
    "Artist",
    "ErrorPayload",
    "NotConfiguredActivity",
    "SpotifyCredentials",
    "Track",
    "UserProfile",
    # Responses
    "ActivityResult",
    "resolve_activity",
    # Exceptions
    "SpotifyError",
    "NotConfiguredError",
    "TokenExchangeError",
    "RefreshTokenInvalidError",
    "TokenExpiredError",
    "MissingScopesError",
    "RateLimitedError",
    "UpstreamError",
    "CurrentlyPlayingProbeError",
]
