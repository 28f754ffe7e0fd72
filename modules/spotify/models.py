"""
Spotify module data models.

Two groups of models live here:
- Upstream payloads: the subset of the Spotify Web API objects the
  aggregator reads. Every field is optional so that missing data falls
  back to a default instead of failing validation.
- Normalized records: the stable shapes returned to the front-end. They
  serialize with camelCase aliases (nowPlaying, topTracks, ...).
"""

from typing import Any, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# =============================================================================
# Credentials
# =============================================================================


class SpotifyCredentials(BaseModel):
    """Client id, client secret and refresh token for the profile owner."""

    model_config = ConfigDict(frozen=True)

    client_id: str = ""
    client_secret: str = Field(default="", repr=False)
    refresh_token: str = Field(default="", repr=False)

    @property
    def is_complete(self) -> bool:
        """True only when all three values are present."""
        return all(
            value.strip()
            for value in (self.client_id, self.client_secret, self.refresh_token)
        )


# =============================================================================
# Upstream payloads
# =============================================================================


class _UpstreamModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class SpotifyImage(_UpstreamModel):
    url: Optional[str] = None
    height: Optional[int] = None
    width: Optional[int] = None


class SpotifyExternalUrls(_UpstreamModel):
    spotify: Optional[str] = None


class SpotifyFollowers(_UpstreamModel):
    total: Optional[int] = None


class SpotifyArtistPayload(_UpstreamModel):
    id: Optional[str] = None
    name: Optional[str] = None
    external_urls: Optional[SpotifyExternalUrls] = None
    images: Optional[list[Optional[SpotifyImage]]] = None


class SpotifyAlbumPayload(_UpstreamModel):
    id: Optional[str] = None
    name: Optional[str] = None
    images: Optional[list[Optional[SpotifyImage]]] = None


class SpotifyTrackPayload(_UpstreamModel):
    id: Optional[str] = None
    name: Optional[str] = None
    artists: Optional[list[Optional[SpotifyArtistPayload]]] = None
    album: Optional[SpotifyAlbumPayload] = None
    external_urls: Optional[SpotifyExternalUrls] = None
    duration_ms: Optional[int] = None


class SpotifyUserPayload(_UpstreamModel):
    id: Optional[str] = None
    display_name: Optional[str] = None
    external_urls: Optional[SpotifyExternalUrls] = None
    images: Optional[list[Optional[SpotifyImage]]] = None
    followers: Optional[SpotifyFollowers] = None


class PlayHistoryItem(_UpstreamModel):
    """One entry of /me/player/recently-played. The track is mapped later."""

    track: Any = None
    played_at: Optional[str] = None


class CurrentlyPlayingPayload(_UpstreamModel):
    is_playing: Optional[bool] = False
    progress_ms: Optional[int] = None
    item: Any = None


# =============================================================================
# Normalized records
# =============================================================================


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Dump with the camelCase field names consumers expect."""
        return self.model_dump(by_alias=True, mode="json")


class Track(_WireModel):
    """A normalized track."""

    name: str = "Unknown Track"
    artist: str = "Unknown Artist"
    image: str = ""
    url: str = ""
    date: int = Field(..., description="Played-at time (or now) in epoch milliseconds")
    now_playing: bool = False
    duration: int = Field(default=0, description="Track length in milliseconds")
    progress: int = Field(default=0, description="Playback position in milliseconds")


class Artist(_WireModel):
    """A normalized artist. Spotify exposes no play count, so plays is always 0."""

    name: str = "Unknown Artist"
    image: str = ""
    url: str = ""
    plays: int = 0


class UserProfile(_WireModel):
    """The profile owner. total_plays and registered are kept for shape stability."""

    name: str = "Unknown User"
    image: str = ""
    url: str = ""
    total_plays: int = 0
    registered: int = 0
    followers: int = 0
    id: Optional[str] = None


class AggregatedActivity(_WireModel):
    """Successful response payload."""

    user: UserProfile
    top_tracks: list[Track] = Field(default_factory=list)
    top_artists: list[Artist] = Field(default_factory=list)
    recent_tracks: list[Track] = Field(default_factory=list)
    currently_playing: Optional[Track] = None
    total_listening_time: int = Field(
        default=0, description="Sum of durations across top and recent tracks (ms)"
    )


class NotConfiguredActivity(_WireModel):
    """Success-shaped payload returned when credentials are unusable."""

    error: Literal[False] = False
    not_configured: Literal[True] = True
    message: str
    user: None = None
    top_tracks: list[Track] = Field(default_factory=list)
    top_artists: list[Artist] = Field(default_factory=list)
    recent_tracks: list[Track] = Field(default_factory=list)
    currently_playing: None = None


class ErrorPayload(_WireModel):
    """Payload for a hard failure."""

    error: Literal[True] = True
    code: str
    message: str
    details: Optional[str] = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


ActivityPayload = Union[AggregatedActivity, NotConfiguredActivity]
