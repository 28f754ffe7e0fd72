"""
Normalization of Spotify Web API payloads.

Raw payloads are validated into the permissive upstream models first.
A record that is null or cannot be validated maps to None and is dropped
by the caller; missing fields inside a valid record fall back to defaults.
"""

import logging
import time
from typing import Any, Optional, Sequence

from dateutil.parser import isoparse
from pydantic import ValidationError

from .models import (
    Artist,
    PlayHistoryItem,
    SpotifyArtistPayload,
    SpotifyImage,
    SpotifyTrackPayload,
    SpotifyUserPayload,
    Track,
    UserProfile,
)

logger = logging.getLogger(__name__)

# Image heights tried in order before falling back to the first image
PREFERRED_IMAGE_HEIGHTS = (300, 640)


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


def select_image(images: Optional[Sequence[Optional[SpotifyImage]]]) -> str:
    """
    Pick the image URL to display.

    Prefers height 300, then height 640, then the first image. A null or
    URL-less first image yields an empty string.
    """
    images = list(images or ())
    candidates = [image for image in images if image is not None]

    for height in PREFERRED_IMAGE_HEIGHTS:
        match = next((image for image in candidates if image.height == height), None)
        if match is not None and match.url:
            return match.url

    first = images[0] if images else None
    if first is not None and first.url:
        return first.url
    return ""


def _external_url(payload: Any) -> str:
    urls = getattr(payload, "external_urls", None)
    if urls is None:
        return ""
    return urls.spotify or ""


def parse_played_at(played_at: Optional[str]) -> Optional[int]:
    """Convert an ISO-8601 timestamp to epoch milliseconds, or None."""
    if not played_at:
        return None
    try:
        return int(isoparse(played_at).timestamp() * 1000)
    except (ValueError, OverflowError):
        logger.debug("Unparseable played_at value: %r", played_at)
        return None


def map_track(
    raw: Any,
    played_at: Optional[str] = None,
    progress: Optional[int] = None,
) -> Optional[Track]:
    """
    Map a raw track object onto a Track.

    Args:
        raw: Track object from the Web API (may be None or malformed)
        played_at: ISO-8601 play time for recently-played entries
        progress: Playback position for the currently playing track

    Returns:
        Track, or None when the record cannot be mapped
    """
    if not isinstance(raw, dict):
        return None
    try:
        track = SpotifyTrackPayload.model_validate(raw)
    except ValidationError as e:
        logger.debug("Dropping malformed track: %s", e.error_count())
        return None

    artist_names = ", ".join(
        artist.name or "" for artist in track.artists or () if artist is not None
    )
    album_images = track.album.images if track.album else None
    date = parse_played_at(played_at)

    return Track(
        name=track.name or "Unknown Track",
        artist=artist_names or "Unknown Artist",
        image=select_image(album_images),
        url=_external_url(track),
        date=date if date is not None else now_ms(),
        now_playing=False,
        duration=track.duration_ms or 0,
        progress=progress or 0,
    )


def map_artist(raw: Any) -> Optional[Artist]:
    """Map a raw artist object onto an Artist, or None when unmappable."""
    if not isinstance(raw, dict):
        return None
    try:
        artist = SpotifyArtistPayload.model_validate(raw)
    except ValidationError as e:
        logger.debug("Dropping malformed artist: %s", e.error_count())
        return None

    return Artist(
        name=artist.name or "Unknown Artist",
        image=select_image(artist.images),
        url=_external_url(artist),
        plays=0,
    )


def map_user(raw: Any) -> UserProfile:
    """
    Map the /me payload onto a UserProfile.

    The display name falls back to the account id, then "Unknown User".
    Only the first avatar image is used.
    """
    user = SpotifyUserPayload()
    if isinstance(raw, dict):
        try:
            user = SpotifyUserPayload.model_validate(raw)
        except ValidationError as e:
            logger.warning("Malformed user profile, using defaults: %s", e.error_count())

    first_image = next(iter(user.images or ()), None)

    return UserProfile(
        name=user.display_name or user.id or "Unknown User",
        image=(first_image.url or "") if first_image is not None else "",
        url=_external_url(user),
        total_plays=0,
        registered=0,
        followers=(user.followers.total or 0) if user.followers else 0,
        id=user.id,
    )


def map_play_history(raw: Any) -> Optional[Track]:
    """Map one recently-played item (track + played_at) onto a Track."""
    if not isinstance(raw, dict):
        return None
    try:
        item = PlayHistoryItem.model_validate(raw)
    except ValidationError:
        return None
    return map_track(item.track, played_at=item.played_at)


def map_items(payload: Any, mapper) -> list:
    """Apply mapper to payload["items"], dropping records that map to None."""
    items = payload.get("items") if isinstance(payload, dict) else None
    if not isinstance(items, list):
        return []
    return [record for record in map(mapper, items) if record is not None]


def merge_now_playing(recent_tracks: list[Track], current: Track) -> list[Track]:
    """
    Prepend the currently playing track unless it is already listed.

    Duplicates are detected by exact (name, artist) equality. An existing
    entry is left untouched; its now_playing flag is not set.
    """
    exists = any(
        track.name == current.name and track.artist == current.artist
        for track in recent_tracks
    )
    if exists:
        return list(recent_tracks)
    return [current, *recent_tracks]


def total_listening_time(top_tracks: list[Track], recent_tracks: list[Track]) -> int:
    """
    Sum durations across top tracks followed by recent tracks.

    A track present in both lists is counted twice; consumers rely on this.
    """
    return sum(track.duration for track in [*top_tracks, *recent_tracks])
