"""
Listening activity aggregator.

Fetches the profile, top tracks, top artists and recently played tracks
concurrently, normalizes them, merges a best-effort currently-playing
probe and computes the total listening time.
"""

import asyncio
import logging
from typing import Any, Awaitable, Optional

import httpx

from shared.config import Settings

from .auth import SPOTIFY_TOKEN_URL, TokenExchange
from .client import SPOTIFY_API_URL, SpotifyClient
from .exceptions import CurrentlyPlayingProbeError, NotConfiguredError, SpotifyError
from .interfaces import IActivityService
from .models import (
    ActivityPayload,
    AggregatedActivity,
    CurrentlyPlayingPayload,
    NotConfiguredActivity,
    SpotifyCredentials,
    Track,
)
from .normalize import (
    map_artist,
    map_items,
    map_play_history,
    map_track,
    map_user,
    merge_now_playing,
    total_listening_time,
)

logger = logging.getLogger(__name__)

TOP_TRACKS_LIMIT = 6
TOP_ARTISTS_LIMIT = 4
RECENTLY_PLAYED_LIMIT = 14
TIME_RANGE = "short_term"


def credentials_from_settings(settings: Settings) -> SpotifyCredentials:
    """Read the Spotify credentials out of the process settings."""
    return SpotifyCredentials(
        client_id=settings.spotify_client_id,
        client_secret=settings.spotify_client_secret,
        refresh_token=settings.spotify_refresh_token,
    )


async def gather_all(*calls: Awaitable[Any]) -> list[Any]:
    """
    Await every call concurrently and return results in order.

    The first failure is re-raised after the remaining calls are cancelled,
    so a partial result never escapes.
    """
    tasks = [asyncio.ensure_future(call) for call in calls]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class ActivityService(IActivityService):
    """
    Implementation of the listening-activity aggregator.

    Each call to fetch_activity opens its own HTTP client, mints a fresh
    access token and closes the client before returning. Nothing is
    shared between invocations.
    """

    def __init__(
        self,
        credentials: SpotifyCredentials,
        *,
        token_url: str = SPOTIFY_TOKEN_URL,
        api_base_url: str = SPOTIFY_API_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the aggregator.

        Args:
            credentials: Client id, client secret and refresh token
            token_url: Accounts service token endpoint
            api_base_url: Web API base URL
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests inject MockTransport)
        """
        self._credentials = credentials
        self._token_url = token_url
        self._api_base_url = api_base_url
        self._timeout = timeout
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return self._credentials.is_complete

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    async def fetch_activity(self) -> ActivityPayload:
        if not self.is_configured:
            logger.info("Spotify credentials missing, returning not-configured payload")
            return NotConfiguredActivity(message=NotConfiguredError().message)

        async with self._http_client() as http:
            access_token = await TokenExchange(
                self._credentials, http, self._token_url
            ).get_access_token()
            client = SpotifyClient(http, self._api_base_url)

            user, top_tracks, top_artists, recently_played = await gather_all(
                client.call("/me", access_token),
                client.call(
                    "/me/top/tracks",
                    access_token,
                    params={"limit": TOP_TRACKS_LIMIT, "time_range": TIME_RANGE},
                ),
                client.call(
                    "/me/top/artists",
                    access_token,
                    params={"limit": TOP_ARTISTS_LIMIT, "time_range": TIME_RANGE},
                ),
                client.call(
                    "/me/player/recently-played",
                    access_token,
                    params={"limit": RECENTLY_PLAYED_LIMIT},
                ),
            )

            formatted_top_tracks = map_items(top_tracks, map_track)
            formatted_top_artists = map_items(top_artists, map_artist)
            formatted_recent_tracks = map_items(recently_played, map_play_history)

            currently_playing = await self._currently_playing(client, access_token)

        if currently_playing is not None:
            formatted_recent_tracks = merge_now_playing(
                formatted_recent_tracks, currently_playing
            )

        return AggregatedActivity(
            user=map_user(user),
            top_tracks=formatted_top_tracks,
            top_artists=formatted_top_artists,
            recent_tracks=formatted_recent_tracks,
            currently_playing=currently_playing,
            total_listening_time=total_listening_time(
                formatted_top_tracks, formatted_recent_tracks
            ),
        )

    async def _probe_currently_playing(
        self, client: SpotifyClient, access_token: str
    ) -> Optional[Track]:
        """
        Fetch and map the currently playing track.

        Raises:
            CurrentlyPlayingProbeError: On any failure of the call
        """
        try:
            raw = await client.call("/me/player/currently-playing", access_token)
            payload = (
                CurrentlyPlayingPayload.model_validate(raw)
                if isinstance(raw, dict)
                else None
            )
        except (SpotifyError, ValueError) as e:
            raise CurrentlyPlayingProbeError(e) from e

        if payload is None or not payload.is_playing or not payload.item:
            return None

        track = map_track(payload.item, progress=payload.progress_ms or 0)
        if track is None:
            return None
        return track.model_copy(update={"now_playing": True})

    async def _currently_playing(
        self, client: SpotifyClient, access_token: str
    ) -> Optional[Track]:
        """Best-effort probe: failures mean nothing is playing."""
        try:
            track = await self._probe_currently_playing(client, access_token)
        except CurrentlyPlayingProbeError as e:
            logger.info("%s", e.message)
            return None
        if track is None:
            logger.debug("Nothing currently playing")
        return track


def build_activity_service(settings: Settings) -> ActivityService:
    """Create an aggregator wired from settings."""
    return ActivityService(
        credentials_from_settings(settings),
        token_url=settings.spotify_token_url,
        api_base_url=settings.spotify_api_base_url,
        timeout=settings.spotify_timeout_seconds,
    )
