"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules:
payload factories for Spotify Web API objects and a fake Spotify backend
served through httpx.MockTransport, so no test touches the network.
"""

import json
from typing import Any, Optional

import httpx
import pytest

from api.dependencies import reset_container
from modules.spotify.models import SpotifyCredentials
from modules.spotify.service import ActivityService
from shared.config import Settings, get_settings

TOKEN_PATH = "/api/token"
API_PREFIX = "/v1"


def make_image(height: int, url: Optional[str] = None) -> dict[str, Any]:
    """Create an image object of the given height."""
    return {
        "url": url or f"https://i.scdn.co/image/{height}",
        "height": height,
        "width": height,
    }


def make_track(
    name: Optional[str] = "Song",
    artists: tuple[str, ...] = ("Artist",),
    duration_ms: Optional[int] = 200000,
    images: Optional[list[dict]] = None,
    url: str = "https://open.spotify.com/track/1",
) -> dict[str, Any]:
    """Create a track object as returned by the Web API."""
    return {
        "id": "track-1",
        "name": name,
        "artists": [
            {"id": f"artist-{i}", "name": artist, "external_urls": {"spotify": ""}}
            for i, artist in enumerate(artists)
        ],
        "album": {
            "id": "album-1",
            "name": "Album",
            "images": images if images is not None else [make_image(640), make_image(300)],
        },
        "external_urls": {"spotify": url},
        "duration_ms": duration_ms,
    }


def make_artist(
    name: Optional[str] = "Artist",
    images: Optional[list[dict]] = None,
) -> dict[str, Any]:
    """Create an artist object as returned by the Web API."""
    return {
        "id": "artist-1",
        "name": name,
        "external_urls": {"spotify": "https://open.spotify.com/artist/1"},
        "images": images if images is not None else [make_image(300)],
    }


def make_play(track: dict, played_at: str = "2026-01-15T12:00:00.000Z") -> dict[str, Any]:
    """Create a recently-played item."""
    return {"track": track, "played_at": played_at}


class FakeSpotify:
    """
    Fake accounts service and Web API.

    Routes are keyed by (method, path); unregistered routes answer 404.
    Every request is recorded for assertions.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], tuple[int, Any, dict[str, str]]] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        status: int = 200,
        body: Any = None,
        headers: Optional[dict[str, str]] = None,
    ) -> "FakeSpotify":
        self.routes[(method.upper(), path)] = (status, body, headers or {})
        return self

    def token(self, status: int = 200, body: Any = None) -> "FakeSpotify":
        if body is None:
            body = {"access_token": "tok1", "token_type": "Bearer", "expires_in": 3600}
        return self.add("POST", TOKEN_PATH, status, body)

    def api(self, path: str, status: int = 200, body: Any = None, headers=None) -> "FakeSpotify":
        return self.add("GET", f"{API_PREFIX}{path}", status, body, headers)

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": {"status": 404, "message": "Not found"}})
        status, body, headers = route
        if body is None:
            return httpx.Response(status, headers=headers)
        return httpx.Response(
            status,
            content=json.dumps(body).encode(),
            headers={"Content-Type": "application/json", **headers},
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached settings and the service container around each test."""
    get_settings.cache_clear()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_container()


@pytest.fixture
def credentials() -> SpotifyCredentials:
    """Complete fixture credentials."""
    return SpotifyCredentials(
        client_id="client-id",
        client_secret="client-secret",
        refresh_token="refresh-token",
    )


@pytest.fixture
def test_settings() -> Settings:
    """Settings with fixture credentials, independent of the environment."""
    return Settings(
        _env_file=None,
        spotify_client_id="client-id",
        spotify_client_secret="client-secret",
        spotify_refresh_token="refresh-token",
    )


@pytest.fixture
def fake_spotify() -> FakeSpotify:
    """A fake Spotify answering every call of a quiet happy path."""
    fake = FakeSpotify()
    fake.token()
    fake.api("/me", body={
        "id": "u1",
        "display_name": "Alice",
        "followers": {"total": 42},
        "images": [{"url": "https://i.scdn.co/image/avatar", "height": 64, "width": 64}],
        "external_urls": {"spotify": "https://open.spotify.com/user/u1"},
    })
    fake.api("/me/top/tracks", body={"items": [make_track("Top Song", duration_ms=200000)]})
    fake.api("/me/top/artists", body={"items": [make_artist("Top Artist")]})
    fake.api(
        "/me/player/recently-played",
        body={"items": [make_play(make_track("Recent Song", duration_ms=180000))]},
    )
    fake.api("/me/player/currently-playing", status=204)
    return fake


@pytest.fixture
def activity_service(credentials, fake_spotify) -> ActivityService:
    """An aggregator wired to the fake Spotify."""
    return ActivityService(credentials, transport=fake_spotify.transport)
