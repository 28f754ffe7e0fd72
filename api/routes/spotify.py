"""
Spotify activity endpoint.

The same-origin server route variant of the activity proxy.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import get_activity_service, get_app_settings
from modules.spotify.interfaces import IActivityService
from platforms.server import ServerAdapter
from shared.config import Settings

router = APIRouter()


@router.get("/spotify")
async def get_spotify_activity(
    service: IActivityService = Depends(get_activity_service),
    settings: Settings = Depends(get_app_settings),
) -> JSONResponse:
    """
    Get the owner's listening activity.

    Always returns JSON:
    - 200 with user, topTracks, topArtists, recentTracks, currentlyPlaying
      and totalListeningTime on success
    - 200 with notConfigured: true when credentials are missing or the
      refresh token was rejected
    - 500 with error: true and a message on any other failure
    """
    return await ServerAdapter(service, settings).to_json_response()
