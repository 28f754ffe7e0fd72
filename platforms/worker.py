"""
Edge worker adapter.

A standalone ASGI application meant to run on a separate origin, so it
answers OPTIONS preflights and sets permissive CORS headers on every
response. It serves the same payload on any path.

Usage:
    uvicorn platforms.worker:app
"""

from typing import Optional

from fastapi import FastAPI, Response
from fastapi.responses import JSONResponse

from modules.spotify.interfaces import IActivityService
from modules.spotify.service import build_activity_service
from shared.config import Settings, get_settings

from .base import PlatformAdapter

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class WorkerAdapter(PlatformAdapter):
    """Adapter for the cross-origin worker deployment."""

    name = "worker"

    @property
    def cache_max_age(self) -> int:
        return self._settings.worker_cache_max_age

    def extra_headers(self) -> dict[str, str]:
        return dict(CORS_HEADERS)


def create_worker_app(
    service: Optional[IActivityService] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create the worker application.

    Args:
        service: Aggregator to use (built from settings when omitted)
        settings: Settings to use (process settings when omitted)

    Returns:
        Configured FastAPI instance
    """
    settings = settings or get_settings()
    adapter = WorkerAdapter(service or build_activity_service(settings), settings)

    worker = FastAPI(
        title=f"{settings.app_name} (worker)",
        version=settings.app_version,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @worker.options("/{path:path}")
    async def preflight(path: str) -> Response:
        return Response(status_code=204, headers=CORS_HEADERS)

    @worker.get("/{path:path}")
    async def activity(path: str) -> JSONResponse:
        return await adapter.to_json_response()

    return worker


app = create_worker_app()
