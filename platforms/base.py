"""Base classes and models for hosting platform adapters."""

import logging
from abc import ABC, abstractmethod
from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from modules.spotify.interfaces import IActivityService
from modules.spotify.responses import resolve_activity
from shared.config import Settings

logger = logging.getLogger(__name__)


class PlatformResponse(BaseModel):
    """Status, headers and JSON body ready to be wrapped by a platform.

    Attributes:
        status_code: HTTP status code
        headers: Response headers
        body: JSON-serializable payload
    """

    status_code: int
    headers: dict[str, str] = Field(default_factory=dict)
    body: dict[str, Any] = Field(default_factory=dict)


class PlatformAdapter(ABC):
    """Abstract base class for hosting platform adapters.

    All platforms (server route, Netlify function, worker) return the same
    JSON payload. Subclasses only pick a cache lifetime, add any extra
    headers and render the platform's own envelope.
    """

    name: str = ""

    def __init__(self, service: IActivityService, settings: Settings):
        self._service = service
        self._settings = settings

    @property
    @abstractmethod
    def cache_max_age(self) -> int:
        """Seconds intermediaries may cache a successful payload."""
        pass

    def extra_headers(self) -> dict[str, str]:
        """Headers added to every response from this platform."""
        return {}

    async def respond(self) -> PlatformResponse:
        """Resolve the activity payload and attach platform headers."""
        result = await resolve_activity(
            self._service, include_traceback=self._settings.is_development
        )

        headers = {"Content-Type": "application/json"}
        headers.update(self.extra_headers())
        if result.cacheable:
            headers["Cache-Control"] = f"public, max-age={self.cache_max_age}"

        logger.debug(
            "%s adapter answering %s (cacheable=%s)",
            self.name,
            result.status_code,
            result.cacheable,
        )

        return PlatformResponse(
            status_code=result.status_code,
            headers=headers,
            body=result.body,
        )

    async def to_json_response(self) -> JSONResponse:
        """Render as an ASGI response for FastAPI-hosted platforms."""
        response = await self.respond()
        return JSONResponse(
            content=response.body,
            status_code=response.status_code,
            headers=response.headers,
        )
