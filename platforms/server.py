"""Same-origin server route adapter (mounted on the main FastAPI app)."""

from .base import PlatformAdapter


class ServerAdapter(PlatformAdapter):
    """Adapter for GET /api/spotify on the main application.

    Same-origin, so no CORS headers are added.
    """

    name = "server"

    @property
    def cache_max_age(self) -> int:
        return self._settings.server_cache_max_age
