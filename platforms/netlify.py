"""
Netlify function adapter.

Netlify (like AWS Lambda) invokes handler(event, context) and expects a
dict with statusCode, headers and a string body. Deploy with this module's
handler as the function entry point, routed at PATH.
"""

import asyncio
import json
import logging
from typing import Any, Optional

from modules.spotify.interfaces import IActivityService
from modules.spotify.service import build_activity_service
from shared.config import Settings, get_settings
from shared.logging_config import configure_logging

from .base import PlatformAdapter

logger = logging.getLogger(__name__)

PATH = "/api/spotify"


class NetlifyAdapter(PlatformAdapter):
    """Adapter producing the Lambda-style response envelope."""

    name = "netlify"

    @property
    def cache_max_age(self) -> int:
        return self._settings.netlify_cache_max_age

    async def handle(self, event: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """Render the envelope for one invocation. The event is not inspected."""
        response = await self.respond()
        return {
            "statusCode": response.status_code,
            "headers": response.headers,
            "body": json.dumps(response.body),
        }


def handler(
    event: dict[str, Any],
    context: Any = None,
    service: Optional[IActivityService] = None,
    settings: Optional[Settings] = None,
) -> dict[str, Any]:
    """Function entry point. A fresh aggregator is built for every invocation."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    service = service or build_activity_service(settings)

    logger.debug(
        "Netlify invocation %s",
        getattr(context, "aws_request_id", None) or "local",
    )
    return asyncio.run(NetlifyAdapter(service, settings).handle(event))
