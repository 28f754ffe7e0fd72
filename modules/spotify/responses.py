"""
Platform-neutral response resolution.

Every hosting platform calls resolve_activity() and only decides how to
wrap the resulting status code and JSON body in its own envelope.
"""

import logging
import traceback
from typing import Any

from pydantic import BaseModel, Field

from .exceptions import NotConfiguredError, RefreshTokenInvalidError, SpotifyError
from .interfaces import IActivityService
from .models import AggregatedActivity, ErrorPayload, NotConfiguredActivity

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Failed to fetch Spotify data"


class ActivityResult(BaseModel):
    """Status code and JSON body for one request."""

    status_code: int = 200
    body: dict[str, Any] = Field(default_factory=dict)
    cacheable: bool = Field(
        default=False, description="True only for a successful aggregated payload"
    )


def _error_result(exc: Exception, include_traceback: bool) -> ActivityResult:
    if isinstance(exc, SpotifyError):
        code, message = exc.code, exc.message
    else:
        code, message = "INTERNAL_ERROR", str(exc) or DEFAULT_ERROR_MESSAGE

    details = None
    if include_traceback:
        details = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    payload = ErrorPayload(code=code, message=message, details=details)
    return ActivityResult(status_code=500, body=payload.to_wire())


async def resolve_activity(
    service: IActivityService, include_traceback: bool = False
) -> ActivityResult:
    """
    Run the aggregator and map its outcome to a status code and body.

    Args:
        service: Activity aggregator
        include_traceback: Put a formatted stack trace in error details
                           (development only)

    Returns:
        200 with the aggregated payload, 200 with the not-configured shape
        (missing credentials or rejected refresh token), or 500 with an
        error payload
    """
    if not service.is_configured:
        payload = NotConfiguredActivity(message=NotConfiguredError().message)
        return ActivityResult(body=payload.to_wire())

    try:
        activity = await service.fetch_activity()
    except RefreshTokenInvalidError as e:
        logger.warning("Spotify refresh token rejected: %s", e.description)
        payload = NotConfiguredActivity(message=e.message)
        return ActivityResult(body=payload.to_wire())
    except Exception as e:
        logger.exception("Spotify activity request failed")
        return _error_result(e, include_traceback)

    return ActivityResult(
        body=activity.to_wire(),
        cacheable=isinstance(activity, AggregatedActivity),
    )
