"""
Spotify module interface.

Platform adapters depend on IActivityService, not the concrete
implementation. This enables testing with fakes.
"""

from typing import Protocol, runtime_checkable

from .models import ActivityPayload


@runtime_checkable
class IActivityService(Protocol):
    """
    Interface for the listening-activity aggregator.

    This protocol defines the contract the spotify module exposes
    to the platform adapters.
    """

    @property
    def is_configured(self) -> bool:
        """Whether all Spotify credentials are present."""
        ...

    async def fetch_activity(self) -> ActivityPayload:
        """
        Fetch and normalize the owner's listening activity.

        Returns:
            AggregatedActivity, or NotConfiguredActivity when credentials
            are missing (no network call is made in that case)

        Raises:
            SpotifyError: If the token exchange or any primary call fails
        """
        ...
