"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together the service
implementations. Routes depend on interfaces and resolve concrete
instances through the functions below, so tests can override them.
"""

from typing import TYPE_CHECKING

from shared.config import Settings, get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.spotify.interfaces import IActivityService


class ServiceContainer:
    """
    Container for all service instances.

    Services are created lazily on first access and cached as singletons
    within the container. Use reset() to clear them for testing.
    """

    def __init__(self) -> None:
        self._activity_service: "IActivityService | None" = None

    @property
    def activity(self) -> "IActivityService":
        """Get the activity service instance."""
        if self._activity_service is None:
            from modules.spotify.service import build_activity_service
            self._activity_service = build_activity_service(get_settings())
        return self._activity_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different settings.
        """
        self._activity_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    The next call to get_container() creates a fresh container.
    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_activity_service() -> "IActivityService":
    """FastAPI dependency for the activity service."""
    return get_container().activity


def get_app_settings() -> Settings:
    """FastAPI dependency for settings."""
    return get_settings()
