"""
Shared infrastructure for the activity proxy.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- exceptions: Base exception classes
- logging_config: Root logger setup

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .exceptions import (
    ProxyError,
    ExternalServiceError,
)
from .logging_config import configure_logging

__all__ = [
    "Settings",
    "get_settings",
    "ProxyError",
    "ExternalServiceError",
    "configure_logging",
]
