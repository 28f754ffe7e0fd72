"""
Base exception classes for the activity proxy.

Each module should define its own exceptions that inherit from these bases.
This enables consistent error handling across every hosting platform.
"""

from typing import Optional, Any


class ProxyError(Exception):
    """
    Base exception for all proxy errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}


class ExternalServiceError(ProxyError):
    """Error communicating with an external service."""

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
