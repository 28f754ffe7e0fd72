"""
Activity proxy API package.

Provides the FastAPI application serving the owner's Spotify activity.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
