"""
Pocketbook API package.

Provides the FastAPI application that enforces the session cookie on
incoming page requests.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
