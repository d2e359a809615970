"""Mini README: Interfaces exposing Care101 services.

Exports the FastAPI application factory behind the doctor portal and the
mobile app.
"""

from .web_app import create_application

__all__ = ["create_application"]
