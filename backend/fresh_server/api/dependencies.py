"""FastAPI dependencies shared by the route modules."""

from __future__ import annotations

from fastapi import Request

from fresh_server.store import ConfigStore


def get_store(request: Request) -> ConfigStore:
    """Return the config store attached to the running app."""
    return request.app.state.store


def get_release(request: Request) -> str:
    """Return the build tag the app was started with."""
    return request.app.state.release or "dev"
