"""Service routes: banner, health check and the search placeholder."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from fresh_server.api.dependencies import get_release, get_store
from fresh_server.store import ConfigStore

router = APIRouter(tags=["system"])


@router.get("/", response_class=PlainTextResponse)
async def banner(release: str = Depends(get_release)) -> str:
    """Service name and build tag."""
    return f"fresh-server - build {release}"


@router.get("/healthz")
async def health(store: ConfigStore = Depends(get_store)) -> PlainTextResponse:
    """Report database connectivity."""
    if not await store.is_connected():
        return PlainTextResponse("notok", status_code=500)
    return PlainTextResponse("ok")


@router.get("/search", response_class=PlainTextResponse)
async def search() -> str:
    """Placeholder, search is not implemented."""
    return "Search GET!"
