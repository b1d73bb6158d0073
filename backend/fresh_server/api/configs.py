"""Config entry routes.

Maps HTTP verbs onto :class:`ConfigStore` calls and store results/errors onto
status codes. Only "not found" is recovered locally (404); every other store
failure becomes a 500 carrying the error text.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError as PydanticValidationError

from fresh_server.api.dependencies import get_store
from fresh_server.errors import FreshServerError, NotFoundError, ValidationError
from fresh_server.schemas import ConfigEntryIn
from fresh_server.store import ConfigStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/configs", tags=["configs"])

NOT_FOUND_TEXT = "configuration item was not found"
CREATED_TEXT = "new configuration item has successfully been added"
UPDATED_TEXT = "new configuration item has successfully been updated"
DELETED_TEXT = "configuration item has successfully been erased"


def require_name(name: str | None) -> str:
    """Return *name*, raising :class:`ValidationError` when it is empty."""
    if not name:
        raise ValidationError("configuration name is required")
    return name


async def decode_entry(request: Request) -> ConfigEntryIn:
    """Decode the request body into a candidate entry.

    Raises pydantic's ``ValidationError`` for malformed JSON or wrong field
    types.
    """
    return ConfigEntryIn.model_validate_json(await request.body())


def _store_failure(e: FreshServerError) -> PlainTextResponse:
    return PlainTextResponse(str(e), status_code=500)


@router.get("")
async def list_configs(store: ConfigStore = Depends(get_store)):
    """Return every entry, oldest first."""
    try:
        entries = await store.list_all()
    except FreshServerError as e:
        return _store_failure(e)
    return JSONResponse([entry.model_dump(mode="json") for entry in entries])


@router.post("")
async def create_config(request: Request, store: ConfigStore = Depends(get_store)):
    """Create an entry from ``name`` and ``metadata``; any ``id`` is ignored."""
    try:
        entry = await decode_entry(request)
    except PydanticValidationError as e:
        return PlainTextResponse(str(e), status_code=400)

    try:
        entry_id = await store.insert(entry.name, entry.metadata)
    except FreshServerError as e:
        return _store_failure(e)

    logger.info("Added config %r (id %d)", entry.name, entry_id)
    return PlainTextResponse(CREATED_TEXT)


@router.get("/{name}")
async def get_config(name: str, store: ConfigStore = Depends(get_store)):
    """Return the entry called *name*."""
    try:
        entry = await store.get_by_name(require_name(name))
    except (ValidationError, NotFoundError):
        return PlainTextResponse(NOT_FOUND_TEXT, status_code=404)
    except FreshServerError as e:
        return _store_failure(e)
    return JSONResponse(entry.model_dump(mode="json"))


@router.api_route("/{name}", methods=["PUT", "PATCH"])
async def update_config(
    name: str, request: Request, store: ConfigStore = Depends(get_store)
):
    """Replace the metadata of every entry called *name*."""
    try:
        entry = await decode_entry(request)
    except PydanticValidationError as e:
        return PlainTextResponse(str(e), status_code=400)

    try:
        await store.update_by_name(require_name(name), entry.metadata)
    except ValidationError:
        return PlainTextResponse(NOT_FOUND_TEXT, status_code=404)
    except FreshServerError as e:
        return _store_failure(e)

    logger.info("Updated config %r", name)
    return PlainTextResponse(UPDATED_TEXT)


@router.delete("/{name}")
async def delete_config(name: str, store: ConfigStore = Depends(get_store)):
    """Remove every entry called *name*."""
    try:
        await store.delete_by_name(require_name(name))
    except ValidationError:
        return PlainTextResponse(NOT_FOUND_TEXT, status_code=404)
    except FreshServerError as e:
        return _store_failure(e)

    logger.info("Erased config %r", name)
    return PlainTextResponse(DELETED_TEXT)
