"""Pydantic models for config entries and API request bodies."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from fresh_server.codec import encode_metadata
from fresh_server.errors import EncodeError


class ConfigEntry(BaseModel):
    """A stored configuration entry as returned by every store.

    ``created`` orders listings but is never serialized to clients.
    """

    id: int
    name: str
    metadata: dict[str, Any]
    created: datetime | None = Field(default=None, exclude=True)


class ConfigEntryIn(BaseModel):
    """Request body for POST/PUT/PATCH /configs.

    ``id`` is accepted for symmetry with responses but never used; only
    ``name`` and ``metadata`` reach the store.
    """

    id: int | None = None
    name: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("metadata", mode="before")
    @classmethod
    def null_metadata_is_empty(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("metadata")
    @classmethod
    def metadata_is_storable(cls, v: dict[str, Any]) -> dict[str, Any]:
        # NaN and Infinity parse but have no stored form
        try:
            encode_metadata(v)
        except EncodeError as e:
            raise ValueError(str(e)) from e
        return v
