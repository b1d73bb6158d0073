"""Capability interface shared by every config store."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from fresh_server.codec import Metadata
from fresh_server.schemas import ConfigEntry


@runtime_checkable
class ConfigStore(Protocol):
    """Persistence contract for config entries.

    Implementations must agree on every observable behaviour:

    * ``get_by_id``/``get_by_name`` raise ``NotFoundError`` when nothing
      matches; ``list_all`` returns an empty list instead.
    * names are not unique; ``get_by_name`` returns the earliest-created
      match, ``update_by_name``/``delete_by_name`` touch every match.
    * ``update_by_name``/``delete_by_name`` are no-ops for unknown names.
    * ``list_all`` is ordered by creation time, oldest first.
    * ``is_connected`` never raises.
    """

    async def insert(self, name: str, metadata: Metadata) -> int: ...

    async def get_by_id(self, entry_id: int) -> ConfigEntry: ...

    async def get_by_name(self, name: str) -> ConfigEntry: ...

    async def list_all(self) -> list[ConfigEntry]: ...

    async def update_by_name(self, name: str, metadata: Metadata) -> None: ...

    async def delete_by_name(self, name: str) -> None: ...

    async def is_connected(self) -> bool: ...

    async def close(self) -> None: ...
