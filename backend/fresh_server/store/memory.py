"""In-process config store used as a test double for the SQL engine."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fresh_server.codec import Metadata, decode_metadata, encode_metadata
from fresh_server.errors import NotFoundError
from fresh_server.schemas import ConfigEntry

logger = logging.getLogger(__name__)


def _stored(metadata: Metadata) -> Metadata:
    return decode_metadata(encode_metadata(metadata))


class MemoryConfigStore:
    """Ordered list of entries with the same semantics as :class:`SqlConfigStore`.

    Entries are kept in insertion order, which is also creation order. Metadata
    passes through the codec on the way in, exactly as it would on its way to a
    database column, so unserializable documents fail the same way and callers
    never share state with the store.
    """

    def __init__(self, *, connected: bool = True) -> None:
        self.connected = connected
        self._entries: list[ConfigEntry] = []
        self._next_id = 1

    async def insert(self, name: str, metadata: Metadata) -> int:
        entry = ConfigEntry(
            id=self._next_id,
            name=name,
            metadata=_stored(metadata),
            created=datetime.now(timezone.utc).replace(tzinfo=None),
        )
        self._next_id += 1
        self._entries.append(entry)
        logger.debug("Inserted config %r with id %d", name, entry.id)
        return entry.id

    async def get_by_id(self, entry_id: int) -> ConfigEntry:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry.model_copy(deep=True)
        raise NotFoundError(f"config with id {entry_id} not found")

    async def get_by_name(self, name: str) -> ConfigEntry:
        for entry in self._entries:
            if entry.name == name:
                return entry.model_copy(deep=True)
        raise NotFoundError(f"config {name!r} not found")

    async def list_all(self) -> list[ConfigEntry]:
        return [entry.model_copy(deep=True) for entry in self._entries]

    async def update_by_name(self, name: str, metadata: Metadata) -> None:
        stored = _stored(metadata)
        for entry in self._entries:
            if entry.name == name:
                entry.metadata = stored

    async def delete_by_name(self, name: str) -> None:
        self._entries = [e for e in self._entries if e.name != name]

    async def is_connected(self) -> bool:
        return self.connected

    async def close(self) -> None:
        self.connected = False
