"""Config stores: the capability interface and its implementations."""

from fresh_server.store.base import ConfigStore
from fresh_server.store.memory import MemoryConfigStore
from fresh_server.store.sql import SqlConfigStore

__all__ = [
    "ConfigStore",
    "MemoryConfigStore",
    "SqlConfigStore",
]
