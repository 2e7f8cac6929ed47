"""Concrete StoreBackend implementations."""

from __future__ import annotations

from ticketbooth.config import TicketboothConfig
from ticketbooth.store_backend import StoreBackend
from ticketbooth.stores.file import FileStore
from ticketbooth.stores.http import HttpStore, StoreHttpError
from ticketbooth.stores.memory import MemoryStore

__all__ = [
    "FileStore",
    "HttpStore",
    "MemoryStore",
    "StoreHttpError",
    "build_store",
]


def build_store(config: TicketboothConfig) -> StoreBackend:
    """Pick a store from config: remote URL, then directory, then memory."""
    if config.store_url:
        return HttpStore(
            base_url=config.store_url,
            api_key=config.store_api_key,
            namespace=config.store_namespace,
            timeout=config.store_timeout_secs,
        )
    if config.store_dir:
        return FileStore(config.store_dir)
    return MemoryStore()
