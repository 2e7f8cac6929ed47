"""Abstract key-value store interface for persisted sales state.

Defines the StoreBackend Protocol that PersistenceAdapter depends on.
Concrete implementations live in ``ticketbooth.stores``.
"""

from __future__ import annotations

import re
from typing import Protocol, runtime_checkable

_SAFE_KEY_RE = re.compile(r"[A-Za-z0-9_.-]+")


def check_storage_key(key: str) -> str:
    """Return ``key`` if every store can hold it. Raises ValueError otherwise.

    Keys become file names and URL path segments, so only ASCII letters,
    digits, ``_``, ``.`` and ``-`` are allowed, and ``.``/``..`` are not.
    """
    if not isinstance(key, str) or not _SAFE_KEY_RE.fullmatch(key) or key in (".", ".."):
        raise ValueError(f"Unsafe storage key: {key!r}")
    return key


@runtime_checkable
class StoreBackend(Protocol):
    """Synchronous key-value store holding one serialized record per key.

    Any object implementing these methods can serve as the durable
    backing store for PersistenceAdapter. Failures surface as ``OSError``
    or a store-specific exception; the adapter wraps them.
    """

    def read(self, key: str) -> str | None: ...

    def write(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def close(self) -> None: ...
