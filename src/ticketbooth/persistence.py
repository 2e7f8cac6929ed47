"""Persistence adapter: ledger + summary <-> one key-value record.

Record layout (JSON)::

    {
      "v": 1,
      "sales": [{"id", "nombre", "categoria", "cantidad", "precio", "total", "fecha"}, ...],
      "resumen": {"vip": {"cantidad", "total"}, ..., "totalGeneral": {...}},
      "timestamp": "<ISO datetime>"
    }

Records written by the original browser page use ``ventas`` for the sale
list and carry no ``precio``; both are accepted on load.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import InvalidOperation
from typing import Iterable

from ticketbooth.constants import DEFAULT_STORAGE_KEY
from ticketbooth.errors import StorageError, UnknownCategoryError
from ticketbooth.ledger import Sale, Summary
from ticketbooth.store_backend import StoreBackend, check_storage_key
from ticketbooth.stores.http import StoreHttpError

logger = logging.getLogger(__name__)

_SCHEMA_VERSION = 1

# Exceptions a backend may raise that count as a storage failure.
_BACKEND_ERRORS = (OSError, StoreHttpError)


class MalformedRecordError(ValueError):
    """Stored record could not be decoded into sales and a summary."""


@dataclass(frozen=True)
class StoredState:
    """Decoded contents of a persisted record."""

    sales: tuple[Sale, ...]
    summary: Summary
    timestamp: str | None = None


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def encode_state(sales: Iterable[Sale], summary: Summary, timestamp: str) -> str:
    return json.dumps({
        "v": _SCHEMA_VERSION,
        "sales": [sale.to_dict() for sale in sales],
        "resumen": summary.to_dict(),
        "timestamp": timestamp,
    }, ensure_ascii=False, indent=2)


def decode_state(data: str) -> StoredState:
    """Decode a record. Raises MalformedRecordError on any structural problem."""
    try:
        obj = json.loads(data)
    except (ValueError, TypeError) as exc:
        raise MalformedRecordError(f"not JSON: {exc}") from exc
    if not isinstance(obj, dict):
        raise MalformedRecordError("record is not an object")

    # Migration: the original page stored the list under "ventas"
    raw_sales = obj.get("sales", obj.get("ventas", []))
    if not isinstance(raw_sales, list):
        raise MalformedRecordError("sales is not a list")

    sales: list[Sale] = []
    seen: set[int] = set()
    for index, raw in enumerate(raw_sales):
        if not isinstance(raw, dict):
            raise MalformedRecordError(f"sale #{index} is not an object")
        try:
            sale = Sale.from_dict(raw)
        except (KeyError, TypeError, ValueError, InvalidOperation, UnknownCategoryError) as exc:
            raise MalformedRecordError(f"sale #{index}: {exc}") from exc
        if sale.id in seen:
            raise MalformedRecordError(f"duplicate sale id {sale.id}")
        seen.add(sale.id)
        sales.append(sale)

    raw_summary = obj.get("resumen", {})
    if not isinstance(raw_summary, dict):
        raise MalformedRecordError("resumen is not an object")
    try:
        summary = Summary.from_dict(raw_summary)
    except (TypeError, ValueError, InvalidOperation) as exc:
        raise MalformedRecordError(f"resumen: {exc}") from exc

    timestamp = obj.get("timestamp")
    return StoredState(
        sales=tuple(sales),
        summary=summary,
        timestamp=str(timestamp) if timestamp is not None else None,
    )


# ---------------------------------------------------------------------------
# PersistenceAdapter
# ---------------------------------------------------------------------------


class PersistenceAdapter:
    """Saves and restores sales state under a single key.

    ``save()`` and ``clear()`` raise StorageError on backend failure.
    ``load()`` returns None when nothing is stored or the record is
    malformed (the corrupt record is deleted), and raises StorageError
    only when the backend itself cannot be read.

    Raises ValueError at construction if ``key`` is not a safe storage key.
    """

    def __init__(self, store: StoreBackend, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._store = store
        self._key = check_storage_key(key)

    @property
    def key(self) -> str:
        return self._key

    def save(self, sales: Iterable[Sale], summary: Summary) -> str:
        """Write the record. Returns the timestamp stamped on it."""
        timestamp = datetime.now(timezone.utc).isoformat()
        payload = encode_state(sales, summary, timestamp)
        try:
            self._store.write(self._key, payload)
        except _BACKEND_ERRORS as exc:
            logger.warning("Failed to save sales record %s: %s", self._key, exc)
            raise StorageError(f"Could not save sales record: {exc}") from exc
        return timestamp

    def load(self) -> StoredState | None:
        try:
            data = self._store.read(self._key)
        except _BACKEND_ERRORS as exc:
            logger.warning("Failed to read sales record %s: %s", self._key, exc)
            raise StorageError(f"Could not read sales record: {exc}") from exc

        if data is None:
            return None

        try:
            return decode_state(data)
        except MalformedRecordError as exc:
            logger.warning(
                "Sales record %s is corrupt (%s); discarding it.", self._key, exc,
            )
            self._discard_corrupt()
            return None

    def _discard_corrupt(self) -> None:
        try:
            self._store.delete(self._key)
        except _BACKEND_ERRORS as exc:
            logger.warning("Could not delete corrupt record %s: %s", self._key, exc)

    def clear(self) -> None:
        try:
            self._store.delete(self._key)
        except _BACKEND_ERRORS as exc:
            logger.warning("Failed to delete sales record %s: %s", self._key, exc)
            raise StorageError(f"Could not delete sales record: {exc}") from exc

    def close(self) -> None:
        """Release the backend (an HTTP connection pool, for instance)."""
        self._store.close()
