"""Directory-backed store: one JSON file per key.

Writes land in a temp file in the same directory and are moved into
place with ``os.replace`` so a crash never leaves a half-written record.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from ticketbooth.store_backend import check_storage_key

logger = logging.getLogger(__name__)


class FileStore:
    """StoreBackend writing ``<directory>/<key>.json``."""

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path(self, key: str) -> Path:
        return self._directory / f"{check_storage_key(key)}.json"

    def read(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def write(self, key: str, value: str) -> None:
        path = self._path(key)
        self._directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._directory, prefix=f".{key}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
        logger.debug("Wrote %d bytes to %s.", len(value), path)

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            pass

    def close(self) -> None:
        """Nothing is held open between calls."""
