"""
Key-value persistence ports.

Values are raw bytes; callers choose the encoding. Any read or write
failure surfaces as PersistenceUnavailable.
"""

import logging
import os
import re
from typing import Dict, Optional

from .errors import PersistenceUnavailable

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore:
    """Interface: ``get(key) -> bytes | None`` and ``set(key, value)``."""

    def get(self, key: str) -> Optional[bytes]:
        raise NotImplementedError

    def set(self, key: str, value: bytes) -> None:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    """Keeps everything in a dict. Used in tests and as a fallback."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self.data: Dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self.data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self.data[key] = bytes(value)


class JsonFileStore(KeyValueStore):
    """One ``<key>.json`` file per key inside a directory."""

    def __init__(self, directory: str):
        self.directory = directory

    def _path(self, key: str) -> str:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"invalid storage key: {key!r}")
        return os.path.join(self.directory, f"{key}.json")

    def get(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, 'rb') as f:
                return f.read()
        except OSError as exc:
            raise PersistenceUnavailable(f"cannot read {path}: {exc}") from exc

    def set(self, key: str, value: bytes) -> None:
        path = self._path(key)
        tmp_path = path + ".tmp"
        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(tmp_path, 'wb') as f:
                f.write(value)
            os.replace(tmp_path, path)
        except OSError as exc:
            try:
                os.remove(tmp_path)
            except OSError:
                logger.debug("no temp file to clean up at %s", tmp_path)
            raise PersistenceUnavailable(f"cannot write {path}: {exc}") from exc
        logger.debug("wrote %d bytes to %s", len(value), path)
