"""Key-value persistence port for client-held state (cart, auth session).

The web app keeps that state in the signed session cookie; tests and the
CLI use the in-memory store. Writes that cannot be persisted raise
StorageError instead of being dropped.
"""

from __future__ import annotations

import json
from typing import Any, Dict

from flask import session


class StorageError(Exception):
    """A value could not be written to client storage."""


class KeyValueStore:
    def get(self, key: str, default: Any = None) -> Any:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


def _encode(key: str, value: Any) -> str:
    try:
        return json.dumps(value, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise StorageError(f"Value for {key!r} is not serializable") from e


class MemoryStore(KeyValueStore):
    def __init__(self, initial: Dict[str, Any] | None = None):
        self._data: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return default
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = _encode(key, value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class SessionStore(KeyValueStore):
    """Flask session backed store.

    `max_bytes` bounds the JSON size of everything held in the session; the
    browser silently drops cookies over ~4KB, so we refuse the write instead.
    """

    def __init__(self, max_bytes: int = 3800):
        self.max_bytes = max_bytes

    def get(self, key: str, default: Any = None) -> Any:
        return session.get(key, default)

    def set(self, key: str, value: Any) -> None:
        encoded = _encode(key, value)
        others = sum(len(_encode(k, v)) + len(k) for k, v in session.items() if k != key)
        if len(encoded) + len(key) + others > self.max_bytes:
            raise StorageError("Client storage is full")
        session[key] = value
        session.permanent = True
        session.modified = True

    def delete(self, key: str) -> None:
        session.pop(key, None)
