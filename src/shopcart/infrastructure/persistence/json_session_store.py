"""JSON-file-backed SessionStore.

All sessions share one file, keyed by session ID; each session holds its
own flat mapping of keys to values.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from shopcart.domain.repository.session_store import SessionStore
from shopcart.infrastructure.persistence.json_file import JsonFile


class JsonSessionStore(SessionStore):

    def __init__(self, file_path: Path, session_id: str) -> None:
        self._file = JsonFile(file_path, empty="{}")
        self._session_id = session_id

    @property
    def session_id(self) -> str:
        return self._session_id

    def get(self, key: str) -> Any:
        return self._file.load().get(self._session_id, {}).get(key)

    def set(self, key: str, value: Any) -> None:
        sessions = self._file.load()
        sessions.setdefault(self._session_id, {})[key] = value
        self._file.persist(sessions)

    def clear(self, key: str) -> None:
        sessions = self._file.load()
        values = sessions.get(self._session_id)
        if values is None or key not in values:
            return
        del values[key]
        if not values:
            del sessions[self._session_id]
        self._file.persist(sessions)
