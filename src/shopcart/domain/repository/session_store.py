"""Abstract key-value store scoped to one client session."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class SessionStore(ABC):

    @property
    @abstractmethod
    def session_id(self) -> str:
        """Identifier of the client session this store is bound to."""

    @abstractmethod
    def get(self, key: str) -> Any:
        """Return the value stored under *key*, or None."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store a JSON-serialisable value under *key*."""

    @abstractmethod
    def clear(self, key: str) -> None:
        """Forget *key*; a missing key is not an error."""
