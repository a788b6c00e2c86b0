"""Key/value storage port for client-side state.

The cart snapshot lives in durable storage and the pending order in
short-lived storage; both are plain string values under fixed keys.
"""

from abc import ABC, abstractmethod


class StorageError(Exception):
    """Reading or writing a stored value failed."""


class StoragePort(ABC):
    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None: ...

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete the key; absent keys are ignored."""
        ...
