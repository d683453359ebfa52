from abc import ABC, abstractmethod
from typing import Any


class BaseCache(ABC):
    """Abstract key-value store with per-entry TTL used by IPInfoClient.

    Values are the raw decoded JSON payloads (or plain strings for single-field
    lookups). Implementations must return None for missing or expired keys.
    """

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the cached value for `key`, or None when absent."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: Any, ttl: int) -> None:
        """Store `value` under `key` for `ttl` seconds (0 means no expiry)."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete a single entry. Returns True if an entry was removed."""
        raise NotImplementedError

    @abstractmethod
    def delete_prefix(self, prefix: str) -> bool:
        """Delete every entry whose key starts with `prefix`."""
        raise NotImplementedError
