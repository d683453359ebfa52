from typing import Any

import diskcache

from ipinfo_client.cache.base import BaseCache


class DiskCache(BaseCache):
    """BaseCache backed by a diskcache.Cache directory.

    Entries survive process restarts and can be shared by several processes
    pointing at the same directory. With no directory, diskcache creates a
    temporary one.
    """

    def __init__(self, directory: str | None = None) -> None:
        self._cache = diskcache.Cache(directory)

    @property
    def directory(self) -> str:
        return self._cache.directory

    def get(self, key: str) -> Any | None:
        return self._cache.get(key, default=None)

    def set(self, key: str, value: Any, ttl: int) -> None:
        self._cache.set(key, value, expire=ttl or None)

    def delete(self, key: str) -> bool:
        return bool(self._cache.delete(key))

    def delete_prefix(self, prefix: str) -> bool:
        # Materialize the keys first; deleting while iterating is not supported.
        keys = [key for key in self._cache.iterkeys() if isinstance(key, str) and key.startswith(prefix)]
        for key in keys:
            self._cache.delete(key)
        return True

    def close(self) -> None:
        self._cache.close()
