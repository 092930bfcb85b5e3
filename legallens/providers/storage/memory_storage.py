"""Process-local storage backend, used by tests and throwaway sessions."""

from __future__ import annotations

from legallens.interfaces.storage_backend import IStorageBackend


class MemoryStorage(IStorageBackend):
    """Keeps every key in a dict.  Contents vanish with the process."""

    def __init__(self) -> None:
        self._blobs: dict[str, bytes] = {}

    async def write(self, key: str, data: bytes) -> None:
        self._blobs[key.strip("/")] = bytes(data)

    async def read(self, key: str) -> bytes | None:
        return self._blobs.get(key.strip("/"))

    async def delete(self, key: str) -> None:
        self._blobs.pop(key.strip("/"), None)

    async def delete_prefix(self, prefix: str) -> None:
        cleaned = prefix.strip("/")
        for key in [k for k in self._blobs if k == cleaned or k.startswith(cleaned + "/")]:
            del self._blobs[key]

    async def exists(self, key: str) -> bool:
        return key.strip("/") in self._blobs

    def keys(self) -> list[str]:
        return sorted(self._blobs)

    def get_provider_name(self) -> str:
        return "memory"
