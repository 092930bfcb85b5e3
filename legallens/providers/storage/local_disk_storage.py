"""Local-filesystem storage backend.

Keys map to paths under a root directory.  Blocking file I/O runs in a
worker thread via ``asyncio.to_thread`` so the event loop stays free.
Writes go to a temporary sibling file that is then ``os.replace``-d over the
target, which makes each write atomic on POSIX and Windows.
"""

from __future__ import annotations

import asyncio
import os
import shutil
import tempfile
from pathlib import Path

import structlog

from legallens.interfaces.storage_backend import IStorageBackend
from legallens.utils.errors import PersistenceError

logger = structlog.get_logger(logger_name=__name__)


class LocalDiskStorage(IStorageBackend):
    """Durable storage rooted at *root* (created on first write)."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    # ------------------------------------------------------------------
    # IStorageBackend implementation
    # ------------------------------------------------------------------

    async def write(self, key: str, data: bytes) -> None:
        path = self._path(key)
        try:
            await asyncio.to_thread(self._write_sync, path, data)
        except OSError as exc:
            logger.error("storage_write_failed", key=key, error=str(exc))
            raise PersistenceError(
                message=f"Could not write {key}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    async def read(self, key: str) -> bytes | None:
        path = self._path(key)
        try:
            return await asyncio.to_thread(self._read_sync, path)
        except OSError as exc:
            logger.error("storage_read_failed", key=key, error=str(exc))
            raise PersistenceError(
                message=f"Could not read {key}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    async def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            await asyncio.to_thread(path.unlink, True)
        except OSError as exc:
            raise PersistenceError(
                message=f"Could not delete {key}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    async def delete_prefix(self, prefix: str) -> None:
        path = self._path(prefix)
        try:
            if path.is_dir():
                await asyncio.to_thread(shutil.rmtree, path)
            else:
                await asyncio.to_thread(path.unlink, True)
        except OSError as exc:
            raise PersistenceError(
                message=f"Could not delete {prefix}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    async def exists(self, key: str) -> bool:
        return self._path(key).is_file()

    def get_provider_name(self) -> str:
        return "local-disk"

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _path(self, key: str) -> Path:
        cleaned = key.strip("/")
        if not cleaned or ".." in Path(cleaned).parts:
            raise PersistenceError(
                message=f"Invalid storage key: {key!r}",
                provider_name=self.get_provider_name(),
            )
        return self._root / cleaned

    @staticmethod
    def _write_sync(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    @staticmethod
    def _read_sync(path: Path) -> bytes | None:
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
