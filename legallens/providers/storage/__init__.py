"""Storage backend adapters."""

from legallens.providers.storage.local_disk_storage import LocalDiskStorage
from legallens.providers.storage.memory_storage import MemoryStorage

__all__ = ["LocalDiskStorage", "MemoryStorage"]
