from checkout.storage.file import JsonFileStorage
from checkout.storage.memory import MemoryStorage
from checkout.storage.port import StorageError, StoragePort

__all__ = ["JsonFileStorage", "MemoryStorage", "StorageError", "StoragePort"]
