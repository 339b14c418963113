from .base import StorageService
from .local import LocalStorageService
from .factory import get_storage_client

__all__ = ["StorageService", "LocalStorageService", "get_storage_client"]
