from core.storage.auth_cache import StorageAuthorizationCache
from core.storage.manager import UploadStorageManager
from core.storage.types import StorageAuthorization, StorageBackend, UploadTarget

__all__ = [
    "StorageAuthorization",
    "StorageAuthorizationCache",
    "StorageBackend",
    "UploadStorageManager",
    "UploadTarget",
]
