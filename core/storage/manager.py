from __future__ import annotations

from threading import Lock

from core.settings import Settings, get_settings
from core.storage.auth_cache import StorageAuthorizationCache
from core.storage.b2_provider import B2ExpiredAuthorization, B2StorageProvider
from core.storage.provider import UploadStorageProvider
from core.storage.types import UploadTarget


class UploadStorageManager:
    """Owns the storage provider and its authorization cache for one process."""

    _instance: "UploadStorageManager | None" = None
    _lock = Lock()

    def __init__(
        self,
        provider: UploadStorageProvider,
        auth_cache: StorageAuthorizationCache | None = None,
    ) -> None:
        self._provider = provider
        self._auth_cache = auth_cache or StorageAuthorizationCache(provider.authorize)

    @classmethod
    def configure(
        cls,
        provider: UploadStorageProvider,
        auth_cache: StorageAuthorizationCache | None = None,
    ) -> "UploadStorageManager":
        with cls._lock:
            cls._instance = cls(provider, auth_cache)
            return cls._instance

    @classmethod
    def configure_from_settings(cls, settings: Settings | None = None) -> "UploadStorageManager":
        settings = settings or get_settings()
        provider = B2StorageProvider(
            key_id=settings.b2_key_id,
            app_key=settings.b2_app_key,
            bucket_id=settings.b2_bucket_id,
            bucket_name=settings.b2_bucket_name,
            endpoint=settings.b2_endpoint,
            download_host=settings.b2_download_host,
        )
        auth_cache = StorageAuthorizationCache(
            provider.authorize,
            ttl_seconds=settings.b2_auth_ttl_seconds,
        )
        return cls.configure(provider, auth_cache)

    @classmethod
    def get_instance(cls) -> "UploadStorageManager":
        if cls._instance is None:
            return cls.configure_from_settings()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        with cls._lock:
            cls._instance = None

    @property
    def auth_cache(self) -> StorageAuthorizationCache:
        return self._auth_cache

    async def get_upload_target(self) -> UploadTarget:
        authorization = await self._auth_cache.get_authorization()
        try:
            return await self._provider.get_upload_url(authorization)
        except B2ExpiredAuthorization:
            # Next call re-authorizes; this one still fails.
            self._auth_cache.invalidate()
            raise

    def public_file_url(self, file_path: str) -> str:
        return self._provider.public_file_url(file_path)
