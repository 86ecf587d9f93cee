from __future__ import annotations

from typing import Protocol

from core.storage.types import StorageAuthorization, UploadTarget


class UploadStorageProvider(Protocol):
    backend_name: str

    async def authorize(self) -> StorageAuthorization:
        ...

    async def get_upload_url(self, authorization: StorageAuthorization) -> UploadTarget:
        ...

    def public_file_url(self, file_path: str) -> str:
        ...
