from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class StorageBackend(str, Enum):
    B2 = "b2"


@dataclass(frozen=True)
class StorageAuthorization:
    api_url: str
    authorization_token: str
    download_url: str | None = None
    account_id: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class UploadTarget:
    upload_url: str
    authorization_token: str
    bucket_id: str
