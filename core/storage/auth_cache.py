from __future__ import annotations

import time
from typing import Awaitable, Callable

from core.logging import get_logger
from core.settings import DEFAULT_B2_AUTH_TTL_SECONDS
from core.storage.types import StorageAuthorization

logger = get_logger(__name__)

Authorizer = Callable[[], Awaitable[StorageAuthorization]]


class StorageAuthorizationCache:
    """Holds one provider authorization and re-authorizes once it has expired.

    Not locked: two concurrent misses both authorize and the later result wins.
    """

    def __init__(
        self,
        authorize: Authorizer,
        *,
        ttl_seconds: int = DEFAULT_B2_AUTH_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._authorize = authorize
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._authorization: StorageAuthorization | None = None
        self._expires_at = 0.0

    @property
    def expires_at(self) -> float:
        return self._expires_at

    def is_valid(self) -> bool:
        return self._authorization is not None and self._clock() < self._expires_at

    async def get_authorization(self) -> StorageAuthorization:
        if self._authorization is not None and self._clock() < self._expires_at:
            return self._authorization

        authorization = await self._authorize()
        self._authorization = authorization
        self._expires_at = self._clock() + self._ttl_seconds
        logger.info("storage_authorized", api_url=authorization.api_url, expires_at=self._expires_at)
        return authorization

    def invalidate(self) -> None:
        self._authorization = None
        self._expires_at = 0.0
