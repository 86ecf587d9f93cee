from __future__ import annotations

import time
from typing import Callable

from core.reviews.provider import ReviewStore
from core.reviews.types import ReviewRecord


class MemoryReviewStore(ReviewStore):
    """Per-process review store. Records vanish on restart and are not shared between instances."""

    backend_name = "memory"

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._rows: dict[str, tuple[float, ReviewRecord]] = {}

    def __len__(self) -> int:
        return len(self._rows)

    def _purge_expired(self) -> None:
        now = self._clock()
        for review_id in [key for key, (expires_at, _) in self._rows.items() if expires_at <= now]:
            del self._rows[review_id]

    def save(self, record: ReviewRecord, *, ttl_seconds: int) -> None:
        self._purge_expired()
        self._rows[record.review_id] = (self._clock() + ttl_seconds, record)

    def get(self, review_id: str) -> ReviewRecord | None:
        row = self._rows.get(review_id)
        if row is None:
            return None
        expires_at, record = row
        if expires_at <= self._clock():
            del self._rows[review_id]
            return None
        return record
