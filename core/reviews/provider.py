from __future__ import annotations

from typing import Protocol

from core.reviews.types import ReviewRecord


class ReviewStore(Protocol):
    backend_name: str

    def save(self, record: ReviewRecord, *, ttl_seconds: int) -> None:
        ...

    def get(self, review_id: str) -> ReviewRecord | None:
        ...
