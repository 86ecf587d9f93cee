from __future__ import annotations

import json
from typing import Any

import redis

from core.reviews.provider import ReviewStore
from core.reviews.types import ReviewRecord

CACHE_KEY_PREFIX = "reviews"


def _review_key(review_id: str) -> str:
    return f"{CACHE_KEY_PREFIX}:{review_id}"


class RedisReviewStore(ReviewStore):
    backend_name = "redis"

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_url(cls, redis_url: str) -> "RedisReviewStore":
        return cls(redis.Redis.from_url(redis_url, socket_connect_timeout=2, decode_responses=True))

    def save(self, record: ReviewRecord, *, ttl_seconds: int) -> None:
        self._client.setex(_review_key(record.review_id), ttl_seconds, json.dumps(record.to_dict()))

    def get(self, review_id: str) -> ReviewRecord | None:
        raw = self._client.get(_review_key(review_id))
        if not raw:
            return None
        return ReviewRecord.from_dict(json.loads(raw))
