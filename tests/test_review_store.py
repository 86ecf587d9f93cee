from __future__ import annotations

import json

from core.reviews.manager import ReviewStoreManager
from core.reviews.memory_store import MemoryReviewStore
from core.reviews.redis_store import RedisReviewStore
from core.reviews.types import ReviewRecord


def _record(review_id: str = "a" * 32) -> ReviewRecord:
    return ReviewRecord(
        review_id=review_id,
        metadata={"uploadType": "edited", "projectName": "Spring Launch"},
        files=[{"fileName": "final.mp4", "filePath": "edited_uploads/review/1_Spring_Launch/final.mp4"}],
        timestamp=1718035200000,
    )


class _Clock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class _FakeRedis:
    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    def setex(self, key: str, ttl: int, value: str) -> None:
        self.values[key] = value
        self.ttls[key] = ttl

    def get(self, key: str):
        return self.values.get(key)


def test_memory_store_returns_record_until_ttl_elapses():
    clock = _Clock()
    manager = ReviewStoreManager(MemoryReviewStore(clock=clock), ttl_seconds=30)
    manager.record(_record())

    clock.now += 29
    assert manager.get("a" * 32) == _record()

    clock.now += 1
    assert manager.get("a" * 32) is None


def test_memory_store_purges_expired_rows_on_save():
    clock = _Clock()
    store = MemoryReviewStore(clock=clock)
    store.save(_record("old"), ttl_seconds=5)

    clock.now += 10
    store.save(_record("new"), ttl_seconds=5)

    assert len(store) == 1
    assert store.get("new") is not None


def test_redis_store_writes_json_with_expiry():
    client = _FakeRedis()
    manager = ReviewStoreManager(RedisReviewStore(client), ttl_seconds=2592000)

    manager.record(_record())

    key = f"reviews:{'a' * 32}"
    assert client.ttls[key] == 2592000
    assert json.loads(client.values[key])["metadata"]["projectName"] == "Spring Launch"
    assert manager.get("a" * 32) == _record()
    assert manager.get("missing") is None
