from __future__ import annotations

from threading import Lock

from core.reviews.memory_store import MemoryReviewStore
from core.reviews.provider import ReviewStore
from core.reviews.redis_store import RedisReviewStore
from core.reviews.types import ReviewRecord
from core.settings import DEFAULT_REVIEW_TTL_SECONDS, Settings, get_settings


class ReviewStoreManager:
    _instance: "ReviewStoreManager | None" = None
    _lock = Lock()

    def __init__(self, store: ReviewStore, *, ttl_seconds: int = DEFAULT_REVIEW_TTL_SECONDS) -> None:
        self._store = store
        self._ttl_seconds = ttl_seconds

    @classmethod
    def configure(cls, store: ReviewStore, *, ttl_seconds: int = DEFAULT_REVIEW_TTL_SECONDS) -> "ReviewStoreManager":
        with cls._lock:
            cls._instance = cls(store, ttl_seconds=ttl_seconds)
            return cls._instance

    @classmethod
    def configure_from_settings(cls, settings: Settings | None = None) -> "ReviewStoreManager":
        settings = settings or get_settings()
        if settings.review_store_backend == "redis":
            if not settings.redis_url:
                raise RuntimeError("REDIS_URL is required when REVIEW_STORE_BACKEND=redis")
            store: ReviewStore = RedisReviewStore.from_url(settings.redis_url)
        else:
            store = MemoryReviewStore()

        return cls.configure(store, ttl_seconds=settings.review_ttl_seconds)

    @classmethod
    def get_instance(cls) -> "ReviewStoreManager":
        if cls._instance is None:
            return cls.configure_from_settings()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        with cls._lock:
            cls._instance = None

    @property
    def store(self) -> ReviewStore:
        return self._store

    def record(self, record: ReviewRecord) -> None:
        self._store.save(record, ttl_seconds=self._ttl_seconds)

    def get(self, review_id: str) -> ReviewRecord | None:
        return self._store.get(review_id)
