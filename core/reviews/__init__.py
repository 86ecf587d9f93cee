from core.reviews.manager import ReviewStoreManager
from core.reviews.types import ReviewRecord

__all__ = [
    "ReviewRecord",
    "ReviewStoreManager",
]
