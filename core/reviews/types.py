from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class ReviewRecord:
    review_id: str
    metadata: dict[str, Any]
    files: list[dict[str, Any]]
    timestamp: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ReviewRecord":
        return cls(
            review_id=str(payload["review_id"]),
            metadata=dict(payload.get("metadata") or {}),
            files=list(payload.get("files") or []),
            timestamp=int(payload.get("timestamp") or 0),
        )
