from __future__ import annotations

import re
import secrets
import time

from schemas.upload_schema import RawUploadMetadata, UploadMetadata

RAW_UPLOADS_PREFIX = "raw_uploads"
EDITED_UPLOADS_PREFIX = "edited_uploads/review"

_WHITESPACE = re.compile(r"\s+")


def _now_ms() -> int:
    return int(time.time() * 1000)


def sanitize_segment(value: str) -> str:
    return _WHITESPACE.sub("_", value)


def plan_path(
    file_name: str,
    metadata: UploadMetadata,
    *,
    now_ms: int | None = None,
    suffix: str | None = None,
) -> tuple[str, str]:
    """Return ``(file_id, file_path)`` for an incoming upload.

    Raw footage lands under the editor's handle, everything else under the
    review area. Keys start with the same millisecond timestamp as the id so
    they sort chronologically within a folder.
    """
    timestamp = now_ms if now_ms is not None else _now_ms()
    file_id = f"{timestamp}_{suffix or secrets.token_hex(4)}"

    if isinstance(metadata, RawUploadMetadata):
        folder = f"{timestamp}_{sanitize_segment(metadata.client_name)}"
        file_path = f"{RAW_UPLOADS_PREFIX}/{metadata.editor_handle}/{folder}/{file_name}"
    else:
        folder = f"{timestamp}_{sanitize_segment(metadata.project_name)}"
        file_path = f"{EDITED_UPLOADS_PREFIX}/{folder}/{file_name}"

    return file_id, file_path
