from __future__ import annotations

import time

from core.errors import missing_metadata_fields
from core.logging import get_logger
from core.mail.manager import MailManager
from core.reviews.manager import ReviewStoreManager
from core.reviews.types import ReviewRecord
from core.storage.manager import UploadStorageManager
from schemas.upload_schema import (
    CompleteUploadRequest,
    EditedUploadMetadata,
    RawUploadMetadata,
    UploadedFileRef,
)
from services.email_renderer import NotificationConfig, render_editor_email, render_review_email

logger = get_logger(__name__)

RAW_NOTIFICATION_FIELDS = (
    ("shoot_date", "shootDate"),
    ("footage_type", "footageType"),
    ("instructions", "instructions"),
)
EDITED_NOTIFICATION_FIELDS = (
    ("client_name", "clientName"),
    ("editor_name", "editorName"),
)


def _epoch_ms() -> int:
    return int(time.time() * 1000)


def _require_fields(metadata: RawUploadMetadata | EditedUploadMetadata, fields: tuple[tuple[str, str], ...]) -> None:
    missing = [wire_name for attr, wire_name in fields if not getattr(metadata, attr)]
    if missing:
        raise missing_metadata_fields(metadata.upload_type, missing)


async def send_editor_notification(
    metadata: RawUploadMetadata,
    files: list[UploadedFileRef],
    *,
    mailer: MailManager,
    storage: UploadStorageManager,
    config: NotificationConfig,
) -> None:
    _require_fields(metadata, RAW_NOTIFICATION_FIELDS)
    envelope = render_editor_email(metadata, files, config=config, file_url=storage.public_file_url)
    await mailer.send(envelope)
    logger.info("notification_sent", flow="editor_assignment", to=envelope.to, files=len(files))


async def send_review_notification(
    metadata: EditedUploadMetadata,
    files: list[UploadedFileRef],
    *,
    mailer: MailManager,
    storage: UploadStorageManager,
    reviews: ReviewStoreManager,
    config: NotificationConfig,
) -> str:
    _require_fields(metadata, EDITED_NOTIFICATION_FIELDS)
    envelope, review_id = render_review_email(metadata, files, config=config, file_url=storage.public_file_url)

    await mailer.send(envelope)
    logger.info("notification_sent", flow="review_request", to=envelope.to, review_id=review_id)

    # Only reviews whose email actually went out are kept.
    reviews.record(
        ReviewRecord(
            review_id=review_id,
            metadata=metadata.to_wire(),
            files=[item.to_wire() for item in files],
            timestamp=_epoch_ms(),
        )
    )
    logger.info("review_recorded", review_id=review_id, project=metadata.project_name)
    return review_id


async def send_upload_notifications(
    payload: CompleteUploadRequest,
    *,
    mailer: MailManager,
    storage: UploadStorageManager,
    reviews: ReviewStoreManager,
    config: NotificationConfig,
) -> str | None:
    """Send the single notification for a finished upload.

    Returns the review id for edited uploads, ``None`` for raw footage.
    """
    metadata = payload.metadata
    if isinstance(metadata, RawUploadMetadata):
        await send_editor_notification(
            metadata, payload.files, mailer=mailer, storage=storage, config=config
        )
        return None

    return await send_review_notification(
        metadata, payload.files, mailer=mailer, storage=storage, reviews=reviews, config=config
    )
