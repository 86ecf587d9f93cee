from __future__ import annotations

import pytest

from core.errors import AppException, ErrorCode, upstream_email_error
from core.mail.manager import MailManager
from core.mail.types import EmailEnvelope
from core.reviews.manager import ReviewStoreManager
from core.reviews.memory_store import MemoryReviewStore
from core.storage.manager import UploadStorageManager
from core.storage.types import StorageAuthorization, UploadTarget
from schemas.upload_schema import CompleteUploadRequest
from services.email_renderer import NotificationConfig
from services.notification_service import send_upload_notifications

CONFIG = NotificationConfig(
    from_address="workflow@example.com",
    reviewer_address="boss@example.com",
    app_url="https://uploads.example.com",
)


class _RecordingEmailProvider:
    provider_name = "recording"

    def __init__(self, error: Exception | None = None) -> None:
        self.sent: list[EmailEnvelope] = []
        self._error = error

    async def send(self, envelope: EmailEnvelope) -> None:
        if self._error is not None:
            raise self._error
        self.sent.append(envelope)


class _StaticStorageProvider:
    backend_name = "static"

    async def authorize(self) -> StorageAuthorization:
        return StorageAuthorization(api_url="https://api.test", authorization_token="account-token")

    async def get_upload_url(self, authorization: StorageAuthorization) -> UploadTarget:
        return UploadTarget(upload_url="https://pod/upload", authorization_token="upload-token", bucket_id="b")

    def public_file_url(self, file_path: str) -> str:
        return f"https://files.test/{file_path}"


def _raw_payload(**metadata_overrides) -> CompleteUploadRequest:
    metadata = {
        "uploadType": "raw",
        "editor": "jane@studio.com",
        "clientName": "Acme Co",
        "shootDate": "2024-06-10",
        "footageType": "Interview",
        "instructions": "Cut to 60s",
    }
    metadata.update(metadata_overrides)
    return CompleteUploadRequest.model_validate(
        {
            "metadata": metadata,
            "files": [{"fileName": "clip.mp4", "filePath": "raw_uploads/jane/1_Acme_Co/clip.mp4", "size": 1024}],
        }
    )


def _edited_payload(**metadata_overrides) -> CompleteUploadRequest:
    metadata = {
        "uploadType": "edited",
        "projectName": "Spring Launch",
        "clientName": "Acme Co",
        "editorName": "Jane",
    }
    metadata.update(metadata_overrides)
    return CompleteUploadRequest.model_validate(
        {
            "metadata": metadata,
            "files": [{"fileName": "final.mp4", "filePath": "edited_uploads/review/1_Spring_Launch/final.mp4"}],
        }
    )


def _deps(email_provider: _RecordingEmailProvider):
    return {
        "mailer": MailManager(email_provider),
        "storage": UploadStorageManager(_StaticStorageProvider()),
        "reviews": ReviewStoreManager(MemoryReviewStore(), ttl_seconds=60),
        "config": CONFIG,
    }


@pytest.mark.asyncio
async def test_raw_upload_sends_exactly_one_email_to_editor():
    provider = _RecordingEmailProvider()
    deps = _deps(provider)

    review_id = await send_upload_notifications(_raw_payload(), **deps)

    assert review_id is None
    assert [envelope.to for envelope in provider.sent] == ["jane@studio.com"]
    assert "https://files.test/raw_uploads/jane/1_Acme_Co/clip.mp4" in provider.sent[0].html_body
    assert len(deps["reviews"].store) == 0


@pytest.mark.asyncio
async def test_edited_upload_emails_reviewer_and_records_review():
    provider = _RecordingEmailProvider()
    deps = _deps(provider)

    review_id = await send_upload_notifications(_edited_payload(), **deps)

    assert [envelope.to for envelope in provider.sent] == ["boss@example.com"]
    assert f"id={review_id}" in provider.sent[0].html_body
    record = deps["reviews"].get(review_id)
    assert record is not None
    assert record.metadata["projectName"] == "Spring Launch"
    assert record.files[0]["fileName"] == "final.mp4"


@pytest.mark.asyncio
async def test_missing_render_fields_fail_before_sending():
    provider = _RecordingEmailProvider()

    with pytest.raises(AppException) as exc_info:
        await send_upload_notifications(_raw_payload(shootDate=None, instructions=""), **_deps(provider))

    assert exc_info.value.status_code == 422
    assert exc_info.value.code == ErrorCode.VALIDATION_FAILED.value
    assert exc_info.value.detail["details"]["missingFields"] == ["shootDate", "instructions"]  # type: ignore[index]
    assert provider.sent == []


@pytest.mark.asyncio
async def test_edited_upload_requires_editor_name():
    provider = _RecordingEmailProvider()

    with pytest.raises(AppException) as exc_info:
        await send_upload_notifications(_edited_payload(editorName=None), **_deps(provider))

    assert exc_info.value.message == "Validation failed: missing required field for edited upload: editorName."
    assert provider.sent == []


@pytest.mark.asyncio
async def test_send_failure_propagates():
    provider = _RecordingEmailProvider(error=upstream_email_error("Email provider rejected the message"))

    with pytest.raises(AppException) as exc_info:
        await send_upload_notifications(_raw_payload(), **_deps(provider))

    assert exc_info.value.code == ErrorCode.UPSTREAM_EMAIL_ERROR.value


@pytest.mark.asyncio
async def test_failed_review_email_leaves_no_review_record():
    provider = _RecordingEmailProvider(error=upstream_email_error("Email provider request failed"))
    deps = _deps(provider)

    with pytest.raises(AppException):
        await send_upload_notifications(_edited_payload(), **deps)

    assert len(deps["reviews"].store) == 0
