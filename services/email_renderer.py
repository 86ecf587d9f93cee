from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Sequence, TypedDict
from urllib.parse import quote, urlencode

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup, escape

from core.formatting import format_file_size
from core.mail.types import EmailEnvelope
from core.settings import Settings
from schemas.upload_schema import EditedUploadMetadata, RawUploadMetadata, UploadedFileRef

BASE_DIR = Path(__file__).resolve().parents[1]
TEMPLATES_DIR = BASE_DIR / "templates" / "emails"

REVIEW_PATH = "/api/review"
SUBMITTED_FORMAT = "%B %d, %Y %H:%M UTC"

FileUrlBuilder = Callable[[str], str]


class DownloadLink(TypedDict):
    name: str
    url: str
    size: str


@dataclass(frozen=True)
class NotificationConfig:
    from_address: str
    reviewer_address: str
    app_url: str

    @classmethod
    def from_settings(cls, settings: Settings) -> "NotificationConfig":
        return cls(
            from_address=settings.from_email,
            reviewer_address=settings.boss_email,
            app_url=settings.app_url,
        )


def nl2br(value: str | None) -> Markup:
    if not value:
        return Markup("")
    return Markup("<br>").join(escape(line) for line in str(value).replace("\r\n", "\n").split("\n"))


def _build_environment() -> Environment:
    environment = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    environment.filters["nl2br"] = nl2br
    return environment


templates = _build_environment()


def build_download_links(files: Sequence[UploadedFileRef], file_url: FileUrlBuilder) -> list[DownloadLink]:
    return [
        {
            "name": item.file_name,
            "url": file_url(item.file_path),
            "size": format_file_size(item.size),
        }
        for item in files
    ]


def review_action_url(app_url: str, *, action: str, review_id: str, project_name: str) -> str:
    query = urlencode(
        {"action": action, "id": review_id, "project": project_name},
        safe="!~*'()",
        quote_via=quote,
    )
    return f"{app_url.rstrip('/')}{REVIEW_PATH}?{query}"


def render_editor_email(
    metadata: RawUploadMetadata,
    files: Sequence[UploadedFileRef],
    *,
    config: NotificationConfig,
    file_url: FileUrlBuilder,
) -> EmailEnvelope:
    html = templates.get_template("editor_assignment.html").render(
        editor_name=metadata.editor_handle,
        metadata=metadata,
        downloads=build_download_links(files, file_url),
        app_url=config.app_url,
    )
    return EmailEnvelope(
        to=metadata.editor,
        from_address=config.from_address,
        subject=f"New Footage: {metadata.client_name} - {metadata.footage_type}",
        html_body=html,
    )


def render_review_email(
    metadata: EditedUploadMetadata,
    files: Sequence[UploadedFileRef],
    *,
    config: NotificationConfig,
    file_url: FileUrlBuilder,
    review_id: str | None = None,
    now: datetime | None = None,
) -> tuple[EmailEnvelope, str]:
    review_id = review_id or secrets.token_hex(16)
    submitted_at = (now or datetime.now(timezone.utc)).strftime(SUBMITTED_FORMAT)

    html = templates.get_template("review_request.html").render(
        metadata=metadata,
        submitted_at=submitted_at,
        downloads=build_download_links(files, file_url),
        approve_url=review_action_url(
            config.app_url, action="approve", review_id=review_id, project_name=metadata.project_name
        ),
        revise_url=review_action_url(
            config.app_url, action="revise", review_id=review_id, project_name=metadata.project_name
        ),
    )
    envelope = EmailEnvelope(
        to=config.reviewer_address,
        from_address=config.from_address,
        subject=f"Review Required: {metadata.project_name}",
        html_body=html,
    )
    return envelope, review_id
