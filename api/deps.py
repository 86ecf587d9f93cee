from __future__ import annotations

from core.mail.manager import MailManager
from core.reviews.manager import ReviewStoreManager
from core.settings import get_settings
from core.storage.manager import UploadStorageManager
from services.email_renderer import NotificationConfig


def get_storage_manager() -> UploadStorageManager:
    return UploadStorageManager.get_instance()


def get_mail_manager() -> MailManager:
    return MailManager.get_instance()


def get_review_store() -> ReviewStoreManager:
    return ReviewStoreManager.get_instance()


def get_notification_config() -> NotificationConfig:
    return NotificationConfig.from_settings(get_settings())
