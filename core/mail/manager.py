from __future__ import annotations

from threading import Lock

from core.logging import get_logger
from core.mail.provider import EmailProvider
from core.mail.sendgrid_provider import SendGridEmailProvider
from core.mail.types import EmailEnvelope
from core.settings import Settings, get_settings

logger = get_logger(__name__)


class MailManager:
    _instance: "MailManager | None" = None
    _lock = Lock()

    def __init__(self, provider: EmailProvider) -> None:
        self._provider = provider

    @classmethod
    def configure(cls, provider: EmailProvider) -> "MailManager":
        with cls._lock:
            cls._instance = cls(provider)
            return cls._instance

    @classmethod
    def configure_from_settings(cls, settings: Settings | None = None) -> "MailManager":
        settings = settings or get_settings()
        return cls.configure(SendGridEmailProvider(api_key=settings.sendgrid_api_key))

    @classmethod
    def get_instance(cls) -> "MailManager":
        if cls._instance is None:
            return cls.configure_from_settings()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        with cls._lock:
            cls._instance = None

    async def send(self, envelope: EmailEnvelope) -> None:
        await self._provider.send(envelope)
        logger.info(
            "email_sent",
            provider=self._provider.provider_name,
            to=envelope.to,
            subject=envelope.subject,
        )
