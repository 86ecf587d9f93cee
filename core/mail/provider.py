from __future__ import annotations

from typing import Protocol

from core.mail.types import EmailEnvelope


class EmailProvider(Protocol):
    provider_name: str

    async def send(self, envelope: EmailEnvelope) -> None:
        ...
