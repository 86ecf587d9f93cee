from __future__ import annotations

from typing import Any

import httpx

from core.errors import upstream_email_error
from core.mail.provider import EmailProvider
from core.mail.types import EmailEnvelope

SENDGRID_SEND_URL = "https://api.sendgrid.com/v3/mail/send"


class SendGridEmailProvider(EmailProvider):
    provider_name = "sendgrid"

    def __init__(
        self,
        *,
        api_key: str,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def build_payload(envelope: EmailEnvelope) -> dict[str, Any]:
        return {
            "personalizations": [{"to": [{"email": envelope.to}]}],
            "from": {"email": envelope.from_address},
            "subject": envelope.subject,
            "content": [{"type": "text/html", "value": envelope.html_body}],
        }

    async def send(self, envelope: EmailEnvelope) -> None:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    SENDGRID_SEND_URL,
                    json=self.build_payload(envelope),
                    headers=self._headers(),
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as err:
            raise upstream_email_error(
                "Email provider rejected the message",
                details=_sendgrid_error_details(err.response),
            ) from err
        except httpx.HTTPError as err:
            raise upstream_email_error("Email provider request failed", details=str(err)) from err


def _sendgrid_error_details(response: httpx.Response) -> dict[str, Any]:
    details: dict[str, Any] = {"status_code": response.status_code}
    try:
        body = response.json()
    except ValueError:
        return details
    errors = body.get("errors") if isinstance(body, dict) else None
    if isinstance(errors, list):
        details["provider_errors"] = [
            str(item.get("message")) for item in errors if isinstance(item, dict) and item.get("message")
        ]
    return details
