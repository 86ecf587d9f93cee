from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EmailEnvelope:
    to: str
    from_address: str
    subject: str
    html_body: str
