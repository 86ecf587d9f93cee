from core.mail.manager import MailManager
from core.mail.types import EmailEnvelope

__all__ = [
    "EmailEnvelope",
    "MailManager",
]
