from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage

from gatekeeper.services._shared.ports import EmailSender

log = logging.getLogger(__name__)


@dataclass(slots=True)
class SMTPEmailSender(EmailSender):
    """
    Adapter delivering plain-text mail through an SMTP relay.

    A connection is opened per message; account emails are rare enough
    that pooling is not worth the state.
    """

    host: str
    port: int = 587
    sender: str = "no-reply@localhost"
    username: str | None = None
    password: str | None = None
    use_tls: bool = True
    timeout: float = 10.0

    def send(self, to: str, subject: str, body: str) -> None:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(body)

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username and self.password:
                smtp.login(self.username, self.password)
            smtp.send_message(msg)
        log.info("email.sent to=%s subject=%s", to, subject)
