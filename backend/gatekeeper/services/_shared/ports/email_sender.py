from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Protocol

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EmailMessage:
    """A plain-text message handed to a sender."""

    to: str
    subject: str
    body: str


class EmailSender(Protocol):
    """Port for delivering account emails."""

    def send(self, to: str, subject: str, body: str) -> None: ...


class LoggingEmailSender(EmailSender):
    """Console backend: logs the message instead of delivering it."""

    def send(self, to: str, subject: str, body: str) -> None:
        log.info("email.console to=%s subject=%s\n%s", to, subject, body)


class InMemoryEmailSender(EmailSender):
    """
    Email sender used in tests.

    .. note::
       Messages are appended to :attr:`outbox` under a lock.
    """

    def __init__(self) -> None:
        self.outbox: list[EmailMessage] = []
        self._lock = threading.Lock()

    def send(self, to: str, subject: str, body: str) -> None:
        with self._lock:
            self.outbox.append(EmailMessage(to=to, subject=subject, body=body))

    def clear(self) -> None:
        with self._lock:
            self.outbox.clear()
