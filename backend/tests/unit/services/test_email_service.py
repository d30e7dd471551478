"""Unit tests for :class:`EmailService`."""

from __future__ import annotations

from urllib.parse import parse_qs, urlparse

import pytest
from gatekeeper.services import EmailService
from gatekeeper.services._shared.ports import InMemoryEmailSender


@pytest.fixture()
def sender() -> InMemoryEmailSender:
    return InMemoryEmailSender()


@pytest.fixture()
def service(sender) -> EmailService:
    return EmailService(sender=sender, base_url="https://app.example.com/")


def _link(body: str) -> str:
    return next(word for word in body.split() if word.startswith("https://"))


class TestEmailService:
    def test_reset_password_email(self, service, sender):
        service.send_reset_password_email("to@example.com", "tok.en+/=")

        (msg,) = sender.outbox
        assert msg.to == "to@example.com"
        assert msg.subject == "Reset password"
        link = urlparse(_link(msg.body))
        assert link.path == "/reset-password"
        assert parse_qs(link.query)["token"] == ["tok.en+/="]

    def test_verification_email(self, service, sender):
        service.send_verification_email("to@example.com", "abc")

        (msg,) = sender.outbox
        assert msg.subject == "Email Verification"
        assert "https://app.example.com/verify-email?token=abc" in msg.body
