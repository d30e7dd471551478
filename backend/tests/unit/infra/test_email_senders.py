"""Unit tests for the email sender adapters."""

from __future__ import annotations

import logging

from gatekeeper.infra.mail import smtp_email_sender
from gatekeeper.infra.mail.smtp_email_sender import SMTPEmailSender
from gatekeeper.services._shared.ports import (
    EmailMessage,
    InMemoryEmailSender,
    LoggingEmailSender,
)


class _FakeSMTP:
    """Records what the adapter does with the SMTP connection."""

    instances: list[_FakeSMTP] = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.calls: list[str] = []
        self.sent = []
        _FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.calls.append("quit")
        return False

    def starttls(self):
        self.calls.append("starttls")

    def login(self, username, password):
        self.calls.append(f"login:{username}")

    def send_message(self, msg):
        self.calls.append("send")
        self.sent.append(msg)


class TestInMemoryEmailSender:
    def test_collects_messages(self):
        sender = InMemoryEmailSender()
        sender.send("a@example.com", "Hi", "Body")
        assert sender.outbox == [EmailMessage(to="a@example.com", subject="Hi", body="Body")]

        sender.clear()
        assert sender.outbox == []


class TestLoggingEmailSender:
    def test_logs_instead_of_sending(self, caplog):
        with caplog.at_level(logging.INFO):
            LoggingEmailSender().send("a@example.com", "Hi", "Body")
        assert "email.console" in caplog.text
        assert "a@example.com" in caplog.text


class TestSMTPEmailSender:
    def test_sends_with_tls_and_login(self, monkeypatch):
        _FakeSMTP.instances.clear()
        monkeypatch.setattr(smtp_email_sender.smtplib, "SMTP", _FakeSMTP)
        sender = SMTPEmailSender(
            host="mail.local",
            port=2525,
            sender="no-reply@example.com",
            username="mailer",
            password="pw",
        )

        sender.send("to@example.com", "Subject", "Body text")

        (conn,) = _FakeSMTP.instances
        assert (conn.host, conn.port) == ("mail.local", 2525)
        assert conn.calls == ["starttls", "login:mailer", "send", "quit"]
        msg = conn.sent[0]
        assert msg["To"] == "to@example.com"
        assert msg["From"] == "no-reply@example.com"
        assert msg["Subject"] == "Subject"
        assert "Body text" in msg.get_content()

    def test_plain_relay_without_credentials(self, monkeypatch):
        _FakeSMTP.instances.clear()
        monkeypatch.setattr(smtp_email_sender.smtplib, "SMTP", _FakeSMTP)

        SMTPEmailSender(host="relay", use_tls=False).send("to@example.com", "S", "B")

        assert _FakeSMTP.instances[0].calls == ["send", "quit"]
