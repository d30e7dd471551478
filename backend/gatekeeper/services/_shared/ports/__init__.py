"""
gatekeeper.services._shared.ports
=================================

Collection of *ports* (hexagonal interfaces) that the service layer depends
on for token signing and email delivery.

Modules
-------
- :mod:`token_codec`:
    Defines :class:`~.TokenCodec`, :class:`~.TokenPayload` and the codec
    error types.

- :mod:`email_sender`:
    Defines :class:`~.EmailSender` plus the console and in-memory senders.

Concrete network-bound adapters live under ``gatekeeper.infra``.
"""

from __future__ import annotations

from .email_sender import EmailMessage, EmailSender, InMemoryEmailSender, LoggingEmailSender
from .token_codec import (
    TokenCodec,
    TokenError,
    TokenExpiredError,
    TokenPayload,
    TokenSignatureError,
)

__all__ = [
    "EmailMessage",
    "EmailSender",
    "InMemoryEmailSender",
    "LoggingEmailSender",
    "TokenCodec",
    "TokenError",
    "TokenExpiredError",
    "TokenPayload",
    "TokenSignatureError",
]
