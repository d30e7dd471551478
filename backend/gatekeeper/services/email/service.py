from __future__ import annotations

import logging
from urllib.parse import urlencode

from gatekeeper.services._shared.ports import EmailSender

log = logging.getLogger(__name__)


class EmailService:
    """
    Compose and send account emails.

    Links point at the front-end (``base_url``), which forwards the token to
    the API.
    """

    def __init__(self, *, sender: EmailSender, base_url: str) -> None:
        self.sender = sender
        self.base_url = base_url.rstrip("/")

    def _link(self, path: str, token: str) -> str:
        return f"{self.base_url}/{path}?{urlencode({'token': token})}"

    def send_reset_password_email(self, to: str, token: str) -> None:
        """Send the reset-password link for ``token`` to ``to``."""
        link = self._link("reset-password", token)
        body = (
            "Dear user,\n\n"
            f"To reset your password, click on this link: {link}\n\n"
            "If you did not request any password resets, then ignore this email."
        )
        self.sender.send(to, "Reset password", body)

    def send_verification_email(self, to: str, token: str) -> None:
        """Send the email-verification link for ``token`` to ``to``."""
        link = self._link("verify-email", token)
        body = (
            "Dear user,\n\n"
            f"To verify your email, click on this link: {link}\n\n"
            "If you did not create an account, then ignore this email."
        )
        self.sender.send(to, "Email Verification", body)
