from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum, auto

from gatekeeper.models.token import Token, TokenType
from gatekeeper.models.user import User
from gatekeeper.services._shared.base import BaseService
from gatekeeper.services._shared.errors import AuthenticationError, NotFoundError
from gatekeeper.services._shared.ports import (
    TokenCodec,
    TokenExpiredError,
    TokenSignatureError,
)
from gatekeeper.services.auth.dto import (
    AuthTokenConfig,
    AuthTokensOut,
    IssuedToken,
    LoginIn,
    LogoutIn,
    RefreshIn,
    ResetPasswordIn,
    VerifyEmailIn,
)
from gatekeeper.services.users.dto import UserPublicOut
from gatekeeper.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)


class TokenStatus(Enum):
    """Outcome of checking a presented token against codec and store."""

    OK = auto()
    INVALID = auto()
    EXPIRED = auto()
    WRONG_TYPE = auto()
    NOT_FOUND = auto()
    SUBJECT_MISMATCH = auto()
    USER_MISSING = auto()
    ALREADY_CONSUMED = auto()


@dataclass(frozen=True, slots=True)
class TokenCheck:
    """
    Result of :meth:`AuthService.check_token`.

    :ivar status: Why the token was accepted or refused.
    :ivar record: Matching store row (only when ``status`` is ``OK``).
    :ivar user: Owner of the row (only when ``status`` is ``OK``).
    """

    status: TokenStatus
    record: Token | None = None
    user: User | None = None

    @property
    def ok(self) -> bool:
        return self.status is TokenStatus.OK


class AuthService(BaseService):
    """
    Token lifecycle service (login / refresh / logout / reset / verify).

    Tokens are signed by a :class:`TokenCodec`. Refresh, reset-password and
    verify-email tokens are also persisted; a persisted token is accepted at
    most once and is deleted when consumed. Every refusal is reported to the
    caller with one opaque message per operation, the detailed reason goes to
    the log.
    """

    def __init__(self, *, codec: TokenCodec, token_cfg: AuthTokenConfig | None = None) -> None:
        """
        Initialize the service with its dependencies.

        :param codec: Adapter for signing/verifying tokens.
        :param token_cfg: Lifetimes per token type.
        """
        self.codec = codec
        self.cfg = token_cfg or AuthTokenConfig()

    # ------------------------------------------------------------------ #
    # Credentials
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> UserPublicOut:
        """
        Check email/password and return the user.

        Unknown email, password-less account and wrong password are
        indistinguishable to the caller.

        :raises AuthenticationError: ``"Incorrect email or password"``.
        """
        with self.ro_uow() as uow:
            user = uow.users.authenticate(dto.email, dto.password)
            if user is None:
                log.info("auth.login_failed")
                raise AuthenticationError("Incorrect email or password")
            return UserPublicOut.from_model(user)

    def logout(self, dto: LogoutIn) -> None:
        """
        Delete the stored refresh token matching ``dto.refresh_token``.

        :raises NotFoundError: No usable refresh token with that value.
        """
        with self.rw_uow() as uow:
            row = uow.tokens.find_valid(dto.refresh_token, TokenType.REFRESH)
            if row is None or not uow.tokens.delete_by_id(row.id):
                raise NotFoundError("Token")
            log.info("auth.logout user_id=%s", row.user_id)

    # ------------------------------------------------------------------ #
    # Rotation and single-use grants
    # ------------------------------------------------------------------ #

    def refresh_auth(self, dto: RefreshIn) -> AuthTokensOut:
        """
        Consume a refresh token and issue a new access/refresh pair.

        The old row is deleted and the new one stored in the same
        transaction, so a refresh token can be used at most once.

        :raises AuthenticationError: ``"Please authenticate"`` on any failure.
        """
        with self.rw_uow() as uow:
            record, user = self._accept(
                uow, dto.refresh_token, TokenType.REFRESH, op="refresh", message="Please authenticate"
            )
            if not uow.tokens.delete_by_id(record.id):
                self._log_refusal("refresh", TokenStatus.ALREADY_CONSUMED)
                raise AuthenticationError("Please authenticate")
            return self._issue_pair(uow, user.id)

    def reset_password(self, dto: ResetPasswordIn) -> None:
        """
        Set a new password using a reset-password token.

        Every reset-password token of the user is deleted afterwards, so
        sibling tokens issued by repeated requests die too.

        :raises AuthenticationError: ``"Password reset failed"``.
        """
        with self.rw_uow() as uow:
            _, user = self._accept(
                uow,
                dto.token,
                TokenType.RESET_PASSWORD,
                op="reset_password",
                message="Password reset failed",
            )
            uow.users.update_password(user.id, dto.password)
            purged = uow.tokens.delete_all_by_user_and_type(
                user.id, TokenType.RESET_PASSWORD
            )
            log.info("auth.password_reset user_id=%s purged=%s", user.id, purged)

    def verify_email(self, dto: VerifyEmailIn) -> None:
        """
        Mark the owner's email as verified using a verify-email token.

        :raises AuthenticationError: ``"Email verification failed"``.
        """
        with self.rw_uow() as uow:
            _, user = self._accept(
                uow,
                dto.token,
                TokenType.VERIFY_EMAIL,
                op="verify_email",
                message="Email verification failed",
            )
            uow.tokens.delete_all_by_user_and_type(user.id, TokenType.VERIFY_EMAIL)
            uow.users.mark_email_verified(user.id)
            log.info("auth.email_verified user_id=%s", user.id)

    # ------------------------------------------------------------------ #
    # Issuance
    # ------------------------------------------------------------------ #

    def generate_auth_tokens(self, user: UserPublicOut) -> AuthTokensOut:
        """Issue an access token and a stored refresh token for ``user``."""
        with self.rw_uow() as uow:
            return self._issue_pair(uow, user.id)

    def generate_reset_password_token(self, email: str) -> str:
        """
        Issue and store a reset-password token for the account at ``email``.

        :raises NotFoundError: ``"No users found with this email"``.
        """
        with self.rw_uow() as uow:
            user = uow.users.get_by_email(email)
            if user is None:
                raise NotFoundError("User", message="No users found with this email")
            return self._issue_stored(
                uow, user.id, TokenType.RESET_PASSWORD, self.cfg.reset_password_expires
            ).token

    def generate_verify_email_token(self, user: UserPublicOut) -> str:
        """Issue and store a verify-email token for ``user``."""
        with self.rw_uow() as uow:
            return self._issue_stored(
                uow, user.id, TokenType.VERIFY_EMAIL, self.cfg.verify_email_expires
            ).token

    # ------------------------------------------------------------------ #
    # Verification
    # ------------------------------------------------------------------ #

    def check_token(
        self, uow: SQLAlchemyUnitOfWork, token: str, expected: TokenType
    ) -> TokenCheck:
        """
        Verify ``token`` against the codec and the store.

        The token must carry a valid signature, be unexpired, embed
        ``expected`` as its type, have a usable store row owned by the
        embedded subject, and that subject must still exist.
        """
        try:
            payload = self.codec.parse_and_verify(token)
        except TokenExpiredError:
            return TokenCheck(TokenStatus.EXPIRED)
        except TokenSignatureError:
            return TokenCheck(TokenStatus.INVALID)

        if payload.type is not expected:
            return TokenCheck(TokenStatus.WRONG_TYPE)

        record = uow.tokens.find_valid(token, expected)
        if record is None:
            return TokenCheck(TokenStatus.NOT_FOUND)
        if record.user_id != payload.subject:
            return TokenCheck(TokenStatus.SUBJECT_MISMATCH)

        user = uow.users.get(payload.subject)
        if user is None:
            return TokenCheck(TokenStatus.USER_MISSING)
        return TokenCheck(TokenStatus.OK, record=record, user=user)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    @staticmethod
    def now_utc() -> datetime:
        # Whole seconds: the signed ``exp`` claim has no sub-second part.
        return datetime.now(UTC).replace(microsecond=0)

    def _issue(self, user_id: str, token_type: TokenType, ttl: timedelta) -> IssuedToken:
        expires = self.now_utc() + ttl
        return IssuedToken(token=self.codec.issue(user_id, expires, token_type), expires=expires)

    def _issue_stored(
        self,
        uow: SQLAlchemyUnitOfWork,
        user_id: str,
        token_type: TokenType,
        ttl: timedelta,
    ) -> IssuedToken:
        issued = self._issue(user_id, token_type, ttl)
        uow.tokens.create(issued.token, user_id, token_type, issued.expires)
        return issued

    def _issue_pair(self, uow: SQLAlchemyUnitOfWork, user_id: str) -> AuthTokensOut:
        access = self._issue(user_id, TokenType.ACCESS, self.cfg.access_expires)
        refresh = self._issue_stored(uow, user_id, TokenType.REFRESH, self.cfg.refresh_expires)
        return AuthTokensOut(access=access, refresh=refresh)

    def _accept(
        self,
        uow: SQLAlchemyUnitOfWork,
        token: str,
        expected: TokenType,
        *,
        op: str,
        message: str,
    ) -> tuple[Token, User]:
        """Return the row and owner of an accepted token or raise ``message``."""
        check = self.check_token(uow, token, expected)
        if not check.ok or check.record is None or check.user is None:
            self._log_refusal(op, check.status)
            raise AuthenticationError(message)
        return check.record, check.user

    @staticmethod
    def _log_refusal(operation: str, status: TokenStatus) -> None:
        log.info("auth.token_refused op=%s reason=%s", operation, status.name)
