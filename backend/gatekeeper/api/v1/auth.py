"""Authentication endpoints: credentials, token rotation and email flows."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from gatekeeper.api.deps import (
    current_identity,
    get_auth_service,
    get_email_service,
    get_user_service,
    json_body,
    json_response,
    no_content,
    require_auth,
    require_permission,
    timing,
)
from gatekeeper.core.extensions import limiter
from gatekeeper.core.roles import Permission
from gatekeeper.schemas import (
    AuthResponseSchema,
    AuthTokensSchema,
    ForgotPasswordSchema,
    LoginSchema,
    RefreshTokenSchema,
    RegisterSchema,
    ResetPasswordSchema,
    TokenQuerySchema,
    UserSchema,
    VerifyEmailSchema,
)
from gatekeeper.services import (
    LoginIn,
    LogoutIn,
    RefreshIn,
    ResetPasswordIn,
    UserCreateIn,
    VerifyEmailIn,
)

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_token_schema = RefreshTokenSchema()
forgot_password_schema = ForgotPasswordSchema()
token_query_schema = TokenQuerySchema()
reset_password_schema = ResetPasswordSchema()
verify_email_schema = VerifyEmailSchema()
auth_response_schema = AuthResponseSchema()
auth_tokens_schema = AuthTokensSchema()
user_schema = UserSchema()


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "5 per minute"))


def _auth_rate_limit() -> str:
    return str(current_app.config.get("AUTH_RATE_LIMIT", "150 per 15 minutes"))


def _failed(response) -> bool:
    return response.status_code >= 400


# One budget per client across the auth endpoints; only failed attempts count.
auth_limit = limiter.shared_limit(_auth_rate_limit, scope="auth", deduct_when=_failed)


@bp.post("/register")
@auth_limit
@timing
def register():
    """Create an account and sign it in."""
    payload = register_schema.load(json_body())
    user = get_user_service().register(UserCreateIn(**payload))
    tokens = get_auth_service().generate_auth_tokens(user)
    body = {"data": auth_response_schema.dump({"user": user, "tokens": tokens})}
    return json_response(body, status=201)


@bp.post("/login")
@auth_limit
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Check credentials and issue an access/refresh pair."""
    payload = login_schema.load(json_body())
    service = get_auth_service()
    user = service.login(LoginIn(email=payload["email"], password=payload["password"]))
    tokens = service.generate_auth_tokens(user)
    return json_response({"data": auth_response_schema.dump({"user": user, "tokens": tokens})})


@bp.post("/logout")
@auth_limit
@timing
def logout():
    payload = refresh_token_schema.load(json_body())
    get_auth_service().logout(LogoutIn(refresh_token=payload["refresh_token"]))
    return no_content()


@bp.post("/refresh-tokens")
@auth_limit
@timing
def refresh_tokens():
    """Rotate a refresh token; the presented one stops working."""
    payload = refresh_token_schema.load(json_body())
    tokens = get_auth_service().refresh_auth(RefreshIn(refresh_token=payload["refresh_token"]))
    return json_response({"data": auth_tokens_schema.dump(tokens)})


@bp.post("/forgot-password")
@auth_limit
@timing
def forgot_password():
    """Email a reset-password link to the account owner."""
    payload = forgot_password_schema.load(json_body())
    token = get_auth_service().generate_reset_password_token(payload["email"])
    get_email_service().send_reset_password_email(payload["email"], token)
    return no_content()


@bp.post("/reset-password")
@auth_limit
@timing
def reset_password():
    query = token_query_schema.load(request.args)
    payload = reset_password_schema.load(json_body())
    get_auth_service().reset_password(
        ResetPasswordIn(token=query["token"], password=payload["password"])
    )
    return no_content()


@bp.post("/send-verification-email")
@auth_limit
@require_auth
@timing
def send_verification_email():
    """Email a verification link to the signed-in user."""
    identity = current_identity()
    token = get_auth_service().generate_verify_email_token(identity)
    get_email_service().send_verification_email(identity.email, token)
    return no_content()


@bp.post("/verify-email")
@auth_limit
@require_auth
@timing
def verify_email():
    payload = verify_email_schema.load(json_body())
    get_auth_service().verify_email(VerifyEmailIn(token=payload["token"]))
    return no_content()


@bp.get("/me")
@auth_limit
@require_auth
@require_permission(Permission.VIEW_PROFILE)
@timing
def me():
    """Return the authenticated user."""
    return json_response({"data": user_schema.dump(current_identity())})
