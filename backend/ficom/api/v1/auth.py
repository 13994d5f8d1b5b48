"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, g, request, session

from ficom.api.deps import (
    SESSION_REFRESH_KEY,
    build_auth_service,
    forget_tokens,
    json_response,
    remember_tokens,
    request_access_token,
    require_auth,
    timing,
)
from ficom.schemas import (
    AuthEnvelopeSchema,
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    UserSchema,
)
from ficom.services import AuthResult, LoginIn, LogoutIn, RefreshIn, RegisterIn, UserOut
from ficom.services._shared.errors import ServiceError

bp = Blueprint("auth", __name__, url_prefix="/auth")

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
envelope_schema = AuthEnvelopeSchema()
user_schema = UserSchema()


def _envelope(result: AuthResult, *, success_status: int = 200):
    """Dump ``result`` and keep the session cookie in sync with it."""

    if result.is_valid and result.data is not None:
        remember_tokens(result.data.access_token, result.data.refresh_token)
    status = success_status if result.is_valid else 200
    return json_response(envelope_schema.dump(result), status=status)


@bp.post("/register")
@timing
def register():
    """Create an account; 201 with a token pair, or a rejection envelope."""

    data = register_schema.load(request.get_json(silent=True) or {})
    service = build_auth_service()
    result = service.register(
        RegisterIn(email=data["email"], password=data["password"], name=data["name"])
    )
    return _envelope(result, success_status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and issue a fresh token pair."""

    data = login_schema.load(request.get_json(silent=True) or {})
    service = build_auth_service()
    try:
        result = service.login(LoginIn(email=data["email"], password=data["password"]))
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return _envelope(result)


@bp.post("/refresh")
@timing
def refresh():
    """Rotate a refresh token taken from the body or the session cookie."""

    data = refresh_schema.load(request.get_json(silent=True) or {})
    token = data.get("refresh_token") or session.get(SESSION_REFRESH_KEY) or ""
    service = build_auth_service()
    result = service.refresh(RefreshIn(refresh_token=token))
    return _envelope(result)


@bp.post("/logout")
@timing
def logout():
    """Revoke the current tokens and clear the session cookie."""

    data = refresh_schema.load(request.get_json(silent=True) or {})
    refresh_token = data.get("refresh_token") or session.get(SESSION_REFRESH_KEY)
    service = build_auth_service()
    result = service.logout(
        LogoutIn(access_token=request_access_token(), refresh_token=refresh_token)
    )
    forget_tokens()
    return _envelope(result)


@bp.get("/me")
@require_auth
@timing
def me():
    """Return the authenticated user."""

    return json_response({"data": user_schema.dump(UserOut.from_model(g.current_user))})
