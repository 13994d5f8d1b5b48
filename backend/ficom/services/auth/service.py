from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError

from ficom.models.user import User
from ficom.services._shared.base import BaseService
from ficom.services._shared.clock import as_utc, floor_to_second, utcnow
from ficom.services._shared.errors import InvalidTokenError, UserNotFoundAfterUpdate
from ficom.services._shared.ports import TokenDenylistStore
from ficom.services.auth.dto import (
    MIN_PASSWORD_LENGTH,
    AuthPayload,
    AuthResult,
    LoginIn,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    UserOut,
)
from ficom.services.auth.messages import AuthMessage
from ficom.services.auth.tokens import TokenIssuer, subject_user_id
from ficom.services.credentials import CredentialHasher
from ficom.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)


class AuthService(BaseService):
    """
    Authentication lifecycle service (register / login / refresh / logout).

    Login-session states: non-existent → active → expired | revoked.

    - A login moves the user's ``tokens_valid_from`` to the current second,
      which makes every access token issued before it stale, and revokes all
      of the user's active refresh tokens.
    - A refresh revokes only the presented refresh token. The access token
      that was in use stays valid until it expires on its own.
    - Business rejections are returned as :class:`AuthResult` failures;
      infrastructure errors propagate.
    """

    def __init__(
        self,
        *,
        hasher: CredentialHasher,
        issuer: TokenIssuer,
        denylist: TokenDenylistStore | None = None,
    ) -> None:
        """
        :param hasher: Password hasher.
        :param issuer: Token pair issuer.
        :param denylist: Access-token denylist used by logout. ``None`` keeps
            the denylist in the relational store of the Unit of Work.
        """
        self.hasher = hasher
        self.issuer = issuer
        self.denylist = denylist

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> AuthResult:
        """
        Create an account and sign it in.

        :param dto: Registration input.
        :returns: ``SIGNUP_SUCCESS`` with a token pair, or
            ``EMAIL_ALREADY_EXISTS`` / ``PASSWORD_TOO_SHORT``.
        """
        email = dto.email.strip()
        with self.rw_uow() as uow:
            if uow.users.exists_by_email(email):
                log.info("auth.register_rejected", extra={"reason": "email_taken"})
                return AuthResult.fail(AuthMessage.EMAIL_ALREADY_EXISTS)

            if len(dto.password) < MIN_PASSWORD_LENGTH:
                log.info("auth.register_rejected", extra={"reason": "password_too_short"})
                return AuthResult.fail(AuthMessage.PASSWORD_TOO_SHORT)

            now = utcnow()
            user = User(
                email=email,
                password_hash=self.hasher.hash(dto.password),
                name=dto.name,
                tokens_valid_from=floor_to_second(now),
            )
            try:
                uow.users.add(user)
            except IntegrityError:
                # Lost a race against a concurrent registration of the same email
                uow.rollback()
                log.info("auth.register_rejected", extra={"reason": "email_taken"})
                return AuthResult.fail(AuthMessage.EMAIL_ALREADY_EXISTS)

            payload = self._issue_pair(uow, user, now=now)

        log.info("auth.register_succeeded", extra={"user_id": payload.user.id})
        return AuthResult.ok(AuthMessage.SIGNUP_SUCCESS, payload)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> AuthResult:
        """
        Verify credentials, invalidate earlier sessions and issue a new pair.

        Unknown email and wrong password produce the same
        ``INVALID_CREDENTIALS`` result and mutate nothing.

        :param dto: Login input.
        :raises UserNotFoundAfterUpdate: If the user disappears between the
            update and the re-read.
        """
        with self.rw_uow() as uow:
            user = uow.users.get_by_email(dto.email)
            if user is None or not self.hasher.verify(dto.password, user.password_hash):
                log.warning("auth.login_failed", extra={"reason": "invalid_credentials"})
                return AuthResult.fail(AuthMessage.INVALID_CREDENTIALS)

            user_id = user.id
            now = utcnow()
            uow.users.update_tokens_valid_from(user_id, floor_to_second(now))
            revoked = uow.refresh_tokens.revoke_all_for_user(user_id)

            fresh = uow.users.get(user_id)
            if fresh is None:
                raise UserNotFoundAfterUpdate(user_id)

            payload = self._issue_pair(uow, fresh, now=now)

        log.info("auth.login_succeeded", extra={"user_id": user_id, "revoked": revoked})
        return AuthResult.ok(AuthMessage.LOGIN_SUCCESS, payload)

    # ------------------------------------------------------------------ #
    # Refresh (rotation)
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> AuthResult:
        """
        Exchange a refresh token for a new pair, revoking the presented one.

        Checks run in order: unknown → ``INVALID_REFRESH_TOKEN``, revoked →
        ``REFRESH_TOKEN_REVOKED``, past expiry → ``REFRESH_TOKEN_EXPIRED``.

        :param dto: Refresh input.
        """
        with self.rw_uow() as uow:
            record = None
            if dto.refresh_token:
                record = uow.refresh_tokens.get_by_token(dto.refresh_token)
            if record is None:
                log.warning("auth.refresh_failed", extra={"reason": "unknown"})
                return AuthResult.fail(AuthMessage.INVALID_REFRESH_TOKEN)

            if record.is_revoked:
                log.warning(
                    "auth.refresh_failed",
                    extra={"reason": "revoked", "user_id": record.user_id},
                )
                return AuthResult.fail(AuthMessage.REFRESH_TOKEN_REVOKED)

            now = utcnow()
            if now > as_utc(record.expires_at):
                log.info(
                    "auth.refresh_failed",
                    extra={"reason": "expired", "user_id": record.user_id},
                )
                return AuthResult.fail(AuthMessage.REFRESH_TOKEN_EXPIRED)

            user = record.user
            if not uow.refresh_tokens.revoke(record.id):
                # A concurrent rotation consumed it first
                log.warning(
                    "auth.refresh_failed",
                    extra={"reason": "revoked", "user_id": record.user_id},
                )
                return AuthResult.fail(AuthMessage.REFRESH_TOKEN_REVOKED)

            payload = self._issue_pair(uow, user, now=now)

        log.info("auth.refresh_succeeded", extra={"user_id": payload.user.id})
        return AuthResult.ok(AuthMessage.TOKEN_REFRESH_SUCCESS, payload)

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, dto: LogoutIn) -> AuthResult:
        """
        Revoke the presented refresh token and denylist the access token.

        Missing, unknown, expired or malformed tokens are ignored; logout
        always succeeds.
        """
        user_id: int | None = None
        with self.rw_uow() as uow:
            if dto.refresh_token:
                record = uow.refresh_tokens.get_by_token(dto.refresh_token)
                if record is not None:
                    user_id = record.user_id
                    uow.refresh_tokens.revoke(record.id)

            claims = self._decode_quietly(dto.access_token)
            if claims is not None and claims.get("jti") and claims.get("exp"):
                owner = subject_user_id(claims)
                user_id = user_id or owner
                denylist = self.denylist or uow.revoked_tokens
                denylist.revoke_jti(
                    str(claims["jti"]),
                    datetime.fromtimestamp(int(claims["exp"]), UTC),
                    user_id=owner,
                )

        log.info("auth.logout", extra={"user_id": user_id})
        return AuthResult.ok(AuthMessage.LOGOUT_SUCCESS)

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def _issue_pair(self, uow: SQLAlchemyUnitOfWork, user: User, *, now: datetime) -> AuthPayload:
        access = self.issuer.issue_access_token(user.id, user.email)
        refresh = self.issuer.issue_refresh_token(uow.refresh_tokens, user.id, now=now)
        return AuthPayload(
            access_token=access,
            refresh_token=refresh.token,
            user=UserOut.from_model(user),
        )

    def _decode_quietly(self, token: str | None) -> dict | None:
        if not token:
            return None
        try:
            return self.issuer.provider.decode(token)
        except InvalidTokenError:
            return None
