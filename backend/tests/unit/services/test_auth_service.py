# tests/unit/services/test_auth_service.py
from __future__ import annotations

from datetime import timedelta

import pytest

from ficom.models import RefreshToken, RevokedToken, User
from ficom.services import AuthMessage, AuthService, LoginIn, LogoutIn, RefreshIn, RegisterIn
from ficom.services._shared.clock import as_utc, utcnow
from ficom.services._shared.errors import TokenRejected, UserNotFoundAfterUpdate
from tests.factories.refresh_token import RefreshTokenFactory
from tests.factories.user import DEFAULT_PASSWORD, UserFactory


def _count(session, model) -> int:
    return session.query(model).count()


# ------------------------------- Register --------------------------------- #
class TestRegister:
    def test_register_creates_user_and_issues_pair(self, auth_service, validator, session):
        result = auth_service.register(
            RegisterIn(email="a@x.com", password="password123", name="A")
        )

        assert result.is_valid is True
        assert result.code is AuthMessage.SIGNUP_SUCCESS
        assert result.message == "Registration completed"
        assert result.data is not None
        assert result.data.user.email == "a@x.com"
        assert result.data.user.name == "A"

        user = session.query(User).filter_by(email="a@x.com").one()
        assert user.password_hash != "password123"
        assert user.tokens_valid_from is not None

        # The issued access token is immediately usable
        assert validator.validate(result.data.access_token).id == user.id

        record = session.query(RefreshToken).filter_by(token=result.data.refresh_token).one()
        assert record.user_id == user.id
        assert record.is_revoked is False

    def test_duplicate_email_is_rejected(self, auth_service, session):
        """Registering the same email twice fails the second time."""
        first = auth_service.register(RegisterIn(email="a@x.com", password="password123", name="A"))
        second = auth_service.register(RegisterIn(email="a@x.com", password="password123", name="A"))

        assert first.is_valid is True
        assert second.is_valid is False
        assert second.code is AuthMessage.EMAIL_ALREADY_EXISTS
        assert second.data is None
        assert session.query(User).filter_by(email="a@x.com").count() == 1

    def test_short_password_creates_nothing(self, auth_service, session):
        users_before = _count(session, User)

        result = auth_service.register(RegisterIn(email="s@x.com", password="short1", name="S"))

        assert result.is_valid is False
        assert result.code is AuthMessage.PASSWORD_TOO_SHORT
        assert result.message == "Password must be at least 8 characters long"
        assert _count(session, User) == users_before
        assert _count(session, RefreshToken) == 0

    def test_password_of_exactly_eight_chars_is_accepted(self, auth_service):
        result = auth_service.register(RegisterIn(email="e@x.com", password="12345678", name="E"))
        assert result.is_valid is True

    def test_email_check_runs_before_password_check(self, auth_service):
        auth_service.register(RegisterIn(email="o@x.com", password="password123", name="O"))
        result = auth_service.register(RegisterIn(email="o@x.com", password="short", name="O"))
        assert result.code is AuthMessage.EMAIL_ALREADY_EXISTS

    def test_email_is_case_sensitive(self, auth_service):
        auth_service.register(RegisterIn(email="Case@x.com", password="password123", name="C"))
        result = auth_service.register(
            RegisterIn(email="case@x.com", password="password123", name="C")
        )
        assert result.is_valid is True

    @pytest.mark.parametrize("password", ["p" * 80, "é" * 40])
    def test_password_over_72_bytes_registers_and_logs_in(self, auth_service, password):
        result = auth_service.register(RegisterIn(email="long@x.com", password=password, name="L"))

        assert result.is_valid is True
        assert result.code is AuthMessage.SIGNUP_SUCCESS
        login = auth_service.login(LoginIn(email="long@x.com", password=password))
        assert login.is_valid is True

    def test_concurrent_duplicate_insert_maps_to_email_taken(
        self, auth_service, session, monkeypatch
    ):
        from sqlalchemy.exc import IntegrityError

        from ficom.repositories.user import UserRepository

        def _raise(self, instance):
            raise IntegrityError("INSERT INTO users", {}, Exception("UNIQUE constraint failed"))

        monkeypatch.setattr(UserRepository, "add", _raise)

        result = auth_service.register(
            RegisterIn(email="race@x.com", password="password123", name="R")
        )

        assert result.is_valid is False
        assert result.code is AuthMessage.EMAIL_ALREADY_EXISTS
        assert result.data is None
        assert session.query(User).filter_by(email="race@x.com").count() == 0
        assert _count(session, RefreshToken) == 0


# -------------------------------- Login ----------------------------------- #
class TestLogin:
    def test_login_success_returns_pair_and_user(self, auth_service, session):
        user = UserFactory(email="l@x.com")
        session.flush()

        result = auth_service.login(LoginIn(email="l@x.com", password=DEFAULT_PASSWORD))

        assert result.is_valid is True
        assert result.code is AuthMessage.LOGIN_SUCCESS
        assert result.data.user.id == user.id
        assert result.data.access_token
        assert result.data.refresh_token

    def test_unknown_email_and_wrong_password_look_the_same(self, auth_service, session):
        UserFactory(email="l@x.com")
        session.flush()

        unknown = auth_service.login(LoginIn(email="missing@x.com", password=DEFAULT_PASSWORD))
        wrong = auth_service.login(LoginIn(email="l@x.com", password="nope-nope"))

        assert unknown.code is wrong.code is AuthMessage.INVALID_CREDENTIALS
        assert unknown.message == wrong.message == "Email address or password is incorrect"
        assert unknown.data is None and wrong.data is None

    def test_wrong_password_mutates_nothing(self, auth_service, session):
        """A failed login neither moves the cut-off nor touches refresh tokens."""
        registered = auth_service.register(
            RegisterIn(email="a@x.com", password="password123", name="A")
        )
        user = session.query(User).filter_by(email="a@x.com").one()
        valid_from_before = user.tokens_valid_from
        tokens_before = _count(session, RefreshToken)

        result = auth_service.login(LoginIn(email="a@x.com", password="wrong-password"))

        assert result.is_valid is False
        assert result.code is AuthMessage.INVALID_CREDENTIALS
        session.expire_all()
        user = session.query(User).filter_by(email="a@x.com").one()
        assert user.tokens_valid_from == valid_from_before
        assert _count(session, RefreshToken) == tokens_before
        record = session.query(RefreshToken).filter_by(token=registered.data.refresh_token).one()
        assert record.is_revoked is False

    def test_login_moves_tokens_valid_from_to_current_second(
        self, auth_service, session, freeze_time
    ):
        with freeze_time("2024-03-01 08:00:00.750") as frozen:
            UserFactory(email="t@x.com")
            session.flush()
            frozen.tick(timedelta(seconds=5))

            auth_service.login(LoginIn(email="t@x.com", password=DEFAULT_PASSWORD))

        session.expire_all()
        user = session.query(User).filter_by(email="t@x.com").one()
        valid_from = as_utc(user.tokens_valid_from)
        assert valid_from.microsecond == 0
        assert (valid_from.hour, valid_from.minute, valid_from.second) == (8, 0, 5)

    def test_login_invalidates_earlier_access_tokens(
        self, auth_service, validator, freeze_time
    ):
        with freeze_time("2024-01-01 12:00:00") as frozen:
            auth_service.register(RegisterIn(email="p@x.com", password="password123", name="P"))
            frozen.tick(timedelta(seconds=1))
            t1 = auth_service.login(LoginIn(email="p@x.com", password="password123"))
            frozen.tick(timedelta(seconds=1))
            t2 = auth_service.login(LoginIn(email="p@x.com", password="password123"))

            with pytest.raises(TokenRejected) as excinfo:
                validator.validate(t1.data.access_token)
            assert excinfo.value.reason == "stale"
            assert validator.validate(t2.data.access_token).email == "p@x.com"

    def test_second_login_revokes_first_refresh_token(self, auth_service, session):
        UserFactory(email="a@x.com", password="password123")
        session.flush()

        first = auth_service.login(LoginIn(email="a@x.com", password="password123"))
        second = auth_service.login(LoginIn(email="a@x.com", password="password123"))

        assert auth_service.refresh(RefreshIn(second.data.refresh_token)).is_valid is True
        stale = auth_service.refresh(RefreshIn(first.data.refresh_token))
        assert stale.is_valid is False
        assert stale.code is AuthMessage.REFRESH_TOKEN_REVOKED

    def test_login_revokes_every_active_refresh_token_of_user(self, auth_service, session):
        user = UserFactory(email="m@x.com")
        other = UserFactory(email="other@x.com")
        RefreshTokenFactory.create_batch(3, user=user)
        other_rt = RefreshTokenFactory(user=other)
        session.flush()

        result = auth_service.login(LoginIn(email="m@x.com", password=DEFAULT_PASSWORD))

        session.expire_all()
        records = session.query(RefreshToken).filter_by(user_id=user.id).all()
        active = [r for r in records if not r.is_revoked]
        assert len(records) == 4
        assert [r.token for r in active] == [result.data.refresh_token]
        assert session.get(RefreshToken, other_rt.id).is_revoked is False

    def test_user_vanishing_after_update_raises(self, auth_service, session, monkeypatch):
        UserFactory(email="gone@x.com")
        session.flush()

        from ficom.repositories.user import UserRepository

        monkeypatch.setattr(UserRepository, "get", lambda self, entity_id: None)

        with pytest.raises(UserNotFoundAfterUpdate) as excinfo:
            auth_service.login(LoginIn(email="gone@x.com", password=DEFAULT_PASSWORD))
        assert excinfo.value.code == "USER_NOT_FOUND_AFTER_UPDATE"


# ------------------------------- Refresh ---------------------------------- #
class TestRefresh:
    def test_refresh_rotates_and_blocks_reuse(self, auth_service, session):
        """First refresh rotates; presenting the old token again is rejected."""
        r1 = auth_service.register(RegisterIn(email="r@x.com", password="password123", name="R"))

        r2 = auth_service.refresh(RefreshIn(refresh_token=r1.data.refresh_token))
        assert r2.is_valid is True
        assert r2.code is AuthMessage.TOKEN_REFRESH_SUCCESS
        assert r2.data.refresh_token != r1.data.refresh_token

        reuse = auth_service.refresh(RefreshIn(refresh_token=r1.data.refresh_token))
        assert reuse.is_valid is False
        assert reuse.code is AuthMessage.REFRESH_TOKEN_REVOKED

        old = session.query(RefreshToken).filter_by(token=r1.data.refresh_token).one()
        new = session.query(RefreshToken).filter_by(token=r2.data.refresh_token).one()
        assert old.is_revoked is True
        assert new.is_revoked is False

    def test_refresh_keeps_other_sessions_and_cutoff(self, auth_service, session):
        user = UserFactory(email="k@x.com")
        sibling = RefreshTokenFactory(user=user)
        presented = RefreshTokenFactory(user=user)
        session.flush()
        valid_from_before = as_utc(user.tokens_valid_from)

        result = auth_service.refresh(RefreshIn(refresh_token=presented.token))

        assert result.is_valid is True
        session.expire_all()
        assert session.get(RefreshToken, sibling.id).is_revoked is False
        assert session.get(RefreshToken, presented.id).is_revoked is True
        assert as_utc(session.get(User, user.id).tokens_valid_from) == valid_from_before

    def test_access_token_survives_refresh(self, auth_service, validator):
        """The access token in use before a refresh stays valid until it expires."""
        r1 = auth_service.register(RegisterIn(email="w@x.com", password="password123", name="W"))
        auth_service.refresh(RefreshIn(refresh_token=r1.data.refresh_token))

        assert validator.validate(r1.data.access_token).email == "w@x.com"

    def test_unknown_token_is_invalid(self, auth_service):
        result = auth_service.refresh(RefreshIn(refresh_token="00000000-0000-4000-8000-000000000000"))
        assert result.is_valid is False
        assert result.code is AuthMessage.INVALID_REFRESH_TOKEN

    def test_empty_token_is_invalid(self, auth_service):
        result = auth_service.refresh(RefreshIn(refresh_token=""))
        assert result.code is AuthMessage.INVALID_REFRESH_TOKEN

    def test_expired_token_is_rejected_even_if_not_revoked(self, auth_service, session):
        record = RefreshTokenFactory(expires_at=utcnow() - timedelta(seconds=1))
        session.flush()

        result = auth_service.refresh(RefreshIn(refresh_token=record.token))

        assert result.is_valid is False
        assert result.code is AuthMessage.REFRESH_TOKEN_EXPIRED
        session.expire_all()
        assert session.get(RefreshToken, record.id).is_revoked is False

    def test_revoked_check_wins_over_expiry(self, auth_service, session):
        record = RefreshTokenFactory(
            expires_at=utcnow() - timedelta(days=1),
            is_revoked=True,
        )
        session.flush()

        result = auth_service.refresh(RefreshIn(refresh_token=record.token))
        assert result.code is AuthMessage.REFRESH_TOKEN_REVOKED

    def test_token_is_usable_up_to_its_expiry_instant(self, auth_service, session, freeze_time):
        with freeze_time("2024-05-01 10:00:00") as frozen:
            registered = auth_service.register(
                RegisterIn(email="x@x.com", password="password123", name="X")
            )
            frozen.move_to("2024-05-08 10:00:00")
            assert auth_service.refresh(RefreshIn(registered.data.refresh_token)).is_valid

    def test_token_past_expiry_instant_is_expired(self, auth_service, freeze_time):
        with freeze_time("2024-05-01 10:00:00") as frozen:
            registered = auth_service.register(
                RegisterIn(email="y@x.com", password="password123", name="Y")
            )
            frozen.move_to("2024-05-08 10:00:01")
            result = auth_service.refresh(RefreshIn(registered.data.refresh_token))
            assert result.code is AuthMessage.REFRESH_TOKEN_EXPIRED


# -------------------------------- Logout ---------------------------------- #
class TestLogout:
    def test_logout_revokes_refresh_and_denylists_access(self, auth_service, validator, session):
        r1 = auth_service.register(RegisterIn(email="o@x.com", password="password123", name="O"))

        result = auth_service.logout(
            LogoutIn(access_token=r1.data.access_token, refresh_token=r1.data.refresh_token)
        )

        assert result.is_valid is True
        assert result.code is AuthMessage.LOGOUT_SUCCESS
        assert _count(session, RevokedToken) == 1
        refreshed = auth_service.refresh(RefreshIn(r1.data.refresh_token))
        assert refreshed.code is AuthMessage.REFRESH_TOKEN_REVOKED
        with pytest.raises(TokenRejected) as excinfo:
            validator.validate(r1.data.access_token)
        assert excinfo.value.reason == "revoked"

    def test_logout_is_idempotent(self, auth_service, session):
        r1 = auth_service.register(RegisterIn(email="i@x.com", password="password123", name="I"))
        dto = LogoutIn(access_token=r1.data.access_token, refresh_token=r1.data.refresh_token)

        assert auth_service.logout(dto).is_valid
        assert auth_service.logout(dto).is_valid
        assert _count(session, RevokedToken) == 1

    def test_logout_ignores_garbage(self, auth_service, session):
        result = auth_service.logout(LogoutIn(access_token="garbage", refresh_token="unknown"))
        assert result.is_valid is True
        assert _count(session, RevokedToken) == 0

    def test_logout_without_tokens_succeeds(self, auth_service):
        assert auth_service.logout(LogoutIn()).code is AuthMessage.LOGOUT_SUCCESS

    def test_logout_uses_injected_denylist(self, hasher, issuer, denylist, session):
        from ficom.infra.jwt.flask_jwt_token_provider import JWTTokenProvider
        from ficom.services import TokenValidator

        service = AuthService(hasher=hasher, issuer=issuer, denylist=denylist)
        validator = TokenValidator(provider=JWTTokenProvider(), denylist=denylist)
        r1 = service.register(RegisterIn(email="d@x.com", password="password123", name="D"))

        service.logout(LogoutIn(access_token=r1.data.access_token))

        assert _count(session, RevokedToken) == 0
        with pytest.raises(TokenRejected):
            validator.validate(r1.data.access_token)
