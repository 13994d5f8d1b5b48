"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, ValidationError, fields, validate

from ficom.services.credentials import BCRYPT_MAX_BYTES


def _bcrypt_length(value: str) -> None:
    if len(value.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValidationError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes.")


class RegisterSchema(Schema):
    """Input payload for account registration.

    The minimum password length is a business rule reported through the
    result envelope, so it is not enforced here.
    """

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=_bcrypt_length)
    name = fields.String(required=True, validate=validate.Length(min=1, max=100))


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=1024))


class RefreshSchema(Schema):
    """Input payload for rotating a refresh token.

    ``refreshToken`` may be omitted when the session cookie carries it.
    """

    refresh_token = fields.String(data_key="refreshToken", load_default=None)


class UserSchema(Schema):
    """Public representation of a user."""

    id = fields.Integer(required=True)
    email = fields.String(required=True)
    name = fields.String(required=True)
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
    updated_at = fields.DateTime(data_key="updatedAt", allow_none=True)


class AuthPayloadSchema(Schema):
    """Token pair plus the authenticated user."""

    access_token = fields.String(data_key="accessToken", required=True)
    refresh_token = fields.String(data_key="refreshToken", required=True)
    user = fields.Nested(UserSchema, required=True)


class AuthEnvelopeSchema(Schema):
    """``{isValid, message, code, data}`` envelope returned by every auth mutation."""

    is_valid = fields.Boolean(data_key="isValid", required=True)
    message = fields.String(required=True)
    code = fields.Method("get_code")
    data = fields.Nested(AuthPayloadSchema, allow_none=True)

    def get_code(self, obj) -> str:
        return obj.code.value
