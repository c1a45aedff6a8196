"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load, validate

from authgate.services.auth.dto import (
    LoginIn,
    PasswordResetIn,
    PasswordResetRequestIn,
    RegisterIn,
)

PASSWORD_MIN_LENGTH = 6


def _dotted_domain(value: str) -> None:
    """Reject addresses such as ``a@localhost`` that the user model refuses."""
    if "." not in value.rpartition("@")[2]:
        raise ValidationError("Email domain must contain a dot.")


# Rules for values persisted on the user model
EMAIL_RULES = [validate.Length(max=254), _dotted_domain]
DISPLAY_NAME_RULES = [
    validate.Length(min=1, max=100),
    validate.Regexp(r".*\S", error="Display name must not be blank."),
]


class _InputSchema(Schema):
    class Meta:
        unknown = EXCLUDE


class RegisterSchema(_InputSchema):
    """Input payload for account registration."""

    email = fields.Email(required=True, validate=EMAIL_RULES)
    password = fields.String(
        required=True, validate=validate.Length(min=PASSWORD_MIN_LENGTH, max=128)
    )
    display_name = fields.String(
        data_key="displayName", load_default=None, validate=DISPLAY_NAME_RULES
    )
    avatar = fields.String(load_default=None, validate=validate.Length(max=512))
    phone = fields.String(load_default=None, validate=validate.Length(max=32))

    @post_load
    def make_dto(self, data, **kwargs) -> RegisterIn:
        return RegisterIn(**data)


class LoginSchema(_InputSchema):
    """Input payload for authenticating a user."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    # No minimum: a short wrong password must fail as bad credentials, not validation
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))

    @post_load
    def make_dto(self, data, **kwargs) -> LoginIn:
        return LoginIn(**data)


class RefreshTokenBodySchema(_InputSchema):
    """Optional body token for ``/refresh`` and ``/logout``; the header wins."""

    refresh_token = fields.String(data_key="refreshToken", load_default=None)


class PasswordResetRequestSchema(_InputSchema):
    email = fields.Email(required=True, validate=validate.Length(max=254))

    @post_load
    def make_dto(self, data, **kwargs) -> PasswordResetRequestIn:
        return PasswordResetRequestIn(**data)


class PasswordResetSchema(_InputSchema):
    """Input payload completing a password reset."""

    token = fields.String(required=True, validate=validate.Length(min=1))
    new_password = fields.String(
        data_key="newPassword",
        required=True,
        validate=validate.Length(min=PASSWORD_MIN_LENGTH, max=128),
    )

    @post_load
    def make_dto(self, data, **kwargs) -> PasswordResetIn:
        return PasswordResetIn(**data)


class TokenPairSchema(Schema):
    """Response payload containing both tokens."""

    access_token = fields.String(data_key="accessToken", required=True)
    refresh_token = fields.String(data_key="refreshToken", required=True)


class PasswordResetRequestResponseSchema(Schema):
    """``token`` is only present when the deployment exposes it."""

    success = fields.Boolean(required=True)
    token = fields.String()


class MeSchema(Schema):
    """Identity claims of the current access token."""

    id = fields.String(attribute="sub", required=True)
    email = fields.String(required=True)
    display_name = fields.String(attribute="name", data_key="displayName", allow_none=True)
