"""User resource schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, post_load, validate

from authgate.schemas.auth import DISPLAY_NAME_RULES, EMAIL_RULES, PASSWORD_MIN_LENGTH
from authgate.services.users.dto import UserCreateIn, UserUpdateIn


class UserCreateSchema(Schema):
    """Payload for creating a new user from the CRUD surface."""

    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True, validate=EMAIL_RULES)
    password = fields.String(
        required=True, validate=validate.Length(min=PASSWORD_MIN_LENGTH, max=128)
    )
    display_name = fields.String(
        data_key="displayName", required=True, validate=DISPLAY_NAME_RULES
    )
    avatar = fields.String(load_default=None, validate=validate.Length(max=512))
    phone = fields.String(load_default=None, validate=validate.Length(max=32))

    @post_load
    def make_dto(self, data, **kwargs) -> UserCreateIn:
        return UserCreateIn(**data)


class UserUpdateSchema(Schema):
    """Partial update payload; omitted keys stay unchanged."""

    class Meta:
        unknown = EXCLUDE

    email = fields.Email(validate=EMAIL_RULES)
    password = fields.String(validate=validate.Length(min=PASSWORD_MIN_LENGTH, max=128))
    display_name = fields.String(data_key="displayName", validate=DISPLAY_NAME_RULES)
    avatar = fields.String(validate=validate.Length(max=512))
    phone = fields.String(validate=validate.Length(max=32))

    @post_load
    def make_dto(self, data, **kwargs) -> UserUpdateIn:
        return UserUpdateIn(**data)


class UserSchema(Schema):
    """Public representation of a user (the password hash is never dumped)."""

    id = fields.String(required=True)
    email = fields.Email(required=True)
    display_name = fields.String(data_key="displayName", required=True)
    avatar = fields.String(allow_none=True)
    phone = fields.String(allow_none=True)
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
    updated_at = fields.DateTime(data_key="updatedAt", allow_none=True)
