"""User endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from authgate.api.deps import build_users_service, json_response, require_auth, timing
from authgate.schemas import UserCreateSchema, UserSchema, UserUpdateSchema

bp = Blueprint("users", __name__, url_prefix="/users")

user_schema = UserSchema()
user_list_schema = UserSchema(many=True)
user_create_schema = UserCreateSchema()
user_update_schema = UserUpdateSchema()


@bp.get("")
@require_auth
@timing
def list_users():
    """Return every active user."""

    items = build_users_service().list_users()
    return json_response({"data": user_list_schema.dump(items)})


@bp.post("")
@require_auth
@timing
def create_user():
    """Create a new user."""

    dto = user_create_schema.load(request.get_json(silent=True) or {})
    user = build_users_service().create_user(dto)
    return json_response({"data": user_schema.dump(user)}, status=201)


@bp.get("/<string:user_id>")
@require_auth
@timing
def get_user(user_id: str):
    user = build_users_service().get_user(user_id)
    return json_response({"data": user_schema.dump(user)})


@bp.patch("/<string:user_id>")
@require_auth
@timing
def update_user(user_id: str):
    """Apply a partial update to a user."""

    dto = user_update_schema.load(request.get_json(silent=True) or {})
    user = build_users_service().update_user(user_id, dto)
    return json_response({"data": user_schema.dump(user)})


@bp.delete("/<string:user_id>")
@require_auth
@timing
def delete_user(user_id: str):
    """Soft-delete a user."""

    result = build_users_service().delete_user(user_id)
    return json_response(result)
