from datetime import timedelta
from functools import wraps

from flask import jsonify
from flask_jwt_extended import (
    create_access_token,
    get_jwt,
    get_jwt_identity,
    verify_jwt_in_request,
)

from dorothy.extensions import jwt
from dorothy.models.enums import UserRole

TOKEN_LIFETIME = timedelta(hours=24)


def issue_token(user):
    """Sign a session token carrying the user's id, email, name and role."""
    return create_access_token(
        identity=str(user.id),
        additional_claims={"email": user.email, "name": user.name, "role": user.role},
        expires_delta=TOKEN_LIFETIME,
    )


def current_identity():
    """Identity of the authenticated caller, decoded from the bearer token."""
    claims = get_jwt()
    return {
        "id": int(get_jwt_identity()),
        "email": claims.get("email"),
        "name": claims.get("name"),
        "role": claims.get("role"),
    }


def admin_required(fn):
    """Require a valid bearer token whose role is ADMIN."""

    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        if get_jwt().get("role") != UserRole.ADMIN.value:
            return jsonify({"error": "Forbidden"}), 403
        return fn(*args, **kwargs)

    return wrapper


@jwt.unauthorized_loader
def missing_token_callback(reason):
    return jsonify({"error": "Missing Authorization Bearer token"}), 401


@jwt.invalid_token_loader
def invalid_token_callback(reason):
    return jsonify({"error": "Invalid token"}), 401


@jwt.expired_token_loader
def expired_token_callback(jwt_header, jwt_payload):
    return jsonify({"error": "Invalid token"}), 401
