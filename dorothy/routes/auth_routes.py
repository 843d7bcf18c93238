from flask import Blueprint, current_app, jsonify, make_response
from flask_jwt_extended import jwt_required, verify_jwt_in_request, get_jwt

from dorothy.extensions import limiter
from dorothy.models.enums import UserRole
from dorothy.routes.common import parse_body
from dorothy.schemas import LoginSchema, RegisterAdminSchema
from dorothy.services import AuthService
from dorothy.utils.auth import current_identity

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/auth/login", methods=["POST"])
@limiter.limit("10 per minute")
def login():
    data = parse_body(LoginSchema)
    result = AuthService.sign_in(data.email, data.password)
    return jsonify(result), 200


@auth_bp.route("/auth/me", methods=["GET"])
@jwt_required()
def me():
    return jsonify({"user": current_identity()})


@auth_bp.route("/auth/register-admin", methods=["POST"])
def register_admin():
    """Create an admin account.

    Open while ALLOW_ADMIN_SIGNUP is set (first install); otherwise only an
    existing admin may create another one.
    """
    settings = current_app.extensions["settings"]
    if not settings.ALLOW_ADMIN_SIGNUP:
        verify_jwt_in_request()
        if get_jwt().get("role") != UserRole.ADMIN.value:
            return jsonify({"error": "Forbidden"}), 403

    data = parse_body(RegisterAdminSchema)
    result = AuthService.create_admin(data.email, data.password, data.name)
    return make_response(jsonify(result), 201)
