from flask import Blueprint, current_app, jsonify, make_response, redirect, request

from dorothy.exceptions import InvalidBodyError
from dorothy.extensions import limiter
from dorothy.routes.common import parse_body, query_upper
from dorothy.schemas import RegistrationCreateSchema, RegistrationPatchSchema
from dorothy.services import RegistrationService
from dorothy.utils.auth import admin_required, current_identity

registration_bp = Blueprint("registration", __name__)

MAX_PAGE_SIZE = 100


def _service() -> RegistrationService:
    return current_app.extensions["registration_service"]


def _positive_int_arg(name, default):
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise InvalidBodyError("Invalid query")
    if value < 1:
        raise InvalidBodyError("Invalid query")
    return value


@registration_bp.route("/registrations", methods=["POST"])
@limiter.limit("20 per minute")
def create_registration():
    data = parse_body(RegistrationCreateSchema)
    registration = _service().register(data.to_attrs())

    return make_response(
        jsonify(
            {
                "message": "Inscription créée. Veuillez confirmer votre email.",
                "registration": {
                    "id": registration.id,
                    "email": registration.email,
                    "status": registration.status,
                },
            }
        ),
        201,
    )


@registration_bp.route("/registrations/confirm-email", methods=["GET"])
def confirm_email():
    # Reached from the emailed link: always answer with a redirect.
    token = request.args.get("token", "").strip()
    return redirect(_service().confirm_email(token))


@registration_bp.route("/admin/registrations", methods=["GET"])
@admin_required
def list_registrations():
    page = _positive_int_arg("page", 1)
    limit = min(_positive_int_arg("limit", 20), MAX_PAGE_SIZE)
    event_id = _positive_int_arg("event_id", None)

    result = RegistrationService.list_registrations(
        page, limit, status=query_upper("status"), event_id=event_id
    )
    return jsonify(result)


@registration_bp.route("/admin/registrations/<registration_id>", methods=["PATCH"])
@admin_required
def update_registration_status(registration_id):
    data = parse_body(RegistrationPatchSchema)
    _service().set_status(registration_id, data.status, current_identity()["id"])
    return jsonify({"ok": True})
