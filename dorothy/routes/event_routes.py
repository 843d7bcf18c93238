from flask import Blueprint, jsonify, request, make_response

from dorothy.exceptions import ConflictError
from dorothy.models.enums import EventStatus
from dorothy.repositories import EventRepository
from dorothy.routes.common import get_or_404, parse_body, parse_id, query_upper
from dorothy.schemas import EventCreateSchema, EventUpdateSchema
from dorothy.utils.auth import admin_required, current_identity

event_bp = Blueprint("event", __name__)


@event_bp.route("/events", methods=["GET"])
def get_all_events():
    status = query_upper("status", EventStatus.PUBLISHED.value)
    category = query_upper("category")

    events = [event.to_dict() for event in EventRepository.list_events(status, category)]

    # Some pages expect a bare array.
    if request.args.get("format") == "array":
        return jsonify(events)
    return jsonify({"events": events})


@event_bp.route("/events/<event_id>", methods=["GET"])
def get_event(event_id):
    event = get_or_404(EventRepository, event_id)
    return jsonify({"event": event.to_dict()})


@event_bp.route("/admin/events", methods=["GET"])
@admin_required
def admin_list_events():
    status = query_upper("status")
    category = query_upper("category")
    events = EventRepository.list_events(status, category)
    return jsonify({"events": [event.to_dict() for event in events]})


@event_bp.route("/admin/events", methods=["POST"])
@admin_required
def create_event():
    attrs = parse_body(EventCreateSchema).to_attrs()
    attrs["created_by_id"] = current_identity()["id"]

    event = EventRepository.create(attrs)
    return make_response(jsonify({"event": event.to_dict()}), 201)


@event_bp.route("/admin/events/<event_id>", methods=["PUT", "PATCH"])
@admin_required
def update_event(event_id):
    event_id = parse_id(event_id)
    attrs = parse_body(EventUpdateSchema).to_attrs()
    event = get_or_404(EventRepository, event_id)

    event = EventRepository.update(event, attrs)
    return jsonify({"event": event.to_dict()})


@event_bp.route("/admin/events/<event_id>", methods=["DELETE"])
@admin_required
def delete_event(event_id):
    event = get_or_404(EventRepository, event_id)
    if event.registrations:
        # Registrations keep their history; unpublish the event instead.
        raise ConflictError("Event has registrations")
    EventRepository.delete(event)
    return jsonify({"ok": True})
