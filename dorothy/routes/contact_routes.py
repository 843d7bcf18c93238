from flask import Blueprint, jsonify, make_response

from dorothy.extensions import limiter
from dorothy.repositories import ContactRepository
from dorothy.routes.common import get_or_404, parse_body, parse_id, query_upper
from dorothy.schemas import ContactCreateSchema, ContactPatchSchema
from dorothy.utils.auth import admin_required

contact_bp = Blueprint("contact", __name__)


@contact_bp.route("/contacts", methods=["POST"])
@limiter.limit("20 per minute")
def create_contact():
    ContactRepository.create(parse_body(ContactCreateSchema).to_attrs())
    return make_response(jsonify({"ok": True}), 201)


@contact_bp.route("/admin/contacts", methods=["GET"])
@admin_required
def list_contacts():
    contacts = ContactRepository.list_contacts(query_upper("status"))
    return jsonify({"contacts": [contact.to_dict() for contact in contacts]})


@contact_bp.route("/admin/contacts/<contact_id>", methods=["PUT", "PATCH"])
@admin_required
def update_contact(contact_id):
    contact_id = parse_id(contact_id)
    attrs = parse_body(ContactPatchSchema).to_attrs()
    contact = ContactRepository.update(get_or_404(ContactRepository, contact_id), attrs)
    return jsonify({"contact": contact.to_dict()})


@contact_bp.route("/admin/contacts/<contact_id>", methods=["DELETE"])
@admin_required
def delete_contact(contact_id):
    ContactRepository.delete(get_or_404(ContactRepository, contact_id))
    return jsonify({"ok": True})
