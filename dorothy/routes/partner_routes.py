from flask import Blueprint, jsonify, make_response

from dorothy.models import Partner
from dorothy.repositories import PartnerRepository
from dorothy.routes.common import get_or_404, parse_body, parse_id
from dorothy.schemas import PartnerCreateSchema, PartnerUpdateSchema
from dorothy.utils.auth import admin_required

partner_bp = Blueprint("partner", __name__)


@partner_bp.route("/partners", methods=["GET"])
def list_partners():
    partners = PartnerRepository.list_active()
    return jsonify({"partners": [partner.to_dict() for partner in partners]})


@partner_bp.route("/partners/<partner_id>", methods=["GET"])
def get_partner(partner_id):
    return jsonify({"partner": get_or_404(PartnerRepository, partner_id).to_dict()})


@partner_bp.route("/admin/partners", methods=["GET"])
@admin_required
def admin_list_partners():
    partners = Partner.query.order_by(Partner.sort_order.asc()).all()
    return jsonify({"partners": [partner.to_dict() for partner in partners]})


@partner_bp.route("/admin/partners", methods=["POST"])
@admin_required
def create_partner():
    partner = PartnerRepository.create(parse_body(PartnerCreateSchema).to_attrs())
    return make_response(jsonify({"partner": partner.to_dict()}), 201)


@partner_bp.route("/admin/partners/<partner_id>", methods=["PUT", "PATCH"])
@admin_required
def update_partner(partner_id):
    partner_id = parse_id(partner_id)
    attrs = parse_body(PartnerUpdateSchema).to_attrs()
    partner = PartnerRepository.update(get_or_404(PartnerRepository, partner_id), attrs)
    return jsonify({"partner": partner.to_dict()})


@partner_bp.route("/admin/partners/<partner_id>", methods=["DELETE"])
@admin_required
def delete_partner(partner_id):
    PartnerRepository.delete(get_or_404(PartnerRepository, partner_id))
    return jsonify({"ok": True})
