from flask import Blueprint, jsonify, make_response, request

from dorothy.repositories import TeamRepository
from dorothy.routes.common import get_or_404, parse_body, parse_id
from dorothy.schemas import TeamCreateSchema, TeamUpdateSchema
from dorothy.utils.auth import admin_required

team_bp = Blueprint("team", __name__)


@team_bp.route("/team", methods=["GET"])
def list_team():
    member_id = request.args.get("id")
    if member_id:
        return jsonify({"member": get_or_404(TeamRepository, member_id).to_dict()})

    members = TeamRepository.list_active()
    return jsonify({"teamMembers": [member.to_dict() for member in members]})


@team_bp.route("/team/<member_id>", methods=["GET"])
def get_member(member_id):
    return jsonify({"member": get_or_404(TeamRepository, member_id).to_dict()})


@team_bp.route("/admin/team", methods=["GET"])
@admin_required
def admin_list_team():
    return jsonify([member.to_admin_dict() for member in TeamRepository.list_all()])


@team_bp.route("/admin/team", methods=["POST"])
@admin_required
def create_member():
    member = TeamRepository.create(parse_body(TeamCreateSchema).to_attrs())
    return make_response(jsonify({"member": member.to_dict()}), 201)


@team_bp.route("/admin/team/<member_id>", methods=["PUT", "PATCH"])
@admin_required
def update_member(member_id):
    member_id = parse_id(member_id)
    attrs = parse_body(TeamUpdateSchema).to_attrs()
    member = TeamRepository.update(get_or_404(TeamRepository, member_id), attrs)
    return jsonify({"member": member.to_dict()})


@team_bp.route("/admin/team/<member_id>", methods=["DELETE"])
@admin_required
def delete_member(member_id):
    TeamRepository.delete(get_or_404(TeamRepository, member_id))
    return jsonify({"ok": True})
