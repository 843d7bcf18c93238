from flask import Blueprint, jsonify

from dorothy.services import StatsService

statistics_bp = Blueprint("statistics", __name__)


@statistics_bp.route("/statistics", methods=["GET"])
def get_statistics():
    return jsonify(StatsService.public_counts())
