from flask import Blueprint, Response, jsonify, request

from dorothy.routes.common import query_upper
from dorothy.services import StatsService
from dorothy.services.stats_service import EXPORT_TYPES
from dorothy.utils.auth import admin_required
from dorothy.utils.dates import utcnow

admin_bp = Blueprint("admin", __name__)


@admin_bp.route("/admin/stats", methods=["GET"])
@admin_required
def dashboard():
    """Counters and recent activity for the admin dashboard"""
    return jsonify(StatsService.dashboard())


@admin_bp.route("/admin/export", methods=["GET"])
@admin_required
def export():
    """Export events or registrations as JSON or CSV"""
    export_type = request.args.get("type")
    if export_type not in EXPORT_TYPES:
        return jsonify({"error": "Invalid export type (events or registrations)"}), 400

    rows = StatsService.export_rows(
        export_type, status=query_upper("status"), category=query_upper("category")
    )

    if request.args.get("format", "json") == "csv":
        filename = f"{export_type}_export_{utcnow().date().isoformat()}.csv"
        return Response(
            StatsService.to_csv(rows),
            mimetype="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    return jsonify(StatsService.export_payload(export_type, rows))
