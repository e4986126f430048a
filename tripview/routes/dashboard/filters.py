"""Filter endpoints for dashboard."""

from __future__ import annotations

from flask import current_app, jsonify, request

from . import bp, get_datastore
from .helpers import build_flags, filter_report
from tripview.utils.filter_constants import FilterUIConfig
from tripview.utils.filter_validation import get_cleared_date_filters, get_cleared_filter_values


@bp.route("/filters/validate", methods=["POST"])
def validate_filters():
    payload = request.get_json(silent=True) or {}
    return jsonify(filter_report(payload))


@bp.route("/filters/options", methods=["GET"])
def filter_options():
    datastore = get_datastore()
    base = datastore.get(copy=False)

    ui = FilterUIConfig(max_visible_zones=int(current_app.config.get("ZONES_MAX_OPTIONS", 20)))
    zones = datastore.available_zones(base) if not base.empty else []
    date_min, date_max = datastore.date_bounds(base) if not base.empty else ("", "")

    return jsonify(
        {
            "zones": zones[: ui.max_visible_zones],
            "zones_total": len(zones),
            "dates": {"min": date_min, "max": date_max},
            "show_trip_count": build_flags(request.args).trip_count_enabled,
            "ui": ui.to_dict(),
            "cleared": {
                "all": get_cleared_filter_values(),
                "dates": get_cleared_date_filters(),
            },
        }
    )
