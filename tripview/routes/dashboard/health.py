"""Healthcheck endpoint."""

from __future__ import annotations

import duckdb
from flask import current_app, jsonify

from . import bp, get_datastore


@bp.route("/health", methods=["GET"])
def health():
    datastore = get_datastore()
    try:
        df = datastore.get(copy=False)
    except (duckdb.Error, OSError) as exc:
        current_app.logger.exception("Healthcheck failed")
        return jsonify({"ok": False, "error": str(exc)}), 500

    date_min, date_max = datastore.date_bounds(df)
    return jsonify(
        {
            "ok": True,
            "rows": int(len(df)),
            "cols": int(len(df.columns)),
            "zones": len(datastore.available_zones(df)),
            "dates": {"min": date_min, "max": date_max},
            "trip_count_filter": bool(current_app.config.get("SHOW_TRIP_COUNT_FILTER")),
        }
    )
