"""Download endpoints for dashboard."""

from __future__ import annotations

import io
from datetime import datetime, timezone

from flask import Response, request

from . import bp, get_datastore
from .helpers import build_flags, build_state


@bp.route("/download-csv", methods=["GET"])
def download_csv():
    """Download the entire filtered dataset as CSV."""
    datastore = get_datastore()
    base = datastore.get(copy=False)

    filtered = (
        datastore.filtered(build_state(request.args), build_flags(request.args))
        if not base.empty
        else base
    )

    buf = io.StringIO()
    filtered.to_csv(buf, index=False, date_format="%Y-%m-%d")
    buf.seek(0)

    ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    filename = f"trips_{ts}.csv"

    return Response(
        buf.getvalue(),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
