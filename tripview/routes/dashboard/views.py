"""Filtered trip report rows."""

from __future__ import annotations

import pandas as pd
from flask import jsonify, request

from . import bp, get_datastore
from .helpers import build_flags, build_state, filter_report

DEFAULT_PAGE_SIZE = 100


def _records(df: pd.DataFrame, date_col: str) -> list:
    out = df.copy()
    if date_col in out.columns:
        dates = pd.to_datetime(out[date_col], errors="coerce")
        out[date_col] = dates.dt.date.map(lambda d: d.isoformat() if pd.notna(d) else None)
    out = out.astype(object).where(pd.notna(out), None)
    return out.to_dict(orient="records")


@bp.route("/reports", methods=["GET"])
def reports():
    datastore = get_datastore()
    base = datastore.get(copy=False)

    state = build_state(request.args)
    flags = build_flags(request.args)
    report = filter_report(request.args)

    try:
        limit = int(request.args.get("limit") or DEFAULT_PAGE_SIZE)
    except (TypeError, ValueError):
        limit = DEFAULT_PAGE_SIZE
    limit = max(limit, 1)

    # an out-of-order range is reported, not enforced
    after = datastore.filtered(state, flags) if not base.empty else base

    return jsonify(
        {
            "rows": _records(after.head(limit), datastore.date_col),
            "total_rows": int(len(after)),
            "base_rows": int(len(base)),
            "summary": datastore.compute_summary(after),
            "filters": report,
        }
    )
