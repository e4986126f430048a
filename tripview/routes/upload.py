import logging

import pandas as pd
from flask import Blueprint, current_app, jsonify, request
from werkzeug.utils import secure_filename

upload_bp = Blueprint("upload", __name__)

ALLOWED_EXTENSIONS = {"csv"}
logger = logging.getLogger("tripview.upload")


def allowed_file(filename: str) -> bool:
    return "." in filename and filename.rsplit(".", 1)[1].lower() in ALLOWED_EXTENSIONS


@upload_bp.route("/upload", methods=["POST"])
def upload_file():
    if "file" not in request.files:
        logger.warning("No file part in request")
        return jsonify({"ok": False, "error": "No file part in request"}), 400

    file = request.files["file"]
    if file.filename == "":
        logger.warning("No file selected")
        return jsonify({"ok": False, "error": "No file selected"}), 400

    filename = secure_filename(file.filename)
    if not allowed_file(filename):
        logger.warning("Unsupported file format: %s", filename)
        return jsonify({"ok": False, "error": "Only .csv files are accepted"}), 400

    try:
        df = pd.read_csv(file.stream)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        logger.error("Error reading upload %s: %s", filename, e, exc_info=True)
        return jsonify({"ok": False, "error": f"Could not read {filename}"}), 400

    datastore = current_app.extensions["datastore"]
    datastore.set_df(df)
    logger.info("Uploaded CSV %s loaded into DataStore (%d rows)", filename, len(df))

    return jsonify({"ok": True, "rows": int(len(datastore.get(copy=False)))})


@upload_bp.route("/try_connection", methods=["POST"])
def try_connection():
    datastore = current_app.extensions["datastore"]
    success = datastore.fetch_remote()
    return jsonify({"ok": success}), (200 if success else 502)
