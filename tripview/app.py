"""Application factory for the trip report dashboard."""

from __future__ import annotations

import logging

from typing import Any, Mapping, Optional, Union

from flask import Flask

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("tripview")

from .config import Config
from .routes.dashboard import bp as dashboard_bp
from .routes.upload import upload_bp
from .services.datastore import DataStore


def create_app(
    config_object: Optional[Union[str, Mapping[str, Any], type]] = None,
) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(Config)

    if isinstance(config_object, Mapping):
        app.config.from_mapping(config_object)
    elif config_object is not None:
        app.config.from_object(config_object)

    datastore = DataStore(app.config)
    app.extensions["datastore"] = datastore

    app.register_blueprint(dashboard_bp)
    app.register_blueprint(upload_bp)

    logger.info(
        "Trip dashboard ready (trip count filter %s)",
        "enabled" if app.config.get("SHOW_TRIP_COUNT_FILTER") else "disabled",
    )
    return app


__all__ = ["create_app"]
