from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .database.bootstrap import apply_schema, list_tables

from .container import Container, ContainerOptions, build_container
from .attendance.controller import register as register_attendance
from .positions.controller import register as register_positions
from .messages.controller import register as register_messages
from .realtime.controller import register as register_realtime

logger = logging.getLogger(__name__)


def _options_from(settings) -> ContainerOptions:
    defaults = ContainerOptions()
    return ContainerOptions(
        checkout_interval_seconds=float(getattr(settings, "AUTO_CHECKOUT_INTERVAL_SECONDS", defaults.checkout_interval_seconds)),
        checkout_buffer_minutes=int(getattr(settings, "AUTO_CHECKOUT_BUFFER_MINUTES", defaults.checkout_buffer_minutes)),
        checkout_max_late_minutes=int(getattr(settings, "AUTO_CHECKOUT_MAX_LATE_MINUTES", defaults.checkout_max_late_minutes)),
        checkout_event_id=getattr(settings, "AUTO_CHECKOUT_EVENT_ID", None) or None,
        staffing_check_seconds=float(getattr(settings, "STAFFING_CHECK_SECONDS", defaults.staffing_check_seconds)),
        geofence_radius_m=float(getattr(settings, "GEOFENCE_RADIUS_METERS", defaults.geofence_radius_m)),
        public_base_url=str(getattr(settings, "PUBLIC_BASE_URL", defaults.public_base_url)),
    )


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        container = build_container(db_config=db_config, options=_options_from(settings))

    app.extensions["volunteer_desk"] = container

    register_attendance(app, container)
    register_positions(app, container)
    register_messages(app, container)
    register_realtime(app, container)

    auto_checkout = bool(getattr(settings, "AUTO_CHECKOUT_ENABLED", False))
    staffing = bool(getattr(settings, "STAFFING_MONITOR_ENABLED", False))
    if (auto_checkout or staffing) and not app.config["TESTING"]:
        container.start_background(auto_checkout=auto_checkout, staffing=staffing)

    return app
