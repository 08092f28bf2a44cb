from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.app_logging import configure_logging
from .common.web import result_response
from .container import Container, build_container
from .core.constants import DEFAULT_ADMIN_PASSWORD, DEFAULT_ADMIN_USERNAME, DEFAULT_CURRENCY_LABEL, DEFAULT_SESSION_DAYS
from .core.exceptions import DomainError
from .core.result import Result
from .storage.bootstrap import apply_schema, list_tables

from .auth.controller import register as register_auth
from .ledger.controller import register as register_ledger
from .reports.controller import register as register_reports
from .workers.controller import register as register_workers

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FILE", None))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.permanent_session_lifetime = timedelta(days=int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS)))

    store_backend = str(getattr(settings, "STORE_BACKEND", "memory"))
    db_config = getattr(settings, "DB_CONFIG", {})
    logger.info("Starting workboard (settings=%s, store=%s)", settings_module, store_backend)

    if container is None:
        if store_backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            store_backend=store_backend,
            db_config=db_config,
            currency_label=getattr(settings, "CURRENCY_LABEL", DEFAULT_CURRENCY_LABEL),
            admin_username=getattr(settings, "ADMIN_USERNAME", DEFAULT_ADMIN_USERNAME),
            admin_password=getattr(settings, "ADMIN_DEFAULT_PASSWORD", DEFAULT_ADMIN_PASSWORD),
        )
    app.extensions["workboard"] = container

    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        logger.warning("Request failed: %s", e)
        return result_response(Result.fail(e.kind, str(e)))

    register_auth(app, container)
    register_workers(app, container)
    register_ledger(app, container)
    register_reports(app, container)

    return app
