from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .bank_details.controller import register as register_bank_details
from .common.web import error_response
from .container import build_container
from .core.exceptions import DomainError
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_hierarchy, list_tables
from .employees.controller import register as register_employees
from .hierarchy.controller import register as register_hierarchy
from .products.controller import register as register_products
from .sales.controller import register as register_sales
from .verification.controller import register as register_verification
from .visits.controller import register as register_visits

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    storage_backend = str(getattr(settings, "STORAGE_BACKEND", "mysql")).lower()
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        "settings=%s backend=%s db=%s@%s:%s/%s",
        settings_module,
        storage_backend,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    auto_init_db = bool(getattr(settings, "AUTO_INIT_DB", False))
    auto_seed_db = bool(getattr(settings, "AUTO_SEED_DB", False))
    if storage_backend == "mysql":
        if auto_init_db:
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))
        if auto_seed_db:
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            ensure_demo_hierarchy(db_config)
            logger.info("Demo seed ready")

    container = build_container(db_config=db_config, storage_backend=storage_backend, seed_demo=auto_seed_db)
    app.extensions["fieldforce"] = container

    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        logger.info("Request rejected: %s (%s)", exc, exc.code)
        return error_response(exc)

    register_employees(app, container)
    register_hierarchy(app, container)
    register_products(app, container)
    register_sales(app, container)
    register_verification(app, container)
    register_visits(app, container)
    register_attendance(app, container)
    register_bank_details(app, container)

    return app
