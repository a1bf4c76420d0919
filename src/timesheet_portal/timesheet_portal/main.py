from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .auth.model import AuthConfig
from .common.datetime_utils import now_utc
from .common.http import register_error_handlers
from .core.constants import DEFAULT_JWT_ALGORITHM, DEFAULT_TOKEN_TTL_HOURS
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables

from .container import Container, build_container
from .external.controller import register as register_external
from .schedules.controller import register as register_schedules
from .timesheets.controller import register as register_timesheets
from .users.controller import register as register_users

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


# Development default; accepted only while DEBUG is on.
DEV_JWT_SECRET = "dev-jwt-secret"


def _auth_config_from(settings) -> AuthConfig:
    jwt_secret = getattr(settings, "JWT_SECRET", "") or ""
    if not jwt_secret.strip():
        raise RuntimeError("JWT_SECRET is not set")
    if jwt_secret == DEV_JWT_SECRET and not bool(getattr(settings, "DEBUG", False)):
        raise RuntimeError("JWT_SECRET still has its development value")

    return AuthConfig(
        jwt_secret=jwt_secret,
        external_api_key=getattr(settings, "EXTERNAL_API_KEY", "") or "",
        jwt_algorithm=getattr(settings, "JWT_ALGORITHM", DEFAULT_JWT_ALGORITHM),
        token_ttl_hours=int(getattr(settings, "TOKEN_TTL_HOURS", DEFAULT_TOKEN_TTL_HOURS)),
    )


def _bootstrap_database(app: Flask, settings, db_config: dict) -> None:
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
        app.logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        created = ensure_demo_users(db_config)
        apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
        app.logger.info("demo seed ready (new users=%s)", ", ".join(created) or "none")


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    When ``container`` is given it is used as-is and no database bootstrap
    happens; otherwise the container is built from the active settings module.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    if container is None:
        db_config = dict(getattr(settings, "DB_CONFIG"))
        app.logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        _bootstrap_database(app, settings, db_config)
        container = build_container(db_config=db_config, auth_config=_auth_config_from(settings))

    register_error_handlers(app)

    register_users(app, container)
    register_schedules(app, container)
    register_timesheets(app, container)
    register_external(app, container)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok", "timestamp": now_utc().isoformat()})

    return app
