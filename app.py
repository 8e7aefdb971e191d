import logging
import os
import sqlite3

from flask import Flask, jsonify
from flask_cors import CORS
from sqlalchemy import event
from sqlalchemy.engine import Engine, make_url
from werkzeug.exceptions import RequestEntityTooLarge

import config
from models import db
from services.employee_service import EmployeeService
from services.repository import SQLAlchemyEmployeeRepository
from services.seed_service import ensure_departments, seed_database

logger = logging.getLogger(__name__)


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores REFERENCES clauses unless asked per connection
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _default_config():
    return {
        "SQLALCHEMY_DATABASE_URI": config.SQLALCHEMY_DATABASE_URI,
        "SQLALCHEMY_TRACK_MODIFICATIONS": config.SQLALCHEMY_TRACK_MODIFICATIONS,
        "SECRET_KEY": config.SECRET_KEY,
        "MAX_CONTENT_LENGTH": config.MAX_CONTENT_LENGTH,
        "MAX_UPLOAD_SIZE": config.MAX_UPLOAD_SIZE,
        "UPLOADS_DIR": config.UPLOADS_DIR,
        "DUPLICATE_EMPLOYEE_POLICY": config.DUPLICATE_EMPLOYEE_POLICY,
        "STATS_PARALLEL_QUERIES": config.STATS_PARALLEL_QUERIES,
        "SEED_EMPLOYEE_COUNT": config.SEED_EMPLOYEE_COUNT,
        "SEED_ON_STARTUP": config.SEED_ON_STARTUP,
        "EXPOSE_ERROR_DETAILS": config.EXPOSE_ERROR_DETAILS,
        "DB_POOL_SIZE": config.DB_POOL_SIZE,
        "DB_POOL_TIMEOUT": config.DB_POOL_TIMEOUT,
        "CORS_ORIGINS": config.CORS_ORIGINS,
    }


def create_app(config_overrides=None, register_blueprints: bool = True, repository=None):
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = Flask(__name__)

    # Disable strict slashes to avoid redirect issues with CORS
    app.url_map.strict_slashes = False

    app.config.update(_default_config())
    if config_overrides:
        app.config.update(config_overrides)
    app.config.setdefault(
        "SQLALCHEMY_ENGINE_OPTIONS",
        config.engine_options(
            app.config["SQLALCHEMY_DATABASE_URI"],
            pool_size=app.config["DB_POOL_SIZE"],
            pool_timeout=app.config["DB_POOL_TIMEOUT"],
        ),
    )

    CORS(app,
         origins=app.config["CORS_ORIGINS"],
         methods=["GET", "POST", "DELETE", "OPTIONS"],
         allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With"],
         expose_headers=["Content-Type", "X-Total-Count"],
         max_age=86400)  # Cache preflight for 24 hours

    # Ensure uploads dir exists
    os.makedirs(app.config["UPLOADS_DIR"], exist_ok=True)

    db.init_app(app)

    # The storage backend is injectable; the SQLAlchemy adapter is the default
    repository = repository or SQLAlchemyEmployeeRepository()
    app.extensions["hr_repository"] = repository
    app.extensions["hr_employee_service"] = EmployeeService(
        repository,
        duplicate_policy=app.config["DUPLICATE_EMPLOYEE_POLICY"],
    )

    with app.app_context():
        db.create_all()
        ensure_departments(repository)
        if app.config["SEED_ON_STARTUP"]:
            seed_database(repository, count=app.config["SEED_EMPLOYEE_COUNT"])

    # Register all blueprints (optional for scripts)
    if register_blueprints:
        from routes.departments import departments_bp
        from routes.employees import employees_bp
        from routes.health import health_bp
        from routes.stats import stats_bp
        from routes.uploads import uploads_bp

        app.register_blueprint(health_bp, url_prefix="/api")
        app.register_blueprint(stats_bp, url_prefix="/api")
        app.register_blueprint(employees_bp, url_prefix="/api/employees")
        app.register_blueprint(departments_bp, url_prefix="/api/departments")
        app.register_blueprint(uploads_bp)

    @app.errorhandler(RequestEntityTooLarge)
    def request_too_large(e):
        return jsonify({
            "success": False,
            "error": f"File too large. Maximum size is {app.config['MAX_UPLOAD_SIZE'] // (1024 * 1024)} MB",
        }), 400

    @app.route("/")
    def home():
        return {
            "message": "HR Dashboard API",
            "version": "1.0",
            "status": "running",
            "endpoints": {
                "health": "/api/health",
                "employees": "/api/employees",
                "departments": "/api/departments",
                "stats": "/api/stats",
                "seed": "/api/seed",
                "upload": "/api/upload",
            }
        }

    logger.info("HR dashboard app created (database: %s)", make_url(app.config["SQLALCHEMY_DATABASE_URI"]).render_as_string(hide_password=True))
    return app

# Create the WSGI app when importing this module (needed for gunicorn),
# but allow scripts and tests to disable this by setting CREATE_APP_ON_IMPORT=0
if os.getenv("CREATE_APP_ON_IMPORT", "1") not in ("0", "false", "False"):
    app = create_app()

if __name__ == "__main__":
    # For local development
    port = int(os.environ.get("PORT", 5000))
    debug = os.environ.get("FLASK_ENV") != "production"

    # Ensure app exists even if CREATE_APP_ON_IMPORT disabled
    try:
        app
    except NameError:
        app = create_app()

    app.run(host="0.0.0.0", port=port, debug=debug)
