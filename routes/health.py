import logging
from datetime import datetime

from flask import Blueprint, current_app, jsonify

from routes import get_repository
from services.seed_service import seed_database
from utils.errors import HRDashboardError

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__)


@health_bp.route("/health", methods=["GET"])
def health_check():
    """Database liveness: one trivial round trip"""
    try:
        get_repository().ping()
        return jsonify({
            "status": "healthy",
            "database": "connected",
            "timestamp": datetime.now().isoformat(),
        }), 200
    except HRDashboardError as e:
        logger.error("Health check failed: %s", e.details or e.message)
        return jsonify({
            "status": "unhealthy",
            "database": "disconnected",
            "error": e.message,
            "timestamp": datetime.now().isoformat(),
        }), 503


@health_bp.route("/seed", methods=["POST"])
def seed():
    """Insert demo data; does nothing when employees already exist"""
    try:
        inserted = seed_database(get_repository(), count=current_app.config["SEED_EMPLOYEE_COUNT"])
        message = "Seed data inserted" if inserted else "Database already contains data"
        return jsonify({
            "message": message,
            "inserted": inserted,
            "timestamp": datetime.now().isoformat(),
        }), 200
    except HRDashboardError as e:
        logger.exception("Seeding failed")
        body = {"error": f"Error inserting seed data: {e.message}"}
        if current_app.config.get("EXPOSE_ERROR_DETAILS"):
            body["details"] = e.details
        return jsonify(body), 500
