import logging

from flask import Blueprint, current_app, jsonify

from routes import get_repository
from services.stats_service import get_employee_stats
from utils.errors import HRDashboardError

logger = logging.getLogger(__name__)

stats_bp = Blueprint("stats", __name__)


@stats_bp.route("/stats", methods=["GET"])
def employee_stats():
    """
    Aggregate statistics.

    Example Response:
    {
      "active": {"total_active": 87, "avg_age": 39.4, "avg_absence": 11.8},
      "turnover": {"left_employees": 2, "total_employees": 14},
      "departments": [{"name": "Engineering", "count": 12}, ...],
      "education": [{"education": "MSc", "count": 9}, ...]
    }
    """
    try:
        stats = get_employee_stats(
            get_repository(),
            parallel=current_app.config["STATS_PARALLEL_QUERIES"],
        )
        return jsonify(stats), 200
    except HRDashboardError as e:
        logger.exception("Computing statistics failed")
        body = {"error": f"Error fetching statistics: {e.message}"}
        if current_app.config.get("EXPOSE_ERROR_DETAILS"):
            body["details"] = e.details
        return jsonify(body), 500
