from flask import Blueprint, jsonify

from routes import get_employee_service, request_payload
from utils.errors import HRDashboardError, ValidationError, error_response

departments_bp = Blueprint("departments", __name__)

@departments_bp.route("/", methods=["GET"])
def list_departments():
    """List all departments"""
    try:
        department_list = get_employee_service().list_departments()
        return jsonify({
            "success": True,
            "data": department_list,
            "count": len(department_list)
        }), 200
    except HRDashboardError as e:
        body, status = error_response(e)
        return jsonify(body), status


@departments_bp.route("/", methods=["POST"])
def create_department():
    """Create a new department"""
    try:
        payload = request_payload()
        department = get_employee_service().create_department(payload.get("name"))
        return jsonify({
            "success": True,
            "message": "Department created successfully",
            "data": department
        }), 201
    except ValidationError as e:
        return jsonify({"success": False, "error": e.message, "details": e.errors}), 400
    except HRDashboardError as e:
        body, status = error_response(e)
        return jsonify(body), status
