import logging

from flask import Blueprint, request, jsonify

from routes import get_employee_service, get_repository, request_payload
from services.file_service import attach_employee_file, list_employee_files
from utils.errors import HRDashboardError, ValidationError, error_response
from utils.validators import validate_filters

logger = logging.getLogger(__name__)

employees_bp = Blueprint("employees", __name__)


@employees_bp.route("/", methods=["GET"])
def list_employees():
    """
    List employees, newest first.

    Query params (all optional, AND-combined):
    - departmentId, departmentName
    - dateFrom, dateTo: inclusive hire-date bounds (YYYY-MM-DD)
    - page, per_page: opt-in pagination; without them the full set is returned
    """
    filters, errors = validate_filters(request.args)
    if errors:
        return jsonify({"error": "Invalid filters", "details": errors}), 400

    page = request.args.get("page", type=int)
    per_page = request.args.get("per_page", default=50, type=int) if page is not None else None
    if page is not None and (page < 1 or per_page < 1):
        return jsonify({"error": "Invalid pagination", "details": ["page and per_page must be positive"]}), 400

    try:
        employees, total = get_employee_service().get_all_employees(filters, page=page, per_page=per_page)
        logger.info("Fetched %s employees", len(employees))
        response = jsonify(employees)
        response.headers["X-Total-Count"] = str(total)
        return response, 200
    except HRDashboardError as e:
        logger.exception("Fetching employees failed")
        body, status = error_response(e)
        return jsonify({"error": f"Error fetching employees: {e.message}", "details": body.get("details")}), status


@employees_bp.route("/", methods=["POST"])
def add_employee():
    """
    Create an employee.

    Example JSON:
    {
      "name": "Ahmed Ali",
      "department": "Engineering",
      "position": "Backend Developer",
      "hireDate": "2021-05-01",
      "education": "BSc Computer Science",
      "age": 30,
      "salary": 9000,
      "gender": "male"
    }
    """
    try:
        payload = request_payload()
        employee = get_employee_service().add_employee(payload)
        return jsonify({
            "success": True,
            "employee": employee,
            "message": "Employee added successfully",
        }), 201
    except ValidationError as e:
        return jsonify({"success": False, "error": e.message, "details": e.errors}), 400
    except HRDashboardError as e:
        if e.status_code >= 500:
            logger.exception("Adding employee failed")
        body, status = error_response(e)
        return jsonify(body), status


@employees_bp.route("/<int:employee_id>", methods=["GET"])
def get_employee(employee_id):
    try:
        return jsonify(get_employee_service().get_employee(employee_id)), 200
    except HRDashboardError as e:
        body, status = error_response(e)
        return jsonify(body), status


@employees_bp.route("/<int:employee_id>", methods=["DELETE"])
def deactivate_employee(employee_id):
    """Soft delete: marks the employee inactive"""
    try:
        employee = get_employee_service().deactivate_employee(employee_id)
        return jsonify({
            "success": True,
            "message": "Employee deactivated",
            "employee": employee,
        }), 200
    except HRDashboardError as e:
        body, status = error_response(e)
        return jsonify(body), status


@employees_bp.route("/<int:employee_id>/files", methods=["POST"])
def attach_file(employee_id):
    """
    Associate an uploaded file with an employee.

    Example JSON:
    {"fileUrl": "/uploads/photo/7_photo_1700000000000_me.png", "fileType": "photo",
     "uploadDate": "2024-01-01T10:00:00Z"}
    """
    try:
        payload = request_payload(allow_form=False)
        record = attach_employee_file(get_repository(), employee_id, payload)
        return jsonify({
            "success": True,
            "message": "File linked to employee",
            "file": record,
        }), 200
    except ValidationError as e:
        return jsonify({"success": False, "error": e.message, "details": e.errors}), 400
    except HRDashboardError as e:
        if e.status_code >= 500:
            logger.exception("Linking file to employee %s failed", employee_id)
        body, status = error_response(e)
        return jsonify(body), status


@employees_bp.route("/<int:employee_id>/files", methods=["GET"])
def get_files(employee_id):
    try:
        files = list_employee_files(get_repository(), employee_id)
        return jsonify({"success": True, "data": files, "count": len(files)}), 200
    except HRDashboardError as e:
        body, status = error_response(e)
        return jsonify(body), status
