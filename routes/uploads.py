import logging
import os

from flask import Blueprint, current_app, jsonify, request, send_from_directory

from routes import get_repository
from services.file_service import upload_employee_file
from utils.errors import HRDashboardError, error_response

logger = logging.getLogger(__name__)

uploads_bp = Blueprint("uploads", __name__)


@uploads_bp.route("/api/upload", methods=["POST"])
def upload_file():
    """
    Multipart upload.

    Form fields:
    - file: the file itself (max 5 MB)
    - employeeId: existing employee id
    - fileType: photo | resume | document | certificate | contract
    """
    try:
        result = upload_employee_file(
            get_repository(),
            request.files.get("file"),
            request.form.get("employeeId"),
            request.form.get("fileType"),
            uploads_dir=current_app.config["UPLOADS_DIR"],
            max_size=current_app.config["MAX_UPLOAD_SIZE"],
        )
        return jsonify(result), 200
    except HRDashboardError as e:
        if e.status_code >= 500:
            logger.exception("Upload failed")
        else:
            logger.warning("Upload rejected: %s", e.message)
        body, status = error_response(e)
        return jsonify(body), status


@uploads_bp.route("/uploads/<path:filename>", methods=["GET"])
def serve_upload(filename):
    return send_from_directory(os.path.abspath(current_app.config["UPLOADS_DIR"]), filename)
