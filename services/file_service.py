import logging
from datetime import datetime, timezone

from utils.constants import ALLOWED_MIME_TYPES, FILE_TYPES
from utils.errors import NotFoundError, StorageError, UploadError, ValidationError
from utils.upload import allowed_mime_type, file_size, save_file, stored_file_name

logger = logging.getLogger(__name__)


def _parse_employee_id(raw):
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return None


def upload_employee_file(repository, file_storage, employee_id, file_type, uploads_dir, max_size):
    """
    Store one uploaded file for an employee and return its metadata.

    Every check (fields, size, MIME type, employee existence) runs before
    anything is written, so a rejected upload leaves no trace.
    """
    if file_storage is None or not file_storage.filename:
        raise UploadError("No file provided")
    if employee_id is None or str(employee_id).strip() == "":
        raise UploadError("employeeId is required")
    if not file_type:
        raise UploadError("fileType is required")
    if file_type not in FILE_TYPES:
        raise UploadError(f"fileType must be one of: {', '.join(FILE_TYPES)}")

    parsed_id = _parse_employee_id(employee_id)
    if parsed_id is None:
        raise UploadError("employeeId must be an integer")

    size = file_size(file_storage)
    if size > max_size:
        raise UploadError(
            f"File too large. Maximum size is {max_size // (1024 * 1024)} MB",
            details={"fileSize": size, "maxSize": max_size},
        )

    mimetype = file_storage.mimetype
    if not allowed_mime_type(file_type, mimetype):
        raise UploadError(
            f"File type '{mimetype}' is not allowed for {file_type}",
            details={"allowedTypes": ALLOWED_MIME_TYPES[file_type]},
        )

    if repository.get_employee(parsed_id) is None:
        raise NotFoundError(f"Employee {parsed_id} not found")

    filename = stored_file_name(parsed_id, file_type, file_storage.filename)
    try:
        save_file(file_storage, uploads_dir, file_type, filename)
    except OSError as e:
        logger.exception("Saving upload %s failed", filename)
        raise StorageError("Upload backend failure", details=str(e))

    logger.info("Stored %s for employee %s as %s (%s bytes)", file_type, parsed_id, filename, size)
    return {
        "success": True,
        "fileUrl": f"/uploads/{file_type}/{filename}",
        "fileName": filename,
        "fileType": file_type,
        "employeeId": parsed_id,
        "fileSize": size,
        "uploadDate": datetime.now().isoformat(),
    }


def attach_employee_file(repository, employee_id, data):
    """Record that an uploaded file URL belongs to an employee"""
    data = data or {}
    if not isinstance(data, dict):
        raise ValidationError(["request body must be a JSON object"])
    errors = []
    file_url = str(data.get("fileUrl") or "").strip()
    file_type = str(data.get("fileType") or "").strip()

    if not file_url:
        errors.append("fileUrl is required")
    if file_type not in FILE_TYPES:
        errors.append(f"fileType must be one of: {', '.join(FILE_TYPES)}")

    uploaded_at = None
    if data.get("uploadDate"):
        try:
            uploaded_at = datetime.fromisoformat(str(data["uploadDate"]).replace("Z", "+00:00"))
            if uploaded_at.tzinfo is not None:
                uploaded_at = uploaded_at.astimezone(timezone.utc).replace(tzinfo=None)
        except ValueError:
            errors.append("uploadDate must be an ISO timestamp")

    if errors:
        raise ValidationError(errors)

    if repository.get_employee(employee_id) is None:
        raise NotFoundError(f"Employee {employee_id} not found")

    record = repository.add_employee_file(
        employee_id,
        file_url,
        file_type,
        file_name=data.get("fileName"),
        uploaded_at=uploaded_at,
    )
    logger.info("Attached %s %s to employee %s", file_type, file_url, employee_id)
    return record


def list_employee_files(repository, employee_id):
    if repository.get_employee(employee_id) is None:
        raise NotFoundError(f"Employee {employee_id} not found")
    return repository.list_employee_files(employee_id)
