import logging
import os

import requests

from utils.constants import ALLOWED_MIME_TYPES, FILE_TYPES

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = os.getenv("HR_API_URL", "http://127.0.0.1:5000")
MAX_UPLOAD_SIZE = 5 * 1024 * 1024


class ApiError(Exception):
    """Non-2xx response from the HR API"""

    def __init__(self, status_code, message, details=None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details

    @classmethod
    def from_response(cls, response):
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        message = body.get("error") or body.get("message") or f"HTTP {response.status_code}"
        return cls(response.status_code, message, body.get("details"))

    def __str__(self):
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class HRApiClient:
    """
    Thin wrapper over the HR dashboard HTTP API.

    Transport failures surface as requests exceptions; error responses raise
    ApiError. No request timeout is applied unless one is given.
    """

    def __init__(self, base_url=DEFAULT_BASE_URL, session=None, timeout=None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method, path, **kwargs):
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        if not 200 <= response.status_code < 300:
            raise ApiError.from_response(response)
        return response.json()

    def health(self):
        return self._request("GET", "/api/health")

    def seed(self):
        return self._request("POST", "/api/seed")

    def list_departments(self):
        return self._request("GET", "/api/departments").get("data", [])

    def fetch_employees(self, filters=None):
        """filters uses the query parameter names: departmentId, departmentName, dateFrom, dateTo"""
        params = {key: value for key, value in (filters or {}).items() if value not in (None, "")}
        data = self._request("GET", "/api/employees", params=params)
        if not isinstance(data, list):
            raise ApiError(200, "Unexpected employees payload")
        return data

    def fetch_stats(self):
        return self._request("GET", "/api/stats")

    def add_employee(self, employee):
        return self._request("POST", "/api/employees", json=employee)["employee"]

    def deactivate_employee(self, employee_id):
        return self._request("DELETE", f"/api/employees/{employee_id}")["employee"]

    def upload_file(self, path, employee_id, file_type, mimetype):
        """Upload a local file; size and type are checked before sending"""
        if file_type not in FILE_TYPES:
            raise ValueError(f"fileType must be one of: {', '.join(FILE_TYPES)}")
        if mimetype not in ALLOWED_MIME_TYPES[file_type]:
            raise ValueError(f"File type {mimetype} is not allowed for {file_type}")
        if os.path.getsize(path) > MAX_UPLOAD_SIZE:
            raise ValueError("File too large. Maximum size is 5 MB")

        with open(path, "rb") as fh:
            files = {"file": (os.path.basename(path), fh, mimetype)}
            data = {"employeeId": str(employee_id), "fileType": file_type}
            return self._request("POST", "/api/upload", files=files, data=data)

    def attach_file(self, employee_id, file_url, file_type, upload_date=None):
        payload = {"fileUrl": file_url, "fileType": file_type}
        if upload_date:
            payload["uploadDate"] = upload_date
        return self._request("POST", f"/api/employees/{employee_id}/files", json=payload)["file"]
