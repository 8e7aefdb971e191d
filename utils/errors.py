"""Error kinds raised by the services and mapped to HTTP responses by the routes."""

from flask import current_app, has_app_context


class HRDashboardError(Exception):
    """Base class for errors that carry an HTTP status and a JSON body."""

    status_code = 500

    def __init__(self, message, details=None, status_code=None):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        body = {"success": False, "error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(HRDashboardError):
    """Client-correctable input; details is the list of every failed rule."""

    status_code = 400

    def __init__(self, errors, message="Validation failed"):
        super().__init__(message, details=list(errors))

    @property
    def errors(self):
        return self.details


class NotFoundError(HRDashboardError):
    status_code = 404


class ConflictError(HRDashboardError):
    status_code = 409


class StorageError(HRDashboardError):
    """Backend unreachable or a query failed.

    code holds the driver error code (pgcode / sqlite error name) when known.
    """

    status_code = 500

    def __init__(self, message, details=None, code=None, status_code=None):
        super().__init__(message, details=details, status_code=status_code)
        self.code = code

    def to_dict(self):
        body = {"success": False, "error": self.message}
        if self.details is not None and has_app_context() and current_app.config.get("EXPOSE_ERROR_DETAILS", False):
            body["details"] = self.details
        return body


class UploadError(HRDashboardError):
    status_code = 400


def error_response(exc):
    """Build a (body, status) pair for an HRDashboardError."""
    return exc.to_dict(), exc.status_code
