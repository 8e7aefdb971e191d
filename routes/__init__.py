from flask import current_app, request

from utils.errors import ValidationError

BODY_NOT_OBJECT = "request body must be a JSON object"


def get_repository():
    """Storage backend wired in by create_app"""
    return current_app.extensions["hr_repository"]


def get_employee_service():
    return current_app.extensions["hr_employee_service"]


def request_payload(allow_form=True):
    """JSON object body (or form fields); any other JSON value is a ValidationError"""
    if allow_form and not request.is_json:
        return request.form.to_dict()
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError([BODY_NOT_OBJECT])
    return payload
