"""
Shared pytest fixtures for the HR dashboard test suite.

The WSGI app is created on import of app.py unless CREATE_APP_ON_IMPORT is
disabled, so that happens before anything imports it. Each test gets a fresh
in-memory SQLite database and its own uploads directory.
"""

import os
import sys

import pytest

os.environ["CREATE_APP_ON_IMPORT"] = "0"

_ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _ROOT_DIR not in sys.path:
    sys.path.insert(0, _ROOT_DIR)

from app import create_app  # noqa: E402
from models import db  # noqa: E402


def make_app(tmp_path, **overrides):
    settings = {
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "UPLOADS_DIR": str(tmp_path / "uploads"),
        "SEED_ON_STARTUP": False,
        "SEED_EMPLOYEE_COUNT": 30,
    }
    settings.update(overrides)
    return create_app(settings)


@pytest.fixture()
def app(tmp_path):
    app = make_app(tmp_path)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def repository(app):
    return app.extensions["hr_repository"]


@pytest.fixture()
def service(app):
    return app.extensions["hr_employee_service"]


@pytest.fixture()
def app_ctx(app):
    with app.app_context():
        yield app


@pytest.fixture()
def engineering(client):
    """Create the 'Engineering' department and return its record"""
    response = client.post("/api/departments", json={"name": "Engineering"})
    assert response.status_code == 201
    return response.get_json()["data"]


def employee_payload(**changes):
    payload = {
        "name": "Ahmed Ali",
        "department": "Engineering",
        "position": "Backend Developer",
        "hireDate": "2021-05-01",
        "education": "BSc Computer Science",
        "age": 30,
        "salary": 9000,
        "gender": "male",
    }
    payload.update(changes)
    return payload
