from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

import config
from conftest import employee_payload, make_app
from models import db
from services.employee_service import EmployeeService
from services.repository import driver_error_code, storage_error
from utils.errors import ConflictError, NotFoundError, StorageError, ValidationError


class FakeDriverError(Exception):
    def __init__(self, message, **codes):
        super().__init__(message)
        for name, value in codes.items():
            setattr(self, name, value)


def test_foreign_key_violation_maps_to_not_found():
    exc = IntegrityError("INSERT ...", {}, FakeDriverError("fk", pgcode="23503"))
    error = storage_error(exc, "add employee", missing="department does not exist")
    assert isinstance(error, NotFoundError)
    assert error.message == "department does not exist"


def test_unique_violation_maps_to_conflict():
    exc = IntegrityError("INSERT ...", {}, FakeDriverError("dup", sqlite_errorname="SQLITE_CONSTRAINT_UNIQUE"))
    assert isinstance(storage_error(exc, "create department"), ConflictError)


def test_message_text_is_used_without_a_code():
    exc = IntegrityError("INSERT ...", {}, FakeDriverError("FOREIGN KEY constraint failed"))
    assert driver_error_code(exc) is None
    assert isinstance(storage_error(exc, "add employee"), NotFoundError)


def test_pool_timeout_is_service_unavailable():
    error = storage_error(PoolTimeoutError("QueuePool limit reached"), "fetch employees")
    assert isinstance(error, StorageError)
    assert error.status_code == 503


def test_operational_error_keeps_driver_code():
    exc = OperationalError("SELECT 1", {}, FakeDriverError("server closed", pgcode="57P01"))
    error = storage_error(exc, "check database health")
    assert error.status_code == 503
    assert error.code == "57P01"


def test_storage_error_details_hidden_when_disabled(app):
    error = StorageError("Database error", details="secret driver message")
    app.config["EXPOSE_ERROR_DETAILS"] = False
    with app.app_context():
        assert "details" not in error.to_dict()
    app.config["EXPOSE_ERROR_DETAILS"] = True
    with app.app_context():
        assert error.to_dict()["details"] == "secret driver message"


def test_sqlite_enforces_foreign_keys(app_ctx, repository):
    with pytest.raises(NotFoundError) as excinfo:
        repository.insert_employee({"name": "Ghost", "department_id": 9999, "hire_date": date(2021, 5, 1)})
    assert excinfo.value.message == "department does not exist"
    assert repository.count_employees() == 0


def test_department_deleted_between_lookup_and_insert(app_ctx, repository):
    """The foreign key still catches a department that vanished after the lookup"""

    class VanishingDepartmentRepository:
        def __getattr__(self, name):
            return getattr(repository, name)

        def lookup_department_id(self, name):
            return 9999

        def find_active_duplicate(self, name, department_id):
            return None

    service = EmployeeService(VanishingDepartmentRepository())
    with pytest.raises(NotFoundError):
        service.add_employee(employee_payload())
    assert repository.count_employees() == 0


def test_validation_runs_before_any_storage_access():
    class ExplodingRepository:
        def __getattr__(self, name):
            raise AssertionError(f"repository.{name} should not be called")

    service = EmployeeService(ExplodingRepository())
    with pytest.raises(ValidationError) as excinfo:
        service.add_employee({"name": "Ahmed Ali"})
    assert "department is required" in excinfo.value.errors


def test_duplicate_policy_allow(app_ctx, repository):
    repository.create_department("Engineering")
    service = EmployeeService(repository, duplicate_policy="allow")
    first = service.add_employee(employee_payload())
    second = service.add_employee(employee_payload())
    assert first["id"] != second["id"]


def test_unknown_duplicate_policy_rejected(repository):
    with pytest.raises(ValueError):
        EmployeeService(repository, duplicate_policy="merge")


def test_health_reports_unreachable_database(tmp_path):
    def failing_ping():
        raise StorageError("Database unavailable while trying to check database health", status_code=503)

    app = make_app(tmp_path)
    app.extensions["hr_repository"].ping = failing_ping
    response = app.test_client().get("/api/health")
    assert response.status_code == 503
    body = response.get_json()
    assert body["status"] == "unhealthy"
    assert body["database"] == "disconnected"


def test_engine_options():
    assert config.engine_options("sqlite://") == {}
    assert config.engine_options("sqlite:///:memory:") == {}
    options = config.engine_options("postgresql+psycopg://u:p@db/hr", pool_size=5, pool_timeout=2)
    assert options == {"pool_size": 5, "max_overflow": 0, "pool_timeout": 2, "pool_pre_ping": True}


def test_pool_timeout_is_whole_seconds():
    assert config.engine_options("sqlite:///hr.sqlite", pool_timeout=2.7)["pool_timeout"] == 2
    assert isinstance(config.DB_POOL_TIMEOUT, int)


def test_exhausted_pool_is_unavailable_until_a_connection_is_released(tmp_path):
    app = make_app(
        tmp_path,
        SQLALCHEMY_DATABASE_URI=f"sqlite:///{tmp_path / 'pool.sqlite'}",
        DB_POOL_SIZE=1,
        DB_POOL_TIMEOUT=1,
    )
    client = app.test_client()
    with app.app_context():
        engine = db.engine
    assert engine.pool.size() == 1

    held = engine.connect()
    try:
        response = client.get("/api/employees")
        assert response.status_code == 503
        assert response.get_json()["error"].startswith("Error fetching employees")
    finally:
        held.close()

    response = client.get("/api/employees")
    assert response.status_code == 200
    assert response.get_json() == []
    engine.dispose()
