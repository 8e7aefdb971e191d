import logging

from utils.errors import ConflictError, NotFoundError, ValidationError
from utils.validators import normalize_employee_payload, validate_employee_data

logger = logging.getLogger(__name__)

DUPLICATE_POLICIES = ("reject", "allow")


class EmployeeService:
    """Employee reads and writes on top of an injected EmployeeRepository."""

    def __init__(self, repository, duplicate_policy="reject"):
        if duplicate_policy not in DUPLICATE_POLICIES:
            raise ValueError(f"duplicate_policy must be one of: {', '.join(DUPLICATE_POLICIES)}")
        self.repository = repository
        self.duplicate_policy = duplicate_policy

    def add_employee(self, data, today=None):
        """
        Validate and insert one employee; returns the persisted record.

        The department is looked up by name before the insert. The foreign key
        still guards the insert itself, so a department that disappears in
        between surfaces as NotFoundError as well.
        """
        payload = normalize_employee_payload(data)
        errors = validate_employee_data(payload, today=today)
        if errors:
            logger.warning("Rejected employee payload: %s", "; ".join(errors))
            raise ValidationError(errors)

        department_id = self.repository.lookup_department_id(payload["department"])
        if department_id is None:
            raise NotFoundError("department does not exist", details=[f"Department '{payload['department']}' was not found"])

        if self.duplicate_policy == "reject":
            if self.repository.find_active_duplicate(payload["name"], department_id):
                raise ConflictError("An active employee with the same name already exists in this department")

        employee_id = self.repository.insert_employee({
            "name": payload["name"],
            "department_id": department_id,
            "position": payload["position"],
            "hire_date": payload["hire_date"],
            "education": payload["education"],
            "age": int(payload["age"]) if payload["age"] is not None else None,
            "salary": payload["salary"],
            "gender": payload["gender"],
        })

        employee = self.repository.get_employee(employee_id)
        if employee is None:
            raise NotFoundError("Employee could not be read back after insert")

        logger.info("Added employee %s (%s) to department %s", employee["id"], employee["name"], employee["department"])
        return employee

    def get_all_employees(self, filters=None, page=None, per_page=None):
        """Employees matching the filters, newest first; returns (records, total)"""
        return self.repository.query_employees(filters or {}, page=page, per_page=per_page)

    def get_employee(self, employee_id):
        employee = self.repository.get_employee(employee_id)
        if employee is None:
            raise NotFoundError(f"Employee {employee_id} not found")
        return employee

    def deactivate_employee(self, employee_id):
        """Soft delete: the row stays, is_active becomes false"""
        employee = self.repository.set_employee_active(employee_id, False)
        if employee is None:
            raise NotFoundError(f"Employee {employee_id} not found")
        logger.info("Deactivated employee %s", employee_id)
        return employee

    def list_departments(self):
        return self.repository.list_departments()

    def create_department(self, name):
        name = (name or "").strip()
        if not name:
            raise ValidationError(["name is required"])
        department = self.repository.create_department(name)
        logger.info("Created department %s (%s)", department["id"], department["name"])
        return department
