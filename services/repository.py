"""
Storage backends for employee and department records.

EmployeeService talks to an EmployeeRepository only; SQLAlchemyEmployeeRepository
is the adapter the application wires in.
"""

import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from datetime import date

from flask import current_app
from sqlalchemy import case, func, select, text
from sqlalchemy.orm import contains_eager
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from models import db
from models.department import Department
from models.employee import Employee
from models.employee_file import EmployeeFile
from utils.errors import ConflictError, NotFoundError, StorageError

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE codes
PG_UNIQUE_VIOLATION = "23505"
PG_FOREIGN_KEY_VIOLATION = "23503"


def trailing_year_start(today=None):
    """Start of the trailing-year window: the same calendar day one year back"""
    today = today or date.today()
    try:
        return today.replace(year=today.year - 1)
    except ValueError:
        # 29 February
        return today.replace(year=today.year - 1, day=28)


def driver_error_code(exc):
    """Best-effort driver error code of a wrapped DBAPI exception"""
    orig = getattr(exc, "orig", None)
    if orig is None:
        return None
    for attr in ("sqlstate", "pgcode", "sqlite_errorname"):
        code = getattr(orig, attr, None)
        if code:
            return code
    return None


def _is_foreign_key_violation(exc):
    code = driver_error_code(exc)
    if code in (PG_FOREIGN_KEY_VIOLATION, "SQLITE_CONSTRAINT_FOREIGNKEY"):
        return True
    return "foreign key" in str(getattr(exc, "orig", exc)).lower()


def _is_unique_violation(exc):
    code = driver_error_code(exc)
    if code in (PG_UNIQUE_VIOLATION, "SQLITE_CONSTRAINT_UNIQUE"):
        return True
    return "unique" in str(getattr(exc, "orig", exc)).lower()


def storage_error(exc, action, missing="referenced record does not exist"):
    """Translate a SQLAlchemy exception into the matching service error"""
    code = driver_error_code(exc)
    if isinstance(exc, IntegrityError):
        if _is_foreign_key_violation(exc):
            return NotFoundError(missing)
        if _is_unique_violation(exc):
            return ConflictError(f"Duplicate record while trying to {action}")
    if isinstance(exc, (PoolTimeoutError, OperationalError)):
        return StorageError(f"Database unavailable while trying to {action}", details=str(exc), code=code, status_code=503)
    return StorageError(f"Database error while trying to {action}", details=str(exc), code=code)


def _single_connection_engine(engine):
    """In-memory SQLite: every session shares one static connection"""
    return engine.dialect.name == "sqlite" and engine.url.database in (None, "", ":memory:")


class EmployeeRepository(ABC):
    """Capabilities a storage backend has to provide."""

    @abstractmethod
    def ping(self):
        """Trivial round trip to the backend"""

    @abstractmethod
    def lookup_department_id(self, name):
        """Department id for a name, or None"""

    @abstractmethod
    def list_departments(self):
        pass

    @abstractmethod
    def create_department(self, name):
        pass

    @abstractmethod
    def ensure_departments(self, names):
        """Insert the names that are missing; returns how many were inserted"""

    @abstractmethod
    def find_active_duplicate(self, name, department_id):
        pass

    @abstractmethod
    def insert_employee(self, values):
        """Insert one employee row and return its id"""

    @abstractmethod
    def insert_employees(self, rows):
        pass

    @abstractmethod
    def get_employee(self, employee_id):
        pass

    @abstractmethod
    def set_employee_active(self, employee_id, is_active):
        pass

    @abstractmethod
    def count_employees(self):
        pass

    @abstractmethod
    def query_employees(self, filters, page=None, per_page=None):
        """Employees matching every given filter, newest first.

        Returns (records, total).
        """

    @abstractmethod
    def run_aggregates(self, today=None, parallel=False):
        pass

    @abstractmethod
    def add_employee_file(self, employee_id, file_url, file_type, file_name=None, uploaded_at=None):
        pass

    @abstractmethod
    def list_employee_files(self, employee_id):
        pass


class SQLAlchemyEmployeeRepository(EmployeeRepository):
    """Flask-SQLAlchemy backend (SQLite or PostgreSQL)."""

    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session or db.session

    def _rollback(self):
        try:
            self.session.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback failed")

    # Health

    def ping(self):
        try:
            return self.session.execute(text("SELECT 1")).scalar() == 1
        except SQLAlchemyError as e:
            self._rollback()
            raise storage_error(e, "check database health")

    # Departments

    def lookup_department_id(self, name):
        try:
            return self.session.execute(
                select(Department.id).where(Department.name == name)
            ).scalar()
        except SQLAlchemyError as e:
            raise storage_error(e, "look up department")

    def list_departments(self):
        try:
            departments = self.session.execute(
                select(Department).order_by(Department.id)
            ).scalars().all()
            return [dept.to_dict() for dept in departments]
        except SQLAlchemyError as e:
            raise storage_error(e, "list departments")

    def create_department(self, name):
        department = Department(name=name)
        try:
            self.session.add(department)
            self.session.commit()
        except SQLAlchemyError as e:
            self._rollback()
            if isinstance(e, IntegrityError):
                raise ConflictError(f"Department '{name}' already exists")
            raise storage_error(e, "create department")
        return department.to_dict()

    def ensure_departments(self, names):
        try:
            existing = set(self.session.execute(select(Department.name)).scalars().all())
            missing = [name for name in dict.fromkeys(names) if name not in existing]
            for name in missing:
                self.session.add(Department(name=name))
            self.session.commit()
            return len(missing)
        except SQLAlchemyError as e:
            self._rollback()
            raise storage_error(e, "seed departments")

    # Employees

    def find_active_duplicate(self, name, department_id):
        try:
            return self.session.execute(
                select(Employee.id).where(
                    Employee.name == name,
                    Employee.department_id == department_id,
                    Employee.is_active.is_(True),
                )
            ).scalar()
        except SQLAlchemyError as e:
            raise storage_error(e, "check for duplicate employee")

    def insert_employee(self, values):
        employee = Employee(is_active=True, absence_days=0, **values)
        try:
            self.session.add(employee)
            self.session.commit()
        except SQLAlchemyError as e:
            self._rollback()
            raise storage_error(e, "add employee", missing="department does not exist")
        return employee.id

    def insert_employees(self, rows):
        try:
            self.session.add_all([Employee(**row) for row in rows])
            self.session.commit()
        except SQLAlchemyError as e:
            self._rollback()
            raise storage_error(e, "insert employees")
        return len(rows)

    def get_employee(self, employee_id):
        try:
            # Bypass the identity map so the record reflects what was persisted
            employee = self.session.get(Employee, employee_id, populate_existing=True)
            return employee.to_dict() if employee else None
        except SQLAlchemyError as e:
            raise storage_error(e, "load employee")

    def set_employee_active(self, employee_id, is_active):
        try:
            employee = self.session.get(Employee, employee_id)
            if employee is None:
                return None
            employee.is_active = is_active
            employee.updated_at = func.now()
            self.session.commit()
        except SQLAlchemyError as e:
            self._rollback()
            raise storage_error(e, "update employee")
        return self.get_employee(employee_id)

    def count_employees(self):
        try:
            return self.session.execute(select(func.count(Employee.id))).scalar() or 0
        except SQLAlchemyError as e:
            raise storage_error(e, "count employees")

    def query_employees(self, filters, page=None, per_page=None):
        filters = filters or {}
        query = (
            select(Employee)
            .outerjoin(Department, Employee.department_id == Department.id)
            .options(contains_eager(Employee.department))
        )

        if filters.get("department_id") is not None:
            query = query.where(Employee.department_id == filters["department_id"])

        if filters.get("date_from"):
            query = query.where(Employee.hire_date >= filters["date_from"])

        if filters.get("date_to"):
            query = query.where(Employee.hire_date <= filters["date_to"])

        if filters.get("department_name"):
            query = query.where(Department.name == filters["department_name"])

        query = query.order_by(Employee.created_at.desc(), Employee.id.desc())

        try:
            if page is not None:
                pagination = db.paginate(query, page=page, per_page=per_page, error_out=False)
                return [employee.to_dict() for employee in pagination.items], pagination.total
            employees = self.session.execute(query).scalars().all()
            return [employee.to_dict() for employee in employees], len(employees)
        except SQLAlchemyError as e:
            raise storage_error(e, "fetch employees")

    # Aggregates

    def _active_totals(self):
        row = self.session.execute(
            select(
                func.count(Employee.id),
                func.avg(Employee.age),
                func.avg(Employee.absence_days),
            ).where(Employee.is_active.is_(True))
        ).one()
        return {
            "total_active": row[0] or 0,
            "avg_age": float(row[1]) if row[1] is not None else None,
            "avg_absence": float(row[2]) if row[2] is not None else None,
        }

    def _turnover(self, today):
        row = self.session.execute(
            select(
                func.sum(case((Employee.is_active.is_(False), 1), else_=0)),
                func.count(Employee.id),
            ).where(Employee.hire_date >= trailing_year_start(today))
        ).one()
        return {
            "left_employees": int(row[0] or 0),
            "total_employees": int(row[1] or 0),
        }

    def _department_counts(self):
        rows = self.session.execute(
            select(Department.name, func.count(Employee.id))
            .outerjoin(
                Employee,
                (Employee.department_id == Department.id) & Employee.is_active.is_(True),
            )
            .group_by(Department.id, Department.name)
            .order_by(Department.id)
        ).all()
        return [{"name": name, "count": count} for name, count in rows]

    def _education_counts(self):
        rows = self.session.execute(
            select(Employee.education, func.count(Employee.id))
            .where(
                Employee.is_active.is_(True),
                Employee.education.is_not(None),
                Employee.education != "",
            )
            .group_by(Employee.education)
            .order_by(func.count(Employee.id).desc(), Employee.education)
        ).all()
        return [{"education": education, "count": count} for education, count in rows]

    def run_aggregates(self, today=None, parallel=False):
        today = today or date.today()
        queries = {
            "active": self._active_totals,
            "turnover": lambda: self._turnover(today),
            "departments": self._department_counts,
            "education": self._education_counts,
        }

        if parallel and _single_connection_engine(db.engine):
            logger.debug("In-memory SQLite shares one connection; computing statistics sequentially")
            parallel = False

        try:
            if not parallel:
                return {key: query() for key, query in queries.items()}

            # Each worker gets its own application context, hence its own session
            app = current_app._get_current_object()

            def run_in_context(query):
                with app.app_context():
                    return query()

            with ThreadPoolExecutor(max_workers=len(queries)) as executor:
                futures = {key: executor.submit(run_in_context, query) for key, query in queries.items()}
                return {key: future.result() for key, future in futures.items()}
        except SQLAlchemyError as e:
            raise storage_error(e, "compute statistics")

    # Files

    def add_employee_file(self, employee_id, file_url, file_type, file_name=None, uploaded_at=None):
        record = EmployeeFile(
            employee_id=employee_id,
            file_url=file_url,
            file_type=file_type,
            file_name=file_name,
        )
        if uploaded_at is not None:
            record.uploaded_at = uploaded_at
        try:
            self.session.add(record)
            self.session.commit()
        except SQLAlchemyError as e:
            self._rollback()
            raise storage_error(e, "attach file", missing="employee does not exist")
        return record.to_dict()

    def list_employee_files(self, employee_id):
        try:
            records = self.session.execute(
                select(EmployeeFile)
                .where(EmployeeFile.employee_id == employee_id)
                .order_by(EmployeeFile.id)
            ).scalars().all()
            return [record.to_dict() for record in records]
        except SQLAlchemyError as e:
            raise storage_error(e, "list employee files")
