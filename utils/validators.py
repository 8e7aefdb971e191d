import math
import re
from datetime import date, datetime

from utils.constants import (
    GENDERS,
    GENDER_ALIASES,
    MIN_HIRE_DATE,
    MIN_EMPLOYEE_AGE,
    MAX_EMPLOYEE_AGE,
)
from utils.errors import ValidationError

# Latin letters (with Latin-1 accents), Arabic letters and harakat, whitespace
NAME_PATTERN = re.compile(
    r"^[A-Za-z\u00C0-\u00D6\u00D8-\u00F6\u00F8-\u00FF"
    r"\u0621-\u063A\u0641-\u064A\u064B-\u0652\u0671-\u06D3\s]+$"
)

DATE_FORMATS = ("%Y-%m-%d", "%d-%m-%Y", "%d/%m/%Y")


def parse_date(value):
    """Parse a date string; returns None when it is not a valid calendar date"""
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    # ISO timestamps such as 2021-05-01T00:00:00
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def parse_number(value):
    """Coerce numeric input; unparseable or non-finite input is treated as absent"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _clean_text(value):
    if value is None:
        return ""
    return str(value).strip()


def normalize_employee_payload(data):
    """Trim strings and coerce numerics of an employee creation request.

    Accepts both camelCase (hireDate) and snake_case (hire_date) keys.
    """
    data = data or {}
    if not isinstance(data, dict):
        raise ValidationError(["request body must be a JSON object"])
    hire_date_raw = data.get("hireDate", data.get("hire_date"))
    gender = _clean_text(data.get("gender"))

    return {
        "name": _clean_text(data.get("name")),
        "department": _clean_text(data.get("department", data.get("department_name"))),
        "position": _clean_text(data.get("position")) or None,
        "hire_date_raw": _clean_text(hire_date_raw),
        "hire_date": parse_date(hire_date_raw),
        "education": _clean_text(data.get("education")) or None,
        "age": parse_number(data.get("age")),
        "salary": parse_number(data.get("salary")),
        "gender": GENDER_ALIASES.get(gender.lower(), gender) if gender else None,
    }


def validate_employee_data(payload, today=None):
    """Validate a normalized employee payload.

    Every rule is checked; returns the list of messages for the rules that failed.
    """
    errors = []
    today = today or date.today()

    # Required fields
    if not payload.get("name"):
        errors.append("name is required")
    if not payload.get("department"):
        errors.append("department is required")
    if not payload.get("hire_date_raw"):
        errors.append("hireDate is required")

    # Name alphabet
    if payload.get("name") and not NAME_PATTERN.match(payload["name"]):
        errors.append("name may only contain letters and spaces")

    # Age
    age = payload.get("age")
    if age is not None:
        if not float(age).is_integer() or not (MIN_EMPLOYEE_AGE <= age <= MAX_EMPLOYEE_AGE):
            errors.append(f"age must be a whole number between {MIN_EMPLOYEE_AGE} and {MAX_EMPLOYEE_AGE}")

    # Salary
    salary = payload.get("salary")
    if salary is not None and salary < 0:
        errors.append("salary must be a non-negative number")

    # Hire date
    if payload.get("hire_date_raw"):
        hire_date = payload.get("hire_date")
        min_hire_date = date.fromisoformat(MIN_HIRE_DATE)
        if hire_date is None:
            errors.append("hireDate must be a valid date (YYYY-MM-DD)")
        elif hire_date > today:
            errors.append("hireDate cannot be in the future")
        elif hire_date < min_hire_date:
            errors.append(f"hireDate cannot be earlier than {MIN_HIRE_DATE}")

    # Gender
    gender = payload.get("gender")
    if gender is not None and gender not in GENDERS:
        errors.append(f"gender must be one of: {', '.join(GENDERS)}")

    return errors


def validate_filters(args):
    """Parse employee list filters from query parameters.

    Returns (filters, errors); absent or blank parameters impose no constraint.
    """
    filters = {}
    errors = []

    department_id = _clean_text(args.get("departmentId"))
    if department_id:
        try:
            filters["department_id"] = int(department_id)
        except ValueError:
            errors.append("departmentId must be an integer")

    department_name = _clean_text(args.get("departmentName"))
    if department_name:
        filters["department_name"] = department_name

    for key, target in (("dateFrom", "date_from"), ("dateTo", "date_to")):
        raw = _clean_text(args.get(key))
        if raw:
            parsed = parse_date(raw)
            if parsed is None:
                errors.append(f"{key} must be a valid date (YYYY-MM-DD)")
            else:
                filters[target] = parsed

    return filters, errors
