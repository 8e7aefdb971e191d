import logging
import random
from datetime import date, timedelta

from utils.constants import (
    DEPARTMENTS,
    GENDERS,
    SEED_EDUCATION_LEVELS,
    SEED_NAMES,
    SEED_POSITIONS,
)

logger = logging.getLogger(__name__)

SEED_HIRE_START = date(2020, 1, 1)


def ensure_departments(repository, names=None):
    """Insert-if-absent for the department catalog; returns the number inserted"""
    inserted = repository.ensure_departments(names or DEPARTMENTS)
    if inserted:
        logger.info("Inserted %s departments", inserted)
    return inserted


def _base_salary(position, education):
    salary = 4000
    if "مدير" in position:
        salary = 12000
    elif "رئيس" in position or "أول" in position:
        salary = 8000
    elif "أخصائي" in position:
        salary = 6000

    if "دكتوراه" in education:
        salary += 2000
    elif "ماجستير" in education:
        salary += 1000
    return salary


def generate_employee_rows(department_ids, count, rng=None, today=None):
    """Synthetic employee rows sampled from the fixed pools"""
    rng = rng or random.Random()
    today = today or date.today()
    span_days = max((today - SEED_HIRE_START).days, 0)

    rows = []
    for _ in range(count):
        position = rng.choice(SEED_POSITIONS)
        education = rng.choice(SEED_EDUCATION_LEVELS)
        rows.append({
            "name": rng.choice(SEED_NAMES),
            "department_id": rng.choice(department_ids),
            "position": position,
            "hire_date": SEED_HIRE_START + timedelta(days=rng.randint(0, span_days)),
            "education": education,
            "age": rng.randint(22, 60),
            "salary": float(_base_salary(position, education) + rng.randint(0, 3000)),
            "gender": GENDERS[0] if rng.random() > 0.45 else GENDERS[1],
            "absence_days": rng.randint(0, 24),
            "is_active": rng.random() > 0.08,
        })
    return rows


def seed_database(repository, count=100, rng=None, today=None):
    """
    Populate fixtures. Departments are inserted if absent; employees only when
    the employee table is empty, so a second call changes nothing.

    Returns the number of employees inserted.
    """
    ensure_departments(repository)

    if repository.count_employees() > 0:
        logger.info("Database already contains employees, skipping seed")
        return 0

    department_ids = [dept["id"] for dept in repository.list_departments()]
    if not department_ids:
        return 0

    rows = generate_employee_rows(department_ids, count, rng=rng, today=today)
    inserted = repository.insert_employees(rows)
    logger.info("Inserted %s synthetic employees", inserted)
    return inserted
