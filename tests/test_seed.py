import random
from datetime import date

from services.seed_service import _base_salary, ensure_departments, generate_employee_rows, seed_database
from utils.constants import DEPARTMENTS, GENDERS

TODAY = date(2024, 6, 15)


def test_department_catalog_insert_if_absent(app_ctx, repository):
    # create_app already inserted the catalog
    assert ensure_departments(repository) == 0
    names = [dept["name"] for dept in repository.list_departments()]
    assert sorted(names) == sorted(DEPARTMENTS)


def test_seed_inserts_then_is_idempotent(app_ctx, repository):
    assert seed_database(repository, count=25, rng=random.Random(1), today=TODAY) == 25
    assert repository.count_employees() == 25
    assert seed_database(repository, count=25, rng=random.Random(2), today=TODAY) == 0
    assert repository.count_employees() == 25


def test_generated_rows_are_plausible():
    rows = generate_employee_rows([1, 2, 3], 200, rng=random.Random(3), today=TODAY)
    assert len(rows) == 200
    for row in rows:
        assert row["department_id"] in (1, 2, 3)
        assert date(2020, 1, 1) <= row["hire_date"] <= TODAY
        assert 22 <= row["age"] <= 60
        assert row["gender"] in GENDERS
        assert 0 <= row["absence_days"] <= 24
        assert row["salary"] >= 4000
    # A minority of seeded employees have left
    inactive = sum(1 for row in rows if not row["is_active"])
    assert 0 < inactive < 50


def test_base_salary_rules():
    assert _base_salary("مدير مشروع", "بكالوريوس") == 12000
    assert _base_salary("أخصائي موارد بشرية", "ماجستير إدارة أعمال") == 7000
    assert _base_salary("مهندس برمجيات", "دكتوراه ذكاء اصطناعي") == 6000
