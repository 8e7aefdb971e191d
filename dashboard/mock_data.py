"""Synthetic data for the offline/demo mode."""

import random
from datetime import date, timedelta

import pandas as pd

DEPARTMENTS = [
    'الموارد البشرية', 'تكنولوجيا المعلومات', 'الذكاء الاصطناعي',
    'أمن المعلومات', 'تطوير البرمجيات', 'المحاسبة والمالية',
]

POSITIONS = [
    'مهندس برمجيات', 'محلل بيانات', 'مطور Full Stack', 'أخصائي أمن سيبراني',
    'مهندس ذكاء اصطناعي', 'محاسب', 'أخصائي موارد بشرية', 'مدير مشروع',
]

EDUCATION_LEVELS = [
    'بكالوريوس علوم حاسب', 'ماجستير هندسة برمجيات', 'بكالوريوس محاسبة',
    'ماجستير إدارة أعمال', 'دكتوراه ذكاء اصطناعي',
]

NAMES = [
    'أحمد محمد السعدي', 'فاطمة علي القحطاني', 'خالد عبدالله المطيري',
    'نورا سعد العتيبي', 'محمود حسن الدوسري', 'سارة عبدالعزيز الزهراني',
    'يوسف علي الغامدي', 'هدى عبدالرحمن الشهري', 'عمر خالد العنزي',
    'ريم محمد الحربي', 'إبراهيم سعد الجهني', 'منى حسن البقمي',
]


def generate_local_test_data(count=50, rng=None, today=None):
    """Employee records shaped like the /api/employees response"""
    rng = rng or random.Random()
    today = today or date.today()
    start = date(2020, 1, 1)
    span_days = max((today - start).days, 0)

    employees = []
    for i in range(1, count + 1):
        department = rng.choice(DEPARTMENTS)
        employees.append({
            "id": i,
            "name": rng.choice(NAMES),
            "department": department,
            "department_name": department,
            "position": rng.choice(POSITIONS),
            "age": 25 + rng.randrange(20),
            "salary": float(5000 + rng.randrange(10000)),
            "hire_date": (start + timedelta(days=rng.randint(0, span_days))).isoformat(),
            "education": rng.choice(EDUCATION_LEVELS),
            "gender": "male" if rng.random() > 0.5 else "female",
            "is_active": True,
            "absence_days": rng.randrange(15),
        })
    return employees


def stats_from_employees(employees, today=None):
    """The /api/stats object computed locally from a list of employee records"""
    today = pd.Timestamp(today or date.today())
    frame = pd.DataFrame(list(employees or []))
    if frame.empty:
        return {
            "active": {"total_active": 0, "avg_age": None, "avg_absence": None},
            "turnover": {"left_employees": 0, "total_employees": 0},
            "departments": [],
            "education": [],
        }

    for column in ("is_active", "age", "absence_days", "education", "hire_date"):
        if column not in frame.columns:
            frame[column] = None
    if "department_name" not in frame.columns:
        frame["department_name"] = frame.get("department")

    frame["is_active"] = frame["is_active"].fillna(False).astype(bool)
    frame["hire_date"] = pd.to_datetime(frame["hire_date"], errors="coerce")
    active = frame[frame["is_active"]]

    window = frame[frame["hire_date"] >= today - pd.DateOffset(years=1)]
    education = active["education"].dropna()
    education = education[education.astype(str).str.strip() != ""]

    def _mean(series):
        value = pd.to_numeric(series, errors="coerce").mean()
        return None if pd.isna(value) else float(value)

    return {
        "active": {
            "total_active": int(len(active)),
            "avg_age": _mean(active["age"]),
            "avg_absence": _mean(active["absence_days"]),
        },
        "turnover": {
            "left_employees": int((~window["is_active"]).sum()),
            "total_employees": int(len(window)),
        },
        "departments": [
            {"name": name, "count": int(count)}
            for name, count in active["department_name"].value_counts().sort_index().items()
        ],
        "education": [
            {"education": name, "count": int(count)}
            for name, count in education.value_counts().items()
        ],
    }
