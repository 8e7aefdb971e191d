"""
Chart and table view models.

Each builder takes employee records (as returned by /api/employees) and
returns a Chart.js-style config dict, or None when there is nothing to draw.
"""

import pandas as pd

PALETTE = [
    "#667eea", "#764ba2", "#f093fb", "#f5576c", "#4facfe",
    "#00f2fe", "#43e97b", "#38f9d7", "#fa709a", "#fee140",
]

AGE_GROUPS = ["20-29", "30-39", "40-49", "50+"]
HIRING_TREND_MONTHS = 12
TABLE_ROW_LIMIT = 20

COLUMNS = [
    "id", "name", "department", "department_name", "position", "hire_date",
    "education", "age", "salary", "gender", "is_active", "absence_days",
]


def employees_frame(employees):
    """DataFrame with one row per employee and a resolved 'dept' column"""
    frame = pd.DataFrame(list(employees or []))
    for column in COLUMNS:
        if column not in frame.columns:
            frame[column] = None
    frame["dept"] = frame["department_name"].where(frame["department_name"].notna(), frame["department"])
    frame["is_active"] = frame["is_active"].fillna(False).astype(bool)
    frame["hire_date"] = pd.to_datetime(frame["hire_date"], errors="coerce")
    frame["age"] = pd.to_numeric(frame["age"], errors="coerce")
    frame["salary"] = pd.to_numeric(frame["salary"], errors="coerce")
    frame["absence_days"] = pd.to_numeric(frame["absence_days"], errors="coerce")
    return frame


def _active(employees):
    frame = employees_frame(employees)
    return frame[frame["is_active"]]


def _colors(count):
    return [PALETTE[i % len(PALETTE)] for i in range(count)]


def _chart(chart_type, labels, data, label=None):
    dataset = {"data": [int(value) for value in data]}
    if label:
        dataset["label"] = label
    dataset["backgroundColor"] = _colors(len(labels)) if chart_type in ("doughnut", "pie") else PALETTE[0]
    return {
        "type": chart_type,
        "data": {"labels": [str(value) for value in labels], "datasets": [dataset]},
        "options": {"responsive": True},
    }


def department_chart(employees):
    counts = _active(employees)["dept"].dropna().value_counts()
    if counts.empty:
        return None
    return _chart("doughnut", counts.index, counts.values)


def education_chart(employees):
    education = _active(employees)["education"].dropna()
    counts = education[education.astype(str).str.strip() != ""].value_counts()
    if counts.empty:
        return None
    return _chart("bar", counts.index, counts.values, label="Employees")


def hiring_trend_chart(employees, months=HIRING_TREND_MONTHS):
    """Hires per month over the last `months` months that have hires"""
    hire_dates = employees_frame(employees)["hire_date"].dropna()
    if hire_dates.empty:
        return None
    counts = hire_dates.dt.strftime("%Y-%m").value_counts().sort_index().tail(months)
    return _chart("line", counts.index, counts.values, label="Hires")


def age_distribution_chart(employees):
    ages = _active(employees)["age"].dropna()
    groups = pd.cut(ages, bins=[20, 30, 40, 50, float("inf")], right=False, labels=AGE_GROUPS)
    counts = groups.value_counts().reindex(AGE_GROUPS, fill_value=0)
    if counts.sum() == 0:
        return None
    return _chart("bar", counts.index, counts.values, label="Employees")


def gender_chart(employees):
    counts = _active(employees)["gender"].dropna().value_counts()
    if counts.empty:
        return None
    return _chart("pie", counts.index, counts.values)


def department_cards(employees):
    """Per-department summary cards for active employees, sorted by name"""
    active = _active(employees).copy()
    if active.empty:
        return []
    active["dept"] = active["dept"].fillna("Unassigned")
    grouped = active.groupby("dept").agg(
        count=("name", "size"),
        avg_salary=("salary", lambda s: s.fillna(0).mean()),
        avg_age=("age", lambda s: s.fillna(0).mean()),
        avg_absence=("absence_days", lambda s: s.fillna(0).mean()),
    ).sort_index()
    return [
        {
            "department": dept,
            "count": int(row["count"]),
            "avg_salary": int(round(row["avg_salary"])),
            "avg_age": int(round(row["avg_age"])),
            "avg_absence": int(round(row["avg_absence"])),
        }
        for dept, row in grouped.iterrows()
    ]


def table_rows(employees, limit=TABLE_ROW_LIMIT):
    """First `limit` active employees in display form"""
    rows = []
    for emp in [emp for emp in employees or [] if emp.get("is_active")][:limit]:
        rows.append({
            "name": emp.get("name"),
            "department": emp.get("department_name") or emp.get("department") or "-",
            "position": emp.get("position") or "-",
            "hire_date": emp.get("hire_date") or "-",
            "education": emp.get("education") or "-",
            "age": emp.get("age") if emp.get("age") is not None else "-",
            "salary": f"{float(emp['salary']):,.0f}" if emp.get("salary") is not None else "-",
        })
    return rows


CHART_BUILDERS = {
    "department": department_chart,
    "education": education_chart,
    "hiring_trend": hiring_trend_chart,
    "age_distribution": age_distribution_chart,
    "gender": gender_chart,
}


def build_charts(employees):
    return {name: builder(employees) for name, builder in CHART_BUILDERS.items()}
