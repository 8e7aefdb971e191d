"""KPIs derived on the client from the stats object and the filtered employees."""

from datetime import datetime

# Working days in a year used to turn average absence days into a rate
WORKING_DAYS_PER_YEAR = 250
# Tenure is measured in 365-day years
DAYS_PER_YEAR = 365

SECONDS_PER_YEAR = DAYS_PER_YEAR * 24 * 60 * 60


def _as_float(value):
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _parse_hire_date(value):
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def active_employees(employees):
    return [emp for emp in employees or [] if emp.get("is_active")]


def turnover_rate(stats):
    """left / total hired in the trailing year, as a percentage string"""
    turnover = (stats or {}).get("turnover") or {}
    total = _as_float(turnover.get("total_employees")) or 0
    left = _as_float(turnover.get("left_employees")) or 0
    if total <= 0:
        return "0.0%"
    return f"{left / total * 100:.1f}%"


def absence_rate(stats):
    """Average absence days over a 250-day working year, as a percentage string"""
    active = (stats or {}).get("active") or {}
    avg_absence = _as_float(active.get("avg_absence"))
    if not avg_absence:
        return "0.0%"
    return f"{avg_absence / WORKING_DAYS_PER_YEAR * 100:.1f}%"


def average_tenure(employees, now=None):
    """Mean years since hire over active employees, one decimal"""
    now = now or datetime.now()
    hire_dates = [_parse_hire_date(emp.get("hire_date")) for emp in active_employees(employees)]
    years = [(now - hired).total_seconds() / SECONDS_PER_YEAR for hired in hire_dates if hired]
    if not years:
        return "0.0"
    return f"{sum(years) / len(years):.1f}"


def compute_kpis(stats, employees, now=None):
    """All dashboard KPIs; recomputed from scratch on every filter change"""
    return {
        "total_employees": len(active_employees(employees)),
        "turnover_rate": turnover_rate(stats),
        "absence_rate": absence_rate(stats),
        "average_tenure": average_tenure(employees, now=now),
    }
