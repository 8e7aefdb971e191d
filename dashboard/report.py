"""JSON report export for the currently filtered employees."""

import json
import logging
import os
from collections import Counter
from datetime import datetime

logger = logging.getLogger(__name__)

# Day-first local time, the way the dashboard displays dates
TIMESTAMP_FORMAT = "%d/%m/%Y, %I:%M:%S %p"


def build_report(employees, now=None):
    """Counts over active employees plus a local-time timestamp"""
    now = now or datetime.now()
    active = [emp for emp in employees or [] if emp.get("is_active")]

    departments = Counter()
    education = Counter()
    for emp in active:
        dept = emp.get("department_name") or emp.get("department")
        if dept:
            departments[dept] += 1
        if emp.get("education"):
            education[emp["education"]] += 1

    return {
        "totalEmployees": len(active),
        "departmentDistribution": dict(departments),
        "educationDistribution": dict(education),
        "timestamp": now.strftime(TIMESTAMP_FORMAT),
    }


def report_filename(day=None):
    day = day or datetime.now().date()
    return f"hr-report-{day.isoformat()}.json"


def write_report(employees, directory=".", now=None):
    """Write the report to hr-report-YYYY-MM-DD.json; returns the path"""
    now = now or datetime.now()
    report = build_report(employees, now=now)
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, report_filename(now.date()))
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(report, fh, ensure_ascii=False, indent=2)
    logger.info("Report written to %s", path)
    return path
