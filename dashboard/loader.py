"""
Loading and filtering dashboard data.

The server is the source of truth. When it cannot be reached the dashboard
keeps working on the previously loaded dataset or, on a first load, on
synthetic demo data; either way the state carries a notice saying so.
"""

import logging

import requests

from dashboard.client import ApiError
from dashboard.mock_data import generate_local_test_data, stats_from_employees
from dashboard.state import CACHED, LIVE, OFFLINE, DashboardState
from utils.validators import parse_date

logger = logging.getLogger(__name__)

CACHED_NOTICE = "Server unreachable, showing previously loaded data"
OFFLINE_NOTICE = "Server unreachable, showing demo data (not live)"
EMPTY_NOTICE = "Server returned no employees, showing demo data (not live)"
STATS_NOTICE = "Statistics are unavailable, turnover and absence rates are not shown"

FILTER_KEYS = ("departmentName", "dateFrom", "dateTo")


def _fallback_state(previous_state, notice, today=None, rng=None):
    if previous_state is not None and previous_state.employees:
        return previous_state.replace(
            mode=CACHED,
            notice=notice or CACHED_NOTICE,
            filters={},
            filtered=previous_state.employees,
        )
    employees = generate_local_test_data(rng=rng, today=today)
    return DashboardState(
        employees=employees,
        stats=stats_from_employees(employees, today=today),
        mode=OFFLINE,
        notice=notice or OFFLINE_NOTICE,
    )


def load_dashboard(client, previous_state=None, seed=True, today=None, rng=None):
    """
    Fetch employees and stats; never returns an empty unexplained state.

    Only a failed health check or employee fetch triggers the fallback. A
    failed seed is logged and the load continues; failed stats keep the live
    employees with stats=None and a notice.
    """
    try:
        client.health()
        if seed:
            try:
                result = client.seed()
                logger.info("Seed: %s", result.get("message"))
            except ApiError as e:
                logger.warning("Seeding failed, continuing with existing data: %s", e)
        employees = client.fetch_employees()
    except (requests.RequestException, ApiError) as e:
        logger.warning("Loading dashboard data failed: %s", e)
        return _fallback_state(previous_state, None, today=today, rng=rng)

    if not employees:
        logger.warning("Server returned no employees")
        return _fallback_state(None, EMPTY_NOTICE, today=today, rng=rng)

    logger.info("Loaded %s employees", len(employees))
    try:
        stats = client.fetch_stats()
    except (requests.RequestException, ApiError) as e:
        logger.warning("Fetching statistics failed: %s", e)
        return DashboardState(employees=employees, stats=None, mode=LIVE, notice=STATS_NOTICE)
    return DashboardState(employees=employees, stats=stats, mode=LIVE)


def clean_filters(filters):
    """
    Validate dashboard filters and drop blank ones.

    Raises ValueError for an unparseable date or a dateFrom after dateTo.
    """
    cleaned = {}
    for key in FILTER_KEYS:
        value = (filters or {}).get(key)
        if value is None:
            continue
        value = str(value).strip()
        if value:
            cleaned[key] = value

    bounds = {}
    for key in ("dateFrom", "dateTo"):
        if key in cleaned:
            parsed = parse_date(cleaned[key])
            if parsed is None:
                raise ValueError(f"{key} must be a valid date (YYYY-MM-DD)")
            bounds[key] = parsed
            cleaned[key] = parsed.isoformat()

    if len(bounds) == 2 and bounds["dateFrom"] > bounds["dateTo"]:
        raise ValueError("dateFrom must not be after dateTo")
    return cleaned


def filter_locally(employees, filters):
    date_from = parse_date(filters["dateFrom"]) if filters.get("dateFrom") else None
    date_to = parse_date(filters["dateTo"]) if filters.get("dateTo") else None
    department = filters.get("departmentName")

    result = []
    for emp in employees:
        if department and department not in (emp.get("department_name"), emp.get("department")):
            continue
        if date_from or date_to:
            hired = parse_date(str(emp.get("hire_date") or "")[:10])
            if hired is None:
                continue
            if date_from and hired < date_from:
                continue
            if date_to and hired > date_to:
                continue
        result.append(emp)
    return result


def apply_filters(client, state, filters):
    """
    New state whose filtered set matches `filters`.

    Live dashboards ask the server; degraded ones, or a live one whose
    request fails, filter the loaded dataset locally.
    """
    filters = clean_filters(filters)
    if not filters:
        return state.replace(filters={}, filtered=state.employees)

    if state.mode == LIVE:
        try:
            filtered = client.fetch_employees(filters)
            logger.info("Filters %s matched %s employees", filters, len(filtered))
            return state.replace(filters=filters, filtered=filtered)
        except (requests.RequestException, ApiError) as e:
            logger.warning("Server-side filtering failed, filtering locally: %s", e)
            return state.replace(
                mode=CACHED,
                notice=CACHED_NOTICE,
                filters=filters,
                filtered=filter_locally(state.employees, filters),
            )

    return state.replace(filters=filters, filtered=filter_locally(state.employees, filters))
