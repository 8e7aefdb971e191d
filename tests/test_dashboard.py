import io
import json
import random
from datetime import date, datetime

import pytest
import requests

from dashboard import charts
from dashboard.cli import main
from dashboard.client import ApiError, HRApiClient
from dashboard.loader import apply_filters, clean_filters, filter_locally, load_dashboard
from dashboard.mock_data import generate_local_test_data, stats_from_employees
from dashboard.report import build_report, write_report
from dashboard.state import CACHED, LIVE, OFFLINE, ChartRegistry, DashboardState

TODAY = date(2024, 6, 15)

EMPLOYEES = [
    {"id": 3, "name": "Sara Omar", "department_name": "Finance", "position": "Accountant",
     "hire_date": "2024-02-10", "education": "BSc", "age": 28, "salary": 7000.0,
     "gender": "female", "is_active": True, "absence_days": 2},
    {"id": 2, "name": "Ahmed Ali", "department_name": "Engineering", "position": "Backend Developer",
     "hire_date": "2021-05-01", "education": "MSc", "age": 30, "salary": 9000.0,
     "gender": "male", "is_active": True, "absence_days": 4},
    {"id": 1, "name": "Omar Said", "department_name": "Engineering", "position": "QA",
     "hire_date": "2019-11-20", "education": "BSc", "age": 52, "salary": 8000.0,
     "gender": "male", "is_active": False, "absence_days": 10},
]

STATS = {
    "active": {"total_active": 2, "avg_age": 29.0, "avg_absence": 3.0},
    "turnover": {"left_employees": 0, "total_employees": 1},
    "departments": [{"name": "Engineering", "count": 1}, {"name": "Finance", "count": 1}],
    "education": [{"education": "BSc", "count": 1}, {"education": "MSc", "count": 1}],
}


class FakeClient:
    """Stands in for HRApiClient; fail=True makes every call a connection error"""

    def __init__(self, employees=EMPLOYEES, stats=STATS, fail=False):
        self.employees = employees
        self.stats = stats
        self.fail = fail
        self.calls = []

    def _call(self, name, result):
        self.calls.append(name)
        if self.fail:
            raise requests.ConnectionError("connection refused")
        return result

    def health(self):
        return self._call("health", {"status": "healthy"})

    def seed(self):
        return self._call("seed", {"message": "Database already contains data", "inserted": 0})

    def fetch_employees(self, filters=None):
        self.calls.append(("fetch_employees", dict(filters or {})))
        if self.fail:
            raise requests.ConnectionError("connection refused")
        return filter_locally(self.employees, filters or {})

    def fetch_stats(self):
        return self._call("stats", self.stats)


# Loading

def test_live_load():
    state = load_dashboard(FakeClient())
    assert state.mode == LIVE
    assert state.notice is None
    assert not state.is_degraded
    assert len(state.employees) == 3
    assert state.filtered == state.employees


def test_first_load_failure_falls_back_to_flagged_demo_data():
    state = load_dashboard(FakeClient(fail=True), rng=random.Random(1), today=TODAY)
    assert state.mode == OFFLINE
    assert state.is_degraded
    assert "demo data" in state.notice
    assert len(state.employees) == 50
    assert state.stats["active"]["total_active"] == 50


def test_reload_failure_keeps_previous_dataset():
    previous = load_dashboard(FakeClient())
    state = load_dashboard(FakeClient(fail=True), previous_state=previous)
    assert state.mode == CACHED
    assert state.notice
    assert state.employees == previous.employees
    assert state.stats == previous.stats


def test_empty_server_falls_back_to_demo_data():
    state = load_dashboard(FakeClient(employees=[]), rng=random.Random(1), today=TODAY)
    assert state.mode == OFFLINE
    assert "no employees" in state.notice


def test_load_without_seeding():
    client = FakeClient()
    load_dashboard(client, seed=False)
    assert "seed" not in client.calls


class ErroringClient(FakeClient):
    """Healthy server whose seed or stats endpoint answers with an error"""

    def __init__(self, failing, **kwargs):
        super().__init__(**kwargs)
        self.failing = failing

    def seed(self):
        if "seed" in self.failing:
            raise ApiError(500, "Error inserting seed data")
        return super().seed()

    def fetch_stats(self):
        if "stats" in self.failing:
            raise ApiError(500, "Error fetching statistics")
        return super().fetch_stats()


def test_seed_error_keeps_live_data():
    state = load_dashboard(ErroringClient({"seed"}))
    assert state.mode == LIVE
    assert state.notice is None
    assert state.employees == EMPLOYEES
    assert state.stats == STATS


def test_stats_error_keeps_live_employees_with_notice():
    state = load_dashboard(ErroringClient({"stats"}))
    assert state.mode == LIVE
    assert state.employees == EMPLOYEES
    assert state.stats is None
    assert "Statistics are unavailable" in state.notice


# Filtering

def test_clean_filters_drops_blanks_and_checks_order():
    assert clean_filters({"departmentName": " ", "dateFrom": "2021-01-01", "dateTo": None}) == {
        "dateFrom": "2021-01-01",
    }
    with pytest.raises(ValueError):
        clean_filters({"dateFrom": "2022-01-01", "dateTo": "2021-01-01"})
    with pytest.raises(ValueError):
        clean_filters({"dateTo": "someday"})


def test_live_filters_go_to_the_server():
    client = FakeClient()
    state = load_dashboard(client)
    filtered = apply_filters(client, state, {"departmentName": "Engineering"})
    assert ("fetch_employees", {"departmentName": "Engineering"}) in client.calls
    assert [emp["id"] for emp in filtered.filtered] == [2, 1]
    assert len(filtered.employees) == 3
    assert filtered.department_names() == ["Engineering", "Finance"]


def test_failed_live_filter_falls_back_to_local_filtering():
    client = FakeClient()
    state = load_dashboard(client)
    client.fail = True
    filtered = apply_filters(client, state, {"dateFrom": "2021-05-01", "dateTo": "2024-02-10"})
    assert filtered.mode == CACHED
    assert filtered.notice
    assert sorted(emp["id"] for emp in filtered.filtered) == [2, 3]


def test_offline_filters_are_local():
    client = FakeClient(fail=True)
    state = DashboardState(employees=EMPLOYEES, stats=STATS, mode=OFFLINE, notice="demo")
    filtered = apply_filters(client, state, {"departmentName": "Finance"})
    assert client.calls == []
    assert [emp["id"] for emp in filtered.filtered] == [3]


def test_clearing_filters_restores_everything():
    state = DashboardState(employees=EMPLOYEES, filtered=EMPLOYEES[:1], filters={"departmentName": "Finance"})
    cleared = apply_filters(FakeClient(), state, {})
    assert cleared.filtered == EMPLOYEES
    assert cleared.filters == {}


def test_state_rejects_unknown_mode():
    with pytest.raises(ValueError):
        DashboardState(mode="stale")


# Charts

def test_chart_registry_destroys_previous_handle():
    registry = ChartRegistry()
    first = registry.render("department", charts.department_chart(EMPLOYEES))
    second = registry.render("department", charts.department_chart(EMPLOYEES))
    assert first.destroyed
    assert not second.destroyed
    assert registry.get("department") is second

    assert registry.render("department", None) is None
    assert second.destroyed
    assert registry.names() == []


def test_department_and_gender_charts_count_active_only():
    department = charts.department_chart(EMPLOYEES)
    counts = dict(zip(department["data"]["labels"], department["data"]["datasets"][0]["data"]))
    assert counts == {"Engineering": 1, "Finance": 1}

    gender = charts.gender_chart(EMPLOYEES)
    assert dict(zip(gender["data"]["labels"], gender["data"]["datasets"][0]["data"])) == {"female": 1, "male": 1}


def test_age_groups():
    employees = [{"age": age, "is_active": True} for age in (22, 29, 30, 45, 50, 64)]
    chart = charts.age_distribution_chart(employees)
    assert chart["data"]["labels"] == ["20-29", "30-39", "40-49", "50+"]
    assert chart["data"]["datasets"][0]["data"] == [2, 1, 1, 2]


def test_hiring_trend_is_monthly_and_sorted():
    chart = charts.hiring_trend_chart(EMPLOYEES)
    assert chart["type"] == "line"
    assert chart["data"]["labels"] == ["2019-11", "2021-05", "2024-02"]


def test_hiring_trend_keeps_last_twelve_months():
    employees = [{"hire_date": f"2023-{month:02d}-01", "is_active": True} for month in range(1, 13)]
    employees.append({"hire_date": "2022-12-01", "is_active": True})
    chart = charts.hiring_trend_chart(employees)
    assert len(chart["data"]["labels"]) == 12
    assert chart["data"]["labels"][0] == "2023-01"


def test_charts_without_data_are_none():
    assert all(config is None for config in charts.build_charts([]).values())


def test_department_cards():
    cards = charts.department_cards(EMPLOYEES)
    assert cards == [
        {"department": "Engineering", "count": 1, "avg_salary": 9000, "avg_age": 30, "avg_absence": 4},
        {"department": "Finance", "count": 1, "avg_salary": 7000, "avg_age": 28, "avg_absence": 2},
    ]


def test_table_rows_show_active_employees():
    rows = charts.table_rows(EMPLOYEES)
    assert [row["name"] for row in rows] == ["Sara Omar", "Ahmed Ali"]
    assert rows[1]["salary"] == "9,000"
    assert len(charts.table_rows([{"name": str(i), "is_active": True} for i in range(30)])) == 20


# Offline data

def test_generated_data_shape():
    employees = generate_local_test_data(rng=random.Random(5), today=TODAY)
    assert len(employees) == 50
    for emp in employees:
        assert date(2020, 1, 1) <= date.fromisoformat(emp["hire_date"]) <= TODAY
        assert emp["department"] == emp["department_name"]


def test_stats_from_employees_matches_server_shape():
    stats = stats_from_employees(EMPLOYEES, today=TODAY)
    assert stats["active"] == {"total_active": 2, "avg_age": 29.0, "avg_absence": 3.0}
    assert stats["turnover"] == {"left_employees": 0, "total_employees": 1}
    assert stats["departments"] == [{"name": "Engineering", "count": 1}, {"name": "Finance", "count": 1}]


def test_stats_from_no_employees():
    stats = stats_from_employees([], today=TODAY)
    assert stats["active"]["total_active"] == 0
    assert stats["departments"] == []


# Report

def test_build_report():
    report = build_report(EMPLOYEES, now=datetime(2024, 6, 15, 14, 5, 0))
    assert report["totalEmployees"] == 2
    assert report["departmentDistribution"] == {"Finance": 1, "Engineering": 1}
    assert report["educationDistribution"] == {"BSc": 1, "MSc": 1}
    assert report["timestamp"] == "15/06/2024, 02:05:00 PM"


def test_write_report(tmp_path):
    path = write_report(EMPLOYEES, directory=str(tmp_path), now=datetime(2024, 6, 15, 9, 0, 0))
    assert path.endswith("hr-report-2024-06-15.json")
    with open(path, encoding="utf-8") as fh:
        assert json.load(fh)["totalEmployees"] == 2


# HTTP client

class StubResponse:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self._body = body

    def json(self):
        if self._body is None:
            raise ValueError("no JSON")
        return self._body


class StubSession:
    def __init__(self, response):
        self.response = response
        self.requests = []

    def request(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        return self.response


def test_client_builds_urls_and_drops_blank_params():
    session = StubSession(StubResponse(200, []))
    client = HRApiClient("http://hr.local/", session=session)
    assert client.fetch_employees({"departmentName": "Finance", "dateFrom": ""}) == []
    method, url, kwargs = session.requests[0]
    assert (method, url) == ("GET", "http://hr.local/api/employees")
    assert kwargs["params"] == {"departmentName": "Finance"}
    assert kwargs["timeout"] is None


def test_client_raises_api_error_with_details():
    session = StubSession(StubResponse(400, {"success": False, "error": "Validation failed", "details": ["name is required"]}))
    client = HRApiClient(session=session)
    with pytest.raises(ApiError) as excinfo:
        client.add_employee({})
    assert excinfo.value.status_code == 400
    assert excinfo.value.details == ["name is required"]


def test_client_checks_uploads_before_sending(tmp_path):
    session = StubSession(StubResponse(200, {}))
    client = HRApiClient(session=session)
    big = tmp_path / "big.png"
    big.write_bytes(b"\x00" * (5 * 1024 * 1024 + 1))
    with pytest.raises(ValueError):
        client.upload_file(str(big), 1, "photo", "image/png")
    with pytest.raises(ValueError):
        client.upload_file(str(big), 1, "photo", "application/pdf")
    assert session.requests == []


# CLI

def test_cli_prints_dashboard_and_exports(tmp_path):
    out = io.StringIO()
    code = main(["--export", str(tmp_path)], client=FakeClient(), out=out)
    assert code == 0
    text = out.getvalue()
    assert "Active employees: 2" in text
    assert "Ahmed Ali" in text
    assert "Report exported to" in text
    assert list(tmp_path.glob("hr-report-*.json"))


def test_cli_flags_offline_mode():
    out = io.StringIO()
    assert main([], client=FakeClient(fail=True), out=out) == 0
    assert "[OFFLINE]" in out.getvalue()


def test_cli_rejects_reversed_dates():
    assert main(["--date-from", "2022-01-01", "--date-to", "2021-01-01"], client=FakeClient()) == 2
