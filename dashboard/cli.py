"""
Terminal rendition of the HR dashboard.

Examples:
  python -m dashboard                                   # live data, seeding if empty
  python -m dashboard --no-seed --department "Engineering"
  python -m dashboard --date-from 2022-01-01 --date-to 2022-12-31 --export reports/
"""

import argparse
import logging
import sys

from dashboard.charts import build_charts, department_cards, table_rows
from dashboard.client import DEFAULT_BASE_URL, HRApiClient
from dashboard.kpis import compute_kpis
from dashboard.loader import apply_filters, load_dashboard
from dashboard.report import write_report
from dashboard.state import ChartRegistry

TABLE_COLUMNS = [
    ("name", "Name"),
    ("department", "Department"),
    ("position", "Position"),
    ("hire_date", "Hired"),
    ("education", "Education"),
    ("age", "Age"),
    ("salary", "Salary"),
]


def build_parser():
    parser = argparse.ArgumentParser(
        prog="python -m dashboard",
        description="HR dashboard: KPIs, department cards and the employee table",
    )
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL, help="HR API base URL")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds (default: none)")
    parser.add_argument("--no-seed", dest="seed", action="store_false", help="Do not ask the server to seed demo data")
    parser.add_argument("--department", help="Filter by department name")
    parser.add_argument("--date-from", help="Earliest hire date (YYYY-MM-DD)")
    parser.add_argument("--date-to", help="Latest hire date (YYYY-MM-DD)")
    parser.add_argument("--export", metavar="DIR", help="Write hr-report-YYYY-MM-DD.json into DIR")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def format_table(rows):
    if not rows:
        return "No employees to display"
    widths = {
        key: max(len(title), *(len(str(row[key])) for row in rows))
        for key, title in TABLE_COLUMNS
    }
    lines = ["  ".join(title.ljust(widths[key]) for key, title in TABLE_COLUMNS)]
    lines.append("  ".join("-" * widths[key] for key, _ in TABLE_COLUMNS))
    for row in rows:
        lines.append("  ".join(str(row[key]).ljust(widths[key]) for key, _ in TABLE_COLUMNS))
    return "\n".join(lines)


def render(state, registry, out=None):
    """Print the dashboard for `state`; charts are redrawn through the registry"""
    out = out or sys.stdout
    if state.notice:
        print(f"[{state.mode.upper()}] {state.notice}", file=out)

    kpis = compute_kpis(state.stats, state.filtered)
    print(f"Active employees: {kpis['total_employees']}", file=out)
    print(f"Turnover rate:    {kpis['turnover_rate']}", file=out)
    print(f"Absence rate:     {kpis['absence_rate']}", file=out)
    print(f"Average tenure:   {kpis['average_tenure']} years", file=out)

    handles = registry.render_all(build_charts(state.filtered))
    empty = sorted(name for name, handle in handles.items() if handle is None)
    if empty:
        print(f"No data for charts: {', '.join(empty)}", file=out)

    print("", file=out)
    for card in department_cards(state.filtered):
        print(
            f"{card['department']}: {card['count']} employees, "
            f"avg salary {card['avg_salary']:,}, avg age {card['avg_age']}, "
            f"avg absence {card['avg_absence']} days",
            file=out,
        )

    print("", file=out)
    print(format_table(table_rows(state.filtered)), file=out)


def main(argv=None, client=None, out=None):
    out = out or sys.stdout
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    client = client or HRApiClient(args.base_url, timeout=args.timeout)
    state = load_dashboard(client, seed=args.seed)

    filters = {"departmentName": args.department, "dateFrom": args.date_from, "dateTo": args.date_to}
    try:
        state = apply_filters(client, state, filters)
    except ValueError as e:
        print(f"Invalid filters: {e}", file=sys.stderr)
        return 2

    registry = ChartRegistry()
    render(state, registry, out=out)

    if args.export:
        path = write_report(state.filtered, directory=args.export)
        print(f"\nReport exported to {path}", file=out)

    registry.clear()
    return 0
