#!/usr/bin/env python3
"""
Database initialization script for the HR dashboard

Creates the tables, inserts the department catalog and optionally seeds
demo employees.

Examples:
  python init_db.py                  # tables and departments only
  python init_db.py --seed           # plus 100 demo employees when empty
  python init_db.py --seed --count 500
  python init_db.py --drop --seed    # full reset
  python init_db.py --status
"""

import argparse
import os
import sys

os.environ.setdefault("CREATE_APP_ON_IMPORT", "0")

from app import create_app
from models import db
from services.seed_service import ensure_departments, seed_database
from utils.errors import HRDashboardError


def show_status(repository):
    departments = repository.list_departments()
    print(f"Departments: {len(departments)}")
    print(f"Employees:   {repository.count_employees()}")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Initialize the HR dashboard database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--drop", action="store_true", help="Drop all tables before creating them")
    parser.add_argument("--seed", action="store_true", help="Insert demo employees when the table is empty")
    parser.add_argument("--count", type=int, default=None, help="Number of demo employees (default: SEED_EMPLOYEE_COUNT)")
    parser.add_argument("--status", action="store_true", help="Only print row counts")
    args = parser.parse_args(argv)

    app = create_app(register_blueprints=False)
    repository = app.extensions["hr_repository"]

    with app.app_context():
        try:
            if args.status:
                show_status(repository)
                return 0

            if args.drop:
                print("Dropping all tables...")
                db.drop_all()
                db.create_all()
                ensure_departments(repository)

            print("✅ Tables and departments ready")

            if args.seed:
                count = args.count or app.config["SEED_EMPLOYEE_COUNT"]
                inserted = seed_database(repository, count=count)
                if inserted:
                    print(f"✅ Inserted {inserted} demo employees")
                else:
                    print("Employees already present, nothing seeded")

            show_status(repository)
        except HRDashboardError as e:
            print(f"❌ Database initialization failed: {e.message}")
            if e.details:
                print(f"   {e.details}")
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
