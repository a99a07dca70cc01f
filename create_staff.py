"""
Create a staff member directly in the database.

Staff administration is not exposed over HTTP; this script seeds the
reference rows attendance and payroll need.

Usage:
    python create_staff.py "Jane Doe" --position stylist --base-salary 30000 --ot-rate 50
"""

import argparse
import logging
from decimal import Decimal

from salon_backend.fastapi.dependencies.database import SessionLocal, init_db
from salon_backend.fastapi.crud.staff import create_staff
from salon_backend.fastapi.schemas.staff import StaffCreate

logger = logging.getLogger("create_staff")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Create a staff member")
    parser.add_argument("name", help="Display name")
    parser.add_argument("--position", default="stylist", help="Job title")
    parser.add_argument("--base-salary", type=Decimal, default=None, help="Monthly base salary")
    parser.add_argument("--ot-rate", type=Decimal, default=None, help="Overtime pay per hour")
    return parser.parse_args(argv)


def create_initial_staff(argv=None):
    """Create one staff member from command line arguments."""
    args = parse_args(argv)
    staff_data = StaffCreate(
        name=args.name,
        position=args.position,
        base_salary=args.base_salary,
        ot_rate_per_hour=args.ot_rate
    )

    init_db()
    db = SessionLocal()
    try:
        staff = create_staff(db, staff_data)
        logger.info("Created staff member %s (%s), id=%s", staff.name, staff.position, staff.id)
        return staff
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    create_initial_staff()
