"""Recount batch membership and re-apply the alumni cascade for completed batches.

Safe to run repeatedly; use it after an interrupted batch completion or a manual data fix.

Usage:
  python scripts/reconcile_batches.py
"""
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.database import SessionLocal
import app.models  # noqa: F401
from app.services import batch_service


def main():
    db = SessionLocal()
    try:
        report = batch_service.reconcile_batches(db)
    finally:
        db.close()

    print("Batch reconcile result")
    for row in report:
        changed = row["previous_total"] != row["total_students"] or row["alumni_fixed"]
        marker = "*" if changed else " "
        print(
            f" {marker} [{row['batch_id']}] {row['batch_name']}: "
            f"total_students {row['previous_total']} -> {row['total_students']}, "
            f"alumni_fixed {row['alumni_fixed']}"
        )


if __name__ == "__main__":
    main()
