"""Create the alumni portal tables (batch, users, company, company_share).

Usage:
  python scripts/init_db.py          # create missing tables
  python scripts/init_db.py --reset  # drop everything first (local development only)
"""
import argparse
import os
import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.config import settings
from app.database import engine, Base
import app.models  # noqa: F401 - registers all models


def init_db(reset: bool = False):
    print(f"Database: {settings.DATABASE_URL}")
    if reset:
        print("Dropping existing tables...")
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    for table in Base.metadata.sorted_tables:
        print(f"  - {table.name}")
    print("Database initialized successfully.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--reset", action="store_true", help="drop all tables before creating them")
    init_db(reset=parser.parse_args().reset)
