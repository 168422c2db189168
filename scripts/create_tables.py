#!/usr/bin/env python
"""Script to create the users and chats tables without Alembic."""

import sys
from pathlib import Path

# Add project root and backend app to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
sys.path.insert(0, str(project_root / "apps" / "backend"))

from dotenv import load_dotenv

load_dotenv()

from sqlalchemy import create_engine, inspect

from app.core.config import get_settings
from app.db.base import Base

# Import ALL models so their tables are registered with Base.metadata
from app.models import Chat, User  # noqa: F401

settings = get_settings()


def create_tables(drop_existing: bool = False):
    """Create all database tables."""
    engine = create_engine(settings.database_url_sync, echo=True)

    if drop_existing:
        print("Dropping existing tables...")
        Base.metadata.drop_all(engine)
        print("✓ Existing tables dropped")

    Base.metadata.create_all(engine)
    print("✓ All tables created successfully")

    tables = sorted(inspect(engine).get_table_names())
    print(f"\nTables in database: {', '.join(tables)}")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Create chat relay database tables")
    parser.add_argument(
        "--drop",
        action="store_true",
        help="Drop existing tables before creating",
    )
    args = parser.parse_args()

    create_tables(drop_existing=args.drop)
