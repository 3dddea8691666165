#!/usr/bin/env python3
"""
Create all database tables for the CFB analytics backend

Run this after PostgreSQL is set up and running.
"""
import asyncio
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent))

from app.database import engine, Base
from app import models  # noqa: F401


async def create_tables():
    """Create all database tables"""
    print("="*60)
    print("Creating Database Tables")
    print("="*60)
    print()

    try:
        print("Connecting to database...")
        async with engine.begin() as conn:
            print("Creating tables...")
            await conn.run_sync(Base.metadata.create_all)

        print()
        print("✅ Tables created successfully!")
        print()
        print("Tables created:")
        for table_name in Base.metadata.tables:
            print(f"  - {table_name}")
        print()
        print("="*60)
        print("✅ Database is ready!")
        print("="*60)
        print()
        print("Next steps:")
        print("  1. Load teams, games, and power ratings")
        print("  2. Run calculations: python -m app.cli all --season 2024")
        print("  3. Start API: uvicorn app.main:app --reload")
        print()

    except Exception as e:
        print()
        print(f"❌ ERROR: Failed to create tables")
        print(f"   {str(e)}")
        print()
        print("Check DATABASE_URL in .env and that the database is running")
        print()
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(create_tables())
