import asyncio
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent))

from app.database import AsyncSessionLocal
from app.models.calculation_status import CalculationStatus
from sqlalchemy import select

async def check():
    async with AsyncSessionLocal() as db:
        result = await db.execute(
            select(CalculationStatus)
            .order_by(CalculationStatus.season.desc(), CalculationStatus.calculation_type)
        )
        rows = result.scalars().all()

        if not rows:
            print("No calculation runs found in database")
        else:
            print(f"Found {len(rows)} calculation status rows:\n")
            for row in rows:
                print(f"{row.calculation_type} {row.season}")
                print(f"  Status: {row.status}")
                print(f"  Started: {row.started_at}")
                print(f"  Completed: {row.completed_at}")
                print(f"  Teams: {row.team_count}")
                if row.error_message:
                    print(f"  Error: {row.error_message}")
                print()

asyncio.run(check())
