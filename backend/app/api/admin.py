"""
Admin API Endpoints

Calculation health and recalculation triggers.
"""
from fastapi import APIRouter, Depends, Query, HTTPException, Body, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import Optional
import subprocess
import sys
import os
from pathlib import Path

from app.database import get_db
from app.models.game import Game
from app.models.strength_of_schedule import StrengthOfSchedule
from app.models.luck import LuckAnalysis
from app.schemas.calculation_status import RecalculateResponse
from app.services.calculation_tracking import CALCULATION_TYPES, get_calculation_status
from app.config import settings

# Rate limiting
from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

router = APIRouter()

RECALCULATE_OPERATIONS = ('spreads', 'sos', 'luck', 'all')


@router.get("/health/summary")
async def get_calculation_health_summary(
    season: Optional[int] = Query(None, description="Season year (default: current season)"),
    db: AsyncSession = Depends(get_db)
):
    """
    Get calculation health for a season.

    Combines the latest status of each calculation with stored row counts.
    """
    season = season or settings.CFB_SEASON_YEAR

    statuses = {
        calculation_type: await get_calculation_status(db, calculation_type, season)
        for calculation_type in CALCULATION_TYPES
    }

    games_with_spreads = (await db.execute(
        select(func.count(Game.id))
        .where(Game.season == season)
        .where(Game.home_spread.is_not(None))
    )).scalar() or 0
    sos_rows = (await db.execute(
        select(func.count(StrengthOfSchedule.id)).where(StrengthOfSchedule.season == season)
    )).scalar() or 0
    luck_rows = (await db.execute(
        select(func.count(LuckAnalysis.id)).where(LuckAnalysis.season == season)
    )).scalar() or 0

    states = [status["status"] for status in statuses.values()]
    if any(state == "failed" for state in states):
        health_score = "failed"
    elif any(state == "running" for state in states):
        health_score = "running"
    elif all(state == "completed" for state in states):
        health_score = "healthy"
    else:
        health_score = "incomplete"

    return {
        "season": season,
        "health_score": health_score,
        "calculations": statuses,
        "data": {
            "games_with_spreads": games_with_spreads,
            "sos_rows": sos_rows,
            "luck_rows": luck_rows
        }
    }


def verify_admin_password(password: str):
    """Verify admin password"""
    if password != settings.ADMIN_PASSWORD:
        raise HTTPException(status_code=401, detail="Invalid admin password")


@router.post("/actions/recalculate", response_model=RecalculateResponse)
@limiter.limit("5/minute")
async def trigger_recalculation(
    request: Request,
    password: str = Body(..., embed=True),
    operation: str = Body("all"),
    season: Optional[int] = Body(None),
    classification: Optional[str] = Body(None)
):
    """
    Run a season calculation through the CLI in the background
    Requires admin password
    Rate limited: 5 requests per minute per IP

    Parameters:
    - operation: spreads, sos, luck, or all (default)
    - season: Season year (defaults to current season)
    - classification: Team classification (defaults to fbs)

    Poll /api/calculation-status/{type}/{season} for progress.
    """
    verify_admin_password(password)

    if operation not in RECALCULATE_OPERATIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown operation '{operation}', expected one of: {', '.join(RECALCULATE_OPERATIONS)}"
        )

    season = season or settings.CFB_SEASON_YEAR

    try:
        # Get the backend directory path
        backend_dir = Path(__file__).parent.parent.parent

        cmd = [sys.executable, "-m", "app.cli", operation, "--season", str(season)]
        if classification:
            cmd.extend(["--classification", classification])

        # Run the CLI in the background
        process = subprocess.Popen(
            cmd,
            cwd=str(backend_dir),
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            env=os.environ.copy()
        )

        return {
            "message": f"{operation} recalculation initiated for {season}",
            "operation": operation,
            "season": season,
            "process_id": process.pid,
            "status": "running"
        }
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to start recalculation: {str(e)}")
