"""
Calculation Status API

Polling endpoint for batch calculation progress.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.calculation_status import CalculationStatusResponse
from app.services.calculation_tracking import CALCULATION_TYPES, get_calculation_status

router = APIRouter()


@router.get("/{calculation_type}/{season}", response_model=CalculationStatusResponse)
async def get_status(
    calculation_type: str,
    season: int,
    db: AsyncSession = Depends(get_db)
):
    """Get the status of a calculation ('sos' or 'luck') for a season"""
    if calculation_type not in CALCULATION_TYPES:
        raise HTTPException(status_code=404, detail=f"Unknown calculation type: {calculation_type}")

    return await get_calculation_status(db, calculation_type, season)
