"""
Calculation Tracking Service

Status bookkeeping for season-level batch calculations (SOS, luck).
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Dict, Any, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.models.calculation_status import CalculationStatus

logger = logging.getLogger(__name__)

CALCULATION_TYPES = ('sos', 'luck')


class CalculationError(Exception):
    """A batch calculation could not complete for the whole season."""


@dataclass
class SeasonRunSummary:
    season: int
    classification: str
    team_count: int = 0
    failed_teams: List[str] = field(default_factory=list)
    skipped_opponents: int = 0  # games against opponents with no power rating


class CalculationTracker:
    """
    Context manager bracketing a batch calculation run.

    running -> completed on a clean exit, running -> failed on any exception.
    Work left pending in the session when an exception escapes is rolled
    back before the failure is recorded, and the exception is re-raised.
    """

    def __init__(self, db: AsyncSession, calculation_type: str, season: int):
        if calculation_type not in CALCULATION_TYPES:
            raise ValueError(f"Unknown calculation type: {calculation_type}")

        self.db = db
        self.calculation_type = calculation_type
        self.season = season
        self.team_count = 0
        self.status: Optional[CalculationStatus] = None

    async def __aenter__(self):
        """Mark calculation as running"""
        self.status = await _get_or_create_status(self.db, self.calculation_type, self.season)
        self.status.status = 'running'
        self.status.started_at = datetime.utcnow()
        self.status.completed_at = None
        self.status.error_message = None
        self.status.team_count = 0
        await self.db.commit()

        logger.info(f"{self.calculation_type} calculation for {self.season} started")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Record completion or failure"""
        if exc_type is not None:
            await self.db.rollback()

            self.status = await _get_or_create_status(self.db, self.calculation_type, self.season)
            self.status.status = 'failed'
            self.status.completed_at = datetime.utcnow()
            self.status.error_message = str(exc_val)
            await self.db.commit()

            logger.error(f"{self.calculation_type} calculation for {self.season} failed: {exc_val}")
        else:
            self.status.status = 'completed'
            self.status.completed_at = datetime.utcnow()
            self.status.team_count = self.team_count
            await self.db.commit()

            logger.info(
                f"{self.calculation_type} calculation for {self.season} completed "
                f"({self.team_count} teams)"
            )

        return False  # Don't suppress exceptions


async def _get_or_create_status(db: AsyncSession, calculation_type: str, season: int) -> CalculationStatus:
    result = await db.execute(
        select(CalculationStatus)
        .where(CalculationStatus.calculation_type == calculation_type)
        .where(CalculationStatus.season == season)
    )
    status = result.scalar_one_or_none()

    if status is None:
        status = CalculationStatus(
            calculation_type=calculation_type,
            season=season,
            status='running',
            started_at=datetime.utcnow(),
            team_count=0,
        )
        db.add(status)

    return status


async def get_calculation_status(db: AsyncSession, calculation_type: str, season: int) -> Dict[str, Any]:
    """
    Current status of a calculation, for status polling.

    Returns {"status": "not_started"} when the calculation has never run.
    """
    result = await db.execute(
        select(CalculationStatus)
        .where(CalculationStatus.calculation_type == calculation_type)
        .where(CalculationStatus.season == season)
    )
    status = result.scalar_one_or_none()

    if not status:
        return {
            "calculation_type": calculation_type,
            "season": season,
            "status": "not_started",
            "started_at": None,
            "completed_at": None,
            "team_count": 0,
            "error_message": None,
        }

    return {
        "calculation_type": status.calculation_type,
        "season": status.season,
        "status": status.status,
        "started_at": status.started_at.isoformat() if status.started_at else None,
        "completed_at": status.completed_at.isoformat() if status.completed_at else None,
        "team_count": status.team_count,
        "error_message": status.error_message,
    }
