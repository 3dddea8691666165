"""
Leaderboard API Endpoints

Read-only views over the stored SOS and luck calculations.
"""
from fastapi import APIRouter, Depends, Query, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional

from app.config import settings
from app.database import get_db
from app.models.strength_of_schedule import StrengthOfSchedule
from app.models.luck import LuckAnalysis
from app.schemas.strength_of_schedule import SOSEntry, SOSLeaderboard
from app.schemas.luck import LuckResponse, LuckLeaderboard
from app.services.filters import FILTER_COMBINATIONS

router = APIRouter()

FILTERS_BY_NAME = {combination.name: combination for combination in FILTER_COMBINATIONS}


@router.get("/strength-of-schedule/{season}", response_model=SOSLeaderboard)
async def get_sos_leaderboard(
    season: int,
    classification: Optional[str] = Query(None, description="Team classification (default: fbs)"),
    game_filter: str = Query("all", alias="filter", description="all, regular, conference, or conf_reg"),
    db: AsyncSession = Depends(get_db)
):
    """
    Get strength-of-schedule rankings for a season, hardest schedule first.

    The filter selects which game set the numbers come from.
    """
    combination = FILTERS_BY_NAME.get(game_filter)
    if combination is None:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown filter '{game_filter}', expected one of: {', '.join(FILTERS_BY_NAME)}"
        )

    classification = classification or settings.DEFAULT_CLASSIFICATION
    suffix = combination.suffix
    rank_column = getattr(StrengthOfSchedule, f"sos_rank{suffix}")

    result = await db.execute(
        select(StrengthOfSchedule)
        .where(StrengthOfSchedule.season == season)
        .where(StrengthOfSchedule.classification == classification)
        .order_by(rank_column.is_(None), rank_column, StrengthOfSchedule.team_name)
    )
    records = result.scalars().all()

    teams = [
        SOSEntry(
            team_name=record.team_name,
            last_updated=record.last_updated,
            **{
                field: getattr(record, f"{field}{suffix}")
                for field in SOSEntry.model_fields
                if field not in ('team_name', 'last_updated')
            }
        )
        for record in records
    ]

    return SOSLeaderboard(
        season=season,
        classification=classification,
        filter=combination.name,
        teams=teams,
        total=len(teams)
    )


@router.get("/luck/{season}", response_model=LuckLeaderboard)
async def get_luck_leaderboard(
    season: int,
    conference: Optional[str] = Query(None, description="Filter by conference"),
    db: AsyncSession = Depends(get_db)
):
    """Get luck analysis for a season, luckiest team (most wins above baseline) first"""
    query = select(LuckAnalysis).where(LuckAnalysis.season == season)

    if conference:
        query = query.where(LuckAnalysis.conference == conference)

    query = query.order_by(LuckAnalysis.expected_vs_actual.desc(), LuckAnalysis.team_name)

    result = await db.execute(query)
    records = result.scalars().all()

    return LuckLeaderboard(
        season=season,
        conference=conference,
        teams=[LuckResponse.model_validate(record) for record in records],
        total=len(records)
    )
