"""
SOS Ranking Service

Re-ranks persisted strength-of-schedule rows, once per filter combination.
"""
import logging
from typing import Optional, Sequence, Dict
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.config import settings
from app.models.strength_of_schedule import StrengthOfSchedule
from app.services.filters import FILTER_COMBINATIONS

logger = logging.getLogger(__name__)


def assign_ranks(records: Sequence[StrengthOfSchedule], suffix: str = '') -> Dict[str, Optional[int]]:
    """
    Rank records by sos_overall{suffix}, hardest schedule first.

    Ranks run 1..N with no ties: equal values are ordered by team name.
    Records with no value get a rank of None.

    Returns:
        Dict mapping team_name -> rank
    """
    value_column = f"sos_overall{suffix}"
    rank_column = f"sos_rank{suffix}"

    ranked = sorted(
        (r for r in records if getattr(r, value_column) is not None),
        key=lambda r: (-getattr(r, value_column), r.team_name)
    )

    ranks: Dict[str, Optional[int]] = {}
    for position, record in enumerate(ranked, 1):
        setattr(record, rank_column, position)
        ranks[record.team_name] = position

    for record in records:
        if getattr(record, value_column) is None:
            setattr(record, rank_column, None)
            ranks[record.team_name] = None

    return ranks


class RankingService:
    """Service for ranking stored SOS records within a season"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def rank_season(self, season: int, classification: Optional[str] = None, commit: bool = True) -> int:
        """
        Assign sos_rank columns for every filter combination of a season.

        Args:
            season: Season year
            classification: Team classification (defaults to settings)
            commit: Commit when done; pass False to stay inside a caller's transaction

        Returns:
            Number of records ranked
        """
        classification = classification or settings.DEFAULT_CLASSIFICATION

        result = await self.db.execute(
            select(StrengthOfSchedule)
            .where(StrengthOfSchedule.season == season)
            .where(StrengthOfSchedule.classification == classification)
            .order_by(StrengthOfSchedule.team_name)
        )
        records = result.scalars().all()

        for combination in FILTER_COMBINATIONS:
            assign_ranks(records, combination.suffix)

        if commit:
            await self.db.commit()
        else:
            await self.db.flush()

        logger.info(f"Ranked {len(records)} SOS records for {season} ({classification})")
        return len(records)
