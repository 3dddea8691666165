"""
Rating Table - frozen per-season power rating snapshot

Loaded once per batch run so every opponent lookup and rank check within
the run sees the same ratings, without re-querying per game.
"""
import logging
from bisect import bisect_right
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.power_rating import TeamPowerRating
from app.utils.team_names import normalize_team_name

logger = logging.getLogger(__name__)


class RatingTable:
    """Season power ratings keyed by normalized team name."""

    def __init__(self, season: int, ratings: Dict[str, float]):
        self.season = season
        self._ratings = {normalize_team_name(name): float(value) for name, value in ratings.items()}
        self._sorted: List[float] = sorted(self._ratings.values())

    @classmethod
    async def load(cls, db: AsyncSession, season: int) -> "RatingTable":
        result = await db.execute(
            select(TeamPowerRating.team_name, TeamPowerRating.power_rating)
            .where(TeamPowerRating.season == season)
            .where(TeamPowerRating.power_rating.is_not(None))
        )
        ratings = {row.team_name: row.power_rating for row in result.all()}
        logger.info(f"Loaded {len(ratings)} power ratings for {season}")
        return cls(season, ratings)

    def __len__(self) -> int:
        return len(self._ratings)

    def __contains__(self, team_name: str) -> bool:
        return normalize_team_name(team_name) in self._ratings

    def rating(self, team_name: str) -> Optional[float]:
        """Power rating for a team, or None if the team is unrated this season."""
        return self._ratings.get(normalize_team_name(team_name))

    def rank_of(self, rating: float) -> int:
        """1 + number of teams rated strictly higher."""
        return len(self._sorted) - bisect_right(self._sorted, rating) + 1

    def rank_of_team(self, team_name: str) -> Optional[int]:
        rating = self.rating(team_name)
        if rating is None:
            return None
        return self.rank_of(rating)
