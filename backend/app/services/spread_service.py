"""
Game Spread Service

Derives a point spread and complementary pregame win probabilities for
every game of a season from team power ratings, and writes them back onto
the games. Safe to re-run: values are overwritten, never accumulated.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func, or_

from app.models.game import Game
from app.services.rating_table import RatingTable
from app.utils.win_probability import compute_game_line

logger = logging.getLogger(__name__)

# Anomaly thresholds used by validation
MAX_REASONABLE_SPREAD = 50
MIN_REASONABLE_PROBABILITY = 0.01
MAX_REASONABLE_PROBABILITY = 0.99


@dataclass
class SpreadRunSummary:
    season: int
    total_games: int = 0
    processed: int = 0
    skipped: int = 0


@dataclass
class SpreadValidationReport:
    season: int
    total_games: int
    games_with_spreads: int
    games_with_probabilities: int
    avg_abs_spread: Optional[float]
    avg_home_win_probability: Optional[float]
    anomalies: List[Dict[str, Any]] = field(default_factory=list)


class GameSpreadService:
    """Service for computing and maintaining game-level spreads"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def calculate_game_spreads(self, season: int) -> SpreadRunSummary:
        """
        Compute spreads and win probabilities for all games in a season.

        Games where either side has no power rating are skipped and counted.

        Args:
            season: Season year

        Returns:
            SpreadRunSummary with processed/skipped counts
        """
        logger.info(f"Calculating game spreads and win probabilities for {season}")

        result = await self.db.execute(
            select(Game)
            .where(Game.season == season)
            .order_by(Game.start_date, Game.id)
        )
        games = result.scalars().all()

        summary = SpreadRunSummary(season=season, total_games=len(games))
        if not games:
            logger.warning(f"No games found for {season}")
            return summary

        ratings = await RatingTable.load(self.db, season)

        for game in games:
            home_rating = ratings.rating(game.home_team)
            away_rating = ratings.rating(game.away_team)

            if home_rating is None or away_rating is None:
                summary.skipped += 1
                logger.warning(
                    f"Missing rating for game {game.id}: {game.home_team} vs {game.away_team} "
                    f"(home: {home_rating}, away: {away_rating})"
                )
                continue

            line = compute_game_line(home_rating, away_rating, bool(game.neutral_site))

            game.home_spread = round(line.home_spread, 2)
            game.away_spread = round(line.away_spread, 2)
            game.home_pregame_win_probability = round(line.home_win_probability, 4)
            game.away_pregame_win_probability = round(line.away_win_probability, 4)

            summary.processed += 1

        await self.db.commit()

        logger.info(
            f"Game spreads complete for {season}: {summary.processed} processed, "
            f"{summary.skipped} skipped (missing ratings)"
        )
        return summary

    async def validate(self, season: int) -> SpreadValidationReport:
        """Coverage statistics and out-of-range values for a season's spreads."""
        stats = (await self.db.execute(
            select(
                func.count(Game.id).label('total_games'),
                func.count(Game.home_spread).label('games_with_spreads'),
                func.count(Game.home_pregame_win_probability).label('games_with_probabilities'),
                func.avg(func.abs(Game.home_spread)).label('avg_abs_spread'),
                func.avg(Game.home_pregame_win_probability).label('avg_home_win_probability'),
            )
            .where(Game.season == season)
        )).one()

        anomalies_result = await self.db.execute(
            select(Game)
            .where(Game.season == season)
            .where(or_(
                func.abs(Game.home_spread) > MAX_REASONABLE_SPREAD,
                Game.home_pregame_win_probability < MIN_REASONABLE_PROBABILITY,
                Game.home_pregame_win_probability > MAX_REASONABLE_PROBABILITY,
            ))
            .order_by(Game.id)
            .limit(10)
        )

        anomalies = [
            {
                "game_id": game.id,
                "home_team": game.home_team,
                "away_team": game.away_team,
                "home_spread": game.home_spread,
                "home_pregame_win_probability": game.home_pregame_win_probability,
            }
            for game in anomalies_result.scalars().all()
        ]

        return SpreadValidationReport(
            season=season,
            total_games=stats.total_games or 0,
            games_with_spreads=stats.games_with_spreads or 0,
            games_with_probabilities=stats.games_with_probabilities or 0,
            avg_abs_spread=round(float(stats.avg_abs_spread), 2) if stats.avg_abs_spread is not None else None,
            avg_home_win_probability=(
                round(float(stats.avg_home_win_probability), 4)
                if stats.avg_home_win_probability is not None else None
            ),
            anomalies=anomalies,
        )

    async def clear(self, season: int) -> int:
        """
        Null the derived spread/probability fields for a season.

        Returns:
            Number of games cleared
        """
        result = await self.db.execute(
            update(Game)
            .where(Game.season == season)
            .values(
                home_spread=None,
                away_spread=None,
                home_pregame_win_probability=None,
                away_pregame_win_probability=None,
            )
        )
        await self.db.commit()

        logger.info(f"Cleared spread data for {result.rowcount} games in {season}")
        return result.rowcount
