"""
Strength of Schedule Service

Builds per-team strength-of-schedule profiles from game-level pregame win
probabilities and opponent power ratings, under four game-filter regimes:
all games, regular season only, conference games only, and conference
games in the regular season.

Run the spread calculation first: only games with a pregame win
probability are considered.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, or_

from app.config import settings
from app.models.game import Game
from app.models.team import Team
from app.models.strength_of_schedule import StrengthOfSchedule
from app.services.filters import FILTER_COMBINATIONS
from app.services.rating_table import RatingTable
from app.services.ranking_service import RankingService
from app.services.calculation_tracking import CalculationTracker, CalculationError, SeasonRunSummary

logger = logging.getLogger(__name__)

TOP_OPPONENT_CUTOFF = 40

# Difficulty buckets by the team's own win probability. Probabilities in
# (0.2, 0.4) and (0.6, 0.8) belong to no bucket.
COINFLIP_MIN = 0.4
COINFLIP_MAX = 0.6
SURE_THING_MIN = 0.8
LONGSHOT_MAX = 0.2


def difficulty_bucket(win_probability: float) -> Optional[str]:
    """Classify a game as 'coinflip', 'sure_thing', 'longshot', or None."""
    if COINFLIP_MIN <= win_probability <= COINFLIP_MAX:
        return 'coinflip'
    if win_probability >= SURE_THING_MIN:
        return 'sure_thing'
    if win_probability <= LONGSHOT_MAX:
        return 'longshot'
    return None


@dataclass
class SOSMetrics:
    """
    Raw strength-of-schedule accumulators for one team and filter regime.

    Values are kept unrounded; to_columns() applies the storage rounding.
    """
    sos_played_total: float = 0.0
    sos_remaining_total: float = 0.0
    played_opponents: int = 0
    remaining_opponents: int = 0

    actual_wins: int = 0
    actual_losses: int = 0
    projected_wins_played: float = 0.0
    projected_wins_remaining: float = 0.0

    top40_wins_played: int = 0
    top40_games_played: int = 0
    top40_wins_remaining: int = 0
    top40_games_remaining: int = 0

    coinflip_games_played: int = 0
    coinflip_games_remaining: int = 0
    sure_thing_games_played: int = 0
    sure_thing_games_remaining: int = 0
    longshot_games_played: int = 0
    longshot_games_remaining: int = 0

    games_played: int = 0
    games_remaining: int = 0

    # Games whose opponent has no power rating (left out of SOS and top-40)
    skipped_opponents: int = 0

    @property
    def sos_played(self) -> float:
        return self.sos_played_total / self.played_opponents if self.played_opponents else 0.0

    @property
    def sos_remaining(self) -> float:
        return self.sos_remaining_total / self.remaining_opponents if self.remaining_opponents else 0.0

    @property
    def sos_overall(self) -> float:
        opponents = self.played_opponents + self.remaining_opponents
        if not opponents:
            return 0.0
        return (self.sos_played_total + self.sos_remaining_total) / opponents

    @property
    def projected_wins(self) -> float:
        return self.projected_wins_played + self.projected_wins_remaining

    @property
    def win_difference(self) -> float:
        return self.actual_wins - (self.projected_wins_played + self.projected_wins_remaining)

    @property
    def top40_wins(self) -> int:
        return self.top40_wins_played + self.top40_wins_remaining

    @property
    def top40_games(self) -> int:
        return self.top40_games_played + self.top40_games_remaining

    @property
    def coinflip_games(self) -> int:
        return self.coinflip_games_played + self.coinflip_games_remaining

    @property
    def sure_thing_games(self) -> int:
        return self.sure_thing_games_played + self.sure_thing_games_remaining

    @property
    def longshot_games(self) -> int:
        return self.longshot_games_played + self.longshot_games_remaining

    def count_bucket(self, win_probability: float, played: bool) -> None:
        bucket = difficulty_bucket(win_probability)
        if bucket is None:
            return
        attr = f"{bucket}_games_{'played' if played else 'remaining'}"
        setattr(self, attr, getattr(self, attr) + 1)

    def to_columns(self, suffix: str = '') -> Dict[str, Any]:
        """
        Storage values keyed by strength_of_schedule column name.

        SOS averages keep 3 decimals, win totals 1 decimal. The stored win
        difference is taken against the rounded projection so the stored
        columns satisfy win_difference == actual_wins - projected_wins.
        """
        projected_wins = round(self.projected_wins, 1)
        values = {
            'sos_overall': round(self.sos_overall, 3),
            'sos_played': round(self.sos_played, 3),
            'sos_remaining': round(self.sos_remaining, 3),
            'actual_wins': self.actual_wins,
            'actual_losses': self.actual_losses,
            'projected_wins': projected_wins,
            'projected_wins_played': round(self.projected_wins_played, 1),
            'projected_wins_remaining': round(self.projected_wins_remaining, 1),
            'win_difference': round(self.actual_wins - projected_wins, 1),
            'top40_wins': self.top40_wins,
            'top40_games': self.top40_games,
            'top40_wins_played': self.top40_wins_played,
            'top40_games_played': self.top40_games_played,
            'top40_wins_remaining': self.top40_wins_remaining,
            'top40_games_remaining': self.top40_games_remaining,
            'coinflip_games': self.coinflip_games,
            'coinflip_games_played': self.coinflip_games_played,
            'coinflip_games_remaining': self.coinflip_games_remaining,
            'sure_thing_games': self.sure_thing_games,
            'sure_thing_games_played': self.sure_thing_games_played,
            'sure_thing_games_remaining': self.sure_thing_games_remaining,
            'longshot_games': self.longshot_games,
            'longshot_games_played': self.longshot_games_played,
            'longshot_games_remaining': self.longshot_games_remaining,
            'games_played': self.games_played,
            'games_remaining': self.games_remaining,
        }
        return {f"{name}{suffix}": value for name, value in values.items()}


def dedupe_games(games: Sequence[Game]) -> List[Game]:
    """Keep the first game per (week, home, away); feeds repeat some rows."""
    seen = set()
    unique = []
    for game in games:
        key = (game.week, game.home_team, game.away_team)
        if key in seen:
            continue
        seen.add(key)
        unique.append(game)
    return unique


def accumulate_team_sos(team_name: str, games: Sequence[Game], ratings: RatingTable) -> SOSMetrics:
    """
    Aggregate a team's games into SOS metrics.

    Args:
        team_name: Team the games belong to (matched against home/away team)
        games: The team's games with pregame win probabilities, already filtered
        ratings: Frozen rating snapshot for the season

    Returns:
        SOSMetrics (all zero when games is empty)
    """
    metrics = SOSMetrics()

    for game in games:
        # Neither played nor remaining until the feed reports a completion state
        if game.completed is None:
            continue

        is_home = game.home_team == team_name
        opponent = game.away_team if is_home else game.home_team
        team_win_prob = float(
            (game.home_pregame_win_probability if is_home else game.away_pregame_win_probability) or 0
        )
        played = bool(game.completed)

        opponent_rating = ratings.rating(opponent)
        top_opponent = False
        if opponent_rating is None:
            metrics.skipped_opponents += 1
        else:
            top_opponent = ratings.rank_of(opponent_rating) <= TOP_OPPONENT_CUTOFF

        if played:
            metrics.games_played += 1
            if opponent_rating is not None:
                metrics.sos_played_total += opponent_rating
                metrics.played_opponents += 1
                if top_opponent:
                    metrics.top40_games_played += 1

            team_score = game.home_points if is_home else game.away_points
            opp_score = game.away_points if is_home else game.home_points
            if team_score is not None and opp_score is not None:
                if team_score > opp_score:
                    metrics.actual_wins += 1
                    if top_opponent:
                        metrics.top40_wins_played += 1
                else:
                    metrics.actual_losses += 1

            metrics.projected_wins_played += team_win_prob
        else:
            metrics.games_remaining += 1
            if opponent_rating is not None:
                metrics.sos_remaining_total += opponent_rating
                metrics.remaining_opponents += 1
                if top_opponent:
                    metrics.top40_games_remaining += 1

            metrics.projected_wins_remaining += team_win_prob

        metrics.count_bucket(team_win_prob, played)

    return metrics


class SOSService:
    """Service for computing and storing strength-of-schedule records"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self._ratings: Dict[int, RatingTable] = {}

    async def _rating_table(self, season: int) -> RatingTable:
        if season not in self._ratings:
            self._ratings[season] = await RatingTable.load(self.db, season)
        return self._ratings[season]

    async def _get_team_games(
        self,
        team_name: str,
        season: int,
        regular_season_only: bool,
        conference_only: bool
    ) -> List[Game]:
        query = (
            select(Game)
            .where(or_(Game.home_team == team_name, Game.away_team == team_name))
            .where(Game.season == season)
            .where(Game.home_pregame_win_probability.is_not(None))
            .where(Game.completed.is_not(None))
        )

        if regular_season_only:
            query = query.where(Game.season_type == 'regular')

        if conference_only:
            query = query.where(Game.conference_game == True)  # noqa: E712

        query = query.order_by(Game.week, Game.home_team, Game.away_team, Game.start_date)

        result = await self.db.execute(query)
        return dedupe_games(result.scalars().all())

    async def compute_team_sos(
        self,
        team_name: str,
        season: int,
        regular_season_only: bool = False,
        conference_only: bool = False
    ) -> SOSMetrics:
        """
        Compute SOS metrics for one team under one filter regime.

        Returns an all-zero SOSMetrics when no games match the filters.
        """
        games = await self._get_team_games(team_name, season, regular_season_only, conference_only)
        ratings = await self._rating_table(season)

        metrics = accumulate_team_sos(team_name, games, ratings)

        logger.debug(
            f"{team_name} ({season}, regular={regular_season_only}, conference={conference_only}): "
            f"{len(games)} games, SOS={metrics.sos_overall:.3f}, "
            f"record={metrics.actual_wins}-{metrics.actual_losses}, "
            f"projected={metrics.projected_wins:.1f}"
        )
        return metrics

    async def build_team_record(
        self,
        team_name: str,
        season: int,
        classification: str
    ) -> Tuple[StrengthOfSchedule, int]:
        """
        Compute all four filter regimes and combine them into one row.

        Returns:
            (record, games against unrated opponents across all games)
        """
        columns: Dict[str, Any] = {}
        skipped_opponents = 0
        for combination in FILTER_COMBINATIONS:
            metrics = await self.compute_team_sos(
                team_name,
                season,
                regular_season_only=combination.regular_season_only,
                conference_only=combination.conference_only,
            )
            columns.update(metrics.to_columns(combination.suffix))
            # The other regimes are subsets of all games
            if combination.name == 'all':
                skipped_opponents = metrics.skipped_opponents

        record = StrengthOfSchedule(
            team_name=team_name,
            season=season,
            classification=classification,
            last_updated=datetime.utcnow(),
            **columns
        )
        return record, skipped_opponents

    async def calculate_season(self, season: int, classification: Optional[str] = None) -> SeasonRunSummary:
        """
        Recompute SOS for every team of a classification in a season.

        All rows are built in memory first; the season's old rows are then
        replaced and ranked in the same transaction, so a failed run leaves
        the previous results untouched.

        Raises:
            CalculationError: If any team could not be computed
        """
        classification = classification or settings.DEFAULT_CLASSIFICATION
        summary = SeasonRunSummary(season=season, classification=classification)

        async with CalculationTracker(self.db, 'sos', season) as tracker:
            self._ratings.pop(season, None)
            await self._rating_table(season)

            result = await self.db.execute(
                select(Team)
                .where(Team.classification == classification)
                .order_by(Team.school)
            )
            teams = result.scalars().all()
            logger.info(f"Calculating SOS for {len(teams)} {classification} teams in {season}")

            records = []
            for i, team in enumerate(teams, 1):
                logger.info(f"[{i}/{len(teams)}] Calculating SOS for {team.school}")
                try:
                    record, skipped_opponents = await self.build_team_record(team.school, season, classification)
                    records.append(record)
                    if skipped_opponents:
                        logger.warning(
                            f"{team.school}: {skipped_opponents} games against unrated opponents "
                            f"left out of SOS"
                        )
                        summary.skipped_opponents += skipped_opponents
                except Exception as e:
                    logger.error(f"Failed to calculate SOS for {team.school}: {e}", exc_info=True)
                    summary.failed_teams.append(team.school)

            if summary.failed_teams:
                raise CalculationError(
                    f"SOS calculation failed for {len(summary.failed_teams)} of {len(teams)} teams: "
                    f"{', '.join(summary.failed_teams)}"
                )

            await self.db.execute(
                delete(StrengthOfSchedule)
                .where(StrengthOfSchedule.season == season)
                .where(StrengthOfSchedule.classification == classification)
            )
            self.db.add_all(records)
            await self.db.flush()

            await RankingService(self.db).rank_season(season, classification, commit=False)

            summary.team_count = len(records)
            tracker.team_count = len(records)

        return summary
