"""
Luck Service

Contrasts each team's actual record with two reference win totals:

- expected wins: a flat coin-flip baseline (0.5 per game), deliberately
  not model-based (the SOS projection is the model-based figure)
- deserved wins: the sum of post-outcome win probabilities

plus close-game record and turnover luck indicators from per-game
turnover statistics.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_

from app.config import settings
from app.models.game import Game, GameStats
from app.models.team import Team
from app.models.luck import LuckAnalysis
from app.services.rating_table import RatingTable
from app.services.calculation_tracking import CalculationTracker, CalculationError, SeasonRunSummary
from app.utils.team_names import normalize_team_name

logger = logging.getLogger(__name__)

CLOSE_GAME_MARGIN = 8
BASELINE_WIN_PROBABILITY = 0.5


@dataclass
class TeamTurnoverStats:
    fumbles_lost: int = 0
    fumbles_recovered: int = 0
    interceptions: int = 0


# game_id -> normalized team name -> stats
GameTurnoverStats = Dict[int, Dict[str, TeamTurnoverStats]]


class TurnoverStatsSource:
    """Per-game turnover statistics from the game_stats table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_turnover_stats(self, game_ids: Sequence[int]) -> GameTurnoverStats:
        """Stats for the given games; games without stats are absent from the result."""
        if not game_ids:
            return {}

        result = await self.db.execute(
            select(GameStats).where(GameStats.game_id.in_(list(game_ids)))
        )

        stats: GameTurnoverStats = {}
        for row in result.scalars().all():
            stats.setdefault(row.game_id, {})[normalize_team_name(row.team)] = TeamTurnoverStats(
                fumbles_lost=row.fumbles_lost or 0,
                fumbles_recovered=row.fumbles_recovered or 0,
                interceptions=row.interceptions or 0,
            )
        return stats


@dataclass
class LuckMetrics:
    wins: int = 0
    losses: int = 0
    expected_wins: float = 0.0
    deserved_wins: float = 0.0
    close_game_wins: int = 0
    close_game_total: int = 0
    games_analyzed: int = 0

    # Turnover accumulators, over games where both teams have stats
    turnover_games: int = 0
    total_fumbles: int = 0
    fumble_recoveries: int = 0
    total_interceptions: int = 0
    team_interceptions: int = 0
    turnovers: int = 0
    takeaways: int = 0

    @property
    def expected_vs_actual(self) -> float:
        return self.wins - self.expected_wins

    @property
    def deserved_vs_actual(self) -> float:
        return self.deserved_wins - self.wins

    @property
    def expected_vs_deserved(self) -> float:
        return self.deserved_wins - self.expected_wins

    @property
    def turnover_data_available(self) -> bool:
        return self.turnover_games > 0

    @property
    def fumble_recovery_rate(self) -> Optional[float]:
        """Share of all lost fumbles that went this team's way, in percent."""
        if not self.turnover_data_available:
            return None
        if self.total_fumbles == 0:
            return 50.0
        return self.fumble_recoveries / self.total_fumbles * 100

    @property
    def interception_rate(self) -> Optional[float]:
        """Share of all interceptions in the team's games made by the team, in percent."""
        if not self.turnover_data_available:
            return None
        if self.total_interceptions == 0:
            return 50.0
        return self.team_interceptions / self.total_interceptions * 100

    @property
    def turnover_margin(self) -> Optional[int]:
        if not self.turnover_data_available:
            return None
        return self.takeaways - self.turnovers


def accumulate_team_luck(
    team_name: str,
    games: Sequence[Game],
    turnover_stats: Optional[GameTurnoverStats] = None
) -> LuckMetrics:
    """
    Aggregate a team's completed games into luck metrics.

    Args:
        team_name: Team the games belong to (matched against home/away team)
        games: Completed games
        turnover_stats: Per-game turnover statistics, if any are available

    Returns:
        LuckMetrics
    """
    turnover_stats = turnover_stats or {}
    metrics = LuckMetrics()

    for game in games:
        is_home = game.home_team == team_name
        opponent = game.away_team if is_home else game.home_team
        team_score = game.home_points if is_home else game.away_points
        opp_score = game.away_points if is_home else game.home_points

        if team_score is None or opp_score is None:
            logger.warning(f"Completed game {game.id} has no final score, skipping")
            continue

        metrics.games_analyzed += 1
        margin = abs(team_score - opp_score)
        close_game = margin <= CLOSE_GAME_MARGIN

        if team_score > opp_score:
            metrics.wins += 1
            if close_game:
                metrics.close_game_wins += 1
        else:
            metrics.losses += 1

        if close_game:
            metrics.close_game_total += 1

        metrics.expected_wins += BASELINE_WIN_PROBABILITY

        postgame_prob = game.home_postgame_win_probability if is_home else game.away_postgame_win_probability
        metrics.deserved_wins += float(postgame_prob) if postgame_prob is not None else BASELINE_WIN_PROBABILITY

        game_stats = turnover_stats.get(game.id, {})
        team_stats = game_stats.get(normalize_team_name(team_name))
        opp_stats = game_stats.get(normalize_team_name(opponent))

        if team_stats and opp_stats:
            metrics.turnover_games += 1

            # A team recovers the fumbles its opponent loses
            metrics.total_fumbles += team_stats.fumbles_lost + opp_stats.fumbles_lost
            metrics.fumble_recoveries += opp_stats.fumbles_lost

            metrics.total_interceptions += team_stats.interceptions + opp_stats.interceptions
            metrics.team_interceptions += team_stats.interceptions

            metrics.turnovers += team_stats.fumbles_lost + opp_stats.interceptions
            metrics.takeaways += team_stats.interceptions + opp_stats.fumbles_lost

    return metrics


class LuckService:
    """Service for computing and storing team luck analysis"""

    def __init__(self, db: AsyncSession, turnover_source: Optional[TurnoverStatsSource] = None):
        self.db = db
        self.turnover_source = turnover_source or TurnoverStatsSource(db)

    async def _get_completed_games(self, team_name: str, season: int) -> List[Game]:
        result = await self.db.execute(
            select(Game)
            .where(or_(Game.home_team == team_name, Game.away_team == team_name))
            .where(Game.season == season)
            .where(Game.completed == True)  # noqa: E712
            .order_by(Game.week, Game.start_date)
        )
        return result.scalars().all()

    async def compute_team_luck(self, team_name: str, season: int) -> LuckMetrics:
        """Luck metrics for one team from its completed games."""
        games = await self._get_completed_games(team_name, season)
        turnover_stats = await self.turnover_source.get_turnover_stats([g.id for g in games])

        metrics = accumulate_team_luck(team_name, games, turnover_stats)

        if games and not metrics.turnover_data_available:
            logger.info(f"No turnover stats for {team_name} in {season}, turnover luck unavailable")

        return metrics

    async def _save_luck(
        self,
        team_name: str,
        season: int,
        conference: Optional[str],
        power_rank: Optional[int],
        metrics: LuckMetrics
    ) -> LuckAnalysis:
        """Insert or update the luck row for a team/season."""
        result = await self.db.execute(
            select(LuckAnalysis)
            .where(LuckAnalysis.team_name == team_name)
            .where(LuckAnalysis.season == season)
        )
        record = result.scalar_one_or_none()

        if record is None:
            record = LuckAnalysis(team_name=team_name, season=season)
            self.db.add(record)

        record.conference = conference
        record.power_rank = power_rank
        record.wins = metrics.wins
        record.losses = metrics.losses
        record.expected_wins = round(metrics.expected_wins, 2)
        record.expected_vs_actual = round(metrics.expected_vs_actual, 2)
        record.deserved_wins = round(metrics.deserved_wins, 2)
        record.deserved_vs_actual = round(metrics.deserved_vs_actual, 2)
        record.expected_vs_deserved = round(metrics.expected_vs_deserved, 2)
        record.close_game_wins = metrics.close_game_wins
        record.close_game_total = metrics.close_game_total
        record.fumble_recovery_rate = (
            round(metrics.fumble_recovery_rate, 1) if metrics.fumble_recovery_rate is not None else None
        )
        record.interception_rate = (
            round(metrics.interception_rate, 1) if metrics.interception_rate is not None else None
        )
        record.turnover_margin = metrics.turnover_margin
        record.turnover_data_available = metrics.turnover_data_available
        record.games_analyzed = metrics.games_analyzed
        record.last_updated = datetime.utcnow()

        return record

    async def calculate_season(self, season: int, classification: Optional[str] = None) -> SeasonRunSummary:
        """
        Recompute luck analysis for every team of a classification in a season.

        Rows are upserted and committed together once every team succeeded.

        Raises:
            CalculationError: If any team could not be computed
        """
        classification = classification or settings.DEFAULT_CLASSIFICATION
        summary = SeasonRunSummary(season=season, classification=classification)

        async with CalculationTracker(self.db, 'luck', season) as tracker:
            ratings = await RatingTable.load(self.db, season)

            result = await self.db.execute(
                select(Team)
                .where(Team.classification == classification)
                .order_by(Team.school)
            )
            teams = result.scalars().all()
            logger.info(f"Calculating luck for {len(teams)} {classification} teams in {season}")

            for i, team in enumerate(teams, 1):
                logger.info(f"[{i}/{len(teams)}] Calculating luck for {team.school}")
                try:
                    metrics = await self.compute_team_luck(team.school, season)
                    await self._save_luck(
                        team.school,
                        season,
                        team.conference,
                        ratings.rank_of_team(team.school),
                        metrics
                    )
                    summary.team_count += 1
                except Exception as e:
                    logger.error(f"Failed to calculate luck for {team.school}: {e}", exc_info=True)
                    summary.failed_teams.append(team.school)

            if summary.failed_teams:
                raise CalculationError(
                    f"Luck calculation failed for {len(summary.failed_teams)} of {len(teams)} teams: "
                    f"{', '.join(summary.failed_teams)}"
                )

            tracker.team_count = summary.team_count

        return summary
