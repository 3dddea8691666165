"""
Service layer modules

These services run the season-level calculations and their bookkeeping.
"""

from .rating_table import RatingTable
from .calculation_tracking import (
    CalculationTracker,
    CalculationError,
    SeasonRunSummary,
    get_calculation_status,
)
from .spread_service import GameSpreadService, SpreadRunSummary, SpreadValidationReport
from .sos_service import SOSService, SOSMetrics
from .ranking_service import RankingService, assign_ranks
from .luck_service import LuckService, LuckMetrics, TurnoverStatsSource

__all__ = [
    "RatingTable",
    "CalculationTracker",
    "CalculationError",
    "SeasonRunSummary",
    "get_calculation_status",
    "GameSpreadService",
    "SpreadRunSummary",
    "SpreadValidationReport",
    "SOSService",
    "SOSMetrics",
    "RankingService",
    "assign_ranks",
    "LuckService",
    "LuckMetrics",
    "TurnoverStatsSource",
]
