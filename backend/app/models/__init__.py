from app.models.team import Team
from app.models.game import Game, GameStats
from app.models.power_rating import TeamPowerRating
from app.models.strength_of_schedule import StrengthOfSchedule
from app.models.luck import LuckAnalysis
from app.models.calculation_status import CalculationStatus

__all__ = [
    "Team",
    "Game",
    "GameStats",
    "TeamPowerRating",
    "StrengthOfSchedule",
    "LuckAnalysis",
    "CalculationStatus",
]
