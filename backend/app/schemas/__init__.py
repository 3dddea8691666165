from app.schemas.strength_of_schedule import SOSEntry, SOSLeaderboard
from app.schemas.luck import LuckResponse, LuckLeaderboard
from app.schemas.calculation_status import CalculationStatusResponse, RecalculateResponse

__all__ = [
    "SOSEntry",
    "SOSLeaderboard",
    "LuckResponse",
    "LuckLeaderboard",
    "CalculationStatusResponse",
    "RecalculateResponse",
]
