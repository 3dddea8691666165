from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import List, Optional


class LuckResponse(BaseModel):
    team_name: str
    season: int
    conference: Optional[str]
    power_rank: Optional[int]
    wins: int
    losses: int
    expected_wins: Optional[float]
    expected_vs_actual: Optional[float]
    deserved_wins: Optional[float]
    deserved_vs_actual: Optional[float]
    expected_vs_deserved: Optional[float]
    close_game_wins: int
    close_game_total: int
    fumble_recovery_rate: Optional[float]
    interception_rate: Optional[float]
    turnover_margin: Optional[int]
    turnover_data_available: bool
    games_analyzed: int
    last_updated: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class LuckLeaderboard(BaseModel):
    season: int
    conference: Optional[str]
    teams: List[LuckResponse]
    total: int
