from pydantic import BaseModel
from typing import Optional


class CalculationStatusResponse(BaseModel):
    calculation_type: str
    season: int
    status: str  # not_started, running, completed, failed
    started_at: Optional[str]
    completed_at: Optional[str]
    team_count: int
    error_message: Optional[str]


class RecalculateResponse(BaseModel):
    message: str
    operation: str
    season: int
    process_id: int
    status: str
