"""
Calculation Status Model - Tracks batch calculation runs
"""
from sqlalchemy import Column, Integer, String, DateTime, Text, UniqueConstraint
from datetime import datetime

from app.database import Base


class CalculationStatus(Base):
    """
    Live status of a batch calculation for one season.

    Exactly one row per (calculation_type, season); reruns reset it.
    States: running, completed, failed (absence of a row means not_started).
    """
    __tablename__ = "calculation_status"

    id = Column(Integer, primary_key=True, index=True)

    calculation_type = Column(String(50), nullable=False, index=True)  # sos, luck
    season = Column(Integer, nullable=False, index=True)
    status = Column(String(20), nullable=False, default='running')

    started_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    completed_at = Column(DateTime)
    team_count = Column(Integer, default=0)
    error_message = Column(Text)

    __table_args__ = (
        UniqueConstraint('calculation_type', 'season', name='uix_calculation_type_season'),
    )

    def __repr__(self):
        return f"<CalculationStatus {self.calculation_type} {self.season} [{self.status}]>"
