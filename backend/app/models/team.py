from sqlalchemy import Column, String, Integer, DateTime, Index, func
from app.database import Base


class Team(Base):
    """Team roster entry - loaded once per import, read-only to the calculators"""
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, autoincrement=True)
    school = Column(String(100), nullable=False, index=True)
    conference = Column(String(100))
    classification = Column(String(20), index=True)  # 'fbs', 'fcs', ...
    abbreviation = Column(String(20))

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index('ix_teams_school_classification', 'school', 'classification', unique=True),
    )

    def __repr__(self):
        return f"<Team {self.school} ({self.conference}, {self.classification})>"
