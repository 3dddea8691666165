from sqlalchemy import Column, String, Integer, Float, DateTime, UniqueConstraint, func
from app.database import Base


class TeamPowerRating(Base):
    __tablename__ = "team_power_ratings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_name = Column(String(100), nullable=False, index=True)
    season = Column(Integer, nullable=False, index=True)

    power_rating = Column(Float)
    offense_rating = Column(Float)
    defense_rating = Column(Float)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())

    __table_args__ = (
        UniqueConstraint('team_name', 'season', name='uix_power_rating_team_season'),
    )

    def __repr__(self):
        return f"<TeamPowerRating {self.team_name} {self.season}: {self.power_rating}>"
