from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, UniqueConstraint, func
from app.database import Base


class LuckAnalysis(Base):
    """
    Per-team luck profile for a season.

    Contrasts actual wins with a flat coin-flip baseline (expected wins) and
    with post-outcome win probabilities (deserved wins).
    """
    __tablename__ = "luck_analysis"

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_name = Column(String(100), nullable=False, index=True)
    season = Column(Integer, nullable=False, index=True)
    conference = Column(String(100))
    power_rank = Column(Integer)  # Snapshot at calculation time

    wins = Column(Integer, default=0)
    losses = Column(Integer, default=0)

    expected_wins = Column(Float)
    expected_vs_actual = Column(Float)
    deserved_wins = Column(Float)
    deserved_vs_actual = Column(Float)
    expected_vs_deserved = Column(Float)

    close_game_wins = Column(Integer, default=0)
    close_game_total = Column(Integer, default=0)

    # Null when no turnover statistics exist for the team's games
    fumble_recovery_rate = Column(Float)
    interception_rate = Column(Float)
    turnover_margin = Column(Integer)
    turnover_data_available = Column(Boolean, default=False)

    games_analyzed = Column(Integer, default=0)
    last_updated = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint('team_name', 'season', name='uix_luck_team_season'),
    )

    def __repr__(self):
        return f"<LuckAnalysis {self.team_name} {self.season} {self.wins}-{self.losses}>"
