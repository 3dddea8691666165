from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, ForeignKey, Index
from app.database import Base


class Game(Base):
    """
    Game result / schedule entry.

    Scores are null until the game is completed. Spread and pregame win
    probability columns are derived by the spread calculator.
    """
    __tablename__ = "games"

    id = Column(Integer, primary_key=True, autoincrement=True)
    season = Column(Integer, nullable=False, index=True)
    week = Column(Integer, nullable=False)
    season_type = Column(String(20), nullable=False, default='regular')  # 'regular', 'postseason'
    start_date = Column(DateTime(timezone=True))

    neutral_site = Column(Boolean, default=False)
    conference_game = Column(Boolean, default=False)
    completed = Column(Boolean, default=False)

    home_team = Column(String(100), nullable=False, index=True)
    away_team = Column(String(100), nullable=False, index=True)
    home_points = Column(Integer)
    away_points = Column(Integer)

    # Derived by the spread calculator
    home_spread = Column(Float)
    away_spread = Column(Float)
    home_pregame_win_probability = Column(Float)
    away_pregame_win_probability = Column(Float)

    # Post-outcome win probability from the data feed (feeds "deserved wins")
    home_postgame_win_probability = Column(Float)
    away_postgame_win_probability = Column(Float)

    __table_args__ = (
        Index('ix_games_season_week', 'season', 'week'),
    )

    def __repr__(self):
        return f"<Game {self.season} W{self.week} {self.away_team}@{self.home_team}>"


class GameStats(Base):
    """Per-team turnover statistics for a single game"""
    __tablename__ = "game_stats"

    id = Column(Integer, primary_key=True, autoincrement=True)
    game_id = Column(Integer, ForeignKey("games.id", ondelete="CASCADE"), nullable=False, index=True)
    team = Column(String(100), nullable=False)

    fumbles_lost = Column(Integer, default=0)
    fumbles_recovered = Column(Integer, default=0)
    interceptions = Column(Integer, default=0)  # Interceptions made by this team

    __table_args__ = (
        Index('ix_game_stats_game_team', 'game_id', 'team', unique=True),
    )

    def __repr__(self):
        return f"<GameStats game={self.game_id} {self.team}>"
