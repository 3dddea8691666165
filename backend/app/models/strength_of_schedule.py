"""
Strength of Schedule Model - one row per team/season/classification

Each of the four game-filter combinations is stored side by side as a
column group, so a team's full SOS profile is a single read:

    ''            all games
    '_regular'    regular season only
    '_conference' conference games only
    '_conf_reg'   conference games, regular season only
"""
from sqlalchemy import Column, String, Integer, Float, DateTime, Index, func
from app.database import Base


class StrengthOfSchedule(Base):
    __tablename__ = "strength_of_schedule"

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_name = Column(String(100), nullable=False, index=True)
    season = Column(Integer, nullable=False, index=True)
    classification = Column(String(20), nullable=False, default='fbs')

    # All games
    sos_overall = Column(Float)
    sos_played = Column(Float)
    sos_remaining = Column(Float)
    actual_wins = Column(Integer, default=0)
    actual_losses = Column(Integer, default=0)
    projected_wins = Column(Float)
    projected_wins_played = Column(Float)
    projected_wins_remaining = Column(Float)
    win_difference = Column(Float)
    top40_wins = Column(Integer, default=0)
    top40_games = Column(Integer, default=0)
    top40_wins_played = Column(Integer, default=0)
    top40_games_played = Column(Integer, default=0)
    top40_wins_remaining = Column(Integer, default=0)
    top40_games_remaining = Column(Integer, default=0)
    coinflip_games = Column(Integer, default=0)
    coinflip_games_played = Column(Integer, default=0)
    coinflip_games_remaining = Column(Integer, default=0)
    sure_thing_games = Column(Integer, default=0)
    sure_thing_games_played = Column(Integer, default=0)
    sure_thing_games_remaining = Column(Integer, default=0)
    longshot_games = Column(Integer, default=0)
    longshot_games_played = Column(Integer, default=0)
    longshot_games_remaining = Column(Integer, default=0)
    games_played = Column(Integer, default=0)
    games_remaining = Column(Integer, default=0)
    sos_rank = Column(Integer)

    # Regular season only
    sos_overall_regular = Column(Float)
    sos_played_regular = Column(Float)
    sos_remaining_regular = Column(Float)
    actual_wins_regular = Column(Integer, default=0)
    actual_losses_regular = Column(Integer, default=0)
    projected_wins_regular = Column(Float)
    projected_wins_played_regular = Column(Float)
    projected_wins_remaining_regular = Column(Float)
    win_difference_regular = Column(Float)
    top40_wins_regular = Column(Integer, default=0)
    top40_games_regular = Column(Integer, default=0)
    top40_wins_played_regular = Column(Integer, default=0)
    top40_games_played_regular = Column(Integer, default=0)
    top40_wins_remaining_regular = Column(Integer, default=0)
    top40_games_remaining_regular = Column(Integer, default=0)
    coinflip_games_regular = Column(Integer, default=0)
    coinflip_games_played_regular = Column(Integer, default=0)
    coinflip_games_remaining_regular = Column(Integer, default=0)
    sure_thing_games_regular = Column(Integer, default=0)
    sure_thing_games_played_regular = Column(Integer, default=0)
    sure_thing_games_remaining_regular = Column(Integer, default=0)
    longshot_games_regular = Column(Integer, default=0)
    longshot_games_played_regular = Column(Integer, default=0)
    longshot_games_remaining_regular = Column(Integer, default=0)
    games_played_regular = Column(Integer, default=0)
    games_remaining_regular = Column(Integer, default=0)
    sos_rank_regular = Column(Integer)

    # Conference games only
    sos_overall_conference = Column(Float)
    sos_played_conference = Column(Float)
    sos_remaining_conference = Column(Float)
    actual_wins_conference = Column(Integer, default=0)
    actual_losses_conference = Column(Integer, default=0)
    projected_wins_conference = Column(Float)
    projected_wins_played_conference = Column(Float)
    projected_wins_remaining_conference = Column(Float)
    win_difference_conference = Column(Float)
    top40_wins_conference = Column(Integer, default=0)
    top40_games_conference = Column(Integer, default=0)
    top40_wins_played_conference = Column(Integer, default=0)
    top40_games_played_conference = Column(Integer, default=0)
    top40_wins_remaining_conference = Column(Integer, default=0)
    top40_games_remaining_conference = Column(Integer, default=0)
    coinflip_games_conference = Column(Integer, default=0)
    coinflip_games_played_conference = Column(Integer, default=0)
    coinflip_games_remaining_conference = Column(Integer, default=0)
    sure_thing_games_conference = Column(Integer, default=0)
    sure_thing_games_played_conference = Column(Integer, default=0)
    sure_thing_games_remaining_conference = Column(Integer, default=0)
    longshot_games_conference = Column(Integer, default=0)
    longshot_games_played_conference = Column(Integer, default=0)
    longshot_games_remaining_conference = Column(Integer, default=0)
    games_played_conference = Column(Integer, default=0)
    games_remaining_conference = Column(Integer, default=0)
    sos_rank_conference = Column(Integer)

    # Conference + regular season
    sos_overall_conf_reg = Column(Float)
    sos_played_conf_reg = Column(Float)
    sos_remaining_conf_reg = Column(Float)
    actual_wins_conf_reg = Column(Integer, default=0)
    actual_losses_conf_reg = Column(Integer, default=0)
    projected_wins_conf_reg = Column(Float)
    projected_wins_played_conf_reg = Column(Float)
    projected_wins_remaining_conf_reg = Column(Float)
    win_difference_conf_reg = Column(Float)
    top40_wins_conf_reg = Column(Integer, default=0)
    top40_games_conf_reg = Column(Integer, default=0)
    top40_wins_played_conf_reg = Column(Integer, default=0)
    top40_games_played_conf_reg = Column(Integer, default=0)
    top40_wins_remaining_conf_reg = Column(Integer, default=0)
    top40_games_remaining_conf_reg = Column(Integer, default=0)
    coinflip_games_conf_reg = Column(Integer, default=0)
    coinflip_games_played_conf_reg = Column(Integer, default=0)
    coinflip_games_remaining_conf_reg = Column(Integer, default=0)
    sure_thing_games_conf_reg = Column(Integer, default=0)
    sure_thing_games_played_conf_reg = Column(Integer, default=0)
    sure_thing_games_remaining_conf_reg = Column(Integer, default=0)
    longshot_games_conf_reg = Column(Integer, default=0)
    longshot_games_played_conf_reg = Column(Integer, default=0)
    longshot_games_remaining_conf_reg = Column(Integer, default=0)
    games_played_conf_reg = Column(Integer, default=0)
    games_remaining_conf_reg = Column(Integer, default=0)
    sos_rank_conf_reg = Column(Integer)

    last_updated = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index('ix_sos_team_season_class', 'team_name', 'season', 'classification', unique=True),
    )

    def __repr__(self):
        return f"<StrengthOfSchedule {self.team_name} {self.season} rank={self.sos_rank}>"
