from pydantic import BaseModel
from datetime import datetime
from typing import List, Optional


class SOSEntry(BaseModel):
    """One team's SOS profile under a single filter combination"""
    team_name: str
    sos_rank: Optional[int]
    sos_overall: Optional[float]
    sos_played: Optional[float]
    sos_remaining: Optional[float]
    actual_wins: int
    actual_losses: int
    projected_wins: Optional[float]
    projected_wins_played: Optional[float]
    projected_wins_remaining: Optional[float]
    win_difference: Optional[float]
    top40_wins: int
    top40_games: int
    top40_wins_played: int
    top40_games_played: int
    top40_wins_remaining: int
    top40_games_remaining: int
    coinflip_games: int
    coinflip_games_played: int
    coinflip_games_remaining: int
    sure_thing_games: int
    sure_thing_games_played: int
    sure_thing_games_remaining: int
    longshot_games: int
    longshot_games_played: int
    longshot_games_remaining: int
    games_played: int
    games_remaining: int
    last_updated: Optional[datetime]


class SOSLeaderboard(BaseModel):
    season: int
    classification: str
    filter: str
    teams: List[SOSEntry]
    total: int
