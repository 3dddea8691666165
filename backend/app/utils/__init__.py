from app.utils.win_probability import (
    normal_cdf,
    win_probability,
    home_field_adjustment,
    compute_game_line,
    GameLine,
    STANDARD_DEVIATION,
    HOME_FIELD_ADVANTAGE,
)
from app.utils.team_names import normalize_team_name

__all__ = [
    "normal_cdf",
    "win_probability",
    "home_field_adjustment",
    "compute_game_line",
    "GameLine",
    "STANDARD_DEVIATION",
    "HOME_FIELD_ADVANTAGE",
    "normalize_team_name",
]
