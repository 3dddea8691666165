import math
from typing import NamedTuple

# Model parameters are fixed by convention, not fitted
STANDARD_DEVIATION = 13.5
HOME_FIELD_ADVANTAGE = 2.15

# Zelen & Severo (Abramowitz-Stegun 26.2.17) coefficients
_P = 0.2316419
_D = 0.3989423
_B = (0.3193815, -0.3565638, 1.781478, -1.821256, 1.330274)


def normal_cdf(x: float, mean: float = 0.0, std_dev: float = 1.0) -> float:
    """
    Approximate the normal CDF at x.

    Rational-polynomial approximation with absolute error below ~1e-7.
    The lower tail is evaluated directly and mirrored for positive z, so
    normal_cdf(m + d) + normal_cdf(m - d) == 1 for every d.

    Args:
        x: Point to evaluate
        mean: Distribution mean
        std_dev: Distribution standard deviation (must be positive)

    Returns:
        Float probability between 0 and 1
    """
    z = (x - mean) / std_dev
    t = 1 / (1 + _P * abs(z))
    d = _D * math.exp(-z * z / 2)
    b1, b2, b3, b4, b5 = _B
    prob = d * t * (b1 + t * (b2 + t * (b3 + t * (b4 + t * b5))))
    if z > 0:
        prob = 1 - prob
    return prob


def win_probability(rating_diff: float, mean: float = 0.0, std_dev: float = STANDARD_DEVIATION) -> float:
    """Probability that the side with the given rating edge wins."""
    return normal_cdf(rating_diff, mean, std_dev)


def home_field_adjustment(neutral_site: bool) -> float:
    """Rating points credited to the home side (the away side gets the negation)."""
    return 0.0 if neutral_site else HOME_FIELD_ADVANTAGE


class GameLine(NamedTuple):
    rating_diff: float
    home_spread: float
    away_spread: float
    home_win_probability: float
    away_win_probability: float


def compute_game_line(home_rating: float, away_rating: float, neutral_site: bool = False) -> GameLine:
    """
    Point spread and complementary win probabilities for a matchup.

    Home spread is negative when the home team is favored (betting convention).
    """
    rating_diff = home_rating - away_rating + home_field_adjustment(neutral_site)
    home_win_prob = win_probability(rating_diff)
    return GameLine(
        rating_diff=rating_diff,
        home_spread=-rating_diff,
        away_spread=rating_diff,
        home_win_probability=home_win_prob,
        away_win_probability=1 - home_win_prob,
    )
