"""
Tests for the normal-CDF win probability model and game lines.
"""

import pytest
from app.utils.win_probability import (
    normal_cdf,
    win_probability,
    home_field_adjustment,
    compute_game_line,
    HOME_FIELD_ADVANTAGE,
)
from app.utils.team_names import normalize_team_name


class TestNormalCdf:
    """Test the CDF approximation."""

    def test_known_values(self):
        """Standard normal reference points within approximation error."""
        assert normal_cdf(1.0) == pytest.approx(0.841345, abs=1e-6)
        assert normal_cdf(-1.96) == pytest.approx(0.024998, abs=1e-6)
        assert normal_cdf(3.0) == pytest.approx(0.998650, abs=1e-6)

    def test_mean_and_std_dev_shift(self):
        assert normal_cdf(13.5, 0.0, 13.5) == pytest.approx(normal_cdf(1.0))
        assert normal_cdf(7.0, 7.0, 2.0) == pytest.approx(0.5, abs=1e-6)

    def test_bounded(self):
        for x in (-50.0, -5.0, 0.0, 5.0, 50.0):
            assert 0.0 <= normal_cdf(x) <= 1.0


class TestWinProbability:
    """Test win probability from rating differences."""

    def test_even_matchup_is_half(self):
        assert win_probability(0.0) == pytest.approx(0.5, abs=1e-6)

    @pytest.mark.parametrize("rating_diff", [0.5, 2.0, 7.25, 13.5, 28.0, 60.0])
    def test_symmetry(self, rating_diff):
        """P(d) + P(-d) == 1 for every rating difference."""
        assert win_probability(rating_diff) + win_probability(-rating_diff) == pytest.approx(1.0, abs=1e-12)

    def test_monotonic(self):
        diffs = [-20, -10, -3, 0, 3, 10, 20]
        probs = [win_probability(d) for d in diffs]
        assert probs == sorted(probs)

    def test_one_standard_deviation(self):
        assert win_probability(13.5) == pytest.approx(0.8413, abs=1e-4)


class TestHomeField:

    def test_home_field_applies(self):
        assert home_field_adjustment(False) == HOME_FIELD_ADVANTAGE == 2.15

    def test_neutral_site_has_no_home_field(self):
        assert home_field_adjustment(True) == 0.0


class TestGameLine:
    """Test spread sign convention and complementary probabilities."""

    def test_neutral_site_game(self):
        """Ratings 10.0 vs 8.0 at a neutral site."""
        line = compute_game_line(10.0, 8.0, neutral_site=True)
        assert line.rating_diff == pytest.approx(2.0)
        assert line.home_spread == pytest.approx(-2.0)
        assert line.away_spread == pytest.approx(2.0)
        assert line.home_win_probability == pytest.approx(0.5589, abs=1e-3)
        assert line.home_win_probability + line.away_win_probability == pytest.approx(1.0)

    def test_home_field_included(self):
        line = compute_game_line(8.0, 8.0)
        assert line.rating_diff == pytest.approx(2.15)
        assert line.home_spread == pytest.approx(-2.15)

    @pytest.mark.parametrize("home, away", [(20.0, 3.0), (3.0, 20.0), (-5.0, -4.0), (0.0, 10.0)])
    def test_favorite_has_negative_spread(self, home, away):
        line = compute_game_line(home, away)
        assert line.home_spread == -line.away_spread
        assert (line.home_spread < 0) == (line.home_win_probability > 0.5)


class TestNormalizeTeamName:

    def test_trims_and_lowercases(self):
        assert normalize_team_name("  Ohio State ") == "ohio state"

    def test_none(self):
        assert normalize_team_name(None) == ""
