"""Game-filter regimes shared by the SOS calculation and ranking."""
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class FilterCombination:
    name: str
    suffix: str  # Column suffix in strength_of_schedule
    regular_season_only: bool
    conference_only: bool


FILTER_COMBINATIONS: Tuple[FilterCombination, ...] = (
    FilterCombination('all', '', regular_season_only=False, conference_only=False),
    FilterCombination('regular', '_regular', regular_season_only=True, conference_only=False),
    FilterCombination('conference', '_conference', regular_season_only=False, conference_only=True),
    FilterCombination('conf_reg', '_conf_reg', regular_season_only=True, conference_only=True),
)
