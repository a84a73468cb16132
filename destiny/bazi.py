"""
BaZi (Four Pillars of Destiny) calculation.

Turns a solar birth moment and sex into:
- the four natal pillars (year, month, day, hour)
- the age at which the first Luck Pillar starts
- the first Luck Pillar (大运) itself

Design principle: this module COMPUTES. It does not interpret.
Interpretation is the LLM's job; see destiny.context for the hand-off.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Optional

from destiny.astro_calendar import CalendarAdapter, get_calendar
from destiny.luck import Sex, estimate_start_age, resolve_direction
from destiny.moment import BirthMoment
from destiny.pillars import classify_polarity, step_pillar

logger = logging.getLogger(__name__)


class CalculationError(RuntimeError):
    """Any failure while calculating a chart; the cause is chained."""


@dataclass(frozen=True)
class CalculatedBazi:
    year_pillar: str
    month_pillar: str
    day_pillar: str
    hour_pillar: str
    start_age: int
    first_da_yun: str

    @property
    def pillars(self):
        return (self.year_pillar, self.month_pillar, self.day_pillar, self.hour_pillar)

    def to_dict(self):
        return asdict(self)


def calculate_bazi(moment: BirthMoment, sex: Sex,
                   calendar: Optional[CalendarAdapter] = None) -> CalculatedBazi:
    """
    Compute the complete chart for a validated birth moment.

    Args:
        moment: birth moment that passed validate_birth_moment
        sex: Sex.MALE or Sex.FEMALE, decides the Luck Pillar direction
        calendar: calendar adapter; defaults to the configured backend

    Returns:
        CalculatedBazi

    Raises:
        CalculationError: if any step fails; no partial result is returned
    """
    try:
        if calendar is None:
            calendar = get_calendar()

        pillars = calendar.pillars_of(moment)

        year_polarity = classify_polarity(pillars.year)
        direction = resolve_direction(sex, year_polarity)

        solar_terms = calendar.solar_terms_around(moment)
        start_age = estimate_start_age(moment, direction, solar_terms)

        first_da_yun = step_pillar(pillars.month, direction)
    except Exception as exc:
        logger.error("Bazi calculation failed for %s (%s): %s", moment, sex.value, exc)
        raise CalculationError(f"Bazi calculation failed: {exc}") from exc

    logger.debug("%s %s: %s, %s from age %d, first Da Yun %s",
                 moment, sex.value, " ".join(pillars), direction.value,
                 start_age, first_da_yun)

    return CalculatedBazi(
        year_pillar=pillars.year,
        month_pillar=pillars.month,
        day_pillar=pillars.day,
        hour_pillar=pillars.hour,
        start_age=start_age,
        first_da_yun=first_da_yun,
    )
