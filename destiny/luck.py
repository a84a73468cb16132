"""
Luck Pillar (大运 Da Yun) direction and starting age.

Direction of count depends on sex + year stem polarity:
- Yang stem year + Male OR Yin stem year + Female → count FORWARD
- Yang stem year + Female OR Yin stem year + Male → count BACKWARD

Starting age is the day distance from birth to the next (FORWARD) or
previous (BACKWARD) Jie solar term, divided by 3 (3 days ≈ 1 year),
rounded up and clipped to 1-10.
"""

import logging
import math
from datetime import datetime
from enum import Enum
from typing import Mapping, Optional

from destiny.moment import BirthMoment
from destiny.pillars import Polarity

logger = logging.getLogger(__name__)


class Sex(Enum):
    MALE = "male"
    FEMALE = "female"


class Direction(Enum):
    FORWARD = "forward"
    BACKWARD = "backward"

    @property
    def offset(self) -> int:
        return 1 if self is Direction.FORWARD else -1

    @property
    def label(self) -> str:
        return "顺行" if self is Direction.FORWARD else "逆行"


# The 12 Jie (节) terms that open each BaZi month. The 12 Qi (气) terms
# in between never move the month and are ignored.
JIE_TERMS = (
    "立春", "惊蛰", "清明", "立夏", "芒种", "小暑",
    "立秋", "白露", "寒露", "立冬", "大雪", "小寒",
)

DAYS_PER_YEAR = 3
FALLBACK_DAYS = 15
MIN_START_AGE = 1
MAX_START_AGE = 10


def resolve_direction(sex: Sex, year_polarity: Polarity) -> Direction:
    """Forward for yang-year males and yin-year females, backward otherwise."""
    yang = year_polarity is Polarity.YANG
    male = sex is Sex.MALE
    if (male and yang) or (not male and not yang):
        return Direction.FORWARD
    return Direction.BACKWARD


def days_to_nearest_jie(birth: datetime, direction: Direction,
                        solar_terms: Mapping[str, datetime]) -> Optional[int]:
    """
    Whole-day distance from birth to the nearest Jie in the given direction.

    Distances are counted between calendar dates, so a Jie falling on the
    birth date itself is neither before nor after it.

    Returns:
        Positive number of days, or None if no Jie qualifies
    """
    nearest = None
    for name in JIE_TERMS:
        term = solar_terms.get(name)
        if term is None:
            continue
        # Positive: the term is in the past
        diff = (birth.date() - term.date()).days
        if direction is Direction.FORWARD:
            distance = -diff
        else:
            distance = diff
        if distance > 0 and (nearest is None or distance < nearest):
            nearest = distance
    return nearest


def estimate_start_age(moment: BirthMoment, direction: Direction,
                       solar_terms: Mapping[str, datetime]) -> int:
    """
    Age (1-10) at which the first Luck Pillar begins.

    Args:
        moment: validated birth moment
        direction: direction from resolve_direction
        solar_terms: term name → local timestamp, covering the period
            around the birth moment

    Returns:
        ceil(days / 3) clipped to [1, 10]; a missing Jie counts as 15 days
    """
    days = days_to_nearest_jie(moment.to_datetime(), direction, solar_terms)
    if days is None:
        logger.debug("No %s Jie found around %s, assuming %d days",
                     direction.value, moment, FALLBACK_DAYS)
        days = FALLBACK_DAYS

    start_age = math.ceil(days / DAYS_PER_YEAR)
    return max(MIN_START_AGE, min(MAX_START_AGE, start_age))
