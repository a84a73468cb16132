from datetime import datetime

import pytest

from destiny.astro_calendar import FourPillars
from destiny.moment import BirthMoment


class StubCalendar:
    """Calendar adapter returning fixed pillars and solar terms."""

    def __init__(self, pillars, solar_terms):
        self.pillars = FourPillars(*pillars)
        self.solar_terms = dict(solar_terms)
        self.calls = 0

    def pillars_of(self, moment):
        self.calls += 1
        return self.pillars

    def solar_terms_around(self, moment):
        return dict(self.solar_terms)


# Jie around 1990-05-15 (Beijing time)
JIE_1990 = {
    "清明": datetime(1990, 4, 5, 10, 13),
    "立夏": datetime(1990, 5, 6, 3, 35),
    "芒种": datetime(1990, 6, 6, 7, 46),
    "小暑": datetime(1990, 7, 7, 18, 0),
    "谷雨": datetime(1990, 4, 20, 17, 27),  # Qi, must be ignored
    "小满": datetime(1990, 5, 21, 16, 37),  # Qi, must be ignored
}


@pytest.fixture
def birth_moment():
    return BirthMoment(1990, 5, 15, 10, 30)


@pytest.fixture
def stub_calendar():
    return StubCalendar(("庚午", "辛巳", "庚辰", "辛巳"), JIE_1990)


@pytest.fixture
def make_calendar():
    return StubCalendar
