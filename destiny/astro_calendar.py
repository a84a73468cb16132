"""
Calendar conversion adapters.

A calendar adapter turns a solar birth moment into the four natal pillars
and a table of Jie solar-term timestamps around that moment. Pillar
arithmetic elsewhere in the package only talks to the CalendarAdapter
interface, so tests can swap in a stub with fixed tables.

Two backends ship:
- LunarCalendar: lunar_python's GanZhi and jie-qi table
- SwissEphemerisCalendar: Sun longitude and solar-term crossings from
  Swiss Ephemeris, pillars by the classical formulas
"""

import logging
from datetime import datetime, timedelta
from typing import Dict, NamedTuple, Optional, Protocol
from zoneinfo import ZoneInfo

import swisseph as swe
from lunar_python import Solar
from timezonefinder import TimezoneFinder

from destiny import settings
from destiny.moment import BirthMoment
from destiny.pillars import EARTHLY_BRANCHES, HEAVENLY_STEMS, SIXTY_CYCLE, Pillar

logger = logging.getLogger(__name__)


class FourPillars(NamedTuple):
    year: str
    month: str
    day: str
    hour: str


class CalendarAdapter(Protocol):
    def pillars_of(self, moment: BirthMoment) -> FourPillars:
        ...

    def solar_terms_around(self, moment: BirthMoment) -> Dict[str, datetime]:
        ...


# ============================================================
# LUNAR_PYTHON BACKEND
# ============================================================

# lunar_python repeats the neighbouring years' terms under pinyin keys
_LUNAR_ALIASES = {
    "DA_XUE": "大雪",
    "XIAO_HAN": "小寒",
    "LI_CHUN": "立春",
    "JING_ZHE": "惊蛰",
}


def _solar_to_datetime(solar) -> datetime:
    return datetime(solar.getYear(), solar.getMonth(), solar.getDay(),
                    solar.getHour(), solar.getMinute(), solar.getSecond())


class LunarCalendar:
    """Adapter over lunar_python, the port of the lunar-javascript library."""

    name = "lunar"

    def _lunar(self, moment: BirthMoment):
        solar = Solar.fromYmdHms(moment.year, moment.month, moment.day,
                                 moment.hour, moment.minute, 0)
        return solar.getLunar()

    def pillars_of(self, moment: BirthMoment) -> FourPillars:
        lunar = self._lunar(moment)
        return FourPillars(
            year=lunar.getYearInGanZhi(),
            month=lunar.getMonthInGanZhi(),
            day=lunar.getDayInGanZhi(),
            hour=lunar.getTimeInGanZhi(),
        )

    def solar_terms_around(self, moment: BirthMoment) -> Dict[str, datetime]:
        """
        Jie-qi table of the birth moment's lunar year.

        Alias entries are folded onto their Chinese names; when a name
        appears twice, the occurrence closer to the birth moment wins.
        """
        birth = moment.to_datetime()
        terms = {}
        for key, solar in self._lunar(moment).getJieQiTable().items():
            name = _LUNAR_ALIASES.get(key, key)
            when = _solar_to_datetime(solar)
            current = terms.get(name)
            if current is None or abs(when - birth) < abs(current - birth):
                terms[name] = when
        return terms


# ============================================================
# SWISS EPHEMERIS BACKEND
# ============================================================
#
# The 12 Jie (节) solar terms mark BaZi month boundaries.
# Each Jie is defined by the Sun reaching a specific ecliptic longitude.
# swe.solcross_ut() finds the exact crossing moment.

# (longitude, term_name, branch_index)
JIE_DEFINITIONS = [
    (285, "小寒", 1),
    (315, "立春", 2),
    (345, "惊蛰", 3),
    (15, "清明", 4),
    (45, "立夏", 5),
    (75, "芒种", 6),
    (105, "小暑", 7),
    (135, "立秋", 8),
    (165, "白露", 9),
    (195, "寒露", 10),
    (225, "立冬", 11),
    (255, "大雪", 0),
]

LI_CHUN_LONGITUDE = 315.0
_HALF_YEAR_DAYS = 182.62

# Five Tigers Escape (五虎遁): year stem → stem of the Tiger (寅) month
TIGER_START_STEMS = {
    0: 2, 5: 2,   # Jia/Ji year → Bing Tiger
    1: 4, 6: 4,   # Yi/Geng year → Wu Tiger
    2: 6, 7: 6,   # Bing/Xin year → Geng Tiger
    3: 8, 8: 8,   # Ding/Ren year → Ren Tiger
    4: 0, 9: 0,   # Wu/Gui year → Jia Tiger
}

# Five Rats Escape (五鼠遁): day stem → stem of the Rat (子) hour
RAT_START_STEMS = {
    0: 0, 5: 0,   # Jia/Ji day → Jia Zi hour
    1: 2, 6: 2,   # Yi/Geng day → Bing Zi hour
    2: 4, 7: 4,   # Bing/Xin day → Wu Zi hour
    3: 6, 8: 6,   # Ding/Ren day → Geng Zi hour
    4: 8, 9: 8,   # Wu/Gui day → Ren Zi hour
}

# (JDN + 49) % 60 is the sexagenary day index; 2000-01-01 (JDN 2451545) is 戊午
_JDN_SEXAGENARY_OFFSET = 49


def sun_longitude_to_month_branch_index(sun_lon: float) -> int:
    """
    Map Sun's ecliptic longitude to BaZi month branch index.

      315° (立春) → Yin (Tiger, index 2)
      345° (惊蛰) → Mao (Rabbit, index 3)
      ...
      255° (大雪) → Zi (Rat, index 0)
      285° (小寒) → Chou (Ox, index 1)
    """
    adjusted = (sun_lon - LI_CHUN_LONGITUDE) % 360
    month_num = int(adjusted / 30)
    return (month_num + 2) % 12


def hour_branch_index(hour: int) -> int:
    """Two-hour Shi Chen blocks; 23:00-00:59 is Zi (0)."""
    return ((hour + 1) // 2) % 12


class SwissEphemerisCalendar:
    """
    Adapter computing pillars from the Sun's position.

    Args:
        utc_offset: hours between birth clock time and UTC (+8 for China)
        ephe_path: Swiss Ephemeris data directory; None uses the built-in
            Moshier ephemeris, which is ample for the Sun
    """

    name = "swisseph"

    def __init__(self, utc_offset: float = 8.0, ephe_path: Optional[str] = None):
        self.utc_offset = utc_offset
        if ephe_path:
            swe.set_ephe_path(ephe_path)

    def _julian_day(self, moment: BirthMoment) -> float:
        utc = moment.to_datetime() - timedelta(hours=self.utc_offset)
        return swe.julday(utc.year, utc.month, utc.day,
                          utc.hour + utc.minute / 60.0)

    def _local_datetime(self, jd: float) -> datetime:
        year, month, day, hour_utc = swe.revjul(jd)
        utc = datetime(year, month, day) + timedelta(hours=hour_utc)
        return (utc + timedelta(hours=self.utc_offset)).replace(microsecond=0)

    def _sun_longitude(self, jd: float) -> float:
        result, _flag = swe.calc_ut(jd, swe.SUN, swe.FLG_SWIEPH)
        return result[0]

    def pillars_of(self, moment: BirthMoment) -> FourPillars:
        jd = self._julian_day(moment)

        # The BaZi year starts at the exact Li Chun crossing, usually Feb 3-5
        li_chun = swe.solcross_ut(LI_CHUN_LONGITUDE,
                                  swe.julday(moment.year, 1, 1, 0.0),
                                  swe.FLG_SWIEPH)
        effective_year = moment.year - 1 if jd < li_chun else moment.year
        year = Pillar(HEAVENLY_STEMS[(effective_year - 4) % 10],
                      EARTHLY_BRANCHES[(effective_year - 4) % 12])

        month_branch_index = sun_longitude_to_month_branch_index(self._sun_longitude(jd))
        months_from_tiger = (month_branch_index - 2) % 12
        month_stem_index = (TIGER_START_STEMS[year.stem.index] + months_from_tiger) % 10
        month = Pillar(HEAVENLY_STEMS[month_stem_index],
                       EARTHLY_BRANCHES[month_branch_index])

        # Day pillar follows the civil (local) date
        jdn = int(swe.julday(moment.year, moment.month, moment.day, 12.0))
        day = Pillar.parse(SIXTY_CYCLE[(jdn + _JDN_SEXAGENARY_OFFSET) % 60])

        branch_index = hour_branch_index(moment.hour)
        hour_stem_index = (RAT_START_STEMS[day.stem.index] + branch_index) % 10
        hour = Pillar(HEAVENLY_STEMS[hour_stem_index], EARTHLY_BRANCHES[branch_index])

        return FourPillars(year.label, month.label, day.label, hour.label)

    def solar_terms_around(self, moment: BirthMoment) -> Dict[str, datetime]:
        """Each Jie's crossing nearest the birth moment, in local time."""
        start = self._julian_day(moment) - _HALF_YEAR_DAYS
        terms = {}
        for lon, name, _branch_index in JIE_DEFINITIONS:
            jd_cross = swe.solcross_ut(float(lon), start, swe.FLG_SWIEPH)
            terms[name] = self._local_datetime(jd_cross)
        logger.debug("Jie crossings around %s: %s", moment, terms)
        return terms


def get_calendar(name: Optional[str] = None, utc_offset: Optional[float] = None) -> CalendarAdapter:
    """
    Build the calendar adapter for a backend name.

    Args:
        name: "lunar" or "swisseph"; defaults to settings.CALENDAR_BACKEND
        utc_offset: only used by "swisseph"; defaults to settings.UTC_OFFSET
    """
    backend = (name or settings.CALENDAR_BACKEND).lower()
    if backend == LunarCalendar.name:
        return LunarCalendar()
    if backend == SwissEphemerisCalendar.name:
        offset = settings.UTC_OFFSET if utc_offset is None else utc_offset
        return SwissEphemerisCalendar(utc_offset=offset, ephe_path=settings.EPHE_PATH)
    raise ValueError(f"Unknown calendar backend: {backend!r}")


# ============================================================
# TIME ZONES
# ============================================================

_tf = TimezoneFinder()


def utc_offset_for(latitude: float, longitude: float, moment: BirthMoment):
    """
    Determine UTC offset from coordinates and date.
    Detects historical DST (e.g., China 1986-1991).

    Returns:
        (clock_offset, standard_offset, timezone_name, dst_detected)

        clock_offset:    what the clock was actually set to (includes DST if active)
        standard_offset: the zone's standard (non-DST) offset
        dst_detected:    True if DST was active at birth time

    BaZi uses standard_offset.
    """
    tz_name = _tf.timezone_at(lat=latitude, lng=longitude)
    if tz_name is None:
        raise ValueError(f"Could not determine timezone for ({latitude}, {longitude})")

    local_dt = moment.to_datetime().replace(tzinfo=ZoneInfo(tz_name))
    clock_offset = local_dt.utcoffset().total_seconds() / 3600

    dst_seconds = local_dt.dst()
    dst_detected = dst_seconds is not None and dst_seconds.total_seconds() > 0

    if dst_detected:
        standard_offset = clock_offset - (dst_seconds.total_seconds() / 3600)
    else:
        standard_offset = clock_offset

    return clock_offset, standard_offset, tz_name, dst_detected


# Quick verification
if __name__ == "__main__":
    moment = BirthMoment(1990, 5, 15, 10, 30)
    for adapter in (LunarCalendar(), SwissEphemerisCalendar()):
        print(f"{adapter.name:9s} {' '.join(adapter.pillars_of(moment))}")
        for name, when in sorted(adapter.solar_terms_around(moment).items(),
                                 key=lambda item: item[1]):
            print(f"  {name} {when:%Y-%m-%d %H:%M}")
