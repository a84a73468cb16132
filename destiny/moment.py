"""
Birth moment value type and the input validation pass run before any
calculation.
"""

import calendar
from dataclasses import dataclass
from datetime import datetime


MIN_YEAR = 1900
MAX_YEAR = 2100


class InvalidBirthMomentError(ValueError):
    """Raised by validate_birth_moment with a message fit for display."""


@dataclass(frozen=True)
class BirthMoment:
    """A solar (Gregorian) calendar instant, local clock time."""
    year: int
    month: int
    day: int
    hour: int
    minute: int = 0

    def to_datetime(self) -> datetime:
        return datetime(self.year, self.month, self.day, self.hour, self.minute)

    def __str__(self):
        return (f"{self.year:04d}-{self.month:02d}-{self.day:02d} "
                f"{self.hour:02d}:{self.minute:02d}")


def validate_birth_moment(moment: BirthMoment) -> None:
    """
    Reject moments outside the supported range.

    Raises:
        InvalidBirthMomentError: on the first failing field
    """
    if not MIN_YEAR <= moment.year <= MAX_YEAR:
        raise InvalidBirthMomentError(
            f"Year must be between {MIN_YEAR} and {MAX_YEAR}, got {moment.year}")

    if not 1 <= moment.month <= 12:
        raise InvalidBirthMomentError(
            f"Month must be between 1 and 12, got {moment.month}")

    days_in_month = calendar.monthrange(moment.year, moment.month)[1]
    if not 1 <= moment.day <= days_in_month:
        raise InvalidBirthMomentError(
            f"Invalid date: {moment.year}-{moment.month:02d} has "
            f"{days_in_month} days, got day {moment.day}")

    if not 0 <= moment.hour <= 23:
        raise InvalidBirthMomentError(
            f"Hour must be between 0 and 23, got {moment.hour}")

    if not 0 <= moment.minute <= 59:
        raise InvalidBirthMomentError(
            f"Minute must be between 0 and 59, got {moment.minute}")


def parse_birth_moment(birth_date: str, birth_time: str = "00:00") -> BirthMoment:
    """
    Build a moment from "YYYY-MM-DD" and "HH:MM" strings.

    Only the shape is checked here; ranges are left to validate_birth_moment.
    """
    try:
        year, month, day = (int(part) for part in birth_date.split("-"))
        parts = birth_time.split(":")
        hour = int(parts[0])
        minute = int(parts[1]) if len(parts) > 1 else 0
    except ValueError:
        raise InvalidBirthMomentError(
            f"Expected YYYY-MM-DD and HH:MM, got {birth_date!r} {birth_time!r}") from None
    return BirthMoment(year, month, day, hour, minute)
