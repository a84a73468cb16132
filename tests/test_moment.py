from datetime import datetime

import pytest

from destiny.moment import (
    BirthMoment,
    InvalidBirthMomentError,
    parse_birth_moment,
    validate_birth_moment,
)


class TestValidateBirthMoment:

    @pytest.mark.parametrize("moment", [
        BirthMoment(2000, 1, 1, 0, 0),
        BirthMoment(1990, 12, 31, 23, 59),
        BirthMoment(2024, 2, 29, 12, 30),
        BirthMoment(1900, 1, 1, 0),
        BirthMoment(2100, 12, 31, 23, 59),
    ])
    def test_accepts_valid_moments(self, moment):
        validate_birth_moment(moment)

    @pytest.mark.parametrize("moment, message", [
        (BirthMoment(1899, 1, 1, 0), "Year"),
        (BirthMoment(2101, 1, 1, 0), "Year"),
        (BirthMoment(2000, 13, 1, 12), "Month"),
        (BirthMoment(2000, 0, 1, 12), "Month"),
        (BirthMoment(2023, 2, 30, 12), "Invalid date"),
        (BirthMoment(2023, 2, 29, 12), "Invalid date"),
        (BirthMoment(2000, 6, 31, 12), "Invalid date"),
        (BirthMoment(2000, 1, 0, 12), "Invalid date"),
        (BirthMoment(2000, 1, 1, 24), "Hour"),
        (BirthMoment(2000, 1, 1, -1), "Hour"),
        (BirthMoment(2000, 1, 1, 0, 60), "Minute"),
    ])
    def test_rejects_invalid_moments(self, moment, message):
        with pytest.raises(InvalidBirthMomentError, match=message):
            validate_birth_moment(moment)

    def test_1900_is_not_a_leap_year(self):
        with pytest.raises(InvalidBirthMomentError):
            validate_birth_moment(BirthMoment(1900, 2, 29, 0))


class TestBirthMoment:

    def test_minute_defaults_to_zero(self):
        assert BirthMoment(1990, 5, 15, 10).minute == 0

    def test_to_datetime(self):
        assert BirthMoment(1990, 5, 15, 10, 30).to_datetime() == datetime(1990, 5, 15, 10, 30)

    def test_is_immutable(self):
        moment = BirthMoment(1990, 5, 15, 10, 30)
        with pytest.raises(AttributeError):
            moment.year = 1991

    def test_parse(self):
        assert parse_birth_moment("1990-05-15", "10:30") == BirthMoment(1990, 5, 15, 10, 30)
        assert parse_birth_moment("1990-05-15", "7") == BirthMoment(1990, 5, 15, 7, 0)

    @pytest.mark.parametrize("date, time", [("1990/05/15", "10:30"), ("1990-05-15", "ten")])
    def test_parse_rejects_malformed_input(self, date, time):
        with pytest.raises(InvalidBirthMomentError):
            parse_birth_moment(date, time)
