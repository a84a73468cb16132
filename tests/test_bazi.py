import pytest

from destiny.bazi import CalculatedBazi, CalculationError, calculate_bazi
from destiny.luck import Sex
from destiny.moment import BirthMoment
from destiny.pillars import InvalidPillarError, cycle_position


class TestCalculateBaziWithStubCalendar:

    def test_yang_year_male_counts_forward(self, birth_moment, stub_calendar):
        result = calculate_bazi(birth_moment, Sex.MALE, stub_calendar)
        assert result == CalculatedBazi(
            year_pillar="庚午",
            month_pillar="辛巳",
            day_pillar="庚辰",
            hour_pillar="辛巳",
            start_age=8,
            first_da_yun="壬午",
        )

    def test_yang_year_female_counts_backward(self, birth_moment, stub_calendar):
        result = calculate_bazi(birth_moment, Sex.FEMALE, stub_calendar)
        assert result.start_age == 3
        assert result.first_da_yun == "庚辰"

    @pytest.mark.parametrize("year, sex, month, expected", [
        ("甲子", Sex.MALE, "甲子", "乙丑"),
        ("乙丑", Sex.MALE, "甲子", "癸亥"),
        ("丙寅", Sex.FEMALE, "丙寅", "乙丑"),
        ("丁卯", Sex.FEMALE, "丁卯", "戊辰"),
    ])
    def test_first_da_yun(self, birth_moment, make_calendar, year, sex, month, expected):
        calendar = make_calendar((year, month, "甲子", "甲子"), {})
        assert calculate_bazi(birth_moment, sex, calendar).first_da_yun == expected

    def test_unrecognised_year_stem_counts_as_yang(self, birth_moment, make_calendar):
        calendar = make_calendar(("", "甲子", "甲子", "甲子"), {})
        assert calculate_bazi(birth_moment, Sex.MALE, calendar).first_da_yun == "乙丑"

    def test_missing_solar_terms_give_start_age_five(self, birth_moment, make_calendar):
        calendar = make_calendar(("庚午", "辛巳", "庚辰", "辛巳"), {})
        assert calculate_bazi(birth_moment, Sex.MALE, calendar).start_age == 5

    def test_invalid_month_pillar_fails_whole_calculation(self, birth_moment, make_calendar):
        calendar = make_calendar(("庚午", "X巳", "庚辰", "辛巳"), {})
        with pytest.raises(CalculationError) as excinfo:
            calculate_bazi(birth_moment, Sex.MALE, calendar)
        assert isinstance(excinfo.value.__cause__, InvalidPillarError)

    def test_adapter_failure_is_wrapped(self, birth_moment):
        class BrokenCalendar:
            def pillars_of(self, moment):
                raise OSError("ephemeris unavailable")

            def solar_terms_around(self, moment):
                return {}

        with pytest.raises(CalculationError, match="ephemeris unavailable") as excinfo:
            calculate_bazi(birth_moment, Sex.MALE, BrokenCalendar())
        assert isinstance(excinfo.value.__cause__, OSError)

    def test_repeated_calls_are_identical(self, birth_moment, stub_calendar):
        first = calculate_bazi(birth_moment, Sex.MALE, stub_calendar)
        second = calculate_bazi(birth_moment, Sex.MALE, stub_calendar)
        assert first == second
        assert stub_calendar.calls == 2

    def test_to_dict(self, birth_moment, stub_calendar):
        data = calculate_bazi(birth_moment, Sex.MALE, stub_calendar).to_dict()
        assert data["first_da_yun"] == "壬午"
        assert set(data) == {"year_pillar", "month_pillar", "day_pillar", "hour_pillar",
                             "start_age", "first_da_yun"}


class TestCalculateBaziWithLunarCalendar:
    """End-to-end through lunar_python."""

    @pytest.fixture
    def calendar(self):
        from destiny.astro_calendar import LunarCalendar
        return LunarCalendar()

    def test_known_chart(self, birth_moment, calendar):
        result = calculate_bazi(birth_moment, Sex.MALE, calendar)
        assert result.pillars == ("庚午", "辛巳", "庚辰", "辛巳")
        assert 1 <= result.start_age <= 10
        assert result.first_da_yun == "壬午"

    def test_pillar_shapes_and_direction(self, birth_moment, calendar):
        for sex, step in ((Sex.MALE, 1), (Sex.FEMALE, -1)):
            result = calculate_bazi(birth_moment, sex, calendar)
            for pillar in result.pillars:
                assert isinstance(pillar, str) and len(pillar) == 2
            assert cycle_position(result.first_da_yun) == (cycle_position(result.month_pillar) + step) % 60

    def test_same_birth_different_sex_share_pillars(self, calendar):
        moment = BirthMoment(1990, 5, 15, 10)
        male = calculate_bazi(moment, Sex.MALE, calendar)
        female = calculate_bazi(moment, Sex.FEMALE, calendar)
        assert male.pillars == female.pillars

    @pytest.mark.parametrize("moment", [
        BirthMoment(2000, 1, 1, 0, 0),
        BirthMoment(2024, 2, 29, 12, 0),
        BirthMoment(1900, 12, 31, 23, 59),
        BirthMoment(1985, 12, 25, 18),
    ])
    def test_special_dates(self, moment, calendar):
        for sex in Sex:
            result = calculate_bazi(moment, sex, calendar)
            assert 1 <= result.start_age <= 10
            assert len(result.first_da_yun) == 2

    def test_idempotent(self, birth_moment, calendar):
        assert calculate_bazi(birth_moment, Sex.FEMALE, calendar) == \
            calculate_bazi(birth_moment, Sex.FEMALE, calendar)
