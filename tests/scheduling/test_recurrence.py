"""
Tests for recurring session expansion.
"""

from datetime import date
from decimal import Decimal

import pytest

from gymdesk.core.exceptions import InvalidPatternError
from gymdesk.scheduling.recurrence import (
    FRIDAY,
    MONDAY,
    SUNDAY,
    WEDNESDAY,
    DurationUnit,
    RecurrencePattern,
    ScheduleType,
    add_months,
    expand,
    per_session_price,
    session_count,
    weekday_of,
)


class TestWeekdayOf:
    def test_should_number_sunday_as_zero(self):
        assert weekday_of(date(2024, 1, 7)) == SUNDAY
        assert weekday_of(date(2024, 1, 1)) == MONDAY
        assert weekday_of(date(2024, 1, 6)) == 6


class TestAddMonths:
    def test_should_keep_day_of_month(self):
        assert add_months(date(2024, 2, 2), 1) == date(2024, 3, 2)

    def test_should_clamp_to_last_day_of_shorter_month(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)

    def test_should_roll_over_year(self):
        assert add_months(date(2024, 11, 15), 3) == date(2025, 2, 15)


class TestExpand:
    def test_should_expand_weekly_pattern_including_end_date(self):
        pattern = RecurrencePattern.weekly(date(2024, 1, 1), 2, {MONDAY, WEDNESDAY})

        assert pattern.end_date == date(2024, 1, 15)
        assert list(expand(pattern)) == [
            date(2024, 1, 1),
            date(2024, 1, 3),
            date(2024, 1, 8),
            date(2024, 1, 10),
            date(2024, 1, 15),
        ]

    def test_should_expand_monthly_pattern(self):
        pattern = RecurrencePattern.monthly(date(2024, 2, 2), 1, {FRIDAY})

        assert pattern.end_date == date(2024, 3, 2)
        assert list(expand(pattern)) == [
            date(2024, 2, 2),
            date(2024, 2, 9),
            date(2024, 2, 16),
            date(2024, 2, 23),
            date(2024, 3, 1),
        ]

    def test_should_be_restartable(self):
        pattern = RecurrencePattern.weekly(date(2024, 1, 1), 3, {SUNDAY})

        assert list(pattern) == list(pattern)
        assert session_count(pattern) == 3

    def test_should_return_dates_in_ascending_order_without_duplicates(self):
        pattern = RecurrencePattern.monthly(date(2024, 1, 31), 2, range(7))
        dates = list(expand(pattern))

        assert dates == sorted(set(dates))
        assert dates[0] == date(2024, 1, 31)
        assert dates[-1] == date(2024, 3, 31)

    def test_should_yield_only_start_date_for_single_schedule(self):
        pattern = RecurrencePattern(
            start_date=date(2024, 5, 4),
            duration_value=1,
            duration_unit=DurationUnit.WEEKS,
            schedule_type=ScheduleType.SINGLE,
        )

        assert list(expand(pattern)) == [date(2024, 5, 4)]

    def test_should_accept_plain_strings_for_enums(self):
        pattern = RecurrencePattern(date(2024, 1, 1), 1, "weeks", [MONDAY], "recurring")

        assert pattern.duration_unit is DurationUnit.WEEKS
        assert session_count(pattern) == 2


class TestExpandedDates:
    @pytest.mark.parametrize(
        "pattern",
        [
            RecurrencePattern.weekly(date(2024, 1, 1), 2, {MONDAY, WEDNESDAY}),
            RecurrencePattern.weekly(date(2024, 12, 29), 3, {SUNDAY, 6}),
            RecurrencePattern.monthly(date(2024, 1, 31), 1, {FRIDAY}),
            RecurrencePattern.monthly(date(2023, 8, 31), 6, range(7)),
            RecurrencePattern.monthly(date(2024, 2, 29), 12, {2, 4}),
            RecurrencePattern.weekly(date(2024, 3, 30), 1, {SUNDAY}),
        ],
        ids=[
            "mon-wed-2w",
            "weekend-across-new-year",
            "fridays-from-jan-31",
            "daily-from-aug-31",
            "tue-thu-from-leap-day",
            "single-sunday",
        ],
    )
    def test_dates_fall_on_selected_weekdays_within_range(self, pattern):
        dates = list(expand(pattern))

        assert dates
        assert dates == sorted(set(dates))
        for d in dates:
            assert weekday_of(d) in pattern.weekdays
            assert pattern.start_date <= d <= pattern.end_date
        assert session_count(pattern) == len(dates)


class TestInvalidPattern:
    @pytest.mark.parametrize("duration_value", [0, -1])
    def test_should_reject_non_positive_duration(self, duration_value):
        with pytest.raises(InvalidPatternError) as exc_info:
            RecurrencePattern.weekly(date(2024, 1, 1), duration_value, {MONDAY})

        assert exc_info.value.details["field"] == "duration_value"
        assert exc_info.value.status_code == 422

    def test_should_reject_empty_weekdays_for_recurring_schedule(self):
        with pytest.raises(InvalidPatternError) as exc_info:
            RecurrencePattern.weekly(date(2024, 1, 1), 2, set())

        assert exc_info.value.details["field"] == "weekdays"

    def test_should_reject_weekday_out_of_range(self):
        with pytest.raises(InvalidPatternError, match=r"\[7\]"):
            RecurrencePattern.weekly(date(2024, 1, 1), 2, {1, 7})

    @pytest.mark.parametrize(
        "unit,duration_value",
        [(DurationUnit.WEEKS, 10**6), (DurationUnit.MONTHS, 10**5)],
    )
    def test_should_reject_duration_past_calendar_range(self, unit, duration_value):
        with pytest.raises(InvalidPatternError) as exc_info:
            RecurrencePattern(date(2024, 1, 1), duration_value, unit, {MONDAY})

        assert exc_info.value.details["field"] == "duration_value"

    def test_should_reject_unknown_duration_unit(self):
        with pytest.raises(InvalidPatternError) as exc_info:
            RecurrencePattern(date(2024, 1, 1), 2, "fortnights", {MONDAY})

        assert exc_info.value.details["field"] == "duration_unit"


class TestPerSessionPrice:
    def test_should_split_price_evenly(self):
        assert per_session_price(Decimal("400"), 5) == Decimal("80.00")

    def test_should_round_to_cents(self):
        assert per_session_price(Decimal("100"), 3) == Decimal("33.33")

    def test_should_return_zero_without_sessions(self):
        assert per_session_price(Decimal("400"), 0) == Decimal("0")
