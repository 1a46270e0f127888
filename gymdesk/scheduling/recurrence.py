"""Recurring session expansion.

A ``RecurrencePattern`` describes a schedule as a start date, a duration and
a set of weekdays. ``expand`` turns it into the concrete calendar dates on
which sessions take place. Everything here works on ``datetime.date`` values
only, so results never depend on the server timezone.

Weekdays are numbered 0 = Sunday through 6 = Saturday.
"""

import calendar
import enum
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

from gymdesk.core.exceptions import InvalidPatternError

CENTS = Decimal("0.01")

SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY = range(7)


class DurationUnit(str, enum.Enum):
    WEEKS = "weeks"
    MONTHS = "months"


class ScheduleType(str, enum.Enum):
    SINGLE = "single"
    RECURRING = "recurring"


def weekday_of(d: date) -> int:
    """Weekday of ``d`` with Sunday as 0."""
    return (d.weekday() + 1) % 7


def add_months(d: date, months: int) -> date:
    """Add calendar months, clamping the day to the end of the target month.

    >>> add_months(date(2024, 1, 31), 1)
    datetime.date(2024, 2, 29)
    """
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(d.day, last_day))


@dataclass(frozen=True)
class RecurrencePattern:
    start_date: date
    duration_value: int
    duration_unit: DurationUnit
    weekdays: frozenset[int] = field(default_factory=frozenset)
    schedule_type: ScheduleType = ScheduleType.RECURRING

    def __post_init__(self) -> None:
        # Accept any iterable of weekdays and plain strings for the enums
        object.__setattr__(self, "weekdays", frozenset(self.weekdays))
        for name, enum_type in (("duration_unit", DurationUnit), ("schedule_type", ScheduleType)):
            try:
                object.__setattr__(self, name, enum_type(getattr(self, name)))
            except ValueError as exc:
                raise InvalidPatternError(str(exc), field=name) from None

        if self.duration_value <= 0:
            raise InvalidPatternError(
                "Duration must be greater than 0", field="duration_value"
            )
        if self.schedule_type is ScheduleType.RECURRING and not self.weekdays:
            raise InvalidPatternError(
                "Select at least one weekday for a recurring schedule", field="weekdays"
            )
        invalid = sorted(d for d in self.weekdays if not 0 <= d <= 6)
        if invalid:
            raise InvalidPatternError(
                f"Weekdays must be between 0 and 6, got {invalid}", field="weekdays"
            )
        try:
            self.end_date  # noqa: B018
        except (OverflowError, ValueError):
            raise InvalidPatternError(
                "Duration runs past the supported calendar range", field="duration_value"
            ) from None

    @classmethod
    def weekly(
        cls, start_date: date, weeks: int, weekdays: Iterable[int]
    ) -> "RecurrencePattern":
        return cls(start_date, weeks, DurationUnit.WEEKS, frozenset(weekdays))

    @classmethod
    def monthly(
        cls, start_date: date, months: int, weekdays: Iterable[int]
    ) -> "RecurrencePattern":
        return cls(start_date, months, DurationUnit.MONTHS, frozenset(weekdays))

    @property
    def end_date(self) -> date:
        """Last calendar day covered by the pattern (inclusive)."""
        if self.duration_unit is DurationUnit.WEEKS:
            return self.start_date + timedelta(days=self.duration_value * 7)
        return add_months(self.start_date, self.duration_value)

    def __iter__(self) -> Iterator[date]:
        return expand(self)


def expand(pattern: RecurrencePattern) -> Iterator[date]:
    """Yield every session date of ``pattern`` in ascending order.

    Both the start date and the end date are included when their weekday is
    selected. A single schedule yields only its start date.
    """
    if pattern.schedule_type is ScheduleType.SINGLE:
        yield pattern.start_date
        return

    end = pattern.end_date
    current = pattern.start_date
    one_day = timedelta(days=1)
    while current <= end:
        if weekday_of(current) in pattern.weekdays:
            yield current
        current += one_day


def session_count(pattern: RecurrencePattern) -> int:
    return sum(1 for _ in expand(pattern))


def per_session_price(total_price: Decimal | int | str, sessions: int) -> Decimal:
    """Split a package price evenly across its sessions.

    Returns 0 when there are no sessions instead of dividing by zero.
    """
    if sessions <= 0:
        return Decimal("0")
    return (Decimal(total_price) / sessions).quantize(CENTS, rounding=ROUND_HALF_UP)
