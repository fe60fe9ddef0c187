"""
Recurring Calendar — Temporal Expressions.

A recurrence rule is not a list of dates but a predicate over dates.
Each expression answers a single question, ``includes(day)``, and the
composite expressions (union, intersection, difference) combine any
sub-trees into richer rules such as "weekdays except the 1st".

No I/O: every expression is immutable and evaluation is pure.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from enum import IntEnum

from recurring_calendar.core.errors import EventValidationError


class Weekday(IntEnum):
    """Day of the week, numbered like ``date.weekday()`` (Monday = 0)."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def parse(cls, value: Weekday | int | str) -> Weekday:
        """Normalize a weekday label.

        Accepts a Weekday, an int 0-6, or an English name / 3-letter
        abbreviation in any case ("friday", "Fri").
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            label = value.strip().upper()
            for day in cls:
                if label in (day.name, day.name[:3]):
                    return day
            raise EventValidationError(f"Unknown weekday label: {value!r}")
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                raise EventValidationError(
                    f"Weekday number must be between 0 and 6, got {value}"
                ) from None
        raise EventValidationError(f"Unsupported weekday value: {value!r}")


class TemporalExpression(ABC):
    """A predicate over calendar dates."""

    @abstractmethod
    def includes(self, day: date) -> bool:
        """Return True if ``day`` matches this expression."""


@dataclass(frozen=True)
class DailyExpression(TemporalExpression):
    """Matches every day."""

    def includes(self, day: date) -> bool:
        return True


@dataclass(frozen=True, init=False)
class DayOfWeekExpression(TemporalExpression):
    """Matches specific days of the week, e.g. Mondays and Wednesdays."""

    days: frozenset[Weekday]

    def __init__(self, days: Iterable[Weekday | int | str]) -> None:
        if isinstance(days, (str, int)):
            days = [days]
        parsed = frozenset(Weekday.parse(d) for d in days)
        if not parsed:
            raise EventValidationError("At least one day of the week must be given")
        object.__setattr__(self, "days", parsed)

    def includes(self, day: date) -> bool:
        return day.weekday() in self.days


@dataclass(frozen=True, init=False)
class DayOfMonthExpression(TemporalExpression):
    """Matches specific days of the month, e.g. the 1st and the 15th.

    Day numbers are not checked against month length: day 31 simply never
    matches in a 30-day month.
    """

    days: frozenset[int]

    def __init__(self, days: Iterable[int]) -> None:
        if isinstance(days, int):
            days = [days]
        days = list(days)
        if not days:
            raise EventValidationError("At least one day of the month must be given")
        wrong = [d for d in days if not isinstance(d, int) or isinstance(d, bool)]
        if wrong:
            raise EventValidationError(
                f"Days of the month must be whole numbers, got {wrong!r}"
            )
        parsed = frozenset(days)
        bad = sorted(d for d in parsed if not 1 <= d <= 31)
        if bad:
            raise EventValidationError(
                f"Days of the month must be between 1 and 31, got {bad}"
            )
        object.__setattr__(self, "days", parsed)

    def includes(self, day: date) -> bool:
        return day.day in self.days


@dataclass(frozen=True)
class IntervalExpression(TemporalExpression):
    """Matches every ``period_days`` days starting at ``anchor``."""

    anchor: date
    period_days: int

    def __post_init__(self) -> None:
        if not isinstance(self.period_days, int) or isinstance(self.period_days, bool):
            raise EventValidationError(
                f"Interval must be a whole number of days, got {self.period_days!r}"
            )
        if self.period_days <= 0:
            raise EventValidationError(
                f"Interval must be greater than zero, got {self.period_days}"
            )

    def includes(self, day: date) -> bool:
        if day < self.anchor:
            return False
        return (day - self.anchor).days % self.period_days == 0


def _check_children(
    kind: str, expressions: Iterable[TemporalExpression],
) -> tuple[TemporalExpression, ...]:
    children = tuple(expressions)
    if not children:
        raise EventValidationError(f"{kind} needs at least one sub-expression")
    if any(child is None for child in children):
        raise EventValidationError(f"{kind} sub-expressions must not be None")
    return children


@dataclass(frozen=True, init=False)
class UnionExpression(TemporalExpression):
    """Matches when any sub-expression matches (OR)."""

    expressions: tuple[TemporalExpression, ...]

    def __init__(self, *expressions: TemporalExpression) -> None:
        object.__setattr__(self, "expressions", _check_children("Union", expressions))

    def includes(self, day: date) -> bool:
        return any(expr.includes(day) for expr in self.expressions)


@dataclass(frozen=True, init=False)
class IntersectionExpression(TemporalExpression):
    """Matches when every sub-expression matches (AND)."""

    expressions: tuple[TemporalExpression, ...]

    def __init__(self, *expressions: TemporalExpression) -> None:
        object.__setattr__(
            self, "expressions", _check_children("Intersection", expressions),
        )

    def includes(self, day: date) -> bool:
        return all(expr.includes(day) for expr in self.expressions)


@dataclass(frozen=True)
class DifferenceExpression(TemporalExpression):
    """Matches ``included`` days that ``excluded`` does not match.

    Example: DifferenceExpression(DailyExpression(), weekends) is "weekdays".
    """

    included: TemporalExpression
    excluded: TemporalExpression

    def __post_init__(self) -> None:
        if self.included is None or self.excluded is None:
            raise EventValidationError(
                "Difference needs both an included and an excluded expression"
            )

    def includes(self, day: date) -> bool:
        return self.included.includes(day) and not self.excluded.includes(day)
