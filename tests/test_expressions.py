"""Tests for recurring_calendar.core.expressions — date predicates."""

from datetime import date, timedelta

import pytest

from recurring_calendar.core.errors import EventValidationError
from recurring_calendar.core.expressions import (
    DailyExpression,
    DayOfMonthExpression,
    DayOfWeekExpression,
    DifferenceExpression,
    IntersectionExpression,
    IntervalExpression,
    UnionExpression,
    Weekday,
)


def _days(start: date, count: int) -> list[date]:
    return [start + timedelta(days=i) for i in range(count)]


# Two full years, covering leap day and every month length.
SAMPLE = _days(date(2024, 1, 1), 731)


# ---------------------------------------------------------------------------
# Weekday parsing
# ---------------------------------------------------------------------------


class TestWeekdayParse:
    def test_enum_passthrough(self):
        assert Weekday.parse(Weekday.FRIDAY) is Weekday.FRIDAY

    def test_int(self):
        assert Weekday.parse(0) is Weekday.MONDAY
        assert Weekday.parse(6) is Weekday.SUNDAY

    def test_full_name_any_case(self):
        assert Weekday.parse("friday") is Weekday.FRIDAY
        assert Weekday.parse(" Saturday ") is Weekday.SATURDAY

    def test_abbreviation(self):
        assert Weekday.parse("Wed") is Weekday.WEDNESDAY

    def test_out_of_range_int(self):
        with pytest.raises(EventValidationError, match="between 0 and 6"):
            Weekday.parse(7)

    def test_unknown_label(self):
        with pytest.raises(EventValidationError, match="Unknown weekday"):
            Weekday.parse("Funday")

    def test_bool_rejected(self):
        with pytest.raises(EventValidationError):
            Weekday.parse(True)


# ---------------------------------------------------------------------------
# Leaf expressions
# ---------------------------------------------------------------------------


class TestDaily:
    def test_matches_every_day(self):
        expr = DailyExpression()
        assert all(expr.includes(d) for d in SAMPLE)


class TestDayOfWeek:
    def test_friday(self):
        expr = DayOfWeekExpression([Weekday.FRIDAY])
        assert expr.includes(date(2025, 1, 10)) is True   # Friday
        assert expr.includes(date(2025, 1, 11)) is False  # Saturday

    def test_multiple_days(self):
        expr = DayOfWeekExpression(["mon", "wed"])
        matched = [d for d in _days(date(2025, 2, 3), 7) if expr.includes(d)]
        assert matched == [date(2025, 2, 3), date(2025, 2, 5)]

    def test_single_label_accepted(self):
        assert DayOfWeekExpression("sun").days == frozenset({Weekday.SUNDAY})

    def test_duplicates_collapse(self):
        expr = DayOfWeekExpression([Weekday.MONDAY, 0, "Monday"])
        assert expr.days == frozenset({Weekday.MONDAY})

    def test_empty_rejected(self):
        with pytest.raises(EventValidationError, match="At least one day of the week"):
            DayOfWeekExpression([])


class TestDayOfMonth:
    def test_first_and_fifteenth(self):
        expr = DayOfMonthExpression([1, 15])
        matched = [d for d in _days(date(2025, 3, 1), 31) if expr.includes(d)]
        assert matched == [date(2025, 3, 1), date(2025, 3, 15)]

    def test_day_31_skips_short_months(self):
        expr = DayOfMonthExpression([31])
        matched = [d for d in SAMPLE if expr.includes(d)]
        assert all(d.day == 31 for d in matched)
        assert len(matched) == 14  # 7 long months per year
        assert not any(d.month == 2 for d in matched)

    def test_single_int_accepted(self):
        assert DayOfMonthExpression(1).days == frozenset({1})

    def test_empty_rejected(self):
        with pytest.raises(EventValidationError, match="At least one day of the month"):
            DayOfMonthExpression([])

    @pytest.mark.parametrize("bad", [0, 32, -1])
    def test_out_of_range_rejected(self, bad):
        with pytest.raises(EventValidationError, match="between 1 and 31"):
            DayOfMonthExpression([1, bad])

    @pytest.mark.parametrize("days", [["5"], [True], [1.0], [1, True]])
    def test_non_integer_days_rejected(self, days):
        with pytest.raises(EventValidationError, match="whole numbers"):
            DayOfMonthExpression(days)


class TestInterval:
    def test_every_three_days(self):
        expr = IntervalExpression(date(2025, 2, 1), 3)
        matched = [d for d in _days(date(2025, 2, 1), 10) if expr.includes(d)]
        assert matched == [
            date(2025, 2, 1), date(2025, 2, 4), date(2025, 2, 7), date(2025, 2, 10),
        ]

    @pytest.mark.parametrize("period", [1, 2, 3, 7, 10])
    def test_anchor_and_day_before(self, period):
        anchor = date(2025, 6, 15)
        expr = IntervalExpression(anchor, period)
        assert expr.includes(anchor) is True
        assert expr.includes(anchor - timedelta(days=1)) is False

    @pytest.mark.parametrize("period", [2, 5, 14])
    def test_periodicity(self, period):
        anchor = date(2024, 12, 30)
        expr = IntervalExpression(anchor, period)
        for offset in range(period * 6):
            expected = offset % period == 0
            assert expr.includes(anchor + timedelta(days=offset)) is expected

    def test_before_anchor_never_matches(self):
        expr = IntervalExpression(date(2025, 2, 1), 3)
        assert not any(expr.includes(d) for d in _days(date(2025, 1, 1), 31))

    @pytest.mark.parametrize("period", [0, -3])
    def test_non_positive_period_rejected(self, period):
        with pytest.raises(EventValidationError, match="greater than zero"):
            IntervalExpression(date(2025, 1, 1), period)

    @pytest.mark.parametrize("period", [2.5, True, "3"])
    def test_non_integer_period_rejected(self, period):
        with pytest.raises(EventValidationError, match="whole number of days"):
            IntervalExpression(date(2025, 1, 1), period)


# ---------------------------------------------------------------------------
# Composite expressions
# ---------------------------------------------------------------------------


WEEKENDS = DayOfWeekExpression([Weekday.SATURDAY, Weekday.SUNDAY])
MONDAYS = DayOfWeekExpression([Weekday.MONDAY])
FIRSTS = DayOfMonthExpression([1])
MID_MONTH = DayOfMonthExpression([10, 15, 20])


class TestUnion:
    def test_any_matches(self):
        expr = UnionExpression(MONDAYS, FIRSTS)
        for d in SAMPLE:
            assert expr.includes(d) == (MONDAYS.includes(d) or FIRSTS.includes(d))

    def test_single_child(self):
        expr = UnionExpression(MONDAYS)
        assert all(expr.includes(d) == MONDAYS.includes(d) for d in SAMPLE)

    def test_empty_rejected(self):
        with pytest.raises(EventValidationError, match="at least one"):
            UnionExpression()

    def test_none_child_rejected(self):
        with pytest.raises(EventValidationError, match="must not be None"):
            UnionExpression(MONDAYS, None)

    def test_associative(self):
        left = UnionExpression(UnionExpression(MONDAYS, FIRSTS), MID_MONTH)
        right = UnionExpression(MONDAYS, UnionExpression(FIRSTS, MID_MONTH))
        assert all(left.includes(d) == right.includes(d) for d in SAMPLE)


class TestIntersection:
    def test_all_match(self):
        expr = IntersectionExpression(MONDAYS, FIRSTS)
        matched = [d for d in SAMPLE if expr.includes(d)]
        assert matched
        assert all(d.weekday() == 0 and d.day == 1 for d in matched)

    def test_empty_rejected(self):
        with pytest.raises(EventValidationError, match="at least one"):
            IntersectionExpression()

    def test_associative(self):
        left = IntersectionExpression(IntersectionExpression(WEEKENDS, MID_MONTH), FIRSTS)
        right = IntersectionExpression(WEEKENDS, IntersectionExpression(MID_MONTH, FIRSTS))
        assert all(left.includes(d) == right.includes(d) for d in SAMPLE)

    def test_de_morgan(self):
        # not (A or B) == (not A) and (not B), with "not X" as Daily - X
        everything = DailyExpression()
        lhs = DifferenceExpression(everything, UnionExpression(WEEKENDS, FIRSTS))
        rhs = IntersectionExpression(
            DifferenceExpression(everything, WEEKENDS),
            DifferenceExpression(everything, FIRSTS),
        )
        assert all(lhs.includes(d) == rhs.includes(d) for d in SAMPLE)

    def test_de_morgan_dual(self):
        everything = DailyExpression()
        lhs = DifferenceExpression(everything, IntersectionExpression(MONDAYS, MID_MONTH))
        rhs = UnionExpression(
            DifferenceExpression(everything, MONDAYS),
            DifferenceExpression(everything, MID_MONTH),
        )
        assert all(lhs.includes(d) == rhs.includes(d) for d in SAMPLE)


class TestDifference:
    def test_weekdays(self):
        expr = DifferenceExpression(DailyExpression(), WEEKENDS)
        for d in SAMPLE:
            assert expr.includes(d) == (d.weekday() < 5)

    def test_matches_definition(self):
        expr = DifferenceExpression(MONDAYS, FIRSTS)
        for d in SAMPLE:
            assert expr.includes(d) == (MONDAYS.includes(d) and not FIRSTS.includes(d))

    def test_none_rejected(self):
        with pytest.raises(EventValidationError, match="included and an excluded"):
            DifferenceExpression(MONDAYS, None)
        with pytest.raises(EventValidationError):
            DifferenceExpression(None, MONDAYS)


class TestImmutability:
    def test_expressions_are_frozen(self):
        expr = IntervalExpression(date(2025, 1, 1), 2)
        with pytest.raises(AttributeError):
            expr.period_days = 5

    def test_equal_rules_compare_equal(self):
        assert DayOfWeekExpression(["fri"]) == DayOfWeekExpression([Weekday.FRIDAY])
        assert UnionExpression(MONDAYS, FIRSTS) == UnionExpression(MONDAYS, FIRSTS)
