# practice_comp/utils/date_utils.py

"""
Date utility functions for the compensation engine.

Transition timing is stored as a portion of the calendar year (0..1). These
helpers convert between portions, day-of-year numbers and calendar dates,
always using a 365 or 366 day denominator for the year in question.

Round trips are exact for every calendar date: a date converted to a portion
and back lands on the same day. Going the other way, portions that do not fall
on a day boundary snap to the nearest day, so a portion can move by up to half
a day (and by one day at the very end of the year, where a portion of 1.0 has
no day of its own and is reported as Dec 31).
"""

import calendar
from datetime import date, timedelta
from typing import Dict, List, NamedTuple

import numpy as np
from dateutil.relativedelta import relativedelta

from practice_comp.exceptions import PortionOutOfRangeError
from practice_comp.utils.decimal_helpers import round_half_up


class CalendarDate(NamedTuple):
    """A month/day pair within a known year."""

    month: int
    day: int


class PayPeriod(NamedTuple):
    """One biweekly payroll period and the date it is paid."""

    period_start: date
    period_end: date
    pay_date: date


PAY_PERIOD_DAYS = 14


def is_leap_year(year: int) -> bool:
    return calendar.isleap(year)


def days_in_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


def check_portion(portion: float, name: str = "portion") -> float:
    """Return ``portion`` unchanged, or raise if it lies outside [0, 1]."""
    if portion is None or not 0.0 <= portion <= 1.0:
        raise PortionOutOfRangeError(f"{name} must be within [0, 1], got {portion!r}")
    return portion


def day_of_year(month: int, day: int, year: int) -> int:
    """1-based day number of a calendar date (Jan 1 is day 1)."""
    return date(year, month, day).timetuple().tm_yday


def date_from_day_of_year(day_number: int, year: int) -> CalendarDate:
    """
    Inverse of :func:`day_of_year`.

    Raises:
        ValueError: if ``day_number`` is not a day of ``year``.
    """
    total_days = days_in_year(year)
    if not 1 <= day_number <= total_days:
        raise ValueError(f"Day {day_number} is outside year {year} (1..{total_days})")
    as_date = date(year, 1, 1) + timedelta(days=day_number - 1)
    return CalendarDate(as_date.month, as_date.day)


def portion_of_year(month: int, day: int, year: int) -> float:
    """Portion of the year elapsed before the start of the given date."""
    return (day_of_year(month, day, year) - 1) / days_in_year(year)


def portion_to_day_of_year(portion: float, year: int) -> int:
    """
    Day of the year a portion points at, the inverse of :func:`portion_of_year`.

    A portion of 1.0 is reported as the last day of the year.
    """
    check_portion(portion)
    total_days = days_in_year(year)
    return min(total_days, max(1, round_half_up(portion * total_days) + 1))


def date_from_portion(portion: float, year: int) -> CalendarDate:
    return date_from_day_of_year(portion_to_day_of_year(portion, year), year)


def portion_to_date(portion: float, year: int) -> date:
    month, day = date_from_portion(portion, year)
    return date(year, month, day)


# --- Transition helpers -----------------------------------------------------


def employee_portion_to_transition_day(employee_portion: float, year: int) -> int:
    """
    First day of partnership for an employee-to-partner physician.

    A portion of 0 means partner from Jan 1 (day 1); a portion of 1 means the
    transition happens on Jan 1 of the following year (day ``days + 1``).
    """
    check_portion(employee_portion, "employee_portion_of_year")
    return max(1, round_half_up(employee_portion * days_in_year(year)) + 1)


def transition_day_to_employee_portion(transition_day: int, year: int) -> float:
    return max(0.0, (transition_day - 1) / days_in_year(year))


def start_portion_to_start_day(start_portion: float, year: int) -> int:
    """First working day of a new employee (portion 0 is Jan 1)."""
    check_portion(start_portion, "start_portion_of_year")
    return max(1, round_half_up(start_portion * days_in_year(year)) + 1)


def start_day_to_start_portion(start_day: int, year: int) -> float:
    return max(0.0, min(1.0, (start_day - 1) / days_in_year(year)))


def partner_portion_to_retirement_day(partner_portion: float, year: int) -> int:
    """
    Last working day of a retiring partner.

    Day 0 means the partner retired before this year began, which is distinct
    from retiring on day 1 (working Jan 1 only).
    """
    check_portion(partner_portion, "partner_portion_of_year")
    if partner_portion == 0:
        return 0
    return max(1, round_half_up(partner_portion * days_in_year(year)))


def retirement_day_to_partner_portion(retirement_day: int, year: int) -> float:
    if retirement_day == 0:
        return 0.0
    return min(1.0, retirement_day / days_in_year(year))


def terminate_portion_to_termination_day(terminate_portion: float, year: int) -> int:
    """Last working day of a terminating employee; day 0 means gone before Jan 1."""
    check_portion(terminate_portion, "terminate_portion_of_year")
    if terminate_portion == 0:
        return 0
    return max(1, round_half_up(terminate_portion * days_in_year(year)))


def termination_day_to_terminate_portion(termination_day: int, year: int) -> float:
    if termination_day == 0:
        return 0.0
    return min(1.0, termination_day / days_in_year(year))


def day_label(day_number: int, year: int) -> str:
    """Short label for a day of the year, e.g. ``"Jul 3"``."""
    month, day = date_from_day_of_year(day_number, year)
    return f"{calendar.month_abbr[month]} {day}"


def portion_label(portion: float, year: int) -> str:
    return day_label(portion_to_day_of_year(portion, year), year)


def quarter_start_days(year: int) -> Dict[str, int]:
    """Day-of-year numbers for Apr 1, Jul 1 and Oct 1."""
    return {
        "q2": day_of_year(4, 1, year),
        "q3": day_of_year(7, 1, year),
        "q4": day_of_year(10, 1, year),
    }


# --- Benefits waiting period ------------------------------------------------


def calculate_benefit_start_day(start_day: int, year: int) -> int:
    """
    Day of the year a new employee's benefits begin.

    Employees starting on the 1st of a month (other than February) are covered
    from the 1st of the next month. Everyone else is covered from the 1st of
    the month following their 30th day of employment. A result greater than
    ``days_in_year(year)`` means coverage starts next year.
    """
    start = date(year, 1, 1) + timedelta(days=start_day - 1)
    if start.day == 1 and start.month != 2:
        benefit_start = start + relativedelta(months=1)
    else:
        thirty_day_mark = start + timedelta(days=30)
        benefit_start = (thirty_day_mark + relativedelta(months=1)).replace(day=1)

    if benefit_start.year > year:
        return days_in_year(year) + 1
    return benefit_start.timetuple().tm_yday


# --- Payroll calendar -------------------------------------------------------


def get_pay_periods_for_year(
    year: int,
    reference_period_end: date,
    reference_pay_date: date,
) -> List[PayPeriod]:
    """
    Biweekly pay periods that can be paid during ``year``.

    The calendar is anchored on one known period (its end date and pay date).
    The list starts with the last period that ends before Jan 1 of ``year``,
    since it is usually paid in January, and runs through periods paid by the
    end of January of the following year.
    """
    pay_lag = reference_pay_date - reference_period_end
    days_to_year_start = (date(year, 1, 1) - reference_period_end).days
    steps = (days_to_year_start - 1) // PAY_PERIOD_DAYS
    period_end = reference_period_end + timedelta(days=PAY_PERIOD_DAYS * steps)

    last_pay_date = date(year + 1, 1, 31)
    periods: List[PayPeriod] = []
    while period_end + pay_lag <= last_pay_date:
        periods.append(
            PayPeriod(
                period_start=period_end - timedelta(days=PAY_PERIOD_DAYS - 1),
                period_end=period_end,
                pay_date=period_end + pay_lag,
            )
        )
        period_end += timedelta(days=PAY_PERIOD_DAYS)
    return periods


def count_business_days(start: date, end: date) -> int:
    """Monday-to-Friday days between ``start`` and ``end`` inclusive."""
    if end < start:
        return 0
    return int(np.busday_count(start, end + timedelta(days=1)))
