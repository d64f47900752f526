from datetime import date, timedelta

import pytest

from practice_comp.exceptions import PortionOutOfRangeError
from practice_comp.utils.date_utils import (
    calculate_benefit_start_day,
    check_portion,
    count_business_days,
    date_from_day_of_year,
    date_from_portion,
    day_label,
    days_in_year,
    employee_portion_to_transition_day,
    get_pay_periods_for_year,
    partner_portion_to_retirement_day,
    portion_label,
    portion_of_year,
    portion_to_date,
    quarter_start_days,
    retirement_day_to_partner_portion,
    start_day_to_start_portion,
    start_portion_to_start_day,
    terminate_portion_to_termination_day,
    termination_day_to_terminate_portion,
    transition_day_to_employee_portion,
)
from practice_comp.utils.decimal_helpers import round_dollars, round_half_up


@pytest.mark.parametrize("year", [2024, 2025])
def test_every_date_survives_portion_round_trip(year):
    day = date(year, 1, 1)
    while day.year == year:
        portion = portion_of_year(day.month, day.day, year)
        assert date_from_portion(portion, year) == (day.month, day.day)
        day += timedelta(days=1)


def test_leap_year_denominator():
    assert days_in_year(2024) == 366
    assert days_in_year(2025) == 365
    assert portion_of_year(12, 31, 2024) == pytest.approx(365 / 366)
    assert portion_of_year(1, 1, 2025) == 0.0


def test_portion_one_is_last_day_of_year():
    assert portion_to_date(1.0, 2025) == date(2025, 12, 31)
    assert portion_to_date(1.0, 2024) == date(2024, 12, 31)


def test_date_from_day_of_year_rejects_day_outside_year():
    assert date_from_day_of_year(366, 2024) == (12, 31)
    with pytest.raises(ValueError):
        date_from_day_of_year(366, 2025)


def test_retirement_day_zero_means_retired_before_year():
    assert partner_portion_to_retirement_day(0.0, 2025) == 0
    assert retirement_day_to_partner_portion(0, 2025) == 0.0
    # Working only Jan 1 is a different state
    assert partner_portion_to_retirement_day(1 / 365, 2025) == 1
    assert partner_portion_to_retirement_day(1.0, 2025) == 365


def test_termination_day_zero():
    assert terminate_portion_to_termination_day(0.0, 2025) == 0
    assert terminate_portion_to_termination_day(0.5, 2025) == 183


def test_day_to_portion_inverses():
    assert transition_day_to_employee_portion(184, 2025) == pytest.approx(183 / 365)
    assert transition_day_to_employee_portion(1, 2025) == 0.0
    assert start_day_to_start_portion(1, 2025) == 0.0
    assert start_day_to_start_portion(366, 2024) == pytest.approx(365 / 366)
    assert termination_day_to_terminate_portion(0, 2025) == 0.0
    assert termination_day_to_terminate_portion(365, 2025) == 1.0
    assert retirement_day_to_partner_portion(183, 2024) == pytest.approx(0.5)


def test_transition_day_for_mid_year_partner():
    # 0.5 * 365 = 182.5 rounds half up to 183, so partnership starts on day 184 (Jul 3)
    assert employee_portion_to_transition_day(0.5, 2025) == 184
    assert employee_portion_to_transition_day(0.0, 2025) == 1
    assert employee_portion_to_transition_day(1.0, 2025) == 366


def test_start_portion_zero_is_january_first():
    assert start_portion_to_start_day(0.0, 2025) == 1


def test_labels_and_quarters():
    assert day_label(184, 2025) == "Jul 3"
    assert portion_label(0.0, 2024) == "Jan 1"
    assert portion_label(1.0, 2024) == "Dec 31"
    # Leap day shifts every later quarter start by one
    assert quarter_start_days(2025) == {"q2": 91, "q3": 182, "q4": 274}
    assert quarter_start_days(2024) == {"q2": 92, "q3": 183, "q4": 275}


def test_check_portion_rejects_out_of_range():
    assert check_portion(0.25) == 0.25
    with pytest.raises(PortionOutOfRangeError):
        check_portion(1.5)
    with pytest.raises(ValueError):
        check_portion(-0.1)


@pytest.mark.parametrize(
    "start, expected",
    [
        (date(2025, 1, 1), date(2025, 2, 1)),   # first of month: next month
        (date(2025, 2, 1), date(2025, 4, 1)),   # February 1st waits the full 30 days
        (date(2025, 1, 15), date(2025, 3, 1)),  # 30 days -> Feb 14 -> Mar 1
        (date(2025, 7, 3), date(2025, 9, 1)),
    ],
)
def test_benefit_start_day(start, expected):
    start_day = start.timetuple().tm_yday
    assert calculate_benefit_start_day(start_day, 2025) == expected.timetuple().tm_yday


def test_benefit_start_after_year_end():
    dec_first = date(2025, 12, 1).timetuple().tm_yday
    assert calculate_benefit_start_day(dec_first, 2025) == days_in_year(2025) + 1


def test_pay_periods_include_prior_december_work():
    periods = get_pay_periods_for_year(2025, date(2024, 12, 13), date(2024, 12, 20))
    first = periods[0]
    assert first.period_start == date(2024, 12, 14)
    assert first.period_end == date(2024, 12, 27)
    assert first.pay_date == date(2025, 1, 3)
    assert periods[-1].pay_date <= date(2026, 1, 31)
    for earlier, later in zip(periods, periods[1:]):
        assert (later.period_end - earlier.period_end).days == 14


def test_count_business_days():
    # Sat Jan 4 2025 .. Sun Jan 12 2025 holds one full work week
    assert count_business_days(date(2025, 1, 4), date(2025, 1, 12)) == 5
    assert count_business_days(date(2025, 1, 6), date(2025, 1, 6)) == 1
    assert count_business_days(date(2025, 1, 10), date(2025, 1, 6)) == 0


def test_round_half_up():
    assert round_half_up(182.5) == 183
    assert round_half_up(2.675) == 3
    assert round_dollars(1234.5) == 1235.0
    assert round_dollars(-0.4) == 0.0
