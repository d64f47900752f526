from datetime import date

import pytest

from practice_comp.engines.payroll_tax import calculate_employer_payroll_taxes
from practice_comp.engines.w2 import calculate_w2_wages, transition_date
from practice_comp.utils.date_utils import count_business_days
from practice_comp.utils.decimal_helpers import round_dollars


def test_proportional_wages(config, mc_employee_to_partner):
    w2 = calculate_w2_wages(mc_employee_to_partner, 2026, config)
    assert w2.method == "proportional"
    assert w2.amount == pytest.approx(90_000.0)
    assert w2.taxes == pytest.approx(
        calculate_employer_payroll_taxes(90_000.0, 2026, config.payroll_taxes).total
    )
    assert w2.periods == []


def test_other_types_have_no_w2(config, js_partner, staff_employee):
    assert calculate_w2_wages(js_partner, 2026, config).amount == 0.0
    assert calculate_w2_wages(staff_employee, 2026, config).amount == 0.0


def test_transition_date(mc_employee_to_partner):
    assert transition_date(mc_employee_to_partner, 2025) == date(2025, 7, 3)


def test_pay_period_wages(pay_schedule_config, mc_employee_to_partner):
    w2 = calculate_w2_wages(mc_employee_to_partner, 2025, pay_schedule_config)
    assert w2.method == "pay_period"

    # December 2024 work paid in January is included
    first = w2.periods[0]
    assert first.period_start == date(2024, 12, 14)
    assert first.pay_date == date(2025, 1, 3)
    # Work stops the day before partnership begins
    assert w2.periods[-1].work_end == date(2025, 7, 2)

    days = count_business_days(date(2024, 12, 14), date(2025, 7, 2))
    assert sum(p.business_days for p in w2.periods) == days
    assert w2.amount == round_dollars(days * 8 * 180_000.0 / 2080)
    assert w2.taxes == float(round(w2.taxes))
    assert "paid 01/03" in w2.period_details
