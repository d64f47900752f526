import pytest

from practice_comp.engines.employee_costs import (
    calculate_employee_costs,
    calculate_employee_total_cost,
    compute_default_non_md_employment_costs,
    new_employee_benefit_portion,
)
from practice_comp.engines.payroll_tax import calculate_employer_payroll_taxes
from practice_comp.engines.w2 import calculate_w2_wages
from practice_comp.state.physician import (
    EmployeePhysician,
    EmployeeToPartnerPhysician,
    NewEmployeePhysician,
    TerminatingEmployeePhysician,
)

ANNUAL_BENEFITS = (722.81 + 57.12 + 6.44) * 12


def test_full_year_employee(config, staff_employee):
    cost = calculate_employee_total_cost(staff_employee, 2026, 7.2, config)
    taxes = calculate_employer_payroll_taxes(200_000.0, 2026, config.payroll_taxes)
    assert cost.wages == pytest.approx(200_000.0)
    assert cost.payroll_taxes == pytest.approx(taxes.total)
    assert cost.benefits == pytest.approx(ANNUAL_BENEFITS * 1.072)
    assert cost.bonus == 0.0
    assert cost.total == pytest.approx(200_000.0 + taxes.total + ANNUAL_BENEFITS * 1.072)
    assert set(cost.tax_components) == {r.name for r in config.payroll_taxes.regimes}


def test_benefits_do_not_grow_in_base_year(config, staff_employee):
    cost = calculate_employee_total_cost(staff_employee, 2025, 7.2, config)
    assert cost.benefits == pytest.approx(ANNUAL_BENEFITS)


def test_new_employee_waits_for_benefits(config):
    hire = NewEmployeePhysician(
        id="n", name="N", salary=200_000.0, start_portion_of_year=0.5, receives_benefits=True
    )
    # Starts Jul 3 2025, covered from Sep 1 (day 244)
    assert new_employee_benefit_portion(hire, 2025) == pytest.approx(122 / 365)
    cost = calculate_employee_total_cost(hire, 2025, 0.0, config)
    assert cost.wages == pytest.approx(100_000.0)
    assert cost.benefits == pytest.approx(ANNUAL_BENEFITS * 122 / 365)


def test_terminating_employee_is_prorated(config):
    leaver = TerminatingEmployeePhysician(
        id="t", name="T", salary=150_000.0, terminate_portion_of_year=0.25, receives_benefits=True
    )
    cost = calculate_employee_total_cost(leaver, 2025, 0.0, config)
    assert cost.wages == pytest.approx(37_500.0)
    assert cost.benefits == pytest.approx(ANNUAL_BENEFITS * 0.25)


def test_bonus_requires_flag(config):
    without = EmployeePhysician(id="a", name="A", salary=100_000.0, bonus_amount=20_000.0)
    with_flag = EmployeePhysician(
        id="b", name="B", salary=100_000.0, bonus_amount=20_000.0, receives_bonuses=True
    )
    assert calculate_employee_total_cost(without, 2025, 0.0, config).bonus == 0.0
    assert calculate_employee_total_cost(with_flag, 2025, 0.0, config).bonus == 20_000.0


def test_employee_to_partner_costs_use_w2_wages(config, mc_employee_to_partner):
    cost = calculate_employee_total_cost(mc_employee_to_partner, 2026, 0.0, config)
    assert cost.wages == pytest.approx(90_000.0)
    assert cost.w2 is not None and cost.w2.method == "proportional"
    assert cost.benefits == 0.0


def test_partners_are_not_costed(config, js_mc_roster):
    costs = calculate_employee_costs(js_mc_roster, 2026, 0.0, config)
    assert [c.physician_id for c in costs] == ["mc"]


def test_default_staff_costs(config):
    wages = 31.25 * 40 * 52 + 27 * 32 * 52 + 23 * 20 * 52
    taxes = sum(
        calculate_employer_payroll_taxes(w, 2025, config.payroll_taxes).total
        for w in (31.25 * 40 * 52, 27 * 32 * 52, 23 * 20 * 52)
    )
    expected = wages + taxes + ANNUAL_BENEFITS
    result = compute_default_non_md_employment_costs(2025, config)
    assert result == float(round(result))
    assert result == pytest.approx(expected, abs=0.5)


def test_jan_first_partner_costs_wages_paid_in_january(pay_schedule_config):
    physician = EmployeeToPartnerPhysician(
        id="mc", name="MC", salary=180_000.0, employee_portion_of_year=0.0
    )
    w2 = calculate_w2_wages(physician, 2025, pay_schedule_config)
    assert w2.amount > 0

    cost = calculate_employee_total_cost(physician, 2025, 0.0, pay_schedule_config)
    assert cost.employee_portion == 0.0
    assert cost.wages == w2.amount
    assert cost.payroll_taxes == pytest.approx(
        calculate_employer_payroll_taxes(w2.amount, 2025, pay_schedule_config.payroll_taxes).total
    )
    assert cost.benefits == 0.0


def test_jan_first_partner_without_pay_schedule_costs_nothing(config):
    physician = EmployeeToPartnerPhysician(
        id="mc", name="MC", salary=180_000.0, employee_portion_of_year=0.0
    )
    cost = calculate_employee_total_cost(physician, 2025, 0.0, config)
    assert cost.total == 0.0
    assert cost.w2 is not None and cost.w2.amount == 0.0
