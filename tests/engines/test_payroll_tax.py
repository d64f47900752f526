import pytest

from practice_comp.engines.payroll_tax import calculate_employer_payroll_taxes


def test_taxes_below_every_cap_except_unemployment(config):
    taxes = calculate_employer_payroll_taxes(100_000.0, 2025, config.payroll_taxes)
    assert taxes.get("social_security") == pytest.approx(6_200.0)
    assert taxes.get("medicare") == pytest.approx(1_450.0)
    assert taxes.get("federal_unemployment") == pytest.approx(42.0)
    assert taxes.get("state_unemployment") == pytest.approx(655.2)
    assert taxes.get("state_family_leave") == pytest.approx(658.0)
    assert taxes.get("state_disability") == pytest.approx(255.0)
    assert taxes.get("state_workforce_rate") == pytest.approx(30.0)
    assert taxes.total == pytest.approx(9_290.2)


def test_social_security_stops_at_wage_base(config):
    at_base = calculate_employer_payroll_taxes(176_100.0, 2025, config.payroll_taxes)
    above = calculate_employer_payroll_taxes(300_000.0, 2025, config.payroll_taxes)
    assert above.get("social_security") == pytest.approx(176_100.0 * 0.062)
    assert above.get("social_security") == pytest.approx(at_base.get("social_security"))
    assert above.get("state_family_leave") == pytest.approx(176_100.0 * 0.00658)
    # Medicare has no cap
    assert above.get("medicare") == pytest.approx(300_000.0 * 0.0145)


def test_wage_base_follows_year(config):
    taxes_2026 = calculate_employer_payroll_taxes(300_000.0, 2026, config.payroll_taxes)
    assert taxes_2026.get("social_security") == pytest.approx(183_600.0 * 0.062)


def test_year_outside_table_uses_nearest_wage_base(config):
    assert config.payroll_taxes.wage_base_for_year(2035) == 215_400
    assert config.payroll_taxes.wage_base_for_year(2020) == 176_100


def test_zero_and_negative_wages(config):
    assert calculate_employer_payroll_taxes(0.0, 2025, config.payroll_taxes).total == 0.0
    negative = calculate_employer_payroll_taxes(-5_000.0, 2025, config.payroll_taxes)
    assert negative.total == 0.0
    assert negative.wages == 0.0
