import pytest

from practice_comp.projections.engine import build_scenario
from practice_comp.projections.runner import run_projection
from practice_comp.reporting.metrics import (
    compensation_summary,
    financial_summary,
    historic_frame,
    payroll_tax_frame,
)
from practice_comp.state import schema


@pytest.fixture
def result(config, js_mc_roster):
    years = range(config.baseline_year + 1, config.baseline_year + config.projection_years + 1)
    return run_projection(build_scenario(config, rosters={y: js_mc_roster for y in years}), config)


def test_compensation_summary(result):
    summary = compensation_summary(result)
    assert list(summary.index) == ["JS", "MC"]
    assert list(summary.columns) == [2026, 2027, 2028, 2029, 2030, "total"]
    assert summary.loc["MC", "total"] == pytest.approx(summary.loc["MC", [2026, 2027, 2028, 2029, 2030]].sum())

    wages = compensation_summary(result, schema.W2_WAGES)
    assert wages.loc["MC", 2026] == pytest.approx(90_000.0)
    assert wages.loc["JS", "total"] == 0.0


def test_compensation_summary_rejects_unknown_column(result):
    with pytest.raises(KeyError):
        compensation_summary(result, "shoe_size")


def test_compensation_summary_of_empty_result(config):
    assert compensation_summary(run_projection(build_scenario(config), config)).empty


def test_financial_summary(result):
    summary = financial_summary(result)
    assert list(summary.index) == [2026, 2027, 2028, 2029, 2030]
    first = result.for_year(2026)
    assert summary.loc[2026, "total_costs"] == pytest.approx(first.total_costs)
    assert summary.loc[2026, "pool_margin_pct"] == pytest.approx(
        first.net_partner_pool / first.gross_income * 100
    )


def test_historic_frame(config):
    frame = historic_frame(config)
    assert list(frame.index) == list(range(2016, 2026))
    assert frame.loc[2016, schema.GROSS_INCOME] == 2_325_242.0
    assert frame.loc[2025, schema.GROSS_INCOME] == pytest.approx(3_164_007.0 + 119_374.0 + 32_321.0 + 16_200.0)
    assert list(historic_frame(config, through_year=2020).index) == list(range(2016, 2021))


def test_payroll_tax_frame(config, result):
    taxes = payroll_tax_frame(result)
    assert list(taxes.columns) == schema.TAX_COLUMNS
    assert set(taxes[schema.PHYSICIAN_ID]) == {"mc"}
    assert len(taxes) == 5 * len(config.payroll_taxes.regimes)
    per_year = taxes.groupby(schema.YEAR)[schema.TAX_AMOUNT].sum()
    assert per_year.loc[2026] == pytest.approx(result.for_year(2026).for_physician("mc").payroll_taxes)
