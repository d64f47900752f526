# practice_comp/engines/payroll_tax.py
"""
Employer payroll tax calculation.

Every configured regime is applied to the same annual wage independently,
each with its own rate and wage-base cap. Caps are per employee per year:
callers pass one person's wages for one year and never accumulate across
people or years.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict

from practice_comp.config.models import PayrollTaxConfig, TaxRegime

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PayrollTaxBreakdown:
    """Employer tax owed on one employee's wages, by regime."""

    year: int
    wages: float
    components: Dict[str, float] = field(default_factory=dict)

    @property
    def total(self) -> float:
        return float(sum(self.components.values()))

    def get(self, regime_name: str) -> float:
        return self.components.get(regime_name, 0.0)


def taxable_wages(regime: TaxRegime, wages: float, ss_wage_base: float) -> float:
    """Portion of ``wages`` the regime taxes after its cap."""
    if regime.cap == "fixed":
        return min(wages, regime.wage_base)
    if regime.cap == "social_security":
        return min(wages, ss_wage_base)
    return wages


def calculate_employer_payroll_taxes(
    wages: float,
    year: int,
    tax_config: PayrollTaxConfig,
) -> PayrollTaxBreakdown:
    """
    Employer payroll taxes on a single employee's annual wages.

    Args:
        wages: Wages paid to the employee in ``year``. Negative values are
            treated as zero.
        year: Tax year; selects the Social Security wage base.
        tax_config: Regimes and wage-base table.

    Returns:
        PayrollTaxBreakdown with one entry per configured regime.
    """
    wages = max(0.0, float(wages))
    ss_wage_base = tax_config.wage_base_for_year(year)
    components = {
        regime.name: taxable_wages(regime, wages, ss_wage_base) * regime.rate
        for regime in tax_config.regimes
    }
    breakdown = PayrollTaxBreakdown(year=year, wages=wages, components=components)
    logger.debug(f"[TAX] {year}: wages {wages:,.2f} -> employer taxes {breakdown.total:,.2f}")
    return breakdown
