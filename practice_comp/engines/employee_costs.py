# practice_comp/engines/employee_costs.py
"""
Employment burden of physicians with an employee segment, and the default
cost of the non-physician staff.

An employee's cost to the practice in a year is the W-2 wages for the part of
the year they are employed, employer payroll taxes on those wages, benefits
for the covered part of the year and any bonus.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from practice_comp.config.models import EngineConfig
from practice_comp.engines.payroll_tax import calculate_employer_payroll_taxes
from practice_comp.engines.w2 import W2Wages, calculate_w2_wages
from practice_comp.state.physician import (
    EmployeeToPartnerPhysician,
    NewEmployeePhysician,
    PhysicianBase,
)
from practice_comp.state.roster import employee_portion, is_employee_type
from practice_comp.utils.date_utils import (
    calculate_benefit_start_day,
    days_in_year,
    start_portion_to_start_day,
)
from practice_comp.utils.decimal_helpers import round_dollars

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmployeeCost:
    """Cost of one physician's employee segment for one year."""

    physician_id: str
    year: int
    employee_portion: float
    wages: float
    payroll_taxes: float
    benefits: float
    bonus: float
    tax_components: Dict[str, float] = field(default_factory=dict)
    w2: Optional[W2Wages] = None

    @property
    def total(self) -> float:
        return self.wages + self.payroll_taxes + self.benefits + self.bonus


def benefit_cost_for_year(year: int, benefit_growth_pct: float, config: EngineConfig) -> float:
    return config.benefits.cost_for_year(year, benefit_growth_pct)


def new_employee_benefit_portion(physician: NewEmployeePhysician, year: int) -> float:
    """Fraction of the year a new hire is covered once the waiting period ends."""
    start_portion = physician.start_portion_of_year or 0.0
    start_day = start_portion_to_start_day(start_portion, year)
    benefit_start_day = calculate_benefit_start_day(start_day, year)
    total_days = days_in_year(year)
    if benefit_start_day > total_days:
        return 0.0
    return max(0, total_days - benefit_start_day + 1) / total_days


def employee_benefits(
    physician: PhysicianBase,
    year: int,
    benefit_growth_pct: float,
    config: EngineConfig,
) -> float:
    """
    Benefit cost of a physician's employee segment.

    New hires are covered from the end of their waiting period; every other
    employee type is covered for its employee portion of the year.
    """
    if not physician.receives_benefits:
        return 0.0
    yearly_cost = benefit_cost_for_year(year, benefit_growth_pct, config)
    if isinstance(physician, NewEmployeePhysician):
        return yearly_cost * new_employee_benefit_portion(physician, year)
    return yearly_cost * employee_portion(physician)


def calculate_employee_total_cost(
    physician: PhysicianBase,
    year: int,
    benefit_growth_pct: float,
    config: EngineConfig,
) -> EmployeeCost:
    """
    Full employment burden of one physician's employee segment.

    Partners and retiring partners have no employee segment and cost nothing
    here. For ``employeeToPartner`` the wages are the disclosed W-2 amount,
    which uses the pay-period schedule when it is enabled. That schedule can
    report prior-December work paid in January even when the physician is a
    partner from Jan 1.
    """
    portion = employee_portion(physician)
    w2 = None
    if isinstance(physician, EmployeeToPartnerPhysician):
        w2 = calculate_w2_wages(physician, year, config)

    has_wages = portion > 0 or (w2 is not None and w2.amount > 0)
    if not is_employee_type(physician) or not has_wages:
        return EmployeeCost(
            physician_id=physician.id,
            year=year,
            employee_portion=portion,
            wages=0.0,
            payroll_taxes=0.0,
            benefits=0.0,
            bonus=0.0,
            w2=w2,
        )

    wages = w2.amount if w2 is not None else physician.salary * portion

    taxes = calculate_employer_payroll_taxes(wages, year, config.payroll_taxes)
    bonus = physician.bonus_amount if physician.receives_bonuses and portion > 0 else 0.0
    cost = EmployeeCost(
        physician_id=physician.id,
        year=year,
        employee_portion=portion,
        wages=wages,
        payroll_taxes=taxes.total,
        benefits=employee_benefits(physician, year, benefit_growth_pct, config),
        bonus=bonus,
        tax_components=dict(taxes.components),
        w2=w2,
    )
    logger.debug(
        f"[EMPLOYEE COST] {physician.id} {year}: wages {cost.wages:,.2f}, taxes "
        f"{cost.payroll_taxes:,.2f}, benefits {cost.benefits:,.2f}, bonus {cost.bonus:,.2f}"
    )
    return cost


def calculate_employee_costs(
    roster: Iterable[PhysicianBase],
    year: int,
    benefit_growth_pct: float,
    config: EngineConfig,
) -> List[EmployeeCost]:
    return [
        calculate_employee_total_cost(p, year, benefit_growth_pct, config)
        for p in roster
        if is_employee_type(p)
    ]


def compute_default_non_md_employment_costs(year: int, config: EngineConfig) -> float:
    """
    Default staff cost for ``year``: wages, employer taxes and (for staff with
    benefits) the base-year benefit cost, rounded to whole dollars.
    """
    total = 0.0
    for member in config.staff:
        wages = member.annual_wages
        taxes = calculate_employer_payroll_taxes(wages, year, config.payroll_taxes).total
        benefits = config.benefits.annual_cost if member.receives_benefits else 0.0
        total += wages + taxes + benefits
    return round_dollars(total)
