# practice_comp/engines/compensation.py
"""
Per-year compensation: distributable income, the partner pool and each
physician's share of it.

Methodology:
  1. Employee costs (wages + employer taxes + benefits + bonus) for every
     employee segment, prorated by employee portion
  2. Buyouts of retiring partners, booked as costs
  3. Direct allocations: shared MD hours by stored percentage to active
     partners, trailing shared MD to prior-year retirees, the PRCS stream to
     its director and additional-days pay to the partner who worked them
  4. Gross income: therapy + shared MD + PRCS + consulting
  5. Pool: gross income - costs - direct allocations
  6. Pool distributed by partner portion of the year
  7. W-2 wages of employee-to-partner physicians disclosed next to, never
     inside, their partner compensation

A negative pool is distributed as negative shares. A year without partner
time reports a pool of zero and keeps the amount as undistributed income.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pandas as pd

from logging_config import CALCULATION_LOGGER
from practice_comp.config.models import EngineConfig
from practice_comp.engines.employee_costs import EmployeeCost, calculate_employee_costs
from practice_comp.engines.md_hours import md_percentages_valid, resolve_prcs_director_id
from practice_comp.state import schema
from practice_comp.state.physician import PhysicianBase, RetiringPartnerPhysician, physician_type
from practice_comp.state.records import FutureYear
from practice_comp.state.roster import (
    is_partner_type,
    is_prior_year_retiree,
    partner_portion,
    resolve_portions,
    total_partner_portion,
)
from practice_comp.utils.status_enums import PhysicianType

logger = logging.getLogger(__name__)
calc_logger = logging.getLogger(CALCULATION_LOGGER)


@dataclass(frozen=True)
class PhysicianCompensation:
    """One physician's income for one year."""

    physician_id: str
    name: str
    physician_type: PhysicianType
    employee_portion: float
    partner_portion: float
    base_share: float = 0.0
    md_share: float = 0.0
    prcs_share: float = 0.0
    additional_days: float = 0.0
    buyout: float = 0.0
    trailing_shared_md: float = 0.0
    w2_wages: float = 0.0
    payroll_taxes: float = 0.0
    benefits: float = 0.0
    bonus: float = 0.0
    tax_components: Dict[str, float] = field(default_factory=dict)

    @property
    def partner_compensation(self) -> float:
        """Partner income, excluding any W-2 wages."""
        return (
            self.base_share
            + self.md_share
            + self.prcs_share
            + self.additional_days
            + self.buyout
            + self.trailing_shared_md
        )

    @property
    def total_income(self) -> float:
        return self.partner_compensation + self.w2_wages + self.bonus


@dataclass(frozen=True)
class YearCompensation:
    """Income statement and per-physician results of one year."""

    year: int
    therapy_income: float
    shared_md_income: float
    prcs_income: float
    consulting_income: float
    costs: Dict[str, float]
    direct_allocations: Dict[str, float]
    net_partner_pool: float
    undistributed_income: float
    prcs_director_id: Optional[str]
    md_percentages_valid: bool
    physicians: List[PhysicianCompensation] = field(default_factory=list)

    @property
    def gross_income(self) -> float:
        return self.therapy_income + self.shared_md_income + self.prcs_income + self.consulting_income

    @property
    def total_costs(self) -> float:
        return float(sum(self.costs.values()))

    @property
    def employee_costs(self) -> float:
        return self.costs.get("employees", 0.0)

    def for_physician(self, physician_id: str) -> Optional[PhysicianCompensation]:
        return next((p for p in self.physicians if p.physician_id == physician_id), None)

    def to_frame(self) -> pd.DataFrame:
        """One row per physician, columns from :mod:`practice_comp.state.schema`."""
        rows = [
            {
                schema.YEAR: self.year,
                schema.PHYSICIAN_ID: p.physician_id,
                schema.PHYSICIAN_NAME: p.name,
                schema.PHYSICIAN_TYPE: p.physician_type.value,
                schema.EMPLOYEE_PORTION: p.employee_portion,
                schema.PARTNER_PORTION: p.partner_portion,
                schema.BASE_SHARE: p.base_share,
                schema.MD_SHARE: p.md_share,
                schema.PRCS_SHARE: p.prcs_share,
                schema.ADDITIONAL_DAYS: p.additional_days,
                schema.BUYOUT: p.buyout,
                schema.TRAILING_MD: p.trailing_shared_md,
                schema.PARTNER_COMP: p.partner_compensation,
                schema.W2_WAGES: p.w2_wages,
                schema.PAYROLL_TAXES: p.payroll_taxes,
                schema.BENEFITS: p.benefits,
                schema.BONUS: p.bonus,
                schema.TOTAL_INCOME: p.total_income,
            }
            for p in self.physicians
        ]
        return pd.DataFrame(rows, columns=schema.COMPENSATION_COLUMNS).astype(
            schema.COMPENSATION_DTYPES
        )


def trailing_shared_md_amount(physician: RetiringPartnerPhysician, config: EngineConfig) -> float:
    """Explicit trailing amount, else the configured default for the physician."""
    if physician.trailing_shared_md_amount is not None:
        return physician.trailing_shared_md_amount
    return config.medical_director.trailing_amount_for(physician.name)


def calculate_year_compensation(
    future_year: FutureYear,
    config: EngineConfig,
    benefit_growth_pct: float = 0.0,
    include_retired: bool = True,
) -> YearCompensation:
    """
    Compensation of every physician on ``future_year``'s roster.

    Args:
        future_year: Financial row and roster of the year.
        config: Engine configuration (tax tables, defaults).
        benefit_growth_pct: Yearly growth of benefit costs after the base year.
        include_retired: Whether prior-year retirees appear in the results.
            Their buyout and trailing MD are costs either way.

    Returns:
        YearCompensation for the year.
    """
    year = future_year.year
    roster: List[PhysicianBase] = list(future_year.physicians)
    md_config = config.medical_director

    # --- Employee costs and buyouts ---
    employee_costs: Dict[str, EmployeeCost] = {
        c.physician_id: c for c in calculate_employee_costs(roster, year, benefit_growth_pct, config)
    }
    buyouts = {
        p.id: p.buyout_cost for p in roster if isinstance(p, RetiringPartnerPhysician)
    }

    # --- Direct allocations ---
    partner_time = total_partner_portion(roster)
    md_amount = (
        future_year.medical_director_hours
        if future_year.medical_director_hours is not None
        else md_config.shared_default
    )
    md_shares: Dict[str, float] = {}
    trailing: Dict[str, float] = {}
    additional_days: Dict[str, float] = {}
    for p in roster:
        if not is_partner_type(p):
            continue
        if is_prior_year_retiree(p):
            trailing[p.id] = trailing_shared_md_amount(p, config)
        # Stale percentages on entries without partner time pay nothing
        elif (
            p.has_medical_director_hours
            and p.medical_director_hours_percentage
            and partner_portion(p) > 0
        ):
            md_shares[p.id] = p.medical_director_hours_percentage / 100 * md_amount
        if p.additional_days_worked > 0:
            additional_days[p.id] = p.additional_days_worked

    receives_shared_md = partner_time > 0 or bool(trailing)
    shared_md_income = md_amount if receives_shared_md else 0.0

    prcs_director_id = resolve_prcs_director_id(future_year, md_config.prcs_director_tag)
    prcs_amount = (
        future_year.prcs_medical_director_hours
        if future_year.prcs_medical_director_hours is not None
        else md_config.prcs_default
    )
    prcs_income = prcs_amount if prcs_director_id is not None else 0.0
    consulting_income = (
        future_year.consulting_services_agreement
        if future_year.consulting_services_agreement is not None
        else config.consulting_services_default
    )

    # --- Pool ---
    costs = {
        "non_employment": future_year.non_employment_costs,
        "non_md_employment": future_year.non_md_employment_costs,
        "misc_employment": future_year.misc_employment_costs,
        "locums": future_year.locum_costs,
        "employees": sum(c.total for c in employee_costs.values()),
        "buyouts": sum(buyouts.values()),
    }
    direct_allocations = {
        "shared_md": sum(md_shares.values()),
        "trailing_shared_md": sum(trailing.values()),
        "prcs_md": prcs_income,
        "additional_days": sum(additional_days.values()),
    }
    gross_income = future_year.therapy_income + shared_md_income + prcs_income + consulting_income
    pool = gross_income - sum(costs.values()) - sum(direct_allocations.values())

    if partner_time > 0:
        net_partner_pool, undistributed = pool, 0.0
    else:
        logger.warning(f"[COMP] {year}: no partner time; {pool:,.2f} left undistributed.")
        net_partner_pool, undistributed = 0.0, pool
    if net_partner_pool < 0:
        logger.warning(f"[COMP] {year}: negative partner pool {net_partner_pool:,.2f}.")

    # --- Per-physician results ---
    results: List[PhysicianCompensation] = []
    for p in roster:
        split = resolve_portions(p)
        if is_prior_year_retiree(p) and not include_retired:
            continue
        cost = employee_costs.get(p.id)
        base_share = (
            net_partner_pool * split.partner_portion / partner_time if partner_time > 0 else 0.0
        )
        results.append(
            PhysicianCompensation(
                physician_id=p.id,
                name=p.name,
                physician_type=physician_type(p),
                employee_portion=split.employee_portion,
                partner_portion=split.partner_portion,
                base_share=base_share,
                md_share=md_shares.get(p.id, 0.0),
                prcs_share=prcs_income if p.id == prcs_director_id else 0.0,
                additional_days=additional_days.get(p.id, 0.0),
                buyout=buyouts.get(p.id, 0.0),
                trailing_shared_md=trailing.get(p.id, 0.0),
                w2_wages=cost.wages if cost else 0.0,
                payroll_taxes=cost.payroll_taxes if cost else 0.0,
                benefits=cost.benefits if cost else 0.0,
                bonus=cost.bonus if cost else 0.0,
                tax_components=dict(cost.tax_components) if cost else {},
            )
        )

    result = YearCompensation(
        year=year,
        therapy_income=future_year.therapy_income,
        shared_md_income=shared_md_income,
        prcs_income=prcs_income,
        consulting_income=consulting_income,
        costs=costs,
        direct_allocations=direct_allocations,
        net_partner_pool=net_partner_pool,
        undistributed_income=undistributed,
        prcs_director_id=prcs_director_id,
        md_percentages_valid=md_percentages_valid(roster, config.tolerances.md_percentage_tolerance),
        physicians=results,
    )
    calc_logger.debug(
        f"[COMP] {year}: income {result.gross_income:,.2f}, costs {result.total_costs:,.2f}, "
        f"direct allocations {sum(direct_allocations.values()):,.2f}, pool {net_partner_pool:,.2f}, "
        f"{sum(1 for p in roster if is_partner_type(p))} partners, {len(employee_costs)} employees"
    )
    return result
