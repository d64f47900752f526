# practice_comp/engines/w2.py
"""
W-2 wages for physicians who convert from employee to partner mid-year.

The proportional estimate (``salary * employee_portion``) is always
available. When the biweekly pay schedule is enabled in the engine config,
the wages are instead recognised per pay period: every period whose pay date
falls in the year contributes the business days worked before the
partnership started, including December work from the prior year that is
paid in January.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List

from practice_comp.config.models import EngineConfig, PayScheduleConfig
from practice_comp.engines.payroll_tax import calculate_employer_payroll_taxes
from practice_comp.state.physician import EmployeeToPartnerPhysician, PhysicianBase
from practice_comp.state.roster import employee_portion
from practice_comp.utils.date_utils import (
    count_business_days,
    employee_portion_to_transition_day,
    get_pay_periods_for_year,
)
from practice_comp.utils.decimal_helpers import round_dollars

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PayPeriodWages:
    period_start: date
    work_end: date
    pay_date: date
    business_days: int
    amount: float


@dataclass(frozen=True)
class W2Wages:
    """Wages recognised in a year for a physician's employee segment."""

    amount: float
    taxes: float
    method: str  # "proportional" or "pay_period"
    periods: List[PayPeriodWages] = field(default_factory=list)

    @property
    def period_details(self) -> str:
        return ", ".join(
            f"{p.period_start:%m/%d/%y}-{p.work_end:%m/%d/%y} "
            f"(paid {p.pay_date:%m/%d}, {p.business_days} work days)"
            for p in self.periods
        )


def transition_date(physician: EmployeeToPartnerPhysician, year: int) -> date:
    """First day of partnership."""
    day = employee_portion_to_transition_day(employee_portion(physician), year)
    return date(year, 1, 1) + timedelta(days=day - 1)


def pay_period_wages(
    physician: EmployeeToPartnerPhysician,
    year: int,
    schedule: PayScheduleConfig,
) -> List[PayPeriodWages]:
    """Per-period wages paid in ``year`` for work done before the transition date."""
    salary = getattr(physician, "salary", 0.0) or 0.0
    hourly_rate = salary / schedule.annual_work_hours
    last_employee_day = transition_date(physician, year) - timedelta(days=1)

    result: List[PayPeriodWages] = []
    for period in get_pay_periods_for_year(
        year, schedule.reference_period_end, schedule.reference_pay_date
    ):
        if period.pay_date.year != year:
            continue
        work_end = min(period.period_end, last_employee_day)
        days = count_business_days(period.period_start, work_end)
        if days <= 0:
            continue
        result.append(
            PayPeriodWages(
                period_start=period.period_start,
                work_end=work_end,
                pay_date=period.pay_date,
                business_days=days,
                amount=days * schedule.hours_per_day * hourly_rate,
            )
        )
    return result


def calculate_w2_wages(physician: PhysicianBase, year: int, config: EngineConfig) -> W2Wages:
    """
    W-2 wages disclosed for an ``employeeToPartner`` physician.

    Other physician types return zero wages; their pay is handled as employee
    compensation.
    """
    if not isinstance(physician, EmployeeToPartnerPhysician):
        return W2Wages(amount=0.0, taxes=0.0, method="proportional")

    if config.pay_schedule.enabled:
        periods = pay_period_wages(physician, year, config.pay_schedule)
        amount = round_dollars(sum(p.amount for p in periods))
        method = "pay_period"
    else:
        periods = []
        amount = physician.salary * employee_portion(physician)
        method = "proportional"

    taxes = calculate_employer_payroll_taxes(amount, year, config.payroll_taxes).total
    if method == "pay_period":
        taxes = round_dollars(taxes)

    logger.debug(
        f"[W2] {physician.id} {year}: {method} wages {amount:,.2f}, taxes {taxes:,.2f}"
        + (f" [{len(periods)} periods]" if periods else "")
    )
    return W2Wages(amount=amount, taxes=taxes, method=method, periods=periods)
