# practice_comp/state/roster.py
"""
Effective employee/partner portions for roster entries.

``resolve_portions`` is the single place that maps an employment variant onto
the fraction of the year spent as a W-2 employee and as a partner. The two
always add up to the fraction of the year the physician works for the
practice, and every other calculation (MD allocation, pool weighting, W-2
proration, dirty checks) reads portions through it.
"""

import logging
from typing import Any, Iterable, List, Mapping, NamedTuple, Sequence, Tuple, Union

import numpy as np

from practice_comp.exceptions import UnknownPhysicianTypeError
from practice_comp.state.physician import (
    EmployeePhysician,
    EmployeeToPartnerPhysician,
    NewEmployeePhysician,
    PartnerPhysician,
    PhysicianBase,
    RetiringPartnerPhysician,
    TerminatingEmployeePhysician,
    parse_physician,
    physician_type,
)
from practice_comp.utils.date_utils import check_portion
from practice_comp.utils.status_enums import EMPLOYEE_TYPES, PARTNER_TYPES

logger = logging.getLogger(__name__)

# Defaults applied only when the timing field is absent (None), never to a provided 0
DEFAULT_START_PORTION = 0.0
DEFAULT_TERMINATE_PORTION = 1.0
DEFAULT_EMPLOYEE_TO_PARTNER_PORTION = 0.5
DEFAULT_RETIRING_PARTNER_PORTION = 0.5


class PortionSplit(NamedTuple):
    employee_portion: float
    partner_portion: float


def _value_or_default(value, default: float) -> float:
    return default if value is None else value


def resolve_portions(physician: Union[PhysicianBase, Mapping[str, Any]]) -> PortionSplit:
    """
    Effective (employee_portion, partner_portion) of a roster entry.

    Accepts a parsed model or a raw mapping. Pure and total over the six
    employment variants.

    Raises:
        UnknownPhysicianTypeError: for anything that is not a known variant.
        PortionOutOfRangeError: if a stored timing field lies outside [0, 1].
    """
    if isinstance(physician, Mapping):
        physician = parse_physician(physician)

    if isinstance(physician, PartnerPhysician):
        return PortionSplit(0.0, 1.0)
    if isinstance(physician, EmployeePhysician):
        return PortionSplit(1.0, 0.0)
    if isinstance(physician, NewEmployeePhysician):
        start = check_portion(
            _value_or_default(physician.start_portion_of_year, DEFAULT_START_PORTION),
            "start_portion_of_year",
        )
        return PortionSplit(1.0 - start, 0.0)
    if isinstance(physician, TerminatingEmployeePhysician):
        terminate = check_portion(
            _value_or_default(physician.terminate_portion_of_year, DEFAULT_TERMINATE_PORTION),
            "terminate_portion_of_year",
        )
        return PortionSplit(terminate, 0.0)
    if isinstance(physician, EmployeeToPartnerPhysician):
        employee = check_portion(
            _value_or_default(
                physician.employee_portion_of_year, DEFAULT_EMPLOYEE_TO_PARTNER_PORTION
            ),
            "employee_portion_of_year",
        )
        return PortionSplit(employee, 1.0 - employee)
    if isinstance(physician, RetiringPartnerPhysician):
        partner = check_portion(
            _value_or_default(physician.partner_portion_of_year, DEFAULT_RETIRING_PARTNER_PORTION),
            "partner_portion_of_year",
        )
        return PortionSplit(0.0, partner)

    raise UnknownPhysicianTypeError(
        f"Cannot resolve portions for {type(physician).__name__} "
        f"(type={getattr(physician, 'type', None)!r})"
    )


def employee_portion(physician: PhysicianBase) -> float:
    return resolve_portions(physician).employee_portion


def partner_portion(physician: PhysicianBase) -> float:
    return resolve_portions(physician).partner_portion


def is_partner_type(physician: PhysicianBase) -> bool:
    return physician_type(physician) in PARTNER_TYPES


def is_employee_type(physician: PhysicianBase) -> bool:
    return physician_type(physician) in EMPLOYEE_TYPES


def is_prior_year_retiree(physician: PhysicianBase) -> bool:
    """A retiring partner who stopped working before this year began."""
    return isinstance(physician, RetiringPartnerPhysician) and partner_portion(physician) == 0


def total_partner_portion(roster: Iterable[PhysicianBase]) -> float:
    return float(sum(partner_portion(p) for p in roster))


# --- Equivalence used by dirty checks ----------------------------------------


def physician_signature(physician: PhysicianBase) -> Tuple[Tuple[str, ...], Tuple[float, ...]]:
    """
    Comparable view of a roster entry: identity fields plus numeric fields.

    Timing is compared through the resolved portions, so a missing
    ``employee_portion_of_year`` and an explicit 0.5 compare equal.
    """
    split = resolve_portions(physician)
    labels = (
        physician.id,
        physician.name,
        physician_type(physician).value,
        str(physician.receives_benefits),
        str(physician.receives_bonuses),
        str(physician.has_medical_director_hours),
    )
    numbers = (
        split.employee_portion,
        split.partner_portion,
        float(getattr(physician, "salary", 0.0) or 0.0),
        float(physician.bonus_amount),
        float(physician.medical_director_hours_percentage),
        float(physician.additional_days_worked),
        float(getattr(physician, "buyout_cost", 0.0) or 0.0),
        float(getattr(physician, "trailing_shared_md_amount", 0.0) or 0.0),
    )
    return labels, numbers


def rosters_equivalent(
    left: Sequence[PhysicianBase],
    right: Sequence[PhysicianBase],
    tolerance: float = 1e-6,
) -> bool:
    """True when two rosters hold the same people with the same effective terms."""
    if len(left) != len(right):
        return False
    for a, b in zip(left, right):
        labels_a, numbers_a = physician_signature(a)
        labels_b, numbers_b = physician_signature(b)
        if labels_a != labels_b:
            return False
        if not np.allclose(numbers_a, numbers_b, rtol=0.0, atol=tolerance):
            return False
    return True


def partners(roster: Iterable[PhysicianBase]) -> List[PhysicianBase]:
    return [p for p in roster if is_partner_type(p)]


def employees(roster: Iterable[PhysicianBase]) -> List[PhysicianBase]:
    return [p for p in roster if is_employee_type(p)]
