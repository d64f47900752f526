# practice_comp/engines/md_hours.py
"""
Allocation of the medical director income streams.

The shared stream is split across partners in proportion to their partner
portion of the year. Vacation weeks play no part in the split. The PRCS
stream is not split: it goes in full to a single designated partner.
"""

import logging
from typing import Iterable, List, Optional, Sequence

import numpy as np

from practice_comp.state.physician import Physician, PhysicianBase, physician_type
from practice_comp.state.records import FutureYear
from practice_comp.state.roster import partner_portion, total_partner_portion
from practice_comp.utils.status_enums import PARTNER_TYPES

logger = logging.getLogger(__name__)


def allocate_medical_director_hours(roster: Sequence[PhysicianBase]) -> List[Physician]:
    """
    Return a copy of ``roster`` with MD-hours percentages assigned.

    Each entry gets ``partner_portion / total_partner_portion * 100`` and is
    flagged when that share is positive. With no partner time in the year
    every entry gets 0% and no flag.
    """
    total = total_partner_portion(roster)
    if total <= 0:
        logger.debug("[MD HOURS] No partner time this year; clearing all MD-hours shares.")
        return [
            p.model_copy(
                update={"medical_director_hours_percentage": 0.0, "has_medical_director_hours": False}
            )
            for p in roster
        ]

    allocated = []
    for p in roster:
        share = partner_portion(p) / total * 100 if partner_portion(p) > 0 else 0.0
        allocated.append(
            p.model_copy(
                update={
                    "medical_director_hours_percentage": share,
                    "has_medical_director_hours": share > 0,
                }
            )
        )
    logger.debug(
        "[MD HOURS] Allocated shares: "
        + ", ".join(f"{p.id}={p.medical_director_hours_percentage:.2f}%" for p in allocated)
    )
    return allocated


def md_percentage_total(roster: Iterable[PhysicianBase]) -> float:
    """Sum of MD-hours percentages over flagged entries."""
    return float(
        sum(p.medical_director_hours_percentage for p in roster if p.has_medical_director_hours)
    )


def md_percentages_valid(roster: Sequence[PhysicianBase], tolerance: float = 0.01) -> bool:
    """
    True when the flagged percentages sum to 100 (or to 0 without partners).
    """
    expected = 100.0 if total_partner_portion(roster) > 0 else 0.0
    total = md_percentage_total(roster)
    valid = bool(np.isclose(total, expected, rtol=0.0, atol=tolerance))
    if not valid:
        logger.warning(f"[MD HOURS] Percentages sum to {total:.4f}, expected {expected:.0f}.")
    return valid


# --- PRCS director -----------------------------------------------------------


def _matches_tag(physician: PhysicianBase, tag: str) -> bool:
    return physician.name == tag or physician.id == tag or physician.id.endswith(f"-{tag}")


def find_prcs_director(roster: Iterable[PhysicianBase], tag: Optional[str]) -> Optional[PhysicianBase]:
    """
    Default PRCS director: the first roster entry matching ``tag`` whose type is
    ``partner``, ``employeeToPartner`` or ``partnerToRetire``.
    """
    if not tag:
        return None
    return next(
        (p for p in roster if _matches_tag(p, tag) and physician_type(p) in PARTNER_TYPES),
        None,
    )


def resolve_prcs_director_id(future_year: FutureYear, tag: Optional[str]) -> Optional[str]:
    """
    Physician id that receives the PRCS stream for a year.

    An explicit ``None`` designation means nobody. A designation that names a
    partner-type physician on the roster is used as-is. Anything else (never
    set, an id no longer on the roster, or an employee) falls back to
    :func:`find_prcs_director`.
    """
    if future_year.prcs_designation_cleared:
        return None

    designated = future_year.prcs_director_physician_id
    if designated is not None:
        match = next((p for p in future_year.physicians if p.id == designated), None)
        if match is not None and physician_type(match) in PARTNER_TYPES:
            return designated
        reason = "is not on the roster" if match is None else "is not a partner"
        logger.warning(
            f"[MD HOURS] {future_year.year}: PRCS director {designated!r} {reason}; "
            f"falling back to the default director."
        )

    default = find_prcs_director(future_year.physicians, tag)
    return default.id if default is not None else None
