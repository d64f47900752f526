# practice_comp/projections/settings.py
"""
Setters and change detection for a scenario's projection assumptions.
"""

import logging
from typing import List

from practice_comp.config.models import ToleranceConfig
from practice_comp.exceptions import UnknownFieldError
from practice_comp.state.records import Projection

logger = logging.getLogger(__name__)

GROWTH_PCT_MIN = -10.0
GROWTH_PCT_MAX = 10.0

PERCENT_SETTINGS = (
    "income_growth_pct",
    "non_employment_costs_pct",
    "non_md_employment_costs_pct",
    "misc_employment_costs_pct",
    "benefit_costs_growth_pct",
)
DOLLAR_SETTINGS = (
    "medical_director_hours",
    "prcs_medical_director_hours",
    "consulting_services_agreement",
    "locums_costs",
)


def _check_setting(field_name: str) -> None:
    if field_name not in PERCENT_SETTINGS and field_name not in DOLLAR_SETTINGS:
        raise UnknownFieldError(f"Unknown projection setting: {field_name!r}")


def set_projection_field(projection: Projection, field_name: str, value: float) -> Projection:
    """
    Copy of ``projection`` with one setting changed.

    Growth percentages are clamped to [-10, 10]; dollar amounts to >= 0.

    Raises:
        UnknownFieldError: if ``field_name`` is not a projection setting.
    """
    _check_setting(field_name)
    if field_name in PERCENT_SETTINGS:
        clamped = max(GROWTH_PCT_MIN, min(GROWTH_PCT_MAX, float(value)))
    else:
        clamped = max(0.0, float(value))
    if clamped != value:
        logger.debug(f"Clamped projection setting {field_name} from {value} to {clamped}")
    return projection.model_copy(update={field_name: clamped})


def projection_field_changed(
    projection: Projection,
    reference: Projection,
    field_name: str,
    tolerances: ToleranceConfig,
) -> bool:
    """True when a setting differs from ``reference`` beyond its tolerance."""
    _check_setting(field_name)
    tolerance = (
        tolerances.floating_point_tolerance
        if field_name in PERCENT_SETTINGS
        else tolerances.change_threshold
    )
    return abs(getattr(projection, field_name) - getattr(reference, field_name)) > tolerance


def changed_projection_fields(
    projection: Projection,
    reference: Projection,
    tolerances: ToleranceConfig,
) -> List[str]:
    return [
        name
        for name in PERCENT_SETTINGS + DOLLAR_SETTINGS
        if projection_field_changed(projection, reference, name, tolerances)
    ]
