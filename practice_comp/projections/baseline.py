# practice_comp/projections/baseline.py
"""
Baseline selection for multi-year projections.

The baseline supplies the "previous year" values the first projected year
compounds from. It is a lookup, resolved once before projection starts.
"""

import logging
import re
from dataclasses import dataclass
from typing import Union

from practice_comp.config.models import EngineConfig
from practice_comp.engines.employee_costs import compute_default_non_md_employment_costs
from practice_comp.exceptions import BaselineNotFoundError
from practice_comp.state.records import Scenario, YearRow
from practice_comp.utils.status_enums import BaselineMode

logger = logging.getLogger(__name__)

_LEGACY_MODE = re.compile(r"^(\d{4}) Data$")


@dataclass(frozen=True)
class BaselineValues:
    """Values of the compounding fields in the year before the first projected year."""

    year: int
    source: BaselineMode
    therapy_income: float
    non_employment_costs: float
    non_md_employment_costs: float
    misc_employment_costs: float

    def get(self, field_name: str) -> float:
        return getattr(self, field_name)


def normalize_baseline_mode(mode: Union[str, BaselineMode], baseline_year: int) -> BaselineMode:
    """
    Map a stored data mode onto :class:`BaselineMode`.

    Older snapshots name the mode after a year ("2024 Data"). The current
    baseline year maps to current-year data, the year before it to prior-year
    data, and any other year to a custom baseline.

    Raises:
        ValueError: for a mode that is neither a known mode nor year-named.
    """
    if isinstance(mode, BaselineMode):
        return mode
    try:
        return BaselineMode(mode)
    except ValueError:
        pass

    match = _LEGACY_MODE.match(str(mode).strip())
    if not match:
        raise ValueError(f"Unrecognized baseline data mode: {mode!r}")

    year = int(match.group(1))
    if year == baseline_year:
        normalized = BaselineMode.CURRENT_YEAR_DATA
    elif year == baseline_year - 1:
        normalized = BaselineMode.PRIOR_YEAR_DATA
    else:
        normalized = BaselineMode.CUSTOM
    logger.debug(f"Normalized legacy data mode {mode!r} to {normalized.value!r}")
    return normalized


def _from_year_row(row: YearRow, mode: BaselineMode, config: EngineConfig) -> BaselineValues:
    non_md = row.non_md_employment_costs
    if non_md is None:
        non_md = compute_default_non_md_employment_costs(row.year, config)
    misc = row.misc_employment_costs
    if misc is None:
        misc = config.misc_employment_costs_default
    return BaselineValues(
        year=row.year,
        source=mode,
        therapy_income=row.therapy_income,
        non_employment_costs=row.non_employment_costs,
        non_md_employment_costs=non_md,
        misc_employment_costs=misc,
    )


def select_baseline(scenario: Scenario, config: EngineConfig) -> BaselineValues:
    """
    Resolve the baseline of a scenario from its ``data_mode``.

    Raises:
        BaselineNotFoundError: when the selected year has no recorded row, or a
            custom baseline is selected but missing.
    """
    mode = scenario.data_mode
    if mode is BaselineMode.CUSTOM:
        custom = scenario.custom_baseline
        if custom is None:
            raise BaselineNotFoundError(
                f"Scenario {scenario.name!r} selects a custom baseline but has none."
            )
        return BaselineValues(
            year=custom.year,
            source=mode,
            therapy_income=custom.therapy_income,
            non_employment_costs=custom.non_employment_costs,
            non_md_employment_costs=custom.non_md_employment_costs,
            misc_employment_costs=custom.misc_employment_costs,
        )

    year = config.baseline_year if mode is BaselineMode.CURRENT_YEAR_DATA else config.baseline_year - 1
    row = config.historic_row(year)
    if row is None:
        raise BaselineNotFoundError(f"No recorded data for baseline year {year} ({mode.value}).")
    return _from_year_row(row, mode, config)
