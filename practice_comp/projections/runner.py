# practice_comp/projections/runner.py
"""
Core projection runner: resolves a scenario's projected years and computes
every year's compensation.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

import pandas as pd

from logging_config import PROJECTION_LOGGER
from practice_comp.config.models import EngineConfig
from practice_comp.engines.compensation import YearCompensation, calculate_year_compensation
from practice_comp.engines.md_hours import resolve_prcs_director_id
from practice_comp.projections.engine import PROJECTED_FIELDS, recompute
from practice_comp.state import schema
from practice_comp.state.records import FutureYear, Scenario, YearRow

logger = logging.getLogger(__name__)
proj_logger = logging.getLogger(PROJECTION_LOGGER)


def get_total_income(year_data: Union[YearRow, FutureYear], config: EngineConfig) -> float:
    """
    Total income of a recorded or projected year.

    Recorded years add whatever income streams were recorded; before 2024
    only therapy income (which then already holds the total) is recorded.
    Projected years add shared MD, PRCS (only with a director) and
    consulting income, falling back to configured defaults.
    """
    if isinstance(year_data, YearRow):
        streams = (
            year_data.medical_director_hours,
            year_data.prcs_medical_director_hours,
            year_data.consulting_services_agreement,
        )
        return year_data.therapy_income + sum(v for v in streams if v is not None)

    md_config = config.medical_director
    shared = year_data.medical_director_hours
    if shared is None:
        shared = md_config.shared_default
    prcs = 0.0
    if resolve_prcs_director_id(year_data, md_config.prcs_director_tag) is not None:
        prcs = year_data.prcs_medical_director_hours
        if prcs is None:
            prcs = md_config.prcs_default
    consulting = year_data.consulting_services_agreement
    if consulting is None:
        consulting = config.consulting_services_default
    return year_data.therapy_income + shared + prcs + consulting


@dataclass(frozen=True)
class ProjectionResult:
    """A resolved scenario and its compensation, year by year."""

    scenario: Scenario
    years: List[YearCompensation] = field(default_factory=list)

    def for_year(self, year: int) -> Optional[YearCompensation]:
        return next((y for y in self.years if y.year == year), None)

    def compensation_frame(self) -> pd.DataFrame:
        """Per-physician compensation of every year, stacked."""
        frames = [y.to_frame() for y in self.years]
        if not frames:
            return pd.DataFrame(columns=schema.COMPENSATION_COLUMNS)
        return pd.concat(frames, ignore_index=True)

    def year_frame(self) -> pd.DataFrame:
        """Financial rows per year, with one ``<field>_overridden`` flag per projected field."""
        rows = []
        by_year: Dict[int, YearCompensation] = {y.year: y for y in self.years}
        for fy in self.scenario.future:
            comp = by_year.get(fy.year)
            row = {name: getattr(fy, name) for name in PROJECTED_FIELDS}
            row[schema.YEAR] = fy.year
            row[schema.GROSS_INCOME] = comp.gross_income if comp else None
            row[schema.EMPLOYEE_COSTS] = comp.employee_costs if comp else None
            row[schema.NET_POOL] = comp.net_partner_pool if comp else None
            row[schema.UNDISTRIBUTED] = comp.undistributed_income if comp else None
            for name in PROJECTED_FIELDS:
                row[f"{name}{schema.OVERRIDDEN_SUFFIX}"] = fy.is_overridden(name)
            rows.append(row)
        flag_columns = [f"{name}{schema.OVERRIDDEN_SUFFIX}" for name in PROJECTED_FIELDS]
        return pd.DataFrame(rows, columns=schema.YEAR_COLUMNS + flag_columns)


def run_projection(scenario: Scenario, config: EngineConfig, include_retired: bool = True) -> ProjectionResult:
    """
    Resolve ``scenario`` and compute compensation for each projected year.

    The scenario passed in is not modified; the resolved copy is returned in
    the result.
    """
    resolved = recompute(scenario, config)
    growth = resolved.projection.benefit_costs_growth_pct
    proj_logger.info(
        f"Running projection for scenario {resolved.name!r} over "
        f"{len(resolved.future)} years ({resolved.data_mode.value})"
    )

    years = []
    for fy in sorted(resolved.future, key=lambda f: f.year):
        comp = calculate_year_compensation(fy, config, growth, include_retired=include_retired)
        if not comp.md_percentages_valid:
            logger.warning(
                f"[{resolved.name}] {fy.year}: MD-hours percentages do not sum to the expected total."
            )
        years.append(comp)
        logger.debug(
            f"[{resolved.name}] {fy.year}: gross {comp.gross_income:,.0f}, pool {comp.net_partner_pool:,.0f}"
        )

    proj_logger.info(f"Projection for scenario {resolved.name!r} complete")
    return ProjectionResult(scenario=resolved, years=years)


def compare_scenarios(
    scenario_a: Scenario,
    scenario_b: Scenario,
    config: EngineConfig,
) -> pd.DataFrame:
    """
    Side-by-side total income per physician name and year for two scenarios.

    The scenarios are run independently; nothing is shared between the runs.
    """
    frames = []
    for label, scenario in (("A", scenario_a), ("B", scenario_b)):
        frame = run_projection(scenario, config).compensation_frame()
        frame[schema.SCENARIO] = label
        frames.append(frame)
    combined = pd.concat(frames, ignore_index=True)
    pivot = combined.pivot_table(
        index=[schema.YEAR, schema.PHYSICIAN_NAME],
        columns=schema.SCENARIO,
        values=schema.TOTAL_INCOME,
        aggfunc="sum",
    )
    pivot = pivot.reindex(columns=["A", "B"])
    pivot["difference"] = pivot["B"].fillna(0.0) - pivot["A"].fillna(0.0)
    return pivot.reset_index()
