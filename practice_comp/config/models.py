# practice_comp/config/models.py
"""
Pydantic models for validating the structure and types of the engine
configuration loaded from YAML files (e.g., default_config.yaml).
"""

import logging
from datetime import date
from typing import Dict, List, Literal, Optional

import numpy as np
from pydantic import BaseModel, Field, model_validator

from practice_comp.state.records import Projection, YearRow

logger = logging.getLogger(__name__)

# --- Payroll Tax Models ---


class TaxRegime(BaseModel):
    """A single employer payroll levy and the wage base it applies to."""

    name: str
    rate: float = Field(..., ge=0.0, description="Employer rate (e.g., 0.062 for 6.2%)")
    cap: Literal["none", "fixed", "social_security"] = Field(
        "none",
        description="'none' taxes all wages, 'fixed' stops at wage_base, "
        "'social_security' stops at the year's Social Security wage base",
    )
    wage_base: Optional[float] = Field(None, ge=0.0)

    @model_validator(mode='after')
    def check_wage_base(self) -> 'TaxRegime':
        if self.cap == "fixed" and self.wage_base is None:
            raise ValueError(f"Tax regime '{self.name}' has a fixed cap but no wage_base.")
        return self


class PayrollTaxConfig(BaseModel):
    social_security_wage_bases: Dict[int, float] = Field(
        ..., description="Published Social Security wage base by year"
    )
    regimes: List[TaxRegime] = Field(default_factory=list)

    @model_validator(mode='after')
    def check_tables(self) -> 'PayrollTaxConfig':
        if not self.social_security_wage_bases:
            raise ValueError("At least one Social Security wage base must be configured.")
        names = [r.name for r in self.regimes]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate tax regime names: {names}")
        return self

    def wage_base_for_year(self, year: int) -> float:
        """
        Social Security wage base for ``year``.

        Years outside the table use the nearest configured year.
        """
        bases = self.social_security_wage_bases
        if year in bases:
            return bases[year]
        nearest = max(bases) if year > max(bases) else min(bases)
        logger.warning(f"No Social Security wage base for {year}; using {nearest} value.")
        return bases[nearest]


# --- Cost Models ---


class BenefitsConfig(BaseModel):
    monthly_medical: float = Field(722.81, ge=0.0)
    monthly_dental: float = Field(57.12, ge=0.0)
    monthly_vision: float = Field(6.44, ge=0.0)
    base_year: int = 2025

    @property
    def annual_cost(self) -> float:
        return (self.monthly_medical + self.monthly_dental + self.monthly_vision) * 12

    def cost_for_year(self, year: int, growth_pct: float) -> float:
        """Full-year benefit cost, compounded by ``growth_pct`` after the base year."""
        if year <= self.base_year:
            return self.annual_cost
        return self.annual_cost * (1 + growth_pct / 100) ** (year - self.base_year)


class StaffMember(BaseModel):
    """Non-physician staff position used to derive default staff costs."""

    name: str
    hourly_rate: float = Field(..., ge=0.0)
    hours_per_week: float = Field(..., ge=0.0)
    receives_benefits: bool = False

    @property
    def annual_wages(self) -> float:
        return self.hourly_rate * self.hours_per_week * 52


class MedicalDirectorConfig(BaseModel):
    shared_default: float = Field(97200.0, ge=0.0, description="Shared contract annual maximum")
    prcs_default: float = Field(50000.0, ge=0.0)
    default_trailing_shared_amount: float = Field(2500.0, ge=0.0)
    trailing_shared_amounts: Dict[str, float] = Field(
        default_factory=dict, description="Default trailing amounts keyed by physician name"
    )
    prcs_director_tag: Optional[str] = Field(
        None, description="Name or id suffix of the partner who holds the PRCS contract"
    )

    def trailing_amount_for(self, physician_name: str) -> float:
        return self.trailing_shared_amounts.get(physician_name, self.default_trailing_shared_amount)


class PayScheduleConfig(BaseModel):
    enabled: bool = False
    reference_period_end: date = date(2024, 12, 13)
    reference_pay_date: date = date(2024, 12, 20)
    annual_work_hours: float = Field(2080.0, gt=0.0)
    hours_per_day: float = Field(8.0, gt=0.0)

    @model_validator(mode='after')
    def check_pay_lag(self) -> 'PayScheduleConfig':
        if self.reference_pay_date < self.reference_period_end:
            raise ValueError("reference_pay_date cannot precede reference_period_end")
        return self


class ToleranceConfig(BaseModel):
    change_threshold: float = Field(
        1000.0, ge=0.0, description="Dollar gap before a projected value counts as changed"
    )
    floating_point_tolerance: float = Field(
        0.001, ge=0.0, description="Gap for percentages and portions"
    )
    md_percentage_tolerance: float = Field(0.01, ge=0.0)


# --- Top-Level Configuration Model ---


class EngineConfig(BaseModel):
    """The root model for the engine configuration file."""

    baseline_year: int = 2025
    projection_years: int = Field(5, ge=1)
    payroll_taxes: PayrollTaxConfig
    benefits: BenefitsConfig = Field(default_factory=BenefitsConfig)
    staff: List[StaffMember] = Field(default_factory=list)
    medical_director: MedicalDirectorConfig = Field(default_factory=MedicalDirectorConfig)
    pay_schedule: PayScheduleConfig = Field(default_factory=PayScheduleConfig)
    consulting_services_default: float = Field(17030.0, ge=0.0)
    misc_employment_costs_default: float = Field(29115.51, ge=0.0)
    projection_defaults: Dict[str, Projection] = Field(default_factory=dict)
    tolerances: ToleranceConfig = Field(default_factory=ToleranceConfig)
    historic_data: List[YearRow] = Field(default_factory=list)

    @model_validator(mode='after')
    def check_defaults(self) -> 'EngineConfig':
        """Reject duplicate historic years; warn when scenario MD defaults disagree with the contract value."""
        years = [row.year for row in self.historic_data]
        if len(years) != len(set(years)):
            raise ValueError(f"Duplicate historic years: {sorted(years)}")
        for key, projection in self.projection_defaults.items():
            if not np.isclose(projection.medical_director_hours, self.medical_director.shared_default):
                logger.warning(
                    f"Projection defaults '{key}' use shared MD hours "
                    f"{projection.medical_director_hours:,.0f}, configured contract value is "
                    f"{self.medical_director.shared_default:,.0f}."
                )
        return self

    def projection_for(self, scenario_key: str) -> Projection:
        """Default assumptions for a scenario key ("A"/"B"), falling back to model defaults."""
        return self.projection_defaults.get(scenario_key, Projection())

    def historic_row(self, year: int) -> Optional[YearRow]:
        return next((row for row in self.historic_data if row.year == year), None)
