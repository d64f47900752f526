# practice_comp/state/records.py
"""
Year-level records: recorded actuals, editable projected years, projection
assumptions and the scenario that bundles them.

All models are frozen. Engine functions return modified copies, so two
scenarios (or two callers) never share mutable state.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from practice_comp.state.physician import Physician, parse_roster
from practice_comp.utils.status_enums import BaselineMode, FieldState

logger = logging.getLogger(__name__)

_RECORD_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class YearRow(BaseModel):
    """
    Recorded actuals for a completed year.

    The income-stream fields are only recorded from 2024 on; for earlier
    years ``therapy_income`` already holds the total income.
    """

    model_config = _RECORD_CONFIG

    year: int
    therapy_income: float
    non_employment_costs: float
    employee_payroll: Optional[float] = None
    non_md_employment_costs: Optional[float] = None
    locum_costs: Optional[float] = None
    misc_employment_costs: Optional[float] = None
    medical_director_hours: Optional[float] = None
    prcs_medical_director_hours: Optional[float] = None
    consulting_services_agreement: Optional[float] = None
    description: Optional[str] = None


class FutureYear(BaseModel):
    """
    One projected (editable) year.

    ``field_states`` records which financial fields hold a caller-supplied
    value; fields not listed are derived from the projection assumptions.
    ``prcs_director_physician_id`` distinguishes "never set" (fall back to
    the default director) from an explicit ``None`` (no PRCS director).
    """

    model_config = _RECORD_CONFIG

    year: int
    therapy_income: float = 0.0
    non_employment_costs: float = 0.0
    non_md_employment_costs: float = 0.0
    locum_costs: float = 0.0
    misc_employment_costs: float = 0.0
    medical_director_hours: Optional[float] = Field(None, ge=0.0)
    prcs_medical_director_hours: Optional[float] = Field(None, ge=0.0)
    consulting_services_agreement: Optional[float] = Field(None, ge=0.0)
    prcs_director_physician_id: Optional[str] = None
    physicians: List[Physician] = Field(default_factory=list)
    field_states: Dict[str, FieldState] = Field(default_factory=dict)

    @field_validator("physicians", mode="before")
    @classmethod
    def _parse_physicians(cls, value: Any) -> Any:
        # Surface unknown employment types as UnknownPhysicianTypeError
        if isinstance(value, list):
            return parse_roster(value)
        return value

    def field_state(self, field_name: str) -> FieldState:
        return self.field_states.get(field_name, FieldState.DERIVED)

    def is_overridden(self, field_name: str) -> bool:
        return self.field_state(field_name) is FieldState.OVERRIDDEN

    @property
    def prcs_designation_cleared(self) -> bool:
        """True when the PRCS director was explicitly set to nobody."""
        return (
            "prcs_director_physician_id" in self.model_fields_set
            and self.prcs_director_physician_id is None
        )


class Projection(BaseModel):
    """Growth and fixed-dollar assumptions of one scenario."""

    model_config = _RECORD_CONFIG

    income_growth_pct: float = 3.7
    non_employment_costs_pct: float = 5.7
    non_md_employment_costs_pct: float = 2.4
    misc_employment_costs_pct: float = 3.2
    benefit_costs_growth_pct: float = 7.2
    medical_director_hours: float = Field(97200.0, ge=0.0)
    prcs_medical_director_hours: float = Field(50000.0, ge=0.0)
    consulting_services_agreement: float = Field(17030.0, ge=0.0)
    locums_costs: float = Field(120000.0, ge=0.0)


class Scenario(BaseModel):
    """A named set of projected years plus the assumptions that drive them."""

    model_config = _RECORD_CONFIG

    name: str
    future: List[FutureYear] = Field(default_factory=list)
    projection: Projection = Field(default_factory=Projection)
    data_mode: BaselineMode = BaselineMode.CURRENT_YEAR_DATA
    custom_baseline: Optional[FutureYear] = None
    selected_year: Optional[int] = None

    def year(self, year: int) -> Optional[FutureYear]:
        return next((fy for fy in self.future if fy.year == year), None)
