# practice_comp/state/physician.py
"""
Pydantic models for roster entries.

Every employment variant is its own model carrying only the timing and
financial fields that apply to it. ``Physician`` is the discriminated union of
those models, keyed on ``type``. Python attributes are snake_case; the wire
format used by scenario snapshots is camelCase (``employeePortionOfYear``),
so a roster dumped with :func:`dump_roster` parses back to an equal roster.
"""

import logging
from typing import Annotated, Any, Dict, Iterable, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from practice_comp.exceptions import UnknownPhysicianTypeError
from practice_comp.utils.status_enums import PhysicianType

logger = logging.getLogger(__name__)


class PhysicianBase(BaseModel):
    """Fields shared by every roster entry."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    id: str = Field(..., description="Stable identifier, unique within a year")
    name: str = Field(..., description="Display name")
    weeks_vacation: Optional[float] = Field(
        None, ge=0.0, description="Display only; never reduces worked portion"
    )
    receives_benefits: bool = False
    receives_bonuses: bool = False
    bonus_amount: float = Field(0.0, ge=0.0, description="Relocation/signing bonus")
    has_medical_director_hours: bool = False
    medical_director_hours_percentage: float = Field(0.0, ge=0.0, le=100.0)
    additional_days_worked: float = Field(
        0.0, ge=0.0, description="Internal locum dollars paid directly to a partner"
    )


class PartnerPhysician(PhysicianBase):
    type: Literal["partner"] = "partner"


class EmployeePhysician(PhysicianBase):
    type: Literal["employee"] = "employee"
    salary: float = Field(0.0, ge=0.0, description="Annualized W-2 rate")


class NewEmployeePhysician(PhysicianBase):
    type: Literal["newEmployee"] = "newEmployee"
    salary: float = Field(0.0, ge=0.0)
    start_portion_of_year: Optional[float] = Field(
        None, ge=0.0, le=1.0, description="0 = starts Jan 1, 1 = starts Dec 31"
    )


class TerminatingEmployeePhysician(PhysicianBase):
    type: Literal["employeeToTerminate"] = "employeeToTerminate"
    salary: float = Field(0.0, ge=0.0)
    terminate_portion_of_year: Optional[float] = Field(
        None, ge=0.0, le=1.0, description="Portion of the year worked before leaving"
    )


class EmployeeToPartnerPhysician(PhysicianBase):
    type: Literal["employeeToPartner"] = "employeeToPartner"
    salary: float = Field(0.0, ge=0.0)
    employee_portion_of_year: Optional[float] = Field(
        None, ge=0.0, le=1.0, description="Remainder of the year is partnership"
    )


class RetiringPartnerPhysician(PhysicianBase):
    type: Literal["partnerToRetire"] = "partnerToRetire"
    partner_portion_of_year: Optional[float] = Field(
        None, ge=0.0, le=1.0, description="0 = retired before this year began"
    )
    buyout_cost: float = Field(0.0, ge=0.0)
    trailing_shared_md_amount: Optional[float] = Field(
        None, ge=0.0, description="Prior-year shared MD pay settled this year"
    )


Physician = Annotated[
    Union[
        PartnerPhysician,
        EmployeePhysician,
        NewEmployeePhysician,
        TerminatingEmployeePhysician,
        EmployeeToPartnerPhysician,
        RetiringPartnerPhysician,
    ],
    Field(discriminator="type"),
]

PHYSICIAN_MODELS: Dict[PhysicianType, type] = {
    PhysicianType.PARTNER: PartnerPhysician,
    PhysicianType.EMPLOYEE: EmployeePhysician,
    PhysicianType.NEW_EMPLOYEE: NewEmployeePhysician,
    PhysicianType.EMPLOYEE_TO_TERMINATE: TerminatingEmployeePhysician,
    PhysicianType.EMPLOYEE_TO_PARTNER: EmployeeToPartnerPhysician,
    PhysicianType.PARTNER_TO_RETIRE: RetiringPartnerPhysician,
}

_PHYSICIAN_ADAPTER: TypeAdapter = TypeAdapter(Physician)

_TAG_ERRORS = {"union_tag_invalid", "union_tag_not_found"}


def _raise_if_unknown_type(error: ValidationError, data: Any) -> None:
    for detail in error.errors():
        if detail.get("type") in _TAG_ERRORS:
            tag = data.get("type") if isinstance(data, Mapping) else None
            raise UnknownPhysicianTypeError(
                f"Unrecognized physician type {tag!r}; expected one of "
                f"{[t.value for t in PhysicianType]}"
            ) from error


def parse_physician(data: Union[Mapping[str, Any], PhysicianBase]) -> Physician:
    """
    Build a roster entry from a mapping (camelCase or snake_case keys).

    Raises:
        UnknownPhysicianTypeError: if ``type`` is missing or not a known variant.
        pydantic.ValidationError: for any other invalid field, including
            portions outside [0, 1].
    """
    if isinstance(data, PhysicianBase):
        return data
    if isinstance(data, Mapping) and isinstance(data.get("type"), PhysicianType):
        data = {**data, "type": data["type"].value}
    try:
        return _PHYSICIAN_ADAPTER.validate_python(data)
    except ValidationError as e:
        _raise_if_unknown_type(e, data)
        raise


def parse_roster(items: Iterable[Union[Mapping[str, Any], PhysicianBase]]) -> List[Physician]:
    return [parse_physician(item) for item in items]


def dump_physician(physician: PhysicianBase) -> Dict[str, Any]:
    return physician.model_dump(mode="json", by_alias=True)


def dump_roster(roster: Iterable[PhysicianBase]) -> List[Dict[str, Any]]:
    return [dump_physician(p) for p in roster]


def physician_type(physician: PhysicianBase) -> PhysicianType:
    """Enum member for a roster entry's ``type`` tag."""
    try:
        return PhysicianType(getattr(physician, "type"))
    except (AttributeError, ValueError) as e:
        raise UnknownPhysicianTypeError(
            f"Roster entry {getattr(physician, 'id', '?')!r} has no recognized type"
        ) from e
