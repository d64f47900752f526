# practice_comp/state/__init__.py

from .physician import (
    EmployeePhysician,
    EmployeeToPartnerPhysician,
    NewEmployeePhysician,
    PartnerPhysician,
    Physician,
    PhysicianBase,
    RetiringPartnerPhysician,
    TerminatingEmployeePhysician,
    dump_roster,
    parse_physician,
    parse_roster,
)
from .records import FutureYear, Projection, Scenario, YearRow
from .roster import PortionSplit, resolve_portions, rosters_equivalent

__all__ = [
    "EmployeePhysician",
    "EmployeeToPartnerPhysician",
    "FutureYear",
    "NewEmployeePhysician",
    "PartnerPhysician",
    "Physician",
    "PhysicianBase",
    "PortionSplit",
    "Projection",
    "RetiringPartnerPhysician",
    "Scenario",
    "TerminatingEmployeePhysician",
    "YearRow",
    "dump_roster",
    "parse_physician",
    "parse_roster",
    "resolve_portions",
    "rosters_equivalent",
]
