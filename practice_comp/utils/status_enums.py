# practice_comp/utils/status_enums.py

from enum import Enum


class PhysicianType(str, Enum):
    """Employment variants a physician can hold within a single year."""

    PARTNER = "partner"
    EMPLOYEE = "employee"
    NEW_EMPLOYEE = "newEmployee"
    EMPLOYEE_TO_TERMINATE = "employeeToTerminate"
    EMPLOYEE_TO_PARTNER = "employeeToPartner"
    PARTNER_TO_RETIRE = "partnerToRetire"


class FieldState(str, Enum):
    """Resolution state of a projected financial field."""

    DERIVED = "derived"
    OVERRIDDEN = "overridden"


class BaselineMode(str, Enum):
    """Source of the year that seeds a multi-year projection."""

    CURRENT_YEAR_DATA = "Current Year Data"
    PRIOR_YEAR_DATA = "Prior Year Data"
    CUSTOM = "Custom"


# Types that share in the partner pool at some point of the year
PARTNER_TYPES = frozenset(
    {
        PhysicianType.PARTNER,
        PhysicianType.EMPLOYEE_TO_PARTNER,
        PhysicianType.PARTNER_TO_RETIRE,
    }
)

# Types that draw W-2 wages at some point of the year
EMPLOYEE_TYPES = frozenset(
    {
        PhysicianType.EMPLOYEE,
        PhysicianType.NEW_EMPLOYEE,
        PhysicianType.EMPLOYEE_TO_TERMINATE,
        PhysicianType.EMPLOYEE_TO_PARTNER,
    }
)

# Explicit exports
__all__ = [
    "PhysicianType",
    "FieldState",
    "BaselineMode",
    "PARTNER_TYPES",
    "EMPLOYEE_TYPES",
]
