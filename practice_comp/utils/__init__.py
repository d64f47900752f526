from .date_utils import (
    CalendarDate,
    date_from_day_of_year,
    days_in_year,
    is_leap_year,
    portion_of_year,
)
from .decimal_helpers import round_dollars, round_half_up
from .status_enums import BaselineMode, FieldState, PhysicianType

__all__ = [
    "round_dollars",
    "round_half_up",
    "CalendarDate",
    "date_from_day_of_year",
    "days_in_year",
    "is_leap_year",
    "portion_of_year",
    "BaselineMode",
    "FieldState",
    "PhysicianType",
]
