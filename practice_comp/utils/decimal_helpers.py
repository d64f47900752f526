# practice_comp/utils/decimal_helpers.py

from decimal import Decimal, ROUND_HALF_UP, getcontext

# Set global rounding mode to half-up
getcontext().rounding = ROUND_HALF_UP
WHOLE_DOLLARS = Decimal('1')


def round_half_up(value: float) -> int:
    """Round a float to the nearest integer, halves away from zero."""
    return int(Decimal(repr(float(value))).quantize(WHOLE_DOLLARS, rounding=ROUND_HALF_UP))


def round_dollars(value: float) -> float:
    """Round a dollar amount to whole dollars the way the payroll reports do."""
    return float(round_half_up(value))
