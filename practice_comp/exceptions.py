"""
Custom exception classes for the compensation engine.

Expected edge cases (no partners, missing optional fields, negative pools) are
reported through values and flags. These exceptions cover states the engine
cannot interpret.
"""


class PracticeModelError(Exception):
    """Base exception for all compensation engine errors."""

    pass


class UnknownPhysicianTypeError(PracticeModelError):
    """Raised when a roster entry carries an unrecognized type variant."""

    pass


class PortionOutOfRangeError(PracticeModelError, ValueError):
    """Raised when a portion-of-year value falls outside [0, 1]."""

    pass


class BaselineNotFoundError(PracticeModelError):
    """Raised when the selected baseline year has no recorded data."""

    pass


class UnknownFieldError(PracticeModelError, KeyError):
    """Raised when a projected or projection-settings field name is not recognized."""

    pass


class SnapshotError(PracticeModelError):
    """Raised when a scenario snapshot cannot be read back."""

    pass
