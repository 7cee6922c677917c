"""Error kinds raised while validating a velocity solve.

Every failure carries a distinct ErrorCode, so that a host driver that only
sees integer return codes can still tell the failures apart.
"""

import enum


class ErrorCode(enum.IntEnum):
    """Return codes for the solver entry points."""
    SUCCESS = 0
    SHAPE_MISMATCH = 1
    MISSING_FIELD = 2
    INVALID_PARAMETER = 3


class SIAError(ValueError):
    """Base class for failures detected before a velocity solve writes output."""
    code = None


class ShapeMismatch(SIAError):
    """Array sizes are inconsistent with the mesh dimensions."""
    code = ErrorCode.SHAPE_MISMATCH


class MissingField(SIAError):
    """A required field, time level, or configuration value is absent."""
    code = ErrorCode.MISSING_FIELD


class InvalidParameter(SIAError):
    """A parameter or geometric quantity is outside its physical range."""
    code = ErrorCode.INVALID_PARAMETER
