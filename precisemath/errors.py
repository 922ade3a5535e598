"""Define Python user-defined exceptions"""
from __future__ import annotations


class PreconditionViolation(AssertionError):
    """
    Raised when a caller breaks the input contract of an approximation routine.
    These indicate a bug in the caller and are not meant to be caught.
    """


class PowBaseOutOfRange(PreconditionViolation):
    """
    For PreciseNumber fractional powers; thrown if the base is outside of the range where
    the Taylor series around 1 converges.
    """


class NegativeExponent(PreconditionViolation):
    """
    For PreciseNumber fractional powers; thrown if the fractional part of the exponent is negative.
    """
