"""Deterministic fixed-point math with checked arithmetic and bounded approximations"""
# Modules imported here are simply for easier namespace resolution, e.g.,
# from precisemath import PreciseNumber
# instead of
# from precisemath.precise_number import PreciseNumber

# pyright: reportUnusedImport=false

import logging

from .errors import NegativeExponent, PowBaseOutOfRange, PreconditionViolation
from .precise_number import ONE, PreciseNumber
from .uint import U256

# Setup barebones logging without a handler for users to adapt to their needs.
logging.getLogger(__name__).addHandler(logging.NullHandler())

# Maximum weight for a token in a weighted pool. This number is meant to stay small
# so that it is possible to accurately calculate x ** (MAX_WEIGHT / MIN_WEIGHT).
MAX_WEIGHT = 100

# Minimum weight for a token in a weighted pool
MIN_WEIGHT = 1
