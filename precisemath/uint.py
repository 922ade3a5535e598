"""256-bit unsigned integer with checked arithmetic"""
from __future__ import annotations

from functools import total_ordering
from typing import Union

OtherTypes = Union[int, "U256"]


@total_ordering
class U256:
    r"""Unsigned integer bounded to 256 bits.

    Python `int` has no max size, so every operation checks the result against
    the 256-bit range the way a fixed-width integer would. Checked operations
    return `None` instead of wrapping around or raising.

    .. note::
        Instances are immutable; every operation returns a new U256.
    """

    BITS = 256
    MAX = 2**256 - 1
    U128_MAX = 2**128 - 1

    __slots__ = ("_value",)

    _value: int

    def __init__(self, value: OtherTypes = 0):
        if isinstance(value, U256):
            value = value._value
        # bool is an int subclass, but True + True == 2 is not what anyone means
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"U256 must be constructed from an int, not {type(value).__name__}")
        if value < 0 or value > U256.MAX:
            raise ValueError(f"{value=} is outside of the range [0, {U256.MAX}]")
        object.__setattr__(self, "_value", value)

    def __setattr__(self, name, value):
        raise AttributeError(f"{self.__class__.__name__} is immutable, cannot set attribute '{name}'.")

    @classmethod
    def zero(cls) -> U256:
        """The number 0"""
        return cls(0)

    @classmethod
    def one(cls) -> U256:
        """The number 1"""
        return cls(1)

    @staticmethod
    def _coerce(other: OtherTypes) -> int:
        if isinstance(other, U256):
            return other._value
        if isinstance(other, int) and not isinstance(other, bool):
            return other
        raise TypeError(f"unsupported operand type {type(other).__name__} for U256")

    @classmethod
    def _checked(cls, value: int) -> U256 | None:
        if value < 0 or value > cls.MAX:
            return None
        return cls(value)

    ### Checked arithmetic ###
    def checked_add(self, other: OtherTypes) -> U256 | None:
        """Add, returning None on overflow"""
        return self._checked(self._value + self._coerce(other))

    def checked_sub(self, other: OtherTypes) -> U256 | None:
        """Subtract, returning None if other is greater than self"""
        return self._checked(self._value - self._coerce(other))

    def checked_mul(self, other: OtherTypes) -> U256 | None:
        """Multiply, returning None on overflow"""
        return self._checked(self._value * self._coerce(other))

    def checked_div(self, other: OtherTypes) -> U256 | None:
        """Divide and truncate, returning None if other is zero"""
        divisor = self._coerce(other)
        if divisor == 0:
            return None
        # both operands are non-negative, so floor division truncates toward zero
        return self._checked(self._value // divisor)

    def checked_rem(self, other: OtherTypes) -> U256 | None:
        """Remainder, returning None if other is zero"""
        divisor = self._coerce(other)
        if divisor == 0:
            return None
        return self._checked(self._value % divisor)

    ### Helpers ###
    def checked_u8_power(self, b: int) -> U256 | None:
        """Returns self to the power of b using b - 1 checked multiplications.

        For b in (0, 1) the loop never runs and self is returned unchanged.
        """
        _check_u8(b)
        result: U256 | None = self
        for _ in range(1, b):
            result = result.checked_mul(self)
            if result is None:
                return None
        return result

    def checked_u8_mul(self, b: int) -> U256 | None:
        """Returns self multiplied by b using b - 1 checked additions."""
        _check_u8(b)
        result: U256 | None = self
        for _ in range(1, b):
            result = result.checked_add(self)
            if result is None:
                return None
        return result

    def almost_equal(self, other: OtherTypes) -> bool | None:
        """Returns True if the values differ by no more than 1"""
        other = U256(other)
        if self > other:
            difference = self.checked_sub(other)
        else:
            difference = other.checked_sub(self)
        if difference is None:
            return None
        return difference <= U256.one()

    ### Conversions ###
    def as_u128(self) -> int | None:
        """Narrow to a 128-bit unsigned integer, returning None if the value does not fit"""
        if self._value > U256.U128_MAX:
            return None
        return self._value

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    ### Comparison ###
    def __eq__(self, other) -> bool:
        if isinstance(other, U256):
            return self._value == other._value
        if isinstance(other, int) and not isinstance(other, bool):
            return self._value == other
        return NotImplemented

    def __lt__(self, other) -> bool:
        if isinstance(other, U256):
            return self._value < other._value
        if isinstance(other, int) and not isinstance(other, bool):
            return self._value < other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __reduce__(self):
        # copy and pickle would otherwise restore the slot through __setattr__
        return (self.__class__, (self._value,))

    ### Formatting ###
    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._value})"

    def __str__(self) -> str:
        return str(self._value)


def _check_u8(b: int) -> None:
    if not isinstance(b, int) or isinstance(b, bool) or not 0 <= b <= 255:
        raise ValueError(f"{b=} must be an unsigned 8-bit integer")
