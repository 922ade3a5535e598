"""Fixed point datatype with checked arithmetic & approximate exponentiation"""
from __future__ import annotations

import logging
from functools import total_ordering
from typing import Any, Union

from . import errors
from .uint import U256

OtherTypes = Union[int, U256]

logger = logging.getLogger(__name__)

# The representation of the number one as a precise number
ONE = 10_000_000_000


@total_ordering
class PreciseNumber:
    r"""Fixed-point number datatype that allows for decimal calculations without floats

    Values are stored internally as a U256 equal to the true value multiplied by `ONE`,
    giving 10 decimal digits of precision. Only non-negative values can be represented;
    subtraction that would go negative either fails (`checked_sub`) or reports the sign
    separately from the magnitude (`unsigned_sub`).

    Every checked operation returns a new PreciseNumber, or None if the result cannot be
    computed (overflow, underflow, division by zero). Callers must check for None and
    propagate it; no operation substitutes a default value.

    .. note::
        Arithmetic follows the SPL token-swap curve math, including its rounding
        correction and its overflow fallbacks for multiplication and division.
    """

    ONE = ONE

    # Desired precision for the correction factor applied during each iteration of
    # checked_pow_approximation and newtonian_root_approximation. Once the correction
    # is smaller than this number, or we reach the maximum number of iterations,
    # the calculation ends.
    PRECISION = 100

    MAX_APPROXIMATION_ITERATIONS = 100

    # Minimum base allowed when calculating fractional exponents; this simply avoids 0.
    MIN_POW_BASE = 1

    # Maximum base allowed when calculating fractional exponents. The Taylor series
    # around 1 only converges for bases between 0 and 2. See
    # https://en.wikipedia.org/wiki/Binomial_series#Conditions_for_convergence
    MAX_POW_BASE = 2 * ONE

    _value: U256

    def __init__(self, value: OtherTypes = 0):
        r"""Store the raw, already scaled value"""
        super().__setattr__("_value", U256(value))

    @classmethod
    def new(cls, value: int) -> PreciseNumber | None:
        r"""Create a precise number from an imprecise unsigned 128-bit integer

        Arguments
        ---------
        value : int
            Whole number in the range [0, 2**128 - 1].

        Returns
        -------
        PreciseNumber | None
            The scaled number, or None if the scaling overflows.
        """
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"{value=} must have type `int`")
        if not 0 <= value <= U256.U128_MAX:
            raise ValueError(f"{value=} must be an unsigned 128-bit integer")
        scaled = U256(value).checked_mul(cls.ONE)
        if scaled is None:
            return None
        return cls(scaled)

    @classmethod
    def zero(cls) -> PreciseNumber:
        """The number 0 as a PreciseNumber"""
        return cls(0)

    @classmethod
    def one(cls) -> PreciseNumber:
        """The number 1 as a PreciseNumber"""
        return cls(cls.ONE)

    @property
    def value(self) -> U256:
        """Raw value, equal to the true value multiplied by ONE

        The internal representation is immutable, so this is read-only.
        """
        # pylint: disable=no-member
        return self._value

    def __setattr__(self, key: str, value: Any) -> None:
        raise AttributeError(f"{self.__class__.__name__} is immutable, cannot set attribute '{key}'.")

    @classmethod
    def rounding_correction(cls) -> U256:
        r"""Correction to apply to avoid truncation errors on division.

        Integer division always floors the result, so we bump the numerator up by
        one half of ONE to round to the nearest value instead.
        """
        return U256(cls.ONE // 2)

    ### Conversion ###
    def to_imprecise(self) -> int | None:
        r"""Convert a precise number back to an unsigned 128-bit integer, rounding to the nearest whole number"""
        rounded = self.value.checked_add(self.rounding_correction())
        if rounded is None:
            return None
        whole = rounded.checked_div(self.ONE)
        if whole is None:
            return None
        return whole.as_u128()

    def floor(self) -> PreciseNumber | None:
        r"""Floors a precise value to a precision of ONE"""
        whole = self.value.checked_div(self.ONE)
        if whole is None:
            return None
        value = whole.checked_mul(self.ONE)
        if value is None:
            return None
        return PreciseNumber(value)

    def almost_eq(self, other: PreciseNumber, precision: OtherTypes) -> bool:
        r"""Checks that two PreciseNumbers are equal within some tolerance

        Arguments
        ---------
        other : PreciseNumber
            Number to compare against.
        precision : int | U256
            Raw (scaled) tolerance; the absolute difference must be strictly less than this.
            Must be non-negative.
        """
        if int(precision) < 0:
            raise ValueError(f"{precision=} must be a non-negative tolerance")
        difference, _ = self.unsigned_sub(other)
        return difference.value < U256(precision)

    ### Arithmetic ###
    def checked_add(self, other: PreciseNumber) -> PreciseNumber | None:
        r"""Add two precise numbers"""
        value = self.value.checked_add(other.value)
        if value is None:
            return None
        return PreciseNumber(value)

    def checked_sub(self, other: PreciseNumber) -> PreciseNumber | None:
        r"""Subtract other from self, returning None if the result would be negative"""
        value = self.value.checked_sub(other.value)
        if value is None:
            return None
        return PreciseNumber(value)

    def unsigned_sub(self, other: PreciseNumber) -> tuple[PreciseNumber, bool]:
        r"""Subtract other from self, returning the magnitude and whether the result is negative"""
        value = self.value.checked_sub(other.value)
        if value is None:
            # other > self, so the reverse subtraction cannot underflow
            return PreciseNumber(int(other.value) - int(self.value)), True
        return PreciseNumber(value), False

    def checked_mul(self, other: PreciseNumber) -> PreciseNumber | None:
        r"""Multiply two precise numbers

        The product of two scaled values is divided by ONE to restore the scale. If the raw
        product overflows, the larger operand is first divided by ONE, dropping its
        fractional digits, and then multiplied by the other. This trades precision for
        headroom; no rounding correction is applied on that path.
        """
        product = self.value.checked_mul(other.value)
        if product is not None:
            rounded = product.checked_add(self.rounding_correction())
            if rounded is None:
                return None
            value = rounded.checked_div(self.ONE)
        else:
            if self.value >= other.value:
                larger, smaller = self.value, other.value
            else:
                larger, smaller = other.value, self.value
            truncated = larger.checked_div(self.ONE)
            if truncated is None:
                return None
            value = truncated.checked_mul(smaller)
        if value is None:
            return None
        return PreciseNumber(value)

    def checked_div(self, other: PreciseNumber) -> PreciseNumber | None:
        r"""Divide self by other, returning None if other is zero

        The numerator is scaled up by ONE before dividing. If that overflows, the division
        happens first and the quotient is scaled up afterwards, losing the fractional digits.
        """
        if other.value == 0:
            return None
        scaled = self.value.checked_mul(self.ONE)
        if scaled is not None:
            rounded = scaled.checked_add(self.rounding_correction())
            if rounded is None:
                return None
            value = rounded.checked_div(other.value)
        else:
            rounded = self.value.checked_add(self.rounding_correction())
            if rounded is None:
                return None
            quotient = rounded.checked_div(other.value)
            if quotient is None:
                return None
            value = quotient.checked_mul(self.ONE)
        if value is None:
            return None
        return PreciseNumber(value)

    ### Exponentiation ###
    def checked_pow(self, exponent: int) -> PreciseNumber | None:
        r"""Raise a precise number to a whole-number power

        Uses binary exponentiation: the base is squared at every step and only folded into
        the result when the current bit of the exponent is set.
        """
        if not isinstance(exponent, int) or isinstance(exponent, bool) or exponent < 0:
            raise ValueError(f"{exponent=} must be a non-negative integer")
        # For odd powers, start with the base since we halve the exponent at the start
        result: PreciseNumber | None = PreciseNumber.one() if exponent % 2 == 0 else self
        squared_base: PreciseNumber | None = self
        current_exponent = exponent // 2
        while current_exponent != 0:
            squared_base = squared_base.checked_mul(squared_base)
            if squared_base is None:
                return None
            # odd bit, "push" the base onto the result
            if current_exponent % 2 != 0:
                result = result.checked_mul(squared_base)
                if result is None:
                    return None
            current_exponent //= 2
        return result

    def _check_pow_base(self) -> None:
        if not self.MIN_POW_BASE <= self.value <= self.MAX_POW_BASE:
            raise errors.PowBaseOutOfRange(
                f"base={self} must be between {PreciseNumber(self.MIN_POW_BASE)} and {PreciseNumber(self.MAX_POW_BASE)}"
            )

    def checked_pow_approximation(self, exponent: PreciseNumber, max_iterations: int) -> PreciseNumber | None:
        r"""Approximate self to the power of 0 <= exponent < 1 with a Taylor series around 1

        For :math:`x^n` expanded around :math:`a = 1`:

        .. math::
            x^n = a^n + n a^{n-1} (x - a) + \frac{1}{2!} n (n - 1) a^{n-2} (x - a)^2 + \ldots

        so each term is the previous one refined by

        .. math::
            t_{k+1} = t_k (x - a) \frac{n + 1 - k}{k}

        Arguments
        ---------
        exponent : PreciseNumber
            Fractional exponent.
        max_iterations : int
            Upper bound on the loop; at most `max_iterations - 1` terms are added.

        Returns
        -------
        PreciseNumber | None
            The approximation, or None if an intermediate term overflows.
        """
        self._check_pow_base()
        one = PreciseNumber.one()
        if exponent.value == 0:
            return one
        precise_guess = one
        term = one
        x_minus_a, x_minus_a_negative = self.unsigned_sub(precise_guess)
        exponent_plus_one = exponent.checked_add(one)
        if exponent_plus_one is None:
            return None
        negative = False
        for k in range(1, max_iterations):
            precise_k = PreciseNumber.new(k)
            if precise_k is None:
                return None
            current_exponent, current_exponent_negative = exponent_plus_one.unsigned_sub(precise_k)
            term = term.checked_mul(current_exponent)
            if term is None:
                return None
            term = term.checked_mul(x_minus_a)
            if term is None:
                return None
            term = term.checked_div(precise_k)
            if term is None:
                return None
            if term.value < self.PRECISION:
                logger.debug("pow approximation converged after %d terms", k - 1)
                break
            if x_minus_a_negative:
                negative = not negative
            if current_exponent_negative:
                negative = not negative
            if negative:
                precise_guess = precise_guess.checked_sub(term)
            else:
                precise_guess = precise_guess.checked_add(term)
            if precise_guess is None:
                return None
        else:
            logger.debug("pow approximation stopped at max_iterations=%d without converging", max_iterations)
        return precise_guess

    def checked_pow_fraction(self, exponent: PreciseNumber) -> PreciseNumber | None:
        r"""Raise self to a non-negative rational power

        The exponent is split into its whole part, which is computed exactly with
        `checked_pow`, and its fractional remainder, which is approximated with
        `checked_pow_approximation`. The two parts are multiplied together.
        """
        self._check_pow_base()
        whole_exponent = exponent.floor()
        if whole_exponent is None:
            return None
        whole = whole_exponent.to_imprecise()
        if whole is None:
            return None
        precise_whole = self.checked_pow(whole)
        if precise_whole is None:
            return None
        remainder_exponent, negative = exponent.unsigned_sub(whole_exponent)
        if negative:
            raise errors.NegativeExponent(f"exponent={exponent} has a negative fractional part")
        if remainder_exponent.value == 0:
            return precise_whole
        precise_remainder = self.checked_pow_approximation(remainder_exponent, self.MAX_APPROXIMATION_ITERATIONS)
        if precise_remainder is None:
            return None
        return precise_whole.checked_mul(precise_remainder)

    def newtonian_root_approximation(self, root: PreciseNumber, guess: PreciseNumber) -> PreciseNumber | None:
        r"""Approximate the nth root of self using Newton's method

        Solves :math:`f(x) = x^n - A = 0` by iterating

        .. math::
            x_{k+1} = \frac{(n - 1) x_k + A / x_k^{n - 1}}{n}

        If :math:`x_k^{n - 1}` overflows, the second term is treated as zero instead of
        failing the whole computation. See https://en.wikipedia.org/wiki/Newton%27s_method

        Arguments
        ---------
        root : PreciseNumber
            The n in nth root; the whole part of n - 1 is used as the power.
        guess : PreciseNumber
            Starting point for the iteration.

        Returns
        -------
        PreciseNumber | None
            The final guess, which is not guaranteed to be exact.
        """
        if root.value == 0:
            return None
        root_minus_one = root.checked_sub(PreciseNumber.one())
        if root_minus_one is None:
            return None
        root_minus_one_whole = root_minus_one.to_imprecise()
        if root_minus_one_whole is None:
            return None
        last_guess = guess
        for _ in range(self.MAX_APPROXIMATION_ITERATIONS):
            first_term = root_minus_one.checked_mul(guess)
            if first_term is None:
                return None
            power = guess.checked_pow(root_minus_one_whole)
            if power is None:
                logger.debug("newtonian root: guess=%s to the power %d overflowed", guess, root_minus_one_whole)
                second_term = PreciseNumber.zero()
            else:
                second_term = self.checked_div(power)
                if second_term is None:
                    return None
            numerator = first_term.checked_add(second_term)
            if numerator is None:
                return None
            guess = numerator.checked_div(root)
            if guess is None:
                return None
            if last_guess.almost_eq(guess, self.PRECISION):
                break
            last_guess = guess
        return guess

    ### Comparison ###
    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, PreciseNumber):
            return NotImplemented
        return self.value == other.value

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, PreciseNumber):
            return NotImplemented
        return self.value < other.value

    def __hash__(self) -> int:
        return hash((self.__class__.__name__, self.value))

    def __reduce__(self):
        r"""Rebuild from the raw value, since __setattr__ refuses to restore state"""
        return (self.__class__, (int(self.value),))

    ### Formatting ###
    def __str__(self) -> str:
        r"""Exact decimal representation, e.g. "1.0488088481" """
        integer, remainder = divmod(int(self.value), self.ONE)
        return f"{integer}.{remainder:010d}"

    def __repr__(self) -> str:
        r"""Returns executable string representation

        For example: "PreciseNumber(value=10000000000)"
        """
        return f"{self.__class__.__name__}(value={int(self.value)})"
