"""
Elementary transcendental functions over Decimal.

Each routine uses range reduction followed by a fixed-length series or a fixed
number of Newton iterations. Lengths are constants, never convergence-checked,
so the cost and the exact output digits depend only on the argument.
"""
from __future__ import annotations

from decimal import Decimal, ROUND_CEILING, ROUND_FLOOR

from .scalar import HALF, LN2, ONE, TWO, ZERO, ScalarLike, kernel_context, to_decimal

SERIES_TERMS = 40
SQRT_ITERATIONS = 20

# Returned by ln() for non-positive arguments.
LN_FLOOR = Decimal(-23)


def exp(x: ScalarLike) -> Decimal:
    """
    e**x via ln2 range reduction and a 40-term Taylor series.

    x = n*ln2 + r with |r| <= ln2, so e**x = 2**n * e**r. The power of two is
    applied by n repeated multiplications (or divisions for n < 0); very large
    |x| is therefore slow and may overflow the Decimal exponent range. Large
    negative x stops halving once the result has underflowed to zero.
    """
    x = to_decimal(x, "x")
    with kernel_context():
        n_raw = x / LN2
        if n_raw >= ZERO:
            n = n_raw.to_integral_value(rounding=ROUND_FLOOR)
        else:
            n = n_raw.to_integral_value(rounding=ROUND_CEILING) - ONE
        r = x - n * LN2

        term = ONE
        total = ONE
        for k in range(1, SERIES_TERMS):
            term = term * r / Decimal(k)
            total += term

        steps = int(n)
        if steps >= 0:
            for _ in range(steps):
                total *= TWO
        else:
            for _ in range(-steps):
                total /= TWO
                if total.is_zero():
                    break
        return total


def ln(x: ScalarLike) -> Decimal:
    """
    Natural logarithm via the atanh series.

    x is scaled into [0.5, 2] by halving/doubling (tracking the ln2 multiple),
    then ln(x) = 2 * sum_{k<40} z**(2k+1) / (2k+1) with z = (x-1)/(x+1).

    Non-positive x returns ``LN_FLOOR`` (-23).
    """
    x = to_decimal(x, "x")
    if x <= ZERO:
        return LN_FLOOR

    with kernel_context():
        val = x
        adjust = ZERO
        while val > TWO:
            val /= TWO
            adjust += LN2
        while val < HALF:
            val *= TWO
            adjust -= LN2

        z = (val - ONE) / (val + ONE)
        z2 = z * z
        term = z
        total = z
        for k in range(1, SERIES_TERMS):
            term *= z2
            total += term / Decimal(2 * k + 1)

        return TWO * total + adjust


def sqrt(x: ScalarLike) -> Decimal:
    """
    Square root by exactly 20 Newton iterations from x/2.

    Returns 0 for x <= 0. Twenty steps are ample for arguments within a few
    orders of magnitude of 1; far outside that range the fixed budget can stop
    short of full precision.
    """
    x = to_decimal(x, "x")
    if x <= ZERO:
        return ZERO

    with kernel_context():
        guess = x / TWO
        if guess.is_zero():
            guess = ONE
        for _ in range(SQRT_ITERATIONS):
            guess = (guess + x / guess) / TWO
        return guess


def power(base: ScalarLike, exponent: ScalarLike) -> Decimal:
    """
    base**exponent as exp(exponent * ln(base)).

    exponent == 0 gives 1; a non-positive base otherwise gives 0.
    """
    base = to_decimal(base, "base")
    exponent = to_decimal(exponent, "exponent")
    if exponent.is_zero():
        return ONE
    if base <= ZERO:
        return ZERO

    with kernel_context():
        return exp(exponent * ln(base))
