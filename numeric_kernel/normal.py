"""
Standard normal distribution on Decimal.

- pdf: Gaussian density via the kernel exp.
- cdf: Abramowitz & Stegun 26.2.17 polynomial, saturated outside |x| < 10.
- inv_cdf: A&S 26.2.23 rational initial guess plus 3 Newton steps on cdf.
"""
from __future__ import annotations

from decimal import Decimal

from .elementary import exp, ln, sqrt
from .scalar import ONE, SQRT_2PI, TWO, ZERO, ScalarLike, kernel_context, to_decimal

SATURATION = Decimal(10)
NEWTON_REFINEMENTS = 3

# A&S 26.2.17
_P = Decimal("0.2316419")
_B1 = Decimal("0.319381530")
_B2 = Decimal("-0.356563782")
_B3 = Decimal("1.781477937")
_B4 = Decimal("-1.821255978")
_B5 = Decimal("1.330274429")

# A&S 26.2.23
_C0 = Decimal("2.515517")
_C1 = Decimal("0.802853")
_C2 = Decimal("0.010328")
_D1 = Decimal("1.432788")
_D2 = Decimal("0.189269")
_D3 = Decimal("0.001308")


def pdf(x: ScalarLike) -> Decimal:
    """Standard normal density exp(-x^2/2) / sqrt(2*pi)."""
    x = to_decimal(x, "x")
    with kernel_context():
        return exp(-(x * x) / TWO) / SQRT_2PI


def cdf(x: ScalarLike) -> Decimal:
    """
    Standard normal CDF.

    Returns exactly 0 for x <= -10 and exactly 1 for x >= 10. Inside that range
    the A&S polynomial is evaluated on |x| and mirrored for negative x, so
    cdf(x) + cdf(-x) == 1 up to the last digit.
    """
    x = to_decimal(x, "x")
    if x <= -SATURATION:
        return ZERO
    if x >= SATURATION:
        return ONE

    with kernel_context():
        abs_x = abs(x)
        t = ONE / (ONE + _P * abs_x)
        t2 = t * t
        t3 = t2 * t
        t4 = t3 * t
        t5 = t4 * t

        poly = _B1 * t + _B2 * t2 + _B3 * t3 + _B4 * t4 + _B5 * t5
        upper = ONE - pdf(abs_x) * poly

        if x < ZERO:
            return ONE - upper
        return upper


def inv_cdf(p: ScalarLike) -> Decimal:
    """
    Inverse standard normal CDF (quantile function).

    p <= 0 saturates to -10 and p >= 1 to +10. The result is an approximation:
    cdf(inv_cdf(p)) matches p to well within 0.005 on the central range, but
    not exactly.
    """
    p = to_decimal(p, "p")
    if p <= ZERO:
        return -SATURATION
    if p >= ONE:
        return SATURATION

    with kernel_context():
        lower_tail = p < Decimal("0.5")
        pp = p if lower_tail else ONE - p

        t = sqrt(Decimal(-2) * ln(pp))
        numerator = _C0 + _C1 * t + _C2 * t * t
        denominator = ONE + _D1 * t + _D2 * t * t + _D3 * t * t * t

        x = t - numerator / denominator
        if lower_tail:
            x = -x

        for _ in range(NEWTON_REFINEMENTS):
            density = pdf(x)
            if density.is_zero():
                break
            x -= (cdf(x) - p) / density

        return x
