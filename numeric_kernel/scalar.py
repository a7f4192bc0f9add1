"""
Scalar layer: the fixed-precision Decimal context every kernel routine runs in.

All kernel arithmetic happens inside ``KERNEL_CONTEXT`` (28 significant digits,
banker's rounding), entered per call with ``decimal.localcontext`` so that the
caller's own thread context never leaks into results.
"""
from __future__ import annotations

from decimal import Context, Decimal, ROUND_HALF_EVEN, localcontext
from typing import Union

from .errors import ScalarConversionError

ScalarLike = Union[Decimal, int, str]

PRECISION = 28

KERNEL_CONTEXT = Context(prec=PRECISION, rounding=ROUND_HALF_EVEN)

ZERO = Decimal(0)
ONE = Decimal(1)
TWO = Decimal(2)
HALF = Decimal("0.5")

LN2 = Decimal("0.6931471805599453")
SQRT_2PI = Decimal("2.506628274631")


def kernel_context():
    """Context manager entering a private copy of the kernel context."""
    return localcontext(KERNEL_CONTEXT)


def to_decimal(value: ScalarLike, name: str = "value") -> Decimal:
    """
    Coerce an input to a finite Decimal.

    Accepts Decimal, int and str. Floats are rejected: binary floating point
    must never cross into the kernel.

    Raises
    ------
    ScalarConversionError
        On float/bool input, unparseable strings or non-finite values.
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise ScalarConversionError(
            f"{name}: {type(value).__name__} is not accepted, pass Decimal, int or str"
        )

    if isinstance(value, Decimal):
        out = value
    elif isinstance(value, (int, str)):
        try:
            out = Decimal(value)
        except ArithmeticError as exc:
            raise ScalarConversionError(f"{name}: cannot parse {value!r} as Decimal") from exc
    else:
        raise ScalarConversionError(f"{name}: unsupported type {type(value).__name__}")

    if not out.is_finite():
        raise ScalarConversionError(f"{name}: non-finite value {out}")
    return out
