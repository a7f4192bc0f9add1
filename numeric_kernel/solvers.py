"""
Newton-Raphson root finding: the generic scalar solver and the IRR family built on it.

Cash-flow series are sequences of (period, amount) pairs, or plain sequences of
amounts where the position is the period. NPV and its rate derivative are
produced in a single pass so each Newton step costs one sweep of the series.

Non-convergence is never raised: solvers return their last iterate. Callers that
need a hard signal use ``solve_irr`` / ``newton_raphson`` and inspect the
returned ``RootResult``.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, Union

from .elementary import power
from .errors import InsufficientDataError, ScalarConversionError
from .logging_config import get_logger
from .scalar import ONE, ZERO, ScalarLike, kernel_context, to_decimal

logger = get_logger(__name__)

DEFAULT_GUESS = Decimal("0.10")
DEFAULT_MAX_ITERATIONS = 30
DEFAULT_TOLERANCE = Decimal("0.0000001")
DEFAULT_LOWER = Decimal("-0.99")
DEFAULT_UPPER = Decimal("10.0")

DAYS_PER_YEAR = Decimal("365.25")

CashFlow = Union[ScalarLike, Tuple[int, ScalarLike]]
CashFlowSeries = List[Tuple[int, Decimal]]


class RootStatus(str, Enum):
    CONVERGED = "converged"
    FLAT_DERIVATIVE = "flat_derivative"
    MAX_ITERATIONS = "max_iterations"


@dataclass(frozen=True)
class RootResult:
    """
    Outcome of a Newton-Raphson run.

    value      last iterate (always usable, converged or not)
    iterations function evaluations performed
    status     why the loop stopped
    residual   function value at the last evaluated iterate
    at_bound   last iterate sits exactly on a clamp bound
    """
    value: Decimal
    iterations: int
    status: RootStatus
    residual: Decimal
    at_bound: bool

    @property
    def converged(self) -> bool:
        return self.status is RootStatus.CONVERGED and not self.at_bound


def newton_raphson(
    func: Callable[[Decimal], Tuple[Decimal, Decimal]],
    x0: ScalarLike,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: ScalarLike = DEFAULT_TOLERANCE,
    lower: Optional[ScalarLike] = None,
    upper: Optional[ScalarLike] = None,
) -> RootResult:
    """
    Generic Newton-Raphson on a scalar function.

    ``func(x)`` returns ``(f(x), f'(x))``. Each step is ``x -= f/f'`` followed by
    clamping into [lower, upper] (either bound may be omitted). Stops when
    |step| < tolerance, when f'(x) == 0, or after ``max_iterations`` evaluations.
    """
    if max_iterations < 1:
        raise ValueError("max_iterations must be >= 1")

    x = to_decimal(x0, "x0")
    tol = to_decimal(tolerance, "tolerance")
    lo = None if lower is None else to_decimal(lower, "lower")
    hi = None if upper is None else to_decimal(upper, "upper")
    if lo is not None and hi is not None and lo > hi:
        raise ValueError("lower bound must not exceed upper bound")

    status = RootStatus.MAX_ITERATIONS
    residual = ZERO
    iterations = 0

    with kernel_context():
        for iterations in range(1, max_iterations + 1):
            value, derivative = func(x)
            value = to_decimal(value, "value")
            derivative = to_decimal(derivative, "derivative")
            residual = value

            if derivative.is_zero():
                status = RootStatus.FLAT_DERIVATIVE
                break

            step = value / derivative
            x -= step
            if lo is not None and x < lo:
                x = lo
            if hi is not None and x > hi:
                x = hi

            if abs(step) < tol:
                status = RootStatus.CONVERGED
                break

    at_bound = (lo is not None and x == lo) or (hi is not None and x == hi)
    result = RootResult(value=x, iterations=iterations, status=status, residual=residual, at_bound=at_bound)

    if result.converged:
        logger.debug("newton_raphson converged", value=str(x), iterations=iterations)
    else:
        logger.warning(
            "newton_raphson stopped without convergence",
            value=str(x),
            iterations=iterations,
            status=status.value,
            at_bound=at_bound,
        )
    return result


# ---- Cash-flow series ----

def as_cash_flow_series(cash_flows: Iterable[CashFlow]) -> CashFlowSeries:
    """Normalize amounts or (period, amount) pairs into a list of (int, Decimal)."""
    series: CashFlowSeries = []
    for position, item in enumerate(cash_flows):
        if isinstance(item, tuple):
            period, amount = item
            if isinstance(period, bool) or not isinstance(period, int):
                raise ScalarConversionError(f"cash flow {position}: period must be int, got {period!r}")
        else:
            period, amount = position, item
        series.append((period, to_decimal(amount, f"cash flow {position}")))
    return series


def _npv_and_derivative(rate: Decimal, series: CashFlowSeries) -> Tuple[Decimal, Decimal]:
    npv_val = ZERO
    dnpv = ZERO
    one_plus_r = ONE + rate

    for t, cf in series:
        if cf.is_zero():
            continue
        if t == 0:
            npv_val += cf
            continue
        if one_plus_r.is_zero():
            continue
        discount = one_plus_r ** t
        npv_val += cf / discount
        dnpv -= Decimal(t) * cf / (discount * one_plus_r)

    return npv_val, dnpv


def npv_and_derivative(rate: ScalarLike, cash_flows: Sequence[CashFlow]) -> Tuple[Decimal, Decimal]:
    """
    NPV and d(NPV)/d(rate) in one pass.

    Period t contributes cf/(1+r)^t to NPV and -t*cf/(1+r)^(t+1) to the derivative.
    """
    rate = to_decimal(rate, "rate")
    series = as_cash_flow_series(cash_flows)
    with kernel_context():
        return _npv_and_derivative(rate, series)


def npv(rate: ScalarLike, cash_flows: Sequence[CashFlow]) -> Decimal:
    """Net present value of a periodic cash-flow series at ``rate``."""
    return npv_and_derivative(rate, cash_flows)[0]


def _check_rate_bounds(lower: Decimal, upper: Decimal) -> None:
    if lower <= Decimal(-1):
        raise ValueError("lower rate bound must be > -1 so that 1 + rate stays positive")
    if lower >= upper:
        raise ValueError("lower rate bound must be below the upper bound")


def solve_irr(
    cash_flows: Sequence[CashFlow],
    guess: ScalarLike = DEFAULT_GUESS,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: ScalarLike = DEFAULT_TOLERANCE,
    lower: ScalarLike = DEFAULT_LOWER,
    upper: ScalarLike = DEFAULT_UPPER,
) -> RootResult:
    """
    Internal rate of return with full diagnostics.

    The rate is clamped to [lower, upper] after every step (default [-0.99, 10])
    so that the discount base 1 + rate stays positive. A result with
    ``at_bound`` set is the signature of a series with no reachable root.
    """
    series = as_cash_flow_series(cash_flows)
    if not series:
        raise InsufficientDataError("IRR requires at least one cash flow")

    lo = to_decimal(lower, "lower")
    hi = to_decimal(upper, "upper")
    _check_rate_bounds(lo, hi)

    return newton_raphson(
        lambda r: _npv_and_derivative(r, series),
        guess,
        max_iterations=max_iterations,
        tolerance=tolerance,
        lower=lo,
        upper=hi,
    )


def irr(
    cash_flows: Sequence[CashFlow],
    guess: ScalarLike = DEFAULT_GUESS,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: ScalarLike = DEFAULT_TOLERANCE,
    lower: ScalarLike = DEFAULT_LOWER,
    upper: ScalarLike = DEFAULT_UPPER,
) -> Decimal:
    """Internal rate of return: the last Newton iterate, converged or not."""
    return solve_irr(cash_flows, guess, max_iterations, tolerance, lower, upper).value


# ---- Irregular (dated) cash flows ----

def _year_fractions(dated_flows: Sequence[Tuple[date, ScalarLike]]) -> List[Tuple[Decimal, Decimal]]:
    base_date = dated_flows[0][0]
    out = []
    for i, (when, amount) in enumerate(dated_flows):
        days = (when - base_date).days
        with kernel_context():
            years = Decimal(days) / DAYS_PER_YEAR
        out.append((years, to_decimal(amount, f"cash flow {i}")))
    return out


def solve_xirr(
    dated_flows: Sequence[Tuple[date, ScalarLike]],
    guess: ScalarLike = DEFAULT_GUESS,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: ScalarLike = DEFAULT_TOLERANCE,
    lower: ScalarLike = DEFAULT_LOWER,
    upper: ScalarLike = DEFAULT_UPPER,
) -> RootResult:
    """
    IRR for irregularly dated flows (Actual/365.25 from the first flow's date).

    Discount factors (1 + r)^years use the kernel ``power``.
    """
    if not dated_flows:
        raise InsufficientDataError("XIRR requires at least one cash flow")

    lo = to_decimal(lower, "lower")
    hi = to_decimal(upper, "upper")
    _check_rate_bounds(lo, hi)

    flows = _year_fractions(dated_flows)

    def f(rate: Decimal) -> Tuple[Decimal, Decimal]:
        npv_val = ZERO
        dnpv = ZERO
        one_plus_r = ONE + rate
        for years, cf in flows:
            if cf.is_zero():
                continue
            discount = power(one_plus_r, years)
            if discount.is_zero():
                continue
            npv_val += cf / discount
            dnpv -= years * cf / (one_plus_r * discount)
        return npv_val, dnpv

    return newton_raphson(f, guess, max_iterations=max_iterations, tolerance=tolerance, lower=lo, upper=hi)


def xirr(
    dated_flows: Sequence[Tuple[date, ScalarLike]],
    guess: ScalarLike = DEFAULT_GUESS,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    tolerance: ScalarLike = DEFAULT_TOLERANCE,
    lower: ScalarLike = DEFAULT_LOWER,
    upper: ScalarLike = DEFAULT_UPPER,
) -> Decimal:
    """Dated-flow IRR: the last Newton iterate, converged or not."""
    return solve_xirr(dated_flows, guess, max_iterations, tolerance, lower, upper).value
