from datetime import date
from decimal import Decimal

import pytest
from structlog.testing import capture_logs

from numeric_kernel.errors import InsufficientDataError, ScalarConversionError
from numeric_kernel.solvers import (
    RootStatus,
    irr,
    newton_raphson,
    npv,
    npv_and_derivative,
    solve_irr,
    xirr,
)


@pytest.fixture(scope="module")
def ten_percent_flows():
    # -1000 today, 1000 * 1.1^5 in five periods
    return [-1000, 0, 0, 0, 0, "1610.51"]


def test_irr_ten_percent(ten_percent_flows):
    rate = irr(ten_percent_flows)
    assert abs(rate - Decimal("0.10")) < Decimal("1e-3")


def test_irr_from_distant_guess(ten_percent_flows):
    result = solve_irr(ten_percent_flows, guess="0.02")
    assert result.status is RootStatus.CONVERGED
    assert result.converged and not result.at_bound
    assert abs(result.value - Decimal("0.10")) < Decimal("1e-6")


def test_irr_period_amount_pairs(ten_percent_flows):
    pairs = [(0, -1000), (5, "1610.51")]
    assert abs(irr(pairs, guess="0.2") - irr(ten_percent_flows, guess="0.2")) < Decimal("1e-9")


def test_irr_deterministic(ten_percent_flows):
    assert irr(ten_percent_flows, guess="0.03") == irr(ten_percent_flows, guess="0.03")


def test_npv_zero_at_irr(ten_percent_flows):
    assert abs(npv("0.10", ten_percent_flows)) < Decimal("1e-9")
    assert npv(0, [-100, 60, 60]) == 20


def test_derivative_matches_finite_difference():
    flows = [-500, 120, 150, 180, 210]
    r = Decimal("0.07")
    h = Decimal("0.000001")
    _, d = npv_and_derivative(r, flows)
    fd = (npv(r + h, flows) - npv(r - h, flows)) / (2 * h)
    assert d < 0, "conventional flows have a downward-sloping NPV"
    assert abs(d - fd) / abs(d) < Decimal("1e-6")


def test_irr_without_root_ends_on_clamp_bound():
    # All-positive flows: NPV > 0 at every rate, Newton pushes the rate up forever.
    result = solve_irr([100, 100, 100])
    assert result.at_bound, "non-convergence shows up as a clamp-bound result"
    assert not result.converged
    assert result.status is RootStatus.MAX_ITERATIONS
    assert result.iterations == 30
    assert result.value == Decimal("10.0")
    assert irr([100, 100, 100]) == Decimal("10.0")


def test_irr_flat_derivative_returns_guess():
    result = solve_irr([(0, -100)])
    assert result.status is RootStatus.FLAT_DERIVATIVE
    assert result.value == Decimal("0.10")


def test_irr_custom_bounds_and_budget():
    result = solve_irr([100, 100], max_iterations=5, lower="-0.5", upper="2")
    assert result.value == Decimal("2")
    assert result.iterations == 5


def test_irr_rejects_bad_inputs():
    with pytest.raises(InsufficientDataError):
        irr([])
    with pytest.raises(ValueError):
        irr([-100, 110], lower="-1")
    with pytest.raises(ScalarConversionError):
        irr([-100.0, 110.0])
    with pytest.raises(ScalarConversionError):
        irr([(0.5, -100), (1, 110)])


def test_newton_raphson_breakeven_linear():
    # Carbon-price style breakeven: NPV(p) = 5000 - 12.5 * p
    result = newton_raphson(lambda p: (5000 - Decimal("12.5") * p, Decimal("-12.5")), 0, lower=0)
    assert result.converged
    assert result.value == Decimal(400)


def test_newton_raphson_accepts_int_callback_values():
    result = newton_raphson(lambda p: (p - 3, 1), 0)
    assert result.converged
    assert result.value == Decimal(3)
    with pytest.raises(ScalarConversionError):
        newton_raphson(lambda p: (float(p) - 3, 1), 0)


def test_newton_raphson_square_root_of_two():
    result = newton_raphson(lambda x: (x * x - 2, 2 * x), 1)
    assert result.converged
    assert abs(result.value - Decimal(2).sqrt()) < Decimal("1e-12")


def test_newton_raphson_clamp_stall_logs_warning():
    with capture_logs() as logs:
        result = newton_raphson(lambda x: (x + 5, Decimal(1)), 1, lower=0)
    assert result.value == 0
    assert result.at_bound
    assert result.status is RootStatus.MAX_ITERATIONS
    assert any(e["log_level"] == "warning" for e in logs), "non-convergence must be logged"


def test_newton_raphson_rejects_empty_budget():
    with pytest.raises(ValueError):
        newton_raphson(lambda x: (x, Decimal(1)), 1, max_iterations=0)


def test_xirr_annual_dates_close_to_periodic_irr():
    flows = [(date(2020, 1, 1), -1000), (date(2025, 1, 1), "1610.51")]
    rate = xirr(flows)
    # Actual/365.25 makes the horizon slightly longer than 5 years
    assert abs(rate - Decimal("0.10")) < Decimal("1e-3")
    assert rate < Decimal("0.10")


def test_xirr_rejects_empty():
    with pytest.raises(InsufficientDataError):
        xirr([])
