from decimal import Context, Decimal, localcontext

import numpy as np
import pytest

from numeric_kernel.elementary import LN_FLOOR, exp, ln, power, sqrt
from numeric_kernel.errors import ScalarConversionError


def _grid(lo: float, hi: float, n: int):
    return [Decimal(str(round(float(v), 6))) for v in np.linspace(lo, hi, n)]


@pytest.fixture(scope="module")
def moderate_grid():
    return _grid(-10.0, 10.0, 41)


def test_exp_zero_is_one():
    assert abs(exp(0) - 1) < Decimal("1e-9")
    assert exp(Decimal("0")) == Decimal(1)


def test_exp_one():
    assert abs(exp(1) - Decimal("2.71828")) < Decimal("0.001")


def test_exp_matches_decimal_reference(moderate_grid):
    for x in moderate_grid:
        ref = x.exp()
        rel = abs(exp(x) - ref) / ref
        assert rel < Decimal("1e-12"), f"exp({x}) off by rel {rel}"


def test_exp_positive_over_wide_range():
    for x in _grid(-50.0, 50.0, 101):
        assert exp(x) > 0, f"exp({x}) must be positive"


def test_exp_additivity():
    a, b = Decimal("1.3"), Decimal("-0.45")
    lhs = exp(a + b)
    rhs = exp(a) * exp(b)
    assert abs(lhs - rhs) / lhs < Decimal("1e-12")


def test_exp_deterministic_across_input_forms():
    assert exp("1.2345") == exp(Decimal("1.2345"))
    assert exp(7) == exp(7)


def test_results_ignore_caller_context():
    expected = exp("0.75")
    with localcontext(Context(prec=5)):
        assert exp("0.75") == expected, "caller precision must not leak into kernel results"
        assert ln("3.5") == ln("3.5")


def test_ln_of_exp_roundtrip(moderate_grid):
    for x in moderate_grid:
        assert abs(ln(exp(x)) - x) < Decimal("1e-3"), f"ln(exp({x})) != {x}"


def test_ln_matches_decimal_reference():
    for x in ["0.001", "0.3", "1.5", "2", "10", "12345.678", "1000000"]:
        d = Decimal(x)
        assert abs(ln(d) - d.ln()) < Decimal("1e-12"), f"ln({x}) inaccurate"


def test_ln_of_one_is_zero():
    assert ln(1) == 0


def test_ln_non_positive_returns_floor():
    assert LN_FLOOR == Decimal(-23)
    assert ln(0) == LN_FLOOR
    assert ln("-1") == LN_FLOOR


def test_sqrt_square_roundtrip():
    for x in ["0.0001", "0.01", "0.5", "1", "2", "10", "1234.5678", "1000000"]:
        d = Decimal(x)
        r = sqrt(d)
        assert abs(r * r - d) < Decimal("1e-6"), f"sqrt({x})^2 != {x}"


def test_sqrt_exact_square():
    assert sqrt(4) == 2


def test_sqrt_zero_and_negative():
    assert sqrt(0) == 0
    assert sqrt("-9") == 0


def test_power():
    assert abs(power(2, 10) - 1024) < Decimal("1e-9")
    assert abs(power("1.1", 5) - Decimal("1.61051")) < Decimal("1e-12")
    assert power("3.7", 0) == 1
    assert power(0, 2) == 0


def test_float_input_rejected():
    with pytest.raises(ScalarConversionError):
        exp(1.0)
    with pytest.raises(TypeError):
        sqrt(2.0)


def test_non_finite_input_rejected():
    with pytest.raises(ScalarConversionError):
        ln(Decimal("NaN"))
    with pytest.raises(ScalarConversionError):
        exp("Infinity")


def test_exp_of_huge_negative_argument_underflows_to_zero():
    assert exp("-1e30").is_zero()
