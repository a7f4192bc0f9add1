"""
Decimal Numeric Kernel

Deterministic fixed-precision numerics shared by the financial calculators:
- elementary: exp / ln / sqrt (+ power) via range reduction and fixed-length series
- normal: standard normal pdf / cdf / inverse cdf
- solvers: generic Newton-Raphson, NPV, IRR and dated-flow XIRR
- curves: sequential piecewise-rate bootstrapping + curve object + QC report
- scenarios: parallel quote-shift scenario runner
- backend: NumericBackend capability interface and its Decimal implementation

All inputs and outputs are decimal.Decimal; floats are rejected at the boundary.
"""
import logging

from .backend import DecimalBackend, NumericBackend
from .curves import (
    CurveNode,
    PiecewiseCurve,
    PiecewiseRate,
    bootstrap_piecewise_curve,
    curve_qc_report,
    flat_hazard_transform,
)
from .elementary import LN_FLOOR, exp, ln, power, sqrt
from .errors import InsufficientDataError, KernelError, ScalarConversionError
from .normal import cdf, inv_cdf, pdf
from .solvers import (
    RootResult,
    RootStatus,
    irr,
    newton_raphson,
    npv,
    npv_and_derivative,
    solve_irr,
    solve_xirr,
    xirr,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Elementary
    "exp", "ln", "sqrt", "power", "LN_FLOOR",
    # Normal distribution
    "pdf", "cdf", "inv_cdf",
    # Root finding
    "newton_raphson", "npv", "npv_and_derivative", "irr", "solve_irr",
    "xirr", "solve_xirr", "RootResult", "RootStatus",
    # Curves
    "CurveNode", "PiecewiseRate", "PiecewiseCurve", "bootstrap_piecewise_curve",
    "flat_hazard_transform", "curve_qc_report",
    # Backend
    "NumericBackend", "DecimalBackend",
    # Errors
    "KernelError", "ScalarConversionError", "InsufficientDataError",
]
