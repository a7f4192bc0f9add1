"""
Capability interface for consumers that want a pluggable numeric backend.

Calculators depend on ``NumericBackend`` (exp, ln, sqrt, cdf, inv_cdf) rather
than on module functions; ``DecimalBackend`` is the single implementation.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable

from . import elementary, normal, solvers
from .config import KernelSettings, get_settings
from .curves import CurveNode, PiecewiseCurve, QuoteTransform, bootstrap_piecewise_curve
from .scalar import ScalarLike


@runtime_checkable
class NumericBackend(Protocol):
    def exp(self, x: ScalarLike) -> Decimal: ...

    def ln(self, x: ScalarLike) -> Decimal: ...

    def sqrt(self, x: ScalarLike) -> Decimal: ...

    def cdf(self, x: ScalarLike) -> Decimal: ...

    def inv_cdf(self, p: ScalarLike) -> Decimal: ...


@dataclass(frozen=True)
class DecimalBackend:
    """Kernel functions bound to a fixed set of root-finder defaults."""
    guess: Decimal = solvers.DEFAULT_GUESS
    max_iterations: int = solvers.DEFAULT_MAX_ITERATIONS
    tolerance: Decimal = solvers.DEFAULT_TOLERANCE
    lower: Decimal = solvers.DEFAULT_LOWER
    upper: Decimal = solvers.DEFAULT_UPPER

    @classmethod
    def from_settings(cls, settings: Optional[KernelSettings] = None) -> "DecimalBackend":
        settings = settings or get_settings()
        return cls(**settings.root_finder_options())

    def exp(self, x: ScalarLike) -> Decimal:
        return elementary.exp(x)

    def ln(self, x: ScalarLike) -> Decimal:
        return elementary.ln(x)

    def sqrt(self, x: ScalarLike) -> Decimal:
        return elementary.sqrt(x)

    def cdf(self, x: ScalarLike) -> Decimal:
        return normal.cdf(x)

    def inv_cdf(self, p: ScalarLike) -> Decimal:
        return normal.inv_cdf(p)

    def solve_irr(self, cash_flows: Sequence[solvers.CashFlow]) -> solvers.RootResult:
        return solvers.solve_irr(
            cash_flows,
            guess=self.guess,
            max_iterations=self.max_iterations,
            tolerance=self.tolerance,
            lower=self.lower,
            upper=self.upper,
        )

    def irr(self, cash_flows: Sequence[solvers.CashFlow]) -> Decimal:
        return self.solve_irr(cash_flows).value

    def bootstrap(
        self,
        nodes: Iterable[Union[CurveNode, Tuple[ScalarLike, ScalarLike]]],
        transform: Optional[QuoteTransform] = None,
    ) -> PiecewiseCurve:
        return bootstrap_piecewise_curve(nodes, transform)
