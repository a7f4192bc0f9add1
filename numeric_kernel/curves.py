from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Iterable, Iterator, Optional, Tuple, Union

import pandas as pd

from .elementary import exp
from .errors import InsufficientDataError
from .logging_config import get_logger
from .scalar import ONE, ZERO, ScalarLike, kernel_context, to_decimal

logger = get_logger(__name__)

QuoteTransform = Callable[[Decimal], Decimal]


@dataclass(frozen=True)
class CurveNode:
    """A market quote observed at a maturity (in years)."""
    maturity: Decimal
    quote: Decimal

    def __post_init__(self):
        object.__setattr__(self, "maturity", to_decimal(self.maturity, "maturity"))
        object.__setattr__(self, "quote", to_decimal(self.quote, "quote"))


@dataclass(frozen=True)
class PiecewiseRate:
    """
    Bootstrapped state at one node.

    - rate: constant rate over (previous maturity, maturity]
    - cumulative: integral of the rate from 0 to maturity
    - survival: exp(-cumulative)
    - conditional_probability: previous survival - survival (predecessor of node 0 is 1)
    - floored: the raw interval rate was negative and was floored at zero
    """
    maturity: Decimal
    flat_rate: Decimal
    rate: Decimal
    cumulative: Decimal
    survival: Decimal
    conditional_probability: Decimal
    floored: bool = False

    @property
    def cumulative_probability(self) -> Decimal:
        with kernel_context():
            return ONE - self.survival


@dataclass(frozen=True)
class PiecewiseCurve:
    """
    Piecewise-constant rate curve produced by ``bootstrap_piecewise_curve``.

    - Within node range: cumulative integral is linear inside each interval.
    - Before time 0: cumulative is 0 (survival 1).
    - Long-end extrapolation: NOT allowed (raises).
    """
    nodes: Tuple[PiecewiseRate, ...]

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[PiecewiseRate]:
        return iter(self.nodes)

    @property
    def maturities(self) -> Tuple[Decimal, ...]:
        return tuple(n.maturity for n in self.nodes)

    @property
    def rates(self) -> Tuple[Decimal, ...]:
        return tuple(n.rate for n in self.nodes)

    def cumulative(self, t: ScalarLike) -> Decimal:
        t = to_decimal(t, "t")
        if t <= ZERO:
            return ZERO
        if t > self.nodes[-1].maturity:
            raise ValueError("Requested time beyond last curve node (no long-end extrapolation).")

        prev_t = ZERO
        prev_cum = ZERO
        with kernel_context():
            for node in self.nodes:
                if t <= node.maturity:
                    return prev_cum + node.rate * (t - prev_t)
                prev_t = node.maturity
                prev_cum = node.cumulative
        return prev_cum

    def survival(self, t: ScalarLike) -> Decimal:
        cumulative = self.cumulative(t)
        with kernel_context():
            return exp(-cumulative)


def flat_hazard_transform(recovery: ScalarLike) -> QuoteTransform:
    """
    CDS spread -> flat hazard rate: spread / (1 - recovery).

    With zero loss-given-default every spread maps to a zero hazard rate.
    """
    recovery = to_decimal(recovery, "recovery")
    with kernel_context():
        lgd = ONE - recovery

    def transform(spread: Decimal) -> Decimal:
        if lgd.is_zero():
            return ZERO
        with kernel_context():
            return spread / lgd

    return transform


def as_curve_node(item: Union[CurveNode, Tuple[ScalarLike, ScalarLike]]) -> CurveNode:
    if isinstance(item, CurveNode):
        return item
    maturity, quote = item
    return CurveNode(maturity, quote)


def bootstrap_piecewise_curve(
    nodes: Iterable[Union[CurveNode, Tuple[ScalarLike, ScalarLike]]],
    transform: Optional[QuoteTransform] = None,
) -> PiecewiseCurve:
    """
    Sequentially bootstrap piecewise-constant rates from (maturity, quote) nodes.

    Each quote is mapped to a flat-equivalent rate lambda_i (``transform``,
    identity by default). The interval rate over (t_{i-1}, t_i] is chosen so
    the cumulative integral at t_i equals lambda_i * t_i:

        rate_i = (lambda_i * t_i - cumulative_{i-1}) / (t_i - t_{i-1})

    Negative interval rates (inverted curves) are floored at zero; the
    shortfall is absorbed by later intervals rather than re-solved. Nodes are
    sorted by maturity first; a repeated maturity gives a zero-width interval
    whose rate is lambda_i (floored at zero like any other interval) and which
    leaves the cumulative integral unchanged.

    Returns
    -------
    PiecewiseCurve
    """
    ordered = sorted((as_curve_node(n) for n in nodes), key=lambda n: n.maturity)
    if not ordered:
        raise InsufficientDataError("At least one curve node is required.")

    if transform is None:
        transform = lambda quote: quote  # noqa: E731

    out = []
    prev_t = ZERO
    cumulative = ZERO
    prev_survival = ONE

    with kernel_context():
        for node in ordered:
            flat_rate = to_decimal(transform(node.quote), "flat_rate")
            dt = node.maturity - prev_t
            floored = False

            if dt.is_zero():
                rate = flat_rate
            else:
                rate = (flat_rate * node.maturity - cumulative) / dt
            if rate < ZERO:
                logger.debug(
                    "bootstrap interval rate floored at zero",
                    maturity=str(node.maturity),
                    raw_rate=str(rate),
                )
                rate = ZERO
                floored = True

            cumulative += rate * dt
            survival = exp(-cumulative)

            out.append(
                PiecewiseRate(
                    maturity=node.maturity,
                    flat_rate=flat_rate,
                    rate=rate,
                    cumulative=cumulative,
                    survival=survival,
                    conditional_probability=prev_survival - survival,
                    floored=floored,
                )
            )
            prev_t = node.maturity
            prev_survival = survival

    return PiecewiseCurve(tuple(out))


def curve_qc_report(curve: PiecewiseCurve) -> pd.DataFrame:
    """One row per node with the bootstrapped values and sanity flags."""
    survivals = [n.survival for n in curve]
    monotone = [True] + [b <= a for a, b in zip(survivals, survivals[1:])]

    return pd.DataFrame(
        {
            "maturity": [n.maturity for n in curve],
            "flat_rate": [n.flat_rate for n in curve],
            "rate": [n.rate for n in curve],
            "cumulative": [n.cumulative for n in curve],
            "survival": survivals,
            "cumulative_probability": [n.cumulative_probability for n in curve],
            "conditional_probability": [n.conditional_probability for n in curve],
            "floored": [n.floored for n in curve],
            "survival_positive": [s > ZERO for s in survivals],
            "survival_monotone": monotone,
            "rate_non_negative": [n.rate >= ZERO for n in curve],
        }
    )
