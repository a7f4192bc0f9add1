from __future__ import annotations

from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import pandas as pd

from .curves import CurveNode, QuoteTransform, bootstrap_piecewise_curve, as_curve_node
from .scalar import ScalarLike, kernel_context, to_decimal

BP = Decimal("0.0001")
DEFAULT_SHIFTS_BP = (-50, -25, 25, 50)


def shift_quotes_bp(
    nodes: Iterable[Union[CurveNode, Tuple[ScalarLike, ScalarLike]]],
    bp: ScalarLike,
) -> List[CurveNode]:
    """Parallel shift of every market quote by ``bp`` basis points."""
    bp = to_decimal(bp, "bp")
    with kernel_context():
        shift = bp * BP
        return [CurveNode(n.maturity, n.quote + shift) for n in map(as_curve_node, nodes)]


def _scenario_name(bp: Decimal) -> str:
    sign = "+" if bp >= 0 else "-"
    return f"PAR_{sign}{abs(bp)}bp"


def run_quote_scenarios(
    nodes: Sequence[Union[CurveNode, Tuple[ScalarLike, ScalarLike]]],
    transform: Optional[QuoteTransform] = None,
    shifts_bp: Sequence[ScalarLike] = DEFAULT_SHIFTS_BP,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Re-bootstrap the curve under parallel quote shifts.

    Returns (per_node, summary):
    - per_node: base survival per maturity, one survival column per scenario
      and its ``<name>_chg`` difference versus base
    - summary: survival change at the longest maturity per scenario
    """
    nodes = [as_curve_node(n) for n in nodes]
    base_curve = bootstrap_piecewise_curve(nodes, transform)

    per_node = pd.DataFrame(
        {
            "maturity": list(base_curve.maturities),
            "base": [n.survival for n in base_curve],
        }
    )

    names = []
    for bp in shifts_bp:
        name = _scenario_name(to_decimal(bp, "bp"))
        shocked = bootstrap_piecewise_curve(shift_quotes_bp(nodes, bp), transform)
        per_node[name] = [n.survival for n in shocked]
        with kernel_context():
            per_node[name + "_chg"] = [s - b for s, b in zip(per_node[name], per_node["base"])]
        names.append(name)

    summary = pd.DataFrame(
        {
            "scenario": names,
            "survival_change_at_last_maturity": [per_node[name + "_chg"].iloc[-1] for name in names],
        }
    )

    return per_node, summary
