"""
IRR and NPV Calculations

Implements IRR by bisection over a fixed rate bracket. The bracket is never
widened: a series whose true IRR lies outside it converges to a bracket
edge, which solve_irr reports through IRRResult.bracketed.
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np

IRR_LOWER_BOUND = -0.99
IRR_UPPER_BOUND = 2.0
MAX_ITERATIONS = 100
DEFAULT_TOLERANCE = 1e-4
# How close to an edge a rate must settle to count as clamped
BOUND_EPSILON = 1e-9


@dataclass(frozen=True)
class IRRResult:
    """Outcome of the bisection search."""

    rate: float
    iterations: int
    converged: bool
    bracketed: bool


def calculate_npv(cash_flows: Sequence[float], discount_rate: float) -> float:
    """
    Calculate NPV (Net Present Value) of cash flows.

    Args:
        cash_flows: Periodic cash flows (negative = outflow, positive = inflow),
            the first one at period 0
        discount_rate: Discount rate per period as decimal

    Returns:
        NPV value
    """
    flows = np.asarray(cash_flows, dtype=float)
    periods = np.arange(flows.size)
    return float(np.sum(flows / (1 + discount_rate) ** periods))


def _at_bound(rate: float) -> bool:
    return min(rate - IRR_LOWER_BOUND, IRR_UPPER_BOUND - rate) <= BOUND_EPSILON


def solve_irr(
    cash_flows: Sequence[float], tolerance: float = DEFAULT_TOLERANCE
) -> IRRResult:
    """
    Find the periodic rate at which NPV is zero.

    Bisects [IRR_LOWER_BOUND, IRR_UPPER_BOUND] for at most MAX_ITERATIONS
    steps, stopping early once |NPV| < tolerance. A positive NPV means the
    rate is too low, so the lower bound moves up; otherwise the upper bound
    moves down.

    The result is bracketed when NPV changes sign across the bracket or the
    search settles away from both edges. Long series overflow at the lower
    edge (0.01 ** -i), so a NaN endpoint alone decides nothing.

    Fewer than two cash flows yield a rate of 0.
    """
    if len(cash_flows) < 2:
        return IRRResult(rate=0.0, iterations=0, converged=False, bracketed=False)

    low = IRR_LOWER_BOUND
    high = IRR_UPPER_BOUND

    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        sign_change = bool(
            calculate_npv(cash_flows, low) * calculate_npv(cash_flows, high) <= 0
        )

        for iteration in range(1, MAX_ITERATIONS + 1):
            mid = (low + high) / 2
            value = calculate_npv(cash_flows, mid)

            if abs(value) < tolerance:
                return IRRResult(
                    rate=mid,
                    iterations=iteration,
                    converged=True,
                    bracketed=sign_change or not _at_bound(mid),
                )

            if value > 0:
                low = mid
            else:
                high = mid

    rate = (low + high) / 2
    return IRRResult(
        rate=rate,
        iterations=MAX_ITERATIONS,
        converged=False,
        bracketed=sign_change or not _at_bound(rate),
    )


def calculate_irr(
    cash_flows: Sequence[float], tolerance: float = DEFAULT_TOLERANCE
) -> float:
    """
    Calculate IRR (Internal Rate of Return) per period.

    Args:
        cash_flows: Periodic cash flows, first entry usually the investment
        tolerance: Absolute NPV tolerance for early exit

    Returns:
        Periodic IRR as decimal (e.g., 0.10 for 10%); 0 for fewer than
        two cash flows
    """
    return solve_irr(cash_flows, tolerance).rate


def calculate_multiple(cash_flows: Sequence[float]) -> float:
    """
    Calculate investment multiple.

    Args:
        cash_flows: Cash flows (investments are negative)

    Returns:
        Multiple (e.g., 2.0 = 2.0x return); 0 when there is no outflow
    """
    total_inflows = sum(cf for cf in cash_flows if cf > 0)
    total_outflows = abs(sum(cf for cf in cash_flows if cf < 0))

    if total_outflows == 0:
        return 0.0

    return total_inflows / total_outflows


def calculate_profit(cash_flows: Sequence[float]) -> float:
    """Calculate profit (total inflows minus total outflows)."""
    return float(sum(cash_flows))


def periodic_to_annual_rate(rate: float, periods_per_year: int) -> float:
    """Compound a periodic rate up to an annual one."""
    return ((1 + rate) ** periods_per_year) - 1
